"""XP ledger: apply XP deltas to a user and keep the level in sync."""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from myscience.config import get_settings
from myscience.db.models import User
from myscience.errors import UserNotFoundError, XPUpdateConflictError
from myscience.gamification.levels import calculate_level

logger = logging.getLogger(__name__)


async def get_xp_state(db: AsyncSession, user_id: str) -> tuple[int, int]:
    """Return the committed ``(total_xp, level)`` for a user.

    Reads columns rather than the ORM object so a stale identity map never
    leaks into level-up detection.
    """
    result = await db.execute(select(User.total_xp, User.level).where(User.id == user_id))
    row = result.one_or_none()
    if row is None:
        raise UserNotFoundError(user_id)
    return row.total_xp, row.level


async def add_xp_to_user(db: AsyncSession, user_id: str, xp_to_add: int) -> int:
    """Add XP to a user and recompute their level. Returns the level BEFORE the update.

    The write is a compare-and-swap on ``total_xp``: if another request
    changed the row between our read and write, re-read and try again.
    Negative deltas are not part of the XP model and are rejected.
    """
    if xp_to_add < 0:
        msg = f"XP delta must be non-negative, got {xp_to_add}"
        raise ValueError(msg)

    attempts = get_settings().xp_update_max_attempts
    for _ in range(attempts):
        total_xp, old_level = await get_xp_state(db, user_id)
        new_total_xp = total_xp + xp_to_add
        new_level = calculate_level(new_total_xp)

        result = await db.execute(
            update(User)
            .where(User.id == user_id, User.total_xp == total_xp)
            .values(total_xp=new_total_xp, level=new_level)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            await db.commit()
            if new_level > old_level:
                logger.info("User %s leveled up %d -> %d", user_id, old_level, new_level)
            return old_level

        # Lost the race; end this transaction so the retry reads fresh data.
        await db.rollback()

    raise XPUpdateConflictError(user_id, attempts)
