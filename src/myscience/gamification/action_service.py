"""Action recorder: the entry point route handlers call for gamified actions.

Flow for one call:
1. Upsert-increment today's (UTC) counter for (user, action).
2. Past the daily cap: no XP, no badge, return unchanged progress.
3. Otherwise grant base XP, then award the action's badge (if any).
4. Settle level-gated badges (e.g. "Immortal" at level 30) until nothing
   is pending, and report a single level-up against the starting level.

Every step commits on its own. Readers may briefly observe base XP applied
before badge XP; that is accepted.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from datetime import date, datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from myscience.db.models import DailyActionCount
from myscience.db.upsert import upsert_insert
from myscience.errors import UnknownActionError
from myscience.gamification.badge_service import award_badge_by_trigger
from myscience.gamification.catalog import (
    ACTION_DEFINITIONS,
    LEVEL_BADGE_TRIGGERS,
    BadgeTrigger,
    GamificationActionType,
)
from myscience.gamification.events import publish_gamification_update
from myscience.gamification.levels import get_level_info, get_level_progress
from myscience.gamification.schemas import BadgeAward, GamificationUpdate, LevelUp
from myscience.gamification.xp_service import add_xp_to_user, get_xp_state

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


async def increment_daily_action_count(
    db: AsyncSession,
    user_id: str,
    action_type: GamificationActionType,
    action_date: date,
) -> int:
    """Atomically bump the (user, action, day) counter and return the new count."""
    now = datetime.now(timezone.utc)
    stmt = upsert_insert(db, DailyActionCount).values(
        user_id=user_id,
        action_type=action_type.value,
        action_date=action_date,
        count=1,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "action_type", "action_date"],
        set_={
            "count": DailyActionCount.count + 1,
            "updated_at": now,
        },
    ).returning(DailyActionCount.count)

    result = await db.execute(stmt)
    count = result.scalar_one()
    await db.commit()
    return count


def _build_level_up(old_level: int, new_level: int) -> LevelUp:
    info = get_level_info(new_level)
    return LevelUp(
        old_level=old_level,
        new_level=new_level,
        symbol=info.symbol,
        label=info.label,
        tagline=info.tagline,
    )


async def _settle(
    db: AsyncSession,
    user_id: str,
    old_level: int,
    triggers: Iterable[BadgeTrigger],
) -> GamificationUpdate:
    """Award pending badges until the user's level stops unlocking new ones."""
    new_badges: list[BadgeAward] = []
    pending = deque(triggers)
    attempted: set[BadgeTrigger] = set()

    while True:
        while pending:
            trigger = pending.popleft()
            attempted.add(trigger)
            award = await award_badge_by_trigger(db, user_id, trigger)
            if award is not None:
                new_badges.append(award)

        total_xp, current_level = await get_xp_state(db, user_id)
        if current_level <= old_level:
            break

        unlocked = [
            trigger
            for threshold, trigger in LEVEL_BADGE_TRIGGERS.items()
            if current_level >= threshold and trigger not in attempted
        ]
        if not unlocked:
            break
        pending.extend(unlocked)

    level_up = _build_level_up(old_level, current_level) if current_level > old_level else None
    return GamificationUpdate(
        new_badges=new_badges,
        level_up=level_up,
        total_xp=total_xp,
        current_level=current_level,
    )


async def record_gamified_action(
    db: AsyncSession,
    redis: object,
    user_id: str,
    action_type: GamificationActionType | str,
) -> GamificationUpdate:
    """Record a gamified action and apply its XP/badge effects.

    Raises:
        UnknownActionError: ``action_type`` has no definition.
        UserNotFoundError: the user does not exist.
    """
    try:
        action = GamificationActionType(action_type)
        definition = ACTION_DEFINITIONS[action]
    except (ValueError, KeyError) as exc:
        raise UnknownActionError(action_type) from exc

    await get_xp_state(db, user_id)  # raises UserNotFoundError before touching counters

    count = await increment_daily_action_count(db, user_id, action, utc_today())
    if count > definition.daily_cap:
        # Soft cap: the counter keeps growing, the reward does not.
        logger.debug("Daily cap reached for %s (%s, count=%d)", user_id, action.value, count)
        total_xp, current_level = await get_xp_state(db, user_id)
        return GamificationUpdate(total_xp=total_xp, current_level=current_level)

    old_level = await add_xp_to_user(db, user_id, definition.base_xp)

    triggers = [definition.badge_trigger] if definition.badge_trigger is not None else []
    update = await _settle(db, user_id, old_level, triggers)

    await publish_gamification_update(redis, user_id, update)
    return update


async def check_and_award_badges(
    db: AsyncSession,
    redis: object,
    user_id: str,
    triggers: Iterable[BadgeTrigger | str],
) -> GamificationUpdate:
    """Try several badge triggers at once (e.g. profile completion checks)."""
    _, old_level = await get_xp_state(db, user_id)

    update = await _settle(db, user_id, old_level, [BadgeTrigger(t) for t in triggers])

    await publish_gamification_update(redis, user_id, update)
    return update


async def get_user_progress(db: AsyncSession, user_id: str) -> dict:
    """Current level, XP, level info and progress toward the next level."""
    total_xp, level = await get_xp_state(db, user_id)
    return {
        "current_level": level,
        "total_xp": total_xp,
        "level_info": get_level_info(level),
        "progress": get_level_progress(total_xp, level),
    }
