"""Follow graph: follow/unfollow and follower counts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from myscience.db.models import Follow, User
from myscience.errors import UserNotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass(frozen=True)
class FollowStats:
    followers_count: int
    following_count: int


async def get_follow_stats(db: AsyncSession, user_id: str) -> FollowStats:
    """Count who follows ``user_id`` and whom ``user_id`` follows."""
    followers = await db.execute(
        select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
    )
    following = await db.execute(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    return FollowStats(
        followers_count=followers.scalar_one(),
        following_count=following.scalar_one(),
    )


async def follow_user(db: AsyncSession, follower_id: str, following_id: str) -> bool:
    """Create a follow edge. Returns False if it already existed.

    Raises:
        ValueError: If a user tries to follow themselves.
        UserNotFoundError: If the target user does not exist.
    """
    if follower_id == following_id:
        msg = "Users cannot follow themselves"
        raise ValueError(msg)

    target = await db.execute(select(User.id).where(User.id == following_id))
    if target.scalar_one_or_none() is None:
        raise UserNotFoundError(following_id)

    db.add(Follow(follower_id=follower_id, following_id=following_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return False

    logger.info("user_followed", follower_id=follower_id, following_id=following_id)
    return True


async def unfollow_user(db: AsyncSession, follower_id: str, following_id: str) -> bool:
    """Remove a follow edge. Returns True if one was removed."""
    result = await db.execute(
        delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )
    await db.commit()
    removed = result.rowcount > 0
    if removed:
        logger.info("user_unfollowed", follower_id=follower_id, following_id=following_id)
    return removed
