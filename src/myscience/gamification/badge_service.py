"""Badge award service with duplicate prevention.

A badge is awarded at most once per user. The UNIQUE(user_id, badge_id)
constraint on user_badges is what enforces that under concurrent requests;
there is no "check, then insert" read in front of the insert.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from myscience.db.models import BadgeDefinition, UserBadge
from myscience.gamification.catalog import BadgeTrigger
from myscience.gamification.schemas import BadgeAward
from myscience.gamification.xp_service import add_xp_to_user, get_xp_state
from myscience.social.service import get_follow_stats

logger = logging.getLogger(__name__)

FOLLOWING_THRESHOLD = 5
FOLLOWERS_THRESHOLD = 1000

EligibilityCheck = Callable[[AsyncSession, str], Awaitable[bool]]


async def _follows_enough_users(db: AsyncSession, user_id: str) -> bool:
    stats = await get_follow_stats(db, user_id)
    return stats.following_count >= FOLLOWING_THRESHOLD


async def _has_enough_followers(db: AsyncSession, user_id: str) -> bool:
    stats = await get_follow_stats(db, user_id)
    return stats.followers_count >= FOLLOWERS_THRESHOLD


# Triggers that need more than "the caller says it happened".
ELIGIBILITY_CHECKS: dict[BadgeTrigger, EligibilityCheck] = {
    BadgeTrigger.FOLLOW_5_USERS: _follows_enough_users,
    BadgeTrigger.REACH_1000_FOLLOWERS: _has_enough_followers,
}


async def get_badge_by_trigger(db: AsyncSession, trigger: BadgeTrigger | str) -> BadgeDefinition | None:
    """Fetch a badge definition by trigger."""
    result = await db.execute(
        select(BadgeDefinition).where(BadgeDefinition.trigger == BadgeTrigger(trigger).value).limit(1)
    )
    return result.scalar_one_or_none()


async def has_badge(db: AsyncSession, user_id: str, badge_id: str) -> bool:
    """Check if user already has a specific badge."""
    result = await db.execute(
        select(UserBadge.id).where(
            UserBadge.user_id == user_id,
            UserBadge.badge_id == badge_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def award_badge_by_trigger(
    db: AsyncSession,
    user_id: str,
    trigger: BadgeTrigger | str,
) -> BadgeAward | None:
    """Award the badge for ``trigger`` to a user.

    Returns the award on the first grant, None if the user already holds it,
    the trigger's eligibility check fails, or no badge is configured for it.
    Raises UserNotFoundError for an unknown user without writing anything.
    On first grant the badge's points are added through the XP ledger.
    """
    trigger = BadgeTrigger(trigger)
    await get_xp_state(db, user_id)  # raises UserNotFoundError before any insert
    badge = await get_badge_by_trigger(db, trigger)
    if badge is None:
        logger.warning("No badge found for trigger: %s", trigger.value)
        return None

    check = ELIGIBILITY_CHECKS.get(trigger)
    if check is not None and not await check(db, user_id):
        return None

    # Snapshot the row: a rollback below expires every instance in the session.
    award = BadgeAward(
        badge_id=badge.id,
        badge_name=badge.name,
        message=badge.message,
        points=badge.points,
        tier=badge.tier,
    )

    db.add(UserBadge(user_id=user_id, badge_id=award.badge_id, earned_at=datetime.now(timezone.utc)))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await has_badge(db, user_id, award.badge_id):
            return None  # Already awarded (possibly by a concurrent request)
        raise

    await add_xp_to_user(db, user_id, award.points)

    logger.info('Awarded badge "%s" to user %s (+%d XP)', award.badge_name, user_id, award.points)
    return award


async def get_user_badges(db: AsyncSession, user_id: str) -> list[dict]:
    """Badges earned by a user, newest first."""
    result = await db.execute(
        select(UserBadge, BadgeDefinition)
        .join(BadgeDefinition, UserBadge.badge_id == BadgeDefinition.id)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc())
    )
    return [
        {
            "id": row.UserBadge.id,
            "badge_id": row.BadgeDefinition.id,
            "name": row.BadgeDefinition.name,
            "message": row.BadgeDefinition.message,
            "points": row.BadgeDefinition.points,
            "tier": row.BadgeDefinition.tier,
            "earned_at": row.UserBadge.earned_at,
        }
        for row in result
    ]


async def get_all_badges(db: AsyncSession) -> list[BadgeDefinition]:
    """Every badge in the catalog, ordered by name."""
    result = await db.execute(select(BadgeDefinition).order_by(BadgeDefinition.name))
    return list(result.scalars().all())
