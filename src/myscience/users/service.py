"""User management business logic."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from myscience.db.models import User
from myscience.gamification.action_service import check_and_award_badges
from myscience.gamification.catalog import BadgeTrigger
from myscience.gamification.schemas import GamificationUpdate

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Fetch a user by primary key, refreshing any cached instance."""
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def is_profile_complete(user: User) -> bool:
    """Name, bio and at least one subject area make a discoverable profile."""
    return bool(user.first_name and user.last_name and user.bio and user.subject_areas)


async def create_user(
    db: AsyncSession,
    redis: object,
    email: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> tuple[User, GamificationUpdate]:
    """Create a user and grant the welcome badge.

    Called from the MyScience auth service's registration flow; this
    service has no sign-up route of its own.
    """
    user = User(email=email, first_name=first_name, last_name=last_name, total_xp=0, level=0)
    db.add(user)
    await db.commit()
    user_id = user.id
    logger.info("user_created", user_id=user_id)

    update = await check_and_award_badges(db, redis, user_id, [BadgeTrigger.CREATE_ACCOUNT])
    refreshed = await get_user_by_id(db, user_id)
    return refreshed or user, update


async def update_profile(
    db: AsyncSession,
    redis: object,
    user: User,
    first_name: str | None = None,
    last_name: str | None = None,
    profile_image_url: str | None = None,
    orcid: str | None = None,
    bio: str | None = None,
    subject_areas: list[str] | None = None,
) -> tuple[User, GamificationUpdate]:
    """
    Update user profile fields, then check the profile badges.

    Connecting an ORCID iD earns "Identity Verified"; a complete profile
    earns "Profile Complete". Both are idempotent, so re-saving is harmless.
    """
    if first_name is not None:
        user.first_name = first_name
    if last_name is not None:
        user.last_name = last_name
    if profile_image_url is not None:
        user.profile_image_url = profile_image_url
    if orcid is not None:
        user.orcid = orcid
    if bio is not None:
        user.bio = bio
    if subject_areas is not None:
        user.subject_areas = subject_areas
    user.updated_at = datetime.now(timezone.utc)

    triggers: list[BadgeTrigger] = []
    if user.orcid:
        triggers.append(BadgeTrigger.CONNECT_ORCID)
    if is_profile_complete(user):
        triggers.append(BadgeTrigger.COMPLETE_PROFILE)

    user_id = user.id
    await db.commit()
    logger.info("profile_updated", user_id=user_id, badge_checks=[t.value for t in triggers])

    update = await check_and_award_badges(db, redis, user_id, triggers)
    refreshed = await get_user_by_id(db, user_id)
    return refreshed or user, update
