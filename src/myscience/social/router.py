"""Follow endpoints. Following another researcher is a gamified action."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from myscience.auth.dependencies import get_current_user
from myscience.database import get_session
from myscience.db.models import User
from myscience.dependencies import get_event_publisher
from myscience.gamification.action_service import record_gamified_action
from myscience.gamification.catalog import GamificationActionType
from myscience.social.schemas import FollowResponse, FollowStatsResponse
from myscience.social.service import follow_user, get_follow_stats, unfollow_user
from myscience.users.service import get_user_by_id

router = APIRouter(prefix="/api/users", tags=["Social"])


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def follow(
    user_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: Redis | None = Depends(get_event_publisher),
):
    """Follow a user. Only a new follow edge is rewarded."""
    follower_id = user.id
    try:
        created = await follow_user(db, follower_id, user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not created:
        return FollowResponse(following=True)

    gamification = await record_gamified_action(db, redis, follower_id, GamificationActionType.FOLLOW_USER)
    return FollowResponse(following=True, gamification=gamification)


@router.delete("/{user_id}/follow", response_model=FollowResponse)
async def unfollow(
    user_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Unfollow a user. XP already earned is kept."""
    await unfollow_user(db, user.id, user_id)
    return FollowResponse(following=False)


@router.get("/{user_id}/follow-stats", response_model=FollowStatsResponse)
async def follow_stats(user_id: str, db: AsyncSession = Depends(get_session)):
    """Follower and following counts for a user."""
    if await get_user_by_id(db, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    stats = await get_follow_stats(db, user_id)
    return FollowStatsResponse(
        user_id=user_id,
        followers_count=stats.followers_count,
        following_count=stats.following_count,
    )
