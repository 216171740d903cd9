"""User profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from myscience.auth.dependencies import get_current_user
from myscience.database import get_session
from myscience.db.models import User
from myscience.dependencies import get_event_publisher
from myscience.users.schemas import ProfileUpdateRequest, ProfileUpdateResponse, UserProfileResponse
from myscience.users.service import update_profile

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=UserProfileResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get the authenticated user's profile."""
    return UserProfileResponse.model_validate(user)


@router.patch("/me", response_model=ProfileUpdateResponse)
async def patch_me(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: Redis | None = Depends(get_event_publisher),
):
    """Update the profile; returns any badges and level-up it earned."""
    updated, gamification = await update_profile(
        db,
        redis,
        user,
        **body.model_dump(exclude_unset=True),
    )
    return ProfileUpdateResponse(
        user=UserProfileResponse.model_validate(updated),
        gamification=gamification,
    )
