"""Gamification API endpoints: thin passthroughs to the engine."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from myscience.auth.dependencies import get_current_user
from myscience.database import get_session
from myscience.db.models import User
from myscience.gamification.action_service import get_user_progress
from myscience.gamification.badge_service import get_all_badges, get_user_badges
from myscience.gamification.levels import LEVEL_DATA
from myscience.gamification.schemas import (
    AllBadgesResponse,
    AllLevelsResponse,
    BadgeResponse,
    EarnedBadgeResponse,
    LevelInfoResponse,
    LevelProgressResponse,
    ProgressResponse,
    UserBadgesResponse,
)

router = APIRouter(prefix="/api/gamification", tags=["Gamification"])


# ── Public endpoints ──


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges(db: AsyncSession = Depends(get_session)):
    """Get all badge definitions."""
    badges = await get_all_badges(db)
    return AllBadgesResponse(badges=[BadgeResponse.model_validate(b) for b in badges])


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Get all level definitions."""
    return AllLevelsResponse(levels=[LevelInfoResponse.model_validate(info) for info in LEVEL_DATA])


# ── Authenticated endpoints ──


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Get current user's level, XP and progress toward the next level."""
    progress = await get_user_progress(db, user.id)
    return ProgressResponse(
        current_level=progress["current_level"],
        total_xp=progress["total_xp"],
        level_info=LevelInfoResponse.model_validate(progress["level_info"]),
        progress=LevelProgressResponse(**progress["progress"]),
    )


@router.get("/user-badges", response_model=UserBadgesResponse)
async def get_my_badges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Get current user's earned badges, newest first."""
    earned = await get_user_badges(db, user.id)
    return UserBadgesResponse(
        earned=[EarnedBadgeResponse(**row) for row in earned],
        total_earned=len(earned),
    )
