"""Pydantic models for gamification results and endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


# --- Engine results ---


class BadgeAward(BaseModel):
    badge_id: str
    badge_name: str
    message: str
    points: int
    tier: str


class LevelUp(BaseModel):
    old_level: int
    new_level: int
    symbol: str
    label: str
    tagline: str


class GamificationUpdate(BaseModel):
    """What a gamified call changed, fully settled."""

    new_badges: list[BadgeAward] = []
    level_up: LevelUp | None = None
    total_xp: int
    current_level: int


# --- Levels ---


class LevelInfoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    level: int
    symbol: str
    label: str
    tagline: str
    xp_required: int


class AllLevelsResponse(BaseModel):
    levels: list[LevelInfoResponse]


class LevelProgressResponse(BaseModel):
    current_level_xp: int
    next_level_xp: int
    progress: float


class ProgressResponse(BaseModel):
    current_level: int
    total_xp: int
    level_info: LevelInfoResponse
    progress: LevelProgressResponse


# --- Badges ---


class BadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    trigger: str
    points: int
    message: str
    tier: str


class AllBadgesResponse(BaseModel):
    badges: list[BadgeResponse]


class EarnedBadgeResponse(BaseModel):
    id: str
    badge_id: str
    name: str
    message: str
    points: int
    tier: str
    earned_at: datetime | None = None


class UserBadgesResponse(BaseModel):
    earned: list[EarnedBadgeResponse]
    total_earned: int
