"""Pydantic response models for follow endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from myscience.gamification.schemas import GamificationUpdate


class FollowResponse(BaseModel):
    following: bool
    gamification: GamificationUpdate | None = None


class FollowStatsResponse(BaseModel):
    user_id: str
    followers_count: int
    following_count: int
