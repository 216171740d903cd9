"""Pydantic request/response models for user endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from myscience.gamification.schemas import GamificationUpdate

ORCID_PATTERN = r"^\d{4}-\d{4}-\d{4}-\d{3}[\dX]$"


class UserProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    orcid: str | None = None
    bio: str | None = None
    subject_areas: list[str] | None = None
    total_xp: int
    level: int
    created_at: datetime | None = None


class ProfileUpdateRequest(BaseModel):
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    profile_image_url: str | None = None
    orcid: str | None = Field(default=None, pattern=ORCID_PATTERN)
    bio: str | None = Field(default=None, max_length=2000)
    subject_areas: list[str] | None = Field(default=None, max_length=20)


class ProfileUpdateResponse(BaseModel):
    user: UserProfileResponse
    gamification: GamificationUpdate
