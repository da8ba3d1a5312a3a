# src/aura_share/schemas/user.py
"""User and authentication schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Payload for creating an account."""

    username: str = Field(..., min_length=3, max_length=20, pattern=r"^[A-Za-z0-9]+$")
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=50)


class SigninRequest(BaseModel):
    username: str
    password: str


class UserSummary(BaseModel):
    """Public fields of a user embedded in other responses."""

    id: int
    username: str
    name: str
    profile_picture_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """Full profile returned for a single user."""

    default_privacy: str
    aura_rating: float
    rating_count: int
    created_at: datetime


class AuthResponse(BaseModel):
    """Token issued at sign-up and sign-in."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    profile_picture_url: str | None = None


class PrivacyUpdateRequest(BaseModel):
    default_privacy: Literal["public", "connections"]


class EnergyRatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=7)


class EnergyRatingResponse(BaseModel):
    rating: int | None


class EnergyStatsResponse(BaseModel):
    average: float
    count: int
