# src/aura_share/schemas/admin.py
"""Schemas for the admin API."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from aura_share.schemas.post import PostResponse

AdminRole = Literal["super_admin", "moderator", "content_admin"]
Priority = Literal["low", "medium", "high", "urgent"]


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class AdminResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str
    permissions: list[str]
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminLoginResponse(BaseModel):
    session_token: str
    expires_at: datetime
    admin: AdminResponse


class AdminCreateRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=8)
    email: str = Field(..., min_length=3, max_length=200)
    role: AdminRole = "moderator"
    permissions: list[str] = Field(default_factory=list)


class AdminUpdateRequest(BaseModel):
    role: AdminRole | None = None
    permissions: list[str] | None = None
    is_active: bool | None = None


class ReasonRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class BanRequest(ReasonRequest):
    expires_at: datetime | None = None


class ModerationActionResponse(BaseModel):
    id: int
    moderator_id: int
    content_type: str
    content_id: int
    action: str
    reason: str
    notes: str | None = None
    status: str
    expires_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewItemCreate(BaseModel):
    content_type: Literal["post", "comment", "user"]
    content_id: int
    reason: str = Field(..., min_length=1, max_length=500)
    priority: Priority = "medium"


class ReviewItemResponse(BaseModel):
    id: int
    content_type: str
    content_id: int
    priority: str
    reason: str
    flag_count: int
    status: str
    assigned_to: int | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewDecision(ReasonRequest):
    action: Literal["approve", "remove", "warn", "escalate"]


class FlaggedPostResponse(BaseModel):
    post: PostResponse
    flag_count: int
    removed: bool


class AuditLogResponse(BaseModel):
    id: int
    admin_id: int | None = None
    action: str
    target: str
    target_id: int | None = None
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SystemConfigResponse(BaseModel):
    key: str
    value: str
    type: str
    description: str | None = None
    category: str
    updated_by: int | None = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SystemConfigUpdate(BaseModel):
    value: str
    type: str = "string"
    category: str = "features"
    description: str | None = None


class DailyCount(BaseModel):
    date: str
    count: int


class ModerationDailyCount(BaseModel):
    date: str
    action_type: str
    actions: int


class UserMetricsResponse(BaseModel):
    id: int
    username: str
    name: str
    aura_rating: float
    posts: int
    likes: int
    shares: int
    tags: int
    friends: int
    amplifier: float
    cosmic_score: int
    is_banned: bool = False
