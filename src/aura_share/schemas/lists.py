# src/aura_share/schemas/lists.py
"""List, access grant and access request schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from aura_share.schemas.user import UserSummary

PrivacyLevel = Literal["public", "connections", "private"]
GrantRole = Literal["collaborator", "viewer"]


class ListCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    privacy_level: PrivacyLevel = "public"


class ListSummary(BaseModel):
    id: int
    name: str
    privacy_level: str

    model_config = ConfigDict(from_attributes=True)


class ListResponse(ListSummary):
    user_id: int
    description: str | None = None
    is_default: bool
    created_at: datetime


class ListPrivacyUpdate(BaseModel):
    privacy_level: PrivacyLevel


class InviteRequest(BaseModel):
    user_id: int
    role: GrantRole = "collaborator"


class RespondRequest(BaseModel):
    action: Literal["accept", "reject"]


class ListAccessResponse(BaseModel):
    id: int
    list_id: int
    user_id: int
    role: str
    status: str
    invited_by: int | None = None
    created_at: datetime
    user: UserSummary | None = None
    post_list: ListSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class RoleResponse(BaseModel):
    has_access: bool
    role: str | None = None


class AccessRequestCreate(BaseModel):
    requested_role: GrantRole = "viewer"
    message: str | None = Field(None, max_length=500)


class AccessRequestResponse(BaseModel):
    id: int
    list_id: int
    user_id: int
    requested_role: str
    message: str | None = None
    created_at: datetime
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class AccessRequestDecision(BaseModel):
    action: Literal["approve", "reject"]


class DeleteListResponse(BaseModel):
    success: bool = True
    moved_posts: int
