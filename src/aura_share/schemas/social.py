# src/aura_share/schemas/social.py
"""Friend request, hashtag and notification schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from aura_share.schemas.user import UserSummary


class FriendRequestCreate(BaseModel):
    to_user_id: int


class FriendRequestDecision(BaseModel):
    action: Literal["accept", "reject"]


class FriendRequestResponse(BaseModel):
    id: int
    from_user_id: int
    to_user_id: int
    status: str
    created_at: datetime
    from_user: UserSummary | None = None
    to_user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class FriendRequestResult(BaseModel):
    """Outcome of sending a request; ``connected`` when it auto-accepted."""

    success: bool = True
    connected: bool
    request_id: int | None = None


class HashtagResponse(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class TrendingHashtag(HashtagResponse):
    post_count: int


class NotificationResponse(BaseModel):
    id: int
    type: str
    from_user_id: int | None = None
    post_id: int | None = None
    list_id: int | None = None
    viewed: bool
    created_at: datetime
    from_user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    count: int
