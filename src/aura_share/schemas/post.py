# src/aura_share/schemas/post.py
"""Post, comment and event schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from aura_share.schemas.lists import ListSummary, PrivacyLevel
from aura_share.schemas.user import UserSummary


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    primary_link: str = Field(..., min_length=1, max_length=2000)
    primary_description: str = Field(..., min_length=1, max_length=5000)
    privacy: PrivacyLevel | None = Field(None, description="Defaults to the author's preference")
    list_id: int | None = Field(None, description="Defaults to the author's General list")
    primary_photo_url: str | None = None
    link_label: str | None = None
    discount_code: str | None = None
    additional_photos: list[str] | None = None
    spotify_url: str | None = None
    youtube_url: str | None = None
    is_event: bool = False
    event_date: datetime | None = None
    reminders: list[str] | None = None
    is_recurring: bool = False
    recurring_type: str | None = None
    task_list: list[dict[str, Any]] | None = None
    allow_rsvp: bool = False
    hashtags: list[str] = Field(default_factory=list)
    tagged_user_ids: list[int] = Field(default_factory=list)


class PostUpdate(BaseModel):
    """Partial update; only fields present in the request are changed."""

    primary_link: str | None = Field(None, min_length=1, max_length=2000)
    primary_description: str | None = Field(None, min_length=1, max_length=5000)
    privacy: PrivacyLevel | None = None
    primary_photo_url: str | None = None
    link_label: str | None = None
    discount_code: str | None = None
    additional_photos: list[str] | None = None
    spotify_url: str | None = None
    youtube_url: str | None = None
    is_event: bool | None = None
    event_date: datetime | None = None
    reminders: list[str] | None = None
    is_recurring: bool | None = None
    recurring_type: str | None = None
    task_list: list[dict[str, Any]] | None = None
    allow_rsvp: bool | None = None


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int
    list_id: int
    primary_link: str
    primary_description: str
    privacy: str
    primary_photo_url: str | None = None
    link_label: str | None = None
    discount_code: str | None = None
    additional_photos: list[str] | None = None
    spotify_url: str | None = None
    youtube_url: str | None = None
    is_event: bool
    event_date: datetime | None = None
    reminders: list[str] | None = None
    is_recurring: bool
    recurring_type: str | None = None
    task_list: list[dict[str, Any]] | None = None
    allow_rsvp: bool
    created_at: datetime
    author: UserSummary
    post_list: ListSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class PostStatsResponse(BaseModel):
    like_count: int
    share_count: int
    view_count: int
    save_count: int
    repost_count: int
    comment_count: int


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    parent_id: int | None = None
    image_url: str | None = None


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    parent_id: int | None = None
    text: str
    image_url: str | None = None
    created_at: datetime
    author: UserSummary

    model_config = ConfigDict(from_attributes=True)


class TagRequest(BaseModel):
    user_ids: list[int] = Field(..., min_length=1)


class TagResponse(BaseModel):
    success: bool = True
    tagged_user_ids: list[int]


RsvpStatus = Literal["going", "maybe", "not_going"]


class RsvpRequest(BaseModel):
    status: RsvpStatus


class RsvpResponse(BaseModel):
    post_id: int
    user_id: int
    status: str
    updated_at: datetime | None = None
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class RsvpStatsResponse(BaseModel):
    going: int
    maybe: int
    not_going: int


class TaskToggleResponse(BaseModel):
    success: bool = True
    task_list: list[dict[str, Any]]


class TaskAssignmentResponse(BaseModel):
    task_id: str
    user_id: int
    user_name: str


class FlagRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=200)
    comment: str | None = Field(None, max_length=1000)


class FlagResponse(BaseModel):
    success: bool = True
    was_deleted: bool
    flag_count: int


class PostFlagResponse(BaseModel):
    post_id: int
    user_id: int
    reason: str
    comment: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
