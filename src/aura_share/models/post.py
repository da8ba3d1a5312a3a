# src/aura_share/models/post.py
"""SQLAlchemy models for posts and comments."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aura_share.db.session import Base
from aura_share.db.time import utcnow
from aura_share.models.lists import PRIVACY_PUBLIC, PostList
from aura_share.models.user import User


class Post(Base):
    """A shared link with its media, privacy and optional event details.

    Every post belongs to one author and one list. Its effective visibility is
    the stricter of ``privacy`` and the list's ``privacy_level``.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_user_id", "user_id"),
        Index("ix_posts_list_id", "list_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    list_id: Mapped[int] = mapped_column(Integer, ForeignKey("lists.id"), nullable=False)

    primary_photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_link: Mapped[str] = mapped_column(Text, nullable=False)
    link_label: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_description: Mapped[str] = mapped_column(Text, nullable=False)
    privacy: Mapped[str] = mapped_column(Text, nullable=False, default=PRIVACY_PUBLIC)
    discount_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_photos: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    spotify_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    youtube_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Event metadata
    is_event: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    event_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reminders: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    task_list: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    allow_rsvp: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Set by flag threshold or an admin; removed posts are excluded from every listing.
    removed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship("User")
    post_list: Mapped[PostList] = relationship("PostList")


class Comment(Base):
    """Threaded comment on a post."""

    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_post_id", "post_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    # Replies point at the comment they answer; top-level comments have no parent.
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship("User")
