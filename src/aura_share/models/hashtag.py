# src/aura_share/models/hashtag.py
"""Hashtags, their attachment to posts, and user follows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from aura_share.db.session import Base
from aura_share.db.time import utcnow


class Hashtag(Base):
    """Normalised hashtag name (lower case, no leading ``#``)."""

    __tablename__ = "hashtags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class PostHashtag(Base):
    """Join table mapping posts to hashtags."""

    __tablename__ = "post_hashtags"

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    hashtag_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("hashtags.id", ondelete="CASCADE"), primary_key=True
    )


class HashtagFollow(Base):
    """A user following a hashtag."""

    __tablename__ = "hashtag_follows"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), primary_key=True)
    hashtag_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("hashtags.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
