# src/aura_share/models/engagement.py
"""Models capturing per-user engagement with posts and profiles.

Each table is keyed by (subject, actor) so the same user can like, share,
view, save or repost a post at most once.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column

from aura_share.db.session import Base
from aura_share.db.time import utcnow


class _PostActorMixin:
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class PostLike(_PostActorMixin, Base):
    """A user liking a post."""

    __tablename__ = "post_likes"
    __table_args__ = (Index("ix_post_likes_user_id", "user_id"),)


class PostShare(_PostActorMixin, Base):
    """A user sharing a post."""

    __tablename__ = "post_shares"


class PostView(_PostActorMixin, Base):
    """First view of a post by a signed-in user."""

    __tablename__ = "post_views"


class PostSave(_PostActorMixin, Base):
    """A post bookmarked by a user."""

    __tablename__ = "post_saves"


class Repost(_PostActorMixin, Base):
    """A post re-shared onto the reposting user's profile."""

    __tablename__ = "reposts"


class PostEnergyRating(_PostActorMixin, Base):
    """Energy rating of a post on the 1..7 scale; updated in place."""

    __tablename__ = "post_energy_ratings"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 7", name="ck_post_energy_rating_range"),
    )

    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)


class ProfileEnergyRating(Base):
    """Energy rating one user gives another user's profile."""

    __tablename__ = "profile_energy_ratings"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 7", name="ck_profile_energy_rating_range"),
        CheckConstraint("profile_id <> user_id", name="ck_profile_energy_not_self"),
    )

    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
