# src/aura_share/models/social.py
"""Friend requests, friendships and post tags."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aura_share.db.session import Base
from aura_share.db.time import utcnow
from aura_share.models.user import User

FRIEND_REQUEST_PENDING = "pending"


class FriendRequest(Base):
    """Directed request; deleted once the recipient answers."""

    __tablename__ = "friend_requests"
    __table_args__ = (
        UniqueConstraint("from_user_id", "to_user_id", name="uq_friend_request_pair"),
        CheckConstraint("from_user_id <> to_user_id", name="ck_friend_request_not_self"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    to_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=FRIEND_REQUEST_PENDING)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    from_user: Mapped[User] = relationship("User", foreign_keys=[from_user_id])
    to_user: Mapped[User] = relationship("User", foreign_keys=[to_user_id])


class Friendship(Base):
    """Undirected friendship edge stored once as (lower id, higher id)."""

    __tablename__ = "friendships"
    __table_args__ = (
        CheckConstraint("user_low_id < user_high_id", name="ck_friendship_canonical"),
        Index("ix_friendships_user_high_id", "user_high_id"),
    )

    user_low_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), primary_key=True)
    user_high_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @staticmethod
    def canonical(a: int, b: int) -> tuple[int, int]:
        """Return the storage key for the pair ``a``, ``b``."""
        return (a, b) if a < b else (b, a)

    def other(self, user_id: int) -> int:
        """Return the id on the opposite end of the edge from ``user_id``."""
        return self.user_high_id if self.user_low_id == user_id else self.user_low_id


class TaggedPost(Base):
    """A post shared with a specific user by tagging them."""

    __tablename__ = "tagged_posts"
    __table_args__ = (Index("ix_tagged_posts_to_user_id", "to_user_id"),)

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    to_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), primary_key=True)
    from_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    viewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
