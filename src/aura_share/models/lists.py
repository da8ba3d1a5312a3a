# src/aura_share/models/lists.py
"""Models for post lists and the grants that open private lists to others."""

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

PRIVACY_PUBLIC = "public"
PRIVACY_CONNECTIONS = "connections"
PRIVACY_PRIVATE = "private"
PRIVACY_LEVELS = (PRIVACY_PUBLIC, PRIVACY_CONNECTIONS, PRIVACY_PRIVATE)

ROLE_OWNER = "owner"
ROLE_COLLABORATOR = "collaborator"
ROLE_VIEWER = "viewer"
GRANTABLE_ROLES = (ROLE_COLLABORATOR, ROLE_VIEWER)

ACCESS_PENDING = "pending"
ACCESS_ACCEPTED = "accepted"
ACCESS_REJECTED = "rejected"


class PostList(Base):
    """Named container of posts owned by one user."""

    __tablename__ = "lists"
    __table_args__ = (Index("ix_lists_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    privacy_level: Mapped[str] = mapped_column(Text, nullable=False, default=PRIVACY_PUBLIC)
    # The owner's catch-all list; posts land here when no list is chosen.
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    owner: Mapped[User] = relationship("User")


class ListAccess(Base):
    """A role granted to a non-owner on a list."""

    __tablename__ = "list_access"
    __table_args__ = (
        # One row per (list, user); re-inviting updates it in place.
        UniqueConstraint("list_id", "user_id", name="uq_list_access_list_user"),
        CheckConstraint(
            "role IN ('collaborator', 'viewer')", name="ck_list_access_role"
        ),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')", name="ck_list_access_status"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    list_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=ACCESS_PENDING)
    invited_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    post_list: Mapped[PostList] = relationship("PostList")
    user: Mapped[User] = relationship("User", foreign_keys=[user_id])
    inviter: Mapped[User | None] = relationship("User", foreign_keys=[invited_by])


class AccessRequest(Base):
    """A user's request for a role on a list they cannot see yet."""

    __tablename__ = "access_requests"
    __table_args__ = (
        UniqueConstraint("list_id", "user_id", name="uq_access_request_list_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    list_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    requested_role: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped[User] = relationship("User")
