# src/aura_share/models/admin.py
"""Admin principals, their sessions, and moderation bookkeeping.

Admins are a separate principal space from regular users: they have their
own credentials table and opaque session tokens.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aura_share.db.session import Base
from aura_share.db.time import utcnow

ADMIN_ROLE_SUPER = "super_admin"
ADMIN_ROLE_MODERATOR = "moderator"
ADMIN_ROLE_CONTENT = "content_admin"
ADMIN_ROLES = (ADMIN_ROLE_SUPER, ADMIN_ROLE_MODERATOR, ADMIN_ROLE_CONTENT)

PERMISSION_USER_MANAGEMENT = "user_management"
PERMISSION_CONTENT_MODERATION = "content_moderation"
PERMISSION_SYSTEM_CONFIG = "system_config"
PERMISSION_ANALYTICS = "analytics"
ADMIN_PERMISSIONS = (
    PERMISSION_USER_MANAGEMENT,
    PERMISSION_CONTENT_MODERATION,
    PERMISSION_SYSTEM_CONFIG,
    PERMISSION_ANALYTICS,
)

ACTION_STATUS_ACTIVE = "active"
ACTION_STATUS_REVERSED = "reversed"
ACTION_STATUS_EXPIRED = "expired"

REVIEW_STATUS_PENDING = "pending"
REVIEW_STATUS_ASSIGNED = "assigned"
REVIEW_STATUS_REVIEWED = "reviewed"
REVIEW_PRIORITIES = ("low", "medium", "high", "urgent")


class AdminUser(Base):
    """Operator account for the moderation dashboard."""

    __tablename__ = "admin_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False, default=ADMIN_ROLE_MODERATOR)
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def has_permission(self, permission: str) -> bool:
        """Super admins hold every permission; others need it listed."""
        return self.role == ADMIN_ROLE_SUPER or permission in (self.permissions or [])


class AdminSession(Base):
    """Bearer token issued at admin login."""

    __tablename__ = "admin_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admin_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False
    )
    session_token: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    admin: Mapped[AdminUser] = relationship("AdminUser")


class AuditLog(Base):
    """Append-only record of an admin action."""

    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_logs_admin_id", "admin_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Null for failed logins with an unknown username.
    admin_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("admin_users.id"), nullable=True
    )
    action: Mapped[str] = mapped_column(Text, nullable=False)
    target: Mapped[str] = mapped_column(Text, nullable=False)
    target_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class ModerationAction(Base):
    """Decision taken against a user or piece of content.

    Actions are never deleted; reversal flips ``status`` to ``reversed``.
    """

    __tablename__ = "moderation_actions"
    __table_args__ = (
        Index("ix_moderation_actions_content", "content_type", "content_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    moderator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("admin_users.id"), nullable=False
    )
    content_type: Mapped[str] = mapped_column(Text, nullable=False)
    content_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action: Mapped[str] = mapped_column(Text, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=ACTION_STATUS_ACTIVE)
    # Temporary actions such as timed bans lapse after this instant.
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class SystemConfig(Base):
    """Runtime configuration entry editable from the dashboard."""

    __tablename__ = "system_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False, default="string")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(Text, nullable=False, default="features")
    updated_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("admin_users.id"), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class ContentReviewItem(Base):
    """Entry in the moderation review queue."""

    __tablename__ = "content_review_queue"
    __table_args__ = (Index("ix_content_review_queue_status", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_type: Mapped[str] = mapped_column(Text, nullable=False)
    content_id: Mapped[int] = mapped_column(Integer, nullable=False)
    priority: Mapped[str] = mapped_column(Text, nullable=False, default="medium")
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    flag_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # pending -> assigned -> reviewed
    status: Mapped[str] = mapped_column(Text, nullable=False, default=REVIEW_STATUS_PENDING)
    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("admin_users.id"), nullable=True
    )
    reviewed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("admin_users.id"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
