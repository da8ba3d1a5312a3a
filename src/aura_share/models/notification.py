# src/aura_share/models/notification.py
"""In-app notifications."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aura_share.db.session import Base
from aura_share.db.time import utcnow
from aura_share.models.user import User

NOTIFICATION_TAG = "tag"
NOTIFICATION_LIST_INVITE = "list_invite"
NOTIFICATION_FRIEND_REQUEST = "friend_request"
NOTIFICATION_FRIEND_ACCEPT = "friend_accept"
NOTIFICATION_ACCESS_REQUEST = "access_request"
NOTIFICATION_POST_REMOVED = "post_removed"


class Notification(Base):
    """Message to ``user_id`` about something ``from_user_id`` did."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    from_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    type: Mapped[str] = mapped_column(Text, nullable=False)
    post_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True
    )
    list_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=True
    )
    viewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    from_user: Mapped[User | None] = relationship("User", foreign_keys=[from_user_id])
