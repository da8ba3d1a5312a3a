"""Notification creation and read-state management."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from aura_share.core.errors import NotFound
from aura_share.models import Notification

__all__ = ["NotificationService"]


class NotificationService:
    """Create notifications and track whether their recipient has seen them."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def notify(
        self,
        user_id: int,
        type_: str,
        *,
        from_user_id: int | None = None,
        post_id: int | None = None,
        list_id: int | None = None,
    ) -> Notification | None:
        """Stage a notification; nobody is notified about their own actions."""
        if from_user_id is not None and from_user_id == user_id:
            return None
        notification = Notification(
            user_id=user_id,
            type=type_,
            from_user_id=from_user_id,
            post_id=post_id,
            list_id=list_id,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def for_user(self, user_id: int) -> list[Notification]:
        """Return a user's notifications, newest first."""
        stmt = (
            select(Notification)
            .options(joinedload(Notification.from_user))
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        return list(self.db.scalars(stmt))

    def unread_count(self, user_id: int) -> int:
        """Return how many notifications the user has not viewed."""
        stmt = select(func.count()).where(
            Notification.user_id == user_id, Notification.viewed.is_(False)
        )
        return self.db.scalar(stmt) or 0

    def mark_viewed(self, notification_id: int, user_id: int) -> Notification:
        """Mark one of the user's notifications as viewed."""
        notification = self.db.get(Notification, notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFound("Notification not found")
        notification.viewed = True
        self.db.commit()
        return notification
