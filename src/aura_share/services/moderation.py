"""User flagging of posts and automatic removal."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from aura_share.core.errors import NotFound, PermissionDenied, ValidationFailed
from aura_share.db.session import atomic
from aura_share.models import PostFlag
from aura_share.models.notification import NOTIFICATION_POST_REMOVED
from aura_share.repositories import PostRepository
from aura_share.services.admin import CONTENT_TYPE_POST, ReviewQueueService
from aura_share.services.notifications import NotificationService
from aura_share.services.visibility import VisibilityService

__all__ = ["FlagResult", "FlaggingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlagResult:
    was_deleted: bool
    flag_count: int


class FlaggingService:
    """Record flags and take a post down once enough users object to it."""

    def __init__(
        self,
        db: Session,
        notifications: NotificationService,
        visibility: VisibilityService,
        review_queue: ReviewQueueService,
        threshold: int = 2,
    ) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.notifications = notifications
        self.visibility = visibility
        self.review_queue = review_queue
        self.threshold = threshold

    def flag_count(self, post_id: int) -> int:
        stmt = select(func.count()).select_from(PostFlag).where(PostFlag.post_id == post_id)
        return int(self.db.scalar(stmt) or 0)

    def flag_post(
        self, post_id: int, user_id: int, reason: str, comment: str | None = None
    ) -> FlagResult:
        """Flag a post; a second flag by the same user changes nothing."""
        if not reason or not reason.strip():
            raise ValidationFailed("A reason is required")
        post = self.posts.get(post_id)
        if post is None or not self.visibility.is_visible(post, user_id):
            raise NotFound("Post not found")
        if post.user_id == user_id:
            raise ValidationFailed("Cannot flag your own post")

        if self.db.get(PostFlag, (post_id, user_id)) is not None:
            return FlagResult(was_deleted=False, flag_count=self.flag_count(post_id))
        with atomic(self.db):
            self.db.add(
                PostFlag(post_id=post_id, user_id=user_id, reason=reason, comment=comment)
            )
            self.db.flush()
            was_deleted = self._auto_delete(post_id)
        return FlagResult(was_deleted=was_deleted, flag_count=self.flag_count(post_id))

    def check_auto_delete(self, post_id: int) -> bool:
        """Remove the post if it has reached the flag threshold."""
        with atomic(self.db):
            removed = self._auto_delete(post_id)
        return removed

    def _auto_delete(self, post_id: int) -> bool:
        post = self.posts.get(post_id)
        if post is None or post.removed:
            return False
        count = self.flag_count(post_id)
        if count < self.threshold:
            return False
        post.removed = True
        self.notifications.notify(post.user_id, NOTIFICATION_POST_REMOVED, post_id=post.id)
        self.review_queue.add(
            CONTENT_TYPE_POST,
            post.id,
            reason=f"Automatically removed after {count} flags",
            priority="high",
            flag_count=count,
        )
        logger.info("Post %s removed after %d flags", post_id, count)
        return True

    def unflag_post(self, post_id: int, user_id: int) -> bool:
        flag = self.db.get(PostFlag, (post_id, user_id))
        if flag is None:
            return False
        self.db.delete(flag)
        self.db.commit()
        return True

    def post_flags(self, post_id: int, acting_user_id: int | None = None) -> list[PostFlag]:
        """Return flags on a post; when ``acting_user_id`` is given it must be the author."""
        if acting_user_id is not None:
            post = self.posts.get(post_id, include_removed=True)
            if post is None:
                raise NotFound("Post not found")
            if post.user_id != acting_user_id:
                raise PermissionDenied("Only the author can view flags on this post")
        stmt = (
            select(PostFlag)
            .where(PostFlag.post_id == post_id)
            .order_by(PostFlag.created_at, PostFlag.user_id)
        )
        return list(self.db.scalars(stmt))

    def has_flagged(self, post_id: int, user_id: int) -> bool:
        return self.db.get(PostFlag, (post_id, user_id)) is not None
