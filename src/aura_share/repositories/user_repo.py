"""Data access helpers for user accounts."""
from __future__ import annotations

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from aura_share.core.security import UNUSABLE_PASSWORD
from aura_share.db.time import as_utc, utcnow
from aura_share.models import (
    AccessRequest,
    FriendRequest,
    Friendship,
    ListAccess,
    ModerationAction,
    Notification,
    Post,
    User,
)
from aura_share.models.admin import ACTION_STATUS_ACTIVE

from .list_repo import ListRepository
from .post_repo import PostRepository

__all__ = ["UserRepository"]

CONTENT_TYPE_USER = "user"
ACTION_BAN = "ban"
ACTION_UNBAN = "unban"


class UserRepository:
    """Queries over user accounts and their moderation state."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self.session.scalars(stmt).first()

    def search(self, query: str, limit: int = 20) -> list[User]:
        """Return live accounts whose username or name contains ``query``."""
        pattern = f"%{query}%"
        stmt = (
            select(User)
            .where(
                or_(User.username.ilike(pattern), User.name.ilike(pattern)),
                User.username.not_like("deleted_user_%"),
            )
            .order_by(User.username)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def _latest_action(self, user_id: int, action: str) -> ModerationAction | None:
        stmt = (
            select(ModerationAction)
            .where(
                ModerationAction.content_type == CONTENT_TYPE_USER,
                ModerationAction.content_id == user_id,
                ModerationAction.action == action,
                ModerationAction.status == ACTION_STATUS_ACTIVE,
            )
            .order_by(ModerationAction.id.desc())
        )
        return self.session.scalars(stmt).first()

    def is_banned(self, user_id: int) -> bool:
        """Return True while the user's latest active ban is in force."""
        ban = self._latest_action(user_id, ACTION_BAN)
        if ban is None:
            return False
        unban = self._latest_action(user_id, ACTION_UNBAN)
        if unban is not None and unban.id > ban.id:
            return False
        if ban.expires_at is not None and as_utc(ban.expires_at) <= utcnow():
            return False
        return True

    def soft_delete(self, user: User, default_list_name: str) -> None:
        """Anonymise an account and remove what it owns.

        The row stays so foreign keys from engagement history remain valid.
        Posts other authors placed in the user's lists move to their own
        default lists. The caller commits.
        """
        posts = PostRepository(self.session)
        lists = ListRepository(self.session)

        for post in posts.by_user(user.id) + self._removed_posts(user.id):
            posts.delete(post)

        for post_list in lists.owned_by(user.id):
            guests = self.session.scalars(
                select(Post.user_id).where(Post.list_id == post_list.id).distinct()
            )
            for author_id in list(guests):
                target = lists.default_for(author_id, default_list_name)
                self.session.execute(
                    update(Post)
                    .where(Post.list_id == post_list.id, Post.user_id == author_id)
                    .values(list_id=target.id)
                )
            self.session.execute(delete(ListAccess).where(ListAccess.list_id == post_list.id))
            self.session.execute(
                delete(AccessRequest).where(AccessRequest.list_id == post_list.id)
            )
            self.session.execute(delete(Notification).where(Notification.list_id == post_list.id))
            self.session.delete(post_list)

        self.session.execute(delete(ListAccess).where(ListAccess.user_id == user.id))
        self.session.execute(delete(AccessRequest).where(AccessRequest.user_id == user.id))
        self.session.execute(
            delete(Friendship).where(
                or_(Friendship.user_low_id == user.id, Friendship.user_high_id == user.id)
            )
        )
        self.session.execute(
            delete(FriendRequest).where(
                or_(FriendRequest.from_user_id == user.id, FriendRequest.to_user_id == user.id)
            )
        )

        user.username = f"deleted_user_{user.id}_{int(utcnow().timestamp())}"
        user.password_hash = UNUSABLE_PASSWORD
        user.name = "Deleted User"
        user.profile_picture_url = None
        self.session.flush()

    def _removed_posts(self, user_id: int) -> list[Post]:
        stmt = select(Post).where(Post.user_id == user_id, Post.removed.is_(True))
        return list(self.session.scalars(stmt))

