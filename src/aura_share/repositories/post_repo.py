"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, joinedload

from aura_share.models import (
    Comment,
    Hashtag,
    Notification,
    Post,
    PostEnergyRating,
    PostFlag,
    PostHashtag,
    PostLike,
    PostSave,
    PostShare,
    PostView,
    Repost,
    Rsvp,
    TaggedPost,
)

__all__ = ["PostRepository"]

# Rows that reference a post and must go before the post itself.
_DEPENDENT_MODELS = (
    PostLike,
    PostShare,
    PostView,
    PostSave,
    Repost,
    PostEnergyRating,
    PostFlag,
    PostHashtag,
    TaggedPost,
    Rsvp,
    Notification,
)


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def _listing(self):
        return (
            select(Post)
            .options(joinedload(Post.author), joinedload(Post.post_list))
            .where(Post.removed.is_(False))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )

    def get(self, post_id: int, *, include_removed: bool = False) -> Post | None:
        """Return a post by identifier."""
        post = self.session.get(Post, post_id)
        if post is None or (post.removed and not include_removed):
            return None
        return post

    def list_recent(self, limit: int | None = None) -> list[Post]:
        """Return non-removed posts, newest first."""
        stmt = self._listing()
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt).unique())

    def by_user(self, user_id: int) -> list[Post]:
        """Return posts authored by ``user_id``."""
        stmt = self._listing().where(Post.user_id == user_id)
        return list(self.session.scalars(stmt).unique())

    def by_authors(self, user_ids: Iterable[int]) -> list[Post]:
        """Return posts authored by any of ``user_ids``."""
        ids = list(user_ids)
        if not ids:
            return []
        stmt = self._listing().where(Post.user_id.in_(ids))
        return list(self.session.scalars(stmt).unique())

    def by_list(self, list_id: int) -> list[Post]:
        """Return posts stored in ``list_id``."""
        stmt = self._listing().where(Post.list_id == list_id)
        return list(self.session.scalars(stmt).unique())

    def by_hashtag(self, name: str) -> list[Post]:
        """Return posts carrying the hashtag ``name``."""
        stmt = (
            self._listing()
            .join(PostHashtag, PostHashtag.post_id == Post.id)
            .join(Hashtag, Hashtag.id == PostHashtag.hashtag_id)
            .where(Hashtag.name == name)
        )
        return list(self.session.scalars(stmt).unique())

    def by_all_hashtags(self, names: Iterable[str]) -> list[Post]:
        """Return posts carrying every hashtag in ``names``."""
        wanted = set(names)
        if not wanted:
            return []
        tagged = (
            select(PostHashtag.post_id)
            .join(Hashtag, Hashtag.id == PostHashtag.hashtag_id)
            .where(Hashtag.name.in_(wanted))
            .group_by(PostHashtag.post_id)
            .having(func.count(Hashtag.id.distinct()) == len(wanted))
        )
        stmt = self._listing().where(Post.id.in_(tagged))
        return list(self.session.scalars(stmt).unique())

    def tagged_for(self, user_id: int) -> list[Post]:
        """Return posts in which ``user_id`` was tagged."""
        stmt = (
            self._listing()
            .join(TaggedPost, TaggedPost.post_id == Post.id)
            .where(TaggedPost.to_user_id == user_id)
        )
        return list(self.session.scalars(stmt).unique())

    def saved_by(self, user_id: int) -> list[Post]:
        """Return posts bookmarked by ``user_id``."""
        stmt = (
            self._listing()
            .join(PostSave, PostSave.post_id == Post.id)
            .where(PostSave.user_id == user_id)
        )
        return list(self.session.scalars(stmt).unique())

    def add(self, post: Post) -> Post:
        """Stage a new post and assign its identifier."""
        self.session.add(post)
        self.session.flush()
        return post

    def move_to_list(self, from_list_id: int, to_list_id: int) -> int:
        """Reassign every post in ``from_list_id``; returns the number moved."""
        result = self.session.execute(
            update(Post).where(Post.list_id == from_list_id).values(list_id=to_list_id)
        )
        return result.rowcount or 0

    def delete(self, post: Post) -> None:
        """Delete ``post`` along with every row that references it."""
        for model in _DEPENDENT_MODELS:
            self.session.execute(delete(model).where(model.post_id == post.id))
        # Replies first so the self-reference never dangles.
        self.session.execute(
            delete(Comment).where(Comment.post_id == post.id, Comment.parent_id.is_not(None))
        )
        self.session.execute(delete(Comment).where(Comment.post_id == post.id))
        self.session.delete(post)
        self.session.flush()

    def delete_comment_thread(self, comment: Comment) -> None:
        """Delete ``comment`` and every reply beneath it, deepest level first."""
        levels = [[comment.id]]
        while True:
            replies = list(
                self.session.scalars(select(Comment.id).where(Comment.parent_id.in_(levels[-1])))
            )
            if not replies:
                break
            levels.append(replies)
        for ids in reversed(levels):
            self.session.execute(delete(Comment).where(Comment.id.in_(ids)))
        self.session.flush()
