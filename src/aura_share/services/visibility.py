"""Visibility policy deciding which posts a viewer may see.

Privacy is set at two levels, on the post and on the list that holds it. The
effective privacy of a post is the stricter of the two:

* ``public`` posts are visible to everyone.
* ``connections`` posts are visible to friends of the author.
* ``private`` posts are visible to the list owner, to users holding an
  accepted grant on the list, and to users tagged in the post.

Anonymous viewers only see posts that are public at both levels. Authors
always see their own posts.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aura_share.models import Post, PostList, TaggedPost
from aura_share.models.lists import (
    PRIVACY_CONNECTIONS,
    PRIVACY_LEVELS,
    PRIVACY_PRIVATE,
    PRIVACY_PUBLIC,
)
from aura_share.repositories import FriendshipRepository, ListRepository

__all__ = [
    "PostScope",
    "VisibilityService",
    "decide_visibility",
    "effective_privacy",
    "list_visible_to",
    "privacy_rank",
]

logger = logging.getLogger(__name__)

_PRIVACY_RANK = {level: rank for rank, level in enumerate(PRIVACY_LEVELS)}


def privacy_rank(value: str | None) -> int:
    """Return the strictness of a privacy level; unknown values rank as public."""
    return _PRIVACY_RANK.get(value or PRIVACY_PUBLIC, 0)


def effective_privacy(post_privacy: str | None, list_privacy: str | None = None) -> str:
    """Return the stricter of a post's privacy and its list's privacy."""
    rank = max(privacy_rank(post_privacy), privacy_rank(list_privacy))
    return PRIVACY_LEVELS[rank]


@dataclass(frozen=True)
class PostScope:
    """The fields of a post the policy needs."""

    post_id: int
    author_id: int
    privacy: str
    list_id: int | None = None
    list_privacy: str | None = None

    @classmethod
    def of(cls, post: Post) -> PostScope:
        post_list = post.post_list
        return cls(
            post_id=post.id,
            author_id=post.user_id,
            privacy=post.privacy,
            list_id=post.list_id,
            list_privacy=post_list.privacy_level if post_list is not None else None,
        )


def decide_visibility(
    scope: PostScope,
    viewer_id: int | None,
    *,
    are_friends: Callable[[int, int], bool],
    has_list_access: Callable[[int, int], bool],
    is_tagged: Callable[[int, int], bool],
) -> bool:
    """Decide whether ``viewer_id`` may see the post described by ``scope``.

    Args:
        scope: Privacy-relevant fields of the post.
        viewer_id: The viewing user, or ``None`` for anonymous callers.
        are_friends: ``(viewer, author)`` friendship predicate.
        has_list_access: ``(viewer, list_id)`` predicate for owner or accepted grant.
        is_tagged: ``(viewer, post_id)`` predicate for tagged recipients.

    Returns:
        True when the post may be shown to the viewer.
    """
    if viewer_id is None:
        return scope.privacy == PRIVACY_PUBLIC and scope.list_privacy in (None, PRIVACY_PUBLIC)

    if viewer_id == scope.author_id:
        return True

    level = effective_privacy(scope.privacy, scope.list_privacy)
    if level == PRIVACY_PUBLIC:
        return True
    if level == PRIVACY_CONNECTIONS:
        return are_friends(viewer_id, scope.author_id)

    # Private: list grant first, tag as the secondary path.
    if scope.list_id is not None and has_list_access(viewer_id, scope.list_id):
        return True
    return is_tagged(viewer_id, scope.post_id)


def list_visible_to(
    post_list: PostList,
    viewer_id: int | None,
    *,
    are_friends: Callable[[int, int], bool],
    has_list_access: Callable[[int, int], bool],
) -> bool:
    """Apply the list-level half of the policy to a list itself."""
    if post_list.privacy_level == PRIVACY_PUBLIC:
        return True
    if viewer_id is None:
        return False
    if viewer_id == post_list.user_id:
        return True
    if post_list.privacy_level == PRIVACY_PRIVATE:
        return has_list_access(viewer_id, post_list.id)
    if post_list.privacy_level == PRIVACY_CONNECTIONS:
        return are_friends(viewer_id, post_list.user_id)
    # Unknown levels rank as public.
    return True


class VisibilityService:
    """Binds the policy to the database for single and bulk checks."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.friendships = FriendshipRepository(db)
        self.lists = ListRepository(db)

    def are_friends(self, a: int, b: int) -> bool:
        try:
            return self.friendships.are_friends(a, b)
        except SQLAlchemyError:
            logger.warning("Friendship lookup failed for %s/%s", a, b, exc_info=True)
            return False

    def has_list_access(self, user_id: int, list_id: int) -> bool:
        try:
            post_list = self.lists.get(list_id)
            if post_list is None:
                return False
            if post_list.user_id == user_id:
                return True
            return self.lists.accepted_access(list_id, user_id) is not None
        except SQLAlchemyError:
            logger.warning("List access lookup failed for %s/%s", user_id, list_id, exc_info=True)
            return False

    def is_tagged(self, user_id: int, post_id: int) -> bool:
        try:
            return self.db.get(TaggedPost, (post_id, user_id)) is not None
        except SQLAlchemyError:
            logger.warning("Tag lookup failed for %s/%s", user_id, post_id, exc_info=True)
            return False

    def is_visible(self, post: Post, viewer_id: int | None) -> bool:
        """Return True when ``viewer_id`` may see ``post``."""
        if post.removed:
            return False
        return decide_visibility(
            PostScope.of(post),
            viewer_id,
            are_friends=self.are_friends,
            has_list_access=self.has_list_access,
            is_tagged=self.is_tagged,
        )

    def filter_visible(self, posts: Sequence[Post], viewer_id: int | None) -> list[Post]:
        """Return the posts ``viewer_id`` may see, preserving input order.

        Friend ids, accessible list ids and tagged post ids are loaded once so
        the check costs a fixed number of queries regardless of input size.
        """
        candidates = [post for post in posts if not post.removed]
        if viewer_id is None or not candidates:
            return [
                post for post in candidates
                if decide_visibility(
                    PostScope.of(post),
                    None,
                    are_friends=_deny,
                    has_list_access=_deny,
                    is_tagged=_deny,
                )
            ]

        friend_ids, list_ids, tagged_ids = self._prefetch(viewer_id, candidates)
        return [
            post for post in candidates
            if decide_visibility(
                PostScope.of(post),
                viewer_id,
                are_friends=lambda _viewer, author: author in friend_ids,
                has_list_access=lambda _viewer, list_id: list_id in list_ids,
                is_tagged=lambda _viewer, post_id: post_id in tagged_ids,
            )
        ]

    def visible_lists(self, lists: Iterable[PostList], viewer_id: int | None) -> list[PostList]:
        """Return the lists ``viewer_id`` may open, preserving input order."""
        return [
            post_list for post_list in lists
            if list_visible_to(
                post_list,
                viewer_id,
                are_friends=self.are_friends,
                has_list_access=self.has_list_access,
            )
        ]

    def _prefetch(
        self, viewer_id: int, posts: Sequence[Post]
    ) -> tuple[set[int], set[int], set[int]]:
        try:
            friend_ids = self.friendships.friend_ids(viewer_id)
            list_ids = self.lists.accessible_list_ids(viewer_id)
            post_ids = [post.id for post in posts]
            tagged_ids = set(
                self.db.scalars(
                    select(TaggedPost.post_id).where(
                        TaggedPost.to_user_id == viewer_id,
                        TaggedPost.post_id.in_(post_ids),
                    )
                )
            )
        except SQLAlchemyError:
            logger.warning("Visibility prefetch failed for viewer %s", viewer_id, exc_info=True)
            return set(), set(), set()
        return friend_ids, list_ids, tagged_ids


def _deny(_a: int, _b: int) -> bool:
    return False
