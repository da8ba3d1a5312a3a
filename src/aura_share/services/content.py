"""Posts, comments, tags, hashtags and RSVPs.

Every listing goes through :class:`VisibilityService`; single-object
mutations check ownership directly.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.attributes import flag_modified

from aura_share.core.errors import NotFound, PermissionDenied, ValidationFailed
from aura_share.db.session import atomic
from aura_share.models import (
    Comment,
    Hashtag,
    HashtagFollow,
    Post,
    PostHashtag,
    PostList,
    Rsvp,
    TaggedPost,
    User,
)
from aura_share.models.event import RSVP_GOING, RSVP_MAYBE, RSVP_NOT_GOING, RSVP_STATUSES
from aura_share.models.lists import PRIVACY_LEVELS, PRIVACY_PUBLIC
from aura_share.models.notification import NOTIFICATION_TAG
from aura_share.repositories import PostRepository
from aura_share.services.collaboration import CollaborationService
from aura_share.services.notifications import NotificationService
from aura_share.services.social_graph import SocialGraphService
from aura_share.services.visibility import VisibilityService

__all__ = ["ContentService", "NewPost", "normalize_hashtag"]

logger = logging.getLogger(__name__)

# Fields an author may change after posting.
_EDITABLE_FIELDS = (
    "primary_photo_url",
    "primary_link",
    "link_label",
    "primary_description",
    "privacy",
    "discount_code",
    "additional_photos",
    "spotify_url",
    "youtube_url",
    "is_event",
    "event_date",
    "reminders",
    "is_recurring",
    "recurring_type",
    "task_list",
    "allow_rsvp",
)


def normalize_hashtag(name: str) -> str:
    """Lower-case a hashtag and strip surrounding whitespace and ``#``."""
    return name.strip().lstrip("#").strip().lower()


@dataclass
class NewPost:
    """Validated input for :meth:`ContentService.create_post`."""

    primary_link: str
    primary_description: str
    privacy: str | None = None
    list_id: int | None = None
    primary_photo_url: str | None = None
    link_label: str | None = None
    discount_code: str | None = None
    additional_photos: list[str] | None = None
    spotify_url: str | None = None
    youtube_url: str | None = None
    is_event: bool = False
    event_date: datetime | None = None
    reminders: list[str] | None = None
    is_recurring: bool = False
    recurring_type: str | None = None
    task_list: list[dict[str, Any]] | None = None
    allow_rsvp: bool = False
    hashtags: list[str] = field(default_factory=list)
    tagged_user_ids: list[int] = field(default_factory=list)


class ContentService:
    """Create, read and change posts and the things attached to them."""

    def __init__(
        self,
        db: Session,
        visibility: VisibilityService,
        collaboration: CollaborationService,
        social: SocialGraphService,
        notifications: NotificationService,
    ) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.visibility = visibility
        self.collaboration = collaboration
        self.social = social
        self.notifications = notifications

    # Posts

    def create_post(self, author: User, data: NewPost) -> Post:
        """Create a post with its hashtags and tags in a single transaction."""
        privacy = data.privacy or author.default_privacy or PRIVACY_PUBLIC
        if privacy not in PRIVACY_LEVELS:
            raise ValidationFailed("Invalid privacy level")

        if data.list_id is not None:
            role = self.collaboration.resolve_role(author.id, data.list_id)
            if not role.has_access:
                if self.db.get(PostList, data.list_id) is None:
                    raise NotFound("List not found")
                raise PermissionDenied("You do not have access to this list")
            if not role.can_post:
                raise PermissionDenied("Viewers cannot post to this list")

        with atomic(self.db):
            list_id = data.list_id
            if list_id is None:
                list_id = self.collaboration.default_list(author.id).id
            post = self.posts.add(
                Post(
                    user_id=author.id,
                    list_id=list_id,
                    primary_photo_url=data.primary_photo_url,
                    primary_link=data.primary_link,
                    link_label=data.link_label,
                    primary_description=data.primary_description,
                    privacy=privacy,
                    discount_code=data.discount_code,
                    additional_photos=data.additional_photos,
                    spotify_url=data.spotify_url,
                    youtube_url=data.youtube_url,
                    is_event=data.is_event,
                    event_date=data.event_date,
                    reminders=data.reminders,
                    is_recurring=data.is_recurring,
                    recurring_type=data.recurring_type,
                    task_list=data.task_list,
                    allow_rsvp=data.allow_rsvp,
                )
            )
            self._attach_hashtags(post, data.hashtags)
            self._tag(post, author.id, data.tagged_user_ids)
        self.db.refresh(post)
        return post

    def get_post(self, post_id: int, viewer_id: int | None) -> Post:
        """Return a post the viewer may see."""
        post = self.posts.get(post_id)
        if post is None:
            raise NotFound("Post not found")
        if not self.visibility.is_visible(post, viewer_id):
            raise PermissionDenied("You do not have access to this post")
        return post

    def _authored(self, post_id: int, user_id: int, message: str) -> Post:
        post = self.posts.get(post_id, include_removed=True)
        if post is None:
            raise NotFound("Post not found")
        if post.user_id != user_id:
            raise PermissionDenied(message)
        return post

    def list_posts(self, viewer_id: int | None) -> list[Post]:
        """Return every post the viewer may see, newest first."""
        return self.visibility.filter_visible(self.posts.list_recent(), viewer_id)

    def posts_by_user(self, user_id: int, viewer_id: int | None) -> list[Post]:
        return self.visibility.filter_visible(self.posts.by_user(user_id), viewer_id)

    def posts_by_list(self, list_id: int, viewer_id: int | None) -> list[Post]:
        self.collaboration.get_list_for_viewer(list_id, viewer_id)
        return self.visibility.filter_visible(self.posts.by_list(list_id), viewer_id)

    def posts_by_hashtag(self, name: str, viewer_id: int | None) -> list[Post]:
        return self.visibility.filter_visible(
            self.posts.by_hashtag(normalize_hashtag(name)), viewer_id
        )

    def search_hashtags(self, query: str) -> list[Post]:
        """Return public posts carrying every comma-separated hashtag in ``query``."""
        names = {normalize_hashtag(part) for part in query.split(",")}
        names.discard("")
        return self.visibility.filter_visible(self.posts.by_all_hashtags(names), None)

    def friends_posts(self, user_id: int) -> list[Post]:
        """Return visible posts written by the user's friends."""
        friend_ids = self.social.friend_ids(user_id)
        return self.visibility.filter_visible(self.posts.by_authors(friend_ids), user_id)

    def tagged_posts(self, user_id: int) -> list[Post]:
        """Return posts shared with the user by tagging them."""
        return self.visibility.filter_visible(self.posts.tagged_for(user_id), user_id)

    def saved_posts(self, user_id: int) -> list[Post]:
        return self.visibility.filter_visible(self.posts.saved_by(user_id), user_id)

    def update_post(self, post_id: int, user_id: int, changes: dict[str, Any]) -> Post:
        """Apply author edits; unknown keys are ignored."""
        post = self._authored(post_id, user_id, "Not authorized to edit this post")
        if "privacy" in changes and changes["privacy"] not in PRIVACY_LEVELS:
            raise ValidationFailed("Invalid privacy level")
        for key in _EDITABLE_FIELDS:
            if key in changes:
                setattr(post, key, changes[key])
        self.db.commit()
        self.db.refresh(post)
        return post

    def delete_post(self, post_id: int, user_id: int) -> None:
        """Delete an authored post and everything attached to it."""
        post = self._authored(post_id, user_id, "Not authorized to delete this post")
        with atomic(self.db):
            self.posts.delete(post)

    # Hashtags

    def _get_or_create_hashtag(self, name: str) -> Hashtag:
        hashtag = self.db.scalars(select(Hashtag).where(Hashtag.name == name)).first()
        if hashtag is None:
            hashtag = Hashtag(name=name)
            self.db.add(hashtag)
            self.db.flush()
        return hashtag

    def _attach_hashtags(self, post: Post, names: Iterable[str]) -> None:
        seen: set[str] = set()
        for raw in names:
            name = normalize_hashtag(raw)
            if not name or name in seen:
                continue
            seen.add(name)
            hashtag = self._get_or_create_hashtag(name)
            self.db.add(PostHashtag(post_id=post.id, hashtag_id=hashtag.id))
        self.db.flush()

    def hashtags_for_post(self, post_id: int) -> list[Hashtag]:
        stmt = (
            select(Hashtag)
            .join(PostHashtag, PostHashtag.hashtag_id == Hashtag.id)
            .where(PostHashtag.post_id == post_id)
            .order_by(Hashtag.name)
        )
        return list(self.db.scalars(stmt))

    def trending_hashtags(self, limit: int = 10) -> list[tuple[Hashtag, int]]:
        """Return hashtags ranked by how many public posts in public lists use them."""
        post_count = func.count(Post.id)
        stmt = (
            select(Hashtag, post_count.label("post_count"))
            .join(PostHashtag, PostHashtag.hashtag_id == Hashtag.id)
            .join(
                Post,
                and_(
                    Post.id == PostHashtag.post_id,
                    Post.privacy == PRIVACY_PUBLIC,
                    Post.removed.is_(False),
                ),
            )
            .join(
                PostList,
                and_(PostList.id == Post.list_id, PostList.privacy_level == PRIVACY_PUBLIC),
            )
            .group_by(Hashtag.id)
            .order_by(post_count.desc(), Hashtag.name)
            .limit(limit)
        )
        return [(row[0], int(row[1])) for row in self.db.execute(stmt)]

    def _hashtag(self, hashtag_id: int) -> Hashtag:
        hashtag = self.db.get(Hashtag, hashtag_id)
        if hashtag is None:
            raise NotFound("Hashtag not found")
        return hashtag

    def follow_hashtag(self, user_id: int, hashtag_id: int) -> None:
        self._hashtag(hashtag_id)
        if self.db.get(HashtagFollow, (user_id, hashtag_id)) is None:
            self.db.add(HashtagFollow(user_id=user_id, hashtag_id=hashtag_id))
            self.db.commit()

    def unfollow_hashtag(self, user_id: int, hashtag_id: int) -> None:
        follow = self.db.get(HashtagFollow, (user_id, hashtag_id))
        if follow is not None:
            self.db.delete(follow)
            self.db.commit()

    def is_following_hashtag(self, user_id: int, hashtag_id: int) -> bool:
        return self.db.get(HashtagFollow, (user_id, hashtag_id)) is not None

    def followed_hashtags(self, user_id: int) -> list[Hashtag]:
        stmt = (
            select(Hashtag)
            .join(HashtagFollow, HashtagFollow.hashtag_id == Hashtag.id)
            .where(HashtagFollow.user_id == user_id)
            .order_by(Hashtag.name)
        )
        return list(self.db.scalars(stmt))

    # Tags

    def _tag(self, post: Post, tagger_id: int, user_ids: Iterable[int]) -> list[int]:
        """Tag users on a post; returns the ids that were newly tagged."""
        added: list[int] = []
        for user_id in dict.fromkeys(user_ids):
            if user_id == tagger_id:
                continue
            if self.db.get(User, user_id) is None:
                raise NotFound(f"User {user_id} not found")
            if self.db.get(TaggedPost, (post.id, user_id)) is not None:
                continue
            self.db.add(TaggedPost(post_id=post.id, to_user_id=user_id, from_user_id=tagger_id))
            self.db.flush()
            self.notifications.notify(
                user_id, NOTIFICATION_TAG, from_user_id=tagger_id, post_id=post.id
            )
            added.append(user_id)
        return added

    def tag_users(self, post_id: int, tagger_id: int, user_ids: list[int]) -> list[int]:
        """Tag users on a post the tagger can see; repeat tags are ignored."""
        post = self.get_post(post_id, tagger_id)
        with atomic(self.db):
            added = self._tag(post, tagger_id, user_ids)
        return added

    def mark_tagged_viewed(self, post_id: int, user_id: int) -> None:
        tag = self.db.get(TaggedPost, (post_id, user_id))
        if tag is None:
            raise NotFound("Tag not found")
        tag.viewed = True
        self.db.commit()

    # Comments

    def create_comment(
        self,
        post_id: int,
        user_id: int,
        text: str,
        parent_id: int | None = None,
        image_url: str | None = None,
    ) -> Comment:
        """Comment on a visible post, optionally replying to another comment."""
        post = self.get_post(post_id, user_id)
        if parent_id is not None:
            parent = self.db.get(Comment, parent_id)
            if parent is None or parent.post_id != post.id:
                raise ValidationFailed("Parent comment does not belong to this post")
        comment = Comment(
            post_id=post.id,
            user_id=user_id,
            parent_id=parent_id,
            text=text,
            image_url=image_url,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def list_comments(self, post_id: int, viewer_id: int | None) -> list[Comment]:
        self.get_post(post_id, viewer_id)
        stmt = (
            select(Comment)
            .options(joinedload(Comment.author))
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at, Comment.id)
        )
        return list(self.db.scalars(stmt))

    def delete_comment(self, comment_id: int, user_id: int) -> None:
        """Delete a comment; allowed for its author and the post's author."""
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFound("Comment not found")
        post = self.db.get(Post, comment.post_id)
        if user_id != comment.user_id and (post is None or post.user_id != user_id):
            raise PermissionDenied("Not authorized to delete this comment")
        with atomic(self.db):
            self.posts.delete_comment_thread(comment)

    # RSVP

    def _event(self, post_id: int, viewer_id: int | None) -> Post:
        post = self.get_post(post_id, viewer_id)
        if not post.is_event:
            raise ValidationFailed("This post is not an event")
        return post

    def set_rsvp(self, post_id: int, user_id: int, status: str) -> Rsvp:
        """Record or change the user's answer to an event."""
        if status not in RSVP_STATUSES:
            raise ValidationFailed("Invalid RSVP status")
        self._event(post_id, user_id)
        rsvp = self.db.get(Rsvp, (post_id, user_id))
        if rsvp is None:
            rsvp = Rsvp(post_id=post_id, user_id=user_id, status=status)
            self.db.add(rsvp)
        else:
            rsvp.status = status
        self.db.commit()
        return rsvp

    def get_rsvp(self, post_id: int, user_id: int) -> Rsvp | None:
        return self.db.get(Rsvp, (post_id, user_id))

    def rsvp_stats(self, post_id: int) -> dict[str, int]:
        rows = self.db.execute(
            select(Rsvp.status, func.count()).where(Rsvp.post_id == post_id).group_by(Rsvp.status)
        )
        counts = {status: int(total) for status, total in rows}
        return {
            "going": counts.get(RSVP_GOING, 0),
            "maybe": counts.get(RSVP_MAYBE, 0),
            "not_going": counts.get(RSVP_NOT_GOING, 0),
        }

    def rsvp_list(self, post_id: int, status: str) -> list[Rsvp]:
        if status not in RSVP_STATUSES:
            raise ValidationFailed("Invalid RSVP status")
        stmt = (
            select(Rsvp)
            .options(joinedload(Rsvp.user))
            .where(Rsvp.post_id == post_id, Rsvp.status == status)
            .order_by(Rsvp.created_at)
        )
        return list(self.db.scalars(stmt))

    # Event tasks

    def toggle_task(self, post_id: int, task_id: str, user_id: int) -> list[dict[str, Any]]:
        """Claim a task on an event, or release it when the user already holds it."""
        post = self._event(post_id, user_id)
        if not post.task_list:
            raise ValidationFailed("This event has no tasks")
        tasks = [dict(task) for task in post.task_list]
        for task in tasks:
            if str(task.get("id")) == task_id:
                task["completed_by"] = None if task.get("completed_by") == user_id else user_id
                break
        else:
            raise NotFound("Task not found")
        post.task_list = tasks
        flag_modified(post, "task_list")
        self.db.commit()
        return tasks

    def task_assignments(self, post_id: int, viewer_id: int | None) -> list[tuple[str, User]]:
        """Return (task id, user) for every claimed task on a visible post."""
        post = self.get_post(post_id, viewer_id)
        claimed = [
            (str(task.get("id")), task["completed_by"])
            for task in post.task_list or []
            if task.get("completed_by") is not None
        ]
        users = {
            user.id: user
            for user in self.db.scalars(
                select(User).where(User.id.in_({user_id for _, user_id in claimed}))
            )
        }
        return [(task_id, users[user_id]) for task_id, user_id in claimed if user_id in users]
