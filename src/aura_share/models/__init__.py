# src/aura_share/models/__init__.py
"""SQLAlchemy models for the Aura Share application."""

from .admin import (
    AdminSession,
    AdminUser,
    AuditLog,
    ContentReviewItem,
    ModerationAction,
    SystemConfig,
)
from .engagement import (
    PostEnergyRating,
    PostLike,
    PostSave,
    PostShare,
    PostView,
    ProfileEnergyRating,
    Repost,
)
from .event import Rsvp
from .hashtag import Hashtag, HashtagFollow, PostHashtag
from .lists import AccessRequest, ListAccess, PostList
from .moderation import PostFlag
from .notification import Notification
from .post import Comment, Post
from .social import FriendRequest, Friendship, TaggedPost
from .user import User

__all__ = [
    "AdminSession", "AdminUser", "AuditLog", "ContentReviewItem",
    "ModerationAction", "SystemConfig",
    "PostEnergyRating", "PostLike", "PostSave", "PostShare", "PostView",
    "ProfileEnergyRating", "Repost",
    "Rsvp",
    "Hashtag", "HashtagFollow", "PostHashtag",
    "AccessRequest", "ListAccess", "PostList",
    "PostFlag",
    "Notification",
    "Comment", "Post",
    "FriendRequest", "Friendship", "TaggedPost",
    "User",
]
