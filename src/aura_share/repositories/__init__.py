"""Repository objects wrapping SQLAlchemy queries."""

from .list_repo import ListRepository
from .post_repo import PostRepository
from .social_repo import FriendshipRepository
from .user_repo import UserRepository

__all__ = ["FriendshipRepository", "ListRepository", "PostRepository", "UserRepository"]
