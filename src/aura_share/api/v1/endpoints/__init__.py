# src/aura_share/api/v1/endpoints/__init__.py
"""API endpoint modules for regular users."""

from .auth import router as auth_router
from .friends import router as friends_router
from .hashtags import router as hashtags_router
from .interactions import router as interactions_router
from .lists import router as lists_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .users import profiles_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "users_router",
    "profiles_router",
    "posts_router",
    "interactions_router",
    "lists_router",
    "friends_router",
    "hashtags_router",
    "notifications_router",
]
