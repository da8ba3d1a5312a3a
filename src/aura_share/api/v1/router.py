"""API router wiring.

This module composes the API surface by including the sub-routers that
define their own endpoints. It contains no business logic and no endpoint
definitions. The application mounts ``api_router`` under ``/api``.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .admin import admin_router
from .endpoints import (
    auth_router,
    friends_router,
    hashtags_router,
    interactions_router,
    lists_router,
    notifications_router,
    posts_router,
    profiles_router,
    users_router,
)

api_router: Final[APIRouter] = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(profiles_router)
api_router.include_router(posts_router)
api_router.include_router(interactions_router)
api_router.include_router(lists_router)
api_router.include_router(friends_router)
api_router.include_router(hashtags_router)
api_router.include_router(notifications_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
