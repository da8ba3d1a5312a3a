# src/aura_share/api/v1/admin/__init__.py
"""Admin API, mounted under ``/api/admin``."""

from fastapi import APIRouter

from . import analytics, auth, content, moderation, system, users

admin_router = APIRouter(prefix="/admin")
admin_router.include_router(auth.router)
admin_router.include_router(analytics.router)
admin_router.include_router(moderation.router)
admin_router.include_router(users.router)
admin_router.include_router(content.router)
admin_router.include_router(system.router)

__all__ = ["admin_router"]
