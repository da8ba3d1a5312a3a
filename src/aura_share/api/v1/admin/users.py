# src/aura_share/api/v1/admin/users.py
"""Admin endpoints for managing regular user accounts."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from aura_share.api.v1.dependencies import (
    AnalyticsServiceDep,
    ClientIPDep,
    ModerationActionServiceDep,
    UserModerationServiceDep,
    require_permission,
)
from aura_share.models import AdminUser
from aura_share.models.admin import PERMISSION_USER_MANAGEMENT
from aura_share.schemas.admin import (
    BanRequest,
    ModerationActionResponse,
    ReasonRequest,
    UserMetricsResponse,
)
from aura_share.schemas.common import SuccessResponse
from aura_share.schemas.user import UserResponse

router = APIRouter(prefix="/users", tags=["admin"])

UserAdminDep = Annotated[AdminUser, Depends(require_permission(PERMISSION_USER_MANAGEMENT))]


@router.get("/search", response_model=list[UserResponse])
async def search_users(
    _admin: UserAdminDep,
    moderation: UserModerationServiceDep,
    q: Annotated[str, Query(min_length=1, max_length=100)],
) -> list[UserResponse]:
    return [UserResponse.model_validate(user) for user in moderation.search_users(q)]


@router.get("/metrics", response_model=list[UserMetricsResponse])
async def users_with_metrics(
    _admin: UserAdminDep,
    analytics: AnalyticsServiceDep,
    moderation: UserModerationServiceDep,
    search: str | None = None,
    min_score: int | None = None,
    max_score: int | None = None,
) -> list[UserMetricsResponse]:
    """Return users ranked by cosmic score."""
    return [
        UserMetricsResponse(
            id=m.user.id,
            username=m.user.username,
            name=m.user.name,
            aura_rating=m.user.aura_rating,
            posts=m.posts,
            likes=m.likes,
            shares=m.shares,
            tags=m.tags,
            friends=m.friends,
            amplifier=m.amplifier,
            cosmic_score=m.cosmic_score,
            is_banned=moderation.is_banned(m.user.id),
        )
        for m in analytics.users_with_metrics(search, min_score, max_score)
    ]


@router.post("/{user_id}/ban", response_model=ModerationActionResponse)
async def ban_user(
    user_id: int,
    payload: BanRequest,
    admin: UserAdminDep,
    moderation: UserModerationServiceDep,
    ip_address: ClientIPDep,
) -> ModerationActionResponse:
    record = moderation.ban_user(user_id, admin, payload.reason, payload.expires_at, ip_address)
    return ModerationActionResponse.model_validate(record)


@router.post("/{user_id}/unban", response_model=ModerationActionResponse)
async def unban_user(
    user_id: int,
    payload: ReasonRequest,
    admin: UserAdminDep,
    moderation: UserModerationServiceDep,
    ip_address: ClientIPDep,
) -> ModerationActionResponse:
    record = moderation.unban_user(user_id, admin, payload.reason, ip_address)
    return ModerationActionResponse.model_validate(record)


@router.delete("/{user_id}", response_model=SuccessResponse)
async def purge_user(
    user_id: int,
    admin: UserAdminDep,
    moderation: UserModerationServiceDep,
    ip_address: ClientIPDep,
) -> SuccessResponse:
    """Soft-delete an account and remove what it owns."""
    moderation.purge_user(user_id, admin, ip_address)
    return SuccessResponse(message="User deleted")


@router.get("/{user_id}/moderation-history", response_model=list[ModerationActionResponse])
async def user_moderation_history(
    user_id: int, _admin: UserAdminDep, actions: ModerationActionServiceDep
) -> list[ModerationActionResponse]:
    return [ModerationActionResponse.model_validate(a) for a in actions.user_history(user_id)]
