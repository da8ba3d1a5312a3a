# src/aura_share/api/v1/admin/content.py
"""Admin endpoints for removing and restoring content."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends

from aura_share.api.v1.dependencies import (
    ClientIPDep,
    ContentModerationServiceDep,
    ModerationActionServiceDep,
    require_permission,
)
from aura_share.models import AdminUser
from aura_share.models.admin import PERMISSION_CONTENT_MODERATION
from aura_share.schemas.admin import ModerationActionResponse, ReasonRequest

router = APIRouter(prefix="/content", tags=["admin"])

ContentAdminDep = Annotated[
    AdminUser, Depends(require_permission(PERMISSION_CONTENT_MODERATION))
]
ContentType = Literal["post", "comment"]


@router.post("/{content_type}/{content_id}/remove", response_model=ModerationActionResponse)
async def remove_content(
    content_type: ContentType,
    content_id: int,
    payload: ReasonRequest,
    admin: ContentAdminDep,
    moderation: ContentModerationServiceDep,
    ip_address: ClientIPDep,
) -> ModerationActionResponse:
    record = moderation.remove_content(
        content_type, content_id, admin, payload.reason, ip_address
    )
    return ModerationActionResponse.model_validate(record)


@router.post("/{content_type}/{content_id}/restore", response_model=ModerationActionResponse)
async def restore_content(
    content_type: ContentType,
    content_id: int,
    payload: ReasonRequest,
    admin: ContentAdminDep,
    moderation: ContentModerationServiceDep,
    ip_address: ClientIPDep,
) -> ModerationActionResponse:
    record = moderation.restore_content(
        content_type, content_id, admin, payload.reason, ip_address
    )
    return ModerationActionResponse.model_validate(record)


@router.get(
    "/{content_type}/{content_id}/moderation-history",
    response_model=list[ModerationActionResponse],
)
async def content_moderation_history(
    content_type: ContentType,
    content_id: int,
    _admin: ContentAdminDep,
    actions: ModerationActionServiceDep,
) -> list[ModerationActionResponse]:
    return [
        ModerationActionResponse.model_validate(a)
        for a in actions.history(content_type, content_id)
    ]
