# src/aura_share/api/v1/admin/moderation.py
"""Review queue, flagged content and moderation action endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from aura_share.api.v1.dependencies import (
    ContentModerationServiceDep,
    ModerationActionServiceDep,
    ReviewQueueServiceDep,
    require_permission,
)
from aura_share.models import AdminUser
from aura_share.models.admin import PERMISSION_CONTENT_MODERATION
from aura_share.schemas.admin import (
    FlaggedPostResponse,
    ModerationActionResponse,
    ReasonRequest,
    ReviewDecision,
    ReviewItemCreate,
    ReviewItemResponse,
)
from aura_share.schemas.post import PostResponse

router = APIRouter(prefix="/moderation", tags=["admin"])

ModeratorDep = Annotated[AdminUser, Depends(require_permission(PERMISSION_CONTENT_MODERATION))]


@router.get("/queue", response_model=list[ReviewItemResponse])
async def review_queue(
    _admin: ModeratorDep,
    queue: ReviewQueueServiceDep,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    assigned_to: int | None = None,
    priority: str | None = None,
) -> list[ReviewItemResponse]:
    items = queue.queue(status=status_filter, assigned_to=assigned_to, priority=priority)
    return [ReviewItemResponse.model_validate(item) for item in items]


@router.post(
    "/queue",
    response_model=ReviewItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_queue(
    payload: ReviewItemCreate, admin: ModeratorDep, queue: ReviewQueueServiceDep
) -> ReviewItemResponse:
    item = queue.enqueue(
        payload.content_type, payload.content_id, payload.reason, payload.priority, admin
    )
    return ReviewItemResponse.model_validate(item)


@router.post("/queue/{item_id}/assign", response_model=ReviewItemResponse)
async def assign_item(
    item_id: int, admin: ModeratorDep, queue: ReviewQueueServiceDep
) -> ReviewItemResponse:
    return ReviewItemResponse.model_validate(queue.assign(item_id, admin))


@router.post("/queue/{item_id}/process", response_model=ModerationActionResponse)
async def process_item(
    item_id: int,
    payload: ReviewDecision,
    admin: ModeratorDep,
    queue: ReviewQueueServiceDep,
) -> ModerationActionResponse:
    """Close a queue item with a decision and record it as an action."""
    record = queue.process(item_id, payload.action, payload.reason, admin)
    return ModerationActionResponse.model_validate(record)


@router.get("/flagged-content", response_model=list[FlaggedPostResponse])
async def flagged_content(
    _admin: ModeratorDep, content: ContentModerationServiceDep
) -> list[FlaggedPostResponse]:
    return [
        FlaggedPostResponse(
            post=PostResponse.model_validate(post), flag_count=count, removed=post.removed
        )
        for post, count in content.flagged_content()
    ]


@router.post("/actions/{action_id}/reverse", response_model=ModerationActionResponse)
async def reverse_action(
    action_id: int,
    payload: ReasonRequest,
    admin: ModeratorDep,
    actions: ModerationActionServiceDep,
) -> ModerationActionResponse:
    return ModerationActionResponse.model_validate(
        actions.reverse(action_id, admin, payload.reason)
    )
