# src/aura_share/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from fastapi import APIRouter

from aura_share.api.v1.dependencies import CurrentUserDep, NotificationServiceDep
from aura_share.schemas.social import NotificationResponse, UnreadCountResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUserDep, notifications: NotificationServiceDep
) -> list[NotificationResponse]:
    return [
        NotificationResponse.model_validate(item)
        for item in notifications.for_user(current_user.id)
    ]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    current_user: CurrentUserDep, notifications: NotificationServiceDep
) -> UnreadCountResponse:
    return UnreadCountResponse(count=notifications.unread_count(current_user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int, current_user: CurrentUserDep, notifications: NotificationServiceDep
) -> NotificationResponse:
    item = notifications.mark_viewed(notification_id, current_user.id)
    return NotificationResponse.model_validate(item)
