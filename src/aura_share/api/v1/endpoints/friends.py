# src/aura_share/api/v1/endpoints/friends.py
"""Friend requests, friendships and friend-scoped feeds."""

from fastapi import APIRouter, status

from aura_share.api.v1.dependencies import (
    ContentServiceDep,
    CurrentUserDep,
    SocialGraphServiceDep,
)
from aura_share.models import FriendRequest
from aura_share.schemas.common import SuccessResponse
from aura_share.schemas.post import PostResponse
from aura_share.schemas.social import (
    FriendRequestCreate,
    FriendRequestDecision,
    FriendRequestResponse,
    FriendRequestResult,
)
from aura_share.schemas.user import UserSummary

router = APIRouter(tags=["friends"])


@router.post(
    "/friend-request",
    response_model=FriendRequestResult,
    status_code=status.HTTP_201_CREATED,
)
async def send_friend_request(
    payload: FriendRequestCreate, current_user: CurrentUserDep, social: SocialGraphServiceDep
) -> FriendRequestResult:
    """Send a request; an opposite pending request is accepted instead."""
    result = social.send_friend_request(current_user.id, payload.to_user_id)
    if isinstance(result, FriendRequest):
        return FriendRequestResult(connected=False, request_id=result.id)
    return FriendRequestResult(connected=True)


@router.get("/friend-requests", response_model=list[FriendRequestResponse])
async def incoming_requests(
    current_user: CurrentUserDep, social: SocialGraphServiceDep
) -> list[FriendRequestResponse]:
    return [
        FriendRequestResponse.model_validate(request)
        for request in social.incoming_requests(current_user.id)
    ]


@router.get("/friend-requests/outgoing", response_model=list[FriendRequestResponse])
async def outgoing_requests(
    current_user: CurrentUserDep, social: SocialGraphServiceDep
) -> list[FriendRequestResponse]:
    return [
        FriendRequestResponse.model_validate(request)
        for request in social.outgoing_requests(current_user.id)
    ]


@router.post("/friend-request/{request_id}/respond", response_model=SuccessResponse)
async def respond_to_friend_request(
    request_id: int,
    payload: FriendRequestDecision,
    current_user: CurrentUserDep,
    social: SocialGraphServiceDep,
) -> SuccessResponse:
    social.respond_to_friend_request(request_id, payload.action, current_user.id)
    return SuccessResponse(message=f"Friend request {payload.action}ed")


@router.get("/friends", response_model=list[UserSummary])
async def list_friends(
    current_user: CurrentUserDep, social: SocialGraphServiceDep
) -> list[UserSummary]:
    return [UserSummary.model_validate(friend) for friend in social.friends(current_user.id)]


@router.delete("/friends/{friend_id}", response_model=SuccessResponse)
async def unfriend(
    friend_id: int, current_user: CurrentUserDep, social: SocialGraphServiceDep
) -> SuccessResponse:
    social.unfriend(current_user.id, friend_id)
    return SuccessResponse(message="Connection removed")


@router.get("/friends/posts", response_model=list[PostResponse])
async def friends_posts(
    current_user: CurrentUserDep, content: ContentServiceDep
) -> list[PostResponse]:
    return [PostResponse.model_validate(p) for p in content.friends_posts(current_user.id)]


@router.get("/shared-with-me", response_model=list[PostResponse])
@router.get("/tagged-posts", response_model=list[PostResponse])
async def tagged_posts(
    current_user: CurrentUserDep, content: ContentServiceDep
) -> list[PostResponse]:
    """Return posts other users shared with the caller by tagging them."""
    return [PostResponse.model_validate(p) for p in content.tagged_posts(current_user.id)]
