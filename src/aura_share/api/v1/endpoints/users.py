# src/aura_share/api/v1/endpoints/users.py
"""User profile and energy rating endpoints."""

from fastapi import APIRouter, Query

from aura_share.api.v1.dependencies import (
    CollaborationServiceDep,
    ContentServiceDep,
    CurrentUserDep,
    EngagementServiceDep,
    OptionalUserDep,
    UserServiceDep,
)
from aura_share.schemas.common import SuccessResponse
from aura_share.schemas.lists import ListResponse
from aura_share.schemas.post import PostResponse
from aura_share.schemas.user import (
    EnergyRatingRequest,
    EnergyRatingResponse,
    EnergyStatsResponse,
    PrivacyUpdateRequest,
    ProfileUpdateRequest,
    UserResponse,
    UserSummary,
)

router = APIRouter(prefix="/users", tags=["users"])
profiles_router = APIRouter(prefix="/profiles", tags=["users"])


@router.get("/search", response_model=list[UserSummary])
async def search_users(
    users: UserServiceDep,
    _current_user: CurrentUserDep,
    q: str = Query("", max_length=100),
) -> list[UserSummary]:
    return [UserSummary.model_validate(user) for user in users.search_users(q)]


@router.put("/me", response_model=UserResponse)
async def update_me(
    payload: ProfileUpdateRequest, current_user: CurrentUserDep, users: UserServiceDep
) -> UserResponse:
    user = users.update_profile(current_user, payload.name, payload.profile_picture_url)
    return UserResponse.model_validate(user)


@router.put("/me/privacy", response_model=UserResponse)
async def update_my_privacy(
    payload: PrivacyUpdateRequest, current_user: CurrentUserDep, users: UserServiceDep
) -> UserResponse:
    user = users.update_default_privacy(current_user, payload.default_privacy)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, users: UserServiceDep) -> UserResponse:
    return UserResponse.model_validate(users.get_user(user_id))


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: int, current_user: CurrentUserDep, users: UserServiceDep
) -> SuccessResponse:
    """Delete the caller's own account."""
    users.delete_user(user_id, current_user)
    return SuccessResponse(message="Account deleted")


@router.get("/{user_id}/posts", response_model=list[PostResponse])
async def get_user_posts(
    user_id: int, viewer: OptionalUserDep, content: ContentServiceDep, users: UserServiceDep
) -> list[PostResponse]:
    users.get_user(user_id)
    viewer_id = viewer.id if viewer else None
    return [PostResponse.model_validate(p) for p in content.posts_by_user(user_id, viewer_id)]


@router.get("/{user_id}/lists", response_model=list[ListResponse])
async def get_user_lists(
    user_id: int,
    viewer: OptionalUserDep,
    collaboration: CollaborationServiceDep,
    users: UserServiceDep,
) -> list[ListResponse]:
    users.get_user(user_id)
    viewer_id = viewer.id if viewer else None
    return [
        ListResponse.model_validate(post_list)
        for post_list in collaboration.lists_for_user(user_id, viewer_id)
    ]


@profiles_router.post("/{profile_id}/energy", response_model=EnergyStatsResponse)
async def rate_profile(
    profile_id: int,
    payload: EnergyRatingRequest,
    current_user: CurrentUserDep,
    engagement: EngagementServiceDep,
) -> EnergyStatsResponse:
    """Rate another user's profile and return their refreshed aura."""
    profile = engagement.rate_profile(profile_id, current_user.id, payload.rating)
    return EnergyStatsResponse(average=profile.aura_rating, count=profile.rating_count)


@profiles_router.get("/{profile_id}/energy", response_model=EnergyRatingResponse)
async def get_my_profile_rating(
    profile_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> EnergyRatingResponse:
    return EnergyRatingResponse(rating=engagement.profile_rating(profile_id, current_user.id))


@profiles_router.get("/{profile_id}/energy/stats", response_model=EnergyStatsResponse)
async def get_profile_energy_stats(
    profile_id: int, engagement: EngagementServiceDep
) -> EnergyStatsResponse:
    stats = engagement.profile_energy_stats(profile_id)
    return EnergyStatsResponse(average=stats.average, count=stats.count)
