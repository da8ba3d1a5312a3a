# src/aura_share/api/v1/endpoints/posts.py
"""Post-related endpoints for the Aura Share API."""

from dataclasses import asdict

from fastapi import APIRouter, status

from aura_share.api.v1.dependencies import (
    ContentServiceDep,
    CurrentUserDep,
    EngagementServiceDep,
    OptionalUserDep,
)
from aura_share.schemas.common import SuccessResponse
from aura_share.schemas.post import PostCreate, PostResponse, PostStatsResponse, PostUpdate
from aura_share.services import NewPost

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[PostResponse])
async def list_posts(viewer: OptionalUserDep, content: ContentServiceDep) -> list[PostResponse]:
    """Return every post the caller may see, newest first."""
    viewer_id = viewer.id if viewer else None
    return [PostResponse.model_validate(post) for post in content.list_posts(viewer_id)]


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate, current_user: CurrentUserDep, content: ContentServiceDep
) -> PostResponse:
    """Create a post, attach its hashtags and notify tagged users."""
    post = content.create_post(current_user, NewPost(**payload.model_dump()))
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int, viewer: OptionalUserDep, content: ContentServiceDep
) -> PostResponse:
    viewer_id = viewer.id if viewer else None
    return PostResponse.model_validate(content.get_post(post_id, viewer_id))


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    payload: PostUpdate,
    current_user: CurrentUserDep,
    content: ContentServiceDep,
) -> PostResponse:
    post = content.update_post(post_id, current_user.id, payload.model_dump(exclude_unset=True))
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(
    post_id: int, current_user: CurrentUserDep, content: ContentServiceDep
) -> SuccessResponse:
    content.delete_post(post_id, current_user.id)
    return SuccessResponse(message="Post deleted")


@router.get("/{post_id}/stats", response_model=PostStatsResponse)
async def get_post_stats(
    post_id: int,
    viewer: OptionalUserDep,
    content: ContentServiceDep,
    engagement: EngagementServiceDep,
) -> PostStatsResponse:
    content.get_post(post_id, viewer.id if viewer else None)
    return PostStatsResponse(**asdict(engagement.post_stats(post_id)))
