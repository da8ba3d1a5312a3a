# src/aura_share/api/v1/endpoints/hashtags.py
"""Hashtag discovery and follow endpoints."""

from fastapi import APIRouter, Query

from aura_share.api.v1.dependencies import (
    ContentServiceDep,
    CurrentUserDep,
    OptionalUserDep,
    SettingsDep,
)
from aura_share.schemas.common import SuccessResponse
from aura_share.schemas.post import PostResponse
from aura_share.schemas.social import HashtagResponse, TrendingHashtag

router = APIRouter(prefix="/hashtags", tags=["hashtags"])


@router.get("/trending", response_model=list[TrendingHashtag])
async def trending_hashtags(
    content: ContentServiceDep,
    settings: SettingsDep,
    limit: int | None = Query(None, ge=1, le=100),
) -> list[TrendingHashtag]:
    """Rank hashtags by how many public posts in public lists carry them."""
    rows = content.trending_hashtags(limit or settings.trending_hashtag_limit)
    return [
        TrendingHashtag(id=hashtag.id, name=hashtag.name, post_count=count)
        for hashtag, count in rows
    ]


@router.get("/search", response_model=list[PostResponse])
async def search_hashtags(
    content: ContentServiceDep, q: str = Query("", max_length=200)
) -> list[PostResponse]:
    """Public posts carrying every comma-separated hashtag in ``q``."""
    return [PostResponse.model_validate(post) for post in content.search_hashtags(q)]


@router.get("/followed", response_model=list[HashtagResponse])
async def followed_hashtags(
    current_user: CurrentUserDep, content: ContentServiceDep
) -> list[HashtagResponse]:
    return [HashtagResponse.model_validate(h) for h in content.followed_hashtags(current_user.id)]


@router.get("/{name}/posts", response_model=list[PostResponse])
async def hashtag_posts(
    name: str, viewer: OptionalUserDep, content: ContentServiceDep
) -> list[PostResponse]:
    posts = content.posts_by_hashtag(name, viewer.id if viewer else None)
    return [PostResponse.model_validate(post) for post in posts]


@router.post("/{hashtag_id}/follow", response_model=SuccessResponse)
async def follow_hashtag(
    hashtag_id: int, current_user: CurrentUserDep, content: ContentServiceDep
) -> SuccessResponse:
    content.follow_hashtag(current_user.id, hashtag_id)
    return SuccessResponse()


@router.delete("/{hashtag_id}/follow", response_model=SuccessResponse)
async def unfollow_hashtag(
    hashtag_id: int, current_user: CurrentUserDep, content: ContentServiceDep
) -> SuccessResponse:
    content.unfollow_hashtag(current_user.id, hashtag_id)
    return SuccessResponse()
