# src/aura_share/api/v1/endpoints/interactions.py
"""Likes, saves, reposts, energy, tags, comments, RSVPs and flags."""

from fastapi import APIRouter, status

from aura_share.api.v1.dependencies import (
    ContentServiceDep,
    CurrentUserDep,
    EngagementServiceDep,
    FlaggingServiceDep,
    OptionalUserDep,
)
from aura_share.schemas.common import ChangedResponse, SuccessResponse
from aura_share.schemas.post import (
    CommentCreate,
    CommentResponse,
    FlagRequest,
    FlagResponse,
    PostFlagResponse,
    PostResponse,
    RsvpRequest,
    RsvpResponse,
    RsvpStatsResponse,
    RsvpStatus,
    TagRequest,
    TagResponse,
    TaskAssignmentResponse,
    TaskToggleResponse,
)
from aura_share.schemas.user import EnergyRatingRequest, EnergyRatingResponse, EnergyStatsResponse

router = APIRouter(tags=["interactions"])


@router.post("/posts/{post_id}/like", response_model=ChangedResponse)
async def like_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.like(post_id, current_user.id))


@router.delete("/posts/{post_id}/like", response_model=ChangedResponse)
async def unlike_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.unlike(post_id, current_user.id))


@router.post("/posts/{post_id}/share", response_model=ChangedResponse)
async def share_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.share(post_id, current_user.id))


@router.post("/posts/{post_id}/view", response_model=ChangedResponse)
async def view_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.view(post_id, current_user.id))


@router.post("/posts/{post_id}/save", response_model=ChangedResponse)
async def save_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.save(post_id, current_user.id))


@router.delete("/posts/{post_id}/save", response_model=ChangedResponse)
async def unsave_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.unsave(post_id, current_user.id))


@router.post("/posts/{post_id}/repost", response_model=ChangedResponse)
async def repost_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.repost(post_id, current_user.id))


@router.delete("/posts/{post_id}/repost", response_model=ChangedResponse)
async def unrepost_post(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=engagement.unrepost(post_id, current_user.id))


@router.get("/saved-posts", response_model=list[PostResponse])
async def saved_posts(
    current_user: CurrentUserDep, content: ContentServiceDep
) -> list[PostResponse]:
    return [PostResponse.model_validate(post) for post in content.saved_posts(current_user.id)]


# Energy


@router.post("/posts/{post_id}/energy", response_model=EnergyRatingResponse)
async def rate_post_energy(
    post_id: int,
    payload: EnergyRatingRequest,
    current_user: CurrentUserDep,
    engagement: EngagementServiceDep,
) -> EnergyRatingResponse:
    row = engagement.rate_post(post_id, current_user.id, payload.rating)
    return EnergyRatingResponse(rating=row.rating)


@router.get("/posts/{post_id}/energy", response_model=EnergyRatingResponse)
async def get_post_energy(
    post_id: int, current_user: CurrentUserDep, engagement: EngagementServiceDep
) -> EnergyRatingResponse:
    return EnergyRatingResponse(rating=engagement.post_rating(post_id, current_user.id))


@router.get("/posts/{post_id}/energy/stats", response_model=EnergyStatsResponse)
async def get_post_energy_stats(
    post_id: int,
    viewer: OptionalUserDep,
    content: ContentServiceDep,
    engagement: EngagementServiceDep,
) -> EnergyStatsResponse:
    content.get_post(post_id, viewer.id if viewer else None)
    stats = engagement.post_energy_stats(post_id)
    return EnergyStatsResponse(average=stats.average, count=stats.count)


# Tags


@router.post("/posts/{post_id}/tag", response_model=TagResponse)
async def tag_users(
    post_id: int,
    payload: TagRequest,
    current_user: CurrentUserDep,
    content: ContentServiceDep,
) -> TagResponse:
    added = content.tag_users(post_id, current_user.id, payload.user_ids)
    return TagResponse(tagged_user_ids=added)


@router.post("/posts/{post_id}/tagged/viewed", response_model=SuccessResponse)
async def mark_tagged_viewed(
    post_id: int, current_user: CurrentUserDep, content: ContentServiceDep
) -> SuccessResponse:
    content.mark_tagged_viewed(post_id, current_user.id)
    return SuccessResponse()


# Comments


@router.get("/posts/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    post_id: int, viewer: OptionalUserDep, content: ContentServiceDep
) -> list[CommentResponse]:
    comments = content.list_comments(post_id, viewer.id if viewer else None)
    return [CommentResponse.model_validate(comment) for comment in comments]


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    content: ContentServiceDep,
) -> CommentResponse:
    comment = content.create_comment(
        post_id, current_user.id, payload.text, payload.parent_id, payload.image_url
    )
    return CommentResponse.model_validate(comment)


@router.delete("/comments/{comment_id}", response_model=SuccessResponse)
async def delete_comment(
    comment_id: int, current_user: CurrentUserDep, content: ContentServiceDep
) -> SuccessResponse:
    content.delete_comment(comment_id, current_user.id)
    return SuccessResponse(message="Comment deleted")


# RSVP


@router.post("/posts/{post_id}/rsvp", response_model=RsvpResponse)
async def set_rsvp(
    post_id: int,
    payload: RsvpRequest,
    current_user: CurrentUserDep,
    content: ContentServiceDep,
) -> RsvpResponse:
    return RsvpResponse.model_validate(content.set_rsvp(post_id, current_user.id, payload.status))


@router.get("/posts/{post_id}/rsvp", response_model=RsvpResponse | None)
async def get_rsvp(
    post_id: int, current_user: CurrentUserDep, content: ContentServiceDep
) -> RsvpResponse | None:
    rsvp = content.get_rsvp(post_id, current_user.id)
    return RsvpResponse.model_validate(rsvp) if rsvp is not None else None


@router.get("/posts/{post_id}/rsvp/stats", response_model=RsvpStatsResponse)
async def rsvp_stats(
    post_id: int, viewer: OptionalUserDep, content: ContentServiceDep
) -> RsvpStatsResponse:
    content.get_post(post_id, viewer.id if viewer else None)
    return RsvpStatsResponse(**content.rsvp_stats(post_id))


@router.get("/posts/{post_id}/rsvp/{rsvp_status}", response_model=list[RsvpResponse])
async def rsvp_list(
    post_id: int,
    rsvp_status: RsvpStatus,
    viewer: OptionalUserDep,
    content: ContentServiceDep,
) -> list[RsvpResponse]:
    content.get_post(post_id, viewer.id if viewer else None)
    return [RsvpResponse.model_validate(r) for r in content.rsvp_list(post_id, rsvp_status)]


# Event tasks


@router.post("/posts/{post_id}/tasks/{task_id}/toggle", response_model=TaskToggleResponse)
async def toggle_task(
    post_id: int, task_id: str, current_user: CurrentUserDep, content: ContentServiceDep
) -> TaskToggleResponse:
    """Claim an event task, or release it if the caller already holds it."""
    return TaskToggleResponse(task_list=content.toggle_task(post_id, task_id, current_user.id))


@router.get("/posts/{post_id}/task-assignments", response_model=list[TaskAssignmentResponse])
async def task_assignments(
    post_id: int, viewer: OptionalUserDep, content: ContentServiceDep
) -> list[TaskAssignmentResponse]:
    return [
        TaskAssignmentResponse(task_id=task_id, user_id=user.id, user_name=user.name)
        for task_id, user in content.task_assignments(post_id, viewer.id if viewer else None)
    ]


# Flags


@router.post("/posts/{post_id}/flag", response_model=FlagResponse)
async def flag_post(
    post_id: int,
    payload: FlagRequest,
    current_user: CurrentUserDep,
    flagging: FlaggingServiceDep,
) -> FlagResponse:
    """Flag a post; reports whether the flag crossed the removal threshold."""
    result = flagging.flag_post(post_id, current_user.id, payload.reason, payload.comment)
    return FlagResponse(was_deleted=result.was_deleted, flag_count=result.flag_count)


@router.delete("/posts/{post_id}/flag", response_model=ChangedResponse)
async def unflag_post(
    post_id: int, current_user: CurrentUserDep, flagging: FlaggingServiceDep
) -> ChangedResponse:
    return ChangedResponse(changed=flagging.unflag_post(post_id, current_user.id))


@router.get("/posts/{post_id}/flags", response_model=list[PostFlagResponse])
async def post_flags(
    post_id: int,
    current_user: CurrentUserDep,
    flagging: FlaggingServiceDep,
) -> list[PostFlagResponse]:
    """Return the flags on a post; only its author may look."""
    flags = flagging.post_flags(post_id, acting_user_id=current_user.id)
    return [PostFlagResponse.model_validate(flag) for flag in flags]
