# src/aura_share/api/v1/endpoints/lists.py
"""List management, invitations and access request endpoints."""

from fastapi import APIRouter, status

from aura_share.api.v1.dependencies import (
    CollaborationServiceDep,
    ContentServiceDep,
    CurrentUserDep,
    OptionalUserDep,
)
from aura_share.schemas.common import SuccessResponse
from aura_share.schemas.lists import (
    AccessRequestCreate,
    AccessRequestDecision,
    AccessRequestResponse,
    DeleteListResponse,
    InviteRequest,
    ListAccessResponse,
    ListCreate,
    ListPrivacyUpdate,
    ListResponse,
    RespondRequest,
    RoleResponse,
)
from aura_share.schemas.post import PostResponse

router = APIRouter(tags=["lists"])


@router.get("/lists", response_model=list[ListResponse])
async def lists_with_access(
    current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> list[ListResponse]:
    """Return lists the caller owns followed by lists shared with them."""
    return [
        ListResponse.model_validate(post_list)
        for post_list in collaboration.lists_with_access(current_user.id)
    ]


@router.get("/lists/my", response_model=list[ListResponse])
async def my_lists(
    current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> list[ListResponse]:
    lists = collaboration.lists_for_user(current_user.id, current_user.id)
    return [ListResponse.model_validate(post_list) for post_list in lists]


@router.post("/lists", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
async def create_list(
    payload: ListCreate, current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> ListResponse:
    post_list = collaboration.create_list(
        current_user.id, payload.name, payload.description, payload.privacy_level
    )
    return ListResponse.model_validate(post_list)


@router.get("/lists/{list_id}", response_model=ListResponse)
async def get_list(
    list_id: int, viewer: OptionalUserDep, collaboration: CollaborationServiceDep
) -> ListResponse:
    post_list = collaboration.get_list_for_viewer(list_id, viewer.id if viewer else None)
    return ListResponse.model_validate(post_list)


@router.get("/lists/{list_id}/posts", response_model=list[PostResponse])
async def list_posts(
    list_id: int, viewer: OptionalUserDep, content: ContentServiceDep
) -> list[PostResponse]:
    posts = content.posts_by_list(list_id, viewer.id if viewer else None)
    return [PostResponse.model_validate(post) for post in posts]


@router.put("/lists/{list_id}/privacy", response_model=ListResponse)
async def update_list_privacy(
    list_id: int,
    payload: ListPrivacyUpdate,
    current_user: CurrentUserDep,
    collaboration: CollaborationServiceDep,
) -> ListResponse:
    post_list = collaboration.update_privacy(list_id, current_user.id, payload.privacy_level)
    return ListResponse.model_validate(post_list)


@router.delete("/lists/{list_id}", response_model=DeleteListResponse)
async def delete_list(
    list_id: int, current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> DeleteListResponse:
    """Delete a list; its posts move to the owner's default list."""
    moved = collaboration.delete_list(list_id, current_user.id)
    return DeleteListResponse(moved_posts=moved)


# Invitations and grants


@router.post(
    "/lists/{list_id}/invite",
    response_model=ListAccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def invite_to_list(
    list_id: int,
    payload: InviteRequest,
    current_user: CurrentUserDep,
    collaboration: CollaborationServiceDep,
) -> ListAccessResponse:
    access = collaboration.invite(list_id, payload.user_id, payload.role, current_user.id)
    return ListAccessResponse.model_validate(access)


@router.post("/lists/{list_id}/accept", response_model=ListAccessResponse)
async def accept_invitation(
    list_id: int, current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> ListAccessResponse:
    access = collaboration.respond_by_user_and_list(current_user.id, list_id, "accept")
    return ListAccessResponse.model_validate(access)


@router.post("/lists/{list_id}/reject", response_model=ListAccessResponse)
async def reject_invitation(
    list_id: int, current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> ListAccessResponse:
    access = collaboration.respond_by_user_and_list(current_user.id, list_id, "reject")
    return ListAccessResponse.model_validate(access)


@router.post("/lists/access/{access_id}/respond", response_model=ListAccessResponse)
async def respond_to_invitation(
    access_id: int,
    payload: RespondRequest,
    current_user: CurrentUserDep,
    collaboration: CollaborationServiceDep,
) -> ListAccessResponse:
    access = collaboration.respond(access_id, current_user.id, payload.action)
    return ListAccessResponse.model_validate(access)


@router.get("/user/list-invitations", response_model=list[ListAccessResponse])
async def pending_invitations(
    current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> list[ListAccessResponse]:
    invitations = collaboration.pending_invitations(current_user.id)
    return [ListAccessResponse.model_validate(access) for access in invitations]


@router.post(
    "/lists/{list_id}/collaborators",
    response_model=ListAccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_collaborator(
    list_id: int,
    payload: InviteRequest,
    current_user: CurrentUserDep,
    collaboration: CollaborationServiceDep,
) -> ListAccessResponse:
    """Grant a role directly, without a pending invitation."""
    access = collaboration.add_collaborator(
        list_id, payload.user_id, payload.role, current_user.id
    )
    return ListAccessResponse.model_validate(access)


@router.delete("/lists/{list_id}/collaborators/{user_id}", response_model=SuccessResponse)
@router.delete("/lists/{list_id}/access/{user_id}", response_model=SuccessResponse)
async def remove_access(
    list_id: int,
    user_id: int,
    current_user: CurrentUserDep,
    collaboration: CollaborationServiceDep,
) -> SuccessResponse:
    collaboration.remove_access(list_id, user_id, current_user.id)
    return SuccessResponse(message="Access removed")


@router.get("/lists/{list_id}/access", response_model=list[ListAccessResponse])
async def list_access(
    list_id: int, current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> list[ListAccessResponse]:
    rows = collaboration.list_access(list_id, current_user.id)
    return [ListAccessResponse.model_validate(access) for access in rows]


@router.get("/lists/{list_id}/role", response_model=RoleResponse)
async def my_role(
    list_id: int, current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> RoleResponse:
    collaboration.get_list(list_id)
    resolution = collaboration.resolve_role(current_user.id, list_id)
    return RoleResponse(has_access=resolution.has_access, role=resolution.role)


@router.get("/user/list-access", response_model=list[ListAccessResponse])
async def my_list_access(
    current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> list[ListAccessResponse]:
    rows = collaboration.user_list_access(current_user.id)
    return [ListAccessResponse.model_validate(access) for access in rows]


# Access requests


@router.post(
    "/lists/{list_id}/request-access",
    response_model=AccessRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_access(
    list_id: int,
    payload: AccessRequestCreate,
    current_user: CurrentUserDep,
    collaboration: CollaborationServiceDep,
) -> AccessRequestResponse:
    request = collaboration.create_access_request(
        list_id, current_user.id, payload.requested_role, payload.message
    )
    return AccessRequestResponse.model_validate(request)


@router.get("/lists/{list_id}/access-requests", response_model=list[AccessRequestResponse])
async def access_requests(
    list_id: int, current_user: CurrentUserDep, collaboration: CollaborationServiceDep
) -> list[AccessRequestResponse]:
    rows = collaboration.access_requests(list_id, current_user.id)
    return [AccessRequestResponse.model_validate(request) for request in rows]


@router.post("/access-requests/{request_id}/respond", response_model=SuccessResponse)
async def respond_to_access_request(
    request_id: int,
    payload: AccessRequestDecision,
    current_user: CurrentUserDep,
    collaboration: CollaborationServiceDep,
) -> SuccessResponse:
    collaboration.respond_to_access_request(request_id, payload.action, current_user.id)
    outcome = "approved" if payload.action == "approve" else "rejected"
    return SuccessResponse(message=f"Request {outcome}")
