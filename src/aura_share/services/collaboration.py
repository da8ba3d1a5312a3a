"""List management, invitations, access requests and role resolution."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload

from aura_share.core.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from aura_share.db.session import atomic
from aura_share.models import AccessRequest, ListAccess, Notification, PostList, User
from aura_share.models.lists import (
    ACCESS_ACCEPTED,
    ACCESS_PENDING,
    ACCESS_REJECTED,
    GRANTABLE_ROLES,
    PRIVACY_LEVELS,
    PRIVACY_PRIVATE,
    PRIVACY_PUBLIC,
    ROLE_COLLABORATOR,
    ROLE_OWNER,
)
from aura_share.models.notification import (
    NOTIFICATION_ACCESS_REQUEST,
    NOTIFICATION_LIST_INVITE,
)
from aura_share.repositories import ListRepository, PostRepository
from aura_share.services.notifications import NotificationService
from aura_share.services.visibility import VisibilityService

__all__ = ["CollaborationService", "RoleResolution"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleResolution:
    """Outcome of resolving a user's role on a list."""

    has_access: bool
    role: str | None = None

    @property
    def can_post(self) -> bool:
        return self.role in (ROLE_OWNER, ROLE_COLLABORATOR)


class CollaborationService:
    """Owns lists and the grants that open private lists to other users."""

    def __init__(
        self,
        db: Session,
        notifications: NotificationService,
        visibility: VisibilityService,
        default_list_name: str = "General",
    ) -> None:
        self.db = db
        self.lists = ListRepository(db)
        self.posts = PostRepository(db)
        self.notifications = notifications
        self.visibility = visibility
        self.default_list_name = default_list_name

    # Lists

    def get_list(self, list_id: int) -> PostList:
        post_list = self.lists.get(list_id)
        if post_list is None:
            raise NotFound("List not found")
        return post_list

    def get_list_for_viewer(self, list_id: int, viewer_id: int | None) -> PostList:
        """Return a list the viewer is allowed to open."""
        post_list = self.get_list(list_id)
        if not self.visibility.visible_lists([post_list], viewer_id):
            raise PermissionDenied("You do not have access to this list")
        return post_list

    def _owned_list(self, list_id: int, user_id: int, message: str = "Unauthorized") -> PostList:
        post_list = self.get_list(list_id)
        if post_list.user_id != user_id:
            raise PermissionDenied(message)
        return post_list

    def create_list(
        self,
        owner_id: int,
        name: str,
        description: str | None = None,
        privacy_level: str = PRIVACY_PUBLIC,
    ) -> PostList:
        """Create a list owned by ``owner_id``."""
        if privacy_level not in PRIVACY_LEVELS:
            raise ValidationFailed("Valid privacy level required")
        post_list = PostList(
            user_id=owner_id,
            name=name,
            description=description,
            privacy_level=privacy_level,
        )
        self.db.add(post_list)
        self.db.commit()
        self.db.refresh(post_list)
        return post_list

    def default_list(self, owner_id: int) -> PostList:
        """Return the owner's default list, creating it if needed (not committed)."""
        return self.lists.default_for(owner_id, self.default_list_name)

    def lists_for_user(self, owner_id: int, viewer_id: int | None) -> list[PostList]:
        """Return the lists of ``owner_id`` that ``viewer_id`` may see."""
        return self.visibility.visible_lists(self.lists.owned_by(owner_id), viewer_id)

    def lists_with_access(self, user_id: int) -> list[PostList]:
        """Return lists the user owns followed by lists shared with them."""
        owned = self.lists.owned_by(user_id)
        shared = self.db.scalars(
            select(PostList)
            .join(ListAccess, ListAccess.list_id == PostList.id)
            .where(ListAccess.user_id == user_id, ListAccess.status == ACCESS_ACCEPTED)
            .order_by(PostList.created_at, PostList.id)
        )
        return owned + list(shared)

    def update_privacy(self, list_id: int, user_id: int, privacy_level: str) -> PostList:
        """Change a list's privacy; private lists can never become public again."""
        if privacy_level not in PRIVACY_LEVELS:
            raise ValidationFailed("Valid privacy level required")
        post_list = self._owned_list(list_id, user_id)
        if post_list.privacy_level == PRIVACY_PRIVATE and privacy_level == PRIVACY_PUBLIC:
            raise ValidationFailed("Private lists cannot be made public")
        post_list.privacy_level = privacy_level
        self.db.commit()
        return post_list

    def delete_list(self, list_id: int, user_id: int) -> int:
        """Delete a list, moving its posts to the owner's default list.

        Returns:
            Number of posts that were moved.
        """
        post_list = self._owned_list(list_id, user_id, "You can only delete your own lists")
        if post_list.is_default:
            raise ValidationFailed("The default list cannot be deleted")
        with atomic(self.db):
            target = self.default_list(post_list.user_id)
            moved = self.posts.move_to_list(post_list.id, target.id)
            self.db.execute(delete(ListAccess).where(ListAccess.list_id == post_list.id))
            self.db.execute(delete(AccessRequest).where(AccessRequest.list_id == post_list.id))
            self.db.execute(delete(Notification).where(Notification.list_id == post_list.id))
            self.db.delete(post_list)
        logger.info("Deleted list %s; moved %d posts to list %s", list_id, moved, target.id)
        return moved

    # Roles

    def resolve_role(self, user_id: int | None, list_id: int) -> RoleResolution:
        """Return the role ``user_id`` holds on ``list_id``.

        The owner check short-circuits; otherwise only an accepted grant counts.
        """
        if user_id is None:
            return RoleResolution(has_access=False)
        post_list = self.lists.get(list_id)
        if post_list is None:
            return RoleResolution(has_access=False)
        if post_list.user_id == user_id:
            return RoleResolution(has_access=True, role=ROLE_OWNER)
        access = self.lists.accepted_access(list_id, user_id)
        if access is None:
            return RoleResolution(has_access=False)
        return RoleResolution(has_access=True, role=access.role)

    # Invitations

    def _upsert_access(
        self, list_id: int, user_id: int, role: str, invited_by: int, status: str
    ) -> ListAccess:
        access = self.lists.get_access(list_id, user_id)
        if access is None:
            access = ListAccess(list_id=list_id, user_id=user_id)
            self.db.add(access)
        access.role = role
        access.status = status
        access.invited_by = invited_by
        self.db.flush()
        return access

    def _check_grant(self, post_list: PostList, user_id: int, role: str) -> None:
        if role not in GRANTABLE_ROLES:
            raise ValidationFailed("User ID and valid role required")
        if user_id == post_list.user_id:
            raise ValidationFailed("The list owner already has full access")
        if self.db.get(User, user_id) is None:
            raise NotFound("User not found")

    def invite(self, list_id: int, user_id: int, role: str, invited_by: int) -> ListAccess:
        """Invite ``user_id`` to a private list; re-inviting resets to pending."""
        post_list = self._owned_list(list_id, invited_by, "Only list owners can send invitations")
        self._check_grant(post_list, user_id, role)
        if post_list.privacy_level != PRIVACY_PRIVATE:
            raise ValidationFailed("Invitations are only for private lists")
        with atomic(self.db):
            access = self._upsert_access(list_id, user_id, role, invited_by, ACCESS_PENDING)
            self.notifications.notify(
                user_id, NOTIFICATION_LIST_INVITE, from_user_id=invited_by, list_id=list_id
            )
        return access

    def add_collaborator(
        self, list_id: int, user_id: int, role: str, invited_by: int
    ) -> ListAccess:
        """Grant access immediately without a pending invitation."""
        post_list = self._owned_list(list_id, invited_by, "Only list owners can add collaborators")
        self._check_grant(post_list, user_id, role)
        with atomic(self.db):
            access = self._upsert_access(list_id, user_id, role, invited_by, ACCESS_ACCEPTED)
            self.notifications.notify(
                user_id, NOTIFICATION_LIST_INVITE, from_user_id=invited_by, list_id=list_id
            )
        return access

    def respond(self, access_id: int, user_id: int, action: str) -> ListAccess:
        """Accept or reject an invitation addressed to ``user_id``."""
        access = self.db.get(ListAccess, access_id)
        if access is None or access.user_id != user_id:
            raise NotFound("Invitation not found")
        new_status = ACCESS_ACCEPTED if action == "accept" else ACCESS_REJECTED
        if access.status == new_status:
            return access
        if access.status != ACCESS_PENDING:
            raise Conflict(f"Invitation already {access.status}")
        access.status = new_status
        self.db.commit()
        return access

    def respond_by_user_and_list(self, user_id: int, list_id: int, action: str) -> ListAccess:
        """Answer the pending invitation for (user, list)."""
        access = self.lists.get_access(list_id, user_id)
        if access is None or access.status != ACCESS_PENDING:
            raise NotFound("No pending invitation found")
        access.status = ACCESS_ACCEPTED if action == "accept" else ACCESS_REJECTED
        self.db.commit()
        return access

    def remove_access(self, list_id: int, user_id: int, acting_user_id: int) -> None:
        """Revoke whatever access ``user_id`` holds on the list."""
        self._owned_list(list_id, acting_user_id, "Only list owners can remove collaborators")
        access = self.lists.get_access(list_id, user_id)
        if access is None:
            raise NotFound("Access not found")
        self.db.delete(access)
        self.db.commit()

    def list_access(self, list_id: int, acting_user_id: int) -> list[ListAccess]:
        """Return every grant on a list (owner only)."""
        self._owned_list(list_id, acting_user_id)
        stmt = (
            select(ListAccess)
            .options(joinedload(ListAccess.user))
            .where(ListAccess.list_id == list_id)
            .order_by(ListAccess.created_at, ListAccess.id)
        )
        return list(self.db.scalars(stmt))

    def user_list_access(self, user_id: int) -> list[ListAccess]:
        """Return every grant held by ``user_id``, whatever its status."""
        stmt = (
            select(ListAccess)
            .options(joinedload(ListAccess.post_list))
            .where(ListAccess.user_id == user_id)
            .order_by(ListAccess.created_at, ListAccess.id)
        )
        return list(self.db.scalars(stmt))

    def pending_invitations(self, user_id: int) -> list[ListAccess]:
        """Return invitations waiting for ``user_id`` to answer."""
        return [a for a in self.user_list_access(user_id) if a.status == ACCESS_PENDING]

    # Access requests

    def create_access_request(
        self,
        list_id: int,
        user_id: int,
        requested_role: str,
        message: str | None = None,
    ) -> AccessRequest:
        """Ask the owner of a private list for a role on it."""
        if requested_role not in GRANTABLE_ROLES:
            raise ValidationFailed("Valid requested role required")
        post_list = self.get_list(list_id)
        if post_list.privacy_level != PRIVACY_PRIVATE:
            raise ValidationFailed("Access requests are only for private lists")
        if post_list.user_id == user_id:
            raise ValidationFailed("Cannot request access to your own list")
        if self.lists.accepted_access(list_id, user_id) is not None:
            raise Conflict("You already have access to this list")

        with atomic(self.db):
            request = self.db.scalars(
                select(AccessRequest).where(
                    AccessRequest.list_id == list_id, AccessRequest.user_id == user_id
                )
            ).first()
            is_new = request is None
            if request is None:
                request = AccessRequest(list_id=list_id, user_id=user_id)
                self.db.add(request)
            request.requested_role = requested_role
            request.message = message
            self.db.flush()
            if is_new:
                self.notifications.notify(
                    post_list.user_id,
                    NOTIFICATION_ACCESS_REQUEST,
                    from_user_id=user_id,
                    list_id=list_id,
                )
        return request

    def access_requests(self, list_id: int, acting_user_id: int) -> list[AccessRequest]:
        """Return open requests for a list (owner only)."""
        self._owned_list(list_id, acting_user_id)
        stmt = (
            select(AccessRequest)
            .options(joinedload(AccessRequest.user))
            .where(AccessRequest.list_id == list_id)
            .order_by(AccessRequest.created_at, AccessRequest.id)
        )
        return list(self.db.scalars(stmt))

    def respond_to_access_request(
        self, request_id: int, action: str, acting_user_id: int
    ) -> ListAccess | None:
        """Approve or reject a request; the request record is removed either way.

        Returns:
            The accepted grant on approval, otherwise ``None``.
        """
        if action not in ("approve", "reject"):
            raise ValidationFailed("Valid action required")
        request = self.db.get(AccessRequest, request_id)
        if request is None:
            raise NotFound("Access request not found")
        self._owned_list(request.list_id, acting_user_id)

        access = None
        with atomic(self.db):
            if action == "approve":
                access = self._upsert_access(
                    request.list_id,
                    request.user_id,
                    request.requested_role,
                    request.user_id,
                    ACCESS_ACCEPTED,
                )
            self.db.delete(request)
        return access
