"""Friend requests and the friendship graph."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from aura_share.core.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from aura_share.db.session import atomic
from aura_share.models import FriendRequest, Friendship, User
from aura_share.models.notification import (
    NOTIFICATION_FRIEND_ACCEPT,
    NOTIFICATION_FRIEND_REQUEST,
)
from aura_share.repositories import FriendshipRepository
from aura_share.services.notifications import NotificationService

__all__ = ["SocialGraphService"]

logger = logging.getLogger(__name__)


class SocialGraphService:
    """Manage friend requests and the undirected friendship edges."""

    def __init__(self, db: Session, notifications: NotificationService) -> None:
        self.db = db
        self.friendships = FriendshipRepository(db)
        self.notifications = notifications

    def are_friends(self, a: int, b: int) -> bool:
        """Symmetric friendship predicate."""
        return self.friendships.are_friends(a, b)

    def friend_ids(self, user_id: int) -> set[int]:
        return self.friendships.friend_ids(user_id)

    def friends(self, user_id: int) -> list[User]:
        """Return the user's friends ordered by name."""
        ids = self.friend_ids(user_id)
        if not ids:
            return []
        stmt = select(User).where(User.id.in_(ids)).order_by(User.name, User.id)
        return list(self.db.scalars(stmt))

    def _pending(self, from_user_id: int, to_user_id: int) -> FriendRequest | None:
        stmt = select(FriendRequest).where(
            FriendRequest.from_user_id == from_user_id,
            FriendRequest.to_user_id == to_user_id,
        )
        return self.db.scalars(stmt).first()

    def send_friend_request(self, from_user_id: int, to_user_id: int) -> FriendRequest | Friendship:
        """Send a friend request.

        A pending request in the opposite direction is accepted instead of
        creating a second request.

        Raises:
            ValidationFailed: When sending a request to yourself.
            NotFound: When the target user does not exist.
            Conflict: When a request is already pending or the users are friends.
        """
        if from_user_id == to_user_id:
            raise ValidationFailed("Cannot send friend request to yourself")
        if self.db.get(User, to_user_id) is None:
            raise NotFound("User not found")
        if self._pending(from_user_id, to_user_id) is not None:
            raise Conflict("Friend request already sent")
        if self.are_friends(from_user_id, to_user_id):
            raise Conflict("Already connected with this user")

        reverse = self._pending(to_user_id, from_user_id)
        if reverse is not None:
            return self._accept(reverse)

        with atomic(self.db):
            request = FriendRequest(from_user_id=from_user_id, to_user_id=to_user_id)
            self.db.add(request)
            self.db.flush()
            self.notifications.notify(
                to_user_id, NOTIFICATION_FRIEND_REQUEST, from_user_id=from_user_id
            )
        return request

    def _accept(self, request: FriendRequest) -> Friendship:
        with atomic(self.db):
            already = self.friendships.are_friends(request.from_user_id, request.to_user_id)
            edge = self.friendships.add_edge(request.from_user_id, request.to_user_id)
            if not already:
                self.notifications.notify(
                    request.from_user_id,
                    NOTIFICATION_FRIEND_ACCEPT,
                    from_user_id=request.to_user_id,
                )
            self.db.delete(request)
        return edge

    def respond_to_friend_request(
        self, request_id: int, action: str, acting_user_id: int
    ) -> Friendship | None:
        """Accept or reject a request addressed to ``acting_user_id``.

        The request row is deleted whatever the answer.
        """
        if action not in ("accept", "reject"):
            raise ValidationFailed("Invalid action")
        request = self.db.get(FriendRequest, request_id)
        if request is None:
            raise NotFound("Friend request not found")
        if request.to_user_id != acting_user_id:
            raise PermissionDenied("Only the recipient can respond to this request")
        if action == "accept":
            return self._accept(request)
        self.db.delete(request)
        self.db.commit()
        return None

    def unfriend(self, user_id: int, friend_id: int) -> None:
        """Remove the friendship between the two users."""
        edge = self.friendships.get_edge(user_id, friend_id)
        if edge is None:
            raise NotFound("Not connected with this user")
        self.db.delete(edge)
        self.db.commit()
        logger.info("User %s unfriended %s", user_id, friend_id)

    def incoming_requests(self, user_id: int) -> list[FriendRequest]:
        stmt = (
            select(FriendRequest)
            .options(joinedload(FriendRequest.from_user))
            .where(FriendRequest.to_user_id == user_id)
            .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
        )
        return list(self.db.scalars(stmt))

    def outgoing_requests(self, user_id: int) -> list[FriendRequest]:
        stmt = (
            select(FriendRequest)
            .options(joinedload(FriendRequest.to_user))
            .where(FriendRequest.from_user_id == user_id)
            .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
        )
        return list(self.db.scalars(stmt))
