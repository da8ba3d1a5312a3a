"""Data access helpers for lists and list access grants."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from aura_share.models import ListAccess, PostList
from aura_share.models.lists import ACCESS_ACCEPTED, PRIVACY_PUBLIC

__all__ = ["ListRepository"]


class ListRepository:
    """Queries over lists and their access rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, list_id: int) -> PostList | None:
        """Return a list by identifier."""
        return self.session.get(PostList, list_id)

    def owned_by(self, user_id: int) -> list[PostList]:
        """Return lists owned by ``user_id``, default list first."""
        stmt = (
            select(PostList)
            .where(PostList.user_id == user_id)
            .order_by(PostList.is_default.desc(), PostList.created_at, PostList.id)
        )
        return list(self.session.scalars(stmt))

    def get_access(self, list_id: int, user_id: int) -> ListAccess | None:
        """Return the access row for (list, user) whatever its status."""
        stmt = select(ListAccess).where(
            ListAccess.list_id == list_id, ListAccess.user_id == user_id
        )
        return self.session.scalars(stmt).first()

    def accepted_access(self, list_id: int, user_id: int) -> ListAccess | None:
        """Return the accepted access row for (list, user), if any."""
        access = self.get_access(list_id, user_id)
        if access is None or access.status != ACCESS_ACCEPTED:
            return None
        return access

    def accessible_list_ids(self, user_id: int) -> set[int]:
        """Return ids of lists ``user_id`` owns or holds accepted access to."""
        owned = self.session.scalars(select(PostList.id).where(PostList.user_id == user_id))
        granted = self.session.scalars(
            select(ListAccess.list_id).where(
                ListAccess.user_id == user_id, ListAccess.status == ACCESS_ACCEPTED
            )
        )
        return set(owned) | set(granted)

    def default_for(self, user_id: int, name: str) -> PostList:
        """Return the user's default list, creating it on first use."""
        stmt = select(PostList).where(PostList.user_id == user_id, PostList.is_default.is_(True))
        existing = self.session.scalars(stmt).first()
        if existing is not None:
            return existing
        default_list = PostList(
            user_id=user_id,
            name=name,
            description="Default list for all posts",
            privacy_level=PRIVACY_PUBLIC,
            is_default=True,
        )
        self.session.add(default_list)
        self.session.flush()
        return default_list
