"""Data access helpers for the friendship graph."""
from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from aura_share.models import Friendship

__all__ = ["FriendshipRepository"]


class FriendshipRepository:
    """Queries over the undirected friendship edge set."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_edge(self, a: int, b: int) -> Friendship | None:
        """Return the edge joining ``a`` and ``b`` if it exists."""
        if a == b:
            return None
        return self.session.get(Friendship, Friendship.canonical(a, b))

    def are_friends(self, a: int, b: int) -> bool:
        """Return True when ``a`` and ``b`` are connected."""
        return self.get_edge(a, b) is not None

    def add_edge(self, a: int, b: int) -> Friendship:
        """Insert the edge for ``a`` and ``b`` unless it is already present."""
        edge = self.get_edge(a, b)
        if edge is not None:
            return edge
        low, high = Friendship.canonical(a, b)
        edge = Friendship(user_low_id=low, user_high_id=high)
        self.session.add(edge)
        self.session.flush()
        return edge

    def edges_for(self, user_id: int) -> list[Friendship]:
        """Return every edge touching ``user_id``."""
        stmt = select(Friendship).where(
            or_(Friendship.user_low_id == user_id, Friendship.user_high_id == user_id)
        )
        return list(self.session.scalars(stmt))

    def friend_ids(self, user_id: int) -> set[int]:
        """Return the ids of everyone connected to ``user_id``."""
        return {edge.other(user_id) for edge in self.edges_for(user_id)}
