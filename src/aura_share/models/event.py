# src/aura_share/models/event.py
"""RSVP records for event posts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aura_share.db.session import Base
from aura_share.db.time import utcnow
from aura_share.models.user import User

RSVP_GOING = "going"
RSVP_MAYBE = "maybe"
RSVP_NOT_GOING = "not_going"
RSVP_STATUSES = (RSVP_GOING, RSVP_MAYBE, RSVP_NOT_GOING)


class Rsvp(Base):
    """A user's answer to an event post."""

    __tablename__ = "rsvps"
    __table_args__ = (
        CheckConstraint(
            "status IN ('going', 'maybe', 'not_going')", name="ck_rsvp_status"
        ),
    )

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), primary_key=True)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped[User] = relationship("User")
