# src/aura_share/models/user.py
"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from aura_share.db.session import Base
from aura_share.db.time import utcnow

DEFAULT_AURA_RATING = 4.0


class User(Base):
    """A person using the site.

    Accounts are never removed; deletion overwrites the identifying columns
    and leaves the row in place.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    profile_picture_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Privacy applied to new posts when the client does not pick one.
    default_privacy: Mapped[str] = mapped_column(Text, nullable=False, default="public")
    # Mean of received profile energy ratings on the 1..7 scale.
    aura_rating: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_AURA_RATING)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def is_deleted(self) -> bool:
        """Return True for accounts removed by the soft-delete convention."""
        return self.username.startswith("deleted_user_")
