"""Likes, shares, views, saves, reposts and energy ratings."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from aura_share.core.errors import NotFound, ValidationFailed
from aura_share.models import (
    Comment,
    Post,
    PostEnergyRating,
    PostLike,
    PostSave,
    PostShare,
    PostView,
    ProfileEnergyRating,
    Repost,
    User,
)
from aura_share.models.user import DEFAULT_AURA_RATING
from aura_share.services.visibility import VisibilityService

__all__ = ["EnergyStats", "EngagementService", "PostStats"]

logger = logging.getLogger(__name__)

ENERGY_MIN = 1
ENERGY_MAX = 7


@dataclass(frozen=True)
class PostStats:
    like_count: int
    share_count: int
    view_count: int
    save_count: int
    repost_count: int
    comment_count: int


@dataclass(frozen=True)
class EnergyStats:
    average: float
    count: int


def _check_rating(rating: int) -> None:
    if not ENERGY_MIN <= rating <= ENERGY_MAX:
        raise ValidationFailed(f"Rating must be between {ENERGY_MIN} and {ENERGY_MAX}")


class EngagementService:
    """Record per-user engagement with posts; each kind at most once per user."""

    def __init__(self, db: Session, visibility: VisibilityService) -> None:
        self.db = db
        self.visibility = visibility

    def _visible_post(self, post_id: int, user_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if post is None or post.removed:
            raise NotFound("Post not found")
        if not self.visibility.is_visible(post, user_id):
            # Hidden posts are reported as missing.
            raise NotFound("Post not found")
        return post

    def _add(self, model: type, post_id: int, user_id: int) -> bool:
        self._visible_post(post_id, user_id)
        if self.db.get(model, (post_id, user_id)) is not None:
            return False
        self.db.add(model(post_id=post_id, user_id=user_id))
        self.db.commit()
        return True

    def _remove(self, model: type, post_id: int, user_id: int) -> bool:
        row = self.db.get(model, (post_id, user_id))
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def _has(self, model: type, post_id: int, user_id: int) -> bool:
        return self.db.get(model, (post_id, user_id)) is not None

    def _count(self, model: type, post_id: int) -> int:
        return int(
            self.db.scalar(select(func.count()).select_from(model).where(model.post_id == post_id))
            or 0
        )

    def like(self, post_id: int, user_id: int) -> bool:
        """Like a post; returns False if already liked."""
        return self._add(PostLike, post_id, user_id)

    def unlike(self, post_id: int, user_id: int) -> bool:
        return self._remove(PostLike, post_id, user_id)

    def is_liked(self, post_id: int, user_id: int) -> bool:
        return self._has(PostLike, post_id, user_id)

    def share(self, post_id: int, user_id: int) -> bool:
        return self._add(PostShare, post_id, user_id)

    def is_shared(self, post_id: int, user_id: int) -> bool:
        return self._has(PostShare, post_id, user_id)

    def view(self, post_id: int, user_id: int) -> bool:
        """Record the first view of a post by a signed-in user."""
        return self._add(PostView, post_id, user_id)

    def save(self, post_id: int, user_id: int) -> bool:
        return self._add(PostSave, post_id, user_id)

    def unsave(self, post_id: int, user_id: int) -> bool:
        return self._remove(PostSave, post_id, user_id)

    def is_saved(self, post_id: int, user_id: int) -> bool:
        return self._has(PostSave, post_id, user_id)

    def repost(self, post_id: int, user_id: int) -> bool:
        post = self._visible_post(post_id, user_id)
        if post.user_id == user_id:
            raise ValidationFailed("Cannot repost your own post")
        return self._add(Repost, post_id, user_id)

    def unrepost(self, post_id: int, user_id: int) -> bool:
        return self._remove(Repost, post_id, user_id)

    def is_reposted(self, post_id: int, user_id: int) -> bool:
        return self._has(Repost, post_id, user_id)

    def post_stats(self, post_id: int) -> PostStats:
        """Return engagement counters for a post."""
        return PostStats(
            like_count=self._count(PostLike, post_id),
            share_count=self._count(PostShare, post_id),
            view_count=self._count(PostView, post_id),
            save_count=self._count(PostSave, post_id),
            repost_count=self._count(Repost, post_id),
            comment_count=self._count(Comment, post_id),
        )

    # Energy

    def rate_post(self, post_id: int, user_id: int, rating: int) -> PostEnergyRating:
        """Rate a post's energy; a second rating replaces the first."""
        _check_rating(rating)
        self._visible_post(post_id, user_id)
        row = self.db.get(PostEnergyRating, (post_id, user_id))
        if row is None:
            row = PostEnergyRating(post_id=post_id, user_id=user_id, rating=rating)
            self.db.add(row)
        else:
            row.rating = rating
        self.db.commit()
        return row

    def post_rating(self, post_id: int, user_id: int) -> int | None:
        row = self.db.get(PostEnergyRating, (post_id, user_id))
        return row.rating if row is not None else None

    def post_energy_stats(self, post_id: int) -> EnergyStats:
        average, count = self.db.execute(
            select(func.avg(PostEnergyRating.rating), func.count()).where(
                PostEnergyRating.post_id == post_id
            )
        ).one()
        if not count:
            return EnergyStats(average=DEFAULT_AURA_RATING, count=0)
        return EnergyStats(average=round(float(average), 2), count=int(count))

    def rate_profile(self, profile_id: int, user_id: int, rating: int) -> User:
        """Rate another user's profile and refresh their aura rating."""
        _check_rating(rating)
        if profile_id == user_id:
            raise ValidationFailed("Cannot rate your own profile")
        profile = self.db.get(User, profile_id)
        if profile is None:
            raise NotFound("User not found")
        row = self.db.get(ProfileEnergyRating, (profile_id, user_id))
        if row is None:
            self.db.add(ProfileEnergyRating(profile_id=profile_id, user_id=user_id, rating=rating))
        else:
            row.rating = rating
        self.db.flush()
        stats = self.profile_energy_stats(profile_id)
        profile.aura_rating = stats.average
        profile.rating_count = stats.count
        self.db.commit()
        return profile

    def profile_rating(self, profile_id: int, user_id: int) -> int | None:
        row = self.db.get(ProfileEnergyRating, (profile_id, user_id))
        return row.rating if row is not None else None

    def profile_energy_stats(self, profile_id: int) -> EnergyStats:
        average, count = self.db.execute(
            select(func.avg(ProfileEnergyRating.rating), func.count()).where(
                ProfileEnergyRating.profile_id == profile_id
            )
        ).one()
        if not count:
            return EnergyStats(average=DEFAULT_AURA_RATING, count=0)
        return EnergyStats(average=round(float(average), 2), count=int(count))
