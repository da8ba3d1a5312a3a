"""Aggregate metrics for the admin dashboard."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from aura_share.db.time import utcnow
from aura_share.models import (
    Comment,
    ContentReviewItem,
    Friendship,
    Hashtag,
    ModerationAction,
    Post,
    PostFlag,
    PostHashtag,
    PostLike,
    PostList,
    PostShare,
    PostView,
    TaggedPost,
    User,
)
from aura_share.models.admin import REVIEW_STATUS_PENDING
from aura_share.models.user import DEFAULT_AURA_RATING

__all__ = ["AnalyticsService", "CosmicMetrics", "aura_amplifier", "cosmic_score", "system_health"]

logger = logging.getLogger(__name__)

AURA_AMPLIFIERS = {7: 1.5, 6: 1.4, 5: 1.2, 4: 1.0, 3: 0.8, 2: 0.6, 1: 0.5}


def aura_amplifier(aura_rating: float | None) -> float:
    """Multiplier applied to engagement points for a given aura rating."""
    rating = DEFAULT_AURA_RATING if aura_rating is None else aura_rating
    return AURA_AMPLIFIERS.get(round(rating), 1.0)


def cosmic_score(
    likes: int,
    shares: int,
    tags: int,
    posts: int,
    friends: int,
    aura_rating: float | None,
) -> int:
    points = likes + shares + tags + 5 * posts + 10 * (friends // 5)
    return round(points * aura_amplifier(aura_rating))


def system_health(flag_count: int) -> str:
    """Classify overall health from the number of outstanding flags."""
    if flag_count > 20:
        return "critical"
    if flag_count > 10:
        return "warning"
    if flag_count > 5:
        return "good"
    return "excellent"


@dataclass(frozen=True)
class CosmicMetrics:
    user: User
    posts: int
    likes: int
    shares: int
    tags: int
    friends: int
    amplifier: float
    cosmic_score: int


class AnalyticsService:
    """Read-only counts, sums and averages over the store."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _count(self, model: type, *criteria: Any) -> int:
        stmt = select(func.count()).select_from(model)
        if criteria:
            stmt = stmt.where(*criteria)
        return int(self.db.scalar(stmt) or 0)

    def dashboard_metrics(self) -> dict[str, Any]:
        total_users = self._count(User, User.username.not_like("deleted_user_%"))
        total_posts = self._count(Post)
        total_lists = self._count(PostList)
        flagged = self._count(PostFlag)
        since = utcnow() - timedelta(days=1)
        return {
            "total_users": total_users,
            "total_posts": total_posts,
            "total_lists": total_lists,
            "flagged_content": flagged,
            "pending_reviews": self._count(
                ContentReviewItem, ContentReviewItem.status == REVIEW_STATUS_PENDING
            ),
            "total_connections": self._count(Friendship),
            "total_views": self._count(PostView),
            "total_likes": self._count(PostLike),
            "total_comments": self._count(Comment),
            "total_shares": self._count(PostShare),
            "posts_today": self._count(Post, Post.created_at >= since),
            "new_users_today": self._count(User, User.created_at >= since),
            "avg_posts_per_user": round(total_posts / total_users, 2) if total_users else 0.0,
            "avg_lists_per_user": round(total_lists / total_users, 2) if total_users else 0.0,
            "top_hashtags": self.top_hashtags(),
            "system_health": system_health(flagged),
        }

    def top_hashtags(self, limit: int = 5) -> list[dict[str, Any]]:
        used = func.count(PostHashtag.post_id)
        stmt = (
            select(Hashtag.name, used)
            .join(PostHashtag, PostHashtag.hashtag_id == Hashtag.id)
            .group_by(Hashtag.id, Hashtag.name)
            .order_by(used.desc(), Hashtag.name)
            .limit(limit)
        )
        return [{"name": name, "count": int(total)} for name, total in self.db.execute(stmt)]

    def _daily(self, column: Any, days: int, *extra: Any) -> list[tuple[Any, ...]]:
        start = utcnow() - timedelta(days=days)
        day = func.date(column)
        stmt = (
            select(day, *extra, func.count())
            .where(column >= start)
            .group_by(day, *extra)
            .order_by(day)
        )
        return list(self.db.execute(stmt))

    def user_growth(self, days: int = 30) -> list[dict[str, Any]]:
        return [
            {"date": str(date), "count": int(total)}
            for date, total in self._daily(User.created_at, days)
        ]

    def content_stats(self, days: int = 30) -> list[dict[str, Any]]:
        return [
            {"date": str(date), "count": int(total)}
            for date, total in self._daily(Post.created_at, days)
        ]

    def moderation_stats(self, days: int = 30) -> list[dict[str, Any]]:
        return [
            {"date": str(date), "action_type": action, "actions": int(total)}
            for date, action, total in self._daily(
                ModerationAction.created_at, days, ModerationAction.action
            )
        ]

    def cosmic_metrics(self, user: User) -> CosmicMetrics:
        """Compute the engagement-weighted score for one user."""
        posts = self._count(Post, Post.user_id == user.id)
        likes = self._count(PostLike, PostLike.user_id == user.id)
        shares = self._count(PostShare, PostShare.user_id == user.id)
        tags = self._count(TaggedPost, TaggedPost.from_user_id == user.id)
        friends = self._count(
            Friendship,
            or_(Friendship.user_low_id == user.id, Friendship.user_high_id == user.id),
        )
        return CosmicMetrics(
            user=user,
            posts=posts,
            likes=likes,
            shares=shares,
            tags=tags,
            friends=friends,
            amplifier=aura_amplifier(user.aura_rating),
            cosmic_score=cosmic_score(likes, shares, tags, posts, friends, user.aura_rating),
        )

    def users_with_metrics(
        self,
        search: str | None = None,
        min_score: int | None = None,
        max_score: int | None = None,
        limit: int = 100,
    ) -> list[CosmicMetrics]:
        """Return users with their cosmic metrics, highest score first."""
        stmt = select(User).where(User.username.not_like("deleted_user_%"))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(User.username.ilike(pattern), User.name.ilike(pattern)))
        stmt = stmt.order_by(User.id).limit(limit)

        results = []
        for user in self.db.scalars(stmt):
            metrics = self.cosmic_metrics(user)
            if min_score is not None and metrics.cosmic_score < min_score:
                continue
            if max_score is not None and metrics.cosmic_score > max_score:
                continue
            results.append(metrics)
        results.sort(key=lambda m: m.cosmic_score, reverse=True)
        return results
