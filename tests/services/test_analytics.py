# tests/services/test_analytics.py
"""Tests for dashboard metrics and the cosmic score."""

import pytest

from aura_share.repositories import FriendshipRepository
from aura_share.services import AnalyticsService, NewPost
from aura_share.services.analytics import aura_amplifier, cosmic_score, system_health


@pytest.fixture()
def analytics(db_session):
    return AnalyticsService(db_session)


@pytest.mark.parametrize(
    ("rating", "expected"),
    [(7, 1.5), (6.2, 1.4), (5, 1.2), (4, 1.0), (None, 1.0), (3, 0.8), (2, 0.6), (1, 0.5)],
)
def test_aura_amplifier(rating, expected):
    assert aura_amplifier(rating) == expected


def test_cosmic_score_weights():
    # 3 likes, 2 shares, 1 tag, 4 posts (x5) and two blocks of five friends (x10)
    assert cosmic_score(3, 2, 1, 4, 10, 4.0) == 46
    assert cosmic_score(3, 2, 1, 4, 10, 7.0) == 69
    assert cosmic_score(0, 0, 0, 0, 4, 4.0) == 0


@pytest.mark.parametrize(
    ("flags", "expected"),
    [(0, "excellent"), (5, "excellent"), (6, "good"), (11, "warning"), (21, "critical")],
)
def test_system_health(flags, expected):
    assert system_health(flags) == expected


def test_cosmic_metrics_for_user(
    db_session, analytics, engagement, content, test_user, other_user, test_post, list_factory,
    post_factory,
):
    their_post = post_factory(other_user, list_factory(other_user, "public"))
    engagement.like(their_post.id, test_user.id)
    engagement.share(their_post.id, test_user.id)
    content.tag_users(test_post.id, test_user.id, [other_user.id])
    FriendshipRepository(db_session).add_edge(test_user.id, other_user.id)
    db_session.commit()

    metrics = analytics.cosmic_metrics(test_user)

    assert (metrics.posts, metrics.likes, metrics.shares, metrics.tags, metrics.friends) == (
        1,
        1,
        1,
        1,
        1,
    )
    assert metrics.amplifier == 1.0
    assert metrics.cosmic_score == 8


def test_users_with_metrics_sorted_and_filtered(
    analytics, test_user, other_user, public_list, post_factory
):
    for _ in range(2):
        post_factory(test_user, public_list)

    ranked = analytics.users_with_metrics()
    assert [m.user.id for m in ranked] == [test_user.id, other_user.id]
    assert [m.user.id for m in analytics.users_with_metrics(min_score=1)] == [test_user.id]
    assert [m.user.id for m in analytics.users_with_metrics(max_score=0)] == [other_user.id]
    assert [m.user.id for m in analytics.users_with_metrics(search="other")] == [other_user.id]


def test_dashboard_metrics(
    db_session, analytics, engagement, content, flagging, test_user, other_user, test_post
):
    engagement.like(test_post.id, other_user.id)
    engagement.view(test_post.id, other_user.id)
    content.create_comment(test_post.id, other_user.id, "great find")
    flagging.flag_post(test_post.id, other_user.id, "spam")

    metrics = analytics.dashboard_metrics()

    assert metrics["total_users"] == 2
    assert metrics["total_posts"] == 1
    assert metrics["total_lists"] == 1
    assert metrics["total_likes"] == 1
    assert metrics["total_views"] == 1
    assert metrics["total_comments"] == 1
    assert metrics["flagged_content"] == 1
    assert metrics["pending_reviews"] == 0
    assert metrics["posts_today"] == 1
    assert metrics["avg_posts_per_user"] == 0.5
    assert metrics["system_health"] == "excellent"


def test_daily_series(analytics, test_user, test_post):
    growth = analytics.user_growth(days=7)
    assert sum(day["count"] for day in growth) == 1
    assert sum(day["count"] for day in analytics.content_stats(days=7)) == 1
    assert analytics.moderation_stats(days=7) == []


def test_top_hashtags(analytics, content, test_user):
    for tags in (["jazz", "vinyl"], ["jazz"]):
        content.create_post(
            test_user,
            NewPost(primary_link="https://x.test", primary_description="d", hashtags=tags),
        )
    assert analytics.top_hashtags() == [
        {"name": "jazz", "count": 2},
        {"name": "vinyl", "count": 1},
    ]
