"""Unit tests for the ORM models in aura_share.models.

These tests verify mapping details other code relies on: table names,
composite primary keys and the canonical friendship edge.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from aura_share import models
from aura_share.models import Friendship


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert models.User.__tablename__ == "users"
    assert models.PostList.__tablename__ == "lists"
    assert models.ListAccess.__tablename__ == "list_access"
    assert models.Post.__tablename__ == "posts"
    assert models.PostFlag.__tablename__ == "post_flags"
    assert models.ContentReviewItem.__tablename__ == "content_review_queue"


@pytest.mark.parametrize(
    ("model", "expected"),
    [
        (models.PostLike, {"post_id", "user_id"}),
        (models.PostFlag, {"post_id", "user_id"}),
        (models.TaggedPost, {"post_id", "to_user_id"}),
        (models.Friendship, {"user_low_id", "user_high_id"}),
        (models.ProfileEnergyRating, {"profile_id", "user_id"}),
        (models.Rsvp, {"post_id", "user_id"}),
    ],
)
def test_composite_primary_keys(model, expected):
    """Per-user engagement tables are keyed by (subject, actor)."""
    assert {c.name for c in model.__table__.primary_key} == expected


def test_friendship_canonical_order():
    """The storage key puts the lower id first regardless of argument order."""
    assert Friendship.canonical(7, 3) == (3, 7)
    assert Friendship.canonical(3, 7) == (3, 7)


def test_friendship_other_end():
    edge = Friendship(user_low_id=2, user_high_id=9)
    assert edge.other(2) == 9
    assert edge.other(9) == 2


def test_friendship_rejects_non_canonical_rows(db_session, test_user, other_user):
    """The check constraint refuses an edge stored high-to-low."""
    low, high = sorted((test_user.id, other_user.id))
    db_session.add(Friendship(user_low_id=high, user_high_id=low))
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_deleted_user_marker(test_user):
    assert not test_user.is_deleted
    test_user.username = f"deleted_user_{test_user.id}_0"
    assert test_user.is_deleted
