# tests/services/test_social_graph.py
"""Tests for friend requests and the friendship graph."""

import pytest

from aura_share.core.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from aura_share.models import FriendRequest, Friendship, Notification


def test_accepting_request_creates_single_edge(db_session, social, test_user, other_user):
    """Friendship is stored once and answers symmetrically."""
    request = social.send_friend_request(test_user.id, other_user.id)
    assert isinstance(request, FriendRequest)

    social.respond_to_friend_request(request.id, "accept", other_user.id)

    assert db_session.query(Friendship).count() == 1
    assert social.are_friends(test_user.id, other_user.id)
    assert social.are_friends(other_user.id, test_user.id)
    assert db_session.get(FriendRequest, request.id) is None
    assert [u.id for u in social.friends(test_user.id)] == [other_user.id]
    assert [u.id for u in social.friends(other_user.id)] == [test_user.id]


def test_crossing_requests_connect_immediately(db_session, social, test_user, other_user):
    """A request answering an opposite pending request accepts it."""
    social.send_friend_request(other_user.id, test_user.id)
    result = social.send_friend_request(test_user.id, other_user.id)

    assert isinstance(result, Friendship)
    assert social.are_friends(test_user.id, other_user.id)
    assert db_session.query(FriendRequest).count() == 0
    accept_notes = db_session.query(Notification).filter_by(type="friend_accept").all()
    assert [n.user_id for n in accept_notes] == [other_user.id]


def test_rejecting_request_leaves_users_unconnected(db_session, social, test_user, other_user):
    request = social.send_friend_request(test_user.id, other_user.id)
    assert social.respond_to_friend_request(request.id, "reject", other_user.id) is None
    assert not social.are_friends(test_user.id, other_user.id)
    assert db_session.get(FriendRequest, request.id) is None


def test_request_rules(social, test_user, other_user):
    with pytest.raises(ValidationFailed):
        social.send_friend_request(test_user.id, test_user.id)
    with pytest.raises(NotFound):
        social.send_friend_request(test_user.id, 99999)

    social.send_friend_request(test_user.id, other_user.id)
    with pytest.raises(Conflict):
        social.send_friend_request(test_user.id, other_user.id)


def test_only_recipient_answers(social, test_user, other_user, third_user):
    request = social.send_friend_request(test_user.id, other_user.id)
    with pytest.raises(PermissionDenied):
        social.respond_to_friend_request(request.id, "accept", third_user.id)
    with pytest.raises(ValidationFailed):
        social.respond_to_friend_request(request.id, "maybe", other_user.id)


def test_already_friends_conflict(social, test_user, other_user):
    request = social.send_friend_request(test_user.id, other_user.id)
    social.respond_to_friend_request(request.id, "accept", other_user.id)
    with pytest.raises(Conflict):
        social.send_friend_request(other_user.id, test_user.id)


def test_unfriend_from_either_side(social, test_user, other_user):
    request = social.send_friend_request(test_user.id, other_user.id)
    social.respond_to_friend_request(request.id, "accept", other_user.id)

    social.unfriend(other_user.id, test_user.id)

    assert not social.are_friends(test_user.id, other_user.id)
    with pytest.raises(NotFound):
        social.unfriend(test_user.id, other_user.id)


def test_pending_requests_listed_per_direction(social, test_user, other_user, third_user):
    social.send_friend_request(other_user.id, test_user.id)
    social.send_friend_request(third_user.id, test_user.id)

    incoming = social.incoming_requests(test_user.id)
    assert {r.from_user_id for r in incoming} == {other_user.id, third_user.id}
    assert [r.to_user_id for r in social.outgoing_requests(other_user.id)] == [test_user.id]
