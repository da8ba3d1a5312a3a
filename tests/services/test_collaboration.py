# tests/services/test_collaboration.py
"""Tests for lists, invitations, access requests and role resolution."""

import pytest

from aura_share.core.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from aura_share.models import AccessRequest, ListAccess, Notification, Post, PostList
from aura_share.services import NewPost


def test_owner_role_short_circuits(collaboration, test_user, private_list):
    role = collaboration.resolve_role(test_user.id, private_list.id)
    assert role.has_access and role.role == "owner"
    assert role.can_post


def test_anonymous_and_missing_list_have_no_role(collaboration, test_user, private_list):
    assert not collaboration.resolve_role(None, private_list.id).has_access
    assert not collaboration.resolve_role(test_user.id, 99999).has_access


def test_invite_then_accept_grants_role(
    db_session, collaboration, test_user, other_user, private_list
):
    """A pending invitation grants nothing until it is accepted."""
    access = collaboration.invite(private_list.id, other_user.id, "collaborator", test_user.id)
    assert access.status == "pending"
    assert not collaboration.resolve_role(other_user.id, private_list.id).has_access

    notes = db_session.query(Notification).filter_by(user_id=other_user.id).all()
    assert [n.type for n in notes] == ["list_invite"]

    collaboration.respond(access.id, other_user.id, "accept")
    role = collaboration.resolve_role(other_user.id, private_list.id)
    assert role.has_access and role.role == "collaborator" and role.can_post


def test_reinvite_updates_existing_grant(
    db_session, collaboration, test_user, other_user, private_list
):
    """Re-inviting keeps one row per (list, user) and resets it to pending."""
    first = collaboration.invite(private_list.id, other_user.id, "viewer", test_user.id)
    collaboration.respond(first.id, other_user.id, "accept")
    second = collaboration.invite(private_list.id, other_user.id, "collaborator", test_user.id)

    assert second.id == first.id
    assert second.status == "pending" and second.role == "collaborator"
    rows = db_session.query(ListAccess).filter_by(list_id=private_list.id).count()
    assert rows == 1


def test_rejected_invitation_cannot_be_accepted(
    collaboration, test_user, other_user, private_list
):
    access = collaboration.invite(private_list.id, other_user.id, "viewer", test_user.id)
    collaboration.respond(access.id, other_user.id, "reject")
    assert collaboration.respond(access.id, other_user.id, "reject").status == "rejected"

    with pytest.raises(Conflict):
        collaboration.respond(access.id, other_user.id, "accept")
    assert not collaboration.resolve_role(other_user.id, private_list.id).has_access

    again = collaboration.invite(private_list.id, other_user.id, "viewer", test_user.id)
    assert collaboration.respond(again.id, other_user.id, "accept").status == "accepted"


def test_invite_rules(collaboration, test_user, other_user, private_list, public_list):
    with pytest.raises(PermissionDenied):
        collaboration.invite(private_list.id, test_user.id, "viewer", other_user.id)
    with pytest.raises(ValidationFailed):
        collaboration.invite(private_list.id, test_user.id, "viewer", test_user.id)
    with pytest.raises(ValidationFailed):
        collaboration.invite(private_list.id, other_user.id, "owner", test_user.id)
    with pytest.raises(ValidationFailed):
        collaboration.invite(public_list.id, other_user.id, "viewer", test_user.id)
    with pytest.raises(NotFound):
        collaboration.invite(private_list.id, 99999, "viewer", test_user.id)


def test_viewer_cannot_post_but_collaborator_can(
    db_session, collaboration, content, test_user, other_user, third_user, private_list
):
    collaboration.add_collaborator(private_list.id, other_user.id, "collaborator", test_user.id)
    collaboration.add_collaborator(private_list.id, third_user.id, "viewer", test_user.id)

    data = NewPost(
        primary_link="https://x.test", primary_description="guest", list_id=private_list.id
    )
    post = content.create_post(other_user, data)
    assert post.list_id == private_list.id

    with pytest.raises(PermissionDenied):
        content.create_post(third_user, data)


def test_remove_access_revokes_visibility(
    collaboration, visibility, test_user, other_user, private_list, post_factory
):
    post = post_factory(test_user, private_list, "private")
    collaboration.add_collaborator(private_list.id, other_user.id, "viewer", test_user.id)
    assert visibility.is_visible(post, other_user.id)

    collaboration.remove_access(private_list.id, other_user.id, test_user.id)
    assert not visibility.is_visible(post, other_user.id)
    with pytest.raises(NotFound):
        collaboration.remove_access(private_list.id, other_user.id, test_user.id)


def test_private_list_cannot_become_public(collaboration, test_user, private_list):
    with pytest.raises(ValidationFailed):
        collaboration.update_privacy(private_list.id, test_user.id, "public")
    updated = collaboration.update_privacy(private_list.id, test_user.id, "connections")
    assert updated.privacy_level == "connections"


def test_delete_list_moves_posts_to_default(
    db_session, collaboration, test_user, other_user, public_list, post_factory
):
    """Deleting a list keeps its posts by moving them to the owner's default list."""
    posts = [post_factory(test_user, public_list) for _ in range(3)]
    collaboration.add_collaborator(public_list.id, other_user.id, "viewer", test_user.id)

    moved = collaboration.delete_list(public_list.id, test_user.id)

    assert moved == 3
    default = collaboration.default_list(test_user.id)
    assert default.is_default
    for post in posts:
        db_session.refresh(post)
        assert post.list_id == default.id
    assert db_session.get(PostList, public_list.id) is None
    assert db_session.query(ListAccess).filter_by(list_id=public_list.id).count() == 0


def test_default_list_cannot_be_deleted(db_session, collaboration, test_user):
    default = collaboration.default_list(test_user.id)
    db_session.commit()
    with pytest.raises(ValidationFailed):
        collaboration.delete_list(default.id, test_user.id)


def test_only_owner_deletes_list(collaboration, other_user, public_list):
    with pytest.raises(PermissionDenied):
        collaboration.delete_list(public_list.id, other_user.id)


def test_access_request_approval_grants_requested_role(
    db_session, collaboration, test_user, other_user, private_list
):
    request = collaboration.create_access_request(
        private_list.id, other_user.id, "viewer", "please"
    )
    owner_notes = db_session.query(Notification).filter_by(user_id=test_user.id).all()
    assert [n.type for n in owner_notes] == ["access_request"]

    access = collaboration.respond_to_access_request(request.id, "approve", test_user.id)

    assert access is not None and access.role == "viewer" and access.status == "accepted"
    assert db_session.get(AccessRequest, request.id) is None
    assert collaboration.resolve_role(other_user.id, private_list.id).role == "viewer"


def test_access_request_rejection_removes_request(
    db_session, collaboration, test_user, other_user, private_list
):
    request = collaboration.create_access_request(private_list.id, other_user.id, "collaborator")
    assert collaboration.respond_to_access_request(request.id, "reject", test_user.id) is None
    assert db_session.get(AccessRequest, request.id) is None
    assert not collaboration.resolve_role(other_user.id, private_list.id).has_access


def test_access_request_rules(collaboration, test_user, other_user, private_list, public_list):
    with pytest.raises(ValidationFailed):
        collaboration.create_access_request(public_list.id, other_user.id, "viewer")
    with pytest.raises(ValidationFailed):
        collaboration.create_access_request(private_list.id, test_user.id, "viewer")

    collaboration.add_collaborator(private_list.id, other_user.id, "viewer", test_user.id)
    with pytest.raises(Conflict):
        collaboration.create_access_request(private_list.id, other_user.id, "collaborator")


def test_create_post_in_unknown_list(content, test_user):
    with pytest.raises(NotFound):
        content.create_post(
            test_user, NewPost(primary_link="https://x.test", primary_description="d", list_id=4242)
        )


def test_create_post_defaults_to_general_list(db_session, content, test_user):
    post = content.create_post(
        test_user, NewPost(primary_link="https://x.test", primary_description="d")
    )
    post_list = db_session.get(PostList, post.list_id)
    assert post_list.is_default and post_list.user_id == test_user.id
    assert db_session.get(Post, post.id).privacy == "public"
