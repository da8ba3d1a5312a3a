# tests/services/test_admin_services.py
"""Tests for admin authentication, moderation, the review queue and config."""

from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from aura_share.core.errors import (
    AuthenticationFailed,
    Conflict,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from aura_share.db.time import utcnow
from aura_share.main import bootstrap_admin
from aura_share.models import AdminSession, AdminUser, AuditLog, Comment, ModerationAction, Post
from aura_share.services import (
    AdminAccountService,
    AdminAuthService,
    ContentModerationService,
    SystemConfigService,
    UserModerationService,
)

ADMIN_PASSWORD = "password123"


@pytest.fixture()
def admin_auth(db_session, test_settings, audit):
    return AdminAuthService(db_session, test_settings, audit)


@pytest.fixture()
def user_moderation(db_session, audit, moderation_actions):
    return UserModerationService(db_session, audit, moderation_actions)


@pytest.fixture()
def content_moderation(db_session, audit, moderation_actions):
    return ContentModerationService(db_session, audit, moderation_actions)


def _actions(db_session, admin_id=None):
    query = db_session.query(AuditLog)
    if admin_id is not None:
        query = query.filter_by(admin_id=admin_id)
    return [entry.action for entry in query.order_by(AuditLog.id)]


def test_failed_login_is_audited(db_session, admin_auth, admin_user):
    with pytest.raises(AuthenticationFailed):
        admin_auth.authenticate(admin_user.username, "wrong-password")
    with pytest.raises(AuthenticationFailed):
        admin_auth.authenticate("nobody", ADMIN_PASSWORD)

    entries = db_session.query(AuditLog).order_by(AuditLog.id).all()
    assert [(e.action, e.admin_id) for e in entries] == [
        ("login_failed", admin_user.id),
        ("login_failed", None),
    ]


def test_inactive_admin_cannot_log_in(db_session, admin_auth, admin_user):
    admin_user.is_active = False
    db_session.commit()
    with pytest.raises(AuthenticationFailed):
        admin_auth.authenticate(admin_user.username, ADMIN_PASSWORD)


def test_session_lifecycle(db_session, admin_auth, admin_user):
    admin = admin_auth.authenticate(admin_user.username, ADMIN_PASSWORD, "10.0.0.1")
    assert admin.last_login is not None

    session = admin_auth.create_session(admin, ip_address="10.0.0.1")
    assert len(session.session_token) == 64
    assert admin_auth.validate_session(session.session_token).id == admin_user.id

    admin_auth.revoke_session(session.session_token)
    assert admin_auth.validate_session(session.session_token) is None
    assert _actions(db_session, admin_user.id) == ["login_success", "logout"]


def test_expired_session_is_rejected(db_session, admin_auth, admin_user):
    db_session.add(
        AdminSession(
            admin_id=admin_user.id,
            session_token="a" * 64,
            expires_at=utcnow() - timedelta(minutes=1),
        )
    )
    db_session.commit()
    assert admin_auth.validate_session("a" * 64) is None
    assert admin_auth.validate_session("b" * 64) is None


def test_bootstrap_only_once(db_session, admin_auth):
    admin = admin_auth.bootstrap_super_admin("founder", "longpassword", "founder@example.com")
    assert admin.role == "super_admin"
    assert "user_management" in admin.permissions
    with pytest.raises(Conflict):
        admin_auth.bootstrap_super_admin("second", "longpassword", "second@example.com")


def test_startup_bootstrap_is_idempotent(engine, db_session, test_settings):
    settings = test_settings.model_copy(
        update={"bootstrap_admin_username": "founder", "bootstrap_admin_password": "longpassword"}
    )
    factory = sessionmaker(bind=engine)
    bootstrap_admin(factory, settings)
    bootstrap_admin(factory, settings)

    admins = db_session.scalars(select(AdminUser)).all()
    assert [a.username for a in admins] == ["founder"]


def test_ban_and_unban(db_session, user_moderation, admin_user, test_user):
    assert not user_moderation.is_banned(test_user.id)

    user_moderation.ban_user(test_user.id, admin_user, "spam")
    assert user_moderation.is_banned(test_user.id)
    with pytest.raises(Conflict):
        user_moderation.ban_user(test_user.id, admin_user, "again")

    user_moderation.unban_user(test_user.id, admin_user, "appeal")
    assert not user_moderation.is_banned(test_user.id)
    with pytest.raises(Conflict):
        user_moderation.unban_user(test_user.id, admin_user, "again")

    assert _actions(db_session, admin_user.id) == ["user_banned", "user_unbanned"]


def test_expired_ban_no_longer_applies(user_moderation, admin_user, test_user):
    user_moderation.ban_user(
        test_user.id, admin_user, "cool off", expires_at=utcnow() - timedelta(seconds=1)
    )
    assert not user_moderation.is_banned(test_user.id)


def test_ban_unknown_user(user_moderation, admin_user):
    with pytest.raises(NotFound):
        user_moderation.ban_user(31337, admin_user, "spam")


def test_purge_user_soft_deletes(db_session, user_moderation, admin_user, test_user, test_post):
    user_moderation.purge_user(test_user.id, admin_user)

    db_session.refresh(test_user)
    assert test_user.is_deleted
    assert test_user.name == "Deleted User"
    assert db_session.get(Post, test_post.id) is None
    assert user_moderation.search_users("testuser") == []
    with pytest.raises(Conflict):
        user_moderation.purge_user(test_user.id, admin_user)


def test_remove_and_restore_post(db_session, content_moderation, admin_user, test_post):
    action = content_moderation.remove_content("post", test_post.id, admin_user, "graphic")
    assert action.action == "remove"
    db_session.refresh(test_post)
    assert test_post.removed

    content_moderation.restore_content("post", test_post.id, admin_user, "mistake")
    db_session.refresh(test_post)
    assert not test_post.removed
    assert _actions(db_session) == ["content_removed", "content_restored"]


def test_remove_comment_deletes_it(
    db_session, content, content_moderation, admin_user, other_user, test_post
):
    comment = content.create_comment(test_post.id, other_user.id, "rude")
    content_moderation.remove_content("comment", comment.id, admin_user, "abuse")
    assert db_session.get(Comment, comment.id) is None
    with pytest.raises(ValidationFailed):
        content_moderation.restore_content("comment", comment.id, admin_user, "oops")
    with pytest.raises(ValidationFailed):
        content_moderation.remove_content("list", 1, admin_user, "nope")


def test_reversing_removal_restores_post(
    db_session, content_moderation, moderation_actions, admin_user, test_post
):
    action = content_moderation.remove_content("post", test_post.id, admin_user, "graphic")

    reversed_action = moderation_actions.reverse(action.id, admin_user, "appeal upheld")

    assert reversed_action.status == "reversed"
    db_session.refresh(test_post)
    assert not test_post.removed
    assert db_session.get(ModerationAction, action.id) is not None
    with pytest.raises(Conflict):
        moderation_actions.reverse(action.id, admin_user, "twice")
    with pytest.raises(NotFound):
        moderation_actions.reverse(999, admin_user, "missing")


def test_flagged_content_ordered_by_count(
    content_moderation, flagging, test_user, other_user, third_user, public_list, post_factory
):
    flagged_twice = post_factory(test_user, public_list)
    flagging.flag_post(flagged_twice.id, other_user.id, "spam")
    flagging.flag_post(flagged_twice.id, third_user.id, "spam")
    flagged_once = post_factory(test_user, public_list)
    flagging.flag_post(flagged_once.id, other_user.id, "spam")

    assert [(p.id, n) for p, n in content_moderation.flagged_content()] == [
        (flagged_twice.id, 2),
        (flagged_once.id, 1),
    ]


def test_review_queue_flow(db_session, review_queue, admin_user, test_post):
    item = review_queue.enqueue("post", test_post.id, "reported", "low", admin_user)
    bumped = review_queue.enqueue("post", test_post.id, "reported again", "high", admin_user)
    assert bumped.id == item.id
    assert (bumped.flag_count, bumped.priority) == (2, "high")

    review_queue.assign(item.id, admin_user)
    assert review_queue.queue(status="assigned", assigned_to=admin_user.id) == [item]
    with pytest.raises(Conflict):
        review_queue.assign(item.id, admin_user)

    with pytest.raises(ValidationFailed):
        review_queue.process(item.id, "shrug", "unsure", admin_user)
    action = review_queue.process(item.id, "remove", "confirmed", admin_user)
    assert action.action == "remove"
    db_session.refresh(test_post)
    assert test_post.removed
    assert item.status == "reviewed" and item.reviewed_by == admin_user.id

    with pytest.raises(Conflict):
        review_queue.process(item.id, "approve", "changed mind", admin_user)


def test_review_queue_rejects_unknown_priority(review_queue, admin_user, test_post):
    with pytest.raises(ValidationFailed):
        review_queue.enqueue("post", test_post.id, "reported", "whenever", admin_user)


def test_system_config_upsert(db_session, audit, admin_user):
    service = SystemConfigService(db_session, audit)
    first = service.update_config("flag_threshold", "2", admin_user, "number", "moderation")
    second = service.update_config("flag_threshold", "3", admin_user, "number", "moderation")

    assert second.id == first.id
    assert [c.value for c in service.get_config("flag_threshold")] == ["3"]
    entry = db_session.query(AuditLog).order_by(AuditLog.id.desc()).first()
    assert entry.details == {"key": "flag_threshold", "old_value": "2", "new_value": "3"}


def test_admin_accounts(db_session, audit, admin_user):
    service = AdminAccountService(db_session, audit)
    mod = service.create_admin(
        "helper", "longpassword", "helper@example.com", "moderator", ["analytics"], admin_user
    )
    with pytest.raises(Conflict):
        service.create_admin(
            "helper", "longpassword", "other@example.com", "moderator", [], admin_user
        )
    with pytest.raises(ValidationFailed):
        service.create_admin("x1", "longpassword", "x1@example.com", "overlord", [], admin_user)
    with pytest.raises(ValidationFailed):
        service.create_admin(
            "x2", "longpassword", "x2@example.com", "moderator", ["god"], admin_user
        )

    updated = service.update_admin(mod.id, admin_user, permissions=["content_moderation"])
    assert updated.permissions == ["content_moderation"]

    with pytest.raises(PermissionDenied):
        service.delete_admin(admin_user.id, admin_user)
    service.delete_admin(mod.id, admin_user)
    db_session.refresh(mod)
    assert not mod.is_active
    assert mod.username == f"deleted_admin_{mod.id}"


def test_audit_log_filters(audit, db_session, admin_user, moderator):
    audit.log(admin_user.id, "user_banned", "user", 1)
    audit.log(moderator.id, "content_removed", "post", 2)
    audit.log(admin_user.id, "content_removed", "post", 3)
    db_session.commit()

    assert [e.target_id for e in audit.entries(admin_id=admin_user.id)] == [3, 1]
    assert [e.target_id for e in audit.entries(action="content_removed")] == [3, 2]
    assert [e.target_id for e in audit.entries(target="user")] == [1]
    assert len(audit.entries(limit=1)) == 1
