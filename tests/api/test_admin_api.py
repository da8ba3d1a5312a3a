# mypy: ignore-errors
# tests/api/test_admin_api.py
"""Tests for the admin API: sessions, permissions, moderation and analytics."""

from fastapi import status

from aura_share.models import AuditLog


def test_login_me_logout(client, db_session, admin_user) -> None:
    response = client.post(
        "/api/admin/auth/login", json={"username": "rootadmin", "password": "password123"}
    )
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["session_token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = client.get("/api/admin/auth/me", headers=headers)
    assert me.json()["username"] == "rootadmin"
    assert me.json()["role"] == "super_admin"

    assert client.post("/api/admin/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/admin/auth/me", headers=headers).status_code == 401

    actions = [entry.action for entry in db_session.query(AuditLog).order_by(AuditLog.id)]
    assert actions == ["login_success", "logout"]


def test_login_rejects_bad_password(client, admin_user) -> None:
    response = client.post(
        "/api/admin/auth/login", json={"username": "rootadmin", "password": "nope"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_user_token_is_not_an_admin_session(client, auth_token) -> None:
    """Regular user JWTs never open the admin API."""
    assert client.get("/api/admin/auth/me").status_code == status.HTTP_401_UNAUTHORIZED
    assert client.get("/api/admin/auth/me", headers=auth_token).status_code == 401


def test_permissions_are_enforced(client, moderator_headers, test_user) -> None:
    """A content moderator cannot touch accounts, config or analytics."""
    assert client.get("/api/admin/moderation/queue", headers=moderator_headers).status_code == 200
    for method, path in (
        ("post", f"/api/admin/users/{test_user.id}/ban"),
        ("get", "/api/admin/system/config"),
        ("get", "/api/admin/dashboard/metrics"),
        ("get", "/api/admin/admins"),
    ):
        kwargs = {"json": {"reason": "x"}} if method == "post" else {}
        response = getattr(client, method)(path, headers=moderator_headers, **kwargs)
        assert response.status_code == status.HTTP_403_FORBIDDEN, path


def test_ban_and_unban_user(client, test_user, auth_token, admin_headers) -> None:
    response = client.post(
        f"/api/admin/users/{test_user.id}/ban", json={"reason": "spam"}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["action"] == "ban"
    assert client.get("/api/auth/verify", headers=auth_token).status_code == 403

    again = client.post(
        f"/api/admin/users/{test_user.id}/ban", json={"reason": "spam"}, headers=admin_headers
    )
    assert again.status_code == status.HTTP_409_CONFLICT

    response = client.post(
        f"/api/admin/users/{test_user.id}/unban", json={"reason": "appeal"}, headers=admin_headers
    )
    assert response.json()["action"] == "unban"
    assert client.get("/api/auth/verify", headers=auth_token).status_code == 200

    history = client.get(
        f"/api/admin/users/{test_user.id}/moderation-history", headers=admin_headers
    ).json()
    assert [h["action"] for h in history] == ["unban", "ban"]


def test_user_search_and_metrics(client, test_user, other_user, test_post, admin_headers) -> None:
    found = client.get("/api/admin/users/search", params={"q": "test"}, headers=admin_headers)
    assert [u["id"] for u in found.json()] == [test_user.id]

    metrics = client.get("/api/admin/users/metrics", headers=admin_headers).json()
    assert metrics[0]["id"] == test_user.id
    assert metrics[0]["cosmic_score"] == 5
    assert metrics[0]["is_banned"] is False


def test_purge_user(client, test_user, auth_token, admin_headers) -> None:
    response = client.delete(f"/api/admin/users/{test_user.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert client.get("/api/auth/verify", headers=auth_token).status_code == 401


def test_remove_restore_and_reverse(client, test_post, moderator_headers) -> None:
    base = f"/api/admin/content/post/{test_post.id}"
    removed = client.post(f"{base}/remove", json={"reason": "graphic"}, headers=moderator_headers)
    assert removed.status_code == status.HTTP_200_OK
    assert client.get(f"/api/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND

    restored = client.post(f"{base}/restore", json={"reason": "ok"}, headers=moderator_headers)
    assert restored.json()["action"] == "restore"
    assert client.get(f"/api/posts/{test_post.id}").status_code == status.HTTP_200_OK

    reversed_action = client.post(
        f"/api/admin/moderation/actions/{removed.json()['id']}/reverse",
        json={"reason": "second look"},
        headers=moderator_headers,
    )
    assert reversed_action.json()["status"] == "reversed"

    history = client.get(f"{base}/moderation-history", headers=moderator_headers).json()
    assert [h["action"] for h in history] == ["restore", "remove"]


def test_unknown_content_type_is_rejected(client, test_post, moderator_headers) -> None:
    response = client.post(
        f"/api/admin/content/list/{test_post.id}/remove",
        json={"reason": "x"},
        headers=moderator_headers,
    )
    assert response.status_code == 422


def test_flagged_content_and_review_queue(
    client, test_post, other_auth_token, third_auth_token, moderator_headers
) -> None:
    """Auto-removal queues the post; a moderator can approve it back."""
    for headers in (other_auth_token, third_auth_token):
        client.post(f"/api/posts/{test_post.id}/flag", json={"reason": "spam"}, headers=headers)

    flagged = client.get("/api/admin/moderation/flagged-content", headers=moderator_headers)
    assert [(f["post"]["id"], f["flag_count"], f["removed"]) for f in flagged.json()] == [
        (test_post.id, 2, True)
    ]

    queue = client.get(
        "/api/admin/moderation/queue", params={"status": "pending"}, headers=moderator_headers
    ).json()
    assert [(i["content_id"], i["priority"]) for i in queue] == [(test_post.id, "high")]
    item_id = queue[0]["id"]

    assigned = client.post(
        f"/api/admin/moderation/queue/{item_id}/assign", headers=moderator_headers
    )
    assert assigned.json()["status"] == "assigned"

    processed = client.post(
        f"/api/admin/moderation/queue/{item_id}/process",
        json={"action": "approve", "reason": "false alarm"},
        headers=moderator_headers,
    )
    assert processed.json()["action"] == "approve"
    assert client.get(f"/api/posts/{test_post.id}").status_code == status.HTTP_200_OK

    again = client.post(
        f"/api/admin/moderation/queue/{item_id}/process",
        json={"action": "remove", "reason": "changed mind"},
        headers=moderator_headers,
    )
    assert again.status_code == status.HTTP_409_CONFLICT


def test_manual_queue_entry(client, test_post, moderator_headers) -> None:
    response = client.post(
        "/api/admin/moderation/queue",
        json={"content_type": "post", "content_id": test_post.id, "reason": "check"},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["priority"] == "medium"


def test_system_config_and_audit_log(client, admin_headers, admin_user) -> None:
    response = client.put(
        "/api/admin/system/config/maintenance_mode",
        json={"value": "true", "type": "boolean", "category": "features"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["updated_by"] == admin_user.id

    config = client.get("/api/admin/system/config", headers=admin_headers).json()
    assert [(c["key"], c["value"]) for c in config] == [("maintenance_mode", "true")]

    logs = client.get(
        "/api/admin/audit-logs", params={"action": "system_config_updated"}, headers=admin_headers
    ).json()
    assert len(logs) == 1
    assert logs[0]["details"]["new_value"] == "true"


def test_admin_account_management(client, admin_user, admin_headers) -> None:
    created = client.post(
        "/api/admin/admins",
        json={
            "username": "helper",
            "password": "longpassword",
            "email": "helper@example.com",
            "role": "moderator",
            "permissions": ["content_moderation"],
        },
        headers=admin_headers,
    )
    assert created.status_code == status.HTTP_201_CREATED
    helper_id = created.json()["id"]

    updated = client.patch(
        f"/api/admin/admins/{helper_id}", json={"permissions": ["analytics"]}, headers=admin_headers
    )
    assert updated.json()["permissions"] == ["analytics"]

    admins = client.get("/api/admin/admins", headers=admin_headers).json()
    usernames = {a["username"] for a in admins}
    assert usernames == {"rootadmin", "helper"}

    self_delete = client.delete(f"/api/admin/admins/{admin_user.id}", headers=admin_headers)
    assert self_delete.status_code == status.HTTP_403_FORBIDDEN
    assert client.delete(f"/api/admin/admins/{helper_id}", headers=admin_headers).status_code == 200


def test_dashboard_and_series(client, test_post, admin_headers) -> None:
    metrics = client.get("/api/admin/dashboard/metrics", headers=admin_headers).json()
    assert metrics["total_users"] == 1
    assert metrics["total_posts"] == 1
    assert metrics["system_health"] == "excellent"

    users = client.get("/api/admin/analytics/users", headers=admin_headers).json()
    assert sum(day["count"] for day in users) == 1
    assert client.get("/api/admin/analytics/moderation", headers=admin_headers).json() == []
    unknown = client.get("/api/admin/analytics/weather", headers=admin_headers)
    assert unknown.status_code == 422
