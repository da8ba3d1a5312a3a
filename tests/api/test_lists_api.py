# mypy: ignore-errors
# tests/api/test_lists_api.py
"""Tests for list, invitation and access request endpoints."""

from fastapi import status


def test_create_and_fetch_list(client, auth_token, other_auth_token) -> None:
    response = client.post(
        "/api/lists",
        json={"name": "Hideout", "description": "shh", "privacy_level": "private"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    list_id = response.json()["id"]
    assert response.json()["is_default"] is False

    assert client.get(f"/api/lists/{list_id}", headers=auth_token).status_code == 200
    hidden = client.get(f"/api/lists/{list_id}", headers=other_auth_token)
    assert hidden.status_code == status.HTTP_403_FORBIDDEN


def test_invitation_flow(client, other_user, private_list, auth_token, other_auth_token) -> None:
    """Invite, accept, then post into the shared list."""
    response = client.post(
        f"/api/lists/{private_list.id}/invite",
        json={"user_id": other_user.id, "role": "collaborator"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "pending"

    invitations = client.get("/api/user/list-invitations", headers=other_auth_token).json()
    assert [i["list_id"] for i in invitations] == [private_list.id]

    role = client.get(f"/api/lists/{private_list.id}/role", headers=other_auth_token).json()
    assert role == {"has_access": False, "role": None}

    accepted = client.post(f"/api/lists/{private_list.id}/accept", headers=other_auth_token)
    assert accepted.status_code == status.HTTP_200_OK
    assert accepted.json()["status"] == "accepted"

    role = client.get(f"/api/lists/{private_list.id}/role", headers=other_auth_token).json()
    assert role == {"has_access": True, "role": "collaborator"}

    post = client.post(
        "/api/posts",
        json={
            "primary_link": "https://example.com/guest",
            "primary_description": "guest find",
            "list_id": private_list.id,
        },
        headers=other_auth_token,
    )
    assert post.status_code == status.HTTP_201_CREATED

    shared = [item["id"] for item in client.get("/api/lists", headers=other_auth_token).json()]
    assert private_list.id in shared


def test_invite_by_non_owner_forbidden(
    client, test_user, private_list, other_auth_token
) -> None:
    response = client.post(
        f"/api/lists/{private_list.id}/invite",
        json={"user_id": test_user.id, "role": "viewer"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_reject_invitation(client, other_user, private_list, auth_token, other_auth_token) -> None:
    client.post(
        f"/api/lists/{private_list.id}/invite",
        json={"user_id": other_user.id, "role": "viewer"},
        headers=auth_token,
    )
    response = client.post(f"/api/lists/{private_list.id}/reject", headers=other_auth_token)
    assert response.json()["status"] == "rejected"
    role = client.get(f"/api/lists/{private_list.id}/role", headers=other_auth_token).json()
    assert role["has_access"] is False


def test_collaborator_management(
    client, other_user, private_list, auth_token, other_auth_token
) -> None:
    added = client.post(
        f"/api/lists/{private_list.id}/collaborators",
        json={"user_id": other_user.id, "role": "viewer"},
        headers=auth_token,
    )
    assert added.json()["status"] == "accepted"

    access = client.get(f"/api/lists/{private_list.id}/access", headers=auth_token).json()
    assert [(a["user_id"], a["role"]) for a in access] == [(other_user.id, "viewer")]
    assert client.get(f"/api/lists/{private_list.id}", headers=other_auth_token).status_code == 200

    removed = client.delete(
        f"/api/lists/{private_list.id}/collaborators/{other_user.id}", headers=auth_token
    )
    assert removed.status_code == status.HTTP_200_OK
    assert client.get(f"/api/lists/{private_list.id}", headers=other_auth_token).status_code == 403


def test_access_request_flow(
    client, other_user, private_list, auth_token, other_auth_token
) -> None:
    response = client.post(
        f"/api/lists/{private_list.id}/request-access",
        json={"requested_role": "viewer", "message": "let me in"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    request_id = response.json()["id"]

    pending = client.get(f"/api/lists/{private_list.id}/access-requests", headers=auth_token)
    assert [r["user_id"] for r in pending.json()] == [other_user.id]

    forbidden = client.post(
        f"/api/access-requests/{request_id}/respond",
        json={"action": "approve"},
        headers=other_auth_token,
    )
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    approved = client.post(
        f"/api/access-requests/{request_id}/respond",
        json={"action": "approve"},
        headers=auth_token,
    )
    assert approved.json() == {"success": True, "message": "Request approved"}
    role = client.get(f"/api/lists/{private_list.id}/role", headers=other_auth_token).json()
    assert role == {"has_access": True, "role": "viewer"}


def test_privacy_update_rules(client, private_list, public_list, auth_token) -> None:
    response = client.put(
        f"/api/lists/{private_list.id}/privacy",
        json={"privacy_level": "public"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.put(
        f"/api/lists/{public_list.id}/privacy",
        json={"privacy_level": "private"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["privacy_level"] == "private"


def test_delete_list_moves_posts(client, test_user, public_list, auth_token, post_factory) -> None:
    post = post_factory(test_user, public_list)
    response = client.delete(f"/api/lists/{public_list.id}", headers=auth_token)
    assert response.json() == {"success": True, "moved_posts": 1}

    moved = client.get(f"/api/posts/{post.id}", headers=auth_token).json()
    assert moved["post_list"]["name"] == "General"
    assert client.get(f"/api/lists/{public_list.id}", headers=auth_token).status_code == 404


def test_list_posts_visibility(
    client, test_user, private_list, public_list, post_factory, other_auth_token
) -> None:
    visible = post_factory(test_user, public_list)
    post_factory(test_user, public_list, "connections")
    response = client.get(f"/api/lists/{public_list.id}/posts", headers=other_auth_token)
    assert [p["id"] for p in response.json()] == [visible.id]

    hidden = client.get(f"/api/lists/{private_list.id}/posts", headers=other_auth_token)
    assert hidden.status_code == status.HTTP_403_FORBIDDEN


def test_user_lists_hide_private_from_strangers(
    client, test_user, public_list, private_list, other_auth_token, auth_token
) -> None:
    theirs = client.get(f"/api/users/{test_user.id}/lists", headers=other_auth_token).json()
    assert [item["id"] for item in theirs] == [public_list.id]
    own = client.get(f"/api/users/{test_user.id}/lists", headers=auth_token).json()
    assert {item["id"] for item in own} == {public_list.id, private_list.id}
