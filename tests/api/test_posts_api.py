# mypy: ignore-errors
# tests/api/test_posts_api.py
"""Tests for post endpoints and the visibility rules they apply."""

from fastapi import status


def _payload(**overrides):
    data = {
        "primary_link": "https://example.com/record",
        "primary_description": "Great record",
    }
    data.update(overrides)
    return data


def test_create_post_success(client, test_user, auth_token, public_list) -> None:
    """Test successful post creation with hashtags."""
    response = client.post(
        "/api/posts",
        json=_payload(list_id=public_list.id, hashtags=["#Vinyl", "vinyl"]),
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["user_id"] == test_user.id
    assert data["list_id"] == public_list.id
    assert data["privacy"] == "public"
    assert data["author"]["username"] == "testuser"
    assert data["post_list"]["name"] == "Finds"

    tags = client.get("/api/hashtags/vinyl/posts").json()
    assert [p["id"] for p in tags] == [data["id"]]


def test_create_post_requires_auth(client) -> None:
    response = client.post("/api/posts", json=_payload())
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_post_uses_default_privacy(client, test_user, auth_token) -> None:
    client.put(
        "/api/users/me/privacy", json={"default_privacy": "connections"}, headers=auth_token
    )
    response = client.post("/api/posts", json=_payload(), headers=auth_token)
    assert response.json()["privacy"] == "connections"


def test_create_post_in_foreign_list_forbidden(client, other_auth_token, private_list) -> None:
    response = client.post(
        "/api/posts", json=_payload(list_id=private_list.id), headers=other_auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_post_rejects_unknown_privacy(client, auth_token) -> None:
    response = client.post("/api/posts", json=_payload(privacy="secret"), headers=auth_token)
    assert response.status_code == 422


def test_feed_filters_by_viewer(
    client, test_user, auth_token, other_auth_token, public_list, private_list, post_factory
) -> None:
    """The same feed shows each caller only what they may see."""
    public = post_factory(test_user, public_list, "public")
    friends_only = post_factory(test_user, public_list, "connections")
    hidden = post_factory(test_user, private_list, "private")

    anonymous = [p["id"] for p in client.get("/api/posts").json()]
    stranger = [p["id"] for p in client.get("/api/posts", headers=other_auth_token).json()]
    author = [p["id"] for p in client.get("/api/posts", headers=auth_token).json()]

    assert anonymous == [public.id]
    assert stranger == [public.id]
    assert set(author) == {public.id, friends_only.id, hidden.id}


def test_get_post_visibility(
    client, test_user, other_auth_token, private_list, post_factory, test_post
) -> None:
    assert client.get(f"/api/posts/{test_post.id}").status_code == status.HTTP_200_OK
    hidden = post_factory(test_user, private_list, "private")
    response = client.get(f"/api/posts/{hidden.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert client.get("/api/posts/999999").status_code == status.HTTP_404_NOT_FOUND


def test_update_post_author_only(client, test_post, auth_token, other_auth_token) -> None:
    response = client.patch(
        f"/api/posts/{test_post.id}",
        json={"primary_description": "Edited"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.patch(
        f"/api/posts/{test_post.id}",
        json={"primary_description": "Edited", "privacy": "connections"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["primary_description"] == "Edited"
    assert response.json()["privacy"] == "connections"


def test_delete_post(client, test_post, auth_token, other_auth_token) -> None:
    assert client.delete(f"/api/posts/{test_post.id}", headers=other_auth_token).status_code == 403
    response = client.delete(f"/api/posts/{test_post.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND


def test_post_stats(client, test_post, other_auth_token, third_auth_token) -> None:
    client.post(f"/api/posts/{test_post.id}/like", headers=other_auth_token)
    client.post(f"/api/posts/{test_post.id}/like", headers=third_auth_token)
    client.post(f"/api/posts/{test_post.id}/view", headers=other_auth_token)
    client.post(
        f"/api/posts/{test_post.id}/comments", json={"text": "nice"}, headers=other_auth_token
    )

    stats = client.get(f"/api/posts/{test_post.id}/stats").json()
    assert stats == {
        "like_count": 2,
        "share_count": 0,
        "view_count": 1,
        "save_count": 0,
        "repost_count": 0,
        "comment_count": 1,
    }


def test_user_posts_respect_visibility(
    client, test_user, other_auth_token, public_list, private_list, post_factory
) -> None:
    visible = post_factory(test_user, public_list)
    post_factory(test_user, private_list, "private")
    response = client.get(f"/api/users/{test_user.id}/posts", headers=other_auth_token)
    assert [p["id"] for p in response.json()] == [visible.id]
    assert client.get("/api/users/424242/posts").status_code == status.HTTP_404_NOT_FOUND


def test_trending_hashtags(client, auth_token, public_list) -> None:
    for tags in (["summer"], ["summer", "beach"]):
        client.post(
            "/api/posts", json=_payload(list_id=public_list.id, hashtags=tags), headers=auth_token
        )
    trending = client.get("/api/hashtags/trending").json()
    assert [(h["name"], h["post_count"]) for h in trending] == [("summer", 2), ("beach", 1)]


def test_hashtag_search(client, auth_token, public_list, private_list) -> None:
    both = client.post(
        "/api/posts",
        json=_payload(list_id=public_list.id, hashtags=["jazz", "live"]),
        headers=auth_token,
    ).json()
    client.post(
        "/api/posts", json=_payload(list_id=public_list.id, hashtags=["jazz"]), headers=auth_token
    )
    client.post(
        "/api/posts",
        json=_payload(list_id=private_list.id, hashtags=["jazz", "live"]),
        headers=auth_token,
    )

    found = client.get("/api/hashtags/search", params={"q": "jazz,#Live"}).json()
    assert [p["id"] for p in found] == [both["id"]]
    assert client.get("/api/hashtags/search").json() == []
