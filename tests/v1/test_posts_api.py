# tests/v1/test_posts_api.py
"""Tests for the post moderation endpoints."""

from fastapi import status

from forum_moderation.models import ArchivedPost, Post


def test_hide_post_as_moderator(client, moderator, auth_headers, test_post, log_count) -> None:
    """A moderator can hide a post and the action is logged."""
    response = client.post(f"/api/v1/posts/{test_post.id}/hide", headers=auth_headers(moderator))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_hidden"] is True
    assert log_count() == 1


def test_hide_post_as_regular_user(client, regular_user, auth_headers, test_post, log_count) -> None:
    """Regular users get 403 with the tier they were missing."""
    response = client.post(f"/api/v1/posts/{test_post.id}/hide", headers=auth_headers(regular_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["required_tier"] == "moderator"
    assert log_count() == 0


def test_banned_moderator_is_rejected(client, make_user, auth_headers, test_post) -> None:
    """A banned moderator keeps the flag but loses every privilege."""
    banned_mod = make_user(is_forum_moderator=True, is_banned=True)
    response = client.post(f"/api/v1/posts/{test_post.id}/pin", headers=auth_headers(banned_mod))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert "Banned" in response.json()["detail"]


def test_global_pin_requires_forum_admin(
    client, moderator, forum_admin, auth_headers, test_post
) -> None:
    """Only forum admins can pin across the whole forum."""
    response = client.post(
        f"/api/v1/posts/{test_post.id}/global-pin", headers=auth_headers(moderator)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["required_tier"] == "forum_admin"

    response = client.post(
        f"/api/v1/posts/{test_post.id}/global-pin", headers=auth_headers(forum_admin)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["global_pinned"] is True


def test_delete_restore_archive_flow(
    client, forum_admin, auth_headers, test_post, db_session, log_count
) -> None:
    """Soft delete, restore, delete again and archive through the API."""
    headers = auth_headers(forum_admin)
    post_id = test_post.id

    response = client.post(
        f"/api/v1/posts/{post_id}/delete", json={"reason": "duplicate"}, headers=headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["deleted_by"] == forum_admin.id

    response = client.post(f"/api/v1/posts/{post_id}/restore", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["deleted_at"] is None

    response = client.post(f"/api/v1/posts/{post_id}/archive", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    client.post(f"/api/v1/posts/{post_id}/delete", headers=headers)
    response = client.post(f"/api/v1/posts/{post_id}/archive", headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["original_id"] == post_id
    assert data["data"]["title"] == "Ferry delayed again"

    assert db_session.get(Post, post_id) is None
    assert db_session.get(ArchivedPost, data["id"]) is not None
    assert log_count() == 4

    response = client.post(f"/api/v1/posts/{post_id}/restore", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_delete_twice_conflicts(client, forum_admin, auth_headers, test_post) -> None:
    """Deleting an already deleted post is a precondition failure."""
    headers = auth_headers(forum_admin)
    assert client.post(f"/api/v1/posts/{test_post.id}/delete", headers=headers).status_code == 200
    response = client.post(f"/api/v1/posts/{test_post.id}/delete", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_unknown_post_is_404(client, forum_admin, auth_headers) -> None:
    response = client.post("/api/v1/posts/999999/hide", headers=auth_headers(forum_admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_view_post_anonymous_and_privileged(
    client, moderator, forum_admin, auth_headers, make_post
) -> None:
    """Anonymous readers get a placeholder for removed content."""
    hidden = make_post(is_hidden=True)

    response = client.get(f"/api/v1/posts/{hidden.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["removed"] is True
    assert response.json()["title"] is None

    response = client.get(f"/api/v1/posts/{hidden.id}", headers=auth_headers(moderator))
    assert response.json()["removed"] is False
    assert response.json()["title"] == "Ferry delayed again"


def test_list_posts_and_stats(client, moderator, forum_admin, auth_headers, make_post) -> None:
    """The moderation queue lists posts by status and the dashboard counts them."""
    make_post(is_hidden=True)
    make_post(reported_count=2)
    make_post()

    response = client.get(
        "/api/v1/posts/", params={"status": "hidden"}, headers=auth_headers(moderator)
    )
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 1

    response = client.get("/api/v1/posts/stats", headers=auth_headers(forum_admin))
    assert response.status_code == status.HTTP_200_OK
    stats = response.json()
    assert stats["active"] == 3
    assert stats["hidden"] == 1
    assert stats["reported"] == 1
    assert stats["archived"] == 0


def test_list_archived_requires_forum_admin(client, moderator, auth_headers) -> None:
    response = client.get("/api/v1/posts/archived", headers=auth_headers(moderator))
    assert response.status_code == status.HTTP_403_FORBIDDEN
