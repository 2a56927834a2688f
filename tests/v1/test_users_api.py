# tests/v1/test_users_api.py
"""Tests for the user sanction endpoints."""

from fastapi import status


def test_ban_user(client, forum_admin, regular_user, auth_headers, log_count) -> None:
    """Banning stores the reason and who issued it."""
    response = client.post(
        f"/api/v1/users/{regular_user.id}/ban",
        json={"reason": "Posting scams"},
        headers=auth_headers(forum_admin),
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["is_banned"] is True
    assert data["banned_reason"] == "Posting scams"
    assert data["banned_by"] == forum_admin.id
    assert log_count() == 1


def test_ban_without_reason(client, forum_admin, regular_user, auth_headers, log_count) -> None:
    headers = auth_headers(forum_admin)
    response = client.post(f"/api/v1/users/{regular_user.id}/ban", json={"reason": ""}, headers=headers)
    assert response.status_code == 422

    response = client.post(f"/api/v1/users/{regular_user.id}/ban", json={"reason": "   "}, headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert log_count() == 0


def test_ban_super_admin_is_forbidden(client, forum_admin, super_admin, auth_headers) -> None:
    """Super admins are immune to sanctions."""
    response = client.post(
        f"/api/v1/users/{super_admin.id}/ban",
        json={"reason": "testing"},
        headers=auth_headers(forum_admin),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_moderator_cannot_ban(client, moderator, regular_user, auth_headers) -> None:
    response = client.post(
        f"/api/v1/users/{regular_user.id}/ban",
        json={"reason": "rude"},
        headers=auth_headers(moderator),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["required_tier"] == "forum_admin"


def test_unban_and_read_only(client, forum_admin, regular_user, auth_headers) -> None:
    headers = auth_headers(forum_admin)
    client.post(f"/api/v1/users/{regular_user.id}/ban", json={"reason": "spam"}, headers=headers)

    response = client.post(f"/api/v1/users/{regular_user.id}/unban", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_banned"] is False
    assert response.json()["banned_reason"] is None

    response = client.post(f"/api/v1/users/{regular_user.id}/read-only", headers=headers)
    assert response.json()["is_read_only"] is True


def test_grant_and_revoke_moderator(client, forum_admin, regular_user, auth_headers) -> None:
    headers = auth_headers(forum_admin)
    response = client.post(f"/api/v1/users/{regular_user.id}/moderator", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_forum_moderator"] is True

    response = client.delete(f"/api/v1/users/{regular_user.id}/moderator", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_forum_moderator"] is False


def test_list_users_filters(client, forum_admin, moderator, regular_user, auth_headers) -> None:
    response = client.get(
        "/api/v1/users/", params={"role": "moderator"}, headers=auth_headers(forum_admin)
    )
    assert response.status_code == status.HTTP_200_OK
    assert [user["id"] for user in response.json()] == [moderator.id]

    response = client.get(
        "/api/v1/users/", params={"status": "nonsense"}, headers=auth_headers(forum_admin)
    )
    assert response.status_code == 422


def test_moderator_cannot_grant_moderator(
    client, moderator, regular_user, auth_headers, log_count
) -> None:
    """Only forum admins can promote users to moderator."""
    response = client.post(
        f"/api/v1/users/{regular_user.id}/moderator", headers=auth_headers(moderator)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["required_tier"] == "forum_admin"
    assert log_count() == 0
