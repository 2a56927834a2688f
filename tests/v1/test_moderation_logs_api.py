# tests/v1/test_moderation_logs_api.py
"""Tests for the moderation log endpoints."""

import csv
import io

from fastapi import status


def _generate_activity(client, forum_admin, moderator, auth_headers, test_post) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/hide", headers=auth_headers(moderator))
    client.post(
        f"/api/v1/posts/{test_post.id}/delete",
        json={"reason": "Off-topic"},
        headers=auth_headers(forum_admin),
    )


def test_list_logs(client, forum_admin, moderator, auth_headers, test_post) -> None:
    """Log entries come back newest first with their reasons."""
    _generate_activity(client, forum_admin, moderator, auth_headers, test_post)

    response = client.get("/api/v1/moderation/logs", headers=auth_headers(forum_admin))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [entry["action_type"] for entry in data] == ["delete_post", "hide_post"]
    assert data[0]["reason"] == "Off-topic"
    assert data[0]["target_id"] == str(test_post.id)


def test_list_logs_filtered(client, forum_admin, moderator, auth_headers, test_post) -> None:
    _generate_activity(client, forum_admin, moderator, auth_headers, test_post)

    response = client.get(
        "/api/v1/moderation/logs",
        params={"moderator_id": moderator.id},
        headers=auth_headers(forum_admin),
    )
    assert [entry["action_type"] for entry in response.json()] == ["hide_post"]

    response = client.get(
        "/api/v1/moderation/logs",
        params={"action_type": "not_an_action"},
        headers=auth_headers(forum_admin),
    )
    assert response.status_code == 422


def test_logs_are_admin_only(client, moderator, auth_headers) -> None:
    response = client.get("/api/v1/moderation/logs", headers=auth_headers(moderator))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_export_logs_csv(client, forum_admin, moderator, auth_headers, test_post) -> None:
    """The export is a CSV attachment with a dated filename."""
    _generate_activity(client, forum_admin, moderator, auth_headers, test_post)

    response = client.get("/api/v1/moderation/logs/export", headers=auth_headers(forum_admin))
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="moderation-logs-')
    assert disposition.endswith('.csv"')

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["Date", "Moderator", "Action", "Target Type", "Target ID", "Reason"]
    assert [row[2] for row in rows[1:]] == ["delete_post", "hide_post"]


def test_log_summary(client, forum_admin, moderator, auth_headers, test_post) -> None:
    _generate_activity(client, forum_admin, moderator, auth_headers, test_post)

    response = client.get("/api/v1/moderation/logs/summary", headers=auth_headers(forum_admin))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 2
    assert data["by_action"] == {"hide_post": 1, "delete_post": 1}
    assert data["last_24h"] == 2
