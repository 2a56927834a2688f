# tests/test_audit_log.py
"""Tests for querying and exporting the moderation log."""

import csv
import io
from datetime import datetime, timedelta

import pytest

from forum_moderation.core.errors import AuthorizationError
from forum_moderation.models import ActionType, ModerationLog, TargetType
from forum_moderation.services.audit import CSV_HEADER, AuditLog, LogQuery


@pytest.fixture()
def audit() -> AuditLog:
    return AuditLog()


@pytest.fixture()
def entries(db_session, forum_admin, moderator):
    now = datetime(2024, 3, 14, 12, 0, 0)
    rows = [
        ModerationLog(
            moderator_id=moderator.id,
            action_type=ActionType.HIDE_POST,
            target_type=TargetType.POST,
            target_id="11",
            created_at=now - timedelta(days=3),
        ),
        ModerationLog(
            moderator_id=forum_admin.id,
            action_type=ActionType.DELETE_POST,
            target_type=TargetType.POST,
            target_id="11",
            reason="Off-topic advert",
            created_at=now - timedelta(days=1),
        ),
        ModerationLog(
            moderator_id=forum_admin.id,
            action_type=ActionType.BAN_USER,
            target_type=TargetType.USER,
            target_id="7",
            reason="Repeated spam",
            created_at=now,
        ),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


def test_record_stages_entry_without_commit(db_session, audit, admin_actor, log_count) -> None:
    entry = audit.record(db_session, admin_actor, ActionType.PIN_POST, TargetType.POST, 5)
    assert entry.target_id == "5"
    assert entry.moderator_id == admin_actor.id

    db_session.rollback()
    assert log_count() == 0


def test_list_entries_newest_first(db_session, audit, admin_actor, entries) -> None:
    result = audit.list_entries(db_session, admin_actor)
    assert [e.action_type for e in result] == [
        ActionType.BAN_USER,
        ActionType.DELETE_POST,
        ActionType.HIDE_POST,
    ]


def test_list_entries_filters(db_session, audit, admin_actor, moderator, entries) -> None:
    by_moderator = audit.list_entries(db_session, admin_actor, LogQuery(moderator_id=moderator.id))
    assert [e.action_type for e in by_moderator] == [ActionType.HIDE_POST]

    by_target = audit.list_entries(
        db_session, admin_actor, LogQuery(target_type=TargetType.POST, target_id="11")
    )
    assert len(by_target) == 2

    by_action = audit.list_entries(db_session, admin_actor, LogQuery(action_type=ActionType.BAN_USER))
    assert [e.target_id for e in by_action] == ["7"]

    by_search = audit.list_entries(db_session, admin_actor, LogQuery(search="ADVERT"))
    assert [e.action_type for e in by_search] == [ActionType.DELETE_POST]

    by_action_text = audit.list_entries(db_session, admin_actor, LogQuery(search="ban_"))
    assert [e.action_type for e in by_action_text] == [ActionType.BAN_USER]


def test_list_entries_date_range_includes_whole_end_day(
    db_session, audit, admin_actor, entries
) -> None:
    window = LogQuery(
        created_from=datetime(2024, 3, 12).date(),
        created_to=datetime(2024, 3, 13).date(),
    )
    result = audit.list_entries(db_session, admin_actor, window)
    assert [e.action_type for e in result] == [ActionType.DELETE_POST]


def test_list_entries_paginates(db_session, audit, admin_actor, entries) -> None:
    page = audit.list_entries(db_session, admin_actor, LogQuery(limit=1, offset=1))
    assert [e.action_type for e in page] == [ActionType.DELETE_POST]


def test_log_is_admin_only(db_session, audit, moderator_actor, entries) -> None:
    with pytest.raises(AuthorizationError):
        audit.list_entries(db_session, moderator_actor)
    with pytest.raises(AuthorizationError):
        audit.export_csv(db_session, moderator_actor)
    with pytest.raises(AuthorizationError):
        audit.summary(db_session, moderator_actor)


def test_export_csv_uses_display_names(db_session, audit, admin_actor, entries) -> None:
    text = audit.export_csv(db_session, admin_actor, LogQuery(target_type=TargetType.POST))
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0] == CSV_HEADER
    assert len(rows) == 3
    assert rows[1][1:] == ["Forum Admin", "delete_post", "post", "11", "Off-topic advert"]
    assert rows[2][1:] == ["Moderator", "hide_post", "post", "11", ""]


def test_summary_counts_by_action(db_session, audit, admin_actor, entries) -> None:
    audit.record(db_session, admin_actor, ActionType.BAN_USER, TargetType.USER, 8, reason="bot")
    db_session.commit()

    summary = audit.summary(db_session, admin_actor)
    assert summary["total"] == 4
    assert summary["by_action"] == {"hide_post": 1, "delete_post": 1, "ban_user": 2}
    assert summary["last_24h"] == 1
    assert summary["last_7d"] == 1
