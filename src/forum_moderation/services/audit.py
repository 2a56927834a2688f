# src/forum_moderation/services/audit.py
"""Append-only moderation log: recording and querying.

Engines call :meth:`AuditLog.record` inside the same session transaction as
the mutation it describes, so an entry becomes visible exactly when the
mutation does. Rejected attempts never reach ``record``.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session

from forum_moderation.core.roles import Actor, RoleTier
from forum_moderation.core.settings import settings
from forum_moderation.db.time import utcnow
from forum_moderation.models import ActionType, ModerationLog, TargetType, User
from forum_moderation.services.authorization import require_tier

__all__ = ["AuditLog", "LogQuery", "CSV_HEADER"]

logger = logging.getLogger(__name__)

CSV_HEADER = ["Date", "Moderator", "Action", "Target Type", "Target ID", "Reason"]


@dataclass
class LogQuery:
    """Filters accepted by the moderation log listing and export."""

    action_type: ActionType | None = None
    moderator_id: int | None = None
    target_type: TargetType | None = None
    target_id: str | None = None
    created_from: date | datetime | None = None
    created_to: date | datetime | None = None
    search: str | None = None
    limit: int | None = None
    offset: int = 0


def _lower_bound(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _upper_bound(value: date | datetime) -> datetime:
    # A bare date includes the whole day.
    if isinstance(value, datetime):
        return value
    return datetime.combine(value + timedelta(days=1), time.min)


class AuditLog:
    """Recorder and reader for moderation log entries."""

    @staticmethod
    def record(
        db: Session,
        actor: Actor,
        action_type: ActionType,
        target_type: TargetType,
        target_id: int | str,
        reason: str | None = None,
    ) -> ModerationLog:
        """Stage one log entry in ``db``; the caller owns the commit."""
        entry = ModerationLog(
            moderator_id=actor.id,
            action_type=action_type,
            target_type=target_type,
            target_id=str(target_id),
            reason=reason or None,
            created_at=utcnow(),
        )
        db.add(entry)
        logger.info(
            "%s %s %s by actor %s",
            action_type.value,
            target_type.value,
            target_id,
            actor.id,
        )
        return entry

    @staticmethod
    def _filtered(query: LogQuery):
        stmt = select(ModerationLog)
        if query.action_type is not None:
            stmt = stmt.where(ModerationLog.action_type == query.action_type)
        if query.moderator_id is not None:
            stmt = stmt.where(ModerationLog.moderator_id == query.moderator_id)
        if query.target_type is not None:
            stmt = stmt.where(ModerationLog.target_type == query.target_type)
        if query.target_id is not None:
            stmt = stmt.where(ModerationLog.target_id == str(query.target_id))
        if query.created_from is not None:
            stmt = stmt.where(ModerationLog.created_at >= _lower_bound(query.created_from))
        if query.created_to is not None:
            stmt = stmt.where(ModerationLog.created_at < _upper_bound(query.created_to))
        if query.search:
            needle = f"%{query.search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(cast(ModerationLog.action_type, String)).like(needle),
                    func.lower(func.coalesce(ModerationLog.reason, "")).like(needle),
                    ModerationLog.target_id.like(needle),
                )
            )
        return stmt.order_by(ModerationLog.created_at.desc(), ModerationLog.id.desc())

    def list_entries(
        self,
        db: Session,
        actor: Actor,
        query: LogQuery | None = None,
    ) -> list[ModerationLog]:
        """Return log entries matching ``query``, newest first."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "view the moderation log")
        query = query or LogQuery()
        limit = query.limit or settings.moderation_log_page_size
        limit = min(limit, settings.moderation_log_max_page_size)
        stmt = self._filtered(query).offset(query.offset).limit(limit)
        return list(db.scalars(stmt))

    def export_csv(
        self,
        db: Session,
        actor: Actor,
        query: LogQuery | None = None,
    ) -> str:
        """Render every entry matching ``query`` as CSV text."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "export the moderation log")
        entries: Sequence[ModerationLog] = list(db.scalars(self._filtered(query or LogQuery())))
        moderator_ids = {entry.moderator_id for entry in entries}
        names: dict[int, str] = {}
        if moderator_ids:
            for user in db.scalars(select(User).where(User.id.in_(moderator_ids))):
                names[user.id] = user.display_name or user.email

        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for entry in entries:
            writer.writerow(
                [
                    entry.created_at.isoformat(),
                    names.get(entry.moderator_id, str(entry.moderator_id)),
                    entry.action_type.value,
                    entry.target_type.value,
                    entry.target_id,
                    entry.reason or "",
                ]
            )
        return buffer.getvalue()

    def summary(self, db: Session, actor: Actor) -> dict[str, object]:
        """Return per-action counts and recent activity totals."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "view the moderation log")
        rows = db.execute(
            select(ModerationLog.action_type, func.count())
            .group_by(ModerationLog.action_type)
        ).all()
        by_action = {action.value: count for action, count in rows}

        now = utcnow()

        def _since(delta: timedelta) -> int:
            return db.scalar(
                select(func.count())
                .select_from(ModerationLog)
                .where(ModerationLog.created_at >= now - delta)
            ) or 0

        return {
            "total": sum(by_action.values()),
            "by_action": by_action,
            "last_24h": _since(timedelta(days=1)),
            "last_7d": _since(timedelta(days=7)),
        }
