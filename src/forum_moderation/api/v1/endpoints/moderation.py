"""Moderation log endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query, Response

from forum_moderation.api.v1.dependencies import ActorDep, AuditLogDep, SessionDep
from forum_moderation.db.time import utcnow
from forum_moderation.models import ModerationLog
from forum_moderation.models.moderation import ActionType, TargetType
from forum_moderation.schemas.moderation import ModerationLogResponse, ModerationLogSummary
from forum_moderation.services.audit import LogQuery

router = APIRouter(prefix="/moderation", tags=["moderation"])


def _log_query(
    action_type: ActionType | None = None,
    moderator_id: int | None = None,
    target_type: TargetType | None = None,
    target_id: str | None = None,
    created_from: date | None = None,
    created_to: date | None = None,
    search: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> LogQuery:
    return LogQuery(
        action_type=action_type,
        moderator_id=moderator_id,
        target_type=target_type,
        target_id=target_id,
        created_from=created_from,
        created_to=created_to,
        search=search,
        limit=limit,
        offset=offset,
    )


@router.get("/logs", response_model=list[ModerationLogResponse])
async def list_moderation_logs(
    actor: ActorDep,
    db: SessionDep,
    audit: AuditLogDep,
    action_type: ActionType | None = Query(None),
    moderator_id: int | None = Query(None),
    target_type: TargetType | None = Query(None),
    target_id: str | None = Query(None),
    created_from: date | None = Query(None, alias="from"),
    created_to: date | None = Query(None, alias="to"),
    search: str | None = Query(None),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
) -> list[ModerationLog]:
    """List moderation log entries, newest first."""
    query = _log_query(
        action_type, moderator_id, target_type, target_id,
        created_from, created_to, search, limit, offset,
    )
    return audit.list_entries(db, actor, query)


@router.get("/logs/export")
async def export_moderation_logs(
    actor: ActorDep,
    db: SessionDep,
    audit: AuditLogDep,
    action_type: ActionType | None = Query(None),
    moderator_id: int | None = Query(None),
    target_type: TargetType | None = Query(None),
    target_id: str | None = Query(None),
    created_from: date | None = Query(None, alias="from"),
    created_to: date | None = Query(None, alias="to"),
    search: str | None = Query(None),
) -> Response:
    """Download matching log entries as CSV."""
    query = _log_query(
        action_type, moderator_id, target_type, target_id,
        created_from, created_to, search,
    )
    content = audit.export_csv(db, actor, query)
    filename = f"moderation-logs-{utcnow().date().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/logs/summary", response_model=ModerationLogSummary)
async def moderation_log_summary(
    actor: ActorDep,
    db: SessionDep,
    audit: AuditLogDep,
) -> dict[str, object]:
    """Return per-action counts and recent activity."""
    return audit.summary(db, actor)
