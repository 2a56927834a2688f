"""User sanction endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query

from forum_moderation.api.v1.dependencies import ActorDep, SanctionServiceDep, SessionDep
from forum_moderation.models import User
from forum_moderation.schemas.user import BanRequest, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=list[UserResponse])
async def list_users(
    actor: ActorDep,
    db: SessionDep,
    service: SanctionServiceDep,
    role: Literal["all", "admin", "moderator", "regular"] = Query("all"),
    status_filter: Literal["all", "banned", "read_only", "active"] = Query("all", alias="status"),
    search: str | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[User]:
    """List users with role and standing filters."""
    return service.list_users(
        db,
        actor,
        role=role,
        status=status_filter,
        search=search,
        limit=limit,
        offset=offset,
    )


@router.post("/{user_id}/ban", response_model=UserResponse)
async def ban_user(
    user_id: int,
    payload: BanRequest,
    actor: ActorDep,
    db: SessionDep,
    service: SanctionServiceDep,
) -> User:
    """Ban a user with a mandatory reason."""
    return service.ban(db, actor, user_id, payload.reason)


@router.post("/{user_id}/unban", response_model=UserResponse)
async def unban_user(
    user_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: SanctionServiceDep,
) -> User:
    """Lift a user's ban."""
    return service.unban(db, actor, user_id)


@router.post("/{user_id}/read-only", response_model=UserResponse)
async def toggle_read_only(
    user_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: SanctionServiceDep,
) -> User:
    """Toggle a user's read-only status."""
    return service.toggle_read_only(db, actor, user_id)


@router.post("/{user_id}/moderator", response_model=UserResponse)
async def grant_moderator(
    user_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: SanctionServiceDep,
) -> User:
    """Grant the forum moderator role."""
    return service.grant_moderator(db, actor, user_id)


@router.delete("/{user_id}/moderator", response_model=UserResponse)
async def revoke_moderator(
    user_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: SanctionServiceDep,
) -> User:
    """Revoke the forum moderator role."""
    return service.revoke_moderator(db, actor, user_id)
