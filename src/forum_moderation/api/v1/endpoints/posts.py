"""Post moderation endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Body, Query, status

from forum_moderation.api.v1.dependencies import (
    ActorDep,
    OptionalActorDep,
    PostServiceDep,
    SessionDep,
)
from forum_moderation.models import ArchivedPost, Post
from forum_moderation.schemas.post import (
    ArchivedPostResponse,
    PostResponse,
    PostStatsResponse,
    PostViewResponse,
    SoftDeleteRequest,
)
from forum_moderation.services.post_lifecycle import PostView

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
    status_filter: Literal["all", "hidden", "pinned", "reported", "deleted"] = Query(
        "all", alias="status"
    ),
    category_id: int | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> list[Post]:
    """List posts for the moderation queue."""
    return service.list_posts(
        db,
        actor,
        status=status_filter,
        category_id=category_id,
        limit=limit,
        offset=offset,
    )


@router.get("/stats", response_model=PostStatsResponse)
async def post_stats(actor: ActorDep, db: SessionDep, service: PostServiceDep) -> dict[str, int]:
    """Return moderation dashboard counters."""
    return service.post_stats(db, actor)


@router.get("/archived", response_model=list[ArchivedPostResponse])
async def list_archived_posts(
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> list[ArchivedPost]:
    """List archived post tombstones."""
    return service.list_archived(db, actor, limit=limit, offset=offset)


@router.get("/{post_id}", response_model=PostViewResponse)
async def get_post(
    post_id: int,
    actor: OptionalActorDep,
    db: SessionDep,
    service: PostServiceDep,
) -> PostView:
    """Get a post as the caller is allowed to see it."""
    return service.view_post(db, actor, post_id)


@router.post("/{post_id}/hide", response_model=PostResponse)
async def toggle_hidden(
    post_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
) -> Post:
    """Hide or unhide a post."""
    return service.toggle_hidden(db, actor, post_id)


@router.post("/{post_id}/pin", response_model=PostResponse)
async def toggle_local_pin(
    post_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
) -> Post:
    """Pin or unpin a post within its category."""
    return service.toggle_local_pin(db, actor, post_id)


@router.post("/{post_id}/global-pin", response_model=PostResponse)
async def toggle_global_pin(
    post_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
) -> Post:
    """Pin or unpin a post across the whole forum."""
    return service.toggle_global_pin(db, actor, post_id)


@router.post("/{post_id}/delete", response_model=PostResponse)
async def soft_delete_post(
    post_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
    payload: SoftDeleteRequest | None = Body(None),
) -> Post:
    """Soft-delete a post; it can be restored until it is archived."""
    reason = payload.reason if payload is not None else None
    return service.soft_delete(db, actor, post_id, reason=reason)


@router.post("/{post_id}/restore", response_model=PostResponse)
async def restore_post(
    post_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
) -> Post:
    """Restore a soft-deleted post."""
    return service.restore(db, actor, post_id)


@router.post(
    "/{post_id}/archive",
    response_model=ArchivedPostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def archive_post(
    post_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: PostServiceDep,
) -> ArchivedPost:
    """Move a soft-deleted post to the archive."""
    return service.archive(db, actor, post_id)
