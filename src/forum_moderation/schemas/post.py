# src/forum_moderation/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SoftDeleteRequest(BaseModel):
    """Body for soft-deleting a post."""

    reason: str | None = Field(default=None, description="Optional reason shown in the log")


class PostResponse(BaseModel):
    """Moderation view of a live post."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int | None
    category_id: int | None
    title: str
    body: str
    is_hidden: bool
    is_pinned: bool
    global_pinned: bool
    reported_count: int
    is_active: bool
    deleted_at: datetime | None
    deleted_by: int | None
    created_at: datetime


class PostViewResponse(BaseModel):
    """Read-path view; ``removed`` views omit the content."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    removed: bool
    title: str | None = None
    body: str | None = None
    author_id: int | None = None
    category_id: int | None = None
    is_hidden: bool = False
    is_pinned: bool = False
    global_pinned: bool = False
    is_active: bool = True
    deleted_at: datetime | None = None
    deleted_by: int | None = None
    reported_count: int = 0


class ArchivedPostResponse(BaseModel):
    """Tombstone of an archived post."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    original_id: int
    data: dict[str, Any]
    deleted_at: datetime
    deleted_by: int | None


class PostStatsResponse(BaseModel):
    """Dashboard counters for the moderation screens."""

    active: int
    hidden: int
    pinned: int
    reported: int
    deleted: int
    archived: int
