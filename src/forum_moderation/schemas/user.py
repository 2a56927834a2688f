# src/forum_moderation/schemas/user.py
"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BanRequest(BaseModel):
    """Body for banning a user; the reason is mandatory."""

    reason: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Schema for user standing returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    display_name: str | None
    created_at: datetime
    is_super_admin: bool
    is_forum_admin: bool
    is_forum_moderator: bool
    is_banned: bool
    banned_at: datetime | None
    banned_by: int | None
    banned_reason: str | None
    is_read_only: bool
