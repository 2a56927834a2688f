# src/forum_moderation/schemas/moderation.py
"""Moderation log Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from forum_moderation.models.moderation import ActionType, TargetType


class ModerationLogResponse(BaseModel):
    """Schema for one moderation log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    moderator_id: int
    action_type: ActionType
    target_type: TargetType
    target_id: str
    reason: str | None
    created_at: datetime


class ModerationLogSummary(BaseModel):
    """Aggregate counts over the moderation log."""

    total: int
    by_action: dict[str, int]
    last_24h: int
    last_7d: int
