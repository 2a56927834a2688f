# src/forum_moderation/models/moderation.py
"""Models for the append-only moderation log."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum_moderation.db.session import Base
from forum_moderation.db.time import utcnow


class ActionType(str, enum.Enum):
    """Closed set of moderation actions recorded in the log."""

    HIDE_POST = "hide_post"
    UNHIDE_POST = "unhide_post"
    PIN_POST = "pin_post"
    UNPIN_POST = "unpin_post"
    GLOBAL_PIN_POST = "global_pin_post"
    GLOBAL_UNPIN_POST = "global_unpin_post"
    DELETE_POST = "delete_post"
    RESTORE_POST = "restore_post"
    MOVE_TO_DELETED = "move_to_deleted"
    CREATE_CATEGORY = "create_category"
    EDIT_CATEGORY = "edit_category"
    REORDER_CATEGORY = "reorder_category"
    ACTIVATE_CATEGORY = "activate_category"
    DEACTIVATE_CATEGORY = "deactivate_category"
    ARCHIVE_CATEGORY = "archive_category"
    BAN_USER = "ban_user"
    UNBAN_USER = "unban_user"
    SET_READ_ONLY = "set_read_only"
    REMOVE_READ_ONLY = "remove_read_only"
    MAKE_MODERATOR = "make_moderator"
    REMOVE_MODERATOR = "remove_moderator"


class TargetType(str, enum.Enum):
    """Kinds of record a moderation action can target."""

    POST = "post"
    CATEGORY = "category"
    USER = "user"


class ModerationLog(Base):
    """One completed moderation transition. Never updated or deleted."""

    __tablename__ = "moderation_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    moderator_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    action_type: Mapped[ActionType] = mapped_column(
        Enum(ActionType, native_enum=False, length=32, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    target_type: Mapped[TargetType] = mapped_column(
        Enum(TargetType, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # Stored as text so post, category and user ids share one column.
    target_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
