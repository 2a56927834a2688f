# src/forum_moderation/models/user.py
"""SQLAlchemy model for forum users and their standing."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum_moderation.core.roles import RoleTier, resolve_tier
from forum_moderation.db.session import Base
from forum_moderation.db.time import utcnow


class User(Base):
    """Portal account as seen by the moderation subsystem.

    Role flags are written by super admins outside this service; sanction
    flags are owned by the user sanction engine.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Role flags.
    is_super_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_forum_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_forum_moderator: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Sanction flags.
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    banned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    banned_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    banned_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_read_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def tier(self) -> RoleTier:
        """Return the effective role tier derived from the role flags."""
        return resolve_tier(
            is_super_admin=self.is_super_admin,
            is_forum_admin=self.is_forum_admin,
            is_forum_moderator=self.is_forum_moderator,
        )
