"""Role tiers and the per-request actor snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from enum import IntEnum
from typing import Any

__all__ = ["RoleTier", "Actor", "resolve_tier"]


class RoleTier(IntEnum):
    """Ordered authorization tiers; a higher tier implies every lower one."""

    NONE = 0
    MODERATOR = 1
    FORUM_ADMIN = 2
    SUPER_ADMIN = 3

    @property
    def label(self) -> str:
        """Return the lowercase name used in API payloads."""
        return self.name.lower()


def resolve_tier(
    *,
    is_super_admin: bool = False,
    is_forum_admin: bool = False,
    is_forum_moderator: bool = False,
) -> RoleTier:
    """Derive the effective tier from raw role flags.

    Missing or falsy flags resolve to ``RoleTier.NONE``.
    """
    if is_super_admin:
        return RoleTier.SUPER_ADMIN
    if is_forum_admin:
        return RoleTier.FORUM_ADMIN
    if is_forum_moderator:
        return RoleTier.MODERATOR
    return RoleTier.NONE


@dataclass(frozen=True)
class Actor:
    """Read-only snapshot of the authenticated caller for one request.

    The tier is computed once when the snapshot is built so every engine
    compares against the same value.
    """

    id: int
    is_super_admin: bool = False
    is_forum_admin: bool = False
    is_forum_moderator: bool = False
    is_banned: bool = False
    is_read_only: bool = False

    @cached_property
    def tier(self) -> RoleTier:
        return resolve_tier(
            is_super_admin=self.is_super_admin,
            is_forum_admin=self.is_forum_admin,
            is_forum_moderator=self.is_forum_moderator,
        )

    def has_tier(self, required: RoleTier) -> bool:
        """Return True when the actor's tier meets ``required``."""
        return self.tier >= required

    @classmethod
    def from_user(cls, user: Any) -> Actor:
        """Build a snapshot from a ``User`` row (or any object with the flags)."""
        return cls(
            id=user.id,
            is_super_admin=bool(getattr(user, "is_super_admin", False)),
            is_forum_admin=bool(getattr(user, "is_forum_admin", False)),
            is_forum_moderator=bool(getattr(user, "is_forum_moderator", False)),
            is_banned=bool(getattr(user, "is_banned", False)),
            is_read_only=bool(getattr(user, "is_read_only", False)),
        )
