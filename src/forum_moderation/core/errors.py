"""Exception taxonomy shared by the moderation engines."""

from __future__ import annotations

from forum_moderation.core.roles import RoleTier

__all__ = [
    "ModerationError",
    "AuthorizationError",
    "PreconditionError",
    "DuplicateSlugError",
    "NotFoundError",
    "ConsistencyFailure",
]


class ModerationError(Exception):
    """Base class for every error raised by a moderation engine."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class AuthorizationError(ModerationError):
    """The actor may not perform the requested transition.

    Raised before any write, so the target and the moderation log are untouched.
    """

    def __init__(self, detail: str, required: RoleTier | None = None) -> None:
        super().__init__(detail)
        self.required = required


class PreconditionError(ModerationError):
    """The target is not in the source state the transition requires."""


class DuplicateSlugError(PreconditionError):
    """A category with the requested slug already exists."""


class NotFoundError(ModerationError):
    """The target identifier does not resolve to a record."""


class ConsistencyFailure(ModerationError):
    """A multi-row write did not apply as a single unit."""
