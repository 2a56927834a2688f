"""Tier checks shared by every moderation engine."""

from __future__ import annotations

from forum_moderation.core.errors import AuthorizationError
from forum_moderation.core.roles import Actor, RoleTier

__all__ = ["require_tier"]


def require_tier(actor: Actor, required: RoleTier, action: str) -> None:
    """Reject the call unless ``actor`` is unbanned and holds ``required``.

    Args:
        actor: Snapshot of the caller for this request.
        required: Minimum tier for the transition.
        action: Human readable name of the transition, used in the error detail.

    Raises:
        AuthorizationError: If the actor is banned or below ``required``.
    """
    if actor.is_banned:
        raise AuthorizationError(f"Banned users cannot {action}", required=required)
    if not actor.has_tier(required):
        raise AuthorizationError(
            f"{action.capitalize()} requires the {required.label} role",
            required=required,
        )
