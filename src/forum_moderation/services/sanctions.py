"""User standing: bans, read-only mode and moderator grants."""
from __future__ import annotations

import logging
from typing import Literal

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from forum_moderation.core.errors import AuthorizationError, NotFoundError, PreconditionError
from forum_moderation.core.roles import Actor, RoleTier
from forum_moderation.db.time import utcnow
from forum_moderation.models import ActionType, TargetType, User
from forum_moderation.services.audit import AuditLog
from forum_moderation.services.authorization import require_tier

__all__ = ["UserSanctionService", "RoleFilter", "StatusFilter"]

logger = logging.getLogger(__name__)

RoleFilter = Literal["all", "admin", "moderator", "regular"]
StatusFilter = Literal["all", "banned", "read_only", "active"]


class UserSanctionService:
    """Service handling sanctions against forum users.

    Every operation needs forum admin and none can target a super admin.
    Set-style operations whose target is already in the requested state
    return the user unchanged without writing a log entry.
    """

    def __init__(self, audit: AuditLog | None = None) -> None:
        self.audit = audit or AuditLog()

    @staticmethod
    def _get_target(db: Session, user_id: int, action: str) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        if user.is_super_admin:
            raise AuthorizationError(f"Cannot {action} a super admin")
        return user

    def _commit(self, db: Session, user: User) -> User:
        db.commit()
        db.refresh(user)
        return user

    def ban(self, db: Session, actor: Actor, user_id: int, reason: str) -> User:
        """Ban a user. ``reason`` is mandatory."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "ban users")
        reason = (reason or "").strip()
        if not reason:
            raise PreconditionError("A reason is required to ban a user")
        user = self._get_target(db, user_id, "ban")
        if user.is_banned:
            logger.debug("User %s already banned", user.id)
            return user

        user.is_banned = True
        user.banned_at = utcnow()
        user.banned_by = actor.id
        user.banned_reason = reason
        self.audit.record(db, actor, ActionType.BAN_USER, TargetType.USER, user.id, reason=reason)
        return self._commit(db, user)

    def unban(self, db: Session, actor: Actor, user_id: int) -> User:
        """Lift a ban and clear its bookkeeping fields."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "unban users")
        user = self._get_target(db, user_id, "unban")
        if not user.is_banned:
            logger.debug("User %s is not banned", user.id)
            return user

        user.is_banned = False
        user.banned_at = None
        user.banned_by = None
        user.banned_reason = None
        self.audit.record(db, actor, ActionType.UNBAN_USER, TargetType.USER, user.id)
        return self._commit(db, user)

    def toggle_read_only(self, db: Session, actor: Actor, user_id: int) -> User:
        """Flip the flag the posting flow checks before accepting new content."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "change read-only status")
        user = self._get_target(db, user_id, "change read-only status of")

        user.is_read_only = not user.is_read_only
        action = ActionType.SET_READ_ONLY if user.is_read_only else ActionType.REMOVE_READ_ONLY
        self.audit.record(db, actor, action, TargetType.USER, user.id)
        return self._commit(db, user)

    def _set_moderator(self, db: Session, actor: Actor, user_id: int, value: bool) -> User:
        verb = "grant moderator to" if value else "revoke moderator from"
        require_tier(actor, RoleTier.FORUM_ADMIN, f"{verb} users")
        user = self._get_target(db, user_id, verb)
        if user.is_forum_admin:
            raise AuthorizationError(f"Cannot {verb} a forum admin")
        if user.is_forum_moderator == value:
            logger.debug("User %s moderator flag already %s", user.id, value)
            return user

        user.is_forum_moderator = value
        action = ActionType.MAKE_MODERATOR if value else ActionType.REMOVE_MODERATOR
        self.audit.record(db, actor, action, TargetType.USER, user.id)
        return self._commit(db, user)

    def grant_moderator(self, db: Session, actor: Actor, user_id: int) -> User:
        return self._set_moderator(db, actor, user_id, True)

    def revoke_moderator(self, db: Session, actor: Actor, user_id: int) -> User:
        return self._set_moderator(db, actor, user_id, False)

    def list_users(
        self,
        db: Session,
        actor: Actor,
        role: RoleFilter = "all",
        status: StatusFilter = "all",
        search: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[User]:
        """List users for the admin screen, newest accounts first."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "view users")
        stmt = select(User)

        if role == "admin":
            stmt = stmt.where(or_(User.is_super_admin.is_(True), User.is_forum_admin.is_(True)))
        elif role == "moderator":
            stmt = stmt.where(User.is_forum_moderator.is_(True))
        elif role == "regular":
            stmt = stmt.where(
                User.is_super_admin.is_(False),
                User.is_forum_admin.is_(False),
                User.is_forum_moderator.is_(False),
            )

        if status == "banned":
            stmt = stmt.where(User.is_banned.is_(True))
        elif status == "read_only":
            stmt = stmt.where(User.is_read_only.is_(True))
        elif status == "active":
            stmt = stmt.where(User.is_banned.is_(False), User.is_read_only.is_(False))

        if search:
            needle = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(User.email).like(needle),
                    func.lower(func.coalesce(User.display_name, "")).like(needle),
                )
            )

        stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
        return list(db.scalars(stmt.offset(offset).limit(limit)))
