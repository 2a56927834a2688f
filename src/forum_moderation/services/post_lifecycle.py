# src/forum_moderation/services/post_lifecycle.py
"""State machine for a single forum post.

A post moves along three independent axes: visibility (visible/hidden), pin
scope (none/local/global) and deletion tier (active, soft-deleted,
archived). Archival is only reachable from soft-deleted and removes the live
row after writing a verbatim tombstone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from forum_moderation.core.errors import ConsistencyFailure, NotFoundError, PreconditionError
from forum_moderation.core.roles import Actor, RoleTier
from forum_moderation.db.time import utcnow
from forum_moderation.models import ActionType, ArchivedPost, Post, TargetType
from forum_moderation.services.audit import AuditLog
from forum_moderation.services.authorization import require_tier

__all__ = ["PostLifecycleService", "PostView", "PostListStatus"]

logger = logging.getLogger(__name__)

PostListStatus = Literal["all", "hidden", "pinned", "reported", "deleted"]


@dataclass
class PostView:
    """Read-path projection of a post.

    ``removed`` views carry no title or body.
    """

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
    deleted_at: Any = None
    deleted_by: int | None = None
    reported_count: int = 0

    @classmethod
    def full(cls, post: Post) -> PostView:
        return cls(
            id=post.id,
            removed=False,
            title=post.title,
            body=post.body,
            author_id=post.author_id,
            category_id=post.category_id,
            is_hidden=post.is_hidden,
            is_pinned=post.is_pinned,
            global_pinned=post.global_pinned,
            is_active=post.is_active,
            deleted_at=post.deleted_at,
            deleted_by=post.deleted_by,
            reported_count=post.reported_count,
        )

    @classmethod
    def placeholder(cls, post: Post) -> PostView:
        return cls(id=post.id, removed=True, category_id=post.category_id, is_active=post.is_active)


class PostLifecycleService:
    """Service owning every moderation transition on forum posts."""

    def __init__(self, audit: AuditLog | None = None) -> None:
        self.audit = audit or AuditLog()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @staticmethod
    def _tombstone_for(db: Session, post_id: int) -> ArchivedPost | None:
        return db.scalars(
            select(ArchivedPost).where(ArchivedPost.original_id == post_id)
        ).first()

    def _get_live(self, db: Session, post_id: int) -> Post:
        """Return the live post row or raise.

        An id that only survives as a tombstone is reported as a precondition
        failure so callers can tell "archived" apart from "never existed".
        """
        post = db.get(Post, post_id)
        if post is not None:
            return post
        if self._tombstone_for(db, post_id) is not None:
            raise PreconditionError(f"Post {post_id} has been archived")
        raise NotFoundError(f"Post {post_id} not found")

    @staticmethod
    def _require_not_deleted(post: Post, action: str) -> None:
        if post.is_soft_deleted:
            raise PreconditionError(f"Cannot {action} post {post.id}: it has been deleted")

    # ------------------------------------------------------------------
    # Flag toggles
    # ------------------------------------------------------------------
    def _toggle(
        self,
        db: Session,
        actor: Actor,
        post_id: int,
        *,
        attribute: str,
        required: RoleTier,
        action: str,
        on: ActionType,
        off: ActionType,
    ) -> Post:
        require_tier(actor, required, action)
        post = self._get_live(db, post_id)
        self._require_not_deleted(post, action)

        new_value = not getattr(post, attribute)
        setattr(post, attribute, new_value)
        self.audit.record(db, actor, on if new_value else off, TargetType.POST, post.id)
        db.commit()
        db.refresh(post)
        return post

    def toggle_hidden(self, db: Session, actor: Actor, post_id: int) -> Post:
        """Flip ``is_hidden`` on an active post (moderator and above)."""
        return self._toggle(
            db,
            actor,
            post_id,
            attribute="is_hidden",
            required=RoleTier.MODERATOR,
            action="hide or unhide",
            on=ActionType.HIDE_POST,
            off=ActionType.UNHIDE_POST,
        )

    def toggle_local_pin(self, db: Session, actor: Actor, post_id: int) -> Post:
        """Flip the per-category pin on an active post (moderator and above)."""
        return self._toggle(
            db,
            actor,
            post_id,
            attribute="is_pinned",
            required=RoleTier.MODERATOR,
            action="pin or unpin",
            on=ActionType.PIN_POST,
            off=ActionType.UNPIN_POST,
        )

    def toggle_global_pin(self, db: Session, actor: Actor, post_id: int) -> Post:
        """Flip the forum-wide pin on an active post (forum admin and above)."""
        return self._toggle(
            db,
            actor,
            post_id,
            attribute="global_pinned",
            required=RoleTier.FORUM_ADMIN,
            action="globally pin or unpin",
            on=ActionType.GLOBAL_PIN_POST,
            off=ActionType.GLOBAL_UNPIN_POST,
        )

    # ------------------------------------------------------------------
    # Deletion tiers
    # ------------------------------------------------------------------
    def soft_delete(
        self,
        db: Session,
        actor: Actor,
        post_id: int,
        reason: str | None = None,
    ) -> Post:
        """Mark an active post deleted. Reversible through :meth:`restore`."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "delete posts")
        post = self._get_live(db, post_id)
        if post.is_soft_deleted:
            raise PreconditionError(f"Post {post.id} is already deleted")

        post.deleted_at = utcnow()
        post.deleted_by = actor.id
        post.is_active = False
        self.audit.record(
            db,
            actor,
            ActionType.DELETE_POST,
            TargetType.POST,
            post.id,
            reason=reason.strip() if reason else None,
        )
        db.commit()
        db.refresh(post)
        return post

    def restore(self, db: Session, actor: Actor, post_id: int) -> Post:
        """Undo a soft delete while the live row still exists."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "restore posts")
        post = self._get_live(db, post_id)
        if not post.is_soft_deleted:
            raise PreconditionError(f"Post {post.id} is not deleted")
        if self._tombstone_for(db, post.id) is not None:
            raise PreconditionError(
                f"Post {post.id} has a pending archive; retry the archive instead"
            )

        post.deleted_at = None
        post.deleted_by = None
        post.is_active = True
        self.audit.record(db, actor, ActionType.RESTORE_POST, TargetType.POST, post.id)
        db.commit()
        db.refresh(post)
        return post

    def archive(self, db: Session, actor: Actor, post_id: int) -> ArchivedPost:
        """Move a soft-deleted post into the tombstone table.

        The tombstone insert is flushed before the live row is deleted and
        both commit together with the log entry. If a tombstone for this post
        already exists (an earlier attempt got as far as the insert) it is
        reused rather than duplicated.

        Raises:
            ConsistencyFailure: If the store rejects the combined write.
        """
        require_tier(actor, RoleTier.FORUM_ADMIN, "archive posts")
        post = self._get_live(db, post_id)
        if not post.is_soft_deleted:
            raise PreconditionError(
                f"Post {post.id} must be soft-deleted before it can be archived"
            )

        tombstone = self._tombstone_for(db, post.id)
        try:
            if tombstone is None:
                tombstone = ArchivedPost(
                    original_id=post.id,
                    data=post.snapshot(),
                    deleted_at=utcnow(),
                    deleted_by=actor.id,
                )
                db.add(tombstone)
                db.flush()
            else:
                logger.warning(
                    "Post %s already has tombstone %s; completing interrupted archive",
                    post.id,
                    tombstone.id,
                )
            db.delete(post)
            db.flush()
            self.audit.record(db, actor, ActionType.MOVE_TO_DELETED, TargetType.POST, post_id)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            live = db.get(Post, post_id) is not None
            archived = self._tombstone_for(db, post_id) is not None
            logger.error(
                "Archive of post %s failed (live row present=%s, tombstone present=%s)",
                post_id,
                live,
                archived,
                exc_info=True,
            )
            if not live and not archived:
                raise ConsistencyFailure(
                    f"Post {post_id} was removed without a tombstone"
                ) from exc
            raise ConsistencyFailure(
                f"Archive of post {post_id} did not complete; it is safe to retry"
            ) from exc

        db.refresh(tombstone)
        return tombstone

    # ------------------------------------------------------------------
    # Read paths
    # ------------------------------------------------------------------
    def view_post(self, db: Session, actor: Actor | None, post_id: int) -> PostView:
        """Return a post as the given actor is allowed to see it.

        Soft-deleted content is only shown to forum admins and hidden content
        only to moderators; everybody else gets a removed placeholder.
        """
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")

        tier = actor.tier if actor is not None and not actor.is_banned else RoleTier.NONE
        if post.is_soft_deleted and tier < RoleTier.FORUM_ADMIN:
            return PostView.placeholder(post)
        if post.is_hidden and tier < RoleTier.MODERATOR:
            return PostView.placeholder(post)
        return PostView.full(post)

    def list_posts(
        self,
        db: Session,
        actor: Actor,
        status: PostListStatus = "all",
        category_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Post]:
        """List posts for the moderation queue.

        ``all`` and the flag filters cover active posts only; ``deleted``
        lists soft-deleted posts and requires forum admin.
        """
        if status == "deleted":
            require_tier(actor, RoleTier.FORUM_ADMIN, "view deleted posts")
        else:
            require_tier(actor, RoleTier.MODERATOR, "view the moderation queue")

        stmt = select(Post)
        if status == "deleted":
            stmt = stmt.where(Post.deleted_at.is_not(None))
        else:
            stmt = stmt.where(Post.deleted_at.is_(None))
            if status == "hidden":
                stmt = stmt.where(Post.is_hidden.is_(True))
            elif status == "pinned":
                stmt = stmt.where((Post.is_pinned.is_(True)) | (Post.global_pinned.is_(True)))
            elif status == "reported":
                stmt = stmt.where(Post.reported_count > 0)
        if category_id is not None:
            stmt = stmt.where(Post.category_id == category_id)

        stmt = stmt.order_by(
            Post.global_pinned.desc(),
            Post.is_pinned.desc(),
            Post.created_at.desc(),
            Post.id.desc(),
        )
        return list(db.scalars(stmt.offset(offset).limit(limit)))

    def list_archived(
        self,
        db: Session,
        actor: Actor,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ArchivedPost]:
        """List tombstones, most recently deleted first."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "view archived posts")
        stmt = (
            select(ArchivedPost)
            .order_by(ArchivedPost.deleted_at.desc(), ArchivedPost.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(db.scalars(stmt))

    def post_stats(self, db: Session, actor: Actor) -> dict[str, int]:
        """Return dashboard counters for the moderation screens."""
        require_tier(actor, RoleTier.MODERATOR, "view moderation statistics")

        def _count(*criteria) -> int:
            return db.scalar(select(func.count()).select_from(Post).where(*criteria)) or 0

        live = Post.deleted_at.is_(None)
        return {
            "active": _count(live),
            "hidden": _count(live, Post.is_hidden.is_(True)),
            "pinned": _count(live, (Post.is_pinned.is_(True)) | (Post.global_pinned.is_(True))),
            "reported": _count(live, Post.reported_count > 0),
            "deleted": _count(Post.deleted_at.is_not(None)),
            "archived": db.scalar(select(func.count()).select_from(ArchivedPost)) or 0,
        }
