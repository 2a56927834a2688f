"""Ordering and lifecycle rules for the two-level category tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from forum_moderation.core.errors import (
    AuthorizationError,
    ConsistencyFailure,
    DuplicateSlugError,
    NotFoundError,
    PreconditionError,
)
from forum_moderation.core.roles import Actor, RoleTier
from forum_moderation.models import ActionType, Category, TargetType
from forum_moderation.models.category import DEFAULT_CATEGORY_COLOR
from forum_moderation.services.audit import AuditLog
from forum_moderation.services.authorization import require_tier

__all__ = ["CategoryTreeService", "CategoryNode", "Direction"]

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]


@dataclass
class CategoryNode:
    """A top-level category with its ordered children."""

    category: Category
    children: list[Category] = field(default_factory=list)


class CategoryTreeService:
    """Service handling category creation, ordering and archival."""

    def __init__(self, audit: AuditLog | None = None) -> None:
        self.audit = audit or AuditLog()

    @staticmethod
    def _get(db: Session, category_id: int) -> Category:
        category = db.get(Category, category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    @staticmethod
    def _siblings_stmt(parent_id: int | None):
        stmt = select(Category)
        if parent_id is None:
            return stmt.where(Category.parent_id.is_(None))
        return stmt.where(Category.parent_id == parent_id)

    @staticmethod
    def _ensure_slug_free(db: Session, slug: str, exclude_id: int | None = None) -> None:
        stmt = select(Category.id).where(Category.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        if db.scalar(stmt) is not None:
            raise DuplicateSlugError(f"Category slug '{slug}' already exists")

    def create(
        self,
        db: Session,
        actor: Actor,
        *,
        name: str,
        slug: str,
        parent_id: int | None = None,
        description: str | None = None,
        emoji: str | None = None,
        color: str | None = None,
    ) -> Category:
        """Create a category at the end of its sibling set."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "create categories")
        name = name.strip()
        slug = slug.strip()
        if not name or not slug:
            raise PreconditionError("Name and slug are required")

        if parent_id is not None:
            parent = self._get(db, parent_id)
            if parent.parent_id is not None:
                raise PreconditionError(
                    "Categories can only be nested one level deep"
                )
            if parent.is_archived:
                raise PreconditionError(f"Parent category {parent.id} is archived")
        self._ensure_slug_free(db, slug)

        sibling_orders = self._siblings_stmt(parent_id).with_only_columns(
            func.max(Category.display_order)
        )
        current_max = db.scalar(sibling_orders)

        category = Category(
            name=name,
            slug=slug,
            parent_id=parent_id,
            description=description or None,
            emoji=emoji or None,
            color=color or DEFAULT_CATEGORY_COLOR,
            display_order=0 if current_max is None else current_max + 1,
            is_active=True,
            is_archived=False,
            created_by=actor.id,
        )
        db.add(category)
        try:
            db.flush()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateSlugError(f"Category slug '{slug}' already exists") from exc
        self.audit.record(db, actor, ActionType.CREATE_CATEGORY, TargetType.CATEGORY, category.id)
        db.commit()
        db.refresh(category)
        return category

    def update(
        self,
        db: Session,
        actor: Actor,
        category_id: int,
        *,
        name: str | None = None,
        slug: str | None = None,
        description: str | None = None,
        emoji: str | None = None,
        color: str | None = None,
    ) -> Category:
        """Edit descriptive fields. Placement in the tree is left untouched."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "edit categories")
        category = self._get(db, category_id)

        changes: dict[str, str | None] = {}
        if name is not None:
            if not name.strip():
                raise PreconditionError("Name cannot be empty")
            changes["name"] = name.strip()
        if slug is not None:
            slug = slug.strip()
            if not slug:
                raise PreconditionError("Slug cannot be empty")
            self._ensure_slug_free(db, slug, exclude_id=category.id)
            changes["slug"] = slug
        if description is not None:
            changes["description"] = description or None
        if emoji is not None:
            changes["emoji"] = emoji or None
        if color is not None:
            changes["color"] = color or DEFAULT_CATEGORY_COLOR

        changed = {key: value for key, value in changes.items() if getattr(category, key) != value}
        if not changed:
            logger.debug("Category %s edit changes nothing", category.id)
            return category
        for key, value in changed.items():
            setattr(category, key, value)

        self.audit.record(db, actor, ActionType.EDIT_CATEGORY, TargetType.CATEGORY, category.id)
        db.commit()
        db.refresh(category)
        return category

    def move(self, db: Session, actor: Actor, category_id: int, direction: Direction) -> Category:
        """Swap ``display_order`` with the adjacent sibling.

        Moving the first sibling up or the last one down returns the category
        unchanged and writes nothing.

        Raises:
            ConsistencyFailure: If the two-row swap could not be committed.
        """
        require_tier(actor, RoleTier.FORUM_ADMIN, "reorder categories")
        if direction not in ("up", "down"):
            raise PreconditionError(f"Unknown direction '{direction}'")
        category = self._get(db, category_id)

        # Re-read current orders so the swap never uses stale values.
        siblings = list(
            db.scalars(
                self._siblings_stmt(category.parent_id)
                .order_by(Category.display_order, Category.id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
        )
        rank = next(i for i, sibling in enumerate(siblings) if sibling.id == category.id)
        neighbour_rank = rank - 1 if direction == "up" else rank + 1
        if neighbour_rank < 0 or neighbour_rank >= len(siblings):
            logger.debug("Category %s already at %s boundary", category.id, direction)
            return category

        neighbour = siblings[neighbour_rank]
        neighbour_id = neighbour.id
        if neighbour.display_order == category.display_order:
            logger.error(
                "Categories %s and %s share display_order %s",
                category.id,
                neighbour_id,
                category.display_order,
            )
            raise ConsistencyFailure(
                f"Category {category.id} shares its display order with sibling {neighbour_id}"
            )
        try:
            category.display_order, neighbour.display_order = (
                neighbour.display_order,
                category.display_order,
            )
            self.audit.record(
                db,
                actor,
                ActionType.REORDER_CATEGORY,
                TargetType.CATEGORY,
                category.id,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "Swapping display_order of categories %s and %s failed",
                category_id,
                neighbour_id,
                exc_info=True,
            )
            raise ConsistencyFailure(
                f"Reordering category {category_id} did not complete; it is safe to retry"
            ) from exc

        db.refresh(category)
        return category

    def toggle_active(self, db: Session, actor: Actor, category_id: int) -> Category:
        """Flip ``is_active``. Archived categories cannot be reactivated."""
        require_tier(actor, RoleTier.FORUM_ADMIN, "activate or deactivate categories")
        category = self._get(db, category_id)
        if category.is_archived:
            raise PreconditionError(f"Category {category.id} is archived")

        category.is_active = not category.is_active
        action = ActionType.ACTIVATE_CATEGORY if category.is_active else ActionType.DEACTIVATE_CATEGORY
        self.audit.record(db, actor, action, TargetType.CATEGORY, category.id)
        db.commit()
        db.refresh(category)
        return category

    def archive(self, db: Session, actor: Actor, category_id: int) -> Category:
        """Archive and deactivate a category.

        Children are not touched and keep their own active flag.
        """
        require_tier(actor, RoleTier.FORUM_ADMIN, "archive categories")
        category = self._get(db, category_id)
        if category.is_archived:
            logger.debug("Category %s already archived", category.id)
            return category

        category.is_archived = True
        category.is_active = False
        self.audit.record(db, actor, ActionType.ARCHIVE_CATEGORY, TargetType.CATEGORY, category.id)
        db.commit()
        db.refresh(category)
        return category

    def list_tree(
        self,
        db: Session,
        actor: Actor | None = None,
        include_archived: bool = False,
    ) -> list[CategoryNode]:
        """Return top-level categories with their children, in display order."""
        if include_archived:
            if actor is None:
                raise AuthorizationError(
                    "View archived categories requires the forum admin role",
                    required=RoleTier.FORUM_ADMIN,
                )
            require_tier(actor, RoleTier.FORUM_ADMIN, "view archived categories")

        stmt = select(Category).order_by(Category.display_order, Category.id)
        if not include_archived:
            stmt = stmt.where(Category.is_archived.is_(False))
        categories = list(db.scalars(stmt))

        nodes: dict[int, CategoryNode] = {}
        for category in categories:
            if category.parent_id is None:
                nodes[category.id] = CategoryNode(category=category)
        for category in categories:
            if category.parent_id is not None and category.parent_id in nodes:
                nodes[category.parent_id].children.append(category)
        return list(nodes.values())
