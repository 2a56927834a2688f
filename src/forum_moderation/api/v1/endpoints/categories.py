"""Category management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from forum_moderation.api.v1.dependencies import (
    ActorDep,
    CategoryServiceDep,
    OptionalActorDep,
    SessionDep,
)
from forum_moderation.models import Category
from forum_moderation.schemas.category import (
    CategoryCreate,
    CategoryMove,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=list[CategoryTreeResponse])
async def list_categories(
    actor: OptionalActorDep,
    db: SessionDep,
    service: CategoryServiceDep,
    include_archived: bool = Query(False),
) -> list[CategoryTreeResponse]:
    """List the category tree in display order."""
    nodes = service.list_tree(db, actor, include_archived=include_archived)
    return [
        CategoryTreeResponse(
            **CategoryResponse.model_validate(node.category).model_dump(),
            children=[CategoryResponse.model_validate(child) for child in node.children],
        )
        for node in nodes
    ]


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    actor: ActorDep,
    db: SessionDep,
    service: CategoryServiceDep,
) -> Category:
    """Create a category at the end of its sibling set."""
    return service.create(db, actor, **category_data.model_dump())


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    actor: ActorDep,
    db: SessionDep,
    service: CategoryServiceDep,
) -> Category:
    """Edit a category's descriptive fields."""
    return service.update(db, actor, category_id, **category_data.model_dump(exclude_unset=True))


@router.post("/{category_id}/move", response_model=CategoryResponse)
async def move_category(
    category_id: int,
    move: CategoryMove,
    actor: ActorDep,
    db: SessionDep,
    service: CategoryServiceDep,
) -> Category:
    """Move a category up or down among its siblings."""
    return service.move(db, actor, category_id, move.direction)


@router.post("/{category_id}/toggle-active", response_model=CategoryResponse)
async def toggle_category_active(
    category_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: CategoryServiceDep,
) -> Category:
    """Activate or deactivate a category."""
    return service.toggle_active(db, actor, category_id)


@router.post("/{category_id}/archive", response_model=CategoryResponse)
async def archive_category(
    category_id: int,
    actor: ActorDep,
    db: SessionDep,
    service: CategoryServiceDep,
) -> Category:
    """Archive a category. Children are left as they are."""
    return service.archive(db, actor, category_id)
