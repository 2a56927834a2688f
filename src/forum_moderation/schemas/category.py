# src/forum_moderation/schemas/category.py
"""Category-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Schema for creating a new category."""

    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    parent_id: int | None = None
    description: str | None = None
    emoji: str | None = None
    color: str | None = None


class CategoryUpdate(BaseModel):
    """Schema for editing descriptive category fields."""

    name: str | None = None
    slug: str | None = Field(default=None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str | None = None
    emoji: str | None = None
    color: str | None = None


class CategoryMove(BaseModel):
    """Schema for moving a category within its sibling set."""

    direction: Literal["up", "down"]


class CategoryResponse(BaseModel):
    """Schema for category information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    parent_id: int | None
    slug: str
    name: str
    description: str | None
    emoji: str | None
    color: str
    display_order: int
    is_active: bool
    is_archived: bool
    created_at: datetime


class CategoryTreeResponse(CategoryResponse):
    """Top-level category with its ordered children."""

    children: list[CategoryResponse] = []
