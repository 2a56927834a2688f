"""API endpoint modules for version 1."""

from .categories import router as categories_router
from .moderation import router as moderation_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "categories_router",
    "moderation_router",
    "posts_router",
    "users_router",
]
