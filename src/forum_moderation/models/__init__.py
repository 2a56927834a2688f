# src/forum_moderation/models/__init__.py
"""SQLAlchemy models for the forum moderation service."""

from .category import Category
from .moderation import ActionType, ModerationLog, TargetType
from .post import ArchivedPost, Post
from .user import User

__all__ = [
    "Category",
    "ActionType", "ModerationLog", "TargetType",
    "ArchivedPost", "Post",
    "User",
]
