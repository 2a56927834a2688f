"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .category import (
    CategoryCreate,
    CategoryMove,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
)
from .moderation import ModerationLogResponse, ModerationLogSummary
from .post import (
    ArchivedPostResponse,
    PostResponse,
    PostStatsResponse,
    PostViewResponse,
    SoftDeleteRequest,
)
from .user import BanRequest, UserResponse

__all__ = [
    "CategoryCreate", "CategoryMove", "CategoryResponse", "CategoryTreeResponse", "CategoryUpdate",
    "ModerationLogResponse", "ModerationLogSummary",
    "ArchivedPostResponse", "PostResponse", "PostStatsResponse", "PostViewResponse",
    "SoftDeleteRequest",
    "BanRequest", "UserResponse",
]
