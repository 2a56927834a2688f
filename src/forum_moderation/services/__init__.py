"""Business logic services for the forum moderation subsystem."""

from .audit import AuditLog, LogQuery
from .category_tree import CategoryTreeService
from .post_lifecycle import PostLifecycleService, PostView
from .sanctions import UserSanctionService

__all__ = [
    "AuditLog",
    "LogQuery",
    "CategoryTreeService",
    "PostLifecycleService",
    "PostView",
    "UserSanctionService",
]
