"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from forum_moderation.core.roles import Actor
from forum_moderation.core.security import JWTError, decode_subject
from forum_moderation.db.session import get_db
from forum_moderation.models import User
from forum_moderation.services import (
    AuditLog,
    CategoryTreeService,
    PostLifecycleService,
    UserSanctionService,
)

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

_audit_log = AuditLog()
_post_service = PostLifecycleService(_audit_log)
_category_service = CategoryTreeService(_audit_log)
_sanction_service = UserSanctionService(_audit_log)


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _load_user(token: str, db: Session) -> User:
    try:
        user_id = decode_subject(token)
    except JWTError as err:
        raise _credentials_error() from err
    if user_id is None:
        raise _credentials_error()

    user = db.get(User, user_id)
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    return _load_user(credentials.credentials, db)


def get_actor(current_user: Annotated[User, Depends(get_current_user)]) -> Actor:
    """Snapshot the caller's role and sanction flags for this request."""
    return Actor.from_user(current_user)


def get_optional_actor(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    db: SessionDep,
) -> Actor | None:
    """Return the caller's snapshot, or None for anonymous reads."""
    if credentials is None:
        return None
    return Actor.from_user(_load_user(credentials.credentials, db))


def get_audit_log() -> AuditLog:
    return _audit_log


def get_post_service() -> PostLifecycleService:
    return _post_service


def get_category_service() -> CategoryTreeService:
    return _category_service


def get_sanction_service() -> UserSanctionService:
    return _sanction_service


# Type aliases for route signatures
ActorDep = Annotated[Actor, Depends(get_actor)]
OptionalActorDep = Annotated[Actor | None, Depends(get_optional_actor)]
AuditLogDep = Annotated[AuditLog, Depends(get_audit_log)]
PostServiceDep = Annotated[PostLifecycleService, Depends(get_post_service)]
CategoryServiceDep = Annotated[CategoryTreeService, Depends(get_category_service)]
SanctionServiceDep = Annotated[UserSanctionService, Depends(get_sanction_service)]
