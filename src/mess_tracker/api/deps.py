"""Request dependencies for authentication and authorization."""

from uuid import UUID

from fastapi import Depends, Header, Request

from mess_tracker.containers import AppContainer
from mess_tracker.domain.errors import (
    AuthenticationFailed,
    PermissionDenied,
    ValidationFailed,
)
from mess_tracker.domain.models import UserRecord


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the application."""
    return request.app.state.container


def bearer_token(authorization: str | None = Header(default=None)) -> str:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        raise AuthenticationFailed("Access denied. No token provided.")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationFailed("Access denied. No token provided.")
    return token.strip()


async def current_user(
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> UserRecord:
    """Resolve the active user behind the bearer token."""
    return container.auth_service.authenticate(token)


async def require_admin(user: UserRecord = Depends(current_user)) -> UserRecord:
    """Ensure the caller is an administrator."""
    if not user.is_admin:
        raise PermissionDenied("Admin access required")
    return user


def ensure_owner_or_admin(user: UserRecord, user_id: UUID | None) -> None:
    """Allow admins, or users acting on their own records."""
    if user_id is None:
        raise ValidationFailed("User ID is required")
    if not user.is_admin and user.id != user_id:
        raise PermissionDenied("You can only access your own data")
