"""Login and token endpoints."""

from fastapi import APIRouter, Depends

from mess_tracker.api.deps import bearer_token, get_container
from mess_tracker.api.schemas import LoginRequest
from mess_tracker.api.serializers import user_payload
from mess_tracker.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(
    body: LoginRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Exchange a login code for a bearer token."""
    token, user = container.auth_service.login(body.login_code, body.password)
    return {"message": "Login successful", "token": token, "user": user_payload(user)}


@router.post("/verify")
async def verify(
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Check a token and return its user."""
    user = container.auth_service.authenticate(token)
    return {"message": "Token is valid", "user": user_payload(user)}


@router.post("/refresh")
async def refresh(
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Reissue a token, accepting one that has already expired."""
    new_token, user = container.auth_service.refresh(token)
    return {
        "message": "Token refreshed successfully",
        "token": new_token,
        "user": user_payload(user),
    }
