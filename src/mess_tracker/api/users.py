"""User management endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from mess_tracker.api.deps import current_user, get_container, require_admin
from mess_tracker.api.schemas import UserCreateRequest, UserUpdateRequest
from mess_tracker.api.serializers import user_payload
from mess_tracker.containers import AppContainer
from mess_tracker.domain.models import UserRecord

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", dependencies=[Depends(require_admin)])
async def list_users(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return all active users."""
    users = container.user_service.list_active_users()
    return {
        "message": "Users retrieved successfully",
        "count": len(users),
        "users": [user_payload(user) for user in users],
    }


@router.get("/students", dependencies=[Depends(require_admin)])
async def list_students(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return active non-admin users."""
    students = container.user_service.list_students()
    return {
        "message": "Students retrieved successfully",
        "count": len(students),
        "students": [user_payload(user) for user in students],
    }


@router.get("/profile")
async def profile(user: UserRecord = Depends(current_user)) -> dict[str, object]:
    """Return the caller's own profile."""
    return {"message": "Profile retrieved successfully", "user": user_payload(user)}


@router.get("/{user_id}", dependencies=[Depends(require_admin)])
async def get_user(
    user_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    user = container.user_service.get_user(user_id)
    return {"message": "User retrieved successfully", "user": user_payload(user)}


@router.post(
    "", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)]
)
async def create_user(
    body: UserCreateRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Create a student or admin account."""
    user = container.user_service.create_user(
        name=body.name,
        room_number=body.room_number,
        login_code=body.login_code,
        is_admin=body.is_admin,
    )
    return {"message": "User created successfully", "user": user_payload(user)}


@router.put("/{user_id}", dependencies=[Depends(require_admin)])
async def update_user(
    user_id: UUID,
    body: UserUpdateRequest,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    user = container.user_service.update_user(user_id, body.changes())
    return {"message": "User updated successfully", "user": user_payload(user)}


@router.delete("/{user_id}", dependencies=[Depends(require_admin)])
async def delete_user(
    user_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Deactivate a user; admin accounts are refused."""
    container.user_service.deactivate_user(user_id)
    return {"message": "User deactivated successfully"}


@router.patch("/{user_id}/reactivate", dependencies=[Depends(require_admin)])
async def reactivate_user(
    user_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    user = container.user_service.reactivate_user(user_id)
    return {"message": "User reactivated successfully", "user": user_payload(user)}
