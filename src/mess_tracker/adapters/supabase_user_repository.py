"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from mess_tracker.adapters.supabase_rows import (
    parse_datetime,
    unique_violation_as_conflict,
)
from mess_tracker.domain.models import UserRecord
from mess_tracker.services.users import UserRepository

_COLUMNS = (
    "id, name, room_number, login_code, is_admin, is_active, password_hash, "
    "created_at, updated_at"
)
_DUPLICATE_CODE = "A user with this login code already exists"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def get_by_login_code(self, login_code: str) -> UserRecord | None:
        """Return the user holding a login code."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("login_code", login_code)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def list_users(self, is_admin: bool | None = None) -> list[UserRecord]:
        """Return active users ordered by name."""
        query = self.client.table("users").select(_COLUMNS).eq("is_active", True)
        if is_admin is not None:
            query = query.eq("is_admin", is_admin)
        response = query.order("name", desc=False).execute()
        return [_parse_user(row) for row in response.data or []]

    def list_users_by_ids(self, user_ids: list[UUID]) -> list[UserRecord]:
        """Return users matching the ids."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .in_("id", [str(user_id) for user_id in user_ids])
            .execute()
        )
        return [_parse_user(row) for row in response.data or []]

    def create_user(self, payload: dict[str, object]) -> UserRecord:
        """Create a new user row and return it."""
        with unique_violation_as_conflict(_DUPLICATE_CODE):
            response = self.client.table("users").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def update_user(self, user_id: UUID, payload: dict[str, object]) -> UserRecord:
        """Update a user row and return it."""
        with unique_violation_as_conflict(_DUPLICATE_CODE):
            response = (
                self.client.table("users")
                .update(payload)
                .eq("id", str(user_id))
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to update user in Supabase")
        return _parse_user(response.data[0])


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        room_number=str(row.get("room_number", "")),
        login_code=str(row.get("login_code", "")),
        is_admin=bool(row.get("is_admin", False)),
        is_active=bool(row.get("is_active", True)),
        password_hash=row.get("password_hash"),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
