"""User-related business logic."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from mess_tracker.domain.errors import Conflict, NotFound, PermissionDenied
from mess_tracker.domain.models import UserRecord, UserSummary

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def get_by_login_code(self, login_code: str) -> UserRecord | None:
        """Return the user holding a login code, active or not."""

    def list_users(self, is_admin: bool | None = None) -> list[UserRecord]:
        """Return active users ordered by name, optionally filtered by role."""

    def list_users_by_ids(self, user_ids: list[UUID]) -> list[UserRecord]:
        """Return the users with the given ids."""

    def create_user(self, payload: dict[str, object]) -> UserRecord:
        """Create and return a new user record."""

    def update_user(self, user_id: UUID, payload: dict[str, object]) -> UserRecord:
        """Update a user record and return it."""


class SecretHasher(Protocol):
    """Hashing interface for login secrets."""

    def hash(self, secret: str) -> str:
        """Return a salted hash of the secret."""

    def verify(self, secret: str, hashed: str) -> bool:
        """Return True when the secret matches the hash."""


def normalize_login_code(login_code: str) -> str:
    """Return the canonical upper-case form of a login code."""
    return login_code.strip().upper()


def derive_login_secret(login_code: str, year: int | None = None) -> str:
    """Return the deterministic secret seeded by a login code."""
    resolved_year = year or datetime.now(tz=UTC).year
    return f"{normalize_login_code(login_code)}_{resolved_year}"


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository
    hasher: SecretHasher

    def list_active_users(self) -> list[UserRecord]:
        """Return all active users."""
        return self.repository.list_users()

    def list_students(self) -> list[UserRecord]:
        """Return active non-admin users."""
        return self.repository.list_users(is_admin=False)

    def get_user(self, user_id: UUID) -> UserRecord:
        """Return a user or raise NotFound."""
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def get_active_user(self, user_id: UUID) -> UserRecord:
        """Return an active user or raise NotFound."""
        user = self.repository.get_user(user_id)
        if user is None or not user.is_active:
            raise NotFound("User not found or inactive")
        return user

    def find_by_login_code(self, login_code: str) -> UserRecord | None:
        """Return the active user for a login code, if any."""
        user = self.repository.get_by_login_code(normalize_login_code(login_code))
        if user is None or not user.is_active:
            return None
        return user

    def create_user(
        self, name: str, room_number: str, login_code: str, is_admin: bool = False
    ) -> UserRecord:
        """Create a user whose secret is derived from the login code."""
        code = normalize_login_code(login_code)
        if self.repository.get_by_login_code(code) is not None:
            raise Conflict("A user with this login code already exists")
        user = self.repository.create_user(
            {
                "name": name.strip(),
                "room_number": room_number.strip(),
                "login_code": code,
                "is_admin": is_admin,
                "is_active": True,
                "password_hash": self.hasher.hash(derive_login_secret(code)),
            }
        )
        logger.info("User created", extra={"user_id": str(user.id)})
        return user

    def update_user(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Apply field changes, regenerating the secret on a new login code."""
        user = self.get_user(user_id)
        payload = {key: value for key, value in changes.items() if value is not None}
        raw_code = payload.get("login_code")
        if isinstance(raw_code, str):
            code = normalize_login_code(raw_code)
            payload["login_code"] = code
            if code != user.login_code:
                existing = self.repository.get_by_login_code(code)
                if existing is not None and existing.id != user.id:
                    raise Conflict("A user with this login code already exists")
                payload["password_hash"] = self.hasher.hash(derive_login_secret(code))
        if not payload:
            return user
        return self.repository.update_user(user_id, payload)

    def deactivate_user(self, user_id: UUID) -> UserRecord:
        """Soft-delete a user; administrators are never deleted."""
        user = self.get_user(user_id)
        if user.is_admin:
            raise PermissionDenied("Cannot delete admin users")
        updated = self.repository.update_user(user_id, {"is_active": False})
        logger.info("User deactivated", extra={"user_id": str(user_id)})
        return updated

    def reactivate_user(self, user_id: UUID) -> UserRecord:
        """Mark a user active again."""
        self.get_user(user_id)
        return self.repository.update_user(user_id, {"is_active": True})

    def summaries(self, user_ids: list[UUID]) -> dict[UUID, UserSummary]:
        """Return user summaries keyed by id."""
        if not user_ids:
            return {}
        users = self.repository.list_users_by_ids(sorted(set(user_ids), key=str))
        return {
            user.id: UserSummary(
                id=user.id,
                name=user.name,
                room_number=user.room_number,
                login_code=user.login_code,
            )
            for user in users
        }
