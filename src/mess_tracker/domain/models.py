"""Domain models for the mess tracker."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a student or admin stored in the database."""

    id: UUID
    name: str
    room_number: str
    login_code: str
    is_admin: bool
    is_active: bool
    password_hash: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UserSummary:
    """Minimal user view attached to meal entries."""

    id: UUID
    name: str
    room_number: str
    login_code: str
