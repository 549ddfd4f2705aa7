"""Helpers shared by the Supabase repositories."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime

from postgrest.exceptions import APIError

from mess_tracker.domain.errors import Conflict

UNIQUE_VIOLATION = "23505"


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO timestamp column."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def parse_date(value: object) -> date:
    """Parse an ISO date column."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@contextmanager
def unique_violation_as_conflict(message: str) -> Iterator[None]:
    """Translate Postgres unique violations into Conflict errors."""
    try:
        yield
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise Conflict(message) from exc
        raise
