"""Domain models for meal entries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from mess_tracker.domain.models import UserSummary


class MealType(StrEnum):
    """Meals served by the mess."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class EntryType(StrEnum):
    """How the base meal of an entry was paid for."""

    SUBSCRIPTION = "subscription"
    STANDALONE = "standalone"
    EXTRA_ONLY = "extra_only"


@dataclass(frozen=True)
class ExtraLine:
    """An extra item ordered with a meal, priced at order time."""

    extra_item_id: UUID
    name: str
    quantity: int
    price: float
    total_cost: float


@dataclass(frozen=True)
class ExtraRequest:
    """A requested extra item and quantity."""

    extra_item_id: UUID
    quantity: int = 1


@dataclass(frozen=True)
class MealEntryDraft:
    """Resolved meal entry ready to be persisted."""

    user_id: UUID
    entry_date: date
    meal_type: MealType
    dish_name: str
    cost: float
    extras: list[ExtraLine]
    extras_cost: float
    total_cost: float
    entry_type: EntryType
    subscription_id: UUID | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MealEntryRecord:
    """Persisted meal entry row."""

    id: UUID
    user_id: UUID
    entry_date: date
    meal_type: MealType
    dish_name: str
    cost: float
    extras: list[ExtraLine]
    extras_cost: float
    total_cost: float
    entry_type: EntryType
    subscription_id: UUID | None = None
    notes: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


@dataclass(frozen=True)
class MealEntryFilter:
    """Query options for listing meal entries."""

    user_id: UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    meal_type: MealType | None = None


@dataclass(frozen=True)
class MealEntryPage:
    """A page of meal entries with the total match count."""

    entries: list[MealEntryRecord]
    total_count: int
    page: int
    limit: int
    users: dict[UUID, UserSummary] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        """Return the number of pages for the current limit."""
        return -(-self.total_count // self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page * self.limit < self.total_count

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1
