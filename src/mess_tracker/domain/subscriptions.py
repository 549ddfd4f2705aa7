"""Domain models for meal plan subscriptions."""

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import StrEnum
from uuid import UUID


class SubscriptionStatus(StrEnum):
    """Lifecycle states of a subscription."""

    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SubscriptionRecord:
    """A user's purchase of a meal plan."""

    id: UUID
    user_id: UUID
    meal_plan_id: UUID
    start_date: date
    end_date: date
    status: SubscriptionStatus
    total_amount: float
    amount_paid: float
    remaining_meals: int
    total_meals: int
    notes: str | None = None
    auto_renew: bool = False
    created_at: datetime | None = None

    def contains(self, day: date) -> bool:
        """Return True when the day falls inside the subscription range."""
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        """Return True when [start, end] intersects the subscription range."""
        return self.start_date <= end and self.end_date >= start

    def is_lapsed(self, today: date) -> bool:
        """Return True for an active subscription whose end date has passed."""
        return self.status == SubscriptionStatus.ACTIVE and self.end_date < today

    def days_remaining(self, now: datetime) -> int:
        """Return whole days left until the end date, never negative."""
        end = datetime.combine(self.end_date, time.min, tzinfo=now.tzinfo)
        days = math.ceil((end - now).total_seconds() / 86400)
        return max(0, days)

    @property
    def progress(self) -> int:
        """Percentage of meals consumed."""
        if self.total_meals == 0:
            return 0
        consumed = self.total_meals - self.remaining_meals
        return math.floor(consumed * 100 / self.total_meals + 0.5)

    @property
    def balance_due(self) -> float:
        return self.total_amount - self.amount_paid
