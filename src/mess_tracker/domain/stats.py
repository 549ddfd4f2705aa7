"""Domain models for spending statistics."""

from dataclasses import dataclass, field
from datetime import date

from mess_tracker.domain.meals import MealType


@dataclass(frozen=True)
class EntryCostRow:
    """Cost data of a single active meal entry."""

    entry_date: date
    meal_type: MealType
    dish_name: str
    total_cost: float


@dataclass(frozen=True)
class MealTypeBreakdown:
    """Spending for one meal type."""

    meal_type: MealType
    total_cost: float
    total_meals: int
    avg_cost: float


@dataclass(frozen=True)
class SpendingSummary:
    """Spending grouped by meal type with overall totals."""

    meal_type_breakdown: list[MealTypeBreakdown] = field(default_factory=list)
    overall_total: float = 0.0
    overall_meals: int = 0
    overall_avg: float = 0.0


@dataclass(frozen=True)
class DishFrequency:
    """How often a dish was eaten and what it cost."""

    dish_name: str
    count: int
    total_cost: float
    avg_cost: float
    last_ordered: date


@dataclass(frozen=True)
class MonthlyTotal:
    """Spending for one calendar month."""

    month: str
    total_meals: int
    total_cost: float


@dataclass(frozen=True)
class SubscriptionStats:
    """Subscription counts and revenue for the admin dashboard."""

    total_subscriptions: int
    active_subscriptions: int
    pending_subscriptions: int
    expired_subscriptions: int
    cancelled_subscriptions: int
    total_revenue: float
    pending_revenue: float
