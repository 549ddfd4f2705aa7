"""Spending statistics over meal entries."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from mess_tracker.domain.meals import MealType
from mess_tracker.domain.stats import (
    DishFrequency,
    EntryCostRow,
    MealTypeBreakdown,
    MonthlyTotal,
    SpendingSummary,
)

DEFAULT_DISH_LIMIT = 20


class StatsRepository(Protocol):
    """Persistence interface for meal entry statistics."""

    def list_entry_costs(
        self, user_id: UUID, start: date | None, end: date | None
    ) -> list[EntryCostRow]:
        """Return cost rows of a user's active entries within a date range."""


@dataclass
class StatsService:
    """Read-only aggregations of a user's spending."""

    repository: StatsRepository

    def spending_summary(
        self, user_id: UUID, start: date | None = None, end: date | None = None
    ) -> SpendingSummary:
        """Return spending per meal type with overall totals."""
        rows = self.repository.list_entry_costs(user_id, start, end)
        return summarize_spending(rows)

    def dish_frequency(
        self,
        user_id: UUID,
        start: date | None = None,
        end: date | None = None,
        limit: int = DEFAULT_DISH_LIMIT,
    ) -> list[DishFrequency]:
        """Return the most frequently eaten dishes."""
        rows = self.repository.list_entry_costs(user_id, start, end)
        return rank_dishes(rows, limit)

    def monthly_totals(
        self, user_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[MonthlyTotal]:
        """Return spending per calendar month."""
        rows = self.repository.list_entry_costs(user_id, start, end)
        return total_by_month(rows)


def summarize_spending(rows: list[EntryCostRow]) -> SpendingSummary:
    """Group cost rows by meal type."""
    if not rows:
        return SpendingSummary()
    grouped: dict[MealType, list[float]] = defaultdict(list)
    for row in rows:
        grouped[row.meal_type].append(row.total_cost)
    breakdown = [
        MealTypeBreakdown(
            meal_type=meal_type,
            total_cost=sum(costs),
            total_meals=len(costs),
            avg_cost=sum(costs) / len(costs),
        )
        for meal_type in MealType
        if (costs := grouped.get(meal_type))
    ]
    overall_total = sum(item.total_cost for item in breakdown)
    overall_meals = sum(item.total_meals for item in breakdown)
    return SpendingSummary(
        meal_type_breakdown=breakdown,
        overall_total=overall_total,
        overall_meals=overall_meals,
        overall_avg=overall_total / overall_meals,
    )


def rank_dishes(rows: list[EntryCostRow], limit: int) -> list[DishFrequency]:
    """Group cost rows by dish, most frequent first."""
    grouped: dict[str, list[EntryCostRow]] = defaultdict(list)
    for row in rows:
        grouped[row.dish_name].append(row)
    dishes = [
        DishFrequency(
            dish_name=name,
            count=len(items),
            total_cost=sum(item.total_cost for item in items),
            avg_cost=sum(item.total_cost for item in items) / len(items),
            last_ordered=max(item.entry_date for item in items),
        )
        for name, items in grouped.items()
    ]
    dishes.sort(key=lambda dish: (-dish.count, dish.dish_name))
    return dishes[: max(limit, 0)]


def total_by_month(rows: list[EntryCostRow]) -> list[MonthlyTotal]:
    """Group cost rows by calendar month."""
    grouped: dict[str, list[float]] = defaultdict(list)
    for row in rows:
        grouped[row.entry_date.strftime("%Y-%m")].append(row.total_cost)
    return [
        MonthlyTotal(month=month, total_meals=len(costs), total_cost=sum(costs))
        for month, costs in sorted(grouped.items())
    ]
