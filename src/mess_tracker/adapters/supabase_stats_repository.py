"""Supabase repository for meal entry statistics."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from mess_tracker.adapters.supabase_rows import parse_date
from mess_tracker.domain.meals import MealType
from mess_tracker.domain.stats import EntryCostRow
from mess_tracker.services.stats import StatsRepository

PAGE_SIZE = 1000


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for stats queries."""

    client: Client

    def list_entry_costs(
        self, user_id: UUID, start: date | None, end: date | None
    ) -> list[EntryCostRow]:
        """Return cost rows of active entries in the date range, page by page."""
        rows: list[EntryCostRow] = []
        offset = 0
        while True:
            query = (
                self.client.table("meal_entries")
                .select("entry_date, meal_type, dish_name, total_cost")
                .eq("user_id", str(user_id))
                .eq("is_active", True)
            )
            if start is not None:
                query = query.gte("entry_date", start.isoformat())
            if end is not None:
                query = query.lte("entry_date", end.isoformat())
            response = (
                query.order("entry_date", desc=False)
                .order("id", desc=False)
                .range(offset, offset + PAGE_SIZE - 1)
                .execute()
            )
            page = response.data or []
            rows.extend(_parse_row(row) for row in page)
            if len(page) < PAGE_SIZE:
                return rows
            offset += PAGE_SIZE


def _parse_row(row: dict[str, object]) -> EntryCostRow:
    return EntryCostRow(
        entry_date=parse_date(row["entry_date"]),
        meal_type=MealType(str(row["meal_type"])),
        dish_name=str(row.get("dish_name", "")),
        total_cost=float(row.get("total_cost") or 0.0),
    )
