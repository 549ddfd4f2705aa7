"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from mess_tracker.adapters.supabase_rows import (
    parse_date,
    parse_datetime,
    unique_violation_as_conflict,
)
from mess_tracker.domain.meals import (
    EntryType,
    ExtraLine,
    MealEntryDraft,
    MealEntryFilter,
    MealEntryRecord,
    MealType,
)
from mess_tracker.services.meals import DUPLICATE_ENTRY_MESSAGE, MealEntryRepository

_COLUMNS = (
    "id, user_id, subscription_id, entry_date, meal_type, dish_name, cost, "
    "extras, extras_cost, total_cost, entry_type, notes, is_active, created_at"
)


@dataclass
class SupabaseMealEntryRepository(MealEntryRepository):
    """Supabase implementation for meal entries."""

    client: Client

    def create_entry(self, draft: MealEntryDraft) -> MealEntryRecord:
        """Insert an active meal entry row."""
        payload = {
            "user_id": str(draft.user_id),
            "subscription_id": (
                str(draft.subscription_id) if draft.subscription_id else None
            ),
            "entry_date": draft.entry_date.isoformat(),
            "meal_type": draft.meal_type.value,
            "dish_name": draft.dish_name,
            "cost": draft.cost,
            "extras": [
                {
                    "extra_item_id": str(line.extra_item_id),
                    "name": line.name,
                    "quantity": line.quantity,
                    "price": line.price,
                    "total_cost": line.total_cost,
                }
                for line in draft.extras
            ],
            "extras_cost": draft.extras_cost,
            "total_cost": draft.total_cost,
            "entry_type": draft.entry_type.value,
            "notes": draft.notes,
            "is_active": True,
        }
        with unique_violation_as_conflict(DUPLICATE_ENTRY_MESSAGE):
            response = self.client.table("meal_entries").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal entry")
        return _parse_entry(response.data[0])

    def get_entry(self, entry_id: UUID) -> MealEntryRecord | None:
        """Return a meal entry by id."""
        response = (
            self.client.table("meal_entries")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def find_active_entry(
        self, user_id: UUID, entry_date: date, meal_type: MealType
    ) -> MealEntryRecord | None:
        """Return the active entry holding a (user, date, meal type) key."""
        response = (
            self.client.table("meal_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("entry_date", entry_date.isoformat())
            .eq("meal_type", meal_type.value)
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def list_entries(
        self, entry_filter: MealEntryFilter, limit: int, offset: int
    ) -> list[MealEntryRecord]:
        """Return a page of active entries, newest first."""
        query = _apply_filter(
            self.client.table("meal_entries").select(_COLUMNS), entry_filter
        )
        response = (
            query.order("entry_date", desc=True)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def count_entries(self, entry_filter: MealEntryFilter) -> int:
        """Return the number of active entries matching the filter."""
        query = _apply_filter(
            self.client.table("meal_entries").select("id", count="exact"),
            entry_filter,
        )
        response = query.limit(1).execute()
        return int(response.count or 0)

    def update_entry(
        self, entry_id: UUID, payload: dict[str, object]
    ) -> MealEntryRecord:
        """Update a meal entry row."""
        with unique_violation_as_conflict(DUPLICATE_ENTRY_MESSAGE):
            response = (
                self.client.table("meal_entries")
                .update(payload)
                .eq("id", str(entry_id))
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to update meal entry")
        return _parse_entry(response.data[0])


def _apply_filter(query, entry_filter: MealEntryFilter):  # type: ignore[no-untyped-def]
    query = query.eq("is_active", True)
    if entry_filter.user_id is not None:
        query = query.eq("user_id", str(entry_filter.user_id))
    if entry_filter.start_date is not None:
        query = query.gte("entry_date", entry_filter.start_date.isoformat())
    if entry_filter.end_date is not None:
        query = query.lte("entry_date", entry_filter.end_date.isoformat())
    if entry_filter.meal_type is not None:
        query = query.eq("meal_type", entry_filter.meal_type.value)
    return query


def _parse_entry(row: dict[str, object]) -> MealEntryRecord:
    subscription_id = row.get("subscription_id")
    return MealEntryRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        entry_date=parse_date(row["entry_date"]),
        meal_type=MealType(str(row["meal_type"])),
        dish_name=str(row.get("dish_name", "")),
        cost=float(row.get("cost") or 0.0),
        extras=[_parse_line(line) for line in row.get("extras") or []],
        extras_cost=float(row.get("extras_cost") or 0.0),
        total_cost=float(row.get("total_cost") or 0.0),
        entry_type=EntryType(str(row.get("entry_type") or "standalone")),
        subscription_id=UUID(str(subscription_id)) if subscription_id else None,
        notes=row.get("notes"),
        is_active=bool(row.get("is_active", True)),
        created_at=parse_datetime(row.get("created_at")),
    )


def _parse_line(line: dict[str, object]) -> ExtraLine:
    return ExtraLine(
        extra_item_id=UUID(str(line["extra_item_id"])),
        name=str(line.get("name", "")),
        quantity=int(line.get("quantity", 1)),
        price=float(line.get("price", 0.0)),
        total_cost=float(line.get("total_cost", 0.0)),
    )
