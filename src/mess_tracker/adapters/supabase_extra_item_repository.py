"""Supabase repository for the extra item catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from mess_tracker.domain.catalog import ExtraCategory, ExtraItem
from mess_tracker.services.catalog import ExtraItemRepository

_COLUMNS = "id, name, description, price, category, unit, is_active"


@dataclass
class SupabaseExtraItemRepository(ExtraItemRepository):
    """Supabase implementation for extra items."""

    client: Client

    def list_extra_items(
        self, category: ExtraCategory | None = None, active_only: bool = True
    ) -> list[ExtraItem]:
        """Return extra items ordered by category then name."""
        query = self.client.table("extra_items").select(_COLUMNS)
        if active_only:
            query = query.eq("is_active", True)
        if category is not None:
            query = query.eq("category", category.value)
        response = (
            query.order("category", desc=False).order("name", desc=False).execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def get_extra_item(self, item_id: UUID) -> ExtraItem | None:
        """Return an extra item by id."""
        response = (
            self.client.table("extra_items")
            .select(_COLUMNS)
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def create_extra_item(self, payload: dict[str, object]) -> ExtraItem:
        """Insert an extra item row."""
        response = self.client.table("extra_items").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create extra item")
        return _parse_item(response.data[0])

    def update_extra_item(
        self, item_id: UUID, payload: dict[str, object]
    ) -> ExtraItem | None:
        """Update an extra item row."""
        response = (
            self.client.table("extra_items")
            .update(payload)
            .eq("id", str(item_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])


def _parse_item(row: dict[str, object]) -> ExtraItem:
    return ExtraItem(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        price=float(row.get("price", 0.0)),
        category=ExtraCategory(str(row.get("category") or "special")),
        unit=str(row.get("unit") or "piece"),
        description=row.get("description"),
        is_active=bool(row.get("is_active", True)),
    )
