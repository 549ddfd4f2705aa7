"""Supabase repository for the meal plan catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from mess_tracker.domain.catalog import MealPlan, PlanType
from mess_tracker.domain.meals import MealType
from mess_tracker.services.catalog import MealPlanRepository

_COLUMNS = (
    "id, name, description, type, price, meals_per_day, total_meals, "
    "meal_types, includes, features, is_active"
)


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans."""

    client: Client

    def list_meal_plans(self, active_only: bool = True) -> list[MealPlan]:
        """Return meal plans, cheapest first."""
        query = self.client.table("meal_plans").select(_COLUMNS)
        if active_only:
            query = query.eq("is_active", True)
        response = query.order("price", desc=False).execute()
        return [_parse_plan(row) for row in response.data or []]

    def get_meal_plan(self, plan_id: UUID) -> MealPlan | None:
        """Return a meal plan by id."""
        response = (
            self.client.table("meal_plans")
            .select(_COLUMNS)
            .eq("id", str(plan_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])

    def create_meal_plan(self, payload: dict[str, object]) -> MealPlan:
        """Insert a meal plan row."""
        response = self.client.table("meal_plans").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        return _parse_plan(response.data[0])

    def update_meal_plan(
        self, plan_id: UUID, payload: dict[str, object]
    ) -> MealPlan | None:
        """Update a meal plan row."""
        response = (
            self.client.table("meal_plans")
            .update(payload)
            .eq("id", str(plan_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])


def _parse_plan(row: dict[str, object]) -> MealPlan:
    return MealPlan(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        description=str(row.get("description") or ""),
        type=PlanType(str(row.get("type") or PlanType.MINI_SINGLE.value)),
        price=float(row.get("price", 0.0)),
        meals_per_day=int(row.get("meals_per_day", 1)),
        total_meals=int(row.get("total_meals", 0)),
        meal_types=[MealType(value) for value in row.get("meal_types") or []],
        includes=list(row.get("includes") or []),
        features=list(row.get("features") or []),
        is_active=bool(row.get("is_active", True)),
    )
