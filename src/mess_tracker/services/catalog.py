"""Services for the meal plan and extra item catalogs."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from mess_tracker.domain.catalog import ExtraCategory, ExtraItem, MealPlan
from mess_tracker.domain.errors import NotFound


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans."""

    def list_meal_plans(self, active_only: bool = True) -> list[MealPlan]:
        """Return meal plans ordered by price."""

    def get_meal_plan(self, plan_id: UUID) -> MealPlan | None:
        """Return a meal plan by id, if present."""

    def create_meal_plan(self, payload: dict[str, object]) -> MealPlan:
        """Create a meal plan and return it."""

    def update_meal_plan(
        self, plan_id: UUID, payload: dict[str, object]
    ) -> MealPlan | None:
        """Update a meal plan and return it, or None when missing."""


class ExtraItemRepository(Protocol):
    """Persistence interface for extra items."""

    def list_extra_items(
        self, category: ExtraCategory | None = None, active_only: bool = True
    ) -> list[ExtraItem]:
        """Return extra items ordered by category then name."""

    def get_extra_item(self, item_id: UUID) -> ExtraItem | None:
        """Return an extra item by id, if present."""

    def create_extra_item(self, payload: dict[str, object]) -> ExtraItem:
        """Create an extra item and return it."""

    def update_extra_item(
        self, item_id: UUID, payload: dict[str, object]
    ) -> ExtraItem | None:
        """Update an extra item and return it, or None when missing."""


@dataclass
class MealPlanService:
    """Application service for the meal plan catalog."""

    repository: MealPlanRepository

    def list_plans(self) -> list[MealPlan]:
        """Return active plans, cheapest first."""
        return self.repository.list_meal_plans()

    def get_plan(self, plan_id: UUID) -> MealPlan:
        """Return a plan or raise NotFound."""
        plan = self.repository.get_meal_plan(plan_id)
        if plan is None:
            raise NotFound("Meal plan not found")
        return plan

    def get_active_plan(self, plan_id: UUID) -> MealPlan:
        """Return a plan that can still be purchased."""
        plan = self.repository.get_meal_plan(plan_id)
        if plan is None or not plan.is_active:
            raise NotFound("Meal plan not found or inactive")
        return plan

    def create_plan(self, payload: dict[str, object]) -> MealPlan:
        """Add a plan to the catalog."""
        return self.repository.create_meal_plan({"is_active": True, **payload})

    def update_plan(self, plan_id: UUID, changes: dict[str, object]) -> MealPlan:
        """Update catalog fields of a plan."""
        payload = {key: value for key, value in changes.items() if value is not None}
        if not payload:
            return self.get_plan(plan_id)
        plan = self.repository.update_meal_plan(plan_id, payload)
        if plan is None:
            raise NotFound("Meal plan not found")
        return plan

    def deactivate_plan(self, plan_id: UUID) -> MealPlan:
        """Soft-delete a plan; existing subscriptions keep referencing it."""
        plan = self.repository.update_meal_plan(plan_id, {"is_active": False})
        if plan is None:
            raise NotFound("Meal plan not found")
        return plan


@dataclass
class ExtraItemService:
    """Application service for the extra item catalog."""

    repository: ExtraItemRepository

    def list_items(self, category: ExtraCategory | None = None) -> list[ExtraItem]:
        """Return active items, optionally for one category."""
        return self.repository.list_extra_items(category=category)

    def get_item(self, item_id: UUID) -> ExtraItem:
        """Return an item or raise NotFound."""
        item = self.repository.get_extra_item(item_id)
        if item is None:
            raise NotFound("Extra item not found")
        return item

    def get_orderable_item(self, item_id: UUID) -> ExtraItem:
        """Return an item that can be added to a meal."""
        item = self.repository.get_extra_item(item_id)
        if item is None or not item.is_active:
            raise NotFound(f"Extra item {item_id} not found")
        return item

    def create_item(self, payload: dict[str, object]) -> ExtraItem:
        """Add an item to the catalog."""
        return self.repository.create_extra_item(
            {"unit": "piece", "is_active": True, **payload}
        )

    def update_item(self, item_id: UUID, changes: dict[str, object]) -> ExtraItem:
        """Update catalog fields of an item."""
        payload = {key: value for key, value in changes.items() if value is not None}
        if not payload:
            return self.get_item(item_id)
        item = self.repository.update_extra_item(item_id, payload)
        if item is None:
            raise NotFound("Extra item not found")
        return item

    def deactivate_item(self, item_id: UUID) -> ExtraItem:
        """Soft-delete an item; past meal entries keep their price snapshot."""
        item = self.repository.update_extra_item(item_id, {"is_active": False})
        if item is None:
            raise NotFound("Extra item not found")
        return item
