"""Domain models for the meal plan and extra item catalogs."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from mess_tracker.domain.meals import MealType


class PlanType(StrEnum):
    """Purchasable subscription tiers."""

    MINI_SINGLE = "mini_single"
    MINI_DOUBLE = "mini_double"
    FULL_DOUBLE = "full_double"


class ExtraCategory(StrEnum):
    """Categories of add-on items."""

    RICE = "rice"
    DAL = "dal"
    ROTI = "roti"
    DAL_RICE = "dal_rice"
    SPECIAL = "special"


@dataclass(frozen=True)
class MealPlan:
    """A subscription tier in the catalog."""

    id: UUID
    name: str
    description: str
    type: PlanType
    price: float
    meals_per_day: int
    total_meals: int
    meal_types: list[MealType]
    includes: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    is_active: bool = True

    def covers(self, meal_type: MealType) -> bool:
        """Return True when the plan includes the given meal type."""
        return meal_type in self.meal_types


@dataclass(frozen=True)
class ExtraItem:
    """An add-on item orderable alongside any meal."""

    id: UUID
    name: str
    price: float
    category: ExtraCategory
    unit: str = "piece"
    description: str | None = None
    is_active: bool = True
