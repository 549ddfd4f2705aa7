"""Pydantic request models for the HTTP API."""

from datetime import UTC, date, datetime, timedelta
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from mess_tracker.domain.catalog import ExtraCategory, PlanType
from mess_tracker.domain.meals import MealType

LOGIN_CODE_PATTERN = r"^[A-Za-z0-9]+$"


class CamelModel(BaseModel):
    """Base model accepting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self) -> dict[str, object]:
        """Return all fields in JSON-ready form."""
        return self.model_dump(mode="json")

    def changes(self) -> dict[str, object]:
        """Return only the fields the client sent."""
        return self.model_dump(exclude_unset=True)


def _check_entry_date(value: date | None) -> date | None:
    if value is None:
        return value
    today = datetime.now(tz=UTC).date()
    if value > today:
        raise ValueError("Entry date cannot be in the future")
    if value < today - timedelta(days=365):
        raise ValueError("Entry date cannot be more than one year ago")
    return value


class LoginRequest(CamelModel):
    login_code: str = Field(min_length=3, max_length=20, pattern=LOGIN_CODE_PATTERN)
    password: str | None = None


class UserCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    room_number: str = Field(min_length=1, max_length=20)
    login_code: str = Field(min_length=3, max_length=20, pattern=LOGIN_CODE_PATTERN)
    is_admin: bool = False


class UserUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    room_number: str | None = Field(default=None, min_length=1, max_length=20)
    login_code: str | None = Field(
        default=None, min_length=3, max_length=20, pattern=LOGIN_CODE_PATTERN
    )
    is_admin: bool | None = None


class ExtraRequestModel(CamelModel):
    extra_item_id: UUID
    quantity: int = Field(default=1, ge=1)


class MealEntryCreateRequest(CamelModel):
    """Body of an admin meal entry."""

    user_id: UUID
    entry_date: date
    meal_type: MealType
    dish_name: str = Field(min_length=1, max_length=200)
    cost: float = Field(default=0.0, ge=0, le=10000)
    extras: list[ExtraRequestModel] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("entry_date")
    @classmethod
    def _validate_entry_date(cls, value: date | None) -> date | None:
        return _check_entry_date(value)


class MealEntryUpdateRequest(CamelModel):
    entry_date: date | None = None
    meal_type: MealType | None = None
    dish_name: str | None = Field(default=None, min_length=1, max_length=200)
    cost: float | None = Field(default=None, ge=0, le=10000)
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("entry_date")
    @classmethod
    def _validate_entry_date(cls, value: date | None) -> date | None:
        return _check_entry_date(value)


class MealPlanCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    type: PlanType
    price: float = Field(ge=0)
    meals_per_day: int = Field(ge=1, le=3)
    total_meals: int = Field(ge=1)
    meal_types: list[MealType] = Field(min_length=1)
    includes: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)


class MealPlanUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    type: PlanType | None = None
    price: float | None = Field(default=None, ge=0)
    meals_per_day: int | None = Field(default=None, ge=1, le=3)
    total_meals: int | None = Field(default=None, ge=1)
    meal_types: list[MealType] | None = Field(default=None, min_length=1)
    includes: list[str] | None = None
    features: list[str] | None = None
    is_active: bool | None = None


class ExtraItemCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    price: float = Field(ge=0)
    category: ExtraCategory
    unit: str = Field(default="piece", min_length=1, max_length=20)


class ExtraItemUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    price: float | None = Field(default=None, ge=0)
    category: ExtraCategory | None = None
    unit: str | None = Field(default=None, min_length=1, max_length=20)
    is_active: bool | None = None


class SubscriptionCreateRequest(CamelModel):
    """Body of a new subscription; ``user_id`` is honoured for admins only."""

    meal_plan_id: UUID
    start_date: date
    end_date: date
    user_id: UUID | None = None
    amount_paid: float = Field(default=0.0, ge=0)
    notes: str | None = Field(default=None, max_length=500)
    auto_renew: bool = False
    pending: bool = False


class SubscriptionUpdateRequest(CamelModel):
    notes: str | None = Field(default=None, max_length=500)
    auto_renew: bool | None = None
    end_date: date | None = None
    amount_paid: float | None = Field(default=None, ge=0)


class PaymentRequest(CamelModel):
    amount_paid: float = Field(ge=0)
