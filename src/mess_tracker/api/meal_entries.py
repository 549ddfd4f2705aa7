"""Meal entry logging and reporting endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from mess_tracker.api.deps import (
    current_user,
    ensure_owner_or_admin,
    get_container,
    require_admin,
)
from mess_tracker.api.schemas import MealEntryCreateRequest, MealEntryUpdateRequest
from mess_tracker.api.serializers import (
    dish_payload,
    entry_page_payload,
    meal_entry_payload,
    monthly_payload,
    spending_summary_payload,
)
from mess_tracker.containers import AppContainer
from mess_tracker.domain.errors import PermissionDenied, ValidationFailed
from mess_tracker.domain.meals import ExtraRequest, MealEntryFilter, MealType
from mess_tracker.domain.models import UserRecord
from mess_tracker.services.stats import DEFAULT_DISH_LIMIT

router = APIRouter(prefix="/meal-entries", tags=["meal-entries"])

MAX_PAGE_SIZE = 1000


def _date_range(
    start: date | None, end: date | None
) -> tuple[date | None, date | None]:
    if start and end and start > end:
        raise ValidationFailed("Start date must be before end date")
    return start, end


@router.get("")
async def list_entries(  # noqa: PLR0913
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    meal_type: MealType | None = Query(default=None, alias="mealType"),
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    page: int = Query(default=1, ge=1),
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the caller's entries, or everyone's for admins."""
    start, end = _date_range(start_date, end_date)
    entry_filter = MealEntryFilter(
        user_id=None if user.is_admin else user.id,
        start_date=start,
        end_date=end,
        meal_type=meal_type,
    )
    result = container.meal_entry_service.list_entries(
        entry_filter, page=page, limit=limit, include_users=user.is_admin
    )
    return {
        "message": "Meal entries retrieved successfully",
        **entry_page_payload(result),
    }


@router.get("/admin/all", dependencies=[Depends(require_admin)])
async def list_all_entries(  # noqa: PLR0913
    user_id: UUID | None = Query(default=None, alias="userId"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    meal_type: MealType | None = Query(default=None, alias="mealType"),
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    page: int = Query(default=1, ge=1),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return entries of all users with their summaries attached."""
    start, end = _date_range(start_date, end_date)
    entry_filter = MealEntryFilter(
        user_id=user_id, start_date=start, end_date=end, meal_type=meal_type
    )
    result = container.meal_entry_service.list_entries(
        entry_filter, page=page, limit=limit, include_users=True
    )
    return {
        "message": "Meal entries retrieved successfully",
        **entry_page_payload(result),
    }


@router.get("/user/{user_id}")
async def list_user_entries(  # noqa: PLR0913
    user_id: UUID,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    meal_type: MealType | None = Query(default=None, alias="mealType"),
    limit: int = Query(default=100, ge=1, le=MAX_PAGE_SIZE),
    page: int = Query(default=1, ge=1),
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    ensure_owner_or_admin(user, user_id)
    start, end = _date_range(start_date, end_date)
    entry_filter = MealEntryFilter(
        user_id=user_id, start_date=start, end_date=end, meal_type=meal_type
    )
    result = container.meal_entry_service.list_entries(
        entry_filter, page=page, limit=limit
    )
    return {
        "message": "User meal entries retrieved successfully",
        **entry_page_payload(result),
    }


@router.get("/user/{user_id}/summary")
async def spending_summary(
    user_id: UUID,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return spending grouped by meal type."""
    ensure_owner_or_admin(user, user_id)
    start, end = _date_range(start_date, end_date)
    summary = container.stats_service.spending_summary(user_id, start, end)
    return {
        "message": "Spending summary retrieved successfully",
        "summary": spending_summary_payload(summary),
    }


@router.get("/user/{user_id}/dishes")
async def dish_frequency(  # noqa: PLR0913
    user_id: UUID,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=DEFAULT_DISH_LIMIT, ge=1, le=100),
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the user's most frequent dishes."""
    ensure_owner_or_admin(user, user_id)
    start, end = _date_range(start_date, end_date)
    dishes = container.stats_service.dish_frequency(user_id, start, end, limit)
    return {
        "message": "Dish frequency retrieved successfully",
        "dishes": [dish_payload(dish) for dish in dishes],
    }


@router.get("/user/{user_id}/monthly")
async def monthly_totals(
    user_id: UUID,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    ensure_owner_or_admin(user, user_id)
    start, end = _date_range(start_date, end_date)
    totals = container.stats_service.monthly_totals(user_id, start, end)
    return {
        "message": "Monthly totals retrieved successfully",
        "monthly": [monthly_payload(total) for total in totals],
    }


@router.get("/{entry_id}")
async def get_entry(
    entry_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    entry = container.meal_entry_service.get_entry(entry_id)
    if not user.is_admin and entry.user_id != user.id:
        raise PermissionDenied("You can only access your own meal entries")
    return {
        "message": "Meal entry retrieved successfully",
        "entry": meal_entry_payload(entry),
    }


@router.post(
    "", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)]
)
async def create_entry(
    body: MealEntryCreateRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Log a meal, charging it to a subscription when one covers it."""
    entry = container.meal_entry_service.create_entry(
        user_id=body.user_id,
        entry_date=body.entry_date,
        meal_type=body.meal_type,
        dish_name=body.dish_name,
        cost=body.cost,
        extras=[
            ExtraRequest(extra_item_id=extra.extra_item_id, quantity=extra.quantity)
            for extra in body.extras
        ],
        notes=body.notes,
    )
    return {
        "message": "Meal entry created successfully",
        "entry": meal_entry_payload(entry),
    }


@router.put("/{entry_id}", dependencies=[Depends(require_admin)])
async def update_entry(
    entry_id: UUID,
    body: MealEntryUpdateRequest,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    entry = container.meal_entry_service.update_entry(entry_id, body.changes())
    return {
        "message": "Meal entry updated successfully",
        "entry": meal_entry_payload(entry),
    }


@router.delete("/{entry_id}", dependencies=[Depends(require_admin)])
async def delete_entry(
    entry_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    container.meal_entry_service.delete_entry(entry_id)
    return {"message": "Meal entry deleted successfully"}


@router.patch("/{entry_id}/restore", dependencies=[Depends(require_admin)])
async def restore_entry(
    entry_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    entry = container.meal_entry_service.restore_entry(entry_id)
    return {
        "message": "Meal entry restored successfully",
        "entry": meal_entry_payload(entry),
    }
