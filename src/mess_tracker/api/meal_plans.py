"""Meal plan catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from mess_tracker.api.deps import get_container, require_admin
from mess_tracker.api.schemas import MealPlanCreateRequest, MealPlanUpdateRequest
from mess_tracker.api.serializers import meal_plan_payload
from mess_tracker.containers import AppContainer

router = APIRouter(prefix="/meal-plans", tags=["meal-plans"])


@router.get("")
async def list_meal_plans(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return purchasable plans, cheapest first."""
    plans = container.meal_plan_service.list_plans()
    return {
        "message": "Meal plans retrieved successfully",
        "plans": [meal_plan_payload(plan) for plan in plans],
    }


@router.get("/{plan_id}")
async def get_meal_plan(
    plan_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    plan = container.meal_plan_service.get_plan(plan_id)
    return {
        "message": "Meal plan retrieved successfully",
        "plan": meal_plan_payload(plan),
    }


@router.post(
    "", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)]
)
async def create_meal_plan(
    body: MealPlanCreateRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    plan = container.meal_plan_service.create_plan(body.payload())
    return {
        "message": "Meal plan created successfully",
        "plan": meal_plan_payload(plan),
    }


@router.put("/{plan_id}", dependencies=[Depends(require_admin)])
async def update_meal_plan(
    plan_id: UUID,
    body: MealPlanUpdateRequest,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    plan = container.meal_plan_service.update_plan(plan_id, body.changes())
    return {
        "message": "Meal plan updated successfully",
        "plan": meal_plan_payload(plan),
    }


@router.delete("/{plan_id}", dependencies=[Depends(require_admin)])
async def delete_meal_plan(
    plan_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Hide a plan from the catalog."""
    container.meal_plan_service.deactivate_plan(plan_id)
    return {"message": "Meal plan deleted successfully"}
