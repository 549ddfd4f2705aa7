"""Seed the default catalog and an administrator account."""

import logging
from dataclasses import dataclass

from mess_tracker.app_logging import configure_logging
from mess_tracker.containers import AppContainer, build_container

logger = logging.getLogger(__name__)

ADMIN_LOGIN_CODE = "ADMIN123"

_PLAN_FEATURES = [
    "1 special meal once a week (festival meal, chicken, egg etc)",
    "Free home delivery",
    "Homely taste",
]

DEFAULT_MEAL_PLANS: list[dict[str, object]] = [
    {
        "name": "Mini Thali (Single)",
        "description": "Perfect for students who prefer either lunch or dinner",
        "type": "mini_single",
        "price": 2300,
        "meals_per_day": 1,
        "total_meals": 30,
        "meal_types": ["lunch"],
        "includes": ["1 Sabji", "3 Rotis", "Salad"],
        "features": _PLAN_FEATURES,
    },
    {
        "name": "Mini Thali (Double)",
        "description": "Great value for students who want both lunch and dinner",
        "type": "mini_double",
        "price": 4600,
        "meals_per_day": 2,
        "total_meals": 60,
        "meal_types": ["lunch", "dinner"],
        "includes": ["1 Sabji", "3 Rotis", "Salad"],
        "features": _PLAN_FEATURES,
    },
    {
        "name": "Full Thali (Double)",
        "description": "Complete meal solution with all essentials included",
        "type": "full_double",
        "price": 7600,
        "meals_per_day": 2,
        "total_meals": 60,
        "meal_types": ["lunch", "dinner"],
        "includes": ["1 Sabji", "3 Rotis", "Dal", "Rice", "Salad"],
        "features": _PLAN_FEATURES,
    },
]

DEFAULT_EXTRA_ITEMS: list[dict[str, object]] = [
    {
        "name": "Extra Rice",
        "description": "Additional portion of steamed rice",
        "price": 20,
        "category": "rice",
        "unit": "bowl",
    },
    {
        "name": "Extra Dal",
        "description": "Additional portion of lentil curry",
        "price": 25,
        "category": "dal",
        "unit": "bowl",
    },
    {
        "name": "Extra Dal Rice",
        "description": "Combination of dal and rice",
        "price": 40,
        "category": "dal_rice",
        "unit": "plate",
    },
    {
        "name": "Extra Roti",
        "description": "Additional fresh wheat bread",
        "price": 10,
        "category": "roti",
        "unit": "piece",
    },
    {
        "name": "Special Sabji",
        "description": "Premium vegetable dish",
        "price": 50,
        "category": "special",
        "unit": "bowl",
    },
    {
        "name": "Extra Papad",
        "description": "Crispy papad (2 pieces)",
        "price": 15,
        "category": "special",
        "unit": "serving",
    },
    {
        "name": "Extra Pickle",
        "description": "Traditional homemade pickle",
        "price": 10,
        "category": "special",
        "unit": "serving",
    },
    {
        "name": "Extra Curd",
        "description": "Fresh yogurt",
        "price": 20,
        "category": "special",
        "unit": "bowl",
    },
]


@dataclass(frozen=True)
class SeedResult:
    """Number of records created by a seed run."""

    meal_plans: int
    extra_items: int
    admins: int


def seed_defaults(container: AppContainer) -> SeedResult:
    """Insert catalog entries and the admin account that are missing."""
    plan_names = {
        plan.name
        for plan in container.meal_plan_service.repository.list_meal_plans(
            active_only=False
        )
    }
    created_plans = 0
    for payload in DEFAULT_MEAL_PLANS:
        if payload["name"] in plan_names:
            continue
        container.meal_plan_service.create_plan(dict(payload))
        created_plans += 1

    item_names = {
        item.name
        for item in container.extra_item_service.repository.list_extra_items(
            active_only=False
        )
    }
    created_items = 0
    for payload in DEFAULT_EXTRA_ITEMS:
        if payload["name"] in item_names:
            continue
        container.extra_item_service.create_item(dict(payload))
        created_items += 1

    created_admins = 0
    if container.user_service.repository.get_by_login_code(ADMIN_LOGIN_CODE) is None:
        container.user_service.create_user(
            name="Admin User",
            room_number="ADMIN",
            login_code=ADMIN_LOGIN_CODE,
            is_admin=True,
        )
        created_admins = 1

    return SeedResult(
        meal_plans=created_plans, extra_items=created_items, admins=created_admins
    )


def main() -> None:
    configure_logging()
    result = seed_defaults(build_container())
    logger.info(
        "Seed complete: %s meal plans, %s extra items, %s admins created",
        result.meal_plans,
        result.extra_items,
        result.admins,
    )


if __name__ == "__main__":
    main()
