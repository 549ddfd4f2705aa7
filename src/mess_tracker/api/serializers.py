"""Conversion of domain records to camelCase JSON bodies."""

from datetime import UTC, datetime

from mess_tracker.domain.catalog import ExtraItem, MealPlan
from mess_tracker.domain.meals import ExtraLine, MealEntryPage, MealEntryRecord
from mess_tracker.domain.models import UserRecord, UserSummary
from mess_tracker.domain.stats import (
    DishFrequency,
    MonthlyTotal,
    SpendingSummary,
    SubscriptionStats,
)
from mess_tracker.domain.subscriptions import SubscriptionRecord


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_payload(user: UserRecord) -> dict[str, object]:
    return {
        "id": str(user.id),
        "name": user.name,
        "roomNumber": user.room_number,
        "loginCode": user.login_code,
        "isAdmin": user.is_admin,
        "isActive": user.is_active,
        "createdAt": _timestamp(user.created_at),
        "updatedAt": _timestamp(user.updated_at),
    }


def user_summary_payload(user: UserSummary) -> dict[str, object]:
    return {
        "id": str(user.id),
        "name": user.name,
        "roomNumber": user.room_number,
        "loginCode": user.login_code,
    }


def meal_plan_payload(plan: MealPlan) -> dict[str, object]:
    return {
        "id": str(plan.id),
        "name": plan.name,
        "description": plan.description,
        "type": plan.type.value,
        "price": plan.price,
        "mealsPerDay": plan.meals_per_day,
        "totalMeals": plan.total_meals,
        "mealTypes": [meal_type.value for meal_type in plan.meal_types],
        "includes": list(plan.includes),
        "features": list(plan.features),
        "isActive": plan.is_active,
    }


def extra_item_payload(item: ExtraItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "name": item.name,
        "description": item.description,
        "price": item.price,
        "category": item.category.value,
        "unit": item.unit,
        "isActive": item.is_active,
    }


def subscription_payload(
    subscription: SubscriptionRecord,
    plan: MealPlan | None = None,
    now: datetime | None = None,
) -> dict[str, object]:
    """Serialize a subscription with its derived progress fields."""
    moment = now or datetime.now(tz=UTC)
    return {
        "id": str(subscription.id),
        "userId": str(subscription.user_id),
        "mealPlanId": str(subscription.meal_plan_id),
        "mealPlan": meal_plan_payload(plan) if plan else None,
        "startDate": subscription.start_date.isoformat(),
        "endDate": subscription.end_date.isoformat(),
        "status": subscription.status.value,
        "totalAmount": subscription.total_amount,
        "amountPaid": subscription.amount_paid,
        "balanceDue": subscription.balance_due,
        "remainingMeals": subscription.remaining_meals,
        "totalMeals": subscription.total_meals,
        "daysRemaining": subscription.days_remaining(moment),
        "progress": subscription.progress,
        "notes": subscription.notes,
        "autoRenew": subscription.auto_renew,
        "createdAt": _timestamp(subscription.created_at),
    }


def _extra_line_payload(line: ExtraLine) -> dict[str, object]:
    return {
        "extraItemId": str(line.extra_item_id),
        "name": line.name,
        "quantity": line.quantity,
        "price": line.price,
        "totalCost": line.total_cost,
    }


def meal_entry_payload(
    entry: MealEntryRecord, user: UserSummary | None = None
) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": str(entry.id),
        "userId": str(entry.user_id),
        "subscriptionId": str(entry.subscription_id) if entry.subscription_id else None,
        "entryDate": entry.entry_date.isoformat(),
        "mealType": entry.meal_type.value,
        "dishName": entry.dish_name,
        "cost": entry.cost,
        "extras": [_extra_line_payload(line) for line in entry.extras],
        "extrasCost": entry.extras_cost,
        "totalCost": entry.total_cost,
        "entryType": entry.entry_type.value,
        "notes": entry.notes,
        "isActive": entry.is_active,
        "createdAt": _timestamp(entry.created_at),
    }
    if user is not None:
        payload["user"] = user_summary_payload(user)
    return payload


def entry_page_payload(page: MealEntryPage) -> dict[str, object]:
    """Serialize a page of entries with its pagination block."""
    return {
        "entries": [
            meal_entry_payload(entry, page.users.get(entry.user_id))
            for entry in page.entries
        ],
        "pagination": {
            "currentPage": page.page,
            "totalPages": page.total_pages,
            "totalCount": page.total_count,
            "hasNextPage": page.has_next_page,
            "hasPrevPage": page.has_prev_page,
        },
    }


def spending_summary_payload(summary: SpendingSummary) -> dict[str, object]:
    return {
        "mealTypeBreakdown": [
            {
                "mealType": item.meal_type.value,
                "totalCost": item.total_cost,
                "totalMeals": item.total_meals,
                "avgCost": item.avg_cost,
            }
            for item in summary.meal_type_breakdown
        ],
        "overallTotal": summary.overall_total,
        "overallMeals": summary.overall_meals,
        "overallAvg": summary.overall_avg,
    }


def dish_payload(dish: DishFrequency) -> dict[str, object]:
    return {
        "dishName": dish.dish_name,
        "count": dish.count,
        "totalCost": dish.total_cost,
        "avgCost": dish.avg_cost,
        "lastOrdered": dish.last_ordered.isoformat(),
    }


def monthly_payload(total: MonthlyTotal) -> dict[str, object]:
    return {
        "month": total.month,
        "totalMeals": total.total_meals,
        "totalCost": total.total_cost,
    }


def subscription_stats_payload(stats: SubscriptionStats) -> dict[str, object]:
    return {
        "totalSubscriptions": stats.total_subscriptions,
        "activeSubscriptions": stats.active_subscriptions,
        "pendingSubscriptions": stats.pending_subscriptions,
        "expiredSubscriptions": stats.expired_subscriptions,
        "cancelledSubscriptions": stats.cancelled_subscriptions,
        "totalRevenue": stats.total_revenue,
        "pendingRevenue": stats.pending_revenue,
    }
