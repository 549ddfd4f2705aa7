"""Subscription endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from mess_tracker.api.deps import current_user, get_container, require_admin
from mess_tracker.api.schemas import (
    PaymentRequest,
    SubscriptionCreateRequest,
    SubscriptionUpdateRequest,
)
from mess_tracker.api.serializers import (
    subscription_payload,
    subscription_stats_payload,
)
from mess_tracker.containers import AppContainer
from mess_tracker.domain.models import UserRecord
from mess_tracker.domain.subscriptions import SubscriptionRecord, SubscriptionStatus

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def _serialize(
    container: AppContainer, subscriptions: list[SubscriptionRecord]
) -> list[dict[str, object]]:
    plans = container.subscription_service.plans_for(subscriptions)
    return [
        subscription_payload(item, plans.get(item.meal_plan_id))
        for item in subscriptions
    ]


def _serialize_one(
    container: AppContainer, subscription: SubscriptionRecord
) -> dict[str, object]:
    return _serialize(container, [subscription])[0]


@router.get("/my-subscriptions")
async def my_subscriptions(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the caller's active and pending subscriptions."""
    subscriptions = container.subscription_service.list_for_user(user.id)
    return {
        "message": "Subscriptions retrieved successfully",
        "subscriptions": _serialize(container, subscriptions),
    }


@router.get("/user/{user_id}/active", dependencies=[Depends(require_admin)])
async def active_subscription(
    user_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    subscription = container.subscription_service.get_current(user_id)
    if subscription is None:
        return {"message": "No active subscription", "subscription": None}
    return {
        "message": "Active subscription found",
        "subscription": _serialize_one(container, subscription),
    }


@router.get("/all", dependencies=[Depends(require_admin)])
async def all_subscriptions(
    status_filter: SubscriptionStatus | None = Query(default=None, alias="status"),
    user_id: UUID | None = Query(default=None, alias="userId"),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    subscriptions = container.subscription_service.list_all(status_filter, user_id)
    return {
        "message": "All subscriptions retrieved successfully",
        "subscriptions": _serialize(container, subscriptions),
    }


@router.get("/stats", dependencies=[Depends(require_admin)])
async def subscription_stats(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return subscription counts and revenue."""
    stats = container.subscription_service.stats()
    return {
        "message": "Subscription statistics retrieved successfully",
        "stats": subscription_stats_payload(stats),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_subscription(
    body: SubscriptionCreateRequest,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    subscription = container.subscription_service.create_subscription(
        actor=user,
        meal_plan_id=body.meal_plan_id,
        start_date=body.start_date,
        end_date=body.end_date,
        user_id=body.user_id,
        amount_paid=body.amount_paid,
        notes=body.notes,
        auto_renew=body.auto_renew,
        pending=body.pending,
    )
    return {
        "message": "Subscription created successfully",
        "subscription": _serialize_one(container, subscription),
    }


@router.put("/{subscription_id}", dependencies=[Depends(require_admin)])
async def update_subscription(
    subscription_id: UUID,
    body: SubscriptionUpdateRequest,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    subscription = container.subscription_service.update(
        subscription_id, body.changes()
    )
    return {
        "message": "Subscription updated successfully",
        "subscription": _serialize_one(container, subscription),
    }


@router.patch("/{subscription_id}/cancel")
async def cancel_subscription(
    subscription_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Cancel a subscription owned by the caller, or any for admins."""
    subscription = container.subscription_service.cancel(subscription_id, user)
    return {
        "message": "Subscription cancelled successfully",
        "subscription": _serialize_one(container, subscription),
    }


@router.patch("/{subscription_id}/activate", dependencies=[Depends(require_admin)])
async def activate_subscription(
    subscription_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    subscription = container.subscription_service.activate(subscription_id)
    return {
        "message": "Subscription activated successfully",
        "subscription": _serialize_one(container, subscription),
    }


@router.patch("/{subscription_id}/payment", dependencies=[Depends(require_admin)])
async def record_payment(
    subscription_id: UUID,
    body: PaymentRequest,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    subscription = container.subscription_service.record_payment(
        subscription_id, body.amount_paid
    )
    return {
        "message": "Payment updated successfully",
        "subscription": _serialize_one(container, subscription),
    }
