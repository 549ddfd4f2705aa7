"""Subscription lifecycle and meal accounting."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from mess_tracker.domain.catalog import MealPlan
from mess_tracker.domain.errors import Conflict, NotFound, ValidationFailed
from mess_tracker.domain.meals import MealType
from mess_tracker.domain.models import UserRecord
from mess_tracker.domain.stats import SubscriptionStats
from mess_tracker.domain.subscriptions import SubscriptionRecord, SubscriptionStatus
from mess_tracker.services.catalog import MealPlanService
from mess_tracker.services.users import UserService

logger = logging.getLogger(__name__)

_OPEN_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.PENDING)
_EDITABLE_FIELDS = {"notes", "auto_renew", "end_date", "amount_paid"}
_RELEASE_ATTEMPTS = 3


class SubscriptionRepository(Protocol):
    """Persistence interface for subscriptions."""

    def create_subscription(self, payload: dict[str, object]) -> SubscriptionRecord:
        """Create a subscription and return it."""

    def get_subscription(self, subscription_id: UUID) -> SubscriptionRecord | None:
        """Return a subscription by id, if present."""

    def list_subscriptions(
        self,
        user_id: UUID | None = None,
        statuses: list[SubscriptionStatus] | None = None,
    ) -> list[SubscriptionRecord]:
        """Return subscriptions, newest start date first."""

    def update_subscription(
        self, subscription_id: UUID, payload: dict[str, object]
    ) -> SubscriptionRecord | None:
        """Update a subscription and return it, or None when missing."""

    def consume_meal(
        self, subscription_id: UUID, expected_remaining: int
    ) -> SubscriptionRecord | None:
        """Decrement remaining meals if still at the expected value.

        Returns None when the row changed since it was read.
        """

    def release_meal(
        self, subscription_id: UUID, consumed_remaining: int
    ) -> SubscriptionRecord | None:
        """Give back a meal taken by consume_meal if the row is unchanged since.

        A subscription expired by that consume becomes active again. Returns
        None when another write landed first.
        """

    def expire_subscription(
        self, subscription_id: UUID
    ) -> SubscriptionRecord | None:
        """Mark an active subscription expired; None when it is no longer active."""


@dataclass
class SubscriptionService:
    """Application service for subscriptions."""

    repository: SubscriptionRepository
    meal_plan_service: MealPlanService
    user_service: UserService

    def create_subscription(  # noqa: PLR0913
        self,
        actor: UserRecord,
        meal_plan_id: UUID,
        start_date: date,
        end_date: date,
        user_id: UUID | None = None,
        amount_paid: float = 0.0,
        notes: str | None = None,
        auto_renew: bool = False,
        pending: bool = False,
    ) -> SubscriptionRecord:
        """Subscribe a user to a plan; admins may subscribe anyone."""
        target_id = user_id if actor.is_admin and user_id else actor.id
        if end_date < start_date:
            raise ValidationFailed("End date must be on or after start date")
        if target_id != actor.id:
            self.user_service.get_active_user(target_id)
        plan = self.meal_plan_service.get_active_plan(meal_plan_id)
        self._ensure_no_overlap(target_id, start_date, end_date)
        status = (
            SubscriptionStatus.PENDING
            if pending and actor.is_admin
            else SubscriptionStatus.ACTIVE
        )
        subscription = self.repository.create_subscription(
            {
                "user_id": str(target_id),
                "meal_plan_id": str(plan.id),
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "status": status.value,
                "total_amount": plan.price,
                "amount_paid": amount_paid,
                "remaining_meals": plan.total_meals,
                "total_meals": plan.total_meals,
                "notes": notes,
                "auto_renew": auto_renew,
            }
        )
        logger.info(
            "Subscription created",
            extra={"subscription_id": str(subscription.id), "status": status.value},
        )
        return subscription

    def get_subscription(self, subscription_id: UUID) -> SubscriptionRecord:
        """Return a subscription with its status brought up to date."""
        subscription = self.repository.get_subscription(subscription_id)
        if subscription is None:
            raise NotFound("Subscription not found")
        return self._refresh(subscription)

    def list_for_user(self, user_id: UUID) -> list[SubscriptionRecord]:
        """Return a user's active and pending subscriptions."""
        subscriptions = self._refresh_all(
            self.repository.list_subscriptions(
                user_id=user_id, statuses=list(_OPEN_STATUSES)
            )
        )
        return [item for item in subscriptions if item.status in _OPEN_STATUSES]

    def list_all(
        self,
        status: SubscriptionStatus | None = None,
        user_id: UUID | None = None,
    ) -> list[SubscriptionRecord]:
        """Return subscriptions for the admin view."""
        subscriptions = self._refresh_all(
            self.repository.list_subscriptions(user_id=user_id)
        )
        if status is None:
            return subscriptions
        return [item for item in subscriptions if item.status == status]

    def get_current(
        self, user_id: UUID, today: date | None = None
    ) -> SubscriptionRecord | None:
        """Return the active subscription whose range contains today."""
        day = today or _today()
        for subscription in self._refresh_all(
            self.repository.list_subscriptions(
                user_id=user_id, statuses=[SubscriptionStatus.ACTIVE]
            ),
            day,
        ):
            if subscription.status == SubscriptionStatus.ACTIVE and (
                subscription.contains(day)
            ):
                return subscription
        return None

    def find_covering(
        self, user_id: UUID, meal_type: MealType, today: date | None = None
    ) -> SubscriptionRecord | None:
        """Return an active, in-range subscription covering the meal type."""
        day = today or _today()
        candidates = self._refresh_all(
            self.repository.list_subscriptions(
                user_id=user_id, statuses=[SubscriptionStatus.ACTIVE]
            ),
            day,
        )
        for subscription in candidates:
            if subscription.status != SubscriptionStatus.ACTIVE:
                continue
            if not subscription.contains(day) or subscription.remaining_meals <= 0:
                continue
            plan = self.meal_plan_service.repository.get_meal_plan(
                subscription.meal_plan_id
            )
            if plan is not None and plan.covers(meal_type):
                return subscription
        return None

    def consume_meal(self, subscription: SubscriptionRecord) -> SubscriptionRecord:
        """Use one meal of the subscription; the last meal expires it."""
        updated = self.repository.consume_meal(
            subscription.id, subscription.remaining_meals
        )
        if updated is None:
            raise Conflict("Subscription was modified concurrently, please retry")
        logger.info(
            "Subscription meal consumed",
            extra={
                "subscription_id": str(subscription.id),
                "remaining_meals": updated.remaining_meals,
            },
        )
        return updated

    def restore_meal(self, consumed: SubscriptionRecord) -> SubscriptionRecord | None:
        """Put back a meal, given the record consume_meal returned.

        Each attempt is a compare-and-set against the last seen meal count.
        A subscription cancelled or expired by someone else in the meantime
        is left as it is.
        """
        expected = consumed.remaining_meals
        for _ in range(_RELEASE_ATTEMPTS):
            restored = self.repository.release_meal(consumed.id, expected)
            if restored is not None:
                return restored
            latest = self.repository.get_subscription(consumed.id)
            if latest is None or latest.status != SubscriptionStatus.ACTIVE:
                break
            expected = latest.remaining_meals
        logger.warning(
            "Subscription changed before its meal could be restored",
            extra={"subscription_id": str(consumed.id)},
        )
        return None

    def activate(self, subscription_id: UUID) -> SubscriptionRecord:
        """Confirm a pending subscription."""
        subscription = self.get_subscription(subscription_id)
        if subscription.status != SubscriptionStatus.PENDING:
            raise ValidationFailed("Only pending subscriptions can be activated")
        self._ensure_no_overlap(
            subscription.user_id, subscription.start_date, subscription.end_date
        )
        return self._update(subscription_id, {"status": SubscriptionStatus.ACTIVE})

    def cancel(self, subscription_id: UUID, actor: UserRecord) -> SubscriptionRecord:
        """Cancel a subscription; owners and admins only."""
        subscription = self.repository.get_subscription(subscription_id)
        if subscription is None or (
            not actor.is_admin and subscription.user_id != actor.id
        ):
            raise NotFound("Subscription not found")
        if subscription.status == SubscriptionStatus.CANCELLED:
            raise ValidationFailed("Subscription is already cancelled")
        cancelled = self._update(
            subscription_id, {"status": SubscriptionStatus.CANCELLED}
        )
        logger.info(
            "Subscription cancelled", extra={"subscription_id": str(subscription_id)}
        )
        return cancelled

    def record_payment(
        self, subscription_id: UUID, amount_paid: float
    ) -> SubscriptionRecord:
        """Set how much of the subscription has been paid."""
        if amount_paid < 0:
            raise ValidationFailed("Amount paid must be a positive number")
        return self._update(subscription_id, {"amount_paid": amount_paid})

    def update(
        self, subscription_id: UUID, changes: dict[str, object]
    ) -> SubscriptionRecord:
        """Apply admin edits to the mutable subscription fields."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationFailed(
                "Unsupported subscription fields", details=sorted(unknown)
            )
        payload = {key: value for key, value in changes.items() if value is not None}
        current = self.get_subscription(subscription_id)
        end_date = payload.get("end_date")
        if isinstance(end_date, date):
            if end_date < current.start_date:
                raise ValidationFailed("End date must be on or after start date")
            payload["end_date"] = end_date.isoformat()
        if not payload:
            return current
        return self._update(subscription_id, payload)

    def plans_for(
        self, subscriptions: list[SubscriptionRecord]
    ) -> dict[UUID, MealPlan]:
        """Return the meal plans referenced by the subscriptions."""
        plans: dict[UUID, MealPlan] = {}
        for subscription in subscriptions:
            if subscription.meal_plan_id in plans:
                continue
            plan = self.meal_plan_service.repository.get_meal_plan(
                subscription.meal_plan_id
            )
            if plan is not None:
                plans[plan.id] = plan
        return plans

    def stats(self) -> SubscriptionStats:
        """Return subscription counts and revenue."""
        subscriptions = self._refresh_all(self.repository.list_subscriptions())
        counts = dict.fromkeys(SubscriptionStatus, 0)
        total_revenue = 0.0
        pending_revenue = 0.0
        for subscription in subscriptions:
            counts[subscription.status] += 1
            if subscription.status in {
                SubscriptionStatus.ACTIVE,
                SubscriptionStatus.EXPIRED,
            }:
                total_revenue += subscription.amount_paid
            if subscription.status in _OPEN_STATUSES:
                pending_revenue += subscription.balance_due
        return SubscriptionStats(
            total_subscriptions=len(subscriptions),
            active_subscriptions=counts[SubscriptionStatus.ACTIVE],
            pending_subscriptions=counts[SubscriptionStatus.PENDING],
            expired_subscriptions=counts[SubscriptionStatus.EXPIRED],
            cancelled_subscriptions=counts[SubscriptionStatus.CANCELLED],
            total_revenue=total_revenue,
            pending_revenue=pending_revenue,
        )

    def _ensure_no_overlap(self, user_id: UUID, start: date, end: date) -> None:
        active = self._refresh_all(
            self.repository.list_subscriptions(
                user_id=user_id, statuses=[SubscriptionStatus.ACTIVE]
            )
        )
        for subscription in active:
            if subscription.status == SubscriptionStatus.ACTIVE and (
                subscription.overlaps(start, end)
            ):
                raise ValidationFailed(
                    "User already has an active subscription that overlaps "
                    "with these dates"
                )

    def _update(
        self, subscription_id: UUID, payload: dict[str, object]
    ) -> SubscriptionRecord:
        serialized = {
            key: value.value if isinstance(value, SubscriptionStatus) else value
            for key, value in payload.items()
        }
        updated = self.repository.update_subscription(subscription_id, serialized)
        if updated is None:
            raise NotFound("Subscription not found")
        return updated

    def _refresh(
        self, subscription: SubscriptionRecord, today: date | None = None
    ) -> SubscriptionRecord:
        if not subscription.is_lapsed(today or _today()):
            return subscription
        updated = self.repository.expire_subscription(subscription.id)
        if updated is None:
            return self.repository.get_subscription(subscription.id) or subscription
        logger.info(
            "Subscription expired", extra={"subscription_id": str(subscription.id)}
        )
        return updated

    def _refresh_all(
        self, subscriptions: list[SubscriptionRecord], today: date | None = None
    ) -> list[SubscriptionRecord]:
        day = today or _today()
        return [self._refresh(item, day) for item in subscriptions]


def _today() -> date:
    return datetime.now(tz=UTC).date()
