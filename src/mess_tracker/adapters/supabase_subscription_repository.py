"""Supabase repository for subscriptions."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from mess_tracker.adapters.supabase_rows import parse_date, parse_datetime
from mess_tracker.domain.subscriptions import SubscriptionRecord, SubscriptionStatus
from mess_tracker.services.subscriptions import SubscriptionRepository

_COLUMNS = (
    "id, user_id, meal_plan_id, start_date, end_date, status, total_amount, "
    "amount_paid, remaining_meals, total_meals, notes, auto_renew, created_at"
)


@dataclass
class SupabaseSubscriptionRepository(SubscriptionRepository):
    """Supabase implementation for subscriptions."""

    client: Client

    def create_subscription(self, payload: dict[str, object]) -> SubscriptionRecord:
        """Insert a subscription row."""
        response = self.client.table("subscriptions").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create subscription")
        return _parse_subscription(response.data[0])

    def get_subscription(self, subscription_id: UUID) -> SubscriptionRecord | None:
        """Return a subscription by id."""
        response = (
            self.client.table("subscriptions")
            .select(_COLUMNS)
            .eq("id", str(subscription_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_subscription(response.data[0])

    def list_subscriptions(
        self,
        user_id: UUID | None = None,
        statuses: list[SubscriptionStatus] | None = None,
    ) -> list[SubscriptionRecord]:
        """Return subscriptions, newest start date first."""
        query = self.client.table("subscriptions").select(_COLUMNS)
        if user_id is not None:
            query = query.eq("user_id", str(user_id))
        if statuses:
            query = query.in_("status", [status.value for status in statuses])
        response = query.order("start_date", desc=True).execute()
        return [_parse_subscription(row) for row in response.data or []]

    def update_subscription(
        self, subscription_id: UUID, payload: dict[str, object]
    ) -> SubscriptionRecord | None:
        """Update a subscription row."""
        response = (
            self.client.table("subscriptions")
            .update(payload)
            .eq("id", str(subscription_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_subscription(response.data[0])

    def consume_meal(
        self, subscription_id: UUID, expected_remaining: int
    ) -> SubscriptionRecord | None:
        """Compare-and-set decrement of remaining meals on one row."""
        remaining = expected_remaining - 1
        payload: dict[str, object] = {"remaining_meals": remaining}
        if remaining == 0:
            payload["status"] = SubscriptionStatus.EXPIRED.value
        response = (
            self.client.table("subscriptions")
            .update(payload)
            .eq("id", str(subscription_id))
            .eq("status", SubscriptionStatus.ACTIVE.value)
            .eq("remaining_meals", expected_remaining)
            .execute()
        )
        if not response.data:
            return None
        return _parse_subscription(response.data[0])

    def release_meal(
        self, subscription_id: UUID, consumed_remaining: int
    ) -> SubscriptionRecord | None:
        """Compare-and-set increment undoing one consume_meal."""
        payload: dict[str, object] = {"remaining_meals": consumed_remaining + 1}
        expected_status = SubscriptionStatus.ACTIVE
        if consumed_remaining == 0:
            payload["status"] = SubscriptionStatus.ACTIVE.value
            expected_status = SubscriptionStatus.EXPIRED
        response = (
            self.client.table("subscriptions")
            .update(payload)
            .eq("id", str(subscription_id))
            .eq("status", expected_status.value)
            .eq("remaining_meals", consumed_remaining)
            .execute()
        )
        if not response.data:
            return None
        return _parse_subscription(response.data[0])

    def expire_subscription(
        self, subscription_id: UUID
    ) -> SubscriptionRecord | None:
        """Set status to expired on a row that is still active."""
        response = (
            self.client.table("subscriptions")
            .update({"status": SubscriptionStatus.EXPIRED.value})
            .eq("id", str(subscription_id))
            .eq("status", SubscriptionStatus.ACTIVE.value)
            .execute()
        )
        if not response.data:
            return None
        return _parse_subscription(response.data[0])


def _parse_subscription(row: dict[str, object]) -> SubscriptionRecord:
    return SubscriptionRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_plan_id=UUID(str(row["meal_plan_id"])),
        start_date=parse_date(row["start_date"]),
        end_date=parse_date(row["end_date"]),
        status=SubscriptionStatus(str(row.get("status") or "active")),
        total_amount=float(row.get("total_amount", 0.0)),
        amount_paid=float(row.get("amount_paid") or 0.0),
        remaining_meals=int(row.get("remaining_meals", 0)),
        total_meals=int(row.get("total_meals", 0)),
        notes=row.get("notes"),
        auto_renew=bool(row.get("auto_renew", False)),
        created_at=parse_datetime(row.get("created_at")),
    )
