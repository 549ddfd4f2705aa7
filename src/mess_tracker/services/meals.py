"""Meal entry logging with subscription-aware cost resolution."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from mess_tracker.domain.errors import Conflict, NotFound, ValidationFailed
from mess_tracker.domain.meals import (
    EntryType,
    ExtraLine,
    ExtraRequest,
    MealEntryDraft,
    MealEntryFilter,
    MealEntryPage,
    MealEntryRecord,
    MealType,
)
from mess_tracker.services.catalog import ExtraItemService
from mess_tracker.services.subscriptions import SubscriptionService
from mess_tracker.services.users import UserService

logger = logging.getLogger(__name__)

DUPLICATE_ENTRY_MESSAGE = (
    "A meal entry for this user, date, and meal type already exists"
)
MAX_MEAL_COST = 10000


class MealEntryRepository(Protocol):
    """Persistence interface for meal entries."""

    def create_entry(self, draft: MealEntryDraft) -> MealEntryRecord:
        """Insert an active entry; raise Conflict on a duplicate key."""

    def get_entry(self, entry_id: UUID) -> MealEntryRecord | None:
        """Return an entry by id, active or not."""

    def find_active_entry(
        self, user_id: UUID, entry_date: date, meal_type: MealType
    ) -> MealEntryRecord | None:
        """Return the active entry for a (user, date, meal type) key."""

    def list_entries(
        self, entry_filter: MealEntryFilter, limit: int, offset: int
    ) -> list[MealEntryRecord]:
        """Return active entries, newest date first."""

    def count_entries(self, entry_filter: MealEntryFilter) -> int:
        """Return the number of active entries matching the filter."""

    def update_entry(
        self, entry_id: UUID, payload: dict[str, object]
    ) -> MealEntryRecord:
        """Update an entry; raise Conflict on a duplicate key."""


@dataclass
class MealEntryService:
    """Service that prices meals and persists meal entries."""

    repository: MealEntryRepository
    user_service: UserService
    extra_item_service: ExtraItemService
    subscription_service: SubscriptionService

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        entry_date: date,
        meal_type: MealType,
        dish_name: str,
        cost: float,
        extras: list[ExtraRequest] | None = None,
        notes: str | None = None,
    ) -> MealEntryRecord:
        """Resolve the meal's cost and persist the entry.

        A meal covered by an active subscription with meals left is free and
        uses one of those meals; anything else is charged the given cost.
        Extras are always charged at the current catalog price.
        """
        if cost < 0 or cost > MAX_MEAL_COST:
            raise ValidationFailed("Cost must be between 0 and 10000")
        user = self.user_service.get_active_user(user_id)
        if self.repository.find_active_entry(user.id, entry_date, meal_type):
            raise Conflict(DUPLICATE_ENTRY_MESSAGE)
        lines = _build_extra_lines(self.extra_item_service, extras or [])
        extras_cost = _sum_lines(lines)

        subscription = self.subscription_service.find_covering(user.id, meal_type)
        if subscription is not None:
            base_cost = 0.0
            entry_type = EntryType.SUBSCRIPTION
        else:
            base_cost = float(cost)
            entry_type = (
                EntryType.EXTRA_ONLY
                if base_cost == 0 and lines
                else EntryType.STANDALONE
            )

        draft = MealEntryDraft(
            user_id=user.id,
            entry_date=entry_date,
            meal_type=meal_type,
            dish_name=dish_name.strip(),
            cost=base_cost,
            extras=lines,
            extras_cost=extras_cost,
            total_cost=round(base_cost + extras_cost, 2),
            entry_type=entry_type,
            subscription_id=subscription.id if subscription else None,
            notes=notes,
        )
        consumed = (
            self.subscription_service.consume_meal(subscription)
            if subscription is not None
            else None
        )
        try:
            entry = self.repository.create_entry(draft)
        except Exception:
            if consumed is not None:
                self.subscription_service.restore_meal(consumed)
                logger.warning(
                    "Rolled back subscription meal after failed entry insert",
                    extra={"subscription_id": str(consumed.id)},
                )
            raise
        logger.info(
            "Meal entry created",
            extra={"entry_id": str(entry.id), "entry_type": entry_type.value},
        )
        return entry

    def get_entry(self, entry_id: UUID) -> MealEntryRecord:
        """Return an active entry or raise NotFound."""
        entry = self.repository.get_entry(entry_id)
        if entry is None or not entry.is_active:
            raise NotFound("Meal entry not found")
        return entry

    def list_entries(
        self,
        entry_filter: MealEntryFilter,
        page: int = 1,
        limit: int = 50,
        include_users: bool = False,
    ) -> MealEntryPage:
        """Return a page of active entries."""
        offset = (page - 1) * limit
        entries = self.repository.list_entries(entry_filter, limit, offset)
        total = self.repository.count_entries(entry_filter)
        users = (
            self.user_service.summaries([entry.user_id for entry in entries])
            if include_users
            else {}
        )
        return MealEntryPage(
            entries=entries, total_count=total, page=page, limit=limit, users=users
        )

    def update_entry(
        self, entry_id: UUID, changes: dict[str, object]
    ) -> MealEntryRecord:
        """Edit an entry and recompute its total from the stored extras."""
        entry = self.get_entry(entry_id)
        payload = {key: value for key, value in changes.items() if value is not None}
        if "cost" in payload:
            cost = float(payload["cost"])
            if cost < 0 or cost > MAX_MEAL_COST:
                raise ValidationFailed("Cost must be between 0 and 10000")
            payload["cost"] = cost
            payload["total_cost"] = round(cost + entry.extras_cost, 2)
        if isinstance(payload.get("dish_name"), str):
            payload["dish_name"] = payload["dish_name"].strip()
        if isinstance(payload.get("entry_date"), date):
            payload["entry_date"] = payload["entry_date"].isoformat()
        if isinstance(payload.get("meal_type"), MealType):
            payload["meal_type"] = payload["meal_type"].value
        if not payload:
            return entry
        return self.repository.update_entry(entry_id, payload)

    def delete_entry(self, entry_id: UUID) -> MealEntryRecord:
        """Soft-delete an entry."""
        self.get_entry(entry_id)
        return self.repository.update_entry(entry_id, {"is_active": False})

    def restore_entry(self, entry_id: UUID) -> MealEntryRecord:
        """Reactivate a soft-deleted entry if its key is free."""
        entry = self.repository.get_entry(entry_id)
        if entry is None:
            raise NotFound("Meal entry not found")
        if entry.is_active:
            return entry
        existing = self.repository.find_active_entry(
            entry.user_id, entry.entry_date, entry.meal_type
        )
        if existing is not None:
            raise Conflict(DUPLICATE_ENTRY_MESSAGE)
        return self.repository.update_entry(entry_id, {"is_active": True})


def _build_extra_lines(
    extra_item_service: ExtraItemService, extras: list[ExtraRequest]
) -> list[ExtraLine]:
    lines: list[ExtraLine] = []
    for request in extras:
        if request.quantity < 1:
            raise ValidationFailed("Extra item quantity must be at least 1")
        item = extra_item_service.get_orderable_item(request.extra_item_id)
        lines.append(
            ExtraLine(
                extra_item_id=item.id,
                name=item.name,
                quantity=request.quantity,
                price=item.price,
                total_cost=round(item.price * request.quantity, 2),
            )
        )
    return lines


def _sum_lines(lines: list[ExtraLine]) -> float:
    return round(sum(line.total_cost for line in lines), 2)
