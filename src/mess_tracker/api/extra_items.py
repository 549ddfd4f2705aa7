"""Extra item catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from mess_tracker.api.deps import get_container, require_admin
from mess_tracker.api.schemas import ExtraItemCreateRequest, ExtraItemUpdateRequest
from mess_tracker.api.serializers import extra_item_payload
from mess_tracker.containers import AppContainer
from mess_tracker.domain.catalog import ExtraCategory

router = APIRouter(prefix="/extra-items", tags=["extra-items"])


@router.get("")
async def list_extra_items(
    category: ExtraCategory | None = None,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return orderable extras, optionally for one category."""
    items = container.extra_item_service.list_items(category)
    return {
        "message": "Extra items retrieved successfully",
        "items": [extra_item_payload(item) for item in items],
    }


@router.get("/{item_id}")
async def get_extra_item(
    item_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    item = container.extra_item_service.get_item(item_id)
    return {
        "message": "Extra item retrieved successfully",
        "item": extra_item_payload(item),
    }


@router.post(
    "", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)]
)
async def create_extra_item(
    body: ExtraItemCreateRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    item = container.extra_item_service.create_item(body.payload())
    return {
        "message": "Extra item created successfully",
        "item": extra_item_payload(item),
    }


@router.put("/{item_id}", dependencies=[Depends(require_admin)])
async def update_extra_item(
    item_id: UUID,
    body: ExtraItemUpdateRequest,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    item = container.extra_item_service.update_item(item_id, body.changes())
    return {
        "message": "Extra item updated successfully",
        "item": extra_item_payload(item),
    }


@router.delete("/{item_id}", dependencies=[Depends(require_admin)])
async def delete_extra_item(
    item_id: UUID, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    container.extra_item_service.deactivate_item(item_id)
    return {"message": "Extra item deleted successfully"}
