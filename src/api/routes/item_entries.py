"""Item entry (receipt) endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_actor_id,
    get_create_item_entry_use_case,
    get_query_inventory_use_case,
)
from src.application.dto.requests import CreateItemEntryRequest
from src.application.dto.responses import (
    ErrorResponse,
    ItemEntryListResponse,
    ItemEntryResponse,
)
from src.application.use_cases.create_item_entry import CreateItemEntryUseCase
from src.application.use_cases.query_inventory import QueryInventoryUseCase

router = APIRouter(prefix="/api/item-entries", tags=["item-entries"])


@router.post(
    "",
    response_model=ItemEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def create_item_entry(
    request: CreateItemEntryRequest,
    actor_id: str = Depends(get_actor_id),
    use_case: CreateItemEntryUseCase = Depends(get_create_item_entry_use_case),
) -> ItemEntryResponse:
    """Receive stock at landed cost and post a RECEIPT ledger entry."""
    result = await use_case.execute(request, actor_id)
    return use_case.to_response(result)


@router.get(
    "/{entry_id}",
    response_model=ItemEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item_entry(
    entry_id: int,
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> ItemEntryResponse:
    """Get one item entry."""
    return ItemEntryResponse.from_entity(await use_case.get_item_entry(entry_id))


@router.get("", response_model=ItemEntryListResponse)
async def list_item_entries(
    search: str | None = Query(
        default=None, description="Purchase reference, notes, item code or description"
    ),
    warehouse_id: str | None = Query(default=None),
    supplier_id: str | None = Query(default=None),
    item_id: str | None = Query(default=None),
    date_from: datetime | None = Query(default=None, description="Inclusive"),
    date_to: datetime | None = Query(default=None, description="Inclusive"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> ItemEntryListResponse:
    """List item entries, newest first."""
    entries = await use_case.list_item_entries(
        search=search,
        warehouse_id=warehouse_id,
        supplier_id=supplier_id,
        item_id=item_id,
        date_from=date_from,
        date_to=date_to,
        limit=limit + 1,
        offset=offset,
    )
    return ItemEntryListResponse(
        entries=[ItemEntryResponse.from_entity(e) for e in entries[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(entries) > limit,
    )
