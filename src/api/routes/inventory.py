"""Inventory read endpoints: positions, ledger and reconciliation."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_query_inventory_use_case, get_reconcile_position_use_case
from src.application.dto.responses import (
    ErrorResponse,
    LedgerEntryResponse,
    LedgerListResponse,
    PositionListResponse,
    PositionResponse,
    ReconciliationResponse,
)
from src.application.use_cases.query_inventory import QueryInventoryUseCase
from src.application.use_cases.reconcile_position import ReconcilePositionUseCase
from src.core.entities.inventory import DocumentType, MovementType

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/positions", response_model=PositionListResponse)
async def list_positions(
    warehouse_id: str | None = Query(default=None),
    item_id: str | None = Query(default=None),
    in_stock_only: bool = Query(default=False, description="Only positive quantities"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> PositionListResponse:
    """List current positions."""
    positions = await use_case.list_positions(
        warehouse_id=warehouse_id,
        item_id=item_id,
        in_stock_only=in_stock_only,
        limit=limit + 1,
        offset=offset,
    )
    return PositionListResponse(
        positions=[PositionResponse.from_entity(p) for p in positions[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(positions) > limit,
    )


@router.get(
    "/positions/{item_id}/{warehouse_id}",
    response_model=PositionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_position(
    item_id: str,
    warehouse_id: str,
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> PositionResponse:
    """Get one position; zero when nothing has been posted yet."""
    position = await use_case.get_position(item_id, warehouse_id)
    return PositionResponse.from_entity(position)


@router.get("/low-stock", response_model=PositionListResponse)
async def list_low_stock(
    warehouse_id: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> PositionListResponse:
    """Positions at or below their item's reorder level."""
    positions = await use_case.list_low_stock(
        warehouse_id=warehouse_id, limit=limit + 1, offset=offset
    )
    return PositionListResponse(
        positions=[PositionResponse.from_entity(p) for p in positions[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(positions) > limit,
    )


@router.get("/movements", response_model=LedgerListResponse)
async def list_movements(
    item_id: str | None = Query(default=None),
    warehouse_id: str | None = Query(default=None),
    movement_type: MovementType | None = Query(default=None),
    reference_type: DocumentType | None = Query(default=None),
    reference_id: int | None = Query(default=None),
    date_from: datetime | None = Query(default=None, description="Inclusive"),
    date_to: datetime | None = Query(default=None, description="Exclusive"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> LedgerListResponse:
    """Ledger entries, newest first."""
    entries = await use_case.list_movements(
        item_id=item_id,
        warehouse_id=warehouse_id,
        movement_type=movement_type,
        reference_type=reference_type,
        reference_id=reference_id,
        date_from=date_from,
        date_to=date_to,
        limit=limit + 1,
        offset=offset,
    )
    return LedgerListResponse(
        entries=[LedgerEntryResponse.from_entity(e) for e in entries[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(entries) > limit,
    )


@router.get(
    "/reconcile/{item_id}/{warehouse_id}",
    response_model=ReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconcile_position(
    item_id: str,
    warehouse_id: str,
    use_case: ReconcilePositionUseCase = Depends(get_reconcile_position_use_case),
) -> ReconciliationResponse:
    """Replay the ledger and compare it with the stored position."""
    result = await use_case.execute(item_id, warehouse_id)
    return use_case.to_response(result)
