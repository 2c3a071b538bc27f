"""Inter-warehouse transfer endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_actor_id,
    get_create_transfer_use_case,
    get_query_inventory_use_case,
)
from src.application.dto.requests import CreateTransferRequest
from src.application.dto.responses import ErrorResponse, TransferListResponse, TransferResponse
from src.application.use_cases.create_transfer import CreateTransferUseCase
from src.application.use_cases.query_inventory import QueryInventoryUseCase
from src.core.entities.documents import TransferStatus

router = APIRouter(prefix="/api/transfers", tags=["transfers"])


@router.post(
    "",
    response_model=TransferResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def create_transfer(
    request: CreateTransferRequest,
    actor_id: str = Depends(get_actor_id),
    use_case: CreateTransferUseCase = Depends(get_create_transfer_use_case),
) -> TransferResponse:
    """Move stock between warehouses; all lines post or none do."""
    result = await use_case.execute(request, actor_id)
    return use_case.to_response(result)


@router.get(
    "/{transfer_id}",
    response_model=TransferResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_transfer(
    transfer_id: int,
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> TransferResponse:
    """Get one transfer with its lines."""
    return TransferResponse.from_entity(await use_case.get_transfer(transfer_id))


@router.get("", response_model=TransferListResponse)
async def list_transfers(
    search: str | None = Query(default=None, description="Transfer number or notes"),
    from_warehouse_id: str | None = Query(default=None),
    to_warehouse_id: str | None = Query(default=None),
    status: TransferStatus | None = Query(default=None),
    date_from: datetime | None = Query(default=None, description="Inclusive"),
    date_to: datetime | None = Query(default=None, description="Inclusive"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> TransferListResponse:
    """List transfers with their lines, newest first."""
    transfers = await use_case.list_transfers(
        search=search,
        from_warehouse_id=from_warehouse_id,
        to_warehouse_id=to_warehouse_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        limit=limit + 1,
        offset=offset,
    )
    return TransferListResponse(
        transfers=[TransferResponse.from_entity(t) for t in transfers[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(transfers) > limit,
    )
