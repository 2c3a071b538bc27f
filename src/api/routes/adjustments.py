"""Stock count and revaluation endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_actor_id,
    get_create_adjustment_use_case,
    get_query_inventory_use_case,
)
from src.application.dto.requests import CreateAdjustmentRequest
from src.application.dto.responses import (
    AdjustmentListResponse,
    AdjustmentResponse,
    ErrorResponse,
)
from src.application.use_cases.create_adjustment import CreateAdjustmentUseCase
from src.application.use_cases.query_inventory import QueryInventoryUseCase
from src.core.entities.documents import AdjustmentType

router = APIRouter(prefix="/api/adjustments", tags=["adjustments"])


@router.post(
    "",
    response_model=AdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def create_adjustment(
    request: CreateAdjustmentRequest,
    actor_id: str = Depends(get_actor_id),
    use_case: CreateAdjustmentUseCase = Depends(get_create_adjustment_use_case),
) -> AdjustmentResponse:
    """Restate positions to counted quantities and costs."""
    result = await use_case.execute(request, actor_id)
    return use_case.to_response(result)


@router.get(
    "/{adjustment_id}",
    response_model=AdjustmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_adjustment(
    adjustment_id: int,
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> AdjustmentResponse:
    """Get one adjustment with its lines."""
    return AdjustmentResponse.from_entity(await use_case.get_adjustment(adjustment_id))


@router.get("", response_model=AdjustmentListResponse)
async def list_adjustments(
    search: str | None = Query(default=None, description="Adjustment number, reason or notes"),
    warehouse_id: str | None = Query(default=None),
    adjustment_type: AdjustmentType | None = Query(default=None),
    date_from: datetime | None = Query(default=None, description="Inclusive"),
    date_to: datetime | None = Query(default=None, description="Inclusive"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> AdjustmentListResponse:
    """List adjustments with their lines, newest first."""
    adjustments = await use_case.list_adjustments(
        search=search,
        warehouse_id=warehouse_id,
        adjustment_type=adjustment_type,
        date_from=date_from,
        date_to=date_to,
        limit=limit + 1,
        offset=offset,
    )
    return AdjustmentListResponse(
        adjustments=[AdjustmentResponse.from_entity(a) for a in adjustments[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(adjustments) > limit,
    )
