"""Material withdrawal endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_actor_id,
    get_create_withdrawal_use_case,
    get_query_inventory_use_case,
)
from src.application.dto.requests import CreateWithdrawalRequest
from src.application.dto.responses import (
    ErrorResponse,
    WithdrawalListResponse,
    WithdrawalResponse,
)
from src.application.use_cases.create_withdrawal import CreateWithdrawalUseCase
from src.application.use_cases.query_inventory import QueryInventoryUseCase
from src.core.entities.documents import WithdrawalStatus

router = APIRouter(prefix="/api/withdrawals", tags=["withdrawals"])


@router.post(
    "",
    response_model=WithdrawalResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def create_withdrawal(
    request: CreateWithdrawalRequest,
    actor_id: str = Depends(get_actor_id),
    use_case: CreateWithdrawalUseCase = Depends(get_create_withdrawal_use_case),
) -> WithdrawalResponse:
    """Issue materials out of a warehouse."""
    result = await use_case.execute(request, actor_id)
    return use_case.to_response(result)


@router.get(
    "/{withdrawal_id}",
    response_model=WithdrawalResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_withdrawal(
    withdrawal_id: int,
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> WithdrawalResponse:
    """Get one withdrawal with its lines."""
    return WithdrawalResponse.from_entity(await use_case.get_withdrawal(withdrawal_id))


@router.get("", response_model=WithdrawalListResponse)
async def list_withdrawals(
    search: str | None = Query(default=None, description="Withdrawal number or purpose"),
    warehouse_id: str | None = Query(default=None),
    status: WithdrawalStatus | None = Query(default=None),
    date_from: datetime | None = Query(default=None, description="Inclusive"),
    date_to: datetime | None = Query(default=None, description="Inclusive"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> WithdrawalListResponse:
    """List withdrawals with their lines, newest first."""
    withdrawals = await use_case.list_withdrawals(
        search=search,
        warehouse_id=warehouse_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        limit=limit + 1,
        offset=offset,
    )
    return WithdrawalListResponse(
        withdrawals=[WithdrawalResponse.from_entity(w) for w in withdrawals[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(withdrawals) > limit,
    )
