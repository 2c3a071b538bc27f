"""Cost accounting endpoints: month-end weighted averages."""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_monthly_averages_use_case
from src.application.dto.requests import CalculateMonthlyAveragesRequest
from src.application.dto.responses import MonthlyAverageListResponse
from src.application.use_cases.calculate_monthly_averages import (
    CalculateMonthlyAveragesUseCase,
)

router = APIRouter(prefix="/api/cost-accounting", tags=["cost-accounting"])


@router.post("/monthly-averages", response_model=MonthlyAverageListResponse)
async def calculate_monthly_averages(
    request: CalculateMonthlyAveragesRequest,
    use_case: CalculateMonthlyAveragesUseCase = Depends(get_monthly_averages_use_case),
) -> MonthlyAverageListResponse:
    """Compute (or recompute) the averages for a month from the ledger."""
    averages = await use_case.execute(request)
    return use_case.to_response(request.year, request.month, averages)


@router.get("/monthly-averages", response_model=MonthlyAverageListResponse)
async def list_monthly_averages(
    year: int = Query(..., ge=2000, le=9999),
    month: int = Query(..., ge=1, le=12),
    item_id: str | None = Query(default=None),
    warehouse_id: str | None = Query(default=None),
    use_case: CalculateMonthlyAveragesUseCase = Depends(get_monthly_averages_use_case),
) -> MonthlyAverageListResponse:
    """Averages stored by a previous calculation."""
    averages = await use_case.list_for_month(
        year, month, item_id=item_id, warehouse_id=warehouse_id
    )
    return use_case.to_response(year, month, averages)
