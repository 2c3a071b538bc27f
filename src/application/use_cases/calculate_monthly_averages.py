"""Calculate Monthly Averages Use Case: month-end weighted average cost."""

from src.application.dto.requests import CalculateMonthlyAveragesRequest
from src.application.dto.responses import MonthlyAverageListResponse, MonthlyAverageResponse
from src.config import get_logger
from src.core.entities.reporting import MonthlyWeightedAverage
from src.core.interfaces.document_store import IMonthlyAverageStore
from src.core.interfaces.inventory_store import IMovementLedger
from src.core.services import month_bounds, monthly_weighted_averages

logger = get_logger(__name__)


class CalculateMonthlyAveragesUseCase:
    """Derive and store the weighted averages of every position moved in a month."""

    def __init__(
        self,
        ledger: IMovementLedger | None = None,
        average_store: IMonthlyAverageStore | None = None,
    ):
        self._ledger = ledger
        self._average_store = average_store

    async def _get_ledger(self) -> IMovementLedger:
        if self._ledger is None:
            from src.infrastructure.storage.sqlite import get_movement_ledger

            self._ledger = await get_movement_ledger()
        return self._ledger

    async def _get_average_store(self) -> IMonthlyAverageStore:
        if self._average_store is None:
            from src.infrastructure.storage.sqlite import get_monthly_average_store

            self._average_store = await get_monthly_average_store()
        return self._average_store

    async def execute(
        self, request: CalculateMonthlyAveragesRequest
    ) -> list[MonthlyWeightedAverage]:
        """Compute and upsert the averages for request.year / request.month."""
        logger.info("monthly_averages_started", year=request.year, month=request.month)

        start, end = month_bounds(request.year, request.month)
        ledger = await self._get_ledger()
        entries = await ledger.list_between(start, end)
        averages = monthly_weighted_averages(request.year, request.month, entries)

        store = await self._get_average_store()
        saved = [await store.save(average) for average in averages]

        logger.info(
            "monthly_averages_complete",
            year=request.year,
            month=request.month,
            entries=len(entries),
            positions=len(saved),
        )
        return saved

    async def list_for_month(
        self,
        year: int,
        month: int,
        item_id: str | None = None,
        warehouse_id: str | None = None,
    ) -> list[MonthlyWeightedAverage]:
        """Previously calculated averages."""
        store = await self._get_average_store()
        return await store.list_for_month(year, month, item_id=item_id, warehouse_id=warehouse_id)

    def to_response(
        self, year: int, month: int, averages: list[MonthlyWeightedAverage]
    ) -> MonthlyAverageListResponse:
        """Convert averages to API response."""
        return MonthlyAverageListResponse(
            year=year,
            month=month,
            averages=[MonthlyAverageResponse.from_entity(average) for average in averages],
        )
