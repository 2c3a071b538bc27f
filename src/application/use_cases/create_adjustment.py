"""Create Adjustment Use Case: restate positions to counted quantities."""

from dataclasses import dataclass, field

from src.application.dto.requests import CreateAdjustmentRequest
from src.application.dto.responses import AdjustmentResponse
from src.config import get_logger
from src.core.entities.documents import AdjustmentLine, InventoryAdjustment
from src.core.entities.inventory import ZERO, utcnow
from src.core.exceptions import ValidationError, WarehouseNotFoundError
from src.core.interfaces.unit_of_work import IUnitOfWork
from src.core.services import InventoryTransactionCoordinator, PostedMovement

logger = get_logger(__name__)


@dataclass
class CreateAdjustmentResult:
    """Result of a posted adjustment."""

    adjustment: InventoryAdjustment
    movements: list[PostedMovement] = field(default_factory=list)


class CreateAdjustmentUseCase:
    """
    Record a stock count or revaluation.

    The system quantity of each line is the position read inside the same
    transaction that restates it.
    """

    def __init__(self, coordinator: InventoryTransactionCoordinator | None = None):
        self._coordinator = coordinator

    def _get_coordinator(self) -> InventoryTransactionCoordinator:
        if self._coordinator is None:
            from src.application.services import get_transaction_coordinator

            self._coordinator = get_transaction_coordinator()
        return self._coordinator

    @staticmethod
    def _validate(request: CreateAdjustmentRequest) -> None:
        if not request.lines:
            raise ValidationError("lines", "adjustment must have at least one line")

        seen: set[str] = set()
        for line in request.lines:
            if line.actual_quantity < ZERO:
                raise ValidationError(
                    "actual_quantity", "actual quantity cannot be negative", line.actual_quantity
                )
            if line.unit_cost is not None and line.unit_cost < ZERO:
                raise ValidationError("unit_cost", "unit cost cannot be negative", line.unit_cost)
            if line.item_id in seen:
                raise ValidationError("lines", "duplicate item in adjustment", line.item_id)
            seen.add(line.item_id)

    async def execute(
        self, request: CreateAdjustmentRequest, actor_id: str
    ) -> CreateAdjustmentResult:
        """Execute adjustment use case."""
        self._validate(request)

        logger.info(
            "adjustment_started",
            warehouse_id=request.warehouse_id,
            adjustment_type=request.adjustment_type.value,
            lines=len(request.lines),
        )
        coordinator = self._get_coordinator()
        lines = sorted(request.lines, key=lambda line: line.item_id)
        adjusted_at = utcnow()

        async def work(uow: IUnitOfWork) -> CreateAdjustmentResult:
            if await uow.catalog.get_warehouse(request.warehouse_id) is None:
                raise WarehouseNotFoundError(request.warehouse_id)

            number = await uow.documents.next_document_number("ADJ", adjusted_at.year)
            adjustment = await uow.documents.create_adjustment(
                InventoryAdjustment(
                    adjustment_number=number,
                    warehouse_id=request.warehouse_id,
                    adjustment_type=request.adjustment_type,
                    reason=request.reason,
                    notes=request.notes,
                    adjusted_by=actor_id,
                    adjusted_at=adjusted_at,
                )
            )

            result = CreateAdjustmentResult(adjustment=adjustment)
            for line in lines:
                posted = await coordinator.post_adjustment(
                    uow,
                    item_id=line.item_id,
                    warehouse_id=request.warehouse_id,
                    actual_quantity=line.actual_quantity,
                    unit_cost=line.unit_cost,
                    reference_id=adjustment.id,  # type: ignore[arg-type]
                    actor_id=actor_id,
                    notes=request.reason,
                )
                saved = await uow.documents.add_adjustment_line(
                    AdjustmentLine(
                        adjustment_id=adjustment.id,
                        item_id=line.item_id,
                        system_quantity=posted.before.quantity,
                        actual_quantity=line.actual_quantity,
                        unit_cost=posted.costing.unit_cost,
                        adjustment_quantity=posted.costing.quantity_delta,
                        total_adjustment=posted.costing.value_delta,
                    )
                )
                adjustment.lines.append(saved)
                result.movements.append(posted)
            return result

        result = await coordinator.run("adjustment", work)

        logger.info(
            "adjustment_posted",
            adjustment_id=result.adjustment.id,
            adjustment_number=result.adjustment.adjustment_number,
            lines=len(result.adjustment.lines),
        )
        return result

    def to_response(self, result: CreateAdjustmentResult) -> AdjustmentResponse:
        """Convert result to API response."""
        return AdjustmentResponse.from_entity(result.adjustment)
