"""Create Withdrawal Use Case: WITHDRAWAL movements valued by the costing method."""

from dataclasses import dataclass, field

from src.application.dto.requests import CreateWithdrawalRequest
from src.application.dto.responses import WithdrawalResponse
from src.config import get_logger
from src.core.entities.documents import Withdrawal, WithdrawalLine, WithdrawalStatus
from src.core.entities.inventory import DocumentType, MovementRequest, utcnow
from src.core.exceptions import ValidationError, WarehouseNotFoundError
from src.core.interfaces.unit_of_work import IUnitOfWork
from src.core.services import InventoryTransactionCoordinator, PostedMovement

logger = get_logger(__name__)


@dataclass
class CreateWithdrawalResult:
    """Result of a posted withdrawal."""

    withdrawal: Withdrawal
    movements: list[PostedMovement] = field(default_factory=list)


class CreateWithdrawalUseCase:
    """Issue materials out of a warehouse, all lines or none."""

    def __init__(self, coordinator: InventoryTransactionCoordinator | None = None):
        self._coordinator = coordinator

    def _get_coordinator(self) -> InventoryTransactionCoordinator:
        if self._coordinator is None:
            from src.application.services import get_transaction_coordinator

            self._coordinator = get_transaction_coordinator()
        return self._coordinator

    @staticmethod
    def _validate(request: CreateWithdrawalRequest) -> None:
        if not request.lines:
            raise ValidationError("lines", "withdrawal must have at least one line")

        seen: set[str] = set()
        for line in request.lines:
            if line.quantity <= 0:
                raise ValidationError(
                    "quantity", "quantity must be greater than zero", line.quantity
                )
            if line.item_id in seen:
                raise ValidationError("lines", "duplicate item in withdrawal", line.item_id)
            seen.add(line.item_id)

    async def execute(
        self, request: CreateWithdrawalRequest, actor_id: str
    ) -> CreateWithdrawalResult:
        """Execute withdrawal use case."""
        self._validate(request)

        logger.info(
            "withdrawal_started",
            warehouse_id=request.warehouse_id,
            lines=len(request.lines),
        )
        coordinator = self._get_coordinator()
        lines = sorted(request.lines, key=lambda line: line.item_id)
        withdrawal_date = request.withdrawal_date or utcnow()

        async def work(uow: IUnitOfWork) -> CreateWithdrawalResult:
            if await uow.catalog.get_warehouse(request.warehouse_id) is None:
                raise WarehouseNotFoundError(request.warehouse_id)

            number = await uow.documents.next_document_number("WTH", withdrawal_date.year)
            withdrawal = await uow.documents.create_withdrawal(
                Withdrawal(
                    withdrawal_number=number,
                    warehouse_id=request.warehouse_id,
                    purpose=request.purpose,
                    status=WithdrawalStatus.COMPLETED,
                    requested_by=actor_id,
                    withdrawal_date=withdrawal_date,
                )
            )

            result = CreateWithdrawalResult(withdrawal=withdrawal)
            for line in lines:
                posted = await coordinator.post_outflow(
                    uow,
                    MovementRequest(
                        item_id=line.item_id,
                        warehouse_id=request.warehouse_id,
                        quantity=line.quantity,
                        reference_type=DocumentType.WITHDRAWAL,
                        reference_id=withdrawal.id,  # type: ignore[arg-type]
                        actor_id=actor_id,
                        notes=request.purpose,
                        lot_ids=line.lot_ids,
                    ),
                )
                saved = await uow.documents.add_withdrawal_line(
                    WithdrawalLine(
                        withdrawal_id=withdrawal.id,
                        item_id=line.item_id,
                        quantity=line.quantity,
                        unit_cost=posted.costing.unit_cost,
                        total_value=-posted.costing.value_delta,
                    )
                )
                withdrawal.lines.append(saved)
                result.movements.append(posted)
            return result

        result = await coordinator.run("withdrawal", work)

        logger.info(
            "withdrawal_posted",
            withdrawal_id=result.withdrawal.id,
            withdrawal_number=result.withdrawal.withdrawal_number,
            total_value=str(result.withdrawal.total_value),
        )
        return result

    def to_response(self, result: CreateWithdrawalResult) -> WithdrawalResponse:
        """Convert result to API response."""
        return WithdrawalResponse.from_entity(result.withdrawal)
