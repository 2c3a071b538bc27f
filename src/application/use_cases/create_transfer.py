"""Create Transfer Use Case: paired TRANSFER_OUT / TRANSFER_IN movements."""

from dataclasses import dataclass, field

from src.application.dto.requests import CreateTransferRequest
from src.application.dto.responses import TransferResponse
from src.config import get_logger
from src.core.entities.documents import Transfer, TransferLine, TransferStatus
from src.core.entities.inventory import utcnow
from src.core.exceptions import ValidationError, WarehouseNotFoundError
from src.core.interfaces.unit_of_work import IUnitOfWork
from src.core.services import InventoryTransactionCoordinator, PostedMovement

logger = get_logger(__name__)


@dataclass
class CreateTransferResult:
    """Result of a posted transfer."""

    transfer: Transfer
    movements: list[PostedMovement] = field(default_factory=list)


class CreateTransferUseCase:
    """
    Move stock between warehouses.

    Every line is posted in a single unit of work: if any line lacks
    stock, nothing is written, including the transfer header.
    """

    def __init__(self, coordinator: InventoryTransactionCoordinator | None = None):
        self._coordinator = coordinator

    def _get_coordinator(self) -> InventoryTransactionCoordinator:
        if self._coordinator is None:
            from src.application.services import get_transaction_coordinator

            self._coordinator = get_transaction_coordinator()
        return self._coordinator

    @staticmethod
    def _validate(request: CreateTransferRequest) -> None:
        if request.from_warehouse_id == request.to_warehouse_id:
            raise ValidationError(
                "to_warehouse_id",
                "Source and destination warehouses must be different",
                request.to_warehouse_id,
            )
        if not request.lines:
            raise ValidationError("lines", "transfer must have at least one line")

        seen: set[str] = set()
        for line in request.lines:
            if line.quantity <= 0:
                raise ValidationError(
                    "quantity", "quantity must be greater than zero", line.quantity
                )
            if line.item_id in seen:
                raise ValidationError("lines", "duplicate item in transfer", line.item_id)
            seen.add(line.item_id)

    async def execute(self, request: CreateTransferRequest, actor_id: str) -> CreateTransferResult:
        """Execute transfer use case."""
        self._validate(request)

        logger.info(
            "transfer_started",
            from_warehouse_id=request.from_warehouse_id,
            to_warehouse_id=request.to_warehouse_id,
            lines=len(request.lines),
        )
        coordinator = self._get_coordinator()
        # A consistent line order keeps concurrent documents from interleaving
        lines = sorted(request.lines, key=lambda line: line.item_id)
        transfer_date = request.transfer_date or utcnow()

        async def work(uow: IUnitOfWork) -> CreateTransferResult:
            for warehouse_id in (request.from_warehouse_id, request.to_warehouse_id):
                if await uow.catalog.get_warehouse(warehouse_id) is None:
                    raise WarehouseNotFoundError(warehouse_id)

            number = await uow.documents.next_document_number("TRF", transfer_date.year)
            transfer = await uow.documents.create_transfer(
                Transfer(
                    transfer_number=number,
                    from_warehouse_id=request.from_warehouse_id,
                    to_warehouse_id=request.to_warehouse_id,
                    status=TransferStatus.COMPLETED,
                    notes=request.notes,
                    created_by=actor_id,
                    transfer_date=transfer_date,
                )
            )

            result = CreateTransferResult(transfer=transfer)
            for line in lines:
                outgoing, incoming = await coordinator.post_transfer_line(
                    uow,
                    item_id=line.item_id,
                    from_warehouse_id=request.from_warehouse_id,
                    to_warehouse_id=request.to_warehouse_id,
                    quantity=line.quantity,
                    reference_id=transfer.id,  # type: ignore[arg-type]
                    actor_id=actor_id,
                    notes=request.notes,
                    lot_ids=line.lot_ids,
                )
                saved = await uow.documents.add_transfer_line(
                    TransferLine(
                        transfer_id=transfer.id,
                        item_id=line.item_id,
                        quantity=line.quantity,
                        unit_cost=outgoing.costing.unit_cost,
                        total_value=-outgoing.costing.value_delta,
                    )
                )
                transfer.lines.append(saved)
                result.movements.extend([outgoing, incoming])
            return result

        result = await coordinator.run("transfer", work)

        logger.info(
            "transfer_posted",
            transfer_id=result.transfer.id,
            transfer_number=result.transfer.transfer_number,
            total_value=str(result.transfer.total_value),
        )
        return result

    def to_response(self, result: CreateTransferResult) -> TransferResponse:
        """Convert result to API response."""
        return TransferResponse.from_entity(result.transfer)
