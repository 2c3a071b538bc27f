"""Create Item Entry Use Case: RECEIPT movement at landed cost."""

from dataclasses import dataclass

from src.application.dto.requests import CreateItemEntryRequest
from src.application.dto.responses import ItemEntryResponse
from src.config import get_logger
from src.core.entities.documents import ItemEntry
from src.core.entities.inventory import ZERO, DocumentType, MovementRequest, utcnow
from src.core.exceptions import SupplierNotFoundError, ValidationError
from src.core.interfaces.unit_of_work import IUnitOfWork
from src.core.services import InventoryTransactionCoordinator, PostedMovement

logger = get_logger(__name__)


@dataclass
class CreateItemEntryResult:
    """Result of receiving stock."""

    entry: ItemEntry
    movement: PostedMovement


class CreateItemEntryUseCase:
    """Record a purchase receipt and post it to the ledger in one transaction."""

    def __init__(self, coordinator: InventoryTransactionCoordinator | None = None):
        self._coordinator = coordinator

    def _get_coordinator(self) -> InventoryTransactionCoordinator:
        if self._coordinator is None:
            from src.application.services import get_transaction_coordinator

            self._coordinator = get_transaction_coordinator()
        return self._coordinator

    async def execute(
        self, request: CreateItemEntryRequest, actor_id: str
    ) -> CreateItemEntryResult:
        """Execute item entry use case."""
        if request.quantity <= ZERO:
            raise ValidationError("quantity", "quantity must be greater than zero", request.quantity)
        if request.landed_cost <= ZERO:
            raise ValidationError(
                "landed_cost", "landed cost must be greater than zero", request.landed_cost
            )

        logger.info(
            "item_entry_started",
            item_id=request.item_id,
            warehouse_id=request.warehouse_id,
            quantity=str(request.quantity),
        )
        coordinator = self._get_coordinator()

        async def work(uow: IUnitOfWork) -> CreateItemEntryResult:
            # Unknown item or warehouse fails here, before any row is written
            await coordinator.resolve_method(uow, request.item_id, request.warehouse_id)
            if await uow.catalog.get_supplier(request.supplier_id) is None:
                raise SupplierNotFoundError(request.supplier_id)

            entry = await uow.documents.create_item_entry(
                ItemEntry(
                    item_id=request.item_id,
                    warehouse_id=request.warehouse_id,
                    supplier_id=request.supplier_id,
                    quantity=request.quantity,
                    landed_cost=request.landed_cost,
                    purchase_reference=request.purchase_reference,
                    notes=request.notes,
                    created_by=actor_id,
                    entry_date=request.entry_date or utcnow(),
                )
            )
            movement = await coordinator.post_receipt(
                uow,
                MovementRequest(
                    item_id=request.item_id,
                    warehouse_id=request.warehouse_id,
                    quantity=request.quantity,
                    unit_cost=request.landed_cost,
                    reference_type=DocumentType.ITEM_ENTRY,
                    reference_id=entry.id,  # type: ignore[arg-type]
                    actor_id=actor_id,
                    notes=request.notes,
                ),
            )
            return CreateItemEntryResult(entry=entry, movement=movement)

        result = await coordinator.run("item_entry", work)

        logger.info(
            "item_entry_posted",
            entry_id=result.entry.id,
            item_id=request.item_id,
            warehouse_id=request.warehouse_id,
            balance_quantity=str(result.movement.after.quantity),
            average_cost=str(result.movement.after.average_unit_cost),
        )
        return result

    def to_response(self, result: CreateItemEntryResult) -> ItemEntryResponse:
        """Convert result to API response."""
        return ItemEntryResponse.from_entity(result.entry, result.movement.after)
