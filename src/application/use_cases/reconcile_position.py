"""Reconcile Position Use Case: replay the ledger against the stored position."""

from src.application.dto.responses import ReconciliationResponse
from src.config import get_logger
from src.core.entities.reporting import ReconciliationResult
from src.core.interfaces.unit_of_work import IUnitOfWork
from src.core.services import InventoryTransactionCoordinator, reconcile

logger = get_logger(__name__)


class ReconcilePositionUseCase:
    """
    Verify that the ledger reproduces an (item, warehouse) position.

    Position and entries are read in one transaction so no posting can
    land between the two reads.
    """

    def __init__(self, coordinator: InventoryTransactionCoordinator | None = None):
        self._coordinator = coordinator

    def _get_coordinator(self) -> InventoryTransactionCoordinator:
        if self._coordinator is None:
            from src.application.services import get_transaction_coordinator

            self._coordinator = get_transaction_coordinator()
        return self._coordinator

    async def execute(self, item_id: str, warehouse_id: str) -> ReconciliationResult:
        """Execute reconciliation for one position."""
        coordinator = self._get_coordinator()

        async def work(uow: IUnitOfWork) -> ReconciliationResult:
            await coordinator.resolve_method(uow, item_id, warehouse_id)
            position = await uow.positions.get_position(item_id, warehouse_id)
            entries = await uow.ledger.list_for_position(item_id, warehouse_id)
            return reconcile(position, entries)

        result = await coordinator.run("reconcile", work)

        if result.balanced:
            logger.info(
                "reconciliation_balanced",
                item_id=item_id,
                warehouse_id=warehouse_id,
                entries=result.entry_count,
            )
        else:
            logger.warning(
                "reconciliation_discrepancy",
                item_id=item_id,
                warehouse_id=warehouse_id,
                discrepancies=result.discrepancies,
            )
        return result

    def to_response(self, result: ReconciliationResult) -> ReconciliationResponse:
        """Convert result to API response."""
        return ReconciliationResponse.from_entity(result)
