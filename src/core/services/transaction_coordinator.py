"""
Inventory transaction coordinator.

Runs each business document as one unit of work: every position read,
costing computation, ledger append and position write for the document
happens inside the same transaction, and a failure anywhere rolls all of
it back. Lost updates surface from the stores as ConcurrencyConflictError
and make the coordinator retry the whole unit of work.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_logger
from src.core.entities.inventory import (
    ZERO,
    CostingMethod,
    CostLayer,
    DocumentType,
    InventoryPosition,
    MovementLedgerEntry,
    MovementRequest,
    MovementType,
)
from src.core.exceptions import (
    ConcurrencyConflictError,
    ItemNotFoundError,
    ValidationError,
    WarehouseNotFoundError,
)
from src.core.interfaces.unit_of_work import IUnitOfWork
from src.core.services.costing import CostingEngine, CostingResult

logger = get_logger(__name__)

T = TypeVar("T")

UnitOfWorkFactory = Callable[[], IUnitOfWork]


@dataclass
class PostedMovement:
    """One ledger entry together with the position before and after it."""

    entry: MovementLedgerEntry
    before: InventoryPosition
    after: InventoryPosition
    costing: CostingResult


class InventoryTransactionCoordinator:
    """
    Posts movements atomically.

    The post_* methods must be called with an open unit of work, normally
    from inside a callable handed to run().
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        engine: CostingEngine | None = None,
        max_retries: int = 3,
        retry_delay: float = 0.05,
        retry_multiplier: float = 2.0,
    ) -> None:
        self._uow_factory = uow_factory
        self.engine = engine or CostingEngine()
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._retry_multiplier = retry_multiplier

    async def run(self, operation: str, work: Callable[[IUnitOfWork], Awaitable[T]]) -> T:
        """
        Execute work inside a fresh unit of work, retrying on conflicts.

        Args:
            operation: Name used in log events.
            work: Async callable receiving the open unit of work.

        Returns:
            Whatever work returns, after the transaction has committed.

        Raises:
            ConcurrencyConflictError: If every attempt hit a conflict.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(
                multiplier=self._retry_delay,
                exp_base=self._retry_multiplier,
                max=self._retry_delay * (self._retry_multiplier**3),
            ),
            retry=retry_if_exception_type(ConcurrencyConflictError),
            before_sleep=self._retry_logger(operation),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    async with self._uow_factory() as uow:
                        return await work(uow)
        except ConcurrencyConflictError as e:
            logger.error(
                "unit_of_work_retries_exhausted",
                operation=operation,
                attempts=self._max_retries + 1,
                error=e.message,
            )
            raise

    @staticmethod
    def _retry_logger(operation: str) -> Callable[[RetryCallState], None]:
        def _log_retry(retry_state: RetryCallState) -> None:
            logger.warning(
                "unit_of_work_retry",
                operation=operation,
                attempt=retry_state.attempt_number,
                error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
            )

        return _log_retry

    async def resolve_method(
        self, uow: IUnitOfWork, item_id: str, warehouse_id: str
    ) -> CostingMethod:
        """Costing method in effect for the pair; both must exist."""
        item = await uow.catalog.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        warehouse = await uow.catalog.get_warehouse(warehouse_id)
        if warehouse is None:
            raise WarehouseNotFoundError(warehouse_id)
        return self.engine.resolve_method(item, warehouse)

    async def post_receipt(
        self,
        uow: IUnitOfWork,
        request: MovementRequest,
        movement_type: MovementType = MovementType.RECEIPT,
        total_value: Decimal | None = None,
    ) -> PostedMovement:
        """Post an inflow at the request's supplied unit cost."""
        if request.unit_cost is None:
            raise ValidationError("unit_cost", "unit cost is required for receipts")
        _check_quantity(request.quantity)

        method = await self.resolve_method(uow, request.item_id, request.warehouse_id)
        position = await uow.positions.get_position(request.item_id, request.warehouse_id)
        layers = await self._open_layers(uow, method, position)
        result = self.engine.receive(
            method,
            position,
            request.quantity,
            request.unit_cost,
            layers,
            total_value=total_value,
        )
        return await self._apply(uow, request, movement_type, method, position, result)

    async def post_outflow(
        self,
        uow: IUnitOfWork,
        request: MovementRequest,
        movement_type: MovementType = MovementType.WITHDRAWAL,
    ) -> PostedMovement:
        """
        Post an outflow valued by the costing method in effect.

        Raises:
            InsufficientInventoryError: If the position cannot cover it.
        """
        _check_quantity(request.quantity)

        method = await self.resolve_method(uow, request.item_id, request.warehouse_id)
        position = await uow.positions.get_position(request.item_id, request.warehouse_id)
        layers = await self._open_layers(uow, method, position)
        result = self.engine.issue(
            method, position, request.quantity, layers, lot_ids=request.lot_ids
        )
        return await self._apply(uow, request, movement_type, method, position, result)

    async def post_transfer_line(
        self,
        uow: IUnitOfWork,
        item_id: str,
        from_warehouse_id: str,
        to_warehouse_id: str,
        quantity: Decimal,
        reference_id: int,
        actor_id: str,
        notes: str | None = None,
        lot_ids: list[int] | None = None,
    ) -> tuple[PostedMovement, PostedMovement]:
        """
        Move quantity between warehouses.

        The destination receives exactly the value that left the source,
        at the source's unit cost.
        """
        if from_warehouse_id == to_warehouse_id:
            raise ValidationError(
                "to_warehouse_id",
                "Source and destination warehouses must be different",
                to_warehouse_id,
            )

        outgoing = await self.post_outflow(
            uow,
            MovementRequest(
                item_id=item_id,
                warehouse_id=from_warehouse_id,
                quantity=quantity,
                reference_type=DocumentType.TRANSFER,
                reference_id=reference_id,
                actor_id=actor_id,
                notes=notes,
                lot_ids=lot_ids,
            ),
            MovementType.TRANSFER_OUT,
        )
        incoming = await self.post_receipt(
            uow,
            MovementRequest(
                item_id=item_id,
                warehouse_id=to_warehouse_id,
                quantity=quantity,
                unit_cost=outgoing.costing.unit_cost,
                reference_type=DocumentType.TRANSFER,
                reference_id=reference_id,
                actor_id=actor_id,
                notes=notes,
            ),
            MovementType.TRANSFER_IN,
            total_value=-outgoing.costing.value_delta,
        )
        return outgoing, incoming

    async def post_adjustment(
        self,
        uow: IUnitOfWork,
        item_id: str,
        warehouse_id: str,
        actual_quantity: Decimal,
        unit_cost: Decimal | None,
        reference_id: int,
        actor_id: str,
        notes: str | None = None,
    ) -> PostedMovement:
        """
        Restate a position to a counted quantity.

        The unit cost defaults to the position's current average. An
        ADJUSTMENT entry is always written, even when the count matches.
        """
        if actual_quantity < ZERO:
            raise ValidationError(
                "actual_quantity", "actual quantity cannot be negative", actual_quantity
            )
        if unit_cost is not None and unit_cost < ZERO:
            raise ValidationError("unit_cost", "unit cost cannot be negative", unit_cost)

        method = await self.resolve_method(uow, item_id, warehouse_id)
        position = await uow.positions.get_position(item_id, warehouse_id)
        layers = await self._open_layers(uow, method, position)
        cost = unit_cost if unit_cost is not None else position.average_unit_cost
        result = self.engine.restate(method, position, actual_quantity, cost, layers)
        request = MovementRequest(
            item_id=item_id,
            warehouse_id=warehouse_id,
            quantity=abs(result.quantity_delta),
            unit_cost=cost,
            reference_type=DocumentType.ADJUSTMENT,
            reference_id=reference_id,
            actor_id=actor_id,
            notes=notes,
        )
        return await self._apply(
            uow, request, MovementType.ADJUSTMENT, method, position, result
        )

    async def _open_layers(
        self, uow: IUnitOfWork, method: CostingMethod, position: InventoryPosition
    ) -> list[CostLayer]:
        if not self.engine.strategy_for(method).layered:
            return []
        return await uow.layers.list_open_layers(position.item_id, position.warehouse_id)

    async def _apply(
        self,
        uow: IUnitOfWork,
        request: MovementRequest,
        movement_type: MovementType,
        method: CostingMethod,
        position: InventoryPosition,
        result: CostingResult,
    ) -> PostedMovement:
        entry = await uow.ledger.append(
            MovementLedgerEntry(
                item_id=request.item_id,
                warehouse_id=request.warehouse_id,
                movement_type=movement_type,
                quantity=result.quantity_delta,
                unit_cost=result.unit_cost,
                total_value=result.value_delta,
                reference_type=request.reference_type,
                reference_id=request.reference_id,
                notes=request.notes,
                actor_id=request.actor_id,
                balance_quantity=result.balance_quantity,
                balance_value=result.balance_value,
                costing_method=method,
            )
        )

        after = await uow.positions.upsert_position(
            request.item_id,
            request.warehouse_id,
            result.balance_quantity,
            result.balance_value,
            expected_version=position.version,
        )

        for consumption in result.consumed_lots:
            await uow.layers.set_remaining(consumption.layer.id, consumption.remaining_after)
        if result.new_lot_quantity > ZERO:
            await uow.layers.add_layer(
                CostLayer(
                    item_id=request.item_id,
                    warehouse_id=request.warehouse_id,
                    quantity=result.new_lot_quantity,
                    remaining_quantity=result.new_lot_quantity,
                    unit_cost=result.unit_cost,
                    reference_type=request.reference_type,
                    reference_id=request.reference_id,
                )
            )

        logger.debug(
            "movement_posted",
            movement_type=movement_type.value,
            item_id=request.item_id,
            warehouse_id=request.warehouse_id,
            quantity=str(result.quantity_delta),
            value=str(result.value_delta),
            balance_quantity=str(result.balance_quantity),
            costing_method=method.value,
        )
        return PostedMovement(entry=entry, before=position, after=after, costing=result)


def _check_quantity(quantity: Decimal) -> None:
    if quantity <= ZERO:
        raise ValidationError("quantity", "quantity must be greater than zero", quantity)
