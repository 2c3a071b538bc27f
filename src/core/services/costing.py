"""
Costing engine.

Computes the quantity and value effect of a movement on an inventory
position for each supported costing method. Strategies are pure: they
read the position and the open cost lots handed to them and describe the
result. Persisting the result is the transaction coordinator's job.

Running totals keep full Decimal precision; rounding happens only when
figures are presented.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal

from src.config import get_logger
from src.core.entities.catalog import Item, Warehouse
from src.core.entities.inventory import (
    ZERO,
    CostingMethod,
    CostLayer,
    InventoryPosition,
    average_cost,
)
from src.core.exceptions import (
    CostingError,
    CostingMethodNotSupportedError,
    InsufficientInventoryError,
)

logger = get_logger(__name__)


@dataclass
class LotConsumption:
    """Quantity taken from one recorded cost lot."""

    layer: CostLayer
    quantity: Decimal

    @property
    def remaining_after(self) -> Decimal:
        return self.layer.remaining_quantity - self.quantity


@dataclass
class CostingResult:
    """Effect of one movement on a position."""

    quantity_delta: Decimal
    value_delta: Decimal
    unit_cost: Decimal
    balance_quantity: Decimal
    balance_value: Decimal
    consumed_lots: list[LotConsumption] = field(default_factory=list)
    new_lot_quantity: Decimal = ZERO  # lot to record at unit_cost, if any

    @property
    def balance_average_cost(self) -> Decimal:
        return average_cost(self.balance_value, self.balance_quantity)


def _result(
    position: InventoryPosition,
    quantity_delta: Decimal,
    value_delta: Decimal,
    unit_cost: Decimal,
    consumed_lots: list[LotConsumption] | None = None,
    new_lot_quantity: Decimal = ZERO,
) -> CostingResult:
    balance_quantity = position.quantity + quantity_delta
    balance_value = position.total_value + value_delta
    if balance_quantity == ZERO:
        # Nothing on hand carries no value.
        value_delta -= balance_value
        balance_value = ZERO
    return CostingResult(
        quantity_delta=quantity_delta,
        value_delta=value_delta,
        unit_cost=unit_cost,
        balance_quantity=balance_quantity,
        balance_value=balance_value,
        consumed_lots=consumed_lots or [],
        new_lot_quantity=new_lot_quantity,
    )


class CostingStrategy(ABC):
    """Interface for a costing method."""

    method: CostingMethod
    layered: bool = False

    def apply_inflow(
        self,
        position: InventoryPosition,
        quantity: Decimal,
        unit_cost: Decimal,
        layers: list[CostLayer],
        total_value: Decimal | None = None,
    ) -> CostingResult:
        """
        Receive quantity at a supplied unit cost.

        total_value overrides quantity * unit_cost when the caller already
        knows the exact value moved (transfer-in).
        """
        value = total_value if total_value is not None else quantity * unit_cost
        return _result(
            position,
            quantity_delta=quantity,
            value_delta=value,
            unit_cost=unit_cost,
            new_lot_quantity=quantity if self.layered else ZERO,
        )

    @abstractmethod
    def apply_outflow(
        self,
        position: InventoryPosition,
        quantity: Decimal,
        layers: list[CostLayer],
        lot_ids: list[int] | None = None,
    ) -> CostingResult:
        """Issue quantity valued by the method. Availability is checked by the caller."""
        pass


class WeightedAverageStrategy(CostingStrategy):
    """All units share one blended cost, recomputed on every receipt."""

    method = CostingMethod.WEIGHTED_AVERAGE

    def apply_outflow(
        self,
        position: InventoryPosition,
        quantity: Decimal,
        layers: list[CostLayer],
        lot_ids: list[int] | None = None,
    ) -> CostingResult:
        unit_cost = average_cost(position.total_value, position.quantity)
        return _result(
            position,
            quantity_delta=-quantity,
            value_delta=-(quantity * unit_cost),
            unit_cost=unit_cost,
        )


class _LayeredStrategy(CostingStrategy):
    """Shared lot consumption for FIFO and specific identification."""

    layered = True

    def _consume(
        self,
        position: InventoryPosition,
        quantity: Decimal,
        lots: list[CostLayer],
        residual: tuple[Decimal, Decimal] | None = None,
    ) -> CostingResult:
        needed = quantity
        value = ZERO
        consumed: list[LotConsumption] = []

        if residual is not None:
            residual_quantity, residual_value = residual
            if residual_quantity > ZERO and needed > ZERO:
                take = min(needed, residual_quantity)
                value += take * average_cost(residual_value, residual_quantity)
                needed -= take

        for lot in lots:
            if needed <= ZERO:
                break
            take = min(needed, lot.remaining_quantity)
            if take <= ZERO:
                continue
            consumed.append(LotConsumption(layer=lot, quantity=take))
            value += take * lot.unit_cost
            needed -= take

        if needed > ZERO:
            raise CostingError(
                method=self.method.value,
                reason=f"selected lots cover {quantity - needed} of {quantity} requested",
            )

        return _result(
            position,
            quantity_delta=-quantity,
            value_delta=-value,
            unit_cost=value / quantity,
            consumed_lots=consumed,
        )


def _unlayered_residual(
    position: InventoryPosition, layers: list[CostLayer]
) -> tuple[Decimal, Decimal]:
    """Quantity and value of the position not covered by recorded lots."""
    layered_quantity = sum((lot.remaining_quantity for lot in layers), ZERO)
    layered_value = sum((lot.remaining_value for lot in layers), ZERO)
    return position.quantity - layered_quantity, position.total_value - layered_value


class FifoStrategy(_LayeredStrategy):
    """Lots are consumed oldest first."""

    method = CostingMethod.FIFO

    def apply_outflow(
        self,
        position: InventoryPosition,
        quantity: Decimal,
        layers: list[CostLayer],
        lot_ids: list[int] | None = None,
    ) -> CostingResult:
        ordered = sorted(layers, key=lambda lot: (lot.created_at, lot.id or 0))
        # Stock held before lots were tracked is the oldest lot.
        residual = _unlayered_residual(position, ordered)
        return self._consume(position, quantity, ordered, residual=residual)


class SpecificIdentificationStrategy(_LayeredStrategy):
    """Outflows consume the lots selected by the caller, in the order given."""

    method = CostingMethod.SPECIFIC_IDENTIFICATION

    def apply_outflow(
        self,
        position: InventoryPosition,
        quantity: Decimal,
        layers: list[CostLayer],
        lot_ids: list[int] | None = None,
    ) -> CostingResult:
        if not lot_ids:
            raise CostingError(
                method=self.method.value,
                reason="lot selection is required for specific identification",
            )

        if len(set(lot_ids)) != len(lot_ids):
            raise CostingError(
                method=self.method.value,
                reason="each lot may be selected only once",
            )

        by_id = {lot.id: lot for lot in layers}
        selected = []
        for lot_id in lot_ids:
            lot = by_id.get(lot_id)
            if lot is None:
                raise CostingError(
                    method=self.method.value,
                    reason=f"lot {lot_id} is not open for item {position.item_id} "
                    f"in warehouse {position.warehouse_id}",
                )
            selected.append(lot)

        return self._consume(position, quantity, selected)


class CostingEngine:
    """
    Registry of costing strategies and the entry point for valuation.

    Validates availability before an outflow and restates positions for
    adjustments.
    """

    def __init__(
        self,
        strategies: list[CostingStrategy] | None = None,
        default_method: CostingMethod = CostingMethod.WEIGHTED_AVERAGE,
    ) -> None:
        if strategies is None:
            strategies = [
                WeightedAverageStrategy(),
                FifoStrategy(),
                SpecificIdentificationStrategy(),
            ]
        self._strategies = {strategy.method: strategy for strategy in strategies}
        self.default_method = default_method

    def strategy_for(self, method: CostingMethod | str) -> CostingStrategy:
        try:
            return self._strategies[CostingMethod(method)]
        except (KeyError, ValueError):
            raise CostingMethodNotSupportedError(str(getattr(method, "value", method))) from None

    def resolve_method(
        self, item: Item | None = None, warehouse: Warehouse | None = None
    ) -> CostingMethod:
        """Item override, then warehouse default, then the engine default."""
        if item is not None and item.costing_method is not None:
            return item.costing_method
        if warehouse is not None and warehouse.default_costing_method is not None:
            return warehouse.default_costing_method
        return self.default_method

    def receive(
        self,
        method: CostingMethod,
        position: InventoryPosition,
        quantity: Decimal,
        unit_cost: Decimal,
        layers: list[CostLayer] | None = None,
        total_value: Decimal | None = None,
    ) -> CostingResult:
        strategy = self.strategy_for(method)
        return strategy.apply_inflow(
            position, quantity, unit_cost, layers or [], total_value=total_value
        )

    def issue(
        self,
        method: CostingMethod,
        position: InventoryPosition,
        quantity: Decimal,
        layers: list[CostLayer] | None = None,
        lot_ids: list[int] | None = None,
    ) -> CostingResult:
        """
        Value an outflow.

        Raises:
            InsufficientInventoryError: If quantity exceeds what is on hand.
            CostingError: If the method cannot value the outflow.
        """
        if quantity > position.quantity:
            logger.warning(
                "insufficient_inventory",
                item_id=position.item_id,
                warehouse_id=position.warehouse_id,
                available=str(position.quantity),
                requested=str(quantity),
            )
            raise InsufficientInventoryError(
                item_id=position.item_id,
                warehouse_id=position.warehouse_id,
                available=position.quantity,
                requested=quantity,
            )
        strategy = self.strategy_for(method)
        return strategy.apply_outflow(position, quantity, layers or [], lot_ids=lot_ids)

    def restate(
        self,
        method: CostingMethod,
        position: InventoryPosition,
        actual_quantity: Decimal,
        unit_cost: Decimal,
        layers: list[CostLayer] | None = None,
    ) -> CostingResult:
        """
        Restate a position to actual_quantity valued at unit_cost.

        Layered methods close every open lot and, when stock remains, open
        a single lot at the restated cost.
        """
        strategy = self.strategy_for(method)
        consumed: list[LotConsumption] = []
        new_lot_quantity = ZERO
        if strategy.layered:
            consumed = [
                LotConsumption(layer=lot, quantity=lot.remaining_quantity)
                for lot in layers or []
                if lot.remaining_quantity > ZERO
            ]
            new_lot_quantity = actual_quantity

        return _result(
            position,
            quantity_delta=actual_quantity - position.quantity,
            value_delta=actual_quantity * unit_cost - position.total_value,
            unit_cost=unit_cost,
            consumed_lots=consumed,
            new_lot_quantity=new_lot_quantity,
        )
