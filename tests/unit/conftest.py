"""Shared fakes for unit tests of services and use cases."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.core.entities import Item, Warehouse
from src.core.entities.inventory import (
    CostingMethod,
    DocumentType,
    InventoryPosition,
    MovementLedgerEntry,
    MovementType,
    average_cost,
)
from src.core.services import InventoryTransactionCoordinator, PostedMovement
from src.core.services.costing import CostingResult


class FakeUnitOfWork:
    """Async context manager exposing mocked stores."""

    def __init__(self):
        self.catalog = AsyncMock()
        self.positions = AsyncMock()
        self.ledger = AsyncMock()
        self.layers = AsyncMock()
        self.documents = AsyncMock()
        self.exits: list = []
        self._next_id = 0

        self.catalog.get_item.side_effect = lambda item_id: Item(
            id=item_id, item_code=item_id, description=item_id
        )
        self.catalog.get_warehouse.side_effect = lambda wid: Warehouse(id=wid, name=wid)
        self.ledger.append.side_effect = self._append
        self.positions.upsert_position.side_effect = self._upsert
        self.layers.list_open_layers.return_value = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exits.append(exc_type)

    async def _append(self, entry):
        self._next_id += 1
        entry.id = self._next_id
        return entry

    async def _upsert(self, item_id, warehouse_id, quantity, total_value, expected_version):
        return InventoryPosition(
            id=1,
            item_id=item_id,
            warehouse_id=warehouse_id,
            quantity=quantity,
            total_value=total_value,
            average_unit_cost=average_cost(total_value, quantity),
            version=expected_version + 1,
        )


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def mock_coordinator(fake_uow) -> AsyncMock:
    """Coordinator whose run() executes the work against fake_uow."""
    coordinator = AsyncMock(spec=InventoryTransactionCoordinator)

    async def run(operation, work):
        async with fake_uow as uow:
            return await work(uow)

    coordinator.run.side_effect = run
    coordinator.resolve_method.return_value = CostingMethod.WEIGHTED_AVERAGE
    return coordinator


@pytest.fixture
def make_posted():
    """Build a PostedMovement for a signed quantity at a unit cost."""

    def _make(
        movement_type: MovementType,
        quantity: str,
        unit_cost: str,
        warehouse_id: str = "WH-A",
        item_id: str = "ITM-1",
        before_quantity: str = "0",
        before_value: str = "0",
        reference_type: DocumentType = DocumentType.ITEM_ENTRY,
        reference_id: int = 1,
    ) -> PostedMovement:
        q, cost = Decimal(quantity), Decimal(unit_cost)
        value = q * cost
        bq, bv = Decimal(before_quantity), Decimal(before_value)
        before = InventoryPosition(
            item_id=item_id,
            warehouse_id=warehouse_id,
            quantity=bq,
            total_value=bv,
            average_unit_cost=average_cost(bv, bq),
        )
        after = InventoryPosition(
            id=1,
            item_id=item_id,
            warehouse_id=warehouse_id,
            quantity=bq + q,
            total_value=bv + value,
            average_unit_cost=average_cost(bv + value, bq + q),
            version=1,
        )
        entry = MovementLedgerEntry(
            id=1,
            item_id=item_id,
            warehouse_id=warehouse_id,
            movement_type=movement_type,
            quantity=q,
            unit_cost=cost,
            total_value=value,
            reference_type=reference_type,
            reference_id=reference_id,
            actor_id="clerk-1",
            balance_quantity=after.quantity,
            balance_value=after.total_value,
            costing_method=CostingMethod.WEIGHTED_AVERAGE,
        )
        costing = CostingResult(
            quantity_delta=q,
            value_delta=value,
            unit_cost=cost,
            balance_quantity=after.quantity,
            balance_value=after.total_value,
        )
        return PostedMovement(entry=entry, before=before, after=after, costing=costing)

    return _make
