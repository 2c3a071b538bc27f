"""Fixtures for core service tests."""

from datetime import datetime
from decimal import Decimal

import pytest

from src.core.entities.inventory import CostLayer, DocumentType, InventoryPosition
from src.core.services.costing import CostingEngine


@pytest.fixture
def engine() -> CostingEngine:
    return CostingEngine()


@pytest.fixture
def make_position():
    """Build a position with the given quantity and value."""

    def _make(quantity: str = "0", value: str = "0", version: int = 0) -> InventoryPosition:
        return InventoryPosition(
            item_id="ITM-1",
            warehouse_id="WH-A",
            quantity=Decimal(quantity),
            total_value=Decimal(value),
            version=version,
        )

    return _make


@pytest.fixture
def make_layer():
    """Build an open cost lot received at the given day of January 2024."""

    def _make(layer_id: int, remaining: str, unit_cost: str, day: int = 1) -> CostLayer:
        return CostLayer(
            id=layer_id,
            item_id="ITM-1",
            warehouse_id="WH-A",
            quantity=Decimal(remaining),
            remaining_quantity=Decimal(remaining),
            unit_cost=Decimal(unit_cost),
            reference_type=DocumentType.ITEM_ENTRY,
            reference_id=layer_id,
            created_at=datetime(2024, 1, day),
        )

    return _make
