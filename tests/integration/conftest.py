"""Fixtures for flows against a migrated database and the real services."""

import pytest_asyncio

from src.application.dto.requests import (
    CreateItemEntryRequest,
    CreateItemRequest,
    CreateSupplierRequest,
    CreateWarehouseRequest,
)
from src.application.use_cases.create_item_entry import CreateItemEntryUseCase
from src.application.use_cases.manage_catalog import ManageCatalogUseCase
from src.core.entities import CostingMethod


@pytest_asyncio.fixture
async def catalog(migrated_db) -> ManageCatalogUseCase:
    """Supplier SUP-1, warehouses WH-A/WH-B/WH-S and items ITM-1/ITM-F."""
    use_case = ManageCatalogUseCase()
    await use_case.create_supplier(CreateSupplierRequest(id="SUP-1", name="Acme Metals"))
    await use_case.create_warehouse(CreateWarehouseRequest(id="WH-A", name="Main Warehouse"))
    await use_case.create_warehouse(CreateWarehouseRequest(id="WH-B", name="Overflow Warehouse"))
    await use_case.create_warehouse(
        CreateWarehouseRequest(
            id="WH-S",
            name="Serialized Store",
            default_costing_method=CostingMethod.SPECIFIC_IDENTIFICATION,
        )
    )
    await use_case.create_item(
        CreateItemRequest(
            id="ITM-1", item_code="BOLT-M8", description="M8 hex bolt", reorder_level=20
        )
    )
    await use_case.create_item(
        CreateItemRequest(
            id="ITM-F",
            item_code="NUT-M8",
            description="M8 nut",
            costing_method=CostingMethod.FIFO,
        )
    )
    return use_case


@pytest_asyncio.fixture
async def receive(catalog):
    """Post a receipt: await receive(item_id, warehouse_id, quantity, landed_cost)."""
    use_case = CreateItemEntryUseCase()

    async def _receive(item_id: str, warehouse_id: str, quantity, landed_cost):
        return await use_case.execute(
            CreateItemEntryRequest(
                item_id=item_id,
                warehouse_id=warehouse_id,
                supplier_id="SUP-1",
                quantity=quantity,
                landed_cost=landed_cost,
            ),
            actor_id="clerk-1",
        )

    return _receive
