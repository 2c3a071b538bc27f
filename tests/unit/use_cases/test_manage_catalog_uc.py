"""Tests for ManageCatalogUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import (
    CreateItemRequest,
    CreateSupplierRequest,
    CreateWarehouseRequest,
)
from src.application.use_cases.manage_catalog import ManageCatalogUseCase
from src.core.entities import CostingMethod, Supplier
from src.core.exceptions import (
    DuplicateCatalogEntryError,
    ItemNotFoundError,
    SupplierNotFoundError,
    WarehouseNotFoundError,
)
from src.core.interfaces.catalog_store import ICatalogStore


async def _echo(entity):
    return entity


@pytest.fixture
def catalog_store() -> AsyncMock:
    store = AsyncMock(spec=ICatalogStore)
    store.create_supplier.side_effect = _echo
    store.create_warehouse.side_effect = _echo
    store.create_item.side_effect = _echo
    store.get_supplier.return_value = None
    store.get_warehouse.return_value = None
    store.get_item.return_value = None
    return store


@pytest.fixture
def use_case(catalog_store) -> ManageCatalogUseCase:
    return ManageCatalogUseCase(catalog_store=catalog_store)


class TestWarehouses:
    async def test_defaults_to_configured_costing_method(self, use_case, monkeypatch):
        from src.config import reset_settings

        monkeypatch.setenv("INVENTORY_DEFAULT_COSTING_METHOD", "FIFO")
        reset_settings()

        warehouse = await use_case.create_warehouse(CreateWarehouseRequest(name="Cold Store"))

        assert warehouse.default_costing_method == CostingMethod.FIFO
        assert len(warehouse.id) == 32

    async def test_explicit_method_and_id_kept(self, use_case):
        warehouse = await use_case.create_warehouse(
            CreateWarehouseRequest(
                id="WH-S",
                name="Serial Store",
                default_costing_method=CostingMethod.SPECIFIC_IDENTIFICATION,
            )
        )

        assert warehouse.id == "WH-S"
        assert warehouse.default_costing_method == CostingMethod.SPECIFIC_IDENTIFICATION

    async def test_unknown_warehouse(self, use_case):
        with pytest.raises(WarehouseNotFoundError):
            await use_case.get_warehouse("WH-X")


class TestItems:
    async def test_create_item(self, use_case, catalog_store):
        item = await use_case.create_item(
            CreateItemRequest(
                item_code="BOLT-M8",
                description="Hex bolt M8",
                standard_cost=Decimal("10"),
                costing_method=CostingMethod.FIFO,
            )
        )

        assert item.item_code == "BOLT-M8"
        assert item.costing_method == CostingMethod.FIFO
        catalog_store.create_item.assert_awaited_once()

    async def test_unknown_supplier_rejected(self, use_case, catalog_store):
        request = CreateItemRequest(item_code="BOLT-M8", description="Bolt", supplier_id="SUP-X")

        with pytest.raises(SupplierNotFoundError):
            await use_case.create_item(request)
        catalog_store.create_item.assert_not_called()

    async def test_known_supplier_accepted(self, use_case, catalog_store):
        catalog_store.get_supplier.return_value = Supplier(id="SUP-1", name="Acme")

        item = await use_case.create_item(
            CreateItemRequest(item_code="BOLT-M8", description="Bolt", supplier_id="SUP-1")
        )

        assert item.supplier_id == "SUP-1"

    async def test_duplicate_code_propagates(self, use_case, catalog_store):
        catalog_store.create_item.side_effect = DuplicateCatalogEntryError(
            "item", "item_code", "BOLT-M8"
        )

        with pytest.raises(DuplicateCatalogEntryError):
            await use_case.create_item(CreateItemRequest(item_code="BOLT-M8", description="Bolt"))

    async def test_unknown_item(self, use_case):
        with pytest.raises(ItemNotFoundError):
            await use_case.get_item("ITM-X")


class TestSuppliers:
    async def test_create_and_get(self, use_case, catalog_store):
        supplier = await use_case.create_supplier(
            CreateSupplierRequest(name="Acme Metals", email="sales@acme.test")
        )
        catalog_store.get_supplier.return_value = supplier

        assert (await use_case.get_supplier(supplier.id)).name == "Acme Metals"

    async def test_unknown_supplier(self, use_case):
        with pytest.raises(SupplierNotFoundError):
            await use_case.get_supplier("SUP-X")

    async def test_list_passes_paging(self, use_case, catalog_store):
        catalog_store.list_suppliers.return_value = []

        await use_case.list_suppliers(limit=5, offset=10)

        catalog_store.list_suppliers.assert_awaited_once_with(limit=5, offset=10)
