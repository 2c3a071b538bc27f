"""Catalog Use Case: register and look up items, warehouses and suppliers."""

from uuid import uuid4

from src.application.dto.requests import (
    CreateItemRequest,
    CreateSupplierRequest,
    CreateWarehouseRequest,
)
from src.config import get_logger, get_settings
from src.core.entities.catalog import Item, Supplier, Warehouse
from src.core.entities.inventory import CostingMethod
from src.core.exceptions import (
    ItemNotFoundError,
    SupplierNotFoundError,
    WarehouseNotFoundError,
)
from src.core.interfaces.catalog_store import ICatalogStore

logger = get_logger(__name__)


def _new_id() -> str:
    return uuid4().hex


class ManageCatalogUseCase:
    """Master data that movements validate against."""

    def __init__(self, catalog_store: ICatalogStore | None = None):
        self._catalog_store = catalog_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from src.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    # --- Suppliers ---

    async def create_supplier(self, request: CreateSupplierRequest) -> Supplier:
        store = await self._get_catalog_store()
        supplier = Supplier(
            id=request.id or _new_id(),
            name=request.name,
            contact_person=request.contact_person,
            email=request.email,
            phone=request.phone,
            address=request.address,
        )
        return await store.create_supplier(supplier)

    async def get_supplier(self, supplier_id: str) -> Supplier:
        store = await self._get_catalog_store()
        supplier = await store.get_supplier(supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(supplier_id)
        return supplier

    async def list_suppliers(self, limit: int = 100, offset: int = 0) -> list[Supplier]:
        store = await self._get_catalog_store()
        return await store.list_suppliers(limit=limit, offset=offset)

    # --- Warehouses ---

    async def create_warehouse(self, request: CreateWarehouseRequest) -> Warehouse:
        store = await self._get_catalog_store()
        method = request.default_costing_method or CostingMethod(
            get_settings().inventory.default_costing_method
        )
        warehouse = Warehouse(
            id=request.id or _new_id(),
            name=request.name,
            location=request.location,
            description=request.description,
            default_costing_method=method,
        )
        return await store.create_warehouse(warehouse)

    async def get_warehouse(self, warehouse_id: str) -> Warehouse:
        store = await self._get_catalog_store()
        warehouse = await store.get_warehouse(warehouse_id)
        if warehouse is None:
            raise WarehouseNotFoundError(warehouse_id)
        return warehouse

    async def list_warehouses(self, limit: int = 100, offset: int = 0) -> list[Warehouse]:
        store = await self._get_catalog_store()
        return await store.list_warehouses(limit=limit, offset=offset)

    # --- Items ---

    async def create_item(self, request: CreateItemRequest) -> Item:
        """
        Register an item.

        Raises:
            SupplierNotFoundError: If supplier_id names an unknown supplier.
            DuplicateCatalogEntryError: If the item code is taken.
        """
        store = await self._get_catalog_store()
        if request.supplier_id and await store.get_supplier(request.supplier_id) is None:
            raise SupplierNotFoundError(request.supplier_id)

        item = Item(
            id=request.id or _new_id(),
            item_code=request.item_code,
            description=request.description,
            unit_of_measure=request.unit_of_measure,
            costing_method=request.costing_method,
            standard_cost=request.standard_cost,
            reorder_level=request.reorder_level,
            supplier_id=request.supplier_id,
        )
        return await store.create_item(item)

    async def get_item(self, item_id: str) -> Item:
        store = await self._get_catalog_store()
        item = await store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    async def list_items(self, limit: int = 100, offset: int = 0) -> list[Item]:
        store = await self._get_catalog_store()
        return await store.list_items(limit=limit, offset=offset)
