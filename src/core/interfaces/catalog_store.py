"""Abstract interface for catalog master data."""

from abc import ABC, abstractmethod

from src.core.entities.catalog import Item, Supplier, Warehouse


class ICatalogStore(ABC):
    """Interface for items, warehouses and suppliers."""

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        """
        Create an item.

        Raises:
            DuplicateCatalogEntryError: If the id or item code is taken.
        """
        pass

    @abstractmethod
    async def get_item(self, item_id: str) -> Item | None:
        pass

    @abstractmethod
    async def list_items(self, limit: int = 100, offset: int = 0) -> list[Item]:
        pass

    @abstractmethod
    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        """
        Create a warehouse.

        Raises:
            DuplicateCatalogEntryError: If the id or name is taken.
        """
        pass

    @abstractmethod
    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        pass

    @abstractmethod
    async def list_warehouses(self, limit: int = 100, offset: int = 0) -> list[Warehouse]:
        pass

    @abstractmethod
    async def create_supplier(self, supplier: Supplier) -> Supplier:
        """
        Create a supplier.

        Raises:
            DuplicateCatalogEntryError: If the id or name is taken.
        """
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        pass

    @abstractmethod
    async def list_suppliers(self, limit: int = 100, offset: int = 0) -> list[Supplier]:
        pass
