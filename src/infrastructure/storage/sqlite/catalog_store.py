"""SQLite implementation of catalog storage."""

import sqlite3

import aiosqlite

from src.config import get_logger
from src.core.entities.catalog import Item, Supplier, Warehouse
from src.core.entities.inventory import CostingMethod
from src.core.exceptions import DuplicateCatalogEntryError
from src.core.interfaces.catalog_store import ICatalogStore
from src.infrastructure.storage.sqlite.base import SQLiteStore, dec, dec_str, ts, ts_str

logger = get_logger(__name__)


def _duplicate(entity: str, error: sqlite3.IntegrityError, values: dict[str, str]) -> Exception:
    """DuplicateCatalogEntryError for a UNIQUE violation, else the original error."""
    message = str(error)
    if "UNIQUE" not in message:
        return error
    # "UNIQUE constraint failed: items.item_code"
    column = message.rsplit(".", 1)[-1].strip()
    return DuplicateCatalogEntryError(entity, column, values.get(column, ""))


class SQLiteCatalogStore(SQLiteStore, ICatalogStore):
    """Items, warehouses and suppliers."""

    async def create_item(self, item: Item) -> Item:
        async with self._writing() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO items (
                        id, item_code, description, unit_of_measure, costing_method,
                        standard_cost, reorder_level, supplier_id, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.id,
                        item.item_code,
                        item.description,
                        item.unit_of_measure,
                        item.costing_method.value if item.costing_method else None,
                        dec_str(item.standard_cost),
                        dec_str(item.reorder_level),
                        item.supplier_id,
                        ts_str(item.created_at),
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise _duplicate("item", e, {"id": item.id, "item_code": item.item_code}) from e
        logger.info("item_created", item_id=item.id, item_code=item.item_code)
        return item

    async def get_item(self, item_id: str) -> Item | None:
        async with self._reading() as conn:
            cursor = await conn.execute("SELECT * FROM items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
        return self._row_to_item(row) if row else None

    async def list_items(self, limit: int = 100, offset: int = 0) -> list[Item]:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM items ORDER BY item_code LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
        return [self._row_to_item(row) for row in rows]

    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        async with self._writing() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO warehouses (
                        id, name, location, description, default_costing_method, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        warehouse.id,
                        warehouse.name,
                        warehouse.location,
                        warehouse.description,
                        warehouse.default_costing_method.value,
                        ts_str(warehouse.created_at),
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise _duplicate(
                    "warehouse", e, {"id": warehouse.id, "name": warehouse.name}
                ) from e
        logger.info("warehouse_created", warehouse_id=warehouse.id, name=warehouse.name)
        return warehouse

    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM warehouses WHERE id = ?", (warehouse_id,)
            )
            row = await cursor.fetchone()
        return self._row_to_warehouse(row) if row else None

    async def list_warehouses(self, limit: int = 100, offset: int = 0) -> list[Warehouse]:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM warehouses ORDER BY name LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
        return [self._row_to_warehouse(row) for row in rows]

    async def create_supplier(self, supplier: Supplier) -> Supplier:
        async with self._writing() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO suppliers (
                        id, name, contact_person, email, phone, address, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        supplier.id,
                        supplier.name,
                        supplier.contact_person,
                        supplier.email,
                        supplier.phone,
                        supplier.address,
                        ts_str(supplier.created_at),
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise _duplicate("supplier", e, {"id": supplier.id, "name": supplier.name}) from e
        logger.info("supplier_created", supplier_id=supplier.id, name=supplier.name)
        return supplier

    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM suppliers WHERE id = ?", (supplier_id,)
            )
            row = await cursor.fetchone()
        return self._row_to_supplier(row) if row else None

    async def list_suppliers(self, limit: int = 100, offset: int = 0) -> list[Supplier]:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM suppliers ORDER BY name LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
        return [self._row_to_supplier(row) for row in rows]

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        return Item(
            id=row["id"],
            item_code=row["item_code"],
            description=row["description"],
            unit_of_measure=row["unit_of_measure"],
            costing_method=CostingMethod(row["costing_method"]) if row["costing_method"] else None,
            standard_cost=dec(row["standard_cost"]),
            reorder_level=dec(row["reorder_level"]),
            supplier_id=row["supplier_id"],
            created_at=ts(row["created_at"]),
        )

    @staticmethod
    def _row_to_warehouse(row: aiosqlite.Row) -> Warehouse:
        return Warehouse(
            id=row["id"],
            name=row["name"],
            location=row["location"],
            description=row["description"],
            default_costing_method=CostingMethod(row["default_costing_method"]),
            created_at=ts(row["created_at"]),
        )

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            name=row["name"],
            contact_person=row["contact_person"],
            email=row["email"],
            phone=row["phone"],
            address=row["address"],
            created_at=ts(row["created_at"]),
        )
