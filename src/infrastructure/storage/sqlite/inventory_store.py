"""SQLite implementation of positions, the movement ledger and cost layers."""

import sqlite3
from datetime import datetime
from decimal import Decimal

import aiosqlite

from src.config import get_logger
from src.core.entities.inventory import (
    ZERO,
    CostingMethod,
    CostLayer,
    DocumentType,
    InventoryPosition,
    MovementLedgerEntry,
    MovementType,
    average_cost,
    utcnow,
)
from src.core.exceptions import ConcurrencyConflictError, InventoryInvariantError
from src.core.interfaces.inventory_store import (
    ICostLayerStore,
    IMovementLedger,
    IPositionStore,
)
from src.infrastructure.storage.sqlite.base import SQLiteStore, dec, dec_str, ts, ts_str

logger = get_logger(__name__)


class SQLitePositionStore(SQLiteStore, IPositionStore):
    """Positions with a version counter for conditional writes."""

    async def get_position(self, item_id: str, warehouse_id: str) -> InventoryPosition:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_positions WHERE item_id = ? AND warehouse_id = ?",
                (item_id, warehouse_id),
            )
            row = await cursor.fetchone()
        if row is None:
            return InventoryPosition.empty(item_id, warehouse_id)
        return self._row_to_position(row)

    async def upsert_position(
        self,
        item_id: str,
        warehouse_id: str,
        quantity: Decimal,
        total_value: Decimal,
        expected_version: int,
    ) -> InventoryPosition:
        if quantity < ZERO:
            raise InventoryInvariantError(
                item_id, warehouse_id, f"quantity would become {quantity}"
            )

        avg = average_cost(total_value, quantity)
        now = utcnow()
        resource = f"position {item_id}/{warehouse_id}"

        async with self._writing() as conn:
            if expected_version == 0:
                try:
                    await conn.execute(
                        """
                        INSERT INTO inventory_positions (
                            item_id, warehouse_id, quantity, total_value,
                            average_unit_cost, version, updated_at
                        ) VALUES (?, ?, ?, ?, ?, 1, ?)
                        """,
                        (
                            item_id,
                            warehouse_id,
                            dec_str(quantity),
                            dec_str(total_value),
                            dec_str(avg),
                            ts_str(now),
                        ),
                    )
                except sqlite3.IntegrityError as e:
                    if "UNIQUE" not in str(e):
                        raise
                    raise ConcurrencyConflictError(
                        resource, "position was created by another writer"
                    ) from e
            else:
                cursor = await conn.execute(
                    """
                    UPDATE inventory_positions SET
                        quantity = ?,
                        total_value = ?,
                        average_unit_cost = ?,
                        version = version + 1,
                        updated_at = ?
                    WHERE item_id = ? AND warehouse_id = ? AND version = ?
                    """,
                    (
                        dec_str(quantity),
                        dec_str(total_value),
                        dec_str(avg),
                        ts_str(now),
                        item_id,
                        warehouse_id,
                        expected_version,
                    ),
                )
                if cursor.rowcount != 1:
                    raise ConcurrencyConflictError(
                        resource, f"expected version {expected_version} is stale"
                    )

            cursor = await conn.execute(
                "SELECT * FROM inventory_positions WHERE item_id = ? AND warehouse_id = ?",
                (item_id, warehouse_id),
            )
            row = await cursor.fetchone()

        position = self._row_to_position(row)
        logger.debug(
            "position_upserted",
            item_id=item_id,
            warehouse_id=warehouse_id,
            quantity=dec_str(quantity),
            version=position.version,
        )
        return position

    async def list_positions(
        self,
        warehouse_id: str | None = None,
        item_id: str | None = None,
        in_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryPosition]:
        conditions = []
        params: list = []
        if warehouse_id:
            conditions.append("warehouse_id = ?")
            params.append(warehouse_id)
        if item_id:
            conditions.append("item_id = ?")
            params.append(item_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_positions {where} ORDER BY item_id, warehouse_id",
                params,
            )
            rows = await cursor.fetchall()

        positions = [self._row_to_position(row) for row in rows]
        if in_stock_only:
            # Quantities are TEXT, so the filter runs here
            positions = [p for p in positions if p.quantity > ZERO]
        return positions[offset : offset + limit]

    async def list_low_stock(
        self, warehouse_id: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[InventoryPosition]:
        sql = """
            SELECT p.*, i.reorder_level
            FROM inventory_positions p
            JOIN items i ON i.id = p.item_id
        """
        params: list = []
        if warehouse_id:
            sql += " WHERE p.warehouse_id = ?"
            params.append(warehouse_id)
        sql += " ORDER BY p.item_id, p.warehouse_id"

        async with self._reading() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()

        low = [
            self._row_to_position(row)
            for row in rows
            if dec(row["reorder_level"]) > ZERO and dec(row["quantity"]) <= dec(row["reorder_level"])
        ]
        return low[offset : offset + limit]

    @staticmethod
    def _row_to_position(row: aiosqlite.Row) -> InventoryPosition:
        return InventoryPosition(
            id=row["id"],
            item_id=row["item_id"],
            warehouse_id=row["warehouse_id"],
            quantity=dec(row["quantity"]),
            total_value=dec(row["total_value"]),
            average_unit_cost=dec(row["average_unit_cost"]),
            version=row["version"],
            updated_at=ts(row["updated_at"]),
        )


class SQLiteMovementLedger(SQLiteStore, IMovementLedger):
    """Append-only ledger. Triggers reject UPDATE and DELETE."""

    async def append(self, entry: MovementLedgerEntry) -> MovementLedgerEntry:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO movement_ledger (
                    item_id, warehouse_id, movement_type, quantity, unit_cost,
                    total_value, reference_type, reference_id, notes, actor_id,
                    balance_quantity, balance_value, costing_method, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.item_id,
                    entry.warehouse_id,
                    entry.movement_type.value,
                    dec_str(entry.quantity),
                    dec_str(entry.unit_cost),
                    dec_str(entry.total_value),
                    entry.reference_type.value,
                    entry.reference_id,
                    entry.notes,
                    entry.actor_id,
                    dec_str(entry.balance_quantity),
                    dec_str(entry.balance_value),
                    entry.costing_method.value,
                    ts_str(entry.created_at),
                ),
            )
            entry.id = cursor.lastrowid
        logger.debug(
            "ledger_entry_appended",
            entry_id=entry.id,
            movement_type=entry.movement_type.value,
            item_id=entry.item_id,
            warehouse_id=entry.warehouse_id,
        )
        return entry

    async def list_entries(
        self,
        item_id: str | None = None,
        warehouse_id: str | None = None,
        movement_type: MovementType | None = None,
        reference_type: DocumentType | None = None,
        reference_id: int | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[MovementLedgerEntry]:
        conditions = []
        params: list = []
        for column, value in (
            ("item_id", item_id),
            ("warehouse_id", warehouse_id),
            ("movement_type", movement_type.value if movement_type else None),
            ("reference_type", reference_type.value if reference_type else None),
            ("reference_id", reference_id),
        ):
            if value is not None:
                conditions.append(f"{column} = ?")
                params.append(value)
        if date_from is not None:
            conditions.append("created_at >= ?")
            params.append(ts_str(date_from))
        if date_to is not None:
            conditions.append("created_at < ?")
            params.append(ts_str(date_to))

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM movement_ledger {where} ORDER BY id DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def list_for_position(
        self, item_id: str, warehouse_id: str
    ) -> list[MovementLedgerEntry]:
        async with self._reading() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM movement_ledger
                WHERE item_id = ? AND warehouse_id = ?
                ORDER BY id
                """,
                (item_id, warehouse_id),
            )
            rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def list_between(
        self, start: datetime, end: datetime
    ) -> list[MovementLedgerEntry]:
        async with self._reading() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM movement_ledger
                WHERE created_at >= ? AND created_at < ?
                ORDER BY id
                """,
                (ts_str(start), ts_str(end)),
            )
            rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> MovementLedgerEntry:
        return MovementLedgerEntry(
            id=row["id"],
            item_id=row["item_id"],
            warehouse_id=row["warehouse_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=dec(row["quantity"]),
            unit_cost=dec(row["unit_cost"]),
            total_value=dec(row["total_value"]),
            reference_type=DocumentType(row["reference_type"]),
            reference_id=row["reference_id"],
            notes=row["notes"],
            actor_id=row["actor_id"],
            balance_quantity=dec(row["balance_quantity"]),
            balance_value=dec(row["balance_value"]),
            costing_method=CostingMethod(row["costing_method"]),
            created_at=ts(row["created_at"]),
        )


class SQLiteCostLayerStore(SQLiteStore, ICostLayerStore):
    """Cost lots for FIFO and specific identification."""

    async def add_layer(self, layer: CostLayer) -> CostLayer:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO cost_layers (
                    item_id, warehouse_id, quantity, remaining_quantity, unit_cost,
                    is_open, reference_type, reference_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    layer.item_id,
                    layer.warehouse_id,
                    dec_str(layer.quantity),
                    dec_str(layer.remaining_quantity),
                    dec_str(layer.unit_cost),
                    1 if layer.remaining_quantity > ZERO else 0,
                    layer.reference_type.value,
                    layer.reference_id,
                    ts_str(layer.created_at),
                ),
            )
            layer.id = cursor.lastrowid
        return layer

    async def list_open_layers(self, item_id: str, warehouse_id: str) -> list[CostLayer]:
        async with self._reading() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM cost_layers
                WHERE item_id = ? AND warehouse_id = ? AND is_open = 1
                ORDER BY created_at, id
                """,
                (item_id, warehouse_id),
            )
            rows = await cursor.fetchall()
        return [self._row_to_layer(row) for row in rows]

    async def set_remaining(self, layer_id: int, remaining_quantity: Decimal) -> None:
        async with self._writing() as conn:
            await conn.execute(
                "UPDATE cost_layers SET remaining_quantity = ?, is_open = ? WHERE id = ?",
                (
                    dec_str(remaining_quantity),
                    1 if remaining_quantity > ZERO else 0,
                    layer_id,
                ),
            )

    @staticmethod
    def _row_to_layer(row: aiosqlite.Row) -> CostLayer:
        return CostLayer(
            id=row["id"],
            item_id=row["item_id"],
            warehouse_id=row["warehouse_id"],
            quantity=dec(row["quantity"]),
            remaining_quantity=dec(row["remaining_quantity"]),
            unit_cost=dec(row["unit_cost"]),
            reference_type=DocumentType(row["reference_type"]),
            reference_id=row["reference_id"],
            created_at=ts(row["created_at"]),
        )
