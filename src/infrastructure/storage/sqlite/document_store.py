"""SQLite implementation of business document storage."""

from collections import defaultdict
from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.documents import (
    AdjustmentLine,
    AdjustmentType,
    InventoryAdjustment,
    ItemEntry,
    Transfer,
    TransferLine,
    TransferStatus,
    Withdrawal,
    WithdrawalLine,
    WithdrawalStatus,
)
from src.core.interfaces.document_store import IDocumentStore
from src.infrastructure.storage.sqlite.base import SQLiteStore, dec, dec_str, ts, ts_str

logger = get_logger(__name__)


def _like(search: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped."""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _where(
    equals: dict[str, object],
    search: str | None,
    search_columns: tuple[str, ...],
    date_column: str,
    date_from: datetime | None,
    date_to: datetime | None,
) -> tuple[str, list]:
    """WHERE clause for document lists. Both date bounds are inclusive."""
    conditions = []
    params: list = []
    for column, value in equals.items():
        if value is not None:
            conditions.append(f"{column} = ?")
            params.append(value)
    if search and search.strip():
        matches = " OR ".join(f"{column} LIKE ? ESCAPE '\\'" for column in search_columns)
        conditions.append(f"({matches})")
        params.extend([_like(search.strip())] * len(search_columns))
    if date_from is not None:
        conditions.append(f"{date_column} >= ?")
        params.append(ts_str(date_from))
    if date_to is not None:
        conditions.append(f"{date_column} <= ?")
        params.append(ts_str(date_to))
    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return where, params


async def _lines_by_document(
    conn: aiosqlite.Connection, table: str, key: str, document_ids: list[int]
) -> dict[int, list[aiosqlite.Row]]:
    if not document_ids:
        return {}
    placeholders = ", ".join("?" for _ in document_ids)
    cursor = await conn.execute(
        f"SELECT * FROM {table} WHERE {key} IN ({placeholders}) ORDER BY id",
        document_ids,
    )
    grouped: dict[int, list[aiosqlite.Row]] = defaultdict(list)
    for row in await cursor.fetchall():
        grouped[row[key]].append(row)
    return grouped


class SQLiteDocumentStore(SQLiteStore, IDocumentStore):
    """Item entries, transfers, withdrawals and adjustments."""

    async def next_document_number(self, prefix: str, year: int) -> str:
        async with self._writing() as conn:
            await conn.execute(
                """
                INSERT INTO document_sequences (prefix, year, last_number) VALUES (?, ?, 1)
                ON CONFLICT(prefix, year) DO UPDATE SET last_number = last_number + 1
                """,
                (prefix, year),
            )
            cursor = await conn.execute(
                "SELECT last_number FROM document_sequences WHERE prefix = ? AND year = ?",
                (prefix, year),
            )
            row = await cursor.fetchone()
        logger.debug("document_number_allocated", prefix=prefix, year=year, number=row[0])
        return f"{prefix}-{year}-{row[0]:03d}"

    # =========================================================================
    # Item entries
    # =========================================================================

    async def create_item_entry(self, entry: ItemEntry) -> ItemEntry:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO item_entries (
                    item_id, warehouse_id, supplier_id, quantity, landed_cost,
                    total_value, purchase_reference, notes, created_by,
                    entry_date, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.item_id,
                    entry.warehouse_id,
                    entry.supplier_id,
                    dec_str(entry.quantity),
                    dec_str(entry.landed_cost),
                    dec_str(entry.total_value),
                    entry.purchase_reference,
                    entry.notes,
                    entry.created_by,
                    ts_str(entry.entry_date),
                    ts_str(entry.created_at),
                ),
            )
            entry.id = cursor.lastrowid
        return entry

    async def get_item_entry(self, entry_id: int) -> ItemEntry | None:
        async with self._reading() as conn:
            cursor = await conn.execute("SELECT * FROM item_entries WHERE id = ?", (entry_id,))
            row = await cursor.fetchone()
        return self._row_to_item_entry(row) if row else None

    async def list_item_entries(
        self,
        search: str | None = None,
        warehouse_id: str | None = None,
        supplier_id: str | None = None,
        item_id: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ItemEntry]:
        where, params = _where(
            {"e.warehouse_id": warehouse_id, "e.supplier_id": supplier_id, "e.item_id": item_id},
            search,
            ("e.purchase_reference", "e.notes", "i.item_code", "i.description"),
            "e.entry_date",
            date_from,
            date_to,
        )
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT e.* FROM item_entries e
                JOIN items i ON i.id = e.item_id
                {where}
                ORDER BY e.created_at DESC, e.id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
        return [self._row_to_item_entry(row) for row in rows]

    @staticmethod
    def _row_to_item_entry(row: aiosqlite.Row) -> ItemEntry:
        return ItemEntry(
            id=row["id"],
            item_id=row["item_id"],
            warehouse_id=row["warehouse_id"],
            supplier_id=row["supplier_id"],
            quantity=dec(row["quantity"]),
            landed_cost=dec(row["landed_cost"]),
            purchase_reference=row["purchase_reference"],
            notes=row["notes"],
            created_by=row["created_by"],
            entry_date=ts(row["entry_date"]),
            created_at=ts(row["created_at"]),
        )

    # =========================================================================
    # Transfers
    # =========================================================================

    async def create_transfer(self, transfer: Transfer) -> Transfer:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO transfers (
                    transfer_number, from_warehouse_id, to_warehouse_id, status,
                    notes, created_by, approved_by, approved_at, transfer_date, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transfer.transfer_number,
                    transfer.from_warehouse_id,
                    transfer.to_warehouse_id,
                    transfer.status.value,
                    transfer.notes,
                    transfer.created_by,
                    transfer.approved_by,
                    ts_str(transfer.approved_at),
                    ts_str(transfer.transfer_date),
                    ts_str(transfer.created_at),
                ),
            )
            transfer.id = cursor.lastrowid
        return transfer

    async def add_transfer_line(self, line: TransferLine) -> TransferLine:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO transfer_lines (transfer_id, item_id, quantity, unit_cost, total_value)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    line.transfer_id,
                    line.item_id,
                    dec_str(line.quantity),
                    dec_str(line.unit_cost),
                    dec_str(line.total_value),
                ),
            )
            line.id = cursor.lastrowid
        return line

    async def get_transfer(self, transfer_id: int) -> Transfer | None:
        async with self._reading() as conn:
            cursor = await conn.execute("SELECT * FROM transfers WHERE id = ?", (transfer_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            lines = await _lines_by_document(conn, "transfer_lines", "transfer_id", [transfer_id])
        return self._row_to_transfer(row, lines.get(transfer_id, []))

    async def list_transfers(
        self,
        search: str | None = None,
        from_warehouse_id: str | None = None,
        to_warehouse_id: str | None = None,
        status: TransferStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Transfer]:
        where, params = _where(
            {
                "from_warehouse_id": from_warehouse_id,
                "to_warehouse_id": to_warehouse_id,
                "status": status.value if status else None,
            },
            search,
            ("transfer_number", "notes"),
            "transfer_date",
            date_from,
            date_to,
        )
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM transfers {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
            lines = await _lines_by_document(
                conn, "transfer_lines", "transfer_id", [row["id"] for row in rows]
            )
        return [self._row_to_transfer(row, lines.get(row["id"], [])) for row in rows]

    @staticmethod
    def _row_to_transfer(row: aiosqlite.Row, line_rows: list[aiosqlite.Row]) -> Transfer:
        return Transfer(
            id=row["id"],
            transfer_number=row["transfer_number"],
            from_warehouse_id=row["from_warehouse_id"],
            to_warehouse_id=row["to_warehouse_id"],
            status=TransferStatus(row["status"]),
            notes=row["notes"],
            created_by=row["created_by"],
            approved_by=row["approved_by"],
            approved_at=ts(row["approved_at"]),
            transfer_date=ts(row["transfer_date"]),
            created_at=ts(row["created_at"]),
            lines=[
                TransferLine(
                    id=line["id"],
                    transfer_id=line["transfer_id"],
                    item_id=line["item_id"],
                    quantity=dec(line["quantity"]),
                    unit_cost=dec(line["unit_cost"]),
                    total_value=dec(line["total_value"]),
                )
                for line in line_rows
            ],
        )

    # =========================================================================
    # Withdrawals
    # =========================================================================

    async def create_withdrawal(self, withdrawal: Withdrawal) -> Withdrawal:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO withdrawals (
                    withdrawal_number, warehouse_id, purpose, status, requested_by,
                    approved_by, approved_at, withdrawal_date, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    withdrawal.withdrawal_number,
                    withdrawal.warehouse_id,
                    withdrawal.purpose,
                    withdrawal.status.value,
                    withdrawal.requested_by,
                    withdrawal.approved_by,
                    ts_str(withdrawal.approved_at),
                    ts_str(withdrawal.withdrawal_date),
                    ts_str(withdrawal.created_at),
                ),
            )
            withdrawal.id = cursor.lastrowid
        return withdrawal

    async def add_withdrawal_line(self, line: WithdrawalLine) -> WithdrawalLine:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO withdrawal_lines (withdrawal_id, item_id, quantity, unit_cost, total_value)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    line.withdrawal_id,
                    line.item_id,
                    dec_str(line.quantity),
                    dec_str(line.unit_cost),
                    dec_str(line.total_value),
                ),
            )
            line.id = cursor.lastrowid
        return line

    async def get_withdrawal(self, withdrawal_id: int) -> Withdrawal | None:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM withdrawals WHERE id = ?", (withdrawal_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            lines = await _lines_by_document(
                conn, "withdrawal_lines", "withdrawal_id", [withdrawal_id]
            )
        return self._row_to_withdrawal(row, lines.get(withdrawal_id, []))

    async def list_withdrawals(
        self,
        search: str | None = None,
        warehouse_id: str | None = None,
        status: WithdrawalStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Withdrawal]:
        where, params = _where(
            {"warehouse_id": warehouse_id, "status": status.value if status else None},
            search,
            ("withdrawal_number", "purpose"),
            "withdrawal_date",
            date_from,
            date_to,
        )
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM withdrawals {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
            lines = await _lines_by_document(
                conn, "withdrawal_lines", "withdrawal_id", [row["id"] for row in rows]
            )
        return [self._row_to_withdrawal(row, lines.get(row["id"], [])) for row in rows]

    @staticmethod
    def _row_to_withdrawal(row: aiosqlite.Row, line_rows: list[aiosqlite.Row]) -> Withdrawal:
        return Withdrawal(
            id=row["id"],
            withdrawal_number=row["withdrawal_number"],
            warehouse_id=row["warehouse_id"],
            purpose=row["purpose"],
            status=WithdrawalStatus(row["status"]),
            requested_by=row["requested_by"],
            approved_by=row["approved_by"],
            approved_at=ts(row["approved_at"]),
            withdrawal_date=ts(row["withdrawal_date"]),
            created_at=ts(row["created_at"]),
            lines=[
                WithdrawalLine(
                    id=line["id"],
                    withdrawal_id=line["withdrawal_id"],
                    item_id=line["item_id"],
                    quantity=dec(line["quantity"]),
                    unit_cost=dec(line["unit_cost"]),
                    total_value=dec(line["total_value"]),
                )
                for line in line_rows
            ],
        )

    # =========================================================================
    # Adjustments
    # =========================================================================

    async def create_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_adjustments (
                    adjustment_number, warehouse_id, adjustment_type, reason, notes,
                    adjusted_by, adjusted_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    adjustment.adjustment_number,
                    adjustment.warehouse_id,
                    adjustment.adjustment_type.value,
                    adjustment.reason,
                    adjustment.notes,
                    adjustment.adjusted_by,
                    ts_str(adjustment.adjusted_at),
                    ts_str(adjustment.created_at),
                ),
            )
            adjustment.id = cursor.lastrowid
        return adjustment

    async def add_adjustment_line(self, line: AdjustmentLine) -> AdjustmentLine:
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO adjustment_lines (
                    adjustment_id, item_id, system_quantity, actual_quantity,
                    unit_cost, adjustment_quantity, total_adjustment
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    line.adjustment_id,
                    line.item_id,
                    dec_str(line.system_quantity),
                    dec_str(line.actual_quantity),
                    dec_str(line.unit_cost),
                    dec_str(line.adjustment_quantity),
                    dec_str(line.total_adjustment),
                ),
            )
            line.id = cursor.lastrowid
        return line

    async def get_adjustment(self, adjustment_id: int) -> InventoryAdjustment | None:
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_adjustments WHERE id = ?", (adjustment_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            lines = await _lines_by_document(
                conn, "adjustment_lines", "adjustment_id", [adjustment_id]
            )
        return self._row_to_adjustment(row, lines.get(adjustment_id, []))

    async def list_adjustments(
        self,
        search: str | None = None,
        warehouse_id: str | None = None,
        adjustment_type: AdjustmentType | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryAdjustment]:
        where, params = _where(
            {
                "warehouse_id": warehouse_id,
                "adjustment_type": adjustment_type.value if adjustment_type else None,
            },
            search,
            ("adjustment_number", "reason", "notes"),
            "adjusted_at",
            date_from,
            date_to,
        )
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM inventory_adjustments {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
            lines = await _lines_by_document(
                conn, "adjustment_lines", "adjustment_id", [row["id"] for row in rows]
            )
        return [self._row_to_adjustment(row, lines.get(row["id"], [])) for row in rows]

    @classmethod
    def _row_to_adjustment(
        cls, row: aiosqlite.Row, line_rows: list[aiosqlite.Row]
    ) -> InventoryAdjustment:
        return InventoryAdjustment(
            id=row["id"],
            adjustment_number=row["adjustment_number"],
            warehouse_id=row["warehouse_id"],
            adjustment_type=AdjustmentType(row["adjustment_type"]),
            reason=row["reason"],
            notes=row["notes"],
            adjusted_by=row["adjusted_by"],
            adjusted_at=ts(row["adjusted_at"]),
            created_at=ts(row["created_at"]),
            lines=[cls._row_to_adjustment_line(line) for line in line_rows],
        )

    @staticmethod
    def _row_to_adjustment_line(row: aiosqlite.Row) -> AdjustmentLine:
        return AdjustmentLine(
            id=row["id"],
            adjustment_id=row["adjustment_id"],
            item_id=row["item_id"],
            system_quantity=dec(row["system_quantity"]),
            actual_quantity=dec(row["actual_quantity"]),
            unit_cost=dec(row["unit_cost"]),
            adjustment_quantity=dec(row["adjustment_quantity"]),
            total_adjustment=dec(row["total_adjustment"]),
        )
