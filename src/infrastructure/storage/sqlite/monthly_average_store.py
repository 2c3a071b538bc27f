"""SQLite implementation of monthly weighted average storage."""

import aiosqlite

from src.config import get_logger
from src.core.entities.reporting import MonthlyWeightedAverage
from src.core.interfaces.document_store import IMonthlyAverageStore
from src.infrastructure.storage.sqlite.base import SQLiteStore, dec, dec_str, ts, ts_str

logger = get_logger(__name__)


class SQLiteMonthlyAverageStore(SQLiteStore, IMonthlyAverageStore):
    """One row per (item, warehouse, year, month); recalculation replaces it."""

    async def save(self, average: MonthlyWeightedAverage) -> MonthlyWeightedAverage:
        async with self._writing() as conn:
            await conn.execute(
                """
                INSERT INTO monthly_weighted_averages (
                    item_id, warehouse_id, year, month, weighted_avg_cost,
                    total_quantity, total_value, opening_quantity, opening_value,
                    closing_quantity, closing_value, calculated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(item_id, warehouse_id, year, month) DO UPDATE SET
                    weighted_avg_cost = excluded.weighted_avg_cost,
                    total_quantity = excluded.total_quantity,
                    total_value = excluded.total_value,
                    opening_quantity = excluded.opening_quantity,
                    opening_value = excluded.opening_value,
                    closing_quantity = excluded.closing_quantity,
                    closing_value = excluded.closing_value,
                    calculated_at = excluded.calculated_at
                """,
                (
                    average.item_id,
                    average.warehouse_id,
                    average.year,
                    average.month,
                    dec_str(average.weighted_avg_cost),
                    dec_str(average.total_quantity),
                    dec_str(average.total_value),
                    dec_str(average.opening_quantity),
                    dec_str(average.opening_value),
                    dec_str(average.closing_quantity),
                    dec_str(average.closing_value),
                    ts_str(average.calculated_at),
                ),
            )
            cursor = await conn.execute(
                """
                SELECT id FROM monthly_weighted_averages
                WHERE item_id = ? AND warehouse_id = ? AND year = ? AND month = ?
                """,
                (average.item_id, average.warehouse_id, average.year, average.month),
            )
            row = await cursor.fetchone()
        average.id = row[0]
        logger.debug(
            "monthly_average_saved",
            item_id=average.item_id,
            warehouse_id=average.warehouse_id,
            period=f"{average.year}-{average.month:02d}",
        )
        return average

    async def list_for_month(
        self,
        year: int,
        month: int,
        item_id: str | None = None,
        warehouse_id: str | None = None,
    ) -> list[MonthlyWeightedAverage]:
        sql = "SELECT * FROM monthly_weighted_averages WHERE year = ? AND month = ?"
        params: list = [year, month]
        if item_id:
            sql += " AND item_id = ?"
            params.append(item_id)
        if warehouse_id:
            sql += " AND warehouse_id = ?"
            params.append(warehouse_id)
        sql += " ORDER BY item_id, warehouse_id"

        async with self._reading() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
        return [self._row_to_average(row) for row in rows]

    @staticmethod
    def _row_to_average(row: aiosqlite.Row) -> MonthlyWeightedAverage:
        return MonthlyWeightedAverage(
            id=row["id"],
            item_id=row["item_id"],
            warehouse_id=row["warehouse_id"],
            year=row["year"],
            month=row["month"],
            weighted_avg_cost=dec(row["weighted_avg_cost"]),
            total_quantity=dec(row["total_quantity"]),
            total_value=dec(row["total_value"]),
            opening_quantity=dec(row["opening_quantity"]),
            opening_value=dec(row["opening_value"]),
            closing_quantity=dec(row["closing_quantity"]),
            closing_value=dec(row["closing_value"]),
            calculated_at=ts(row["calculated_at"]),
        )
