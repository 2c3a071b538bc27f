"""Unit tests for SQLite connection pool."""

import sqlite3
from pathlib import Path

import pytest

from src.core.exceptions import ConcurrencyConflictError, DatabaseError
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    translate_error,
)


async def _insert_supplier(conn, supplier_id: str, name: str) -> None:
    await conn.execute(
        "INSERT INTO suppliers (id, name, created_at) VALUES (?, ?, ?)",
        (supplier_id, name, "2024-01-01T00:00:00"),
    )


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool.initialized is False

    async def test_initialize_opens_connections(self, temp_db_path: Path):
        """initialize() opens pool_size connections and creates the directory."""
        nested = temp_db_path.parent / "nested" / "pool.db"
        pool = ConnectionPool(nested, pool_size=3)

        await pool.initialize()
        try:
            assert pool.initialized
            assert len(pool._connections) == 3
            assert nested.parent.exists()
        finally:
            await pool.close()
        assert pool.initialized is False

    async def test_initialize_is_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.initialize()
        try:
            assert len(pool._connections) == 2
        finally:
            await pool.close()

    async def test_connection_pragmas(self, pool: ConnectionPool):
        """Connections run with WAL and foreign keys on."""
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 5000


class TestTransaction:
    """Tests for ConnectionPool.transaction()."""

    async def test_commits_on_success(self, pool: ConnectionPool):
        async with pool.transaction() as conn:
            await _insert_supplier(conn, "SUP-T", "Tx Supplier")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT name FROM suppliers WHERE id = 'SUP-T'")
            assert (await cursor.fetchone())[0] == "Tx Supplier"

    async def test_rolls_back_on_exception(self, pool: ConnectionPool):
        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await _insert_supplier(conn, "SUP-R", "Rolled Back")
                raise RuntimeError("boom")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM suppliers WHERE id = 'SUP-R'")
            assert (await cursor.fetchone())[0] == 0

    async def test_sqlite_errors_are_translated(self, pool: ConnectionPool):
        """A constraint failure surfaces as DatabaseError and rolls back."""
        with pytest.raises(DatabaseError):
            async with pool.transaction() as conn:
                await _insert_supplier(conn, "SUP-D", "Dup")
                await _insert_supplier(conn, "SUP-E", "Dup")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM suppliers WHERE name = 'Dup'")
            assert (await cursor.fetchone())[0] == 0

    async def test_connection_returned_to_pool(self, pool: ConnectionPool):
        with pytest.raises(RuntimeError):
            async with pool.transaction():
                raise RuntimeError("boom")

        assert pool._pool.qsize() == pool.pool_size


class TestTranslateError:
    def test_locked_database_is_a_conflict(self):
        error = translate_error("write", sqlite3.OperationalError("database is locked"))
        assert isinstance(error, ConcurrencyConflictError)

    def test_other_errors_are_database_errors(self):
        error = translate_error("write", sqlite3.IntegrityError("NOT NULL constraint failed"))
        assert isinstance(error, DatabaseError)
        assert error.details["operation"] == "write"


class TestGlobalPool:
    """Tests for the module-level pool helpers."""

    async def test_get_pool_uses_settings(self, migrated_db: Path):
        pool = await get_pool()
        assert pool.db_path == migrated_db
        assert await get_pool() is pool

    async def test_get_connection_and_transaction(self, migrated_db: Path):
        async with get_transaction() as conn:
            await _insert_supplier(conn, "SUP-G", "Global")

        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM suppliers WHERE id = 'SUP-G'")
            assert (await cursor.fetchone())[0] == 1

    async def test_close_pool_resets(self, migrated_db: Path):
        first = await get_pool()
        await close_pool()

        assert first.initialized is False
        assert await get_pool() is not first
