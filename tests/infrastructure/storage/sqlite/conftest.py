"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import aiosqlite
import pytest

from src.core.entities import Item, Supplier, Warehouse
from src.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from src.infrastructure.storage.sqlite.connection import ConnectionPool
from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> AsyncGenerator[Path, None]:
    """Create and migrate a temporary database."""
    await run_migrations(db_path=temp_db_path)
    yield temp_db_path


@pytest.fixture
async def pool(initialized_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool on the migrated database."""
    pool = ConnectionPool(initialized_db, pool_size=2, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
async def conn(pool: ConnectionPool) -> AsyncGenerator[aiosqlite.Connection, None]:
    """A pooled connection; stores bound to it run in autocommit."""
    async with pool.acquire() as conn:
        yield conn


@pytest.fixture
async def seeded_conn(
    conn: aiosqlite.Connection,
    sample_supplier: Supplier,
    sample_warehouse: Warehouse,
    sample_item: Item,
    fifo_item: Item,
) -> aiosqlite.Connection:
    """Connection with one supplier, two warehouses and two items."""
    catalog = SQLiteCatalogStore(conn)
    await catalog.create_supplier(sample_supplier)
    await catalog.create_warehouse(sample_warehouse)
    await catalog.create_warehouse(Warehouse(id="WH-B", name="Overflow Warehouse"))
    await catalog.create_item(sample_item)
    await catalog.create_item(fifo_item)
    return conn
