"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.application.services import reset_services
from src.config import get_settings, reset_settings
from src.core.entities import CostingMethod, Item, Supplier, Warehouse


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a per-test data directory and drop cached services."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ENVIRONMENT", "development")
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest_asyncio.fixture
async def migrated_db() -> AsyncGenerator[Path, None]:
    """Schema applied to the settings database; the global pool is closed afterwards."""
    from src.infrastructure.storage.sqlite import close_pool
    from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    db_path = get_settings().storage.db_path
    await run_migrations(db_path=db_path)
    yield db_path
    await close_pool()


@pytest_asyncio.fixture
async def async_client(migrated_db: Path) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the real app and a migrated temp database."""
    from src.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def actor_headers() -> dict[str, str]:
    """Headers identifying the acting user."""
    return {"X-Actor-Id": "clerk-1"}


@pytest.fixture
def sample_supplier() -> Supplier:
    return Supplier(id="SUP-1", name="Acme Metals", email="orders@acme.test")


@pytest.fixture
def sample_warehouse() -> Warehouse:
    return Warehouse(id="WH-A", name="Main Warehouse", location="Dock 1")


@pytest.fixture
def sample_item() -> Item:
    return Item(
        id="ITM-1",
        item_code="BOLT-M8",
        description="M8 hex bolt",
        unit_of_measure="pcs",
        standard_cost=Decimal("10"),
        reorder_level=Decimal("20"),
        supplier_id="SUP-1",
    )


@pytest.fixture
def fifo_item() -> Item:
    return Item(
        id="ITM-F",
        item_code="NUT-M8",
        description="M8 nut",
        costing_method=CostingMethod.FIFO,
    )
