"""Fixtures for API tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def seeded_client(
    async_client: AsyncClient, actor_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client whose catalog holds SUP-1, WH-A, WH-B, ITM-1 and FIFO item ITM-F."""
    for path, body in (
        ("/api/suppliers", {"id": "SUP-1", "name": "Acme Metals"}),
        ("/api/warehouses", {"id": "WH-A", "name": "Main Warehouse"}),
        ("/api/warehouses", {"id": "WH-B", "name": "Overflow Warehouse"}),
        (
            "/api/items",
            {
                "id": "ITM-1",
                "item_code": "BOLT-M8",
                "description": "M8 hex bolt",
                "reorder_level": "20",
                "supplier_id": "SUP-1",
            },
        ),
        (
            "/api/items",
            {
                "id": "ITM-F",
                "item_code": "NUT-M8",
                "description": "M8 nut",
                "costing_method": "FIFO",
            },
        ),
    ):
        response = await async_client.post(path, json=body, headers=actor_headers)
        assert response.status_code == 201, response.text
    yield async_client


@pytest.fixture
def post_receipt(seeded_client: AsyncClient, actor_headers: dict[str, str]):
    """POST /api/item-entries for a quantity at a landed cost."""

    async def _post(
        quantity: str, landed_cost: str, item_id: str = "ITM-1", warehouse_id: str = "WH-A"
    ):
        response = await seeded_client.post(
            "/api/item-entries",
            json={
                "item_id": item_id,
                "warehouse_id": warehouse_id,
                "supplier_id": "SUP-1",
                "quantity": quantity,
                "landed_cost": landed_cost,
            },
            headers=actor_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _post
