"""API tests for monthly weighted averages."""

from decimal import Decimal

from httpx import AsyncClient

from src.core.entities.inventory import utcnow


async def test_calculate_then_list(seeded_client: AsyncClient, post_receipt):
    await post_receipt("100", "10")
    await post_receipt("50", "16")
    now = utcnow()

    calculated = await seeded_client.post(
        "/api/cost-accounting/monthly-averages", json={"year": now.year, "month": now.month}
    )
    listed = await seeded_client.get(
        "/api/cost-accounting/monthly-averages",
        params={"year": now.year, "month": now.month, "item_id": "ITM-1"},
    )

    assert calculated.status_code == 200
    average = calculated.json()["averages"][0]
    assert Decimal(average["weighted_avg_cost"]) == Decimal("12")
    assert Decimal(average["closing_value"]) == Decimal("1800")
    assert listed.json()["averages"] == calculated.json()["averages"]


async def test_invalid_month_rejected(async_client: AsyncClient):
    response = await async_client.post(
        "/api/cost-accounting/monthly-averages", json={"year": 2024, "month": 13}
    )

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"
