"""Tests for CalculateMonthlyAveragesUseCase."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import CalculateMonthlyAveragesRequest
from src.application.use_cases.calculate_monthly_averages import CalculateMonthlyAveragesUseCase
from src.core.entities.inventory import (
    CostingMethod,
    DocumentType,
    MovementLedgerEntry,
    MovementType,
)


def _entry(entry_id, movement_type, quantity, value, balance_quantity, balance_value, day):
    q = Decimal(quantity)
    v = Decimal(value)
    return MovementLedgerEntry(
        id=entry_id,
        item_id="ITM-1",
        warehouse_id="WH-A",
        movement_type=movement_type,
        quantity=q,
        unit_cost=abs(v / q),
        total_value=v,
        reference_type=DocumentType.ITEM_ENTRY,
        reference_id=entry_id,
        actor_id="clerk-1",
        balance_quantity=Decimal(balance_quantity),
        balance_value=Decimal(balance_value),
        costing_method=CostingMethod.WEIGHTED_AVERAGE,
        created_at=datetime(2024, 3, day, 9, 0),
    )


async def _assign_id(average):
    average.id = 1
    return average


@pytest.fixture
def ledger() -> AsyncMock:
    ledger = AsyncMock()
    ledger.list_between.return_value = [
        _entry(1, MovementType.RECEIPT, "100", "1000", "100", "1000", 4),
        _entry(2, MovementType.RECEIPT, "50", "800", "150", "1800", 11),
        _entry(3, MovementType.WITHDRAWAL, "-60", "-720", "90", "1080", 20),
    ]
    return ledger


@pytest.fixture
def average_store() -> AsyncMock:
    store = AsyncMock()
    store.save.side_effect = _assign_id
    return store


@pytest.fixture
def use_case(ledger, average_store) -> CalculateMonthlyAveragesUseCase:
    return CalculateMonthlyAveragesUseCase(ledger=ledger, average_store=average_store)


class TestCalculateMonthlyAverages:
    async def test_reads_month_window(self, use_case, ledger):
        await use_case.execute(CalculateMonthlyAveragesRequest(year=2024, month=3))

        start, end = ledger.list_between.call_args[0]
        assert start == datetime(2024, 3, 1)
        assert end == datetime(2024, 4, 1)

    async def test_saves_closing_average(self, use_case, average_store):
        saved = await use_case.execute(CalculateMonthlyAveragesRequest(year=2024, month=3))

        assert len(saved) == 1
        average = saved[0]
        assert average.id == 1
        assert average.weighted_avg_cost == Decimal("12")
        assert average.closing_quantity == Decimal("90")
        assert average.opening_quantity == Decimal("0")
        average_store.save.assert_awaited_once()

    async def test_quiet_month_saves_nothing(self, use_case, ledger, average_store):
        ledger.list_between.return_value = []

        saved = await use_case.execute(CalculateMonthlyAveragesRequest(year=2024, month=2))

        assert saved == []
        average_store.save.assert_not_called()

    async def test_to_response(self, use_case):
        saved = await use_case.execute(CalculateMonthlyAveragesRequest(year=2024, month=3))

        response = use_case.to_response(2024, 3, saved)

        assert response.year == 2024
        assert response.averages[0].weighted_avg_cost == Decimal("12.0000")
        assert response.averages[0].closing_value == Decimal("1080.00")
