"""Tests for ledger replay and monthly weighted averages."""

from datetime import datetime
from decimal import Decimal

import pytest

from src.core.entities.inventory import (
    CostingMethod,
    DocumentType,
    InventoryPosition,
    MovementLedgerEntry,
    MovementType,
)
from src.core.services.reconciliation import month_bounds, monthly_weighted_averages, reconcile


def _entry(
    entry_id: int,
    movement_type: MovementType,
    quantity: str,
    value: str,
    balance_quantity: str,
    balance_value: str,
    item_id: str = "ITM-1",
    warehouse_id: str = "WH-A",
) -> MovementLedgerEntry:
    q, v = Decimal(quantity), Decimal(value)
    return MovementLedgerEntry(
        id=entry_id,
        item_id=item_id,
        warehouse_id=warehouse_id,
        movement_type=movement_type,
        quantity=q,
        unit_cost=abs(v / q) if q else Decimal("0"),
        total_value=v,
        reference_type=DocumentType.ITEM_ENTRY,
        reference_id=entry_id,
        actor_id="clerk-1",
        balance_quantity=Decimal(balance_quantity),
        balance_value=Decimal(balance_value),
        costing_method=CostingMethod.WEIGHTED_AVERAGE,
        created_at=datetime(2024, 3, entry_id),
    )


@pytest.fixture
def scenario_entries() -> list[MovementLedgerEntry]:
    """Receive 100@10, receive 50@16, issue 60, withdraw 30."""
    return [
        _entry(1, MovementType.RECEIPT, "100", "1000", "100", "1000"),
        _entry(2, MovementType.RECEIPT, "50", "800", "150", "1800"),
        _entry(3, MovementType.TRANSFER_OUT, "-60", "-720", "90", "1080"),
        _entry(4, MovementType.WITHDRAWAL, "-30", "-360", "60", "720"),
    ]


def _position(quantity: str, value: str) -> InventoryPosition:
    return InventoryPosition(
        id=1,
        item_id="ITM-1",
        warehouse_id="WH-A",
        quantity=Decimal(quantity),
        total_value=Decimal(value),
        version=4,
    )


class TestReconcile:
    def test_balanced(self, scenario_entries):
        result = reconcile(_position("60", "720"), scenario_entries)
        assert result.balanced
        assert result.entry_count == 4
        assert result.ledger_quantity == Decimal("60")
        assert result.ledger_value == Decimal("720")

    def test_position_drift(self, scenario_entries):
        result = reconcile(_position("61", "720"), scenario_entries)
        assert not result.balanced
        assert result.discrepancies == ["quantity: ledger 60, position 61"]

    def test_broken_snapshot(self, scenario_entries):
        scenario_entries[2] = _entry(3, MovementType.TRANSFER_OUT, "-60", "-720", "95", "1080")
        result = reconcile(_position("60", "720"), scenario_entries)
        assert not result.balanced
        assert any(d.startswith("entry 3: snapshot") for d in result.discrepancies)

    def test_negative_balance_is_reported(self):
        entries = [_entry(1, MovementType.ADJUSTMENT, "-5", "0", "-5", "0")]
        result = reconcile(_position("-5", "0"), entries)
        assert "entry 1: negative balance" in result.discrepancies

    def test_no_entries_and_empty_position(self):
        result = reconcile(InventoryPosition.empty("ITM-1", "WH-A"), [])
        assert result.balanced
        assert result.entry_count == 0


class TestMonthBounds:
    def test_regular_month(self):
        assert month_bounds(2024, 3) == (datetime(2024, 3, 1), datetime(2024, 4, 1))

    def test_december_rolls_over(self):
        assert month_bounds(2024, 12) == (datetime(2024, 12, 1), datetime(2025, 1, 1))


class TestMonthlyWeightedAverages:
    def test_single_position(self, scenario_entries):
        averages = monthly_weighted_averages(2024, 3, scenario_entries)

        assert len(averages) == 1
        average = averages[0]
        assert (average.year, average.month) == (2024, 3)
        assert average.opening_quantity == Decimal("0")
        assert average.opening_value == Decimal("0")
        assert average.closing_quantity == Decimal("60")
        assert average.closing_value == Decimal("720")
        assert average.weighted_avg_cost == Decimal("12")
        assert average.total_quantity == Decimal("60")
        assert average.total_value == Decimal("720")

    def test_opening_balance_from_earlier_months(self, scenario_entries):
        averages = monthly_weighted_averages(2024, 3, scenario_entries[2:])
        assert averages[0].opening_quantity == Decimal("150")
        assert averages[0].opening_value == Decimal("1800")

    def test_grouped_per_position_and_sorted(self, scenario_entries):
        other = _entry(5, MovementType.RECEIPT, "10", "50", "10", "50", warehouse_id="WH-0")
        averages = monthly_weighted_averages(2024, 3, [*scenario_entries, other])
        assert [(a.item_id, a.warehouse_id) for a in averages] == [
            ("ITM-1", "WH-0"),
            ("ITM-1", "WH-A"),
        ]
        assert averages[0].weighted_avg_cost == Decimal("5")

    def test_no_entries(self):
        assert monthly_weighted_averages(2024, 3, []) == []
