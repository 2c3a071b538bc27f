"""
Ledger replay.

The ledger is the source of truth: replaying every entry of an
(item, warehouse) in insertion order must reproduce the stored position.
Monthly weighted averages are derived from the same entries.
"""

from collections import defaultdict
from datetime import datetime

from src.core.entities.inventory import (
    ZERO,
    InventoryPosition,
    MovementLedgerEntry,
    average_cost,
)
from src.core.entities.reporting import MonthlyWeightedAverage, ReconciliationResult


def reconcile(
    position: InventoryPosition, entries: list[MovementLedgerEntry]
) -> ReconciliationResult:
    """Compare the summed ledger deltas and the last snapshot with the position."""
    ledger_quantity = sum((entry.quantity for entry in entries), ZERO)
    ledger_value = sum((entry.total_value for entry in entries), ZERO)

    result = ReconciliationResult(
        item_id=position.item_id,
        warehouse_id=position.warehouse_id,
        entry_count=len(entries),
        ledger_quantity=ledger_quantity,
        ledger_value=ledger_value,
        position_quantity=position.quantity,
        position_value=position.total_value,
    )

    if ledger_quantity != position.quantity:
        result.discrepancies.append(
            f"quantity: ledger {ledger_quantity}, position {position.quantity}"
        )
    if ledger_value != position.total_value:
        result.discrepancies.append(
            f"value: ledger {ledger_value}, position {position.total_value}"
        )

    running_quantity = ZERO
    running_value = ZERO
    for entry in entries:
        running_quantity += entry.quantity
        running_value += entry.total_value
        if (running_quantity, running_value) != (entry.balance_quantity, entry.balance_value):
            result.discrepancies.append(
                f"entry {entry.id}: snapshot {entry.balance_quantity}/{entry.balance_value}, "
                f"replayed {running_quantity}/{running_value}"
            )
        if entry.balance_quantity < ZERO:
            result.discrepancies.append(f"entry {entry.id}: negative balance")

    return result


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """[start, end) of a calendar month."""
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def monthly_weighted_averages(
    year: int, month: int, entries: list[MovementLedgerEntry]
) -> list[MonthlyWeightedAverage]:
    """
    Month-end figures per (item, warehouse) with movements in the month.

    Opening balance is the first entry's snapshot minus its delta, closing
    balance is the last snapshot. Totals are the absolute quantity and
    value moved. The average is closing value over closing quantity.
    """
    grouped: dict[tuple[str, str], list[MovementLedgerEntry]] = defaultdict(list)
    for entry in entries:
        grouped[(entry.item_id, entry.warehouse_id)].append(entry)

    averages = []
    for (item_id, warehouse_id), group in sorted(grouped.items()):
        first, last = group[0], group[-1]
        total_quantity = sum((entry.quantity for entry in group), ZERO)
        total_value = sum((entry.total_value for entry in group), ZERO)
        averages.append(
            MonthlyWeightedAverage(
                item_id=item_id,
                warehouse_id=warehouse_id,
                year=year,
                month=month,
                weighted_avg_cost=average_cost(last.balance_value, last.balance_quantity),
                total_quantity=abs(total_quantity),
                total_value=abs(total_value),
                opening_quantity=first.balance_quantity - first.quantity,
                opening_value=first.balance_value - first.total_value,
                closing_quantity=last.balance_quantity,
                closing_value=last.balance_value,
            )
        )
    return averages
