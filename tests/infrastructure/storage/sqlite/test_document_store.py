"""Tests for SQLiteDocumentStore."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import aiosqlite
import pytest

from src.core.entities import (
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
from src.infrastructure.storage.sqlite.document_store import SQLiteDocumentStore


@pytest.fixture
def store(seeded_conn: aiosqlite.Connection) -> SQLiteDocumentStore:
    return SQLiteDocumentStore(seeded_conn)


class TestDocumentNumbers:
    async def test_sequence_per_prefix_and_year(self, store: SQLiteDocumentStore):
        assert await store.next_document_number("TRF", 2024) == "TRF-2024-001"
        assert await store.next_document_number("TRF", 2024) == "TRF-2024-002"
        assert await store.next_document_number("WTH", 2024) == "WTH-2024-001"
        assert await store.next_document_number("TRF", 2025) == "TRF-2025-001"

    async def test_number_widens_past_999(self, store: SQLiteDocumentStore, seeded_conn):
        await seeded_conn.execute(
            "INSERT INTO document_sequences (prefix, year, last_number) VALUES ('ADJ', 2024, 999)"
        )

        assert await store.next_document_number("ADJ", 2024) == "ADJ-2024-1000"


class TestItemEntries:
    async def test_round_trip(self, store: SQLiteDocumentStore):
        saved = await store.create_item_entry(
            ItemEntry(
                item_id="ITM-1",
                warehouse_id="WH-A",
                supplier_id="SUP-1",
                quantity=Decimal("100"),
                landed_cost=Decimal("10.25"),
                purchase_reference="PO-77",
                created_by="clerk-1",
            )
        )

        entry = await store.get_item_entry(saved.id)

        assert entry.total_value == Decimal("1025")
        assert entry.purchase_reference == "PO-77"

    async def test_missing(self, store: SQLiteDocumentStore):
        assert await store.get_item_entry(404) is None


class TestTransfers:
    async def test_transfer_with_lines(self, store: SQLiteDocumentStore):
        transfer = await store.create_transfer(
            Transfer(
                transfer_number="TRF-2024-001",
                from_warehouse_id="WH-A",
                to_warehouse_id="WH-B",
                status=TransferStatus.COMPLETED,
                created_by="clerk-1",
            )
        )
        for item_id, quantity, cost in (("ITM-1", "60", "12"), ("ITM-F", "5", "2")):
            await store.add_transfer_line(
                TransferLine(
                    transfer_id=transfer.id,
                    item_id=item_id,
                    quantity=Decimal(quantity),
                    unit_cost=Decimal(cost),
                    total_value=Decimal(quantity) * Decimal(cost),
                )
            )

        loaded = await store.get_transfer(transfer.id)

        assert loaded.status == TransferStatus.COMPLETED
        assert [line.item_id for line in loaded.lines] == ["ITM-1", "ITM-F"]
        assert loaded.total_value == Decimal("730")

    async def test_missing(self, store: SQLiteDocumentStore):
        assert await store.get_transfer(404) is None


class TestWithdrawals:
    async def test_withdrawal_with_lines(self, store: SQLiteDocumentStore):
        withdrawal = await store.create_withdrawal(
            Withdrawal(
                withdrawal_number="WTH-2024-001",
                warehouse_id="WH-A",
                purpose="Line maintenance",
                status=WithdrawalStatus.COMPLETED,
                requested_by="clerk-1",
            )
        )
        await store.add_withdrawal_line(
            WithdrawalLine(
                withdrawal_id=withdrawal.id,
                item_id="ITM-1",
                quantity=Decimal("30"),
                unit_cost=Decimal("12"),
                total_value=Decimal("360"),
            )
        )

        loaded = await store.get_withdrawal(withdrawal.id)

        assert loaded.purpose == "Line maintenance"
        assert loaded.lines[0].total_value == Decimal("360")


class TestAdjustments:
    async def test_adjustment_with_lines(self, store: SQLiteDocumentStore):
        adjustment = await store.create_adjustment(
            InventoryAdjustment(
                adjustment_number="ADJ-2024-001",
                warehouse_id="WH-A",
                adjustment_type=AdjustmentType.DAMAGE,
                reason="Water damage",
                adjusted_by="auditor-1",
            )
        )
        await store.add_adjustment_line(
            AdjustmentLine(
                adjustment_id=adjustment.id,
                item_id="ITM-1",
                system_quantity=Decimal("60"),
                actual_quantity=Decimal("55"),
                unit_cost=Decimal("12"),
                adjustment_quantity=Decimal("-5"),
                total_adjustment=Decimal("-60"),
            )
        )

        loaded = await store.get_adjustment(adjustment.id)

        assert loaded.adjustment_type == AdjustmentType.DAMAGE
        line = loaded.lines[0]
        assert line.system_quantity == Decimal("60")
        assert line.adjustment_quantity == Decimal("-5")
        assert line.total_adjustment == Decimal("-60")


async def _entry(
    store: SQLiteDocumentStore,
    item_id: str = "ITM-1",
    reference: str | None = None,
    entry_date: datetime = datetime(2024, 3, 10),
    warehouse_id: str = "WH-A",
) -> ItemEntry:
    return await store.create_item_entry(
        ItemEntry(
            item_id=item_id,
            warehouse_id=warehouse_id,
            supplier_id="SUP-1",
            quantity=Decimal("1"),
            landed_cost=Decimal("1"),
            purchase_reference=reference,
            created_by="clerk-1",
            entry_date=entry_date,
        )
    )


async def _transfer(
    store: SQLiteDocumentStore,
    number: str,
    to_warehouse_id: str = "WH-B",
    notes: str | None = None,
    status: TransferStatus = TransferStatus.COMPLETED,
) -> Transfer:
    transfer = await store.create_transfer(
        Transfer(
            transfer_number=number,
            from_warehouse_id="WH-A",
            to_warehouse_id=to_warehouse_id,
            status=status,
            notes=notes,
            created_by="clerk-1",
        )
    )
    await store.add_transfer_line(
        TransferLine(
            transfer_id=transfer.id,
            item_id="ITM-1",
            quantity=Decimal("2"),
            unit_cost=Decimal("3"),
            total_value=Decimal("6"),
        )
    )
    return transfer


class TestItemEntryListing:
    async def test_newest_first_with_paging(self, store: SQLiteDocumentStore):
        first = await _entry(store, reference="PO-1")
        second = await _entry(store, reference="PO-2")

        page = await store.list_item_entries(limit=1)
        rest = await store.list_item_entries(limit=1, offset=1)

        assert [e.id for e in page] == [second.id]
        assert [e.id for e in rest] == [first.id]

    async def test_search_matches_reference_and_item(self, store: SQLiteDocumentStore):
        await _entry(store, reference="PO-77")
        await _entry(store, item_id="ITM-F", reference="PO-88")

        by_reference = await store.list_item_entries(search="po-77")
        by_item_code = await store.list_item_entries(search="NUT")
        by_description = await store.list_item_entries(search="hex bolt")

        assert [e.purchase_reference for e in by_reference] == ["PO-77"]
        assert [e.item_id for e in by_item_code] == ["ITM-F"]
        assert [e.item_id for e in by_description] == ["ITM-1"]

    async def test_wildcards_are_literal(self, store: SQLiteDocumentStore):
        await _entry(store, reference="PO-77")

        assert await store.list_item_entries(search="%") == []

    async def test_filters(self, store: SQLiteDocumentStore):
        await _entry(store, entry_date=datetime(2024, 3, 1))
        await _entry(store, entry_date=datetime(2024, 3, 31), warehouse_id="WH-B")

        in_b = await store.list_item_entries(warehouse_id="WH-B")
        by_item = await store.list_item_entries(item_id="ITM-F")
        by_supplier = await store.list_item_entries(supplier_id="SUP-1")
        first_day = await store.list_item_entries(
            date_from=datetime(2024, 3, 1), date_to=datetime(2024, 3, 1)
        )

        assert [e.warehouse_id for e in in_b] == ["WH-B"]
        assert by_item == []
        assert len(by_supplier) == 2
        assert [e.entry_date for e in first_day] == [datetime(2024, 3, 1)]

    async def test_offset_date_bound_compared_in_utc(self, store: SQLiteDocumentStore):
        await _entry(store, entry_date=datetime(2024, 3, 1, 3, 0))

        # 10:00 at +08:00 is 02:00 UTC
        bound = datetime(2024, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=8)))

        assert len(await store.list_item_entries(date_from=bound)) == 1
        assert await store.list_item_entries(date_to=bound) == []


class TestTransferListing:
    async def test_lines_loaded_and_filters(self, store: SQLiteDocumentStore):
        await _transfer(store, "TRF-2024-001", notes="Rebalance stock")
        await _transfer(store, "TRF-2024-002", to_warehouse_id="WH-A")

        everything = await store.list_transfers()
        by_notes = await store.list_transfers(search="rebalance")
        by_number = await store.list_transfers(search="2024-002")
        into_b = await store.list_transfers(to_warehouse_id="WH-B")
        pending = await store.list_transfers(status=TransferStatus.PENDING)

        assert [t.transfer_number for t in everything] == ["TRF-2024-002", "TRF-2024-001"]
        assert all(len(t.lines) == 1 for t in everything)
        assert everything[0].total_value == Decimal("6")
        assert [t.transfer_number for t in by_notes] == ["TRF-2024-001"]
        assert [t.transfer_number for t in by_number] == ["TRF-2024-002"]
        assert [t.transfer_number for t in into_b] == ["TRF-2024-001"]
        assert pending == []


class TestWithdrawalListing:
    async def test_search_and_status(self, store: SQLiteDocumentStore):
        for number, purpose in (("WTH-2024-001", "Line maintenance"), ("WTH-2024-002", None)):
            withdrawal = await store.create_withdrawal(
                Withdrawal(
                    withdrawal_number=number,
                    warehouse_id="WH-A",
                    purpose=purpose,
                    status=WithdrawalStatus.COMPLETED,
                    requested_by="clerk-1",
                )
            )
            await store.add_withdrawal_line(
                WithdrawalLine(
                    withdrawal_id=withdrawal.id,
                    item_id="ITM-1",
                    quantity=Decimal("1"),
                    unit_cost=Decimal("12"),
                    total_value=Decimal("12"),
                )
            )

        maintenance = await store.list_withdrawals(search="MAINTENANCE")
        completed = await store.list_withdrawals(status=WithdrawalStatus.COMPLETED)
        elsewhere = await store.list_withdrawals(warehouse_id="WH-B")

        assert [w.withdrawal_number for w in maintenance] == ["WTH-2024-001"]
        assert maintenance[0].lines[0].total_value == Decimal("12")
        assert len(completed) == 2
        assert elsewhere == []


class TestAdjustmentListing:
    async def test_type_and_reason(self, store: SQLiteDocumentStore):
        for number, adjustment_type, reason in (
            ("ADJ-2024-001", AdjustmentType.DAMAGE, "Water damage"),
            ("ADJ-2024-002", AdjustmentType.PHYSICAL_COUNT, "Quarterly count"),
        ):
            await store.create_adjustment(
                InventoryAdjustment(
                    adjustment_number=number,
                    warehouse_id="WH-A",
                    adjustment_type=adjustment_type,
                    reason=reason,
                    adjusted_by="auditor-1",
                )
            )

        damage = await store.list_adjustments(adjustment_type=AdjustmentType.DAMAGE)
        quarterly = await store.list_adjustments(search="quarterly")

        assert [a.adjustment_number for a in damage] == ["ADJ-2024-001"]
        assert [a.adjustment_number for a in quarterly] == ["ADJ-2024-002"]
        assert quarterly[0].lines == []
