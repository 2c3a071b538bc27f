"""Unit tests for catalog and document entities."""

from decimal import Decimal

from src.core.entities import (
    AdjustmentType,
    CostingMethod,
    Item,
    ItemEntry,
    Transfer,
    TransferLine,
    TransferStatus,
    Warehouse,
    Withdrawal,
    WithdrawalLine,
    WithdrawalStatus,
)


class TestCatalogEntities:
    def test_item_defaults(self):
        item = Item(id="ITM-1", item_code="BOLT-M8", description="M8 hex bolt")
        assert item.unit_of_measure == "pcs"
        assert item.costing_method is None
        assert item.reorder_level == Decimal("0")

    def test_warehouse_default_costing_method(self):
        warehouse = Warehouse(id="WH-A", name="Main")
        assert warehouse.default_costing_method == CostingMethod.WEIGHTED_AVERAGE


class TestItemEntry:
    def test_total_value_is_quantity_times_landed_cost(self):
        entry = ItemEntry(
            item_id="ITM-1",
            warehouse_id="WH-A",
            supplier_id="SUP-1",
            quantity=Decimal("100"),
            landed_cost=Decimal("10.25"),
            created_by="clerk-1",
        )
        assert entry.total_value == Decimal("1025.00")

    def test_supplied_total_value_is_recomputed(self):
        entry = ItemEntry(
            item_id="ITM-1",
            warehouse_id="WH-A",
            supplier_id="SUP-1",
            quantity=Decimal("3"),
            landed_cost=Decimal("2"),
            total_value=Decimal("999"),
            created_by="clerk-1",
        )
        assert entry.total_value == Decimal("6")


class TestTransfer:
    def test_defaults(self):
        transfer = Transfer(from_warehouse_id="WH-A", to_warehouse_id="WH-B", created_by="u")
        assert transfer.status == TransferStatus.PENDING
        assert transfer.lines == []
        assert transfer.total_value == Decimal("0")

    def test_total_value_sums_lines(self):
        transfer = Transfer(
            from_warehouse_id="WH-A",
            to_warehouse_id="WH-B",
            created_by="u",
            lines=[
                TransferLine(item_id="ITM-1", quantity=Decimal("60"), total_value=Decimal("720")),
                TransferLine(item_id="ITM-2", quantity=Decimal("1"), total_value=Decimal("5.5")),
            ],
        )
        assert transfer.total_value == Decimal("725.5")


class TestWithdrawal:
    def test_total_value_sums_lines(self):
        withdrawal = Withdrawal(
            warehouse_id="WH-A",
            requested_by="u",
            lines=[WithdrawalLine(item_id="ITM-1", quantity=Decimal("30"), total_value=Decimal("360"))],
        )
        assert withdrawal.status == WithdrawalStatus.PENDING
        assert withdrawal.total_value == Decimal("360")


class TestAdjustmentType:
    def test_values(self):
        assert AdjustmentType("PHYSICAL_COUNT") is AdjustmentType.PHYSICAL_COUNT
        assert {t.value for t in AdjustmentType} >= {"DAMAGE", "REVALUATION"}
