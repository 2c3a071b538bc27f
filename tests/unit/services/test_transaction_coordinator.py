"""Tests for InventoryTransactionCoordinator with mocked stores."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.core.entities import CostingMethod, Item
from src.core.entities.inventory import (
    DocumentType,
    InventoryPosition,
    MovementRequest,
    MovementType,
    average_cost,
)
from src.core.exceptions import (
    ConcurrencyConflictError,
    InsufficientInventoryError,
    ItemNotFoundError,
    ValidationError,
    WarehouseNotFoundError,
)
from src.core.services import InventoryTransactionCoordinator


def _position(warehouse_id: str = "WH-A", quantity: str = "0", value: str = "0", version: int = 0):
    q, v = Decimal(quantity), Decimal(value)
    return InventoryPosition(
        id=1 if version else None,
        item_id="ITM-1",
        warehouse_id=warehouse_id,
        quantity=q,
        total_value=v,
        average_unit_cost=average_cost(v, q),
        version=version,
    )


def _receipt(quantity: str = "100", unit_cost: str | None = "10") -> MovementRequest:
    return MovementRequest(
        item_id="ITM-1",
        warehouse_id="WH-A",
        quantity=Decimal(quantity),
        unit_cost=Decimal(unit_cost) if unit_cost is not None else None,
        reference_type=DocumentType.ITEM_ENTRY,
        reference_id=1,
        actor_id="clerk-1",
    )


@pytest.fixture
def uow(fake_uow):
    return fake_uow


@pytest.fixture
def coordinator(uow) -> InventoryTransactionCoordinator:
    return InventoryTransactionCoordinator(
        uow_factory=lambda: uow, max_retries=2, retry_delay=0.0
    )


class TestRun:
    async def test_returns_work_result(self, coordinator, uow):
        async def work(u):
            return "done"

        assert await coordinator.run("test", work) == "done"
        assert uow.exits == [None]

    async def test_retries_on_conflict(self, coordinator, uow):
        calls = []

        async def work(u):
            calls.append(1)
            if len(calls) < 3:
                raise ConcurrencyConflictError("position ITM-1/WH-A", "stale")
            return "ok"

        assert await coordinator.run("test", work) == "ok"
        assert len(calls) == 3
        assert uow.exits == [ConcurrencyConflictError, ConcurrencyConflictError, None]

    async def test_gives_up_after_max_retries(self, coordinator):
        work = AsyncMock(side_effect=ConcurrencyConflictError("position", "stale"))
        with pytest.raises(ConcurrencyConflictError):
            await coordinator.run("test", work)
        assert work.await_count == 3

    async def test_business_errors_are_not_retried(self, coordinator):
        work = AsyncMock(
            side_effect=InsufficientInventoryError("ITM-1", "WH-A", Decimal("1"), Decimal("2"))
        )
        with pytest.raises(InsufficientInventoryError):
            await coordinator.run("test", work)
        assert work.await_count == 1


class TestPostReceipt:
    async def test_first_receipt_inserts_position(self, coordinator, uow):
        uow.positions.get_position.return_value = _position()

        posted = await coordinator.post_receipt(uow, _receipt())

        entry = uow.ledger.append.call_args[0][0]
        assert entry.movement_type == MovementType.RECEIPT
        assert entry.quantity == Decimal("100")
        assert entry.total_value == Decimal("1000")
        assert entry.balance_quantity == Decimal("100")
        assert entry.costing_method == CostingMethod.WEIGHTED_AVERAGE
        assert uow.positions.upsert_position.call_args.kwargs["expected_version"] == 0
        assert posted.after.quantity == Decimal("100")
        assert posted.before.quantity == Decimal("0")
        uow.layers.add_layer.assert_not_called()

    async def test_layered_receipt_records_lot(self, coordinator, uow):
        uow.catalog.get_item.side_effect = None
        uow.catalog.get_item.return_value = Item(
            id="ITM-1", item_code="BOLT", description="Bolt", costing_method=CostingMethod.FIFO
        )
        uow.positions.get_position.return_value = _position()

        await coordinator.post_receipt(uow, _receipt("40", "2.5"))

        lot = uow.layers.add_layer.call_args[0][0]
        assert lot.quantity == Decimal("40")
        assert lot.unit_cost == Decimal("2.5")

    async def test_unit_cost_required(self, coordinator, uow):
        with pytest.raises(ValidationError):
            await coordinator.post_receipt(uow, _receipt(unit_cost=None))

    async def test_unknown_item(self, coordinator, uow):
        uow.catalog.get_item.side_effect = None
        uow.catalog.get_item.return_value = None
        with pytest.raises(ItemNotFoundError):
            await coordinator.post_receipt(uow, _receipt())
        uow.ledger.append.assert_not_called()

    async def test_unknown_warehouse(self, coordinator, uow):
        uow.catalog.get_warehouse.side_effect = None
        uow.catalog.get_warehouse.return_value = None
        with pytest.raises(WarehouseNotFoundError):
            await coordinator.post_receipt(uow, _receipt())


class TestPostOutflow:
    async def test_insufficient_stock_writes_nothing(self, coordinator, uow):
        uow.positions.get_position.return_value = _position(quantity="10", value="100", version=1)
        request = _receipt("15", None)

        with pytest.raises(InsufficientInventoryError):
            await coordinator.post_outflow(uow, request)
        uow.ledger.append.assert_not_called()
        uow.positions.upsert_position.assert_not_called()

    async def test_withdrawal_at_average_cost(self, coordinator, uow):
        uow.positions.get_position.return_value = _position(quantity="90", value="1080", version=3)

        posted = await coordinator.post_outflow(uow, _receipt("30", None))

        assert posted.entry.movement_type == MovementType.WITHDRAWAL
        assert posted.entry.quantity == Decimal("-30")
        assert posted.entry.total_value == Decimal("-360")
        assert uow.positions.upsert_position.call_args.kwargs["expected_version"] == 3


class TestPostTransferLine:
    async def test_same_warehouse_rejected(self, coordinator, uow):
        with pytest.raises(ValidationError, match="must be different"):
            await coordinator.post_transfer_line(
                uow, "ITM-1", "WH-A", "WH-A", Decimal("1"), reference_id=1, actor_id="u"
            )

    async def test_value_moves_with_stock(self, coordinator, uow):
        positions = {
            "WH-A": _position("WH-A", quantity="150", value="1800", version=2),
            "WH-B": _position("WH-B"),
        }
        uow.positions.get_position.side_effect = lambda item_id, wid: positions[wid]

        outgoing, incoming = await coordinator.post_transfer_line(
            uow, "ITM-1", "WH-A", "WH-B", Decimal("60"), reference_id=7, actor_id="u"
        )

        assert outgoing.entry.movement_type == MovementType.TRANSFER_OUT
        assert incoming.entry.movement_type == MovementType.TRANSFER_IN
        assert outgoing.entry.total_value == Decimal("-720")
        assert incoming.entry.total_value == Decimal("720")
        assert incoming.entry.unit_cost == Decimal("12")
        assert outgoing.entry.reference_type == DocumentType.TRANSFER
        assert incoming.entry.reference_id == 7


class TestPostAdjustment:
    async def test_negative_count_rejected(self, coordinator, uow):
        with pytest.raises(ValidationError):
            await coordinator.post_adjustment(
                uow, "ITM-1", "WH-A", Decimal("-1"), None, reference_id=1, actor_id="u"
            )

    async def test_defaults_to_current_average(self, coordinator, uow):
        uow.positions.get_position.return_value = _position(quantity="100", value="1000", version=1)

        posted = await coordinator.post_adjustment(
            uow, "ITM-1", "WH-A", Decimal("90"), None, reference_id=1, actor_id="u"
        )

        assert posted.entry.movement_type == MovementType.ADJUSTMENT
        assert posted.entry.quantity == Decimal("-10")
        assert posted.entry.total_value == Decimal("-100")
        assert posted.entry.unit_cost == Decimal("10")

    async def test_matching_count_still_writes_entry(self, coordinator, uow):
        uow.positions.get_position.return_value = _position(quantity="100", value="1000", version=1)

        posted = await coordinator.post_adjustment(
            uow, "ITM-1", "WH-A", Decimal("100"), None, reference_id=1, actor_id="u"
        )

        uow.ledger.append.assert_awaited_once()
        assert posted.entry.quantity == Decimal("0")
