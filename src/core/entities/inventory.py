"""Inventory domain entities: positions, ledger entries and cost layers."""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, Field

ZERO = Decimal("0")


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in SQLite."""
    return datetime.now(UTC).replace(tzinfo=None)


def quantize(value: Decimal, places: int = 2) -> Decimal:
    """Round a running total for presentation only."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def average_cost(total_value: Decimal, quantity: Decimal) -> Decimal:
    """Average unit cost; zero when nothing is on hand."""
    if quantity > ZERO:
        return total_value / quantity
    return ZERO


class MovementType(str, Enum):
    """Cause of an inventory movement."""

    RECEIPT = "RECEIPT"
    TRANSFER_OUT = "TRANSFER_OUT"
    TRANSFER_IN = "TRANSFER_IN"
    WITHDRAWAL = "WITHDRAWAL"
    ADJUSTMENT = "ADJUSTMENT"

    @property
    def is_inflow(self) -> bool:
        return self in (MovementType.RECEIPT, MovementType.TRANSFER_IN)

    @property
    def is_outflow(self) -> bool:
        return self in (MovementType.TRANSFER_OUT, MovementType.WITHDRAWAL)


class CostingMethod(str, Enum):
    """Inventory valuation methods."""

    WEIGHTED_AVERAGE = "WEIGHTED_AVERAGE"
    FIFO = "FIFO"
    SPECIFIC_IDENTIFICATION = "SPECIFIC_IDENTIFICATION"


class DocumentType(str, Enum):
    """Business documents that cause movements."""

    ITEM_ENTRY = "ITEM_ENTRY"
    TRANSFER = "TRANSFER"
    WITHDRAWAL = "WITHDRAWAL"
    ADJUSTMENT = "ADJUSTMENT"


class InventoryPosition(BaseModel):
    """Current balance of one item in one warehouse."""

    id: int | None = None
    item_id: str
    warehouse_id: str
    quantity: Decimal = ZERO
    total_value: Decimal = ZERO
    average_unit_cost: Decimal = ZERO
    version: int = 0  # optimistic concurrency counter
    updated_at: datetime | None = None

    @classmethod
    def empty(cls, item_id: str, warehouse_id: str) -> "InventoryPosition":
        """Zero position for a never-touched (item, warehouse) pair."""
        return cls(item_id=item_id, warehouse_id=warehouse_id)

    @property
    def exists(self) -> bool:
        """Whether the position has been persisted."""
        return self.id is not None


class MovementLedgerEntry(BaseModel):
    """Immutable record of one inventory-affecting event."""

    id: int | None = None
    item_id: str
    warehouse_id: str
    movement_type: MovementType
    quantity: Decimal  # signed delta
    unit_cost: Decimal
    total_value: Decimal  # signed delta
    reference_type: DocumentType
    reference_id: int
    notes: str | None = None
    actor_id: str
    balance_quantity: Decimal  # snapshot after this entry
    balance_value: Decimal
    costing_method: CostingMethod
    created_at: datetime = Field(default_factory=utcnow)


class CostLayer(BaseModel):
    """A lot received at one unit cost, consumed by layered costing methods."""

    id: int | None = None
    item_id: str
    warehouse_id: str
    quantity: Decimal
    remaining_quantity: Decimal
    unit_cost: Decimal
    reference_type: DocumentType
    reference_id: int
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def remaining_value(self) -> Decimal:
        return self.remaining_quantity * self.unit_cost


class MovementRequest(BaseModel):
    """Input to the transaction coordinator for one document line."""

    item_id: str
    warehouse_id: str
    quantity: Decimal
    unit_cost: Decimal | None = None  # required for receipts, derived for outflows
    reference_type: DocumentType
    reference_id: int
    actor_id: str
    notes: str | None = None
    lot_ids: list[int] | None = None  # specific identification only
