"""Business documents that cause inventory movements."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from src.core.entities.inventory import ZERO, utcnow


class TransferStatus(str, Enum):
    PENDING = "PENDING"
    IN_TRANSIT = "IN_TRANSIT"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class WithdrawalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class AdjustmentType(str, Enum):
    PHYSICAL_COUNT = "PHYSICAL_COUNT"
    DAMAGE = "DAMAGE"
    SHRINKAGE = "SHRINKAGE"
    FOUND = "FOUND"
    CORRECTION = "CORRECTION"
    REVALUATION = "REVALUATION"


class ItemEntry(BaseModel):
    """Receipt of purchased stock into a warehouse."""

    id: int | None = None
    item_id: str
    warehouse_id: str
    supplier_id: str
    quantity: Decimal
    landed_cost: Decimal
    total_value: Decimal = ZERO
    purchase_reference: str | None = None
    notes: str | None = None
    created_by: str
    entry_date: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def compute_total(self) -> "ItemEntry":
        """total_value = quantity * landed_cost."""
        self.total_value = self.quantity * self.landed_cost
        return self


class TransferLine(BaseModel):
    """One item moved between warehouses."""

    id: int | None = None
    transfer_id: int | None = None
    item_id: str
    quantity: Decimal
    unit_cost: Decimal = ZERO  # source cost actually moved
    total_value: Decimal = ZERO


class Transfer(BaseModel):
    """Inter-warehouse transfer."""

    id: int | None = None
    transfer_number: str = ""
    from_warehouse_id: str
    to_warehouse_id: str
    status: TransferStatus = TransferStatus.PENDING
    notes: str | None = None
    created_by: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    transfer_date: datetime = Field(default_factory=utcnow)
    lines: list[TransferLine] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def total_value(self) -> Decimal:
        return sum((line.total_value for line in self.lines), ZERO)


class WithdrawalLine(BaseModel):
    """One item issued out of a warehouse."""

    id: int | None = None
    withdrawal_id: int | None = None
    item_id: str
    quantity: Decimal
    unit_cost: Decimal = ZERO
    total_value: Decimal = ZERO


class Withdrawal(BaseModel):
    """Material withdrawal from a warehouse."""

    id: int | None = None
    withdrawal_number: str = ""
    warehouse_id: str
    purpose: str | None = None
    status: WithdrawalStatus = WithdrawalStatus.PENDING
    requested_by: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    withdrawal_date: datetime = Field(default_factory=utcnow)
    lines: list[WithdrawalLine] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def total_value(self) -> Decimal:
        return sum((line.total_value for line in self.lines), ZERO)


class AdjustmentLine(BaseModel):
    """Restatement of one item to a counted quantity and unit cost."""

    id: int | None = None
    adjustment_id: int | None = None
    item_id: str
    system_quantity: Decimal = ZERO
    actual_quantity: Decimal
    unit_cost: Decimal = ZERO
    adjustment_quantity: Decimal = ZERO
    total_adjustment: Decimal = ZERO  # signed value delta


class InventoryAdjustment(BaseModel):
    """Stock count or revaluation of a warehouse."""

    id: int | None = None
    adjustment_number: str = ""
    warehouse_id: str
    adjustment_type: AdjustmentType
    reason: str
    notes: str | None = None
    adjusted_by: str
    adjusted_at: datetime = Field(default_factory=utcnow)
    lines: list[AdjustmentLine] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
