"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
Quantities and money are Decimal; JSON numbers and numeric strings are both accepted.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.core.entities.documents import AdjustmentType
from src.core.entities.inventory import CostingMethod

# --- Catalog ---


class CreateSupplierRequest(BaseModel):
    """Request to register a supplier."""

    id: str | None = Field(default=None, description="Supplier ID (generated when omitted)")
    name: str = Field(..., min_length=1, description="Unique supplier name")
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class CreateWarehouseRequest(BaseModel):
    """Request to register a warehouse."""

    id: str | None = Field(default=None, description="Warehouse ID (generated when omitted)")
    name: str = Field(..., min_length=1, description="Unique warehouse name")
    location: str | None = None
    description: str | None = None
    default_costing_method: CostingMethod | None = Field(
        default=None,
        description="Costing method for items without their own (defaults to settings)",
    )


class CreateItemRequest(BaseModel):
    """Request to register a catalog item."""

    id: str | None = Field(default=None, description="Item ID (generated when omitted)")
    item_code: str = Field(..., min_length=1, description="Unique item code", examples=["ITM-0001"])
    description: str = Field(..., min_length=1)
    unit_of_measure: str = Field(default="pcs", examples=["pcs", "kg", "m"])
    costing_method: CostingMethod | None = Field(
        default=None, description="Overrides the warehouse default costing method"
    )
    standard_cost: Decimal = Field(default=Decimal("0"), ge=0)
    reorder_level: Decimal = Field(
        default=Decimal("0"), ge=0, description="Low-stock threshold"
    )
    supplier_id: str | None = None


# --- Documents ---


def _check_unique_lots(value: list[int] | None) -> list[int] | None:
    if value is not None and len(set(value)) != len(value):
        raise ValueError("each lot may be selected only once")
    return value


class CreateItemEntryRequest(BaseModel):
    """Request to receive purchased stock into a warehouse."""

    item_id: str = Field(..., description="Item received")
    warehouse_id: str = Field(..., description="Receiving warehouse")
    supplier_id: str = Field(..., description="Supplier the stock came from")
    quantity: Decimal = Field(..., gt=0, description="Quantity received")
    landed_cost: Decimal = Field(..., gt=0, description="Landed cost per unit")
    purchase_reference: str | None = Field(default=None, description="PO or invoice reference")
    notes: str | None = None
    entry_date: datetime | None = Field(default=None, description="Defaults to now")


class TransferLineRequest(BaseModel):
    """One item to move."""

    item_id: str
    quantity: Decimal = Field(..., gt=0)
    lot_ids: list[int] | None = Field(
        default=None, description="Lots to consume (specific identification only)"
    )

    @field_validator("lot_ids")
    @classmethod
    def unique_lots(cls, v: list[int] | None) -> list[int] | None:
        return _check_unique_lots(v)


class CreateTransferRequest(BaseModel):
    """Request to move stock between warehouses."""

    from_warehouse_id: str
    to_warehouse_id: str
    lines: list[TransferLineRequest] = Field(..., min_length=1)
    notes: str | None = None
    transfer_date: datetime | None = Field(default=None, description="Defaults to now")


class WithdrawalLineRequest(BaseModel):
    """One item to issue."""

    item_id: str
    quantity: Decimal = Field(..., gt=0)
    lot_ids: list[int] | None = Field(
        default=None, description="Lots to consume (specific identification only)"
    )

    @field_validator("lot_ids")
    @classmethod
    def unique_lots(cls, v: list[int] | None) -> list[int] | None:
        return _check_unique_lots(v)


class CreateWithdrawalRequest(BaseModel):
    """Request to withdraw materials from a warehouse."""

    warehouse_id: str
    purpose: str | None = Field(default=None, examples=["Maintenance job #42"])
    lines: list[WithdrawalLineRequest] = Field(..., min_length=1)
    withdrawal_date: datetime | None = Field(default=None, description="Defaults to now")


class AdjustmentLineRequest(BaseModel):
    """Counted quantity for one item."""

    item_id: str
    actual_quantity: Decimal = Field(..., ge=0, description="Quantity physically on hand")
    unit_cost: Decimal | None = Field(
        default=None, ge=0, description="Restated unit cost (defaults to current average)"
    )


class CreateAdjustmentRequest(BaseModel):
    """Request to restate positions after a count or revaluation."""

    warehouse_id: str
    adjustment_type: AdjustmentType
    reason: str = Field(..., min_length=1)
    notes: str | None = None
    lines: list[AdjustmentLineRequest] = Field(..., min_length=1)


# --- Cost accounting ---


class CalculateMonthlyAveragesRequest(BaseModel):
    """Request to compute month-end weighted averages."""

    year: int = Field(..., ge=2000, le=9999)
    month: int = Field(..., ge=1, le=12)
