"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.

Stored figures keep full precision; rounding happens here, when an
entity is turned into a response. Decimals serialize as JSON strings.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.config import get_settings
from src.core.entities import (
    InventoryAdjustment,
    InventoryPosition,
    Item,
    ItemEntry,
    MonthlyWeightedAverage,
    MovementLedgerEntry,
    ReconciliationResult,
    Supplier,
    Transfer,
    Warehouse,
    Withdrawal,
)
from src.core.entities.inventory import quantize


def round_money(value: Decimal) -> Decimal:
    return quantize(value, get_settings().inventory.money_places)


def round_cost(value: Decimal) -> Decimal:
    return quantize(value, get_settings().inventory.cost_places)


def round_qty(value: Decimal) -> Decimal:
    return quantize(value, get_settings().inventory.quantity_places)


# --- System ---


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_INVENTORY)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)

    # Backward-compatible aliases
    @property
    def error(self) -> str:
        """Alias for message (backward compat)."""
        return self.message

    @property
    def code(self) -> str:
        """Alias for error_code (backward compat)."""
        return self.error_code


class PaginatedResponse(BaseModel):
    """Base for paginated responses.

    has_more is true when another page may follow (one extra row was found).
    """

    limit: int
    offset: int
    has_more: bool


# --- Catalog ---


class SupplierResponse(BaseModel):
    """Supplier response DTO."""

    id: str
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, supplier: Supplier) -> "SupplierResponse":
        return cls(**supplier.model_dump())


class WarehouseResponse(BaseModel):
    """Warehouse response DTO."""

    id: str
    name: str
    location: str | None = None
    description: str | None = None
    default_costing_method: str
    created_at: datetime

    @classmethod
    def from_entity(cls, warehouse: Warehouse) -> "WarehouseResponse":
        return cls(
            id=warehouse.id,
            name=warehouse.name,
            location=warehouse.location,
            description=warehouse.description,
            default_costing_method=warehouse.default_costing_method.value,
            created_at=warehouse.created_at,
        )


class ItemResponse(BaseModel):
    """Catalog item response DTO."""

    id: str
    item_code: str
    description: str
    unit_of_measure: str
    costing_method: str | None = Field(
        default=None, description="Item override; null means the warehouse default applies"
    )
    standard_cost: Decimal
    reorder_level: Decimal
    supplier_id: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, item: Item) -> "ItemResponse":
        return cls(
            id=item.id,
            item_code=item.item_code,
            description=item.description,
            unit_of_measure=item.unit_of_measure,
            costing_method=item.costing_method.value if item.costing_method else None,
            standard_cost=round_cost(item.standard_cost),
            reorder_level=round_qty(item.reorder_level),
            supplier_id=item.supplier_id,
            created_at=item.created_at,
        )


class ItemListResponse(PaginatedResponse):
    items: list[ItemResponse]


class WarehouseListResponse(PaginatedResponse):
    warehouses: list[WarehouseResponse]


class SupplierListResponse(PaginatedResponse):
    suppliers: list[SupplierResponse]


# --- Inventory ---


class PositionResponse(BaseModel):
    """Inventory position response DTO."""

    item_id: str
    warehouse_id: str
    quantity: Decimal
    total_value: Decimal
    average_unit_cost: Decimal
    version: int
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, position: InventoryPosition) -> "PositionResponse":
        return cls(
            item_id=position.item_id,
            warehouse_id=position.warehouse_id,
            quantity=round_qty(position.quantity),
            total_value=round_money(position.total_value),
            average_unit_cost=round_cost(position.average_unit_cost),
            version=position.version,
            updated_at=position.updated_at,
        )


class PositionListResponse(PaginatedResponse):
    positions: list[PositionResponse]


class LedgerEntryResponse(BaseModel):
    """Movement ledger entry response DTO."""

    id: int
    item_id: str
    warehouse_id: str
    movement_type: str
    quantity: Decimal = Field(..., description="Signed quantity delta")
    unit_cost: Decimal
    total_value: Decimal = Field(..., description="Signed value delta")
    reference_type: str
    reference_id: int
    notes: str | None = None
    actor_id: str
    balance_quantity: Decimal
    balance_value: Decimal
    costing_method: str
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: MovementLedgerEntry) -> "LedgerEntryResponse":
        return cls(
            id=entry.id or 0,
            item_id=entry.item_id,
            warehouse_id=entry.warehouse_id,
            movement_type=entry.movement_type.value,
            quantity=round_qty(entry.quantity),
            unit_cost=round_cost(entry.unit_cost),
            total_value=round_money(entry.total_value),
            reference_type=entry.reference_type.value,
            reference_id=entry.reference_id,
            notes=entry.notes,
            actor_id=entry.actor_id,
            balance_quantity=round_qty(entry.balance_quantity),
            balance_value=round_money(entry.balance_value),
            costing_method=entry.costing_method.value,
            created_at=entry.created_at,
        )


class LedgerListResponse(PaginatedResponse):
    entries: list[LedgerEntryResponse]


# --- Documents ---


class ItemEntryResponse(BaseModel):
    """Item entry (receipt) response DTO."""

    id: int
    item_id: str
    warehouse_id: str
    supplier_id: str
    quantity: Decimal
    landed_cost: Decimal
    total_value: Decimal
    purchase_reference: str | None = None
    notes: str | None = None
    created_by: str
    entry_date: datetime
    created_at: datetime
    position: PositionResponse | None = Field(
        default=None, description="Receiving position after posting"
    )

    @classmethod
    def from_entity(
        cls, entry: ItemEntry, position: InventoryPosition | None = None
    ) -> "ItemEntryResponse":
        return cls(
            id=entry.id or 0,
            item_id=entry.item_id,
            warehouse_id=entry.warehouse_id,
            supplier_id=entry.supplier_id,
            quantity=round_qty(entry.quantity),
            landed_cost=round_cost(entry.landed_cost),
            total_value=round_money(entry.total_value),
            purchase_reference=entry.purchase_reference,
            notes=entry.notes,
            created_by=entry.created_by,
            entry_date=entry.entry_date,
            created_at=entry.created_at,
            position=PositionResponse.from_entity(position) if position else None,
        )


class DocumentLineResponse(BaseModel):
    """Transfer or withdrawal line response DTO."""

    id: int
    item_id: str
    quantity: Decimal
    unit_cost: Decimal
    total_value: Decimal


class TransferResponse(BaseModel):
    """Transfer response DTO."""

    id: int
    transfer_number: str
    from_warehouse_id: str
    to_warehouse_id: str
    status: str
    notes: str | None = None
    created_by: str
    transfer_date: datetime
    total_value: Decimal
    lines: list[DocumentLineResponse]
    created_at: datetime

    @classmethod
    def from_entity(cls, transfer: Transfer) -> "TransferResponse":
        return cls(
            id=transfer.id or 0,
            transfer_number=transfer.transfer_number,
            from_warehouse_id=transfer.from_warehouse_id,
            to_warehouse_id=transfer.to_warehouse_id,
            status=transfer.status.value,
            notes=transfer.notes,
            created_by=transfer.created_by,
            transfer_date=transfer.transfer_date,
            total_value=round_money(transfer.total_value),
            lines=[
                DocumentLineResponse(
                    id=line.id or 0,
                    item_id=line.item_id,
                    quantity=round_qty(line.quantity),
                    unit_cost=round_cost(line.unit_cost),
                    total_value=round_money(line.total_value),
                )
                for line in transfer.lines
            ],
            created_at=transfer.created_at,
        )


class WithdrawalResponse(BaseModel):
    """Withdrawal response DTO."""

    id: int
    withdrawal_number: str
    warehouse_id: str
    purpose: str | None = None
    status: str
    requested_by: str
    withdrawal_date: datetime
    total_value: Decimal
    lines: list[DocumentLineResponse]
    created_at: datetime

    @classmethod
    def from_entity(cls, withdrawal: Withdrawal) -> "WithdrawalResponse":
        return cls(
            id=withdrawal.id or 0,
            withdrawal_number=withdrawal.withdrawal_number,
            warehouse_id=withdrawal.warehouse_id,
            purpose=withdrawal.purpose,
            status=withdrawal.status.value,
            requested_by=withdrawal.requested_by,
            withdrawal_date=withdrawal.withdrawal_date,
            total_value=round_money(withdrawal.total_value),
            lines=[
                DocumentLineResponse(
                    id=line.id or 0,
                    item_id=line.item_id,
                    quantity=round_qty(line.quantity),
                    unit_cost=round_cost(line.unit_cost),
                    total_value=round_money(line.total_value),
                )
                for line in withdrawal.lines
            ],
            created_at=withdrawal.created_at,
        )


class AdjustmentLineResponse(BaseModel):
    """Adjustment line response DTO."""

    id: int
    item_id: str
    system_quantity: Decimal
    actual_quantity: Decimal
    unit_cost: Decimal
    adjustment_quantity: Decimal
    total_adjustment: Decimal


class AdjustmentResponse(BaseModel):
    """Inventory adjustment response DTO."""

    id: int
    adjustment_number: str
    warehouse_id: str
    adjustment_type: str
    reason: str
    notes: str | None = None
    adjusted_by: str
    adjusted_at: datetime
    lines: list[AdjustmentLineResponse]
    created_at: datetime

    @classmethod
    def from_entity(cls, adjustment: InventoryAdjustment) -> "AdjustmentResponse":
        return cls(
            id=adjustment.id or 0,
            adjustment_number=adjustment.adjustment_number,
            warehouse_id=adjustment.warehouse_id,
            adjustment_type=adjustment.adjustment_type.value,
            reason=adjustment.reason,
            notes=adjustment.notes,
            adjusted_by=adjustment.adjusted_by,
            adjusted_at=adjustment.adjusted_at,
            lines=[
                AdjustmentLineResponse(
                    id=line.id or 0,
                    item_id=line.item_id,
                    system_quantity=round_qty(line.system_quantity),
                    actual_quantity=round_qty(line.actual_quantity),
                    unit_cost=round_cost(line.unit_cost),
                    adjustment_quantity=round_qty(line.adjustment_quantity),
                    total_adjustment=round_money(line.total_adjustment),
                )
                for line in adjustment.lines
            ],
            created_at=adjustment.created_at,
        )



class ItemEntryListResponse(PaginatedResponse):
    entries: list[ItemEntryResponse]


class TransferListResponse(PaginatedResponse):
    transfers: list[TransferResponse]


class WithdrawalListResponse(PaginatedResponse):
    withdrawals: list[WithdrawalResponse]


class AdjustmentListResponse(PaginatedResponse):
    adjustments: list[AdjustmentResponse]


# --- Cost accounting ---


class ReconciliationResponse(BaseModel):
    """Ledger replay compared with the stored position."""

    item_id: str
    warehouse_id: str
    balanced: bool
    entry_count: int
    ledger_quantity: Decimal
    ledger_value: Decimal
    position_quantity: Decimal
    position_value: Decimal
    discrepancies: list[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, result: ReconciliationResult) -> "ReconciliationResponse":
        return cls(
            item_id=result.item_id,
            warehouse_id=result.warehouse_id,
            balanced=result.balanced,
            entry_count=result.entry_count,
            ledger_quantity=round_qty(result.ledger_quantity),
            ledger_value=round_money(result.ledger_value),
            position_quantity=round_qty(result.position_quantity),
            position_value=round_money(result.position_value),
            discrepancies=list(result.discrepancies),
        )


class MonthlyAverageResponse(BaseModel):
    """Month-end weighted average for one item in one warehouse."""

    item_id: str
    warehouse_id: str
    year: int
    month: int
    weighted_avg_cost: Decimal
    total_quantity: Decimal
    total_value: Decimal
    opening_quantity: Decimal
    opening_value: Decimal
    closing_quantity: Decimal
    closing_value: Decimal
    calculated_at: datetime

    @classmethod
    def from_entity(cls, average: MonthlyWeightedAverage) -> "MonthlyAverageResponse":
        return cls(
            item_id=average.item_id,
            warehouse_id=average.warehouse_id,
            year=average.year,
            month=average.month,
            weighted_avg_cost=round_cost(average.weighted_avg_cost),
            total_quantity=round_qty(average.total_quantity),
            total_value=round_money(average.total_value),
            opening_quantity=round_qty(average.opening_quantity),
            opening_value=round_money(average.opening_value),
            closing_quantity=round_qty(average.closing_quantity),
            closing_value=round_money(average.closing_value),
            calculated_at=average.calculated_at,
        )


class MonthlyAverageListResponse(BaseModel):
    year: int
    month: int
    averages: list[MonthlyAverageResponse]
