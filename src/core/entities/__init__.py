"""Core domain entities."""

from src.core.entities.catalog import Item, Supplier, Warehouse
from src.core.entities.documents import (
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
from src.core.entities.inventory import (
    CostingMethod,
    CostLayer,
    DocumentType,
    InventoryPosition,
    MovementLedgerEntry,
    MovementRequest,
    MovementType,
)
from src.core.entities.reporting import MonthlyWeightedAverage, ReconciliationResult

__all__ = [
    # Catalog
    "Item",
    "Supplier",
    "Warehouse",
    # Inventory
    "CostingMethod",
    "CostLayer",
    "DocumentType",
    "InventoryPosition",
    "MovementLedgerEntry",
    "MovementRequest",
    "MovementType",
    # Documents
    "ItemEntry",
    "Transfer",
    "TransferLine",
    "TransferStatus",
    "Withdrawal",
    "WithdrawalLine",
    "WithdrawalStatus",
    "InventoryAdjustment",
    "AdjustmentLine",
    "AdjustmentType",
    # Reporting
    "MonthlyWeightedAverage",
    "ReconciliationResult",
]
