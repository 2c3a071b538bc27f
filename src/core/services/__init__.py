"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.costing import (
    CostingEngine,
    CostingResult,
    CostingStrategy,
    FifoStrategy,
    LotConsumption,
    SpecificIdentificationStrategy,
    WeightedAverageStrategy,
)
from src.core.services.reconciliation import (
    month_bounds,
    monthly_weighted_averages,
    reconcile,
)
from src.core.services.transaction_coordinator import (
    InventoryTransactionCoordinator,
    PostedMovement,
    UnitOfWorkFactory,
)

__all__ = [
    # Costing
    "CostingEngine",
    "CostingResult",
    "CostingStrategy",
    "LotConsumption",
    "WeightedAverageStrategy",
    "FifoStrategy",
    "SpecificIdentificationStrategy",
    # Transactions
    "InventoryTransactionCoordinator",
    "PostedMovement",
    "UnitOfWorkFactory",
    # Ledger replay
    "reconcile",
    "month_bounds",
    "monthly_weighted_averages",
]
