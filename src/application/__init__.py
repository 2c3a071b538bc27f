"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that run each document in one unit of work
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from src.application.services import (
    get_costing_engine,
    get_transaction_coordinator,
    reset_services,
)
from src.application.use_cases import (
    CalculateMonthlyAveragesUseCase,
    CreateAdjustmentUseCase,
    CreateItemEntryUseCase,
    CreateTransferUseCase,
    CreateWithdrawalUseCase,
    ManageCatalogUseCase,
    QueryInventoryUseCase,
    ReconcilePositionUseCase,
)

__all__ = [
    # Use Cases
    "CreateItemEntryUseCase",
    "CreateTransferUseCase",
    "CreateWithdrawalUseCase",
    "CreateAdjustmentUseCase",
    "ReconcilePositionUseCase",
    "CalculateMonthlyAveragesUseCase",
    "ManageCatalogUseCase",
    "QueryInventoryUseCase",
    # Service factories
    "get_costing_engine",
    "get_transaction_coordinator",
    "reset_services",
]
