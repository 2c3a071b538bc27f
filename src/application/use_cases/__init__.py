"""Application use cases."""

from src.application.use_cases.calculate_monthly_averages import CalculateMonthlyAveragesUseCase
from src.application.use_cases.create_adjustment import (
    CreateAdjustmentResult,
    CreateAdjustmentUseCase,
)
from src.application.use_cases.create_item_entry import (
    CreateItemEntryResult,
    CreateItemEntryUseCase,
)
from src.application.use_cases.create_transfer import CreateTransferResult, CreateTransferUseCase
from src.application.use_cases.create_withdrawal import (
    CreateWithdrawalResult,
    CreateWithdrawalUseCase,
)
from src.application.use_cases.manage_catalog import ManageCatalogUseCase
from src.application.use_cases.query_inventory import QueryInventoryUseCase
from src.application.use_cases.reconcile_position import ReconcilePositionUseCase

__all__ = [
    "CreateItemEntryUseCase",
    "CreateItemEntryResult",
    "CreateTransferUseCase",
    "CreateTransferResult",
    "CreateWithdrawalUseCase",
    "CreateWithdrawalResult",
    "CreateAdjustmentUseCase",
    "CreateAdjustmentResult",
    "ReconcilePositionUseCase",
    "CalculateMonthlyAveragesUseCase",
    "ManageCatalogUseCase",
    "QueryInventoryUseCase",
]
