"""
Dependency injection container for FastAPI.

Provides use case instances and request context to route handlers.
"""

from functools import lru_cache

from fastapi import Header

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
from src.config import Settings, get_settings
from src.core.exceptions import ValidationError


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Request context
def get_actor_id(x_actor_id: str | None = Header(default=None)) -> str:
    """
    Actor recorded on every document and ledger entry.

    Raises:
        ValidationError: If the X-Actor-Id header is missing or blank.
    """
    if x_actor_id is None or not x_actor_id.strip():
        raise ValidationError("X-Actor-Id", "X-Actor-Id header is required for writes")
    return x_actor_id.strip()


# Catalog dependencies
def get_catalog_use_case() -> ManageCatalogUseCase:
    """Get catalog use case."""
    return ManageCatalogUseCase()


# Document use case dependencies
def get_create_item_entry_use_case() -> CreateItemEntryUseCase:
    """Get create item entry use case."""
    return CreateItemEntryUseCase()


def get_create_transfer_use_case() -> CreateTransferUseCase:
    """Get create transfer use case."""
    return CreateTransferUseCase()


def get_create_withdrawal_use_case() -> CreateWithdrawalUseCase:
    """Get create withdrawal use case."""
    return CreateWithdrawalUseCase()


def get_create_adjustment_use_case() -> CreateAdjustmentUseCase:
    """Get create adjustment use case."""
    return CreateAdjustmentUseCase()


# Read path dependencies
def get_query_inventory_use_case() -> QueryInventoryUseCase:
    """Get inventory query use case."""
    return QueryInventoryUseCase()


def get_reconcile_position_use_case() -> ReconcilePositionUseCase:
    """Get reconcile position use case."""
    return ReconcilePositionUseCase()


# Cost accounting dependencies
def get_monthly_averages_use_case() -> CalculateMonthlyAveragesUseCase:
    """Get monthly averages use case."""
    return CalculateMonthlyAveragesUseCase()
