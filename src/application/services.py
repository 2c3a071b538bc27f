"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from src.config import get_settings
from src.core.entities.inventory import CostingMethod
from src.core.services import (
    CostingEngine,
    InventoryTransactionCoordinator,
    UnitOfWorkFactory,
)

# Singleton service instances
_costing_engine: CostingEngine | None = None
_transaction_coordinator: InventoryTransactionCoordinator | None = None


def get_costing_engine() -> CostingEngine:
    """
    Get or create the CostingEngine.

    The engine default method comes from INVENTORY_DEFAULT_COSTING_METHOD
    and applies when neither item nor warehouse names one.
    """
    global _costing_engine

    if _costing_engine is None:
        settings = get_settings()
        _costing_engine = CostingEngine(
            default_method=CostingMethod(settings.inventory.default_costing_method)
        )
    return _costing_engine


def get_transaction_coordinator(
    uow_factory: UnitOfWorkFactory | None = None,
) -> InventoryTransactionCoordinator:
    """
    Get or create the InventoryTransactionCoordinator.

    Args:
        uow_factory: Optional unit of work factory override (tests)

    Returns:
        Coordinator configured with retry settings
    """
    global _transaction_coordinator

    if _transaction_coordinator is not None and uow_factory is None:
        return _transaction_coordinator

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import create_unit_of_work

    settings = get_settings()
    coordinator = InventoryTransactionCoordinator(
        uow_factory=uow_factory or create_unit_of_work,
        engine=get_costing_engine(),
        max_retries=settings.inventory.max_conflict_retries,
        retry_delay=settings.inventory.retry_delay,
        retry_multiplier=settings.inventory.retry_multiplier,
    )

    if uow_factory is None:
        _transaction_coordinator = coordinator

    return coordinator


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _costing_engine
    global _transaction_coordinator

    _costing_engine = None
    _transaction_coordinator = None


__all__ = [
    # Factory functions
    "get_costing_engine",
    "get_transaction_coordinator",
    # Reset
    "reset_services",
]
