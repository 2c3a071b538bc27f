"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.catalog_store import ICatalogStore
from src.core.interfaces.document_store import IDocumentStore, IMonthlyAverageStore
from src.core.interfaces.inventory_store import (
    ICostLayerStore,
    IMovementLedger,
    IPositionStore,
)
from src.core.interfaces.unit_of_work import IUnitOfWork

__all__ = [
    # Inventory interfaces
    "IPositionStore",
    "IMovementLedger",
    "ICostLayerStore",
    # Catalog and documents
    "ICatalogStore",
    "IDocumentStore",
    "IMonthlyAverageStore",
    # Transactions
    "IUnitOfWork",
]
