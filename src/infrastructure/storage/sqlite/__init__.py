"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    translate_error,
)
from src.infrastructure.storage.sqlite.document_store import SQLiteDocumentStore
from src.infrastructure.storage.sqlite.inventory_store import (
    SQLiteCostLayerStore,
    SQLiteMovementLedger,
    SQLitePositionStore,
)
from src.infrastructure.storage.sqlite.monthly_average_store import SQLiteMonthlyAverageStore
from src.infrastructure.storage.sqlite.unit_of_work import SQLiteUnitOfWork

# Aliases used by the API layer
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances (unbound: one pooled connection per call)
_catalog_store: SQLiteCatalogStore | None = None
_position_store: SQLitePositionStore | None = None
_movement_ledger: SQLiteMovementLedger | None = None
_document_store: SQLiteDocumentStore | None = None
_monthly_average_store: SQLiteMonthlyAverageStore | None = None


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_position_store() -> SQLitePositionStore:
    """Get singleton position store instance."""
    global _position_store
    if _position_store is None:
        _position_store = SQLitePositionStore()
    return _position_store


async def get_movement_ledger() -> SQLiteMovementLedger:
    """Get singleton movement ledger instance."""
    global _movement_ledger
    if _movement_ledger is None:
        _movement_ledger = SQLiteMovementLedger()
    return _movement_ledger


async def get_document_store() -> SQLiteDocumentStore:
    """Get singleton document store instance."""
    global _document_store
    if _document_store is None:
        _document_store = SQLiteDocumentStore()
    return _document_store


async def get_monthly_average_store() -> SQLiteMonthlyAverageStore:
    """Get singleton monthly average store instance."""
    global _monthly_average_store
    if _monthly_average_store is None:
        _monthly_average_store = SQLiteMonthlyAverageStore()
    return _monthly_average_store


def create_unit_of_work() -> SQLiteUnitOfWork:
    """Unit of work factory handed to the transaction coordinator."""
    return SQLiteUnitOfWork()


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "translate_error",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteCatalogStore",
    "SQLitePositionStore",
    "SQLiteMovementLedger",
    "SQLiteCostLayerStore",
    "SQLiteDocumentStore",
    "SQLiteMonthlyAverageStore",
    "SQLiteUnitOfWork",
    # Factory functions
    "get_catalog_store",
    "get_position_store",
    "get_movement_ledger",
    "get_document_store",
    "get_monthly_average_store",
    "create_unit_of_work",
]
