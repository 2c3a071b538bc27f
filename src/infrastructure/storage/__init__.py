"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteDocumentStore,
    SQLiteMonthlyAverageStore,
    SQLiteMovementLedger,
    SQLitePositionStore,
    SQLiteUnitOfWork,
    close_pool,
    create_unit_of_work,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteCatalogStore",
    "SQLiteDocumentStore",
    "SQLiteMonthlyAverageStore",
    "SQLiteMovementLedger",
    "SQLitePositionStore",
    "SQLiteUnitOfWork",
    "create_unit_of_work",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
