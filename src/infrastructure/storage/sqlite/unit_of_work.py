"""SQLite unit of work."""

from contextlib import AbstractAsyncContextManager
from types import TracebackType

import aiosqlite

from src.config import get_logger
from src.core.interfaces.unit_of_work import IUnitOfWork
from src.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from src.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool
from src.infrastructure.storage.sqlite.document_store import SQLiteDocumentStore
from src.infrastructure.storage.sqlite.inventory_store import (
    SQLiteCostLayerStore,
    SQLiteMovementLedger,
    SQLitePositionStore,
)

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    One pooled connection inside BEGIN IMMEDIATE.

    SQLite grants a single write lock per database, so holding it from the
    first read serializes every read-modify-write of a position. Stores are
    bound to the connection and never commit themselves.
    """

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool
        self._transaction: AbstractAsyncContextManager[aiosqlite.Connection] | None = None

    async def __aenter__(self) -> "SQLiteUnitOfWork":
        pool = self._pool or await get_pool()
        self._transaction = pool.transaction(immediate=True)
        conn = await self._transaction.__aenter__()

        self.positions = SQLitePositionStore(conn)
        self.ledger = SQLiteMovementLedger(conn)
        self.layers = SQLiteCostLayerStore(conn)
        self.catalog = SQLiteCatalogStore(conn)
        self.documents = SQLiteDocumentStore(conn)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        transaction, self._transaction = self._transaction, None
        if transaction is None:
            return
        if exc is not None:
            logger.debug("unit_of_work_rolled_back", error=str(exc))
        # Commits, or rolls back and re-raises (translated) on error
        await transaction.__aexit__(exc_type, exc, tb)
