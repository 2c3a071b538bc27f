"""
Async SQLite connection pool with aiosqlite.

Connections run in autocommit mode; write transactions are opened
explicitly with BEGIN IMMEDIATE so the first statement already holds the
database write lock.
"""

import asyncio
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.core.exceptions import ConcurrencyConflictError, DatabaseError, StorageError

logger = get_logger(__name__)

_BUSY_MARKERS = ("database is locked", "database is busy", "database table is locked")


def translate_error(operation: str, error: sqlite3.Error) -> StorageError | ConcurrencyConflictError:
    """Map a sqlite3 error to a domain exception."""
    message = str(error)
    if isinstance(error, sqlite3.OperationalError) and any(
        marker in message.lower() for marker in _BUSY_MARKERS
    ):
        return ConcurrencyConflictError(resource="database", reason=message)
    return DatabaseError(operation=operation, error=message)


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a fixed number of connections handed out one at a time.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Open pool_size connections."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Create a connection tuned for concurrent writers."""
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)

        # WAL lets readers proceed while one writer holds the lock
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self, immediate: bool = True) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection inside an explicit transaction.

        Commits on success and rolls back on any exception, including
        cancellation. sqlite3 errors are translated to domain exceptions.
        """
        async with self.acquire() as conn:
            try:
                await conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            except sqlite3.Error as e:
                raise translate_error("begin", e) from e

            try:
                yield conn
                await conn.commit()
            except sqlite3.Error as e:
                await conn.rollback()
                raise translate_error("transaction", e) from e
            except BaseException:
                await conn.rollback()
                raise

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed")


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Get a connection from the global pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Get a connection from the global pool inside a write transaction."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
