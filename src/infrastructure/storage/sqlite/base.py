"""Shared plumbing for SQLite stores."""

import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from decimal import Decimal

import aiosqlite

from src.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
    translate_error,
)


def dec(value: str | int | float | None) -> Decimal:
    """Decimal from a TEXT column."""
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def dec_str(value: Decimal) -> str:
    """Exact decimal string for a TEXT column."""
    return format(value, "f")


def ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def ts_str(value: datetime | None) -> str | None:
    """Naive UTC text for a timestamp column or filter."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.isoformat()


class SQLiteStore:
    """
    Base for stores that run standalone or inside a unit of work.

    A store created with a connection uses it for every statement and
    never commits; the unit of work owning the connection does. A store
    created without one takes a pooled connection per call.
    """

    def __init__(self, conn: aiosqlite.Connection | None = None) -> None:
        self._conn = conn

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
            return
        try:
            async with get_connection() as conn:
                yield conn
        except sqlite3.Error as e:
            raise translate_error("read", e) from e

    @asynccontextmanager
    async def _writing(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
            return
        async with get_transaction() as conn:
            yield conn
