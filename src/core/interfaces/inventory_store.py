"""Abstract interfaces for inventory positions, the movement ledger and cost layers."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from src.core.entities.inventory import (
    CostLayer,
    DocumentType,
    InventoryPosition,
    MovementLedgerEntry,
    MovementType,
)


class IPositionStore(ABC):
    """Interface for the current balance per (item, warehouse)."""

    @abstractmethod
    async def get_position(self, item_id: str, warehouse_id: str) -> InventoryPosition:
        """
        Get the current position.

        Returns a zero position (id None, version 0) when the pair has
        never been touched. No row is created.
        """
        pass

    @abstractmethod
    async def upsert_position(
        self,
        item_id: str,
        warehouse_id: str,
        quantity: Decimal,
        total_value: Decimal,
        expected_version: int,
    ) -> InventoryPosition:
        """
        Replace the position, recomputing the average unit cost.

        The write only succeeds if the stored version still equals
        expected_version (0 means the row must not exist yet).

        Raises:
            InventoryInvariantError: If quantity is negative.
            ConcurrencyConflictError: If the version check fails.
        """
        pass

    @abstractmethod
    async def list_positions(
        self,
        warehouse_id: str | None = None,
        item_id: str | None = None,
        in_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryPosition]:
        """List positions ordered by item and warehouse."""
        pass

    @abstractmethod
    async def list_low_stock(
        self, warehouse_id: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[InventoryPosition]:
        """List positions at or below their item's reorder level."""
        pass


class IMovementLedger(ABC):
    """Interface for the append-only movement ledger."""

    @abstractmethod
    async def append(self, entry: MovementLedgerEntry) -> MovementLedgerEntry:
        """Insert a ledger entry. Entries are never updated or deleted."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        item_id: str | None = None,
        warehouse_id: str | None = None,
        movement_type: MovementType | None = None,
        reference_type: DocumentType | None = None,
        reference_id: int | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[MovementLedgerEntry]:
        """List entries newest first."""
        pass

    @abstractmethod
    async def list_for_position(
        self, item_id: str, warehouse_id: str
    ) -> list[MovementLedgerEntry]:
        """All entries of one (item, warehouse) in insertion order."""
        pass

    @abstractmethod
    async def list_between(
        self, start: datetime, end: datetime
    ) -> list[MovementLedgerEntry]:
        """Entries with start <= created_at < end, in insertion order."""
        pass


class ICostLayerStore(ABC):
    """Interface for cost lots used by layered costing methods."""

    @abstractmethod
    async def add_layer(self, layer: CostLayer) -> CostLayer:
        """Record a received lot."""
        pass

    @abstractmethod
    async def list_open_layers(self, item_id: str, warehouse_id: str) -> list[CostLayer]:
        """Lots with remaining quantity, oldest first."""
        pass

    @abstractmethod
    async def set_remaining(self, layer_id: int, remaining_quantity: Decimal) -> None:
        """Update the remaining quantity of a lot."""
        pass
