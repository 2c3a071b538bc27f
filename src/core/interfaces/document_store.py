"""Abstract interfaces for business documents and monthly cost figures."""

from abc import ABC, abstractmethod
from datetime import datetime

from src.core.entities.documents import (
    AdjustmentLine,
    AdjustmentType,
    InventoryAdjustment,
    ItemEntry,
    Transfer,
    TransferLine,
    TransferStatus,
    Withdrawal,
    WithdrawalLine,
    WithdrawalStatus,
)
from src.core.entities.reporting import MonthlyWeightedAverage


class IDocumentStore(ABC):
    """Interface for documents that cause inventory movements."""

    @abstractmethod
    async def next_document_number(self, prefix: str, year: int) -> str:
        """Allocate the next number for a prefix and year, e.g. TRF-2026-001."""
        pass

    @abstractmethod
    async def create_item_entry(self, entry: ItemEntry) -> ItemEntry:
        pass

    @abstractmethod
    async def get_item_entry(self, entry_id: int) -> ItemEntry | None:
        pass

    @abstractmethod
    async def list_item_entries(
        self,
        search: str | None = None,
        warehouse_id: str | None = None,
        supplier_id: str | None = None,
        item_id: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ItemEntry]:
        """
        List item entries, newest first.

        search matches purchase reference, notes, item code or item
        description. Dates bound entry_date inclusively.
        """
        pass

    @abstractmethod
    async def create_transfer(self, transfer: Transfer) -> Transfer:
        """Insert the transfer header. Lines are added with add_transfer_line."""
        pass

    @abstractmethod
    async def add_transfer_line(self, line: TransferLine) -> TransferLine:
        pass

    @abstractmethod
    async def get_transfer(self, transfer_id: int) -> Transfer | None:
        """Get a transfer with its lines."""
        pass

    @abstractmethod
    async def list_transfers(
        self,
        search: str | None = None,
        from_warehouse_id: str | None = None,
        to_warehouse_id: str | None = None,
        status: TransferStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Transfer]:
        """List transfers with their lines; search matches number or notes."""
        pass

    @abstractmethod
    async def create_withdrawal(self, withdrawal: Withdrawal) -> Withdrawal:
        """Insert the withdrawal header. Lines are added with add_withdrawal_line."""
        pass

    @abstractmethod
    async def add_withdrawal_line(self, line: WithdrawalLine) -> WithdrawalLine:
        pass

    @abstractmethod
    async def get_withdrawal(self, withdrawal_id: int) -> Withdrawal | None:
        """Get a withdrawal with its lines."""
        pass

    @abstractmethod
    async def list_withdrawals(
        self,
        search: str | None = None,
        warehouse_id: str | None = None,
        status: WithdrawalStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Withdrawal]:
        """List withdrawals with their lines; search matches number or purpose."""
        pass

    @abstractmethod
    async def create_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        """Insert the adjustment header. Lines are added with add_adjustment_line."""
        pass

    @abstractmethod
    async def add_adjustment_line(self, line: AdjustmentLine) -> AdjustmentLine:
        pass

    @abstractmethod
    async def get_adjustment(self, adjustment_id: int) -> InventoryAdjustment | None:
        """Get an adjustment with its lines."""
        pass

    @abstractmethod
    async def list_adjustments(
        self,
        search: str | None = None,
        warehouse_id: str | None = None,
        adjustment_type: AdjustmentType | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryAdjustment]:
        """List adjustments with their lines; search matches number, reason or notes."""
        pass


class IMonthlyAverageStore(ABC):
    """Interface for month-end weighted average snapshots."""

    @abstractmethod
    async def save(self, average: MonthlyWeightedAverage) -> MonthlyWeightedAverage:
        """Insert or replace the figure for (item, warehouse, year, month)."""
        pass

    @abstractmethod
    async def list_for_month(
        self,
        year: int,
        month: int,
        item_id: str | None = None,
        warehouse_id: str | None = None,
    ) -> list[MonthlyWeightedAverage]:
        pass
