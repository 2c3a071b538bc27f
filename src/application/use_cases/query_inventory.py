"""Inventory queries: positions, ledger history and posted documents."""

from datetime import datetime

from src.core.entities.documents import (
    AdjustmentType,
    InventoryAdjustment,
    ItemEntry,
    Transfer,
    TransferStatus,
    Withdrawal,
    WithdrawalStatus,
)
from src.core.entities.inventory import (
    DocumentType,
    InventoryPosition,
    MovementLedgerEntry,
    MovementType,
)
from src.core.exceptions import (
    DocumentNotFoundError,
    ItemNotFoundError,
    WarehouseNotFoundError,
)
from src.core.interfaces.catalog_store import ICatalogStore
from src.core.interfaces.document_store import IDocumentStore
from src.core.interfaces.inventory_store import IMovementLedger, IPositionStore


class QueryInventoryUseCase:
    """Read paths; nothing here writes."""

    def __init__(
        self,
        position_store: IPositionStore | None = None,
        ledger: IMovementLedger | None = None,
        document_store: IDocumentStore | None = None,
        catalog_store: ICatalogStore | None = None,
    ):
        self._position_store = position_store
        self._ledger = ledger
        self._document_store = document_store
        self._catalog_store = catalog_store

    async def _get_position_store(self) -> IPositionStore:
        if self._position_store is None:
            from src.infrastructure.storage.sqlite import get_position_store

            self._position_store = await get_position_store()
        return self._position_store

    async def _get_ledger(self) -> IMovementLedger:
        if self._ledger is None:
            from src.infrastructure.storage.sqlite import get_movement_ledger

            self._ledger = await get_movement_ledger()
        return self._ledger

    async def _get_document_store(self) -> IDocumentStore:
        if self._document_store is None:
            from src.infrastructure.storage.sqlite import get_document_store

            self._document_store = await get_document_store()
        return self._document_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from src.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    # --- Positions ---

    async def get_position(self, item_id: str, warehouse_id: str) -> InventoryPosition:
        """Position of a known pair; zero when nothing was ever posted."""
        catalog = await self._get_catalog_store()
        if await catalog.get_item(item_id) is None:
            raise ItemNotFoundError(item_id)
        if await catalog.get_warehouse(warehouse_id) is None:
            raise WarehouseNotFoundError(warehouse_id)

        store = await self._get_position_store()
        return await store.get_position(item_id, warehouse_id)

    async def list_positions(
        self,
        warehouse_id: str | None = None,
        item_id: str | None = None,
        in_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryPosition]:
        store = await self._get_position_store()
        return await store.list_positions(
            warehouse_id=warehouse_id,
            item_id=item_id,
            in_stock_only=in_stock_only,
            limit=limit,
            offset=offset,
        )

    async def list_low_stock(
        self, warehouse_id: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[InventoryPosition]:
        store = await self._get_position_store()
        return await store.list_low_stock(warehouse_id=warehouse_id, limit=limit, offset=offset)

    # --- Ledger ---

    async def list_movements(
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
        """Ledger entries, newest first."""
        ledger = await self._get_ledger()
        return await ledger.list_entries(
            item_id=item_id,
            warehouse_id=warehouse_id,
            movement_type=movement_type,
            reference_type=reference_type,
            reference_id=reference_id,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )

    # --- Documents ---

    async def get_item_entry(self, entry_id: int) -> ItemEntry:
        store = await self._get_document_store()
        entry = await store.get_item_entry(entry_id)
        if entry is None:
            raise DocumentNotFoundError(DocumentType.ITEM_ENTRY.value, entry_id)
        return entry

    async def get_transfer(self, transfer_id: int) -> Transfer:
        store = await self._get_document_store()
        transfer = await store.get_transfer(transfer_id)
        if transfer is None:
            raise DocumentNotFoundError(DocumentType.TRANSFER.value, transfer_id)
        return transfer

    async def get_withdrawal(self, withdrawal_id: int) -> Withdrawal:
        store = await self._get_document_store()
        withdrawal = await store.get_withdrawal(withdrawal_id)
        if withdrawal is None:
            raise DocumentNotFoundError(DocumentType.WITHDRAWAL.value, withdrawal_id)
        return withdrawal

    async def get_adjustment(self, adjustment_id: int) -> InventoryAdjustment:
        store = await self._get_document_store()
        adjustment = await store.get_adjustment(adjustment_id)
        if adjustment is None:
            raise DocumentNotFoundError(DocumentType.ADJUSTMENT.value, adjustment_id)
        return adjustment

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
        """Item entries, newest first."""
        store = await self._get_document_store()
        return await store.list_item_entries(
            search=search,
            warehouse_id=warehouse_id,
            supplier_id=supplier_id,
            item_id=item_id,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )

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
        store = await self._get_document_store()
        return await store.list_transfers(
            search=search,
            from_warehouse_id=from_warehouse_id,
            to_warehouse_id=to_warehouse_id,
            status=status,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )

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
        store = await self._get_document_store()
        return await store.list_withdrawals(
            search=search,
            warehouse_id=warehouse_id,
            status=status,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )

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
        store = await self._get_document_store()
        return await store.list_adjustments(
            search=search,
            warehouse_id=warehouse_id,
            adjustment_type=adjustment_type,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )
