"""Abstract unit of work spanning every inventory store."""

from abc import ABC, abstractmethod
from types import TracebackType

from src.core.interfaces.catalog_store import ICatalogStore
from src.core.interfaces.document_store import IDocumentStore
from src.core.interfaces.inventory_store import (
    ICostLayerStore,
    IMovementLedger,
    IPositionStore,
)


class IUnitOfWork(ABC):
    """
    One atomic transaction over positions, ledger, layers and documents.

    Used as an async context manager: entering begins the transaction,
    a clean exit commits and any exception rolls back before propagating.
    """

    positions: IPositionStore
    ledger: IMovementLedger
    layers: ICostLayerStore
    catalog: ICatalogStore
    documents: IDocumentStore

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pass
