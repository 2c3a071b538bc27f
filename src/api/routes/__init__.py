"""API route modules."""

from src.api.routes.adjustments import router as adjustments_router
from src.api.routes.catalog import router as catalog_router
from src.api.routes.cost_accounting import router as cost_accounting_router
from src.api.routes.health import router as health_router
from src.api.routes.inventory import router as inventory_router
from src.api.routes.item_entries import router as item_entries_router
from src.api.routes.transfers import router as transfers_router
from src.api.routes.withdrawals import router as withdrawals_router

__all__ = [
    "health_router",
    "catalog_router",
    "item_entries_router",
    "transfers_router",
    "withdrawals_router",
    "adjustments_router",
    "inventory_router",
    "cost_accounting_router",
]
