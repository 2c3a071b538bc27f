"""Derived inventory figures: reconciliation results and monthly averages."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.core.entities.inventory import ZERO, utcnow


class ReconciliationResult(BaseModel):
    """Ledger replay compared with the stored position."""

    item_id: str
    warehouse_id: str
    entry_count: int = 0
    ledger_quantity: Decimal = ZERO
    ledger_value: Decimal = ZERO
    position_quantity: Decimal = ZERO
    position_value: Decimal = ZERO
    discrepancies: list[str] = Field(default_factory=list)

    @property
    def balanced(self) -> bool:
        return not self.discrepancies


class MonthlyWeightedAverage(BaseModel):
    """Month-end weighted average cost of one item in one warehouse."""

    id: int | None = None
    item_id: str
    warehouse_id: str
    year: int
    month: int
    weighted_avg_cost: Decimal = ZERO
    total_quantity: Decimal = ZERO
    total_value: Decimal = ZERO
    opening_quantity: Decimal = ZERO
    opening_value: Decimal = ZERO
    closing_quantity: Decimal = ZERO
    closing_value: Decimal = ZERO
    calculated_at: datetime = Field(default_factory=utcnow)
