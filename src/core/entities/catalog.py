"""Catalog master data referenced by inventory movements."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.core.entities.inventory import ZERO, CostingMethod, utcnow


class Supplier(BaseModel):
    """A vendor that items are purchased from."""

    id: str
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class Warehouse(BaseModel):
    """A physical storage location."""

    id: str
    name: str
    location: str | None = None
    description: str | None = None
    default_costing_method: CostingMethod = CostingMethod.WEIGHTED_AVERAGE
    created_at: datetime = Field(default_factory=utcnow)


class Item(BaseModel):
    """A stock-keeping unit."""

    id: str
    item_code: str
    description: str
    unit_of_measure: str = "pcs"
    costing_method: CostingMethod | None = None  # overrides the warehouse default
    standard_cost: Decimal = ZERO
    reorder_level: Decimal = ZERO
    supplier_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
