"""
Domain exceptions for the warehouse ledger.

Provides specific exception types for different error scenarios.
"""

from decimal import Decimal
from typing import Any


class WarehouseError(Exception):
    """Base exception for all warehouse ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(WarehouseError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Lookup Exceptions
class NotFoundError(WarehouseError):
    """Base exception for missing records."""

    pass


class ItemNotFoundError(NotFoundError):
    """Item not found in the catalog."""

    def __init__(self, item_id: str):
        super().__init__(
            f"Item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class WarehouseNotFoundError(NotFoundError):
    """Warehouse not found."""

    def __init__(self, warehouse_id: str):
        super().__init__(
            f"Warehouse not found: {warehouse_id}",
            code="WAREHOUSE_NOT_FOUND",
            details={"warehouse_id": warehouse_id},
        )


class SupplierNotFoundError(NotFoundError):
    """Supplier not found."""

    def __init__(self, supplier_id: str):
        super().__init__(
            f"Supplier not found: {supplier_id}",
            code="SUPPLIER_NOT_FOUND",
            details={"supplier_id": supplier_id},
        )


class DocumentNotFoundError(NotFoundError):
    """Business document (entry, transfer, withdrawal, adjustment) not found."""

    def __init__(self, document_type: str, document_id: int):
        super().__init__(
            f"{document_type.replace('_', ' ').capitalize()} not found: {document_id}",
            code="DOCUMENT_NOT_FOUND",
            details={"document_type": document_type, "document_id": document_id},
        )


class DuplicateCatalogEntryError(WarehouseError):
    """A catalog record with the same unique key already exists."""

    def __init__(self, entity: str, field: str, value: str):
        super().__init__(
            f"{entity.capitalize()} with {field} '{value}' already exists",
            code="DUPLICATE_CATALOG_ENTRY",
            details={"entity": entity, "field": field, "value": value},
        )


# Business Rule Exceptions
class BusinessRuleError(WarehouseError):
    """Base exception for rejected inventory operations."""

    pass


class InsufficientInventoryError(BusinessRuleError):
    """Requested quantity exceeds the quantity on hand."""

    def __init__(
        self,
        item_id: str,
        warehouse_id: str,
        available: Decimal,
        requested: Decimal,
    ):
        super().__init__(
            f"insufficient inventory for item {item_id}: "
            f"available {available.normalize():f}, requested {requested.normalize():f}",
            code="INSUFFICIENT_INVENTORY",
            details={
                "item_id": item_id,
                "warehouse_id": warehouse_id,
                "available": str(available),
                "requested": str(requested),
            },
        )
        self.item_id = item_id
        self.warehouse_id = warehouse_id
        self.available = available
        self.requested = requested


class CostingError(BusinessRuleError):
    """A costing strategy could not value a movement."""

    def __init__(self, method: str, reason: str):
        super().__init__(
            f"Costing failed ({method}): {reason}",
            code="COSTING_ERROR",
            details={"method": method, "reason": reason},
        )


class CostingMethodNotSupportedError(BusinessRuleError):
    """No strategy is registered for the configured costing method."""

    def __init__(self, method: str):
        super().__init__(
            f"Costing method not supported: {method}",
            code="COSTING_METHOD_NOT_SUPPORTED",
            details={"method": method},
        )


# Concurrency Exceptions
class ConcurrencyConflictError(WarehouseError):
    """Another writer changed the same position between read and write."""

    def __init__(self, resource: str, reason: str):
        super().__init__(
            f"Concurrent modification of {resource}: {reason}",
            code="CONCURRENCY_CONFLICT",
            details={"resource": resource, "reason": reason},
        )


# Storage Exceptions
class StorageError(WarehouseError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class InventoryInvariantError(WarehouseError):
    """A write would break a position or ledger invariant."""

    def __init__(self, item_id: str, warehouse_id: str, reason: str):
        super().__init__(
            f"Inventory invariant violated for item {item_id} "
            f"in warehouse {warehouse_id}: {reason}",
            code="INVENTORY_INVARIANT_VIOLATED",
            details={"item_id": item_id, "warehouse_id": warehouse_id, "reason": reason},
        )


class ConfigurationError(WarehouseError):
    """Configuration error."""

    pass
