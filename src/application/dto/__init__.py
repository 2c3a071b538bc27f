"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    AdjustmentLineRequest,
    CalculateMonthlyAveragesRequest,
    CreateAdjustmentRequest,
    CreateItemEntryRequest,
    CreateItemRequest,
    CreateSupplierRequest,
    CreateTransferRequest,
    CreateWarehouseRequest,
    CreateWithdrawalRequest,
    TransferLineRequest,
    WithdrawalLineRequest,
)
from src.application.dto.responses import (
    AdjustmentLineResponse,
    AdjustmentListResponse,
    AdjustmentResponse,
    DocumentLineResponse,
    ErrorResponse,
    HealthResponse,
    ItemEntryListResponse,
    ItemEntryResponse,
    ItemListResponse,
    ItemResponse,
    LedgerEntryResponse,
    LedgerListResponse,
    MonthlyAverageListResponse,
    MonthlyAverageResponse,
    PaginatedResponse,
    PositionListResponse,
    PositionResponse,
    ProviderHealthResponse,
    ReconciliationResponse,
    SupplierListResponse,
    SupplierResponse,
    TransferListResponse,
    TransferResponse,
    WarehouseListResponse,
    WarehouseResponse,
    WithdrawalListResponse,
    WithdrawalResponse,
)

__all__ = [
    # Requests
    "CreateItemRequest",
    "CreateWarehouseRequest",
    "CreateSupplierRequest",
    "CreateItemEntryRequest",
    "TransferLineRequest",
    "CreateTransferRequest",
    "WithdrawalLineRequest",
    "CreateWithdrawalRequest",
    "AdjustmentLineRequest",
    "CreateAdjustmentRequest",
    "CalculateMonthlyAveragesRequest",
    # Responses
    "ItemResponse",
    "ItemListResponse",
    "WarehouseResponse",
    "WarehouseListResponse",
    "SupplierResponse",
    "SupplierListResponse",
    "PositionResponse",
    "PositionListResponse",
    "LedgerEntryResponse",
    "LedgerListResponse",
    "ItemEntryResponse",
    "ItemEntryListResponse",
    "DocumentLineResponse",
    "TransferResponse",
    "TransferListResponse",
    "WithdrawalResponse",
    "WithdrawalListResponse",
    "AdjustmentLineResponse",
    "AdjustmentResponse",
    "AdjustmentListResponse",
    "ReconciliationResponse",
    "MonthlyAverageResponse",
    "MonthlyAverageListResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
    "PaginatedResponse",
]
