"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    BusinessRuleError,
    ConcurrencyConflictError,
    ConfigurationError,
    DuplicateCatalogEntryError,
    InventoryInvariantError,
    NotFoundError,
    StorageError,
    ValidationError,
    WarehouseError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes (first match wins)
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateCatalogEntryError: status.HTTP_409_CONFLICT,
    BusinessRuleError: status.HTTP_409_CONFLICT,
    ConcurrencyConflictError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    InventoryInvariantError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Internal failures are reported without their details
GENERIC_MESSAGES: dict[type[Exception], str] = {
    StorageError: "A storage operation failed",
    InventoryInvariantError: "An inventory invariant was violated",
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "ITEM_NOT_FOUND": "Check the item ID and try GET /api/items to list items.",
    "WAREHOUSE_NOT_FOUND": "Check the warehouse ID and try GET /api/warehouses to list warehouses.",
    "SUPPLIER_NOT_FOUND": "Check the supplier ID and try GET /api/suppliers to list suppliers.",
    "DOCUMENT_NOT_FOUND": "Check the document ID. Ledger entries reference it in GET /api/inventory/movements.",
    "DUPLICATE_CATALOG_ENTRY": "Item codes, warehouse names and supplier names must be unique.",
    "INSUFFICIENT_INVENTORY": "Check GET /api/inventory/positions for the quantity on hand.",
    "COSTING_ERROR": "Specific identification needs lot_ids naming open lots of the item.",
    "COSTING_METHOD_NOT_SUPPORTED": "Use WEIGHTED_AVERAGE, FIFO or SPECIFIC_IDENTIFICATION.",
    "CONCURRENCY_CONFLICT": "The position kept changing under concurrent writers. Retry the request.",
    "INVENTORY_INVARIANT_VIOLATED": "Run GET /api/inventory/reconcile for the affected position.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current inventory state.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert exception to standardized JSON response."""
    status_code = _status_for(exc)

    # Get error code: prefer WarehouseError.code, fall back to class name
    if isinstance(exc, WarehouseError):
        error_code = exc.code
    else:
        error_code = exc.__class__.__name__

    request_id = getattr(request.state, "request_id", None)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    message = str(exc)
    for exc_type, generic in GENERIC_MESSAGES.items():
        if isinstance(exc, exc_type):
            message = generic
            break
    else:
        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR and not isinstance(
            exc, WarehouseError
        ):
            message = "Internal server error"

    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches whatever the registered exception handlers did not.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(WarehouseError)
    async def warehouse_exception_handler(
        request: Request,
        exc: WarehouseError,
    ) -> JSONResponse:
        """Handle domain errors raised by use cases."""
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTPException status."""
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code == 400:
        return "BAD_REQUEST"
    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"
    return "HTTP_ERROR"
