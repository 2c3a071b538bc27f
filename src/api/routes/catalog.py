"""
Catalog endpoints: items, warehouses and suppliers.
"""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_catalog_use_case
from src.application.dto.requests import (
    CreateItemRequest,
    CreateSupplierRequest,
    CreateWarehouseRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    ItemListResponse,
    ItemResponse,
    SupplierListResponse,
    SupplierResponse,
    WarehouseListResponse,
    WarehouseResponse,
)
from src.application.use_cases.manage_catalog import ManageCatalogUseCase

router = APIRouter(prefix="/api", tags=["catalog"])


# --- Items ---


@router.post(
    "/items",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> ItemResponse:
    """Register a catalog item."""
    item = await use_case.create_item(request)
    return ItemResponse.from_entity(item)


@router.get("/items", response_model=ItemListResponse)
async def list_items(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> ItemListResponse:
    """List catalog items ordered by item code."""
    items = await use_case.list_items(limit=limit + 1, offset=offset)
    return ItemListResponse(
        items=[ItemResponse.from_entity(item) for item in items[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(items) > limit,
    )


@router.get(
    "/items/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: str,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> ItemResponse:
    """Get one catalog item."""
    return ItemResponse.from_entity(await use_case.get_item(item_id))


# --- Warehouses ---


@router.post(
    "/warehouses",
    response_model=WarehouseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_warehouse(
    request: CreateWarehouseRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> WarehouseResponse:
    """Register a warehouse."""
    warehouse = await use_case.create_warehouse(request)
    return WarehouseResponse.from_entity(warehouse)


@router.get("/warehouses", response_model=WarehouseListResponse)
async def list_warehouses(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> WarehouseListResponse:
    """List warehouses ordered by name."""
    warehouses = await use_case.list_warehouses(limit=limit + 1, offset=offset)
    return WarehouseListResponse(
        warehouses=[WarehouseResponse.from_entity(w) for w in warehouses[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(warehouses) > limit,
    )


@router.get(
    "/warehouses/{warehouse_id}",
    response_model=WarehouseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_warehouse(
    warehouse_id: str,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> WarehouseResponse:
    """Get one warehouse."""
    return WarehouseResponse.from_entity(await use_case.get_warehouse(warehouse_id))


# --- Suppliers ---


@router.post(
    "/suppliers",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_supplier(
    request: CreateSupplierRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> SupplierResponse:
    """Register a supplier."""
    supplier = await use_case.create_supplier(request)
    return SupplierResponse.from_entity(supplier)


@router.get("/suppliers", response_model=SupplierListResponse)
async def list_suppliers(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> SupplierListResponse:
    """List suppliers ordered by name."""
    suppliers = await use_case.list_suppliers(limit=limit + 1, offset=offset)
    return SupplierListResponse(
        suppliers=[SupplierResponse.from_entity(s) for s in suppliers[:limit]],
        limit=limit,
        offset=offset,
        has_more=len(suppliers) > limit,
    )


@router.get(
    "/suppliers/{supplier_id}",
    response_model=SupplierResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_supplier(
    supplier_id: str,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> SupplierResponse:
    """Get one supplier."""
    return SupplierResponse.from_entity(await use_case.get_supplier(supplier_id))
