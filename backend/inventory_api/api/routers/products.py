"""CRUD, stock, search and reporting endpoints for product inventory."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from inventory_api.api.dependencies.db import get_session
from inventory_api.api.dependencies.query import product_query_params
from inventory_api.api.schemas.envelope import (
    ApiResponse,
    PaginationMeta,
    ResponseMeta,
    create_response,
)
from inventory_api.api.schemas.product import (
    ProductCreate,
    ProductHistory,
    ProductQuery,
    ProductRead,
    ProductUpdate,
    StockMovement,
    StockOperation,
    StockUpdateResult,
)
from inventory_api.api.schemas.report import (
    CategoryCount,
    InventoryOverview,
    InventoryReport,
)
from inventory_api.core.errors import BadRequestError
from inventory_api.repositories.products import ProductRepository
from inventory_api.services.formatting import format_product, format_products
from inventory_api.services.inventory_stats import (
    calculate_inventory_stats,
    generate_report,
)
from inventory_api.services.query_filters import build_product_filter
from inventory_api.services.stock_history import StockHistoryStore, get_stock_history

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_SEARCH_LENGTH = 2


@router.get(
    "",
    summary="List products with filters and pagination",
    response_model=ApiResponse[list[ProductRead]],
    response_model_exclude_unset=True,
)
def list_products(
    query: ProductQuery = Depends(product_query_params),
    include_stats: bool = Query(False, description="Add stats for the returned page"),
    db: Session = Depends(get_session),
) -> ApiResponse:
    """Return one page of live products.

    Filters are combined with AND logic; deleted products are never listed.
    """
    product_filter = build_product_filter(query)
    products, total = ProductRepository(db).list_page(product_filter)

    meta = ResponseMeta(
        pagination=PaginationMeta.build(product_filter.page, product_filter.limit, total)
    )
    if include_stats:
        meta.stats = calculate_inventory_stats(products)

    message = f"Found {total} products" if total > 0 else "No products found"
    return create_response(message, format_products(products), meta=meta)


@router.get(
    "/stats",
    summary="Inventory statistics",
    response_model=ApiResponse[InventoryOverview],
    response_model_exclude_unset=True,
)
def inventory_stats(db: Session = Depends(get_session)) -> ApiResponse:
    repo = ProductRepository(db)
    stats = calculate_inventory_stats(repo.all_live())
    overview = InventoryOverview(
        **stats.model_dump(),
        active_products=repo.count_live(is_active=True),
        inactive_products=repo.count_live(is_active=False),
        products_by_category=[
            CategoryCount(category=category, count=count)
            for category, count in repo.count_by_category()
        ],
    )
    return create_response("Inventory statistics retrieved", overview)


@router.get(
    "/search",
    summary="Free-text product search",
    response_model=ApiResponse[list[ProductRead]],
    response_model_exclude_unset=True,
)
def search_products(
    search: str | None = Query(None, max_length=255, description="Search term"),
    db: Session = Depends(get_session),
) -> ApiResponse:
    """Match name, SKU, description, category or brand of live, active products."""
    term = (search or "").strip()
    if len(term) < MIN_SEARCH_LENGTH:
        raise BadRequestError(
            f"Search term must be at least {MIN_SEARCH_LENGTH} characters"
        )

    products = ProductRepository(db).search(term)
    return create_response(f"Found {len(products)} products", format_products(products))


@router.get(
    "/reports/{report_type}",
    summary="Generate an inventory report",
    response_model=ApiResponse[InventoryReport],
    response_model_exclude_unset=True,
)
def inventory_report(report_type: str, db: Session = Depends(get_session)) -> ApiResponse:
    """Report types: inventory, low_stock, out_of_stock, high_value."""
    products = ProductRepository(db).all_live(active_only=True)
    report = generate_report(products, report_type)
    return create_response(f"Report '{report_type}' generated", report)


@router.get(
    "/{product_id}",
    summary="Fetch a single product",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_unset=True,
)
def get_product(product_id: UUID, db: Session = Depends(get_session)) -> ApiResponse:
    product = ProductRepository(db).get(product_id)
    return create_response("Product retrieved", format_product(product))


@router.post(
    "",
    summary="Create a product",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[ProductRead],
    response_model_exclude_unset=True,
)
def create_product(payload: ProductCreate, db: Session = Depends(get_session)) -> ApiResponse:
    """SKU must not be used by another live product (case-insensitive)."""
    product = ProductRepository(db).create(payload.model_dump())
    db.commit()
    return create_response("Product created", format_product(product))


@router.put(
    "/{product_id}",
    summary="Replace a product",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_unset=True,
)
def replace_product(
    product_id: UUID,
    payload: ProductCreate,
    db: Session = Depends(get_session),
) -> ApiResponse:
    """Overwrite every field; omitted optional fields go back to defaults."""
    repo = ProductRepository(db)
    product = repo.update(repo.get(product_id), payload.model_dump())
    db.commit()
    return create_response("Product updated", format_product(product))


@router.patch(
    "/{product_id}",
    summary="Partially update a product",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_unset=True,
)
def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    db: Session = Depends(get_session),
) -> ApiResponse:
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise BadRequestError("No data provided for update")

    repo = ProductRepository(db)
    product = repo.update(repo.get(product_id), data)
    db.commit()
    return create_response("Product updated", format_product(product))


@router.patch(
    "/{product_id}/stock",
    summary="Add or subtract stock",
    response_model=ApiResponse[StockUpdateResult],
    response_model_exclude_unset=True,
)
def update_stock(
    product_id: UUID,
    payload: StockOperation,
    db: Session = Depends(get_session),
    history: StockHistoryStore = Depends(get_stock_history),
) -> ApiResponse:
    """Apply a stock movement; subtracting below zero is refused."""
    repo = ProductRepository(db)
    # Lock the row so concurrent movements apply one after another
    product = repo.get(product_id, for_update=True)
    previous_stock = product.stock

    product = repo.change_stock(product, payload.quantity, payload.operation)
    db.commit()

    movement = StockMovement(
        previous_stock=previous_stock,
        current_stock=product.stock,
        operation=payload.operation,
        quantity=payload.quantity,
        reason=payload.reason,
        timestamp=datetime.now(timezone.utc),
    )
    history.record(product.id, movement)

    verb = "increased" if payload.operation == "add" else "decreased"
    return create_response(
        f"Stock {verb}",
        StockUpdateResult(product=format_product(product), stock_movement=movement),
    )


@router.delete(
    "/{product_id}",
    summary="Delete a product (soft delete)",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_product(product_id: UUID, db: Session = Depends(get_session)) -> Response:
    """Set deleted_at; the row stays in the database and can be restored."""
    repo = ProductRepository(db)
    repo.soft_delete(repo.get(product_id))
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{product_id}/restore",
    summary="Restore a deleted product",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_unset=True,
)
def restore_product(product_id: UUID, db: Session = Depends(get_session)) -> ApiResponse:
    repo = ProductRepository(db)
    product = repo.restore(repo.get(product_id, include_deleted=True))
    db.commit()
    return create_response("Product restored", format_product(product))


@router.get(
    "/{product_id}/history",
    summary="Recent stock movements for a product",
    response_model=ApiResponse[ProductHistory],
    response_model_exclude_unset=True,
)
def product_history(
    product_id: UUID,
    db: Session = Depends(get_session),
    history: StockHistoryStore = Depends(get_stock_history),
) -> ApiResponse:
    product = ProductRepository(db).get(product_id)
    events = history.fetch(product.id)
    return create_response(
        f"Found {len(events)} stock movements",
        ProductHistory(product_id=product.id, events=events),
    )
