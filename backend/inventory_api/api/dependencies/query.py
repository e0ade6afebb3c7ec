"""Query-string dependencies for listing endpoints."""

from fastapi import Query

from inventory_api.api.schemas.product import ProductQuery


def product_query_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, description="Items per page, capped at 100"),
    search: str | None = Query(
        None, max_length=255, description="Match name, SKU or description"
    ),
    category: str | None = Query(None, max_length=100, description="Category substring"),
    brand: str | None = Query(None, max_length=100, description="Brand substring"),
    is_active: bool | None = Query(None, description="Filter by active status"),
    low_stock: bool | None = Query(
        None, description="Only products at or below their restock threshold"
    ),
    sort_by: str | None = Query(
        None,
        description="name, sku, price, stock, created_at or updated_at",
    ),
    sort_order: str | None = Query(None, description="ASC or DESC, anything else means DESC"),
) -> ProductQuery:
    return ProductQuery(
        page=page,
        limit=limit,
        search=search,
        category=category,
        brand=brand,
        is_active=is_active,
        low_stock=low_stock,
        sort_by=sort_by,
        sort_order=sort_order,
    )
