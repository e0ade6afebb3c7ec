"""Translate listing parameters into SQLAlchemy filter/sort/pagination parts."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import or_
from sqlalchemy.sql.expression import ColumnElement, UnaryExpression

from inventory_api.api.schemas.product import ProductQuery
from inventory_api.db.models.product import Product

SORTABLE_FIELDS = {
    "name": Product.name,
    "sku": Product.sku,
    "price": Product.price,
    "stock": Product.stock,
    "created_at": Product.created_at,
    "updated_at": Product.updated_at,
}
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_ORDER = "DESC"

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Catches rows whose threshold is unset or set unusually low
LOW_STOCK_FALLBACK = 10


@dataclass
class ProductFilter:
    conditions: list[ColumnElement[bool]] = field(default_factory=list)
    order_by: list[UnaryExpression] = field(default_factory=list)
    offset: int = 0
    limit: int = DEFAULT_LIMIT
    page: int = DEFAULT_PAGE


def _contains(column, text: str) -> ColumnElement[bool]:
    return column.ilike(f"%{text}%")


def build_search_conditions(query: ProductQuery) -> list[ColumnElement[bool]]:
    """Return AND-ed predicates; each OR group stays self-contained."""
    conditions: list[ColumnElement[bool]] = [Product.deleted_at.is_(None)]

    search = (query.search or "").strip()
    if search:
        conditions.append(
            or_(
                _contains(Product.name, search),
                _contains(Product.sku, search),
                _contains(Product.description, search),
            )
        )

    category = (query.category or "").strip()
    if category:
        conditions.append(_contains(Product.category, category))

    brand = (query.brand or "").strip()
    if brand:
        conditions.append(_contains(Product.brand, brand))

    if query.is_active is not None:
        conditions.append(Product.is_active == query.is_active)

    if query.low_stock:
        conditions.append(
            or_(
                Product.stock <= Product.min_stock,
                Product.stock <= LOW_STOCK_FALLBACK,
            )
        )

    return conditions


def resolve_sort(sort_by: str | None, sort_order: str | None) -> tuple[str, str]:
    """Validate sort inputs, falling back to created_at DESC."""
    field_name = sort_by if sort_by in SORTABLE_FIELDS else DEFAULT_SORT_FIELD
    order = (sort_order or "").strip().upper()
    if order not in ("ASC", "DESC"):
        order = DEFAULT_SORT_ORDER
    return field_name, order


def build_sort_options(sort_by: str | None, sort_order: str | None) -> list[UnaryExpression]:
    field_name, order = resolve_sort(sort_by, sort_order)
    column = SORTABLE_FIELDS[field_name]
    primary = column.asc() if order == "ASC" else column.desc()
    # id tie-break keeps pages stable when the sort column has duplicates
    return [primary, Product.id.asc()]


def resolve_pagination(page: int | None, limit: int | None) -> tuple[int, int, int]:
    """Return (page, limit, offset) with defaults applied and limit capped."""
    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else DEFAULT_LIMIT
    limit = min(limit, MAX_LIMIT)
    return page, limit, (page - 1) * limit


def build_product_filter(query: ProductQuery) -> ProductFilter:
    page, limit, offset = resolve_pagination(query.page, query.limit)
    return ProductFilter(
        conditions=build_search_conditions(query),
        order_by=build_sort_options(query.sort_by, query.sort_order),
        offset=offset,
        limit=limit,
        page=page,
    )
