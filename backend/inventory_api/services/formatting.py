"""Shape persisted products into their wire representation."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from inventory_api.api.schemas.product import ProductRead
from inventory_api.db.models.product import DEFAULT_MIN_STOCK

OUT_OF_STOCK_LEVEL = 0


def restock_threshold(min_stock: int | None) -> int:
    # An unset or zero threshold falls back to the default
    return min_stock or DEFAULT_MIN_STOCK


def needs_restock(stock: int, min_stock: int | None) -> bool:
    return stock <= restock_threshold(min_stock)


def is_out_of_stock(stock: int) -> bool:
    return stock == OUT_OF_STOCK_LEVEL


def stock_value(price: Any, stock: int) -> Decimal:
    """Price x stock, computed in Decimal to avoid float drift."""
    return Decimal(str(price or 0)) * stock


def format_product(product) -> ProductRead | None:
    """Convert one record into ``ProductRead``; ``None`` stays ``None``."""
    if product is None:
        return None

    stock = product.stock or 0
    return ProductRead(
        id=product.id,
        name=product.name,
        sku=product.sku,
        description=product.description,
        price=float(product.price or 0),
        cost=float(product.cost) if product.cost is not None else None,
        stock=stock,
        min_stock=product.min_stock,
        category=product.category,
        brand=product.brand,
        is_active=product.is_active,
        image_url=product.image_url,
        created_at=product.created_at,
        updated_at=product.updated_at,
        deleted_at=product.deleted_at,
        needs_restock=needs_restock(stock, product.min_stock),
        is_out_of_stock=is_out_of_stock(stock),
        stock_value=float(stock_value(product.price, stock)),
    )


def format_products(products) -> list[ProductRead]:
    if not isinstance(products, (list, tuple)):
        return []
    return [format_product(product) for product in products]
