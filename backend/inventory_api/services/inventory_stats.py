"""In-memory aggregates and named inventory reports."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable

from inventory_api.api.schemas.report import InventoryReport, InventoryStats
from inventory_api.core.errors import BadRequestError
from inventory_api.services.formatting import (
    format_products,
    is_out_of_stock,
    needs_restock,
    stock_value,
)

HIGH_VALUE_THRESHOLD = Decimal("1000")


def calculate_inventory_stats(products: Iterable | None) -> InventoryStats:
    """Summarise a fetched collection; empty input yields all zeros."""
    products = list(products or [])
    if not products:
        return InventoryStats(
            total_products=0,
            total_value=0,
            low_stock_count=0,
            out_of_stock_count=0,
            categories=0,
            brands=0,
        )

    total_value = Decimal("0")
    low_stock_count = 0
    out_of_stock_count = 0
    categories: set[str] = set()
    brands: set[str] = set()

    for product in products:
        stock = product.stock or 0
        total_value += stock_value(product.price, stock)
        if needs_restock(stock, product.min_stock):
            low_stock_count += 1
        if is_out_of_stock(stock):
            out_of_stock_count += 1
        if product.category:
            categories.add(product.category)
        if product.brand:
            brands.add(product.brand)

    return InventoryStats(
        total_products=len(products),
        total_value=float(total_value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)),
        low_stock_count=low_stock_count,
        out_of_stock_count=out_of_stock_count,
        categories=len(categories),
        brands=len(brands),
    )


def _low_stock(products: list) -> list:
    return [p for p in products if needs_restock(p.stock or 0, p.min_stock)]


def _out_of_stock(products: list) -> list:
    return [p for p in products if is_out_of_stock(p.stock or 0)]


def _high_value(products: list) -> list:
    selected = [
        p for p in products if stock_value(p.price, p.stock or 0) > HIGH_VALUE_THRESHOLD
    ]
    return sorted(
        selected, key=lambda p: stock_value(p.price, p.stock or 0), reverse=True
    )


REPORT_TYPES: dict[str, tuple[str, Callable[[list], list]]] = {
    "inventory": ("General Inventory", list),
    "low_stock": ("Low Stock Products", _low_stock),
    "out_of_stock": ("Out of Stock Products", _out_of_stock),
    "high_value": ("High Value Inventory", _high_value),
}


def generate_report(products: Iterable, report_type: str = "inventory") -> InventoryReport:
    """Build one of the named report views over ``products``."""
    if report_type not in REPORT_TYPES:
        raise BadRequestError(
            f"Invalid report type '{report_type}'. "
            f"Valid types: {', '.join(REPORT_TYPES)}"
        )

    title, select = REPORT_TYPES[report_type]
    subset = select(list(products))

    return InventoryReport(
        type=report_type,
        title=title,
        generated_at=datetime.now(timezone.utc),
        total_items=len(subset),
        data=format_products(subset),
        stats=calculate_inventory_stats(subset),
    )
