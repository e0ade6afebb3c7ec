"""Aggregate statistics and report payloads."""

from datetime import datetime

from pydantic import BaseModel

from inventory_api.api.schemas.product import ProductRead


class InventoryStats(BaseModel):
    total_products: int
    total_value: float
    low_stock_count: int
    out_of_stock_count: int
    categories: int
    brands: int


class CategoryCount(BaseModel):
    category: str
    count: int


class InventoryOverview(InventoryStats):
    active_products: int
    inactive_products: int
    products_by_category: list[CategoryCount]


class InventoryReport(BaseModel):
    type: str
    title: str
    generated_at: datetime
    total_items: int
    data: list[ProductRead]
    stats: InventoryStats
