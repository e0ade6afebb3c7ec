"""Pydantic models describing Product payloads."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, field_validator

from inventory_api.db.models.product import MAX_STOCK

SKU_PATTERN = r"^[A-Z0-9_-]+$"

_http_url = TypeAdapter(HttpUrl)


class ProductBase(BaseModel):
    """Shared normalisation for create/update payloads."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("sku", mode="before", check_fields=False)
    @classmethod
    def normalize_sku(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator(
        "description", "category", "brand", "image_url", mode="before", check_fields=False
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("image_url", mode="after", check_fields=False)
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            _http_url.validate_python(v)
        except ValueError as e:
            raise ValueError("image_url must be a valid http(s) URL") from e
        return v


class ProductCreate(ProductBase):
    """Full product payload used by create and replace."""

    name: str = Field(..., min_length=2, max_length=255)
    sku: str = Field(
        ...,
        min_length=2,
        max_length=50,
        pattern=SKU_PATTERN,
        description="Upper-cased on input; letters, digits, '-' and '_'",
    )
    description: str | None = Field(None, max_length=1000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    cost: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0, le=MAX_STOCK)
    min_stock: int | None = Field(5, ge=0, le=MAX_STOCK)
    category: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    is_active: bool = True
    image_url: str | None = Field(None, max_length=500)


class ProductUpdate(ProductBase):
    """Partial update payload; only fields present in the body are applied."""

    name: str | None = Field(None, min_length=2, max_length=255)
    sku: str | None = Field(None, min_length=2, max_length=50, pattern=SKU_PATTERN)
    description: str | None = Field(None, max_length=1000)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    cost: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: int | None = Field(None, ge=0, le=MAX_STOCK)
    min_stock: int | None = Field(None, ge=0, le=MAX_STOCK)
    category: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    is_active: bool | None = None
    image_url: str | None = Field(None, max_length=500)

    @field_validator("name", "sku", "price", "stock", "is_active", mode="after")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Only runs for values present in the body
        if v is None:
            raise ValueError("field cannot be null")
        return v


class ProductQuery(BaseModel):
    """Validated listing parameters consumed by the filter builder."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    search: str | None = None
    category: str | None = None
    brand: str | None = None
    is_active: bool | None = None
    low_stock: bool | None = None
    sort_by: str | None = None
    sort_order: str | None = None


class StockOperation(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    quantity: int = Field(..., gt=0, le=MAX_STOCK)
    operation: Literal["add", "subtract"]
    reason: str | None = Field(None, max_length=255)


class ProductRead(BaseModel):
    """Wire representation with fields derived at format time."""

    id: UUID
    name: str
    sku: str
    description: str | None = None
    price: float
    cost: float | None = None
    stock: int
    min_stock: int | None = None
    category: str | None = None
    brand: str | None = None
    is_active: bool
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    needs_restock: bool
    is_out_of_stock: bool
    stock_value: float


class StockMovement(BaseModel):
    previous_stock: int
    current_stock: int
    operation: str
    quantity: int
    reason: str | None = None
    timestamp: datetime


class StockUpdateResult(BaseModel):
    product: ProductRead
    stock_movement: StockMovement


class ProductHistory(BaseModel):
    product_id: UUID
    events: list[StockMovement]
