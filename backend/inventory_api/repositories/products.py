"""Persistence operations for products.

The repository owns every query against the ``products`` table so routers
and services deal only with records and domain errors.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_api.core.errors import (
    DuplicateSkuError,
    ProductNotDeletedError,
    ProductNotFoundError,
)
from inventory_api.db.models.product import Product
from inventory_api.services.query_filters import ProductFilter
from inventory_api.services.stock import apply_stock_change

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 20


class ProductRepository:
    def __init__(self, session: Session):
        self.session = session

    # ------------------------
    # Reads
    # ------------------------
    def get(
        self,
        product_id: UUID,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Product:
        """Load a product; ``for_update`` re-reads it under a row lock."""
        if for_update:
            product = self.session.get(
                Product, product_id, with_for_update=True, populate_existing=True
            )
        else:
            product = self.session.get(Product, product_id)
        if product is None or (product.is_deleted and not include_deleted):
            logger.warning(f"Product {product_id} not found")
            raise ProductNotFoundError(f"Product with ID {product_id} not found")
        return product

    def find_live_by_sku(self, sku: str, *, exclude_id: UUID | None = None) -> Product | None:
        query = select(Product).where(
            func.upper(Product.sku) == sku.strip().upper(),
            Product.deleted_at.is_(None),
        )
        if exclude_id is not None:
            query = query.where(Product.id != exclude_id)
        return self.session.scalars(query.limit(1)).first()

    def list_page(self, product_filter: ProductFilter) -> tuple[list[Product], int]:
        """Return one page of matches plus the total match count."""
        total = (
            self.session.scalar(
                select(func.count(Product.id)).where(*product_filter.conditions)
            )
            or 0
        )
        query = (
            select(Product)
            .where(*product_filter.conditions)
            .order_by(*product_filter.order_by)
            .offset(product_filter.offset)
            .limit(product_filter.limit)
        )
        return list(self.session.scalars(query).all()), total

    def search(self, term: str, limit: int = SEARCH_RESULT_LIMIT) -> list[Product]:
        pattern = f"%{term}%"
        query = (
            select(Product)
            .where(
                Product.deleted_at.is_(None),
                Product.is_active.is_(True),
                or_(
                    Product.name.ilike(pattern),
                    Product.sku.ilike(pattern),
                    Product.description.ilike(pattern),
                    Product.category.ilike(pattern),
                    Product.brand.ilike(pattern),
                ),
            )
            .order_by(Product.name.asc(), Product.id.asc())
            .limit(limit)
        )
        return list(self.session.scalars(query).all())

    def all_live(self, *, active_only: bool = False) -> list[Product]:
        query = select(Product).where(Product.deleted_at.is_(None))
        if active_only:
            query = query.where(Product.is_active.is_(True))
        query = query.order_by(Product.name.asc(), Product.id.asc())
        return list(self.session.scalars(query).all())

    def count_live(self, *, is_active: bool | None = None) -> int:
        query = select(func.count(Product.id)).where(Product.deleted_at.is_(None))
        if is_active is not None:
            query = query.where(Product.is_active.is_(is_active))
        return self.session.scalar(query) or 0

    def count_by_category(self) -> list[tuple[str, int]]:
        count = func.count(Product.id).label("count")
        query = (
            select(Product.category, count)
            .where(Product.deleted_at.is_(None), Product.category.is_not(None))
            .group_by(Product.category)
            .order_by(count.desc(), Product.category.asc())
        )
        return [(category, total) for category, total in self.session.execute(query)]

    # ------------------------
    # Writes
    # ------------------------
    def _ensure_sku_available(self, sku: str, exclude_id: UUID | None = None) -> None:
        if self.find_live_by_sku(sku, exclude_id=exclude_id) is not None:
            logger.warning(f"SKU {sku} already used by a live product")
            raise DuplicateSkuError(sku)

    def _flush(self, sku: str) -> None:
        # Concurrent writers can still collide on the partial unique index
        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateSkuError(sku, original_exception=e) from e

    def create(self, data: dict[str, Any]) -> Product:
        self._ensure_sku_available(data["sku"])
        product = Product(**data)
        self.session.add(product)
        self._flush(product.sku)
        self.session.refresh(product)
        logger.info(f"Created product {product.id} with SKU {product.sku}")
        return product

    def update(self, product: Product, data: dict[str, Any]) -> Product:
        new_sku = data.get("sku")
        if new_sku and new_sku != product.sku:
            self._ensure_sku_available(new_sku, exclude_id=product.id)

        for key, value in data.items():
            setattr(product, key, value)
        self._flush(product.sku)
        self.session.refresh(product)
        logger.info(f"Updated product {product.id} fields={sorted(data)}")
        return product

    def change_stock(self, product: Product, quantity: int, operation: str) -> Product:
        product.stock = apply_stock_change(product.stock or 0, quantity, operation)
        self.session.flush()
        self.session.refresh(product)
        logger.info(
            f"Stock {operation} {quantity} on product {product.id}, now {product.stock}"
        )
        return product

    def soft_delete(self, product: Product) -> None:
        product.deleted_at = datetime.now(timezone.utc)
        self.session.flush()
        logger.info(f"Soft deleted product {product.id}")

    def restore(self, product: Product) -> Product:
        if not product.is_deleted:
            raise ProductNotDeletedError("Product is not deleted")
        self._ensure_sku_available(product.sku, exclude_id=product.id)
        product.deleted_at = None
        self._flush(product.sku)
        self.session.refresh(product)
        logger.info(f"Restored product {product.id}")
        return product
