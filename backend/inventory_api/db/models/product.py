"""SQLAlchemy model for product records."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.types import DateTime

from inventory_api.db.base import Base

DEFAULT_MIN_STOCK = 5
# Largest value an INTEGER column holds
MAX_STOCK = 2_147_483_647


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """Plain inventory record; persistence lives in ProductRepository."""

    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    sku = Column(String(50), nullable=False, index=True)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2))
    stock = Column(Integer, nullable=False, default=0, index=True)
    min_stock = Column(Integer, default=DEFAULT_MIN_STOCK)
    category = Column(String(100), index=True)
    brand = Column(String(100))
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    image_url = Column(String(500))
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )
    deleted_at = Column(DateTime(timezone=True), index=True)

    __table_args__ = (
        # SKU is unique among live rows only, deleted rows keep their SKU
        Index(
            "uq_products_sku_live",
            sku,
            unique=True,
            postgresql_where=deleted_at.is_(None),
            sqlite_where=deleted_at.is_(None),
        ),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def has_stock(self, quantity: int = 1) -> bool:
        return (self.stock or 0) >= quantity

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} stock={self.stock}>"
