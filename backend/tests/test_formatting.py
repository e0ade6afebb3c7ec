from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

from inventory_api.services.formatting import (
    format_product,
    format_products,
    needs_restock,
    stock_value,
)


def _record(**overrides):
    now = datetime.now(timezone.utc)
    fields = dict(
        id=uuid4(),
        name="Widget",
        sku="WDG-1",
        description=None,
        price=Decimal("9.99"),
        cost=None,
        stock=5,
        min_stock=5,
        category=None,
        brand=None,
        is_active=True,
        image_url=None,
        created_at=now,
        updated_at=now,
        deleted_at=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_format_product_derives_flags():
    product = format_product(_record())
    assert product.needs_restock is True
    assert product.is_out_of_stock is False
    assert product.stock_value == 49.95
    assert product.price == 9.99
    assert product.cost is None


def test_format_product_out_of_stock():
    product = format_product(_record(stock=0))
    assert product.is_out_of_stock is True
    assert product.stock_value == 0


def test_format_product_none():
    assert format_product(None) is None


def test_format_products_rejects_non_sequences():
    assert format_products(None) == []
    assert format_products("not a list") == []
    assert len(format_products([_record(), _record()])) == 2


def test_unset_threshold_falls_back_to_default():
    assert needs_restock(5, None) is True
    assert needs_restock(6, None) is False
    assert needs_restock(5, 0) is True
    assert needs_restock(20, 30) is True


def test_stock_value_is_exact():
    assert stock_value(Decimal("0.10"), 3) == Decimal("0.30")
    assert stock_value(None, 4) == 0
