from decimal import Decimal
from uuid import uuid4

import pytest

from inventory_api.api.schemas.product import ProductCreate, ProductQuery
from inventory_api.core.errors import (
    DuplicateSkuError,
    InsufficientStockError,
    ProductNotDeletedError,
    ProductNotFoundError,
)
from inventory_api.db.models.product import Product
from inventory_api.repositories.products import ProductRepository
from inventory_api.services.query_filters import build_product_filter


@pytest.fixture
def repo(db_session):
    return ProductRepository(db_session)


def _create(repo, **overrides):
    payload = {"name": "Widget", "sku": "wdg-1", "price": Decimal("9.99"), "stock": 5}
    payload.update(overrides)
    return repo.create(ProductCreate(**payload).model_dump())


def test_create_assigns_id_and_defaults(repo):
    product = _create(repo)
    assert product.id is not None
    assert product.sku == "WDG-1"
    assert product.min_stock == 5
    assert product.is_active is True
    assert product.created_at is not None


def test_get_hides_deleted(repo):
    product = _create(repo)
    repo.soft_delete(product)
    with pytest.raises(ProductNotFoundError):
        repo.get(product.id)
    assert repo.get(product.id, include_deleted=True).is_deleted


def test_get_unknown(repo):
    with pytest.raises(ProductNotFoundError):
        repo.get(uuid4())


def test_duplicate_sku_is_case_insensitive(repo):
    _create(repo)
    assert repo.find_live_by_sku("wdg-1") is not None
    with pytest.raises(DuplicateSkuError):
        _create(repo, name="Copy")


def test_update_keeping_own_sku(repo):
    product = _create(repo)
    updated = repo.update(product, {"sku": "WDG-1", "name": "Renamed"})
    assert updated.name == "Renamed"


def test_change_stock(repo):
    product = _create(repo)
    assert repo.change_stock(product, 4, "add").stock == 9
    with pytest.raises(InsufficientStockError):
        repo.change_stock(product, 10, "subtract")
    assert product.stock == 9


def test_restore_rules(repo):
    product = _create(repo)
    with pytest.raises(ProductNotDeletedError):
        repo.restore(product)

    repo.soft_delete(product)
    assert repo.restore(product).deleted_at is None


def test_list_page_counts_all_matches(repo):
    for i in range(7):
        _create(repo, name=f"Item {i}", sku=f"ITEM-{i}", stock=i)

    items, total = repo.list_page(
        build_product_filter(ProductQuery(limit=3, sort_by="stock", sort_order="ASC"))
    )
    assert total == 7
    assert [p.stock for p in items] == [0, 1, 2]


def test_counts(repo):
    _create(repo, sku="A-1", category="Tools")
    _create(repo, sku="A-2", category="Tools", is_active=False)
    _create(repo, sku="A-3")
    assert repo.count_live() == 3
    assert repo.count_live(is_active=False) == 1
    assert repo.count_by_category() == [("Tools", 2)]


def test_has_stock(repo):
    product = _create(repo, stock=3)
    assert product.has_stock()
    assert product.has_stock(3)
    assert not product.has_stock(4)


def test_get_for_update_rereads_the_row(repo, db_session):
    product = _create(repo)
    # Change the row behind the ORM's back, as another transaction would
    db_session.connection().execute(Product.__table__.update().values(stock=1))
    assert product.stock == 5

    locked = repo.get(product.id, for_update=True)
    assert locked is product
    assert locked.stock == 1
    with pytest.raises(InsufficientStockError):
        repo.change_stock(locked, 2, "subtract")
