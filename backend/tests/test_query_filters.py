from sqlalchemy.dialects import sqlite

from inventory_api.api.schemas.product import ProductQuery
from inventory_api.services.query_filters import (
    MAX_LIMIT,
    build_product_filter,
    build_search_conditions,
    resolve_pagination,
    resolve_sort,
)


def _sql(condition) -> str:
    return str(condition.compile(dialect=sqlite.dialect())).lower()


def test_no_filters_only_excludes_deleted():
    conditions = build_search_conditions(ProductQuery())
    assert len(conditions) == 1
    assert "deleted_at is null" in _sql(conditions[0])


def test_search_and_low_stock_are_separate_groups():
    conditions = build_search_conditions(ProductQuery(search="bolt", low_stock=True))
    assert len(conditions) == 3
    search_sql = _sql(conditions[1])
    low_stock_sql = _sql(conditions[2])
    assert "name" in search_sql and "description" in search_sql
    assert "min_stock" in low_stock_sql
    assert "min_stock" not in search_sql


def test_blank_text_filters_are_ignored():
    conditions = build_search_conditions(
        ProductQuery(search="   ", category="", brand=" ")
    )
    assert len(conditions) == 1


def test_is_active_false_is_applied():
    conditions = build_search_conditions(ProductQuery(is_active=False))
    assert len(conditions) == 2
    assert "is_active" in _sql(conditions[1])


def test_resolve_sort_defaults():
    assert resolve_sort(None, None) == ("created_at", "DESC")
    assert resolve_sort("password", "sideways") == ("created_at", "DESC")


def test_resolve_sort_accepts_any_case_order():
    assert resolve_sort("price", "asc") == ("price", "ASC")
    assert resolve_sort("name", "Desc") == ("name", "DESC")


def test_resolve_pagination():
    assert resolve_pagination(None, None) == (1, 10, 0)
    assert resolve_pagination(3, 20) == (3, 20, 40)
    assert resolve_pagination(2, 500) == (2, MAX_LIMIT, MAX_LIMIT)


def test_build_product_filter_carries_page_window():
    product_filter = build_product_filter(ProductQuery(page=4, limit=25, sort_by="stock"))
    assert product_filter.page == 4
    assert product_filter.limit == 25
    assert product_filter.offset == 75
    assert len(product_filter.order_by) == 2
