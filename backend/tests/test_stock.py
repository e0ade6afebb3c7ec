import pytest

from inventory_api.core.errors import BadRequestError, InsufficientStockError
from inventory_api.services.stock import apply_stock_change


def test_add():
    assert apply_stock_change(5, 3, "add") == 8


def test_subtract_to_zero():
    assert apply_stock_change(5, 5, "subtract") == 0


def test_subtract_more_than_on_hand():
    with pytest.raises(InsufficientStockError) as exc_info:
        apply_stock_change(2, 3, "subtract")
    assert exc_info.value.current_stock == 2
    assert exc_info.value.requested == 3
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("quantity", [0, -4])
def test_non_positive_quantity(quantity):
    with pytest.raises(BadRequestError, match="greater than 0"):
        apply_stock_change(10, quantity, "add")


def test_unknown_operation():
    with pytest.raises(BadRequestError):
        apply_stock_change(10, 1, "multiply")


def test_add_beyond_column_range():
    with pytest.raises(BadRequestError, match="would exceed"):
        apply_stock_change(2_147_483_647, 1, "add")
    assert apply_stock_change(2_147_483_646, 1, "add") == 2_147_483_647
