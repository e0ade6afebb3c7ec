"""Stock mutation rule."""

from __future__ import annotations

from inventory_api.core.errors import BadRequestError, InsufficientStockError
from inventory_api.db.models.product import MAX_STOCK


def apply_stock_change(current_stock: int, quantity: int, operation: str) -> int:
    """Return the stock level after ``operation``.

    Raises:
        BadRequestError: quantity is not positive, the operation is unknown or
            the result would overflow the stock column.
        InsufficientStockError: subtracting more than is on hand.
    """
    if quantity <= 0:
        raise BadRequestError("Quantity must be greater than 0")

    if operation == "add":
        if current_stock + quantity > MAX_STOCK:
            raise BadRequestError(f"Resulting stock would exceed {MAX_STOCK}")
        return current_stock + quantity
    if operation == "subtract":
        if current_stock < quantity:
            raise InsufficientStockError(current_stock, quantity)
        return current_stock - quantity

    raise BadRequestError(f"Unsupported stock operation '{operation}'")
