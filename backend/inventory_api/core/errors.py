"""Domain errors raised by repositories and services.

These are not HTTP-aware; ``inventory_api.api.errors`` maps them onto the
response envelope using ``status_code``.
"""

from typing import Optional


class InventoryError(Exception):
    """Base class for all inventory errors."""

    status_code: int = 500

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class BadRequestError(InventoryError):
    """Raised when a request is well-formed but semantically unusable."""

    status_code = 400


class ProductNotFoundError(InventoryError):
    """Raised when a product with the given ID does not exist or is deleted."""

    status_code = 404


class DuplicateSkuError(InventoryError):
    """Raised when a SKU is already used by another live product."""

    status_code = 409

    def __init__(self, sku: str, original_exception: Optional[Exception] = None):
        super().__init__(f"Product with SKU '{sku}' already exists", original_exception)
        self.sku = sku


class ProductNotDeletedError(BadRequestError):
    """Raised when restoring a product that was never deleted."""


class InsufficientStockError(BadRequestError):
    """Raised when a subtraction would take stock below zero."""

    def __init__(self, current_stock: int, requested: int):
        super().__init__(
            f"Insufficient stock. Current stock: {current_stock}, "
            f"requested quantity: {requested}"
        )
        self.current_stock = current_stock
        self.requested = requested
