"""Database models package."""
from inventory_api.db.models.product import Product

__all__ = ["Product"]
