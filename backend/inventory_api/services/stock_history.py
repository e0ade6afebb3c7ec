"""Best-effort stock movement log kept in Redis lists."""

from __future__ import annotations

import json
import logging
from uuid import UUID

from redis.exceptions import RedisError

from inventory_api.api.schemas.product import StockMovement
from inventory_api.core.config import get_settings
from inventory_api.utils.redis_client import get_redis_client

logger = logging.getLogger(__name__)

HISTORY_PREFIX = "products:stock-history:"


def _key(product_id: UUID | str) -> str:
    return f"{HISTORY_PREFIX}{product_id}"


class StockHistoryStore:
    """Append/read stock movements; Redis outages never fail a request."""

    def __init__(self, client, limit: int = 100, enabled: bool = True):
        self.client = client
        self.limit = limit
        self.enabled = enabled

    def record(self, product_id: UUID | str, movement: StockMovement) -> None:
        if not self.enabled:
            return
        key = _key(product_id)
        try:
            self.client.lpush(key, movement.model_dump_json())
            self.client.ltrim(key, 0, self.limit - 1)
        except RedisError as e:
            logger.warning(f"Could not record stock movement for {product_id}: {e}")

    def fetch(self, product_id: UUID | str) -> list[StockMovement]:
        """Return movements newest first."""
        if not self.enabled:
            return []
        try:
            raw_items = self.client.lrange(_key(product_id), 0, self.limit - 1)
        except RedisError as e:
            logger.warning(f"Could not read stock history for {product_id}: {e}")
            return []

        events: list[StockMovement] = []
        for raw in raw_items:
            try:
                events.append(StockMovement.model_validate(json.loads(raw)))
            except ValueError:
                logger.warning(f"Skipping malformed stock history entry for {product_id}")
        return events


def get_stock_history() -> StockHistoryStore:
    """FastAPI dependency returning the configured store."""
    settings = get_settings()
    return StockHistoryStore(
        get_redis_client(),
        limit=settings.stock_history_limit,
        enabled=settings.stock_history_enabled,
    )
