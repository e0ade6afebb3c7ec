"""Shared Redis client with TLS handling for hosted providers."""

from __future__ import annotations

import logging
import ssl
from functools import lru_cache
from typing import Any

from redis import Redis
from redis.exceptions import RedisError

from inventory_api.core.config import get_settings

logger = logging.getLogger(__name__)


def create_redis_client(url: str, **kwargs: Any) -> Redis:
    """Create a Redis client, relaxing certificate checks for rediss:// URLs.

    Hosted providers (Upstash and similar) terminate TLS with certificates
    the default CA bundle may not verify.
    """
    if ".upstash.io" in url and url.startswith("redis://"):
        url = url.replace("redis://", "rediss://", 1)

    if url.startswith("rediss://"):
        kwargs.setdefault("ssl_cert_reqs", ssl.CERT_NONE)

    return Redis.from_url(url, **kwargs)


@lru_cache
def get_redis_client() -> Redis:
    """Process-wide client; connections are opened lazily by the pool."""
    settings = get_settings()
    return create_redis_client(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )


def close_redis_client() -> None:
    if get_redis_client.cache_info().currsize == 0:
        return
    try:
        get_redis_client().close()
    except RedisError as e:
        logger.warning(f"Error closing Redis client: {e}")
    get_redis_client.cache_clear()
