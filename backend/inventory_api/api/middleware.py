"""HTTP middleware: access logging and API version header."""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from inventory_api.core.config import get_settings

logger = logging.getLogger("inventory_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and stamp the API version on the response."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        client = request.client.host if request.client else "unknown"
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"{client} {request.method} {request.url.path} failed after {elapsed_ms:.1f}ms"
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{client} {request.method} {request.url.path} "
            f"{response.status_code} {elapsed_ms:.1f}ms"
        )
        response.headers["X-API-Version"] = get_settings().api_version
        return response
