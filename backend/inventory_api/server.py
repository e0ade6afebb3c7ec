"""Process entry point: run the API under uvicorn.

uvicorn traps SIGINT/SIGTERM and drives the application lifespan, which
disposes the database pool and closes Redis before the process exits.
"""

import logging
import sys

import uvicorn

from inventory_api.core.config import get_settings
from inventory_api.core.logging import configure_logging

logger = logging.getLogger("inventory_api.server")


def run() -> None:
    settings = get_settings()
    configure_logging()
    logger.info(f"Starting inventory API on {settings.host}:{settings.port}")
    try:
        uvicorn.run(
            "inventory_api.main:app",
            host=settings.host,
            port=settings.port,
            log_config=None,
            log_level=settings.log_level.lower(),
        )
    except Exception:
        logger.critical("Server stopped by an unhandled error", exc_info=True)
        sys.exit(1)
    logger.info("Server stopped")


if __name__ == "__main__":
    run()
