"""Liveness and readiness endpoints."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from inventory_api.api.schemas.envelope import ApiResponse, create_response
from inventory_api.core.config import get_settings
from inventory_api.db.session import engine
from inventory_api.utils.redis_client import get_redis_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

_STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - _STARTED_AT, 3)


@router.get(
    "",
    summary="Liveness probe",
    response_model=ApiResponse[dict[str, Any]],
    response_model_exclude_unset=True,
)
def health() -> ApiResponse:
    """Indicates the API process is up; touches no dependencies."""
    settings = get_settings()
    return create_response(
        "API is running",
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.api_version,
            "environment": settings.environment,
            "uptime": uptime_seconds(),
        },
    )


def _check_database() -> dict[str, str]:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return {"status": "unhealthy", "message": f"Database connection failed: {e}"}
    return {"status": "healthy", "message": "Database connection successful"}


def _check_redis() -> dict[str, str]:
    try:
        get_redis_client().ping()
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return {"status": "unhealthy", "message": f"Redis connection failed: {e}"}
    return {"status": "healthy", "message": "Redis connection successful"}


@router.get("/ready", summary="Readiness probe")
def ready() -> JSONResponse:
    """Check the database and Redis.

    Only the database gates readiness; the stock movement log degrades
    gracefully without Redis, so a Redis outage reports ``degraded``.
    """
    checks = {"database": _check_database(), "redis": _check_redis()}

    if checks["database"]["status"] != "healthy":
        overall, status_code = "unhealthy", status.HTTP_503_SERVICE_UNAVAILABLE
    elif checks["redis"]["status"] != "healthy":
        overall, status_code = "degraded", status.HTTP_200_OK
    else:
        overall, status_code = "ok", status.HTTP_200_OK

    body = create_response(
        f"Service is {overall}",
        {"status": overall, "checks": checks},
        success=status_code == status.HTTP_200_OK,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_unset=True))
