"""Map domain, validation and database errors onto the response envelope."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory_api.api.schemas.envelope import FieldError, create_response
from inventory_api.core.config import get_settings
from inventory_api.core.errors import InsufficientStockError, InventoryError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def error_response(
    status_code: int,
    message: str,
    errors: list[FieldError] | None = None,
) -> JSONResponse:
    body = create_response(message, success=False, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_unset=True)),
    )


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def validation_field_errors(exc: RequestValidationError) -> list[FieldError]:
    errors = []
    for error in exc.errors():
        value = None if error.get("type") == "missing" else error.get("input")
        errors.append(
            FieldError(
                field=_field_name(tuple(error.get("loc", ()))),
                message=error.get("msg", "Invalid value"),
                value=jsonable_encoder(value),
            )
        )
    return errors


async def handle_inventory_error(request: Request, exc: InventoryError) -> JSONResponse:
    logger.warning(
        f"{request.method} {request.url.path} refused ({exc.status_code}): {exc.message}"
    )
    errors = None
    if isinstance(exc, InsufficientStockError):
        errors = [
            FieldError(
                field="quantity",
                message=f"Current stock is {exc.current_stock}",
                value=exc.requested,
            )
        ]
    return error_response(exc.status_code, exc.message, errors)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = validation_field_errors(exc)
    logger.info(
        f"Validation failed for {request.method} {request.url.path}: "
        f"{[e.field for e in errors]}"
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation errors", errors)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    response = error_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return error_response(
        status.HTTP_409_CONFLICT, "The record conflicts with existing data"
    )


async def handle_operational_error(
    request: Request, exc: OperationalError
) -> JSONResponse:
    logger.error(f"Database unavailable: {exc}", exc_info=True)
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE, "Database connection error"
    )


def _internal_error(exc: Exception, message: str) -> JSONResponse:
    errors = None
    if get_settings().is_development:
        errors = [FieldError(field=type(exc).__name__, message=str(exc))]
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message, errors)


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True
    )
    return _internal_error(exc, "Internal database error")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unexpected error on {request.method} {request.url.path}: {exc}", exc_info=True
    )
    return _internal_error(exc, "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, handle_inventory_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(OperationalError, handle_operational_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
