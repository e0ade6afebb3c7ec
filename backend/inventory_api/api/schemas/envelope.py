"""Uniform response envelope shared by every endpoint."""

from __future__ import annotations

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from inventory_api.api.schemas.report import InventoryStats

T = TypeVar("T")


class FieldError(BaseModel):
    field: str
    message: str
    value: Any = None


class PaginationMeta(BaseModel):
    current_page: int
    per_page: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    next_page: int | None = None
    prev_page: int | None = None

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        has_next = page < total_pages
        has_prev = page > 1
        return cls(
            current_page=page,
            per_page=limit,
            total_items=total,
            total_pages=total_pages,
            has_next_page=has_next,
            has_prev_page=has_prev,
            next_page=page + 1 if has_next else None,
            prev_page=page - 1 if has_prev else None,
        )


class ResponseMeta(BaseModel):
    pagination: PaginationMeta | None = None
    stats: InventoryStats | None = None


class ApiResponse(BaseModel, Generic[T]):
    """Envelope; routes serialize it with ``response_model_exclude_unset``."""

    success: bool
    message: str
    data: T | None = None
    errors: list[FieldError] | None = None
    meta: ResponseMeta | None = None


def create_response(
    message: str,
    data: Any = None,
    *,
    success: bool = True,
    errors: list[FieldError] | None = None,
    meta: ResponseMeta | None = None,
) -> ApiResponse:
    """Build an envelope carrying only the sections that have content."""
    payload: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        payload["data"] = data
    if errors is not None:
        payload["errors"] = errors
    if meta is not None:
        payload["meta"] = meta
    return ApiResponse(**payload)
