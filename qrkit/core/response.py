"""Standardized JSON response envelope helpers."""


import math
from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from qrkit.core.pagination import PageMeta

T = TypeVar("T")


class SuccessResponse(BaseModel):
    """Bare success envelope: `{ success: true }`"""

    success: bool = True

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


class DataResponse(SuccessResponse, Generic[T]):
    """Single-item response envelope: `{ success: true, data: {...} }`"""

    data: T


class ListResponse(SuccessResponse, Generic[T]):
    """Paginated list response envelope: `{ success: true, data: [...], meta: {...} }`"""

    data: list[T]
    meta: PageMeta


class ItemsResponse(SuccessResponse, Generic[T]):
    """Unpaginated list envelope: `{ success: true, data: [...] }`"""

    data: list[T]


def paginated(items: list, total: int, page: int, limit: int) -> dict:
    """Build a paginated response dict for use with ListResponse."""
    return {
        "success": True,
        "data": items,
        "meta": {
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit) if limit else 1,
        },
    }
