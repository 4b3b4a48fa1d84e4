"""
Pagination dependency.

Derives limit/offset from ?page=&limit=. Both values are parsed leniently:
anything that is not a positive integer falls back to the default, so
?page=0 and ?page=abc both mean page 1. Limits above PAGINATION_MAX_LIMIT
are rejected rather than silently capped, as are pages whose offset
would not fit in a database integer.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Query

from app.core.config import settings
from app.core.errors import AppError

DEFAULT_PAGE = 1

# LIMIT/OFFSET are bound as signed 64-bit integers
MAX_SQL_INT = 2**63 - 1


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_positive_int(value: Optional[str], default: int) -> int:
    """Parse a query value, returning default for missing, non-numeric or non-positive input."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def build_pagination(page: Optional[str] = None, limit: Optional[str] = None) -> Pagination:
    pagination = Pagination(
        page=parse_positive_int(page, DEFAULT_PAGE),
        limit=parse_positive_int(limit, settings.PAGINATION_DEFAULT_LIMIT),
    )
    max_limit = settings.PAGINATION_MAX_LIMIT
    if max_limit is not None and pagination.limit > max_limit:
        raise AppError(f"limit must not exceed {max_limit}", 400)
    if pagination.limit > MAX_SQL_INT:
        raise AppError("limit is out of range", 400)
    if pagination.offset + pagination.limit > MAX_SQL_INT:
        raise AppError("page is out of range", 400)
    return pagination


def get_pagination(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Records per page"),
) -> Pagination:
    """FastAPI dependency: Depends(get_pagination)."""
    return build_pagination(page, limit)
