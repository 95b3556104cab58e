"""Pagination helpers for document listings"""

import math
from dataclasses import dataclass


DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int
    offset: int


def normalize_pagination(page: int, limit: int) -> PaginationParams:
    """Clamp page/limit into valid ranges and compute the offset

    Example:
        >>> normalize_pagination(0, 500)
        PaginationParams(page=1, limit=100, offset=0)
    """
    if page < 1:
        page = 1
    if limit < 1:
        limit = DEFAULT_PAGE_SIZE
    if limit > MAX_PAGE_SIZE:
        limit = MAX_PAGE_SIZE

    return PaginationParams(page=page, limit=limit, offset=(page - 1) * limit)


def total_pages(total_count: int, limit: int) -> int:
    """Number of pages for a total count (at least 1)."""
    pages = math.ceil(total_count / limit) if limit > 0 else 1
    return max(pages, 1)
