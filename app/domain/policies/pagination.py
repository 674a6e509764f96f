"""PaginationPolicy — page slicing and page metadata."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    has_more: bool = False
    total_count: int = 0


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def total_pages_for(total_count: int, limit: int) -> int:
    return math.ceil(total_count / limit) if total_count > 0 else 0


def build_page(items: list[T], total_count: int, page: int, limit: int) -> Page[T]:
    """Wrap the items of one already-windowed page with its metadata."""
    total_pages = total_pages_for(total_count, limit)
    return Page(
        items=list(items) if page <= total_pages else [],
        page=page,
        total_pages=total_pages,
        has_more=page < total_pages,
        total_count=total_count,
    )


def paginate(sorted_items: list[T], total_count: int, page: int, limit: int) -> Page[T]:
    """Slice a fully sorted candidate list down to one page.

    A page past the end yields empty items with accurate metadata.
    """
    start = page_offset(page, limit)
    return build_page(sorted_items[start:start + limit], total_count, page, limit)
