from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from ..core.constants import MAX_PAGE_SIZE
from ..core.exceptions import ValidationError

T = TypeVar("T")


def validate_page(page: int, page_size: int) -> None:
    errors: list[str] = []
    if page <= 0:
        errors.append("Page must be greater than zero")
    if page_size <= 0:
        errors.append("Page size must be greater than zero")
    elif page_size > MAX_PAGE_SIZE:
        errors.append(f"Page size must be at most {MAX_PAGE_SIZE}")
    if errors:
        raise ValidationError("Invalid pagination parameters", errors)


def offset_for(page: int, page_size: int) -> int:
    return (page - 1) * page_size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the metadata the response envelope carries."""

    items: list[T]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @classmethod
    def slice(cls, items: Sequence[T], page: int, page_size: int) -> "Page[T]":
        """Paginate an already materialized sequence."""
        start = offset_for(page, page_size)
        return cls(items=list(items[start:start + page_size]), total_count=len(items), page=page, page_size=page_size)

    def meta(self) -> dict:
        return {
            "totalCount": self.total_count,
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
        }
