"""
Pagination result shared by every list endpoint.
"""
import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T]
    total_items: int
    current_page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.limit)


def page_offset(page: int, limit: int) -> int:
    """Row offset of a 1-based *page* of size *limit*."""
    return (page - 1) * limit
