"""PagedResult value object."""

import math
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """One page of an ordered query result plus the paging metadata."""

    items: list[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    def map(self, projection: Callable[[T], U]) -> "PagedResult[U]":
        """Project the items, keeping the paging metadata."""
        return PagedResult(
            items=[projection(item) for item in self.items],
            total_count=self.total_count,
            page=self.page,
            page_size=self.page_size,
        )

    def to_dict(self) -> dict:
        return {
            "items": list(self.items),
            "total_count": self.total_count,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "has_previous_page": self.has_previous_page,
            "has_next_page": self.has_next_page,
        }
