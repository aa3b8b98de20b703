"""Paginated result returned by the record store gateway."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One fixed-size page of records plus the store's total count."""

    items: list[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 100

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages
