from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .validators import require_int

T = TypeVar("T")


@dataclass(frozen=True)
class Paging:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    page_size: int

    def to_dict(self, serialize: Callable[[T], Any]) -> dict:
        return {
            "data": [serialize(item) for item in self.items],
            "total": self.total,
            "page": self.page,
            "pageSize": self.page_size,
        }


def make_paging(page: Optional[Any] = None, page_size: Optional[Any] = None) -> Paging:
    """Normalize page/limit query values: both at least 1, limit capped."""
    p = 1 if page in (None, "") else require_int(page, "page")
    size = DEFAULT_PAGE_SIZE if page_size in (None, "") else require_int(page_size, "limit")
    return Paging(page=max(1, p), page_size=min(MAX_PAGE_SIZE, max(1, size)))
