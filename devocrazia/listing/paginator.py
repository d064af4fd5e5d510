from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Literal, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

# Beyond this many pages the navigation collapses into a window with ellipses
MAX_UNCOLLAPSED_PAGES = 7


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: Tuple[T, ...]
    number: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def first_index(self) -> int:
        """1-based position of the first visible item (0 when the page is empty)."""
        if not self.items:
            return 0
        return (self.number - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        if not self.items:
            return 0
        return self.first_index + len(self.items) - 1


@dataclass(frozen=True, slots=True)
class NavItem:
    kind: Literal["page", "ellipsis"]
    number: Optional[int] = None
    active: bool = False


ELLIPSIS = NavItem(kind="ellipsis")


def total_pages_for(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return max(1, math.ceil(total_items / page_size))


def paginate(items: Sequence[T], page_size: int, page: int) -> Page[T]:
    """Slice ``items`` for a 1-based ``page``.

    A page past the end yields an empty slice rather than an error.
    """
    total_pages = total_pages_for(len(items), page_size)
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    start = (page - 1) * page_size
    return Page(
        items=tuple(items[start : start + page_size]),
        number=page,
        page_size=page_size,
        total_items=len(items),
        total_pages=total_pages,
    )


def navigation_window(total_pages: int, current_page: int) -> List[NavItem]:
    """Compact page controls: first, last, and a window around the current page.

    Up to 7 pages are listed in full. Past that the list is
    ``1, [...], current-1, current, current+1, [...], last`` with the window
    clipped to ``[2, last-1]`` and each ellipsis shown only when pages are
    actually hidden on that side.
    """

    def _page(n: int) -> NavItem:
        return NavItem(kind="page", number=n, active=n == current_page)

    if total_pages <= MAX_UNCOLLAPSED_PAGES:
        return [_page(n) for n in range(1, total_pages + 1)]

    items: List[NavItem] = [_page(1)]
    if current_page > 3:
        items.append(ELLIPSIS)
    start = max(2, current_page - 1)
    end = min(total_pages - 1, current_page + 1)
    items.extend(_page(n) for n in range(start, end + 1))
    if current_page < total_pages - 2:
        items.append(ELLIPSIS)
    items.append(_page(total_pages))
    return items


@dataclass(frozen=True, slots=True)
class PaginationModel:
    current_page: int
    total_pages: int
    items: Tuple[NavItem, ...]

    @property
    def visible(self) -> bool:
        return self.total_pages > 1

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def previous_page(self) -> int:
        return max(1, self.current_page - 1)

    def next_page(self) -> int:
        return min(self.total_pages, self.current_page + 1)


def build_pagination(total_pages: int, current_page: int) -> PaginationModel:
    return PaginationModel(
        current_page=current_page,
        total_pages=total_pages,
        items=tuple(navigation_window(total_pages, current_page)),
    )
