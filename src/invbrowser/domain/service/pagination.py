"""Domain service: Pagination Windower.

Given a result size, a page size and the current page, computes the slice
of the result shown on that page and the bounded window of page numbers
offered as jump targets, with ellipsis markers for what lies outside.

The windower assumes ``current_page`` is already within
``[1, max(1, total_pages)]``. Clamping out-of-range requests is the
caller's job (see ``InventoryView.go_to_page``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_WINDOW_SIZE = 5


@dataclass(frozen=True)
class PageWindow:
    """Slice bounds ``[start, end)`` plus the page-number controls."""

    start: int
    end: int
    current_page: int
    total_pages: int
    visible_pages: list[int]
    show_leading_ellipsis: bool
    show_trailing_ellipsis: bool

    @property
    def needs_controls(self) -> bool:
        """False when everything fits on one page; render no controls."""
        return self.total_pages > 1

    @property
    def first_page_jump(self) -> int | None:
        """Page 1, offered explicitly when it falls outside the window."""
        return 1 if self.show_leading_ellipsis else None

    @property
    def last_page_jump(self) -> int | None:
        return self.total_pages if self.show_trailing_ellipsis else None

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def total_pages_for(total_items: int, items_per_page: int) -> int:
    return math.ceil(total_items / items_per_page) if total_items > 0 else 0


def page_window(current_page: int, total_pages: int, window_size: int) -> list[int]:
    """Page numbers around *current_page*, clamped to ``[1, total_pages]``."""
    if total_pages <= window_size:
        return list(range(1, total_pages + 1))

    before = window_size // 2
    after = math.ceil(window_size / 2) - 1

    if current_page <= before:
        first, last = 1, window_size
    elif current_page + after >= total_pages:
        first, last = total_pages - window_size + 1, total_pages
    else:
        first, last = current_page - before, current_page + after
    return list(range(first, last + 1))


def paginate(
    total_items: int,
    items_per_page: int,
    current_page: int,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> PageWindow:
    total_pages = total_pages_for(total_items, items_per_page)

    if total_pages <= 1:
        return PageWindow(
            start=0,
            end=total_items,
            current_page=current_page,
            total_pages=total_pages,
            visible_pages=list(range(1, total_pages + 1)),
            show_leading_ellipsis=False,
            show_trailing_ellipsis=False,
        )

    start = min(max((current_page - 1) * items_per_page, 0), total_items)
    end = min(max(current_page * items_per_page, 0), total_items)
    pages = page_window(current_page, total_pages, window_size)

    return PageWindow(
        start=start,
        end=end,
        current_page=current_page,
        total_pages=total_pages,
        visible_pages=pages,
        show_leading_ellipsis=pages[0] > 1,
        show_trailing_ellipsis=pages[-1] < total_pages,
    )
