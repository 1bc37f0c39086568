"""Pagination window for the paged user and PDF lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ELLIPSIS = "ellipsis"
DEFAULT_MAX_VISIBLE = 5

PageMarker = int | str


def compute_window(
    current: int, total: int, max_visible: int = DEFAULT_MAX_VISIBLE
) -> list[PageMarker]:
    """Compute the page buttons to show for ``current`` of ``total`` pages.

    A run of ``max_visible`` pages is centred on the current page and
    shifted to stay inside ``[1, total]``. The first and last pages are
    always shown; a gap of more than one page next to either of them
    collapses to ``ELLIPSIS``, a gap of exactly one page shows that page.

    Args:
        current: Current page (1-based); clamped to ``[1, total]``.
        total: Total number of pages.
        max_visible: Size of the sliding window (at least 1).

    Returns:
        Ordered page numbers and ``ELLIPSIS`` markers; empty when total < 1.
    """
    if total < 1:
        return []
    max_visible = max(1, max_visible)
    current = min(max(current, 1), total)

    if total <= max_visible:
        return list(range(1, total + 1))

    start = max(1, current - max_visible // 2)
    end = min(total, start + max_visible - 1)
    start = max(1, end - max_visible + 1)

    pages: list[PageMarker] = []
    if start > 1:
        pages.append(1)
        if start == 3:
            pages.append(2)
        elif start > 3:
            pages.append(ELLIPSIS)

    pages.extend(range(start, end + 1))

    if end < total:
        if end == total - 2:
            pages.append(total - 1)
        elif end < total - 2:
            pages.append(ELLIPSIS)
        pages.append(total)
    return pages


@dataclass(frozen=True)
class PageWindow:
    """Page markers plus the navigation state of a paged list."""

    current_page: int
    total_pages: int
    pages: list[PageMarker] = field(default_factory=list)

    @classmethod
    def build(cls, current: int, total: int, max_visible: int = DEFAULT_MAX_VISIBLE) -> PageWindow:
        total = max(total, 0)
        current = min(max(current, 1), max(total, 1))
        return cls(
            current_page=current,
            total_pages=total,
            pages=compute_window(current, total, max_visible),
        )

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "pages": list(self.pages),
            "hasPrevious": self.has_previous,
            "hasNext": self.has_next,
        }
