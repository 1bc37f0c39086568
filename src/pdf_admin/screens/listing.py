"""Paged list screens for users and PDFs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pdf_admin.screens.pagination import DEFAULT_MAX_VISIBLE, PageWindow

if TYPE_CHECKING:
    from pdf_admin.api.resources import PdfAPI, UserAPI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PagedResult:
    """One page of list items plus its pager."""

    items: list[dict[str, Any]] = field(default_factory=list)
    window: PageWindow = field(default_factory=lambda: PageWindow.build(1, 1))

    def to_dict(self, key: str = "items") -> dict[str, Any]:
        return {key: self.items, "pagination": self.window.to_dict()}


def total_pages_of(response: Mapping[str, Any]) -> int:
    """Read the page count from a list response.

    The backend nests it under ``pagination.totalPages``; older responses
    carry ``totalPages`` at the top level. Defaults to a single page.
    """
    pagination = response.get("pagination")
    if isinstance(pagination, Mapping) and pagination.get("totalPages") is not None:
        value = pagination["totalPages"]
    else:
        value = response.get("totalPages", 1)
    try:
        return max(int(value), 1)
    except (TypeError, ValueError):
        return 1


def _paged(
    response: Mapping[str, Any], key: str, page: int, max_visible: int
) -> PagedResult:
    items = response.get(key)
    return PagedResult(
        items=list(items) if isinstance(items, list) else [],
        window=PageWindow.build(page, total_pages_of(response), max_visible),
    )


def fetch_users_page(
    users: UserAPI,
    page: int = 1,
    search: str = "",
    role: str | None = None,
    limit: int = 10,
    max_visible: int = DEFAULT_MAX_VISIBLE,
) -> PagedResult:
    """Fetch one page of the user list with its pagination window."""
    response = users.list(page=page, limit=limit, search=search, role=role)
    result = _paged(response, "users", page, max_visible)
    logger.info(
        "[fetch_users_page] loaded users; page:%d;total_pages:%d;count:%d",
        result.window.current_page,
        result.window.total_pages,
        len(result.items),
    )
    return result


def fetch_pdfs_page(
    pdfs: PdfAPI,
    page: int = 1,
    search: str = "",
    department: str | None = None,
    year: int | str | None = None,
    limit: int = 10,
    max_visible: int = DEFAULT_MAX_VISIBLE,
) -> PagedResult:
    """Fetch one page of the PDF list with its pagination window."""
    response = pdfs.list(page=page, limit=limit, search=search, department=department, year=year)
    result = _paged(response, "pdfs", page, max_visible)
    logger.info(
        "[fetch_pdfs_page] loaded pdfs; page:%d;total_pages:%d;count:%d",
        result.window.current_page,
        result.window.total_pages,
        len(result.items),
    )
    return result
