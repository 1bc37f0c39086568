"""Security headers for PDF responses served through the function app."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import format_datetime
from urllib.parse import urlparse

import azure.functions as func

logger = logging.getLogger(__name__)

PDF_SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-Download-Options": "noopen",
    "Cache-Control": "private, no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Content-Security-Policy": (
        "default-src 'none'; object-src 'none'; script-src 'none'; style-src 'unsafe-inline';"
    ),
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "document-domain=(), camera=(), microphone=(), geolocation=()",
}

NO_CACHE_HEADERS: dict[str, str] = {
    "Cache-Control": "private, no-cache, no-store, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def is_pdf_path(path: str) -> bool:
    return "/pdf" in path or ".pdf" in path


def is_stream_path(path: str) -> bool:
    return "/view" in path or "/stream" in path


def pdf_security_headers(path: str) -> dict[str, str]:
    """Headers that block framing, sniffing and caching of PDF content."""
    return dict(PDF_SECURITY_HEADERS) if is_pdf_path(path) else {}


def no_cache_headers(path: str, now: datetime | None = None) -> dict[str, str]:
    """Cache-busting headers for PDF view/stream paths."""
    if not is_stream_path(path):
        return {}
    moment = now or datetime.now(tz=UTC)
    headers = dict(NO_CACHE_HEADERS)
    headers["Last-Modified"] = format_datetime(moment.astimezone(UTC), usegmt=True)
    return headers


def secure_headers_for(path: str, now: datetime | None = None) -> dict[str, str]:
    """Combined header set for ``path``; view/stream rules win on conflicts."""
    headers = pdf_security_headers(path)
    headers.update(no_cache_headers(path, now))
    return headers


def secure_pdf_response(
    handler: Callable[[func.HttpRequest], func.HttpResponse],
) -> Callable[[func.HttpRequest], func.HttpResponse]:
    """Decorate an HTTP handler so PDF responses carry the security headers."""

    @functools.wraps(handler)
    def wrapper(req: func.HttpRequest) -> func.HttpResponse:
        response = handler(req)
        path = urlparse(req.url).path
        headers = secure_headers_for(path)
        for name, value in headers.items():
            response.headers[name] = value
        if headers:
            logger.debug("[secure_pdf_response] applied security headers; path:%s", path)
        return response

    return wrapper
