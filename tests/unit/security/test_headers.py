"""Unit tests for security/headers.py — PDF security header rules."""

from datetime import UTC, datetime

import azure.functions as func

from pdf_admin.security.headers import (
    no_cache_headers,
    pdf_security_headers,
    secure_headers_for,
    secure_pdf_response,
)


class TestPdfSecurityHeaders:
    def test_applies_to_pdf_paths(self) -> None:
        headers = pdf_security_headers("/api/pdfs")
        assert headers["X-Frame-Options"] == "DENY"
        assert headers["X-Content-Type-Options"] == "nosniff"
        assert headers["Referrer-Policy"] == "no-referrer"
        assert "default-src 'none'" in headers["Content-Security-Policy"]

    def test_applies_to_pdf_file_names(self) -> None:
        assert pdf_security_headers("/files/notes.pdf")

    def test_skips_other_paths(self) -> None:
        assert pdf_security_headers("/api/users") == {}


class TestNoCacheHeaders:
    def test_view_path_gets_last_modified(self) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

        headers = no_cache_headers("/api/pdfs/p1/view", now)

        assert headers["Cache-Control"].endswith("max-age=0")
        assert headers["Last-Modified"] == "Sun, 01 Mar 2026 12:00:00 GMT"

    def test_skips_other_paths(self) -> None:
        assert no_cache_headers("/api/pdfs") == {}

    def test_stream_rules_win_when_combined(self) -> None:
        headers = secure_headers_for("/api/pdfs/p1/stream")
        assert headers["Cache-Control"].endswith("max-age=0")
        assert headers["X-Frame-Options"] == "DENY"


class TestSecurePdfResponse:
    def _request(self, url: str) -> func.HttpRequest:
        return func.HttpRequest(method="GET", url=url, body=b"")

    def test_decorator_sets_headers_on_pdf_route(self) -> None:
        @secure_pdf_response
        def handler(req: func.HttpRequest) -> func.HttpResponse:
            return func.HttpResponse("{}", status_code=200, mimetype="application/json")

        response = handler(self._request("https://fn.example.net/api/folders/f1/pdfs"))

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Pragma"] == "no-cache"

    def test_decorator_leaves_other_routes_alone(self) -> None:
        @secure_pdf_response
        def handler(req: func.HttpRequest) -> func.HttpResponse:
            return func.HttpResponse("{}", status_code=200)

        response = handler(self._request("https://fn.example.net/api/users"))

        assert "X-Frame-Options" not in response.headers
