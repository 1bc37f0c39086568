"""JSON client for the PDF repository REST backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode

if TYPE_CHECKING:
    from pdf_admin.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class AdminApiError(Exception):
    """Raised when the backend returns a non-2xx response or is unreachable.

    ``status_code`` is 0 when no HTTP response was received.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class AdminAuthError(AdminApiError):
    """Raised on 401 responses; the stored token has been discarded."""


def _error_detail(raw: bytes, fallback: str) -> str:
    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return fallback
    if isinstance(body, Mapping):
        for key in ("message", "error"):
            if isinstance(body.get(key), str):
                return str(body[key])
    return fallback


class AdminApiClient:
    """Authenticated JSON client for the admin REST API."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: API root, e.g. "https://host/api" (no trailing slash).
            token: Admin bearer token, if already issued.
            timeout: Socket timeout per request in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._token = token or None
        self._timeout = timeout

    @property
    def token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        self._token = token or None

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        """Perform an API request and decode the JSON response.

        Args:
            method: HTTP method.
            path: Path relative to the base URL (must start with '/').
            params: Query parameters; None values are omitted.
            body: JSON-serializable request body.

        Returns:
            Parsed JSON body, or None for an empty response.

        Raises:
            AdminAuthError: On 401; the token is cleared first.
            AdminApiError: On any other non-2xx status or a network failure.
        """
        url = f"{self._base_url}{path}"
        if params:
            query = {k: v for k, v in params.items() if v is not None}
            if query:
                url = f"{url}?{urlencode(query)}"

        headers = {"Accept": "application/json"}
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        req = urllib_request.Request(url, data=data, headers=headers, method=method)
        try:
            with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except HTTPError as exc:
            detail = _error_detail(exc.read(), str(exc.reason))
            if exc.code == 401:
                logger.warning("[request] unauthorized; discarding token; path:%s", path)
                self._token = None
                raise AdminAuthError(exc.code, detail) from exc
            logger.error(
                "[request] API request failed; method:%s;path:%s;status:%d",
                method,
                path,
                exc.code,
            )
            raise AdminApiError(exc.code, detail) from exc
        except URLError as exc:
            logger.error("[request] API unreachable; method:%s;path:%s", method, path)
            raise AdminApiError(0, str(exc.reason)) from exc

        if not raw:
            return None
        return json.loads(raw)

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> Any:
        return self.request("POST", path, body=body if body is not None else {})

    def put(self, path: str, body: Any) -> Any:
        return self.request("PUT", path, body=body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)


def api_client_from_config(config: AppConfig) -> AdminApiClient:
    """Construct an AdminApiClient from application configuration."""
    return AdminApiClient(base_url=config.api_base_url, token=config.api_token or None)
