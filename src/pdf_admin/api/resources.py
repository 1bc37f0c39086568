"""Typed wrappers over the admin REST endpoints, one class per screen."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

from pdf_admin.api.client import AdminApiClient
from pdf_admin.catalog import (
    DEFAULT_TAG_COLOR,
    FALLBACK_CATEGORY,
    TAG_BULK_ACTIONS,
    USER_ROLES,
    is_filter_all,
    validate_tag,
)

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _filters(**values: Any) -> dict[str, Any]:
    """Drop unset and "All" filters from list query parameters."""
    return {key: value for key, value in values.items() if not is_filter_all(value)}


def split_tags(tags: str | Sequence[str] | None) -> list[str]:
    """Turn a comma-separated tag string (or a list) into clean tag names."""
    if tags is None:
        return []
    parts = tags.split(",") if isinstance(tags, str) else list(tags)
    return [part.strip() for part in parts if part and part.strip()]


class AuthAPI:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def login(self, username: str, password: str) -> dict[str, Any]:
        """Log in as an administrator and keep the issued token on the client."""
        response = self._client.post(
            "/auth/admin-login", {"username": username, "password": password}
        )
        token = response.get("token") if isinstance(response, dict) else None
        if token:
            self._client.set_token(token)
            logger.info("[login] admin session established; username:%s", username)
        else:
            logger.warning("[login] login response carried no token; username:%s", username)
        return response or {}

    def logout(self) -> None:
        try:
            self._client.post("/auth/admin-logout")
        finally:
            self._client.set_token(None)

    def me(self) -> dict[str, Any]:
        return self._client.get("/auth/admin/me")


class FolderAPI:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def list_folders(self) -> list[dict[str, Any]]:
        return self._client.get("/folders") or []

    def list_drive_folders(self) -> list[dict[str, Any]]:
        """Flat drive folder listing (``{id, name, parent}`` records)."""
        return self._client.get("/folders/gdrive") or []

    def base_folder_id(self) -> str | None:
        response = self._client.get("/folders/gdrive-base-id") or {}
        return response.get("baseFolderId")

    def pdfs_in_folder(self, folder_id: str) -> list[dict[str, Any]]:
        return self._client.get(f"/folders/{_segment(folder_id)}/pdfs") or []

    def update_folder(
        self,
        folder_id: str,
        name: str,
        description: str = "",
        department: str = "",
        year: int | str | None = None,
        tags: str | Sequence[str] | None = None,
    ) -> dict[str, Any]:
        """Update folder metadata from the edit form values."""
        payload: dict[str, Any] = {
            "name": name.strip(),
            "description": description.strip(),
            "department": department,
            "tags": split_tags(tags),
        }
        if year not in (None, ""):
            payload["year"] = int(year)  # type: ignore[arg-type]
        return self._client.put(f"/folders/{_segment(folder_id)}", payload)

    def sync_from_drive(self) -> dict[str, Any]:
        return self._client.post("/folders/gdrive/cache") or {}


class PdfAPI:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def list(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        department: str | None = None,
        year: int | str | None = None,
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit}
        params.update(_filters(search=search, department=department, year=year))
        return self._client.get("/pdfs", params) or {}

    def update(self, pdf_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._client.put(f"/admin/pdfs/{_segment(pdf_id)}", data)

    def delete(self, pdf_id: str) -> None:
        self._client.delete(f"/admin/pdfs/{_segment(pdf_id)}")
        logger.info("[delete] deleted pdf; pdf_id:%s", pdf_id)

    def analytics(self) -> dict[str, Any]:
        return self._client.get("/admin/analytics") or {}

    def cache_drive_pdfs(self) -> dict[str, Any]:
        return self._client.post("/pdfs/gdrive/cache") or {}

    def fix_orphaned_uploaders(self) -> dict[str, Any]:
        return self._client.post("/admin/fix-orphaned-uploaders") or {}


class UserAPI:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def list(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        role: str | None = None,
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit}
        params.update(_filters(search=search, role=role))
        return self._client.get("/admin/users", params) or {}

    def update(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._client.put(f"/admin/users/{_segment(user_id)}", data)

    def toggle_role(self, user_id: str, current_role: str) -> str:
        """Flip a user between admin and regular client; returns the new role."""
        new_role = USER_ROLES[0] if current_role == "admin" else "admin"
        self.update(user_id, {"role": new_role})
        logger.info("[toggle_role] user role changed; user_id:%s;role:%s", user_id, new_role)
        return new_role

    def delete(self, user_id: str) -> None:
        self._client.delete(f"/admin/users/{_segment(user_id)}")
        logger.info("[delete] deleted user; user_id:%s", user_id)

    def sync_sheets(self) -> dict[str, Any]:
        return self._client.post("/admin/sync-sheets") or {}

    def sheets_status(self) -> dict[str, Any]:
        return self._client.get("/admin/sheets-status") or {}


class AccessTagAPI:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def list(self, **filters: Any) -> dict[str, Any]:
        return self._client.get("/access-tags", _filters(**filters)) or {}

    def stats(self) -> dict[str, Any]:
        return self._client.get("/access-tags/stats") or {}

    def available(self, **filters: Any) -> dict[str, Any]:
        return self._client.get("/access-tags/available", _filters(**filters)) or {}

    def by_category(self, category: str) -> dict[str, Any]:
        return self._client.get(f"/access-tags/category/{_segment(category)}") or {}

    def popular(self, limit: int = 10) -> dict[str, Any]:
        return self._client.get("/access-tags/popular", {"limit": limit}) or {}

    def create(
        self,
        name: str,
        category: str = FALLBACK_CATEGORY,
        color: str = DEFAULT_TAG_COLOR,
        description: str = "",
    ) -> dict[str, Any]:
        validate_tag(name, category, color, description)
        return self._client.post(
            "/access-tags",
            {
                "name": name.strip(),
                "category": category,
                "color": color,
                "description": description.strip(),
            },
        )

    def update(
        self,
        tag_id: str,
        name: str,
        category: str = FALLBACK_CATEGORY,
        color: str = DEFAULT_TAG_COLOR,
        description: str = "",
        is_active: bool | None = None,
    ) -> dict[str, Any]:
        validate_tag(name, category, color, description)
        payload: dict[str, Any] = {
            "name": name.strip(),
            "category": category,
            "color": color,
            "description": description.strip(),
        }
        if is_active is not None:
            payload["isActive"] = is_active
        return self._client.put(f"/access-tags/{_segment(tag_id)}", payload)

    def delete(self, tag_id: str) -> None:
        self._client.delete(f"/access-tags/{_segment(tag_id)}")

    def bulk(self, action: str, tag_ids: Sequence[str]) -> dict[str, Any]:
        """Apply ``activate``, ``deactivate`` or ``delete`` to several tags.

        Raises:
            ValueError: For an unknown action or an empty selection.
        """
        if action not in TAG_BULK_ACTIONS:
            raise ValueError(f"Unknown bulk action: {action}")
        if not tag_ids:
            raise ValueError("No tags selected")
        return self._client.post("/access-tags/bulk", {"action": action, "tagIds": list(tag_ids)})
