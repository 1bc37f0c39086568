"""OneDrive folder listing through Microsoft Graph (app-only MSAL auth)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode

import msal

if TYPE_CHECKING:
    from pdf_admin.config import AppConfig

logger = logging.getLogger(__name__)

GRAPH_ROOT = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
LOGIN_HOST = "https://login.microsoftonline.com"

# Children listing: only the fields the normalizer reads, largest page Graph allows.
CHILD_FIELDS = "id,name,folder,parentReference"
CHILD_PAGE_SIZE = 200
NEXT_LINK = "@odata.nextLink"


class OneDriveError(Exception):
    """A OneDrive listing call failed.

    ``status_code`` is 401 when no app token could be obtained and 0 when
    Graph was unreachable.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"OneDrive error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class OneDriveClient:
    """Lists the sub-folders of one user's OneDrive."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        tenant_id: str,
        drive_user: str,
        app: Any = None,
    ) -> None:
        self._drive_user = drive_user
        self._app = app or msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=f"{LOGIN_HOST}/{tenant_id}",
        )

    @classmethod
    def from_config(cls, config: AppConfig) -> OneDriveClient:
        return cls(
            client_id=config.graph_client_id,
            client_secret=config.graph_client_secret,
            tenant_id=config.graph_tenant_id,
            drive_user=config.graph_drive_user,
        )

    def _bearer(self) -> str:
        # msal keeps the app token cached until it is about to expire.
        result = self._app.acquire_token_for_client(scopes=[GRAPH_SCOPE]) or {}
        token = result.get("access_token")
        if not token:
            error = result.get("error", "unknown_error")
            logger.error("[_bearer] app token refused; error:%s", error)
            raise OneDriveError(401, f"{error}: {result.get('error_description', '')}".strip())
        return str(token)

    def children_url(self, folder_id: str) -> str:
        query = urlencode({"$select": CHILD_FIELDS, "$top": CHILD_PAGE_SIZE})
        return (
            f"{GRAPH_ROOT}/users/{quote(self._drive_user, safe='@')}"
            f"/drive/items/{quote(folder_id, safe='')}/children?{query}"
        )

    def _fetch_page(self, url: str) -> dict[str, Any]:
        req = urllib_request.Request(
            url,
            headers={"Authorization": f"Bearer {self._bearer()}", "Accept": "application/json"},
            method="GET",
        )
        try:
            with urllib_request.urlopen(req) as resp:
                return json.loads(resp.read())  # type: ignore[no-any-return]
        except HTTPError as exc:
            try:
                message = json.loads(exc.read())["error"]["message"]
            except (ValueError, KeyError, TypeError):
                message = str(exc.reason)
            raise OneDriveError(exc.code, message) from exc
        except URLError as exc:
            raise OneDriveError(0, str(exc.reason)) from exc

    def list_child_folders(self, folder_id: str) -> list[dict[str, Any]]:
        """Return the direct sub-folders of ``folder_id``; files are skipped.

        Follows ``@odata.nextLink`` until every page has been read.

        Raises:
            OneDriveError: If a token cannot be obtained or Graph rejects a page.
        """
        folders: list[dict[str, Any]] = []
        url: str | None = self.children_url(folder_id)
        pages = 0
        while url is not None:
            page = self._fetch_page(url)
            pages += 1
            folders.extend(item for item in page.get("value", []) if "folder" in item)
            url = page.get(NEXT_LINK)
        logger.info(
            "[list_child_folders] listed sub-folders; folder_id:%s;pages:%d;folder_count:%d",
            folder_id,
            pages,
            len(folders),
        )
        return folders
