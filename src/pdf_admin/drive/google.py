"""Google Drive v3 client for folder listings (service-account auth)."""

from __future__ import annotations

import json
import logging
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
FOLDER_FIELDS = "nextPageToken, files(id, name, parents)"
PAGE_SIZE = 1000


class GoogleDriveError(Exception):
    """Raised when a Drive API call fails."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Google Drive error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class GoogleDriveClient:
    """Read-only Drive client built from service-account credentials."""

    def __init__(self, service: Any) -> None:
        self._service = service

    @classmethod
    def from_credentials_json(cls, credentials_json: str) -> GoogleDriveClient:
        """Build a client from service-account credentials serialized as JSON.

        Raises:
            ValueError: If the credentials are not valid JSON.
        """
        info = json.loads(credentials_json)
        credentials = service_account.Credentials.from_service_account_info(
            info, scopes=DRIVE_SCOPES
        )
        service = build("drive", "v3", credentials=credentials, cache_discovery=False)
        return cls(service)

    def list_subfolders(self, folder_id: str) -> list[dict[str, Any]]:
        """List the direct, non-trashed sub-folders of ``folder_id``.

        Follows nextPageToken until the listing is exhausted.

        Returns:
            Raw Drive file resources (``id``, ``name``, ``parents``).

        Raises:
            GoogleDriveError: If the Drive API rejects the request.
        """
        query = f"'{folder_id}' in parents and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"
        folders: list[dict[str, Any]] = []
        page_token: str | None = None
        while True:
            try:
                result = (
                    self._service.files()
                    .list(
                        q=query,
                        fields=FOLDER_FIELDS,
                        pageSize=PAGE_SIZE,
                        pageToken=page_token,
                        supportsAllDrives=True,
                        includeItemsFromAllDrives=True,
                    )
                    .execute()
                )
            except HttpError as exc:
                status = getattr(exc.resp, "status", 0)
                logger.error(
                    "[list_subfolders] Drive listing failed; folder_id:%s;status:%s",
                    folder_id,
                    status,
                )
                raise GoogleDriveError(int(status or 0), str(exc)) from exc

            folders.extend(result.get("files", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                return folders
