"""Folder sources — remote folder listings from the configured drive provider."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from pdf_admin.api.client import AdminApiClient, AdminApiError
from pdf_admin.api.resources import FolderAPI
from pdf_admin.drive.google import GoogleDriveClient, GoogleDriveError
from pdf_admin.drive.graph import OneDriveClient, OneDriveError

if TYPE_CHECKING:
    from pdf_admin.config import AppConfig

logger = logging.getLogger(__name__)


class DriveFetchError(Exception):
    """Raised when the remote folder listing cannot be fetched.

    The message is meant to be shown to the administrator as is.
    """


class FolderSource(ABC):
    """Provider of the raw remote folder listing below the base folder(s)."""

    @abstractmethod
    def list_folders(self) -> list[dict[str, Any]]:
        """Return every folder below the configured base folders.

        Raises:
            DriveFetchError: If the provider cannot be reached or refuses the request.
        """


class ApiFolderSource(FolderSource):
    """Folder listing as served by the repository backend (``GET /folders/gdrive``)."""

    def __init__(self, folders: FolderAPI) -> None:
        self._folders = folders

    def list_folders(self) -> list[dict[str, Any]]:
        try:
            listing = self._folders.list_drive_folders()
        except AdminApiError as exc:
            logger.error("[list_folders] backend folder listing failed; status:%d", exc.status_code)
            raise DriveFetchError(f"Failed to load drive folders: {exc.message}") from exc
        if not isinstance(listing, list):
            raise DriveFetchError("Failed to load drive folders: unexpected response")
        logger.info("[list_folders] fetched backend folder listing; folder_count:%d", len(listing))
        return listing


def walk_folders(
    list_children: Callable[[str], list[dict[str, Any]]], base_folder_ids: Sequence[str]
) -> list[dict[str, Any]]:
    """Breadth-first listing of every folder below the base folders.

    Each folder id is expanded at most once, so shared or cyclic parents
    cannot loop.
    """
    folders: list[dict[str, Any]] = []
    seen: set[str] = set()
    pending = deque(base_folder_ids)
    while pending:
        folder_id = pending.popleft()
        if folder_id in seen:
            continue
        seen.add(folder_id)
        children = list_children(folder_id)
        folders.extend(children)
        pending.extend(c["id"] for c in children if c.get("id"))
    return folders


class GoogleDriveFolderSource(FolderSource):
    """Recursive Google Drive folder listing below each base folder."""

    def __init__(self, drive: GoogleDriveClient, base_folder_ids: Sequence[str]) -> None:
        self._drive = drive
        self._base_folder_ids = tuple(base_folder_ids)

    def list_folders(self) -> list[dict[str, Any]]:
        try:
            folders = walk_folders(self._drive.list_subfolders, self._base_folder_ids)
        except GoogleDriveError as exc:
            raise DriveFetchError(f"Failed to load Google Drive folders: {exc.message}") from exc
        logger.info("[list_folders] fetched Google Drive folders; folder_count:%d", len(folders))
        return folders


class OneDriveFolderSource(FolderSource):
    """Recursive OneDrive folder listing below each base folder."""

    def __init__(self, drive: OneDriveClient, base_folder_ids: Sequence[str]) -> None:
        self._drive = drive
        self._base_folder_ids = tuple(base_folder_ids)

    def list_folders(self) -> list[dict[str, Any]]:
        try:
            folders = walk_folders(self._drive.list_child_folders, self._base_folder_ids)
        except OneDriveError as exc:
            raise DriveFetchError(f"Failed to load OneDrive folders: {exc.message}") from exc
        logger.info("[list_folders] fetched OneDrive folders; folder_count:%d", len(folders))
        return folders


def folder_source_from_config(
    config: AppConfig, api_client: AdminApiClient | None = None
) -> FolderSource:
    """Construct the FolderSource selected by ``config.drive_provider``.

    Args:
        config: Application configuration instance.
        api_client: Client to reuse for the ``api`` provider.

    Returns:
        Configured FolderSource instance.
    """
    if config.drive_provider == "google":
        drive = GoogleDriveClient.from_credentials_json(config.google_credentials_json)
        return GoogleDriveFolderSource(drive, config.base_folder_ids)
    if config.drive_provider == "onedrive":
        return OneDriveFolderSource(OneDriveClient.from_config(config), config.base_folder_ids)
    if api_client is None:
        api_client = AdminApiClient(config.api_base_url, token=config.api_token or None)
    return ApiFolderSource(FolderAPI(api_client))
