"""Folder listing cache backed by Azure Blob Storage."""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient

from pdf_admin.folders.models import FolderRecord
from pdf_admin.folders.normalizer import normalize_folders

if TYPE_CHECKING:
    from pdf_admin.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_CACHE_CONTAINER = "pdf-admin-state"
DEFAULT_CACHE_BLOB = "folder-cache/current.json"


class FolderCache:
    """Last successful folder listing, stored as one JSON blob.

    The blob holds a JSON array of ``{"id", "name", "parentId"}`` objects
    and is replaced wholesale after every successful sync.
    """

    def __init__(
        self,
        storage_connection_string: str,
        container: str = DEFAULT_CACHE_CONTAINER,
        blob: str = DEFAULT_CACHE_BLOB,
    ) -> None:
        """Initialise the folder cache.

        Args:
            storage_connection_string: Azure Storage connection string.
            container: Blob container name for the cache.
            blob: Blob path of the cache file.
        """
        self._blob_service = BlobServiceClient.from_connection_string(storage_connection_string)
        self._container = container
        self._blob = blob

    def load(self) -> list[FolderRecord]:
        """Read the cached listing.

        Returns:
            Cached records; empty on the first run or when the blob is unreadable.
        """
        try:
            container_client = self._blob_service.get_container_client(self._container)
            blob_client = container_client.get_blob_client(self._blob)
            data = blob_client.download_blob().readall()
        except ResourceNotFoundError:
            logger.info("[folder_cache] no cached folder listing found; first run")
            return []

        try:
            raw = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("[folder_cache] cached folder listing is not valid JSON; ignoring")
            return []
        if not isinstance(raw, list):
            logger.warning("[folder_cache] cached folder listing is not a list; ignoring")
            return []

        records = normalize_folders(raw, root_id=None)
        logger.info("[folder_cache] loaded cached listing; folder_count:%d", len(records))
        return records

    def save(self, records: Sequence[FolderRecord]) -> None:
        """Overwrite the cached listing, creating the container if needed.

        Args:
            records: Records to persist.
        """
        container_client = self._blob_service.get_container_client(self._container)
        with contextlib.suppress(Exception):
            container_client.create_container()

        payload = json.dumps([record.to_dict() for record in records]).encode("utf-8")
        blob_client = container_client.get_blob_client(self._blob)
        blob_client.upload_blob(payload, overwrite=True)
        logger.info("[folder_cache] stored folder listing; folder_count:%d", len(records))


def folder_cache_from_config(config: AppConfig) -> FolderCache:
    """Construct a FolderCache from application configuration."""
    return FolderCache(
        storage_connection_string=config.storage_connection_string,
        container=config.cache_container,
        blob=config.cache_blob,
    )
