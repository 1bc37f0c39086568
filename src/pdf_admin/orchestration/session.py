"""Admin session — explicit context for API access, folder state and notifications."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from pdf_admin.api.client import AdminApiClient, api_client_from_config
from pdf_admin.api.resources import AccessTagAPI, AuthAPI, FolderAPI, PdfAPI, UserAPI
from pdf_admin.drive.sources import folder_source_from_config
from pdf_admin.folders.cache import folder_cache_from_config
from pdf_admin.notifications.channel import FOLDER_UPDATED, channel_from_url
from pdf_admin.orchestration.sync import FolderSyncService, SyncReport

if TYPE_CHECKING:
    from pdf_admin.config import AppConfig
    from pdf_admin.folders.models import FolderRecord, FolderTreeNode, SyncSummary
    from pdf_admin.notifications.channel import NotificationChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FolderState:
    """Snapshot of the folder screen; replaced as a whole, never mutated."""

    records: list[FolderRecord] = field(default_factory=list)
    tree: list[FolderTreeNode] = field(default_factory=list)
    summary: SyncSummary | None = None
    stale: bool = False


class AdminSession:
    """Context object handed to every screen of the admin console.

    Owns the REST client and its resource wrappers, the folder sync
    service and the notification channel. The channel is only opened by
    ``connect()`` and closed by ``disconnect()``; the session is also a
    context manager doing both.
    """

    def __init__(
        self,
        api: AdminApiClient,
        sync_service: FolderSyncService,
        channel: NotificationChannel,
        page_size: int = 10,
        max_visible_pages: int = 5,
    ) -> None:
        self.api = api
        self.auth = AuthAPI(api)
        self.folders = FolderAPI(api)
        self.pdfs = PdfAPI(api)
        self.users = UserAPI(api)
        self.tags = AccessTagAPI(api)
        self.sync_service = sync_service
        self.channel = channel
        self.page_size = page_size
        self.max_visible_pages = max_visible_pages
        self._state = FolderState()
        self._state_lock = threading.Lock()

    def __enter__(self) -> AdminSession:
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.disconnect()

    def connect(self) -> None:
        self.channel.on(FOLDER_UPDATED, self._on_folder_updated)
        self.channel.connect()
        logger.info("[connect] admin session connected")

    def disconnect(self) -> None:
        self.channel.off(FOLDER_UPDATED, self._on_folder_updated)
        self.channel.disconnect()
        logger.info("[disconnect] admin session disconnected")

    @property
    def state(self) -> FolderState:
        return self._state

    def load_folders(self) -> FolderState:
        """Show the cached folder tree without running a sync."""
        tree = self.sync_service.current_tree()
        with self._state_lock:
            self._state = replace(self._state, tree=tree, stale=False)
            return self._state

    def sync_folders(self) -> SyncReport:
        """Run a folder sync and publish its list and summary as one state change.

        Raises:
            SyncInProgressError: If a sync is already running in this session.
            DriveFetchError: If the remote listing cannot be fetched; the
                previous state is kept untouched.
        """
        report = self.sync_service.sync()
        with self._state_lock:
            self._state = FolderState(
                records=report.records, tree=report.tree, summary=report.summary
            )
        return report

    def _on_folder_updated(self, payload: dict[str, Any]) -> None:
        logger.info(
            "[_on_folder_updated] folder changed elsewhere; folder_id:%s",
            payload.get("folderId"),
        )
        with self._state_lock:
            self._state = replace(self._state, stale=True)


def session_from_config(config: AppConfig) -> AdminSession:
    """Wire an AdminSession from application configuration.

    Creates the API client, folder source, folder cache, notification
    channel and sync service, then hands them to the session.

    Args:
        config: Application configuration instance.

    Returns:
        Configured (not yet connected) AdminSession instance.
    """
    api = api_client_from_config(config)
    channel = channel_from_url(config.socket_url, token=config.api_token or None)
    sync_service = FolderSyncService(
        source=folder_source_from_config(config, api_client=api),
        cache=folder_cache_from_config(config),
        channel=channel,
        root_ids=config.base_folder_ids,
    )
    return AdminSession(
        api=api,
        sync_service=sync_service,
        channel=channel,
        page_size=config.page_size,
        max_visible_pages=config.max_visible_pages,
    )
