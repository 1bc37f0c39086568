"""Folder sync service — orchestrates fetch, reconcile, persist and notify."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pdf_admin.folders.normalizer import normalize_folders
from pdf_admin.folders.reconcile import reconcile
from pdf_admin.folders.tree import build_tree, count_nodes
from pdf_admin.notifications.channel import FOLDER_SYNCED

if TYPE_CHECKING:
    from pdf_admin.drive.sources import FolderSource
    from pdf_admin.folders.cache import FolderCache
    from pdf_admin.folders.models import FolderRecord, FolderTreeNode, SyncSummary
    from pdf_admin.notifications.channel import NotificationChannel

logger = logging.getLogger(__name__)


class SyncInProgressError(Exception):
    """Raised when a folder sync is requested while another one is running."""


@dataclass(frozen=True)
class SyncReport:
    """Everything one sync run produced, applied to the UI in a single update."""

    summary: SyncSummary
    records: list[FolderRecord] = field(default_factory=list)
    tree: list[FolderTreeNode] = field(default_factory=list)


class FolderSyncService:
    """Runs the folder synchronisation pipeline against one folder source."""

    def __init__(
        self,
        source: FolderSource,
        cache: FolderCache,
        channel: NotificationChannel | None = None,
        root_ids: Sequence[str] = (),
    ) -> None:
        """Initialise the sync service.

        Args:
            source: Provider of the remote folder listing.
            cache: Persistent cache of the last successful listing.
            channel: Optional channel notified after each successful sync.
            root_ids: Base folders whose children form the top of the tree,
                primary first. Without any, top-level records form the top.
        """
        self._source = source
        self._cache = cache
        self._channel = channel
        self._root_ids = tuple(root_ids)
        self._lock = threading.Lock()

    @property
    def root_id(self) -> str | None:
        return self._root_ids[0] if self._root_ids else None

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    def sync(self) -> SyncReport:
        """Run one synchronisation pass.

        Steps:
            1. Fetch the remote listing from the folder source.
            2. Normalize it into canonical folder records.
            3. Reconcile against the cached listing.
            4. Persist the new listing as the next cache.
            5. Build the folder tree and notify the channel.

        A fetch failure propagates before anything is reconciled or written.

        Returns:
            SyncReport with the summary, the new records and their tree.

        Raises:
            SyncInProgressError: If another sync on this service is running.
            DriveFetchError: If the remote listing cannot be fetched.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("[sync] folder sync already in progress; rejecting request")
            raise SyncInProgressError("A folder sync is already in progress")
        try:
            logger.info("[sync] starting folder sync; root_id:%s", self.root_id)
            raw = self._source.list_folders()
            remote = normalize_folders(raw, self.root_id)
            cached = self._cache.load()
            result = reconcile(remote, cached)
            self._cache.save(result.next_cache)
            tree = self._build(result.next_cache)

            summary = result.summary
            logger.info(
                "[sync] folder sync complete; added:%d;updated:%d;removed:%d;total:%d;tree_size:%d",
                summary.added,
                summary.updated,
                summary.removed,
                summary.total,
                count_nodes(tree),
            )
            self._notify(summary)
            return SyncReport(summary=summary, records=result.next_cache, tree=tree)
        finally:
            self._lock.release()

    def current_tree(self) -> list[FolderTreeNode]:
        """Build the tree from the cached listing without contacting the provider."""
        return self._build(self._cache.load())

    def _build(self, records: list[FolderRecord]) -> list[FolderTreeNode]:
        if not self._root_ids:
            return build_tree(records, None)
        tree: list[FolderTreeNode] = []
        for root_id in self._root_ids:
            tree.extend(build_tree(records, root_id))
        return tree

    def _notify(self, summary: SyncSummary) -> None:
        if self._channel is None or not self._channel.connected:
            return
        try:
            self._channel.emit(FOLDER_SYNCED, summary.to_dict())
        except Exception:
            logger.warning("[sync] failed to publish sync notification", exc_info=True)
