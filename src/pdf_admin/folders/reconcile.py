"""Folder sync reconciler — remote listing versus the cached listing."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pdf_admin.folders.models import FolderRecord, SyncResult

logger = logging.getLogger(__name__)


def _valid_records(records: Iterable[object], source: str) -> list[FolderRecord]:
    """Keep well-formed FolderRecords, logging and skipping everything else."""
    valid: list[FolderRecord] = []
    for record in records:
        if isinstance(record, FolderRecord) and isinstance(record.id, str) and record.id:
            valid.append(record)
        else:
            logger.warning("[reconcile] skipping malformed %s record; record:%r", source, record)
    return valid


def reconcile(
    remote: Iterable[FolderRecord],
    cached: Iterable[FolderRecord],
) -> SyncResult:
    """Compare a fresh remote listing against the cached listing.

    A remote folder is *added* when its id is not cached, *updated* when
    its name or parent differs from the cached entry, and unchanged
    otherwise. *removed* counts the cached ids missing from the remote
    listing; this only reflects what the local cache held and says nothing
    about deletion upstream. The remote listing becomes the next cache
    wholesale.

    Args:
        remote: Normalized records from the provider.
        cached: Records persisted by the previous successful sync.

    Returns:
        SyncResult with the change counts and the next cache contents.
    """
    remote_records = _valid_records(remote, "remote")
    cached_index = {record.id: record for record in _valid_records(cached, "cached")}

    added = 0
    updated = 0
    for record in remote_records:
        previous = cached_index.get(record.id)
        if previous is None:
            added += 1
        elif previous.name != record.name or previous.parent_id != record.parent_id:
            updated += 1

    remote_ids = {record.id for record in remote_records}
    removed = sum(1 for folder_id in cached_index if folder_id not in remote_ids)

    logger.info(
        "[reconcile] reconciliation complete; added:%d;updated:%d;removed:%d;total:%d",
        added,
        updated,
        removed,
        len(remote_records),
    )
    return SyncResult(
        added=added,
        updated=updated,
        removed=removed,
        total=len(remote_records),
        next_cache=remote_records,
    )
