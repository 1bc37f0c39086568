"""Map provider-specific folder objects onto canonical FolderRecords."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pdf_admin.folders.models import FolderRecord

logger = logging.getLogger(__name__)

# Provider field variants, in lookup order
_ID_FIELDS = ("id", "_id")
_NAME_FIELDS = ("name", "title")
_PARENT_FIELDS = ("parentId", "parent")
_GOOGLE_PARENTS = "parents"
_GRAPH_PARENT_REFERENCE = "parentReference"


def _as_id(value: Any) -> str | None:
    """Reduce an id-like value to a non-empty string, or None."""
    if isinstance(value, Mapping):
        # Populated references, e.g. {"_id": "...", "name": "..."}.
        for key in _ID_FIELDS:
            if key in value:
                return _as_id(value[key])
        return None
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def _first(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _parent_of(raw: Mapping[str, Any]) -> str | None:
    parent = _first(raw, _PARENT_FIELDS)
    if parent is not None:
        return _as_id(parent)

    parents = raw.get(_GOOGLE_PARENTS)
    if isinstance(parents, (list, tuple)) and parents:
        return _as_id(parents[0])

    reference = raw.get(_GRAPH_PARENT_REFERENCE)
    if isinstance(reference, Mapping):
        return _as_id(reference.get("id"))

    return None


def normalize_folder(raw: Any) -> FolderRecord | None:
    """Normalize a single raw folder object.

    Returns:
        The canonical record, or None when the object has no usable id.
    """
    if not isinstance(raw, Mapping):
        return None
    folder_id = _as_id(_first(raw, _ID_FIELDS))
    if folder_id is None:
        return None
    name = _first(raw, _NAME_FIELDS)
    return FolderRecord(
        id=folder_id,
        name=str(name) if name is not None else "",
        parent_id=_parent_of(raw),
    )


def normalize_folders(raw_folders: Iterable[Any], root_id: str | None) -> list[FolderRecord]:
    """Normalize a provider folder listing into canonical FolderRecords.

    Records without a usable id are dropped with a warning; the base
    folder itself (id == root_id) is dropped because it is the container
    of the listing rather than one of its entries. Input order is kept.

    Args:
        raw_folders: Folder-like objects from a provider listing.
        root_id: ID of the base folder the listing was taken from.

    Returns:
        List of FolderRecord objects.
    """
    records: list[FolderRecord] = []
    dropped = 0
    for position, raw in enumerate(raw_folders):
        record = normalize_folder(raw)
        if record is None:
            dropped += 1
            logger.warning(
                "[normalize_folders] dropping folder without usable id; position:%d", position
            )
            continue
        if root_id is not None and record.id == root_id:
            continue
        records.append(record)

    if dropped:
        logger.warning(
            "[normalize_folders] dropped malformed folders; dropped:%d;kept:%d",
            dropped,
            len(records),
        )
    return records
