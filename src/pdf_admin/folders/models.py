"""Data models for drive folder records, trees and sync results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Canonical JSON field names (REST backend and folder cache)
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_PARENT_ID = "parentId"
FIELD_CHILDREN = "children"


@dataclass(frozen=True)
class FolderRecord:
    """Canonical representation of a remote drive folder.

    ``parent_id`` is None for top-level folders.
    """

    id: str
    name: str
    parent_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {FIELD_ID: self.id, FIELD_NAME: self.name, FIELD_PARENT_ID: self.parent_id}


@dataclass
class FolderTreeNode:
    """A folder record plus its ordered children. Rebuilt on every render pass."""

    record: FolderRecord
    children: list[FolderTreeNode] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def name(self) -> str:
        return self.record.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize the node and its subtree for the presentation layer."""
        root = self.record.to_dict()
        pending: list[tuple[FolderTreeNode, dict[str, Any]]] = [(self, root)]
        while pending:
            node, data = pending.pop()
            children: list[dict[str, Any]] = []
            data[FIELD_CHILDREN] = children
            for child in node.children:
                child_data = child.record.to_dict()
                children.append(child_data)
                pending.append((child, child_data))
        return root


@dataclass(frozen=True)
class SyncSummary:
    """Counts produced by one reconciliation run."""

    added: int
    updated: int
    removed: int
    total: int

    def to_dict(self) -> dict[str, int]:
        return {
            "added": self.added,
            "updated": self.updated,
            "removed": self.removed,
            "total": self.total,
        }

    def message(self) -> str:
        """Human-readable status line for the sync action."""
        return (
            f"Synced {self.total} folder(s): {self.added} added, "
            f"{self.updated} updated, {self.removed} removed"
        )


@dataclass(frozen=True)
class SyncResult:
    """Reconciliation outcome: change counts plus the cache to persist next."""

    added: int
    updated: int
    removed: int
    total: int
    next_cache: list[FolderRecord] = field(default_factory=list)

    @property
    def unchanged(self) -> int:
        return self.total - self.added - self.updated

    @property
    def summary(self) -> SyncSummary:
        return SyncSummary(
            added=self.added, updated=self.updated, removed=self.removed, total=self.total
        )
