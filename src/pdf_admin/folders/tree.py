"""Folder tree builder — flat parent-referencing records to a nested tree."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from pdf_admin.folders.models import FolderRecord, FolderTreeNode

logger = logging.getLogger(__name__)


def build_tree(records: Sequence[FolderRecord], root_id: str | None) -> list[FolderTreeNode]:
    """Build the folder hierarchy below ``root_id``.

    Records are partitioned by parent id once, then the tree is grown from
    the root with an explicit stack, so depth is not bounded by recursion.
    Siblings keep their input order. Records whose parent chain never
    reaches the root are left out. A node whose id is already on the
    current path (a cycle in the upstream data) is emitted without
    children.

    Args:
        records: Canonical folder records.
        root_id: ID whose direct children form the top level; None selects
            records without a parent.

    Returns:
        Top-level FolderTreeNode objects; empty when nothing hangs off the root.
    """
    by_parent: dict[str | None, list[FolderRecord]] = {}
    for record in records:
        by_parent.setdefault(record.parent_id, []).append(record)

    # Each frame: (children list being filled, pending child records, owner id).
    top: list[FolderTreeNode] = []
    on_path: set[str | None] = {root_id}
    stack: list[tuple[list[FolderTreeNode], Iterator[FolderRecord], str | None]] = [
        (top, iter(by_parent.get(root_id, ())), root_id)
    ]
    while stack:
        siblings, pending, owner_id = stack[-1]
        record = next(pending, None)
        if record is None:
            stack.pop()
            if stack:
                on_path.discard(owner_id)
            continue

        node = FolderTreeNode(record=record)
        siblings.append(node)
        if record.id in on_path:
            logger.warning(
                "[build_tree] cycle detected; folder_id:%s;parent_id:%s",
                record.id,
                owner_id,
            )
            continue
        on_path.add(record.id)
        stack.append((node.children, iter(by_parent.get(record.id, ())), record.id))
    return top


def walk_tree(
    nodes: Sequence[FolderTreeNode], depth: int = 0
) -> Iterator[tuple[int, FolderTreeNode]]:
    """Yield (depth, node) pairs depth-first, parents before children."""
    stack = [(depth, node) for node in reversed(nodes)]
    while stack:
        level, node = stack.pop()
        yield level, node
        stack.extend((level + 1, child) for child in reversed(node.children))


def count_nodes(nodes: Sequence[FolderTreeNode]) -> int:
    return sum(1 for _ in walk_tree(nodes))
