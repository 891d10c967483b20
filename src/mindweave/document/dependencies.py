"""Dependency tracking - flag nodes that watch a changed node.

A node may list other node ids in ``watched_node_ids``. When one of those
nodes changes, the watcher is flagged for review and the changed id is
recorded in ``flagged_source_ids``. Propagation is one hop: a flagged
node does not in turn flag its own watchers.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from mindweave.document.MapNode import MapNode
from mindweave.events import EventKind, EventSink, emit


def check_dependencies(
    root: MapNode, changed_id: str, events: EventSink | None = None
) -> MapNode:
    """Flag every node watching ``changed_id``.

    Returns a rebuilt tree; the input tree is not modified. Nodes that do
    not watch the changed id come back as equal copies.

    Args:
        root: Tree to scan.
        changed_id: ID of the node that changed (or was deleted).
        events: Optional sink for ``dependency_flagged`` events.

    Returns:
        New tree root.
    """

    def _rebuild(node: MapNode) -> MapNode:
        children = [_rebuild(child) for child in node.children]
        if changed_id not in node.watched_node_ids:
            return replace(node, children=children)

        sources = list(node.flagged_source_ids)
        if changed_id not in sources:
            sources.append(changed_id)
            emit(
                events,
                EventKind.DEPENDENCY_FLAGGED,
                f"Flagged '{node.label}' for review",
                node_id=node.id,
                source_id=changed_id,
            )
        return replace(
            node,
            children=children,
            is_flagged_for_review=True,
            flagged_source_ids=sources,
        )

    return _rebuild(root)


def find_watchers(root: MapNode, node_id: str) -> list[str]:
    """Return ids of nodes that watch ``node_id``, in pre-order."""
    return [n.id for n in root.walk() if node_id in n.watched_node_ids]


def clear_review_flag(node: MapNode) -> dict[str, Any]:
    """Patch that clears the review flag together with its sources."""
    return {"is_flagged_for_review": False, "flagged_source_ids": []}


__all__ = ["check_dependencies", "find_watchers", "clear_review_flag"]
