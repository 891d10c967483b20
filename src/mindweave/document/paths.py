"""Node lookup, label paths and outline numbering.

Lookups walk the tree depth-first in child-list order, so results are
deterministic for a given tree. A missing id is not an error: callers
may hold ids of nodes that were deleted since, and get ``None`` back.
"""

from __future__ import annotations

from dataclasses import dataclass

from mindweave.document.MapNode import MapNode

# Sentinel number returned for the root itself. It marks "no specific
# outline position" and must not be rendered as a section number.
ROOT_NUMBER = "1.0"


@dataclass
class NodeLocation:
    """Result of locating a node in a tree.

    Attributes:
        node: The matching node.
        path: Labels from the root to the node, inclusive.
        parent: The node's parent, or None for the root.
    """

    node: MapNode
    path: list[str]
    parent: MapNode | None

    @property
    def depth(self) -> int:
        """Depth from the root (0 for the root)."""
        return len(self.path) - 1


def find_node_and_path(root: MapNode, target_id: str) -> NodeLocation | None:
    """Locate a node and reconstruct its label path and parent.

    Args:
        root: Tree root.
        target_id: ID to find.

    Returns:
        NodeLocation for the first pre-order match, or None if absent.
    """
    return _locate(root, target_id, [], None)


def _locate(
    node: MapNode, target_id: str, prefix: list[str], parent: MapNode | None
) -> NodeLocation | None:
    path = prefix + [node.label]
    if node.id == target_id:
        return NodeLocation(node=node, path=path, parent=parent)
    for child in node.children:
        found = _locate(child, target_id, path, node)
        if found is not None:
            return found
    return None


def find_node(root: MapNode, target_id: str) -> MapNode | None:
    """Return the node with ``target_id`` or None."""
    location = find_node_and_path(root, target_id)
    return location.node if location else None


def context_path(root: MapNode, node_id: str, fallback_label: str = "") -> list[str]:
    """Label path used as generation context.

    Falls back to ``[fallback_label]`` when the node is not in the tree.
    """
    location = find_node_and_path(root, node_id)
    if location is None:
        return [fallback_label]
    return location.path


def calculate_node_number(root: MapNode, target_id: str) -> str | None:
    """Compute a dotted outline number for a node.

    The root is conceptually section "1": its children are "1.1", "1.2",
    and so on, each level appending its 1-based child position. The root
    itself yields ROOT_NUMBER.

    Args:
        root: Tree root.
        target_id: ID of the node to number.

    Returns:
        The outline number, or None if the node is absent.
    """
    return _number(root, target_id, ROOT_NUMBER)


def _number(node: MapNode, target_id: str, current: str) -> str | None:
    if node.id == target_id:
        return current
    base = "1" if current == ROOT_NUMBER else current
    for i, child in enumerate(node.children):
        found = _number(child, target_id, f"{base}.{i + 1}")
        if found is not None:
            return found
    return None


def is_root_number(number: str | None) -> bool:
    """True if ``number`` is the root sentinel."""
    return number == ROOT_NUMBER


__all__ = [
    "ROOT_NUMBER",
    "NodeLocation",
    "find_node_and_path",
    "find_node",
    "context_path",
    "calculate_node_number",
    "is_root_number",
]
