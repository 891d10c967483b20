"""Mesh-to-tree projection.

Turns the flat actor/interaction mesh into a rooted spanning tree for a
chosen actor. Each tree edge carries a direction arrow and the payload
label of the interaction that introduced the child.

Traversal shares one visited set across the whole tree, seeded with the
root. Interactions are scanned in list order; an actor is marked visited
when its edge is found and its subtree is built before the scan moves on.
An actor reachable from several parents therefore lands under whichever
parent reaches it first in that depth-first, list-ordered walk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mindweave.document.MapNode import NodeType
from mindweave.systems.models import ActorType, SystemActor, SystemsView

OUTGOING = "→ "
INCOMING = "← "


@dataclass
class MeshNode:
    """An actor placed in the projected tree.

    Attributes:
        actor: The wrapped actor.
        link_label: Arrow plus payload of the edge from the parent
            (None for the root).
        children: Child nodes in discovery order.
    """

    actor: SystemActor
    link_label: str | None = None
    children: list[MeshNode] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.actor.id

    @property
    def label(self) -> str:
        return self.actor.name

    @property
    def node_type(self) -> NodeType:
        """People render as info nodes, everything else as process nodes."""
        return NodeType.INFO if self.actor.type == ActorType.PERSON else NodeType.PROCESS

    def walk(self):
        """Iterate this node and descendants, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def relevant_actor_ids(view: SystemsView, data_filter: str) -> set[str]:
    """Actors that take part in at least one interaction with the payload."""
    ids: set[str] = set()
    for interaction in view.interactions:
        if interaction.data == data_filter:
            ids.add(interaction.source)
            ids.add(interaction.target)
    return ids


def build_system_tree(
    view: SystemsView, root_id: str, data_filter: str | None = None
) -> MeshNode | None:
    """Project the mesh into a tree rooted at ``root_id``.

    Args:
        view: Actors and interactions.
        root_id: Actor to root the tree at.
        data_filter: If set, only interactions carrying exactly this
            payload create edges, and only actors involved in such
            interactions can appear.

    Returns:
        Root MeshNode, or None if ``root_id`` is not an actor.
    """
    root_actor = view.find_actor(root_id)
    if root_actor is None:
        return None

    relevant = relevant_actor_ids(view, data_filter) if data_filter else set()
    visited: set[str] = {root_id}

    root = MeshNode(actor=root_actor)
    # Each frame resumes its actor's interaction scan after a child's
    # subtree is complete, so children are claimed depth-first.
    stack = [(root, iter(view.interactions))]
    while stack:
        node, links = stack[-1]
        for link in links:
            if data_filter and link.data != data_filter:
                continue

            if link.source == node.id and link.target not in visited:
                other_id, prefix = link.target, OUTGOING
            elif link.target == node.id and link.source not in visited:
                other_id, prefix = link.source, INCOMING
            else:
                continue

            other = view.find_actor(other_id)
            if other is None:
                continue
            if data_filter and other_id not in relevant:
                continue
            visited.add(other_id)
            child = MeshNode(actor=other, link_label=f"{prefix}{link.data}")
            node.children.append(child)
            stack.append((child, iter(view.interactions)))
            break
        else:
            stack.pop()

    return root


def _mesh_fields(node: MeshNode) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "nodeType": node.node_type.value,
        "nature": "fact",
        "source": "ai",
        "description": node.actor.type.value,
        "children": [],
    }
    if node.link_label is not None:
        result["linkLabel"] = node.link_label
    return result


def mesh_tree_to_dict(node: MeshNode) -> dict[str, Any]:
    """Serialize a projected tree for a rendering collaborator."""
    result = _mesh_fields(node)
    stack = [(node, result)]
    while stack:
        current, data = stack.pop()
        for child in current.children:
            child_data = _mesh_fields(child)
            data["children"].append(child_data)
            stack.append((child, child_data))
    return result


__all__ = [
    "OUTGOING",
    "INCOMING",
    "MeshNode",
    "relevant_actor_ids",
    "build_system_tree",
    "mesh_tree_to_dict",
]
