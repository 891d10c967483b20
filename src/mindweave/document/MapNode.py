"""MapNode - Node representation for the mind-map document.

This module provides the core data structures of the document tree:
- NodeType: Actionable vs informational node
- NodeNature: Fact vs opinion
- DataSource: Provenance of a node
- SuggestedPrompts: Follow-up prompt hints attached by the generator
- MapNode: Tree node with ordered children and cached content
"""

from __future__ import annotations

import copy
from collections import deque
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Iterator
from uuid import uuid4

from mindweave.process.models import ProcessStep


class NodeType(Enum):
    """Types of nodes in the mind map."""

    PROCESS = "process"
    INFO = "info"


class NodeNature(Enum):
    """Epistemic nature of a node's content."""

    FACT = "fact"
    OPINION = "opinion"


class DataSource(Enum):
    """Who produced a node."""

    AI = "ai"
    USER = "user"


def new_node_id() -> str:
    """Return a fresh node identifier."""
    return uuid4().hex


@dataclass
class SuggestedPrompts:
    """Prompt hints for the next generation actions on a node."""

    expand: str = ""
    details: str = ""
    process: str = ""


@dataclass
class MapNode:
    """A node in the mind-map tree.

    Child order is meaningful: it drives outline numbering and the
    default reading sequence.

    Attributes:
        id: Unique identifier, stable for the node's lifetime.
        label: Short display title.
        description: Free-text summary.
        node_type: Actionable (process) or informational.
        nature: Fact or opinion.
        children: Ordered child nodes.
        cached_details: Generated details text, if any.
        details_locked: Whether cached details are locked against regeneration.
        cached_process: Generated process steps, if any.
        process_locked: Whether cached steps are locked against regeneration.
        collapsed: Display flag; children hidden when True.
        watched_node_ids: Nodes this node depends on.
        is_flagged_for_review: Set when a watched node changed.
        flagged_source_ids: Watched nodes that triggered the flag.
        source: Provenance tag.
    """

    label: str
    id: str = field(default_factory=new_node_id)
    description: str = ""
    node_type: NodeType = NodeType.INFO
    nature: NodeNature = NodeNature.FACT
    children: list[MapNode] = field(default_factory=list)

    # Cached generated content
    cached_details: str | None = None
    details_locked: bool = False
    cached_process: list[ProcessStep] | None = None
    process_locked: bool = False
    summary: str | None = None

    # Display / dependency state
    collapsed: bool = False
    watched_node_ids: list[str] = field(default_factory=list)
    is_flagged_for_review: bool = False
    flagged_source_ids: list[str] = field(default_factory=list)

    source: DataSource | None = None
    is_process_candidate: bool = False
    suggested_prompts: SuggestedPrompts | None = None

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Names that may appear in an update patch."""
        return frozenset(f.name for f in fields(cls))

    def apply(self, patch: dict[str, Any]) -> None:
        """Merge a field patch into this node in place.

        Only used on private clones inside the commit pipeline.

        Raises:
            ValueError: If the patch names an unknown field or tries to
                change the node's id.
        """
        allowed = self.field_names()
        unknown = set(patch) - allowed
        if unknown:
            raise ValueError(f"Unknown node fields: {', '.join(sorted(unknown))}")
        if "id" in patch and patch["id"] != self.id:
            raise ValueError("Node id cannot be changed")
        for key, value in patch.items():
            setattr(self, key, value)

    def clone(self) -> MapNode:
        """Create a deep copy of this node and its subtree."""
        return copy.deepcopy(self)

    def copy_with_fresh_ids(self) -> MapNode:
        """Deep copy in which every node gets a new id.

        Watches between nodes of the copied subtree follow the renaming;
        watches on nodes outside it are kept as they are.
        """
        result = self.clone()
        renamed: dict[str, str] = {}
        for node in result.walk():
            fresh = new_node_id()
            renamed[node.id] = fresh
            node.id = fresh
        for node in result.walk():
            node.watched_node_ids = [renamed.get(i, i) for i in node.watched_node_ids]
            node.flagged_source_ids = [renamed.get(i, i) for i in node.flagged_source_ids]
        return result

    # Count and membership checks
    def child_count(self) -> int:
        """Return number of children."""
        return len(self.children)

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return len(self.children) == 0

    @property
    def has_details(self) -> bool:
        return bool(self.cached_details)

    @property
    def has_process(self) -> bool:
        return bool(self.cached_process)

    def walk(self, order: str = "pre") -> Iterator[MapNode]:
        """Iterate over this node and descendants.

        Args:
            order: Traversal order:
                - "pre": Parent first (depth-first, pre-order)
                - "post": Children first (depth-first, post-order)
                - "level": Breadth-first (level order)

        Yields:
            MapNode instances in the specified order.
        """
        if order == "pre":
            yield from self._walk_preorder()
        elif order == "post":
            yield from self._walk_postorder()
        elif order == "level":
            yield from self._walk_level()
        else:
            raise ValueError(f"Unknown traversal order: {order}")

    def _walk_preorder(self) -> Iterator[MapNode]:
        yield self
        for child in self.children:
            yield from child._walk_preorder()

    def _walk_postorder(self) -> Iterator[MapNode]:
        for child in self.children:
            yield from child._walk_postorder()
        yield self

    def _walk_level(self) -> Iterator[MapNode]:
        queue: deque[MapNode] = deque([self])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.children)

    def find(self, predicate: Callable[[MapNode], bool]) -> Iterator[MapNode]:
        """Find all nodes in this subtree matching predicate.

        Args:
            predicate: Function that returns True for matching nodes.

        Yields:
            Matching MapNode instances.
        """
        for node in self.walk():
            if predicate(node):
                yield node


__all__ = [
    "NodeType",
    "NodeNature",
    "DataSource",
    "SuggestedPrompts",
    "MapNode",
    "new_node_id",
]
