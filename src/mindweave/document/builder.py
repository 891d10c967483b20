"""Mind-map document - the single write path into the tree.

MindMapDocument owns the live tree and its snapshot history. Every edit
goes through ``update_node`` (or one of the operations built on it):
the live tree is deep-copied, the copy is patched, dependency flags are
optionally propagated, and the copy is committed as a new snapshot.
Trees handed out earlier are never modified.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from mindweave.document.dependencies import check_dependencies, clear_review_flag
from mindweave.document.history import DEFAULT_CAPACITY, HistoryStack, HistoryView, Snapshot
from mindweave.document.MapNode import MapNode
from mindweave.document.paths import (
    NodeLocation,
    calculate_node_number,
    context_path,
    find_node_and_path,
)
from mindweave.events import EventKind, EventSink, emit
from mindweave.generation import (
    GenerationRequest,
    GenerationService,
    call_service,
    nodes_from_generated,
    steps_from_generated,
    text_from_generated,
    tree_from_generated,
)
from mindweave.process.autolink import auto_link_decisions
from mindweave.process.models import ProcessStep

logger = logging.getLogger(__name__)

UpdateFn = Callable[[MapNode], dict[str, Any]]


class MindMapDocument:
    """A versioned mind-map document.

    Attributes:
        source_text: Original text the map was generated from; passed to
            the generation service as context.
    """

    def __init__(
        self,
        root: MapNode | None = None,
        history: HistoryStack | None = None,
        events: EventSink | None = None,
        capacity: int = DEFAULT_CAPACITY,
        auto_save: Callable[[MapNode], None] | None = None,
        source_text: str = "",
    ) -> None:
        """Create a document.

        Args:
            root: Initial tree; recorded as the first snapshot if given.
            history: Existing history to adopt instead of a new one.
            events: Sink for document events.
            capacity: History capacity when no history is supplied.
            auto_save: Called with the new tree after commits that ask
                for auto-save.
            source_text: Original source text of the session.
        """
        self._history = history if history is not None else HistoryStack(capacity)
        self._events = events
        self._auto_save = auto_save
        self.source_text = source_text
        self._root: MapNode | None = None
        if root is not None:
            self.load(root, "Initial Generation")

    # ─────────────────────────────────────────────────────────────────────
    # Read API
    # ─────────────────────────────────────────────────────────────────────

    @property
    def root(self) -> MapNode | None:
        """The live tree. Treat as read-only; edit through update_node()."""
        return self._root

    @property
    def history(self) -> HistoryView:
        """Read-only view of the snapshot history.

        Move through history with undo(), redo() and restore() so the live
        tree follows the index.
        """
        return HistoryView(self._history)

    @property
    def is_empty(self) -> bool:
        return self._root is None

    def locate(self, node_id: str) -> NodeLocation | None:
        """Find a node with its label path and parent."""
        if self._root is None:
            return None
        return find_node_and_path(self._root, node_id)

    def find_by_id(self, node_id: str) -> MapNode | None:
        location = self.locate(node_id)
        return location.node if location else None

    def number(self, node_id: str) -> str | None:
        """Outline number of a node (root yields the "1.0" sentinel)."""
        if self._root is None:
            return None
        return calculate_node_number(self._root, node_id)

    def node_count(self) -> int:
        return sum(1 for _ in self._root.walk()) if self._root else 0

    # ─────────────────────────────────────────────────────────────────────
    # Commit pipeline
    # ─────────────────────────────────────────────────────────────────────

    def load(self, root: MapNode, description: str = "Initial Generation") -> Snapshot:
        """Replace the document and reset history to a single snapshot."""
        self._root = root.clone()
        snapshot = self._history.reset(self._root, description)
        emit(self._events, EventKind.COMMIT, description, node_count=self.node_count())
        return snapshot

    def commit(self, new_root: MapNode, description: str) -> Snapshot:
        """Make ``new_root`` the live tree and record it in history.

        The caller hands over ownership of ``new_root``.
        """
        self._root = new_root
        snapshot = self._history.commit(new_root, description)
        logger.debug("commit %r (index %d)", description, self._history.current_index)
        emit(
            self._events,
            EventKind.COMMIT,
            description,
            index=self._history.current_index,
        )
        return snapshot

    def update_node(
        self,
        node_id: str,
        update_fn: UpdateFn,
        description: str = "Update node",
        trigger_dependency_check: bool = False,
        should_auto_save: bool = False,
    ) -> Snapshot | None:
        """Apply a field patch to one node and commit the result.

        Args:
            node_id: Node to update.
            update_fn: Receives the node (on a private copy of the tree)
                and returns a dict of fields to set on it.
            description: History description.
            trigger_dependency_check: Flag nodes watching this node.
            should_auto_save: Hand the result to the auto-save callback.

        Returns:
            The new snapshot, or None if the node is not in the tree
            (nothing is committed in that case).

        Raises:
            ValueError: If the patch names unknown fields.
        """
        if self._root is None:
            return None
        clone = self._root.clone()
        location = find_node_and_path(clone, node_id)
        if location is None:
            logger.debug("update_node: %s not found, skipping", node_id)
            return None

        location.node.apply(update_fn(location.node))
        if trigger_dependency_check:
            clone = check_dependencies(clone, node_id, self._events)

        snapshot = self.commit(clone, description)
        if should_auto_save and self._auto_save is not None:
            self._auto_save(clone)
        return snapshot

    # ─────────────────────────────────────────────────────────────────────
    # Node operations
    # ─────────────────────────────────────────────────────────────────────

    def delete_node(self, node_id: str) -> Snapshot | None:
        """Detach a node (and its subtree) from its parent.

        Deleting the root discards the whole document and its history.
        Nodes watching the deleted node are flagged for review.

        Returns:
            The new snapshot, or None if nothing was committed.
        """
        if self._root is None:
            return None
        if self._root.id == node_id:
            label = self._root.label
            self._root = None
            self._history.clear()
            emit(self._events, EventKind.NODE_DELETED, "Deleted root node (map reset)", label=label)
            return None

        clone = self._root.clone()
        location = find_node_and_path(clone, node_id)
        if location is None or location.parent is None:
            return None

        location.parent.children = [c for c in location.parent.children if c.id != node_id]
        clone = check_dependencies(clone, node_id, self._events)
        emit(self._events, EventKind.NODE_DELETED, location.node.label, node_id=node_id)
        return self.commit(clone, f"Deleted node: {location.node.label}")

    def add_children(
        self, parent_id: str, nodes: Iterable[MapNode], description: str | None = None
    ) -> Snapshot | None:
        """Append copies of nodes to a parent's children.

        Every inserted node gets a fresh id, so adding the same subtree
        twice (or a subtree copied from this document) keeps ids unique.
        """
        new_nodes = [n.copy_with_fresh_ids() for n in nodes]
        return self.update_node(
            parent_id,
            lambda n: {"children": [*n.children, *new_nodes]},
            description or f"Added {len(new_nodes)} nodes",
        )

    def toggle_collapsed(self, node_id: str) -> Snapshot | None:
        """Flip a node's collapsed flag."""
        return self.update_node(
            node_id,
            lambda n: {"collapsed": not n.collapsed},
            "Toggled visibility",
        )

    def reveal(self, node_ids: Iterable[str]) -> bool:
        """Un-collapse nodes without recording a history entry.

        Used for search/highlight reveals, which are display state only.

        Returns:
            True if any node changed.
        """
        if self._root is None:
            return False
        clone = self._root.clone()
        changed = False
        for node_id in node_ids:
            location = find_node_and_path(clone, node_id)
            if location is not None and location.node.collapsed:
                location.node.collapsed = False
                changed = True
        if changed:
            self._root = clone
        return changed

    def set_details(self, node_id: str, text: str, locked: bool = True) -> Snapshot | None:
        """Cache details text on a node and flag its watchers."""
        return self.update_node(
            node_id,
            lambda n: {"cached_details": text, "details_locked": locked},
            "Updated details",
            trigger_dependency_check=True,
        )

    def set_process(
        self, node_id: str, steps: list[ProcessStep], locked: bool = True
    ) -> Snapshot | None:
        """Cache process steps on a node and flag its watchers."""
        copied = [s.copy() for s in steps]
        return self.update_node(
            node_id,
            lambda n: {"cached_process": copied, "process_locked": locked},
            "Updated process",
            trigger_dependency_check=True,
        )

    def reset_content(
        self, node_id: str, details: bool = True, process: bool = True
    ) -> Snapshot | None:
        """Drop cached details and/or process steps from a node."""
        patch: dict[str, Any] = {}
        if details:
            patch.update(cached_details=None, details_locked=False)
        if process:
            patch.update(cached_process=None, process_locked=False)
        if not patch:
            return None
        return self.update_node(node_id, lambda n: dict(patch), "Reset node content")

    def clear_review_flag(self, node_id: str) -> Snapshot | None:
        """Clear a node's review flag together with its sources."""
        return self.update_node(node_id, clear_review_flag, "Cleared review flag")

    def set_watched(self, node_id: str, watched_ids: Iterable[str]) -> Snapshot | None:
        """Replace the set of nodes a node watches."""
        ids = list(dict.fromkeys(i for i in watched_ids if i != node_id))
        return self.update_node(node_id, lambda n: {"watched_node_ids": ids}, "Updated watches")

    # ─────────────────────────────────────────────────────────────────────
    # History navigation
    # ─────────────────────────────────────────────────────────────────────

    def restore(self, index: int) -> Snapshot | None:
        """Make the snapshot at ``index`` the live tree.

        Out-of-range indices are ignored. The stack is not truncated.
        """
        snapshot = self._history.restore(index)
        if snapshot is None:
            return None
        self._root = snapshot.data.clone()
        emit(self._events, EventKind.RESTORE, snapshot.description, index=index)
        return snapshot

    def undo(self) -> Snapshot | None:
        return self.restore(self._history.current_index - 1)

    def redo(self) -> Snapshot | None:
        return self.restore(self._history.current_index + 1)

    # ─────────────────────────────────────────────────────────────────────
    # Generation workflows
    # ─────────────────────────────────────────────────────────────────────

    def _request(self, node: MapNode, guidance: str | None) -> GenerationRequest:
        path = context_path(self._root, node.id, node.label) if self._root else [node.label]
        return GenerationRequest(
            label=node.label,
            context_path=tuple(path),
            source_text=self.source_text,
            guidance=guidance,
            context_details=node.cached_details,
            context_process=tuple(node.cached_process or ()),
        )

    def _call(self, what: str, node_id: str | None, fn: Callable[[], Any]) -> Any:
        return call_service(what, fn, self._events, node_id=node_id)

    def expand_node(
        self, node_id: str, service: GenerationService, guidance: str | None = None
    ) -> Snapshot | None:
        """Replace a node's children with generated ones.

        Raises:
            GenerationError: The service failed; the document is unchanged.
        """
        node = self.find_by_id(node_id)
        if node is None:
            return None
        request = self._request(node, guidance)
        children = self._call(
            "Expand", node_id, lambda: nodes_from_generated(service.expand(request))
        )
        return self.update_node(
            node_id,
            lambda n: {"children": children, "collapsed": False},
            f"Expanded node: {node.label}",
            should_auto_save=True,
        )

    def generate_details(
        self, node_id: str, service: GenerationService, guidance: str | None = None
    ) -> Snapshot | None:
        """Generate, cache and lock details text for a node.

        Raises:
            GenerationError: The service failed; the document is unchanged.
        """
        node = self.find_by_id(node_id)
        if node is None:
            return None
        request = self._request(node, guidance)
        text = self._call(
            "Details", node_id, lambda: text_from_generated(service.details(request))
        )
        return self.update_node(
            node_id,
            lambda n: {"cached_details": text, "details_locked": True},
            f"Generated details for {node.label}",
            trigger_dependency_check=True,
            should_auto_save=True,
        )

    def generate_process(
        self, node_id: str, service: GenerationService, guidance: str | None = None
    ) -> Snapshot | None:
        """Generate, auto-link, cache and lock process steps for a node.

        Raises:
            GenerationError: The service failed; the document is unchanged.
        """
        node = self.find_by_id(node_id)
        if node is None:
            return None
        request = self._request(node, guidance)
        steps = self._call(
            "Process", node_id, lambda: steps_from_generated(service.process(request))
        )
        steps = auto_link_decisions(steps)
        return self.update_node(
            node_id,
            lambda n: {"cached_process": steps, "process_locked": True},
            f"Mapped process for {node.label}",
            trigger_dependency_check=True,
            should_auto_save=True,
        )

    def generate_summary(
        self, node_id: str, service: GenerationService, guidance: str | None = None
    ) -> Snapshot | None:
        """Generate a summary of a node from its label, details and steps.

        Raises:
            GenerationError: The service failed; the document is unchanged.
        """
        node = self.find_by_id(node_id)
        if node is None:
            return None
        request = self._request(node, guidance)
        text = self._call(
            "Summary", node_id, lambda: text_from_generated(service.summary(request))
        )
        return self.update_node(
            node_id,
            lambda n: {"summary": text},
            f"Updated summary for {node.label}",
            trigger_dependency_check=True,
            should_auto_save=True,
        )

    def generate_map(self, text: str, service: GenerationService) -> Snapshot:
        """Generate a whole map from source text and load it.

        History is reset to one "Initial Generation" entry and ``text``
        becomes the document's source text.

        Raises:
            GenerationError: The service failed; the document is unchanged.
        """
        root = self._call("Map", None, lambda: tree_from_generated(service.mind_map(text)))
        self.source_text = text
        snapshot = self.load(root, "Initial Generation")
        if self._auto_save is not None:
            self._auto_save(self._root)
        return snapshot


__all__ = ["MindMapDocument", "UpdateFn"]
