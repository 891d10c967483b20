"""History types for the mind-map document.

This module provides the bounded snapshot stack behind undo/redo:
- Snapshot: one committed copy of the whole tree
- HistoryStack: ordered snapshots plus a current index
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime

from mindweave.document.MapNode import MapNode

DEFAULT_CAPACITY = 10


@dataclass(frozen=True)
class Snapshot:
    """A committed copy of the document tree.

    Snapshots are immutable by convention: once handed to the stack,
    nothing may modify ``data``.

    Attributes:
        data: Root of the tree at commit time.
        description: Human-readable description of the change.
        timestamp: When the snapshot was committed.
    """

    data: MapNode
    description: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"[{self.timestamp:%H:%M:%S}] {self.description}"


class HistoryStack:
    """Bounded, branch-truncating snapshot history.

    Committing while positioned before the end discards the redo branch.
    Once more than ``capacity`` snapshots exist, the oldest are evicted.
    Restoring only moves the index, so redo stays possible until the
    next commit.

    Example:
        >>> history = HistoryStack(capacity=3)
        >>> history.commit(MapNode(label="A"), "first")
        Snapshot(...)
        >>> history.commit(MapNode(label="B"), "second")
        Snapshot(...)
        >>> history.undo().description
        'first'
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize an empty history.

        Raises:
            ValueError: If capacity is less than 1.
        """
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: list[Snapshot] = []
        self._index = -1

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def current_index(self) -> int:
        """Index of the snapshot matching the live document (-1 if empty)."""
        return self._index

    @property
    def current(self) -> Snapshot | None:
        """The snapshot at the current index, or None if empty."""
        if 0 <= self._index < len(self._entries):
            return self._entries[self._index]
        return None

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def commit(self, data: MapNode, description: str) -> Snapshot:
        """Append a snapshot after the current index.

        Args:
            data: Tree to record. The caller must not modify it afterwards.
            description: Description of the change.

        Returns:
            The new Snapshot.
        """
        snapshot = Snapshot(data=data, description=description)
        del self._entries[self._index + 1 :]
        self._entries.append(snapshot)
        while len(self._entries) > self._capacity:
            self._entries.pop(0)
        self._index = len(self._entries) - 1
        return snapshot

    def restore(self, index: int) -> Snapshot | None:
        """Move to the snapshot at ``index``.

        Args:
            index: Target position.

        Returns:
            The snapshot moved to, or None if index is out of range.
        """
        if index < 0 or index >= len(self._entries):
            return None
        self._index = index
        return self._entries[index]

    def undo(self) -> Snapshot | None:
        """Step back one snapshot. No-op at the start of the stack."""
        return self.restore(self._index - 1)

    def redo(self) -> Snapshot | None:
        """Step forward one snapshot. No-op at the end of the stack."""
        return self.restore(self._index + 1)

    def reset(self, data: MapNode, description: str) -> Snapshot:
        """Replace the whole history with a single snapshot."""
        self.clear()
        return self.commit(data, description)

    def clear(self) -> None:
        """Remove all snapshots."""
        self._entries.clear()
        self._index = -1

    def iter_entries(self) -> Iterator[Snapshot]:
        """Iterate snapshots oldest first."""
        yield from self._entries

    def __len__(self) -> int:
        """Return the number of snapshots."""
        return len(self._entries)

    def __getitem__(self, index: int) -> Snapshot:
        return self._entries[index]


class HistoryView:
    """Read-only view of a HistoryStack.

    Handed out by MindMapDocument so callers can inspect history without
    moving the index behind the document's back; navigation goes through
    the document's ``undo``/``redo``/``restore``.
    """

    def __init__(self, stack: HistoryStack) -> None:
        self._stack = stack

    @property
    def capacity(self) -> int:
        return self._stack.capacity

    @property
    def current_index(self) -> int:
        return self._stack.current_index

    @property
    def current(self) -> Snapshot | None:
        return self._stack.current

    @property
    def can_undo(self) -> bool:
        return self._stack.can_undo

    @property
    def can_redo(self) -> bool:
        return self._stack.can_redo

    def iter_entries(self) -> Iterator[Snapshot]:
        return self._stack.iter_entries()

    def __len__(self) -> int:
        return len(self._stack)

    def __getitem__(self, index: int) -> Snapshot:
        return self._stack[index]


__all__ = ["DEFAULT_CAPACITY", "Snapshot", "HistoryStack", "HistoryView"]
