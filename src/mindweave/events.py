"""Document events.

Core operations can report what they did (commits, restores, review flags,
detected cycles) to an event sink supplied by the caller. There is no
module-level subscriber list: whoever builds a MindMapDocument or calls a
projector decides where events go.

Sinks:
- NullSink: discards everything (default)
- RecordingSink: keeps events in memory, e.g. for a developer log panel
- LoggingSink: forwards events to the standard ``logging`` package
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, Protocol


class EventKind(Enum):
    """Kinds of document events."""

    COMMIT = "commit"
    RESTORE = "restore"
    DEPENDENCY_FLAGGED = "dependency_flagged"
    CYCLE_DETECTED = "cycle_detected"
    NODE_DELETED = "node_deleted"
    GENERATION_FAILED = "generation_failed"


@dataclass(frozen=True)
class DocumentEvent:
    """A structured event emitted by a core operation."""

    kind: EventKind
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class EventSink(Protocol):
    """Receiver of document events."""

    def emit(self, event: DocumentEvent) -> None: ...


class NullSink:
    """Sink that drops every event."""

    def emit(self, event: DocumentEvent) -> None:
        return None


class RecordingSink:
    """Sink that keeps events in arrival order."""

    def __init__(self) -> None:
        self._events: list[DocumentEvent] = []

    def emit(self, event: DocumentEvent) -> None:
        self._events.append(event)

    def iter_events(self) -> Iterator[DocumentEvent]:
        yield from self._events

    def of_kind(self, kind: EventKind) -> list[DocumentEvent]:
        """Return recorded events of one kind."""
        return [e for e in self._events if e.kind == kind]

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()


_LEVELS = {
    EventKind.GENERATION_FAILED: logging.WARNING,
    EventKind.CYCLE_DETECTED: logging.DEBUG,
}


class LoggingSink:
    """Sink that writes events to a ``logging`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("mindweave.events")

    def emit(self, event: DocumentEvent) -> None:
        level = _LEVELS.get(event.kind, logging.INFO)
        self._logger.log(level, "%s %s", event, event.data or "")


def emit(sink: EventSink | None, kind: EventKind, message: str, **data: Any) -> None:
    """Send an event to ``sink`` if one was supplied."""
    if sink is not None:
        sink.emit(DocumentEvent(kind=kind, message=message, data=data))


def configure_logging(level: int = logging.WARNING) -> None:
    """Set up stderr logging for command-line and server entry points."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", "%H:%M:%S")
    )
    root = logging.getLogger("mindweave")
    root.handlers[:] = [handler]
    root.setLevel(level)


__all__ = [
    "EventKind",
    "DocumentEvent",
    "EventSink",
    "NullSink",
    "RecordingSink",
    "LoggingSink",
    "emit",
    "configure_logging",
]
