"""Session files - save and load a whole workspace as JSON.

A session bundles the mind map with the source text it was generated
from, the systems mesh, and the user's tuning, theme and settings.
The JSON layout is shared with the browser client, so keys are camelCase.

Public API
----------
- ``Session`` - in-memory session
- ``save_session`` / ``load_session`` - file round trip
- ``dump_session`` / ``parse_session`` - string round trip
- ``session_filename`` - default download name
- ``open_document`` - wrap a loaded session's map in a MindMapDocument
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from mindweave.document.builder import MindMapDocument
from mindweave.document.history import DEFAULT_CAPACITY
from mindweave.document.MapNode import MapNode
from mindweave.document.serialize import (
    node_from_dict,
    node_to_dict,
    systems_from_dict,
    systems_to_dict,
)
from mindweave.events import EventSink
from mindweave.systems.models import SystemsView

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "Untitled Session"

_UNSAFE_NAME = re.compile(r"[^a-z0-9]", re.IGNORECASE)


class SessionFormatError(Exception):
    """A session file is not valid JSON or lacks a mind map."""


@dataclass
class Session:
    """A saved workspace.

    Attributes:
        mind_map: Root of the mind map.
        session_name: Display name.
        original_text: Source text the map was generated from.
        systems_view: Actor/interaction mesh, if one was generated.
        tuning: Generation tuning options.
        theme: Client display theme name.
        settings: Client settings.
        timestamp: When the session was saved.
    """

    mind_map: MapNode
    session_name: str = DEFAULT_SESSION_NAME
    original_text: str = ""
    systems_view: SystemsView | None = None
    tuning: dict[str, Any] = field(default_factory=dict)
    theme: str | None = None
    settings: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime | None = None


def session_filename(name: str, when: datetime | None = None) -> str:
    """Default file name for a saved session.

    Non-alphanumeric characters become dashes and the name is cut to 50
    characters, falling back to "session" when nothing is left.
    """
    safe = _UNSAFE_NAME.sub("-", name)[:50] or "session"
    when = when or datetime.now()
    stamp = re.sub(r"[:.]", "-", when.isoformat(timespec="milliseconds"))
    return f"{safe}-{stamp}.json"


def session_to_dict(session: Session) -> dict[str, Any]:
    return {
        "timestamp": (session.timestamp or datetime.now()).isoformat(),
        "sessionName": session.session_name,
        "originalText": session.original_text,
        "mindMap": node_to_dict(session.mind_map),
        "systemsView": (
            systems_to_dict(session.systems_view) if session.systems_view is not None else None
        ),
        "tuning": dict(session.tuning),
        "theme": session.theme,
        "settings": dict(session.settings),
    }


def dump_session(session: Session) -> str:
    """Serialize a session to indented JSON text."""
    return json.dumps(session_to_dict(session), indent=2, ensure_ascii=False)


def _collapse_below_root(root: MapNode) -> None:
    for node in root.walk():
        node.collapsed = True
    root.collapsed = False


def parse_session(text: str) -> Session:
    """Parse session JSON text.

    Every node except the root comes back collapsed.

    Raises:
        SessionFormatError: If the text is not JSON, has no ``mindMap``,
            or holds malformed node or mesh data.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SessionFormatError(f"Invalid session JSON: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("mindMap"), dict):
        raise SessionFormatError("Invalid session file: missing mindMap")

    try:
        root = node_from_dict(data["mindMap"])
        systems = data.get("systemsView")
        systems_view = systems_from_dict(systems) if isinstance(systems, dict) else None
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise SessionFormatError(f"Invalid session file: {e}") from e

    _collapse_below_root(root)

    timestamp = None
    if data.get("timestamp"):
        try:
            timestamp = datetime.fromisoformat(str(data["timestamp"]).replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Ignoring unparseable session timestamp %r", data["timestamp"])

    return Session(
        mind_map=root,
        session_name=data.get("sessionName") or DEFAULT_SESSION_NAME,
        original_text=data.get("originalText") or "",
        systems_view=systems_view,
        tuning=dict(data.get("tuning") or {}),
        theme=data.get("theme"),
        settings=dict(data.get("settings") or {}),
        timestamp=timestamp,
    )


def save_session(session: Session, path: Path) -> Path:
    """Write a session to ``path``.

    If ``path`` is a directory, a file named by ``session_filename`` is
    created inside it.

    Returns:
        The file written.
    """
    path = Path(path)
    if path.is_dir():
        path = path / session_filename(session.session_name)
    path.write_text(dump_session(session), encoding="utf-8")
    logger.info("Session saved to %s", path)
    return path


def load_session(path: Path) -> Session:
    """Read a session file.

    Raises:
        SessionFormatError: If the file is not a valid session.
        OSError: If the file cannot be read.
    """
    session = parse_session(Path(path).read_text(encoding="utf-8"))
    logger.info("Session loaded from %s", path)
    return session


def open_document(
    session: Session,
    events: EventSink | None = None,
    capacity: int = DEFAULT_CAPACITY,
    auto_save: Callable[[MapNode], None] | None = None,
) -> MindMapDocument:
    """Create a document whose single history entry is the imported map."""
    document = MindMapDocument(
        events=events,
        capacity=capacity,
        auto_save=auto_save,
        source_text=session.original_text,
    )
    document.load(session.mind_map, "Imported Session")
    return document


__all__ = [
    "DEFAULT_SESSION_NAME",
    "Session",
    "SessionFormatError",
    "session_filename",
    "session_to_dict",
    "dump_session",
    "parse_session",
    "save_session",
    "load_session",
    "open_document",
]
