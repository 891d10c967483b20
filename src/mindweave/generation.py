"""Generation collaborator contract.

Content generation (new subtrees, details text, process steps, systems
meshes) is done by an external service. This module defines what the
document expects from it, the typed failures it may raise, and the
validation applied to its raw output before anything is committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, TypeVar

from mindweave.document.MapNode import DataSource, MapNode, new_node_id
from mindweave.document.serialize import node_from_dict, steps_from_list, systems_from_dict
from mindweave.events import EventKind, EventSink, emit
from mindweave.process.models import ProcessStep, StepType, renumber_steps
from mindweave.systems.models import SystemsView

T = TypeVar("T")


class GenerationError(Exception):
    """The generation service failed."""


class QuotaExceededError(GenerationError):
    """The generation service rejected the call for quota/rate reasons."""


class InvalidGenerationResult(GenerationError):
    """The service answered, but with data of the wrong shape."""


@dataclass(frozen=True)
class GenerationRequest:
    """Input for one generation call.

    Attributes:
        label: Label of the node being worked on.
        context_path: Labels from the root to the node.
        source_text: Original source text of the session.
        guidance: Optional free-text user guidance.
        context_details: Cached details of the node, if any.
        context_process: Cached process steps of the node, if any.
    """

    label: str
    context_path: tuple[str, ...]
    source_text: str = ""
    guidance: str | None = None
    context_details: str | None = None
    context_process: tuple[ProcessStep, ...] = ()


class GenerationService(Protocol):
    """What the document needs from a content generator."""

    def expand(self, request: GenerationRequest) -> list[dict[str, Any]]: ...

    def details(self, request: GenerationRequest) -> str: ...

    def process(self, request: GenerationRequest) -> list[dict[str, Any]]: ...

    def summary(self, request: GenerationRequest) -> str: ...

    def mind_map(self, text: str) -> dict[str, Any]: ...

    def systems(self, text: str) -> dict[str, Any]: ...


def classify_service_error(exc: Exception) -> GenerationError:
    """Map a raw service exception onto the GenerationError hierarchy."""
    if isinstance(exc, GenerationError):
        return exc
    message = str(exc)
    if "429" in message or "Quota exceeded" in message:
        return QuotaExceededError(message)
    return GenerationError(message)


def call_service(
    what: str, fn: Callable[[], T], events: EventSink | None = None, **data: Any
) -> T:
    """Run a generation call, classifying and reporting its failure.

    Raises:
        GenerationError: The classified failure; emitted first as a
            ``generation_failed`` event.
    """
    try:
        return fn()
    except Exception as exc:
        error = classify_service_error(exc)
        emit(
            events,
            EventKind.GENERATION_FAILED,
            f"{what} failed: {error}",
            quota=isinstance(error, QuotaExceededError),
            **data,
        )
        if error is exc:
            raise
        raise error from exc


def text_from_generated(value: Any) -> str:
    """Validate generated text (details, summaries).

    Raises:
        InvalidGenerationResult: If the service did not return a string.
    """
    if not isinstance(value, str):
        raise InvalidGenerationResult("Expected generated text")
    return value


def nodes_from_generated(items: Any) -> list[MapNode]:
    """Validate generated child nodes for an expansion.

    Accepts either a list of node dicts or an object wrapping one under
    "children". Every node gets a fresh id and the ``ai`` source tag.

    Raises:
        InvalidGenerationResult: If the payload is not a list of nodes.
    """
    if isinstance(items, dict) and isinstance(items.get("children"), list):
        items = items["children"]
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise InvalidGenerationResult("Expected a list of nodes")

    try:
        nodes = [node_from_dict(item) for item in items]
    except (ValueError, TypeError, AttributeError) as e:
        raise InvalidGenerationResult(str(e)) from e

    for node in nodes:
        for descendant in node.walk():
            descendant.id = new_node_id()
            descendant.source = DataSource.AI
    return nodes


def tree_from_generated(data: Any) -> MapNode:
    """Validate a generated whole-document tree.

    Ids supplied by the service are kept (missing ones are filled in);
    every node is tagged with the ``ai`` source.

    Raises:
        InvalidGenerationResult: If the payload is not a node object.
    """
    if not isinstance(data, dict):
        raise InvalidGenerationResult("Expected a mind map object")
    try:
        root = node_from_dict(data)
    except (ValueError, TypeError, AttributeError) as e:
        raise InvalidGenerationResult(str(e)) from e
    for node in root.walk():
        node.source = DataSource.AI
    return root


def steps_from_generated(items: Any) -> list[ProcessStep]:
    """Validate a generated step list.

    Missing ids are filled in, unknown step types fall back to actions,
    and steps are renumbered by list order.

    Raises:
        InvalidGenerationResult: If the payload is not a list of steps.
    """
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise InvalidGenerationResult("Expected a list of process steps")

    cleaned = []
    for item in items:
        raw = dict(item)
        if raw.get("type") not in {t.value for t in StepType}:
            raw["type"] = StepType.ACTION.value
        cleaned.append(raw)
    try:
        steps = steps_from_list(cleaned)
    except (ValueError, TypeError, AttributeError) as e:
        raise InvalidGenerationResult(f"Malformed process steps: {e}") from e
    return renumber_steps(steps)


def systems_from_generated(data: Any) -> SystemsView:
    """Validate a generated systems mesh.

    Raises:
        InvalidGenerationResult: If the payload is malformed.
    """
    if not isinstance(data, dict):
        raise InvalidGenerationResult("Expected a systems view object")
    try:
        return systems_from_dict(data)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise InvalidGenerationResult(f"Malformed systems view: {e}") from e


def generate_systems_view(
    text: str,
    service: GenerationService,
    cached: SystemsView | None = None,
    locked: bool = True,
    events: EventSink | None = None,
) -> SystemsView:
    """Return the systems view for a session's source text.

    A cached view is reused while it is locked; otherwise the service is
    asked for a new one.

    Raises:
        GenerationError: The service failed or returned a malformed view.
    """
    if cached is not None and locked:
        return cached
    return call_service(
        "Systems view", lambda: systems_from_generated(service.systems(text)), events
    )


__all__ = [
    "GenerationError",
    "QuotaExceededError",
    "InvalidGenerationResult",
    "GenerationRequest",
    "GenerationService",
    "classify_service_error",
    "call_service",
    "text_from_generated",
    "nodes_from_generated",
    "tree_from_generated",
    "steps_from_generated",
    "systems_from_generated",
    "generate_systems_view",
]
