"""Document Serialization - Convert trees, steps and meshes to plain data.

This module provides functions to serialize MapNode trees, process step
lists and systems views to JSON-compatible dicts (using the camelCase keys
of the session file format) and back, plus a numbered markdown outline.
"""

from __future__ import annotations

from typing import Any

from mindweave.document.MapNode import (
    DataSource,
    MapNode,
    NodeNature,
    NodeType,
    SuggestedPrompts,
)
from mindweave.document.paths import ROOT_NUMBER
from mindweave.process.models import ProcessBranch, ProcessStep, StepType
from mindweave.systems.models import ActorType, SystemActor, SystemInteraction, SystemsView

# ─────────────────────────────────────────────────────────────────────────────
# Process steps
# ─────────────────────────────────────────────────────────────────────────────


def step_to_dict(step: ProcessStep) -> dict[str, Any]:
    """Serialize a ProcessStep to a JSON-compatible dict."""
    result: dict[str, Any] = {
        "id": step.id,
        "stepNumber": step.step_number,
        "type": step.type.value,
        "action": step.action,
        "description": step.description,
        "role": step.role,
    }
    if step.is_end_state:
        result["isEndState"] = True
    if step.branches:
        result["branches"] = [
            {"id": b.id, "label": b.label, "targetStepId": b.target_step_id}
            for b in step.branches
        ]
    return result


def step_from_dict(data: dict[str, Any]) -> ProcessStep:
    """Build a ProcessStep from its dict form.

    Raises:
        ValueError: If ``type`` is not a known step type.
    """
    branches = []
    for raw in data.get("branches") or []:
        branch = ProcessBranch(
            label=raw.get("label", ""),
            target_step_id=raw.get("targetStepId") or None,
        )
        if raw.get("id"):
            branch.id = raw["id"]
        branches.append(branch)

    step = ProcessStep(
        step_number=int(data.get("stepNumber", 1)),
        type=StepType(data.get("type") or "action"),
        action=data.get("action", ""),
        description=data.get("description", ""),
        role=data.get("role", ""),
        is_end_state=bool(data.get("isEndState", False)),
        branches=branches,
    )
    if data.get("id"):
        step.id = data["id"]
    return step


def steps_to_list(steps: list[ProcessStep]) -> list[dict[str, Any]]:
    return [step_to_dict(s) for s in steps]


def steps_from_list(items: list[dict[str, Any]]) -> list[ProcessStep]:
    return [step_from_dict(item) for item in items]


# ─────────────────────────────────────────────────────────────────────────────
# Mind-map nodes
# ─────────────────────────────────────────────────────────────────────────────


def node_to_dict(node: MapNode) -> dict[str, Any]:
    """Serialize a MapNode subtree to a JSON-compatible dict.

    Optional fields are omitted when unset, matching the session files
    written by earlier versions.

    Args:
        node: Subtree root.

    Returns:
        Dict suitable for JSON serialization.
    """
    result: dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "description": node.description,
        "nodeType": node.node_type.value,
        "nature": node.nature.value,
        "children": [node_to_dict(child) for child in node.children],
    }

    if node.source is not None:
        result["source"] = node.source.value
    if node.is_process_candidate:
        result["isProcessCandidate"] = True
    if node.suggested_prompts is not None:
        result["suggestedPrompts"] = {
            "expand": node.suggested_prompts.expand,
            "details": node.suggested_prompts.details,
            "process": node.suggested_prompts.process,
        }
    if node.cached_details is not None:
        result["cachedDetails"] = node.cached_details
        result["detailsLocked"] = node.details_locked
    if node.cached_process is not None:
        result["cachedProcess"] = steps_to_list(node.cached_process)
        result["processLocked"] = node.process_locked
    if node.summary is not None:
        result["summary"] = node.summary
    if node.collapsed:
        result["_collapsed"] = True
    if node.watched_node_ids:
        result["watchedNodeIds"] = list(node.watched_node_ids)
    if node.is_flagged_for_review:
        result["isFlaggedForReview"] = True
        result["flaggedSourceIds"] = list(node.flagged_source_ids)

    return result


def _prompts_from_dict(raw: Any) -> SuggestedPrompts | None:
    if not isinstance(raw, dict):
        return None
    return SuggestedPrompts(
        expand=raw.get("expand") or "",
        details=raw.get("details") or "",
        process=raw.get("process") or "",
    )


def node_from_dict(data: dict[str, Any]) -> MapNode:
    """Build a MapNode subtree from its dict form.

    Missing ids are replaced by fresh ones.

    Raises:
        ValueError: If an enum field holds an unknown value.
    """
    prompts = data.get("suggestedPrompts")
    cached_process = data.get("cachedProcess")
    source = data.get("source")

    node = MapNode(
        label=data.get("label", ""),
        description=data.get("description", ""),
        node_type=NodeType(data.get("nodeType") or "info"),
        nature=NodeNature(data.get("nature") or "fact"),
        children=[node_from_dict(child) for child in data.get("children") or []],
        cached_details=data.get("cachedDetails"),
        details_locked=bool(data.get("detailsLocked", False)),
        cached_process=steps_from_list(cached_process) if cached_process is not None else None,
        process_locked=bool(data.get("processLocked", False)),
        summary=data.get("summary"),
        collapsed=bool(data.get("_collapsed", False)),
        watched_node_ids=list(data.get("watchedNodeIds") or []),
        is_flagged_for_review=bool(data.get("isFlaggedForReview", False)),
        flagged_source_ids=list(data.get("flaggedSourceIds") or []),
        source=DataSource(source) if source else None,
        is_process_candidate=bool(data.get("isProcessCandidate", False)),
        suggested_prompts=_prompts_from_dict(prompts),
    )
    if data.get("id"):
        node.id = data["id"]
    return node


# ─────────────────────────────────────────────────────────────────────────────
# Systems view
# ─────────────────────────────────────────────────────────────────────────────


def systems_to_dict(view: SystemsView) -> dict[str, Any]:
    """Serialize a SystemsView to a JSON-compatible dict."""
    interactions = []
    for i in view.interactions:
        item: dict[str, Any] = {
            "id": i.id,
            "source": i.source,
            "target": i.target,
            "activity": i.activity,
            "data": i.data,
        }
        if i.sequence_diagram is not None:
            item["sequenceDiagram"] = i.sequence_diagram
        interactions.append(item)
    return {
        "actors": [{"id": a.id, "name": a.name, "type": a.type.value} for a in view.actors],
        "activities": list(view.activities),
        "interactions": interactions,
    }


def _endpoint_id(value: Any) -> str:
    # Older exports stored resolved actor objects instead of ids
    if isinstance(value, dict):
        return value.get("id") or value.get("name", "")
    return str(value)


def systems_from_dict(data: dict[str, Any]) -> SystemsView:
    """Build a SystemsView from its dict form.

    Interactions without an id get a fresh one.
    """
    actors = [
        SystemActor(
            id=raw["id"],
            name=raw.get("name", raw["id"]),
            type=ActorType(raw.get("type") or "system"),
        )
        for raw in data.get("actors") or []
    ]
    interactions = []
    for raw in data.get("interactions") or []:
        interaction = SystemInteraction(
            source=_endpoint_id(raw.get("source", "")),
            target=_endpoint_id(raw.get("target", "")),
            activity=raw.get("activity", ""),
            data=raw.get("data", ""),
            sequence_diagram=raw.get("sequenceDiagram"),
        )
        if raw.get("id"):
            interaction.id = raw["id"]
        interactions.append(interaction)
    return SystemsView(
        actors=actors,
        interactions=interactions,
        activities=list(data.get("activities") or []),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Outline export
# ─────────────────────────────────────────────────────────────────────────────


def to_markdown_outline(root: MapNode, include_descriptions: bool = True) -> str:
    """Generate a numbered markdown outline of the tree.

    The root becomes the document title; descendants get headings with
    their outline numbers (1.1, 1.1.2, ...). Heading depth is capped at 6.

    Args:
        root: Tree root.
        include_descriptions: Emit each node's description under its heading.

    Returns:
        Markdown string.
    """
    lines: list[str] = []

    def _emit(node: MapNode, number: str, depth: int) -> None:
        hashes = "#" * min(depth + 1, 6)
        if number == ROOT_NUMBER:
            lines.append(f"{hashes} {node.label}")
        else:
            lines.append(f"{hashes} {number} {node.label}")
        lines.append("")
        if include_descriptions and node.description:
            lines.append(node.description)
            lines.append("")
        if node.is_flagged_for_review:
            lines.append("> Flagged for review")
            lines.append("")
        base = "1" if number == ROOT_NUMBER else number
        for i, child in enumerate(node.children):
            _emit(child, f"{base}.{i + 1}", depth + 1)

    _emit(root, ROOT_NUMBER, 0)
    return "\n".join(lines)


__all__ = [
    "step_to_dict",
    "step_from_dict",
    "steps_to_list",
    "steps_from_list",
    "node_to_dict",
    "node_from_dict",
    "systems_to_dict",
    "systems_from_dict",
    "to_markdown_outline",
]
