"""mindweave.server.api - Pure request handlers for the REST layer.

Each function takes the document (or systems view) plus plain
arguments and returns a JSON-compatible dict. Failures are reported as
``{"success": False, "error": ...}`` (mutations) or ``{"error": ...}``
(reads) instead of raised, so the Flask routes stay one-liners.
"""

from __future__ import annotations

from typing import Any

from mindweave.document.builder import MindMapDocument
from mindweave.document.MapNode import NodeNature, NodeType
from mindweave.document.paths import is_root_number
from mindweave.document.serialize import node_to_dict, to_markdown_outline
from mindweave.process.flow import build_flow_tree, count_nodes, flow_tree_to_dict
from mindweave.process.sequence import steps_to_sequence_diagram
from mindweave.systems.matrix import build_matrix, format_cell
from mindweave.systems.mesh import build_system_tree, mesh_tree_to_dict
from mindweave.systems.models import SystemsView

# Fields a client may patch directly; structure changes go through
# dedicated operations.
EDITABLE_FIELDS = {
    "label": str,
    "description": str,
    "node_type": NodeType,
    "nature": NodeNature,
    "cached_details": str,
    "details_locked": bool,
    "process_locked": bool,
    "summary": str,
    "collapsed": bool,
    "watched_node_ids": list,
    "is_process_candidate": bool,
}


def _coerce_patch(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate and convert a client field patch.

    Raises:
        ValueError: On unknown/uneditable fields or wrong value types.
    """
    patch: dict[str, Any] = {}
    for name, value in fields.items():
        kind = EDITABLE_FIELDS.get(name)
        if kind is None:
            raise ValueError(f"Field not editable: {name}")
        if kind in (NodeType, NodeNature):
            patch[name] = kind(value)
        elif kind is str and value is None and name in ("cached_details", "summary"):
            patch[name] = None
        elif not isinstance(value, kind):
            raise ValueError(f"Field {name} expects {kind.__name__}")
        else:
            patch[name] = value
    return patch


def _history_result(document: MindMapDocument) -> dict[str, Any]:
    history = document.history
    return {
        "current_index": history.current_index,
        "can_undo": history.can_undo,
        "can_redo": history.can_redo,
        "count": len(history),
    }


# ─────────────────────────────────────────────────────────────────────────────
# Reads
# ─────────────────────────────────────────────────────────────────────────────


def _get_status(document: MindMapDocument, systems: SystemsView | None) -> dict[str, Any]:
    root = document.root
    return {
        "loaded": root is not None,
        "root_id": root.id if root else None,
        "title": root.label if root else None,
        "node_count": document.node_count(),
        "flagged_count": (
            sum(1 for _ in root.find(lambda n: n.is_flagged_for_review)) if root else 0
        ),
        "history": _history_result(document),
        "has_systems_view": systems is not None,
    }


def _get_node(document: MindMapDocument, node_id: str) -> dict[str, Any]:
    location = document.locate(node_id)
    if location is None:
        return {"error": f"Node {node_id} not found"}
    number = document.number(node_id)
    result = node_to_dict(location.node)
    result["children"] = [
        {"id": c.id, "label": c.label, "childCount": c.child_count()}
        for c in location.node.children
    ]
    result["number"] = number
    result["isRoot"] = is_root_number(number)
    result["path"] = location.path
    result["parentId"] = location.parent.id if location.parent else None
    return result


def _get_outline(document: MindMapDocument, include_descriptions: bool = True) -> dict[str, Any]:
    if document.root is None:
        return {"error": "No document loaded"}
    return {"markdown": to_markdown_outline(document.root, include_descriptions)}


def _get_history(document: MindMapDocument) -> dict[str, Any]:
    result = _history_result(document)
    result["entries"] = [
        {
            "index": i,
            "description": snapshot.description,
            "timestamp": snapshot.timestamp.isoformat(),
        }
        for i, snapshot in enumerate(document.history.iter_entries())
    ]
    return result


def _get_process_flow(document: MindMapDocument, node_id: str) -> dict[str, Any]:
    node = document.find_by_id(node_id)
    if node is None:
        return {"error": f"Node {node_id} not found"}
    steps = node.cached_process or []
    tree = build_flow_tree(steps)
    return {
        "node_id": node_id,
        "step_count": len(steps),
        "flow": flow_tree_to_dict(tree) if tree else None,
        "flow_node_count": count_nodes(tree),
        "sequence_diagram": steps_to_sequence_diagram(steps),
    }


def _get_system_tree(
    systems: SystemsView | None, root_id: str | None, data_filter: str | None
) -> dict[str, Any]:
    if systems is None:
        return {"error": "No systems view loaded"}
    root_id = root_id or systems.default_root_id()
    if root_id is None:
        return {"error": "Systems view has no actors"}
    tree = build_system_tree(systems, root_id, data_filter or None)
    if tree is None:
        return {"error": f"Actor {root_id} not found"}
    return {
        "root_id": root_id,
        "data_filter": data_filter or None,
        "data_types": systems.data_types(),
        "tree": mesh_tree_to_dict(tree),
    }


def _get_matrix(systems: SystemsView | None) -> dict[str, Any]:
    if systems is None:
        return {"error": "No systems view loaded"}
    matrix = build_matrix(systems)
    return {
        "rows": [{"id": a.id, "name": a.name, "type": a.type.value} for a in matrix.rows],
        "cols": [{"id": a.id, "name": a.name, "type": a.type.value} for a in matrix.cols],
        "cells": {
            key: {"text": format_cell(items), "interaction_ids": [i.id for i in items]}
            for key, items in matrix.cells.items()
        },
    }


# ─────────────────────────────────────────────────────────────────────────────
# Mutations
# ─────────────────────────────────────────────────────────────────────────────


def _mutate_node(
    document: MindMapDocument,
    node_id: str,
    fields: dict[str, Any],
    description: str = "Update node",
    check_dependencies: bool = False,
) -> dict[str, Any]:
    try:
        patch = _coerce_patch(fields)
    except ValueError as e:
        return {"success": False, "error": str(e)}
    snapshot = document.update_node(
        node_id,
        lambda n: patch,
        description,
        trigger_dependency_check=check_dependencies,
        should_auto_save=True,
    )
    if snapshot is None:
        return {"success": False, "error": f"Node {node_id} not found"}
    return {"success": True, "description": snapshot.description, **_history_result(document)}


def _mutate_delete(document: MindMapDocument, node_id: str) -> dict[str, Any]:
    if document.root is not None and document.root.id == node_id:
        document.delete_node(node_id)
        return {"success": True, "document_cleared": True, **_history_result(document)}
    snapshot = document.delete_node(node_id)
    if snapshot is None:
        return {"success": False, "error": f"Node {node_id} not found"}
    return {"success": True, "description": snapshot.description, **_history_result(document)}


def _mutate_clear_flag(document: MindMapDocument, node_id: str) -> dict[str, Any]:
    snapshot = document.clear_review_flag(node_id)
    if snapshot is None:
        return {"success": False, "error": f"Node {node_id} not found"}
    return {"success": True, **_history_result(document)}


def _undo(document: MindMapDocument) -> dict[str, Any]:
    snapshot = document.undo()
    if snapshot is None:
        return {"success": False, "error": "Nothing to undo"}
    return {"success": True, "description": snapshot.description, **_history_result(document)}


def _redo(document: MindMapDocument) -> dict[str, Any]:
    snapshot = document.redo()
    if snapshot is None:
        return {"success": False, "error": "Nothing to redo"}
    return {"success": True, "description": snapshot.description, **_history_result(document)}


def _restore(document: MindMapDocument, index: int) -> dict[str, Any]:
    snapshot = document.restore(index)
    if snapshot is None:
        return {"success": False, "error": f"No history entry at index {index}"}
    return {"success": True, "description": snapshot.description, **_history_result(document)}


__all__ = [
    "EDITABLE_FIELDS",
    "_get_status",
    "_get_node",
    "_get_outline",
    "_get_history",
    "_get_process_flow",
    "_get_system_tree",
    "_get_matrix",
    "_mutate_node",
    "_mutate_delete",
    "_mutate_clear_flag",
    "_undo",
    "_redo",
    "_restore",
]
