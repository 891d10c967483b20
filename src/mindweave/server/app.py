"""mindweave.server.app - Flask app factory and REST API routes.

This is a THIN REST wrapper - all logic delegates to the pure handlers
in ``mindweave.server.api``.

State:
    _state = {"document": document, "systems": systems_view,
              "config": config, "session": session, "session_path": path}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from mindweave.document.builder import MindMapDocument
from mindweave.persistence import Session, save_session
from mindweave.server.api import (
    _get_history,
    _get_matrix,
    _get_node,
    _get_outline,
    _get_process_flow,
    _get_status,
    _get_system_tree,
    _mutate_clear_flag,
    _mutate_delete,
    _mutate_node,
    _redo,
    _restore,
    _undo,
)
from mindweave.systems.matrix import build_matrix, matrix_to_csv
from mindweave.systems.models import SystemsView

logger = logging.getLogger(__name__)


def create_app(
    document: MindMapDocument,
    systems: SystemsView | None = None,
    config: dict[str, Any] | None = None,
    session: Session | None = None,
    session_path: Path | None = None,
) -> Flask:
    """Create the Flask application with REST API routes.

    Args:
        document: Live mind-map document.
        systems: Systems mesh, if the session has one.
        config: mindweave configuration dict.
        session: Loaded session, used by /api/save.
        session_path: File /api/save writes to.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    CORS(app)

    _state: dict[str, Any] = {
        "document": document,
        "systems": systems,
        "config": config or {},
        "session": session,
        "session_path": session_path,
    }

    def _json_object() -> dict[str, Any] | None:
        data = request.get_json(force=True, silent=True)
        return data if isinstance(data, dict) else None

    # ─────────────────────────────────────────────────────────────────
    # Read-only GET endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/status")
    def api_status():
        """GET /api/status - Document and history summary."""
        return jsonify(_get_status(_state["document"], _state["systems"]))

    @app.route("/api/node/<node_id>")
    def api_node(node_id: str):
        """GET /api/node/<node_id> - Node with its number and label path."""
        result = _get_node(_state["document"], node_id)
        if "error" in result:
            return jsonify(result), 404
        return jsonify(result)

    @app.route("/api/outline")
    def api_outline():
        """GET /api/outline?descriptions=false - Numbered markdown outline."""
        include = request.args.get("descriptions", "true").lower() != "false"
        result = _get_outline(_state["document"], include)
        if "error" in result:
            return jsonify(result), 404
        return jsonify(result)

    @app.route("/api/history")
    def api_history():
        """GET /api/history - Snapshot descriptions and current index."""
        return jsonify(_get_history(_state["document"]))

    @app.route("/api/process/<node_id>/flow")
    def api_process_flow(node_id: str):
        """GET /api/process/<node_id>/flow - Projected flow tree of a node's steps."""
        result = _get_process_flow(_state["document"], node_id)
        if "error" in result:
            return jsonify(result), 404
        return jsonify(result)

    @app.route("/api/systems/tree")
    def api_systems_tree():
        """GET /api/systems/tree?root=<actor>&data=<payload> - Mesh projected as a tree."""
        result = _get_system_tree(
            _state["systems"], request.args.get("root"), request.args.get("data")
        )
        if "error" in result:
            return jsonify(result), 404
        return jsonify(result)

    @app.route("/api/systems/matrix")
    def api_systems_matrix():
        """GET /api/systems/matrix - Adjacency matrix cells."""
        result = _get_matrix(_state["systems"])
        if "error" in result:
            return jsonify(result), 404
        return jsonify(result)

    @app.route("/api/systems/matrix.csv")
    def api_systems_matrix_csv():
        """GET /api/systems/matrix.csv - Adjacency matrix as CSV."""
        if _state["systems"] is None:
            return jsonify({"error": "No systems view loaded"}), 404
        csv_text = matrix_to_csv(build_matrix(_state["systems"]))
        return Response(
            csv_text,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=systems-matrix.csv"},
        )

    # ─────────────────────────────────────────────────────────────────
    # Mutation POST endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/mutate/node", methods=["POST"])
    def api_mutate_node():
        """POST /api/mutate/node - Patch node fields.

        Body: {"node_id": ..., "fields": {...}, "description": ...,
        "check_dependencies": bool}
        """
        data = _json_object()
        if data is None:
            return jsonify({"success": False, "error": "JSON object body required"}), 400
        node_id = data.get("node_id", "")
        fields = data.get("fields")
        if not node_id or not isinstance(fields, dict) or not fields:
            return jsonify({"success": False, "error": "node_id and fields required"}), 400
        result = _mutate_node(
            _state["document"],
            node_id,
            fields,
            data.get("description") or "Update node",
            bool(data.get("check_dependencies", False)),
        )
        if result.get("success"):
            status_code = 200
        elif _state["document"].find_by_id(node_id) is None:
            status_code = 404
        else:
            status_code = 400
        return jsonify(result), status_code

    @app.route("/api/mutate/delete", methods=["POST"])
    def api_mutate_delete():
        """POST /api/mutate/delete - Delete a node and its subtree."""
        data = _json_object()
        if data is None:
            return jsonify({"success": False, "error": "JSON object body required"}), 400
        node_id = data.get("node_id", "")
        if not node_id:
            return jsonify({"success": False, "error": "node_id required"}), 400
        result = _mutate_delete(_state["document"], node_id)
        status_code = 200 if result.get("success") else 404
        return jsonify(result), status_code

    @app.route("/api/mutate/flag/clear", methods=["POST"])
    def api_mutate_flag_clear():
        """POST /api/mutate/flag/clear - Clear a node's review flag."""
        data = _json_object()
        if data is None:
            return jsonify({"success": False, "error": "JSON object body required"}), 400
        node_id = data.get("node_id", "")
        if not node_id:
            return jsonify({"success": False, "error": "node_id required"}), 400
        result = _mutate_clear_flag(_state["document"], node_id)
        status_code = 200 if result.get("success") else 404
        return jsonify(result), status_code

    @app.route("/api/mutate/undo", methods=["POST"])
    def api_mutate_undo():
        """POST /api/mutate/undo - Step back one snapshot."""
        result = _undo(_state["document"])
        status_code = 200 if result.get("success") else 400
        return jsonify(result), status_code

    @app.route("/api/mutate/redo", methods=["POST"])
    def api_mutate_redo():
        """POST /api/mutate/redo - Step forward one snapshot."""
        result = _redo(_state["document"])
        status_code = 200 if result.get("success") else 400
        return jsonify(result), status_code

    @app.route("/api/history/restore", methods=["POST"])
    def api_history_restore():
        """POST /api/history/restore - Jump to a snapshot by index."""
        data = _json_object()
        if data is None:
            return jsonify({"success": False, "error": "JSON object body required"}), 400
        index = data.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            return jsonify({"success": False, "error": "integer index required"}), 400
        result = _restore(_state["document"], index)
        status_code = 200 if result.get("success") else 400
        return jsonify(result), status_code

    # ─────────────────────────────────────────────────────────────────
    # Persistence endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/save", methods=["POST"])
    def api_save():
        """POST /api/save - Write the live document back to the session file."""
        session: Session | None = _state["session"]
        path: Path | None = _state["session_path"]
        document: MindMapDocument = _state["document"]
        if session is None or path is None:
            return jsonify({"success": False, "error": "No session file configured"}), 400
        if document.root is None:
            return jsonify({"success": False, "error": "No document loaded"}), 400
        session.mind_map = document.root
        session.systems_view = _state["systems"]
        try:
            written = save_session(session, path)
        except OSError as e:
            logger.error("Saving session to %s failed: %s", path, e)
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "path": str(written)})

    return app
