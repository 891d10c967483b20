"""Document module - Mind-map tree, history and dependency tracking.

Exports:
- MapNode: Unified node representation
- NodeType, NodeNature, DataSource: node classification enums
- NodeLocation: node with its label path and parent
- Snapshot, HistoryStack, HistoryView: bounded undo/redo history
- check_dependencies: one-hop review flagging of watchers

Note: MindMapDocument is in mindweave.document.builder
"""

from mindweave.document.MapNode import (
    DataSource,
    MapNode,
    NodeNature,
    NodeType,
    SuggestedPrompts,
    new_node_id,
)
from mindweave.document.dependencies import check_dependencies, find_watchers
from mindweave.document.history import DEFAULT_CAPACITY, HistoryStack, HistoryView, Snapshot
from mindweave.document.paths import (
    ROOT_NUMBER,
    NodeLocation,
    calculate_node_number,
    find_node,
    find_node_and_path,
)

__all__ = [
    "MapNode",
    "NodeType",
    "NodeNature",
    "DataSource",
    "SuggestedPrompts",
    "new_node_id",
    "NodeLocation",
    "ROOT_NUMBER",
    "find_node_and_path",
    "find_node",
    "calculate_node_number",
    "check_dependencies",
    "find_watchers",
    "DEFAULT_CAPACITY",
    "Snapshot",
    "HistoryStack",
    "HistoryView",
]
