"""
mindweave - Versioned mind maps with process flows and systems meshes

mindweave keeps a hierarchical mind map as an immutable-by-convention
tree with bounded undo/redo history, flags nodes for review when the
nodes they watch change, and projects process step lists and actor
meshes into trees and matrices for display.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mindweave")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed

from mindweave.document.builder import MindMapDocument
from mindweave.document.history import HistoryStack, Snapshot
from mindweave.document.MapNode import MapNode, NodeType
from mindweave.process.models import ProcessBranch, ProcessStep, StepType
from mindweave.systems.models import SystemActor, SystemInteraction, SystemsView

__all__ = [
    "__version__",
    "MindMapDocument",
    "HistoryStack",
    "Snapshot",
    "MapNode",
    "NodeType",
    "ProcessBranch",
    "ProcessStep",
    "StepType",
    "SystemActor",
    "SystemInteraction",
    "SystemsView",
]
