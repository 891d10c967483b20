"""Systems module - Actor/interaction mesh and its derived views.

Exports:
- ActorType, SystemActor, SystemInteraction, SystemsView: mesh model
- build_system_tree, MeshNode: mesh-to-tree projection
- build_matrix, AdjacencyMatrix, matrix_to_csv: adjacency matrix views
"""

from mindweave.systems.matrix import AdjacencyMatrix, build_matrix, matrix_to_csv
from mindweave.systems.mesh import MeshNode, build_system_tree, mesh_tree_to_dict
from mindweave.systems.models import ActorType, SystemActor, SystemInteraction, SystemsView

__all__ = [
    "ActorType",
    "SystemActor",
    "SystemInteraction",
    "SystemsView",
    "MeshNode",
    "build_system_tree",
    "mesh_tree_to_dict",
    "AdjacencyMatrix",
    "build_matrix",
    "matrix_to_csv",
]
