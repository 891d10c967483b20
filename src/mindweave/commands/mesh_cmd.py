"""
mindweave.commands.mesh_cmd - Project a session's systems mesh into a tree.
"""

from __future__ import annotations

import argparse
import json
import sys

from mindweave.persistence import load_session
from mindweave.systems.mesh import MeshNode, build_system_tree, mesh_tree_to_dict


def run(args: argparse.Namespace) -> int:
    """Run the mesh command."""
    session = load_session(args.session)
    view = session.systems_view
    if view is None or not view.actors:
        print("Session has no systems view", file=sys.stderr)
        return 1

    root_id = args.root or view.default_root_id()
    tree = build_system_tree(view, root_id, args.data)
    if tree is None:
        print(f"Error: actor {root_id} not found", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(mesh_tree_to_dict(tree), indent=2, ensure_ascii=False))
    else:
        for line in format_mesh(tree):
            print(line)
    return 0


def format_mesh(root: MeshNode) -> list[str]:
    """Indented text rendering of a mesh tree."""
    lines = []
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        edge = f"{node.link_label} " if node.link_label else ""
        lines.append(f"{'  ' * depth}{edge}{node.label} ({node.actor.type.value})")
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return lines
