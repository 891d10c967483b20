"""
mindweave.commands.flow_cmd - Show the projected flow of a node's process.
"""

from __future__ import annotations

import argparse
import json
import sys

from mindweave.document.paths import find_node
from mindweave.persistence import load_session
from mindweave.process.flow import FlowNode, FlowNodeKind, build_flow_tree, flow_tree_to_dict
from mindweave.process.sequence import steps_to_sequence_diagram


def run(args: argparse.Namespace) -> int:
    """Run the flow command."""
    session = load_session(args.session)
    node = find_node(session.mind_map, args.node_id)
    if node is None:
        print(f"Error: node {args.node_id} not found", file=sys.stderr)
        return 1
    steps = node.cached_process or []
    if not steps:
        print(f"Node '{node.label}' has no process steps", file=sys.stderr)
        return 1

    if args.sequence:
        print(steps_to_sequence_diagram(steps), end="")
        return 0

    tree = build_flow_tree(steps)
    if args.json:
        print(json.dumps(flow_tree_to_dict(tree), indent=2, ensure_ascii=False))
    else:
        for line in format_flow(tree):
            print(line)
    return 0


def format_flow(root: FlowNode) -> list[str]:
    """Indented text rendering of a flow tree."""
    lines = []
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        edge = f"[{node.label}] " if node.label else ""
        if node.kind == FlowNodeKind.STEP:
            text = f"{node.step.step_number}. {node.title} ({node.role})"
        else:
            text = node.title
        lines.append(f"{'  ' * depth}{edge}{text}")
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return lines
