"""
mindweave.commands.outline - Print a session's mind map as a numbered outline.
"""

from __future__ import annotations

import argparse

from mindweave.document.MapNode import MapNode
from mindweave.document.serialize import to_markdown_outline
from mindweave.persistence import load_session


def run(args: argparse.Namespace) -> int:
    """Run the outline command."""
    session = load_session(args.session)
    if args.markdown:
        print(to_markdown_outline(session.mind_map, not args.no_descriptions), end="")
    else:
        for line in format_outline(session.mind_map):
            print(line)
    return 0


def format_outline(root: MapNode) -> list[str]:
    """Indented plain-text outline lines, root first."""
    lines = [root.label]

    def _visit(node: MapNode, number: str, depth: int) -> None:
        flag = "  [review]" if node.is_flagged_for_review else ""
        lines.append(f"{'  ' * depth}{number} {node.label}{flag}")
        for i, child in enumerate(node.children):
            _visit(child, f"{number}.{i + 1}", depth + 1)

    for i, child in enumerate(root.children):
        _visit(child, f"1.{i + 1}", 1)
    return lines
