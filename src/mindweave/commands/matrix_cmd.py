"""
mindweave.commands.matrix_cmd - Export a session's adjacency matrix as CSV.
"""

from __future__ import annotations

import argparse
import sys

from mindweave.persistence import load_session
from mindweave.systems.matrix import build_matrix, matrix_to_csv


def run(args: argparse.Namespace) -> int:
    """Run the matrix command."""
    session = load_session(args.session)
    if session.systems_view is None:
        print("Session has no systems view", file=sys.stderr)
        return 1

    csv_text = matrix_to_csv(build_matrix(session.systems_view))
    if args.output:
        args.output.write_text(csv_text, encoding="utf-8")
        print(f"Wrote {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(csv_text)
    return 0
