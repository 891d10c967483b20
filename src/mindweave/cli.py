"""
mindweave.cli - Command-line interface.

Main entry point for the mindweave CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mindweave import __version__
from mindweave.commands import flow_cmd, matrix_cmd, mesh_cmd, outline, serve
from mindweave.events import configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mindweave",
        description="Versioned mind maps, process flows and systems meshes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mindweave outline session.json              # Numbered outline
  mindweave outline session.json --markdown   # Markdown export
  mindweave flow session.json NODE_ID         # Projected process flow
  mindweave mesh session.json --data Position # Mesh tree for one payload
  mindweave matrix session.json -o out.csv    # Adjacency matrix CSV
  mindweave serve session.json --port 5055    # REST API

Configuration:
  .mindweave.toml is searched upward from the current directory.
  MINDWEAVE_<SECTION>_<KEY> environment variables override it.

For detailed command help: mindweave <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"mindweave {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # outline command
    outline_parser = subparsers.add_parser(
        "outline",
        help="Print the mind map as a numbered outline",
    )
    outline_parser.add_argument("session", type=Path, help="Session JSON file")
    outline_parser.add_argument(
        "--markdown",
        action="store_true",
        help="Print a markdown document instead of an indented outline",
    )
    outline_parser.add_argument(
        "--no-descriptions",
        action="store_true",
        help="Leave node descriptions out of the markdown export",
    )

    # flow command
    flow_parser = subparsers.add_parser(
        "flow",
        help="Show the projected flow of a node's process steps",
    )
    flow_parser.add_argument("session", type=Path, help="Session JSON file")
    flow_parser.add_argument("node_id", help="ID of the node holding the process")
    flow_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output the flow tree as JSON",
    )
    flow_parser.add_argument(
        "--sequence",
        action="store_true",
        help="Output Mermaid sequence diagram source instead",
    )

    # mesh command
    mesh_parser = subparsers.add_parser(
        "mesh",
        help="Project the systems mesh into a tree",
    )
    mesh_parser.add_argument("session", type=Path, help="Session JSON file")
    mesh_parser.add_argument(
        "--root",
        help="Root actor ID (default: aircraft/pilot actor or the first one)",
        metavar="ACTOR_ID",
    )
    mesh_parser.add_argument(
        "--data",
        help="Only follow interactions carrying this payload",
        metavar="PAYLOAD",
    )
    mesh_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output the tree as JSON",
    )

    # matrix command
    matrix_parser = subparsers.add_parser(
        "matrix",
        help="Export the actor adjacency matrix as CSV",
    )
    matrix_parser.add_argument("session", type=Path, help="Session JSON file")
    matrix_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file (default: stdout)",
        metavar="PATH",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve a session over the REST API",
    )
    serve_parser.add_argument("session", type=Path, help="Session JSON file")
    serve_parser.add_argument(
        "--port",
        type=int,
        help="Port to listen on (default: [server] port)",
    )
    serve_parser.add_argument(
        "--host",
        help="Interface to bind (default: [server] host)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install mindweave[completion]
    # Then activate: eval "$(register-python-argcomplete mindweave)"
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        # Dispatch to command handlers
        if args.command == "outline":
            return outline.run(args)
        elif args.command == "flow":
            return flow_cmd.run(args)
        elif args.command == "mesh":
            return mesh_cmd.run(args)
        elif args.command == "matrix":
            return matrix_cmd.run(args)
        elif args.command == "serve":
            return serve.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
