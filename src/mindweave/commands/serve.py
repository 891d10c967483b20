"""
mindweave.commands.serve - Serve a session over the REST API.
"""

from __future__ import annotations

import argparse
import logging
import sys

from mindweave.config import get_config
from mindweave.document.MapNode import MapNode
from mindweave.events import LoggingSink
from mindweave.persistence import load_session, open_document, save_session

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace) -> int:
    """Run the serve command."""
    from mindweave.server.app import create_app

    config = get_config(config_path=getattr(args, "config", None))
    session = load_session(args.session)
    auto_save = None
    if config["settings"].get("auto_save"):

        def auto_save(root: MapNode) -> None:
            session.mind_map = root
            save_session(session, args.session)

    document = open_document(
        session,
        events=LoggingSink(),
        capacity=int(config["history"]["capacity"]),
        auto_save=auto_save,
    )

    app = create_app(
        document,
        systems=session.systems_view,
        config=config,
        session=session,
        session_path=args.session,
    )
    host = args.host or config["server"]["host"]
    port = args.port or int(config["server"]["port"])
    logger.info("Serving %s on http://%s:%d", args.session, host, port)
    print(f"Serving '{session.session_name}' on http://{host}:{port}", file=sys.stderr)
    app.run(host=host, port=port)
    return 0
