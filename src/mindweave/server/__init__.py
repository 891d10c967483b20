"""mindweave.server - Flask REST API server.

Provides a thin REST wrapper over the pure handlers in
``mindweave.server.api``, exposing the live document, its history and
the systems views over HTTP.
"""

from mindweave.server.app import create_app

__all__ = ["create_app"]
