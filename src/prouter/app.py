"""Main ASGI application entry point.

Serves one site per sub-directory of the serve root, selected by the first
label of the request host::

    Starlette App
      └── /{path}  → SiteHandler
            acme.example.com/about    → <serve>/acme/about.md (rendered)
            acme.example.com/logo.png → <serve>/acme/logo.png
            widgets.example.com/      → 404 "Site not found: widgets"

Usage:
    prouter --serve ./public --port 8080

    # Or configure through the environment
    PROUTER_SERVE_PATH=./public python -m prouter
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
import sys

from pydantic import ValidationError

from . import __version__
from .app_builder import AppBuilder
from .config import Settings
from .observability import configure_logging


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prouter", description="Serve per-subdomain static and Markdown sites")
    parser.add_argument("--serve", dest="serve_path", help="Path to serve static files from")
    parser.add_argument("--address", help="Address to bind the server to (default all interfaces)")
    parser.add_argument("--port", type=int, help="Port to bind the server to (default 8080)")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (default info)")
    parser.add_argument(
        "--json-logs",
        dest="json_logs",
        action="store_true",
        default=None,
        help="Emit structured JSON log lines",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> Settings:
    """Build settings from environment variables overridden by command line flags."""
    args = build_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    return Settings(**overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the site server."""
    import uvicorn

    try:
        settings = load_settings(argv)
    except ValidationError as exc:
        configure_logging()
        logger.error("Configuration is invalid: %s", exc)
        sys.exit(1)

    configure_logging(settings.log_level, settings.json_logs, access_log=settings.access_log)

    logger.info("Starting prouter", extra={"version": __version__})
    logger.info("Using serve path", extra={"serve_path": str(settings.serve_path)})

    app = AppBuilder(settings).build()

    logger.info("Starting server", extra={"listen": settings.listen_address()})
    try:
        uvicorn.run(
            app,
            host=settings.bind_host(),
            port=settings.port,
            log_level=settings.log_level.lower(),
            log_config=None,  # Keep our logging configuration
            limit_concurrency=settings.uvicorn_limit_concurrency,
        )
    except (OSError, SystemExit) as exc:
        logger.error("Server failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
