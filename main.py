#!/usr/bin/env python3
"""
Cake Maker -- backend for ordering custom cakes.

Usage:
  python main.py serve
  python main.py serve --port 9000
  python main.py serve --reset
  python main.py reset-catalog
  python main.py reset-catalog --database-url sqlite:///cakemaker.db

Environment variables (see core/config.py for the full list):
  DATABASE_URL       SQLAlchemy URL of the store. Defaults to a SQLite file in the repo.
  PORT               Listening port (default 8087).
  RESET_DATABASE     "true" reseeds the layer catalog during startup.
  CAKE_ORDER_SCHEMA  "fixed" (default) or "ingredients".
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from catalog.store import LayerStore
from core.config import get_settings
from core.database import Database

logger = logging.getLogger("cakemaker.cli")


def reset_catalog(database_url: str) -> int:
    """Reseed the layer catalog. Returns the number of layers written."""
    db = Database(database_url)
    try:
        db.ping()
        return LayerStore(db).reload()
    finally:
        db.close()


def _serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = get_settings()
    if args.reset:
        # Before uvicorn starts, so no request can observe a half-swapped catalog.
        count = reset_catalog(settings.database_url)
        print(f"Layer catalog reset ({count} layers).")
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def _reset_catalog(args: argparse.Namespace) -> None:
    database_url = args.database_url or get_settings().database_url
    count = reset_catalog(database_url)
    print(f"Layer catalog reset ({count} layers).")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="cakemaker",
        description="Backend for the cake-ordering demo.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = subparsers.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default=None, help="Listen address (default: HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Listen port (default: PORT or 8087)")
    serve.add_argument("--reset", action="store_true", help="Reseed the layer catalog before serving")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    serve.set_defaults(handler=_serve)

    reset = subparsers.add_parser("reset-catalog", help="Reseed the layer catalog and exit")
    reset.add_argument("--database-url", default=None, metavar="URL", help="Override DATABASE_URL")
    reset.set_defaults(handler=_reset_catalog)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return
    args.handler(args)


if __name__ == "__main__":
    main()
