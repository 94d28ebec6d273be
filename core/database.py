"""
core/database.py -- Shared store connection handle.

One Database is opened per process (in the API lifespan or a CLI command) and
passed to every repository: UserStore, OrderStore, LayerStore. Repositories
never create engines of their own, so there is exactly one connection pool to
open at startup and dispose at shutdown.

Single-statement writes are atomic at the row level; multi-statement work that
must be all-or-nothing uses engine.begin() inside the repository.

Usage:
    db = Database("sqlite:///cakemaker.db")
    db.ping()                 # raises on connectivity failure
    users = UserStore(db)
    db.close()
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers do not block behind a writer.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    """Return a fresh opaque record identity (24 hex chars)."""
    return secrets.token_hex(12)


class Database:
    """Owns the SQLAlchemy engine shared by all repositories."""

    def __init__(self, url: str) -> None:
        self.url = url
        connect_args: dict = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(url, connect_args=connect_args)
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)

    def ping(self) -> None:
        """Round-trip a trivial query. Raises sqlalchemy.exc.OperationalError when unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def close(self) -> None:
        self.engine.dispose()
