"""
auth/store.py -- SQLAlchemy Core persistence layer for the user directory.

Pattern: Repository + Data Mapper. UserStore is the repository; _row_to_user
is the mapper. Route and dependency code never touches SQL directly.

Tables:
  users        -- one row per account. email and access_token are UNIQUE; the
                  email constraint is the single place uniqueness is enforced.
  user_orders  -- the user's orderedCakes list, one row per (user, order) link
                  in placement order. UNIQUE(user_id, order_id) makes repeated
                  appends of the same order a no-op, and avoids a read-modify-
                  write of a list column when one user places two orders at once.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/, orders/, or catalog/.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, UniqueConstraint, select
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.database import Database, new_id, now_iso

LIST_LIMIT = 20

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),  # tie-breaker for newest-first
    Column("id", String(24), nullable=False, unique=True),
    Column("name", String(100), nullable=False),
    Column("email", String(254), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("access_token", String(256), nullable=False, unique=True),
    Column("created_at", String(32), nullable=False),
)

_user_orders = Table(
    "user_orders",
    _metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(24), nullable=False, index=True),
    Column("order_id", String(24), nullable=False),
    UniqueConstraint("user_id", "order_id", name="uq_user_order"),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records and their order links.

    Usage:
        store = UserStore(db)
        user = store.create_user(User(name="Emma", email="emma@emma.se",
                                      hashed_password=digest, access_token=token))
        same = store.get_by_access_token(token)
    """

    def __init__(self, db: Database) -> None:
        self.db = db
        self.engine = db.engine
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> User:
        """Insert a new user and return the stored record (id and created_at filled in).

        Raises sqlalchemy.exc.IntegrityError if the email is already registered.
        auth.accounts.register_user turns that into DuplicateEmail.
        """
        user_id = new_id()
        created_at = now_iso()
        with self.engine.connect() as conn:
            conn.execute(
                _users.insert().values(
                    id=user_id,
                    name=user.name,
                    email=user.email,
                    hashed_password=user.hashed_password,
                    access_token=user.access_token,
                    created_at=created_at,
                )
            )
            conn.commit()
        return User(
            id=user_id,
            name=user.name,
            email=user.email,
            hashed_password=user.hashed_password,
            access_token=user.access_token,
            created_at=created_at,
        )

    def record_order(self, user_id: str, order_id: str) -> bool:
        """Append order_id to the user's orderedCakes.

        Returns True if the link was added, False if it already existed.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(_user_orders.insert().values(user_id=user_id, order_id=order_id))
                conn.commit()
        except IntegrityError:
            return False
        return True

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_by_id(self, user_id: str) -> User | None:
        return self._get_one(_users.c.id == user_id)

    def get_by_email(self, email: str) -> User | None:
        """Exact match on the stored (already normalised) email. Used by sign-in only."""
        return self._get_one(_users.c.email == email)

    def get_by_access_token(self, token: str) -> User | None:
        """Exact match on the stored bearer token. O(1) via the UNIQUE index."""
        return self._get_one(_users.c.access_token == token)

    def get_many(self, user_ids: Iterable[str]) -> dict[str, User]:
        """Resolve a batch of ids in one query. Unknown ids are simply absent."""
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        with self.engine.connect() as conn:
            rows = conn.execute(_users.select().where(_users.c.id.in_(ids))).fetchall()
            links = _load_ordered_cakes(conn, ids)
        return {row.id: _row_to_user(row, links.get(row.id, [])) for row in rows}

    def list_users(self, limit: int = LIST_LIMIT) -> list[User]:
        """Return at most LIST_LIMIT users, newest first."""
        limit = max(0, min(limit, LIST_LIMIT))
        with self.engine.connect() as conn:
            rows = conn.execute(
                _users.select().order_by(_users.c.created_at.desc(), _users.c.seq.desc()).limit(limit)
            ).fetchall()
            links = _load_ordered_cakes(conn, [r.id for r in rows])
        return [_row_to_user(r, links.get(r.id, [])) for r in rows]

    def _get_one(self, condition) -> User | None:
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(condition)).fetchone()
            if row is None:
                return None
            links = _load_ordered_cakes(conn, [row.id])
        return _row_to_user(row, links.get(row.id, []))


# ---------------------------------------------------------------------------
# Helpers and row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _load_ordered_cakes(conn, user_ids: list[str]) -> dict[str, list[str]]:
    """Return {user_id: [order_id, ...]} in placement order, one query for the whole batch."""
    if not user_ids:
        return {}
    rows = conn.execute(
        select(_user_orders.c.user_id, _user_orders.c.order_id)
        .where(_user_orders.c.user_id.in_(user_ids))
        .order_by(_user_orders.c.seq)
    ).fetchall()
    result: dict[str, list[str]] = {}
    for row in rows:
        result.setdefault(row.user_id, []).append(row.order_id)
    return result


def _row_to_user(row, ordered_cakes: list[str]) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        access_token=row.access_token,
        created_at=row.created_at,
        ordered_cakes=list(ordered_cakes),
    )
