"""
orders/store.py -- SQLAlchemy-backed order ledger.

Uses SQLAlchemy Core (not ORM) so the dataclasses in orders/models.py remain
the authoritative domain representation.

Pattern: Repository + Data Mapper. OrderStore is the repository; _row_to_order
is the mapper. Route handlers never touch SQL directly.

Field validation happens here, against the schema variant the store was built
with, so no unvalidated order can reach the table whichever route writes it.

The ledger does not touch the user directory. Placing an order is two writes
(insert here, then UserStore.record_order) with no transaction spanning them;
the caller orchestrates both and owns the failure between them.

Usage:
    store = OrderStore(db, schema="fixed")
    order = store.create_order(user.id, {"cake_name": "Emmas cool cake", ...})
    same = store.get_by_id(order.id)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text

from core.database import Database, new_id, now_iso
from core.validation import FIXED_ORDER_FIELDS, validate_order
from orders.models import CakeOrder, IngredientSelection

logger = logging.getLogger("cakemaker.orders")

LIST_LIMIT = 20
SAVE_FAILED = "Could not save the cake order."

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_orders = Table(
    "cake_orders",
    _metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),  # tie-breaker for newest-first
    Column("id", String(24), nullable=False, unique=True),
    Column("ordered_by", String(24), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("cake_name", String(100)),
    Column("topping", String(100)),
    Column("cover", String(100)),
    Column("layer1", String(100)),
    Column("layer2", String(100)),
    Column("sponge", String(100)),
    Column("ingredients", Text),  # JSON array of {layer, ingredient, color}
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderStore:
    def __init__(self, db: Database, schema: str = "fixed") -> None:
        if schema not in ("fixed", "ingredients"):
            raise ValueError(f"Unknown cake order schema: {schema!r}")
        self.db = db
        self.engine = db.engine
        self.schema = schema
        _metadata.create_all(self.engine)

    def create_order(self, owner_id: str, fields: Mapping[str, Any]) -> CakeOrder:
        """Validate fields for the active schema, stamp created_at, insert, return the stored order.

        fields uses domain names (cake_name, layer1, ingredients, ...). Keys
        that belong to the other schema variant are ignored.

        Raises ValidationError listing every invalid field.
        """
        validate_order(self.schema, fields).raise_for_errors(SAVE_FAILED)

        order = CakeOrder(ordered_by=owner_id, id=new_id(), created_at=now_iso())
        if self.schema == "fixed":
            for name in FIXED_ORDER_FIELDS:
                setattr(order, name, fields[name].strip())
        else:
            if fields.get("cake_name") is not None:
                order.cake_name = fields["cake_name"].strip()
            order.ingredients = [
                IngredientSelection(
                    layer=s["layer"].strip(),
                    ingredient=s["ingredient"].strip(),
                    color=s.get("color"),
                )
                for s in fields["ingredients"]
            ]

        with self.engine.connect() as conn:
            conn.execute(
                _orders.insert().values(
                    id=order.id,
                    ordered_by=order.ordered_by,
                    created_at=order.created_at,
                    cake_name=order.cake_name,
                    topping=order.topping,
                    cover=order.cover,
                    layer1=order.layer1,
                    layer2=order.layer2,
                    sponge=order.sponge,
                    ingredients=_dump_ingredients(order.ingredients) if self.schema == "ingredients" else None,
                )
            )
            conn.commit()
        logger.info("Cake order %s stored for user %s", order.id, owner_id)
        return order

    def get_by_id(self, order_id: str) -> Optional[CakeOrder]:
        with self.engine.connect() as conn:
            row = conn.execute(_orders.select().where(_orders.c.id == order_id)).fetchone()
        return _row_to_order(row) if row is not None else None

    def get_many(self, order_ids: Iterable[str]) -> list[CakeOrder]:
        """Resolve ids in one query, returned in the order given. Unknown ids are skipped."""
        ids = list(dict.fromkeys(order_ids))
        if not ids:
            return []
        with self.engine.connect() as conn:
            rows = conn.execute(_orders.select().where(_orders.c.id.in_(ids))).fetchall()
        by_id = {row.id: _row_to_order(row) for row in rows}
        return [by_id[i] for i in ids if i in by_id]

    def list_orders(self, limit: int = LIST_LIMIT) -> list[CakeOrder]:
        """Return at most LIST_LIMIT orders, newest first."""
        limit = max(0, min(limit, LIST_LIMIT))
        with self.engine.connect() as conn:
            rows = conn.execute(
                _orders.select().order_by(_orders.c.created_at.desc(), _orders.c.seq.desc()).limit(limit)
            ).fetchall()
        return [_row_to_order(r) for r in rows]


# ---------------------------------------------------------------------------
# Serialization helpers and row mapper
# ---------------------------------------------------------------------------


def _dump_ingredients(selections: list[IngredientSelection]) -> str:
    return json.dumps([{"layer": s.layer, "ingredient": s.ingredient, "color": s.color} for s in selections])


def _load_ingredients(raw: Optional[str]) -> list[IngredientSelection]:
    if not raw:
        return []
    return [IngredientSelection(layer=d["layer"], ingredient=d["ingredient"], color=d.get("color")) for d in json.loads(raw)]


def _row_to_order(row) -> CakeOrder:
    return CakeOrder(
        id=row.id,
        ordered_by=row.ordered_by,
        created_at=row.created_at,
        cake_name=row.cake_name,
        topping=row.topping,
        cover=row.cover,
        layer1=row.layer1,
        layer2=row.layer2,
        sponge=row.sponge,
        ingredients=_load_ingredients(row.ingredients),
    )
