"""
catalog/store.py -- Layer catalog: seed loading and read access.

reload() is a startup-time operation. It runs when RESET_DATABASE is set (in
the API lifespan, before the first request) or from `python main.py
reset-catalog`. It is not exposed over HTTP and must not run alongside live
traffic: readers during the swap would see the catalog disappear and return.

The delete and re-insert share one transaction, so a failed reload leaves the
previous catalog in place.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text

from catalog.models import Ingredient, Layer
from core.database import Database, new_id

logger = logging.getLogger("cakemaker.catalog")

SEED_PATH = Path(__file__).parent / "layers.json"

_metadata = MetaData()

_layers = Table(
    "layers",
    _metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(24), nullable=False, unique=True),
    Column("position", Integer, nullable=False),
    Column("name", String(100), nullable=False),
    Column("ingredients", Text, nullable=False),  # JSON array of {name, color}
)


def load_seed_layers(path: Path = SEED_PATH) -> list[Layer]:
    """Read the bundled seed file into Layer objects (ids unassigned)."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    return [
        Layer(
            name=entry["name"],
            ingredients=[Ingredient(name=i["name"], color=i["color"]) for i in entry["ingredients"]],
        )
        for entry in raw
    ]


class LayerStore:
    def __init__(self, db: Database) -> None:
        self.db = db
        self.engine = db.engine
        _metadata.create_all(self.engine)

    def reload(self, layers: Optional[list[Layer]] = None) -> int:
        """Replace the whole catalog with layers (default: the bundled seed). Returns the count inserted."""
        if layers is None:
            layers = load_seed_layers()
        with self.engine.begin() as conn:
            conn.execute(_layers.delete())
            for position, layer in enumerate(layers):
                conn.execute(
                    _layers.insert().values(
                        id=new_id(),
                        position=position,
                        name=layer.name,
                        ingredients=json.dumps([{"name": i.name, "color": i.color} for i in layer.ingredients]),
                    )
                )
        logger.info("Layer catalog reloaded (%d layers)", len(layers))
        return len(layers)

    def list_layers(self) -> list[Layer]:
        """Return every layer in seed order."""
        with self.engine.connect() as conn:
            rows = conn.execute(_layers.select().order_by(_layers.c.position, _layers.c.seq)).fetchall()
        return [_row_to_layer(r) for r in rows]


def _row_to_layer(row) -> Layer:
    return Layer(
        id=row.id,
        name=row.name,
        ingredients=[Ingredient(name=i["name"], color=i["color"]) for i in json.loads(row.ingredients)],
    )
