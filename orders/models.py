"""
orders/models.py -- Domain dataclasses for cake orders.

These are pure data containers with zero logic. Validation and persistence
live in orders/store.py.

A CakeOrder uses one of two shapes, chosen by Settings.cake_order_schema:
  "fixed"        -- cake_name, topping, cover, layer1, layer2, sponge
  "ingredients"  -- a list of IngredientSelection (cake_name optional)
Slots that do not belong to the active shape stay None / empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class IngredientSelection:
    """One chosen ingredient for one cake layer, e.g. ("Filling", "Raspberry jam")."""

    layer: str
    ingredient: str
    color: Optional[str] = None


@dataclass
class CakeOrder:
    """A placed order. Never mutated after creation.

    ordered_by is the owning user's id -- a plain reference, not an embedded
    user. Resolve it through UserStore.get_by_id()/get_many() when needed.

    id and created_at are None before the record is written to the database.
    """

    ordered_by: str
    id: Optional[str] = None
    created_at: Optional[str] = None  # ISO 8601, set by store on insert
    cake_name: Optional[str] = None
    topping: Optional[str] = None
    cover: Optional[str] = None
    layer1: Optional[str] = None
    layer2: Optional[str] = None
    sponge: Optional[str] = None
    ingredients: list[IngredientSelection] = field(default_factory=list)
