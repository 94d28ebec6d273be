"""
catalog/models.py -- Reference data shown to customers building a cake.

Read-only at request time; replaced wholesale by LayerStore.reload().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Ingredient:
    name: str
    color: str  # display color, CSS hex


@dataclass
class Layer:
    """A cake layer ("Sponge", "Filling", ...) and the ingredients offered for it, in display order."""

    name: str
    ingredients: list[Ingredient] = field(default_factory=list)
    id: Optional[str] = None
