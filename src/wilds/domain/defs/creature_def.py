"""Creature definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from wilds.core.types import Biome

from .item_def import ItemStackDef


@dataclass(slots=True)
class CreatureDef:
    """Combat stats and habitat for a creature that can be encountered."""

    id: str
    name: str
    description: str
    hp: int
    attack: int
    defence: int
    biome: Biome
    tags: Tuple[str, ...] = ()
    special_drop: ItemStackDef | None = None
