"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from wilds.core.types import ItemCategory


@dataclass(slots=True)
class ItemDef:
    """Resource, consumable or quest item definition."""

    id: str
    name: str
    description: str
    category: ItemCategory
    effect_description: str | None = None


@dataclass(slots=True)
class ItemStackDef:
    """A quantity of a single item, used for costs, rewards and drops."""

    item_id: str
    quantity: int
