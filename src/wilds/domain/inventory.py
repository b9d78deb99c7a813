"""Pure helpers over the player's item multiset.

Inventories are plain ``{item_id: quantity}`` mappings. Every helper returns a
new dict and never stores a zero or negative quantity.
"""
from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple


def count_item(inventory: Mapping[str, int], item_id: str) -> int:
    return inventory.get(item_id, 0)


def add_items(inventory: Mapping[str, int], item_id: str, quantity: int = 1) -> Dict[str, int]:
    updated = dict(inventory)
    if quantity <= 0:
        return updated
    updated[item_id] = updated.get(item_id, 0) + quantity
    return updated


def remove_items(inventory: Mapping[str, int], item_id: str, quantity: int = 1) -> Dict[str, int]:
    """Remove up to ``quantity`` units, pruning the entry once it reaches zero."""
    updated = dict(inventory)
    if quantity <= 0:
        return updated
    current = updated.get(item_id, 0)
    remaining = current - min(current, quantity)
    if remaining > 0:
        updated[item_id] = remaining
    else:
        updated.pop(item_id, None)
    return updated


def has_items(inventory: Mapping[str, int], requirements: Iterable[Tuple[str, int]]) -> bool:
    return all(count_item(inventory, item_id) >= quantity for item_id, quantity in requirements)


def missing_items(
    inventory: Mapping[str, int], requirements: Iterable[Tuple[str, int]]
) -> Dict[str, int]:
    """Return how many units of each requirement are still lacking."""
    missing: Dict[str, int] = {}
    for item_id, quantity in requirements:
        short = quantity - count_item(inventory, item_id)
        if short > 0:
            missing[item_id] = short
    return missing
