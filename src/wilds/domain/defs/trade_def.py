"""Trade offer definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .item_def import ItemStackDef


@dataclass(slots=True)
class TradeDef:
    """A barter offered at the trading location.

    ``base_limit`` of ``None`` means the trade can be repeated without limit.
    """

    id: str
    label: str
    costs: Tuple[ItemStackDef, ...]
    rewards: Tuple[ItemStackDef, ...]
    base_limit: int | None = None
