"""NPC definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from wilds.core.types import NpcId


@dataclass(slots=True)
class NpcDef:
    """A character the player can talk to at a fixed location."""

    id: NpcId
    name: str
    location_id: str
    intro_lines: Tuple[str, ...]
    repeat_lines: Tuple[str, ...]
