"""Location definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from wilds.core.types import Biome, Direction


@dataclass(slots=True)
class LocationExitDef:
    """Represents a directional exit to another location."""

    direction: Direction
    to_id: str
    requires_quest_active: str | None = None


@dataclass(slots=True)
class EncounterOverrideDef:
    """Replaces the base encounter chance while a narrative flag is set."""

    flag: str
    chance: float


@dataclass(slots=True)
class GatherDef:
    """Repeatable resource gathering available at a location."""

    item_id: str
    counter: str
    cap: int
    exhausted_text: str
    lines: Tuple[str, ...]


@dataclass(slots=True)
class LocationQuestProgressDef:
    """Quest step advanced when the player enters the location."""

    quest_id: str
    from_step: str
    to_step: str
    text: str


@dataclass(slots=True)
class LocationDef:
    """Describes a location in the Wilds."""

    id: str
    name: str
    biome: Biome
    description: str
    exits: Tuple[LocationExitDef, ...]
    encounter_chance: float = 0.0
    healed_description: str | None = None
    encounter_overrides: Tuple[EncounterOverrideDef, ...] = ()
    gather: GatherDef | None = None
    sense_lines: Tuple[str, ...] = ()
    healed_sense_lines: Tuple[str, ...] = ()
    quest_progress: LocationQuestProgressDef | None = None

    def exit_to(self, location_id: str) -> LocationExitDef | None:
        for exit_def in self.exits:
            if exit_def.to_id == location_id:
                return exit_def
        return None
