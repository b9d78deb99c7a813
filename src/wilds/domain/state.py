"""Immutable world state snapshots.

Every dataclass here is frozen. Operations never mutate a state in place; they
build a new one with ``dataclasses.replace`` (see the ``with_*`` helpers) and
hand it back alongside their log entries.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Tuple

from wilds.domain.log import LogEntry
from wilds.domain.quest_state import QuestState

# Boolean narrative flags that content (e.g. encounter overrides) may refer to by name.
NARRATIVE_FLAG_NAMES: tuple[str, ...] = (
    "grove_healed",
    "lake_echoes_found",
    "glow_commune_complete",
    "seen_tutorial",
    "run_ended",
)


@dataclass(frozen=True, slots=True)
class PlayerRecord:
    """Player vitals, progression and carried items."""

    hp: int = 20
    max_hp: int = 20
    xp: int = 0
    level: int = 1
    inventory: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EncounterState:
    """An active fight with a single creature instance."""

    creature_id: str
    hp: int
    flavour_applied: bool = False


@dataclass(frozen=True, slots=True)
class NarrativeFlags:
    """World-altering facts recorded during a run.

    ``npc_memory`` maps an NPC id to the number of times the player has spoken
    with them. ``run_ended`` is a one-way latch; only a new run clears it.
    """

    grove_healed: bool = False
    lake_echoes_found: bool = False
    glow_commune_complete: bool = False
    seen_tutorial: bool = False
    run_ended: bool = False
    forest_reputation: int = 0
    npc_memory: Dict[str, int] = field(default_factory=dict)

    def is_set(self, flag: str) -> bool:
        if flag not in NARRATIVE_FLAG_NAMES:
            raise KeyError(flag)
        return bool(getattr(self, flag))

    def times_spoken(self, npc_id: str) -> int:
        return self.npc_memory.get(npc_id, 0)


@dataclass(frozen=True, slots=True)
class WorldState:
    """Root snapshot of a run."""

    current_location_id: str
    player: PlayerRecord
    quests: Tuple[QuestState, ...]
    flags: NarrativeFlags
    log: Tuple[LogEntry, ...] = ()
    current_encounter: EncounterState | None = None
    gather: Dict[str, int] = field(default_factory=dict)
    trade_usage: Dict[str, int] = field(default_factory=dict)

    @property
    def run_ended(self) -> bool:
        return self.flags.run_ended

    @property
    def in_encounter(self) -> bool:
        return self.current_encounter is not None

    @property
    def inventory(self) -> Dict[str, int]:
        return self.player.inventory

    def with_player(self, **changes) -> WorldState:
        return replace(self, player=replace(self.player, **changes))

    def with_flags(self, **changes) -> WorldState:
        return replace(self, flags=replace(self.flags, **changes))

    def with_inventory(self, inventory: Dict[str, int]) -> WorldState:
        return self.with_player(inventory=inventory)

    def with_location(self, location_id: str) -> WorldState:
        return replace(self, current_location_id=location_id)

    def with_gather(self, counters: Dict[str, int]) -> WorldState:
        return replace(self, gather=counters)

    def with_encounter(self, encounter: EncounterState | None) -> WorldState:
        return replace(self, current_encounter=encounter)

    def with_reputation_delta(self, delta: int) -> WorldState:
        return self.with_flags(forest_reputation=self.flags.forest_reputation + delta)

    def append_log(self, entries: Iterable[LogEntry]) -> WorldState:
        return replace(self, log=self.log + tuple(entries))
