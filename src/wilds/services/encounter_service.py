"""Encounter engine: creature selection, spawn rolls and encounter lifecycle."""
from __future__ import annotations

import logging
from typing import List, Tuple

from wilds.config import DEFAULT_CONFIG, EngineConfig
from wilds.core.rng import RNG
from wilds.core.types import ReputationTier
from wilds.data.repositories import CreaturesRepository, LocationsRepository
from wilds.domain.defs import CreatureDef, LocationDef
from wilds.domain.log import LogEntry, make_log_entry
from wilds.domain.state import EncounterState, WorldState
from wilds.services import narrative

logger = logging.getLogger(__name__)


def reputation_tier(forest_reputation: int) -> ReputationTier:
    """Bucket a forest regard score into its tier.

    Checked in order revered, favour, hostile, uneasy; anything else is neutral.
    """
    if forest_reputation >= 25:
        return "revered"
    if forest_reputation >= 10:
        return "favour"
    if forest_reputation <= -20:
        return "hostile"
    if forest_reputation <= -5:
        return "uneasy"
    return "neutral"


class EncounterService:
    """Decides when creatures appear and builds the encounter they start."""

    def __init__(
        self,
        *,
        creatures_repo: CreaturesRepository,
        locations_repo: LocationsRepository,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self._creatures_repo = creatures_repo
        self._locations_repo = locations_repo
        self._config = config

    def tier(self, state: WorldState) -> ReputationTier:
        return reputation_tier(state.flags.forest_reputation)

    def creatures_for_location(self, location_id: str) -> List[CreatureDef]:
        location = self._locations_repo.get(location_id)
        return self._creatures_repo.for_biome(location.biome)

    def base_chance(self, state: WorldState, location: LocationDef) -> float:
        """Return the location's spawn chance, honouring the first matching flag override."""
        for override in location.encounter_overrides:
            if state.flags.is_set(override.flag):
                return override.chance
        return location.encounter_chance

    def encounter_chance(self, state: WorldState, location_id: str | None = None) -> float:
        location = self._locations_repo.get(location_id or state.current_location_id)
        chance = self.base_chance(state, location)
        if chance <= 0.0:
            return 0.0
        tier = self.tier(state)
        if tier == "hostile":
            chance += self._config.hostile_spawn_bonus
        elif tier == "uneasy":
            chance += self._config.uneasy_spawn_bonus
        else:
            return chance
        return min(chance, self._config.spawn_chance_ceiling)

    def spare_chance(self, state: WorldState) -> float:
        """Return the chance a decided spawn is called off, non-zero only at favour or better."""
        if self.tier(state) not in ("favour", "revered"):
            return 0.0
        return min(state.flags.forest_reputation / 100, self._config.spare_chance_cap)

    def maybe_trigger(self, state: WorldState, *, rng: RNG) -> Tuple[WorldState, List[LogEntry]]:
        """Roll for a spawn at the current location.

        Draw order is fixed: spawn roll, creature pick, then the spare roll.
        """
        if state.in_encounter or state.run_ended:
            return state, []
        eligible = self.creatures_for_location(state.current_location_id)
        if not eligible:
            return state, []
        chance = self.encounter_chance(state)
        roll = rng.random()
        logger.debug(
            "Spawn roll at %s: %.3f against %.3f", state.current_location_id, roll, chance
        )
        if roll >= chance:
            return state, []
        creature = rng.choice(eligible)
        spare = self.spare_chance(state)
        if spare > 0.0:
            spare_roll = rng.random()
            logger.debug("Spare roll for %s: %.3f against %.3f", creature.id, spare_roll, spare)
            if spare_roll < spare:
                return state, [make_log_entry("narration", narrative.SPARED_TEXT)]
        return self.start_encounter(state, creature)

    def start_encounter(
        self, state: WorldState, creature: CreatureDef
    ) -> Tuple[WorldState, List[LogEntry]]:
        entries: List[LogEntry] = []
        flavour = narrative.encounter_flavour(self.tier(state), creature.name)
        if flavour:
            entries.append(make_log_entry("narration", flavour))
        location = self._locations_repo.get(state.current_location_id)
        entries.append(
            make_log_entry(
                "combat",
                narrative.encounter_line(location.name, creature.name),
                creature_id=creature.id,
            )
        )
        return self.create_encounter(state, creature), entries

    @staticmethod
    def create_encounter(state: WorldState, creature: CreatureDef) -> WorldState:
        return state.with_encounter(EncounterState(creature_id=creature.id, hp=creature.hp))

    def find_creature(self, creature_id: str) -> CreatureDef | None:
        try:
            return self._creatures_repo.get(creature_id)
        except KeyError:
            return None
