"""Action dispatcher: one method per player intent.

Every public operation takes the current ``WorldState`` and returns an
``ActionResult`` holding the new state and the log entries it produced. The
input state is never modified. Player-facing precondition failures return the
input state unchanged with a single explanatory entry; only lookups of content
ids the engine itself names may raise.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Tuple

from wilds.config import DEFAULT_CONFIG, EngineConfig
from wilds.core.rng import RNG
from wilds.core.types import LogEntryType
from wilds.data.repositories import ItemsRepository, LocationsRepository
from wilds.domain.defs import CreatureDef, LocationDef, LocationExitDef
from wilds.domain.inventory import add_items, count_item, has_items, remove_items
from wilds.domain.log import ActionResult, LogEntry, make_log_entry
from wilds.domain.state import WorldState
from wilds.services import narrative
from wilds.services.dialogue_service import DialogueService
from wilds.services.encounter_service import EncounterService
from wilds.services.progression import award_xp
from wilds.services.quest_keys import (
    ECHOES_LISTEN_STEP,
    ECHOES_LOCATION_ID,
    ECHOES_QUEST_ID,
    ECHOES_TELL_STEP,
    GLOW_COMMUNE_COSTS,
    GLOW_DONE_STEP,
    GLOW_LOCATION_ID,
    GLOW_QUEST_ID,
    GLOW_READY_STEPS,
    GROVE_GATHER_STEP,
    GROVE_LOCATION_ID,
    GROVE_PERFORM_STEP,
    GROVE_QUEST_ID,
    GROVE_READY_STEPS,
    GROVE_RETURN_STEP,
    GROVE_RITUAL_COSTS,
)
from wilds.services.quest_service import QuestService
from wilds.services.trade_service import TradeService

logger = logging.getLogger(__name__)


def _message(state: WorldState, text: str, entry_type: LogEntryType = "system") -> ActionResult:
    return ActionResult(state=state, log_entries=(make_log_entry(entry_type, text),))


def _result(state: WorldState, entries: Iterable[LogEntry]) -> ActionResult:
    return ActionResult(state=state, log_entries=tuple(entries))


class ActionService:
    """Validates player intents and threads them through the lower services."""

    def __init__(
        self,
        *,
        items_repo: ItemsRepository,
        locations_repo: LocationsRepository,
        quest_service: QuestService,
        encounter_service: EncounterService,
        trade_service: TradeService,
        dialogue_service: DialogueService,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self._items_repo = items_repo
        self._locations_repo = locations_repo
        self._quests = quest_service
        self._encounters = encounter_service
        self._trades = trade_service
        self._dialogue = dialogue_service
        self._config = config

    # Movement -----------------------------------------------------------

    def available_exits(self, state: WorldState) -> List[LocationExitDef]:
        """Return the current location's exits, dropping quest-gated ones that are closed."""
        location = self._locations_repo.get(state.current_location_id)
        return [exit_def for exit_def in location.exits if self._exit_open(state, exit_def)]

    def move_to(self, state: WorldState, destination_id: str, *, rng: RNG) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        exit_def = next(
            (
                exit_def
                for exit_def in self.available_exits(state)
                if exit_def.to_id == destination_id
            ),
            None,
        )
        if exit_def is None:
            try:
                destination = self._locations_repo.get(destination_id)
            except KeyError:
                return _message(state, "You cannot find a way there from here.", "narration")
            return _message(state, f"You cannot go to {destination.name} from here.", "narration")

        destination = self._locations_repo.get(exit_def.to_id)
        new_state = state.with_location(destination.id)
        entries: List[LogEntry] = [
            make_log_entry(
                "narration",
                f"You move to {destination.name}. {self.describe_location(new_state, destination)}",
                location_id=destination.id,
            )
        ]
        new_state, progress_entries = self._progress_on_entry(new_state, destination)
        entries += progress_entries
        new_state, spawn_entries = self._encounters.maybe_trigger(new_state, rng=rng)
        return _result(new_state, entries + spawn_entries)

    def move_direction(self, state: WorldState, direction: str, *, rng: RNG) -> ActionResult:
        """Move along the exit declared for ``direction``."""
        for exit_def in self.available_exits(state):
            if exit_def.direction == direction:
                return self.move_to(state, exit_def.to_id, rng=rng)
        if state.run_ended:
            return self._run_ended(state)
        return _message(state, f"There is no way {direction} from here.", "narration")

    def describe_location(self, state: WorldState, location: LocationDef | None = None) -> str:
        location = location or self._locations_repo.get(state.current_location_id)
        if state.flags.grove_healed and location.healed_description:
            return location.healed_description
        return location.description

    def _exit_open(self, state: WorldState, exit_def: LocationExitDef) -> bool:
        if exit_def.requires_quest_active is None:
            return True
        return self._quests.is_active(state, exit_def.requires_quest_active)

    def _progress_on_entry(
        self, state: WorldState, location: LocationDef
    ) -> Tuple[WorldState, List[LogEntry]]:
        progress = location.quest_progress
        if progress is None or not self._quests.is_active_at(
            state, progress.quest_id, (progress.from_step,)
        ):
            return state, []
        state = self._quests.set_step(state, progress.quest_id, progress.to_step)
        state = state.with_reputation_delta(self._config.gated_entry_regard)
        return state, [make_log_entry("quest", progress.text, quest_id=progress.quest_id)]

    # Sense / gather -----------------------------------------------------

    def sense(self, state: WorldState, *, rng: RNG) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        location = self._locations_repo.get(state.current_location_id)
        lines = location.sense_lines
        if state.flags.grove_healed and location.healed_sense_lines:
            lines = location.healed_sense_lines
        text = rng.choice(lines) if lines else narrative.SENSE_FALLBACK_TEXT
        entries = [make_log_entry("narration", text)]

        new_state = state
        if location.id == ECHOES_LOCATION_ID and self._quests.is_active_at(
            state, ECHOES_QUEST_ID, (ECHOES_LISTEN_STEP,)
        ):
            new_state = new_state.with_flags(lake_echoes_found=True)
            new_state = self._quests.set_step(new_state, ECHOES_QUEST_ID, ECHOES_TELL_STEP)
            new_state = new_state.with_reputation_delta(self._config.echoes_regard)
            entries.append(
                make_log_entry(
                    "narration",
                    "Beneath the lapping water something answers, words almost, in a voice like the Lake's own.",
                )
            )
            entries.append(
                make_log_entry(
                    "quest",
                    "Quest updated: the Lake whispered something. The Hermit may understand it.",
                    quest_id=ECHOES_QUEST_ID,
                )
            )
        return _result(new_state, entries)

    def gather(self, state: WorldState, *, rng: RNG) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        location = self._locations_repo.get(state.current_location_id)
        gather_def = location.gather
        new_state = state
        entries: List[LogEntry] = []
        if gather_def is None:
            entries.append(make_log_entry("narration", rng.choice(narrative.NOTHING_TO_GATHER_LINES)))
        elif state.gather.get(gather_def.counter, 0) >= gather_def.cap:
            entries.append(make_log_entry("narration", gather_def.exhausted_text))
        else:
            gathered = state.gather.get(gather_def.counter, 0) + 1
            counters = dict(state.gather)
            counters[gather_def.counter] = gathered
            new_state = new_state.with_inventory(add_items(state.inventory, gather_def.item_id, 1))
            new_state = new_state.with_gather(counters)
            entries.append(
                make_log_entry(
                    "narration",
                    f"{rng.choice(gather_def.lines)} ({gathered}/{gather_def.cap} gathered)",
                    item_id=gather_def.item_id,
                )
            )
            new_state, quest_entries = self._advance_if_ritual_ready(new_state)
            entries += quest_entries
        new_state, spawn_entries = self._encounters.maybe_trigger(new_state, rng=rng)
        return _result(new_state, entries + spawn_entries)

    def _advance_if_ritual_ready(self, state: WorldState) -> Tuple[WorldState, List[LogEntry]]:
        if not self._quests.is_active_at(state, GROVE_QUEST_ID, (GROVE_GATHER_STEP,)):
            return state, []
        if not has_items(state.inventory, GROVE_RITUAL_COSTS):
            return state, []
        state = self._quests.set_step(state, GROVE_QUEST_ID, GROVE_PERFORM_STEP)
        return state, [
            make_log_entry(
                "quest",
                "Quest updated: you have what the grove needs. Perform the ritual in the Wilds.",
                quest_id=GROVE_QUEST_ID,
            )
        ]

    # Talk ---------------------------------------------------------------

    def talk_to(self, state: WorldState, npc_id: str) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        npc = self._dialogue.find(npc_id)
        if npc is None:
            return _message(state, "There is no one like that here.")
        if npc.location_id != state.current_location_id:
            here = self._locations_repo.get(state.current_location_id)
            return _message(state, f"You look around {here.name}, but {npc.name} is not here.")
        new_state, entries = self._dialogue.converse(state, npc)
        return _result(new_state, entries)

    # Combat -------------------------------------------------------------

    def attack(self, state: WorldState, *, rng: RNG) -> ActionResult:
        encounter = state.current_encounter
        if encounter is None:
            return _message(state, "There is nothing here to strike.")
        if state.run_ended:
            return self._run_ended(state)
        creature = self._encounters.find_creature(encounter.creature_id)
        if creature is None:
            return _message(state.with_encounter(None), "The threat wavers and slips away.")

        player_damage = max(1, 4 - creature.defence)
        creature_hp = max(0, encounter.hp - player_damage)
        entries: List[LogEntry] = [
            make_log_entry("combat", narrative.hit_line(rng, creature.name, player_damage))
        ]
        if creature_hp <= 0:
            new_state, defeat_entries = self._defeat(state.with_encounter(None), creature)
            return _result(new_state, entries + defeat_entries)

        creature_damage = self._creature_damage(creature)
        hit_text = narrative.retaliate_line(rng, creature.name, creature_damage)
        flavour_applied = encounter.flavour_applied
        if creature_damage > 0 and not flavour_applied:
            suffix = narrative.retaliation_suffix(self._encounters.tier(state))
            if suffix:
                hit_text = f"{hit_text} {suffix}"
            flavour_applied = True
        new_state = state.with_encounter(
            replace(encounter, hp=creature_hp, flavour_applied=flavour_applied)
        )
        new_state = new_state.with_player(hp=max(0, state.player.hp - creature_damage))
        entries.append(make_log_entry("combat", hit_text))
        new_state, death_entries = self._check_death(new_state)
        return _result(new_state, entries + death_entries)

    def attempt_escape(self, state: WorldState, *, rng: RNG) -> ActionResult:
        encounter = state.current_encounter
        if encounter is None:
            return _message(state, "There is nothing to escape from.")
        if state.run_ended:
            return self._run_ended(state)
        creature = self._encounters.find_creature(encounter.creature_id)
        if creature is None:
            return _message(state.with_encounter(None), "The presence fades as suddenly as it came.")

        roll = rng.random()
        logger.debug("Flee roll %.3f against %.3f", roll, self._config.flee_chance)
        if roll < self._config.flee_chance:
            return _message(
                state.with_encounter(None), narrative.escape_line(rng, creature.name), "combat"
            )
        creature_damage = self._creature_damage(creature)
        new_state = state.with_player(hp=max(0, state.player.hp - creature_damage))
        entries = [
            make_log_entry("combat", narrative.escape_fail_line(rng, creature.name, creature_damage))
        ]
        new_state, death_entries = self._check_death(new_state)
        return _result(new_state, entries + death_entries)

    @staticmethod
    def _creature_damage(creature: CreatureDef) -> int:
        return max(0, creature.attack - 1)

    def _defeat(self, state: WorldState, creature: CreatureDef) -> Tuple[WorldState, List[LogEntry]]:
        entries = [
            make_log_entry("combat", f"{creature.name} unravels and is gone.", creature_id=creature.id)
        ]
        state, xp_entries = award_xp(
            state, self._config.xp_per_defeat, hp_per_level=self._config.level_hp_bonus
        )
        entries += xp_entries
        if creature.special_drop is not None:
            drop = creature.special_drop
            state = state.with_inventory(add_items(state.inventory, drop.item_id, drop.quantity))
            item = self._items_repo.get(drop.item_id)
            entries.append(
                make_log_entry(
                    "system",
                    f"Something remains where {creature.name} was: {drop.quantity}x {item.name}.",
                    item_id=drop.item_id,
                )
            )
        if "spirit" in creature.tags and self._config.spirit_defeat_regard:
            state = state.with_reputation_delta(self._config.spirit_defeat_regard)
            entries.append(make_log_entry("narration", "The Wilds remember what was unmade here."))
        return state, entries

    def _check_death(self, state: WorldState) -> Tuple[WorldState, List[LogEntry]]:
        if state.player.hp > 0:
            return state, []
        state = state.with_player(hp=0).with_encounter(None)
        if state.run_ended:
            return state, []
        logger.info("Run ended at %s", state.current_location_id)
        return state.with_flags(run_ended=True), [make_log_entry("narration", narrative.DEATH_TEXT)]

    # Set pieces ---------------------------------------------------------

    def perform_grove_ritual(self, state: WorldState) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        if state.current_location_id != GROVE_LOCATION_ID:
            return _message(state, "The ritual belongs to the grove in the Wilds, not here.")
        if state.flags.grove_healed or self._quests.is_completed(state, GROVE_QUEST_ID):
            return _message(
                state, "The grove is already at peace. There is nothing more to ask of it.", "narration"
            )
        if not self._quests.is_active_at(state, GROVE_QUEST_ID, GROVE_READY_STEPS):
            return _message(
                state, "The grove is not ready for a ritual. Perhaps the Caretaker knows more."
            )
        if not has_items(state.inventory, GROVE_RITUAL_COSTS):
            return _message(
                state,
                f"You do not yet have what the grove asks of you ({self._describe(GROVE_RITUAL_COSTS)}).",
            )

        new_state = state.with_inventory(self._consume(state.inventory, GROVE_RITUAL_COSTS))
        new_state = self._quests.set_step(new_state, GROVE_QUEST_ID, GROVE_RETURN_STEP)
        new_state = new_state.with_flags(grove_healed=True)
        new_state = new_state.with_reputation_delta(self._config.ritual_regard)
        new_state = self._quests.activate_if_needed(new_state, ECHOES_QUEST_ID)
        new_state = self._quests.set_step(new_state, ECHOES_QUEST_ID, ECHOES_LISTEN_STEP)
        logger.debug("Grove healed; regard now %s", new_state.flags.forest_reputation)
        return _result(
            new_state,
            [
                make_log_entry(
                    "narration",
                    "You arrange herbs and water, breathing with the grove as you begin the ritual.",
                ),
                make_log_entry(
                    "narration",
                    "For a long moment, nothing. Then the tension in the Wilds loosens, like a held breath released.",
                ),
                make_log_entry(
                    "quest",
                    "Quest updated: the grove is calmer now. Return to the Caretaker.",
                    quest_id=GROVE_QUEST_ID,
                ),
                make_log_entry("quest", "New quest: Echoes at the Lake.", quest_id=ECHOES_QUEST_ID),
            ],
        )

    def commune_with_glow(self, state: WorldState) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        if state.current_location_id != GLOW_LOCATION_ID:
            return _message(state, "The glow lives deeper in the Wilds, beyond the Hermit's Hut.")
        if state.flags.glow_commune_complete or self._quests.is_completed(state, GLOW_QUEST_ID):
            return _message(
                state, "The glow is already at peace with you. It drifts on, unhurried.", "narration"
            )
        if not self._quests.is_active_at(state, GLOW_QUEST_ID, GLOW_READY_STEPS):
            return _message(state, "The glow drifts out of reach. You are not ready to commune with it.")
        if not has_items(state.inventory, GLOW_COMMUNE_COSTS):
            return _message(
                state, f"The glow flickers, waiting. It asks for {self._describe(GLOW_COMMUNE_COSTS)}."
            )

        new_state = state.with_inventory(self._consume(state.inventory, GLOW_COMMUNE_COSTS))
        new_state = self._quests.set_step(new_state, GLOW_QUEST_ID, GLOW_DONE_STEP)
        new_state = self._quests.set_status(new_state, GLOW_QUEST_ID, "completed")
        new_state = new_state.with_flags(glow_commune_complete=True)
        new_state = new_state.with_reputation_delta(self._config.commune_regard)
        entries = [
            make_log_entry(
                "narration",
                "You lift the fragments. They rise from your palms and drift into the glow.",
            ),
            make_log_entry(
                "narration",
                "The light turns toward you, slow and warm, and for a moment the Deep Wilds go quiet.",
            ),
            make_log_entry("quest", "Quest completed: Hermit's Glow.", quest_id=GLOW_QUEST_ID),
        ]
        new_state, xp_entries = award_xp(
            new_state, self._config.quest_xp, hp_per_level=self._config.level_hp_bonus
        )
        return _result(new_state, entries + xp_entries)

    # Trade / items ------------------------------------------------------

    def perform_trade(self, state: WorldState, trade_id: str) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        if state.current_location_id != self._trades.trader_location_id:
            return _message(state, "You need to be at the Trader's Post to make that deal.")
        trade = self._trades.find(trade_id)
        if trade is None:
            return _message(state, "The Ranger doesn't seem to understand that trade.")
        if not self._trades.can_afford(state, trade):
            return _message(state, "You don't have what you need for that trade.")
        if not self._trades.can_use(state, trade):
            return _message(state, "The Ranger shakes their head; that deal is no longer available.")
        new_state = self._trades.apply_trade(state, trade)
        return _message(new_state, trade.label)

    def consume_healing_tonic(self, state: WorldState) -> ActionResult:
        if state.run_ended:
            return self._run_ended(state)
        item_id = self._config.healing_item_id
        if count_item(state.inventory, item_id) < 1:
            return _message(state, f"You do not have a {self._items_repo.get(item_id).name}.")
        player = state.player
        healed_hp = min(player.max_hp, player.hp + self._config.healing_amount)
        restored = healed_hp - player.hp
        new_state = state.with_inventory(remove_items(state.inventory, item_id, 1))
        new_state = new_state.with_player(hp=healed_hp)
        entries = [make_log_entry("narration", "You uncork the vial and drink the sharp, bitter tonic.")]
        if restored > 0:
            entries.append(
                make_log_entry(
                    "system", f"You feel warmth spread through your body. You restore {restored} HP."
                )
            )
        else:
            entries.append(
                make_log_entry("system", "The tonic has no effect; you are already at full health.")
            )
        return _result(new_state, entries)

    # Helpers ------------------------------------------------------------

    def _run_ended(self, state: WorldState) -> ActionResult:
        return _message(state, narrative.RUN_ENDED_TEXT)

    def _describe(self, requirements: Iterable[Tuple[str, int]]) -> str:
        return ", ".join(
            f"{quantity}x {self._items_repo.get(item_id).name}" for item_id, quantity in requirements
        )

    @staticmethod
    def _consume(
        inventory: Mapping[str, int], requirements: Iterable[Tuple[str, int]]
    ) -> Dict[str, int]:
        result = dict(inventory)
        for item_id, quantity in requirements:
            result = remove_items(result, item_id, quantity)
        return result

