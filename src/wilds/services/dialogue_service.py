"""Branching NPC dialogue.

Each NPC id has one handler in a dispatch table. A handler receives the state
(with the conversation already counted), the NPC definition and whether this is
the first conversation, and returns the new state plus its log lines. The most
specific quest branch wins; otherwise the NPC's introduction or repeat lines
are used.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple

from wilds.config import DEFAULT_CONFIG, EngineConfig
from wilds.core.types import NpcId
from wilds.data.repositories import NpcsRepository
from wilds.domain.defs import NpcDef
from wilds.domain.inventory import add_items, count_item, remove_items
from wilds.domain.log import LogEntry, make_log_entry
from wilds.domain.state import WorldState
from wilds.services.encounter_service import reputation_tier
from wilds.services.progression import award_xp
from wilds.services.quest_keys import (
    ECHOES_DONE_STEP,
    ECHOES_LISTEN_STEP,
    ECHOES_QUEST_ID,
    ECHOES_TELL_STEP,
    GLOW_OFFERING_ITEM_ID,
    GLOW_QUEST_ID,
    GLOW_READY_STEPS,
    GLOW_SEEK_STEP,
    GROVE_DONE_STEP,
    GROVE_GATHER_STEP,
    GROVE_PERFORM_STEP,
    GROVE_QUEST_ID,
    GROVE_READY_STEPS,
    GROVE_RETURN_STEP,
)
from wilds.services.quest_service import QuestService

logger = logging.getLogger(__name__)

DialogueOutcome = Tuple[WorldState, List[LogEntry]]
DialogueHandler = Callable[[WorldState, NpcDef, bool], DialogueOutcome]


def _say(npc: NpcDef, *lines: str) -> List[LogEntry]:
    return [make_log_entry("narration", f"{npc.name}: {line}", npc_id=npc.id) for line in lines]


class DialogueService:
    """Resolves one conversation with an NPC."""

    def __init__(
        self,
        *,
        npcs_repo: NpcsRepository,
        quest_service: QuestService,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self._npcs_repo = npcs_repo
        self._quests = quest_service
        self._config = config
        self._handlers: Dict[NpcId, DialogueHandler] = {
            "caretaker": self._caretaker,
            "hermit": self._hermit,
            "ranger_trader": self._ranger,
        }

    def find(self, npc_id: str) -> NpcDef | None:
        try:
            return self._npcs_repo.get(npc_id)
        except KeyError:
            return None

    def npcs_at(self, location_id: str) -> List[NpcDef]:
        return self._npcs_repo.at_location(location_id)

    def converse(self, state: WorldState, npc: NpcDef) -> DialogueOutcome:
        """Count the conversation and run the NPC's handler."""
        first_time = state.flags.times_spoken(npc.id) == 0
        memory = dict(state.flags.npc_memory)
        memory[npc.id] = memory.get(npc.id, 0) + 1
        state = state.with_flags(npc_memory=memory)
        logger.debug("Talking to %s (first_time=%s)", npc.id, first_time)
        return self._handlers[npc.id](state, npc, first_time)

    def _greeting(self, state: WorldState, npc: NpcDef, first_time: bool) -> DialogueOutcome:
        if first_time or not npc.repeat_lines:
            return state, _say(npc, *npc.intro_lines)
        return state, _say(npc, *npc.repeat_lines)

    def _grant_xp(self, state: WorldState, amount: int) -> DialogueOutcome:
        return award_xp(state, amount, hp_per_level=self._config.level_hp_bonus)

    def _caretaker(self, state: WorldState, npc: NpcDef, first_time: bool) -> DialogueOutcome:
        grove = self._quests.get(state, GROVE_QUEST_ID)
        grove_healed = state.flags.grove_healed

        if grove is None or grove.status == "not_started":
            state, entries = self._greeting(state, npc, first_time)
            entries += _say(
                npc,
                "The Wilds feel uneasy. The grove near the forest edge is... wrong somehow.",
                "If you feel called, you could help heal it. Start by gathering herbs from the Wilds and water from the Lake.",
            )
            state = self._quests.activate_if_needed(state, GROVE_QUEST_ID)
            state = self._quests.set_step(state, GROVE_QUEST_ID, GROVE_GATHER_STEP)
            entries.append(make_log_entry("quest", "New quest: Heal the Grove.", quest_id=GROVE_QUEST_ID))
            return state, entries

        if grove.is_active and grove.step in GROVE_READY_STEPS and not grove_healed:
            if grove.step == GROVE_PERFORM_STEP:
                hint = "You have what the grove needs. Go to the Wilds and perform the ritual."
            else:
                hint = (
                    "Gather herbs from the Wilds and water from the Lake, then perform the ritual "
                    "out there. Only then will it ease."
                )
            return state, _say(
                npc, "You've sensed it too, haven't you? The grove is still unsettled.", hint
            )

        if grove.is_active and grove.step == GROVE_RETURN_STEP and grove_healed:
            entries = _say(
                npc, "You did something out there, didn't you? The Wilds feel different. Thank you."
            )
            state = self._quests.set_step(state, GROVE_QUEST_ID, GROVE_DONE_STEP)
            state = self._quests.set_status(state, GROVE_QUEST_ID, "completed")
            entries.append(
                make_log_entry("quest", "Quest completed: Heal the Grove.", quest_id=GROVE_QUEST_ID)
            )
            state, xp_entries = self._grant_xp(state, self._config.quest_xp)
            return state, entries + xp_entries

        if grove.is_completed:
            entries = _say(
                npc,
                "Welcome back, traveler. The Sanctum breathes easier now.",
                "The grove is calm again. Whatever you did, it mattered.",
            )
            if self._quests.is_active_at(state, ECHOES_QUEST_ID, (ECHOES_LISTEN_STEP,)):
                entries += _say(npc, "Something at the Lake has been restless since. You might listen there.")
            elif self._quests.is_active_at(state, ECHOES_QUEST_ID, (ECHOES_TELL_STEP,)):
                entries += _say(npc, "The Hermit north of the Wilds knows old voices. Take what you heard to them.")
            return state, entries

        return self._greeting(state, npc, first_time)

    def _hermit(self, state: WorldState, npc: NpcDef, first_time: bool) -> DialogueOutcome:
        if self._quests.is_active_at(state, ECHOES_QUEST_ID, (ECHOES_TELL_STEP,)):
            entries = _say(
                npc,
                "So the Lake speaks to you too.",
                "It's an old voice. It remembers a light that lives past this hut. Go north, if you dare.",
            )
            state = self._quests.set_step(state, ECHOES_QUEST_ID, ECHOES_DONE_STEP)
            state = self._quests.set_status(state, ECHOES_QUEST_ID, "completed")
            entries.append(
                make_log_entry("quest", "Quest completed: Echoes at the Lake.", quest_id=ECHOES_QUEST_ID)
            )
            state, xp_entries = self._grant_xp(state, self._config.quest_xp)
            entries += xp_entries
            state = self._quests.activate_if_needed(state, GLOW_QUEST_ID)
            state = self._quests.set_step(state, GLOW_QUEST_ID, GLOW_SEEK_STEP)
            entries.append(make_log_entry("quest", "New quest: Hermit's Glow.", quest_id=GLOW_QUEST_ID))
            return state, entries

        if self._quests.is_active_at(state, GLOW_QUEST_ID, (GLOW_SEEK_STEP,)):
            return state, _say(npc, "The path north is open to you now. Follow the light.")

        if self._quests.is_active_at(state, GLOW_QUEST_ID, GLOW_READY_STEPS):
            return state, _say(
                npc,
                "You found it, then. It asks for two fragments of its own light. Bring them, and reach for it.",
            )

        if self._quests.is_completed(state, GLOW_QUEST_ID):
            if count_item(state.inventory, GLOW_OFFERING_ITEM_ID) >= 1:
                return self._hermit_offering(state, npc)
            return state, _say(npc, "The glow knows you now. So do I, I suppose.")

        return self._greeting(state, npc, first_time)

    def _hermit_offering(self, state: WorldState, npc: NpcDef) -> DialogueOutcome:
        inventory = remove_items(state.inventory, GLOW_OFFERING_ITEM_ID, 1)
        inventory = add_items(inventory, self._config.healing_item_id, 1)
        state = state.with_inventory(inventory)
        entries = [
            make_log_entry(
                "narration",
                "You hold out a luminous fragment. The Hermit takes it gently and presses a tonic into your hand.",
                npc_id=npc.id,
            )
        ]
        entries += _say(npc, "Light for light. Fair trade, out here.")
        state, xp_entries = self._grant_xp(state, self._config.offering_xp)
        return state, entries + xp_entries

    def _ranger(self, state: WorldState, npc: NpcDef, first_time: bool) -> DialogueOutcome:
        state, entries = self._greeting(state, npc, first_time)
        if reputation_tier(state.flags.forest_reputation) in ("favour", "revered"):
            entries += _say(npc, "The forest speaks well of you. I've set a little extra aside.")
        return state, entries
