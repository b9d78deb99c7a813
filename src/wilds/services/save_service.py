"""Serialization helpers for persisting and restoring a run."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Tuple

from wilds.core.types import LOG_ENTRY_TYPES, QUEST_STATUSES
from wilds.data.repositories import (
    CreaturesRepository,
    ItemsRepository,
    LocationsRepository,
    QuestsRepository,
)
from wilds.domain.log import LogEntry
from wilds.domain.quest_state import QuestState
from wilds.domain.state import (
    NARRATIVE_FLAG_NAMES,
    EncounterState,
    NarrativeFlags,
    PlayerRecord,
    WorldState,
)
from wilds.services.errors import SaveLoadError
from wilds.services.progression import MAX_LEVEL

logger = logging.getLogger(__name__)

SavePayload = Dict[str, Any]


class SaveService:
    """Converts world state to/from a validated, versioned payload."""

    SAVE_VERSION = 1

    def __init__(
        self,
        *,
        locations_repo: LocationsRepository,
        quests_repo: QuestsRepository,
        creatures_repo: CreaturesRepository,
        items_repo: ItemsRepository,
        new_state: Callable[[], WorldState],
    ) -> None:
        self._locations_repo = locations_repo
        self._quests_repo = quests_repo
        self._creatures_repo = creatures_repo
        self._items_repo = items_repo
        self._new_state = new_state

    def serialize(self, state: WorldState) -> SavePayload:
        """Return a JSON-serializable payload for persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": self._build_metadata(state),
            "state": self._serialize_state(state),
        }

    def dumps(self, state: WorldState) -> str:
        return json.dumps(self.serialize(state), sort_keys=True)

    def deserialize(self, payload: Mapping[str, Any]) -> WorldState:
        """Rebuild a WorldState from a persisted payload."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if self._require_int(payload.get("save_version"), "save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format changed. Please start a new run.")
        state_payload = payload.get("state")
        if not isinstance(state_payload, Mapping):
            raise SaveLoadError("Save data is missing required sections.")

        location_id = self._require_str(state_payload.get("current_location_id"), "state.current_location_id")
        try:
            self._locations_repo.get(location_id)
        except KeyError as exc:
            raise SaveLoadError(
                f"Save incompatible with current definitions: location '{location_id}' missing."
            ) from exc

        return WorldState(
            current_location_id=location_id,
            player=self._coerce_player(state_payload.get("player")),
            quests=self._coerce_quests(state_payload.get("quests")),
            flags=self._coerce_flags(state_payload.get("flags")),
            log=self._coerce_log(state_payload.get("log", [])),
            current_encounter=self._coerce_encounter(state_payload.get("current_encounter")),
            gather=self._coerce_counter_dict(state_payload.get("gather"), "state.gather"),
            trade_usage=self._coerce_counter_dict(state_payload.get("trade_usage"), "state.trade_usage"),
        )

    def restore(self, raw: str | None) -> WorldState:
        """Return the saved run, or a fresh one if the text is absent or unusable."""
        if raw is None:
            return self._new_state()
        try:
            return self.deserialize(json.loads(raw))
        except (ValueError, RecursionError) as exc:
            logger.warning("Discarding unreadable save: %s", exc)
        except SaveLoadError as exc:
            logger.warning("Discarding invalid save: %s", exc)
        return self._new_state()

    def _build_metadata(self, state: WorldState) -> Dict[str, Any]:
        return {
            "current_location_id": state.current_location_id,
            "level": state.player.level,
            "xp": state.player.xp,
            "run_ended": state.run_ended,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }

    def _serialize_state(self, state: WorldState) -> Dict[str, Any]:
        encounter = state.current_encounter
        return {
            "current_location_id": state.current_location_id,
            "player": {
                "hp": state.player.hp,
                "max_hp": state.player.max_hp,
                "xp": state.player.xp,
                "level": state.player.level,
                "inventory": dict(state.player.inventory),
            },
            "quests": [
                {"id": quest.id, "name": quest.name, "step": quest.step, "status": quest.status}
                for quest in state.quests
            ],
            "flags": {
                **{name: getattr(state.flags, name) for name in NARRATIVE_FLAG_NAMES},
                "forest_reputation": state.flags.forest_reputation,
                "npc_memory": dict(state.flags.npc_memory),
            },
            "log": [
                {
                    "id": entry.id,
                    "type": entry.type,
                    "text": entry.text,
                    "timestamp": entry.timestamp,
                    "metadata": dict(entry.metadata),
                }
                for entry in state.log
            ],
            "current_encounter": None
            if encounter is None
            else {
                "creature_id": encounter.creature_id,
                "hp": encounter.hp,
                "flavour_applied": encounter.flavour_applied,
            },
            "gather": dict(state.gather),
            "trade_usage": dict(state.trade_usage),
        }

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: Any, context: str) -> bool:
        if not isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a boolean.")
        return value

    def _coerce_player(self, value: Any) -> PlayerRecord:
        if not isinstance(value, Mapping):
            raise SaveLoadError("state.player must be an object.")
        max_hp = self._require_int(value.get("max_hp"), "state.player.max_hp")
        hp = self._require_int(value.get("hp"), "state.player.hp")
        xp = self._require_int(value.get("xp"), "state.player.xp")
        level = self._require_int(value.get("level"), "state.player.level")
        if max_hp <= 0:
            raise SaveLoadError("state.player.max_hp must be positive.")
        if not 0 <= hp <= max_hp:
            raise SaveLoadError("state.player.hp must be between 0 and max_hp.")
        if xp < 0:
            raise SaveLoadError("state.player.xp must be non-negative.")
        if not 1 <= level <= MAX_LEVEL:
            raise SaveLoadError(f"state.player.level must be between 1 and {MAX_LEVEL}.")
        return PlayerRecord(
            hp=hp,
            max_hp=max_hp,
            xp=xp,
            level=level,
            inventory=self._coerce_inventory(value.get("inventory")),
        )

    def _coerce_inventory(self, value: Any) -> Dict[str, int]:
        if not isinstance(value, Mapping):
            raise SaveLoadError("state.player.inventory must be an object.")
        inventory: Dict[str, int] = {}
        for item_id, quantity in value.items():
            quantity = self._require_int(quantity, f"state.player.inventory[{item_id}]")
            if quantity <= 0:
                raise SaveLoadError(f"state.player.inventory[{item_id}] must be positive.")
            try:
                self._items_repo.get(item_id)
            except KeyError as exc:
                raise SaveLoadError(
                    f"Save incompatible with current definitions: item '{item_id}' missing."
                ) from exc
            inventory[item_id] = quantity
        return inventory

    def _coerce_quests(self, value: Any) -> Tuple[QuestState, ...]:
        if not isinstance(value, list):
            raise SaveLoadError("state.quests must be a list.")
        quests: List[QuestState] = []
        seen: set[str] = set()
        for index, entry in enumerate(value):
            context = f"state.quests[{index}]"
            if not isinstance(entry, Mapping):
                raise SaveLoadError(f"{context} must be an object.")
            quest_id = self._require_str(entry.get("id"), f"{context}.id")
            if quest_id in seen:
                raise SaveLoadError(f"{context} repeats quest '{quest_id}'.")
            seen.add(quest_id)
            try:
                definition = self._quests_repo.get(quest_id)
            except KeyError as exc:
                raise SaveLoadError(
                    f"Save incompatible with current definitions: quest '{quest_id}' missing."
                ) from exc
            step = self._require_str(entry.get("step"), f"{context}.step")
            if definition.step_index(step) < 0:
                raise SaveLoadError(f"{context}.step '{step}' is not a step of '{quest_id}'.")
            status = entry.get("status")
            if status not in QUEST_STATUSES:
                raise SaveLoadError(f"{context}.status must be one of {list(QUEST_STATUSES)}.")
            quests.append(QuestState(id=quest_id, name=definition.name, step=step, status=status))
        return tuple(quests)

    def _coerce_flags(self, value: Any) -> NarrativeFlags:
        if not isinstance(value, Mapping):
            raise SaveLoadError("state.flags must be an object.")
        booleans = {
            name: self._require_bool(value.get(name, False), f"state.flags.{name}")
            for name in NARRATIVE_FLAG_NAMES
        }
        return NarrativeFlags(
            **booleans,
            forest_reputation=self._require_int(
                value.get("forest_reputation", 0), "state.flags.forest_reputation"
            ),
            npc_memory=self._coerce_counter_dict(value.get("npc_memory", {}), "state.flags.npc_memory"),
        )

    def _coerce_log(self, value: Any) -> Tuple[LogEntry, ...]:
        if not isinstance(value, list):
            raise SaveLoadError("state.log must be a list.")
        entries: List[LogEntry] = []
        for index, entry in enumerate(value):
            context = f"state.log[{index}]"
            if not isinstance(entry, Mapping):
                raise SaveLoadError(f"{context} must be an object.")
            entry_type = entry.get("type")
            if entry_type not in LOG_ENTRY_TYPES:
                raise SaveLoadError(f"{context}.type must be one of {list(LOG_ENTRY_TYPES)}.")
            metadata = entry.get("metadata", {})
            if not isinstance(metadata, Mapping) or not all(
                isinstance(key, str) and isinstance(item, (str, int, bool))
                for key, item in metadata.items()
            ):
                raise SaveLoadError(f"{context}.metadata must map strings to scalars.")
            entries.append(
                LogEntry(
                    id=self._require_str(entry.get("id"), f"{context}.id"),
                    type=entry_type,
                    text=self._require_str(entry.get("text"), f"{context}.text"),
                    timestamp=self._require_int(entry.get("timestamp"), f"{context}.timestamp"),
                    metadata=dict(metadata),
                )
            )
        return tuple(entries)

    def _coerce_encounter(self, value: Any) -> EncounterState | None:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise SaveLoadError("state.current_encounter must be an object or null.")
        creature_id = self._require_str(value.get("creature_id"), "state.current_encounter.creature_id")
        try:
            creature = self._creatures_repo.get(creature_id)
        except KeyError as exc:
            raise SaveLoadError(
                f"Save incompatible with current definitions: creature '{creature_id}' missing."
            ) from exc
        hp = self._require_int(value.get("hp"), "state.current_encounter.hp")
        if not 0 < hp <= creature.hp:
            raise SaveLoadError("state.current_encounter.hp is out of range.")
        return EncounterState(
            creature_id=creature_id,
            hp=hp,
            flavour_applied=self._require_bool(
                value.get("flavour_applied", False), "state.current_encounter.flavour_applied"
            ),
        )

    def _coerce_counter_dict(self, value: Any, context: str) -> Dict[str, int]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        counters: Dict[str, int] = {}
        for key, count in value.items():
            if not isinstance(key, str):
                raise SaveLoadError(f"{context} keys must be strings.")
            count = self._require_int(count, f"{context}.{key}")
            if count < 0:
                raise SaveLoadError(f"{context}.{key} must be non-negative.")
            counters[key] = count
        return counters
