"""Repository for location definitions."""
from __future__ import annotations

from typing import Dict, List

from wilds.core.types import BIOMES, DIRECTIONS
from wilds.data.errors import DataReferenceError, DataValidationError
from wilds.data.repositories.base import RepositoryBase
from wilds.data.repositories.items_repo import ItemsRepository
from wilds.data.repositories.quests_repo import QuestsRepository
from wilds.domain.defs import (
    EncounterOverrideDef,
    GatherDef,
    LocationDef,
    LocationExitDef,
    LocationQuestProgressDef,
)
from wilds.domain.state import NARRATIVE_FLAG_NAMES

_LOCATION_FIELDS = {"name", "biome", "description", "exits"}
_OPTIONAL_LOCATION_FIELDS = {
    "healed_description",
    "encounter_chance",
    "encounter_overrides",
    "gather",
    "sense_lines",
    "healed_sense_lines",
    "quest_progress",
}


class LocationsRepository(RepositoryBase[LocationDef]):
    """Loads and validates location definitions."""

    def __init__(
        self,
        *,
        items_repo: ItemsRepository,
        quests_repo: QuestsRepository,
        base_path=None,
    ) -> None:
        super().__init__("locations.json", base_path)
        self._items_repo = items_repo
        self._quests_repo = quests_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, LocationDef]:
        locations_raw = self._require_mapping(raw, "locations.json")
        staged: Dict[str, dict[str, object]] = {}
        for location_id, payload in locations_raw.items():
            if not location_id.strip():
                raise DataValidationError("location id must be a non-empty string.")
            staged[location_id] = self._require_mapping(payload, f"location '{location_id}'")

        definitions: Dict[str, LocationDef] = {}
        gather_counters: Dict[str, str] = {}
        for location_id, mapping in staged.items():
            context = f"location '{location_id}'"
            self._assert_fields(mapping, _LOCATION_FIELDS, context, optional=_OPTIONAL_LOCATION_FIELDS)
            name = self._require_str(mapping["name"], f"{context} name").strip()
            if not name:
                raise DataValidationError(f"{context} name must not be empty.")
            biome = self._require_str(mapping["biome"], f"{context} biome")
            if biome not in BIOMES:
                raise DataValidationError(f"{context} biome must be one of {list(BIOMES)}.")
            healed_description = mapping.get("healed_description")
            if healed_description is not None:
                healed_description = self._require_str(healed_description, f"{context} healed_description")

            gather = self._parse_gather(mapping.get("gather"), context)
            if gather is not None:
                owner = gather_counters.get(gather.counter)
                if owner is not None:
                    raise DataValidationError(
                        f"{context} gather counter '{gather.counter}' is already used by '{owner}'."
                    )
                gather_counters[gather.counter] = location_id

            definitions[location_id] = LocationDef(
                id=location_id,
                name=name,
                biome=biome,  # type: ignore[arg-type]
                description=self._require_str(mapping["description"], f"{context} description"),
                healed_description=healed_description,
                exits=tuple(self._parse_exits(mapping["exits"], context, staged)),
                encounter_chance=self._require_probability(
                    mapping.get("encounter_chance", 0.0), f"{context} encounter_chance"
                ),
                encounter_overrides=tuple(
                    self._parse_overrides(mapping.get("encounter_overrides", []), context)
                ),
                gather=gather,
                sense_lines=tuple(
                    self._require_str_list(mapping.get("sense_lines", []), f"{context} sense_lines")
                ),
                healed_sense_lines=tuple(
                    self._require_str_list(
                        mapping.get("healed_sense_lines", []), f"{context} healed_sense_lines"
                    )
                ),
                quest_progress=self._parse_quest_progress(mapping.get("quest_progress"), context),
            )
        return definitions

    def gather_counters(self) -> List[str]:
        """Return every gather counter name declared by any location."""
        return sorted(
            location.gather.counter for location in self.all() if location.gather is not None
        )

    def _parse_exits(
        self, value: object, context: str, staged: Dict[str, dict[str, object]]
    ) -> List[LocationExitDef]:
        exits: List[LocationExitDef] = []
        seen_directions: set[str] = set()
        for index, entry in enumerate(self._require_list(value, f"{context} exits")):
            ctx = f"{context} exits[{index}]"
            conn_map = self._require_mapping(entry, ctx)
            self._assert_fields(conn_map, {"direction", "to"}, ctx, optional={"requires_quest_active"})
            direction = self._require_str(conn_map["direction"], f"{ctx}.direction")
            if direction not in DIRECTIONS:
                raise DataValidationError(f"{ctx}.direction must be one of {list(DIRECTIONS)}.")
            if direction in seen_directions:
                raise DataValidationError(f"{ctx}.direction '{direction}' is declared twice.")
            seen_directions.add(direction)
            to_id = self._require_str(conn_map["to"], f"{ctx}.to").strip()
            if to_id not in staged:
                raise DataReferenceError(f"{ctx} references unknown location '{to_id}'.")
            requires_quest_active = conn_map.get("requires_quest_active")
            if requires_quest_active is not None:
                requires_quest_active = self._require_str(
                    requires_quest_active, f"{ctx}.requires_quest_active"
                )
                self._validate_quest_id(requires_quest_active, ctx)
            exits.append(
                LocationExitDef(
                    direction=direction,  # type: ignore[arg-type]
                    to_id=to_id,
                    requires_quest_active=requires_quest_active,
                )
            )
        return exits

    def _parse_overrides(self, value: object, context: str) -> List[EncounterOverrideDef]:
        overrides: List[EncounterOverrideDef] = []
        for index, entry in enumerate(self._require_list(value, f"{context} encounter_overrides")):
            ctx = f"{context} encounter_overrides[{index}]"
            mapping = self._require_mapping(entry, ctx)
            self._assert_fields(mapping, {"flag", "chance"}, ctx)
            flag = self._require_str(mapping["flag"], f"{ctx}.flag")
            if flag not in NARRATIVE_FLAG_NAMES:
                raise DataValidationError(f"{ctx}.flag must be one of {list(NARRATIVE_FLAG_NAMES)}.")
            overrides.append(
                EncounterOverrideDef(
                    flag=flag,
                    chance=self._require_probability(mapping["chance"], f"{ctx}.chance"),
                )
            )
        return overrides

    def _parse_gather(self, value: object, context: str) -> GatherDef | None:
        if value is None:
            return None
        ctx = f"{context} gather"
        mapping = self._require_mapping(value, ctx)
        self._assert_fields(mapping, {"item_id", "counter", "cap", "exhausted_text", "lines"}, ctx)
        item_id = self._require_str(mapping["item_id"], f"{ctx}.item_id")
        self._items_repo.require_known(item_id, ctx)
        cap = self._require_int(mapping["cap"], f"{ctx}.cap")
        if cap <= 0:
            raise DataValidationError(f"{ctx}.cap must be positive.")
        lines = self._require_str_list(mapping["lines"], f"{ctx}.lines")
        if not lines:
            raise DataValidationError(f"{ctx}.lines must not be empty.")
        return GatherDef(
            item_id=item_id,
            counter=self._require_str(mapping["counter"], f"{ctx}.counter"),
            cap=cap,
            exhausted_text=self._require_str(mapping["exhausted_text"], f"{ctx}.exhausted_text"),
            lines=tuple(lines),
        )

    def _parse_quest_progress(self, value: object, context: str) -> LocationQuestProgressDef | None:
        if value is None:
            return None
        ctx = f"{context} quest_progress"
        mapping = self._require_mapping(value, ctx)
        self._assert_fields(mapping, {"quest_id", "from_step", "to_step", "text"}, ctx)
        quest_id = self._require_str(mapping["quest_id"], f"{ctx}.quest_id")
        self._validate_quest_id(quest_id, ctx)
        quest = self._quests_repo.get(quest_id)
        from_step = self._require_str(mapping["from_step"], f"{ctx}.from_step")
        to_step = self._require_str(mapping["to_step"], f"{ctx}.to_step")
        for step_id in (from_step, to_step):
            if quest.step_index(step_id) < 0:
                raise DataReferenceError(f"{ctx} references unknown step '{step_id}' of '{quest_id}'.")
        if quest.step_index(to_step) <= quest.step_index(from_step):
            raise DataValidationError(f"{ctx}.to_step must come after from_step.")
        return LocationQuestProgressDef(
            quest_id=quest_id,
            from_step=from_step,
            to_step=to_step,
            text=self._require_str(mapping["text"], f"{ctx}.text"),
        )

    def _validate_quest_id(self, quest_id: str, context: str) -> None:
        try:
            self._quests_repo.get(quest_id)
        except KeyError as exc:
            raise DataReferenceError(f"{context} references unknown quest '{quest_id}'.") from exc
