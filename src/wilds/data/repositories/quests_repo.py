"""Repository for quest definitions."""
from __future__ import annotations

from typing import Dict, List

from wilds.data.errors import DataValidationError
from wilds.data.repositories.base import RepositoryBase
from wilds.domain.defs import QuestDef, QuestStepDef


class QuestsRepository(RepositoryBase[QuestDef]):
    """Loads and validates quest definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("quests.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, QuestDef]:
        container = self._require_mapping(raw, "quests.json")
        raw_quests = self._require_mapping(container.get("quests"), "quests.json.quests")
        definitions: Dict[str, QuestDef] = {}
        for quest_id, quest_payload in raw_quests.items():
            quest_map = self._require_mapping(quest_payload, f"quest '{quest_id}'")
            quest_id_value = self._require_str(quest_map.get("quest_id"), f"quest '{quest_id}' quest_id")
            if quest_id_value != quest_id:
                raise DataValidationError(
                    f"quest '{quest_id}' quest_id must match key (found '{quest_id_value}')."
                )
            definitions[quest_id] = QuestDef(
                quest_id=quest_id,
                name=self._require_str(quest_map.get("name"), f"quest '{quest_id}' name"),
                description=self._require_str(
                    quest_map.get("description", ""), f"quest '{quest_id}' description"
                ),
                steps=tuple(self._parse_steps(quest_map.get("steps"), quest_id)),
            )
        return definitions

    def _parse_steps(self, value: object, quest_id: str) -> List[QuestStepDef]:
        steps_data = self._require_list(value, f"quest '{quest_id}' steps")
        if not steps_data:
            raise DataValidationError(f"quest '{quest_id}' must define at least one step.")
        steps: List[QuestStepDef] = []
        seen: set[str] = set()
        for index, entry in enumerate(steps_data):
            ctx = f"quest '{quest_id}' steps[{index}]"
            mapping = self._require_mapping(entry, ctx)
            step_id = self._require_str(mapping.get("id"), f"{ctx}.id")
            if step_id in seen:
                raise DataValidationError(f"{ctx}.id '{step_id}' is declared twice.")
            seen.add(step_id)
            summary = self._require_str(mapping.get("summary"), f"{ctx}.summary")
            steps.append(QuestStepDef(id=step_id, summary=summary))
        return steps
