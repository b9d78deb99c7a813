"""Quest ledger: per-quest status and step tracking over immutable state."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Tuple

from wilds.core.types import QuestStatus
from wilds.data.repositories import ItemsRepository, QuestsRepository
from wilds.domain.inventory import count_item
from wilds.domain.quest_state import STATUS_ORDER, QuestState
from wilds.domain.state import WorldState
from wilds.services.quest_keys import GROVE_QUEST_ID, GROVE_READY_STEPS, GROVE_RITUAL_COSTS

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuestStatusView:
    quest_id: str
    name: str
    step_id: str
    summary: str
    status: QuestStatus


@dataclass(slots=True)
class QuestJournalView:
    active: List[QuestStatusView]
    completed: List[QuestStatusView]
    ingredient_progress: str | None = None


class QuestService:
    """Reads and advances quest records.

    Every method takes a ``WorldState`` and returns a new one; the ledger has no
    behaviour of its own and only moves when an action asks it to.
    """

    def __init__(self, *, quests_repo: QuestsRepository, items_repo: ItemsRepository) -> None:
        self._quests_repo = quests_repo
        self._items_repo = items_repo

    def initial_quests(self) -> Tuple[QuestState, ...]:
        """Return a not-started record for every defined quest."""
        return tuple(self._default_record(quest.quest_id) for quest in self._quests_repo.all())

    def get(self, state: WorldState, quest_id: str) -> QuestState | None:
        for quest in state.quests:
            if quest.id == quest_id:
                return quest
        return None

    def upsert(self, state: WorldState, quest: QuestState) -> WorldState:
        """Replace the record with the same id, or append it."""
        quests = list(state.quests)
        for index, existing in enumerate(quests):
            if existing.id == quest.id:
                quests[index] = quest
                break
        else:
            quests.append(quest)
        return replace(state, quests=tuple(quests))

    def activate_if_needed(self, state: WorldState, quest_id: str) -> WorldState:
        quest = self._get_or_default(state, quest_id)
        if quest.status != "not_started":
            return state
        definition = self._quests_repo.get(quest_id)
        logger.debug("Quest %s activated at %s", quest_id, definition.first_step_id)
        return self.upsert(state, replace(quest, status="active", step=definition.first_step_id))

    def set_step(self, state: WorldState, quest_id: str, step: str) -> WorldState:
        quest = self._get_or_default(state, quest_id)
        if quest.step == step:
            return self.upsert(state, quest)
        logger.debug("Quest %s step %s -> %s", quest_id, quest.step, step)
        return self.upsert(state, replace(quest, step=step))

    def set_status(self, state: WorldState, quest_id: str, status: QuestStatus) -> WorldState:
        """Move a quest's status forward. Requests to move it backwards are ignored."""
        quest = self._get_or_default(state, quest_id)
        if STATUS_ORDER[status] <= STATUS_ORDER[quest.status]:
            return self.upsert(state, quest)
        logger.debug("Quest %s status %s -> %s", quest_id, quest.status, status)
        return self.upsert(state, replace(quest, status=status))

    def is_active_at(self, state: WorldState, quest_id: str, steps: Iterable[str]) -> bool:
        quest = self.get(state, quest_id)
        return quest is not None and quest.is_active and quest.step in tuple(steps)

    def is_active(self, state: WorldState, quest_id: str) -> bool:
        quest = self.get(state, quest_id)
        return quest is not None and quest.is_active

    def is_completed(self, state: WorldState, quest_id: str) -> bool:
        quest = self.get(state, quest_id)
        return quest is not None and quest.is_completed

    def journal(self, state: WorldState) -> QuestJournalView:
        active: List[QuestStatusView] = []
        completed: List[QuestStatusView] = []
        for quest in state.quests:
            if quest.status == "not_started":
                continue
            definition = self._quests_repo.get(quest.id)
            view = QuestStatusView(
                quest_id=quest.id,
                name=definition.name,
                step_id=quest.step,
                summary=definition.summary_for(quest.step),
                status=quest.status,
            )
            (completed if quest.is_completed else active).append(view)
        return QuestJournalView(
            active=active,
            completed=completed,
            ingredient_progress=self.journal_progress(state),
        )

    def journal_progress(self, state: WorldState) -> str | None:
        """Return ritual ingredient progress while the grove quest is ritual-ready."""
        if not self.is_active_at(state, GROVE_QUEST_ID, GROVE_READY_STEPS):
            return None
        labels = {"forest_herb": "Herbs", "lake_water": "Water"}
        parts = []
        for item_id, required in GROVE_RITUAL_COSTS:
            label = labels.get(item_id) or self._items_repo.get(item_id).name
            held = min(count_item(state.inventory, item_id), required)
            parts.append(f"{label}: {held}/{required}")
        return ", ".join(parts)

    def _get_or_default(self, state: WorldState, quest_id: str) -> QuestState:
        quest = self.get(state, quest_id)
        if quest is not None:
            return quest
        return self._default_record(quest_id)

    def _default_record(self, quest_id: str) -> QuestState:
        definition = self._quests_repo.get(quest_id)
        return QuestState(
            id=quest_id,
            name=definition.name,
            step=definition.first_step_id,
            status="not_started",
        )
