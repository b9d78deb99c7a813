"""Quest definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class QuestStepDef:
    id: str
    summary: str


@dataclass(slots=True)
class QuestDef:
    quest_id: str
    name: str
    description: str
    steps: Tuple[QuestStepDef, ...]

    @property
    def first_step_id(self) -> str:
        return self.steps[0].id

    @property
    def step_ids(self) -> Tuple[str, ...]:
        return tuple(step.id for step in self.steps)

    def step_index(self, step_id: str) -> int:
        """Return the position of a step, or -1 when it is not declared."""
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        return -1

    def summary_for(self, step_id: str) -> str:
        for step in self.steps:
            if step.id == step_id:
                return step.summary
        return ""
