"""Quest progress state data structures."""
from __future__ import annotations

from dataclasses import dataclass

from wilds.core.types import QuestStatus

STATUS_ORDER: dict[str, int] = {"not_started": 0, "active": 1, "completed": 2}


@dataclass(frozen=True, slots=True)
class QuestState:
    """Tracks the current step and lifecycle status of one quest."""

    id: str
    name: str
    step: str
    status: QuestStatus = "not_started"

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"
