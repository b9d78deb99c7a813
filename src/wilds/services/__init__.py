"""Service layer exports."""

from .action_service import ActionService
from .dialogue_service import DialogueService
from .encounter_service import EncounterService, reputation_tier
from .errors import FactoryError, SaveLoadError
from .quest_service import QuestService
from .save_service import SaveService
from .trade_service import TradeService

__all__ = [
    "ActionService",
    "DialogueService",
    "EncounterService",
    "FactoryError",
    "QuestService",
    "SaveLoadError",
    "SaveService",
    "TradeService",
    "reputation_tier",
]
