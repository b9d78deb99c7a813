"""Domain definition exports."""

from .creature_def import CreatureDef
from .item_def import ItemDef, ItemStackDef
from .location_def import (
    EncounterOverrideDef,
    GatherDef,
    LocationDef,
    LocationExitDef,
    LocationQuestProgressDef,
)
from .npc_def import NpcDef
from .quest_def import QuestDef, QuestStepDef
from .trade_def import TradeDef

__all__ = [
    "CreatureDef",
    "EncounterOverrideDef",
    "GatherDef",
    "ItemDef",
    "ItemStackDef",
    "LocationDef",
    "LocationExitDef",
    "LocationQuestProgressDef",
    "NpcDef",
    "QuestDef",
    "QuestStepDef",
    "TradeDef",
]
