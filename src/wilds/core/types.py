"""Shared type aliases for the core and domain layers."""
from typing import Literal

LogEntryType = Literal["narration", "system", "combat", "quest", "choice"]
QuestStatus = Literal["not_started", "active", "completed"]
ReputationTier = Literal["hostile", "uneasy", "neutral", "favour", "revered"]
Direction = Literal["north", "south", "east", "west", "up", "down"]
Biome = Literal["sanctum", "forest", "lake", "mine", "camp", "deep_forest"]
ItemCategory = Literal["resource", "consumable", "quest"]
NpcId = Literal["caretaker", "hermit", "ranger_trader"]

DIRECTIONS: tuple[Direction, ...] = ("north", "south", "east", "west", "up", "down")
BIOMES: tuple[Biome, ...] = ("sanctum", "forest", "lake", "mine", "camp", "deep_forest")
ITEM_CATEGORIES: tuple[ItemCategory, ...] = ("resource", "consumable", "quest")
NPC_IDS: tuple[NpcId, ...] = ("caretaker", "hermit", "ranger_trader")
LOG_ENTRY_TYPES: tuple[LogEntryType, ...] = ("narration", "system", "combat", "quest", "choice")
QUEST_STATUSES: tuple[QuestStatus, ...] = ("not_started", "active", "completed")

__all__ = [
    "BIOMES",
    "Biome",
    "DIRECTIONS",
    "Direction",
    "ITEM_CATEGORIES",
    "ItemCategory",
    "LOG_ENTRY_TYPES",
    "LogEntryType",
    "NPC_IDS",
    "NpcId",
    "QUEST_STATUSES",
    "QuestStatus",
    "ReputationTier",
]
