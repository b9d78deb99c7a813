"""Repository exports."""

from .creatures_repo import CreaturesRepository
from .items_repo import ItemsRepository
from .locations_repo import LocationsRepository
from .npcs_repo import NpcsRepository
from .quests_repo import QuestsRepository
from .trades_repo import TradesRepository

__all__ = [
    "CreaturesRepository",
    "ItemsRepository",
    "LocationsRepository",
    "NpcsRepository",
    "QuestsRepository",
    "TradesRepository",
]
