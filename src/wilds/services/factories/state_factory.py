"""Factory for a fresh run's world state."""
from __future__ import annotations

import logging

from wilds.config import DEFAULT_CONFIG, EngineConfig
from wilds.data.repositories import LocationsRepository, TradesRepository
from wilds.domain.state import NarrativeFlags, PlayerRecord, WorldState
from wilds.services.errors import FactoryError
from wilds.services.quest_service import QuestService

logger = logging.getLogger(__name__)


def create_initial_state(
    locations_repo: LocationsRepository,
    quest_service: QuestService,
    trades_repo: TradesRepository,
    config: EngineConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Build the state a new run starts from.

    Every quest is registered as not started, every gather counter declared by
    a location starts at zero and so does every trade's usage count.
    """
    try:
        start = locations_repo.get(config.starting_location_id)
    except KeyError as exc:
        raise FactoryError(
            f"Starting location '{config.starting_location_id}' not found."
        ) from exc
    if config.starting_hp <= 0:
        raise FactoryError("Starting hp must be positive.")

    quests = quest_service.initial_quests()
    if not quests:
        raise FactoryError("At least one quest must be defined to start a run.")

    state = WorldState(
        current_location_id=start.id,
        player=PlayerRecord(hp=config.starting_hp, max_hp=config.starting_hp),
        quests=quests,
        flags=NarrativeFlags(),
        gather={counter: 0 for counter in locations_repo.gather_counters()},
        trade_usage={trade.id: 0 for trade in trades_repo.offered()},
    )
    logger.info("New run created at %s", start.id)
    return state
