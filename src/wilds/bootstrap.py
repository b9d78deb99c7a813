"""Wire repositories and services into a ready-to-use engine."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from wilds.config import EngineConfig, load_config
from wilds.data.repositories import (
    CreaturesRepository,
    ItemsRepository,
    LocationsRepository,
    NpcsRepository,
    QuestsRepository,
    TradesRepository,
)
from wilds.domain.state import WorldState
from wilds.services import (
    ActionService,
    DialogueService,
    EncounterService,
    QuestService,
    SaveService,
    TradeService,
)
from wilds.services.factories import create_initial_state

CONFIG_ENV_VAR = "WILDS_ENGINE_CONFIG"
DEFINITIONS_ENV_VAR = "WILDS_DEFINITIONS_PATH"


@dataclass(slots=True)
class EngineServices:
    """Everything a rendering layer needs to drive a run."""

    config: EngineConfig
    items_repo: ItemsRepository
    quests_repo: QuestsRepository
    creatures_repo: CreaturesRepository
    locations_repo: LocationsRepository
    npcs_repo: NpcsRepository
    trades_repo: TradesRepository
    quest_service: QuestService
    trade_service: TradeService
    encounter_service: EncounterService
    dialogue_service: DialogueService
    actions: ActionService
    saves: SaveService

    def new_run(self) -> WorldState:
        return create_initial_state(
            self.locations_repo, self.quest_service, self.trades_repo, self.config
        )


def build_engine(
    *,
    base_path: Path | str | None = None,
    config: EngineConfig | None = None,
) -> EngineServices:
    """Build the engine, reading unset options from the environment."""
    if config is None:
        config = load_config(os.getenv(CONFIG_ENV_VAR) or None)
    if base_path is None:
        base_path = os.getenv(DEFINITIONS_ENV_VAR) or None

    items_repo = ItemsRepository(base_path=base_path)
    quests_repo = QuestsRepository(base_path=base_path)
    creatures_repo = CreaturesRepository(items_repo=items_repo, base_path=base_path)
    locations_repo = LocationsRepository(
        items_repo=items_repo, quests_repo=quests_repo, base_path=base_path
    )
    npcs_repo = NpcsRepository(locations_repo=locations_repo, base_path=base_path)
    trades_repo = TradesRepository(
        items_repo=items_repo, locations_repo=locations_repo, base_path=base_path
    )

    quest_service = QuestService(quests_repo=quests_repo, items_repo=items_repo)
    trade_service = TradeService(trades_repo=trades_repo, items_repo=items_repo)
    encounter_service = EncounterService(
        creatures_repo=creatures_repo, locations_repo=locations_repo, config=config
    )
    dialogue_service = DialogueService(
        npcs_repo=npcs_repo, quest_service=quest_service, config=config
    )
    actions = ActionService(
        items_repo=items_repo,
        locations_repo=locations_repo,
        quest_service=quest_service,
        encounter_service=encounter_service,
        trade_service=trade_service,
        dialogue_service=dialogue_service,
        config=config,
    )

    def _new_state() -> WorldState:
        return create_initial_state(locations_repo, quest_service, trades_repo, config)

    saves = SaveService(
        locations_repo=locations_repo,
        quests_repo=quests_repo,
        creatures_repo=creatures_repo,
        items_repo=items_repo,
        new_state=_new_state,
    )
    return EngineServices(
        config=config,
        items_repo=items_repo,
        quests_repo=quests_repo,
        creatures_repo=creatures_repo,
        locations_repo=locations_repo,
        npcs_repo=npcs_repo,
        trades_repo=trades_repo,
        quest_service=quest_service,
        trade_service=trade_service,
        encounter_service=encounter_service,
        dialogue_service=dialogue_service,
        actions=actions,
        saves=saves,
    )
