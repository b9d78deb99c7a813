import pytest

from wilds.bootstrap import build_engine
from wilds.config import EngineConfig
from wilds.services.errors import FactoryError
from wilds.services.factories import create_initial_state


def test_new_run_starts_at_sanctum_with_everything_zeroed() -> None:
    engine = build_engine(config=EngineConfig())

    state = engine.new_run()

    assert state.current_location_id == "sanctum"
    assert (state.player.hp, state.player.max_hp, state.player.xp, state.player.level) == (20, 20, 0, 1)
    assert state.inventory == {}
    assert state.current_encounter is None
    assert state.log == ()
    assert not state.run_ended
    assert [(quest.id, quest.status) for quest in state.quests] == [
        ("echoes_at_the_lake", "not_started"),
        ("heal_the_grove", "not_started"),
        ("hermits_glow", "not_started"),
    ]
    assert state.gather == {
        "lake_water": 0,
        "luminous_fragments": 0,
        "mine_ore": 0,
        "wilds_herbs": 0,
    }
    assert state.trade_usage == {"herbs_for_tonic": 0, "ore_for_tonic": 0}


def test_config_changes_starting_values() -> None:
    engine = build_engine(config=EngineConfig(starting_location_id="gate", starting_hp=12))

    state = engine.new_run()

    assert state.current_location_id == "gate"
    assert state.player.hp == state.player.max_hp == 12


def test_missing_start_location_raises_clean_error() -> None:
    engine = build_engine(config=EngineConfig())

    with pytest.raises(FactoryError):
        create_initial_state(
            engine.locations_repo,
            engine.quest_service,
            engine.trades_repo,
            EngineConfig(starting_location_id="castle"),
        )


def test_non_positive_starting_hp_raises_clean_error() -> None:
    engine = build_engine(config=EngineConfig(starting_hp=0))

    with pytest.raises(FactoryError):
        engine.new_run()
