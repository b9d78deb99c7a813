import json
import logging
from pathlib import Path

from wilds.bootstrap import CONFIG_ENV_VAR, DEFINITIONS_ENV_VAR, build_engine
from wilds.config import DEFAULT_CONFIG, EngineConfig, config_from_mapping, load_config, save_config


def test_load_config_defaults_without_file(tmp_path: Path) -> None:
    assert load_config() == DEFAULT_CONFIG
    assert load_config(tmp_path / "missing.json") == DEFAULT_CONFIG


def test_load_config_applies_overrides(tmp_path: Path) -> None:
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"flee_chance": 1, "starting_hp": 30, "unknown": True}), encoding="utf-8")

    config = load_config(path)

    assert config.flee_chance == 1.0
    assert isinstance(config.flee_chance, float)
    assert config.starting_hp == 30
    assert config.healing_amount == DEFAULT_CONFIG.healing_amount


def test_mistyped_values_keep_defaults() -> None:
    config = config_from_mapping({"starting_hp": "many", "xp_per_defeat": True, "healing_item_id": ""})

    assert config == DEFAULT_CONFIG


def test_unreadable_config_logs_and_falls_back(tmp_path: Path, caplog) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{ nope", encoding="utf-8")
    listed = tmp_path / "listed.json"
    listed.write_text("[1, 2]", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="wilds.config"):
        assert load_config(broken) == DEFAULT_CONFIG
        assert load_config(listed) == DEFAULT_CONFIG

    assert len(caplog.records) == 2


def test_save_config_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "engine.json"
    config = EngineConfig(flee_chance=0.5, quest_xp=20)

    save_config(config, path)

    assert load_config(path) == config


def test_build_engine_reads_environment(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"starting_hp": 15}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    monkeypatch.delenv(DEFINITIONS_ENV_VAR, raising=False)

    engine = build_engine()

    assert engine.config.starting_hp == 15
    assert engine.new_run().player.max_hp == 15
