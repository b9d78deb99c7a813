"""Engine tuning values and their optional JSON overrides."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Numbers the engine uses outside of the content tables."""

    starting_location_id: str = "sanctum"
    starting_hp: int = 20
    xp_per_defeat: int = 10
    level_hp_bonus: int = 5
    flee_chance: float = 0.7
    healing_item_id: str = "healing_tonic"
    healing_amount: int = 8
    hostile_spawn_bonus: float = 0.15
    uneasy_spawn_bonus: float = 0.05
    spawn_chance_ceiling: float = 0.6
    spare_chance_cap: float = 0.25
    ritual_regard: int = 5
    commune_regard: int = 5
    gated_entry_regard: int = 2
    echoes_regard: int = 1
    spirit_defeat_regard: int = -1
    quest_xp: int = 10
    offering_xp: int = 5


DEFAULT_CONFIG = EngineConfig()


def _coerce(value: object, default: object) -> object:
    if isinstance(default, bool) or isinstance(value, bool):
        return default
    if isinstance(default, float) and isinstance(value, (int, float)):
        return float(value)
    if isinstance(default, int) and isinstance(value, int):
        return value
    if isinstance(default, str) and isinstance(value, str) and value:
        return value
    return default


def config_from_mapping(raw: Dict[str, Any]) -> EngineConfig:
    """Build a config from a mapping, keeping defaults for missing or mistyped keys."""
    overrides: Dict[str, object] = {}
    for config_field in fields(EngineConfig):
        if config_field.name not in raw:
            continue
        default = getattr(DEFAULT_CONFIG, config_field.name)
        overrides[config_field.name] = _coerce(raw[config_field.name], default)
    return replace(DEFAULT_CONFIG, **overrides)


def load_config(path: Path | str | None = None) -> EngineConfig:
    """Load config overrides from disk or return defaults."""
    if path is None:
        return DEFAULT_CONFIG
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return DEFAULT_CONFIG
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable engine config %s: %s", config_path, exc)
        return DEFAULT_CONFIG
    if not isinstance(raw, dict):
        logger.warning("Ignoring engine config %s: expected a JSON object", config_path)
        return DEFAULT_CONFIG
    return config_from_mapping(raw)


def save_config(config: EngineConfig, path: Path | str) -> None:
    """Persist config to disk."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {config_field.name: getattr(config, config_field.name) for config_field in fields(config)}
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
