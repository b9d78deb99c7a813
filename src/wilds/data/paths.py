"""Where the content tables live."""
from __future__ import annotations

from pathlib import Path

CONTENT_TABLES: tuple[str, ...] = (
    "items.json",
    "quests.json",
    "locations.json",
    "creatures.json",
    "npcs.json",
    "trades.json",
)

# src/wilds/data/paths.py -> repository root
_REPO_ROOT = Path(__file__).resolve().parents[3]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the content directory: ``base_path`` if given, else the bundled one."""
    if base_path is not None:
        return Path(base_path)
    return _REPO_ROOT / "data" / "definitions"


def table_path(table: str, base_path: Path | str | None = None) -> Path:
    if table not in CONTENT_TABLES:
        raise ValueError(f"Unknown content table '{table}'.")
    return get_definitions_path(base_path) / table
