"""Reads one content table from disk."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError, DataValidationError


def read_table(path: Path) -> dict[str, object]:
    """Return the table's top-level object.

    Every table is a JSON object keyed by id (or by section name for
    ``quests.json`` and ``trades.json``); anything else is rejected.
    """
    table = path.name
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"not found in {path.parent}", table=table) from exc
    except OSError as exc:
        raise DataLoadError(f"could not be read ({exc.strerror})", table=table) from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"invalid JSON at line {exc.lineno}: {exc.msg}", table=table) from exc
    if not isinstance(raw, dict):
        raise DataValidationError("top level must be an object keyed by id", table=table)
    return raw
