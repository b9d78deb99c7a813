"""Base repository implementation for JSON content tables."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Generic, List, TypeVar

from wilds.data import paths
from wilds.data.errors import DataValidationError
from wilds.data.json_loader import read_table

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        return paths.table_path(self._filename, self._base_path)

    def _load_raw(self) -> dict[str, object]:
        return read_table(self._get_file_path())

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        try:
            return self._definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        return [self._definitions[key] for key in sorted(self._definitions.keys())]

    def ids(self) -> list[str]:
        self._ensure_loaded()
        assert self._definitions is not None
        return sorted(self._definitions.keys())

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_probability(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        if not 0.0 <= float(value) <= 1.0:
            raise DataValidationError(f"{context} must be between 0 and 1.")
        return float(value)

    @classmethod
    def _require_str_list(cls, value: object, context: str) -> List[str]:
        result: List[str] = []
        for entry in cls._require_list(value, context):
            if not isinstance(entry, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(entry)
        return result

    @staticmethod
    def _assert_fields(
        payload: dict[str, object],
        required: set[str],
        context: str,
        optional: set[str] | None = None,
    ) -> None:
        actual_keys = set(payload.keys())
        allowed = required | (optional or set())
        missing = required - actual_keys
        unknown = actual_keys - allowed
        pieces = []
        if missing:
            pieces.append(f"missing fields: {sorted(missing)}")
        if unknown:
            pieces.append(f"unknown fields: {sorted(unknown)}")
        if pieces:
            raise DataValidationError(f"{context} has schema issues ({'; '.join(pieces)}).")
