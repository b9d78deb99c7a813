"""Repository for NPC definitions."""
from __future__ import annotations

from typing import Dict, List

from wilds.core.types import NPC_IDS
from wilds.data.errors import DataReferenceError, DataValidationError
from wilds.data.repositories.base import RepositoryBase
from wilds.data.repositories.locations_repo import LocationsRepository
from wilds.domain.defs import NpcDef


class NpcsRepository(RepositoryBase[NpcDef]):
    """Loads and validates NPC definitions."""

    def __init__(self, *, locations_repo: LocationsRepository, base_path=None) -> None:
        super().__init__("npcs.json", base_path)
        self._locations_repo = locations_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, NpcDef]:
        npcs: Dict[str, NpcDef] = {}
        for npc_id, payload in raw.items():
            context = f"npc '{npc_id}'"
            if npc_id not in NPC_IDS:
                raise DataValidationError(f"{context} is not a known NPC id {list(NPC_IDS)}.")
            data = self._require_mapping(payload, context)
            self._assert_fields(data, {"name", "location", "intro_lines", "repeat_lines"}, context)
            location_id = self._require_str(data["location"], f"{context} location")
            try:
                self._locations_repo.get(location_id)
            except KeyError as exc:
                raise DataReferenceError(
                    f"{context} references unknown location '{location_id}'."
                ) from exc
            intro_lines = self._require_str_list(data["intro_lines"], f"{context} intro_lines")
            if not intro_lines:
                raise DataValidationError(f"{context} intro_lines must not be empty.")
            npcs[npc_id] = NpcDef(
                id=npc_id,  # type: ignore[arg-type]
                name=self._require_str(data["name"], f"{context} name"),
                location_id=location_id,
                intro_lines=tuple(intro_lines),
                repeat_lines=tuple(
                    self._require_str_list(data["repeat_lines"], f"{context} repeat_lines")
                ),
            )
        return npcs

    def at_location(self, location_id: str) -> List[NpcDef]:
        return [npc for npc in self.all() if npc.location_id == location_id]
