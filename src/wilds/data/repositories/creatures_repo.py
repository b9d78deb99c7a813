"""Creatures repository."""
from __future__ import annotations

from typing import Dict, List

from wilds.core.types import BIOMES
from wilds.data.errors import DataValidationError
from wilds.data.repositories.base import RepositoryBase
from wilds.data.repositories.items_repo import ItemsRepository
from wilds.domain.defs import CreatureDef


class CreaturesRepository(RepositoryBase[CreatureDef]):
    """Loads and validates creature definitions."""

    def __init__(self, *, items_repo: ItemsRepository, base_path=None) -> None:
        super().__init__("creatures.json", base_path)
        self._items_repo = items_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, CreatureDef]:
        creatures: Dict[str, CreatureDef] = {}
        for raw_id, payload in raw.items():
            context = f"creature '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(
                data,
                {"name", "description", "hp", "attack", "defence", "biome"},
                context,
                optional={"tags", "special_drop"},
            )
            hp = self._require_int(data["hp"], f"{context} hp")
            if hp <= 0:
                raise DataValidationError(f"{context} hp must be positive.")
            attack = self._require_int(data["attack"], f"{context} attack")
            defence = self._require_int(data["defence"], f"{context} defence")
            if attack < 0 or defence < 0:
                raise DataValidationError(f"{context} attack and defence must be >= 0.")
            biome = self._require_str(data["biome"], f"{context} biome")
            if biome not in BIOMES:
                raise DataValidationError(f"{context} biome must be one of {list(BIOMES)}.")
            special_drop = None
            if data.get("special_drop") is not None:
                special_drop = self._items_repo.parse_stack(
                    data["special_drop"], f"{context} special_drop"
                )
            creatures[raw_id] = CreatureDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                hp=hp,
                attack=attack,
                defence=defence,
                biome=biome,  # type: ignore[arg-type]
                tags=tuple(self._require_str_list(data.get("tags", []), f"{context} tags")),
                special_drop=special_drop,
            )
        return creatures

    def for_biome(self, biome: str) -> List[CreatureDef]:
        """Return creatures living in ``biome`` in deterministic id order."""
        return [creature for creature in self.all() if creature.biome == biome]
