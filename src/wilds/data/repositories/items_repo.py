"""Items repository."""
from __future__ import annotations

from typing import Dict

from wilds.core.types import ITEM_CATEGORIES
from wilds.data.errors import DataReferenceError, DataValidationError
from wilds.data.repositories.base import RepositoryBase
from wilds.domain.defs import ItemDef, ItemStackDef


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads and validates item definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            context = f"item '{raw_id}'"
            item_data = self._require_mapping(payload, context)
            self._assert_fields(
                item_data,
                {"name", "description", "category"},
                context,
                optional={"effect_description"},
            )
            category = self._require_str(item_data["category"], f"{context} category")
            if category not in ITEM_CATEGORIES:
                raise DataValidationError(
                    f"{context} category must be one of {list(ITEM_CATEGORIES)}."
                )
            effect_description = item_data.get("effect_description")
            if effect_description is not None:
                effect_description = self._require_str(
                    effect_description, f"{context} effect_description"
                )
            items[raw_id] = ItemDef(
                id=raw_id,
                name=self._require_str(item_data["name"], f"{context} name"),
                description=self._require_str(item_data["description"], f"{context} description"),
                category=category,  # type: ignore[arg-type]
                effect_description=effect_description,
            )
        return items

    def parse_stack(self, value: object, context: str) -> ItemStackDef:
        """Parse ``{"item_id": ..., "quantity": ...}`` and check the item exists."""
        mapping = self._require_mapping(value, context)
        self._assert_fields(mapping, {"item_id"}, context, optional={"quantity"})
        item_id = self._require_str(mapping["item_id"], f"{context}.item_id")
        quantity = self._require_int(mapping.get("quantity", 1), f"{context}.quantity")
        if quantity <= 0:
            raise DataValidationError(f"{context}.quantity must be positive.")
        self.require_known(item_id, context)
        return ItemStackDef(item_id=item_id, quantity=quantity)

    def require_known(self, item_id: str, context: str) -> None:
        try:
            self.get(item_id)
        except KeyError as exc:
            raise DataReferenceError(f"{context} references unknown item '{item_id}'.") from exc
