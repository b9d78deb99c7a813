"""Repository for the trading post's barter offers."""
from __future__ import annotations

from typing import Dict, List

from wilds.data.errors import DataReferenceError, DataValidationError
from wilds.data.repositories.base import RepositoryBase
from wilds.data.repositories.items_repo import ItemsRepository
from wilds.data.repositories.locations_repo import LocationsRepository
from wilds.domain.defs import ItemStackDef, TradeDef


class TradesRepository(RepositoryBase[TradeDef]):
    """Loads and validates trade offers and the location they are offered at."""

    def __init__(
        self,
        *,
        items_repo: ItemsRepository,
        locations_repo: LocationsRepository,
        base_path=None,
    ) -> None:
        super().__init__("trades.json", base_path)
        self._items_repo = items_repo
        self._locations_repo = locations_repo
        self._trader_location_id: str | None = None
        self._order: List[str] = []

    @property
    def trader_location_id(self) -> str:
        self._ensure_loaded()
        assert self._trader_location_id is not None
        return self._trader_location_id

    def offered(self) -> List[TradeDef]:
        """Return trades in the order the trader lists them."""
        self._ensure_loaded()
        return [self.get(trade_id) for trade_id in self._order]

    def _build(self, raw: dict[str, object]) -> Dict[str, TradeDef]:
        container = self._require_mapping(raw, "trades.json")
        self._assert_fields(container, {"trader_location", "trades"}, "trades.json")
        location_id = self._require_str(container["trader_location"], "trades.json trader_location")
        try:
            self._locations_repo.get(location_id)
        except KeyError as exc:
            raise DataReferenceError(
                f"trades.json trader_location references unknown location '{location_id}'."
            ) from exc

        trades: Dict[str, TradeDef] = {}
        order: List[str] = []
        raw_trades = self._require_mapping(container["trades"], "trades.json trades")
        for trade_id, payload in raw_trades.items():
            context = f"trade '{trade_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(data, {"label", "costs", "rewards"}, context, optional={"base_limit"})
            base_limit = data.get("base_limit")
            if base_limit is not None:
                base_limit = self._require_int(base_limit, f"{context} base_limit")
                if base_limit <= 0:
                    raise DataValidationError(f"{context} base_limit must be positive.")
            costs = self._parse_stacks(data["costs"], f"{context} costs")
            if not costs:
                raise DataValidationError(f"{context} costs must not be empty.")
            trades[trade_id] = TradeDef(
                id=trade_id,
                label=self._require_str(data["label"], f"{context} label"),
                costs=tuple(costs),
                rewards=tuple(self._parse_stacks(data["rewards"], f"{context} rewards")),
                base_limit=base_limit,
            )
            order.append(trade_id)
        self._trader_location_id = location_id
        self._order = order
        return trades

    def _parse_stacks(self, value: object, context: str) -> List[ItemStackDef]:
        return [
            self._items_repo.parse_stack(entry, f"{context}[{index}]")
            for index, entry in enumerate(self._require_list(value, context))
        ]
