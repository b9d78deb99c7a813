"""Barter logic for the trading post."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List

from wilds.data.repositories import ItemsRepository, TradesRepository
from wilds.domain.defs import TradeDef
from wilds.domain.inventory import add_items, has_items, remove_items
from wilds.domain.state import WorldState


@dataclass(slots=True)
class TradeOfferView:
    trade_id: str
    label: str
    used: int
    limit: int | None
    affordable: bool
    available: bool


def limit_modifier(forest_reputation: int) -> int:
    """Return the usage-limit adjustment for a forest regard score."""
    if forest_reputation >= 20:
        return 2
    if forest_reputation >= 10:
        return 1
    if forest_reputation <= -15:
        return -2
    if forest_reputation <= -5:
        return -1
    return 0


class TradeService:
    """Checks and applies trades. Never mutates the state it is given."""

    def __init__(self, *, trades_repo: TradesRepository, items_repo: ItemsRepository) -> None:
        self._trades_repo = trades_repo
        self._items_repo = items_repo

    @property
    def trader_location_id(self) -> str:
        return self._trades_repo.trader_location_id

    def find(self, trade_id: str) -> TradeDef | None:
        try:
            return self._trades_repo.get(trade_id)
        except KeyError:
            return None

    def effective_limit(self, state: WorldState, trade: TradeDef) -> int | None:
        """Return how many times the trade may be used this run, or None if unlimited."""
        if trade.base_limit is None:
            return None
        return max(1, trade.base_limit + limit_modifier(state.flags.forest_reputation))

    def uses(self, state: WorldState, trade_id: str) -> int:
        return state.trade_usage.get(trade_id, 0)

    def can_use(self, state: WorldState, trade: TradeDef) -> bool:
        limit = self.effective_limit(state, trade)
        if limit is None:
            return True
        return self.uses(state, trade.id) < limit

    def can_afford(self, state: WorldState, trade: TradeDef) -> bool:
        return has_items(state.inventory, ((cost.item_id, cost.quantity) for cost in trade.costs))

    def apply_trade(self, state: WorldState, trade: TradeDef) -> WorldState:
        """Remove all costs, add all rewards and count the use.

        Callers check ``can_afford`` and ``can_use`` first; this never partially
        applies a trade.
        """
        inventory = state.inventory
        for cost in trade.costs:
            inventory = remove_items(inventory, cost.item_id, cost.quantity)
        for reward in trade.rewards:
            inventory = add_items(inventory, reward.item_id, reward.quantity)
        usage = dict(state.trade_usage)
        usage[trade.id] = usage.get(trade.id, 0) + 1
        return replace(state.with_inventory(inventory), trade_usage=usage)

    def build_offers(self, state: WorldState) -> List[TradeOfferView]:
        offers: List[TradeOfferView] = []
        for trade in self._trades_repo.offered():
            offers.append(
                TradeOfferView(
                    trade_id=trade.id,
                    label=trade.label,
                    used=self.uses(state, trade.id),
                    limit=self.effective_limit(state, trade),
                    affordable=self.can_afford(state, trade),
                    available=self.can_use(state, trade),
                )
            )
        return offers

    def describe_costs(self, trade: TradeDef) -> str:
        return ", ".join(
            f"{cost.quantity}x {self._items_repo.get(cost.item_id).name}" for cost in trade.costs
        )
