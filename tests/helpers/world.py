from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence, TypeVar

from wilds.bootstrap import EngineServices, build_engine
from wilds.config import DEFAULT_CONFIG
from wilds.core.rng import RNG
from wilds.core.types import QuestStatus
from wilds.domain.state import EncounterState, WorldState

T = TypeVar("T")


class ScriptedRNG(RNG):
    """RNG that replays queued floats, then keeps returning ``default``.

    ``choice`` always picks the first element and does not consume a float.
    The default of 0.99 misses every spawn roll and every flee roll.
    """

    def __init__(self, *values: float, default: float = 0.99) -> None:
        super().__init__(0)
        self._queue: List[float] = list(values)
        self._default = default
        self.draws = 0

    def queue(self, *values: float) -> None:
        self._queue.extend(values)

    def random(self) -> float:
        self.draws += 1
        if self._queue:
            return self._queue.pop(0)
        return self._default

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[0]


def make_engine() -> EngineServices:
    return build_engine(config=DEFAULT_CONFIG)


def fresh_state(engine: EngineServices) -> WorldState:
    return engine.new_run()


def at(state: WorldState, location_id: str) -> WorldState:
    return state.with_location(location_id)


def with_items(state: WorldState, **items: int) -> WorldState:
    inventory = dict(state.inventory)
    inventory.update({item_id: quantity for item_id, quantity in items.items() if quantity > 0})
    return state.with_inventory(inventory)


def with_regard(state: WorldState, score: int) -> WorldState:
    return state.with_flags(forest_reputation=score)


def with_quest(
    engine: EngineServices,
    state: WorldState,
    quest_id: str,
    step: str,
    status: QuestStatus = "active",
) -> WorldState:
    quest = engine.quest_service.get(state, quest_id)
    assert quest is not None
    return engine.quest_service.upsert(state, replace(quest, step=step, status=status))


def in_encounter(
    engine: EngineServices, state: WorldState, creature_id: str, hp: int | None = None
) -> WorldState:
    creature = engine.encounter_service.find_creature(creature_id)
    assert creature is not None
    return state.with_encounter(
        EncounterState(creature_id=creature_id, hp=creature.hp if hp is None else hp)
    )


def snapshot(engine: EngineServices, state: WorldState) -> dict:
    """Structural snapshot of a state, for checking it was not modified."""
    return engine.saves.serialize(state)["state"]
