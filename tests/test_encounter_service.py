from __future__ import annotations

import pytest

from wilds.config import EngineConfig
from wilds.services import narrative
from wilds.services.encounter_service import EncounterService, reputation_tier
from tests.helpers.world import (
    ScriptedRNG,
    at,
    fresh_state,
    in_encounter,
    make_engine,
    with_regard,
)


@pytest.mark.parametrize(
    ("score", "tier"),
    [
        (40, "revered"),
        (25, "revered"),
        (24, "favour"),
        (10, "favour"),
        (9, "neutral"),
        (0, "neutral"),
        (-4, "neutral"),
        (-5, "uneasy"),
        (-19, "uneasy"),
        (-20, "hostile"),
        (-80, "hostile"),
    ],
)
def test_reputation_tier_bands(score: int, tier: str) -> None:
    assert reputation_tier(score) == tier


def test_creatures_for_location_filters_by_biome() -> None:
    encounters = make_engine().encounter_service

    assert [creature.id for creature in encounters.creatures_for_location("wilds")] == [
        "stray_beast",
        "wild_spirit",
    ]
    assert [creature.id for creature in encounters.creatures_for_location("deep_wilds")] == [
        "will_o_wisp"
    ]
    assert encounters.creatures_for_location("sanctum") == []


def test_encounter_chance_by_location_and_flags() -> None:
    engine = make_engine()
    encounters = engine.encounter_service
    state = fresh_state(engine)

    assert encounters.encounter_chance(at(state, "wilds")) == pytest.approx(0.3)
    assert encounters.encounter_chance(at(state, "gate")) == pytest.approx(0.1)
    assert encounters.encounter_chance(at(state, "sanctum")) == 0.0
    healed = state.with_flags(grove_healed=True)
    assert encounters.encounter_chance(at(healed, "wilds")) == pytest.approx(0.15)
    communed = state.with_flags(glow_commune_complete=True)
    assert encounters.encounter_chance(at(communed, "deep_wilds")) == pytest.approx(0.3)


def test_negative_regard_raises_chance() -> None:
    engine = make_engine()
    encounters = engine.encounter_service
    state = at(fresh_state(engine), "wilds")

    assert encounters.encounter_chance(with_regard(state, -20)) == pytest.approx(0.45)
    assert encounters.encounter_chance(with_regard(state, -5)) == pytest.approx(0.35)
    assert encounters.encounter_chance(with_regard(state, 30)) == pytest.approx(0.3)
    assert encounters.encounter_chance(with_regard(at(state, "sanctum"), -50)) == 0.0


def test_chance_bonus_is_capped_by_ceiling() -> None:
    engine = make_engine()
    encounters = EncounterService(
        creatures_repo=engine.creatures_repo,
        locations_repo=engine.locations_repo,
        config=EngineConfig(hostile_spawn_bonus=0.5),
    )
    state = with_regard(at(fresh_state(engine), "deep_wilds"), -25)

    assert encounters.encounter_chance(state) == pytest.approx(0.6)


def test_maybe_trigger_miss_leaves_state_alone() -> None:
    engine = make_engine()
    state = at(fresh_state(engine), "wilds")

    new_state, entries = engine.encounter_service.maybe_trigger(state, rng=ScriptedRNG())

    assert new_state is state
    assert entries == []


def test_maybe_trigger_spawns_first_eligible_creature() -> None:
    engine = make_engine()
    state = at(fresh_state(engine), "wilds")

    new_state, entries = engine.encounter_service.maybe_trigger(state, rng=ScriptedRNG(0.0))

    assert new_state.current_encounter is not None
    assert new_state.current_encounter.creature_id == "stray_beast"
    assert new_state.current_encounter.hp == 7
    assert [entry.text for entry in entries] == ["Something stirs in The Wilds. Stray Beast emerges."]
    assert entries[0].type == "combat"


def test_hostile_spawn_prepends_flavour_line() -> None:
    engine = make_engine()
    state = with_regard(at(fresh_state(engine), "lake"), -20)

    _, entries = engine.encounter_service.maybe_trigger(state, rng=ScriptedRNG(0.0))

    assert [entry.text for entry in entries] == [
        "The air bristles. Lake Wisp lunges as if the forest itself wants you gone.",
        "Something stirs in The Lake. Lake Wisp emerges.",
    ]


def test_revered_regard_can_spare_the_player() -> None:
    engine = make_engine()
    state = with_regard(at(fresh_state(engine), "wilds"), 30)
    rng = ScriptedRNG(0.0, 0.2)

    new_state, entries = engine.encounter_service.maybe_trigger(state, rng=rng)

    assert new_state.current_encounter is None
    assert [entry.text for entry in entries] == [narrative.SPARED_TEXT]
    assert rng.draws == 2


def test_spare_roll_failure_still_spawns_with_flavour() -> None:
    engine = make_engine()
    state = with_regard(at(fresh_state(engine), "wilds"), 30)

    new_state, entries = engine.encounter_service.maybe_trigger(state, rng=ScriptedRNG(0.0, 0.25))

    assert new_state.current_encounter is not None
    assert entries[0].text == (
        "Stray Beast pauses, recognising the quiet care you've shown the Wilds."
    )


def test_spare_chance_scales_with_regard_and_caps() -> None:
    engine = make_engine()
    encounters = engine.encounter_service
    state = fresh_state(engine)

    assert encounters.spare_chance(with_regard(state, 5)) == 0.0
    assert encounters.spare_chance(with_regard(state, 12)) == pytest.approx(0.12)
    assert encounters.spare_chance(with_regard(state, 90)) == pytest.approx(0.25)


def test_no_roll_without_creatures_or_during_encounter() -> None:
    engine = make_engine()
    rng = ScriptedRNG(0.0)
    state = fresh_state(engine)

    engine.encounter_service.maybe_trigger(state, rng=rng)
    engine.encounter_service.maybe_trigger(in_encounter(engine, at(state, "wilds"), "wild_spirit"), rng=rng)
    engine.encounter_service.maybe_trigger(at(state, "wilds").with_flags(run_ended=True), rng=rng)

    assert rng.draws == 0
