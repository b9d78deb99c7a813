from __future__ import annotations

from dataclasses import replace

import pytest

from tests.helpers.world import fresh_state, make_engine, with_items, with_quest


def test_initial_state_registers_every_quest_not_started() -> None:
    engine = make_engine()
    state = fresh_state(engine)

    assert {quest.id for quest in state.quests} == {
        "echoes_at_the_lake",
        "heal_the_grove",
        "hermits_glow",
    }
    grove = engine.quest_service.get(state, "heal_the_grove")
    assert grove is not None
    assert grove.status == "not_started"
    assert grove.step == "speak_to_caretaker"


def test_activate_if_needed_sets_first_step_once() -> None:
    engine = make_engine()
    quests = engine.quest_service
    state = fresh_state(engine)

    activated = quests.activate_if_needed(state, "hermits_glow")
    advanced = quests.set_step(activated, "hermits_glow", "seek_the_glow")
    again = quests.activate_if_needed(advanced, "hermits_glow")

    glow = quests.get(again, "hermits_glow")
    assert glow is not None
    assert glow.status == "active"
    assert glow.step == "seek_the_glow"
    assert quests.get(state, "hermits_glow").status == "not_started"


def test_set_status_never_regresses() -> None:
    engine = make_engine()
    quests = engine.quest_service
    state = quests.set_status(fresh_state(engine), "heal_the_grove", "completed")

    state = quests.set_status(state, "heal_the_grove", "active")

    assert quests.is_completed(state, "heal_the_grove")


def test_set_step_creates_missing_record_lazily() -> None:
    engine = make_engine()
    quests = engine.quest_service
    state = replace(fresh_state(engine), quests=())

    state = quests.set_step(state, "echoes_at_the_lake", "listen_at_lake")

    echoes = quests.get(state, "echoes_at_the_lake")
    assert echoes is not None
    assert echoes.status == "not_started"
    assert echoes.step == "listen_at_lake"
    assert echoes.name == "Echoes at the Lake"


def test_upsert_replaces_in_place() -> None:
    engine = make_engine()
    quests = engine.quest_service
    state = fresh_state(engine)
    order = [quest.id for quest in state.quests]

    grove = quests.get(state, "heal_the_grove")
    updated = quests.upsert(state, replace(grove, status="active"))

    assert [quest.id for quest in updated.quests] == order
    assert quests.is_active(updated, "heal_the_grove")


def test_unknown_quest_id_raises() -> None:
    engine = make_engine()
    with pytest.raises(KeyError):
        engine.quest_service.activate_if_needed(fresh_state(engine), "missing_quest")


def test_journal_progress_only_while_ritual_ready() -> None:
    engine = make_engine()
    quests = engine.quest_service
    state = fresh_state(engine)

    assert quests.journal_progress(state) is None

    state = with_quest(engine, state, "heal_the_grove", "gather_ingredients")
    state = with_items(state, forest_herb=2)
    assert quests.journal_progress(state) == "Herbs: 2/3, Water: 0/1"

    state = with_quest(engine, state, "heal_the_grove", "return_to_caretaker")
    assert quests.journal_progress(state) is None


def test_journal_splits_active_and_completed() -> None:
    engine = make_engine()
    state = fresh_state(engine)
    state = with_quest(engine, state, "heal_the_grove", "grove_healed", status="completed")
    state = with_quest(engine, state, "echoes_at_the_lake", "listen_at_lake")

    journal = engine.quest_service.journal(state)

    assert [view.quest_id for view in journal.active] == ["echoes_at_the_lake"]
    assert journal.active[0].summary == "Go to the Lake and listen closely."
    assert [view.quest_id for view in journal.completed] == ["heal_the_grove"]
    assert journal.ingredient_progress is None
