from __future__ import annotations

from wilds.services.progression import LEVEL_UP_TEXT
from tests.helpers.world import at, fresh_state, make_engine, with_items, with_quest, with_regard


def _talk(engine, state, npc_id):
    result = engine.actions.talk_to(state, npc_id)
    return result.state, [entry.text for entry in result.log_entries]


def test_caretaker_first_talk_starts_grove_quest() -> None:
    engine = make_engine()
    state = fresh_state(engine)

    state, texts = _talk(engine, state, "caretaker")

    grove = engine.quest_service.get(state, "heal_the_grove")
    assert len(texts) == 6
    assert texts[0] == "Caretaker: Welcome back, traveler. The Sanctum has been quiet."
    assert texts[-1] == "New quest: Heal the Grove."
    assert (grove.step, grove.status) == ("gather_ingredients", "active")
    assert state.flags.times_spoken("caretaker") == 1


def test_caretaker_reminds_while_grove_is_unsettled() -> None:
    engine = make_engine()
    state, _ = _talk(engine, fresh_state(engine), "caretaker")

    state, texts = _talk(engine, state, "caretaker")

    assert texts[0] == "Caretaker: You've sensed it too, haven't you? The grove is still unsettled."
    assert texts[1].startswith("Caretaker: Gather herbs from the Wilds")
    assert state.flags.times_spoken("caretaker") == 2

    ready = with_quest(engine, state, "heal_the_grove", "perform_ritual")
    _, ready_texts = _talk(engine, ready, "caretaker")
    assert ready_texts[1] == (
        "Caretaker: You have what the grove needs. Go to the Wilds and perform the ritual."
    )


def test_caretaker_completes_grove_after_ritual() -> None:
    engine = make_engine()
    state = with_quest(engine, fresh_state(engine), "heal_the_grove", "return_to_caretaker")
    state = with_quest(engine, state.with_flags(grove_healed=True), "echoes_at_the_lake", "listen_at_lake")

    state, texts = _talk(engine, state, "caretaker")

    grove = engine.quest_service.get(state, "heal_the_grove")
    assert (grove.step, grove.status) == ("grove_healed", "completed")
    assert "Quest completed: Heal the Grove." in texts
    assert texts[-1] == LEVEL_UP_TEXT
    assert state.player.level == 2

    _, later = _talk(engine, state, "caretaker")
    assert later == [
        "Caretaker: Welcome back, traveler. The Sanctum breathes easier now.",
        "Caretaker: The grove is calm again. Whatever you did, it mattered.",
        "Caretaker: Something at the Lake has been restless since. You might listen there.",
    ]


def test_hermit_greets_until_echoes_are_heard() -> None:
    engine = make_engine()
    state = at(fresh_state(engine), "hermit_hut")

    state, first = _talk(engine, state, "hermit")
    _, second = _talk(engine, state, "hermit")

    assert first[0] == "Hermit: What do you want?"
    assert len(first) == 3
    assert second == ["Hermit: You again. Say what you came to say."]


def test_hermit_turns_echoes_into_glow_quest() -> None:
    engine = make_engine()
    state = at(fresh_state(engine), "hermit_hut")
    state = with_quest(engine, state, "echoes_at_the_lake", "tell_the_hermit")

    state, texts = _talk(engine, state, "hermit")

    echoes = engine.quest_service.get(state, "echoes_at_the_lake")
    glow = engine.quest_service.get(state, "hermits_glow")
    assert (echoes.step, echoes.status) == ("echoes_understood", "completed")
    assert (glow.step, glow.status) == ("seek_the_glow", "active")
    assert texts[-1] == "New quest: Hermit's Glow."
    assert state.player.xp == 10

    _, follow_up = _talk(engine, state, "hermit")
    assert follow_up == ["Hermit: The path north is open to you now. Follow the light."]


def test_hermit_trades_tonic_for_spare_fragment() -> None:
    engine = make_engine()
    state = at(fresh_state(engine), "hermit_hut")
    state = with_quest(engine, state, "hermits_glow", "glow_communed", status="completed")
    state = with_items(state, luminous_fragment=1)

    state, texts = _talk(engine, state, "hermit")

    assert state.inventory == {"healing_tonic": 1}
    assert "Hermit: Light for light. Fair trade, out here." in texts
    assert texts[-1] == "You gain 5 XP."

    _, after = _talk(engine, state, "hermit")
    assert after == ["Hermit: The glow knows you now. So do I, I suppose."]


def test_ranger_adds_line_in_good_favour() -> None:
    engine = make_engine()
    state = at(fresh_state(engine), "trader_post")

    _, neutral = _talk(engine, state, "ranger_trader")
    _, favoured = _talk(engine, with_regard(state, 10), "ranger_trader")

    assert len(neutral) == 3
    assert favoured[-1] == "Ranger: The forest speaks well of you. I've set a little extra aside."


def test_talk_refuses_absent_or_unknown_npc() -> None:
    engine = make_engine()
    state = fresh_state(engine)

    away = engine.actions.talk_to(state, "hermit")
    unknown = engine.actions.talk_to(state, "dragon")

    assert away.state is state
    assert away.texts == ["You look around Sanctum, but Hermit is not here."]
    assert unknown.texts == ["There is no one like that here."]


def test_npcs_at_location() -> None:
    engine = make_engine()

    assert [npc.id for npc in engine.dialogue_service.npcs_at("sanctum")] == ["caretaker"]
    assert engine.dialogue_service.npcs_at("lake") == []
