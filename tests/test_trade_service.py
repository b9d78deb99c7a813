from __future__ import annotations

from dataclasses import replace

from wilds.services.trade_service import limit_modifier
from tests.helpers.world import at, fresh_state, make_engine, with_items, with_regard


def test_limit_modifier_bands() -> None:
    assert limit_modifier(20) == 2
    assert limit_modifier(19) == 1
    assert limit_modifier(10) == 1
    assert limit_modifier(0) == 0
    assert limit_modifier(-4) == 0
    assert limit_modifier(-5) == -1
    assert limit_modifier(-15) == -2


def test_effective_limit_follows_regard() -> None:
    engine = make_engine()
    trades = engine.trade_service
    trade = trades.find("herbs_for_tonic")
    state = fresh_state(engine)

    assert trades.effective_limit(state, trade) == 3
    assert trades.effective_limit(with_regard(state, 12), trade) == 4
    assert trades.effective_limit(with_regard(state, -30), trade) == 1


def test_revered_regard_after_reward_raises_limit_by_two() -> None:
    engine = make_engine()
    trade = engine.trade_service.find("herbs_for_tonic")
    state = with_regard(fresh_state(engine), 30).with_reputation_delta(10)

    assert state.flags.forest_reputation == 40
    assert engine.trade_service.effective_limit(state, trade) == 5


def test_effective_limit_is_none_without_base_limit() -> None:
    engine = make_engine()
    trade = replace(engine.trade_service.find("ore_for_tonic"), base_limit=None)
    state = replace(fresh_state(engine), trade_usage={"ore_for_tonic": 99})

    assert engine.trade_service.effective_limit(state, trade) is None
    assert engine.trade_service.can_use(state, trade)


def test_apply_trade_moves_items_and_counts_use() -> None:
    engine = make_engine()
    trades = engine.trade_service
    trade = trades.find("herbs_for_tonic")
    state = with_items(fresh_state(engine), forest_herb=4)

    updated = trades.apply_trade(state, trade)

    assert updated.inventory == {"forest_herb": 1, "healing_tonic": 1}
    assert updated.trade_usage["herbs_for_tonic"] == 1
    assert state.inventory == {"forest_herb": 4}


def test_build_offers_reports_availability() -> None:
    engine = make_engine()
    state = at(with_items(fresh_state(engine), raw_ore=2), "trader_post")
    state = replace(state, trade_usage={"herbs_for_tonic": 3, "ore_for_tonic": 0})

    offers = {offer.trade_id: offer for offer in engine.trade_service.build_offers(state)}

    assert list(offers) == ["herbs_for_tonic", "ore_for_tonic"]
    assert not offers["herbs_for_tonic"].available
    assert not offers["herbs_for_tonic"].affordable
    assert offers["ore_for_tonic"].available
    assert offers["ore_for_tonic"].affordable
    assert offers["ore_for_tonic"].limit == 3


def test_unknown_trade_is_not_found() -> None:
    assert make_engine().trade_service.find("gold_for_glory") is None


def test_describe_costs_names_items() -> None:
    engine = make_engine()
    trade = engine.trade_service.find("ore_for_tonic")

    assert engine.trade_service.describe_costs(trade) == "2x Raw Ore"
