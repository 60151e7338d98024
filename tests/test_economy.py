"""Tests for the economy engine."""

from unittest.mock import patch

import pytest

from astra.data.balance import BALANCE
from astra.data.upgrades import Currency
from astra.engine.economy import (
    ItemKind,
    apply_credit,
    click_star,
    collect_artifact,
    dynamic_event_click,
    format_number,
    get_generator_cost,
    get_upgrade_cost,
    item_cost,
    purchase,
)
from astra.engine.game_state import DynamicEvent, GameState


def test_format_number_small():
    assert format_number(0) == "0"
    assert format_number(5) == "5"
    assert format_number(99.5) == "99.5"


def test_format_number_thousands():
    result = format_number(1500)
    assert "K" in result
    assert "1.5" in result


def test_format_number_quadrillions():
    assert format_number(1e15).endswith("Qa")


# ── Pricing ──────────────────────────────────────────────────────


def test_first_purchase_costs_base():
    state = GameState()
    assert get_upgrade_cost(state, "star-gatherer") == 10


def test_cost_follows_growth_curve():
    state = GameState()
    upgrade = state.upgrade("nebula-net")
    upgrade.level = 7
    assert get_upgrade_cost(state, "nebula-net") == pytest.approx(100 * 1.2 ** 7)


def test_purchase_scenario_from_fresh_state():
    """10 stardust buys the first Star Gatherer; the next one costs 11.5."""
    state = GameState()
    state.stardust = 10

    assert purchase(state, "star-gatherer", ItemKind.UPGRADE)

    assert state.stardust == 0
    assert state.upgrade("star-gatherer").level == 1
    assert get_upgrade_cost(state, "star-gatherer") == pytest.approx(11.5)


def test_purchase_debits_exact_cost_and_adds_one():
    state = GameState()
    gen = state.generator("asteroid-miner")
    gen.count = 4
    cost = get_generator_cost(state, "asteroid-miner")
    state.stardust = 1000.0

    assert purchase(state, "asteroid-miner", ItemKind.GENERATOR)

    assert cost == pytest.approx(25 * 1.1 ** 4)
    assert state.stardust == pytest.approx(1000.0 - cost)
    assert gen.count == 5


def test_purchase_insufficient_funds():
    state = GameState()
    state.stardust = 9.99
    assert not purchase(state, "star-gatherer", ItemKind.UPGRADE)
    assert state.stardust == 9.99
    assert state.upgrade("star-gatherer").level == 0


def test_purchase_unknown_item_is_rejected():
    state = GameState()
    state.stardust = 1e9
    assert not purchase(state, "warp-drive", ItemKind.UPGRADE)
    assert not purchase(state, "star-gatherer", ItemKind.GENERATOR)
    assert state.stardust == 1e9


def test_purchase_in_nebula_gas():
    state = GameState()
    state.stardust = 1e9
    state.nebula_gas = 4999
    assert not purchase(state, "nebula-refinery", ItemKind.GENERATOR)
    state.nebula_gas = 5000
    assert purchase(state, "nebula-refinery", ItemKind.GENERATOR)
    assert state.nebula_gas == 0
    assert state.stardust == 1e9


def test_purchase_is_logged():
    state = GameState()
    state.stardust = 10
    purchase(state, "star-gatherer", ItemKind.UPGRADE, now=42.0)
    event = state.analytics[-1]
    assert event.event_type == "PURCHASE_UPGRADE"
    assert event.payload == {"itemId": "star-gatherer", "cost": 10, "count": 1}
    assert event.timestamp == 42.0


def test_challenge_cost_growth_applies_to_generators_only():
    from astra.data.catalog import Catalog
    from astra.data.challenges import Challenge, Handicap, HandicapKind
    from astra.data.ascension_upgrades import AscensionEffect, AscensionEffectKind

    catalog = Catalog(challenges={
        "trial-of-inflation": Challenge(
            id="trial-of-inflation",
            name="Trial of Inflation",
            description="",
            handicap=Handicap(HandicapKind.COST_GROWTH_INCREASE, 0.5),
            reward=AscensionEffect(AscensionEffectKind.FLAT_SPS_BOOST, 1),
        ),
    })
    state = GameState(active_challenge="trial-of-inflation")
    state.generator("asteroid-miner").count = 2
    state.upgrade("star-gatherer").level = 2

    assert get_generator_cost(state, "asteroid-miner", catalog=catalog) == pytest.approx(
        25 * (1.1 * 1.5) ** 2
    )
    assert get_upgrade_cost(state, "star-gatherer") == pytest.approx(10 * 1.15 ** 2)


def test_item_cost_zero_owned_is_base():
    assert item_cost(25, 1.1, 0, 3.0) == 25


# ── Collecting ───────────────────────────────────────────────────


def test_collect_requires_full_charge():
    state = GameState()
    gen = state.generator("asteroid-miner")
    gen.count = 1
    gen.charge_timer = 2.9

    assert collect_artifact(state, "asteroid-miner", now=0.0) is None
    assert gen.charge_timer == 2.9
    assert state.stardust == 0
    assert state.total_stardust_ever == 0


def test_collect_requires_ownership():
    state = GameState()
    gen = state.generator("asteroid-miner")
    gen.charge_timer = gen.base_charge_time
    assert collect_artifact(state, "asteroid-miner", now=0.0) is None
    assert collect_artifact(state, "no-such-thing", now=0.0) is None


def test_collect_defers_credit():
    state = GameState()
    gen = state.generator("asteroid-miner")
    gen.count = 1
    gen.charge_timer = 3.0

    credit = collect_artifact(state, "asteroid-miner", now=10.0)

    assert credit is not None
    assert gen.charge_timer == 0
    assert state.stardust == 0   # not yet
    assert credit.amount == 5
    assert credit.currency == Currency.STARDUST
    assert credit.due_at == 10.0 + BALANCE.timing.collect_credit_delay_s

    apply_credit(state, credit)
    assert state.stardust == 5
    assert state.total_stardust_ever == 5


def test_collect_payout_uses_prestige_multiplier():
    state = GameState(antimatter=50)   # ×2
    gen = state.generator("gas-harvester")
    gen.count = 3
    gen.charge_timer = gen.base_charge_time

    credit = collect_artifact(state, "gas-harvester", now=0.0)

    assert credit.amount == pytest.approx(5 * 3 * 2)
    apply_credit(state, credit)
    assert state.nebula_gas == pytest.approx(30)
    assert state.total_stardust_ever == 0


# ── Clicking ─────────────────────────────────────────────────────


def test_click_earns_base_power():
    state = GameState()
    with patch("astra.engine.economy.random") as mock_rng:
        mock_rng.random.return_value = 0.99
        earned = click_star(state, now=100.0)
    assert earned == 1
    assert state.stardust == 1
    assert state.total_stardust_ever == 1
    assert state.click_combo == 1
    assert list(state.click_timestamps) == [100.0]


def test_click_combo_builds_and_boosts():
    state = GameState()
    with patch("astra.engine.economy.random") as mock_rng:
        mock_rng.random.return_value = 0.99
        click_star(state, now=100.0)
        second = click_star(state, now=100.5)
    assert state.click_combo == 2
    assert second == pytest.approx(1.01)


def test_click_combo_restarts_after_timeout():
    state = GameState()
    with patch("astra.engine.economy.random") as mock_rng:
        mock_rng.random.return_value = 0.99
        click_star(state, now=100.0)
        click_star(state, now=100.5)
        click_star(state, now=102.0)
    assert state.click_combo == 1


def test_click_combo_is_capped():
    state = GameState()
    state.click_combo = BALANCE.click.combo_max_count
    state.last_click_time = 99.9
    with patch("astra.engine.economy.random") as mock_rng:
        mock_rng.random.return_value = 0.99
        click_star(state, now=100.0)
    assert state.click_combo == BALANCE.click.combo_max_count


def test_critical_click():
    state = GameState()
    with patch("astra.engine.economy.random") as mock_rng:
        mock_rng.random.return_value = 0.0
        earned = click_star(state, now=100.0)
    assert earned == BALANCE.click.critical_multiplier


def test_click_prunes_stale_timestamps():
    state = GameState()
    state.click_timestamps.extend([10.0, 50.0, 95.0])
    with patch("astra.engine.economy.random") as mock_rng:
        mock_rng.random.return_value = 0.99
        click_star(state, now=100.0)
    assert list(state.click_timestamps) == [50.0, 95.0, 100.0]


def test_dynamic_event_click_pays_a_minute_of_production():
    state = GameState()
    state.generator("asteroid-miner").count = 3   # 5 stardust/sec
    state.dynamic_event = DynamicEvent(id=1, created_at=0.0, x=50, y=50, vx=0, vy=0)

    reward = dynamic_event_click(state, now=1.0)

    assert reward == pytest.approx(300)
    assert state.stardust == pytest.approx(300)
    assert state.dynamic_event is None
    assert state.analytics[-1].event_type == "DYNAMIC_EVENT_CLICKED"


def test_dynamic_event_click_without_event():
    state = GameState()
    assert dynamic_event_click(state) == 0
    assert state.analytics == []


def test_purchase_without_a_price_is_rejected():
    state = GameState()
    state.stardust = 1e9
    with patch("astra.engine.economy.get_cost", return_value=None):
        assert not purchase(state, "star-gatherer", ItemKind.UPGRADE)
    assert state.stardust == 1e9
    assert state.upgrade("star-gatherer").level == 0
    assert state.analytics == []
