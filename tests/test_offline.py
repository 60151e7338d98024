"""Tests for offline progress."""

import pytest

from astra.engine.game_state import GameState
from astra.engine.offline import claim_offline_gains, compute_offline_gains
from astra.engine.rates import research_rate


def _miners(count, saved_at=1000.0):
    state = GameState(last_save_timestamp=saved_at)
    state.generator("asteroid-miner").count = count
    return state


def test_four_hours_away():
    state = _miners(2)
    gains = compute_offline_gains(state, now=1000.0 + 4 * 3600)

    assert gains.stardust == pytest.approx(48_000)
    assert gains.nebula_gas == 0
    assert gains.time_away_s == 14_400
    assert gains.research_points == pytest.approx(research_rate(10 / 3) * 14_400)
    # Staged only
    assert state.stardust == 0


def test_short_gap_yields_nothing():
    state = _miners(2)
    assert compute_offline_gains(state, now=1059.0) is None


def test_never_saved_yields_nothing():
    state = _miners(2, saved_at=0.0)
    assert compute_offline_gains(state, now=1e9) is None


def test_gap_is_capped_at_eight_hours():
    state = _miners(1)
    gains = compute_offline_gains(state, now=1000.0 + 20 * 3600)
    assert gains.time_away_s == 20 * 3600
    assert gains.capped_s == 8 * 3600
    assert gains.stardust == pytest.approx(9600 * 5)


def test_partial_charge_counts_toward_cycles():
    state = _miners(1)
    state.generator("asteroid-miner").charge_timer = 2.0
    gains = compute_offline_gains(state, now=1061.0)
    # (2 + 61) / 3 = 21 whole cycles
    assert gains.stardust == pytest.approx(21 * 5)


def test_gas_generators_accrue_gas():
    state = GameState(last_save_timestamp=1000.0)
    state.generator("gas-harvester").count = 1
    gains = compute_offline_gains(state, now=1000.0 + 150)
    assert gains.nebula_gas == pytest.approx(50)
    assert gains.stardust == 0


def test_claim_credits_and_advances_timers():
    state = _miners(2)
    state.generator("asteroid-miner").charge_timer = 1.0
    gains = compute_offline_gains(state, now=1000.0 + 3600 + 0.5)

    claim_offline_gains(state, gains, now=4600.5)

    assert state.stardust == pytest.approx(gains.stardust)
    assert state.total_stardust_ever == pytest.approx(gains.stardust)
    assert state.research_points == pytest.approx(gains.research_points)
    assert state.generator("asteroid-miner").charge_timer == pytest.approx(1.5)
    assert state.generator("comet-catcher").charge_timer == 0
    assert state.analytics[-1].event_type == "OFFLINE_GAINS_CLAIMED"


def test_offline_research_matches_the_live_rate():
    """Boosted production and the ascension research multiplier both count."""
    state = _miners(3)
    state.antimatter = 50                                   # ×2 production
    state.purchased_ascension_upgrades = ["cosmic-start", "scholarly-mind"]   # ×1.2 research
    gains = compute_offline_gains(state, now=1000.0 + 100)
    assert gains.research_points == pytest.approx(research_rate(10.0, 1.2) * 100)
