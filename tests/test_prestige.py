"""Tests for Prestige, Ascension, the ascension tree and challenges."""

import pytest

from astra.engine.game_state import ActiveSpellEffect, GameState
from astra.engine.prestige import (
    activate_challenge,
    can_ascend,
    can_prestige,
    compute_antimatter_gain,
    compute_essence_gain,
    perform_ascension,
    perform_prestige,
    purchase_ascension_upgrade,
)


# ── Prestige ─────────────────────────────────────────────────────


def test_cannot_prestige_below_requirement():
    state = GameState(total_stardust_ever=9.9e14)
    assert not can_prestige(state)
    assert perform_prestige(state) == 0
    assert state.prestiges == 0


def test_antimatter_gain_at_requirement():
    """Exactly 1e15 lifetime stardust yields 150 antimatter."""
    state = GameState(total_stardust_ever=1e15)
    assert compute_antimatter_gain(state) == 150


def test_antimatter_gain_scales_with_sqrt():
    state = GameState(total_stardust_ever=4e15)
    assert compute_antimatter_gain(state) == 300


def test_antimatter_gain_multipliers():
    state = GameState(
        total_stardust_ever=1e15,
        completed_challenges=["trial-of-scarcity"],
        purchased_ascension_upgrades=["cosmic-start", "alchemical-purity"],
    )
    # floor(150 × 1.05 × 1.1) = floor(173.25)
    assert compute_antimatter_gain(state) == 173


def test_prestige_scenario():
    state = GameState(stardust=5e14, nebula_gas=300, research_points=80,
                      total_stardust_ever=1e15, mana=0)
    state.upgrade("star-gatherer").level = 12
    state.generator("asteroid-miner").count = 7
    state.completed_research = ["basic-optics"]
    state.milestones["stardust-1k"] = True

    gain = perform_prestige(state, now=500.0)

    assert gain == 150
    assert state.antimatter == 150
    assert state.prestiges == 1
    assert state.stardust == 0
    assert state.nebula_gas == 0
    assert state.research_points == 0
    assert state.total_stardust_ever == 0
    assert state.upgrade("star-gatherer").level == 0
    assert state.generator("asteroid-miner").count == 0
    assert state.spells == ["wizards-might", "temporal-haste"]
    # Research and milestones survive a prestige
    assert state.completed_research == ["basic-optics"]
    assert state.milestones["stardust-1k"]
    assert state.analytics[-1].event_type == "PRESTIGE"


def test_prestige_clears_running_spells():
    state = GameState(total_stardust_ever=1e15, prestiges=1, mana=60)
    state.active_spell_effects = [ActiveSpellEffect("wizards-might", 12)]
    perform_prestige(state)
    assert state.active_spell_effects == []
    assert state.mana == 0


def test_antimatter_accumulates():
    state = GameState(antimatter=100, total_stardust_ever=1e15)
    perform_prestige(state)
    assert state.antimatter == 250


# ── Ascension ────────────────────────────────────────────────────


def test_cannot_ascend_below_requirement():
    state = GameState(antimatter=999_999)
    assert not can_ascend(state)
    assert perform_ascension(state) == 0
    assert state.antimatter == 999_999


def test_essence_gain():
    assert compute_essence_gain(GameState(antimatter=1e6)) == 31
    assert compute_essence_gain(GameState(antimatter=4e6)) == 63


def test_ascension_full_reset():
    state = GameState(antimatter=1e6, prestiges=4, mana=70, stardust=1e9)
    state.spells = ["wizards-might", "temporal-haste"]
    state.completed_research = ["basic-optics", "improved-miners"]
    state.generator("comet-catcher").count = 3

    gain = perform_ascension(state, now=9.0)

    assert gain == 31
    assert state.singularity_essence == 31
    assert state.ascensions == 1
    assert state.antimatter == 0
    assert state.prestiges == 0
    assert state.mana == 0
    assert state.stardust == 0
    assert state.spells == []
    assert state.completed_research == []
    assert state.generator("comet-catcher").count == 0
    assert state.analytics[-1].event_type == "ASCEND"


def test_ascension_completes_active_challenge():
    state = GameState(antimatter=1e6, active_challenge="trial-of-silence")
    perform_ascension(state)
    assert state.active_challenge is None
    assert state.completed_challenges == ["trial-of-silence"]


def test_ascension_keeps_tree_and_applies_starting_stardust():
    state = GameState(antimatter=1e6, purchased_ascension_upgrades=["cosmic-start"])
    perform_ascension(state)
    assert state.purchased_ascension_upgrades == ["cosmic-start"]
    assert state.stardust == 100


# ── Ascension tree ───────────────────────────────────────────────


def test_ascension_upgrade_purchase():
    state = GameState(singularity_essence=3)
    assert purchase_ascension_upgrade(state, "cosmic-start")
    assert state.singularity_essence == 2
    assert state.purchased_ascension_upgrades == ["cosmic-start"]


def test_ascension_upgrade_needs_dependencies():
    state = GameState(singularity_essence=100)
    assert not purchase_ascension_upgrade(state, "alchemical-purity")
    assert not purchase_ascension_upgrade(state, "critical-thought")
    assert state.singularity_essence == 100


def test_ascension_upgrade_bought_once():
    state = GameState(singularity_essence=100, purchased_ascension_upgrades=["cosmic-start"])
    assert not purchase_ascension_upgrade(state, "cosmic-start")
    assert state.singularity_essence == 100


def test_ascension_upgrade_insufficient_essence():
    state = GameState(singularity_essence=1, purchased_ascension_upgrades=["cosmic-start"])
    assert not purchase_ascension_upgrade(state, "scholarly-mind")


def test_ascension_upgrade_unknown():
    state = GameState(singularity_essence=100)
    assert not purchase_ascension_upgrade(state, "no-such-node")


# ── Challenges ───────────────────────────────────────────────────


def test_activate_and_clear_challenge():
    state = GameState()
    assert activate_challenge(state, "trial-of-scarcity")
    assert state.active_challenge == "trial-of-scarcity"
    assert activate_challenge(state, "trial-of-silence")
    assert state.active_challenge == "trial-of-silence"
    assert activate_challenge(state, None)
    assert state.active_challenge is None


def test_completed_challenge_cannot_be_reactivated():
    state = GameState(completed_challenges=["trial-of-silence"])
    assert not activate_challenge(state, "trial-of-silence")
    assert state.active_challenge is None


def test_unknown_challenge_rejected():
    state = GameState()
    assert not activate_challenge(state, "trial-of-nothing")


@pytest.mark.parametrize("challenge_id", ["trial-of-silence", "trial-of-scarcity"])
def test_challenge_never_both_active_and_completed(challenge_id):
    state = GameState(antimatter=1e6)
    activate_challenge(state, challenge_id)
    perform_ascension(state)
    activate_challenge(state, challenge_id)
    assert state.active_challenge not in state.completed_challenges


@pytest.mark.parametrize("challenge_id", [["trial-of-silence"], {"a": 1}, 7])
def test_malformed_challenge_id_rejected(challenge_id):
    state = GameState(active_challenge="trial-of-scarcity")
    assert not activate_challenge(state, challenge_id)
    assert state.active_challenge == "trial-of-scarcity"
    assert state.analytics == []
