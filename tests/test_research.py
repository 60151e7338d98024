"""Tests for research purchases."""

import pytest

from astra.data.research import RESEARCH_TREE
from astra.engine.game_state import GameState
from astra.engine.research import can_research, dependencies_met, purchase_research


def test_purchase_root_research():
    state = GameState(research_points=150)
    assert purchase_research(state, "basic-optics", now=1.0)
    assert state.research_points == 50
    assert state.completed_research == ["basic-optics"]
    assert state.analytics[-1].event_type == "PURCHASE_RESEARCH"


def test_research_insufficient_points():
    state = GameState(research_points=99)
    assert not purchase_research(state, "basic-optics")
    assert state.completed_research == []


def test_research_bought_once():
    state = GameState(research_points=1000, completed_research=["basic-optics"])
    assert not purchase_research(state, "basic-optics")
    assert state.research_points == 1000


def test_research_needs_every_dependency():
    state = GameState(research_points=1e6, completed_research=["basic-optics", "advanced-lensing"])
    assert not can_research(state, "self-casting-charm")
    state.completed_research += ["improved-miners", "stellar-dynamics"]
    assert can_research(state, "self-casting-charm")


def test_unknown_research_rejected():
    assert not purchase_research(GameState(research_points=1e9), "alchemy")


@pytest.mark.parametrize("research_id", list(RESEARCH_TREE))
def test_dependencies_always_precede(research_id):
    """Buying everything in any order never completes a node before its prerequisites."""
    state = GameState(research_points=1e9)
    for _ in range(len(RESEARCH_TREE)):
        for rid in RESEARCH_TREE:
            purchase_research(state, rid)
    completed = state.completed_research
    assert research_id in completed
    for dep in RESEARCH_TREE[research_id].dependencies:
        assert completed.index(dep) < completed.index(research_id)


def test_dependencies_met():
    assert dependencies_met((), [])
    assert dependencies_met(("a",), ["a", "b"])
    assert not dependencies_met(("a", "c"), ["a", "b"])
