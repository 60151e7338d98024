"""Tests for save/load."""

import json

import pytest

from astra.engine.game_state import ActiveSpellEffect, DynamicEvent, GameState
from astra.engine.save import (
    delete_save,
    dict_to_state,
    export_analytics,
    load_game,
    save_game,
    state_to_dict,
)


def test_round_trip(tmp_path):
    path = tmp_path / "save.json"
    state = GameState(stardust=1234.5, antimatter=150, prestiges=2, mana=42)
    state.spells = ["wizards-might", "temporal-haste"]
    state.upgrade("nebula-net").level = 4
    gen = state.generator("comet-catcher")
    gen.count = 3
    gen.charge_timer = 2.5
    state.completed_research = ["basic-optics"]
    state.active_spell_effects = [ActiveSpellEffect("wizards-might", 12.5)]
    state.milestones["stardust-1k"] = True
    state.settings.theme = "wizarding"
    state.log_event("PRESTIGE", {"antimatterGain": 150}, now=10.0)

    assert save_game(state, path, now=5000.0)
    loaded = load_game(path)

    assert loaded.stardust == 1234.5
    assert loaded.antimatter == 150
    assert loaded.prestiges == 2
    assert loaded.mana == 42
    assert loaded.upgrade("nebula-net").level == 4
    assert loaded.generator("comet-catcher").count == 3
    assert loaded.generator("comet-catcher").charge_timer == 2.5
    assert loaded.completed_research == ["basic-optics"]
    assert loaded.active_spell_effects == [ActiveSpellEffect("wizards-might", 12.5)]
    assert loaded.milestones == {"stardust-1k": True}
    assert loaded.settings.theme == "wizarding"
    assert loaded.analytics[0].payload == {"antimatterGain": 150}
    assert loaded.last_save_timestamp == 5000.0


def test_session_local_fields_not_saved():
    state = GameState(click_combo=40, last_click_time=99.0)
    state.dynamic_event = DynamicEvent(id=1, created_at=0, x=1, y=1, vx=0, vy=0)
    state.click_timestamps.append(99.0)
    data = state_to_dict(state)

    for key in ("dynamic_event", "click_timestamps", "click_combo", "history", "stats_history"):
        assert key not in data

    loaded = dict_to_state(data)
    assert loaded.dynamic_event is None
    assert loaded.click_combo == 0
    assert len(loaded.click_timestamps) == 0


def test_missing_file_returns_none(tmp_path):
    assert load_game(tmp_path / "nope.json") is None


def test_corrupt_file_returns_none(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("{not json")
    assert load_game(path) is None


def test_non_object_returns_none(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("[1, 2, 3]")
    assert load_game(path) is None


def test_missing_fields_take_defaults():
    state = dict_to_state({"stardust": 50})
    assert state.stardust == 50
    assert state.max_mana == 100
    assert len(state.upgrades) == 3
    assert len(state.generators) == 8
    assert state.settings.language == "en"


def test_empty_lists_fall_back_to_templates():
    state = dict_to_state({"upgrades": [], "generators": []})
    assert [u.id for u in state.upgrades] == ["star-gatherer", "nebula-net", "gravity-gloves"]
    assert state.generator("asteroid-miner").count == 0


def test_bad_values_are_sanitised():
    state = dict_to_state({
        "stardust": -5,
        "antimatter": "lots",
        "mana": 500,
        "generators": [{"id": "asteroid-miner", "count": 2, "charge_timer": 99}],
        "completed_research": ["basic-optics", "basic-optics", "ghost"],
    })
    assert state.stardust == 0
    assert state.antimatter == 0
    assert state.mana == state.max_mana
    assert state.generator("asteroid-miner").charge_timer == 3
    assert state.completed_research == ["basic-optics"]


def test_completed_challenge_cannot_load_as_active():
    state = dict_to_state({
        "active_challenge": "trial-of-silence",
        "completed_challenges": ["trial-of-silence"],
    })
    assert state.active_challenge is None


def test_spells_granted_for_prestiged_saves():
    state = dict_to_state({"prestiges": 1, "spells": []})
    assert state.spells == ["wizards-might", "temporal-haste"]


def test_delete_save(tmp_path):
    path = tmp_path / "save.json"
    save_game(GameState(), path, now=1.0)
    assert path.exists()
    delete_save(path)
    assert not path.exists()
    delete_save(path)   # already gone


def test_export_analytics():
    state = GameState()
    state.log_event("CAST_SPELL", {"spellId": "wizards-might"}, now=12.0)
    exported = json.loads(export_analytics(state))
    assert exported == [
        {"timestamp": 12.0, "eventType": "CAST_SPELL", "payload": {"spellId": "wizards-might"}}
    ]


def test_saved_file_is_json(tmp_path):
    path = tmp_path / "nested" / "save.json"
    save_game(GameState(stardust=3), path, now=1.0)
    data = json.loads(path.read_text())
    assert data["stardust"] == pytest.approx(3)


@pytest.mark.parametrize("payload", [
    {"active_challenge": ["trial-of-silence"]},
    {"active_challenge": {"a": 1}},
    {"completed_research": [["basic-optics"]]},
    {"completed_challenges": [{"id": "trial-of-silence"}]},
    {"spells": [["wizards-might"]]},
    {"upgrades": [{"id": ["star-gatherer"], "level": 3}]},
    {"generators": [{"id": {"x": 1}, "count": 3}]},
    {"active_spell_effects": 5},
    {"active_spell_effects": [{"spell_id": ["wizards-might"], "remaining_s": 5}]},
    {"analytics": 7},
    {"completed_research": "basic-optics"},
])
def test_wrongly_typed_fields_take_defaults(payload):
    state = dict_to_state(payload)
    assert state.active_challenge is None
    assert state.completed_research == []
    assert state.completed_challenges == []
    assert state.active_spell_effects == []
    assert state.analytics == []
    assert state.upgrade("star-gatherer").level == 0
    assert state.generator("asteroid-miner").count == 0


def test_wrongly_typed_save_file_loads(tmp_path):
    path = tmp_path / "save.json"
    path.write_text(json.dumps({
        "stardust": 12,
        "active_challenge": {"a": 1},
        "analytics": 7,
        "upgrades": [{"id": ["star-gatherer"]}, {"id": "nebula-net", "level": 2}],
    }))
    state = load_game(path)
    assert state.stardust == 12
    assert state.active_challenge is None
    assert state.upgrade("nebula-net").level == 2
