"""Save/load — persists the game to disk between sessions.

Loading merges whatever was saved over fresh defaults, so fields added in
later versions start at their defaults.  Session-local fields (the dynamic
event, click window, combo, chart history) are never written.
"""

from __future__ import annotations

import json
import logging
import math
import time
from pathlib import Path
from typing import Any, Optional

from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.engine.game_state import (
    ActiveSpellEffect,
    AnalyticsEvent,
    GameState,
    Settings,
    fresh_generators,
    fresh_upgrades,
    new_game_state,
)
from astra.engine.spells import grant_spells

logger = logging.getLogger(__name__)

SAVE_DIR = Path.home() / ".astra"
SAVE_FILE = SAVE_DIR / "save.json"


# ── Serialisation helpers ────────────────────────────────────────


def state_to_dict(state: GameState) -> dict:
    s = state
    return {
        "stardust": s.stardust,
        "nebula_gas": s.nebula_gas,
        "antimatter": s.antimatter,
        "research_points": s.research_points,
        "singularity_essence": s.singularity_essence,
        "total_stardust_ever": s.total_stardust_ever,
        "prestiges": s.prestiges,
        "ascensions": s.ascensions,
        "mana": s.mana,
        "max_mana": s.max_mana,
        "upgrades": [{"id": u.id, "level": u.level} for u in s.upgrades],
        "generators": [
            {"id": g.id, "count": g.count, "charge_timer": g.charge_timer}
            for g in s.generators
        ],
        "spells": list(s.spells),
        "active_spell_effects": [
            {"spell_id": e.spell_id, "remaining_s": e.remaining_s}
            for e in s.active_spell_effects
        ],
        "milestones": dict(s.milestones),
        "completed_research": list(s.completed_research),
        "purchased_ascension_upgrades": list(s.purchased_ascension_upgrades),
        "active_challenge": s.active_challenge,
        "completed_challenges": list(s.completed_challenges),
        "analytics": [
            {"timestamp": e.timestamp, "event_type": e.event_type, "payload": e.payload}
            for e in s.analytics
        ],
        "settings": {
            "compact_mode": s.settings.compact_mode,
            "language": s.settings.language,
            "theme": s.settings.theme,
            "auto_collector_active": s.settings.auto_collector_active,
        },
        "last_save_timestamp": s.last_save_timestamp,
    }


def _number(d: dict, key: str, default: float) -> float:
    """A finite, non-negative float from ``d[key]``, or ``default``."""
    value = d.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return max(0.0, float(value))


def _list(d: dict, key: str) -> list:
    value = d.get(key)
    return value if isinstance(value, list) else []


def _id_list(d: dict, key: str, known: dict) -> list[str]:
    result: list[str] = []
    for item in _list(d, key):
        if isinstance(item, str) and item in known and item not in result:
            result.append(item)
    return result


def _load_upgrades(saved: Any, catalog: Catalog):
    upgrades = fresh_upgrades(catalog)
    if not isinstance(saved, list) or not saved:
        return upgrades
    levels = {
        e["id"]: e.get("level", 0)
        for e in saved
        if isinstance(e, dict) and isinstance(e.get("id"), str)
    }
    for upgrade in upgrades:
        upgrade.level = max(0, int(_number(levels, upgrade.id, 0)))
    return upgrades


def _load_generators(saved: Any, catalog: Catalog):
    generators = fresh_generators(catalog)
    if not isinstance(saved, list) or not saved:
        return generators
    by_id = {
        e["id"]: e for e in saved if isinstance(e, dict) and isinstance(e.get("id"), str)
    }
    for gen in generators:
        entry = by_id.get(gen.id)
        if entry is None:
            continue
        gen.count = int(_number(entry, "count", 0))
        gen.charge_timer = min(_number(entry, "charge_timer", 0.0), gen.base_charge_time)
    return generators


def dict_to_state(d: dict, catalog: Catalog = DEFAULT_CATALOG) -> GameState:
    defaults = new_game_state(catalog)

    settings_d = d.get("settings")
    if not isinstance(settings_d, dict):
        settings_d = {}
    settings = Settings(
        compact_mode=bool(settings_d.get("compact_mode", defaults.settings.compact_mode)),
        language=str(settings_d.get("language", defaults.settings.language)),
        theme=str(settings_d.get("theme", defaults.settings.theme)),
        auto_collector_active=bool(
            settings_d.get("auto_collector_active", defaults.settings.auto_collector_active)
        ),
    )

    effects = []
    for e in _list(d, "active_spell_effects"):
        if not isinstance(e, dict) or not isinstance(e.get("spell_id"), str):
            continue
        if e["spell_id"] in catalog.spells:
            remaining = _number(e, "remaining_s", 0.0)
            if remaining > 0:
                effects.append(ActiveSpellEffect(spell_id=e["spell_id"], remaining_s=remaining))

    analytics = [
        AnalyticsEvent(
            timestamp=_number(e, "timestamp", 0.0),
            event_type=str(e.get("event_type", "")),
            payload=e.get("payload") if isinstance(e.get("payload"), dict) else {},
        )
        for e in _list(d, "analytics")
        if isinstance(e, dict)
    ]

    milestones_d = d.get("milestones")
    milestones = (
        {k: bool(v) for k, v in milestones_d.items()} if isinstance(milestones_d, dict) else {}
    )

    completed_challenges = _id_list(d, "completed_challenges", catalog.challenges)
    active_challenge = d.get("active_challenge")
    if (not isinstance(active_challenge, str)
            or active_challenge not in catalog.challenges
            or active_challenge in completed_challenges):
        active_challenge = None

    state = GameState(
        stardust=_number(d, "stardust", defaults.stardust),
        nebula_gas=_number(d, "nebula_gas", defaults.nebula_gas),
        antimatter=_number(d, "antimatter", defaults.antimatter),
        research_points=_number(d, "research_points", defaults.research_points),
        singularity_essence=_number(d, "singularity_essence", defaults.singularity_essence),
        total_stardust_ever=_number(d, "total_stardust_ever", defaults.total_stardust_ever),
        prestiges=int(_number(d, "prestiges", defaults.prestiges)),
        ascensions=int(_number(d, "ascensions", defaults.ascensions)),
        max_mana=_number(d, "max_mana", defaults.max_mana),
        upgrades=_load_upgrades(d.get("upgrades"), catalog),
        generators=_load_generators(d.get("generators"), catalog),
        spells=_id_list(d, "spells", catalog.spells),
        active_spell_effects=effects,
        milestones=milestones,
        completed_research=_id_list(d, "completed_research", catalog.research),
        purchased_ascension_upgrades=_id_list(
            d, "purchased_ascension_upgrades", catalog.ascension_upgrades
        ),
        active_challenge=active_challenge,
        completed_challenges=completed_challenges,
        analytics=analytics,
        settings=settings,
        last_save_timestamp=_number(d, "last_save_timestamp", defaults.last_save_timestamp),
    )
    state.mana = min(_number(d, "mana", defaults.mana), state.max_mana)

    if state.prestiges > 0 and not state.spells:
        grant_spells(state, catalog)
    return state


# ── Public API ───────────────────────────────────────────────────


def save_game(state: GameState, path: Optional[Path] = None,
              now: Optional[float] = None) -> bool:
    """Persist the game, stamping the save time.  Returns False on I/O failure."""
    path = SAVE_FILE if path is None else path
    state.last_save_timestamp = time.time() if now is None else now
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(state_to_dict(state), indent=2))
    except OSError:
        logger.warning("could not write save to %s", path, exc_info=True)
        return False
    return True


def load_game(path: Optional[Path] = None,
              catalog: Catalog = DEFAULT_CATALOG) -> Optional[GameState]:
    """Load a saved game.  Returns None if no usable save exists."""
    path = SAVE_FILE if path is None else path
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError):
        logger.warning("unreadable save at %s, starting fresh", path)
        return None
    if not isinstance(data, dict):
        logger.warning("malformed save at %s, starting fresh", path)
        return None
    return dict_to_state(data, catalog)


def delete_save(path: Optional[Path] = None) -> None:
    path = SAVE_FILE if path is None else path
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.warning("could not delete save at %s", path)


def export_analytics(state: GameState) -> str:
    """Dump the full analytics log as one JSON document."""
    return json.dumps(
        [
            {"timestamp": e.timestamp, "eventType": e.event_type, "payload": e.payload}
            for e in state.analytics
        ],
        indent=2,
    )
