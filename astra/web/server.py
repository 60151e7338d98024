"""Astra web server — Flask JSON API for the browser client.

Run with:  python -m astra.web
"""

from __future__ import annotations

import math
import time
from pathlib import Path
from typing import Optional

from flask import Flask, Response, jsonify, request

from astra.data.balance import BALANCE
from astra.engine.economy import ItemKind, format_number, get_generator_cost, get_upgrade_cost
from astra.engine.prestige import (
    can_ascend,
    can_prestige,
    compute_antimatter_gain,
    compute_essence_gain,
)
from astra.engine.research import can_research, dependencies_met
from astra.engine.session import GameSession

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------

app = Flask(__name__)

# ---------------------------------------------------------------------------
# In-memory game session (single-player)
# ---------------------------------------------------------------------------

_session: GameSession | None = None
_save_path: Optional[Path] = None
_last_autosave: float = 0.0

_AUTO_SAVE_INTERVAL = 30.0


def configure(save_path: Optional[Path] = None, session: Optional[GameSession] = None) -> None:
    """Point the server at a save file, or hand it a ready session."""
    global _session, _save_path, _last_autosave
    _save_path = save_path
    _session = session
    _last_autosave = time.time()


def _ensure_game() -> GameSession:
    """Load the game if not yet started, then catch it up to now."""
    global _session, _last_autosave
    if _session is None:
        _session = GameSession.load(_save_path)
        _last_autosave = time.time()
    _session.advance()

    now = time.time()
    if now - _last_autosave >= _AUTO_SAVE_INTERVAL:
        _session.save(now)
        _last_autosave = now
    return _session


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _state_json(session: GameSession) -> dict:
    """Build the JSON blob sent to the frontend."""
    s = session.state
    catalog = session.catalog
    bonuses = session.bonuses()
    rates = session.derived(now=time.time())

    upgrades = []
    for u in s.upgrades:
        cost = get_upgrade_cost(s, u.id) or 0.0
        upgrades.append({
            "id": u.id,
            "name": u.definition.name,
            "description": u.definition.description,
            "level": u.level,
            "power": u.power,
            "currency": u.currency.value,
            "cost": format_number(cost),
            "cost_raw": cost,
            "can_afford": s.balance(u.currency) >= cost,
        })

    generators = []
    for g in s.generators:
        cost = get_generator_cost(s, g.id, bonuses, catalog) or 0.0
        generators.append({
            "id": g.id,
            "name": g.definition.name,
            "description": g.definition.description,
            "count": g.count,
            "produces": g.produces.value,
            "base_payout": g.base_payout,
            "charge_timer": g.charge_timer,
            "base_charge_time": g.base_charge_time,
            "charged": g.count > 0 and g.is_charged,
            "currency": g.currency.value,
            "cost": format_number(cost),
            "cost_raw": cost,
            "can_afford": s.balance(g.currency) >= cost,
        })

    research = [
        {
            "id": r.id,
            "name": r.name,
            "description": r.description,
            "cost": r.cost,
            "dependencies": list(r.dependencies),
            "completed": r.id in s.completed_research,
            "available": can_research(s, r.id, catalog),
        }
        for r in catalog.research.values()
    ]

    ascension_tree = [
        {
            "id": a.id,
            "name": a.name,
            "description": a.description,
            "cost": a.cost,
            "dependencies": list(a.dependencies),
            "position": {"x": a.position[0], "y": a.position[1]},
            "purchased": a.id in s.purchased_ascension_upgrades,
            "unlockable": dependencies_met(a.dependencies, s.purchased_ascension_upgrades),
        }
        for a in catalog.ascension_upgrades.values()
    ]

    challenges = [
        {
            "id": c.id,
            "name": c.name,
            "description": c.description,
            "active": s.active_challenge == c.id,
            "completed": c.id in s.completed_challenges,
        }
        for c in catalog.challenges.values()
    ]

    spells = [
        {
            "id": sp.id,
            "name": sp.name,
            "description": sp.description,
            "mana_cost": sp.mana_cost,
            "granted": sp.id in s.spells,
        }
        for sp in catalog.spells.values()
    ]

    event = None
    if s.dynamic_event is not None:
        e = s.dynamic_event
        event = {"id": e.id, "created_at": e.created_at, "x": e.x, "y": e.y, "vx": e.vx, "vy": e.vy}

    gains = session.offline_gains
    offline = None
    if gains is not None:
        offline = {
            "stardust": gains.stardust,
            "nebula_gas": gains.nebula_gas,
            "research_points": gains.research_points,
            "time_away_s": gains.time_away_s,
        }

    return {
        "stardust": format_number(s.stardust),
        "stardust_raw": s.stardust,
        "nebula_gas": format_number(s.nebula_gas),
        "nebula_gas_raw": s.nebula_gas,
        "antimatter": s.antimatter,
        "research_points": s.research_points,
        "singularity_essence": s.singularity_essence,
        "total_stardust_ever": s.total_stardust_ever,
        "prestiges": s.prestiges,
        "ascensions": s.ascensions,
        "mana": s.mana,
        "max_mana": s.max_mana,
        "click_power": rates.click_power,
        "critical_chance": rates.critical_chance,
        "combo": s.click_combo,
        "combo_multiplier": rates.combo_multiplier,
        "cpm_multiplier": rates.cpm_multiplier,
        "prestige_multiplier": rates.prestige_multiplier,
        "stardust_per_second": rates.stardust_per_second,
        "nebula_gas_per_second": rates.nebula_gas_per_second,
        "research_per_second": rates.research_per_second,
        "click_power_cap": _finite(bonuses.challenge.click_power_cap),
        "auto_collector_unlocked": bonuses.research.auto_collector_unlocked,
        "upgrades": upgrades,
        "generators": generators,
        "research": research,
        "ascension_tree": ascension_tree,
        "challenges": challenges,
        "spells": spells,
        "active_spell_effects": [
            {"spell_id": e.spell_id, "remaining_s": e.remaining_s}
            for e in s.active_spell_effects
        ],
        "milestones": dict(s.milestones),
        "dynamic_event": event,
        "offline_gains": offline,
        "can_prestige": can_prestige(s, catalog),
        "antimatter_gain": compute_antimatter_gain(s, catalog),
        "prestige_requirement": BALANCE.prestige.prestige_requirement,
        "can_ascend": can_ascend(s),
        "essence_gain": compute_essence_gain(s),
        "ascension_requirement": BALANCE.prestige.ascension_requirement,
        "history": [
            {"time": h.time, "stardust": h.stardust, "nebula_gas": h.nebula_gas}
            for h in s.history
        ],
        "stats_history": [{"time": h.time, "sps": h.sps} for h in s.stats_history],
        "settings": {
            "compact_mode": s.settings.compact_mode,
            "language": s.settings.language,
            "theme": s.settings.theme,
            "auto_collector_active": s.settings.auto_collector_active,
        },
        "notifications": session.drain_notifications(),
        "server_time": time.time(),
    }


def _respond(session: GameSession, **extra) -> Response:
    data = _state_json(session)
    data.update(extra)
    return jsonify(data)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.route("/api/state")
def api_state():
    session = _ensure_game()
    return _respond(session)


@app.route("/api/action/click", methods=["POST"])
def action_click():
    session = _ensure_game()
    earned = session.click_star()
    return _respond(session, earned=earned)


@app.route("/api/action/event_click", methods=["POST"])
def action_event_click():
    session = _ensure_game()
    reward = session.click_dynamic_event()
    return _respond(session, reward=reward)


@app.route("/api/action/buy/<kind>/<item_id>", methods=["POST"])
def action_buy(kind: str, item_id: str):
    session = _ensure_game()
    try:
        item_kind = ItemKind(kind)
    except ValueError:
        return jsonify({"error": f"Unknown item kind {kind!r}"}), 400
    result = session.purchase(item_id, item_kind)
    return _respond(session, purchase_result=result)


@app.route("/api/action/collect/<generator_id>", methods=["POST"])
def action_collect(generator_id: str):
    session = _ensure_game()
    credit = session.collect(generator_id)
    return _respond(
        session,
        collect_result=credit is not None,
        payout=credit.amount if credit else 0.0,
        credit_delay_s=BALANCE.timing.collect_credit_delay_s,
    )


@app.route("/api/action/cast/<spell_id>", methods=["POST"])
def action_cast(spell_id: str):
    session = _ensure_game()
    result = session.cast_spell(spell_id)
    return _respond(session, cast_result=result)


@app.route("/api/action/prestige", methods=["POST"])
def action_prestige():
    session = _ensure_game()
    gain = session.prestige()
    if gain > 0:
        session.save()
    return _respond(session, prestige_result=gain > 0, antimatter_gained=gain)


@app.route("/api/action/ascend", methods=["POST"])
def action_ascend():
    session = _ensure_game()
    gain = session.ascend()
    if gain > 0:
        session.save()
    return _respond(session, ascension_result=gain > 0, essence_gained=gain)


@app.route("/api/action/research/<research_id>", methods=["POST"])
def action_research(research_id: str):
    session = _ensure_game()
    result = session.purchase_research(research_id)
    return _respond(session, research_result=result)


@app.route("/api/action/ascension_upgrade/<upgrade_id>", methods=["POST"])
def action_ascension_upgrade(upgrade_id: str):
    session = _ensure_game()
    result = session.purchase_ascension_upgrade(upgrade_id)
    return _respond(session, ascension_upgrade_result=result)


@app.route("/api/action/challenge", methods=["POST"])
def action_challenge():
    session = _ensure_game()
    body = request.get_json(silent=True) or {}
    result = session.activate_challenge(body.get("challenge_id"))
    return _respond(session, challenge_result=result)


@app.route("/api/action/claim_offline", methods=["POST"])
def action_claim_offline():
    session = _ensure_game()
    gains = session.claim_offline_gains()
    return _respond(session, claim_result=gains is not None)


@app.route("/api/settings/compact", methods=["POST"])
def settings_compact():
    session = _ensure_game()
    session.toggle_compact_mode()
    return _respond(session)


@app.route("/api/settings/auto_collector", methods=["POST"])
def settings_auto_collector():
    session = _ensure_game()
    session.toggle_auto_collector()
    return _respond(session)


@app.route("/api/settings/language/<language>", methods=["POST"])
def settings_language(language: str):
    session = _ensure_game()
    if not session.set_language(language):
        return jsonify({"error": f"Unsupported language {language!r}"}), 400
    return _respond(session)


@app.route("/api/settings/theme/<theme>", methods=["POST"])
def settings_theme(theme: str):
    session = _ensure_game()
    if not session.set_theme(theme):
        return jsonify({"error": f"Unsupported theme {theme!r}"}), 400
    return _respond(session)


@app.route("/api/action/save", methods=["POST"])
def action_save():
    session = _ensure_game()
    return jsonify({"saved": session.save()})


@app.route("/api/action/reset", methods=["POST"])
def action_reset():
    session = _ensure_game()
    session.reset()
    return _respond(session, reset=True)


@app.route("/api/analytics")
def api_analytics():
    session = _ensure_game()
    stamp = time.strftime("%Y-%m-%dT%H-%M-%S", time.gmtime())
    return Response(
        session.export_analytics(),
        mimetype="application/json",
        headers={
            "Content-Disposition": f"attachment; filename=astra_analytics_{stamp}.json"
        },
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_server(host: str = "127.0.0.1", port: int = 5000, debug: bool = False,
               save_path: Optional[Path] = None) -> None:
    """Start the Flask development server with a background ticker."""
    configure(save_path)
    session = _ensure_game()
    session.start()
    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        session.stop()
        session.save()
