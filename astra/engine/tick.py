"""Tick engine — advances the simulation by one fixed step.

Bonuses and the research rate are taken from the snapshot as it stood at
the start of the tick; every other step sees the effects of the steps
before it.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Optional

from astra.data.balance import BALANCE
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.data.upgrades import Currency
from astra.engine.bonuses import compute_bonuses
from astra.engine.economy import collect_payout
from astra.engine.game_state import DynamicEvent, GameState, HistorySample, StatsSample
from astra.engine.rates import research_rate, stardust_per_second

logger = logging.getLogger(__name__)

# Float slack for timers that are advanced in 0.1s steps
_EPSILON = 1e-9


def tick_mana(state: GameState, dt: float) -> None:
    if not state.mana_unlocked:
        state.mana = 0.0
        return
    state.mana = min(state.max_mana, state.mana + BALANCE.mana.regen_per_s * dt)


def tick_spell_effects(state: GameState, dt: float) -> list[str]:
    """Count down buffs and drop the ones that ran out.  Returns expired spell ids."""
    expired: list[str] = []
    remaining = []
    for effect in state.active_spell_effects:
        effect.remaining_s -= dt
        if effect.remaining_s <= _EPSILON:
            expired.append(effect.spell_id)
        else:
            remaining.append(effect)
    state.active_spell_effects = remaining
    return expired


def tick_generators(state: GameState, dt: float) -> None:
    """Charge owned generators; a full generator holds its charge, no banking."""
    for gen in state.generators:
        if gen.count <= 0:
            continue
        charged = gen.charge_timer + dt
        if charged >= gen.base_charge_time - _EPSILON:
            charged = gen.base_charge_time
        gen.charge_timer = max(0.0, charged)


def tick_click_window(state: GameState, now: float) -> None:
    window = BALANCE.click.frenzy_window_s
    while state.click_timestamps and now - state.click_timestamps[0] >= window:
        state.click_timestamps.popleft()


def tick_combo_decay(state: GameState, now: float) -> None:
    if state.click_combo > 0 and now - state.last_click_time > BALANCE.click.combo_timeout_s:
        state.click_combo = 0


def tick_auto_collect(state: GameState) -> tuple[float, float]:
    """Collect every full generator at once.  Returns (stardust, gas) credited."""
    stardust = 0.0
    gas = 0.0
    for gen in state.generators:
        if gen.count > 0 and gen.is_charged:
            payout = collect_payout(gen, state)
            gen.charge_timer = 0.0
            if gen.produces == Currency.STARDUST:
                stardust += payout
            else:
                gas += payout
    state.credit(Currency.STARDUST, stardust)
    state.credit(Currency.NEBULA_GAS, gas)
    return stardust, gas


def tick_dynamic_event(state: GameState, now: float) -> list[str]:
    """Expire the shooting star, then roll for a new one.  Returns notifications."""
    bal = BALANCE.events
    notes: list[str] = []
    event = state.dynamic_event
    if event is not None and now - event.created_at > bal.duration_s:
        state.dynamic_event = None
        notes.append("dynamic_event_expired")

    if state.dynamic_event is None and random.random() < bal.spawn_chance_per_tick:
        state.dynamic_event = DynamicEvent(
            id=int(now * 1000),
            created_at=now,
            x=random.random() * bal.position_span + bal.position_min,
            y=random.random() * bal.position_span + bal.position_min,
            vx=(random.random() - 0.5) * bal.velocity_span,
            vy=(random.random() - 0.5) * bal.velocity_span,
        )
        notes.append("dynamic_event_spawn")
    return notes


def tick_milestones(state: GameState, catalog: Catalog = DEFAULT_CATALOG,
                    now: Optional[float] = None) -> list[str]:
    """Complete every milestone whose requirement now holds, in catalog order."""
    completed: list[str] = []
    for milestone in catalog.milestones.values():
        if state.milestones.get(milestone.id):
            continue
        if not milestone.requirement(state):
            continue
        if milestone.reward is not None:
            milestone.reward(state)
        state.milestones[milestone.id] = True
        state.log_event("MILESTONE_COMPLETED", {"milestoneId": milestone.id}, now)
        logger.info("milestone completed: %s", milestone.id)
        completed.append(milestone.id)
    return completed


def tick(state: GameState, dt: Optional[float] = None, now: Optional[float] = None,
         catalog: Catalog = DEFAULT_CATALOG) -> list[str]:
    """Advance the state by one step of ``dt`` seconds.  Returns notifications."""
    dt = BALANCE.timing.tick_interval_s if dt is None else dt
    now = time.time() if now is None else now
    notifications: list[str] = []

    bonuses = compute_bonuses(state, catalog)
    research_per_s = research_rate(
        stardust_per_second(state, bonuses),
        bonuses.ascension.research_points_gain_multiplier,
    )

    tick_mana(state, dt)
    for spell_id in tick_spell_effects(state, dt):
        notifications.append(f"spell_expired:{spell_id}")
    tick_generators(state, dt)
    state.research_points += research_per_s * dt
    tick_click_window(state, now)
    tick_combo_decay(state, now)

    if bonuses.research.auto_collector_unlocked and state.settings.auto_collector_active:
        tick_auto_collect(state)

    notifications.extend(tick_dynamic_event(state, now))

    for mid in tick_milestones(state, catalog, now):
        notifications.append(f"milestone:{mid}")

    return notifications


# ── Chart samplers (never touch gameplay fields) ─────────────────


def sample_history(state: GameState, now: Optional[float] = None) -> None:
    state.history.append(HistorySample(
        time=time.time() if now is None else now,
        stardust=state.stardust,
        nebula_gas=state.nebula_gas,
    ))


def sample_stats(state: GameState, catalog: Catalog = DEFAULT_CATALOG,
                 now: Optional[float] = None) -> None:
    state.stats_history.append(StatsSample(
        time=time.time() if now is None else now,
        sps=stardust_per_second(state, compute_bonuses(state, catalog)),
    ))
