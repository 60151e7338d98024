"""Derived rates — click power, production and research rate.

These are the only implementations of the formulas; the tick engine, the
commands and the web layer all call through here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from astra.data.balance import BALANCE
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.data.upgrades import Currency
from astra.engine.bonuses import Bonuses, compute_bonuses
from astra.engine.game_state import GameState


@dataclass(frozen=True)
class DerivedRates:
    prestige_multiplier: float
    combo_multiplier: float
    cpm_multiplier: float
    click_power: float
    critical_chance: float
    stardust_per_second: float
    nebula_gas_per_second: float
    research_per_second: float


def prestige_multiplier(antimatter: float) -> float:
    """1 + 2% per antimatter, uncapped."""
    return 1.0 + antimatter * BALANCE.prestige.antimatter_multiplier_per


def combo_multiplier(click_combo: int) -> float:
    return 1.0 + click_combo * BALANCE.click.combo_multiplier_per_click


def clicks_in_window(state: GameState, now: Optional[float] = None) -> int:
    if now is None:
        return len(state.click_timestamps)
    window = BALANCE.click.frenzy_window_s
    return sum(1 for t in state.click_timestamps if now - t < window)


def cpm_multiplier(cpm: int) -> float:
    """Frenzy: 1 below the threshold, then doubling every tier above it."""
    bal = BALANCE.click
    if cpm < bal.frenzy_cpm_threshold:
        return 1.0
    tier = (cpm - bal.frenzy_cpm_threshold) // bal.frenzy_cpm_tier_size
    return 2.0 ** (tier + 1)


def base_click_power(state: GameState) -> float:
    # The +1 keeps a click worth something with no upgrades
    return sum(u.level * u.power for u in state.upgrades) + 1.0


def click_power(state: GameState, bonuses: Bonuses, now: Optional[float] = None) -> float:
    power = (
        base_click_power(state)
        * prestige_multiplier(state.antimatter)
        * bonuses.research.click_power_multiplier
        * bonuses.spells.click_power_multiplier
        * cpm_multiplier(clicks_in_window(state, now))
        * combo_multiplier(state.click_combo)
    )
    return min(power, bonuses.challenge.click_power_cap)


def critical_chance(bonuses: Bonuses) -> float:
    return BALANCE.click.critical_chance + bonuses.ascension.critical_click_chance_boost


def _generator_rate(state: GameState, bonuses: Bonuses, produces: Currency) -> float:
    return sum(
        gen.count * gen.base_payout * bonuses.research.generator_multiplier(gen.id)
        / gen.base_charge_time
        for gen in state.generators
        if gen.produces == produces
    )


def _production_multiplier(state: GameState, bonuses: Bonuses) -> float:
    return (
        prestige_multiplier(state.antimatter)
        * bonuses.research.sps_multiplier
        * bonuses.challenge.sps_multiplier
    )


def stardust_per_second(state: GameState, bonuses: Bonuses) -> float:
    """Average stardust/sec, including the flat boost from challenge rewards."""
    base = _generator_rate(state, bonuses, Currency.STARDUST)
    base += bonuses.challenge_rewards.flat_sps_boost
    return base * _production_multiplier(state, bonuses)


def nebula_gas_per_second(state: GameState, bonuses: Bonuses) -> float:
    """Average gas/sec.  The flat challenge boost is stardust-only."""
    base = _generator_rate(state, bonuses, Currency.NEBULA_GAS)
    return base * _production_multiplier(state, bonuses)


def research_rate(avg_stardust_per_second: float, research_multiplier: float = 1.0) -> float:
    """Log-damped so research does not run away with production."""
    return (1.0 + math.log10(1.0 + max(0.0, avg_stardust_per_second))) * research_multiplier


def compute_derived(state: GameState, catalog: Catalog = DEFAULT_CATALOG,
                    bonuses: Optional[Bonuses] = None,
                    now: Optional[float] = None) -> DerivedRates:
    """Recompute every derived value from the current snapshot."""
    if bonuses is None:
        bonuses = compute_bonuses(state, catalog)
    sps = stardust_per_second(state, bonuses)
    return DerivedRates(
        prestige_multiplier=prestige_multiplier(state.antimatter),
        combo_multiplier=combo_multiplier(state.click_combo),
        cpm_multiplier=cpm_multiplier(clicks_in_window(state, now)),
        click_power=click_power(state, bonuses, now),
        critical_chance=critical_chance(bonuses),
        stardust_per_second=sps,
        nebula_gas_per_second=nebula_gas_per_second(state, bonuses),
        research_per_second=research_rate(
            sps, bonuses.ascension.research_points_gain_multiplier
        ),
    )
