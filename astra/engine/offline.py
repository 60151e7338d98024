"""Offline progress — approximate gains for the time the game was closed.

This does not replay ticks: each generator contributes whole charge cycles
over the capped gap at its base payout, and research uses the rate at load
time.  Mid-gap bonus changes and auto-collector timing are ignored.  Load
stays O(generators) however long the player was away.

Offline research uses the same rate as a live tick: the fully boosted
average stardust rate (flat boost, research and challenge multipliers
included) fed through the log formula and scaled by the ascension research
multiplier, so a closed game never earns research faster or slower than an
open one would at the moment of loading.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Optional

from astra.data.balance import BALANCE
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.data.upgrades import Currency
from astra.engine.bonuses import compute_bonuses
from astra.engine.game_state import GameState
from astra.engine.rates import research_rate, stardust_per_second

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfflineGains:
    stardust: float
    nebula_gas: float
    research_points: float
    time_away_s: float

    @property
    def capped_s(self) -> float:
        return min(self.time_away_s, BALANCE.offline.cap_s)


def compute_offline_gains(state: GameState, now: Optional[float] = None,
                          catalog: Catalog = DEFAULT_CATALOG) -> Optional[OfflineGains]:
    """Stage the gains for the gap since the last save, or None if too short."""
    if not state.last_save_timestamp:
        return None

    now = time.time() if now is None else now
    away = now - state.last_save_timestamp
    if away < BALANCE.offline.min_gap_s:
        return None

    capped = min(away, BALANCE.offline.cap_s)
    stardust = 0.0
    gas = 0.0
    for gen in state.generators:
        if gen.count <= 0:
            continue
        cycles = math.floor((gen.charge_timer + capped) / gen.base_charge_time)
        payout = cycles * gen.base_payout * gen.count
        if gen.produces == Currency.STARDUST:
            stardust += payout
        else:
            gas += payout

    bonuses = compute_bonuses(state, catalog)
    research = research_rate(
        stardust_per_second(state, bonuses),
        bonuses.ascension.research_points_gain_multiplier,
    ) * capped

    return OfflineGains(
        stardust=stardust,
        nebula_gas=gas,
        research_points=research,
        time_away_s=away,
    )


def claim_offline_gains(state: GameState, gains: OfflineGains,
                        now: Optional[float] = None) -> None:
    """Credit staged gains and carry each generator's charge phase forward."""
    state.credit(Currency.STARDUST, gains.stardust)
    state.credit(Currency.NEBULA_GAS, gains.nebula_gas)
    state.research_points += gains.research_points

    capped = gains.capped_s
    for gen in state.generators:
        if gen.count > 0:
            gen.charge_timer = (gen.charge_timer + capped) % gen.base_charge_time

    state.log_event("OFFLINE_GAINS_CLAIMED", {
        "stardust": gains.stardust,
        "nebulaGas": gains.nebula_gas,
        "researchPoints": gains.research_points,
        "timeAwaySeconds": gains.time_away_s,
    }, now)
    logger.info("claimed offline gains for %.0fs away", gains.time_away_s)
