"""Economy engine — pricing, purchases, collecting, and clicking."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from astra.data.balance import BALANCE
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.data.upgrades import Currency
from astra.engine.bonuses import Bonuses, compute_bonuses
from astra.engine.game_state import GameState, Generator
from astra.engine.rates import click_power, critical_chance, prestige_multiplier, stardust_per_second

logger = logging.getLogger(__name__)


class ItemKind(Enum):
    UPGRADE = "upgrade"
    GENERATOR = "generator"


@dataclass(frozen=True)
class PendingCredit:
    """A collect payout waiting for its animation window to pass."""

    generator_id: str
    currency: Currency
    amount: float
    due_at: float


# ── Pricing ──────────────────────────────────────────────────────


def item_cost(base_cost: float, cost_growth: float, owned: int,
              growth_multiplier: float = 1.0) -> float:
    """Cost of the next purchase: base * (growth * challenge_mult) ^ owned."""
    return base_cost * (cost_growth * growth_multiplier) ** owned


def get_upgrade_cost(state: GameState, upgrade_id: str) -> Optional[float]:
    upgrade = state.upgrade(upgrade_id)
    if upgrade is None:
        return None
    return item_cost(upgrade.base_cost, upgrade.cost_growth, upgrade.level)


def get_generator_cost(state: GameState, generator_id: str,
                       bonuses: Optional[Bonuses] = None,
                       catalog: Catalog = DEFAULT_CATALOG) -> Optional[float]:
    """Generator cost; only generators feel the challenge cost-growth handicap."""
    gen = state.generator(generator_id)
    if gen is None:
        return None
    if bonuses is None:
        bonuses = compute_bonuses(state, catalog)
    return item_cost(gen.base_cost, gen.cost_growth, gen.count,
                     bonuses.challenge.cost_growth_multiplier)


def get_cost(state: GameState, item_id: str, kind: ItemKind,
             catalog: Catalog = DEFAULT_CATALOG) -> Optional[float]:
    if kind == ItemKind.UPGRADE:
        return get_upgrade_cost(state, item_id)
    return get_generator_cost(state, item_id, catalog=catalog)


def can_afford(state: GameState, item_id: str, kind: ItemKind,
               catalog: Catalog = DEFAULT_CATALOG) -> bool:
    item = state.upgrade(item_id) if kind == ItemKind.UPGRADE else state.generator(item_id)
    cost = get_cost(state, item_id, kind, catalog)
    if item is None or cost is None:
        return False
    return state.balance(item.currency) >= cost


def purchase(state: GameState, item_id: str, kind: ItemKind,
             catalog: Catalog = DEFAULT_CATALOG, now: Optional[float] = None) -> bool:
    """Buy one level/unit.  Returns True if successful."""
    item = state.upgrade(item_id) if kind == ItemKind.UPGRADE else state.generator(item_id)
    if item is None:
        logger.debug("purchase rejected: unknown %s %r", kind.value, item_id)
        return False

    cost = get_cost(state, item_id, kind, catalog)
    if cost is None:
        return False
    if state.balance(item.currency) < cost:
        logger.debug("purchase rejected: %r costs %.2f", item_id, cost)
        return False

    state.debit(item.currency, cost)
    if kind == ItemKind.UPGRADE:
        item.level += 1
        owned = item.level
    else:
        item.count += 1
        owned = item.count

    state.log_event(
        f"PURCHASE_{kind.name}", {"itemId": item_id, "cost": cost, "count": owned}, now
    )
    return True


# ── Collecting ───────────────────────────────────────────────────


def collect_payout(gen: Generator, state: GameState) -> float:
    """Payout of one full charge at the current prestige multiplier."""
    return gen.base_payout * gen.count * prestige_multiplier(state.antimatter)


def collect_artifact(state: GameState, generator_id: str,
                     now: Optional[float] = None) -> Optional[PendingCredit]:
    """Drain a fully charged generator.

    The timer resets immediately; the payout is returned as a
    ``PendingCredit`` for the caller to apply once the delay has passed.
    Returns None if the generator is unknown, unowned or not full.
    """
    gen = state.generator(generator_id)
    if gen is None or gen.count == 0 or not gen.is_charged:
        logger.debug("collect rejected: %r not ready", generator_id)
        return None

    now = time.time() if now is None else now
    payout = collect_payout(gen, state)
    gen.charge_timer = 0.0
    state.log_event("COLLECT_ARTIFACT", {"generatorId": generator_id, "payout": payout}, now)
    return PendingCredit(
        generator_id=generator_id,
        currency=gen.produces,
        amount=payout,
        due_at=now + BALANCE.timing.collect_credit_delay_s,
    )


def apply_credit(state: GameState, credit: PendingCredit) -> None:
    """Merge a deferred payout onto whatever the state is now."""
    state.credit(credit.currency, credit.amount)


# ── Clicking ─────────────────────────────────────────────────────


def click_star(state: GameState, catalog: Catalog = DEFAULT_CATALOG,
               now: Optional[float] = None) -> float:
    """Handle a click on the star.  Returns stardust earned."""
    now = time.time() if now is None else now
    bonuses = compute_bonuses(state, catalog)

    earned = click_power(state, bonuses, now)
    if random.random() < critical_chance(bonuses):
        earned *= BALANCE.click.critical_multiplier

    bal = BALANCE.click
    in_combo = state.last_click_time > 0 and now - state.last_click_time < bal.combo_timeout_s
    state.click_combo = min(state.click_combo + 1, bal.combo_max_count) if in_combo else 1
    state.last_click_time = now

    while state.click_timestamps and now - state.click_timestamps[0] >= bal.frenzy_window_s:
        state.click_timestamps.popleft()
    state.click_timestamps.append(now)

    state.credit(Currency.STARDUST, earned)
    return earned


def dynamic_event_click(state: GameState, catalog: Catalog = DEFAULT_CATALOG,
                        now: Optional[float] = None) -> float:
    """Catch the shooting star: one minute of production.  Returns the reward."""
    if state.dynamic_event is None:
        return 0.0
    reward = stardust_per_second(state, compute_bonuses(state, catalog))
    reward *= BALANCE.events.reward_sps_multiple
    state.credit(Currency.STARDUST, reward)
    state.dynamic_event = None
    state.log_event("DYNAMIC_EVENT_CLICKED", {"reward": reward}, now)
    return reward


def format_number(n: float) -> str:
    """Format a number with suffixes for readability."""
    if n < 0:
        return f"-{format_number(-n)}"

    for threshold, suffix in reversed(BALANCE.economy.suffixes):
        if n >= threshold:
            value = n / threshold
            if value >= 100:
                return f"{value:.0f}{suffix}"
            elif value >= 10:
                return f"{value:.1f}{suffix}"
            else:
                return f"{value:.2f}{suffix}"

    if n >= 100:
        return f"{n:.0f}"
    elif n >= 10:
        return f"{n:.1f}"
    elif n == int(n):
        return str(int(n))
    else:
        return f"{n:.1f}"
