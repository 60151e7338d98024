"""Prestige systems — Prestige (antimatter) and Ascension (full reset).

Both resets refuse to run when the computed gain is zero, so a misclick can
never throw progress away for nothing.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from astra.data.ascension_upgrades import AscensionEffectKind
from astra.data.balance import BALANCE
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.engine.bonuses import ascension_bonuses, challenge_reward_bonuses
from astra.engine.game_state import GameState, fresh_generators, fresh_upgrades
from astra.engine.research import dependencies_met
from astra.engine.spells import grant_spells

logger = logging.getLogger(__name__)


# ── Prestige ─────────────────────────────────────────────────────


def compute_antimatter_gain(state: GameState, catalog: Catalog = DEFAULT_CATALOG) -> float:
    """Antimatter a prestige would yield right now."""
    bal = BALANCE.prestige
    base = math.floor(bal.antimatter_base * math.sqrt(
        max(0.0, state.total_stardust_ever) / bal.antimatter_divisor
    ))
    rewards = challenge_reward_bonuses(state.completed_challenges, catalog)
    ascension = ascension_bonuses(state.purchased_ascension_upgrades, catalog)
    return float(math.floor(
        base * rewards.antimatter_gain_multiplier * ascension.antimatter_gain_multiplier
    ))


def can_prestige(state: GameState, catalog: Catalog = DEFAULT_CATALOG) -> bool:
    if state.total_stardust_ever < BALANCE.prestige.prestige_requirement:
        return False
    return compute_antimatter_gain(state, catalog) > 0


def perform_prestige(state: GameState, catalog: Catalog = DEFAULT_CATALOG,
                     now: Optional[float] = None) -> float:
    """Trade lifetime stardust for antimatter.  Returns antimatter earned (0 if refused)."""
    if not can_prestige(state, catalog):
        return 0.0

    gain = compute_antimatter_gain(state, catalog)
    state.log_event(
        "PRESTIGE", {"antimatterGain": gain, "totalStardust": state.total_stardust_ever}, now
    )

    state.stardust = 0.0
    state.nebula_gas = 0.0
    state.research_points = 0.0
    state.total_stardust_ever = 0.0
    state.prestiges += 1
    state.antimatter += gain
    state.mana = 0.0
    state.upgrades = fresh_upgrades(catalog)
    state.generators = fresh_generators(catalog)
    grant_spells(state, catalog)
    state.active_spell_effects = []
    apply_starting_levels(state, catalog)

    logger.info("prestige #%d: +%.0f antimatter", state.prestiges, gain)
    return gain


# ── Ascension ────────────────────────────────────────────────────


def compute_essence_gain(state: GameState) -> float:
    return float(math.floor(
        math.sqrt(max(0.0, state.antimatter) / BALANCE.prestige.essence_divisor)
    ))


def can_ascend(state: GameState) -> bool:
    if state.antimatter < BALANCE.prestige.ascension_requirement:
        return False
    return compute_essence_gain(state) > 0


def perform_ascension(state: GameState, catalog: Catalog = DEFAULT_CATALOG,
                      now: Optional[float] = None) -> float:
    """Full reset — only essence, the ascension tree and challenges persist.

    The active challenge counts as completed.  Returns essence earned
    (0 if refused).
    """
    if not can_ascend(state):
        return 0.0

    gain = compute_essence_gain(state)
    state.log_event("ASCEND", {"essenceGain": gain, "antimatter": state.antimatter}, now)

    state.stardust = 0.0
    state.nebula_gas = 0.0
    state.antimatter = 0.0
    state.research_points = 0.0
    state.total_stardust_ever = 0.0
    state.prestiges = 0
    state.mana = 0.0
    state.ascensions += 1
    state.singularity_essence += gain
    state.upgrades = fresh_upgrades(catalog)
    state.generators = fresh_generators(catalog)
    state.spells = []
    state.active_spell_effects = []
    state.completed_research = []
    if state.active_challenge and state.active_challenge not in state.completed_challenges:
        state.completed_challenges.append(state.active_challenge)
    state.active_challenge = None

    apply_starting_bonuses(state, catalog)

    logger.info("ascension #%d: +%.0f essence", state.ascensions, gain)
    return gain


def apply_starting_levels(state: GameState, catalog: Catalog = DEFAULT_CATALOG) -> None:
    """Raise freshly reset upgrades to their purchased starting level."""
    for uid in state.purchased_ascension_upgrades:
        node = catalog.ascension_upgrades.get(uid)
        if node is None or node.effect.kind != AscensionEffectKind.STARTING_UPGRADE_LEVEL:
            continue
        upgrade = state.upgrade(node.effect.upgrade_id)
        if upgrade is not None:
            upgrade.level = max(upgrade.level, int(node.effect.value))


def apply_starting_bonuses(state: GameState, catalog: Catalog = DEFAULT_CATALOG) -> None:
    """Apply permanent ascension starting effects to a freshly reset state."""
    for uid in state.purchased_ascension_upgrades:
        node = catalog.ascension_upgrades.get(uid)
        if node is not None and node.effect.kind == AscensionEffectKind.STARTING_STARDUST:
            state.stardust += node.effect.value
    apply_starting_levels(state, catalog)


# ── Ascension tree & challenges ──────────────────────────────────


def purchase_ascension_upgrade(state: GameState, upgrade_id: str,
                               catalog: Catalog = DEFAULT_CATALOG,
                               now: Optional[float] = None) -> bool:
    """Buy a node of the ascension tree.  Returns True if successful."""
    node = catalog.ascension_upgrades.get(upgrade_id)
    if (node is None
            or state.singularity_essence < node.cost
            or upgrade_id in state.purchased_ascension_upgrades
            or not dependencies_met(node.dependencies, state.purchased_ascension_upgrades)):
        logger.debug("ascension upgrade rejected: %r", upgrade_id)
        return False

    state.singularity_essence -= node.cost
    state.purchased_ascension_upgrades.append(upgrade_id)
    state.log_event("PURCHASE_ASCENSION_UPGRADE", {"upgradeId": upgrade_id}, now)
    return True


def activate_challenge(state: GameState, challenge_id: Optional[str],
                       catalog: Catalog = DEFAULT_CATALOG,
                       now: Optional[float] = None) -> bool:
    """Select (or clear, with None) the active challenge.

    Switching is free.  Unknown, malformed and already completed challenges
    are refused.
    """
    if challenge_id is not None and (
        not isinstance(challenge_id, str)
        or challenge_id not in catalog.challenges
        or challenge_id in state.completed_challenges
    ):
        logger.debug("challenge rejected: %r", challenge_id)
        return False

    state.active_challenge = challenge_id
    state.log_event("ACTIVATE_CHALLENGE", {"challengeId": challenge_id}, now)
    return True
