"""Bonus aggregation — folds unlocked effects into multiplier bundles.

Every reducer is a pure function of one state collection and the catalog.
Multipliers start at 1 and additive boosts at 0; each effect kind is
matched explicitly so a new kind has to be handled here to do anything.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from astra.data.ascension_upgrades import AscensionEffect, AscensionEffectKind
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.data.challenges import HandicapKind
from astra.data.research import ResearchEffectKind
from astra.data.spells import SpellEffectKind
from astra.engine.game_state import ActiveSpellEffect, GameState


@dataclass(frozen=True)
class ResearchBonuses:
    click_power_multiplier: float = 1.0
    sps_multiplier: float = 1.0
    generator_multipliers: dict[str, float] = field(default_factory=dict)
    auto_collector_unlocked: bool = False

    def generator_multiplier(self, generator_id: str) -> float:
        return self.generator_multipliers.get(generator_id, 1.0)


@dataclass(frozen=True)
class AscensionBonuses:
    antimatter_gain_multiplier: float = 1.0
    critical_click_chance_boost: float = 0.0
    research_points_gain_multiplier: float = 1.0


@dataclass(frozen=True)
class ChallengeBonuses:
    """Handicap of the active challenge."""

    sps_multiplier: float = 1.0
    click_power_cap: float = math.inf
    cost_growth_multiplier: float = 1.0


@dataclass(frozen=True)
class ChallengeRewardBonuses:
    flat_sps_boost: float = 0.0
    antimatter_gain_multiplier: float = 1.0


@dataclass(frozen=True)
class SpellBonuses:
    click_power_multiplier: float = 1.0


@dataclass(frozen=True)
class Bonuses:
    """All bonus bundles for one snapshot."""

    research: ResearchBonuses
    ascension: AscensionBonuses
    challenge: ChallengeBonuses
    challenge_rewards: ChallengeRewardBonuses
    spells: SpellBonuses


def research_bonuses(completed: Iterable[str],
                     catalog: Catalog = DEFAULT_CATALOG) -> ResearchBonuses:
    click = 1.0
    sps = 1.0
    per_generator: dict[str, float] = {}
    auto_collector = False

    for rid in completed:
        item = catalog.research.get(rid)
        if item is None:
            continue
        effect = item.effect
        if effect.kind == ResearchEffectKind.CLICK_POWER_MULTIPLIER:
            click += effect.value
        elif effect.kind == ResearchEffectKind.SPS_MULTIPLIER:
            sps += effect.value
        elif effect.kind == ResearchEffectKind.GENERATOR_MULTIPLIER:
            gid = effect.generator_id
            per_generator[gid] = per_generator.get(gid, 1.0) + effect.value
        elif effect.kind == ResearchEffectKind.UNLOCK_AUTO_COLLECTOR:
            auto_collector = True

    return ResearchBonuses(
        click_power_multiplier=click,
        sps_multiplier=sps,
        generator_multipliers=per_generator,
        auto_collector_unlocked=auto_collector,
    )


def ascension_bonuses(purchased: Iterable[str],
                      catalog: Catalog = DEFAULT_CATALOG) -> AscensionBonuses:
    antimatter = 1.0
    crit = 0.0
    research = 1.0

    for uid in purchased:
        upgrade = catalog.ascension_upgrades.get(uid)
        if upgrade is None:
            continue
        effect = upgrade.effect
        if effect.kind == AscensionEffectKind.ANTIMATTER_GAIN_MULTIPLIER:
            antimatter += effect.value
        elif effect.kind == AscensionEffectKind.CRITICAL_CLICK_CHANCE_BOOST:
            crit += effect.value
        elif effect.kind == AscensionEffectKind.RESEARCH_POINTS_GAIN_MULTIPLIER:
            research += effect.value
        # Starting bonuses are applied once by Ascend, not folded here

    return AscensionBonuses(
        antimatter_gain_multiplier=antimatter,
        critical_click_chance_boost=crit,
        research_points_gain_multiplier=research,
    )


def challenge_bonuses(active_challenge: Optional[str],
                      catalog: Catalog = DEFAULT_CATALOG) -> ChallengeBonuses:
    challenge = catalog.challenges.get(active_challenge) if active_challenge else None
    if challenge is None:
        return ChallengeBonuses()

    handicap = challenge.handicap
    if handicap.kind == HandicapKind.SPS_REDUCTION:
        return ChallengeBonuses(sps_multiplier=1.0 - handicap.value)
    if handicap.kind == HandicapKind.CLICK_POWER_CAP:
        return ChallengeBonuses(click_power_cap=handicap.value)
    if handicap.kind == HandicapKind.COST_GROWTH_INCREASE:
        return ChallengeBonuses(cost_growth_multiplier=1.0 + handicap.value)
    return ChallengeBonuses()


def challenge_reward_bonuses(completed: Iterable[str],
                             catalog: Catalog = DEFAULT_CATALOG) -> ChallengeRewardBonuses:
    flat_sps = 0.0
    antimatter = 1.0

    for cid in completed:
        challenge = catalog.challenges.get(cid)
        if challenge is None:
            continue
        reward: AscensionEffect = challenge.reward
        if reward.kind == AscensionEffectKind.FLAT_SPS_BOOST:
            flat_sps += reward.value
        elif reward.kind == AscensionEffectKind.ANTIMATTER_GAIN_MULTIPLIER:
            antimatter += reward.value

    return ChallengeRewardBonuses(flat_sps_boost=flat_sps, antimatter_gain_multiplier=antimatter)


def spell_bonuses(active_effects: Iterable[ActiveSpellEffect],
                  catalog: Catalog = DEFAULT_CATALOG) -> SpellBonuses:
    """Concurrent click boosts multiply together rather than add."""
    click = 1.0
    for active in active_effects:
        spell = catalog.spells.get(active.spell_id)
        if spell is None:
            continue
        if spell.effect.kind == SpellEffectKind.CLICK_POWER_BOOST:
            click *= spell.effect.multiplier
    return SpellBonuses(click_power_multiplier=click)


def compute_bonuses(state: GameState, catalog: Catalog = DEFAULT_CATALOG) -> Bonuses:
    return Bonuses(
        research=research_bonuses(state.completed_research, catalog),
        ascension=ascension_bonuses(state.purchased_ascension_upgrades, catalog),
        challenge=challenge_bonuses(state.active_challenge, catalog),
        challenge_rewards=challenge_reward_bonuses(state.completed_challenges, catalog),
        spells=spell_bonuses(state.active_spell_effects, catalog),
    )
