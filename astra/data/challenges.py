"""Challenge definitions — optional run modifiers with a permanent reward.

At most one challenge is active at a time.  Its handicap applies until the
next Ascension, which marks it completed; from then on only its reward
applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from astra.data.ascension_upgrades import AscensionEffect, AscensionEffectKind


class HandicapKind(Enum):
    CLICK_POWER_CAP = auto()       # click power never exceeds value
    SPS_REDUCTION = auto()         # production × (1 - value)
    COST_GROWTH_INCREASE = auto()  # generator cost growth × (1 + value)


@dataclass(frozen=True)
class Handicap:
    kind: HandicapKind
    value: float


@dataclass(frozen=True)
class Challenge:
    id: str
    name: str
    description: str
    handicap: Handicap
    reward: AscensionEffect


TRIAL_OF_SILENCE = Challenge(
    id="trial-of-silence",
    name="Trial of Silence",
    description="Clicks are capped at 1 stardust. Reward: +10 stardust/sec.",
    handicap=Handicap(HandicapKind.CLICK_POWER_CAP, 1),
    reward=AscensionEffect(AscensionEffectKind.FLAT_SPS_BOOST, 10),
)

TRIAL_OF_SCARCITY = Challenge(
    id="trial-of-scarcity",
    name="Trial of Scarcity",
    description="Production reduced by 75%. Reward: +5% antimatter gain.",
    handicap=Handicap(HandicapKind.SPS_REDUCTION, 0.75),
    reward=AscensionEffect(AscensionEffectKind.ANTIMATTER_GAIN_MULTIPLIER, 0.05),
)


ALL_CHALLENGES: dict[str, Challenge] = {
    c.id: c for c in [
        TRIAL_OF_SILENCE,
        TRIAL_OF_SCARCITY,
    ]
}
