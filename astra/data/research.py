"""Research tree — bought with research points, cleared on Ascension.

Each node carries one tagged effect.  Dependencies are plain id lists and
are checked by set membership when purchasing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ResearchEffectKind(Enum):
    CLICK_POWER_MULTIPLIER = auto()  # click power × (1 + Σ value)
    SPS_MULTIPLIER = auto()          # production × (1 + Σ value)
    GENERATOR_MULTIPLIER = auto()    # one generator's payout rate × (1 + Σ value)
    UNLOCK_AUTO_COLLECTOR = auto()   # full generators are collected every tick


@dataclass(frozen=True)
class ResearchEffect:
    kind: ResearchEffectKind
    value: float = 0.0
    generator_id: str = ""   # only for GENERATOR_MULTIPLIER


@dataclass(frozen=True)
class ResearchItem:
    id: str
    name: str
    description: str
    cost: float   # research points
    effect: ResearchEffect
    dependencies: tuple[str, ...] = field(default_factory=tuple)


RESEARCH_TREE: dict[str, ResearchItem] = {
    "basic-optics": ResearchItem(
        id="basic-optics",
        name="Basic Optics",
        description="+10% click power",
        cost=100,
        effect=ResearchEffect(ResearchEffectKind.CLICK_POWER_MULTIPLIER, 0.1),
    ),
    "improved-miners": ResearchItem(
        id="improved-miners",
        name="Improved Miners",
        description="Asteroid Miners produce +25%",
        cost=250,
        effect=ResearchEffect(
            ResearchEffectKind.GENERATOR_MULTIPLIER, 0.25, generator_id="asteroid-miner"
        ),
    ),
    "advanced-lensing": ResearchItem(
        id="advanced-lensing",
        name="Advanced Lensing",
        description="+20% click power",
        cost=500,
        effect=ResearchEffect(ResearchEffectKind.CLICK_POWER_MULTIPLIER, 0.2),
        dependencies=("basic-optics",),
    ),
    "stellar-dynamics": ResearchItem(
        id="stellar-dynamics",
        name="Stellar Dynamics",
        description="+5% production",
        cost=1000,
        effect=ResearchEffect(ResearchEffectKind.SPS_MULTIPLIER, 0.05),
        dependencies=("improved-miners",),
    ),
    "self-casting-charm": ResearchItem(
        id="self-casting-charm",
        name="Self-Casting Charm",
        description="Unlocks the auto-collector",
        cost=5000,
        effect=ResearchEffect(ResearchEffectKind.UNLOCK_AUTO_COLLECTOR),
        dependencies=("advanced-lensing", "stellar-dynamics"),
    ),
}
