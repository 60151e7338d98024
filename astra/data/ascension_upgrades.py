"""Ascension upgrades — permanent tree bought with Singularity Essence.

Effects persist across all later prestiges and ascensions.  The same effect
type doubles as the reward of a completed challenge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class AscensionEffectKind(Enum):
    FLAT_SPS_BOOST = auto()                   # + value stardust/sec before multipliers
    ANTIMATTER_GAIN_MULTIPLIER = auto()       # antimatter gain × (1 + Σ value)
    STARTING_UPGRADE_LEVEL = auto()           # upgrade_id starts at level value
    STARTING_STARDUST = auto()                # + value stardust after each ascension
    CRITICAL_CLICK_CHANCE_BOOST = auto()      # crit chance + Σ value
    RESEARCH_POINTS_GAIN_MULTIPLIER = auto()  # research rate × (1 + Σ value)


@dataclass(frozen=True)
class AscensionEffect:
    kind: AscensionEffectKind
    value: float = 0.0
    upgrade_id: str = ""   # only for STARTING_UPGRADE_LEVEL


@dataclass(frozen=True)
class AscensionUpgrade:
    id: str
    name: str
    description: str
    cost: int   # Singularity Essence
    effect: AscensionEffect
    dependencies: tuple[str, ...] = field(default_factory=tuple)
    # Layout hint for the tree view, in percent
    position: tuple[float, float] = (50.0, 50.0)


ASCENSION_TREE: dict[str, AscensionUpgrade] = {
    "cosmic-start": AscensionUpgrade(
        id="cosmic-start",
        name="Cosmic Start",
        description="Begin each ascension with 100 stardust",
        cost=1,
        effect=AscensionEffect(AscensionEffectKind.STARTING_STARDUST, 100),
        position=(50, 10),
    ),
    "alchemical-purity": AscensionUpgrade(
        id="alchemical-purity",
        name="Alchemical Purity",
        description="+10% antimatter from prestige",
        cost=2,
        effect=AscensionEffect(AscensionEffectKind.ANTIMATTER_GAIN_MULTIPLIER, 0.1),
        dependencies=("cosmic-start",),
        position=(30, 30),
    ),
    "scholarly-mind": AscensionUpgrade(
        id="scholarly-mind",
        name="Scholarly Mind",
        description="+20% research points",
        cost=2,
        effect=AscensionEffect(AscensionEffectKind.RESEARCH_POINTS_GAIN_MULTIPLIER, 0.2),
        dependencies=("cosmic-start",),
        position=(70, 30),
    ),
    "critical-thought": AscensionUpgrade(
        id="critical-thought",
        name="Critical Thought",
        description="+1% critical click chance",
        cost=5,
        effect=AscensionEffect(AscensionEffectKind.CRITICAL_CLICK_CHANCE_BOOST, 0.01),
        dependencies=("alchemical-purity",),
        position=(30, 50),
    ),
}
