"""Spellbook — granted on first prestige, cast with mana."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class SpellEffectKind(Enum):
    CLICK_POWER_BOOST = auto()   # timed click-power multiplier
    INSTANT_CHARGE = auto()      # fill every generator's charge timer


@dataclass(frozen=True)
class SpellEffect:
    kind: SpellEffectKind
    duration_s: float = 0.0
    multiplier: float = 1.0


@dataclass(frozen=True)
class Spell:
    id: str
    name: str
    description: str
    mana_cost: float
    effect: SpellEffect


WIZARDS_MIGHT = Spell(
    id="wizards-might",
    name="Wizard's Might",
    description="Double click power for 30 seconds.",
    mana_cost=50,
    effect=SpellEffect(SpellEffectKind.CLICK_POWER_BOOST, duration_s=30, multiplier=2),
)

TEMPORAL_HASTE = Spell(
    id="temporal-haste",
    name="Temporal Haste",
    description="Instantly charge every generator.",
    mana_cost=100,
    effect=SpellEffect(SpellEffectKind.INSTANT_CHARGE),
)


ALL_SPELLS: dict[str, Spell] = {
    s.id: s for s in [
        WIZARDS_MIGHT,
        TEMPORAL_HASTE,
    ]
}
