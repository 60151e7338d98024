"""Upgrade definitions — click-power upgrades bought with stardust."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Currency(Enum):
    """Resources an item can be priced in or produce."""

    STARDUST = "stardust"
    NEBULA_GAS = "nebula_gas"


@dataclass(frozen=True)
class UpgradeDef:
    """Template for a click-power upgrade.

    Every level adds ``power`` to the base click before multipliers.
    """

    id: str
    name: str
    description: str
    power: float
    base_cost: float
    cost_growth: float
    currency: Currency = Currency.STARDUST


STAR_GATHERER = UpgradeDef(
    id="star-gatherer",
    name="Star Gatherer",
    description="+1 stardust per click per level.",
    power=1,
    base_cost=10,
    cost_growth=1.15,
)

NEBULA_NET = UpgradeDef(
    id="nebula-net",
    name="Nebula Net",
    description="+5 stardust per click per level.",
    power=5,
    base_cost=100,
    cost_growth=1.2,
)

GRAVITY_GLOVES = UpgradeDef(
    id="gravity-gloves",
    name="Gravity Gloves",
    description="+25 stardust per click per level.",
    power=25,
    base_cost=1000,
    cost_growth=1.25,
)


ALL_UPGRADES: dict[str, UpgradeDef] = {
    u.id: u
    for u in [
        STAR_GATHERER,
        NEBULA_NET,
        GRAVITY_GLOVES,
    ]
}
