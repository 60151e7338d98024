"""Generator definitions — passive producers with a charge/collect cycle.

A generator's timer fills at one unit per second while at least one is
owned.  Once it reaches ``base_charge_time`` the generator can be collected
for ``base_payout * count`` (times the prestige multiplier).
"""

from __future__ import annotations

from dataclasses import dataclass

from astra.data.upgrades import Currency


@dataclass(frozen=True)
class GeneratorDef:
    """Template for a generator."""

    id: str
    name: str
    description: str
    produces: Currency
    base_payout: float
    base_charge_time: float   # seconds
    base_cost: float
    cost_growth: float
    currency: Currency = Currency.STARDUST


# ── Early game ───────────────────────────────────────────────────

ASTEROID_MINER = GeneratorDef(
    id="asteroid-miner",
    name="Asteroid Miner",
    description="Chips stardust off passing rocks.",
    produces=Currency.STARDUST,
    base_payout=5,
    base_charge_time=3,
    base_cost=25,
    cost_growth=1.1,
)

COMET_CATCHER = GeneratorDef(
    id="comet-catcher",
    name="Comet Catcher",
    description="Nets the dust trail of comets.",
    produces=Currency.STARDUST,
    base_payout=60,
    base_charge_time=10,
    base_cost=500,
    cost_growth=1.15,
)

GAS_HARVESTER = GeneratorDef(
    id="gas-harvester",
    name="Gas Harvester",
    description="Siphons nebula gas from drifting clouds.",
    produces=Currency.NEBULA_GAS,
    base_payout=5,
    base_charge_time=15,
    base_cost=1000,
    cost_growth=1.2,
)

# ── Mid game ─────────────────────────────────────────────────────

DYSON_SPHERE_FRAGMENT = GeneratorDef(
    id="dyson-sphere-fragment",
    name="Dyson Sphere Fragment",
    description="A sliver of a star-wrapping shell.",
    produces=Currency.STARDUST,
    base_payout=500,
    base_charge_time=60,
    base_cost=10_000,
    cost_growth=1.2,
)

NEBULA_REFINERY = GeneratorDef(
    id="nebula-refinery",
    name="Nebula Refinery",
    description="Refines raw gas in bulk.",
    produces=Currency.NEBULA_GAS,
    base_payout=250,
    base_charge_time=120,
    base_cost=5000,
    cost_growth=1.25,
    currency=Currency.NEBULA_GAS,
)

BLACK_HOLE_HARVESTER = GeneratorDef(
    id="black-hole-harvester",
    name="Black Hole Harvester",
    description="Skims the accretion disk.",
    produces=Currency.STARDUST,
    base_payout=10_000,
    base_charge_time=300,
    base_cost=250_000,
    cost_growth=1.25,
)

# ── Late game (post-ascension) ───────────────────────────────────

REALITY_WARPER = GeneratorDef(
    id="reality-warper",
    name="Reality Warper",
    description="Bends local physics toward abundance.",
    produces=Currency.STARDUST,
    base_payout=1e12,
    base_charge_time=1800,  # 30 min
    base_cost=1e21,
    cost_growth=1.5,
)

UNIVERSAL_CONSTRUCTOR = GeneratorDef(
    id="universal-constructor",
    name="Universal Constructor",
    description="Builds stars from nothing.",
    produces=Currency.STARDUST,
    base_payout=5e15,
    base_charge_time=7200,  # 2 h
    base_cost=1e28,
    cost_growth=1.6,
)


ALL_GENERATORS: dict[str, GeneratorDef] = {
    g.id: g
    for g in [
        ASTEROID_MINER,
        COMET_CATCHER,
        GAS_HARVESTER,
        DYSON_SPHERE_FRAGMENT,
        NEBULA_REFINERY,
        BLACK_HOLE_HARVESTER,
        REALITY_WARPER,
        UNIVERSAL_CONSTRUCTOR,
    ]
}
