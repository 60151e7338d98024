"""Milestones — one-shot achievements checked every tick.

``requirement`` is a predicate over the game state; ``reward`` applies the
completion bonus in place.  The tick engine marks the milestone completed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from astra.data.upgrades import Currency

if TYPE_CHECKING:
    from astra.engine.game_state import GameState


@dataclass(frozen=True)
class Milestone:
    id: str
    description: str
    reward_description: str
    requirement: Callable[[GameState], bool]
    reward: Optional[Callable[[GameState], None]] = None


def _raw_stardust_rate(state: GameState) -> float:
    # Unboosted: the milestone tracks generator ownership, not multipliers
    return sum(
        gen.count * gen.base_payout / gen.base_charge_time
        for gen in state.generators
        if gen.produces == Currency.STARDUST
    )


def _award_stardust(amount: float) -> Callable[[GameState], None]:
    def award(state: GameState) -> None:
        state.stardust += amount
    return award


MILESTONES: dict[str, Milestone] = {
    m.id: m
    for m in [
        Milestone(
            id="stardust-1k",
            description="Hold 1,000 stardust",
            reward_description="+100 stardust",
            requirement=lambda s: s.stardust >= 1000,
            reward=_award_stardust(100),
        ),
        Milestone(
            id="sps-10",
            description="Reach 10 stardust per second from generators",
            reward_description="Bragging rights",
            requirement=lambda s: _raw_stardust_rate(s) >= 10,
        ),
        Milestone(
            id="first-prestige",
            description="Prestige for the first time",
            reward_description="Unlocks the spellbook",
            requirement=lambda s: s.prestiges >= 1,
        ),
        Milestone(
            id="first-ascension",
            description="Ascend for the first time",
            reward_description="Unlocks the ascension tree",
            requirement=lambda s: s.ascensions >= 1,
        ),
    ]
}
