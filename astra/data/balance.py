"""Balance constants — all tuning knobs in one place.

Tweak these to adjust game feel, pacing, and difficulty curves.
All costs follow: base_cost * (cost_growth ^ times_purchased)
Timestamps and durations are in seconds.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TimingBalance:
    """Tick and chart sampling intervals."""

    # Fixed simulation step
    tick_interval_s: float = 0.1
    # Resource-over-time chart
    history_interval_s: float = 5.0
    max_history_points: int = 100
    # Rate-over-time chart (30 points every 2s = one minute of data)
    stats_interval_s: float = 2.0
    max_stats_points: int = 30
    # Delay between a manual collect and its credit (matches the fly-in animation)
    collect_credit_delay_s: float = 0.5
    # Longest gap a single catch-up call will simulate tick-by-tick
    max_catch_up_s: float = 60.0


@dataclass(frozen=True)
class PrestigeBalance:
    """Tuning for Prestige (antimatter) and Ascension (singularity essence)."""

    # Lifetime stardust needed to prestige (1 quadrillion)
    prestige_requirement: float = 1e15
    # Antimatter = floor(base * sqrt(total_ever / divisor)) * multipliers
    antimatter_base: float = 150.0
    antimatter_divisor: float = 1e15
    # Prestige multiplier: 1 + antimatter * per
    antimatter_multiplier_per: float = 0.02

    # Antimatter needed to ascend
    ascension_requirement: float = 1e6
    # Essence = floor(sqrt(antimatter / divisor))
    essence_divisor: float = 1000.0


@dataclass(frozen=True)
class ManaBalance:
    """Mana pool, unlocked by the first prestige or ascension."""

    initial_max_mana: float = 100.0
    regen_per_s: float = 1.0


@dataclass(frozen=True)
class ClickBalance:
    """Critical hits, combo and frenzy."""

    critical_chance: float = 0.02
    critical_multiplier: float = 10.0

    # Combo: max 1s between clicks, +1% click power per point, capped at 100 points
    combo_timeout_s: float = 1.0
    combo_multiplier_per_click: float = 0.01
    combo_max_count: int = 100

    # Frenzy: clicks in the trailing window past the threshold double the
    # multiplier every tier_size clicks
    frenzy_cpm_threshold: int = 300
    frenzy_cpm_tier_size: int = 50
    frenzy_window_s: float = 60.0


@dataclass(frozen=True)
class EventBalance:
    """Tuning for the clickable dynamic event (shooting star)."""

    spawn_chance_per_tick: float = 0.005
    duration_s: float = 15.0
    # Reward = this many seconds of average stardust/sec
    reward_sps_multiple: float = 60.0
    # Spawn position in percent of the play area, velocity in percent/sec
    position_min: float = 10.0
    position_span: float = 80.0
    velocity_span: float = 20.0


@dataclass(frozen=True)
class OfflineBalance:
    """Tuning for offline-progress reconciliation."""

    min_gap_s: float = 60.0
    cap_hours: float = 8.0

    @property
    def cap_s(self) -> float:
        return self.cap_hours * 3600.0


@dataclass(frozen=True)
class EconomyBalance:
    """Number formatting."""

    # Large number formatting thresholds
    suffixes: tuple[tuple[float, str], ...] = (
        (1e3, "K"),
        (1e6, "M"),
        (1e9, "B"),
        (1e12, "T"),
        (1e15, "Qa"),
        (1e18, "Qi"),
        (1e21, "Sx"),
        (1e24, "Sp"),
        (1e27, "Oc"),
        (1e30, "No"),
    )


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    timing: TimingBalance = field(default_factory=TimingBalance)
    prestige: PrestigeBalance = field(default_factory=PrestigeBalance)
    mana: ManaBalance = field(default_factory=ManaBalance)
    click: ClickBalance = field(default_factory=ClickBalance)
    events: EventBalance = field(default_factory=EventBalance)
    offline: OfflineBalance = field(default_factory=OfflineBalance)
    economy: EconomyBalance = field(default_factory=EconomyBalance)


# Singleton — import this everywhere
BALANCE = GameBalance()
