"""Game state — single source of truth for the current session."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional

from astra.data.balance import BALANCE
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.data.generators import GeneratorDef
from astra.data.upgrades import Currency, UpgradeDef


@dataclass
class Upgrade:
    """An upgrade template plus how many levels the player owns."""

    definition: UpgradeDef
    level: int = 0

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def power(self) -> float:
        return self.definition.power

    @property
    def base_cost(self) -> float:
        return self.definition.base_cost

    @property
    def cost_growth(self) -> float:
        return self.definition.cost_growth

    @property
    def currency(self) -> Currency:
        return self.definition.currency

    @property
    def owned(self) -> int:
        return self.level


@dataclass
class Generator:
    """A generator template plus count owned and the current charge."""

    definition: GeneratorDef
    count: int = 0
    charge_timer: float = 0.0   # 0 .. base_charge_time

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def produces(self) -> Currency:
        return self.definition.produces

    @property
    def base_payout(self) -> float:
        return self.definition.base_payout

    @property
    def base_charge_time(self) -> float:
        return self.definition.base_charge_time

    @property
    def base_cost(self) -> float:
        return self.definition.base_cost

    @property
    def cost_growth(self) -> float:
        return self.definition.cost_growth

    @property
    def currency(self) -> Currency:
        return self.definition.currency

    @property
    def owned(self) -> int:
        return self.count

    @property
    def is_charged(self) -> bool:
        return self.charge_timer >= self.base_charge_time


@dataclass
class ActiveSpellEffect:
    spell_id: str
    remaining_s: float


@dataclass
class DynamicEvent:
    """A clickable shooting star.  Position in percent, velocity in percent/sec."""

    id: int
    created_at: float
    x: float
    y: float
    vx: float
    vy: float


@dataclass
class Settings:
    compact_mode: bool = False
    language: str = "en"
    theme: str = "cosmic"
    auto_collector_active: bool = False


@dataclass
class HistorySample:
    time: float
    stardust: float
    nebula_gas: float


@dataclass
class StatsSample:
    time: float
    sps: float


@dataclass
class AnalyticsEvent:
    timestamp: float
    event_type: str
    payload: dict[str, Any]


def fresh_upgrades(catalog: Catalog = DEFAULT_CATALOG) -> list[Upgrade]:
    return [Upgrade(definition=u) for u in catalog.upgrades.values()]


def fresh_generators(catalog: Catalog = DEFAULT_CATALOG) -> list[Generator]:
    return [Generator(definition=g) for g in catalog.generators.values()]


def _history_buffer() -> deque[HistorySample]:
    return deque(maxlen=BALANCE.timing.max_history_points)


def _stats_buffer() -> deque[StatsSample]:
    return deque(maxlen=BALANCE.timing.max_stats_points)


@dataclass
class GameState:
    """Complete mutable state for one save slot."""

    # ── Resources ────────────────────────────────────────
    stardust: float = 0.0
    nebula_gas: float = 0.0
    antimatter: float = 0.0
    research_points: float = 0.0
    singularity_essence: float = 0.0
    total_stardust_ever: float = 0.0   # lifetime this prestige; gates Prestige

    # ── Reset counters ───────────────────────────────────
    prestiges: int = 0
    ascensions: int = 0

    # ── Mana (unlocked by first prestige/ascension) ──────
    mana: float = 0.0
    max_mana: float = BALANCE.mana.initial_max_mana

    # ── Owned items ──────────────────────────────────────
    upgrades: list[Upgrade] = field(default_factory=fresh_upgrades)
    generators: list[Generator] = field(default_factory=fresh_generators)
    spells: list[str] = field(default_factory=list)   # granted spell ids
    active_spell_effects: list[ActiveSpellEffect] = field(default_factory=list)

    # ── Unlock flags ─────────────────────────────────────
    milestones: dict[str, bool] = field(default_factory=dict)
    completed_research: list[str] = field(default_factory=list)
    purchased_ascension_upgrades: list[str] = field(default_factory=list)
    active_challenge: Optional[str] = None
    completed_challenges: list[str] = field(default_factory=list)

    # ── Session-local (never persisted) ──────────────────
    dynamic_event: Optional[DynamicEvent] = None
    click_timestamps: deque[float] = field(default_factory=deque)
    click_combo: int = 0
    last_click_time: float = 0.0
    history: deque[HistorySample] = field(default_factory=_history_buffer)
    stats_history: deque[StatsSample] = field(default_factory=_stats_buffer)

    # ── Bookkeeping ──────────────────────────────────────
    analytics: list[AnalyticsEvent] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    last_save_timestamp: float = 0.0

    # ── Lookups ──────────────────────────────────────────

    def upgrade(self, upgrade_id: str) -> Optional[Upgrade]:
        for upgrade in self.upgrades:
            if upgrade.id == upgrade_id:
                return upgrade
        return None

    def generator(self, generator_id: str) -> Optional[Generator]:
        for gen in self.generators:
            if gen.id == generator_id:
                return gen
        return None

    # ── Ledger ───────────────────────────────────────────

    def balance(self, currency: Currency) -> float:
        if currency == Currency.STARDUST:
            return self.stardust
        return self.nebula_gas

    def credit(self, currency: Currency, amount: float) -> None:
        """Add ``amount`` of a currency.  Stardust also counts toward the lifetime total."""
        if amount <= 0:
            return
        if currency == Currency.STARDUST:
            self.stardust += amount
            self.total_stardust_ever += amount
        else:
            self.nebula_gas += amount

    def debit(self, currency: Currency, amount: float) -> None:
        # Float rounding on exact-balance purchases must not go negative
        if currency == Currency.STARDUST:
            self.stardust = max(0.0, self.stardust - amount)
        else:
            self.nebula_gas = max(0.0, self.nebula_gas - amount)

    @property
    def mana_unlocked(self) -> bool:
        return self.prestiges > 0 or self.ascensions > 0

    def log_event(self, event_type: str, payload: dict[str, Any] | None = None,
                  now: float | None = None) -> None:
        """Append to the analytics log.  Never pruned during a session."""
        self.analytics.append(AnalyticsEvent(
            timestamp=time.time() if now is None else now,
            event_type=event_type,
            payload=dict(payload or {}),
        ))


def new_game_state(catalog: Catalog = DEFAULT_CATALOG) -> GameState:
    """A fresh game built from ``catalog``'s templates."""
    return GameState(upgrades=fresh_upgrades(catalog), generators=fresh_generators(catalog))
