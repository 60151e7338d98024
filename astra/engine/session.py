"""Game session — the single writer that owns the live game state.

Every tick and every command runs under one lock, so a reader never sees
a half-applied change.  Time is driven by ``advance``: it replays the fixed
100ms ticks that have come due since the last call, fires the chart
samplers, and applies collect payouts whose delay has passed.  A background
ticker thread can call ``advance`` on a schedule; otherwise callers (the
web layer) advance before every read or command.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Optional

from astra.data.balance import BALANCE
from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.engine.bonuses import Bonuses, compute_bonuses
from astra.engine.economy import (
    ItemKind,
    PendingCredit,
    apply_credit,
    click_star,
    collect_artifact,
    dynamic_event_click,
    purchase,
)
from astra.engine.game_state import GameState, new_game_state
from astra.engine.offline import OfflineGains, claim_offline_gains, compute_offline_gains
from astra.engine.prestige import (
    activate_challenge,
    perform_ascension,
    perform_prestige,
    purchase_ascension_upgrade,
)
from astra.engine.rates import DerivedRates, compute_derived
from astra.engine.research import purchase_research
from astra.engine.save import delete_save, export_analytics, load_game, save_game
from astra.engine.spells import cast_spell
from astra.engine.tick import sample_history, sample_stats, tick

logger = logging.getLogger(__name__)

LANGUAGES = ("en", "pl")
THEMES = ("cosmic", "wizarding")


class GameSession:
    """Owns one ``GameState`` and serialises every mutation of it."""

    def __init__(self, state: Optional[GameState] = None,
                 catalog: Catalog = DEFAULT_CATALOG,
                 save_path: Optional[Path] = None,
                 now: Optional[float] = None) -> None:
        now = time.time() if now is None else now
        self.catalog = catalog
        self.state: GameState = state if state is not None else new_game_state(catalog)
        self.save_path = save_path
        self.offline_gains: Optional[OfflineGains] = None
        self._lock = threading.RLock()
        self._last_tick = now
        self._next_history = now + BALANCE.timing.history_interval_s
        self._next_stats = now + BALANCE.timing.stats_interval_s
        self._pending_credits: list[PendingCredit] = []
        self._notifications: list[str] = []
        self._ticker: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @classmethod
    def load(cls, save_path: Optional[Path] = None,
             catalog: Catalog = DEFAULT_CATALOG,
             now: Optional[float] = None) -> "GameSession":
        """Resume from disk (or start fresh) and stage any offline gains."""
        now = time.time() if now is None else now
        state = load_game(save_path, catalog)
        session = cls(state=state, catalog=catalog, save_path=save_path, now=now)
        if state is not None:
            session.offline_gains = compute_offline_gains(state, now, catalog)
            if session.offline_gains is not None:
                session._notifications.append("offline_gains")
        return session

    # ── Time ─────────────────────────────────────────────────────

    def advance(self, now: Optional[float] = None) -> list[str]:
        """Catch the simulation up to ``now``.  Returns new notifications."""
        with self._lock:
            before = len(self._notifications)
            self._advance(time.time() if now is None else now)
            return self._notifications[before:]

    def _advance(self, now: float) -> None:
        timing = BALANCE.timing
        interval = timing.tick_interval_s

        elapsed = now - self._last_tick
        if elapsed > timing.max_catch_up_s:
            # Long stalls are not replayed tick by tick
            self._last_tick = now - timing.max_catch_up_s
        while now - self._last_tick >= interval - 1e-9:
            self._last_tick += interval
            self._apply_due_credits(self._last_tick)
            self._notifications.extend(
                tick(self.state, interval, self._last_tick, self.catalog)
            )
        self._apply_due_credits(now)

        if now >= self._next_history:
            sample_history(self.state, now)
            self._next_history = max(self._next_history + timing.history_interval_s, now)
        if now >= self._next_stats:
            sample_stats(self.state, self.catalog, now)
            self._next_stats = max(self._next_stats + timing.stats_interval_s, now)

    def _apply_due_credits(self, now: float) -> None:
        due = [c for c in self._pending_credits if c.due_at <= now]
        if not due:
            return
        self._pending_credits = [c for c in self._pending_credits if c.due_at > now]
        for credit in due:
            apply_credit(self.state, credit)

    def start(self) -> None:
        """Run ``advance`` every tick interval on a background thread."""
        if self._ticker is not None and self._ticker.is_alive():
            return
        self._stop.clear()
        self._ticker = threading.Thread(target=self._run, name="astra-ticker", daemon=True)
        self._ticker.start()

    def stop(self) -> None:
        """Stop the background ticker.  Pending collect credits still apply on the next advance."""
        self._stop.set()
        if self._ticker is not None:
            self._ticker.join(timeout=1.0)
            self._ticker = None

    def _run(self) -> None:
        interval = BALANCE.timing.tick_interval_s
        while not self._stop.wait(interval):
            self.advance()

    # ── Projections ──────────────────────────────────────────────

    def bonuses(self) -> Bonuses:
        with self._lock:
            return compute_bonuses(self.state, self.catalog)

    def derived(self, now: Optional[float] = None) -> DerivedRates:
        with self._lock:
            return compute_derived(self.state, self.catalog, now=now)

    def drain_notifications(self) -> list[str]:
        with self._lock:
            notes = list(self._notifications)
            self._notifications.clear()
            return notes

    def pending_credits(self) -> list[PendingCredit]:
        with self._lock:
            return list(self._pending_credits)

    # ── Commands ─────────────────────────────────────────────────

    def click_star(self, now: Optional[float] = None) -> float:
        with self._lock:
            now = self._now(now)
            return click_star(self.state, self.catalog, now)

    def click_dynamic_event(self, now: Optional[float] = None) -> float:
        with self._lock:
            now = self._now(now)
            return dynamic_event_click(self.state, self.catalog, now)

    def purchase(self, item_id: str, kind: ItemKind, now: Optional[float] = None) -> bool:
        with self._lock:
            now = self._now(now)
            return purchase(self.state, item_id, kind, self.catalog, now)

    def collect(self, generator_id: str, now: Optional[float] = None) -> Optional[PendingCredit]:
        """Collect a generator; the payout lands after the credit delay.

        Refused while an earlier collect of the same generator is still
        waiting to be credited.
        """
        with self._lock:
            now = self._now(now)
            if any(c.generator_id == generator_id for c in self._pending_credits):
                logger.debug("collect rejected: %r credit still pending", generator_id)
                return None
            credit = collect_artifact(self.state, generator_id, now)
            if credit is not None:
                self._pending_credits.append(credit)
            return credit

    def cast_spell(self, spell_id: str, now: Optional[float] = None) -> bool:
        with self._lock:
            now = self._now(now)
            return cast_spell(self.state, spell_id, self.catalog, now)

    def prestige(self, now: Optional[float] = None) -> float:
        with self._lock:
            now = self._now(now)
            return perform_prestige(self.state, self.catalog, now)

    def ascend(self, now: Optional[float] = None) -> float:
        with self._lock:
            now = self._now(now)
            return perform_ascension(self.state, self.catalog, now)

    def purchase_research(self, research_id: str, now: Optional[float] = None) -> bool:
        with self._lock:
            now = self._now(now)
            return purchase_research(self.state, research_id, self.catalog, now)

    def purchase_ascension_upgrade(self, upgrade_id: str, now: Optional[float] = None) -> bool:
        with self._lock:
            now = self._now(now)
            return purchase_ascension_upgrade(self.state, upgrade_id, self.catalog, now)

    def activate_challenge(self, challenge_id: Optional[str],
                           now: Optional[float] = None) -> bool:
        with self._lock:
            now = self._now(now)
            return activate_challenge(self.state, challenge_id, self.catalog, now)

    def claim_offline_gains(self, now: Optional[float] = None) -> Optional[OfflineGains]:
        with self._lock:
            now = self._now(now)
            gains = self.offline_gains
            if gains is None:
                return None
            claim_offline_gains(self.state, gains, now)
            self.offline_gains = None
            return gains

    # ── Settings ─────────────────────────────────────────────────

    def toggle_compact_mode(self) -> bool:
        with self._lock:
            self.state.settings.compact_mode = not self.state.settings.compact_mode
            return self.state.settings.compact_mode

    def toggle_auto_collector(self) -> bool:
        with self._lock:
            settings = self.state.settings
            settings.auto_collector_active = not settings.auto_collector_active
            return settings.auto_collector_active

    def set_language(self, language: str) -> bool:
        if language not in LANGUAGES:
            return False
        with self._lock:
            self.state.settings.language = language
            return True

    def set_theme(self, theme: str) -> bool:
        if theme not in THEMES:
            return False
        with self._lock:
            self.state.settings.theme = theme
            return True

    # ── Persistence ──────────────────────────────────────────────

    def save(self, now: Optional[float] = None) -> bool:
        with self._lock:
            return save_game(self.state, self.save_path, now)

    def reset(self, now: Optional[float] = None) -> None:
        """Wipe all progress, including the save file."""
        with self._lock:
            now = time.time() if now is None else now
            self.state = new_game_state(self.catalog)
            self.state.log_event("GAME_RESET", {}, now)
            self.offline_gains = None
            self._pending_credits.clear()
            self._last_tick = now
            delete_save(self.save_path)
            logger.info("game reset")

    def export_analytics(self) -> str:
        with self._lock:
            return export_analytics(self.state)

    def _now(self, now: Optional[float]) -> float:
        now = time.time() if now is None else now
        self._advance(now)
        return now
