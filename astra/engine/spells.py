"""Spellcasting — spend mana for a timed click boost or an instant charge."""

from __future__ import annotations

import logging
from typing import Optional

from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.data.spells import SpellEffectKind
from astra.engine.game_state import ActiveSpellEffect, GameState

logger = logging.getLogger(__name__)


def grant_spells(state: GameState, catalog: Catalog = DEFAULT_CATALOG) -> None:
    """Give the full spellbook (idempotent)."""
    for sid in catalog.spells:
        if sid not in state.spells:
            state.spells.append(sid)


def cast_spell(state: GameState, spell_id: str, catalog: Catalog = DEFAULT_CATALOG,
               now: Optional[float] = None) -> bool:
    """Cast a spell.  Spells are never consumed, only mana is.

    A click boost replaces any running copy of itself (duration restarts,
    it does not stack); an instant charge fills every generator.
    """
    spell = catalog.spells.get(spell_id)
    if spell is None or state.mana < spell.mana_cost:
        logger.debug("cast rejected: %r (mana %.1f)", spell_id, state.mana)
        return False

    state.mana -= spell.mana_cost
    effect = spell.effect
    if effect.kind == SpellEffectKind.CLICK_POWER_BOOST:
        state.active_spell_effects = [
            e for e in state.active_spell_effects if e.spell_id != spell_id
        ]
        state.active_spell_effects.append(
            ActiveSpellEffect(spell_id=spell_id, remaining_s=effect.duration_s)
        )
    elif effect.kind == SpellEffectKind.INSTANT_CHARGE:
        for gen in state.generators:
            gen.charge_timer = gen.base_charge_time

    state.log_event("CAST_SPELL", {"spellId": spell_id}, now)
    return True
