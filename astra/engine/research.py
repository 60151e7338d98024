"""Research purchases."""

from __future__ import annotations

import logging
from typing import Optional

from astra.data.catalog import DEFAULT_CATALOG, Catalog
from astra.engine.game_state import GameState

logger = logging.getLogger(__name__)


def dependencies_met(dependencies: tuple[str, ...], owned: list[str]) -> bool:
    owned_set = set(owned)
    return all(dep in owned_set for dep in dependencies)


def can_research(state: GameState, research_id: str,
                 catalog: Catalog = DEFAULT_CATALOG) -> bool:
    item = catalog.research.get(research_id)
    if item is None or research_id in state.completed_research:
        return False
    if state.research_points < item.cost:
        return False
    return dependencies_met(item.dependencies, state.completed_research)


def purchase_research(state: GameState, research_id: str,
                      catalog: Catalog = DEFAULT_CATALOG,
                      now: Optional[float] = None) -> bool:
    """Complete a research node.  Returns True if successful."""
    if not can_research(state, research_id, catalog):
        logger.debug("research rejected: %r", research_id)
        return False

    item = catalog.research[research_id]
    state.research_points -= item.cost
    state.completed_research.append(research_id)
    state.log_event("PURCHASE_RESEARCH", {"researchId": research_id, "cost": item.cost}, now)
    return True
