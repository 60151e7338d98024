"""Catalog — the static item definitions a game is played with.

Engine functions take a ``Catalog`` so tests and alternative rule sets can
supply their own items; ``DEFAULT_CATALOG`` is the shipped game.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from astra.data.ascension_upgrades import ASCENSION_TREE, AscensionEffectKind, AscensionUpgrade
from astra.data.challenges import ALL_CHALLENGES, Challenge
from astra.data.generators import ALL_GENERATORS, GeneratorDef
from astra.data.milestones import MILESTONES, Milestone
from astra.data.research import RESEARCH_TREE, ResearchEffectKind, ResearchItem
from astra.data.spells import ALL_SPELLS, Spell
from astra.data.upgrades import ALL_UPGRADES, UpgradeDef


class CatalogError(ValueError):
    """Raised when a catalog references unknown ids or has a dependency cycle."""


@dataclass(frozen=True)
class Catalog:
    upgrades: dict[str, UpgradeDef] = field(default_factory=lambda: dict(ALL_UPGRADES))
    generators: dict[str, GeneratorDef] = field(default_factory=lambda: dict(ALL_GENERATORS))
    research: dict[str, ResearchItem] = field(default_factory=lambda: dict(RESEARCH_TREE))
    ascension_upgrades: dict[str, AscensionUpgrade] = field(
        default_factory=lambda: dict(ASCENSION_TREE)
    )
    challenges: dict[str, Challenge] = field(default_factory=lambda: dict(ALL_CHALLENGES))
    spells: dict[str, Spell] = field(default_factory=lambda: dict(ALL_SPELLS))
    milestones: dict[str, Milestone] = field(default_factory=lambda: dict(MILESTONES))

    def validate(self) -> None:
        """Check cross references and that both dependency graphs are acyclic."""
        _check_keys("upgrade", self.upgrades)
        _check_keys("generator", self.generators)
        _check_keys("research", self.research)
        _check_keys("ascension upgrade", self.ascension_upgrades)
        _check_keys("challenge", self.challenges)
        _check_keys("spell", self.spells)
        _check_keys("milestone", self.milestones)

        for item in self.research.values():
            effect = item.effect
            if (effect.kind == ResearchEffectKind.GENERATOR_MULTIPLIER
                    and effect.generator_id not in self.generators):
                raise CatalogError(
                    f"research {item.id!r} boosts unknown generator {effect.generator_id!r}"
                )

        effects = [u.effect for u in self.ascension_upgrades.values()]
        effects += [c.reward for c in self.challenges.values()]
        for effect in effects:
            if (effect.kind == AscensionEffectKind.STARTING_UPGRADE_LEVEL
                    and effect.upgrade_id not in self.upgrades):
                raise CatalogError(f"starting level for unknown upgrade {effect.upgrade_id!r}")

        _check_dag("research", {k: v.dependencies for k, v in self.research.items()})
        _check_dag(
            "ascension upgrade",
            {k: v.dependencies for k, v in self.ascension_upgrades.items()},
        )


def _check_keys(kind: str, items: dict) -> None:
    for key, item in items.items():
        if key != item.id:
            raise CatalogError(f"{kind} registered as {key!r} has id {item.id!r}")


def _check_dag(kind: str, graph: dict[str, tuple[str, ...]]) -> None:
    """Reject unknown prerequisites and cycles (iterative three-colour DFS)."""
    for node, deps in graph.items():
        for dep in deps:
            if dep not in graph:
                raise CatalogError(f"{kind} {node!r} depends on unknown {dep!r}")

    done: set[str] = set()
    for root in graph:
        if root in done:
            continue
        on_path: set[str] = {root}
        stack: list[tuple[str, int]] = [(root, 0)]
        while stack:
            node, idx = stack[-1]
            deps = graph[node]
            if idx < len(deps):
                stack[-1] = (node, idx + 1)
                dep = deps[idx]
                if dep in on_path:
                    raise CatalogError(f"{kind} dependency cycle through {dep!r}")
                if dep not in done:
                    on_path.add(dep)
                    stack.append((dep, 0))
            else:
                stack.pop()
                on_path.discard(node)
                done.add(node)


DEFAULT_CATALOG = Catalog()
DEFAULT_CATALOG.validate()
