"""Transitive expansion of a module set over the registry's edges."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import TYPE_CHECKING

from logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from changes.model import Module, Snapshot
    from graph.registry import Registry, RegistryEntry

logger = get_logger("graph.closure")


class Direction(str, Enum):
    """Edge direction followed while expanding a module set."""

    TOWARD_DEPENDENCIES = "toward-dependencies"
    TOWARD_DEPENDENTS = "toward-dependents"


def select_direction(
    include_dependencies: bool,
    include_dependents: bool,
) -> Direction | None:
    """Pick the traversal direction for the requested flags.

    Dependencies take precedence: when both are requested, dependents are
    not evaluated at all.
    """
    if include_dependencies:
        return Direction.TOWARD_DEPENDENCIES
    if include_dependents:
        return Direction.TOWARD_DEPENDENTS
    return None


def _neighbors(module: Module, direction: Direction, registry: Registry) -> list[RegistryEntry]:
    if direction is Direction.TOWARD_DEPENDENCIES:
        return registry.dependencies_of(module.declared_dependencies)
    return registry.dependents_of(module.identity)


def expand_closure(
    seeds: Iterable[Module],
    direction: Direction,
    registry: Registry,
    resolve: Callable[[RegistryEntry], Module],
) -> Snapshot:
    """Return the reflexive-transitive closure of ``seeds``.

    Breadth-first worklist traversal. ``visited`` is keyed by identity and is
    the only thing consulted to skip a module; ``discovered`` only avoids
    resolving the same registry entry twice. Registry neighbors are turned
    into modules through ``resolve`` so they carry a fresh marker for the
    revision under inspection.

    Termination holds for cyclic graphs: the registry is finite and no
    identity is expanded twice.
    """
    seed_list = list(seeds)
    worklist: deque[Module] = deque(seed_list)
    discovered: set[str] = {module.identity for module in worklist}
    visited: set[str] = set()
    closure: list[Module] = []

    while worklist:
        module = worklist.popleft()
        if module.identity in visited:
            continue
        visited.add(module.identity)
        closure.append(module)

        for entry in _neighbors(module, direction, registry):
            if entry.identity in discovered:
                continue
            discovered.add(entry.identity)
            worklist.append(resolve(entry))

    logger.debug(
        "%s closure expanded %d seed(s) to %d module(s)",
        direction.value,
        len(seed_list),
        len(closure),
    )
    return frozenset(closure)


__all__ = ["Direction", "expand_closure", "select_direction"]
