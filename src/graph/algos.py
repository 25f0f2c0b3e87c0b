"""Graph algorithms over module identities."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def build_dependency_graph(
    declared: Mapping[str, Iterable[str]],
) -> dict[str, set[str]]:
    """Build a dependency graph restricted to known nodes.

    Args:
        declared: Mapping of module identity to the identities it declares
            as dependencies

    Returns:
        Dictionary where keys are module identities and values are the sets
        of known identities they depend on. References to identities that
        are not keys of ``declared`` are dropped.
    """
    graph: dict[str, set[str]] = {node: set() for node in declared}

    for node, dependencies in declared.items():
        for dependency in dependencies:
            if dependency in graph:
                graph[node].add(dependency)

    return graph


def reverse_graph(graph: Mapping[str, set[str]]) -> dict[str, set[str]]:
    """Invert edge direction: dependency -> set of its dependents."""
    reversed_graph: dict[str, set[str]] = defaultdict(set)
    for node in graph:
        reversed_graph.setdefault(node, set())
    for node, targets in graph.items():
        for target in targets:
            reversed_graph[target].add(node)
    return dict(reversed_graph)


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _strongconnect(node: str, graph: Mapping[str, set[str]], state: _TarjanState) -> None:
    state.indices[node] = state.index
    state.low_link[node] = state.index
    state.index += 1
    state.stack.append(node)
    state.on_stack.add(node)

    for neighbor in sorted(graph.get(node, set())):
        if neighbor not in state.indices:
            _strongconnect(neighbor, graph, state)
            state.low_link[node] = min(state.low_link[node], state.low_link[neighbor])
        elif neighbor in state.on_stack:
            state.low_link[node] = min(state.low_link[node], state.indices[neighbor])

    if state.low_link[node] == state.indices[node]:
        scc = _extract_scc(state, node)
        if len(scc) > 1 or node in graph.get(node, set()):
            state.sccs.append(sorted(scc))


def find_cycles(graph: Mapping[str, set[str]]) -> list[list[str]]:
    """Find dependency cycles using Tarjan's algorithm.

    Args:
        graph: Dictionary representing the graph

    Returns:
        List of cycles, each a sorted list of the identities taking part
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return state.sccs


__all__ = [
    "build_dependency_graph",
    "find_cycles",
    "reverse_graph",
]
