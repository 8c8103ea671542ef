"""Cycle detection for module dependency graphs."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from graph.models import CircularDependency
from hclast.nodes import SourceRange

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from graph.models import Dependency

logger = logging.getLogger(__name__)

CYCLE_KEY_SEPARATOR = "→"
CYCLE_PATH_SEPARATOR = " → "


@dataclass
class ModuleGraph:
    """Adjacency view of module dependencies with sorted successor lists."""

    adjacency: dict[str, list[str]] = field(default_factory=dict)
    ranges: dict[tuple[str, str], SourceRange] = field(default_factory=dict)

    @classmethod
    def from_dependencies(cls, dependencies: Iterable[Dependency]) -> ModuleGraph:
        """Build the graph. Self-references are kept as one-module cycles."""
        successors: dict[str, set[str]] = defaultdict(set)
        ranges: dict[tuple[str, str], SourceRange] = {}

        for dep in dependencies:
            successors[dep.from_module].add(dep.to_module)
            ranges.setdefault((dep.from_module, dep.to_module), dep.range)

        adjacency = {module: sorted(targets) for module, targets in successors.items()}
        return cls(adjacency=adjacency, ranges=ranges)

    def modules(self) -> list[str]:
        """Modules with at least one outgoing edge, sorted."""
        return sorted(self.adjacency)

    def successors(self, module: str) -> list[str]:
        return self.adjacency.get(module, [])

    def has_edge(self, from_module: str, to_module: str) -> bool:
        return (from_module, to_module) in self.ranges

    def edge_range(self, from_module: str, to_module: str) -> SourceRange:
        return self.ranges.get((from_module, to_module), SourceRange())


def normalize_cycle(cycle: Sequence[str]) -> str:
    """Return a rotation-independent key for a cycle.

    The cycle is rotated to start at its lexicographically smallest member
    and each member is joined with a trailing separator.
    """
    if not cycle:
        return ""

    start = cycle.index(min(cycle))
    rotated = [*cycle[start:], *cycle[:start]]
    return "".join(f"{module}{CYCLE_KEY_SEPARATOR}" for module in rotated)


def format_cycle_path(cycle: Sequence[str]) -> str:
    """Render ``[a, b, c]`` as ``a → b → c → a``."""
    return CYCLE_PATH_SEPARATOR.join([*cycle, cycle[0]])


def find_cycle(
    module: str,
    graph: ModuleGraph,
    visited: set[str],
    path: tuple[str, ...] = (),
) -> tuple[str, ...] | None:
    """Depth-first search for the first cycle reachable from ``module``.

    ``path`` is the chain of modules on the current recursion stack. When the
    search reaches a module already on it, the cycle is the suffix of the
    path starting at that module. Successors are visited in sorted order, so
    the cycle returned is deterministic but not necessarily the shortest.
    """
    if module in path:
        return path[path.index(module) :]

    if module in visited:
        return None

    visited.add(module)
    next_path = (*path, module)

    for dep in graph.successors(module):
        cycle = find_cycle(dep, graph, visited, next_path)
        if cycle is not None:
            return cycle

    return None


def find_pairwise_cycles(
    graph: ModuleGraph, reported: set[str]
) -> list[tuple[str, str]]:
    """Find mutual references ``A → B → A`` not yet in ``reported``."""
    cycles: list[tuple[str, str]] = []
    for module in graph.modules():
        for dep in graph.successors(module):
            if not graph.has_edge(dep, module):
                continue
            key = normalize_cycle((module, dep))
            if key in reported:
                continue
            reported.add(key)
            cycles.append((module, dep))
    return cycles


def find_longer_cycles(
    graph: ModuleGraph, reported: set[str]
) -> list[tuple[str, ...]]:
    """Find at most one cycle per start module, skipping those in ``reported``."""
    cycles: list[tuple[str, ...]] = []
    for module in graph.modules():
        cycle = find_cycle(module, graph, set())
        if cycle is None:
            continue
        key = normalize_cycle(cycle)
        if key in reported:
            continue
        reported.add(key)
        cycles.append(cycle)
    return cycles


def find_cycles(graph: ModuleGraph) -> list[tuple[str, ...]]:
    """Find pairwise cycles, then longer cycles, each reported once."""
    reported: set[str] = set()
    cycles: list[tuple[str, ...]] = list(find_pairwise_cycles(graph, reported))
    cycles.extend(find_longer_cycles(graph, reported))
    for cycle in cycles:
        logger.debug("Cycle detected: %s", format_cycle_path(cycle))
    return cycles


def detect_circular_dependencies(
    dependencies: Iterable[Dependency],
) -> list[CircularDependency]:
    """Turn detected cycles into one record per reported edge.

    A two-module cycle yields a single record without a path. A longer cycle
    yields one record per edge (wrapping last to first), each carrying the
    full rendered cycle path.

    A self-reference is found by both passes: once as the pair ``a ↔ a``
    and once as the one-module cycle ``a → a``.
    """
    graph = ModuleGraph.from_dependencies(dependencies)
    circular: list[CircularDependency] = []

    for cycle in find_cycles(graph):
        if len(cycle) == 2:
            module_a, module_b = cycle
            circular.append(
                CircularDependency(
                    module_a=module_a,
                    module_b=module_b,
                    range=graph.edge_range(module_a, module_b),
                )
            )
            continue

        cycle_path = format_cycle_path(cycle)
        for index, module_a in enumerate(cycle):
            module_b = cycle[(index + 1) % len(cycle)]
            circular.append(
                CircularDependency(
                    module_a=module_a,
                    module_b=module_b,
                    range=graph.edge_range(module_a, module_b),
                    cycle_path=cycle_path,
                )
            )

    return circular


__all__ = [
    "CYCLE_KEY_SEPARATOR",
    "CYCLE_PATH_SEPARATOR",
    "ModuleGraph",
    "detect_circular_dependencies",
    "find_cycle",
    "find_cycles",
    "find_longer_cycles",
    "find_pairwise_cycles",
    "format_cycle_path",
    "normalize_cycle",
]
