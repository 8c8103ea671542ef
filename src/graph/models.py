"""Dependency and circular-dependency records shared by the graph modules."""

from __future__ import annotations

from dataclasses import dataclass, field

from hclast.nodes import SourceRange


@dataclass(frozen=True)
class Dependency:
    """Module ``from_module`` reads an output of module ``to_module``."""

    from_module: str
    to_module: str
    range: SourceRange = field(default_factory=SourceRange)


@dataclass(frozen=True)
class CircularDependency:
    """One edge of a detected cycle.

    ``cycle_path`` is empty for two-module cycles and holds the rendered
    cycle (``a → b → c → a``) for longer ones.
    """

    module_a: str
    module_b: str
    range: SourceRange = field(default_factory=SourceRange)
    cycle_path: str = ""


__all__ = ["CircularDependency", "Dependency"]
