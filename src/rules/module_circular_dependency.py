"""Rule that reports circular references between module blocks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.algos import detect_circular_dependencies
from graph.builder import build_dependencies, collect_modules
from rules.base import Severity

if TYPE_CHECKING:
    from graph.models import CircularDependency
    from rules.base import Runner


def format_message(dep: CircularDependency) -> str:
    message = (
        "Circular dependency detected between modules: "
        f"{dep.module_a} ↔ {dep.module_b}"
    )
    if dep.cycle_path:
        message += f" (path: {dep.cycle_path})"
    return message


class ModuleCircularDependencyRule:
    """Reports modules whose inputs depend on each other's outputs."""

    @property
    def name(self) -> str:
        return "module_circular_dependency"

    @property
    def enabled(self) -> bool:
        return False

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    def check(self, runner: Runner) -> None:
        """Emit one issue per edge of every detected cycle."""
        files = runner.get_files()
        modules = collect_modules(files)
        dependencies = build_dependencies(files, modules)

        for dep in detect_circular_dependencies(dependencies):
            runner.emit_issue(self, format_message(dep), dep.range)


__all__ = ["ModuleCircularDependencyRule", "format_message"]
