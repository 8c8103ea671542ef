"""Module dependency graph construction and cycle detection."""

from graph.algos import ModuleGraph, detect_circular_dependencies, find_cycles
from graph.builder import build_dependencies, collect_modules
from graph.models import CircularDependency, Dependency
from graph.references import find_module_references

__all__ = [
    "CircularDependency",
    "Dependency",
    "ModuleGraph",
    "build_dependencies",
    "collect_modules",
    "detect_circular_dependencies",
    "find_cycles",
    "find_module_references",
]
