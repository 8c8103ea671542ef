"""Run rules over a directory tree of configurations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import groupby
from typing import TYPE_CHECKING

from graph.algos import ModuleGraph, find_cycles
from graph.builder import build_dependencies, collect_modules
from hclast.treesitter_hcl import parse_hcl_file
from lint.runner import FileRunner, Issue
from rules.config import load_config
from rules.ruleset import BUILTIN_RULESET, select_rules
from scan.files import find_terraform_files
from utils import config_directory, relative_name

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from graph.models import Dependency
    from hclast.nodes import HclFile
    from rules.config import ModcycleConfig
    from rules.ruleset import RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    files: tuple[str, ...] = field(default_factory=tuple)
    rules: tuple[str, ...] = field(default_factory=tuple)
    issues: tuple[Issue, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.issues


@dataclass(frozen=True)
class ConfigurationGraph:
    """Module dependency graph of one configuration directory."""

    directory: str
    modules: tuple[str, ...]
    dependencies: tuple[Dependency, ...]
    cycles: tuple[tuple[str, ...], ...]


def load_files(root: Path, config: ModcycleConfig) -> dict[str, HclFile]:
    """Read and parse every configuration file under ``root``.

    Raises:
        OSError: If a discovered file cannot be read.
    """
    files: dict[str, HclFile] = {}
    for file_path in find_terraform_files(
        root,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        name = relative_name(file_path, root)
        files[name] = parse_hcl_file(file_path, name)
    logger.debug("Loaded %d file(s) from %s", len(files), root)
    return files


def group_by_directory(files: dict[str, HclFile]) -> dict[str, dict[str, HclFile]]:
    """Split files into configurations, one per directory, sorted by directory."""
    names = sorted(files, key=lambda name: (config_directory(name), name))
    return {
        directory: {name: files[name] for name in group}
        for directory, group in groupby(names, key=config_directory)
    }


def run_checks(
    root: Path,
    *,
    config: ModcycleConfig | None = None,
    enable_rules: Iterable[str] = (),
    ruleset: RuleSet = BUILTIN_RULESET,
) -> CheckResult:
    """Run the selected rules over each configuration directory under ``root``.

    Issues are returned per directory in sorted order and, within a
    directory, in the order rules emitted them.
    """
    if config is None:
        config = load_config(root)

    rules = select_rules(ruleset, config, enable_rules)
    if not rules:
        logger.info("No rules enabled; nothing to check")
        return CheckResult()

    files = load_files(root, config)

    issues: list[Issue] = []
    for directory, directory_files in group_by_directory(files).items():
        runner = FileRunner(files=directory_files)
        for rule in rules:
            logger.debug("Running %s on %s", rule.name, directory)
            rule.check(runner)
        issues.extend(runner.issues)

    return CheckResult(
        files=tuple(files),
        rules=tuple(rule.name for rule in rules),
        issues=tuple(issues),
    )


def build_configuration_graphs(
    root: Path,
    *,
    config: ModcycleConfig | None = None,
) -> list[ConfigurationGraph]:
    """Build the module dependency graph of each configuration directory."""
    if config is None:
        config = load_config(root)

    graphs: list[ConfigurationGraph] = []
    for directory, directory_files in group_by_directory(
        load_files(root, config)
    ).items():
        modules = collect_modules(directory_files)
        if not modules:
            continue
        dependencies = build_dependencies(directory_files, modules)
        cycles = find_cycles(ModuleGraph.from_dependencies(dependencies))
        graphs.append(
            ConfigurationGraph(
                directory=directory,
                modules=tuple(sorted(modules)),
                dependencies=tuple(dependencies),
                cycles=tuple(cycles),
            )
        )
    return graphs


__all__ = [
    "CheckResult",
    "ConfigurationGraph",
    "build_configuration_graphs",
    "group_by_directory",
    "load_files",
    "run_checks",
]
