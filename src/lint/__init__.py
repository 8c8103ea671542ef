"""Running rules against configuration files."""

from lint.run import CheckResult, build_configuration_graphs, run_checks
from lint.runner import FileRunner, Issue

__all__ = [
    "CheckResult",
    "FileRunner",
    "Issue",
    "build_configuration_graphs",
    "run_checks",
]
