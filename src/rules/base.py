"""Rule and runner interfaces shared by all rules."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from hclast.nodes import HclFile, SourceRange


class Severity(str, Enum):
    """How seriously an issue should be taken."""

    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


class Rule(Protocol):
    """A check run against the parsed configuration files."""

    @property
    def name(self) -> str:
        """Stable rule name used for enabling and configuration lookup."""
        ...

    @property
    def enabled(self) -> bool:
        """Whether the rule runs when configuration does not mention it."""
        ...

    @property
    def severity(self) -> Severity: ...

    def check(self, runner: Runner) -> None: ...


class Runner(Protocol):
    """Host-side access to files and issue delivery."""

    def get_files(self) -> dict[str, HclFile]: ...

    def emit_issue(self, rule: Rule, message: str, issue_range: SourceRange) -> None:
        """Deliver one issue. Any exception raised aborts the rule's check."""
        ...


__all__ = ["Rule", "Runner", "Severity"]
