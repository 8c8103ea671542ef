"""In-memory runner handing parsed files to rules and collecting issues."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hclast.nodes import HclFile, SourceRange
    from rules.base import Rule, Severity


@dataclass(frozen=True)
class Issue:
    rule: str
    severity: Severity
    message: str
    range: SourceRange

    def location(self) -> str:
        return self.range.location()


@dataclass
class FileRunner:
    """Runner over a fixed set of parsed files."""

    files: dict[str, HclFile] = field(default_factory=dict)
    issues: list[Issue] = field(default_factory=list)

    def get_files(self) -> dict[str, HclFile]:
        return dict(self.files)

    def emit_issue(self, rule: Rule, message: str, issue_range: SourceRange) -> None:
        self.issues.append(
            Issue(
                rule=rule.name,
                severity=rule.severity,
                message=message,
                range=issue_range,
            )
        )


__all__ = ["FileRunner", "Issue"]
