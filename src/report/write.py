"""Rendering of check results and dependency graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

from report.models import (
    CheckReport,
    ConfigurationGraphRecord,
    EdgeRecord,
    GraphReport,
    IssueRecord,
    RangeRecord,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hclast.nodes import SourceRange
    from lint.run import CheckResult, ConfigurationGraph
    from lint.runner import Issue
    from pydantic import BaseModel
    from rules.ruleset import RuleSet


def _range_record(source_range: SourceRange) -> RangeRecord:
    return RangeRecord(
        filename=source_range.filename,
        start_line=source_range.start.line,
        start_column=source_range.start.column,
        end_line=source_range.end.line,
        end_column=source_range.end.column,
    )


def format_issue_text(issue: Issue) -> str:
    """Render ``file:line:col: severity: message (rule)``."""
    return (
        f"{issue.location()}: {issue.severity.value}: {issue.message} ({issue.rule})"
    )


def build_check_report(result: CheckResult, ruleset: RuleSet) -> CheckReport:
    return CheckReport(
        ruleset=ruleset.name,
        version=ruleset.version,
        rules=list(result.rules),
        files=list(result.files),
        issues=[
            IssueRecord(
                rule=issue.rule,
                severity=issue.severity.value,
                message=issue.message,
                range=_range_record(issue.range),
            )
            for issue in result.issues
        ],
    )


def build_graph_report(graphs: Sequence[ConfigurationGraph]) -> GraphReport:
    return GraphReport(
        configurations=[
            ConfigurationGraphRecord(
                directory=graph.directory,
                modules=list(graph.modules),
                edges=[
                    EdgeRecord(
                        source=dep.from_module,
                        target=dep.to_module,
                        range=_range_record(dep.range),
                    )
                    for dep in graph.dependencies
                ],
                cycles=[list(cycle) for cycle in graph.cycles],
            )
            for graph in graphs
        ]
    )


def format_edge_list(graphs: Sequence[ConfigurationGraph]) -> list[str]:
    """Render one ``directory: source -> target`` line per dependency."""
    return [
        f"{graph.directory}: {dep.from_module} -> {dep.to_module}"
        for graph in graphs
        for dep in graph.dependencies
    ]


def dumps_json(model: BaseModel) -> bytes:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(model.model_dump(), option=opts)


__all__ = [
    "build_check_report",
    "build_graph_report",
    "dumps_json",
    "format_edge_list",
    "format_issue_text",
]
