from __future__ import annotations

import orjson

from graph.models import Dependency
from hclast.nodes import SourcePos, SourceRange
from lint.run import CheckResult, ConfigurationGraph
from lint.runner import Issue
from report.models import SCHEMA_VERSION
from report.write import (
    build_check_report,
    build_graph_report,
    dumps_json,
    format_edge_list,
    format_issue_text,
)
from rules.base import Severity
from rules.ruleset import BUILTIN_RULESET


def _range(line: int) -> SourceRange:
    return SourceRange(
        filename="main.tf",
        start=SourcePos(line=line, column=3, byte=0),
        end=SourcePos(line=line, column=30, byte=27),
    )


def _issue() -> Issue:
    return Issue(
        rule="module_circular_dependency",
        severity=Severity.ERROR,
        message="Circular dependency detected between modules: a ↔ b",
        range=_range(3),
    )


def test_format_issue_text() -> None:
    assert format_issue_text(_issue()) == (
        "main.tf:3:3: error: Circular dependency detected between modules: "
        "a ↔ b (module_circular_dependency)"
    )


def test_format_issue_text_without_range() -> None:
    issue = Issue(rule="r", severity=Severity.WARNING, message="m", range=SourceRange())

    assert format_issue_text(issue) == "<unknown>: warning: m (r)"


def test_check_report_json_is_sorted_and_versioned() -> None:
    result = CheckResult(
        files=("main.tf",),
        rules=("module_circular_dependency",),
        issues=(_issue(),),
    )

    payload = dumps_json(build_check_report(result, BUILTIN_RULESET))
    decoded = orjson.loads(payload)

    assert decoded["schema_version"] == SCHEMA_VERSION
    assert decoded["version"] == BUILTIN_RULESET.version
    assert list(decoded) == sorted(decoded)
    assert decoded["issues"][0]["range"] == {
        "filename": "main.tf",
        "start_line": 3,
        "start_column": 3,
        "end_line": 3,
        "end_column": 30,
    }
    assert "a ↔ b" in payload.decode("utf-8")


def test_graph_report_and_edge_list() -> None:
    graph = ConfigurationGraph(
        directory="envs/prod",
        modules=("a", "b"),
        dependencies=(
            Dependency(from_module="a", to_module="b", range=_range(3)),
            Dependency(from_module="b", to_module="a", range=_range(7)),
        ),
        cycles=(("a", "b"),),
    )

    report = build_graph_report([graph])

    assert report.schema_version == SCHEMA_VERSION
    assert report.configurations[0].cycles == [["a", "b"]]
    assert [edge.range.start_line for edge in report.configurations[0].edges] == [3, 7]
    assert format_edge_list([graph]) == ["envs/prod: a -> b", "envs/prod: b -> a"]


def test_empty_graph_report() -> None:
    assert orjson.loads(dumps_json(build_graph_report([]))) == {
        "configurations": [],
        "schema_version": SCHEMA_VERSION,
    }
