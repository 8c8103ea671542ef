from __future__ import annotations

import textwrap

import pytest

from graph.models import CircularDependency
from hclast.nodes import HclFile, SourceRange
from hclast.treesitter_hcl import parse_hcl
from lint.runner import FileRunner
from rules.base import Rule, Severity
from rules.module_circular_dependency import (
    ModuleCircularDependencyRule,
    format_message,
)

PREFIX = "Circular dependency detected between modules: "


def _runner(**sources: str) -> FileRunner:
    files = {
        name: parse_hcl(textwrap.dedent(source).encode("utf-8"), name)
        for name, source in sources.items()
    }
    return FileRunner(files=files)


def _messages(runner: FileRunner) -> list[str]:
    ModuleCircularDependencyRule().check(runner)
    return [issue.message for issue in runner.issues]


def test_rule_metadata() -> None:
    rule = ModuleCircularDependencyRule()

    assert rule.name == "module_circular_dependency"
    assert rule.enabled is False
    assert rule.severity is Severity.ERROR


def test_no_circular_dependency_in_chain() -> None:
    runner = _runner(
        **{
            "main.tf": """\
            module "module_a" {
              source = "./modules/a"
              input  = "value"
            }

            module "module_b" {
              source = "./modules/b"
              input  = module.module_a.output
            }

            module "module_c" {
              source = "./modules/c"
              input  = module.module_b.output
            }
            """
        }
    )

    assert _messages(runner) == []


def test_no_circular_dependency_with_shared_target() -> None:
    runner = _runner(
        **{
            "main.tf": """\
            module "module_a" {
              source = "./modules/a"
            }

            module "module_b" {
              input = module.module_a.output
            }

            module "module_c" {
              input = module.module_a.output
            }

            module "module_d" {
              input = module.module_b.output
            }
            """
        }
    )

    assert _messages(runner) == []


@pytest.mark.parametrize(
    ("a_input", "b_input"),
    [
        ("module.module_b.output", "module.module_a.output"),
        ('"${module.module_b.output}-suffix"', "module.module_a.output"),
        ("{ value = module.module_b.output }", "{ value = module.module_a.output }"),
        ("[module.module_b.output]", "[module.module_a.output]"),
        ("lookup(module.module_b.map, \"k\")", "module.module_a.output"),
    ],
)
def test_direct_circular_dependency(a_input: str, b_input: str) -> None:
    runner = _runner(
        **{
            "main.tf": f"""\
            module "module_a" {{
              source = "./modules/a"
              input  = {a_input}
            }}

            module "module_b" {{
              source = "./modules/b"
              input  = {b_input}
            }}
            """
        }
    )

    assert _messages(runner) == [f"{PREFIX}module_a ↔ module_b"]


def test_direct_cycle_issue_points_at_referencing_attribute() -> None:
    runner = _runner(
        **{
            "main.tf": """\
            module "module_a" {
              source = "./modules/a"
              input  = module.module_b.output
            }

            module "module_b" {
              source = "./modules/b"
              input  = module.module_a.output
            }
            """
        }
    )

    ModuleCircularDependencyRule().check(runner)

    (issue,) = runner.issues
    assert issue.rule == "module_circular_dependency"
    assert issue.severity is Severity.ERROR
    assert issue.range.filename == "main.tf"
    assert issue.range.start.line == 3


def test_multiple_references_report_once() -> None:
    runner = _runner(
        **{
            "main.tf": """\
            module "module_a" {
              input1 = module.module_b.output
              input2 = module.module_b.output
            }

            module "module_b" {
              input = module.module_a.output
            }
            """
        }
    )

    assert _messages(runner) == [f"{PREFIX}module_a ↔ module_b"]


def test_declaration_order_does_not_change_result() -> None:
    runner = _runner(
        **{
            "main.tf": """\
            module "module_b" {
              input = module.module_a.output
            }

            module "module_a" {
              input = module.module_b.output
            }
            """
        }
    )

    assert _messages(runner) == [f"{PREFIX}module_a ↔ module_b"]


def test_three_module_cycle_reports_every_edge_with_path() -> None:
    runner = _runner(
        **{
            "main.tf": """\
            module "module_a" {
              input = module.module_b.output
            }

            module "module_b" {
              input = module.module_c.output
            }

            module "module_c" {
              input = module.module_a.output
            }
            """
        }
    )

    path = "(path: module_a → module_b → module_c → module_a)"
    assert _messages(runner) == [
        f"{PREFIX}module_a ↔ module_b {path}",
        f"{PREFIX}module_b ↔ module_c {path}",
        f"{PREFIX}module_c ↔ module_a {path}",
    ]


def test_cycle_across_files() -> None:
    runner = _runner(
        **{
            "b.tf": """\
            module "module_b" {
              input = module.module_a.output
            }
            """,
            "a.tf": """\
            module "module_a" {
              input = module.module_b.output
            }
            """,
        }
    )

    ModuleCircularDependencyRule().check(runner)

    (issue,) = runner.issues
    assert issue.message == f"{PREFIX}module_a ↔ module_b"
    assert issue.range.filename == "a.tf"


def test_self_reference_is_reported_twice() -> None:
    runner = _runner(
        **{
            "main.tf": """\
            module "module_a" {
              input = module.module_a.output
            }
            """
        }
    )

    assert _messages(runner) == [
        f"{PREFIX}module_a ↔ module_a",
        f"{PREFIX}module_a ↔ module_a (path: module_a → module_a)",
    ]
    assert [issue.location() for issue in runner.issues] == [
        "main.tf:2:3",
        "main.tf:2:3",
    ]


@pytest.mark.parametrize(
    "a_input",
    [
        '"%{ if true }${module.module_b.output}%{ endif }"',
        '"%{ if false }x%{ else }${module.module_b.output}%{ endif }"',
        '"%{ for name in module.module_b.names }${name}%{ endfor }"',
        '"%{ for name in var.names }${module.module_b.output}%{ endfor }"',
    ],
)
def test_reference_inside_template_directive(a_input: str) -> None:
    runner = _runner(
        **{
            "main.tf": f"""\
            module "module_a" {{
              input = {a_input}
            }}

            module "module_b" {{
              input = module.module_a.output
            }}
            """
        }
    )

    assert _messages(runner) == [f"{PREFIX}module_a ↔ module_b"]


def test_non_block_document_is_skipped() -> None:
    runner = FileRunner(files={"odd.tf": HclFile(name="odd.tf", body=None)})

    assert _messages(runner) == []


class _FailingRunner(FileRunner):
    def emit_issue(self, rule: Rule, message: str, issue_range: SourceRange) -> None:
        super().emit_issue(rule, message, issue_range)
        msg = "delivery failed"
        raise RuntimeError(msg)


def test_emit_failure_propagates_and_stops_delivery() -> None:
    source = """\
        module "module_a" {
          input = module.module_b.output
        }

        module "module_b" {
          input = module.module_c.output
        }

        module "module_c" {
          input = module.module_a.output
        }
        """
    runner = _FailingRunner(
        files={"main.tf": parse_hcl(textwrap.dedent(source).encode("utf-8"), "main.tf")}
    )

    with pytest.raises(RuntimeError, match="delivery failed"):
        ModuleCircularDependencyRule().check(runner)

    assert len(runner.issues) == 1


def test_format_message_without_and_with_path() -> None:
    assert (
        format_message(CircularDependency(module_a="a", module_b="b"))
        == f"{PREFIX}a ↔ b"
    )
    longer = CircularDependency(
        module_a="a", module_b="b", cycle_path="a → b → c → a"
    )
    assert format_message(longer) == f"{PREFIX}a ↔ b (path: a → b → c → a)"
