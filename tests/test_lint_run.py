from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from lint.run import build_configuration_graphs, group_by_directory, run_checks
from rules.base import Severity
from rules.config import ModcycleConfig

FIXTURE_REPO = Path(__file__).parent / "fixtures" / "cyclic_repo"
RULE = "module_circular_dependency"


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_run_checks_on_fixture_reports_issues_per_directory() -> None:
    result = run_checks(FIXTURE_REPO)

    assert result.rules == (RULE,)
    assert result.files == (
        "envs/prod/main.tf",
        "envs/prod/outputs.tf",
        "main.tf",
    )
    assert [(issue.location(), issue.message) for issue in result.issues] == [
        (
            "main.tf:3:3",
            "Circular dependency detected between modules: module_a ↔ module_b",
        ),
        (
            "envs/prod/main.tf:3:3",
            "Circular dependency detected between modules: app ↔ db "
            "(path: app → db → network → app)",
        ),
        (
            "envs/prod/main.tf:8:3",
            "Circular dependency detected between modules: db ↔ network "
            "(path: app → db → network → app)",
        ),
        (
            "envs/prod/main.tf:13:3",
            "Circular dependency detected between modules: network ↔ app "
            "(path: app → db → network → app)",
        ),
    ]
    assert {issue.severity for issue in result.issues} == {Severity.ERROR}


def test_run_checks_is_deterministic() -> None:
    assert run_checks(FIXTURE_REPO) == run_checks(FIXTURE_REPO)


def test_run_checks_without_enabled_rules_reports_nothing(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    shutil.copytree(FIXTURE_REPO, repo)
    (repo / "modcycle.toml").unlink()

    result = run_checks(repo)

    assert result.ok
    assert result.rules == ()


def test_enable_rules_argument_forces_rule_on(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    shutil.copytree(FIXTURE_REPO, repo)

    result = run_checks(repo, config=ModcycleConfig(), enable_rules=[RULE])

    assert len(result.issues) == 4


def test_directories_are_separate_configurations(tmp_path: Path) -> None:
    _write(
        tmp_path / "one" / "main.tf",
        'module "x" {\n  input = module.y.out\n}\n',
    )
    _write(
        tmp_path / "two" / "main.tf",
        'module "y" {\n  input = module.x.out\n}\n',
    )

    result = run_checks(tmp_path, config=ModcycleConfig(), enable_rules=[RULE])

    assert result.ok


def test_unreadable_file_error_propagates(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(tmp_path / "main.tf", 'module "x" {}\n')

    def _raise(file_path: Path, filename: str) -> None:
        msg = f"cannot read {filename}"
        raise OSError(msg)

    monkeypatch.setattr("lint.run.parse_hcl_file", _raise)

    with pytest.raises(OSError, match="cannot read main.tf"):
        run_checks(tmp_path, config=ModcycleConfig(), enable_rules=[RULE])


def test_group_by_directory_sorts_directories_and_files() -> None:
    files = {name: object() for name in ("b/x.tf", "main.tf", "a/z.tf", "a/y.tf")}

    grouped = group_by_directory(files)  # type: ignore[arg-type]

    assert list(grouped) == [".", "a", "b"]
    assert list(grouped["a"]) == ["a/y.tf", "a/z.tf"]


def test_build_configuration_graphs_on_fixture() -> None:
    graphs = build_configuration_graphs(FIXTURE_REPO)

    assert [graph.directory for graph in graphs] == [".", "envs/prod"]
    root_graph, prod_graph = graphs
    assert root_graph.modules == ("module_a", "module_b")
    assert root_graph.cycles == (("module_a", "module_b"),)
    assert [(d.from_module, d.to_module) for d in prod_graph.dependencies] == [
        ("app", "db"),
        ("db", "network"),
        ("network", "app"),
    ]
    assert prod_graph.cycles == (("app", "db", "network"),)
