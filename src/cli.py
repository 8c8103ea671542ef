"""Command-line interface for modcycle."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lint.run import build_configuration_graphs, run_checks
from report.write import (
    build_check_report,
    build_graph_report,
    dumps_json,
    format_edge_list,
    format_issue_text,
)
from rules.config import ConfigError, load_config
from rules.ruleset import BUILTIN_RULESET

EXIT_OK = 0
EXIT_ISSUES = 1
EXIT_ERROR = 2


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Directory to analyze (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: <root>/modcycle.toml if present)",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="modcycle")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Report circular dependencies between modules"
    )
    _add_common_options(check_parser)
    check_parser.add_argument(
        "--enable-rule",
        action="append",
        default=[],
        metavar="NAME",
        help="Enable a rule regardless of config (repeatable)",
    )

    graph_parser = subparsers.add_parser(
        "graph", help="Print the module dependency graph"
    )
    _add_common_options(graph_parser)

    subparsers.add_parser("rules", help="List available rules")

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    if verbose:
        for name in ("graph", "hclast", "lint", "scan"):
            logging.getLogger(name).setLevel(logging.DEBUG)


def _resolve_config_path(config: str | None) -> Path | None:
    if config is None:
        return None
    return Path(config).expanduser().resolve()


def _handle_check(
    root: Path, config_path: Path | None, enable_rules: list[str], output: str
) -> int:
    config = load_config(root, config_path)
    result = run_checks(root, config=config, enable_rules=enable_rules)

    if output == "json":
        report = build_check_report(result, BUILTIN_RULESET)
        sys.stdout.write(dumps_json(report).decode("utf-8") + "\n")
    else:
        for issue in result.issues:
            sys.stdout.write(format_issue_text(issue) + "\n")

    return EXIT_OK if result.ok else EXIT_ISSUES


def _handle_graph(root: Path, config_path: Path | None, output: str) -> int:
    config = load_config(root, config_path)
    graphs = build_configuration_graphs(root, config=config)

    if output == "json":
        sys.stdout.write(dumps_json(build_graph_report(graphs)).decode("utf-8") + "\n")
    else:
        for line in format_edge_list(graphs):
            sys.stdout.write(line + "\n")

    return EXIT_OK


def _handle_rules() -> int:
    for rule in BUILTIN_RULESET.rules:
        state = "enabled" if rule.enabled else "disabled"
        sys.stdout.write(f"{rule.name}\t{rule.severity.value}\t{state}\n")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "rules":
        return _handle_rules()

    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()
    config_path = _resolve_config_path(args.config)
    if not root.is_dir():
        sys.stderr.write(f"error: not a directory: {root}\n")
        return EXIT_ERROR

    try:
        if args.command == "check":
            return _handle_check(root, config_path, args.enable_rule, args.format)
        return _handle_graph(root, config_path, args.format)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return EXIT_ERROR
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
