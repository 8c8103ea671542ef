"""Built-in rule set and rule selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rules.config import ConfigError
from rules.module_circular_dependency import ModuleCircularDependencyRule

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rules.base import Rule
    from rules.config import ModcycleConfig

RULESET_VERSION = "0.1.0"


@dataclass(frozen=True)
class RuleSet:
    name: str
    version: str
    rules: tuple[Rule, ...] = field(default_factory=tuple)

    def rule_names(self) -> list[str]:
        return [rule.name for rule in self.rules]


BUILTIN_RULESET = RuleSet(
    name="modcycle",
    version=RULESET_VERSION,
    rules=(ModuleCircularDependencyRule(),),
)


def select_rules(
    ruleset: RuleSet,
    config: ModcycleConfig,
    enable: Iterable[str] = (),
) -> list[Rule]:
    """Return the rules that should run, in rule set order.

    A ``[rules.<name>]`` table overrides the rule's default; names passed in
    ``enable`` are always run.

    Raises:
        ConfigError: If the config or ``enable`` names a rule that does not exist.
    """
    known = set(ruleset.rule_names())
    forced = set(enable)
    for name in sorted((set(config.rules) | forced) - known):
        msg = f"Rule not found: {name}"
        raise ConfigError(msg)

    selected: list[Rule] = []
    for rule in ruleset.rules:
        rule_config = config.rules.get(rule.name)
        enabled = rule_config.enabled if rule_config is not None else rule.enabled
        if enabled or rule.name in forced:
            selected.append(rule)
    return selected


__all__ = ["BUILTIN_RULESET", "RULESET_VERSION", "RuleSet", "select_rules"]
