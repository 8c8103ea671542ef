"""Rule definitions for modcycle."""

from rules.base import Rule, Runner, Severity
from rules.config import (
    ConfigError,
    ModcycleConfig,
    RuleConfig,
    load_config,
)
from rules.module_circular_dependency import ModuleCircularDependencyRule
from rules.ruleset import BUILTIN_RULESET, RuleSet, select_rules

__all__ = [
    "BUILTIN_RULESET",
    "ConfigError",
    "ModcycleConfig",
    "ModuleCircularDependencyRule",
    "Rule",
    "RuleConfig",
    "RuleSet",
    "Runner",
    "Severity",
    "load_config",
    "select_rules",
]
