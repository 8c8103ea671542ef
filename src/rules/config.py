"""Configuration loading for modcycle."""

from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = "modcycle.toml"


class RuleConfig(BaseModel):
    """Per-rule settings from a ``[rules.<name>]`` table."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(description="Run this rule regardless of its default")


class ModcycleConfig(BaseModel):
    """Configuration for modcycle checks."""

    model_config = ConfigDict(extra="forbid")

    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all .tf files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    rules: dict[str, RuleConfig] = Field(
        default_factory=dict,
        description="Rule toggles keyed by rule name",
    )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path, config_path: Path | None = None) -> ModcycleConfig:
    """Load configuration from modcycle.toml if it exists.

    An explicit ``config_path`` must exist; the default file under ``root``
    is optional.
    """
    if config_path is None:
        config_path = Path(root) / CONFIG_FILENAME
        if not config_path.is_file():
            return ModcycleConfig()
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ModcycleConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
