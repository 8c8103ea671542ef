"""JSON report models.

Every report carries ``schema_version`` so consumers can detect format
changes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Schema version constant
SCHEMA_VERSION = 1


class RangeRecord(BaseModel):
    filename: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int


class IssueRecord(BaseModel):
    """One issue emitted by a rule."""

    rule: str
    severity: str
    message: str
    range: RangeRecord


class CheckReport(BaseModel):
    """Result of ``modcycle check``."""

    schema_version: int = Field(default=SCHEMA_VERSION)
    ruleset: str
    version: str
    rules: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    issues: list[IssueRecord] = Field(default_factory=list)


class EdgeRecord(BaseModel):
    """A module dependency: ``source`` reads an output of ``target``."""

    source: str
    target: str
    range: RangeRecord


class ConfigurationGraphRecord(BaseModel):
    directory: str
    modules: list[str] = Field(default_factory=list)
    edges: list[EdgeRecord] = Field(default_factory=list)
    cycles: list[list[str]] = Field(
        default_factory=list,
        description="Detected cycles in report order, members in traversal order",
    )


class GraphReport(BaseModel):
    """Result of ``modcycle graph``."""

    schema_version: int = Field(default=SCHEMA_VERSION)
    configurations: list[ConfigurationGraphRecord] = Field(default_factory=list)


__all__ = [
    "SCHEMA_VERSION",
    "CheckReport",
    "ConfigurationGraphRecord",
    "EdgeRecord",
    "GraphReport",
    "IssueRecord",
    "RangeRecord",
]
