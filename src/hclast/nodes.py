"""Parsed HCL document model.

These nodes are the boundary between the parser and the analysis code.
Expressions form a closed union: every node kind the analysis understands
has its own dataclass, and everything else collapses into ``OpaqueExpr``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True, order=True)
class SourcePos:
    """A position in a source file (1-based line and column, 0-based byte)."""

    line: int = 0
    column: int = 0
    byte: int = 0


@dataclass(frozen=True)
class SourceRange:
    """A span of source text; ``SourceRange()`` is the zero-value range."""

    filename: str = ""
    start: SourcePos = field(default_factory=SourcePos)
    end: SourcePos = field(default_factory=SourcePos)

    def is_empty(self) -> bool:
        return not self.filename

    def location(self) -> str:
        if self.is_empty():
            return "<unknown>"
        return f"{self.filename}:{self.start.line}:{self.start.column}"

    def to_dict(self) -> dict[str, object]:
        return {
            "filename": self.filename,
            "start": {
                "line": self.start.line,
                "column": self.start.column,
                "byte": self.start.byte,
            },
            "end": {
                "line": self.end.line,
                "column": self.end.column,
                "byte": self.end.byte,
            },
        }


@dataclass(frozen=True)
class AttrStep:
    name: str


@dataclass(frozen=True)
class IndexStep:
    key: Expression


TraversalStep = Union[AttrStep, IndexStep]


@dataclass(frozen=True)
class Traversal:
    """A variable access such as ``module.network.vpc_id``."""

    root: str
    steps: tuple[TraversalStep, ...] = ()


@dataclass(frozen=True)
class TemplateExpr:
    """A quoted or heredoc template; literal parts are ``OpaqueExpr``."""

    parts: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class TupleExpr:
    items: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ObjectItem:
    key: Expression
    value: Expression


@dataclass(frozen=True)
class ObjectExpr:
    items: tuple[ObjectItem, ...] = ()


@dataclass(frozen=True)
class FunctionCallExpr:
    name: str
    args: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ConditionalExpr:
    condition: Expression
    true_result: Expression
    false_result: Expression


@dataclass(frozen=True)
class ForExpr:
    """A ``for`` comprehension; ``key_expr`` is set only for object results."""

    collection: Expression
    value_expr: Expression
    value_var: str
    key_var: str | None = None
    key_expr: Expression | None = None
    condition: Expression | None = None


@dataclass(frozen=True)
class OpaqueExpr:
    """Any expression kind that carries no module reference."""

    kind: str


Expression = Union[
    Traversal,
    TemplateExpr,
    TupleExpr,
    ObjectExpr,
    FunctionCallExpr,
    ConditionalExpr,
    ForExpr,
    OpaqueExpr,
]


@dataclass(frozen=True)
class Attribute:
    name: str
    expr: Expression
    range: SourceRange = field(default_factory=SourceRange)


@dataclass(frozen=True)
class Body:
    attributes: dict[str, Attribute] = field(default_factory=dict)
    blocks: tuple[Block, ...] = ()


@dataclass(frozen=True)
class Block:
    type: str
    labels: tuple[str, ...] = ()
    body: Body = field(default_factory=Body)
    range: SourceRange = field(default_factory=SourceRange)


@dataclass(frozen=True)
class HclFile:
    """A parsed configuration file.

    ``body`` is ``None`` when the document is not block-structured; such
    files contribute nothing to the analysis.
    """

    name: str
    body: Body | None = None


__all__ = [
    "AttrStep",
    "Attribute",
    "Block",
    "Body",
    "ConditionalExpr",
    "Expression",
    "ForExpr",
    "FunctionCallExpr",
    "HclFile",
    "IndexStep",
    "ObjectExpr",
    "ObjectItem",
    "OpaqueExpr",
    "SourcePos",
    "SourceRange",
    "TemplateExpr",
    "Traversal",
    "TraversalStep",
    "TupleExpr",
]
