"""HCL document model and parsing for modcycle."""

from hclast.nodes import (
    Attribute,
    Block,
    Body,
    Expression,
    HclFile,
    SourcePos,
    SourceRange,
)
from hclast.treesitter_hcl import parse_hcl, parse_hcl_file

__all__ = [
    "Attribute",
    "Block",
    "Body",
    "Expression",
    "HclFile",
    "SourcePos",
    "SourceRange",
    "parse_hcl",
    "parse_hcl_file",
]
