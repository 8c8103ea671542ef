"""Tree-sitter based HCL parsing for modcycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser
from tree_sitter_hcl import language as get_hcl_language

from hclast.nodes import (
    Attribute,
    AttrStep,
    Block,
    Body,
    ConditionalExpr,
    ForExpr,
    FunctionCallExpr,
    HclFile,
    IndexStep,
    ObjectExpr,
    ObjectItem,
    OpaqueExpr,
    SourcePos,
    SourceRange,
    TemplateExpr,
    Traversal,
    TupleExpr,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from hclast.nodes import Expression, TraversalStep

logger = logging.getLogger(__name__)

_PARSER: Parser | None = None

_SKIPPED_NODE_TYPES = frozenset({"comment", "ERROR"})


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the HCL language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_hcl_language())
        _PARSER = Parser(lang)

    return _PARSER


def _text(node: Node) -> str:
    return node.text.decode("utf8") if node.text is not None else ""


def _named(node: Node) -> list[Node]:
    return [
        child for child in node.named_children if child.type not in _SKIPPED_NODE_TYPES
    ]


def _first(node: Node, node_type: str) -> Node | None:
    for child in _named(node):
        if child.type == node_type:
            return child
    return None


def _children_of_type(node: Node, node_type: str) -> list[Node]:
    return [child for child in _named(node) if child.type == node_type]


def _source_range(node: Node, filename: str) -> SourceRange:
    return SourceRange(
        filename=filename,
        start=SourcePos(
            line=node.start_point[0] + 1,
            column=node.start_point[1] + 1,
            byte=node.start_byte,
        ),
        end=SourcePos(
            line=node.end_point[0] + 1,
            column=node.end_point[1] + 1,
            byte=node.end_byte,
        ),
    )


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def _convert_optional(node: Node | None) -> Expression | None:
    if node is None:
        return None
    return _convert_expression(node)


def _convert_step(node: Node) -> TraversalStep | None:
    """Convert a traversal suffix; splats and unknown suffixes return None."""
    if node.type == "get_attr":
        identifier = _first(node, "identifier")
        return AttrStep(_text(identifier)) if identifier is not None else None
    if node.type == "index":
        inner = _named(node)
        return _convert_step(inner[0]) if inner else None
    if node.type == "new_index":
        key = _first(node, "expression")
        return IndexStep(
            _convert_expression(key) if key is not None else OpaqueExpr("index")
        )
    if node.type == "legacy_index":
        return IndexStep(OpaqueExpr("legacy_index"))
    return None


def _convert_term_sequence(node: Node) -> Expression:
    """Convert an ``expression`` node: a single term or a term with suffixes."""
    parts = _named(node)
    if not parts:
        return OpaqueExpr(node.type)

    head, *tail = parts
    if not tail:
        return _convert_expression(head)

    # Only plain variable accesses are traversals; anything else with a
    # suffix (calls, parenthesized expressions, splats) is a relative access.
    if head.type not in ("variable_expr", "expr_term"):
        return OpaqueExpr("relative_traversal")

    base = _convert_expression(head)
    if not isinstance(base, Traversal):
        return OpaqueExpr("relative_traversal")

    steps = list(base.steps)
    for part in tail:
        step = _convert_step(part)
        if step is None:
            return OpaqueExpr(part.type)
        steps.append(step)

    return Traversal(root=base.root, steps=tuple(steps))


def _convert_variable(node: Node) -> Expression:
    return Traversal(root=_text(node).strip())


def _convert_single_child(node: Node) -> Expression:
    inner = _named(node)
    if not inner:
        return OpaqueExpr(node.type)
    return _convert_expression(inner[0])


def _template_parts(nodes: list[Node]) -> TemplateExpr:
    parts: list[Expression] = []
    for child in nodes:
        if child.type == "template_interpolation":
            inner = _first(child, "expression")
            if inner is not None:
                parts.append(_convert_expression(inner))
        elif child.type == "template_directive":
            parts.append(_convert_single_child(child))
        elif child.type == "template_literal":
            parts.append(OpaqueExpr(child.type))
    return TemplateExpr(parts=tuple(parts))


def _convert_template(node: Node) -> Expression:
    return _template_parts(_named(node))


def _convert_template_if(node: Node) -> Expression:
    """Convert ``%{ if c }...%{ else }...%{ endif }`` to a conditional."""
    intro = _first(node, "template_if_intro")
    condition = _first(intro, "expression") if intro is not None else None
    if condition is None:
        return OpaqueExpr(node.type)

    true_parts: list[Node] = []
    false_parts: list[Node] = []
    branch = true_parts
    for child in _named(node):
        if child.type == "template_else_intro":
            branch = false_parts
        elif child.type not in ("template_if_intro", "template_if_end"):
            branch.append(child)

    return ConditionalExpr(
        condition=_convert_expression(condition),
        true_result=_template_parts(true_parts),
        false_result=_template_parts(false_parts),
    )


def _convert_template_for(node: Node) -> Expression:
    """Convert ``%{ for k, v in coll }...%{ endfor }`` to a for expression."""
    start = _first(node, "template_for_start")
    collection = _first(start, "expression") if start is not None else None
    if start is None or collection is None:
        return OpaqueExpr(node.type)

    variables = [_text(ident) for ident in _children_of_type(start, "identifier")]
    body = [
        child
        for child in _named(node)
        if child.type not in ("template_for_start", "template_for_end")
    ]
    return ForExpr(
        collection=_convert_expression(collection),
        value_expr=_template_parts(body),
        value_var=variables[-1] if variables else "",
        key_var=variables[0] if len(variables) > 1 else None,
    )


def _convert_tuple(node: Node) -> Expression:
    return TupleExpr(
        items=tuple(
            _convert_expression(child)
            for child in _children_of_type(node, "expression")
        )
    )


def _convert_object(node: Node) -> Expression:
    items: list[ObjectItem] = []
    for elem in _children_of_type(node, "object_elem"):
        key = elem.child_by_field_name("key")
        value = elem.child_by_field_name("val")
        if key is None or value is None:
            exprs = _children_of_type(elem, "expression")
            if len(exprs) != 2:
                continue
            key, value = exprs
        items.append(
            ObjectItem(key=_convert_expression(key), value=_convert_expression(value))
        )
    return ObjectExpr(items=tuple(items))


def _convert_function_call(node: Node) -> Expression:
    identifier = _first(node, "identifier")
    arguments = _first(node, "function_arguments")
    args: tuple[Expression, ...] = ()
    if arguments is not None:
        args = tuple(
            _convert_expression(child)
            for child in _children_of_type(arguments, "expression")
        )
    return FunctionCallExpr(
        name=_text(identifier) if identifier is not None else "", args=args
    )


def _convert_conditional(node: Node) -> Expression:
    exprs = _children_of_type(node, "expression")
    if len(exprs) != 3:
        return OpaqueExpr(node.type)
    condition, true_result, false_result = (_convert_expression(e) for e in exprs)
    return ConditionalExpr(
        condition=condition, true_result=true_result, false_result=false_result
    )


def _convert_for(node: Node) -> Expression:
    intro = _first(node, "for_intro")
    if intro is None:
        return OpaqueExpr(node.type)
    collection = _first(intro, "expression")
    if collection is None:
        return OpaqueExpr(node.type)

    variables = [_text(ident) for ident in _children_of_type(intro, "identifier")]
    key_var = variables[0] if len(variables) > 1 else None
    value_var = variables[-1] if variables else ""

    exprs = _children_of_type(node, "expression")
    key_expr: Expression | None = None
    if node.type == "for_object_expr":
        if len(exprs) < 2:
            return OpaqueExpr(node.type)
        key_expr = _convert_expression(exprs[0])
        value_node = exprs[1]
    else:
        if not exprs:
            return OpaqueExpr(node.type)
        value_node = exprs[0]

    cond = _first(node, "for_cond")
    return ForExpr(
        collection=_convert_expression(collection),
        value_expr=_convert_expression(value_node),
        value_var=value_var,
        key_var=key_var,
        key_expr=key_expr,
        condition=_convert_optional(
            _first(cond, "expression") if cond is not None else None
        ),
    )


_CONVERTERS: dict[str, Callable[[Node], Expression]] = {
    "expression": _convert_term_sequence,
    "expr_term": _convert_term_sequence,
    "variable_expr": _convert_variable,
    "template_expr": _convert_single_child,
    "collection_value": _convert_single_child,
    "for_expr": _convert_single_child,
    "quoted_template": _convert_template,
    "heredoc_template": _convert_template,
    "template_directive": _convert_single_child,
    "template_if": _convert_template_if,
    "template_for": _convert_template_for,
    "tuple": _convert_tuple,
    "object": _convert_object,
    "function_call": _convert_function_call,
    "conditional": _convert_conditional,
    "for_tuple_expr": _convert_for,
    "for_object_expr": _convert_for,
}


def _convert_expression(node: Node) -> Expression:
    converter = _CONVERTERS.get(node.type)
    if converter is None:
        return OpaqueExpr(node.type)
    return converter(node)


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


def _string_lit_value(node: Node) -> str:
    literal = _first(node, "template_literal")
    if literal is not None:
        return _text(literal)
    return _text(node).strip('"')


def _convert_attribute(node: Node, filename: str) -> Attribute | None:
    identifier = _first(node, "identifier")
    if identifier is None:
        return None
    expr_node = _first(node, "expression")
    expr = (
        _convert_expression(expr_node)
        if expr_node is not None
        else OpaqueExpr("missing")
    )
    return Attribute(
        name=_text(identifier), expr=expr, range=_source_range(node, filename)
    )


def _convert_block(node: Node, filename: str) -> Block | None:
    children = _named(node)
    if not children or children[0].type != "identifier":
        return None

    labels: list[str] = []
    body = Body()
    for child in children[1:]:
        if child.type == "string_lit":
            labels.append(_string_lit_value(child))
        elif child.type == "identifier":
            labels.append(_text(child))
        elif child.type == "body":
            body = _convert_body(child, filename)

    return Block(
        type=_text(children[0]),
        labels=tuple(labels),
        body=body,
        range=_source_range(node, filename),
    )


def _convert_body(node: Node, filename: str) -> Body:
    attributes: dict[str, Attribute] = {}
    blocks: list[Block] = []
    for child in _named(node):
        if child.type == "attribute":
            attribute = _convert_attribute(child, filename)
            if attribute is not None:
                attributes[attribute.name] = attribute
        elif child.type == "block":
            block = _convert_block(child, filename)
            if block is not None:
                blocks.append(block)
    return Body(attributes=attributes, blocks=tuple(blocks))


def parse_hcl(source: bytes, filename: str) -> HclFile:
    """Parse HCL source into an ``HclFile``.

    Regions tree-sitter cannot parse are dropped with a warning; the rest of
    the document is still converted. A document whose root is not a block
    body (for example a bare object) is returned with ``body=None``.
    """
    tree = _get_parser().parse(source)
    root = tree.root_node

    if root.has_error:
        logger.warning("Syntax errors in %s; unparseable regions ignored", filename)

    children = _named(root)
    if not children:
        return HclFile(name=filename, body=Body())

    body_node = _first(root, "body")
    if body_node is None:
        logger.debug("Skipping %s: document is not block-structured", filename)
        return HclFile(name=filename, body=None)

    return HclFile(name=filename, body=_convert_body(body_node, filename))


def parse_hcl_file(file_path: Path, filename: str) -> HclFile:
    """Read and parse one configuration file.

    Args:
        file_path: Absolute path to the file on disk
        filename: Name recorded in source ranges (usually root-relative)

    Raises:
        OSError: If the file cannot be read.
    """
    return parse_hcl(file_path.read_bytes(), filename)


__all__ = ["parse_hcl", "parse_hcl_file"]
