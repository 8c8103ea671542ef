"""Module reference extraction from HCL expressions.

A reference is a traversal rooted at ``module`` whose first step names a
known module, e.g. ``module.network.vpc_id``. Composite expressions are
searched recursively; any other expression kind carries no reference.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hclast.nodes import (
    AttrStep,
    ConditionalExpr,
    ForExpr,
    FunctionCallExpr,
    ObjectExpr,
    OpaqueExpr,
    TemplateExpr,
    Traversal,
    TupleExpr,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator

    from hclast.nodes import Expression

MODULE_ROOT = "module"


def _visit_traversal(expr: Traversal, modules: Collection[str]) -> Iterator[str]:
    if expr.root != MODULE_ROOT or not expr.steps:
        return
    first = expr.steps[0]
    if isinstance(first, AttrStep) and first.name in modules:
        yield first.name


def _visit_template(expr: TemplateExpr, modules: Collection[str]) -> Iterator[str]:
    for part in expr.parts:
        yield from iter_module_references(part, modules)


def _visit_tuple(expr: TupleExpr, modules: Collection[str]) -> Iterator[str]:
    for item in expr.items:
        yield from iter_module_references(item, modules)


def _visit_object(expr: ObjectExpr, modules: Collection[str]) -> Iterator[str]:
    # Keys are names, not dependencies.
    for item in expr.items:
        yield from iter_module_references(item.value, modules)


def _visit_function_call(
    expr: FunctionCallExpr, modules: Collection[str]
) -> Iterator[str]:
    for arg in expr.args:
        yield from iter_module_references(arg, modules)


def _visit_conditional(
    expr: ConditionalExpr, modules: Collection[str]
) -> Iterator[str]:
    yield from iter_module_references(expr.true_result, modules)
    yield from iter_module_references(expr.false_result, modules)


def _visit_for(expr: ForExpr, modules: Collection[str]) -> Iterator[str]:
    yield from iter_module_references(expr.collection, modules)
    if expr.key_expr is not None:
        yield from iter_module_references(expr.key_expr, modules)
    yield from iter_module_references(expr.value_expr, modules)
    if expr.condition is not None:
        yield from iter_module_references(expr.condition, modules)


def _visit_opaque(expr: OpaqueExpr, modules: Collection[str]) -> Iterator[str]:
    return iter(())


_VISITORS: dict[type, Callable[..., Iterator[str]]] = {
    Traversal: _visit_traversal,
    TemplateExpr: _visit_template,
    TupleExpr: _visit_tuple,
    ObjectExpr: _visit_object,
    FunctionCallExpr: _visit_function_call,
    ConditionalExpr: _visit_conditional,
    ForExpr: _visit_for,
    OpaqueExpr: _visit_opaque,
}


def iter_module_references(
    expr: Expression, modules: Collection[str]
) -> Iterator[str]:
    """Yield the names of known modules referenced anywhere inside ``expr``."""
    visitor = _VISITORS.get(type(expr))
    if visitor is None:
        msg = f"No reference visitor for expression type {type(expr).__name__}"
        raise TypeError(msg)
    return visitor(expr, modules)


def find_module_references(expr: Expression, modules: Collection[str]) -> list[str]:
    """Return referenced module names in encounter order.

    The same name may appear more than once; callers deduplicate.
    """
    return list(iter_module_references(expr, modules))


__all__ = ["MODULE_ROOT", "find_module_references", "iter_module_references"]
