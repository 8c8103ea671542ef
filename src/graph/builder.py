"""Module dependency edge construction.

Files are walked by name, blocks by start line and attributes by start line
so the edge list is identical across runs over unchanged input.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graph.models import Dependency
from graph.references import iter_module_references

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator, Mapping

    from hclast.nodes import Attribute, Block, HclFile

logger = logging.getLogger(__name__)

MODULE_BLOCK_TYPE = "module"


def _sorted_blocks(blocks: tuple[Block, ...]) -> list[Block]:
    return sorted(blocks, key=lambda block: block.range.start.line)


def _sorted_attributes(block: Block) -> list[Attribute]:
    return sorted(
        block.body.attributes.values(), key=lambda attr: attr.range.start.line
    )


def iter_module_blocks(files: Mapping[str, HclFile]) -> Iterator[tuple[str, Block]]:
    """Yield ``(module_name, block)`` for every module block, deterministically.

    Files without a block-structured body are skipped.
    """
    for file_name in sorted(files):
        body = files[file_name].body
        if body is None:
            logger.debug("Skipping %s: no block body", file_name)
            continue
        for block in _sorted_blocks(body.blocks):
            if block.type == MODULE_BLOCK_TYPE and block.labels:
                yield block.labels[0], block


def collect_modules(files: Mapping[str, HclFile]) -> set[str]:
    """Collect the names of all declared modules."""
    modules = {name for name, _block in iter_module_blocks(files)}
    logger.debug("Collected %d module(s): %s", len(modules), sorted(modules))
    return modules


def build_dependencies(
    files: Mapping[str, HclFile],
    modules: Collection[str],
) -> list[Dependency]:
    """Build the deduplicated module dependency edge list.

    Args:
        files: Parsed files keyed by file name
        modules: Known module names (from ``collect_modules``)

    Returns:
        One ``Dependency`` per distinct ``(from, to)`` pair, in order of first
        discovery. Each carries the range of the attribute where the pair was
        first seen.
    """
    dependencies: list[Dependency] = []
    seen_edges: set[tuple[str, str]] = set()

    for module_name, block in iter_module_blocks(files):
        for attr in _sorted_attributes(block):
            for target in iter_module_references(attr.expr, modules):
                edge = (module_name, target)
                if edge in seen_edges:
                    continue
                seen_edges.add(edge)
                dependencies.append(
                    Dependency(
                        from_module=module_name, to_module=target, range=attr.range
                    )
                )

    logger.debug("Built %d module dependency edge(s)", len(dependencies))
    return dependencies


__all__ = [
    "MODULE_BLOCK_TYPE",
    "build_dependencies",
    "collect_modules",
    "iter_module_blocks",
]
