"""Configuration file discovery for modcycle."""

from __future__ import annotations

import logging
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

TERRAFORM_SUFFIX = ".tf"

# Provider caches and VCS metadata hold copies of other configurations.
SKIPPED_DIRS = frozenset({".git", ".terraform", ".terragrunt-cache"})


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _matches_filters(
    rel_path: str,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if include_patterns and not any(fnmatch(rel_path, pat) for pat in include_patterns):
        return False
    return not (
        exclude_patterns and any(fnmatch(rel_path, pat) for pat in exclude_patterns)
    )


def _should_include_file(
    path: Path,
    directory: Path,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, directory):
        logger.debug("Skipping %s: resolves outside %s", path, directory)
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    rel = path.relative_to(directory)
    if any(part in SKIPPED_DIRS for part in rel.parts[:-1]):
        return False

    return _matches_filters(rel.as_posix(), include_patterns, exclude_patterns)


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = sorted(
        {
            path
            for path in [root / ".gitignore", *root.rglob(".gitignore")]
            if path.is_file() and not path.is_symlink()
        },
        key=lambda p: p.relative_to(root).as_posix(),
    )
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def find_terraform_files(
    directory: Path,
    *,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find all ``.tf`` files under a directory, respecting .gitignore.

    Args:
        directory: Directory to search
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        nested_gitignore: Also honor .gitignore files in subdirectories

    Yields:
        Path objects sorted lexicographically by relative path.
    """
    gitignore_matches = _build_gitignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
    )

    matched_files = [
        path
        for path in directory.rglob(f"*{TERRAFORM_SUFFIX}")
        if _should_include_file(
            path,
            directory,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
        )
    ]

    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())

    yield from matched_files


__all__ = ["SKIPPED_DIRS", "TERRAFORM_SUFFIX", "find_terraform_files"]
