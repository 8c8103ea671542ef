"""Shared utilities for modcycle."""

from __future__ import annotations

from pathlib import Path, PurePosixPath


def relative_name(file_path: str | Path, root: str | Path) -> str:
    """Return the root-relative POSIX name used to key a file.

    Examples:
        >>> relative_name("/repo/env/prod/main.tf", "/repo")
        'env/prod/main.tf'
        >>> relative_name(Path("/repo/main.tf"), Path("/repo"))
        'main.tf'
    """
    return Path(file_path).relative_to(Path(root)).as_posix()


def config_directory(file_name: str) -> str:
    """Return the directory holding a root-relative file name.

    Files in the same directory form one configuration; ``"."`` is the root.

    Examples:
        >>> config_directory("env/prod/main.tf")
        'env/prod'
        >>> config_directory("main.tf")
        '.'
    """
    parent = PurePosixPath(file_name.replace("\\", "/")).parent
    return parent.as_posix()
