# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem traversal helpers locating Python sources beneath a root."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Final

ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        ".venv",
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".tox",
    }
)
PYTHON_SUFFIX: Final[str] = ".py"
_INIT_SENTINEL: Final[str] = "__init__"


def iter_source_files(root: Path, *, exclude: Iterable[str] | None = None) -> Iterator[Path]:
    """Yield Python source files beneath ``root`` in a deterministic order.

    Args:
        root: Source root to traverse.
        exclude: Optional directory names or relative path substrings to prune.

    Yields:
        Path: Resolved ``*.py`` file paths sorted within each directory.
    """

    resolved = root.resolve()
    patterns = tuple(exclude or ())
    for dirpath, dirnames, filenames in os.walk(resolved):
        directory = Path(dirpath)
        if _should_skip(directory, resolved, patterns):
            dirnames[:] = []
            continue
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(PYTHON_SUFFIX):
                yield directory / filename


def _should_skip(directory: Path, root: Path, patterns: tuple[str, ...]) -> bool:
    """Return whether ``directory`` should be pruned from traversal.

    Args:
        directory: Candidate directory encountered while walking ``root``.
        root: Root directory used to derive relative paths.
        patterns: Configured exclusions matched against names and relative paths.

    Returns:
        bool: ``True`` when the directory should be pruned.
    """

    try:
        relative = directory.relative_to(root)
    except ValueError:
        return True
    parts = relative.parts
    if any(part in ALWAYS_EXCLUDE_DIRS for part in parts):
        return True
    rel_str = relative.as_posix()
    for pattern in patterns:
        if "/" in pattern:
            prefix = pattern.strip("/")
            if rel_str == prefix or rel_str.startswith(f"{prefix}/"):
                return True
        elif pattern in parts:
            return True
    return False


def module_name_from_path(path: Path, root: Path) -> str | None:
    """Return the dotted module name for ``path`` relative to the source root.

    Args:
        path: Python source file beneath ``root``.
        root: Source root the module path is computed against.

    Returns:
        str | None: Module name such as ``pkg.sub.module``; ``pkg/__init__.py``
        maps to ``pkg``. ``None`` when ``path`` lies outside ``root`` or is an
        ``__init__.py`` directly inside it.
    """

    try:
        relative = path.resolve().relative_to(root.resolve())
    except ValueError:
        return None
    parts = relative.with_suffix("").parts
    if parts and parts[-1] == _INIT_SENTINEL:
        parts = parts[:-1]
    if not parts:
        return None
    return ".".join(parts)


__all__ = ["ALWAYS_EXCLUDE_DIRS", "iter_source_files", "module_name_from_path"]
