# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, option types)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Final

import typer
from rich.console import Console

from ..config import GeneratorConfig, load_config
from ..diagnostics import Diagnostic
from ..errors import PortletGenError
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn
from ..severity import Severity

_FAILURE_EXIT_CODE: Final[int] = 1

RootOption = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root containing pyproject.toml.", file_okay=False),
]
SourceRootOption = Annotated[
    list[Path] | None,
    typer.Option("--source-root", "-s", help="Source root to scan (repeatable); overrides configuration."),
]
EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in output.")]


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = _FAILURE_EXIT_CODE) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences."""

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences."""

        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences."""

        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        """Log an informational message honouring emoji preferences."""

        core_info(message, use_emoji=self.use_emoji)


def build_cli_logger(*, emoji: bool) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.

    Returns:
        CLILogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(highlight=False)
    return CLILogger(console=console, use_emoji=emoji)


def load_cli_config(root: Path, *, overrides: dict[str, Any], logger: CLILogger) -> GeneratorConfig:
    """Load configuration for ``root`` and translate failures into ``CLIError``.

    Args:
        root: Project root passed on the command line.
        overrides: CLI-provided field overrides; ``None`` values are ignored.
        logger: Logger used to report configuration failures.

    Returns:
        GeneratorConfig: Resolved configuration.

    Raises:
        CLIError: If the configuration cannot be loaded.
    """

    try:
        return load_config(root, overrides=overrides)
    except PortletGenError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc


def display_path(path: str | Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` when possible, as a POSIX string."""

    candidate = Path(path)
    try:
        return candidate.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return str(candidate)


def emit_diagnostics(diagnostics: Iterable[Diagnostic], *, root: Path, logger: CLILogger) -> None:
    """Render diagnostics through ``logger`` using ``path:line:`` prefixes.

    Args:
        diagnostics: Diagnostics recorded during the run.
        root: Project root used to shorten file paths.
        logger: Logger receiving one line per diagnostic.
    """

    for diagnostic in diagnostics:
        location = None
        if diagnostic.file is not None:
            location = display_path(diagnostic.file, root)
            if diagnostic.line is not None:
                location = f"{location}:{diagnostic.line}"
        message = f"{location}: {diagnostic.message}" if location else diagnostic.message
        if diagnostic.severity is Severity.ERROR:
            logger.fail(message)
        elif diagnostic.severity is Severity.WARNING:
            logger.warn(message)
        else:
            logger.info(message)


__all__ = [
    "CLIError",
    "CLILogger",
    "EmojiOption",
    "RootOption",
    "SourceRootOption",
    "build_cli_logger",
    "display_path",
    "emit_diagnostics",
    "load_cli_config",
]
