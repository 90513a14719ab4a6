# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command listing the portlets discovered in the source roots."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from ..diagnostics import DiagnosticCollector
from ..errors import SetupError
from ..models import type_sort_key
from ..orchestrator import DescriptorSets, collect_descriptors, validate_source_roots
from .shared import (
    CLIError,
    CLILogger,
    EmojiOption,
    RootOption,
    SourceRootOption,
    build_cli_logger,
    emit_diagnostics,
    load_cli_config,
)


def list_command(
    root: RootOption = Path("."),
    source_roots: SourceRootOption = None,
    emoji: EmojiOption = True,
) -> None:
    """Print the discovered portlets and module registrations as tables.

    Args:
        root: Project root containing ``pyproject.toml``.
        source_roots: Optional source roots overriding the configuration.
        emoji: Whether output may include emoji glyphs.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    logger = build_cli_logger(emoji=emoji)
    try:
        descriptors = _collect(root, source_roots, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    _print_tables(descriptors, logger=logger)
    raise typer.Exit(code=0)


def _collect(root: Path, source_roots: list[Path] | None, *, logger: CLILogger) -> DescriptorSets:
    config = load_cli_config(root, overrides={"source_roots": source_roots or None}, logger=logger)
    sink = DiagnosticCollector()
    try:
        roots = validate_source_roots(config.source_roots)
    except SetupError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    descriptors = collect_descriptors(roots, config=config, sink=sink)
    emit_diagnostics(sink.diagnostics, root=root, logger=logger)
    return descriptors


def _print_tables(descriptors: DescriptorSets, *, logger: CLILogger) -> None:
    portlets = Table(title="Portlets")
    for column in ("Id", "Title", "Class", "Title key"):
        portlets.add_column(column)
    for descriptor in sorted(descriptors.type_descriptors, key=type_sort_key):
        portlets.add_row(
            escape(descriptor.id),
            escape(descriptor.title),
            descriptor.canonical_class_name,
            descriptor.title_hash,
        )
    logger.console.print(portlets)

    if descriptors.module_descriptors:
        modules = Table(title="Portlet modules")
        modules.add_column("Module")
        modules.add_column("Bindings")
        for module in sorted(descriptors.module_descriptors):
            modules.add_row(module.canonical_class_name, "\n".join(module.bindings))
        logger.console.print(modules)


__all__ = ["list_command"]
