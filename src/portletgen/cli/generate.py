# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command generating the portlet registry sources."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..errors import GenerationError, SetupError
from ..orchestrator import GenerationResult, run_generation
from .shared import (
    CLIError,
    CLILogger,
    EmojiOption,
    RootOption,
    SourceRootOption,
    build_cli_logger,
    display_path,
    emit_diagnostics,
    load_cli_config,
)


def generate_command(
    root: RootOption = Path("."),
    source_roots: SourceRootOption = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory receiving generated sources.", file_okay=False),
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Render without writing files.")] = False,
    emoji: EmojiOption = True,
) -> None:
    """Execute the generate command.

    Args:
        root: Project root containing ``pyproject.toml``.
        source_roots: Optional source roots overriding the configuration.
        output_dir: Optional output directory overriding the configuration.
        dry_run: Render the artifacts without writing them.
        emoji: Whether output may include emoji glyphs.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    logger = build_cli_logger(emoji=emoji)
    try:
        result = _generate(root, source_roots, output_dir, dry_run=dry_run, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    _emit_summary(result, dry_run=dry_run, logger=logger)
    raise typer.Exit(code=0)


def _generate(
    root: Path,
    source_roots: list[Path] | None,
    output_dir: Path | None,
    *,
    dry_run: bool,
    logger: CLILogger,
) -> GenerationResult:
    config = load_cli_config(
        root,
        overrides={"source_roots": source_roots or None, "output_dir": output_dir},
        logger=logger,
    )
    try:
        result = run_generation(config, dry_run=dry_run, use_emoji=logger.use_emoji)
    except (SetupError, GenerationError) as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    emit_diagnostics(result.diagnostics, root=root, logger=logger)
    if dry_run:
        for artifact in result.artifacts:
            target = config.output_dir / artifact.relative_path
            logger.warn(f"DRY RUN: would write {display_path(target, root)}")
    return result


def _emit_summary(result: GenerationResult, *, dry_run: bool, logger: CLILogger) -> None:
    types = len(result.descriptors.type_descriptors)
    modules = len(result.descriptors.module_descriptors)
    verb = "Rendered" if dry_run else "Generated"
    logger.ok(f"{verb} {len(result.artifacts)} artifact(s) for {types} portlet(s) and {modules} module(s)")
    if result.error_count:
        logger.warn(f"Skipped {result.error_count} invalid declaration(s)")
    if result.warning_count:
        logger.warn(f"Skipped {result.warning_count} unparseable file(s)")


__all__ = ["generate_command"]
