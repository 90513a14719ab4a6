# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .generate import generate_command
from .listing import list_command

app = typer.Typer(
    name="portletgen",
    help="Generate portlet registries from decorated classes.",
    no_args_is_help=True,
    add_completion=False,
)
app.command("generate", help="Scan source roots and write the generated registry.")(generate_command)
app.command("list", help="Scan source roots and list discovered portlets.")(list_command)

__all__ = ["app"]
