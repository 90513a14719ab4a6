# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from portletgen.diagnostics import DiagnosticCollector

WriteSource = Callable[[Path, str, str], Path]


def _write_source(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def write_source() -> WriteSource:
    """Return a helper writing dedented source text beneath a root."""
    return _write_source


@pytest.fixture
def collector() -> DiagnosticCollector:
    """Return an empty diagnostic collector."""
    return DiagnosticCollector()
