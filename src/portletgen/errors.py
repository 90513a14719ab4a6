# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the scanning and generation pipeline.

``ParseError`` and ``ValidationError`` are scoped to a single file or class
declaration and are recorded as diagnostics by the orchestrator.
``GenerationError`` and ``SetupError`` abort the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Point at a file and, optionally, a line inside it."""

    path: Path
    line: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"


class PortletGenError(Exception):
    """Base class for every error raised by portletgen."""

    def __init__(self, message: str, *, location: SourceLocation | None = None) -> None:
        """Initialise the error with a message and optional source location.

        Args:
            message: Human-readable description of the failure.
            location: Source file (and line) responsible for the failure.
        """

        super().__init__(message)
        self.message = message
        self.location = location


class ParseError(PortletGenError):
    """Raised when a source file cannot be decoded or parsed."""


class ValidationError(PortletGenError, ValueError):
    """Raised when decorator arguments cannot produce a valid descriptor."""

    def __init__(
        self,
        message: str,
        *,
        location: SourceLocation | None = None,
        canonical_name: str | None = None,
    ) -> None:
        """Initialise the error and remember the offending declaration.

        Args:
            message: Description of the rule that was violated.
            location: Source location of the declaration, when known.
            canonical_name: Fully-qualified name of the offending class.
        """

        super().__init__(message, location=location)
        self.canonical_name = canonical_name


class GenerationError(PortletGenError):
    """Raised when templates cannot be rendered or output cannot be written."""


class SetupError(PortletGenError):
    """Raised when the run cannot start (missing or unreadable source roots)."""


class ConfigError(SetupError):
    """Raised when configuration input is invalid."""


__all__ = [
    "ConfigError",
    "GenerationError",
    "ParseError",
    "PortletGenError",
    "SetupError",
    "SourceLocation",
    "ValidationError",
]
