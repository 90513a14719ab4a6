# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Structured error sink receiving parse and validation diagnostics."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from .errors import PortletGenError, SourceLocation
from .severity import Severity


class Diagnostic(BaseModel):
    """Describe one problem found while scanning or building descriptors."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    file: str | None = None
    line: int | None = None
    code: str | None = None


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receive ``(severity, message, location)`` tuples from the pipeline."""

    def report(
        self,
        severity: Severity,
        message: str,
        *,
        location: SourceLocation | None = None,
        code: str | None = None,
    ) -> None:
        """Record a diagnostic.

        Args:
            severity: Severity of the reported condition.
            message: Human-readable description.
            location: Optional source location.
            code: Optional machine-readable category (``parse``, ``validation``).
        """
        ...


class DiagnosticCollector:
    """In-memory :class:`DiagnosticSink` preserving report order."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def report(
        self,
        severity: Severity,
        message: str,
        *,
        location: SourceLocation | None = None,
        code: str | None = None,
    ) -> None:
        self._diagnostics.append(
            Diagnostic(
                severity=severity,
                message=message,
                file=str(location.path) if location is not None else None,
                line=location.line if location is not None else None,
                code=code,
            ),
        )

    def report_error(self, error: PortletGenError, severity: Severity, *, code: str) -> None:
        """Record ``error`` using its message and location.

        Args:
            error: Recoverable error raised by a pipeline stage.
            severity: Severity under which the error is recorded.
            code: Diagnostic category attached to the entry.
        """

        self.report(severity, error.message, location=error.location, code=code)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Return every diagnostic reported so far, in report order."""

        return tuple(self._diagnostics)


__all__ = ["Diagnostic", "DiagnosticCollector", "DiagnosticSink"]
