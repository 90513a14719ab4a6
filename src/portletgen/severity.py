# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Severity levels attached to scan and build diagnostics."""

    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


__all__ = ["Severity"]
