# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Stable content-derived keys for externalised portlet text."""

from __future__ import annotations

import hashlib
from typing import Final

_ENCODING: Final[str] = "utf-8"


def stable_hash(text: str, context: str) -> str:
    """Return the uppercase hex MD5 digest of ``context`` followed by ``text``.

    The digest is used as a translation lookup key: it only changes when the
    text or its context changes, and it is identical across processes and
    platforms because the input is always encoded as UTF-8.

    Args:
        text: Human-readable text being keyed (a title or tooltip).
        context: Translation context, typically the portlet id plus a field
            discriminator such as ``"title"``.

    Returns:
        str: 32 uppercase hexadecimal characters (128 bits).
    """

    digest = hashlib.md5((context + text).encode(_ENCODING), usedforsecurity=False)
    return digest.hexdigest().upper()


def field_context(portlet_id: str, field_name: str) -> str:
    """Return the hash context for ``field_name`` of the portlet ``portlet_id``."""

    return f"{portlet_id}{field_name}"


__all__ = ["field_context", "stable_hash"]
