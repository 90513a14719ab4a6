# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Escaping helpers for embedding text inside generated Python string literals."""

from __future__ import annotations

from typing import Final

_NAMED_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_DEL: Final[int] = 0x7F
_FIRST_PRINTABLE: Final[int] = 0x20
_SURROGATES: Final[range] = range(0xD800, 0xE000)


def escape_string_literal(text: str) -> str:
    """Escape ``text`` so it can be placed between double quotes in Python source.

    Backslashes, double quotes and common whitespace controls use their named
    escapes; the remaining C0 control characters and DEL use ``\\xNN``.
    Lone surrogates use ``\\uNNNN`` so the output stays encodable as UTF-8.
    Everything else, non-ASCII included, is emitted verbatim.

    Args:
        text: Raw text to embed.

    Returns:
        str: Escaped text without surrounding quotes.
    """

    pieces: list[str] = []
    for char in text:
        named = _NAMED_ESCAPES.get(char)
        if named is not None:
            pieces.append(named)
            continue
        code = ord(char)
        if code < _FIRST_PRINTABLE or code == _DEL:
            pieces.append(f"\\x{code:02x}")
        elif code in _SURROGATES:
            pieces.append(f"\\u{code:04x}")
        else:
            pieces.append(char)
    return "".join(pieces)


def quote_string_literal(text: str) -> str:
    """Return ``text`` as a complete double-quoted Python string literal."""

    return f'"{escape_string_literal(text)}"'


__all__ = ["escape_string_literal", "quote_string_literal"]
