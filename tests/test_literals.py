# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for Python string literal escaping."""

from __future__ import annotations

import ast

import pytest

from portletgen.literals import escape_string_literal, quote_string_literal


@pytest.mark.parametrize(
    "text",
    [
        'Say "hi"',
        "C:\\temp\\new",
        "line one\nline two\r\n\ttabbed",
        "bell\x07 nul\x00 del\x7f",
        "Ünïcödé ✓ 日本語",
        "trailing backslash \\",
        "lone surrogate \ud800",
    ],
)
def test_escaped_literal_parses_back_to_original(text: str) -> None:
    assert ast.literal_eval(quote_string_literal(text)) == text


def test_escape_uses_named_escapes() -> None:
    assert escape_string_literal('a"b\\c\nd') == 'a\\"b\\\\c\\nd'


def test_escape_keeps_non_ascii_verbatim() -> None:
    assert escape_string_literal("café") == "café"


def test_escape_renders_other_controls_as_hex() -> None:
    assert escape_string_literal("\x01\x7f") == "\\x01\\x7f"
