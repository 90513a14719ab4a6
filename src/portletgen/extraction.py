# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filter scanned declarations down to those carrying a marker decorator."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

from .scanner import Annotation, Declaration

DEFAULT_COMPONENT_MARKERS: Final[tuple[str, ...]] = ("portlet",)
DEFAULT_MODULE_MARKERS: Final[tuple[str, ...]] = ("portlet_module",)


@dataclass(frozen=True, slots=True)
class AnnotatedDeclaration:
    """Pair a declaration with the marker decorator that selected it."""

    declaration: Declaration
    annotation: Annotation

    @property
    def canonical_name(self) -> str:
        """Return the canonical name of the underlying declaration."""

        return self.declaration.canonical_name


def _extract(declarations: Iterable[Declaration], markers: Iterable[str]) -> frozenset[AnnotatedDeclaration]:
    """Return one entry per declaration decorated with any of ``markers``.

    When a class carries the same marker more than once, the first occurrence
    (the outermost decorator) wins.
    """

    marker_list = tuple(markers)
    selected: dict[Declaration, AnnotatedDeclaration] = {}
    for declaration in declarations:
        if declaration in selected:
            continue
        matches = declaration.annotations_matching(marker_list)
        if matches:
            selected[declaration] = AnnotatedDeclaration(declaration, matches[0])
    return frozenset(selected.values())


def extract_component_declarations(
    declarations: Iterable[Declaration],
    markers: Iterable[str] = DEFAULT_COMPONENT_MARKERS,
) -> frozenset[AnnotatedDeclaration]:
    """Select declarations decorated with a portlet component marker.

    Args:
        declarations: Declarations produced by a :class:`SourceScanner`.
        markers: Decorator names identifying portlet classes.

    Returns:
        frozenset[AnnotatedDeclaration]: Matching declarations with the
        decorator carrying ``id``, ``title`` and ``tooltip``.
    """

    return _extract(declarations, markers)


def extract_module_declarations(
    declarations: Iterable[Declaration],
    markers: Iterable[str] = DEFAULT_MODULE_MARKERS,
) -> frozenset[AnnotatedDeclaration]:
    """Select declarations decorated with a portlet module registration marker.

    Args:
        declarations: Declarations produced by a :class:`SourceScanner`.
        markers: Decorator names identifying module registrations.

    Returns:
        frozenset[AnnotatedDeclaration]: Matching declarations with the
        decorator carrying the binding targets.
    """

    return _extract(declarations, markers)


__all__ = [
    "DEFAULT_COMPONENT_MARKERS",
    "DEFAULT_MODULE_MARKERS",
    "AnnotatedDeclaration",
    "extract_component_declarations",
    "extract_module_declarations",
]
