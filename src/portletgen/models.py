# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Immutable descriptors for discovered portlet types and module registrations.

Both descriptor kinds sort by ``canonical_class_name`` so generated output is
emitted in the same order no matter how the descriptors were collected.
:class:`TypeDescriptor` compares structurally over its six input fields while
:class:`ModuleDescriptor` compares by class identity only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .errors import ValidationError
from .hashing import field_context, stable_hash
from .literals import escape_string_literal

_QUOTE: Final[str] = '"'
_TITLE_FIELD: Final[str] = "title"
_TOOLTIP_FIELD: Final[str] = "tooltip"
_SLUG_CONTEXT: Final[str] = "module"
_SLUG_DIGEST_LENGTH: Final[int] = 8


def _require_text(value: object, field_name: str) -> str:
    """Return ``value`` when it is a non-empty string.

    Args:
        value: Candidate field value.
        field_name: Field name used in the error message.

    Returns:
        str: The validated value.

    Raises:
        ValidationError: If ``value`` is missing, not a string, or empty.
    """

    if value is None:
        raise ValidationError(f"{field_name} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string, got {type(value).__name__}")
    if not value:
        raise ValidationError(f"{field_name} must not be empty")
    return value


def _require_unquoted(value: str, field_name: str) -> None:
    """Reject values that already carry a leading or trailing double quote."""

    if value.startswith(_QUOTE) or value.endswith(_QUOTE):
        raise ValidationError(f"{field_name} must not start or end with a double quote: {value!r}")


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Describe one portlet class discovered in the scanned sources.

    Attributes:
        canonical_class_name: Dotted module path plus qualname of the class.
        simple_name: Bare class name.
        package_name: Dotted name of the module declaring the class.
        id: Portlet identifier.
        title: Display title.
        tooltip: Display tooltip.
        title_hash: Stable lookup key derived from ``id`` and ``title``.
        tooltip_hash: Stable lookup key derived from ``id`` and ``tooltip``.
    """

    canonical_class_name: str
    simple_name: str
    package_name: str
    id: str
    title: str
    tooltip: str
    title_hash: str = field(init=False, compare=False, repr=False)
    tooltip_hash: str = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate the inputs and derive the stable hash keys.

        Raises:
            ValidationError: If any field is missing or empty, or if ``id``,
                ``title`` or ``tooltip`` is wrapped in double quotes.
        """

        _require_text(self.canonical_class_name, "canonical_class_name")
        _require_text(self.simple_name, "simple_name")
        _require_text(self.package_name, "package_name")
        for name in ("id", _TITLE_FIELD, _TOOLTIP_FIELD):
            _require_unquoted(_require_text(getattr(self, name), name), name)
        object.__setattr__(self, "title_hash", stable_hash(self.title, field_context(self.id, _TITLE_FIELD)))
        object.__setattr__(
            self,
            "tooltip_hash",
            stable_hash(self.tooltip, field_context(self.id, _TOOLTIP_FIELD)),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.canonical_class_name < other.canonical_class_name

    @property
    def escaped_id(self) -> str:
        """Return the id escaped for a double-quoted Python string literal."""

        return escape_string_literal(self.id)

    @property
    def escaped_title(self) -> str:
        """Return the title escaped for a double-quoted Python string literal."""

        return escape_string_literal(self.title)

    @property
    def escaped_tooltip(self) -> str:
        """Return the tooltip escaped for a double-quoted Python string literal."""

        return escape_string_literal(self.tooltip)

    def __str__(self) -> str:
        return f"TypeDescriptor{{{self.id}, {self.title}, {self.canonical_class_name}}}"


@dataclass(frozen=True, slots=True, eq=False)
class ModuleDescriptor:
    """Describe a class registering portlet bindings with a dependency module.

    Attributes:
        canonical_class_name: Dotted module path plus qualname of the class.
        simple_name: Bare class name.
        package_name: Dotted name of the module declaring the class.
        bindings: Fully-qualified names of the binding target types.
    """

    canonical_class_name: str
    simple_name: str
    package_name: str
    bindings: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate names and binding targets.

        Raises:
            ValidationError: If a name is missing or no binding target is given.
        """

        _require_text(self.canonical_class_name, "canonical_class_name")
        _require_text(self.simple_name, "simple_name")
        _require_text(self.package_name, "package_name")
        if not isinstance(self.bindings, tuple) or not self.bindings:
            raise ValidationError("bindings must name at least one target type")
        for binding in self.bindings:
            _require_text(binding, "binding")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleDescriptor):
            return NotImplemented
        return self.canonical_class_name == other.canonical_class_name

    def __hash__(self) -> int:
        return hash(self.canonical_class_name)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ModuleDescriptor):
            return NotImplemented
        return self.canonical_class_name < other.canonical_class_name

    @property
    def slug(self) -> str:
        """Return a module-name-safe slug unique to the canonical name.

        The readable prefix alone can collide (``a.b_c.M`` and ``a_b.c.M``, or
        names differing only in case), so a short digest of the exact canonical
        name is appended.
        """

        prefix = self.canonical_class_name.replace(".", "_").lower()
        digest = stable_hash(self.canonical_class_name, _SLUG_CONTEXT)[:_SLUG_DIGEST_LENGTH].lower()
        return f"{prefix}_{digest}"


def type_sort_key(descriptor: TypeDescriptor) -> tuple[str, ...]:
    """Return a total ordering key for ``descriptor``.

    Descriptors with the same canonical class name but different metadata are
    unequal yet compare neither less nor greater, so ``sorted`` alone would keep
    their (hash-seed dependent) set order. The remaining inputs break the tie.
    """

    return (
        descriptor.canonical_class_name,
        descriptor.package_name,
        descriptor.simple_name,
        descriptor.id,
        descriptor.title,
        descriptor.tooltip,
    )


__all__ = ["ModuleDescriptor", "TypeDescriptor", "type_sort_key"]
