# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn annotated declarations into validated descriptors.

Identity fields (package, simple and canonical names) always come from the
declaration itself; the decorator only supplies the display metadata or the
binding targets. Every failure is raised as :class:`ValidationError` carrying
the declaration's canonical name and source location.
"""

from __future__ import annotations

from typing import Final

from .errors import ValidationError
from .extraction import AnnotatedDeclaration
from .models import ModuleDescriptor, TypeDescriptor
from .scanner import LiteralValue, TypeReference

COMPONENT_PARAMETERS: Final[tuple[str, ...]] = ("id", "title", "tooltip")
BINDINGS_PARAMETER: Final[str] = "bindings"


def _fail(annotated: AnnotatedDeclaration, detail: str, *, cause: Exception | None = None) -> ValidationError:
    error = ValidationError(
        f"Invalid @{annotated.annotation.name} on {annotated.canonical_name}: {detail}",
        location=annotated.declaration.location,
        canonical_name=annotated.canonical_name,
    )
    if cause is not None:
        error.__cause__ = cause
    return error


def _reject_unsupported(annotated: AnnotatedDeclaration) -> None:
    unsupported = annotated.annotation.unsupported()
    if unsupported:
        rendered = ", ".join(item.source for item in unsupported)
        raise _fail(annotated, f"arguments must be literals, found {rendered}")


def build_type_descriptor(annotated: AnnotatedDeclaration) -> TypeDescriptor:
    """Build the :class:`TypeDescriptor` for a portlet declaration.

    Args:
        annotated: Declaration selected by the component extraction pass.

    Returns:
        TypeDescriptor: Validated descriptor.

    Raises:
        ValidationError: If an argument is missing, not a string literal, or
            violates the descriptor invariants.
    """

    _reject_unsupported(annotated)
    try:
        bag = annotated.annotation.bind(COMPONENT_PARAMETERS)
    except ValidationError as exc:
        raise _fail(annotated, exc.message, cause=exc) from exc
    values: dict[str, str] = {}
    for name in COMPONENT_PARAMETERS:
        if name not in bag:
            raise _fail(annotated, f"missing required argument {name!r}")
        value = bag[name]
        if not isinstance(value, str):
            raise _fail(annotated, f"argument {name!r} must be a string literal, got {value!s}")
        values[name] = value
    declaration = annotated.declaration
    try:
        return TypeDescriptor(
            canonical_class_name=declaration.canonical_name,
            simple_name=declaration.simple_name,
            package_name=declaration.package_name,
            id=values["id"],
            title=values["title"],
            tooltip=values["tooltip"],
        )
    except ValidationError as exc:
        raise _fail(annotated, exc.message, cause=exc) from exc


def _binding_targets(annotated: AnnotatedDeclaration) -> tuple[LiteralValue, ...]:
    annotation = annotated.annotation
    keywords = annotation.keyword_map()
    unexpected = sorted(set(keywords) - {BINDINGS_PARAMETER})
    if unexpected:
        raise _fail(annotated, f"unexpected argument(s) {', '.join(repr(key) for key in unexpected)}")
    if BINDINGS_PARAMETER not in keywords:
        return annotation.positional
    if annotation.positional:
        raise _fail(annotated, "binding targets given both positionally and as 'bindings'")
    value = keywords[BINDINGS_PARAMETER]
    return value if isinstance(value, tuple) else (value,)


def build_module_descriptor(annotated: AnnotatedDeclaration) -> ModuleDescriptor:
    """Build the :class:`ModuleDescriptor` for a module registration declaration.

    Binding targets are accepted positionally (``@portlet_module(A, B)``) or via
    the ``bindings`` keyword holding one reference or a tuple/list of them.

    Args:
        annotated: Declaration selected by the module extraction pass.

    Returns:
        ModuleDescriptor: Validated descriptor with de-duplicated bindings.

    Raises:
        ValidationError: If no binding target is given or a target is not a
            class reference.
    """

    _reject_unsupported(annotated)
    targets = _binding_targets(annotated)
    bindings: list[str] = []
    for target in targets:
        if not isinstance(target, TypeReference):
            raise _fail(annotated, f"binding targets must be class references, got {target!r}")
        bindings.append(target.qualified)
    declaration = annotated.declaration
    try:
        return ModuleDescriptor(
            canonical_class_name=declaration.canonical_name,
            simple_name=declaration.simple_name,
            package_name=declaration.package_name,
            bindings=tuple(dict.fromkeys(bindings)),
        )
    except ValidationError as exc:
        raise _fail(annotated, exc.message, cause=exc) from exc


__all__ = [
    "BINDINGS_PARAMETER",
    "COMPONENT_PARAMETERS",
    "build_module_descriptor",
    "build_type_descriptor",
]
