# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for descriptor building from decorator arguments."""

from __future__ import annotations

from pathlib import Path

import pytest

from portletgen.builder import build_module_descriptor, build_type_descriptor
from portletgen.errors import SourceLocation, ValidationError
from portletgen.extraction import AnnotatedDeclaration
from portletgen.scanner import Annotation, Declaration, LiteralValue, TypeReference, UnsupportedArgument


def _annotated(
    *positional: LiteralValue,
    name: str = "portlet",
    **keywords: LiteralValue,
) -> AnnotatedDeclaration:
    annotation = Annotation(name=name, positional=positional, keywords=tuple(keywords.items()))
    declaration = Declaration(
        simple_name="EntitiesPortlet",
        package_name="app.portlets",
        canonical_name="app.portlets.EntitiesPortlet",
        annotations=(annotation,),
        path=Path("/src/app/portlets.py"),
        line=12,
    )
    return AnnotatedDeclaration(declaration, annotation)


def test_keyword_arguments_build_descriptor() -> None:
    descriptor = build_type_descriptor(_annotated(id="entities", title="Entities", tooltip="Entity tree"))

    assert descriptor.canonical_class_name == "app.portlets.EntitiesPortlet"
    assert descriptor.simple_name == "EntitiesPortlet"
    assert descriptor.package_name == "app.portlets"
    assert (descriptor.id, descriptor.title, descriptor.tooltip) == ("entities", "Entities", "Entity tree")


def test_positional_and_keyword_arguments_mix() -> None:
    descriptor = build_type_descriptor(_annotated("entities", "Entities", tooltip="Entity tree"))

    assert descriptor.tooltip == "Entity tree"


@pytest.mark.parametrize(
    ("annotated", "fragment"),
    [
        (_annotated(id="entities", title="Entities"), "missing required argument 'tooltip'"),
        (_annotated(id="entities", title="Entities", tooltip=3), "'tooltip' must be a string literal"),
        (_annotated(id='"entities"', title="Entities", tooltip="Tree"), "double quote"),
        (_annotated(id="entities", title="", tooltip="Tree"), "title must not be empty"),
        (_annotated("a", "b", "c", "d"), "at most 3 positional"),
        (_annotated(id="a", title="b", tooltip="c", icon="d"), "unexpected argument 'icon'"),
        (_annotated("a", "b", "c", id="again"), "multiple values for argument 'id'"),
        (
            _annotated(id=UnsupportedArgument("make_id()"), title="b", tooltip="c"),
            "arguments must be literals, found make_id()",
        ),
    ],
)
def test_invalid_arguments_raise_validation_error(annotated: AnnotatedDeclaration, fragment: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        build_type_descriptor(annotated)

    error = excinfo.value
    assert fragment in error.message
    assert "app.portlets.EntitiesPortlet" in error.message
    assert error.canonical_name == "app.portlets.EntitiesPortlet"
    assert error.location == SourceLocation(Path("/src/app/portlets.py"), 12)


def test_module_descriptor_from_positional_references() -> None:
    annotated = _annotated(
        TypeReference("View", "app.views.View"),
        TypeReference("Presenter", "app.views.Presenter"),
        TypeReference("View", "app.views.View"),
        name="portlet_module",
    )

    descriptor = build_module_descriptor(annotated)

    assert descriptor.canonical_class_name == "app.portlets.EntitiesPortlet"
    assert descriptor.bindings == ("app.views.View", "app.views.Presenter")


def test_module_descriptor_from_bindings_keyword() -> None:
    single = _annotated(name="portlet_module", bindings=TypeReference("View", "app.views.View"))
    many = _annotated(
        name="portlet_module",
        bindings=(TypeReference("View", "app.views.View"), TypeReference("api.Svc", "api.Svc")),
    )

    assert build_module_descriptor(single).bindings == ("app.views.View",)
    assert build_module_descriptor(many).bindings == ("app.views.View", "api.Svc")


@pytest.mark.parametrize(
    ("annotated", "fragment"),
    [
        (_annotated(name="portlet_module"), "bindings must name at least one target type"),
        (_annotated("app.views.View", name="portlet_module"), "must be class references"),
        (_annotated(name="portlet_module", targets=()), "unexpected argument(s) 'targets'"),
        (
            _annotated(
                TypeReference("A", "a.A"),
                name="portlet_module",
                bindings=TypeReference("B", "b.B"),
            ),
            "both positionally and as 'bindings'",
        ),
        (
            _annotated(name="portlet_module", bindings=(UnsupportedArgument("load()"),)),
            "arguments must be literals",
        ),
    ],
)
def test_invalid_module_arguments_raise_validation_error(annotated: AnnotatedDeclaration, fragment: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        build_module_descriptor(annotated)

    assert fragment in excinfo.value.message
    assert excinfo.value.canonical_name == "app.portlets.EntitiesPortlet"
