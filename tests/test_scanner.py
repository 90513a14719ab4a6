# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the AST-backed source scanner."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from portletgen.diagnostics import DiagnosticCollector
from portletgen.discovery import iter_source_files, module_name_from_path
from portletgen.scanner import Annotation, Declaration, SourceScanner, TypeReference, UnsupportedArgument
from portletgen.severity import Severity

WriteSource = Callable[[Path, str, str], Path]


def _scan(root: Path, collector: DiagnosticCollector) -> dict[str, Declaration]:
    return {declaration.canonical_name: declaration for declaration in SourceScanner(root, sink=collector).declarations()}


def test_declarations_expose_names_and_locations(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
) -> None:
    write_source(tmp_path, "app/__init__.py", "")
    path = write_source(
        tmp_path,
        "app/portlets.py",
        """
        class Outer:
            class Inner:
                pass

        def factory():
            class Hidden:
                pass
            return Hidden
        """,
    )

    declarations = list(SourceScanner(tmp_path, sink=collector).declarations())

    assert [item.canonical_name for item in declarations] == ["app.portlets.Outer", "app.portlets.Outer.Inner"]
    inner = declarations[1]
    assert inner.simple_name == "Inner"
    assert inner.package_name == "app.portlets"
    assert inner.path == path.resolve()
    assert inner.line == 2
    assert collector.diagnostics == ()


def test_package_init_classes_use_package_name(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
) -> None:
    write_source(tmp_path, "app/widgets/__init__.py", "class Widget:\n    pass\n")

    found = _scan(tmp_path, collector)

    assert list(found) == ["app.widgets.Widget"]


def test_decorator_arguments_are_captured_as_literals(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
) -> None:
    write_source(
        tmp_path,
        "app/portlets.py",
        """
        from ui import portlet

        @portlet("entities", title="Entities", tooltip="Shows " "entities")
        @register
        class EntitiesPortlet:
            pass
        """,
    )

    declaration = _scan(tmp_path, collector)["app.portlets.EntitiesPortlet"]

    assert declaration.annotations == (
        Annotation(
            name="portlet",
            positional=("entities",),
            keywords=(("title", "Entities"), ("tooltip", "Shows entities")),
        ),
        Annotation(name="register"),
    )


def test_type_references_resolve_against_imports_and_local_classes(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
) -> None:
    write_source(tmp_path, "app/__init__.py", "")
    write_source(
        tmp_path,
        "app/modules.py",
        """
        import services.api as api
        import collections.abc
        from .views import EntityView as View
        from ..outside import Nope

        class Local:
            pass

        @portlet_module(bindings=[View, api.Service, Local, collections.abc.Mapping, Unknown, Nope])
        class EntityModule:
            pass
        """,
    )

    declaration = _scan(tmp_path, collector)["app.modules.EntityModule"]
    (annotation,) = declaration.annotations
    bindings = annotation.keyword_map()["bindings"]

    assert bindings == (
        TypeReference("View", "app.views.EntityView"),
        TypeReference("api.Service", "services.api.Service"),
        TypeReference("Local", "app.modules.Local"),
        TypeReference("collections.abc.Mapping", "collections.abc.Mapping"),
        TypeReference("Unknown", "Unknown"),
        TypeReference("Nope", "Nope"),
    )


def test_non_literal_arguments_are_preserved_as_unsupported(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
) -> None:
    write_source(
        tmp_path,
        "app/portlets.py",
        """
        @portlet(id=f"{PREFIX}-x", title=make_title(), tooltip="ok", **extra)
        class Dynamic:
            pass
        """,
    )

    (annotation,) = _scan(tmp_path, collector)["app.portlets.Dynamic"].annotations

    assert annotation.unsupported() == (
        UnsupportedArgument("f'{PREFIX}-x'"),
        UnsupportedArgument("make_title()"),
        UnsupportedArgument("extra"),
    )


def test_parse_failures_are_reported_and_skipped(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
) -> None:
    broken = write_source(tmp_path, "app/broken.py", "class Broken(:\n    pass\n")
    write_source(tmp_path, "app/good.py", "class Good:\n    pass\n")
    (tmp_path / "app" / "binary.py").write_bytes(b"\xff\xfe\x00garbage")

    found = _scan(tmp_path, collector)

    assert list(found) == ["app.good.Good"]
    assert len(collector.diagnostics) == 2
    assert all(item.severity is Severity.WARNING for item in collector.diagnostics)
    assert all(item.code == "parse" for item in collector.diagnostics)
    broken_diagnostic = next(item for item in collector.diagnostics if item.file == str(broken.resolve()))
    assert broken_diagnostic.line == 1


def test_root_level_init_is_reported(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
) -> None:
    write_source(tmp_path, "__init__.py", "class Orphan:\n    pass\n")

    assert _scan(tmp_path, collector) == {}
    assert [item.severity for item in collector.diagnostics] == [Severity.WARNING]


@pytest.mark.parametrize("relative", ["my-app/views.py", "class/views.py", "1x/views.py", "app/my-views.py"])
def test_non_importable_module_paths_are_reported(
    tmp_path: Path,
    write_source: WriteSource,
    collector: DiagnosticCollector,
    relative: str,
) -> None:
    path = write_source(
        tmp_path,
        relative,
        """
        @portlet(id="entities", title="Entities", tooltip="Shows the entity tree")
        class EntitiesPortlet:
            pass
        """,
    )

    assert _scan(tmp_path, collector) == {}
    (diagnostic,) = collector.diagnostics
    assert diagnostic.severity is Severity.WARNING
    assert diagnostic.code == "parse"
    assert diagnostic.file == str(path.resolve())
    assert "not importable" in diagnostic.message


def test_packages_named_like_build_output_are_scanned(tmp_path: Path, write_source: WriteSource) -> None:
    for name in ("build", "dist", "venv"):
        write_source(tmp_path, f"{name}/mod.py", "")
    write_source(tmp_path, ".venv/lib/skip.py", "")

    files = list(iter_source_files(tmp_path))

    assert files == [
        (tmp_path / "build" / "mod.py").resolve(),
        (tmp_path / "dist" / "mod.py").resolve(),
        (tmp_path / "venv" / "mod.py").resolve(),
    ]

def test_excluded_directories_are_not_scanned(tmp_path: Path, write_source: WriteSource) -> None:
    write_source(tmp_path, "app/keep.py", "")
    write_source(tmp_path, "app/__pycache__/skip.py", "")
    write_source(tmp_path, "app/fixtures/skip.py", "")
    write_source(tmp_path, "app/legacy/old/skip.py", "")
    write_source(tmp_path, "app/notes.txt", "")

    files = list(iter_source_files(tmp_path, exclude=["fixtures", "app/legacy"]))

    assert files == [(tmp_path / "app" / "keep.py").resolve()]


def test_module_name_from_path(tmp_path: Path) -> None:
    assert module_name_from_path(tmp_path / "pkg" / "mod.py", tmp_path) == "pkg.mod"
    assert module_name_from_path(tmp_path / "pkg" / "__init__.py", tmp_path) == "pkg"
    assert module_name_from_path(tmp_path / "top.py", tmp_path) == "top"
    assert module_name_from_path(tmp_path / "__init__.py", tmp_path) is None
    assert module_name_from_path(tmp_path.parent / "elsewhere.py", tmp_path) is None
