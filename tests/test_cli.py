# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the portletgen command-line interface."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from typer.testing import CliRunner

from portletgen.cli.app import app

WriteSource = Callable[[Path, str, str], Path]

PORTLET_SOURCE = """
from ui import portlet, portlet_module

@portlet(id="entities", title="Entities", tooltip="Shows the entity tree")
class EntitiesPortlet:
    pass

@portlet_module(EntitiesPortlet)
class EntitiesModule:
    pass
"""


def _setup_project(root: Path, write_source: WriteSource) -> None:
    write_source(root, "src/app/portlets.py", PORTLET_SOURCE)
    write_source(root, "src/app/broken.py", "class Broken(\n")


def test_generate_writes_registry(tmp_path: Path, write_source: WriteSource) -> None:
    _setup_project(tmp_path, write_source)
    runner = CliRunner()

    result = runner.invoke(app, ["generate", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 0, result.stdout
    generated = tmp_path / "build" / "generated"
    assert (generated / "portlet_factory.py").is_file()
    assert len(list(generated.glob("app_portlets_entitiesmodule_*_bindings.py"))) == 1
    assert "[Portlet] entities" in result.stdout
    assert "Generated 2 artifact(s) for 1 portlet(s) and 1 module(s)" in result.stdout
    assert "src/app/broken.py:1" in result.stdout
    assert "Skipped 1 unparseable file(s)" in result.stdout


def test_generate_dry_run_lists_paths(tmp_path: Path, write_source: WriteSource) -> None:
    _setup_project(tmp_path, write_source)
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "generate",
            "--root",
            str(tmp_path),
            "--output-dir",
            str(tmp_path / "out"),
            "--dry-run",
            "--no-emoji",
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert "DRY RUN" in result.stdout
    assert "out/portlet_factory.py" in result.stdout
    assert not (tmp_path / "out").exists()


def test_generate_fails_for_missing_source_root(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "--root", str(tmp_path), "--source-root", str(tmp_path / "missing"), "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "does not exist" in result.stdout
    assert not (tmp_path / "build").exists()


def test_generate_fails_for_invalid_configuration(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.portletgen]\nfactory_module = "not-valid"\n', encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["generate", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "factory_module" in result.stdout


def test_list_prints_discovered_portlets(tmp_path: Path, write_source: WriteSource) -> None:
    _setup_project(tmp_path, write_source)
    runner = CliRunner()

    result = runner.invoke(app, ["list", "--root", str(tmp_path), "--no-emoji"], env={"COLUMNS": "200"})

    assert result.exit_code == 0, result.stdout
    assert "entities" in result.stdout
    assert "D33D92F74E2D9406A410326E194FFF69" in result.stdout
    assert not (tmp_path / "build").exists()
