# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and ``[tool.portletgen]`` loading."""

from __future__ import annotations

import keyword
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .codegen import DEFAULT_FACTORY_MODULE
from .errors import ConfigError
from .extraction import DEFAULT_COMPONENT_MARKERS, DEFAULT_MODULE_MARKERS

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "portletgen"
DEFAULT_SOURCE_ROOT: Final[str] = "src"
DEFAULT_OUTPUT_DIR: Final[str] = "build/generated"


class GeneratorConfig(BaseModel):
    """Settings controlling where portletgen scans and what it generates."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    source_roots: list[Path] = Field(default_factory=lambda: [Path(DEFAULT_SOURCE_ROOT)])
    output_dir: Path = Field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    factory_module: str = DEFAULT_FACTORY_MODULE
    component_markers: list[str] = Field(default_factory=lambda: list(DEFAULT_COMPONENT_MARKERS))
    module_markers: list[str] = Field(default_factory=lambda: list(DEFAULT_MODULE_MARKERS))
    template_dir: Path | None = None
    exclude: list[str] = Field(default_factory=list)

    @field_validator("factory_module")
    @classmethod
    def _check_factory_module(cls, value: str) -> str:
        """Ensure the registry module name is a valid Python identifier.

        Args:
            value: Candidate module name.

        Returns:
            str: The validated module name.
        """

        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(f"factory_module must be a Python identifier, got {value!r}")
        return value

    @field_validator("component_markers", "module_markers")
    @classmethod
    def _check_markers(cls, value: list[str]) -> list[str]:
        """Require at least one dotted decorator name per marker kind.

        Args:
            value: Candidate marker names.

        Returns:
            list[str]: Stripped marker names.
        """

        markers = [marker.strip() for marker in value if marker.strip()]
        if not markers:
            raise ValueError("at least one marker name is required")
        for marker in markers:
            if not all(part.isidentifier() for part in marker.split(".")):
                raise ValueError(f"marker names must be dotted identifiers, got {marker!r}")
        return markers

    def resolved(self, project_root: Path) -> GeneratorConfig:
        """Return a copy whose relative paths are anchored at ``project_root``.

        Args:
            project_root: Directory relative paths are resolved against.

        Returns:
            GeneratorConfig: Copy with absolute ``source_roots``,
            ``output_dir`` and ``template_dir``.
        """

        root = project_root.resolve()
        return self.model_copy(
            update={
                "source_roots": [_anchor(path, root) for path in self.source_roots],
                "output_dir": _anchor(self.output_dir, root),
                "template_dir": _anchor(self.template_dir, root) if self.template_dir is not None else None,
            },
        )


def _anchor(path: Path, root: Path) -> Path:
    return path if path.is_absolute() else root / path


class PyProjectConfigSource:
    """Read configuration from ``[tool.portletgen]`` within ``pyproject.toml``."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self.name = str(path)

    def load(self) -> Mapping[str, Any]:
        """Return the raw ``[tool.portletgen]`` table, or ``{}`` when absent.

        Raises:
            ConfigError: If the file cannot be read or is not valid TOML.
        """

        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Couldn't load {self._path}: {exc}") from exc
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {self._path} must be a table")
        return dict(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


def load_config(
    project_root: Path,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> GeneratorConfig:
    """Load configuration for ``project_root``.

    Values from ``[tool.portletgen]`` in ``pyproject.toml`` are applied over the
    defaults, then non-``None`` entries of ``overrides`` (typically CLI flags).

    Args:
        project_root: Project directory containing ``pyproject.toml``.
        overrides: Optional field overrides with higher precedence.

    Returns:
        GeneratorConfig: Validated configuration with absolute paths.

    Raises:
        ConfigError: If the file or any value is invalid.
    """

    source = PyProjectConfigSource(project_root / PYPROJECT_FILENAME)
    data = dict(source.load())
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    try:
        config = GeneratorConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source.describe()}: {exc}") from exc
    return config.resolved(project_root)


__all__ = [
    "GeneratorConfig",
    "PyProjectConfigSource",
    "load_config",
]
