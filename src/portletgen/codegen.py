# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render descriptor sets into Python source artifacts with Jinja2.

Rendering is a pure function of the sorted descriptor sets and the templates:
descriptors are sorted by canonical class name before they reach a template
and nothing time- or environment-dependent is exposed to the templates.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
)

from .errors import GenerationError
from .literals import quote_string_literal
from .models import ModuleDescriptor, TypeDescriptor, type_sort_key

FACTORY_TEMPLATE: Final[str] = "portlet_factory.py.j2"
MODULE_TEMPLATE: Final[str] = "portlet_module.py.j2"
DEFAULT_FACTORY_MODULE: Final[str] = "portlet_factory"
_TEMPLATE_PACKAGE: Final[str] = "portletgen"
_TEMPLATE_DIR: Final[str] = "templates"
_PYTHON_SUFFIX: Final[str] = ".py"
_BINDINGS_SUFFIX: Final[str] = "_bindings"


@dataclass(frozen=True, slots=True)
class RenderedArtifact:
    """Generated source text and the path it should be written to.

    Attributes:
        relative_path: Output path relative to the output directory.
        text: Rendered source text.
    """

    relative_path: Path
    text: str


class CodeGenerator:
    """Render the portlet registry and per-module binding glue."""

    def __init__(
        self,
        *,
        factory_module: str = DEFAULT_FACTORY_MODULE,
        template_dir: Path | None = None,
    ) -> None:
        """Initialise the Jinja2 environment.

        Args:
            factory_module: Module name (without suffix) of the registry artifact.
            template_dir: Optional directory whose templates override the
                bundled ones by file name.

        Raises:
            GenerationError: If the template loaders cannot be created.
        """

        self._factory_module = factory_module
        try:
            loaders: list[FileSystemLoader | PackageLoader] = []
            if template_dir is not None:
                loaders.append(FileSystemLoader(str(template_dir)))
            loaders.append(PackageLoader(_TEMPLATE_PACKAGE, _TEMPLATE_DIR))
        except ValueError as exc:
            raise GenerationError(f"Couldn't initialise templates: {exc}") from exc
        self._env = Environment(
            loader=ChoiceLoader(loaders),
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["pystr"] = quote_string_literal

    def generate(
        self,
        type_descriptors: Iterable[TypeDescriptor],
        module_descriptors: Iterable[ModuleDescriptor],
    ) -> tuple[RenderedArtifact, ...]:
        """Render the registry plus one glue artifact per module descriptor.

        Args:
            type_descriptors: Portlet descriptors in any order.
            module_descriptors: Module registration descriptors in any order.

        Returns:
            tuple[RenderedArtifact, ...]: Registry artifact first, then module
            artifacts in canonical-name order.

        Raises:
            GenerationError: If a template is missing or fails to render.
        """

        types = sorted(set(type_descriptors), key=type_sort_key)
        modules = sorted(set(module_descriptors))
        imports = sorted({descriptor.package_name for descriptor in (*types, *modules)})
        artifacts = [
            RenderedArtifact(
                relative_path=Path(f"{self._factory_module}{_PYTHON_SUFFIX}"),
                text=self._render(
                    FACTORY_TEMPLATE,
                    type_descriptors=types,
                    module_descriptors=modules,
                    imports=imports,
                ),
            ),
        ]
        artifacts.extend(
            RenderedArtifact(
                relative_path=Path(f"{module.slug}{_BINDINGS_SUFFIX}{_PYTHON_SUFFIX}"),
                text=self._render(MODULE_TEMPLATE, module=module),
            )
            for module in modules
        )
        return tuple(artifacts)

    def _render(self, template_name: str, **context: object) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateError as exc:
            raise GenerationError(f"Couldn't render {template_name}: {exc}") from exc


__all__ = ["CodeGenerator", "DEFAULT_FACTORY_MODULE", "RenderedArtifact"]
