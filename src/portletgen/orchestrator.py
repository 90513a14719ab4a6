# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compose scanning, extraction, building and generation into one run.

Source roots are processed sequentially. Parse and validation problems are
recorded in the diagnostic sink and never abort the run; setup problems and
generation failures raise.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .builder import build_module_descriptor, build_type_descriptor
from .codegen import CodeGenerator, RenderedArtifact
from .config import GeneratorConfig
from .diagnostics import Diagnostic, DiagnosticCollector
from .errors import SetupError, ValidationError
from .extraction import AnnotatedDeclaration, extract_component_declarations, extract_module_declarations
from .logging import info
from .models import ModuleDescriptor, TypeDescriptor, type_sort_key
from .scanner import SourceScanner
from .severity import Severity
from .writer import SourceWriter

_VALIDATION_CODE: Final[str] = "validation"


@dataclass(frozen=True, slots=True)
class DescriptorSets:
    """Descriptors discovered across all source roots."""

    type_descriptors: frozenset[TypeDescriptor] = field(default_factory=frozenset)
    module_descriptors: frozenset[ModuleDescriptor] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of :func:`run_generation`.

    Attributes:
        descriptors: Deduplicated descriptor sets fed to the generator.
        artifacts: Rendered artifacts in emission order.
        written: Paths of the persisted artifacts (empty on dry runs).
        diagnostics: Parse and validation diagnostics in report order.
    """

    descriptors: DescriptorSets
    artifacts: tuple[RenderedArtifact, ...]
    written: tuple[Path, ...]
    diagnostics: tuple[Diagnostic, ...]

    @property
    def error_count(self) -> int:
        """Return the number of declarations skipped because they were invalid."""

        return sum(1 for diagnostic in self.diagnostics if diagnostic.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        """Return the number of files skipped because they could not be parsed."""

        return sum(1 for diagnostic in self.diagnostics if diagnostic.severity is Severity.WARNING)


def validate_source_roots(roots: Sequence[Path]) -> tuple[Path, ...]:
    """Return resolved source roots or raise when the run cannot start.

    Args:
        roots: Candidate source root directories.

    Returns:
        tuple[Path, ...]: Resolved, de-duplicated roots in the given order.

    Raises:
        SetupError: If no roots are given or a root is not a readable directory.
    """

    if not roots:
        raise SetupError("No source roots configured")
    resolved: dict[Path, None] = {}
    for root in roots:
        if not root.is_dir():
            raise SetupError(f"Source root does not exist or is not a directory: {root}")
        if not os.access(root, os.R_OK | os.X_OK):
            raise SetupError(f"Source root is not readable: {root}")
        resolved[root.resolve()] = None
    return tuple(resolved)


def collect_descriptors(
    roots: Iterable[Path],
    *,
    config: GeneratorConfig,
    sink: DiagnosticCollector,
) -> DescriptorSets:
    """Scan every root and union the descriptors built from it.

    Descriptors found under more than one root collapse silently under set
    semantics.

    Args:
        roots: Source roots to scan, already validated.
        config: Marker names and exclusions to apply.
        sink: Receives parse warnings and validation errors.

    Returns:
        DescriptorSets: Union of the per-root descriptor sets.
    """

    types: set[TypeDescriptor] = set()
    modules: set[ModuleDescriptor] = set()
    for root in roots:
        scanner = SourceScanner(root, sink=sink, exclude=config.exclude)
        declarations = tuple(scanner.declarations())
        components = extract_component_declarations(declarations, config.component_markers)
        for annotated in sorted(components, key=_by_canonical_name):
            try:
                types.add(build_type_descriptor(annotated))
            except ValidationError as exc:
                sink.report_error(exc, Severity.ERROR, code=_VALIDATION_CODE)
        registrations = extract_module_declarations(declarations, config.module_markers)
        for annotated in sorted(registrations, key=_by_canonical_name):
            try:
                modules.add(build_module_descriptor(annotated))
            except ValidationError as exc:
                sink.report_error(exc, Severity.ERROR, code=_VALIDATION_CODE)
    return DescriptorSets(type_descriptors=frozenset(types), module_descriptors=frozenset(modules))


def _by_canonical_name(annotated: AnnotatedDeclaration) -> tuple[str, str, int]:
    declaration = annotated.declaration
    return annotated.canonical_name, declaration.path.as_posix(), declaration.line


def run_generation(
    config: GeneratorConfig,
    *,
    sink: DiagnosticCollector | None = None,
    writer: SourceWriter | None = None,
    dry_run: bool = False,
    use_emoji: bool = True,
) -> GenerationResult:
    """Scan the configured roots, render the artifacts and write them.

    Args:
        config: Resolved generator configuration.
        sink: Optional diagnostic collector; a fresh one is used when omitted.
        writer: Optional writer; defaults to one targeting ``config.output_dir``.
        dry_run: Render without writing anything to disk.
        use_emoji: Whether per-portlet log lines may include emoji.

    Returns:
        GenerationResult: Descriptors, artifacts, written paths and diagnostics.

    Raises:
        SetupError: If the source roots are missing or unreadable.
        GenerationError: If templates fail to render or output cannot be written.
    """

    collector = sink if sink is not None else DiagnosticCollector()
    roots = validate_source_roots(config.source_roots)
    generator = CodeGenerator(factory_module=config.factory_module, template_dir=config.template_dir)
    descriptors = collect_descriptors(roots, config=config, sink=collector)
    artifacts = generator.generate(descriptors.type_descriptors, descriptors.module_descriptors)
    written: tuple[Path, ...] = ()
    if not dry_run:
        target = writer if writer is not None else SourceWriter(config.output_dir)
        written = target.write(artifacts)
    for descriptor in sorted(descriptors.type_descriptors, key=type_sort_key):
        info(f"[Portlet] {descriptor.id}", use_emoji=use_emoji)
    return GenerationResult(
        descriptors=descriptors,
        artifacts=artifacts,
        written=written,
        diagnostics=collector.diagnostics,
    )


__all__ = [
    "DescriptorSets",
    "GenerationResult",
    "collect_descriptors",
    "run_generation",
    "validate_source_roots",
]
