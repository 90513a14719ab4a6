# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Persist rendered artifacts beneath the generated-sources directory."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Final

from .codegen import RenderedArtifact
from .errors import GenerationError

_ENCODING: Final[str] = "utf-8"


class SourceWriter:
    """Write rendered artifacts into ``output_dir``."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir

    def target_for(self, artifact: RenderedArtifact) -> Path:
        """Return the destination path of ``artifact``.

        Raises:
            GenerationError: If the artifact path escapes the output directory.
        """

        target = self._output_dir / artifact.relative_path
        if artifact.relative_path.is_absolute() or ".." in artifact.relative_path.parts:
            raise GenerationError(f"Refusing to write outside {self._output_dir}: {artifact.relative_path}")
        return target

    def write(self, artifacts: Iterable[RenderedArtifact]) -> tuple[Path, ...]:
        """Write every artifact, creating directories as needed.

        Files whose content is unchanged are left untouched so their
        modification time stays stable across runs.

        Args:
            artifacts: Rendered artifacts to persist.

        Returns:
            tuple[Path, ...]: Paths of all artifacts, written or already current.

        Raises:
            GenerationError: If a directory or file cannot be written.
        """

        written: list[Path] = []
        for artifact in artifacts:
            target = self.target_for(artifact)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                if not target.is_file() or target.read_text(encoding=_ENCODING) != artifact.text:
                    target.write_text(artifact.text, encoding=_ENCODING, newline="\n")
            except (OSError, UnicodeDecodeError) as exc:
                raise GenerationError(f"Couldn't write {target}: {exc}") from exc
            written.append(target)
        return tuple(written)


__all__ = ["SourceWriter"]
