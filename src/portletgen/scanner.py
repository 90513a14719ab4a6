# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""AST-backed scanner exposing class declarations and their decorators.

The scanner parses every Python file beneath a source root with :mod:`ast` and
yields one :class:`Declaration` per class definition (nested classes included,
classes defined inside functions skipped). Decorator arguments are captured as
literal values only: strings and other constants, dotted names (resolved
against the file's imports and local classes), and tuples or lists of those.
Anything else is preserved as :class:`UnsupportedArgument` so the declaration
can be rejected later without aborting the scan.
"""

from __future__ import annotations

import ast
import keyword
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TypeAlias

from .diagnostics import DiagnosticSink
from .discovery import iter_source_files, module_name_from_path
from .errors import ParseError, SourceLocation, ValidationError
from .severity import Severity

_INIT_FILENAME: Final[str] = "__init__.py"
_PARSE_CODE: Final[str] = "parse"


@dataclass(frozen=True, slots=True)
class TypeReference:
    """Reference to a class or type used as a decorator argument.

    Attributes:
        written: Dotted name exactly as it appears in the source.
        qualified: Fully-qualified name after import resolution, or
            ``written`` when the name could not be resolved.
    """

    written: str
    qualified: str

    def __str__(self) -> str:
        return self.qualified


@dataclass(frozen=True, slots=True)
class UnsupportedArgument:
    """Placeholder for a decorator argument that is not a literal."""

    source: str

    def __str__(self) -> str:
        return self.source


LiteralValue: TypeAlias = (
    str | int | float | bool | None | TypeReference | UnsupportedArgument | tuple["LiteralValue", ...]
)


@dataclass(frozen=True, slots=True)
class Annotation:
    """Decorator attached to a class declaration with its literal arguments."""

    name: str
    positional: tuple[LiteralValue, ...] = ()
    keywords: tuple[tuple[str, LiteralValue], ...] = ()

    def matches(self, marker: str) -> bool:
        """Return ``True`` when the decorator refers to ``marker``.

        ``@portlet`` and ``@widgets.portlet`` both match the marker ``portlet``.
        """

        return self.name == marker or self.name.endswith(f".{marker}")

    def keyword_map(self) -> dict[str, LiteralValue]:
        """Return keyword arguments as an ordered mapping."""

        return dict(self.keywords)

    def unsupported(self) -> tuple[UnsupportedArgument, ...]:
        """Return every non-literal argument, nested tuples included."""

        found: list[UnsupportedArgument] = []
        pending: list[LiteralValue] = [*self.positional, *(value for _, value in self.keywords)]
        while pending:
            value = pending.pop(0)
            if isinstance(value, UnsupportedArgument):
                found.append(value)
            elif isinstance(value, tuple):
                pending.extend(value)
        return tuple(found)

    def bind(self, names: Sequence[str]) -> dict[str, LiteralValue]:
        """Map positional arguments onto ``names`` and merge keyword arguments.

        Args:
            names: Parameter names accepted by the marker, in positional order.

        Returns:
            dict[str, LiteralValue]: Ordered argument bag keyed by parameter name.

        Raises:
            ValidationError: If there are too many positional arguments, an
                unknown keyword, or a parameter supplied twice.
        """

        if len(self.positional) > len(names):
            raise ValidationError(
                f"@{self.name} accepts at most {len(names)} positional argument(s), got {len(self.positional)}",
            )
        bound: dict[str, LiteralValue] = dict(zip(names, self.positional, strict=False))
        for key, value in self.keywords:
            if key not in names:
                raise ValidationError(f"@{self.name} got an unexpected argument {key!r}")
            if key in bound:
                raise ValidationError(f"@{self.name} got multiple values for argument {key!r}")
            bound[key] = value
        return bound


@dataclass(frozen=True, slots=True)
class Declaration:
    """Class definition discovered while scanning a source root."""

    simple_name: str
    package_name: str
    canonical_name: str
    annotations: tuple[Annotation, ...]
    path: Path
    line: int

    @property
    def location(self) -> SourceLocation:
        """Return the source location of the ``class`` statement."""

        return SourceLocation(self.path, self.line)

    def annotations_matching(self, markers: Iterable[str]) -> tuple[Annotation, ...]:
        """Return the decorators matching any of ``markers``."""

        marker_list = tuple(markers)
        return tuple(item for item in self.annotations if any(item.matches(marker) for marker in marker_list))


class SourceScanner:
    """Scan one source root for class declarations."""

    def __init__(
        self,
        root: Path,
        *,
        sink: DiagnosticSink,
        exclude: Iterable[str] | None = None,
    ) -> None:
        """Bind the scanner to ``root``.

        Args:
            root: Source root directory; module names are computed against it.
            sink: Receives a warning for every file that cannot be parsed.
            exclude: Optional directory names or relative paths to skip.
        """

        self._root = root.resolve()
        self._sink = sink
        self._exclude = tuple(exclude or ())

    @property
    def root(self) -> Path:
        """Return the resolved source root."""

        return self._root

    def declarations(self) -> Iterator[Declaration]:
        """Lazily yield declarations from every parseable file under the root.

        Files that fail to parse are reported to the sink at warning level and
        contribute nothing.

        Yields:
            Declaration: Class declarations in file order.
        """

        for path in iter_source_files(self._root, exclude=self._exclude):
            try:
                found = self.scan_file(path)
            except ParseError as exc:
                self._sink.report(Severity.WARNING, exc.message, location=exc.location, code=_PARSE_CODE)
                continue
            yield from found

    def scan_file(self, path: Path) -> tuple[Declaration, ...]:
        """Parse ``path`` and return its class declarations.

        Args:
            path: Python file located beneath the scanner root.

        Returns:
            tuple[Declaration, ...]: Declarations in source order.

        Raises:
            ParseError: If the file cannot be read, decoded or parsed, or if no
                importable module name can be derived for it.
        """

        module = module_name_from_path(path, self._root)
        if module is None:
            raise ParseError(
                f"Couldn't derive a module name for {path.name} relative to {self._root}",
                location=SourceLocation(path),
            )
        invalid = [part for part in module.split(".") if not part.isidentifier() or keyword.iskeyword(part)]
        if invalid:
            raise ParseError(
                f"Module path {module!r} is not importable: {', '.join(repr(part) for part in invalid)}",
                location=SourceLocation(path),
            )
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise ParseError(f"Couldn't read file: {exc}", location=SourceLocation(path)) from exc
        try:
            tree = ast.parse(source, filename=str(path))
        except SyntaxError as exc:
            raise ParseError(
                f"Couldn't parse file: {exc.msg}",
                location=SourceLocation(path, exc.lineno),
            ) from exc
        except ValueError as exc:
            raise ParseError(f"Couldn't parse file: {exc}", location=SourceLocation(path)) from exc
        resolver = _NameResolver.from_module(tree, module, is_package=path.name == _INIT_FILENAME)
        collector = _DeclarationCollector(path, module, resolver)
        collector.visit(tree)
        return tuple(collector.declarations)


class _NameResolver:
    """Resolve dotted names against a module's imports and class definitions."""

    def __init__(self, module: str, bindings: Mapping[str, str]) -> None:
        self._module = module
        self._bindings = dict(bindings)

    @classmethod
    def from_module(cls, tree: ast.Module, module: str, *, is_package: bool) -> _NameResolver:
        """Build a resolver from the imports and top-level classes of ``tree``.

        Args:
            tree: Parsed module.
            module: Dotted module name of ``tree``.
            is_package: ``True`` when ``tree`` is a package ``__init__``.

        Returns:
            _NameResolver: Resolver bound to the module's namespace.
        """

        package_parts = module.split(".") if is_package else module.split(".")[:-1]
        bindings: dict[str, str] = {}
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname:
                        bindings[alias.asname] = alias.name
                    else:
                        head = alias.name.split(".", 1)[0]
                        bindings[head] = head
            elif isinstance(node, ast.ImportFrom):
                base = _import_base(node, package_parts)
                if base is None:
                    continue
                for alias in node.names:
                    if alias.name == "*":
                        continue
                    target = f"{base}.{alias.name}" if base else alias.name
                    bindings[alias.asname or alias.name] = target
        for statement in tree.body:
            if isinstance(statement, ast.ClassDef):
                bindings[statement.name] = f"{module}.{statement.name}"
        return cls(module, bindings)

    def resolve(self, written: str) -> str:
        """Return the fully-qualified form of ``written`` when it can be resolved."""

        head, _, rest = written.partition(".")
        target = self._bindings.get(head)
        if target is None:
            return written
        return f"{target}.{rest}" if rest else target


def _import_base(node: ast.ImportFrom, package_parts: list[str]) -> str | None:
    """Return the absolute module named by a ``from ... import`` statement.

    Args:
        node: Import statement.
        package_parts: Package of the importing module, split on dots.

    Returns:
        str | None: Absolute module name, or ``None`` when a relative import
        climbs above the source root.
    """

    if node.level == 0:
        return node.module or ""
    climb = node.level - 1
    if climb >= len(package_parts):
        return None
    base_parts = package_parts[: len(package_parts) - climb]
    if node.module:
        base_parts = [*base_parts, node.module]
    return ".".join(base_parts)


def _dotted_name(node: ast.expr) -> str | None:
    """Return ``a.b.c`` for name/attribute chains, otherwise ``None``."""

    parts: list[str] = []
    current: ast.expr = node
    while isinstance(current, ast.Attribute):
        parts.append(current.attr)
        current = current.value
    if not isinstance(current, ast.Name):
        return None
    parts.append(current.id)
    return ".".join(reversed(parts))


class _DeclarationCollector(ast.NodeVisitor):
    """Collect class declarations and their decorators from one module."""

    def __init__(self, path: Path, module: str, resolver: _NameResolver) -> None:
        self._path = path
        self._module = module
        self._resolver = resolver
        self._qualname: list[str] = []
        self.declarations: list[Declaration] = []

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self._qualname.append(node.name)
        qualname = ".".join(self._qualname)
        self.declarations.append(
            Declaration(
                simple_name=node.name,
                package_name=self._module,
                canonical_name=f"{self._module}.{qualname}",
                annotations=tuple(
                    annotation
                    for annotation in (self._annotation(decorator) for decorator in node.decorator_list)
                    if annotation is not None
                ),
                path=self._path,
                line=node.lineno,
            ),
        )
        self.generic_visit(node)
        self._qualname.pop()

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        # Classes local to a function are not importable.
        return

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        return

    def _annotation(self, decorator: ast.expr) -> Annotation | None:
        if isinstance(decorator, ast.Call):
            name = _dotted_name(decorator.func)
            if name is None:
                return None
            positional = tuple(self._literal(arg) for arg in decorator.args)
            keywords = tuple(
                (keyword.arg or "**", self._literal(keyword.value) if keyword.arg else _unsupported(keyword.value))
                for keyword in decorator.keywords
            )
            return Annotation(name=name, positional=positional, keywords=keywords)
        name = _dotted_name(decorator)
        return Annotation(name=name) if name is not None else None

    def _literal(self, node: ast.expr) -> LiteralValue:
        if isinstance(node, ast.Constant) and isinstance(node.value, str | int | float | bool | None):
            return node.value
        dotted = _dotted_name(node)
        if dotted is not None:
            return TypeReference(written=dotted, qualified=self._resolver.resolve(dotted))
        if isinstance(node, ast.Tuple | ast.List):
            return tuple(self._literal(element) for element in node.elts)
        return _unsupported(node)


def _unsupported(node: ast.expr) -> UnsupportedArgument:
    return UnsupportedArgument(source=ast.unparse(node))


__all__ = [
    "Annotation",
    "Declaration",
    "LiteralValue",
    "SourceScanner",
    "TypeReference",
    "UnsupportedArgument",
]
