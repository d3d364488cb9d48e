"""Data models for parsed declaration files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto

_LEADING_BLANK_LINES = re.compile(r"^(?:[ \t]*\r?\n)+")


def _strip_blank_lines(text: str) -> str:
    return _LEADING_BLANK_LINES.sub("", text)


class StatementKind(Enum):
    """Top-level statement categories."""

    IMPORT = auto()
    EXPORTED_DECLARATION = auto()
    AMBIENT_DECLARATION = auto()
    OTHER = auto()


class Visibility(Enum):
    """How a statement participates in the public surface."""

    PUBLIC = auto()
    INTERNAL_EXPORTED = auto()
    NON_EXPORTED = auto()


@dataclass
class Statement:
    """A top-level statement of a declaration file."""

    kind: StatementKind
    text: str
    leading: str = ""  # Whitespace and comments between the previous statement and this one
    line: int = 1
    binds: set[str] = field(default_factory=set)
    references: set[str] = field(default_factory=set)
    local_names: set[str] = field(default_factory=set)  # Type parameters, infer/mapped variables
    visibility: Visibility = Visibility.NON_EXPORTED
    declared_kind: str | None = None  # "class", "interface", "function", ...
    opaque: bool = False  # Syntax was not fully understood

    @property
    def is_internal(self) -> bool:
        return self.visibility is Visibility.INTERNAL_EXPORTED

    @property
    def label(self) -> str:
        """Short human-readable description, e.g. ``class Foo``."""
        names = ", ".join(sorted(self.binds))
        kind = self.declared_kind or self.kind.name.lower()
        return f"{kind} {names}" if names else kind

    def render(self) -> str:
        return self.leading + self.text


@dataclass
class ImportSpecifier:
    """One entry of a named import clause (``{ A as B }``)."""

    imported: str
    local: str
    is_type: bool = False

    def render(self) -> str:
        prefix = "type " if self.is_type else ""
        if self.local != self.imported:
            return f"{prefix}{self.imported} as {self.local}"
        return f"{prefix}{self.imported}"


@dataclass
class ImportStatement(Statement):
    """An ``import`` statement and the local names it binds."""

    module_specifier: str = ""
    default_name: str | None = None
    namespace_name: str | None = None
    specifiers: list[ImportSpecifier] = field(default_factory=list)
    type_only: bool = False
    equals: bool = False  # import X = require('m') / import X = A.B
    quote: str = "'"
    padded_braces: bool = False
    semicolon: bool = True

    @property
    def bound_names(self) -> set[str]:
        names = {spec.local for spec in self.specifiers}
        if self.default_name:
            names.add(self.default_name)
        if self.namespace_name:
            names.add(self.namespace_name)
        return names

    @property
    def is_side_effect(self) -> bool:
        """True for ``import 'module';``, which binds nothing."""
        return not self.equals and not self.bound_names

    def narrow(self, keep: set[str]) -> None:
        """Restrict the bound names to ``keep`` and regenerate the text."""
        if self.default_name not in keep:
            self.default_name = None
        if self.namespace_name not in keep:
            self.namespace_name = None
        self.specifiers = [spec for spec in self.specifiers if spec.local in keep]
        self.binds = self.bound_names
        self.text = self._render_clause()

    def _render_clause(self) -> str:
        parts: list[str] = []
        if self.default_name:
            parts.append(self.default_name)
        if self.namespace_name:
            parts.append(f"* as {self.namespace_name}")
        if self.specifiers:
            inner = ", ".join(spec.render() for spec in self.specifiers)
            parts.append(f"{{ {inner} }}" if self.padded_braces else f"{{{inner}}}")
        type_prefix = "type " if self.type_only else ""
        end = ";" if self.semicolon else ""
        specifier = f"{self.quote}{self.module_specifier}{self.quote}"
        return f"import {type_prefix}{', '.join(parts)} from {specifier}{end}"


@dataclass
class DeclarationFile:
    """An ordered sequence of top-level statements plus surrounding text."""

    statements: list[Statement] = field(default_factory=list)
    header: str = ""  # File comments and directives before the first statement
    trailer: str = ""  # Text after the last statement

    @property
    def imports(self) -> list[ImportStatement]:
        return [s for s in self.statements if isinstance(s, ImportStatement)]

    def binders(self) -> dict[str, list[int]]:
        """Map each bound name to the indices of the statements binding it."""
        result: dict[str, list[int]] = {}
        for index, statement in enumerate(self.statements):
            for name in statement.binds:
                result.setdefault(name, []).append(index)
        return result

    def with_statements(self, statements: list[Statement]) -> DeclarationFile:
        """Copy of this file holding ``statements``.

        The statements are shared, not copied. When the original first
        statement is gone, blank lines that separated it from the new first
        statement are dropped.
        """
        statements = list(statements)
        if statements and self.statements and statements[0] is not self.statements[0]:
            statements[0].leading = _strip_blank_lines(statements[0].leading)
        return DeclarationFile(
            statements=statements,
            header=self.header,
            trailer=self.trailer,
        )

    def remove(self, statement: Statement) -> None:
        """Remove ``statement`` (matched by identity) in place."""
        was_first = bool(self.statements) and self.statements[0] is statement
        self.statements = [s for s in self.statements if s is not statement]
        if was_first and self.statements:
            self.statements[0].leading = _strip_blank_lines(self.statements[0].leading)

    def to_text(self) -> str:
        return self.header + "".join(s.render() for s in self.statements) + self.trailer
