"""Removal of unused import bindings."""

from __future__ import annotations

from dataclasses import dataclass, field

from prunedts.models.declaration import DeclarationFile, ImportStatement
from prunedts.models.results import NarrowedImport


@dataclass
class ImportNormalization:
    """Imports removed or rewritten by :func:`normalize_imports`."""

    removed: list[ImportStatement] = field(default_factory=list)
    narrowed: list[NarrowedImport] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.removed or self.narrowed)


def referenced_names(decl_file: DeclarationFile) -> set[str]:
    """Names used by the file's statements that could come from an import.

    Non-import statements count, and so do ``import X = A.B`` aliases since
    they keep ``A`` alive.
    """
    names: set[str] = set()
    for statement in decl_file.statements:
        if not isinstance(statement, ImportStatement) or statement.equals:
            names |= statement.references
    return names


def normalize_imports(decl_file: DeclarationFile) -> ImportNormalization:
    """Drop import bindings that no surviving statement uses.

    Mutates ``decl_file`` in place: imports binding nothing that is still
    referenced are removed, partially used ones are rewritten to import only
    the used names. Side-effect imports and all non-import statements are
    left untouched. Running it again on its own output changes nothing.
    """
    result = ImportNormalization()
    narrowed_by_id: dict[int, NarrowedImport] = {}

    # Removing an alias import can orphan the import it aliases
    changed = True
    while changed:
        changed = False
        needed = referenced_names(decl_file)
        for statement in decl_file.imports:
            if statement.is_side_effect:
                continue
            bound = statement.bound_names
            keep = bound & needed
            if keep == bound:
                continue
            changed = True
            if not keep:
                decl_file.remove(statement)
                result.removed.append(statement)
                narrowed_by_id.pop(id(statement), None)
                continue
            record = narrowed_by_id.get(id(statement))
            if record is None:
                record = NarrowedImport(module=statement.module_specifier, line=statement.line)
                narrowed_by_id[id(statement)] = record
            record.removed_names = sorted(set(record.removed_names) | (bound - keep))
            record.kept_names = sorted(keep)
            statement.narrow(keep)

    result.narrowed = list(narrowed_by_id.values())
    return result
