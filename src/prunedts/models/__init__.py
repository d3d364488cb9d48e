"""Data models for prunedts."""

from prunedts.models.declaration import (
    DeclarationFile,
    ImportSpecifier,
    ImportStatement,
    Statement,
    StatementKind,
    Visibility,
)
from prunedts.models.results import (
    DroppedDeclaration,
    NarrowedImport,
    PruneResults,
    PruneSummary,
    RunMetadata,
    UnresolvedReference,
)

__all__ = [
    "DeclarationFile",
    "DroppedDeclaration",
    "ImportSpecifier",
    "ImportStatement",
    "NarrowedImport",
    "PruneResults",
    "PruneSummary",
    "RunMetadata",
    "Statement",
    "StatementKind",
    "UnresolvedReference",
    "Visibility",
]
