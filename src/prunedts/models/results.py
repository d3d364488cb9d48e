"""Data models for pruning results."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class RunMetadata:
    """Metadata about a pruning run."""

    input_path: str
    output_path: str | None
    analyzed_at: datetime
    prunedts_version: str
    duration_ms: int

    def to_dict(self) -> dict:
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "analyzed_at": self.analyzed_at.isoformat(),
            "prunedts_version": self.prunedts_version,
            "duration_ms": self.duration_ms,
        }


@dataclass
class UnresolvedReference:
    """A name used by a kept statement that nothing in the file binds.

    Non-fatal: the name is assumed to resolve externally (a lib global, an
    ambient type from another file, a triple-slash reference).
    """

    name: str
    statement: str
    line: int

    def to_dict(self) -> dict:
        return {"name": self.name, "statement": self.statement, "line": self.line}


@dataclass
class DroppedDeclaration:
    """A statement removed by the pruner or the import normalizer."""

    label: str
    kind: str
    visibility: str
    line: int
    reason: str

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "kind": self.kind,
            "visibility": self.visibility,
            "line": self.line,
            "reason": self.reason,
        }


@dataclass
class NarrowedImport:
    """An import statement rewritten to bind fewer names."""

    module: str
    line: int
    removed_names: list[str] = field(default_factory=list)
    kept_names: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "module": self.module,
            "line": self.line,
            "removed_names": self.removed_names,
            "kept_names": self.kept_names,
        }


@dataclass
class PruneSummary:
    """Summary counts of a pruning run."""

    statements_in: int
    statements_out: int
    roots: int
    dropped: int = 0
    imports_removed: int = 0
    imports_narrowed: int = 0
    unresolved: int = 0
    dropped_by_kind: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "statements_in": self.statements_in,
            "statements_out": self.statements_out,
            "roots": self.roots,
            "dropped": self.dropped,
            "imports_removed": self.imports_removed,
            "imports_narrowed": self.imports_narrowed,
            "unresolved": self.unresolved,
            "dropped_by_kind": self.dropped_by_kind,
        }


@dataclass
class PruneResults:
    """Complete results of one pruning run."""

    version: str = "1.0"
    metadata: RunMetadata | None = None
    summary: PruneSummary | None = None
    dropped: list[DroppedDeclaration] = field(default_factory=list)
    narrowed_imports: list[NarrowedImport] = field(default_factory=list)
    unresolved: list[UnresolvedReference] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict = {"version": self.version}

        if self.metadata:
            result["metadata"] = self.metadata.to_dict()

        if self.summary:
            result["summary"] = self.summary.to_dict()

        result["dropped"] = [d.to_dict() for d in self.dropped]
        result["narrowed_imports"] = [n.to_dict() for n in self.narrowed_imports]
        result["unresolved"] = [u.to_dict() for u in self.unresolved]

        return result
