"""Declaration pruning pipeline: parse, prune, normalize imports, format."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from rich.console import Console

from prunedts import __version__
from prunedts.analysis.formatter import add_blank_lines
from prunedts.analysis.imports import normalize_imports
from prunedts.analysis.markers import DEFAULT_INTERNAL_TAG
from prunedts.analysis.parser import parse_declarations
from prunedts.analysis.pruner import TS_LIB_GLOBALS, prune
from prunedts.config import (
    get_extractor_command,
    get_extractor_timeout,
    get_internal_tag,
    get_known_globals,
)
from prunedts.models.declaration import ImportStatement, Statement, Visibility
from prunedts.models.results import (
    DroppedDeclaration,
    PruneResults,
    PruneSummary,
    RunMetadata,
)
from prunedts.output.declaration_writer import write_declaration

console = Console()

REASON_UNREACHABLE = "unreachable from public surface"
REASON_INTERNAL = "internal and unreferenced"
REASON_UNUSED_IMPORT = "unused import"


@dataclass(frozen=True)
class Settings:
    """Options shared by every file a run processes."""

    internal_tag: str = DEFAULT_INTERNAL_TAG
    known_globals: frozenset[str] = TS_LIB_GLOBALS
    extractor_command: tuple[str, ...] = ("api-extractor",)
    extractor_timeout: int = 300

    @classmethod
    def from_config(cls, config: dict) -> Settings:
        return cls(
            internal_tag=get_internal_tag(config),
            known_globals=get_known_globals(config),
            extractor_command=tuple(get_extractor_command(config)),
            extractor_timeout=get_extractor_timeout(config),
        )


@dataclass
class PipelineOutput:
    """Pruned declaration text and the report describing what changed."""

    text: str
    results: PruneResults = field(default_factory=PruneResults)


def _dropped(statement: Statement, reason: str) -> DroppedDeclaration:
    return DroppedDeclaration(
        label=statement.label,
        kind=statement.declared_kind or statement.kind.name.lower(),
        visibility=statement.visibility.name.lower(),
        line=statement.line,
        reason=reason,
    )


def _removal_reason(statement: Statement) -> str:
    if isinstance(statement, ImportStatement):
        return REASON_UNUSED_IMPORT
    if statement.visibility is Visibility.INTERNAL_EXPORTED:
        return REASON_INTERNAL
    return REASON_UNREACHABLE


def prune_text(
    text: str,
    settings: Settings | None = None,
    input_name: str = "<text>",
    output_name: str | None = None,
) -> PipelineOutput:
    """Run the full pipeline over declaration text.

    Args:
        text: Contents of the over-complete rollup
        settings: Run options (default: ``Settings()``)
        input_name: Name recorded in the results metadata
        output_name: Output name recorded in the results metadata

    Returns:
        PipelineOutput with the formatted public text and its PruneResults

    Raises:
        ParseError: If the text cannot be tokenized or split into statements
    """
    settings = settings or Settings()
    start_time = time.time()

    decl_file = parse_declarations(text, settings.internal_tag)
    pruned = prune(decl_file, known_globals=settings.known_globals)
    normalization = normalize_imports(pruned.file)
    output = add_blank_lines(pruned.file.to_text())

    dropped = [_dropped(statement, _removal_reason(statement)) for statement in pruned.removed]
    dropped.extend(_dropped(statement, REASON_UNUSED_IMPORT) for statement in normalization.removed)
    dropped.sort(key=lambda d: d.line)

    by_kind = Counter(d.kind for d in dropped)
    summary = PruneSummary(
        statements_in=len(decl_file.statements),
        statements_out=len(pruned.file.statements),
        roots=len(pruned.roots),
        dropped=len(dropped),
        imports_removed=len(normalization.removed),
        imports_narrowed=len(normalization.narrowed),
        unresolved=len(pruned.unresolved),
        dropped_by_kind=dict(sorted(by_kind.items())),
    )
    metadata = RunMetadata(
        input_path=input_name,
        output_path=output_name,
        analyzed_at=datetime.now(),
        prunedts_version=__version__,
        duration_ms=int((time.time() - start_time) * 1000),
    )
    results = PruneResults(
        metadata=metadata,
        summary=summary,
        dropped=dropped,
        narrowed_imports=normalization.narrowed,
        unresolved=pruned.unresolved,
    )
    return PipelineOutput(text=output, results=results)


def prune_file(
    input_path: Path,
    output_path: Path,
    settings: Settings | None = None,
    quiet: bool = False,
) -> PruneResults:
    """Prune the rollup at ``input_path`` and write the public file.

    The output is written whole or not at all: a parse failure leaves
    ``output_path`` untouched. ``OSError`` propagates unchanged.
    """
    with open(input_path, "r", encoding="utf-8", newline="") as f:
        text = f.read()

    output = prune_text(
        text,
        settings,
        input_name=str(input_path),
        output_name=str(output_path),
    )
    write_declaration(output.text, output_path)

    if not quiet:
        summary = output.results.summary
        console.print(
            f"[green]Pruned[/] {input_path.name}: kept {summary.statements_out} of "
            f"{summary.statements_in} statements -> {output_path}"
        )
    return output.results
