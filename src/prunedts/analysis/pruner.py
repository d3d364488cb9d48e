"""Reachability pruning of declaration files."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from prunedts.models.declaration import DeclarationFile, ImportStatement, Statement, Visibility
from prunedts.models.results import UnresolvedReference

# Names provided by the TypeScript standard library and DOM typings
TS_LIB_GLOBALS = frozenset(
    {
        "Array", "ArrayBuffer", "ArrayBufferView", "ArrayLike", "AsyncGenerator",
        "AsyncIterable", "AsyncIterableIterator", "AsyncIterator", "Awaited",
        "BigInt", "Blob", "Boolean", "ConstructorParameters", "DataView", "Date",
        "Document", "Element", "Error", "Event", "EventTarget", "Exclude",
        "Extract", "File", "Float32Array", "Float64Array", "FormData", "Function",
        "Generator", "Headers", "HTMLElement", "InstanceType", "Int16Array",
        "Int32Array", "Int8Array", "Iterable", "IterableIterator", "Iterator",
        "JSON", "Map", "Math", "MessageEvent", "NonNullable", "Number", "Object",
        "Omit", "OmitThisParameter", "Parameters", "Partial", "Pick", "Promise",
        "PromiseLike", "PropertyKey", "Readonly", "ReadonlyArray", "ReadonlyMap",
        "ReadonlySet", "Record", "RegExp", "Request", "RequestInit", "Required",
        "Response", "ReturnType", "ServiceWorkerRegistration", "Set", "String",
        "Symbol", "TemplateStringsArray", "ThisParameterType", "ThisType",
        "TypeError", "Uint16Array", "Uint32Array", "Uint8Array",
        "Uint8ClampedArray", "URL", "WeakMap", "WeakRef", "WeakSet", "Window",
        "Worker", "console", "globalThis", "window", "self", "NodeJS",
    }
)


@dataclass
class ReferenceGraph:
    """Statement dependency graph of one declaration file."""

    # name -> indices of statements binding it
    binders: dict[str, list[int]] = field(default_factory=dict)

    # statement index -> indices of statements it references
    edges: dict[int, set[int]] = field(default_factory=dict)

    # statement index -> names it references that nothing binds
    unresolved: dict[int, set[str]] = field(default_factory=dict)

    def dependencies(self, index: int) -> set[int]:
        return self.edges.get(index, set())

    def group(self, statement: Statement) -> list[int]:
        """Indices of every statement sharing a bound name with ``statement``."""
        members: list[int] = []
        for name in sorted(statement.binds):
            members.extend(self.binders.get(name, []))
        return members


@dataclass
class PruneResult:
    """Outcome of one pruning pass."""

    file: DeclarationFile
    roots: list[Statement] = field(default_factory=list)
    removed: list[Statement] = field(default_factory=list)
    unresolved: list[UnresolvedReference] = field(default_factory=list)


def build_reference_graph(
    decl_file: DeclarationFile,
    known_globals: Iterable[str] = TS_LIB_GLOBALS,
) -> ReferenceGraph:
    """Build the reference graph for ``decl_file``.

    A reference with no binder is recorded as unresolved unless it is a
    statement-local type name or a known global.
    """
    ignored = set(known_globals)
    graph = ReferenceGraph(binders=decl_file.binders())

    for index, statement in enumerate(decl_file.statements):
        targets: set[int] = set()
        missing: set[str] = set()
        for name in statement.references:
            binders = graph.binders.get(name)
            if binders:
                targets.update(b for b in binders if b != index)
            elif name not in statement.local_names and name not in ignored:
                missing.add(name)
        graph.edges[index] = targets
        if missing:
            graph.unresolved[index] = missing

    return graph


def compute_roots(decl_file: DeclarationFile) -> list[Statement]:
    """Statements that start the reachability closure.

    Public exports form the advertised surface. Side-effect imports bind
    nothing, so they are carried along unconditionally.
    """
    return [
        statement
        for statement in decl_file.statements
        if statement.visibility is Visibility.PUBLIC
        or (isinstance(statement, ImportStatement) and statement.is_side_effect)
    ]


def find_reachable(graph: ReferenceGraph, decl_file: DeclarationFile, root_indices: Iterable[int]) -> set[int]:
    """Breadth-first closure over the reference graph.

    Statements binding the same name (overloads, merged interfaces,
    class/namespace merges) are queued together.
    """
    queued: set[int] = set()
    queue: deque[int] = deque()

    def enqueue(index: int) -> None:
        if index not in queued:
            queued.add(index)
            queue.append(index)

    for index in root_indices:
        enqueue(index)

    while queue:
        current = queue.popleft()
        for member in graph.group(decl_file.statements[current]):
            enqueue(member)
        for dependency in graph.dependencies(current):
            enqueue(dependency)

    return queued


def prune(
    decl_file: DeclarationFile,
    roots: Iterable[Statement] | None = None,
    known_globals: Iterable[str] = TS_LIB_GLOBALS,
) -> PruneResult:
    """Keep the root statements and everything they transitively need.

    Internal-marked exports are never roots, but survive when a kept
    statement references them. Survivors keep their original order.

    Args:
        decl_file: The parsed declaration file
        roots: Root statements (default: :func:`compute_roots`)
        known_globals: Names that resolve outside the file

    Returns:
        PruneResult holding a new DeclarationFile with the survivors
    """
    graph = build_reference_graph(decl_file, known_globals)
    root_list = list(roots) if roots is not None else compute_roots(decl_file)
    root_ids = {id(statement) for statement in root_list}
    root_indices = [i for i, s in enumerate(decl_file.statements) if id(s) in root_ids]

    reachable = find_reachable(graph, decl_file, root_indices)

    kept: list[Statement] = []
    removed: list[Statement] = []
    unresolved: list[UnresolvedReference] = []
    for index, statement in enumerate(decl_file.statements):
        if index not in reachable:
            removed.append(statement)
            continue
        kept.append(statement)
        for name in sorted(graph.unresolved.get(index, ())):
            unresolved.append(
                UnresolvedReference(name=name, statement=statement.label, line=statement.line)
            )

    return PruneResult(
        file=decl_file.with_statements(kept),
        roots=root_list,
        removed=removed,
        unresolved=unresolved,
    )
