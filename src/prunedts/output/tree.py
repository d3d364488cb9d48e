"""Rich rendering of pruning results."""

from collections import defaultdict
from pathlib import Path

from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

console = Console()


def build_summary_table(data: dict) -> Table:
    """Build a summary table from a results dict (as written to results.json)."""
    summary = data.get("summary", {})
    metadata = data.get("metadata", {})
    title = Path(metadata.get("input_path", "")).name or "Pruning Summary"

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Count", justify="right")

    table.add_row("Statements in", str(summary.get("statements_in", 0)))
    table.add_row("Statements kept", f"[green]{summary.get('statements_out', 0)}[/]")
    table.add_row("Public roots", str(summary.get("roots", 0)))
    table.add_row("Dropped", f"[red]{summary.get('dropped', 0)}[/]")
    table.add_row("Imports removed", str(summary.get("imports_removed", 0)))
    table.add_row("Imports narrowed", str(summary.get("imports_narrowed", 0)))

    unresolved = summary.get("unresolved", 0)
    table.add_row("Unresolved references", f"[yellow]{unresolved}[/]" if unresolved else "0")

    for kind, count in sorted(summary.get("dropped_by_kind", {}).items()):
        table.add_row(f"  dropped {kind}", str(count), style="dim")

    return table


def build_dropped_tree(data: dict) -> Tree:
    """Build a tree of dropped declarations grouped by kind."""
    metadata = data.get("metadata", {})
    root = Tree(
        f"[bold]{Path(metadata.get('input_path', 'results')).name}[/]",
        guide_style="dim",
    )

    by_kind: dict[str, list[dict]] = defaultdict(list)
    for item in data.get("dropped", []):
        by_kind[item.get("kind", "unknown")].append(item)

    for kind, items in sorted(by_kind.items()):
        kind_node = root.add(f"[cyan]{kind}[/] ({len(items)} dropped)")
        for item in sorted(items, key=lambda x: x.get("line", 0)):
            item_text = Text()
            item_text.append("x ", style="red bold")
            item_text.append(item.get("label", ""), style="red")
            item_text.append(f" (line {item.get('line', 0)}, {item.get('reason', '')})", style="dim")
            kind_node.add(item_text)

    narrowed = data.get("narrowed_imports", [])
    if narrowed:
        imports_node = root.add(f"[cyan]narrowed imports[/] ({len(narrowed)})")
        for item in narrowed:
            removed = ", ".join(item.get("removed_names", []))
            imports_node.add(f"'{item.get('module', '')}' line {item.get('line', 0)}: [red]-{removed}[/]")

    unresolved = data.get("unresolved", [])
    if unresolved:
        unresolved_node = root.add(f"[yellow]unresolved references[/] ({len(unresolved)})")
        for item in unresolved:
            unresolved_node.add(
                f"[yellow]{item.get('name', '')}[/] in {item.get('statement', '')} "
                f"[dim](line {item.get('line', 0)})[/]"
            )

    return root


def display_tree(tree: RenderableType) -> None:
    """Display a tree or table to the console."""
    console.print()
    console.print(tree)
    console.print()
