"""Output writers and rich display helpers."""

from prunedts.output.declaration_writer import write_declaration
from prunedts.output.json_writer import load_results, write_json, write_results
from prunedts.output.tree import build_dropped_tree, build_summary_table, display_tree

__all__ = [
    "build_dropped_tree",
    "build_summary_table",
    "display_tree",
    "load_results",
    "write_declaration",
    "write_json",
    "write_results",
]
