"""Declaration parsing, pruning and formatting."""

from prunedts.analysis.formatter import add_blank_lines
from prunedts.analysis.imports import ImportNormalization, normalize_imports
from prunedts.analysis.markers import DEFAULT_INTERNAL_TAG, MarkerMatch, has_release_tag
from prunedts.analysis.parser import DeclarationParser, parse_declarations, split_statements
from prunedts.analysis.pruner import TS_LIB_GLOBALS, PruneResult, ReferenceGraph, prune
from prunedts.analysis.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "DEFAULT_INTERNAL_TAG",
    "DeclarationParser",
    "ImportNormalization",
    "MarkerMatch",
    "PruneResult",
    "ReferenceGraph",
    "TS_LIB_GLOBALS",
    "Token",
    "TokenKind",
    "add_blank_lines",
    "has_release_tag",
    "normalize_imports",
    "parse_declarations",
    "prune",
    "split_statements",
    "tokenize",
]
