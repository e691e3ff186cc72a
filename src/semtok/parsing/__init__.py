"""Parsing layer: grammar loading, tree cache and edit translation."""

from semtok.parsing.cache import TreeCache
from semtok.parsing.edits import (
    apply_change,
    byte_offset_of,
    diff_change,
    point_at,
    translate_change,
)
from semtok.parsing.grammar import Grammar, load_grammar, resolve_query_text

__all__ = [
    "Grammar",
    "TreeCache",
    "apply_change",
    "byte_offset_of",
    "diff_change",
    "load_grammar",
    "point_at",
    "resolve_query_text",
    "translate_change",
]
