"""Grammar loading and highlight-query execution.

A grammar is a ``tree_sitter_<lang>`` package exposing a function that
returns the language pointer. Queries come from the grammar package itself
(``tree_sitter_python:HIGHLIGHTS_QUERY``), from ``.scm`` files, or inline.

Usage::

    grammar = load_grammar(GrammarConfig(module="tree_sitter_python"))
    parser = grammar.new_parser()
    source = text.encode("utf-8")
    tree = parser.parse(source)
    matches = grammar.matches(tree, source)
"""

from __future__ import annotations

import importlib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
import tree_sitter
from tree_sitter import Query as _TSQuery
from tree_sitter import QueryCursor as _TSQueryCursor

from semtok.core.errors import GrammarError
from semtok.tokens.models import CaptureMatch, Point, QueryMatch

if TYPE_CHECKING:
    from semtok.config.models import GrammarConfig

logger = structlog.get_logger()

# module.path:ATTRIBUTE
_ATTRIBUTE_REF = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")


@dataclass
class CompiledQuery:
    """A compiled query and where its text came from."""

    source: str
    query: _TSQuery


@dataclass
class Grammar:
    """A loaded language plus its compiled highlight queries."""

    module: str
    language: tree_sitter.Language
    queries: list[CompiledQuery] = field(default_factory=list)

    def new_parser(self) -> tree_sitter.Parser:
        return tree_sitter.Parser(self.language)

    def matches(self, tree: tree_sitter.Tree, source: bytes) -> list[QueryMatch]:
        """Run every query over ``tree``, in query order.

        Capture points are converted from byte columns to character columns
        of ``source``, the UTF-8 text the tree was parsed from.
        """
        columns = _ColumnMap(source)
        results: list[QueryMatch] = []
        for compiled in self.queries:
            cursor = _TSQueryCursor(compiled.query)
            # matches() returns list of (pattern_index, {capture_name: [nodes]})
            for pattern_index, captures_dict in cursor.matches(tree.root_node):
                nodes = [
                    (node, name) for name, node_list in captures_dict.items() for node in node_list
                ]
                nodes.sort(key=lambda pair: (pair[0].start_byte, pair[0].end_byte))
                captures = tuple(
                    CaptureMatch(
                        name=name,
                        start=columns.to_char_point(node.start_point),
                        end=columns.to_char_point(node.end_point),
                    )
                    for node, name in nodes
                )
                if captures:
                    results.append(QueryMatch(pattern_index=pattern_index, captures=captures))
        return results


class _ColumnMap:
    """Byte column -> character column conversion, per line of UTF-8 text."""

    def __init__(self, source: bytes) -> None:
        self._lines = source.split(b"\n")

    def to_char_point(self, point: Any) -> Point:
        row, byte_column = point[0], point[1]
        if row >= len(self._lines):
            return Point(row, byte_column)
        line = self._lines[row]
        if line.isascii():
            return Point(row, byte_column)
        return Point(row, len(line[:byte_column].decode("utf-8", errors="replace")))


def load_grammar(config: GrammarConfig) -> Grammar:
    """Import the grammar package and compile every configured query.

    Raises:
        GrammarError: Grammar package missing, query source missing, or a
            query that does not compile against the grammar.
    """
    try:
        lang_module = importlib.import_module(config.module)
        language_func = getattr(lang_module, config.language_func)
        language = tree_sitter.Language(language_func())
    except (ImportError, AttributeError) as e:
        raise GrammarError.module_not_found(config.module, str(e)) from e

    grammar = Grammar(module=config.module, language=language)
    for source in config.queries:
        text = resolve_query_text(source)
        try:
            query = _TSQuery(language, text)
        except Exception as e:
            raise GrammarError.query_compile(_describe(source), str(e)) from e
        grammar.queries.append(CompiledQuery(source=_describe(source), query=query))

    logger.info("grammar_loaded", module=config.module, queries=len(grammar.queries))
    return grammar


def resolve_query_text(source: str) -> str:
    """Return query text for a ``module:ATTRIBUTE`` ref, ``.scm`` path or inline query."""
    stripped = source.strip()

    if _ATTRIBUTE_REF.match(stripped):
        module_name, attr = stripped.split(":", 1)
        try:
            value = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError) as e:
            raise GrammarError.query_source_not_found(stripped) from e
        if not isinstance(value, str):
            raise GrammarError.query_source_not_found(stripped)
        return value

    if "\n" not in stripped and stripped.endswith(".scm"):
        path = Path(stripped).expanduser()
        if not path.is_file():
            raise GrammarError.query_source_not_found(stripped)
        return path.read_text(encoding="utf-8")

    return source


def _describe(source: str) -> str:
    first_line = source.strip().splitlines()[0] if source.strip() else ""
    return first_line if len(first_line) <= 60 else first_line[:57] + "..."
