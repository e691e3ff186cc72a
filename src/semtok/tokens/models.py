"""Value types shared by the token pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class Point(NamedTuple):
    """Zero-based (row, column) position."""

    row: int
    column: int


@dataclass(frozen=True, slots=True)
class CaptureMatch:
    """A single named capture produced by a query.

    Columns are character columns of the document text, not byte columns.
    """

    name: str
    start: Point
    end: Point


@dataclass(frozen=True, slots=True)
class QueryMatch:
    """One pattern match and the captures it produced."""

    pattern_index: int
    captures: tuple[CaptureMatch, ...]


@dataclass(frozen=True, slots=True)
class SemanticToken:
    """A token confined to one line, ready for encoding."""

    line: int
    start_character: int
    length: int
    type: str
    modifiers: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class TextChange:
    """One editor content change.

    Offsets are character offsets into the document as it stood
    immediately before this change was applied. A character is a Unicode
    code point (one Python ``str`` index), not a UTF-16 code unit: hosts
    speaking UTF-16 positions must convert before reporting a change, since
    a character outside the Basic Multilingual Plane counts once here and
    twice in UTF-16.
    """

    range_offset: int
    range_length: int
    text: str


@dataclass(frozen=True, slots=True)
class EditDescriptor:
    """Incremental edit in the units ``tree_sitter.Tree.edit`` consumes.

    Byte offsets into UTF-8 text; points are (row, byte column).
    """

    start_byte: int
    old_end_byte: int
    new_end_byte: int
    start_point: Point
    old_end_point: Point
    new_end_point: Point


EncodedToken = tuple[int, int, int, int, int]
"""(line, start_character, length, type_code, modifier_mask)."""
