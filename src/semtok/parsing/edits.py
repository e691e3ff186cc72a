"""Editor content changes -> tree-sitter incremental edits.

Editors report changes as a character (code point) offset, the length of
the replaced range and the inserted text. Trees track UTF-8 byte offsets and
(row, byte column) points, so each change is converted against the text
before it (start, old end) and after it (new end).
"""

from __future__ import annotations

from semtok.tokens.models import EditDescriptor, Point, TextChange


def byte_offset_of(text: str, char_offset: int) -> int:
    """UTF-8 byte offset of a code point offset (clamped to the text)."""
    char_offset = min(max(char_offset, 0), len(text))
    return len(text[:char_offset].encode("utf-8"))


def point_at(data: bytes, byte_offset: int) -> Point:
    """(row, byte column) of a byte offset in UTF-8 text."""
    byte_offset = min(max(byte_offset, 0), len(data))
    row = data.count(b"\n", 0, byte_offset)
    line_start = data.rfind(b"\n", 0, byte_offset) + 1
    return Point(row, byte_offset - line_start)


def apply_change(text: str, change: TextChange) -> str:
    """Text after applying one change."""
    start = min(max(change.range_offset, 0), len(text))
    end = min(start + max(change.range_length, 0), len(text))
    return text[:start] + change.text + text[end:]


def diff_change(before: str, after: str) -> TextChange | None:
    """Smallest single change turning ``before`` into ``after``, or None if equal."""
    if before == after:
        return None
    limit = min(len(before), len(after))
    prefix = 0
    while prefix < limit and before[prefix] == after[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and before[len(before) - 1 - suffix] == after[len(after) - 1 - suffix]
    ):
        suffix += 1
    return TextChange(
        range_offset=prefix,
        range_length=len(before) - prefix - suffix,
        text=after[prefix : len(after) - suffix],
    )


def translate_change(before: str, after: str, change: TextChange) -> EditDescriptor:
    """Build the edit descriptor for ``change``, which turned ``before`` into ``after``."""
    before_data = before.encode("utf-8")
    after_data = after.encode("utf-8")

    start_char = min(max(change.range_offset, 0), len(before))
    old_end_char = min(start_char + max(change.range_length, 0), len(before))

    start_byte = byte_offset_of(before, start_char)
    old_end_byte = byte_offset_of(before, old_end_char)
    new_end_byte = start_byte + len(change.text.encode("utf-8"))

    return EditDescriptor(
        start_byte=start_byte,
        old_end_byte=old_end_byte,
        new_end_byte=new_end_byte,
        start_point=point_at(before_data, start_byte),
        old_end_point=point_at(before_data, old_end_byte),
        new_end_point=point_at(after_data, new_end_byte),
    )
