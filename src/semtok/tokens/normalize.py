"""Capture matches -> single-line semantic tokens.

Editors require every semantic token to sit on one line, so captures that
cross line boundaries are split into one token per line. Split tokens run
"to the end of the line" by using the editor's maximum token length rather
than measuring each line; text past that ceiling stays unhighlighted.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

import structlog

from semtok.core.errors import TokenError
from semtok.tokens.legend import MAX_TOKEN_LENGTH, Legend
from semtok.tokens.models import CaptureMatch, Point, QueryMatch, SemanticToken

logger = structlog.get_logger()

ReversedSpanPolicy = Literal["split", "error"]


def normalize(
    matches: Iterable[QueryMatch],
    legend: Legend,
    *,
    max_length: int = MAX_TOKEN_LENGTH,
    reversed_spans: ReversedSpanPolicy = "split",
) -> list[SemanticToken]:
    """Convert query matches into tokens, in capture order.

    Match grouping carries no meaning here; captures from all matches are
    flattened. Captures whose name is not a legend type are dropped.

    Args:
        matches: Query matches, in the order the query engine produced them.
        legend: Recognized token types.
        max_length: Length used for split tokens that run to end of line.
        reversed_spans: What to do with a capture whose end row precedes its
            start row. ``"split"`` sends it through :func:`split_multiline`,
            ``"error"`` raises :class:`TokenError`.

    Returns:
        Tokens, each confined to a single line.
    """
    tokens: list[SemanticToken] = []
    dropped = 0

    for capture in _flatten(matches):
        if not legend.has_type(capture.name):
            dropped += 1
            continue

        start, end = capture.start, capture.end
        token = SemanticToken(
            line=start.row,
            start_character=start.column,
            length=max(0, end.column - start.column),
            type=capture.name,
            modifiers=_capture_modifiers(capture),
        )

        if start.row == end.row:
            tokens.append(token)
            continue

        if start.row > end.row and reversed_spans == "error":
            raise TokenError.reversed_span(capture.name, tuple(start), tuple(end))

        tokens.extend(split_multiline(token, start, end, max_length=max_length))

    if dropped:
        logger.debug("captures_dropped", count=dropped, kept=len(tokens))
    return tokens


def split_multiline(
    token: SemanticToken,
    start: Point,
    end: Point,
    *,
    max_length: int = MAX_TOKEN_LENGTH,
) -> list[SemanticToken]:
    """Split a token spanning several rows into one token per row.

    Yields ``(end.row - start.row) + 1`` tokens for a forward span: the first
    from ``start.column`` and every middle row from column 0, both with
    ``max_length``; the last from column 0 up to ``end.column``. A reversed
    span yields just the first and last tokens.
    """
    split = [
        SemanticToken(
            line=start.row,
            start_character=start.column,
            length=max_length,
            type=token.type,
            modifiers=token.modifiers,
        )
    ]
    split.extend(
        SemanticToken(
            line=row,
            start_character=0,
            length=max_length,
            type=token.type,
            modifiers=token.modifiers,
        )
        for row in range(start.row + 1, end.row)
    )
    split.append(
        SemanticToken(
            line=end.row,
            start_character=0,
            length=max(0, end.column),
            type=token.type,
            modifiers=token.modifiers,
        )
    )
    return split


def _flatten(matches: Iterable[QueryMatch]) -> Iterable[CaptureMatch]:
    for match in matches:
        yield from match.captures


def _capture_modifiers(_capture: CaptureMatch) -> frozenset[str]:
    # Modifiers are not derived from captures yet; every token has none.
    return frozenset()
