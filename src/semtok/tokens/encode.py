"""Legend encoding and the editor's flat integer token format."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from semtok.core.errors import TokenError
from semtok.tokens.legend import NOT_IN_LEGEND, Legend
from semtok.tokens.models import EncodedToken, SemanticToken

logger = structlog.get_logger()


class TokenEncoder:
    """Map token type/modifier names to legend codes.

    Unrecognized types fall back to code 0 (the first legend entry) and emit
    a ``token_type_fallback`` diagnostic; with ``strict=True`` they raise
    :class:`TokenError` instead. The :data:`NOT_IN_LEGEND` sentinel encodes
    out of band at ``count + 2``.
    """

    def __init__(self, legend: Legend, *, strict: bool = False) -> None:
        self._legend = legend
        self._strict = strict

    @property
    def legend(self) -> Legend:
        return self._legend

    def encode_type(self, name: str) -> int:
        index = self._legend.type_index(name)
        if index is not None:
            return index
        if name == NOT_IN_LEGEND:
            return self._legend.type_count + 2
        if self._strict:
            raise TokenError.unknown_type(name)
        logger.warning("token_type_fallback", token_type=name, fallback=self._legend.type_name(0))
        return 0

    def encode_modifiers(self, names: Iterable[str]) -> int:
        mask = 0
        for name in names:
            index = self._legend.modifier_index(name)
            if index is not None:
                mask |= 1 << index
            elif name == NOT_IN_LEGEND:
                mask |= 1 << (self._legend.modifier_count + 2)
        return mask

    def encode(self, token: SemanticToken) -> EncodedToken:
        return (
            token.line,
            token.start_character,
            token.length,
            self.encode_type(token.type),
            self.encode_modifiers(token.modifiers),
        )


@dataclass
class SemanticTokens:
    """Encoded token stream: groups of five integers per token.

    ``(deltaLine, deltaStart, length, typeCode, modifierMask)``; ``deltaStart``
    is relative to the previous token on the same line, absolute otherwise.
    """

    data: list[int] = field(default_factory=list)
    result_id: str | None = None

    def __len__(self) -> int:
        return len(self.data) // 5


class SemanticTokensBuilder:
    """Collect tokens and delta-encode them in position order."""

    def __init__(self, encoder: TokenEncoder) -> None:
        self._encoder = encoder
        self._tokens: list[EncodedToken] = []

    def push(self, token: SemanticToken) -> None:
        self._tokens.append(self._encoder.encode(token))

    def push_all(self, tokens: Iterable[SemanticToken]) -> None:
        for token in tokens:
            self.push(token)

    def encoded(self) -> list[EncodedToken]:
        """Absolute tuples sorted by position (stable for ties)."""
        return sorted(self._tokens, key=lambda t: (t[0], t[1]))

    def build(self, result_id: str | None = None) -> SemanticTokens:
        return SemanticTokens(data=delta_encode(self.encoded()), result_id=result_id)


def delta_encode(tokens: Iterable[EncodedToken]) -> list[int]:
    """Flatten position-sorted absolute tuples into the relative integer array."""
    data: list[int] = []
    prev_line = 0
    prev_char = 0
    for line, char, length, type_code, modifier_mask in tokens:
        delta_line = line - prev_line
        delta_char = char - prev_char if delta_line == 0 else char
        data.extend((delta_line, delta_char, length, type_code, modifier_mask))
        prev_line, prev_char = line, char
    return data
