"""Token pipeline: legend, normalization, line splitting and encoding."""

from semtok.tokens.encode import (
    SemanticTokens,
    SemanticTokensBuilder,
    TokenEncoder,
    delta_encode,
)
from semtok.tokens.legend import (
    DEFAULT_TOKEN_MODIFIERS,
    DEFAULT_TOKEN_TYPES,
    MAX_TOKEN_LENGTH,
    NOT_IN_LEGEND,
    Legend,
)
from semtok.tokens.models import (
    CaptureMatch,
    EditDescriptor,
    EncodedToken,
    Point,
    QueryMatch,
    SemanticToken,
    TextChange,
)
from semtok.tokens.normalize import normalize, split_multiline

__all__ = [
    "CaptureMatch",
    "DEFAULT_TOKEN_MODIFIERS",
    "DEFAULT_TOKEN_TYPES",
    "EditDescriptor",
    "EncodedToken",
    "Legend",
    "MAX_TOKEN_LENGTH",
    "NOT_IN_LEGEND",
    "Point",
    "QueryMatch",
    "SemanticToken",
    "SemanticTokens",
    "SemanticTokensBuilder",
    "TextChange",
    "TokenEncoder",
    "delta_encode",
    "normalize",
    "split_multiline",
]
