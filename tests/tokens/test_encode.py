"""Tests for legend encoding and the delta-encoded token array."""

import pytest
from structlog.testing import capture_logs

from semtok.core.errors import ErrorCode, TokenError
from semtok.tokens.encode import SemanticTokensBuilder, TokenEncoder, delta_encode
from semtok.tokens.legend import NOT_IN_LEGEND, Legend
from semtok.tokens.models import SemanticToken

LEGEND = Legend.from_names(
    ["unknown", "keyword", "string", "number"], ["declaration", "readonly", "static"]
)


class TestEncodeType:
    """Token type codes."""

    @pytest.mark.parametrize(("name", "code"), [("unknown", 0), ("keyword", 1), ("number", 3)])
    def test_known_type_is_legend_index(self, name: str, code: int) -> None:
        assert TokenEncoder(LEGEND).encode_type(name) == code

    def test_sentinel_is_out_of_band(self) -> None:
        assert TokenEncoder(LEGEND).encode_type(NOT_IN_LEGEND) == LEGEND.type_count + 2 == 6

    def test_unknown_type_falls_back_to_zero(self) -> None:
        with capture_logs() as logs:
            code = TokenEncoder(LEGEND).encode_type("label")

        assert code == 0
        fallback = [entry for entry in logs if entry["event"] == "token_type_fallback"]
        assert fallback[0]["token_type"] == "label"
        assert fallback[0]["log_level"] == "warning"

    def test_fallback_with_single_type_legend(self) -> None:
        encoder = TokenEncoder(Legend.from_names(["variable"]))

        with capture_logs() as logs:
            code = encoder.encode_type("label")

        assert code == 0
        assert logs[0]["fallback"] == "variable"

    def test_strict_mode_raises(self) -> None:
        with pytest.raises(TokenError) as exc_info:
            TokenEncoder(LEGEND, strict=True).encode_type("label")
        assert exc_info.value.code == ErrorCode.TOKEN_UNKNOWN_TYPE

    def test_strict_mode_still_encodes_sentinel(self) -> None:
        assert TokenEncoder(LEGEND, strict=True).encode_type(NOT_IN_LEGEND) == 6


class TestEncodeModifiers:
    """Modifier bitmasks."""

    def test_empty(self) -> None:
        assert TokenEncoder(LEGEND).encode_modifiers([]) == 0

    def test_bits_by_index(self) -> None:
        encoder = TokenEncoder(LEGEND)
        assert encoder.encode_modifiers(["declaration"]) == 0b001
        assert encoder.encode_modifiers(["static"]) == 0b100
        assert encoder.encode_modifiers({"declaration", "readonly", "static"}) == 0b111

    def test_unknown_modifier_contributes_nothing(self) -> None:
        assert TokenEncoder(LEGEND).encode_modifiers(["async", "readonly"]) == 0b010

    def test_sentinel_modifier_bit(self) -> None:
        # 3 modifiers -> sentinel bit is 1 << 5
        assert TokenEncoder(LEGEND).encode_modifiers([NOT_IN_LEGEND]) == 1 << 5

    def test_sentinel_with_empty_modifier_legend(self) -> None:
        encoder = TokenEncoder(Legend.from_names(["unknown"]))
        assert encoder.encode_modifiers([NOT_IN_LEGEND, "static"]) == 1 << 2


class TestEncodeToken:
    def test_tuple_shape(self) -> None:
        token = SemanticToken(
            line=3, start_character=4, length=5, type="string", modifiers=frozenset({"readonly"})
        )
        assert TokenEncoder(LEGEND).encode(token) == (3, 4, 5, 2, 0b010)


class TestDeltaEncode:
    """LSP relative integer array."""

    def test_same_line_is_relative(self) -> None:
        data = delta_encode([(0, 1, 1, 1, 0), (0, 4, 2, 2, 0)])
        assert data == [0, 1, 1, 1, 0, 0, 3, 2, 2, 0]

    def test_new_line_is_absolute(self) -> None:
        data = delta_encode([(1, 6, 1, 1, 0), (3, 2, 4, 3, 1)])
        assert data == [1, 6, 1, 1, 0, 2, 2, 4, 3, 1]

    def test_empty(self) -> None:
        assert delta_encode([]) == []


class TestSemanticTokensBuilder:
    def test_sorts_before_encoding(self) -> None:
        builder = SemanticTokensBuilder(TokenEncoder(LEGEND))
        builder.push_all(
            [
                SemanticToken(line=2, start_character=0, length=3, type="number"),
                SemanticToken(line=0, start_character=5, length=1, type="keyword"),
                SemanticToken(line=0, start_character=1, length=2, type="string"),
            ]
        )

        result = builder.build()

        assert builder.encoded() == [(0, 1, 2, 2, 0), (0, 5, 1, 1, 0), (2, 0, 3, 3, 0)]
        assert result.data == [0, 1, 2, 2, 0, 0, 4, 1, 1, 0, 2, 0, 3, 3, 0]
        assert len(result) == 3

    def test_ties_keep_push_order(self) -> None:
        builder = SemanticTokensBuilder(TokenEncoder(LEGEND))
        builder.push(SemanticToken(line=0, start_character=0, length=3, type="string"))
        builder.push(SemanticToken(line=0, start_character=0, length=3, type="keyword"))

        assert [t[3] for t in builder.encoded()] == [2, 1]
