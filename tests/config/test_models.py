"""Tests for config/models.py module.

Covers:
- LogOutputConfig / LoggingConfig
- LegendConfig uniqueness validation
- GrammarConfig defaults and validation
- TokensConfig bounds
- SemtokConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from semtok.config.models import (
    GrammarConfig,
    LegendConfig,
    LoggingConfig,
    LogOutputConfig,
    SemtokConfig,
    TokensConfig,
)
from semtok.tokens.legend import DEFAULT_TOKEN_TYPES, MAX_TOKEN_LENGTH


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_absolute_path_destination(self) -> None:
        config = LogOutputConfig(destination="/var/log/semtok.log")
        assert config.destination == "/var/log/semtok.log"

    def test_relative_path_fails(self) -> None:
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="logs/app.log")


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert len(config.outputs) == 1

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestLegendConfig:
    """Tests for LegendConfig model."""

    def test_defaults(self) -> None:
        config = LegendConfig()
        assert config.token_types == list(DEFAULT_TOKEN_TYPES)
        assert config.token_types[0] == "unknown"
        assert config.token_modifiers == []

    def test_duplicate_type_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate legend name"):
            LegendConfig(token_types=["keyword", "string", "keyword"])

    def test_duplicate_modifier_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate legend name"):
            LegendConfig(token_types=["keyword"], token_modifiers=["static", "static"])

    def test_empty_types_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least one"):
            LegendConfig(token_types=[])


class TestGrammarConfig:
    """Tests for GrammarConfig model."""

    def test_defaults(self) -> None:
        config = GrammarConfig()
        assert config.module == "tree_sitter_python"
        assert config.language_func == "language"
        assert config.queries == ["tree_sitter_python:HIGHLIGHTS_QUERY"]

    def test_empty_queries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GrammarConfig(queries=[])


class TestTokensConfig:
    """Tests for TokensConfig model."""

    def test_defaults(self) -> None:
        config = TokensConfig()
        assert config.max_token_length == MAX_TOKEN_LENGTH == 65535
        assert config.strict_types is False
        assert config.reversed_spans == "split"

    @pytest.mark.parametrize("value", [0, -1, 65536])
    def test_max_token_length_bounds(self, value: int) -> None:
        with pytest.raises(ValidationError, match="max_token_length"):
            TokensConfig(max_token_length=value)

    def test_reversed_span_policy_options(self) -> None:
        TokensConfig(reversed_spans="split")
        TokensConfig(reversed_spans="error")
        with pytest.raises(ValidationError):
            TokensConfig(reversed_spans="clamp")  # type: ignore[arg-type]


class TestSemtokConfig:
    """Tests for the root config."""

    def test_sections_present(self) -> None:
        config = SemtokConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.legend, LegendConfig)
        assert isinstance(config.grammar, GrammarConfig)
        assert isinstance(config.tokens, TokensConfig)

    def test_nested_dict_input(self) -> None:
        config = SemtokConfig.model_validate(
            {"tokens": {"strict_types": True}, "legend": {"token_types": ["none", "string"]}}
        )
        assert config.tokens.strict_types is True
        assert config.legend.token_types == ["none", "string"]
