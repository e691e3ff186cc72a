"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SEMTOK__SECTION__KEY)
3. Repo YAML (.semtok/config.yaml)
4. Global YAML (~/.config/semtok/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SEMTOK__<SECTION>__<KEY>=<VALUE>

Examples:
    SEMTOK__LOGGING__LEVEL=DEBUG
    SEMTOK__GRAMMAR__MODULE=tree_sitter_rust
    SEMTOK__TOKENS__STRICT_TYPES=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from semtok.tokens.legend import DEFAULT_TOKEN_MODIFIERS, DEFAULT_TOKEN_TYPES, MAX_TOKEN_LENGTH

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SEMTOK__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every dropped capture and tree edit.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LegendConfig(BaseModel):
    """Token legend vocabulary.

    Order matters: a name's position is the integer code sent to the editor.
    Index 0 is the fallback type for names the encoder does not recognize.
    """

    token_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TOKEN_TYPES),
        description="Recognized token type names (capture names), in legend order.",
    )
    token_modifiers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TOKEN_MODIFIERS),
        description="Recognized token modifier names, in legend order. May be empty.",
    )

    @field_validator("token_types")
    @classmethod
    def validate_token_types(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("Legend needs at least one token type")
        return _require_unique(v)

    @field_validator("token_modifiers")
    @classmethod
    def validate_token_modifiers(cls, v: list[str]) -> list[str]:
        return _require_unique(v)


def _require_unique(names: list[str]) -> list[str]:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValueError(f"Duplicate legend name: {name}")
        seen.add(name)
    return names


class GrammarConfig(BaseModel):
    """Grammar and query sources.

    Env vars:
        SEMTOK__GRAMMAR__MODULE: Grammar package import name
        SEMTOK__GRAMMAR__LANGUAGE_FUNC: Function returning the language pointer
    """

    module: str = Field(
        default="tree_sitter_python",
        description="Import name of the tree-sitter grammar package.",
    )
    language_func: str = Field(
        default="language",
        description="Name of the grammar module function returning the language. "
        "Some packages ship several (e.g. tree_sitter_typescript.language_tsx).",
    )
    queries: list[str] = Field(
        default_factory=lambda: ["tree_sitter_python:HIGHLIGHTS_QUERY"],
        description="Highlight query sources, run in order. Each entry is a "
        "'module:ATTRIBUTE' reference, a path to a .scm file, or inline query text.",
    )

    @field_validator("queries")
    @classmethod
    def validate_queries(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one query source is required")
        return v


class TokensConfig(BaseModel):
    """Token normalization and encoding.

    Env vars:
        SEMTOK__TOKENS__MAX_TOKEN_LENGTH: Per-line length used for split tokens
        SEMTOK__TOKENS__STRICT_TYPES: Raise instead of falling back to type 0
        SEMTOK__TOKENS__REVERSED_SPANS: "split" or "error"
    """

    max_token_length: int = Field(
        default=MAX_TOKEN_LENGTH,
        description="Length given to split tokens that run to the end of a line. "
        "Editors cap token length at 65535.",
    )
    strict_types: bool = Field(
        default=False,
        description="Raise TokenError when encoding a type missing from the legend, "
        "instead of falling back to the first legend entry.",
    )
    reversed_spans: Literal["split", "error"] = Field(
        default="split",
        description="Captures ending on an earlier row than they start: "
        "'split' runs them through the line splitter, 'error' raises TokenError.",
    )

    @field_validator("max_token_length")
    @classmethod
    def validate_max_token_length(cls, v: int) -> int:
        if not (1 <= v <= MAX_TOKEN_LENGTH):
            raise ValueError(f"max_token_length must be 1-{MAX_TOKEN_LENGTH}, got {v}")
        return v


class SemtokConfig(BaseModel):
    """Root configuration for semtok.

    All settings can be configured via:
    1. Environment variables: SEMTOK__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    legend: LegendConfig = Field(default_factory=LegendConfig)
    grammar: GrammarConfig = Field(default_factory=GrammarConfig)
    tokens: TokensConfig = Field(default_factory=TokensConfig)
