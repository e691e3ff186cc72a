"""semtok error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Grammar
- 4xxx: Tokens
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003

    # Grammar (3xxx)
    GRAMMAR_MODULE_NOT_FOUND = 3001
    GRAMMAR_QUERY_COMPILE = 3002
    GRAMMAR_QUERY_NOT_FOUND = 3003
    GRAMMAR_NOT_LOADED = 3004

    # Tokens (4xxx)
    TOKEN_REVERSED_SPAN = 4001
    TOKEN_UNKNOWN_TYPE = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class SemtokError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SemtokError):
    """Bad or unreadable configuration. Raised by ``load_config`` and legend construction."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Cannot read semtok config {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"{field}: {reason}",
            details={"field": field, "value": repr(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"No semtok config at {path}",
            details={"path": path},
        )


class GrammarError(SemtokError):
    """Grammar loading and query compilation errors.

    These are fatal for a provider: once initialization fails, every
    operation waiting on readiness re-raises the same error.
    """

    @classmethod
    def module_not_found(cls, module: str, reason: str) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_MODULE_NOT_FOUND,
            message=f"Grammar module '{module}' could not be loaded: {reason}",
            details={"module": module, "reason": reason},
        )

    @classmethod
    def query_compile(cls, source: str, reason: str) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_QUERY_COMPILE,
            message=f"Query '{source}' failed to compile: {reason}",
            details={"source": source, "reason": reason},
        )

    @classmethod
    def query_source_not_found(cls, source: str) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_QUERY_NOT_FOUND,
            message=f"Query source not found: {source}",
            details={"source": source},
        )

    @classmethod
    def not_loaded(cls) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_NOT_LOADED,
            message="No grammar loaded; initialize the provider before parsing",
        )


class TokenError(SemtokError):
    """Token normalization and encoding errors (strict modes only)."""

    @classmethod
    def reversed_span(
        cls, name: str, start: tuple[int, int], end: tuple[int, int]
    ) -> "TokenError":
        return cls(
            code=ErrorCode.TOKEN_REVERSED_SPAN,
            message=f"Capture '{name}' ends before it starts: {start} -> {end}",
            details={"name": name, "start": list(start), "end": list(end)},
        )

    @classmethod
    def unknown_type(cls, name: str) -> "TokenError":
        return cls(
            code=ErrorCode.TOKEN_UNKNOWN_TYPE,
            message=f"Token type '{name}' is not in the legend",
            details={"name": name},
        )


class InternalError(SemtokError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
