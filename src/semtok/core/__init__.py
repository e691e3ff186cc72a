"""Core module exports."""

from semtok.core.errors import (
    ConfigError,
    ErrorCode,
    GrammarError,
    InternalError,
    SemtokError,
    TokenError,
)
from semtok.core.logging import (
    configure_logging,
    get_logger,
    get_request_id,
    request_context,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "GrammarError",
    "InternalError",
    "SemtokError",
    "TokenError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_request_id",
    "request_context",
]
