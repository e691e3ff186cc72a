"""Config module exports."""

from semtok.config.loader import load_config
from semtok.config.models import (
    GrammarConfig,
    LegendConfig,
    LoggingConfig,
    SemtokConfig,
    TokensConfig,
)

__all__ = [
    "load_config",
    "SemtokConfig",
    "GrammarConfig",
    "LegendConfig",
    "LoggingConfig",
    "TokensConfig",
]
