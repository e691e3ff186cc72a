"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a small Python highlight query/legend pair with predictable
captures.
"""

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from semtok.config.models import GrammarConfig, LegendConfig, SemtokConfig  # noqa: E402
from semtok.parsing.grammar import Grammar, load_grammar  # noqa: E402
from semtok.tokens.legend import Legend  # noqa: E402

PYTHON_QUERY = """
(comment) @comment
(string) @string
(integer) @number
(identifier) @variable
"def" @keyword
"return" @keyword
"+" @operator
(function_definition name: (identifier) @function)
(decorator) @unknown_future_node
"""

PYTHON_TOKEN_TYPES = [
    "unknown",
    "comment",
    "string",
    "number",
    "keyword",
    "operator",
    "function",
    "variable",
]


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def grammar_config() -> GrammarConfig:
    return GrammarConfig(module="tree_sitter_python", queries=[PYTHON_QUERY])


@pytest.fixture
def python_grammar(grammar_config: GrammarConfig) -> Grammar:
    return load_grammar(grammar_config)


@pytest.fixture
def legend() -> Legend:
    return Legend.from_names(PYTHON_TOKEN_TYPES)


@pytest.fixture
def semtok_config(grammar_config: GrammarConfig) -> SemtokConfig:
    return SemtokConfig(
        grammar=grammar_config,
        legend=LegendConfig(token_types=PYTHON_TOKEN_TYPES),
    )
