"""semtok - incremental tree-sitter parsing to editor semantic tokens."""

__version__ = "0.1.0"
