"""Token legend: the ordered type/modifier vocabulary shared with the editor.

A name's position in the legend is the integer the editor receives for it.
Legends are immutable; build one at startup and pass it to every component
that encodes or filters tokens.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from semtok.core.errors import ConfigError

# Editors cap a single semantic token at this many characters.
MAX_TOKEN_LENGTH = 65_535

# Reserved name for categories known to be deliberately absent from the legend.
# Encodes out of band at ``count + 2``.
NOT_IN_LEGEND = "notInLegend"

# Capture names used by the highlights.scm files shipped with the common
# tree-sitter grammar packages. "unknown" is index 0, the fallback type.
DEFAULT_TOKEN_TYPES: tuple[str, ...] = (
    "unknown",
    "attribute",
    "comment",
    "constant",
    "constant.builtin",
    "constructor",
    "embedded",
    "escape",
    "function",
    "function.builtin",
    "function.method",
    "keyword",
    "label",
    "module",
    "number",
    "operator",
    "property",
    "punctuation.bracket",
    "punctuation.delimiter",
    "punctuation.special",
    "string",
    "string.special",
    "tag",
    "type",
    "type.builtin",
    "variable",
    "variable.builtin",
    "variable.parameter",
)

DEFAULT_TOKEN_MODIFIERS: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Legend:
    """Bidirectional name <-> index mapping for token types and modifiers."""

    token_types: tuple[str, ...]
    token_modifiers: tuple[str, ...] = ()
    _type_index: Mapping[str, int] = field(init=False, repr=False, compare=False)
    _modifier_index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.token_types:
            raise ConfigError.invalid_value(
                "legend.token_types", [], "legend needs at least one token type"
            )
        object.__setattr__(self, "_type_index", _index(self.token_types, "token_types"))
        object.__setattr__(
            self, "_modifier_index", _index(self.token_modifiers, "token_modifiers")
        )

    @classmethod
    def from_names(
        cls, token_types: Iterable[str], token_modifiers: Iterable[str] = ()
    ) -> Legend:
        return cls(tuple(token_types), tuple(token_modifiers))

    @classmethod
    def default(cls) -> Legend:
        return cls(DEFAULT_TOKEN_TYPES, DEFAULT_TOKEN_MODIFIERS)

    @property
    def type_count(self) -> int:
        return len(self.token_types)

    @property
    def modifier_count(self) -> int:
        return len(self.token_modifiers)

    def has_type(self, name: str) -> bool:
        return name in self._type_index

    def has_modifier(self, name: str) -> bool:
        return name in self._modifier_index

    def type_index(self, name: str) -> int | None:
        return self._type_index.get(name)

    def modifier_index(self, name: str) -> int | None:
        return self._modifier_index.get(name)

    def type_name(self, index: int) -> str | None:
        if 0 <= index < len(self.token_types):
            return self.token_types[index]
        return None


def _index(names: tuple[str, ...], field_name: str) -> Mapping[str, int]:
    mapping: dict[str, int] = {}
    for i, name in enumerate(names):
        if name in mapping:
            raise ConfigError.invalid_value(
                f"legend.{field_name}", name, "duplicate legend name"
            )
        mapping[name] = i
    return MappingProxyType(mapping)
