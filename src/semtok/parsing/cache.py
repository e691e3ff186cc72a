"""Per-document parse tree cache with incremental updates.

One tree per document identity. Token requests call :meth:`TreeCache.get_or_update`
with the full current text; change notifications call
:meth:`TreeCache.apply_changes` (or :meth:`TreeCache.apply_edit`) to adjust the
cached tree in place so the next reparse can reuse it.

The cache also remembers the text each tree's bookkeeping corresponds to.
If a request arrives with text the tree was never edited towards (a missed
or out-of-order notification), the difference is applied as one synthetic
edit before reparsing, so the reparse never reuses stale nodes.

Not thread-safe: callers serialize access per document.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from semtok.core.errors import GrammarError
from semtok.parsing.edits import apply_change, diff_change, translate_change
from semtok.tokens.models import EditDescriptor, TextChange

if TYPE_CHECKING:
    import tree_sitter

    from semtok.parsing.grammar import Grammar

logger = structlog.get_logger()

DocumentId = Hashable


@dataclass
class _CacheEntry:
    tree: tree_sitter.Tree
    # Text matching the tree's byte/point bookkeeping; None once raw edits
    # of unknown origin have been applied.
    text: str | None


class TreeCache:
    """Keyed store of one parse tree per document."""

    def __init__(self, grammar: Grammar | None = None) -> None:
        self._grammar = grammar
        self._parser: tree_sitter.Parser | None = grammar.new_parser() if grammar else None
        self._entries: dict[DocumentId, _CacheEntry] = {}

    def __contains__(self, document_id: DocumentId) -> bool:
        return document_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def grammar(self) -> Grammar | None:
        return self._grammar

    def get_text(self, document_id: DocumentId) -> str | None:
        """Last known text of a cached document, if tracked."""
        entry = self._entries.get(document_id)
        return entry.text if entry else None

    def get_or_update(self, document_id: DocumentId, text: str) -> tree_sitter.Tree:
        """Parse ``text`` and cache the tree, reusing the cached tree when present."""
        if self._parser is None:
            raise GrammarError.not_loaded()

        source = text.encode("utf-8")
        entry = self._entries.get(document_id)

        if entry is None:
            tree = self._parser.parse(source)
            logger.debug("tree_parsed", document=str(document_id), incremental=False)
        else:
            if entry.text is not None:
                change = diff_change(entry.text, text)
                if change is not None:
                    logger.debug(
                        "tree_resynced",
                        document=str(document_id),
                        offset=change.range_offset,
                        removed=change.range_length,
                        inserted=len(change.text),
                    )
                    _edit_tree(entry.tree, translate_change(entry.text, text, change))
            tree = self._parser.parse(source, entry.tree)
            logger.debug("tree_parsed", document=str(document_id), incremental=True)

        self._entries[document_id] = _CacheEntry(tree=tree, text=text)
        return tree

    def apply_edit(self, document_id: DocumentId, edit: EditDescriptor) -> None:
        """Adjust the cached tree in place. No-op when the document is not cached."""
        entry = self._entries.get(document_id)
        if entry is None:
            return
        _edit_tree(entry.tree, edit)
        entry.text = None

    def apply_changes(
        self,
        document_id: DocumentId,
        text_after: str,
        changes: Iterable[TextChange],
    ) -> None:
        """Translate and apply one notification's changes, in report order.

        Each change's offsets are taken against the text produced by the
        changes before it. No-op when the document is not cached.
        """
        entry = self._entries.get(document_id)
        if entry is None:
            return
        if entry.text is None:
            # Bookkeeping of unknown origin: drop it, next request parses fresh.
            del self._entries[document_id]
            logger.debug("tree_evicted", document=str(document_id), reason="untracked_text")
            return

        text = entry.text
        applied = 0
        for change in changes:
            after = apply_change(text, change)
            _edit_tree(entry.tree, translate_change(text, after, change))
            text = after
            applied += 1
        entry.text = text

        if text != text_after:
            logger.warning(
                "change_text_mismatch",
                document=str(document_id),
                expected_length=len(text_after),
                actual_length=len(text),
            )
        logger.debug("tree_edited", document=str(document_id), changes=applied)

    def evict(self, document_id: DocumentId) -> bool:
        """Forget a document. Returns True if it was cached."""
        return self._entries.pop(document_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()


def _edit_tree(tree: tree_sitter.Tree, edit: EditDescriptor) -> None:
    tree.edit(
        start_byte=edit.start_byte,
        old_end_byte=edit.old_end_byte,
        new_end_byte=edit.new_end_byte,
        start_point=tuple(edit.start_point),
        old_end_point=tuple(edit.old_end_point),
        new_end_point=tuple(edit.new_end_point),
    )
