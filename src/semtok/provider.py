"""Semantic tokens provider: the editor-facing entry point.

Long-lived object, one per editor session. Grammar loading happens once in
the background; every public coroutine waits for it first and re-raises the
initialization error if it failed.

Design:
- Initialization: UNINITIALIZED -> INITIALIZING -> READY | FAILED
- One asyncio.Lock per document serializes parse, query and edit work on
  that document's tree; different documents do not wait on each other.
  The lock is dropped once idle after the document is closed
- Parsing runs on the event loop (parsers are not shared across threads)
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable, Hashable, Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from semtok.config.models import GrammarConfig, SemtokConfig
from semtok.core.errors import InternalError
from semtok.core.logging import request_context
from semtok.parsing.cache import TreeCache
from semtok.parsing.grammar import Grammar, load_grammar
from semtok.tokens.encode import SemanticTokens, SemanticTokensBuilder, TokenEncoder
from semtok.tokens.legend import Legend
from semtok.tokens.normalize import normalize

if TYPE_CHECKING:
    from semtok.tokens.models import SemanticToken, TextChange

logger = structlog.get_logger()

GrammarLoader = Callable[[GrammarConfig], Grammar]


class ProviderState(Enum):
    """Provider initialization state."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class SemanticTokensProvider:
    """Parse documents incrementally and turn highlight captures into tokens.

    Usage::

        provider = SemanticTokensProvider(load_config())
        tokens = await provider.provide_semantic_tokens(uri, text)
        ...
        await provider.notify_change(uri, new_text, changes)
    """

    def __init__(
        self,
        config: SemtokConfig | None = None,
        *,
        grammar_loader: GrammarLoader = load_grammar,
    ) -> None:
        self._config = config or SemtokConfig()
        self._legend = Legend.from_names(
            self._config.legend.token_types, self._config.legend.token_modifiers
        )
        self._encoder = TokenEncoder(self._legend, strict=self._config.tokens.strict_types)
        self._grammar_loader = grammar_loader

        self._state = ProviderState.UNINITIALIZED
        self._init_task: asyncio.Task[TreeCache] | None = None
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._lock_users: dict[Hashable, int] = {}

    @property
    def legend(self) -> Legend:
        return self._legend

    @property
    def encoder(self) -> TokenEncoder:
        return self._encoder

    @property
    def state(self) -> ProviderState:
        return self._state

    # ------------------------------------------------------------------
    # Readiness gate
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Load the grammar now instead of on first use."""
        await self._ready()

    async def _ready(self) -> TreeCache:
        if self._init_task is None:
            self._state = ProviderState.INITIALIZING
            self._init_task = asyncio.ensure_future(self._initialize())
        # Shield so a cancelled caller does not cancel initialization for everyone
        return await asyncio.shield(self._init_task)

    async def _initialize(self) -> TreeCache:
        try:
            # Run grammar import and query compilation in thread pool
            loop = asyncio.get_running_loop()
            grammar = await loop.run_in_executor(None, self._grammar_loader, self._config.grammar)
            cache = TreeCache(grammar)
        except Exception as e:
            self._state = ProviderState.FAILED
            logger.error("provider_init_failed", error=str(e), module=self._config.grammar.module)
            raise
        self._state = ProviderState.READY
        logger.info(
            "provider_ready",
            module=grammar.module,
            token_types=self._legend.type_count,
            token_modifiers=self._legend.modifier_count,
        )
        return cache

    @contextlib.asynccontextmanager
    async def _document_lock(
        self, cache: TreeCache, document_id: Hashable
    ) -> AsyncIterator[None]:
        """Hold the document's lock. Dropped once idle for a document no longer cached."""
        lock = self._locks.get(document_id)
        if lock is None:
            lock = self._locks[document_id] = asyncio.Lock()
        # Counts holders and waiters
        self._lock_users[document_id] = self._lock_users.get(document_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            users = self._lock_users.pop(document_id) - 1
            if users or document_id in cache:
                self._lock_users[document_id] = users
            else:
                del self._locks[document_id]

    # ------------------------------------------------------------------
    # Editor-facing operations
    # ------------------------------------------------------------------

    async def request_tokens(
        self,
        document_id: Hashable,
        text: str,
        cancellation: Any = None,  # noqa: ARG002
    ) -> list[SemanticToken]:
        """Tokens for the document's current text, sorted by position.

        ``cancellation`` is accepted for host compatibility and not honored.
        """
        cache = await self._ready()
        with request_context(str(document_id)):
            async with self._document_lock(cache, document_id):
                tree = cache.get_or_update(document_id, text)
                grammar = cache.grammar
                if grammar is None:
                    raise InternalError.unexpected("tree cache has no grammar")
                matches = grammar.matches(tree, text.encode("utf-8"))
                tokens = normalize(
                    matches,
                    self._legend,
                    max_length=self._config.tokens.max_token_length,
                    reversed_spans=self._config.tokens.reversed_spans,
                )
            tokens.sort(key=lambda t: (t.line, t.start_character))
            logger.debug("tokens_provided", matches=len(matches), tokens=len(tokens))
            return tokens

    async def provide_semantic_tokens(
        self,
        document_id: Hashable,
        text: str,
        cancellation: Any = None,
    ) -> SemanticTokens:
        """Delta-encoded token array for the document's current text."""
        tokens = await self.request_tokens(document_id, text, cancellation)
        builder = SemanticTokensBuilder(self._encoder)
        builder.push_all(tokens)
        return builder.build()

    async def notify_change(
        self,
        document_id: Hashable,
        text_after: str,
        changes: Iterable[TextChange],
    ) -> None:
        """Apply one change notification to the cached tree, in report order."""
        cache = await self._ready()
        async with self._document_lock(cache, document_id):
            cache.apply_changes(document_id, text_after, list(changes))

    async def close_document(self, document_id: Hashable) -> None:
        """Drop the cached tree for a closed document."""
        cache = await self._ready()
        async with self._document_lock(cache, document_id):
            if cache.evict(document_id):
                logger.debug("document_closed", document=str(document_id))
