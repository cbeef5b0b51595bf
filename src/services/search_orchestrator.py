# src/services/search_orchestrator.py

"""Coordinates cache, link interpretation and product matching."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from src.config.settings import Settings
from src.models.link_metadata import LinkMetadata, Platform
from src.models.product import MatchResult, Provenance
from src.models.search_request import InvalidSearchRequest, SearchRequest
from src.services.link_interpreter import LinkInterpreter
from src.services.notifications import LoggingNotifier, Notifier
from src.services.product_matcher import (
    ProductMatcher,
    confirmation_message,
    needs_confirmation,
)
from src.storage.backends import FileStorage
from src.storage.cache_keys import derive_key
from src.storage.result_cache import CacheEntry, CacheStats, ResultCache

logger = logging.getLogger("trendbuy.orchestrator")

GENERIC_FAILURE = "Something went wrong. Please try again."


class SearchState(str, Enum):
    """Lifecycle of a single search invocation."""

    IDLE = "idle"
    CACHE_CHECK = "cache_check"
    CACHE_HIT = "cache_hit"
    MISS = "miss"
    INTERPRETING = "interpreting"
    MATCHING = "matching"
    CACHE_WRITE = "cache_write"
    DONE = "done"
    FAILED = "failed"


_TERMINAL = {SearchState.IDLE, SearchState.DONE, SearchState.FAILED}

StateListener = Callable[[SearchState], None]


@dataclass
class SearchOutcome:
    """What one search produced, for the CLI/TUI to render."""

    request: SearchRequest
    state: SearchState
    cache_key: str
    result: MatchResult | None = None
    metadata: LinkMetadata | None = None
    needs_confirmation: bool = False
    error: str | None = None

    @property
    def from_cache(self) -> bool:
        return (
            self.result is not None
            and self.result.source is Provenance.CACHE
        )


class SearchOrchestrator:
    """Runs one search at a time: cache probe, interpret, match, store.

    Progress is published as :class:`SearchState` transitions to any
    registered listener; ``is_loading`` / ``is_verifying`` derive from
    the current state for UI binding.
    """

    def __init__(
        self,
        cache: ResultCache | None = None,
        interpreter: LinkInterpreter | None = None,
        matcher: ProductMatcher | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.cache = (
            cache
            if cache is not None
            else ResultCache(FileStorage(Settings.DATA_DIR))
        )
        self.interpreter = (
            interpreter if interpreter is not None else LinkInterpreter()
        )
        self.matcher = matcher if matcher is not None else ProductMatcher()
        self.notifier: Notifier = (
            notifier if notifier is not None else LoggingNotifier()
        )
        self.state = SearchState.IDLE
        self._listeners: list[StateListener] = []

    # ── State ────────────────────────────────────────────

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    @property
    def is_loading(self) -> bool:
        return self.state not in _TERMINAL

    @property
    def is_verifying(self) -> bool:
        return self.state is SearchState.INTERPRETING

    def _transition(self, state: SearchState) -> None:
        self.state = state
        logger.debug("Search state -> %s", state.value)
        for listener in self._listeners:
            listener(state)

    # ── Search ───────────────────────────────────────────

    async def search_input(
        self, url_text: str = "", keywords_text: str = ""
    ) -> SearchOutcome | None:
        """Validate raw form input, then search.

        Returns ``None`` (after an error notification) when neither a
        link nor keywords were given.
        """
        try:
            request = SearchRequest.from_input(url_text, keywords_text)
        except InvalidSearchRequest as exc:
            self.notifier.notify(
                str(exc), title="Missing Input", severity="error"
            )
            return None
        return await self.search(request)

    async def search(self, request: SearchRequest) -> SearchOutcome:
        """Serve from cache or run interpreter + matcher for *request*."""
        self._transition(SearchState.CACHE_CHECK)
        key = derive_key(request.url, request.keywords)
        outcome = SearchOutcome(
            request=request, state=SearchState.CACHE_CHECK, cache_key=key
        )

        cached = self._cache_get(key)
        if cached is not None:
            self._transition(SearchState.CACHE_HIT)
            outcome.result = cached.with_source(Provenance.CACHE)
            self.notifier.notify(
                f"Loaded {len(cached.products)} products from recent search",
                title="From Cache",
            )
            return self._finish(outcome, SearchState.DONE)

        self._transition(SearchState.MISS)
        try:
            keywords, platform = await self._resolve_keywords(
                request, outcome
            )

            self._transition(SearchState.MATCHING)
            result = await self.matcher.match(keywords, platform)
        except asyncio.CancelledError:
            logger.info("Search for '%s' cancelled", key)
            self._transition(SearchState.IDLE)
            raise
        except Exception as exc:
            logger.error(
                "Search failed for '%s'", key, exc_info=True
            )
            outcome.error = str(exc) or exc.__class__.__name__
            self.notifier.notify(
                GENERIC_FAILURE, title="Search Failed", severity="error"
            )
            return self._finish(outcome, SearchState.FAILED)

        outcome.result = result
        if self.cache.should_cache(result):
            self._transition(SearchState.CACHE_WRITE)
            self._cache_put(key, result, request.url, keywords)

        self._announce(outcome, keywords)
        return self._finish(outcome, SearchState.DONE)

    async def _resolve_keywords(
        self, request: SearchRequest, outcome: SearchOutcome
    ) -> tuple[list[str], Platform]:
        """Keywords and platform hint to hand to the matcher."""
        if request.url is None:
            return list(request.keywords), Platform.OTHER

        self._transition(SearchState.INTERPRETING)
        metadata = await self.interpreter.interpret(request.url)
        outcome.metadata = metadata

        if metadata.confidence < Settings.LOW_CONFIDENCE_ADVISORY:
            self.notifier.notify(
                "Try adding keywords for better results",
                title="Low Confidence Match",
                severity="warning",
            )

        keywords = list(metadata.keywords)
        keywords.extend(k for k in request.keywords if k not in keywords)
        return keywords, metadata.platform

    def _cache_get(self, key: str) -> MatchResult | None:
        """Cache lookup; a misbehaving cache counts as a miss."""
        try:
            return self.cache.get(key)
        except Exception:
            logger.warning("Cache lookup failed for '%s'", key, exc_info=True)
            return None

    def _cache_put(
        self,
        key: str,
        result: MatchResult,
        url: str | None,
        keywords: list[str],
    ) -> None:
        try:
            self.cache.put(key, result, url, keywords)
        except Exception:
            logger.warning("Cache write failed for '%s'", key, exc_info=True)

    def _announce(self, outcome: SearchOutcome, keywords: list[str]) -> None:
        result = outcome.result
        if result is None or not result.products:
            self.notifier.notify(
                "Try different keywords or another link",
                title="No Products Found",
                severity="warning",
            )
            return

        if needs_confirmation(result.confidence):
            outcome.needs_confirmation = True
            self.notifier.notify(
                confirmation_message(keywords, result.products),
                title="Please Confirm",
                severity="warning",
            )

        self.notifier.notify(
            f"Found {len(result.products)} products matching your search",
            title="Search Complete!",
        )

    def _finish(
        self, outcome: SearchOutcome, state: SearchState
    ) -> SearchOutcome:
        outcome.state = state
        self._transition(state)
        return outcome

    # ── Cache passthroughs ───────────────────────────────

    def recent_searches(
        self, limit: int = Settings.RECENT_SEARCHES_LIMIT
    ) -> list[CacheEntry]:
        return self.cache.recent(limit)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> int:
        return self.cache.clear()
