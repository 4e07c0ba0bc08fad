"""In-memory document cache with stale-on-error fallback."""
import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .exceptions import DataSourceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached document and the clock reading at which it was fetched."""

    value: T
    fetched_at: float


class DocumentCache(Generic[T]):
    """
    Cache of whole documents keyed by name.

    Each document keeps its own freshness timestamp. A document younger than
    the TTL is served without touching the fetcher. Once it expires, the next
    request refetches it; if that fetch fails with a DataSourceError, the
    expired copy is served instead and the failure is only raised when there
    is nothing cached at all.

    Fetches for the same name are serialized, so concurrent requests for an
    expired document result in a single upstream call.
    """

    def __init__(
        self,
        fetcher: Callable[[str], Awaitable[T]],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the cache.

        Args:
            fetcher: Coroutine function returning the fresh document for a name.
            ttl_seconds: Freshness window applied to every document.
            clock: Monotonic time source, injectable for tests.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._fetcher = fetcher
        self._clock = clock
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, CacheEntry[T]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def peek(self, name: str) -> CacheEntry[T] | None:
        """Return the cached entry for a name without fetching."""
        return self._entries.get(name)

    def is_fresh(self, name: str) -> bool:
        """Return True if the document is cached and within the freshness window."""
        entry = self._entries.get(name)
        return entry is not None and self._clock() - entry.fetched_at < self.ttl_seconds

    async def get_or_fetch(self, name: str) -> T:
        """
        Return the document, fetching it when missing or expired.

        Raises:
            DataSourceError: The fetch failed and no copy was cached.
        """
        if self.is_fresh(name):
            logger.debug("document_cache_hit name=%s", name)
            return self._entries[name].value

        lock = self._locks.setdefault(name, asyncio.Lock())
        async with lock:
            # Another task may have refreshed the document while we waited
            if self.is_fresh(name):
                logger.debug("document_cache_hit name=%s", name)
                return self._entries[name].value

            logger.debug("document_cache_miss name=%s", name)
            try:
                value = await self._fetcher(name)
            except DataSourceError as e:
                stale = self.peek(name)
                if stale is None:
                    logger.error("document_fetch_failed name=%s error=%s", name, e)
                    raise
                logger.warning(
                    "document_cache_stale_fallback name=%s age=%.1fs error=%s",
                    name,
                    self._clock() - stale.fetched_at,
                    e,
                )
                return stale.value

            self._entries[name] = CacheEntry(value=value, fetched_at=self._clock())
            logger.info("document_cache_set name=%s", name)
            return value
