# src/storage/feed_cache.py

"""Single-slot in-memory cache for the raw feed payload."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from src.feed.fetcher import FeedPayload

logger = logging.getLogger("feed_search.cache")


@dataclass
class CacheEntry:
    """The most recently fetched feed and when it was fetched."""

    fetched_at: float
    payload: FeedPayload


class FeedCache:
    """Holds one feed payload for ``ttl`` seconds.

    There is one feed per deployment, so there is one slot. Concurrent
    refreshes after expiry may both download; the later ``put`` wins,
    and since each entry is a complete payload readers never see a
    partial feed.
    """

    def __init__(
        self,
        ttl: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entry: CacheEntry | None = None

    @property
    def enabled(self) -> bool:
        """Whether this cache ever serves hits."""
        return self._ttl > 0

    def get(self) -> FeedPayload | None:
        """Return the cached payload if it is still within the TTL."""
        entry = self._entry
        if entry is None or not self.enabled:
            return None
        age = self._clock() - entry.fetched_at
        if age < self._ttl:
            logger.debug("Feed cache hit (age=%.1fs)", age)
            return entry.payload
        logger.debug(
            "Feed cache stale (age=%.1fs, ttl=%.1fs)", age, self._ttl
        )
        return None

    def put(self, payload: FeedPayload) -> None:
        """Overwrite the slot with a freshly fetched payload."""
        self._entry = CacheEntry(
            fetched_at=self._clock(), payload=payload
        )
        logger.info(
            "Cached feed payload (%d bytes, content-type=%r)",
            len(payload.body),
            payload.content_type,
        )
