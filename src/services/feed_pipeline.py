# src/services/feed_pipeline.py

"""Orchestrates one feed search: fetch, parse, filter, collect, rank."""

import logging
from collections.abc import Iterator
from contextlib import closing, contextmanager
from dataclasses import asdict, dataclass, field
from typing import Any, TextIO

from src.config.settings import Settings
from src.feed.container import ContainerResolver
from src.feed.errors import ConfigurationError, FeedError
from src.feed.fetcher import FeedFetcher
from src.feed.row_normalizer import normalize_row
from src.feed.row_parser import FeedRowParser, ParseOutcome, ParseState
from src.filters.candidate_collector import (
    CandidateCollector,
    CollectDecision,
)
from src.filters.product_filter import ProductFilter
from src.filters.ranker import ProductRanker
from src.models.filter_spec import FilterSpec
from src.models.product import Product
from src.storage.feed_cache import FeedCache

logger = logging.getLogger("feed_search.pipeline")


def clamp_limit(
    value: object,
    minimum: int = Settings.MIN_LIMIT,
    maximum: int = Settings.MAX_LIMIT,
    default: int = Settings.DEFAULT_LIMIT,
) -> int:
    """Coerce a caller-supplied limit into ``minimum..maximum``."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return max(minimum, min(maximum, number))


@dataclass
class FeedSearchResult:
    """Outcome of a completed feed search."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    outcome: ParseOutcome = field(
        default_factory=lambda: ParseOutcome(ParseState.IDLE, 0)
    )
    collected_count: int = 0
    matched_rows: int = 0
    rejected_rows: int = 0

    @property
    def returned_count(self) -> int:
        return len(self.products)

    def to_payload(self) -> dict[str, Any]:
        """Response envelope carrying the product list."""
        return {"items": [asdict(p) for p in self.products]}

    def debug_payload(self) -> dict[str, Any]:
        """Diagnostic envelope returned instead of the products."""
        return {
            "debug": {
                "rowsSeen": self.outcome.rows_seen,
                "earlyStopped": self.outcome.possibly_incomplete,
                "rowCapReached": self.outcome.row_cap_reached,
                "collectedCount": self.collected_count,
                "returnedCount": self.returned_count,
            }
        }


class FeedPipeline:
    """Runs feed searches and owns the process-wide feed cache.

    With caching enabled the whole payload is downloaded once per TTL
    window and every search parses it from memory. With ``cache_ttl``
    at or below zero each search streams straight from the network,
    and an early stop closes the response mid-transfer.
    """

    def __init__(
        self,
        feed_url: str,
        cache_ttl: float = Settings.FEED_CACHE_TTL,
        row_cap: int = Settings.FEED_ROW_CAP,
        candidate_multiplier: int = Settings.CANDIDATE_MULTIPLIER,
        timeout: float = Settings.FEED_TIMEOUT,
        fetcher: FeedFetcher | None = None,
        cache: FeedCache | None = None,
        resolver: ContainerResolver | None = None,
    ) -> None:
        self.feed_url = feed_url
        self.row_cap = row_cap
        self.candidate_multiplier = candidate_multiplier
        self.fetcher = fetcher or FeedFetcher(timeout=timeout)
        self.cache = cache or FeedCache(ttl=cache_ttl)
        self.resolver = resolver or ContainerResolver()

    @classmethod
    def from_settings(cls) -> "FeedPipeline":
        return cls(
            feed_url=Settings.FEED_URL,
            cache_ttl=Settings.FEED_CACHE_TTL,
            row_cap=Settings.FEED_ROW_CAP,
            candidate_multiplier=Settings.CANDIDATE_MULTIPLIER,
            timeout=Settings.FEED_TIMEOUT,
        )

    # ── Private helpers ──────────────────────────────────

    @contextmanager
    def _open_text(self) -> Iterator[TextIO]:
        """Yield the feed text from the cache or the network."""
        if not self.feed_url:
            raise ConfigurationError("SHOPEE_FEED_URL is not set")

        if not self.cache.enabled:
            with self.fetcher.open_stream(self.feed_url) as stream:
                with self.resolver.open_stream(stream) as text:
                    yield text
            return

        payload = self.cache.get()
        fresh = payload is None
        if payload is None:
            payload = self.fetcher.fetch(self.feed_url)
        else:
            logger.info("Using cached feed payload")
        with self.resolver.open_payload(payload) as text:
            yield text
        # Only payloads that parsed without error are worth keeping
        if fresh:
            self.cache.put(payload)

    # ── Public API ───────────────────────────────────────

    def search(
        self,
        filters: FilterSpec,
        limit: int = Settings.DEFAULT_LIMIT,
    ) -> FeedSearchResult:
        """Return up to ``limit`` ranked, deduplicated products.

        Parsing stops as soon as ``limit * candidate_multiplier``
        matches are collected or the row cap is hit.

        Raises:
            FeedError: fetch, archive or parse failure; no partial
                result is produced.
        """
        collector = CandidateCollector(limit, self.candidate_multiplier)
        result = FeedSearchResult()

        try:
            with self._open_text() as text:
                parser = FeedRowParser(
                    text,
                    row_cap=self.row_cap,
                    delimiter=Settings.FEED_DELIMITER,
                )
                with closing(parser.rows()) as rows:
                    for raw in rows:
                        product = normalize_row(raw)
                        if product is None:
                            result.rejected_rows += 1
                            continue
                        if not ProductFilter.matches(product, filters):
                            continue
                        result.matched_rows += 1
                        if collector.offer(product) is CollectDecision.STOP:
                            parser.stop()
                            break
        except FeedError as exc:
            logger.error(
                "Feed search failed (%s): %s",
                type(exc).__name__,
                exc.detail,
                exc_info=True,
            )
            raise

        result.outcome = parser.outcome()
        result.collected_count = len(collector.candidates)
        result.products = ProductRanker.finalize(
            collector.candidates, limit
        )
        logger.info(
            "Search %s: rows_seen=%d state=%s collected=%d returned=%d "
            "rejected=%d",
            filters,
            result.outcome.rows_seen,
            result.outcome.state.value,
            result.collected_count,
            result.returned_count,
            result.rejected_rows,
        )
        return result


_default_pipeline: FeedPipeline | None = None


def default_pipeline() -> FeedPipeline:
    """Process-wide pipeline built from Settings (shares one cache)."""
    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = FeedPipeline.from_settings()
    return _default_pipeline
