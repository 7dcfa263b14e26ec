# src/services/health_checker.py

"""Feed source connectivity health check."""

import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.feed.errors import FeedError
from src.feed.fetcher import FeedFetcher

logger = logging.getLogger("feed_search.health")

_HEALTH_TIMEOUT = 10.0  # seconds


@dataclass
class HealthResult:
    """Result of probing the feed source."""

    url: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str
    content_type: str = ""


def probe_feed(
    url: str,
    fetcher: FeedFetcher | None = None,
) -> HealthResult:
    """Open the feed, read the response headers only, then hang up."""
    if not url:
        return HealthResult(
            url=url,
            status="down",
            latency_ms=0.0,
            message="SHOPEE_FEED_URL is not set",
        )

    fetcher = fetcher or FeedFetcher(timeout=_HEALTH_TIMEOUT)
    start = time.monotonic()
    try:
        with fetcher.open_stream(url) as stream:
            content_type = stream.content_type
    except FeedError as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        result = HealthResult(
            url=url,
            status="down",
            latency_ms=elapsed_ms,
            message=exc.detail[:80],
        )
    else:
        elapsed_ms = (time.monotonic() - start) * 1000
        slow = elapsed_ms > Settings.HEALTH_SLOW_MS
        result = HealthResult(
            url=url,
            status="slow" if slow else "ok",
            latency_ms=elapsed_ms,
            message="High latency" if slow else "",
            content_type=content_type,
        )

    logger.info(
        "Health check %s: %s (%.0fms) %s",
        url,
        result.status,
        result.latency_ms,
        result.message,
    )
    return result
