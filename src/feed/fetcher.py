# src/feed/fetcher.py

"""HTTP access to the remote product feed."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from curl_cffi import requests as curl_requests
from curl_cffi.requests import BrowserTypeLiteral
from curl_cffi.requests.exceptions import RequestException

from src.config.settings import Settings
from src.feed.errors import TransportError, UpstreamStatusError

logger = logging.getLogger("feed_search.fetcher")

_BODY_SNIPPET_CHARS = 200


@dataclass
class FeedPayload:
    """A fully downloaded feed response."""

    body: bytes
    content_type: str = ""


@dataclass
class FeedStream:
    """A feed response whose body is still arriving."""

    content_type: str
    chunks: Iterator[bytes]


def _content_type(resp: curl_requests.Response) -> str:
    return (resp.headers.get("content-type") or "").lower()


def _is_success(status: int) -> bool:
    return 200 <= status < 300


class FeedFetcher:
    """Single-shot GET against the feed source.

    Uses a browser-impersonating ``curl_cffi`` session with a fixed
    identity, since the upstream host rejects default client
    fingerprints. The timeout is handed to libcurl, which aborts the
    transfer itself when it expires. There is no retry here; the
    caller decides what to do with a failure.
    """

    def __init__(
        self,
        timeout: float = Settings.FEED_TIMEOUT,
        headers: dict[str, str] | None = None,
        impersonate: BrowserTypeLiteral = Settings.IMPERSONATE_BROWSER,
    ) -> None:
        self.timeout = timeout
        self.headers: dict[str, str] = dict(
            headers if headers is not None else Settings.DEFAULT_HEADERS
        )
        self.session = curl_requests.Session(impersonate=impersonate)

    def fetch(self, url: str) -> FeedPayload:
        """Download the whole feed.

        Raises:
            TransportError: network failure or timeout.
            UpstreamStatusError: non-2xx response.
        """
        logger.info("Fetching feed %s (timeout=%.0fs)", url, self.timeout)
        try:
            resp = self.session.get(
                url,
                headers=self.headers,
                timeout=self.timeout,
            )
        except RequestException as exc:
            logger.error("Feed request failed: %s", exc, exc_info=True)
            raise TransportError(f"Feed request failed: {exc}") from exc

        if not _is_success(resp.status_code):
            snippet = (resp.text or "")[:_BODY_SNIPPET_CHARS]
            logger.error(
                "Feed returned HTTP %d: %s", resp.status_code, snippet
            )
            raise UpstreamStatusError(resp.status_code, snippet)

        payload = FeedPayload(
            body=resp.content, content_type=_content_type(resp)
        )
        logger.info(
            "Fetched feed: %d bytes, content-type=%r",
            len(payload.body),
            payload.content_type,
        )
        return payload

    @contextmanager
    def open_stream(self, url: str) -> Iterator[FeedStream]:
        """Open a streamed GET and yield its body as chunks.

        Leaving the context closes the response, which aborts any part
        of the transfer that has not been read yet.

        Raises:
            TransportError: network failure or timeout, also mid-body.
            UpstreamStatusError: non-2xx response.
        """
        logger.info(
            "Streaming feed %s (timeout=%.0fs)", url, self.timeout
        )
        try:
            resp = self.session.get(
                url,
                headers=self.headers,
                timeout=self.timeout,
                stream=True,
            )
        except RequestException as exc:
            logger.error("Feed request failed: %s", exc, exc_info=True)
            raise TransportError(f"Feed request failed: {exc}") from exc

        try:
            if not _is_success(resp.status_code):
                snippet = self._read_snippet(resp)
                logger.error(
                    "Feed returned HTTP %d: %s", resp.status_code, snippet
                )
                raise UpstreamStatusError(resp.status_code, snippet)
            yield FeedStream(
                content_type=_content_type(resp),
                chunks=self._iter_chunks(resp),
            )
        finally:
            resp.close()

    @staticmethod
    def _iter_chunks(resp: curl_requests.Response) -> Iterator[bytes]:
        try:
            for chunk in resp.iter_content():
                if chunk:
                    yield chunk
        except RequestException as exc:
            logger.error("Feed transfer interrupted: %s", exc)
            raise TransportError(
                f"Feed transfer interrupted: {exc}"
            ) from exc

    @staticmethod
    def _read_snippet(resp: curl_requests.Response) -> str:
        """Read just enough of an error body for diagnostics."""
        collected = b""
        try:
            for chunk in resp.iter_content():
                collected += chunk
                if len(collected) >= _BODY_SNIPPET_CHARS:
                    break
        except RequestException:
            logger.debug("Could not read error body", exc_info=True)
        return collected.decode("utf-8", errors="replace")[
            :_BODY_SNIPPET_CHARS
        ]
