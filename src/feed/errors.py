# src/feed/errors.py

"""Fatal feed-processing errors.

Each of these aborts the request. Row-level problems (blank titles,
garbage numbers) never raise; the normaliser drops or zeroes them.
"""

ERROR_MESSAGE = "Failed to process feed"


class FeedError(Exception):
    """Base class for failures that abort a feed search."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)

    def to_payload(self) -> dict[str, str]:
        """Structured error envelope returned in place of results."""
        return {"error": ERROR_MESSAGE, "detail": self.detail}


class ConfigurationError(FeedError):
    """A required setting (e.g. the feed URL) is missing."""


class TransportError(FeedError):
    """Network failure or timeout while talking to the feed source."""


class UpstreamStatusError(FeedError):
    """The feed source answered with a non-2xx status."""

    def __init__(self, status: int, body_snippet: str = "") -> None:
        self.status = status
        self.body_snippet = body_snippet
        super().__init__(
            f"Feed HTTP {status}, body: {body_snippet}"
        )


class NoTextEntryError(FeedError):
    """The archive holds no entry with the expected text suffix."""


class ParseError(FeedError):
    """The feed stream is corrupt and cannot be parsed further."""
