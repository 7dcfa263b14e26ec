# src/feed/row_parser.py

"""Row-by-row CSV parsing with a row cap and cooperative early-stop.

The parser is a pull loop: :meth:`FeedRowParser.rows` yields one raw
row at a time and the caller decides after each row whether to keep
going. Calling :meth:`FeedRowParser.stop` (or closing the generator)
ends parsing before another line is read and releases the stream.
"""

import csv
import logging
import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from src.feed.errors import FeedError, ParseError

logger = logging.getLogger("feed_search.parser")

RawRow = dict[str, str]

# Feed descriptions can exceed the 128 KiB default. 2**31 - 1 is the
# largest value a C long holds on every platform.
FIELD_SIZE_LIMIT = 2**31 - 1
csv.field_size_limit(FIELD_SIZE_LIMIT)


def _strip_nul(stream: TextIO) -> Iterator[str]:
    """Drop NUL characters, which csv rejects before Python 3.11."""
    for line in stream:
        yield line.replace("\0", "")


class ParseState(Enum):
    """Lifecycle of a single parse."""

    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CAPPED = "capped"
    EARLY_STOPPED = "early_stopped"
    FAILED = "failed"


@dataclass(frozen=True)
class ParseOutcome:
    """How a parse ended, for diagnostics and completeness checks."""

    state: ParseState
    rows_seen: int
    malformed_rows: int = 0

    @property
    def row_cap_reached(self) -> bool:
        return self.state is ParseState.CAPPED

    @property
    def early_stopped(self) -> bool:
        return self.state is ParseState.EARLY_STOPPED

    @property
    def possibly_incomplete(self) -> bool:
        """True when rows after the last one seen were never read."""
        return self.state in (ParseState.CAPPED, ParseState.EARLY_STOPPED)


class FeedRowParser:
    """Parse a delimited text stream into header-keyed rows.

    Args:
        stream: Text stream positioned at the header line.
        row_cap: Maximum data rows to examine; ``0``/``None`` means
            unlimited.
        delimiter: Field separator.
    """

    def __init__(
        self,
        stream: TextIO,
        row_cap: int | None = None,
        delimiter: str = ",",
    ) -> None:
        self._stream = stream
        self.row_cap = row_cap or 0
        self.delimiter = delimiter
        self.state = ParseState.IDLE
        self.rows_seen = 0
        self.malformed_rows = 0
        self.header: list[str] = []
        self._stop_requested = False

    def stop(self) -> None:
        """Ask the parser to end before reading another row."""
        self._stop_requested = True

    def outcome(self) -> ParseOutcome:
        return ParseOutcome(
            state=self.state,
            rows_seen=self.rows_seen,
            malformed_rows=self.malformed_rows,
        )

    def rows(self) -> Iterator[RawRow]:
        """Yield data rows until the feed ends, the cap hits or stop().

        Raises:
            RuntimeError: the parser was already started.
            ParseError: the stream is corrupt.
        """
        if self.state is not ParseState.IDLE:
            raise RuntimeError(
                "FeedRowParser is not restartable; open a fresh stream"
            )
        self.state = ParseState.STREAMING

        try:
            reader = csv.reader(
                _strip_nul(self._stream), delimiter=self.delimiter
            )
            header = next(reader, None)
            if header is None:
                logger.warning("Feed is empty (no header line)")
                self.state = ParseState.COMPLETED
                return
            self.header = [name.strip() for name in header]
            width = len(self.header)

            for record in reader:
                if not any(field.strip() for field in record):
                    continue
                if self.row_cap and self.rows_seen >= self.row_cap:
                    self.state = ParseState.CAPPED
                    logger.info(
                        "Row cap of %d reached, stopping parse",
                        self.row_cap,
                    )
                    return

                self.rows_seen += 1
                if len(record) != width:
                    self.malformed_rows += 1
                    logger.debug(
                        "Row %d has %d fields, header has %d",
                        self.rows_seen,
                        len(record),
                        width,
                    )
                    record = (record + [""] * width)[:width]

                yield dict(zip(self.header, record))

                if self._stop_requested:
                    self.state = ParseState.EARLY_STOPPED
                    return

            self.state = ParseState.COMPLETED
        except GeneratorExit:
            self.state = ParseState.EARLY_STOPPED
            raise
        except (csv.Error, zipfile.BadZipFile, zlib.error, EOFError) as exc:
            self.state = ParseState.FAILED
            logger.error(
                "Feed stream corrupt after %d rows: %s",
                self.rows_seen,
                exc,
            )
            raise ParseError(
                f"Corrupt feed stream after {self.rows_seen} rows: {exc}"
            ) from exc
        except FeedError:
            self.state = ParseState.FAILED
            raise
        finally:
            self._stream.close()
            if self.state is not ParseState.FAILED:
                logger.info(
                    "Parse finished: state=%s rows_seen=%d malformed=%d",
                    self.state.value,
                    self.rows_seen,
                    self.malformed_rows,
                )
