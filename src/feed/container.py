# src/feed/container.py

"""Turn a feed response into a readable text stream.

The feed is published either as a bare CSV or as a ZIP archive
holding one. Byte sniffing decides which; the content type only
adds a hint. Archive entries are decompressed on demand, so the
parser starts before the entry has been fully inflated.
"""

import io
import itertools
import logging
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO, TextIO

from src.config.settings import Settings
from src.feed.errors import NoTextEntryError, ParseError
from src.feed.fetcher import FeedPayload, FeedStream

logger = logging.getLogger("feed_search.container")

ZIP_MAGIC = b"PK\x03\x04"

# BOM-tolerant; undecodable bytes become U+FFFD instead of failing
_TEXT_ENCODING = "utf-8-sig"


def is_archive(head: bytes, content_type: str = "") -> bool:
    """True if the payload should be opened as a ZIP archive."""
    return "zip" in content_type.lower() or head.startswith(ZIP_MAGIC)


def _decode(binary: BinaryIO) -> TextIO:
    return io.TextIOWrapper(
        binary, encoding=_TEXT_ENCODING, errors="replace", newline=""
    )


class _ChunkReader(io.RawIOBase):
    """Raw byte stream over an iterator of network chunks."""

    def __init__(self, chunks: Iterator[bytes]) -> None:
        self._chunks = chunks
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: bytearray) -> int:  # type: ignore[override]
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


class ContainerResolver:
    """Open the first text entry of a feed, archived or not."""

    def __init__(
        self, text_suffix: str = Settings.FEED_TEXT_SUFFIX
    ) -> None:
        self.text_suffix = text_suffix.lower()

    def find_text_entry(self, archive: zipfile.ZipFile) -> zipfile.ZipInfo:
        """Return the first non-directory entry with the text suffix.

        Raises:
            NoTextEntryError: no entry matches.
        """
        names: list[str] = []
        for info in archive.infolist():
            if info.is_dir():
                continue
            names.append(info.filename)
            if info.filename.lower().endswith(self.text_suffix):
                return info
        raise NoTextEntryError(
            f"Archive has no {self.text_suffix} entry "
            f"(entries: {', '.join(names) or 'none'})"
        )

    @contextmanager
    def open_payload(self, payload: FeedPayload) -> Iterator[TextIO]:
        """Yield the payload's text, extracting it from a ZIP if needed.

        Raises:
            NoTextEntryError: archive without a text entry.
            ParseError: archive that cannot be opened.
        """
        if is_archive(payload.body[: len(ZIP_MAGIC)], payload.content_type):
            with self._open_archive(payload.body) as text:
                yield text
            return

        logger.debug("Plain text feed (%d bytes)", len(payload.body))
        text = _decode(io.BytesIO(payload.body))
        try:
            yield text
        finally:
            text.close()

    @contextmanager
    def open_stream(self, stream: FeedStream) -> Iterator[TextIO]:
        """Yield text decoded lazily from a network stream.

        Plain text is decoded chunk by chunk as the parser pulls it.
        An archive has its directory at the end, so the download is
        completed first and then handed to :meth:`open_payload`.
        """
        chunks = stream.chunks
        head = b""
        while len(head) < len(ZIP_MAGIC):
            chunk = next(chunks, None)
            if chunk is None:
                break
            head += chunk

        if is_archive(head, stream.content_type):
            logger.info(
                "Archive feed, completing download before extraction"
            )
            body = head + b"".join(chunks)
            with self.open_payload(
                FeedPayload(body=body, content_type=stream.content_type)
            ) as text:
                yield text
            return

        reader = _ChunkReader(itertools.chain([head], chunks))
        text = _decode(io.BufferedReader(reader))
        try:
            yield text
        finally:
            text.close()

    @contextmanager
    def _open_archive(self, body: bytes) -> Iterator[TextIO]:
        try:
            archive = zipfile.ZipFile(io.BytesIO(body))
        except zipfile.BadZipFile as exc:
            raise ParseError(f"Unreadable archive: {exc}") from exc

        with archive:
            entry = self.find_text_entry(archive)
            logger.info(
                "Reading archive entry %s (%d bytes uncompressed)",
                entry.filename,
                entry.file_size,
            )
            try:
                handle = archive.open(entry)
            except (zipfile.BadZipFile, NotImplementedError, RuntimeError) as exc:
                raise ParseError(
                    f"Cannot open archive entry {entry.filename}: {exc}"
                ) from exc
            text = _decode(handle)
            try:
                yield text
            finally:
                text.close()
