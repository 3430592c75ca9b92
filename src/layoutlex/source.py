"""Character source: adapts a UTF-8 byte stream into a code point iterator."""

from __future__ import annotations

import codecs
from collections.abc import Iterator
from typing import BinaryIO

from layoutlex.errors import NotUtf8Error, ReadError

DEFAULT_CHUNK_SIZE = 8192


def iter_chars(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    """Yield code points decoded from stream, reading chunk_size bytes at a time.

    Multi-byte sequences may straddle chunk boundaries. Raises NotUtf8Error
    on malformed or truncated UTF-8 and ReadError when stream.read() fails.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    decoder = codecs.getincrementaldecoder("utf-8")()
    consumed = 0  # bytes handed to the decoder so far
    while True:
        try:
            chunk = stream.read(chunk_size)
        except OSError as exc:
            raise ReadError(f"failed to read input: {exc}") from exc

        final = not chunk
        pending = len(decoder.getstate()[0])
        try:
            text = decoder.decode(chunk, final=final)
        except UnicodeDecodeError as exc:
            # exc.start indexes into pending + chunk
            byte_offset = consumed - pending + exc.start
            raise NotUtf8Error(
                f"input is not valid UTF-8 at byte {byte_offset}: {exc.reason}",
                byte_offset,
            ) from exc
        consumed += len(chunk)

        yield from text
        if final:
            return
