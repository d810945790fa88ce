"""
Stream Chunking
===============

Splits a file of known length into ordered chunks and performs the
offset-addressed reads and writes for them.

Layout:
    All chunks but the last are exactly max_chunk_size bytes. The last
    chunk holds the remainder (1..max_chunk_size bytes, never 0).
    A chunk's offset is the sum of the lengths of all chunks before it,
    so plaintext and ciphertext share the same chunk boundaries.

Every read and write opens its own file handle inside a ``with`` block,
so handles are released on every exit path.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from chunkcrypt.core.errors import InvalidInputError


@dataclass(frozen=True, slots=True)
class ChunkDescriptor:
    """
    Byte range of one chunk.

    Attributes:
        order: 1-based position of the chunk
        offset: Byte offset from the start of the file
        length: Number of bytes in the chunk
    """

    order: int
    offset: int
    length: int

    @property
    def is_first(self) -> bool:
        return self.order == 1

    @property
    def end(self) -> int:
        return self.offset + self.length


class StreamChunker:
    """
    Computes chunk boundaries and moves chunk bytes to and from disk.

    Usage:
        chunker = StreamChunker(max_chunk_size=64 * 1024 * 1024)

        for chunk in chunker.plan(source.stat().st_size):
            data = chunker.read_chunk(source, chunk.offset, chunk.length)
            chunker.append_chunk(destination, chunk.offset, data, chunk.is_first)
    """

    __slots__ = ("_max_chunk_size", "_log")

    def __init__(self, max_chunk_size: int) -> None:
        """
        Initialize the chunker.

        Args:
            max_chunk_size: Size of every chunk except the last
        """
        if max_chunk_size < 1:
            raise InvalidInputError(f"max_chunk_size must be positive: {max_chunk_size}")

        self._max_chunk_size = max_chunk_size
        self._log = logging.getLogger("chunkcrypt.chunker")

    @property
    def max_chunk_size(self) -> int:
        return self._max_chunk_size

    def chunk_count(self, total_length: int) -> int:
        """Number of chunks a file of total_length bytes splits into."""
        if total_length < 0:
            raise InvalidInputError(f"Length cannot be negative: {total_length}")
        return -(-total_length // self._max_chunk_size)

    def plan(self, total_length: int) -> list[ChunkDescriptor]:
        """
        Compute the ordered chunk descriptors for a file.

        Args:
            total_length: File size in bytes

        Returns:
            Descriptors in ascending order (empty for a zero-length file)
        """
        chunks: list[ChunkDescriptor] = []
        offset = 0

        for order in range(1, self.chunk_count(total_length) + 1):
            length = min(self._max_chunk_size, total_length - offset)
            chunks.append(ChunkDescriptor(order=order, offset=offset, length=length))
            offset += length

        return chunks

    def read_chunk(self, source: Path | str, offset: int, length: int) -> bytearray:
        """
        Read exactly ``length`` bytes starting at ``offset``.

        Returns a mutable buffer so the caller can wipe it after use.

        Raises:
            InvalidInputError: If the file ends before the chunk does
        """
        buffer = bytearray(length)

        with open(source, "rb") as fh:
            fh.seek(offset, os.SEEK_SET)
            read = fh.readinto(buffer)

        if read != length:
            raise InvalidInputError(
                f'"{source}" ended after {read} of {length} bytes at offset {offset}'
            )

        self._log.debug("Read %d bytes at offset %d", length, offset)
        return buffer

    def append_chunk(
        self,
        destination: Path | str,
        offset: int,
        data: bytes | bytearray,
        is_first: bool,
    ) -> None:
        """
        Write one chunk into the destination file.

        The first chunk creates (or truncates) the destination; later
        chunks open it for update and write at their offset.
        """
        mode = "wb" if is_first else "r+b"

        with open(destination, mode) as fh:
            fh.seek(offset, os.SEEK_SET)
            fh.write(data)

        self._log.debug("Wrote %d bytes at offset %d", len(data), offset)
