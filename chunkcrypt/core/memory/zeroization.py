"""
Memory Zeroization Utilities
============================

Best-effort wiping of plaintext chunk buffers once they have been used.

Key Concepts:
- Zeroization: Overwriting memory with zeros/patterns
- Guard: Automatic cleanup on scope exit

WARNING:
- Python's memory model doesn't guarantee secure erasure
- Only mutable buffers (bytearray) can be wiped; bytes returned by
  the cipher cannot
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator


def secure_zero(data: bytearray | memoryview) -> None:
    """
    Securely zero a byte buffer.

    Uses ctypes for direct memory access on bytearrays,
    and Python-level zeroing for writable memoryviews.

    Args:
        data: Mutable byte buffer to zero

    Security Notes:
        - This is best-effort; Python may have copies
        - Buffer must be mutable (bytearray, not bytes)
    """
    if len(data) == 0:
        return

    if isinstance(data, memoryview):
        data[:] = bytes(len(data))
        return

    addr = ctypes.addressof(
        (ctypes.c_char * len(data)).from_buffer(data)
    )

    # Multi-pass wipe
    ctypes.memset(addr, 0, len(data))
    ctypes.memset(addr, 0xFF, len(data))
    ctypes.memset(addr, 0, len(data))


@contextmanager
def ZeroizeContext(*buffers: bytearray) -> Iterator[None]:
    """
    Context manager that zeroizes buffers on exit.

    Always zeroizes, whether exit is normal or exceptional.

    Usage:
        chunk = chunker.read_chunk(source, offset, length)

        with ZeroizeContext(chunk):
            sealed = cipher.encrypt_chunk(key, nonce, chunk)
        # chunk is now zeroed
    """
    try:
        yield
    finally:
        for buf in buffers:
            secure_zero(buf)
