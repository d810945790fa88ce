"""
ChunkCrypt Memory Security Module
=================================

Provides best-effort wiping of plaintext buffers.

WARNING:
- Python's memory model doesn't guarantee secure erasure
- These are best-effort mitigations
"""

from chunkcrypt.core.memory.zeroization import (
    secure_zero,
    ZeroizeContext,
)

__all__ = [
    "secure_zero",
    "ZeroizeContext",
]
