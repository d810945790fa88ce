"""
Error Types
===========

Every failure raised by the chunked encryption core derives from
ChunkCryptError, so callers can catch the whole family at once or
inspect the specific kind.

Propagation:
- Nothing is retried automatically
- Output files are left as-is on failure (caller must discard them)
- Authentication failures are never downgraded to data corruption
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ChunkCryptError(Exception):
    """Base class for all chunkcrypt errors."""
    pass


class InvalidInputError(ChunkCryptError, ValueError):
    """
    Raised when caller-supplied input is unusable.

    Covers missing or empty plaintext, empty ciphertext, and
    key/nonce/tag values of the wrong length.
    """
    pass


class MissingFileError(ChunkCryptError, FileNotFoundError):
    """
    Raised when a file required for decryption does not exist.

    Attributes:
        path: The path that was looked up
    """

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)


class MalformedKeyFileError(ChunkCryptError, ValueError):
    """
    Raised when a key file cannot be parsed or violates its invariants.
    """
    pass


class AuthenticationError(ChunkCryptError):
    """
    Raised when a chunk's Poly1305 tag does not verify.

    This indicates tampering, corruption, or a key file that does not
    belong to the ciphertext. It is fatal for the whole operation.

    Attributes:
        order: 1-based chunk order when known
    """

    def __init__(self, message: str, order: Optional[int] = None) -> None:
        super().__init__(message)
        self.order = order


class NonceGenerationError(ChunkCryptError):
    """Raised when the random source keeps producing duplicate nonces."""
    pass


class OperationCancelledError(ChunkCryptError):
    """Raised when an operation is cancelled between two chunks."""
    pass
