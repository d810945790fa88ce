"""
Nonce Generation
================

Produces the per-chunk nonces for one encryption session.

Security Properties:
    - 96-bit nonces from an OS-backed CSPRNG
    - No two nonces returned by one call are equal
    - RNG instance owned by the generator (no process-wide shared state)

With 96-bit random nonces the collision probability stays negligible
for every file size this package is meant for; the duplicate check
turns "negligible" into "never" within one session.
"""

from __future__ import annotations

import secrets
from typing import Final, Optional, Protocol

from chunkcrypt.core.crypto.chacha20 import CHACHA_NONCE_SIZE
from chunkcrypt.core.errors import InvalidInputError, NonceGenerationError

# Redraws allowed for a single nonce before the RNG is considered broken
MAX_NONCE_ATTEMPTS: Final[int] = 16


class RandomSource(Protocol):
    """Anything with a ``randbytes`` method, e.g. ``random.SystemRandom``."""

    def randbytes(self, n: int) -> bytes: ...


class NonceGenerator:
    """
    Session-scoped generator of unique ChaCha20-Poly1305 nonces.

    Usage:
        generator = NonceGenerator()
        nonces = generator.generate(chunk_count)

    Tests may inject a deterministic source:
        generator = NonceGenerator(rng=random.Random(1234))
    """

    __slots__ = ("_rng", "_max_attempts")

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        max_attempts: int = MAX_NONCE_ATTEMPTS,
    ) -> None:
        """
        Initialize the generator.

        Args:
            rng: Random source exposing randbytes(). Defaults to a fresh
                 secrets.SystemRandom instance.
            max_attempts: Draws allowed per nonce before giving up
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._rng = rng if rng is not None else secrets.SystemRandom()
        self._max_attempts = max_attempts

    def generate(self, count: int) -> list[bytes]:
        """
        Generate ``count`` distinct 12-byte nonces.

        Args:
            count: Number of nonces (one per chunk)

        Returns:
            Ordered list of unique nonces

        Raises:
            InvalidInputError: If count is negative
            NonceGenerationError: If the RNG keeps returning seen values
        """
        if count < 0:
            raise InvalidInputError(f"Nonce count cannot be negative: {count}")

        nonces: list[bytes] = []
        seen: set[bytes] = set()

        for index in range(count):
            for _ in range(self._max_attempts):
                candidate = self._draw()
                if candidate not in seen:
                    seen.add(candidate)
                    nonces.append(candidate)
                    break
            else:
                raise NonceGenerationError(
                    f"Random source produced no unique nonce for chunk {index + 1} "
                    f"after {self._max_attempts} attempts"
                )

        return nonces

    def _draw(self) -> bytes:
        """Draw one candidate nonce from the RNG."""
        candidate = bytes(self._rng.randbytes(CHACHA_NONCE_SIZE))

        if len(candidate) != CHACHA_NONCE_SIZE:
            raise NonceGenerationError(
                f"Random source returned {len(candidate)} bytes, "
                f"expected {CHACHA_NONCE_SIZE}"
            )

        return candidate
