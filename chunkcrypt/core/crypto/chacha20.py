"""
ChaCha20-Poly1305 Chunk Codec
=============================

Seals and opens a single file chunk with ChaCha20-Poly1305.

Security Properties:
    - 256-bit key
    - 96-bit nonce (supplied by the caller, see nonce.py)
    - 128-bit Poly1305 authentication tag, kept detached from the ciphertext
    - IETF RFC 8439 compliant

The tag is stored in the key file rather than next to the ciphertext, so
the ciphertext file is exactly as long as the plaintext file.

WARNING:
    - Never reuse (key, nonce) pairs
    - Always verify tag before using plaintext
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Final

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from chunkcrypt.core.errors import AuthenticationError, InvalidInputError
from chunkcrypt.utils.validators import validate_bytes_length

# Constants per RFC 8439
CHACHA_KEY_SIZE: Final[int] = 32  # 256 bits
CHACHA_NONCE_SIZE: Final[int] = 12  # 96 bits (IETF variant)
CHACHA_TAG_SIZE: Final[int] = 16  # 128 bits Poly1305

# OpenSSL-backed AEADs in `cryptography` refuse inputs of 2**31 bytes or more
CHACHA_MAX_CHUNK_SIZE: Final[int] = 2**31 - 1 - CHACHA_TAG_SIZE

BytesLike = bytes | bytearray | memoryview


@dataclass(frozen=True, slots=True)
class SealedChunk:
    """
    Immutable result of encrypting one chunk.

    Attributes:
        ciphertext: Encrypted chunk, same length as the plaintext
        tag: Detached 16-byte Poly1305 tag
    """

    ciphertext: bytes
    tag: bytes

    def __repr__(self) -> str:
        """Safe representation without exposing data."""
        return f"SealedChunk(ciphertext_len={len(self.ciphertext)})"


class ChaCha20Cipher:
    """
    ChaCha20-Poly1305 AEAD codec for individual chunks (RFC 8439).

    Usage:
        cipher = ChaCha20Cipher()

        sealed = cipher.encrypt_chunk(key, nonce, plaintext)
        plaintext = cipher.decrypt_chunk(key, nonce, sealed.ciphertext, sealed.tag)

    Encryption is deterministic: the nonce is the only varying input,
    so the caller is responsible for never repeating it under one key.
    """

    __slots__ = ()

    @staticmethod
    def generate_key() -> bytes:
        """
        Generate a cryptographically secure random ChaCha20 key.

        Returns:
            32 bytes of cryptographic random data
        """
        return secrets.token_bytes(CHACHA_KEY_SIZE)

    @staticmethod
    def is_supported() -> bool:
        """
        Check whether the linked crypto backend provides ChaCha20-Poly1305.

        Some FIPS-restricted OpenSSL builds do not.
        """
        try:
            ChaCha20Poly1305(bytes(CHACHA_KEY_SIZE))
        except UnsupportedAlgorithm:
            return False
        return True

    def encrypt_chunk(
        self,
        key: bytes,
        nonce: bytes,
        plaintext: BytesLike,
    ) -> SealedChunk:
        """
        Encrypt one chunk.

        Args:
            key: 32-byte encryption key
            nonce: 12-byte nonce, unique for this key
            plaintext: Chunk data (1 to CHACHA_MAX_CHUNK_SIZE bytes)

        Returns:
            SealedChunk with ciphertext and detached tag

        Raises:
            InvalidInputError: If key, nonce or chunk size is invalid
        """
        key = validate_bytes_length(key, CHACHA_KEY_SIZE, "Key")
        nonce = validate_bytes_length(nonce, CHACHA_NONCE_SIZE, "Nonce")

        if len(plaintext) > CHACHA_MAX_CHUNK_SIZE:
            raise InvalidInputError(
                f"Chunk of {len(plaintext)} bytes exceeds the cipher limit "
                f"of {CHACHA_MAX_CHUNK_SIZE} bytes"
            )

        sealed = ChaCha20Poly1305(key).encrypt(nonce, plaintext, None)

        return SealedChunk(
            ciphertext=sealed[:-CHACHA_TAG_SIZE],
            tag=sealed[-CHACHA_TAG_SIZE:],
        )

    def decrypt_chunk(
        self,
        key: bytes,
        nonce: bytes,
        ciphertext: BytesLike,
        tag: bytes,
    ) -> bytes:
        """
        Decrypt one chunk with integrity verification.

        Args:
            key: The 32-byte encryption key
            nonce: The nonce used during encryption
            ciphertext: Encrypted chunk
            tag: The detached 16-byte tag recorded at encryption time

        Returns:
            Decrypted chunk bytes

        Raises:
            InvalidInputError: If key, nonce or tag length is wrong
            AuthenticationError: If the tag does not verify

        Security:
            Integrity verified before ANY plaintext returned
        """
        key = validate_bytes_length(key, CHACHA_KEY_SIZE, "Key")
        nonce = validate_bytes_length(nonce, CHACHA_NONCE_SIZE, "Nonce")
        tag = validate_bytes_length(tag, CHACHA_TAG_SIZE, "Tag")

        try:
            return ChaCha20Poly1305(key).decrypt(nonce, bytes(ciphertext) + tag, None)
        except InvalidTag as e:
            raise AuthenticationError(
                "Chunk authentication failed - data was tampered with "
                "or does not match the key file"
            ) from e
