"""
ChunkCrypt Cryptographic Core
=============================

Per-chunk authenticated encryption with ChaCha20-Poly1305.

Security Properties:
    - All encryption is authenticated (AEAD)
    - One unique nonce per chunk, never reused within a session
    - Secure RNG for all random values

WARNING: This module handles sensitive cryptographic material.
         Incorrect usage can compromise security.
"""

from chunkcrypt.core.crypto.chacha20 import ChaCha20Cipher, SealedChunk
from chunkcrypt.core.crypto.nonce import NonceGenerator

__all__ = [
    "ChaCha20Cipher",
    "SealedChunk",
    "NonceGenerator",
]
