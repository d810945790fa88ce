"""
ChunkCrypt - Chunked ChaCha20-Poly1305 File Encryption
======================================================

Encrypts files of any size by splitting them into ordered chunks, each
sealed with ChaCha20-Poly1305 under its own unique nonce. The key and the
per-chunk nonces and tags are written to a JSON key file next to the
ciphertext.

Usage:
    from chunkcrypt import encrypt_file, decrypt_file

    key_path = encrypt_file(key, "report.pdf", "report.enc")
    decrypt_file(key_path, "report.enc", "report.pdf")

Security Notice:
- No secrets are logged
- Every chunk is authenticated before its plaintext is written
- The key file contains the key; protect it accordingly
"""

from chunkcrypt.core.config import ChunkCryptConfig
from chunkcrypt.core.errors import (
    AuthenticationError,
    ChunkCryptError,
    InvalidInputError,
    MalformedKeyFileError,
    MissingFileError,
    NonceGenerationError,
    OperationCancelledError,
)
from chunkcrypt.core.file_ops import (
    FileDecryptor,
    FileEncryptor,
    KeyFile,
    decrypt_file,
    encrypt_file,
)
from chunkcrypt.core.logging import get_secure_logger

__version__ = "0.1.0"

__all__ = [
    "ChunkCryptConfig",
    "ChunkCryptError",
    "InvalidInputError",
    "MissingFileError",
    "MalformedKeyFileError",
    "AuthenticationError",
    "NonceGenerationError",
    "OperationCancelledError",
    "FileEncryptor",
    "FileDecryptor",
    "KeyFile",
    "encrypt_file",
    "decrypt_file",
    "get_secure_logger",
    "__version__",
]
