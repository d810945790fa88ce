"""
File Encryption Module
======================

Encrypts a file chunk by chunk with ChaCha20-Poly1305 and writes the
key file needed to decrypt it.

Encryption Flow:
1. Validate the key and the plaintext file (must exist, length > 0) and
   check that plaintext, ciphertext and key file are three different files
2. Plan the chunks over the full plaintext length
3. Draw one unique nonce per chunk
4. For each chunk in order: read, seal, write ciphertext at the chunk offset
5. Save {key, notes} as the key file

Output:
    The ciphertext file is the raw concatenation of the chunk ciphertexts
    (same length as the plaintext). Nonces and tags live only in the key
    file, which defaults to "<cipher path>.key".
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from chunkcrypt.core.config import ChunkCryptConfig
from chunkcrypt.core.crypto.chacha20 import CHACHA_KEY_SIZE, ChaCha20Cipher
from chunkcrypt.core.crypto.nonce import NonceGenerator
from chunkcrypt.core.errors import OperationCancelledError
from chunkcrypt.core.file_ops.chunker import StreamChunker
from chunkcrypt.core.file_ops.key_file import ChunkNote, KeyFile
from chunkcrypt.core.memory import ZeroizeContext
from chunkcrypt.utils.validators import (
    require_distinct_files,
    validate_bytes_length,
    validate_source_file,
)

# progress(done_bytes, total_bytes), called after every chunk
ProgressCallback = Callable[[int, int], None]


def default_key_path(cipher_path: Path | str, suffix: str = ".key") -> Path:
    """Key file path used when the caller doesn't name one."""
    cipher_path = Path(cipher_path)
    return cipher_path.with_name(cipher_path.name + suffix)


class FileEncryptor:
    """
    Chunked file encryption.

    Usage:
        encryptor = FileEncryptor()
        key_path = encryptor.encrypt(key, Path("video.mkv"), Path("video.enc"))

    The encryptor holds no per-file state; every call to encrypt() is an
    independent session with its own nonces.
    """

    __slots__ = ("_config", "_cipher", "_nonces", "_log")

    def __init__(
        self,
        config: Optional[ChunkCryptConfig] = None,
        nonce_generator: Optional[NonceGenerator] = None,
        cipher: Optional[ChaCha20Cipher] = None,
    ) -> None:
        """
        Initialize the file encryptor.

        Args:
            config: Configuration (defaults to the global instance)
            nonce_generator: Nonce source (defaults to a CSPRNG-backed generator)
            cipher: Chunk codec
        """
        self._config = config or ChunkCryptConfig.get_instance()
        self._nonces = nonce_generator or NonceGenerator()
        self._cipher = cipher or ChaCha20Cipher()
        self._log = logging.getLogger("chunkcrypt.encrypt")

    def encrypt(
        self,
        key: bytes,
        plaintext_path: Path | str,
        cipher_path: Path | str,
        key_path: Optional[Path | str] = None,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Path:
        """
        Encrypt a file.

        Args:
            key: 32-byte key supplied by the caller
            plaintext_path: File to encrypt (left untouched)
            cipher_path: Ciphertext output, created or overwritten
            key_path: Key file output (default: cipher_path + ".key")
            progress: Optional callback receiving (done_bytes, total_bytes)
            cancel: Optional event checked before each chunk

        Returns:
            Path of the written key file

        Raises:
            InvalidInputError: If the key is not 32 bytes or the plaintext
                is missing or empty, or two of the paths name the same file
                (no output is created)
            OperationCancelledError: If cancel was set between chunks
        """
        key = validate_bytes_length(key, CHACHA_KEY_SIZE, "Key")
        plaintext_path = validate_source_file(plaintext_path, "PlainTextFile")
        cipher_path = Path(cipher_path)

        if key_path is None:
            key_path = default_key_path(cipher_path, self._config.chunking.key_file_suffix)
        key_path = Path(key_path)

        require_distinct_files(
            PlainTextFile=plaintext_path,
            CypherTxtFile=cipher_path,
            KeyFile=key_path,
        )

        max_chunk_size = self._config.chunking.max_chunk_size
        chunker = StreamChunker(max_chunk_size)
        total = plaintext_path.stat().st_size
        chunks = chunker.plan(total)
        nonces = self._nonces.generate(len(chunks))

        self._log.info(
            "Encrypting %s (%d bytes, %d chunks)", plaintext_path.name, total, len(chunks)
        )

        notes: list[ChunkNote] = []
        for chunk, nonce in zip(chunks, nonces):
            if cancel is not None and cancel.is_set():
                raise OperationCancelledError(
                    f"Encryption cancelled before chunk {chunk.order} of {len(chunks)}"
                )

            plaintext = chunker.read_chunk(plaintext_path, chunk.offset, chunk.length)
            with ZeroizeContext(plaintext):
                sealed = self._cipher.encrypt_chunk(key, nonce, plaintext)

            chunker.append_chunk(cipher_path, chunk.offset, sealed.ciphertext, chunk.is_first)
            notes.append(ChunkNote(order=chunk.order, nonce=nonce, tag=sealed.tag))

            self._log.debug("Sealed chunk %d/%d", chunk.order, len(chunks))
            if progress is not None:
                progress(chunk.end, total)

        KeyFile(key=key, notes=tuple(notes), max_chunk_size=max_chunk_size).save(key_path)

        self._log.info("Encrypted %s into %s", plaintext_path.name, cipher_path.name)
        return key_path


def encrypt_file(
    key: bytes,
    plaintext_path: Path | str,
    cipher_path: Path | str,
    key_path: Optional[Path | str] = None,
    *,
    config: Optional[ChunkCryptConfig] = None,
    progress: Optional[ProgressCallback] = None,
    cancel: Optional[threading.Event] = None,
) -> Path:
    """
    Convenience function to encrypt a file.

    Args:
        key: 32-byte key
        plaintext_path: File to encrypt
        cipher_path: Ciphertext output
        key_path: Optional key file output (default: cipher_path + ".key")
        config: Optional configuration
        progress: Optional progress callback
        cancel: Optional cancellation event

    Returns:
        Path to the key file
    """
    encryptor = FileEncryptor(config=config)
    return encryptor.encrypt(
        key,
        plaintext_path,
        cipher_path,
        key_path,
        progress=progress,
        cancel=cancel,
    )
