"""
File Decryption Module
======================

Rebuilds a plaintext file from a chunked ciphertext and its key file.

Decryption Flow:
1. Check that the key file and the ciphertext exist (before any parsing)
   and that the output is not one of the inputs
2. Load and validate the key file
3. Derive the chunk ranges from the ciphertext length and the key file's
   chunk size; their count must match the number of notes
4. For each note in order: read the range, verify and decrypt with the
   note's nonce and tag, write the plaintext at the chunk offset

Failure Semantics:
- An authentication failure on any chunk aborts the whole operation
- Chunks written before the failure are NOT rolled back; the output
  file must be discarded by the caller
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from chunkcrypt.core.config import ChunkCryptConfig
from chunkcrypt.core.crypto.chacha20 import ChaCha20Cipher
from chunkcrypt.core.errors import (
    AuthenticationError,
    InvalidInputError,
    MalformedKeyFileError,
    OperationCancelledError,
)
from chunkcrypt.core.file_ops.chunker import StreamChunker
from chunkcrypt.core.file_ops.encrypt import ProgressCallback
from chunkcrypt.core.file_ops.key_file import KeyFile
from chunkcrypt.utils.validators import require_distinct_files, require_existing_file


class FileDecryptor:
    """
    Chunked file decryption with per-chunk integrity verification.

    Usage:
        decryptor = FileDecryptor()
        decryptor.decrypt(Path("video.enc.key"), Path("video.enc"), Path("video.mkv"))

    Security Notes:
        - Each chunk is authenticated before its plaintext is written
        - A tampered chunk stops decryption at that chunk
    """

    __slots__ = ("_config", "_cipher", "_log")

    def __init__(
        self,
        config: Optional[ChunkCryptConfig] = None,
        cipher: Optional[ChaCha20Cipher] = None,
    ) -> None:
        """
        Initialize the file decryptor.

        Args:
            config: Configuration (defaults to the global instance)
            cipher: Chunk codec
        """
        self._config = config or ChunkCryptConfig.get_instance()
        self._cipher = cipher or ChaCha20Cipher()
        self._log = logging.getLogger("chunkcrypt.decrypt")

    def decrypt(
        self,
        key_path: Path | str,
        cipher_path: Path | str,
        plaintext_path: Path | str,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Path:
        """
        Decrypt a file.

        Args:
            key_path: Key file written by encryption
            cipher_path: Ciphertext file
            plaintext_path: Plaintext output, created or overwritten
            progress: Optional callback receiving (done_bytes, total_bytes)
            cancel: Optional event checked before each chunk

        Returns:
            Path of the written plaintext file

        Raises:
            MissingFileError: If the key file or the ciphertext doesn't exist
            InvalidInputError: If the ciphertext is empty or two of the paths
                name the same file
            MalformedKeyFileError: If the key file is invalid or doesn't
                match the ciphertext length
            AuthenticationError: If any chunk fails verification
            OperationCancelledError: If cancel was set between chunks
        """
        key_path = require_existing_file(key_path, "KeyFile")
        cipher_path = require_existing_file(cipher_path, "CypherTxtFile")
        plaintext_path = Path(plaintext_path)
        require_distinct_files(
            KeyFile=key_path,
            CypherTxtFile=cipher_path,
            PlainTextFile=plaintext_path,
        )

        key_file = KeyFile.load(
            key_path,
            default_max_chunk_size=self._config.chunking.max_chunk_size,
        )

        total = cipher_path.stat().st_size
        if total == 0:
            raise InvalidInputError(
                f'CypherTxtFile "{cipher_path}" must have a length greater than 0.'
            )

        chunker = StreamChunker(key_file.max_chunk_size)
        chunks = chunker.plan(total)

        if len(chunks) != len(key_file.notes):
            raise MalformedKeyFileError(
                f"Key file lists {len(key_file.notes)} chunks but the ciphertext "
                f"holds {len(chunks)} chunks of up to {key_file.max_chunk_size} bytes"
            )

        self._log.info(
            "Decrypting %s (%d bytes, %d chunks)", cipher_path.name, total, len(chunks)
        )

        for chunk, note in zip(chunks, key_file.notes):
            if cancel is not None and cancel.is_set():
                raise OperationCancelledError(
                    f"Decryption cancelled before chunk {chunk.order} of {len(chunks)}"
                )

            ciphertext = chunker.read_chunk(cipher_path, chunk.offset, chunk.length)

            try:
                plaintext = self._cipher.decrypt_chunk(
                    key_file.key, note.nonce, ciphertext, note.tag
                )
            except AuthenticationError as e:
                self._log.warning(
                    "Authentication failed for chunk %d/%d of %s",
                    chunk.order, len(chunks), cipher_path.name,
                )
                raise AuthenticationError(
                    f"Chunk {chunk.order} of {len(chunks)} failed authentication - "
                    f'"{cipher_path}" was tampered with or does not match the key file',
                    order=chunk.order,
                ) from e

            chunker.append_chunk(plaintext_path, chunk.offset, plaintext, chunk.is_first)

            self._log.debug("Opened chunk %d/%d", chunk.order, len(chunks))
            if progress is not None:
                progress(chunk.end, total)

        self._log.info("Decrypted %s into %s", cipher_path.name, plaintext_path.name)
        return plaintext_path


def decrypt_file(
    key_path: Path | str,
    cipher_path: Path | str,
    plaintext_path: Path | str,
    *,
    config: Optional[ChunkCryptConfig] = None,
    progress: Optional[ProgressCallback] = None,
    cancel: Optional[threading.Event] = None,
) -> Path:
    """
    Convenience function to decrypt a file.

    Args:
        key_path: Key file written by encrypt_file
        cipher_path: Ciphertext file
        plaintext_path: Plaintext output
        config: Optional configuration
        progress: Optional progress callback
        cancel: Optional cancellation event

    Returns:
        Path to the plaintext file
    """
    decryptor = FileDecryptor(config=config)
    return decryptor.decrypt(
        key_path,
        cipher_path,
        plaintext_path,
        progress=progress,
        cancel=cancel,
    )
