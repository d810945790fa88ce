"""
ChunkCrypt File Operations Module
=================================

Provides chunked file encryption and decryption.

Components:
- chunker.py: Chunk planning and offset-addressed file I/O
- key_file.py: Key file record and its JSON codec
- encrypt.py: File encryption, writes ciphertext and key file
- decrypt.py: File decryption with per-chunk integrity check
"""

from chunkcrypt.core.file_ops.chunker import ChunkDescriptor, StreamChunker
from chunkcrypt.core.file_ops.key_file import ChunkNote, KeyFile
from chunkcrypt.core.file_ops.encrypt import FileEncryptor, encrypt_file
from chunkcrypt.core.file_ops.decrypt import FileDecryptor, decrypt_file

__all__ = [
    "ChunkDescriptor",
    "StreamChunker",
    "ChunkNote",
    "KeyFile",
    "FileEncryptor",
    "encrypt_file",
    "FileDecryptor",
    "decrypt_file",
]
