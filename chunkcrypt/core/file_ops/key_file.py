"""
Key File
========

The sidecar record needed to decrypt a chunked ciphertext: the key plus
one note (order, nonce, tag) per chunk.

File Format (UTF-8 JSON):
    {
      "Version": 1,
      "MaxChunkSize": 1000000000,
      "Key": "<base64, 32 bytes>",
      "KeyNoteList": [
        {"Order": 1, "Nonce": "<base64, 12 bytes>", "Tag": "<base64, 16 bytes>"},
        ...
      ]
    }

Field names are case-sensitive. "Version" and "MaxChunkSize" are optional
when reading, so key files that only carry "Key" and "KeyNoteList" still
load. Unknown fields are ignored.

WARNING:
    The key file contains the raw encryption key. Anyone holding it can
    decrypt the ciphertext.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Optional

from chunkcrypt.core.config import DEFAULT_MAX_CHUNK_SIZE
from chunkcrypt.core.crypto.chacha20 import (
    CHACHA_KEY_SIZE,
    CHACHA_MAX_CHUNK_SIZE,
    CHACHA_NONCE_SIZE,
    CHACHA_TAG_SIZE,
)
from chunkcrypt.core.errors import InvalidInputError, MalformedKeyFileError
from chunkcrypt.utils.validators import require_existing_file, validate_bytes_length

KEY_FILE_VERSION: Final[int] = 1

_log = logging.getLogger("chunkcrypt.key_file")


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(value: Any, field_name: str) -> bytes:
    """Decode a strict base64 string field."""
    if not isinstance(value, str):
        raise MalformedKeyFileError(f"{field_name} must be a base64 string")
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise MalformedKeyFileError(f"{field_name} is not valid base64") from e


def _require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass; JSON true/false is not a valid number here
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedKeyFileError(f"{field_name} must be an integer")
    return value


@dataclass(frozen=True, slots=True)
class ChunkNote:
    """
    Decryption note for one chunk.

    Attributes:
        order: 1-based chunk position
        nonce: 12-byte nonce the chunk was sealed with
        tag: 16-byte Poly1305 tag of the chunk
    """

    order: int
    nonce: bytes
    tag: bytes

    def __post_init__(self) -> None:
        """Validate note invariants."""
        if isinstance(self.order, bool) or not isinstance(self.order, int) or self.order < 1:
            raise InvalidInputError(f"Order must be a positive integer, got {self.order!r}")
        validate_bytes_length(self.nonce, CHACHA_NONCE_SIZE, f"KeyNoteList[{self.order - 1}].Nonce")
        validate_bytes_length(self.tag, CHACHA_TAG_SIZE, f"KeyNoteList[{self.order - 1}].Tag")

    def to_dict(self) -> dict[str, Any]:
        return {
            "Order": self.order,
            "Nonce": _b64encode(self.nonce),
            "Tag": _b64encode(self.tag),
        }

    @classmethod
    def from_dict(cls, data: Any, index: int) -> ChunkNote:
        """
        Build a note from its parsed JSON object.

        Args:
            data: Parsed JSON value
            index: Position in KeyNoteList (for error messages)

        Raises:
            MalformedKeyFileError: If a field is missing or ill-typed
        """
        prefix = f"KeyNoteList[{index}]"

        if not isinstance(data, dict):
            raise MalformedKeyFileError(f"{prefix} must be an object")

        for name in ("Order", "Nonce", "Tag"):
            if name not in data:
                raise MalformedKeyFileError(f"{prefix} is missing required field {name!r}")

        order = _require_int(data["Order"], f"{prefix}.Order")
        nonce = _b64decode(data["Nonce"], f"{prefix}.Nonce")
        tag = _b64decode(data["Tag"], f"{prefix}.Tag")

        try:
            return cls(order=order, nonce=nonce, tag=tag)
        except InvalidInputError as e:
            raise MalformedKeyFileError(f"{prefix} is invalid: {e}") from e

    def __repr__(self) -> str:
        return f"ChunkNote(order={self.order})"


@dataclass(frozen=True, slots=True)
class KeyFile:
    """
    Immutable key file contents.

    Attributes:
        key: 32-byte ChaCha20-Poly1305 key
        notes: One ChunkNote per chunk, orders 1..n
        max_chunk_size: Chunk size policy used at encryption time

    Usage:
        key_file = KeyFile(key=key, notes=notes, max_chunk_size=chunk_size)
        key_file.save(Path("data.enc.key"))

        restored = KeyFile.load(Path("data.enc.key"))
        assert restored == key_file
    """

    key: bytes
    notes: tuple[ChunkNote, ...]
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE

    def __post_init__(self) -> None:
        """Validate key file invariants."""
        object.__setattr__(self, "key", validate_bytes_length(self.key, CHACHA_KEY_SIZE, "Key"))
        object.__setattr__(self, "notes", tuple(self.notes))

        if isinstance(self.max_chunk_size, bool) or not isinstance(self.max_chunk_size, int) \
                or not 1 <= self.max_chunk_size <= CHACHA_MAX_CHUNK_SIZE:
            raise InvalidInputError(
                f"MaxChunkSize must be an integer between 1 and {CHACHA_MAX_CHUNK_SIZE}, "
                f"got {self.max_chunk_size!r}"
            )

        if not self.notes:
            raise InvalidInputError("KeyNoteList cannot be empty")

        for expected, note in enumerate(self.notes, start=1):
            if note.order != expected:
                raise InvalidInputError(
                    f"KeyNoteList[{expected - 1}].Order is {note.order}, expected {expected}"
                )

    def to_dict(self) -> dict[str, Any]:
        return {
            "Version": KEY_FILE_VERSION,
            "MaxChunkSize": self.max_chunk_size,
            "Key": _b64encode(self.key),
            "KeyNoteList": [note.to_dict() for note in self.notes],
        }

    def to_json(self) -> str:
        """Serialize the key file to indented JSON."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str, default_max_chunk_size: Optional[int] = None) -> KeyFile:
        """
        Deserialize and validate a key file.

        Args:
            text: JSON document
            default_max_chunk_size: Chunk size to assume when the document
                does not record one

        Returns:
            Validated KeyFile

        Raises:
            MalformedKeyFileError: If the document is unparsable, a required
                field is missing or ill-typed, or an invariant is violated
        """
        try:
            root = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedKeyFileError(f"Key file is not valid JSON: {e}") from e

        if not isinstance(root, dict):
            raise MalformedKeyFileError("Key file must contain a JSON object")

        if "Version" in root:
            version = _require_int(root["Version"], "Version")
            if version != KEY_FILE_VERSION:
                raise MalformedKeyFileError(f"Unsupported key file version: {version}")

        if "MaxChunkSize" in root:
            max_chunk_size = _require_int(root["MaxChunkSize"], "MaxChunkSize")
        else:
            max_chunk_size = default_max_chunk_size or DEFAULT_MAX_CHUNK_SIZE

        if "Key" not in root:
            raise MalformedKeyFileError("Key file is missing required field 'Key'")
        key = _b64decode(root["Key"], "Key")

        if "KeyNoteList" not in root:
            raise MalformedKeyFileError("Key file is missing required field 'KeyNoteList'")
        raw_notes = root["KeyNoteList"]
        if not isinstance(raw_notes, list):
            raise MalformedKeyFileError("KeyNoteList must be an array")

        notes = [ChunkNote.from_dict(item, index) for index, item in enumerate(raw_notes)]

        try:
            return cls(key=key, notes=tuple(notes), max_chunk_size=max_chunk_size)
        except InvalidInputError as e:
            raise MalformedKeyFileError(f"Invalid key file: {e}") from e

    def save(self, path: Path | str) -> Path:
        """Write the key file to disk."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        _log.debug("Wrote key file with %d notes", len(self.notes))
        return path

    @classmethod
    def load(cls, path: Path | str, default_max_chunk_size: Optional[int] = None) -> KeyFile:
        """
        Read and validate a key file from disk.

        Raises:
            MissingFileError: If the file doesn't exist
            MalformedKeyFileError: If the contents are invalid
        """
        path = require_existing_file(path, "KeyFile")

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedKeyFileError(f'Key file "{path}" is not UTF-8 text') from e

        return cls.from_json(text, default_max_chunk_size=default_max_chunk_size)

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        return f"KeyFile(chunks={len(self.notes)}, max_chunk_size={self.max_chunk_size})"
