"""
Validation Utilities
====================

Input validation shared by the codec, the key file and the file operations.
"""

from __future__ import annotations

import os
from pathlib import Path

from chunkcrypt.core.errors import InvalidInputError, MissingFileError


def validate_bytes_length(
    value: bytes,
    expected: int,
    field_name: str = "value",
) -> bytes:
    """
    Validate that a byte string has an exact length.

    Args:
        value: The bytes to validate
        expected: Required length in bytes
        field_name: Name of the field for error messages

    Returns:
        The validated value as immutable bytes

    Raises:
        InvalidInputError: If the value is not bytes-like or has the wrong length
    """
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidInputError(f"{field_name} must be bytes, got {type(value).__name__}")

    value = bytes(value)
    if len(value) != expected:
        raise InvalidInputError(
            f"{field_name} should be {expected} bytes ({expected * 8} bits). "
            f"Current length: {len(value)}"
        )

    return value


def validate_source_file(path: str | Path, field_name: str = "file") -> Path:
    """
    Validate that a path names an existing, non-empty regular file.

    Args:
        path: The path to validate
        field_name: Name used in error messages

    Returns:
        The path as a Path object

    Raises:
        InvalidInputError: If the file is missing, not a regular file, or empty
    """
    path = Path(path)

    if not path.is_file() or path.stat().st_size == 0:
        raise InvalidInputError(
            f'{field_name} "{path}" must exist and have a length greater than 0.'
        )

    return path


def require_existing_file(path: str | Path, field_name: str = "file") -> Path:
    """
    Ensure a path exists before any parsing or cryptography happens.

    Raises:
        MissingFileError: If the path does not exist
    """
    path = Path(path)

    if not path.exists():
        raise MissingFileError(f'{field_name} "{path}" doesn\'t exist.', path)

    return path


def _same_file(first: Path, second: Path) -> bool:
    if first.exists() and second.exists():
        return os.path.samefile(first, second)
    return first.resolve() == second.resolve()


def require_distinct_files(**paths: Path) -> None:
    """
    Ensure no two of the named paths refer to the same file.

    Existing files are compared with os.path.samefile so hard links and
    symlinks are caught; paths that don't exist yet are compared after
    resolving.

    Raises:
        InvalidInputError: If two paths name the same file
    """
    named = list(paths.items())

    for index, (first_name, first) in enumerate(named):
        for second_name, second in named[index + 1:]:
            if _same_file(first, second):
                raise InvalidInputError(
                    f'{first_name} "{first}" and {second_name} "{second}" '
                    f"must be different files."
                )
