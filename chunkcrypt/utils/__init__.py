"""
Utils module - Utility functions and helpers.
"""

from chunkcrypt.utils.validators import (
    validate_bytes_length,
    validate_source_file,
    require_existing_file,
    require_distinct_files,
)

__all__ = [
    "validate_bytes_length",
    "validate_source_file",
    "require_existing_file",
    "require_distinct_files",
]
