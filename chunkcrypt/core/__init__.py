"""
Core module - Contains configuration, logging, errors and base components.
"""

from chunkcrypt.core.config import ChunkCryptConfig
from chunkcrypt.core.logging import get_secure_logger, SecureLogFilter

__all__ = ["ChunkCryptConfig", "get_secure_logger", "SecureLogFilter"]
