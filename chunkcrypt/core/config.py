"""
Configuration Module
====================

Provides immutable, environment-aware configuration for chunked encryption.

Features:
- Immutable configuration after initialization
- Environment variable override support
- No secrets in default values
- OS-aware log directory
"""

from __future__ import annotations

import hashlib
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Optional

from chunkcrypt.core.crypto.chacha20 import CHACHA_MAX_CHUNK_SIZE


# Keys that may never be taken from the environment
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "token", "api_key",
    "private", "credential", "auth", "salt",
})

DEFAULT_MAX_CHUNK_SIZE: Final[int] = 1_000_000_000
DEFAULT_KEY_FILE_SUFFIX: Final[str] = ".key"


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _get_default_log_dir() -> Path:
    """Get OS-appropriate default log directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "ChunkCrypt" / "Logs"
    elif system == "darwin":
        return Path.home() / "Library" / "Logs" / "ChunkCrypt"
    else:  # Linux and others
        return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "ChunkCrypt" / "logs"


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration with OS-aware defaults."""

    log_dir: Path = field(default_factory=_get_default_log_dir)

    def __post_init__(self) -> None:
        """Validate paths after initialization."""
        if not self.log_dir.is_absolute():
            raise ValueError(f"log_dir must be an absolute path: {self.log_dir}")


@dataclass(frozen=True, slots=True)
class ChunkingConfig:
    """
    Immutable chunking policy.

    The ciphertext carries no framing, so decryption must use the same
    max_chunk_size that encryption used. Key files record it.
    """

    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    key_file_suffix: str = DEFAULT_KEY_FILE_SUFFIX

    def __post_init__(self) -> None:
        """Validate chunking settings."""
        if isinstance(self.max_chunk_size, bool) or not isinstance(self.max_chunk_size, int):
            raise ValueError("max_chunk_size must be an integer")
        if not 1 <= self.max_chunk_size <= CHACHA_MAX_CHUNK_SIZE:
            raise ValueError(
                f"max_chunk_size must be between 1 and {CHACHA_MAX_CHUNK_SIZE} bytes"
            )
        if not self.key_file_suffix:
            raise ValueError("key_file_suffix cannot be empty")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = False
    enable_json: bool = False

    def __post_init__(self) -> None:
        """Validate logging settings."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


class ChunkCryptConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = ChunkCryptConfig.load()
        chunk_size = config.chunking.max_chunk_size
        log_dir = config.paths.log_dir
    """

    __slots__ = ("_paths", "_chunking", "_logging", "_frozen", "_config_hash")

    _instance: Optional[ChunkCryptConfig] = None

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        chunking: Optional[ChunkingConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use ChunkCryptConfig.load() for standard initialization."""
        # Use object.__setattr__ to bypass our immutability check during init
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_chunking", chunking or ChunkingConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        """Compute a hash of the configuration for integrity checking."""
        config_str = f"{self._paths}|{self._chunking}|{self._logging}"
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def paths(self) -> PathConfig:
        """Get path configuration."""
        return self._paths

    @property
    def chunking(self) -> ChunkingConfig:
        """Get chunking configuration."""
        return self._chunking

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._logging

    @property
    def config_hash(self) -> str:
        """Get configuration integrity hash."""
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = "CHUNKCRYPT") -> ChunkCryptConfig:
        """
        Load configuration with environment variable overrides.

        Environment variables should be prefixed with CHUNKCRYPT_ and use
        double underscores for nested values.

        Examples:
            CHUNKCRYPT_CHUNKING__MAX_CHUNK_SIZE=67108864
            CHUNKCRYPT_LOGGING__LEVEL=DEBUG
            CHUNKCRYPT_PATHS__LOG_DIR=/var/log/chunkcrypt

        Args:
            env_prefix: Prefix for environment variables (default: CHUNKCRYPT)

        Returns:
            Configured ChunkCryptConfig instance
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        paths_kwargs: dict[str, Any] = {}
        if "paths.log_dir" in env_overrides:
            paths_kwargs["log_dir"] = Path(env_overrides["paths.log_dir"])

        chunking_kwargs: dict[str, Any] = {}
        if "chunking.max_chunk_size" in env_overrides:
            chunking_kwargs["max_chunk_size"] = int(
                env_overrides["chunking.max_chunk_size"]
            )
        if "chunking.key_file_suffix" in env_overrides:
            chunking_kwargs["key_file_suffix"] = env_overrides["chunking.key_file_suffix"]

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"]
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = env_overrides["logging.enable_console"].lower() == "true"
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = env_overrides["logging.enable_file"].lower() == "true"
        if "logging.enable_json" in env_overrides:
            logging_kwargs["enable_json"] = env_overrides["logging.enable_json"].lower() == "true"

        return cls(
            paths=PathConfig(**paths_kwargs) if paths_kwargs else None,
            chunking=ChunkingConfig(**chunking_kwargs) if chunking_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # Convert CHUNKCRYPT_SECTION__KEY to section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                # Never accept anything that looks like a secret from the environment
                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> ChunkCryptConfig:
        """
        Get or create the singleton configuration instance.

        Returns:
            The global ChunkCryptConfig instance
        """
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def __repr__(self) -> str:
        return (
            f"ChunkCryptConfig(hash={self._config_hash}, "
            f"max_chunk_size={self._chunking.max_chunk_size})"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("ChunkCryptConfig is immutable after initialization")
        super().__setattr__(name, value)
