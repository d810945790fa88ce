from pathlib import Path

import pytest

from chunkcrypt.core.config import (
    DEFAULT_MAX_CHUNK_SIZE,
    ChunkCryptConfig,
    ChunkingConfig,
    LoggingConfig,
    PathConfig,
)
from chunkcrypt.core.crypto.chacha20 import CHACHA_MAX_CHUNK_SIZE


def test_defaults():
    config = ChunkCryptConfig()

    assert config.chunking.max_chunk_size == DEFAULT_MAX_CHUNK_SIZE == 1_000_000_000
    assert config.chunking.key_file_suffix == ".key"
    assert config.logging.level == "INFO"
    assert config.paths.log_dir.is_absolute()


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CHUNKCRYPT_CHUNKING__MAX_CHUNK_SIZE", "4096")
    monkeypatch.setenv("CHUNKCRYPT_CHUNKING__KEY_FILE_SUFFIX", ".keyfile")
    monkeypatch.setenv("CHUNKCRYPT_LOGGING__LEVEL", "DEBUG")
    monkeypatch.setenv("CHUNKCRYPT_LOGGING__ENABLE_FILE", "true")
    monkeypatch.setenv("CHUNKCRYPT_PATHS__LOG_DIR", str(tmp_path))

    config = ChunkCryptConfig.load()

    assert config.chunking.max_chunk_size == 4096
    assert config.chunking.key_file_suffix == ".keyfile"
    assert config.logging.level == "DEBUG"
    assert config.logging.enable_file is True
    assert config.paths.log_dir == tmp_path


def test_custom_prefix(monkeypatch):
    monkeypatch.setenv("OTHER_CHUNKING__MAX_CHUNK_SIZE", "512")

    assert ChunkCryptConfig.load(env_prefix="OTHER").chunking.max_chunk_size == 512


def test_sensitive_env_keys_are_skipped(monkeypatch):
    monkeypatch.setenv("CHUNKCRYPT_SECRET__VALUE", "hunter2")
    monkeypatch.setenv("CHUNKCRYPT_LOGGING__LEVEL", "ERROR")

    overrides = ChunkCryptConfig._parse_env_overrides("CHUNKCRYPT")

    assert "secret.value" not in overrides
    assert overrides["logging.level"] == "ERROR"


@pytest.mark.parametrize("size", [0, -1, CHACHA_MAX_CHUNK_SIZE + 1])
def test_chunk_size_bounds(size):
    with pytest.raises(ValueError):
        ChunkingConfig(max_chunk_size=size)


def test_largest_chunk_size_is_accepted():
    assert ChunkingConfig(max_chunk_size=CHACHA_MAX_CHUNK_SIZE).max_chunk_size == CHACHA_MAX_CHUNK_SIZE


def test_invalid_log_level():
    with pytest.raises(ValueError):
        LoggingConfig(level="LOUD")


def test_relative_log_dir_is_rejected():
    with pytest.raises(ValueError):
        PathConfig(log_dir=Path("relative/logs"))


def test_config_is_immutable():
    config = ChunkCryptConfig()

    with pytest.raises(AttributeError):
        config.chunking = ChunkingConfig(max_chunk_size=1)


def test_singleton(monkeypatch):
    monkeypatch.setenv("CHUNKCRYPT_CHUNKING__MAX_CHUNK_SIZE", "2048")
    first = ChunkCryptConfig.get_instance()

    assert ChunkCryptConfig.get_instance() is first
    assert first.chunking.max_chunk_size == 2048

    ChunkCryptConfig.reset_instance()
    assert ChunkCryptConfig.get_instance() is not first


def test_hash_tracks_settings():
    small = ChunkCryptConfig(chunking=ChunkingConfig(max_chunk_size=16))

    assert small.config_hash == ChunkCryptConfig(chunking=ChunkingConfig(max_chunk_size=16)).config_hash
    assert small.config_hash != ChunkCryptConfig().config_hash
    assert "max_chunk_size=16" in repr(small)
