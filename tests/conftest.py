import logging
import secrets

import pytest

from chunkcrypt.core.config import ChunkCryptConfig, ChunkingConfig, LoggingConfig

SMALL_CHUNK = 16


@pytest.fixture(autouse=True)
def _isolate_globals():
    ChunkCryptConfig.reset_instance()
    yield
    ChunkCryptConfig.reset_instance()

    package_logger = logging.getLogger("chunkcrypt")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def key() -> bytes:
    return secrets.token_bytes(32)


@pytest.fixture
def make_config():
    def _make(max_chunk_size: int = SMALL_CHUNK) -> ChunkCryptConfig:
        return ChunkCryptConfig(
            chunking=ChunkingConfig(max_chunk_size=max_chunk_size),
            logging=LoggingConfig(enable_console=False),
        )

    return _make


@pytest.fixture
def config(make_config) -> ChunkCryptConfig:
    return make_config()
