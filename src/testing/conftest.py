import logging

import pytest

from strapiclient.blocks import BlockRegistry, register_builtin_blocks
from strapiclient.logging_config import SDK_LOGGER_NAME

BASE_URL = "http://localhost:1337/api"


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def registry() -> BlockRegistry:
    """An isolated registry holding only the built-in shapes."""
    return register_builtin_blocks(BlockRegistry())


@pytest.fixture
def empty_registry() -> BlockRegistry:
    return BlockRegistry()


@pytest.fixture(autouse=True)
def restore_sdk_logger():
    """setup_sdk_logging() mutates the SDK logger: put it back after each test."""
    logger = logging.getLogger(SDK_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
