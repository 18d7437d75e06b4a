"""Shared test fixtures."""

import logging

import pytest

from gsa_api.logging_config import ACCESS_LOGGER


@pytest.fixture(autouse=True)
def _isolate_access_logger():
    """Restore uvicorn's access logger handlers so tests don't leak into each other."""
    logger = logging.getLogger(ACCESS_LOGGER)
    saved = list(logger.handlers)
    yield
    for handler in logger.handlers:
        if handler not in saved:
            handler.close()
    logger.handlers = saved
