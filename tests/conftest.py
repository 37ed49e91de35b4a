import logging

import pytest

from piano_listener.logging_config import MODULE_LOG_LEVELS


@pytest.fixture
def restore_logging():
    """Undo setup_logging, whose handlers are bound to the test's streams."""
    loggers = [logging.getLogger(name) for name in MODULE_LOG_LEVELS]
    saved = [(logger.handlers[:], logger.level, logger.propagate) for logger in loggers]
    yield
    for logger, (handlers, level, propagate) in zip(loggers, saved):
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate
