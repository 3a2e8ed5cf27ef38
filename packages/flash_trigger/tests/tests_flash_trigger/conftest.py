import logging
from datetime import datetime, timezone

import pytest


@pytest.fixture
def utc():
    return timezone.utc


@pytest.fixture
def monday(utc):
    """Fixed 'current time': Monday, Jan 1st, 2024 at 00:00:00 UTC."""
    return datetime(2024, 1, 1, 0, 0, 0, tzinfo=utc)


@pytest.fixture
def restore_engine_logger():
    """Undo handler/propagation changes made by setup_logging."""
    engine_logger = logging.getLogger("flash_trigger")
    level = engine_logger.level
    yield engine_logger
    for handler in list(engine_logger.handlers):
        handler.close()
    engine_logger.handlers.clear()
    engine_logger.setLevel(level)
    engine_logger.propagate = True
