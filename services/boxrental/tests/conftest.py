"""
Pytest fixtures for boxrental tests.

Logging is not auto-configured under pytest, so structlog is pointed at a
logger that returns instead of printing; CLI tests parse stdout as JSON.
"""

import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def silent_structlog():
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()
