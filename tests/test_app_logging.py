"""Tests for logging configuration."""

import logging

import pytest

from calorics.app_logging import configure_logging


@pytest.fixture
def engine_logger():
    logger = logging.getLogger("calorics")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_repeated_configuration_keeps_one_handler(engine_logger) -> None:
    configure_logging()
    configure_logging()

    assert len(engine_logger.handlers) == 1
    assert engine_logger.propagate is False


def test_level_name_from_settings_is_applied(engine_logger) -> None:
    returned = configure_logging("debug")

    assert returned is engine_logger
    assert engine_logger.level == logging.DEBUG

    configure_logging(logging.WARNING)

    assert engine_logger.level == logging.WARNING
    assert len(engine_logger.handlers) == 1
