"""Logging configuration helpers."""

import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the engine logger once and set its level.

    ``level`` may be a number or a level name such as ``"DEBUG"``. Repeated
    calls only adjust the level.
    """
    logger = logging.getLogger("calorics")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
