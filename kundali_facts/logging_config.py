import logging
from typing import Optional

from kundali_facts.config import settings

PACKAGE_LOGGER = "kundali_facts"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Safe to call more than once: an existing handler is reused and only
    the level is updated. The root logger is never touched.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_kundali_facts", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._kundali_facts = True
        logger.addHandler(handler)

    return logger
