"""
Logging setup for the ``census`` package.

Every module asks for its logger through :func:`get_logger`; the first call
attaches one stdout handler to the ``census`` logger, whose level comes
from the ``LOG_LEVEL`` setting (INFO by default).

Usage:
    from census.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Reading workbook: %s", filename)
    logger.debug("Header row resolved to %d", idx)
"""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PROJECT_LOGGER = "census"

_configured = False


def _level_from_settings() -> int:
    from census.config import get_settings

    name = (get_settings().LOG_LEVEL or "").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _configure_project_logger() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    project = logging.getLogger(PROJECT_LOGGER)
    project.setLevel(_level_from_settings())
    project.addHandler(handler)
    project.propagate = False

    _configured = True


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Logger for *name*, normally the calling module's ``__name__``.

    Names outside the ``census`` hierarchy (``app.api``, ``__main__``) are
    placed under it so they share the project handler.
    """
    _configure_project_logger()

    if name != PROJECT_LOGGER and not name.startswith(PROJECT_LOGGER + "."):
        name = f"{PROJECT_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_level(level: Union[int, str], logger_name: Optional[str] = None) -> None:
    """
    Change the level of the whole project, or of one logger.

    Example:
        set_level("DEBUG")                             # every census module
        set_level(logging.DEBUG, "census.extractors")  # extractors only
    """
    if isinstance(level, str):
        level = level.strip().upper()
    logging.getLogger(logger_name or PROJECT_LOGGER).setLevel(level)
