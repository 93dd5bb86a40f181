"""
Logging Configuration
Attaches console and file handlers to the ``imagefem`` logger.

Library modules only create ``logging.getLogger(__name__)`` loggers; nothing
is printed until an application calls :func:`setup_logging`.
"""
import logging
import os
import sys
from typing import Optional, Union

from imagefem.config import get_log_level
from imagefem.errors import InvalidConfiguration

PACKAGE_LOGGER_NAME = "imagefem"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'

LevelLike = Union[int, str]


def resolve_level(level: Optional[LevelLike]) -> int:
    """
    Turn a level number or name ("debug", "INFO", ...) into a level number.

    None falls back to the ``IMAGEFEM_LOG_LEVEL`` environment variable, then INFO.

    Raises:
        InvalidConfiguration: If a name is not a known logging level.
    """
    if level is None:
        return get_log_level()
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise InvalidConfiguration(f"Unknown logging level {level!r}.")
    return resolved


def setup_logging(
    level: Optional[LevelLike] = None,
    log_file: Optional[Union[str, os.PathLike]] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the handlers of the previous call; replaced
    handlers are closed, so a previous log file is released.

    Args:
        level: Logging level as a number or a name.
        log_file: Optional path to save logs to a file (overwritten).

    Returns:
        The configured package logger.
    """
    level = resolve_level(level)

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(os.fspath(log_file), mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized at level {logging.getLevelName(level)}.")
    return logger
