"""Shared logger for the calculator package."""
import logging
import os
import sys


LOGGER_NAME = "tree_calculator"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
# Environment variable overriding the default log level
LOG_LEVEL_ENV = "TREE_CALCULATOR_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"


def _build_logger() -> logging.Logger:
    """
    Create the package logger with a single stderr handler.

    An unknown level in the environment falls back to INFO with a warning.

    :return: Configured package logger
    :rtype: logging.Logger
    """
    pkg_logger = logging.getLogger(LOGGER_NAME)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        pkg_logger.addHandler(handler)

    level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LEVEL).upper()
    try:
        pkg_logger.setLevel(level)
    except ValueError:
        pkg_logger.setLevel(DEFAULT_LEVEL)
        pkg_logger.warning(f"📝 Unknown log level {level!r} in {LOG_LEVEL_ENV}, using {DEFAULT_LEVEL}")
    return pkg_logger


def set_level(level: str) -> None:
    """
    Change the package log level at runtime.

    :param str level: Level name, e.g. "DEBUG" or "WARNING"
    """
    logger.setLevel(level.upper())


logger: logging.Logger = _build_logger()
