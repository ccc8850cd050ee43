"""Package logger for DinitzViz.

Every module logs through a child of the ``dinitzviz`` logger. The parent
carries the only handler, so one call to ``set_global_log_level`` controls
the engine, the simulator and the CLI together. Records still propagate to
the root logger, which is where pytest's ``caplog`` picks them up.
"""

import logging
import sys

ROOT_LOGGER_NAME = "dinitzviz"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False


def _configure_package_logger() -> logging.Logger:
    global _configured

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _configured:
        return package_logger

    package_logger.handlers.clear()
    package_logger.setLevel(logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = True

    _configured = True
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, a module path under ``dinitzviz``.

    The logger has no level or handler of its own and follows the package
    logger.
    """
    _configure_package_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the package logger and of its handler."""
    package_logger = _configure_package_logger()
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)


def reset_logging() -> None:
    """Drop the package handler and level; the next ``get_logger`` reinstalls them."""
    global _configured
    _configured = False

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


_configure_package_logger()
