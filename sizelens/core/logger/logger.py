"""Logging for the sizelens package.

Handlers are attached to the ``sizelens`` logger, not the root logger, so
an application embedding the parser keeps its own logging setup.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from sizelens.core.config.settings import LoggingSettings, get_settings

PACKAGE_LOGGER = "sizelens"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_loggers: dict[str, logging.Logger] = {}


def setup_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """Configure the package logger.

    Calling it again replaces (and closes) the handlers of the earlier call.

    Args:
        settings: Logging settings. Uses global settings if not provided.

    Returns:
        The ``sizelens`` logger.
    """
    if settings is None:
        settings = get_settings().logging

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(settings.level)
    for old in package_logger.handlers[:]:
        package_logger.removeHandler(old)
        old.close()

    handler: logging.Handler
    if settings.use_rich:
        # Messages quote build script text; brackets in it are not markup
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings.format))
    package_logger.addHandler(handler)

    if settings.file:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the ``sizelens`` hierarchy.

    Names outside the package (``__main__``, a test module) are nested under
    it so that they share its handlers.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    if name not in _loggers:
        qualified = name
        if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
            qualified = f"{PACKAGE_LOGGER}.{name}"
        _loggers[name] = logging.getLogger(qualified)

        if not logging.getLogger(PACKAGE_LOGGER).handlers:
            setup_logging()

    return _loggers[name]
