"""
Logging setup for the utilities package.

Every module logs through ``logging.getLogger(__name__)``, so all records end
up under the ``src`` logger. configure_logging() attaches one console
handler there at the configured level. Applications that already configure
logging themselves can skip it; records then propagate to their handlers.
"""

import logging
import sys

from src.config.settings import get_settings

PACKAGE_LOGGER_NAME = "src"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings=None, stream=None) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    If the package logger already has handlers it is returned as-is, so
    calling this more than once does not duplicate output.

    Args:
        settings: UtilitySettings providing ``log_level`` (global settings if None).
        stream: Output stream for the handler (stderr if None).

    Returns:
        The package logger.
    """
    if settings is None:
        settings = get_settings()

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if package_logger.handlers:
        return package_logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(settings.log_level_number)
    return package_logger
