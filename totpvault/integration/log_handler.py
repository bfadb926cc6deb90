"""
Logging setup for applications embedding totpvault.

The library itself only creates module loggers; attaching handlers is left
to the application, which can call configure_logging() for a sensible
stdout default.
"""

import logging
import sys


LOG_FORMAT = (
    "[%(asctime)s] [%(levelname)s] %(name)s "
    "%(message)s  (in %(filename)s:%(lineno)d)"
)


def configure_logging(level: int = logging.INFO,
                      name: str = "totpvault") -> logging.Logger:
    """
    Attach a stdout handler to the package logger.

    Calling it more than once does not add duplicate handlers; later calls
    only update the level.

    Args:
        level: Logging level for the package logger
        name: Logger to configure (defaults to the package root logger)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent creation of handlers more than once
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    return logger
