"""
Logging Configuration
Sets up the package logger for the command line front end.
"""
import logging
import sys

from .config import LOG_LEVEL


def setup_logging(level=None, log_file=None):
    """
    Configures the logger for the 'graphyy' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG). Defaults to GRAPHYY_LOG_LEVEL.
        log_file: Optional path to also write logs to.
    """
    if level is None:
        level = logging.getLevelName(LOG_LEVEL)
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("graphyy")
    logger.setLevel(level)

    # Avoid duplicate handlers when called twice in one process
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
