"""
Logging utilities for consistent logging setup across the application.
"""

import logging

from hotcert.common.config import Config


class NullSink:
    """Log sink that drops every message."""

    def debug(self, msg: str, *args: object) -> None:
        pass

    def info(self, msg: str, *args: object) -> None:
        pass

    def warning(self, msg: str, *args: object) -> None:
        pass

    def error(self, msg: str, *args: object) -> None:
        pass


def setup_logger(logger: logging.Logger, log_level: int) -> None:
    """
    Set up a logger with a StreamHandler and standard formatter.

    Args:
        logger: The logger instance to configure
        log_level: The logging level to set
    """
    logger.setLevel(log_level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setLevel(log_level)
        formatter = logging.Formatter(Config().LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
