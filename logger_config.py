"""
Logging configuration shared by the AWS, HTTP and XML utilities.

Every module obtains its logger through ``get_logger`` so output format and
level stay consistent whether the code runs in Lambda, a container or a test.
"""
import logging
import os
import sys
from typing import Set, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_configured: Set[str] = set()


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a configured logger instance.

    The level comes from LOG_LEVEL (INFO when unset) until
    ``set_log_level`` is called.

    Args:
        name: Logger name (defaults to this module's name if not provided)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or __name__)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    level_name = os.environ.get('LOG_LEVEL', 'INFO').upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False
    _configured.add(logger.name)

    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Apply ``level`` to every logger handed out by ``get_logger``."""
    for name in _configured:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
