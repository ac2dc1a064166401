"""
Logging configuration for the charity box server.

Every module logs through ``logging.getLogger(__name__)``; this sets up the
shared ``charitybox`` parent logger once.
"""

import logging
import sys


def setup_logging(name: str = "charitybox", level: str = "INFO") -> logging.Logger:
    """
    Set up the application logger.

    Args:
        name: Logger name
        level: Level name such as "DEBUG" or "INFO" (unknown names fall back to INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging._nameToLevel.get(level.upper(), logging.INFO))

    if logger.handlers:
        return logger

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger
