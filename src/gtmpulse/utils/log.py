"""
Logging setup shared by the whole package.

Every module asks for its own logger:

    from gtmpulse.utils.log import get_logger
    logger = get_logger(__name__)

Only the entry point calls ``configure_logging``; library code never touches
handlers.
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL".
            Unknown names fall back to INFO.
    """
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logging.getLogger(__name__).info("Logging initialized with level %s", level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
