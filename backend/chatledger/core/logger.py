"""
Logging setup shared by the whole application.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_root(level: int) -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a named logger, configuring the root handler on first use.

    Args:
        name: Logger name (usually __name__)
        level: Level applied when the root logger is not configured yet

    Returns:
        Logger instance
    """
    _configure_root(level)
    return logging.getLogger(name)


logger = setup_logger("chatledger")
