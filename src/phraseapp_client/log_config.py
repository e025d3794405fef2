# phraseapp_client/log_config.py
"""Loguru setup for phraseapp_client.

Importing the package never touches handlers. Engine components take an
optional loguru logger (for example ``logger.bind(request_id="...")``) and
fall back to the shared ``logger`` exported here, so one traversal can be
followed in isolation.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: str = "INFO", sink=sys.stderr) -> int:
    """Route all log output to a single handler.

    Every existing handler (loguru's default one included) is removed first.
    Colors are only used for the terminal. Retries log at WARNING and request
    tracing at DEBUG, so "DEBUG" shows every page fetched.

    Args:
        level: Minimum level name, case-insensitive.
        sink: Anything loguru accepts as a sink: a stream, a path, a callable.

    Returns:
        int: The handler id, for a later ``logger.remove(handler_id)``.
    """
    level = level.upper()
    logger.remove()
    handler_id = logger.add(
        sink,
        level=level,
        format=LOG_FORMAT,
        colorize=sink is sys.stderr,
        backtrace=True,
        diagnose=False,
    )
    logger.info(f"phraseapp_client logging at {level} to {sink}")
    return handler_id
