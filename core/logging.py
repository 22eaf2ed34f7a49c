"""
Logging

One stdout handler, configured at import time from LOG_LEVEL. Modules log
through children of the "rsimonitor" logger:

    from core.logging import get_logger

    logger = get_logger(__name__)
    logger.warning("Skipping XYZUSDT: only 9 closing prices")

Levels used here:
    DEBUG    - outbound Binance calls and their timings
    INFO     - request start/finish, per-request counts
    WARNING  - symbols skipped during aggregation
    ERROR    - upstream or internal failures that fail a request
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "rsimonitor"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Install the stdout handler and return the application logger.

    Unknown level names fall back to INFO.
    """
    logging.basicConfig(
        level=_level(log_level),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True
    )
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(_level(log_level))
    return app_logger


try:
    from core.config import settings
    logger = setup_logging(settings.log_level)
except ImportError:
    logger = setup_logging()


def get_logger(name: str) -> logging.Logger:
    """Child of the application logger, e.g. "rsimonitor.services.rsi_monitor"."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def set_log_level(level: str) -> None:
    """Switch the application logger and the root handler level at runtime."""
    logger.setLevel(_level(level))
    logging.getLogger().setLevel(_level(level))


def log_api_request(exchange: str, endpoint: str, params: Optional[dict] = None) -> None:
    if params:
        logger.debug(f"{exchange} -> {endpoint} {params}")
    else:
        logger.debug(f"{exchange} -> {endpoint}")


def log_api_response(
    exchange: str,
    endpoint: str,
    status: int,
    response_time: Optional[float] = None
) -> None:
    if response_time is None:
        logger.debug(f"{exchange} <- {endpoint} status={status}")
    else:
        logger.debug(f"{exchange} <- {endpoint} status={status} in {response_time:.3f}s")
