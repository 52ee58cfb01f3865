import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_format: Optional[str] = None) -> logging.Logger:
    """
    Configure console logging for the service.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string

    Returns:
        The package logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(log_format or DEFAULT_FORMAT))

    logger = logging.getLogger("tabclean")
    logger.setLevel(level)
    # replace handlers so repeated setup does not duplicate output
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
