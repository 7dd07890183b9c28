"""
Logging for the storm monitoring system.

One application logger named 'stormwatch' owns the handlers. Components log
through children of it ('stormwatch.aggregator', 'stormwatch.sources.nhc_rss',
...) so every line names the part of the pipeline it came from.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional

APP_LOGGER_NAME = "stormwatch"
DEFAULT_LOG_FILE = "logs/stormwatch.log"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(threadName)s %(filename)s:%(lineno)d %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = APP_LOGGER_NAME,
    log_file: Optional[str] = None,
    log_level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the application logger.

    Console output is INFO and above. The file, when enabled, receives
    everything down to DEBUG including the emitting thread, which matters for
    the monitor and request queue workers.

    Args:
        name: Logger name
        log_file: Log file path. None reads LOG_FILE (default logs/stormwatch.log);
                  an empty string disables the file
        log_level: Level name. None reads LOG_LEVEL (default INFO)

    Returns:
        Configured logger
    """
    if log_file is None:
        log_file = os.getenv("LOG_FILE", DEFAULT_LOG_FILE)
    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    logger.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def component_logger(component: str, parent: Optional[logging.Logger] = None) -> logging.Logger:
    """
    Logger for one pipeline component.

    Records propagate to the parent, so they reach its handlers.

    Args:
        component: Dotted component name, e.g. 'sources.nws'
        parent: Application logger; defaults to the 'stormwatch' logger

    Returns:
        Child logger
    """
    base = parent if parent is not None else logging.getLogger(APP_LOGGER_NAME)
    return base.getChild(component)


class LoggerContext:
    """Log the duration of an operation, and its failure with a traceback."""

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.started: Optional[float] = None

    def __enter__(self):
        self.started = time.monotonic()
        self.logger.debug(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.monotonic() - self.started
        if exc_type is not None:
            self.logger.error(f"{self.operation} failed after {elapsed:.2f}s: {exc_val}", exc_info=True)
            return False
        self.logger.debug(f"{self.operation} finished in {elapsed:.2f}s")
        return True
