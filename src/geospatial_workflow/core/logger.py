"""
Logging setup for the geospatial workflow.

The ``logging`` section of the configuration picks the level, the log file and
whether to echo to the console. Stage timings come from LoggerContext.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_log_level(log_level: str) -> int:
    """
    Resolve a level name such as "debug" or "WARNING" to its number.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def setup_logger(
    name: str = "geospatial_workflow",
    log_file: Optional[str] = None,
    log_level: str = "INFO",
    console: bool = True
) -> logging.Logger:
    """
    Configure the workflow logger.

    The logger and both handlers use ``log_level``; the file handler adds
    source locations to each line. Calling this again replaces the handlers.

    Args:
        name: Logger name
        log_file: Path of the log file, None to log to the console only
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Echo records to stderr

    Returns:
        Configured logger instance

    Raises:
        ValueError: If log_level is not a standard level name
    """
    level = parse_log_level(log_level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = []
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
        handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    # Without handlers the records still reach the root logger
    logger.propagate = not handlers

    return logger


class LoggerContext:
    """
    Log the start, outcome and duration of one workflow stage.

    A stage may attach a short summary (``context.summary = "6 records"``)
    that is appended to its completion line.
    """

    def __init__(self, logger: logging.Logger, operation: str):
        """
        Initialize logger context.

        Args:
            logger: Logger instance
            operation: Name of the stage being logged
        """
        self.logger = logger
        self.operation = operation
        self.summary: Optional[str] = None
        self.duration: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self._started

        if exc_type is not None:
            self.logger.error(
                f"Failed {self.operation} after {self.duration:.2f}s: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
            return False

        detail = f" ({self.summary})" if self.summary else ""
        self.logger.info(f"Completed {self.operation} in {self.duration:.2f}s{detail}")
        return False
