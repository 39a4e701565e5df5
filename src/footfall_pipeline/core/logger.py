"""
Logging configuration for the footfall pipeline.

``setup_logger`` configures the application logger once at start-up;
``LoggerContext`` times a fetch or request and reports what it produced.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import TimeWindow

CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = "footfall_pipeline",
    log_file: Optional[str] = None,
    log_level: Optional[str] = None
) -> logging.Logger:
    """
    Set up the application logger.

    The console shows ``log_level`` and above. When a log file is
    configured it additionally receives everything from DEBUG up, so fetch
    plans and cache merges can be traced after the fact.

    Args:
        name: Logger name
        log_file: Path to log file. If None, uses the LOG_FILE env var or
            ``logs/footfall_pipeline.log``; an empty string disables the file
        log_level: Console level name. If None, uses LOG_LEVEL or INFO

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = os.getenv("LOG_FILE", "logs/footfall_pipeline.log")
    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger


class LoggerContext:
    """
    Time a pipeline operation over a window.

    Usage::

        with LoggerContext(logger, "fetch", window) as ctx:
            series = source.fetch(...)
            ctx.record(sum(len(s) for s in series), "samples")

    On success one DEBUG line reports the window, the elapsed time and the
    recorded result size. On failure the exception is logged with its
    traceback and re-raised.
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        window: Optional["TimeWindow"] = None
    ):
        """
        Initialize logger context.

        Args:
            logger: Logger instance
            operation: Name of the operation (e.g. 'fetch', 'series request')
            window: Window the operation covers, if any
        """
        self.logger = logger
        self.operation = operation
        self.window = window
        self.count: Optional[int] = None
        self.unit = "items"
        self._started: Optional[float] = None

    @property
    def label(self) -> str:
        return f"{self.operation} {self.window}" if self.window else self.operation

    @property
    def elapsed(self) -> float:
        """Seconds since the context was entered."""
        if self._started is None:
            return 0.0
        return time.perf_counter() - self._started

    def record(self, count: int, unit: str = "samples") -> None:
        """Remember how much the operation produced, for the completion line."""
        self.count = count
        self.unit = unit

    def __enter__(self) -> "LoggerContext":
        self._started = time.perf_counter()
        self.logger.debug(f"Starting {self.label}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.logger.error(
                f"Failed {self.label} after {self.elapsed:.2f}s: {exc_val}",
                exc_info=True
            )
            return False

        produced = f": {self.count} {self.unit}" if self.count is not None else ""
        self.logger.debug(f"Completed {self.label} in {self.elapsed:.2f}s{produced}")
        return False
