"""
Logging Configuration

Structured logging for the display reader.
"""

import logging
import sys
import time
from typing import Optional, Union


PACKAGE_LOGGER = "bp_digit_reader"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure logging for the package.

    Args:
        level: Logging level or level name (default: INFO)
        log_file: Optional file path for log output
        format_string: Custom format string
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if format_string is None:
        format_string = (
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        )

    formatter = logging.Formatter(format_string)

    root_logger = logging.getLogger(PACKAGE_LOGGER)
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package logger.

    Args:
        name: Module name (usually __name__)
    """
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


class FrameLogger:
    """
    Logger for one detector frame.

    Records inference and overall timings the way the camera loop reports them.
    """

    def __init__(self, frame_id: str):
        self.frame_id = frame_id
        self.logger = logging.getLogger(f"{PACKAGE_LOGGER}.frame")
        self._started_at = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._started_at) * 1000

    def metric(self, name: str, value: float, unit: str = "") -> None:
        """Log a metric."""
        self.logger.debug(f"[{self.frame_id[:8]}] {name}: {value:.2f}{unit}")

    def result(self, summary: str) -> None:
        self.logger.debug(f"[{self.frame_id[:8]}] {summary}")
