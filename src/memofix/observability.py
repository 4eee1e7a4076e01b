"""Logging setup for memofix.

Library modules only create module-level loggers; nothing is printed until
an application calls ``configure_logging``.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from typing import IO


class HumanReadableFormatter(logging.Formatter):
    """Single-line, optionally colored, console formatter."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and self._supports_color()

    @staticmethod
    def _supports_color() -> bool:
        if os.environ.get("NO_COLOR"):
            return False
        return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        level = record.levelname
        if self.use_colors:
            level = f"{self.COLORS.get(level, '')}{level}{self.RESET}"

        message = f"{timestamp} {level:<8} {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def configure_logging(
    level: int | str = logging.WARNING,
    stream: IO[str] | None = None,
    use_colors: bool = True,
) -> logging.Logger:
    """Configure the ``memofix`` logger hierarchy.

    Args:
        level: Minimum log level, as a number or a name such as "DEBUG".
        stream: Output stream, stderr by default.
        use_colors: Color level names when the stream is a terminal.

    Returns:
        The configured ``memofix`` logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger("memofix")
    root_logger.handlers.clear()
    root_logger.propagate = False

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(HumanReadableFormatter(use_colors=use_colors))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return root_logger
