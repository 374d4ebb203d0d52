import sys
from typing import Optional

from loguru import logger

from showroom.constants import LOG_FORMAT, LOG_LEVEL

DEFAULT_LOG_RETENTION = 10


def setup_logging(level: str = LOG_LEVEL, log_file: Optional[str] = None) -> None:
    """Reset loguru sinks: stderr at *level*, plus *log_file* when given."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            rotation="10 MB",
            retention=DEFAULT_LOG_RETENTION,
            encoding="utf-8",
        )
    logger.debug(f"Logging initialized at {level.upper()}")


class ColoredLogger:
    """Status lines for the frame loop, wrapped in ANSI colours before they reach loguru."""

    _COLORS = {
        "blue": "\033[94m",
        "yellow": "\033[93m",
        "green": "\033[92m",
        "reset": "\033[0m",
    }

    @staticmethod
    def _colored_msg(message: str, color: str) -> str:
        if color not in ColoredLogger._COLORS:
            return message
        return f"{ColoredLogger._COLORS[color]}{message}{ColoredLogger._COLORS['reset']}"

    @staticmethod
    def info(message: str, color: str = "blue") -> None:
        logger.opt(depth=1).info(ColoredLogger._colored_msg(message, color))

    @staticmethod
    def warning(message: str, color: str = "yellow") -> None:
        logger.opt(depth=1).warning(ColoredLogger._colored_msg(message, color))

    @staticmethod
    def success(message: str, color: str = "green") -> None:
        logger.opt(depth=1).success(ColoredLogger._colored_msg(message, color))
