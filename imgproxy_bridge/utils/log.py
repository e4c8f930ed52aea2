"""
Per-handler log gating.

The handler receives a read-only :class:`LoggingOptions` instead of relying on
process-wide logger configuration. A message is emitted only when its severity
is at or above ``LoggingOptions.level``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

DEFAULT_LOGGER_NAME = "uvicorn.error"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class LoggingOptions:
    level: str = "error"
    logger: Optional[logging.Logger] = None

    def __post_init__(self):
        if self.level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{self.level}', expected one of {sorted(LOG_LEVELS)}"
            )

    @property
    def threshold(self) -> int:
        return LOG_LEVELS[self.level]

    def get_logger(self) -> logging.Logger:
        return self.logger or logging.getLogger(DEFAULT_LOGGER_NAME)


class HandlerLogger:
    """Thin wrapper that drops records below the configured level."""

    def __init__(self, options: Optional[LoggingOptions] = None):
        self.options = options or LoggingOptions()
        self.logger = self.options.get_logger()

    def is_enabled(self, level: int) -> bool:
        return level >= self.options.threshold

    def log(self, level: int, msg: str, **kwargs) -> None:
        if self.is_enabled(level):
            self.logger.log(level, msg, **kwargs)

    def debug(self, msg: str, **kwargs) -> None:
        self.log(logging.DEBUG, msg, **kwargs)

    def warn(self, msg: str, **kwargs) -> None:
        self.log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self.log(logging.ERROR, msg, **kwargs)
