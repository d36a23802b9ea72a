"""Structured logger on top of the standard logging module.

Usage:
    logger = get_logger("attempt")
    logger.info("Quiz submitted", quiz_id=quiz.id, score=87)
"""

import logging
from typing import Any

ROOT_LOGGER = "classroom"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class StructuredLogger(logging.LoggerAdapter):
    """LoggerAdapter that renders keyword context as ``key=value`` pairs."""

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        std_kwargs = {
            key: kwargs.pop(key)
            for key in ("exc_info", "stack_info", "stacklevel", "extra")
            if key in kwargs
        }
        if kwargs:
            context = " ".join(f"{key}={value}" for key, value in kwargs.items())
            msg = f"{msg} | {context}"
        self.logger.log(level, msg, *args, **std_kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str) -> StructuredLogger:
    """Get a logger namespaced under ``classroom``."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return StructuredLogger(logging.getLogger(name), {})


def configure_logging(level: str = "INFO") -> None:
    """Install the console handler once and set the level."""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
