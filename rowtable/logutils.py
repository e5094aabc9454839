from __future__ import annotations

import logging
import os
import sys
from functools import wraps
from typing import Any, Callable, TypeVar

from loguru import logger

from rowtable.config import get as cfg_get


def _format_result(result: Any, max_length: int = 200) -> str:
    """Return a string representation of ``result`` truncated if necessary."""
    text = str(result)
    if len(text) > max_length:
        return f"{text[:max_length]}... [truncated {len(text)} chars]"
    return text


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    default_level: int = logging.INFO,
    *,
    stdout: bool = False,
) -> None:
    """Configure loguru logging based on configuration and environment."""

    debug_env = os.getenv("ROWTABLE_DEBUG", "0")
    is_debug = debug_env not in {"0", "", "false", "False"}

    level_name = os.getenv("ROWTABLE_LOG_LEVEL", cfg_get("LOG_LEVEL", "INFO")).upper()
    if is_debug:
        level_name = "DEBUG"

    level = getattr(logging, level_name, default_level)
    stream = sys.stdout if stdout else sys.stderr

    logger.remove()
    logger.add(
        stream,
        level=level,
        format="{level} - {time:HH:mm:ss}: {message}",
    )
    logging.basicConfig(handlers=[InterceptHandler()], level=level, force=True)

    logger.debug(
        f"Logging setup: ROWTABLE_DEBUG={debug_env}, "
        f"ROWTABLE_LOG_LEVEL={logging.getLevelName(level)}"
    )


T = TypeVar("T")


def log_result(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator that logs function calls and their return value."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        logger.debug(f"calling {func.__name__}")
        result = func(*args, **kwargs)
        logger.debug(f"{func.__name__} -> {_format_result(result)}")
        return result

    return wrapper


__all__ = ["InterceptHandler", "log_result", "logger", "setup_logging"]
