"""Logging setup shared by the ci-dokumentor CLI and service mode."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

_LOGGER_NAME = "ci_dokumentor"
_CONSOLE_FORMAT = "[ci-dokumentor] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``ci_dokumentor.<name>``, or the package logger itself."""
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route package records to stderr and, when given, to ``log_file``.

    Debug records are only emitted with ``verbose``. Calling this again
    replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    _close_handlers(logger)

    handlers: List[logging.Handler] = [_handler(logging.StreamHandler(), level, _CONSOLE_FORMAT)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_handler(logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT))
    for handler in handlers:
        logger.addHandler(handler)
    return logger


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "get_logger"]
