"""Logging setup for sortpatch.

Console output goes to stderr through the root logger. An optional log file
receives the ``sortpatch`` logger tree; repeated configuration never stacks
duplicate file handlers.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from sortpatch.config import LogLevel

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
OUTPUT_LOGGER = "sortpatch.output"


def configure_logging(
    *,
    log_level: LogLevel | str = LogLevel.WARNING,
    debug_enabled: bool = False,
    log_file: Path | str | None = None,
) -> logging.Logger:
    """Configure console logging and return the package logger.

    Tool output forwarded to ``OUTPUT_LOGGER`` is shown whatever the package
    level is, as long as it is logged at INFO or above.
    """

    root_level = logging.INFO if debug_enabled else logging.WARNING
    level_value = logging.DEBUG if debug_enabled else _to_logging_level(log_level)

    logging.basicConfig(level=root_level, stream=sys.__stderr__, format=LOG_FORMAT, force=True)

    logger = logging.getLogger("sortpatch")
    logger.setLevel(level_value)
    logging.getLogger(OUTPUT_LOGGER).setLevel(min(level_value, logging.INFO))

    if log_file is not None:
        attach_file_handler(logger, Path(log_file), level_value)
    return logger


def attach_file_handler(logger: logging.Logger, path: Path, level: int) -> logging.FileHandler:
    """Attach a file handler for ``path`` unless the logger already has one."""

    resolved = path.resolve()
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == resolved:
            handler.setLevel(level)
            return handler

    resolved.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(resolved, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


def _to_logging_level(value: LogLevel | str) -> int:
    mapping = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
    }
    if isinstance(value, LogLevel):
        return mapping[value]
    if isinstance(value, str):
        try:
            return mapping[LogLevel(value.lower())]
        except ValueError:
            return logging.WARNING
    return logging.WARNING


__all__ = ["configure_logging", "attach_file_handler", "LOG_FORMAT", "OUTPUT_LOGGER", "_to_logging_level"]
