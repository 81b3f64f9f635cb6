"""File logger factory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def create_logger(
    log_file: Union[str, Path],
    channel: str = "mailgate",
    level: Union[str, int] = "DEBUG",
) -> logging.Logger:
    """Logger writing to *log_file*; the parent directory is created if needed."""
    log_dir = Path(log_file).resolve().parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(
            "log_file", f'cannot create directory "{log_dir}": {e}'
        )
    if not os.access(log_dir, os.W_OK):
        raise ConfigurationError("log_file", f'directory "{log_dir}" is not writable')

    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ConfigurationError("log_level", f"unknown level {level!r}")
        level = numeric

    logger = logging.getLogger(channel)
    logger.setLevel(level)
    target = str(Path(log_file).resolve())
    if not any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    ):
        handler = logging.FileHandler(target, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
