"""Diagnostics logging for the chatline command line.

stdout carries rendered lines only, so every log record goes to stderr.
A copy is appended to a file when one is asked for.

// [LAW:single-enforcer] Handlers on the "chatline" logger are installed here only.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

LEVEL_ENV = "CHATLINE_LOG_LEVEL"
FILE_ENV = "CHATLINE_LOG_FILE"

DEFAULT_LEVEL = logging.WARNING

# Skipped events are reported per input line; "chatline: WARNING line 3: ..."
STDERR_FORMAT = "chatline: %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@dataclass(frozen=True)
class LoggingRuntime:
    """What configure() installed."""

    level: int
    file_path: str | None


def parse_level(raw: str | None) -> int:
    """Map a level name ("debug", "INFO", ...) to its number.

    Unknown or empty names give DEFAULT_LEVEL.
    """
    if not raw:
        return DEFAULT_LEVEL
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else DEFAULT_LEVEL


def configure(
    level: str | None = None,
    log_file: str | None = None,
    stream: TextIO | None = None,
) -> LoggingRuntime:
    """Route chatline logs to stderr (and optionally a file).

    Arguments win over CHATLINE_LOG_LEVEL / CHATLINE_LOG_FILE. Calling again
    replaces the handlers from the previous call.
    """
    resolved_level = parse_level(level or os.environ.get(LEVEL_ENV))
    file_path = log_file or os.environ.get(FILE_ENV) or None

    logger = logging.getLogger("chatline")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(resolved_level)
    logger.propagate = False

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setFormatter(logging.Formatter(STDERR_FORMAT))
    logger.addHandler(console)

    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
        )
        logger.addHandler(file_handler)

    return LoggingRuntime(level=resolved_level, file_path=file_path)
