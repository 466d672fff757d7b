#!/usr/bin/env python3
"""Xiaomi GW3 - a decoder for the Xiaomi Gateway 3 local message bus.

This module wraps logger to provide the message log, and coloured console output.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import sys
from datetime import datetime as dt
from logging.handlers import (
    RotatingFileHandler,
    TimedRotatingFileHandler as _TimedRotatingFileHandler,
)
from typing import Any

import colorlog

from .version import VERSION

DEV_MODE = False

_LOGGER = logging.getLogger(__name__)
if DEV_MODE:
    _LOGGER.setLevel(logging.DEBUG)


DEFAULT_FMT = "%(asctime)s.%(msecs)03d %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"

CONSOLE_COLS = int(shutil.get_terminal_size(fallback=(int(2e3), 24)).columns - 1)

# HH:MM:SS.sss, a shorter format for the console
CONSOLE_FMT = f"%(asctime)s %(topic)s%(message).{CONSOLE_COLS - 13}s"
MSG_LOG_FMT = "%(asctime)s %(topic)s%(message)s"

BANDW_SUFFIX = "%(comment)s"
COLOR_SUFFIX = "%(cyan)s%(comment)s"

LOG_COLOURS = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red",
}  # default_log_colors


class _Formatter:  # format asctime with configurable precision
    """Formatter instances convert a LogRecord to text."""

    converter = None
    default_time_format = "%Y-%m-%dT%H:%M:%S.%f"
    precision = 3

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Return the creation time (asctime) of the LogRecord as formatted text.

        Allows for sub-second precision, using datetime instead of time objects.
        """
        result = dt.fromtimestamp(record.created).strftime(
            datefmt or self.default_time_format
        )
        if "f" not in self.default_time_format:
            return result
        precision = self.precision or -1
        return result[: precision - 6] if -1 <= precision < 6 else result

    def format(self, record: logging.LogRecord) -> str:
        # the message log's extras are optional, so other records can use it too
        topic = getattr(record, "topic", "")
        comment = getattr(record, "comment", "")

        record.topic = f"{topic} " if topic and not topic.endswith(" ") else topic
        if comment and not comment.startswith(" # "):
            comment = f" # {comment}"
        record.comment = comment
        return super().format(record)  # type: ignore[misc, no-any-return]


class ColoredFormatter(_Formatter, colorlog.ColoredFormatter):  # type: ignore[misc]
    pass


class Formatter(_Formatter, logging.Formatter):  # type: ignore[misc]
    pass


class _LevelFilter(logging.Filter):
    """Process only the records with: min_level <= level < max_level."""

    def __init__(self, min_level: int = logging.NOTSET, max_level: int = 99) -> None:
        super().__init__()
        self._levels = range(min_level, max_level)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno in self._levels


# the message log file has only INFO (valid messages) & WARNING (invalid messages)
MSG_LOG_FILTER = _LevelFilter(logging.INFO, logging.ERROR)
STDERR_FILTER = _LevelFilter(min_level=logging.WARNING)
STDOUT_FILTER = _LevelFilter(max_level=logging.WARNING)


class TimedRotatingFileHandler(_TimedRotatingFileHandler):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        assert self.when == "MIDNIGHT"
        self.extMatch = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)

    def getFilesToDelete(self) -> list[str]:
        """Determine the files to delete when rolling over (only dated backups)."""

        dirName, baseName = os.path.split(self.baseFilename)
        prefix = baseName + "."
        result = [
            os.path.join(dirName, f)
            for f in os.listdir(dirName)
            if f.startswith(prefix) and self.extMatch.match(f[len(prefix) :])
        ]
        if len(result) < self.backupCount:
            return []
        result.sort()
        return result[: len(result) - self.backupCount]


def _file_handler(
    file_name: str, rotate_backups: int = 0, rotate_bytes: int | None = None
) -> logging.Handler:
    """Return a handler for the message log file (rotated by size, or daily)."""

    handler: logging.Handler
    if rotate_bytes:
        handler = RotatingFileHandler(
            file_name, maxBytes=rotate_bytes, backupCount=rotate_backups or 2
        )
    elif rotate_backups:
        handler = TimedRotatingFileHandler(
            file_name, when="MIDNIGHT", backupCount=rotate_backups
        )
    else:
        handler = logging.FileHandler(file_name)

    handler.setFormatter(Formatter(fmt=MSG_LOG_FMT + BANDW_SUFFIX))
    handler.setLevel(logging.INFO)
    handler.addFilter(MSG_LOG_FILTER)
    return handler


def _console_handlers() -> list[logging.Handler]:
    """Return the (coloured) console handlers: stderr for warnings, else stdout."""

    formatter = ColoredFormatter(
        fmt=f"%(log_color)s{CONSOLE_FMT + COLOR_SUFFIX}",
        datefmt=DEFAULT_DATEFMT,
        reset=True,
        log_colors=LOG_COLOURS,
    )

    result: list[logging.Handler] = []
    for stream, level, filter_ in (
        (sys.stderr, logging.WARNING, STDERR_FILTER),
        (sys.stdout, logging.DEBUG, STDOUT_FILTER),
    ):
        handler = logging.StreamHandler(stream=stream)
        handler.setFormatter(formatter)
        handler.setLevel(level)
        handler.addFilter(filter_)
        result.append(handler)
    return result


def set_msg_logging(
    logger: logging.Logger,
    cc_console: bool = False,
    file_name: str | None = None,
    rotate_backups: int = 0,
    rotate_bytes: int | None = None,
) -> None:
    """Create/configure handlers, formatters, etc. for the message log.

    Parameters:
    - rotate_backups: keep this many copies, and rotate at midnight unless:
    - rotate_bytes:   rotate log files when log > rotate_bytes
    """

    logger.propagate = False  # log file is distinct from any app/debug logging

    # may be called several times, so remove any existing handlers (else duplicates)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if not file_name and not cc_console:
        logger.setLevel(logging.CRITICAL)
        return

    logger.setLevel(logging.DEBUG)

    if file_name:
        logger.addHandler(_file_handler(file_name, rotate_backups, rotate_bytes))
    if cc_console:
        for handler in _console_handlers():
            logger.addHandler(handler)

    logger.warning("", extra={"comment": f"xgw3_tx {VERSION}"})  # initial log line
