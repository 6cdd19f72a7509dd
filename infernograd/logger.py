"""Timestamped logging to the console and an optional log file."""

from __future__ import annotations

import sys
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import ClassVar, TextIO


class LogLevel(IntEnum):
    """Severity of a log message; a higher value is more verbose."""

    ERROR = 0
    WARNING = 1
    INFO = 2
    DEBUG = 3


_LEVEL_NAMES = {
    LogLevel.INFO: "INFO",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.ERROR: "ERROR",
    LogLevel.WARNING: "WARNING",
}


class Logger:
    """Process-wide logger writing to stdout and, once started, to a file."""

    _file: ClassVar[TextIO | None] = None
    _level: ClassVar[LogLevel] = LogLevel.DEBUG

    @classmethod
    def append(cls, level: LogLevel, message: str) -> None:
        """Write a message if its level is within the current log level."""
        if cls._level < level:
            return
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{stamp} : {cls.level_name(level)}] {message}\n"
        if cls._file is not None:
            cls._file.write(line)
            cls._file.flush()
        sys.stdout.write(line)
        sys.stdout.flush()

    @classmethod
    def start(cls, filename: str | Path) -> Path:
        """Open a timestamped log file derived from ``filename`` and return its path."""
        cls.stop()
        stamp = datetime.now().strftime("%Y-%m-%d.%H%M%S")
        path = Path(f"{filename}-{stamp}.txt")
        cls._file = path.open("w", encoding="utf-8")

        cls.append(LogLevel.INFO, "*********************************")
        cls.append(LogLevel.INFO, "*        Logging Sarted         *")
        cls.append(LogLevel.INFO, "*********************************")
        cls.append(LogLevel.INFO, "")
        cls.append(LogLevel.INFO, "")
        return path

    @classmethod
    def stop(cls) -> None:
        """Close the log file, if one is open."""
        if cls._file is not None:
            cls._file.close()
            cls._file = None

    @classmethod
    def set_log_level(cls, level: LogLevel) -> None:
        """Set the most verbose level that will still be written."""
        cls._level = LogLevel(level)

    @staticmethod
    def level_name(level: object) -> str:
        """Return the display name of a log level, or ``UNKNOWN``."""
        if isinstance(level, LogLevel):
            return _LEVEL_NAMES.get(level, "UNKNOWN")
        return "UNKNOWN"