"""
Severity levels.

Ranks follow the platform log priorities the formatter was built around,
so a record's priority can be handed to a sink unchanged:

    ←── quieter ────────────────────────── louder ──→
    7       6      5     4     3      2
    assert  error  warn  info  debug  verbose

The gate rule is: a level is loggable when rank(level) >= rank(threshold).
"""

from enum import IntEnum
from typing import Union


class LogLevel(IntEnum):
    """Totally ordered log severity."""

    VERBOSE = 2
    DEBUG = 3
    INFO = 4
    WARN = 5
    ERROR = 6
    ASSERT = 7

    @property
    def letter(self) -> str:
        """Single-letter priority marker used by logcat-style sinks."""
        return 'A' if self is LogLevel.ASSERT else self.name[0]

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized in _ALIASES:
            normalized = _ALIASES[normalized]
        try:
            return cls[normalized]
        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}") from None


# Accept the stdlib spellings too; configs written for `logging` use them.
_ALIASES = {
    'WARNING': 'WARN',
    'CRITICAL': 'ASSERT',
    'FATAL': 'ASSERT',
    'V': 'VERBOSE', 'D': 'DEBUG', 'I': 'INFO',
    'W': 'WARN', 'E': 'ERROR', 'A': 'ASSERT',
}

LevelLike = Union[LogLevel, int, str]


def coerce_level(level: LevelLike) -> LogLevel:
    """Turn a member, an int rank or a level name into a LogLevel.

    Raises:
        ValueError: for ranks or names outside the closed level set.
    """
    if isinstance(level, LogLevel):
        return level
    if isinstance(level, str):
        return LogLevel.from_name(level)
    if isinstance(level, int) and not isinstance(level, bool):
        try:
            return LogLevel(level)
        except ValueError:
            raise ValueError(f"Unknown log level rank: {level}") from None
    raise ValueError(f"Unsupported log level value: {level!r}")


# Module-level aliases, handy for `from logex.levels import INFO`
VERBOSE = LogLevel.VERBOSE
DEBUG = LogLevel.DEBUG
INFO = LogLevel.INFO
WARN = LogLevel.WARN
ERROR = LogLevel.ERROR
ASSERT = LogLevel.ASSERT
