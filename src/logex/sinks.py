"""
Log sinks — where rendered records end up.

A sink takes (priority, tag, message) and returns the number of bytes it
wrote. logex never retries a write; a short or zero count is the only
signal a caller gets.
"""

import logging
import sys
import threading
from typing import Dict, Optional, Protocol, TextIO

from .frames import capture_stack, locate_caller
from .levels import LogLevel


class Sink(Protocol):
    def write(self, priority: LogLevel, tag: str, message: str) -> int:
        ...


class StreamSink:
    """Write logcat-style lines (``I/Tag: message``) to a text stream.

    The stream defaults to whatever sys.stderr is at write time, so
    redirecting stderr after the sink is built still works.
    """

    def __init__(self, file: Optional[TextIO] = None, encoding: str = 'utf-8'):
        self.file = file
        self.encoding = encoding
        self._lock = threading.Lock()

    def write(self, priority: LogLevel, tag: str, message: str) -> int:
        text = f"{LogLevel(priority).letter}/{tag}: {message}"
        stream = self.file if self.file is not None else sys.stderr
        with self._lock:
            print(text, file=stream)
        return len(text.encode(self.encoding, errors='replace')) + 1


# VERBOSE sits below logging.DEBUG; ASSERT maps onto CRITICAL.
LEVEL_MAP: Dict[LogLevel, int] = {
    LogLevel.VERBOSE: 5,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.ASSERT: logging.CRITICAL,
}


class LoggingSink:
    """Forward records to the stdlib logging tree.

    Each tag gets its own child logger under ``name`` (``logex.MyTag``),
    so handlers and levels configured for logging apply unchanged. The
    returned count is the encoded message length, or 0 when logging
    drops the record.

    The LogRecord carries the calling code's path, line and function
    (``%(pathname)s``, ``%(lineno)d``, ``%(funcName)s``), not this sink's.
    For a record sent with an exception that is the log call, as with
    ``logging.exception``; the raise site is in the message text.
    """

    def __init__(self, name: str = 'logex'):
        self.name = name
        if logging.getLevelName(LEVEL_MAP[LogLevel.VERBOSE]) != 'VERBOSE':
            logging.addLevelName(LEVEL_MAP[LogLevel.VERBOSE], 'VERBOSE')

    def logger_for(self, tag: str) -> logging.Logger:
        tag = tag.replace('.', '_') if tag else ''
        return logging.getLogger(f"{self.name}.{tag}" if tag else self.name)

    def write(self, priority: LogLevel, tag: str, message: str) -> int:
        level = LEVEL_MAP[LogLevel(priority)]
        logger = self.logger_for(tag)
        if not logger.isEnabledFor(level):
            return 0
        # First entry is write() itself
        caller = locate_caller(capture_stack()[1:], True)
        if caller is None:
            logger.log(level, message)
        else:
            logger.handle(logger.makeRecord(
                logger.name, level, caller.file_path, caller.line_number,
                message, None, None, func=caller.method_name))
        return len(message.encode('utf-8', errors='replace'))
