"""Module-level logging calls bound to the process-wide LogManager.

One-stop functions for application code::

    from logex import facade as log

    if log.is_loggable(log.LogLevel.DEBUG):
        log.d("loaded %d rows" % len(rows))
    log.e("sync failed", tag="sync", tr=exc)

Each call forwards to get_logger(); these frames are skipped when the
caller is located, so records point at the code calling log.d(), not here.
"""

from typing import Any, Optional

from .levels import LevelLike, LogLevel  # noqa: F401 — re-exported
from .manager import get_logger


def set_threshold(level: LevelLike) -> None:
    get_logger().set_threshold(level)


def get_threshold() -> LogLevel:
    return get_logger().get_threshold()


def is_loggable(level: LevelLike) -> bool:
    return get_logger().is_loggable(level)


def is_tag_loggable(tag: Optional[str], level: LevelLike) -> bool:
    return get_logger().is_tag_loggable(tag, level)


def set_tag_format(template: str, *args: Any) -> None:
    get_logger().set_tag_format(template, *args)


def set_message_format(template: str, *args: Any) -> None:
    get_logger().set_message_format(template, *args)


def println(level: LevelLike, tag: Optional[str], msg: Optional[str],
            tr: Optional[BaseException] = None) -> int:
    return get_logger().println(level, tag, msg, tr)


def v(msg: Optional[str] = None, *, tag: Optional[str] = None,
      tr: Optional[BaseException] = None) -> int:
    """Send a VERBOSE record."""
    return get_logger().v(msg, tag=tag, tr=tr)


def d(msg: Optional[str] = None, *, tag: Optional[str] = None,
      tr: Optional[BaseException] = None) -> int:
    """Send a DEBUG record."""
    return get_logger().d(msg, tag=tag, tr=tr)


def i(msg: Optional[str] = None, *, tag: Optional[str] = None,
      tr: Optional[BaseException] = None) -> int:
    """Send an INFO record."""
    return get_logger().i(msg, tag=tag, tr=tr)


def w(msg: Optional[str] = None, *, tag: Optional[str] = None,
      tr: Optional[BaseException] = None) -> int:
    """Send a WARN record."""
    return get_logger().w(msg, tag=tag, tr=tr)


def e(msg: Optional[str] = None, *, tag: Optional[str] = None,
      tr: Optional[BaseException] = None) -> int:
    """Send an ERROR record."""
    return get_logger().e(msg, tag=tag, tr=tr)


def wtf(msg: Optional[str] = None, *, tag: Optional[str] = None,
        tr: Optional[BaseException] = None) -> int:
    """Send an ASSERT record."""
    return get_logger().wtf(msg, tag=tag, tr=tr)
