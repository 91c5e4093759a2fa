"""
LogManager — caller-aware record formatting and dispatch.

Every log call goes through one primitive:

    println(level, tag, msg, tr=None)
        1. stack      capture_stack() at the call, or tr's traceback
        2. caller     locate_caller() picks one frame
        3. render     tag template and message template, independently
        4. sink       sink.write(level, tag, message) -> bytes written

No gating happens on the way. Filtering is the caller's job, and it is
cheap compared to a stack walk:

    log = get_logger()
    if log.is_loggable(LogLevel.DEBUG):
        log.d("cache warmed")

Configuration (threshold + both templates) is a single frozen LogConfig
swapped under one lock. A log call reads one snapshot, so it never mixes
a template from one configuration with a threshold from another.
"""

import dataclasses
import threading
import traceback
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .formatting import (
    DEFAULT_MESSAGE_FORMAT, DEFAULT_TAG_FORMAT, FormatTemplate,
)
from .frames import (
    CallerFrame, capture_stack, locate_caller, stack_from_exception,
)
from .levels import LevelLike, LogLevel, coerce_level
from .sinks import Sink, StreamSink
from .tags import TagFilter


@dataclass(frozen=True)
class LogConfig:
    """Process-wide formatting state: threshold plus tag/message templates."""
    threshold: LogLevel = LogLevel.INFO
    tag_format: FormatTemplate = DEFAULT_TAG_FORMAT
    message_format: FormatTemplate = DEFAULT_MESSAGE_FORMAT


def _text(value: Any) -> str:
    return '' if value is None else str(value)


def format_exception_text(tr: BaseException) -> str:
    """Full traceback text for an exception, without the trailing newline."""
    return ''.join(traceback.format_exception(tr)).rstrip('\n')


class LogManager:
    """Central coordinator for caller-aware log records.

    Usage::

        log = LogManager(sink=StreamSink(sys.stdout))
        log.set_tag_format("%s.%s", Placeholder.SIMPLE_CLASS_NAME,
                           Placeholder.METHOD_NAME)
        log.i("started")                       # I/Worker.run: run(worker.py:12) started
        log.e("lookup failed", tag="db", tr=exc)
    """

    def __init__(
        self,
        sink: Optional[Sink] = None,
        tag_filter: Optional[TagFilter] = None,
        config: Optional[LogConfig] = None,
    ):
        self.sink = sink if sink is not None else StreamSink()
        self.tag_filter = tag_filter if tag_filter is not None else TagFilter()
        self._config = config if config is not None else LogConfig()
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def config(self) -> LogConfig:
        """The current configuration snapshot."""
        with self._lock:
            return self._config

    def configure(self, config: LogConfig) -> None:
        """Replace threshold and both templates in one step."""
        with self._lock:
            self._config = config

    def _update(self, **changes: Any) -> None:
        with self._lock:
            self._config = dataclasses.replace(self._config, **changes)

    def reset(self) -> None:
        """Restore the default threshold and templates."""
        self.configure(LogConfig())

    def set_threshold(self, level: LevelLike) -> None:
        self._update(threshold=coerce_level(level))

    def get_threshold(self) -> LogLevel:
        return self.config.threshold

    def set_tag_format(self, template: str, *args: Any) -> None:
        """Set the template used to build tags for future log calls.

        Args:
            template: printf-style format string
            *args: Values for the template. Placeholder members are
                resolved per call; other values are used as-is. Extra
                values are ignored.
        """
        self._update(tag_format=FormatTemplate.of(template, *args))

    def set_message_format(self, template: str, *args: Any) -> None:
        """Set the template used to build messages for future log calls.

        Same argument rules as set_tag_format().
        """
        self._update(message_format=FormatTemplate.of(template, *args))

    # -------------------------------------------------------------------------
    # Gates (advisory, never applied by dispatch)
    # -------------------------------------------------------------------------

    def is_loggable(self, level: LevelLike) -> bool:
        """True when ``level`` is at or above the global threshold.

        Not to be confused with is_tag_loggable(), which asks the tag
        filter and ignores the global threshold.
        """
        return coerce_level(level) >= self.config.threshold

    def is_tag_loggable(self, tag: Optional[str], level: LevelLike) -> bool:
        """Ask the tag filter whether ``tag`` is loggable at ``level``."""
        return self.tag_filter.is_loggable(tag, level)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, level: LevelLike, tag: Optional[str],
                 message: Optional[str], stack: Sequence[CallerFrame],
                 synthesized: bool) -> int:
        """Render a record against ``stack`` and hand it to the sink.

        When no caller frame can be located, tag and message go to the
        sink unformatted.

        Returns:
            Bytes written, as reported by the sink

        Raises:
            TemplateError: a template needs more values than it was given
        """
        priority = coerce_level(level)
        tag, message = _text(tag), _text(message)
        frame = locate_caller(stack, synthesized)
        if frame is not None:
            config = self.config
            tag = config.tag_format.render(frame, tag)
            message = config.message_format.render(frame, message)
        return self.sink.write(priority, tag, message)

    def println(self, level: LevelLike, tag: Optional[str],
                msg: Optional[str], tr: Optional[BaseException] = None) -> int:
        """Low-level log call; the level methods all end up here.

        Without ``tr`` the caller is found from the current stack. With
        ``tr`` the caller is the frame that raised it, and the traceback
        text is appended to the message.
        """
        if tr is None:
            return self.dispatch(level, tag, msg, capture_stack(), True)
        msg = f"{_text(msg)}\n{format_exception_text(tr)}"
        return self.dispatch(level, tag, msg, stack_from_exception(tr), False)

    def v(self, msg: Optional[str] = None, *, tag: Optional[str] = None,
          tr: Optional[BaseException] = None) -> int:
        """Send a VERBOSE record."""
        return self.println(LogLevel.VERBOSE, tag, msg, tr)

    def d(self, msg: Optional[str] = None, *, tag: Optional[str] = None,
          tr: Optional[BaseException] = None) -> int:
        """Send a DEBUG record."""
        return self.println(LogLevel.DEBUG, tag, msg, tr)

    def i(self, msg: Optional[str] = None, *, tag: Optional[str] = None,
          tr: Optional[BaseException] = None) -> int:
        """Send an INFO record."""
        return self.println(LogLevel.INFO, tag, msg, tr)

    def w(self, msg: Optional[str] = None, *, tag: Optional[str] = None,
          tr: Optional[BaseException] = None) -> int:
        """Send a WARN record."""
        return self.println(LogLevel.WARN, tag, msg, tr)

    def e(self, msg: Optional[str] = None, *, tag: Optional[str] = None,
          tr: Optional[BaseException] = None) -> int:
        """Send an ERROR record."""
        return self.println(LogLevel.ERROR, tag, msg, tr)

    def wtf(self, msg: Optional[str] = None, *, tag: Optional[str] = None,
            tr: Optional[BaseException] = None) -> int:
        """Send an ASSERT record (a condition that should never happen)."""
        return self.println(LogLevel.ASSERT, tag, msg, tr)


# =============================================================================
# Module-level singleton
# =============================================================================

_manager: Optional[LogManager] = None


def init_logger(threshold: LevelLike = LogLevel.INFO,
                sink: Optional[Sink] = None,
                tags: Optional[list] = None) -> LogManager:
    """Initialize the module-level LogManager singleton.

    Call once at program startup, after reading CLI arguments or config.

    Args:
        threshold: Global level threshold
        sink: Where records go (default: StreamSink on stderr)
        tags: Tag spec strings for the tag filter (e.g., ['Net:DEBUG'])

    Returns:
        The initialized LogManager instance
    """
    global _manager

    tag_filter = TagFilter()
    if tags:
        tag_filter.apply_specs(tags)

    _manager = LogManager(
        sink=sink,
        tag_filter=tag_filter,
        config=LogConfig(threshold=coerce_level(threshold)),
    )
    return _manager


def get_logger() -> LogManager:
    """Get the module-level LogManager, creating a default if needed."""
    global _manager
    if _manager is None:
        _manager = LogManager()
    return _manager
