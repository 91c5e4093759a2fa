"""
logex — caller-aware log-record formatting.

Every log call locates the code that made it, fills placeholders such as
the method name, file and line from that call site, renders a tag template
and a message template, and hands the result to a sink.

Public API:
    LogManager         — central coordinator
    init_logger        — singleton initialization
    get_logger         — access singleton
    LogLevel           — severity levels
    Placeholder        — call-site values usable in templates
    FormatTemplate     — template string plus arguments
    StreamSink         — logcat-style lines on a text stream
    LoggingSink        — bridge to the stdlib logging module
    TagFilter          — per-tag level gate
    configure_from_files — apply .logex.json / ~/.logex/config.json
"""

from logex._version import __version__, __app_name__
from logex.config import configure_from_files
from logex.errors import ConfigError, LogexError, TemplateError
from logex.formatting import FormatTemplate, apply
from logex.frames import CallerFrame, capture_stack, locate_caller
from logex.levels import LogLevel
from logex.manager import LogConfig, LogManager, get_logger, init_logger
from logex.placeholders import UNKNOWN, Literal, Placeholder, Symbol, resolve
from logex.sinks import LoggingSink, StreamSink
from logex.tags import SUPPRESS, TagFilter, parse_tag_spec

__all__ = [
    "__version__", "__app_name__",
    "LogManager", "LogConfig", "init_logger", "get_logger",
    "LogLevel", "Placeholder", "Literal", "Symbol", "UNKNOWN", "resolve",
    "FormatTemplate", "apply",
    "CallerFrame", "capture_stack", "locate_caller",
    "StreamSink", "LoggingSink",
    "TagFilter", "SUPPRESS", "parse_tag_spec",
    "configure_from_files",
    "LogexError", "TemplateError", "ConfigError",
]
