"""
Per-tag log filter.

The tag filter is a gate independent of the global threshold: each tag
has its own minimum level, INFO unless configured otherwise. logex only
queries it (LogManager.is_tag_loggable); nothing in the dispatch path
consults it.

Tag levels come from, highest priority first:
    1. explicit overrides (config files, ``--show TAG:LEVEL``)
    2. the environment: ``LOG_TAG_<TAG>=<LEVEL>``
    3. the default level (INFO)

SUPPRESS silences a tag entirely.

Tag spec syntax (compact):
    MyTag               # everything for MyTag (VERBOSE)
    MyTag:DEBUG         # DEBUG and above
    MyTag:SUPPRESS      # nothing
    svc:db              # a tag with a colon (VERBOSE)
    svc:db:ERROR        # ERROR and above for svc:db
"""

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .errors import ConfigError
from .levels import LevelLike, LogLevel, coerce_level


# Above every real level, so nothing passes.
SUPPRESS = max(LogLevel) + 1

ENV_PREFIX = 'LOG_TAG_'


@dataclass
class TagConfig:
    """Minimum level for a single tag."""
    tag: str
    level: int = LogLevel.VERBOSE


def parse_tag_level(text) -> int:
    """Parse a level name, a numeric rank or SUPPRESS."""
    if text == SUPPRESS and not isinstance(text, str):
        return SUPPRESS
    if isinstance(text, str):
        text = text.strip()
        if text.upper() == 'SUPPRESS':
            return SUPPRESS
        if text.lstrip('-').isdigit():
            text = int(text)
    try:
        return coerce_level(text)
    except ValueError as e:
        raise ConfigError(str(e)) from None


def parse_tag_spec(spec: str) -> TagConfig:
    """Parse a ``TAG[:LEVEL]`` spec into a TagConfig.

    The level is split off at the last colon, and only when the text after
    it is a level. Otherwise the whole spec is the tag, so tags may contain
    colons ("svc:db" is tag "svc:db" at VERBOSE).

    Args:
        spec: Tag spec string like "Net", "Net:WARN" or "svc:db:ERROR"

    Returns:
        TagConfig with parsed values

    Raises:
        ConfigError: empty tag
    """
    tag, sep, level = spec.rpartition(':')
    if not sep:
        tag, level = spec, ''
    if level:
        try:
            parsed = parse_tag_level(level)
        except ConfigError:
            tag, parsed = spec, LogLevel.VERBOSE
    else:
        parsed = LogLevel.VERBOSE
    if not tag:
        raise ConfigError(f"Empty tag in spec: {spec!r}")
    return TagConfig(tag=tag, level=parsed)


class TagFilter:
    """Decide whether a (tag, level) pair is loggable.

    Usage::

        tags = TagFilter(overrides={'Net': LogLevel.DEBUG})
        tags.is_loggable('Net', LogLevel.DEBUG)    # True
        tags.is_loggable('Db', LogLevel.DEBUG)     # False (default INFO)
    """

    def __init__(
        self,
        overrides: Optional[Mapping[str, int]] = None,
        default: LevelLike = LogLevel.INFO,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.overrides: Dict[str, int] = dict(overrides or {})
        self.default = coerce_level(default)
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def set_level(self, tag: str, level) -> None:
        self.overrides[tag] = parse_tag_level(level)

    def apply_specs(self, specs) -> None:
        """Apply a list of ``TAG[:LEVEL]`` spec strings."""
        for spec in specs:
            cfg = parse_tag_spec(spec)
            self.overrides[cfg.tag] = cfg.level

    def level_for(self, tag: str) -> int:
        """Effective minimum level for ``tag``.

        An unparseable environment value is ignored and the default
        applies, matching how the platform treats unknown property values.
        """
        if tag in self.overrides:
            return self.overrides[tag]
        raw = self.environ.get(f"{ENV_PREFIX}{tag}")
        if raw:
            try:
                return parse_tag_level(raw)
            except ConfigError:
                pass
        return self.default

    def is_loggable(self, tag: Optional[str], level: LevelLike) -> bool:
        return coerce_level(level) >= self.level_for(tag or '')
