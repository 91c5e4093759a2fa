"""
Placeholder tokens and their resolvers.

Template arguments are either a Literal (passed through as-is) or a Symbol
naming a Placeholder, resolved per log call against the caller frame and
the text being rendered. Each Placeholder maps to exactly one pure
resolver in _RESOLVERS; nothing here mutates the frame or the text.
"""

import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from .errors import ConfigError
from .frames import CallerFrame, TypeDescriptor


# Sentinel for scope names that could not be resolved.
UNKNOWN = "[Unknown]"


class Placeholder(enum.Enum):
    """Symbolic values filled in from the call site at log time."""
    CANONICAL_NAME = 'canonical_name'
    CLASS_NAME = 'class_name'
    FILE_NAME = 'file_name'
    HASH_CODE = 'hash_code'
    LINE_NUMBER = 'line_number'
    MESSAGE = 'message'
    METHOD_NAME = 'method_name'
    PACKAGE = 'package'
    SIMPLE_CLASS_NAME = 'simple_class_name'

    @classmethod
    def from_name(cls, name: str) -> "Placeholder":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ConfigError(f"Unknown placeholder: {name!r}") from None


@dataclass(frozen=True)
class Literal:
    """A template argument used verbatim."""
    value: Any

    def resolve(self, frame: CallerFrame, message: str) -> Any:
        return self.value


@dataclass(frozen=True)
class Symbol:
    """A template argument resolved from the call site."""
    placeholder: Placeholder

    def resolve(self, frame: CallerFrame, message: str) -> Any:
        return resolve(self.placeholder, frame, message)


TemplateArgument = Union[Literal, Symbol]


def as_argument(value: Any) -> TemplateArgument:
    """Wrap a raw template argument: Placeholders become Symbols."""
    if isinstance(value, (Literal, Symbol)):
        return value
    if isinstance(value, Placeholder):
        return Symbol(value)
    return Literal(value)


def _scope_name(kind: Callable[[TypeDescriptor], str]):
    """Build a resolver that walks the declaring scope outward.

    The first non-empty name wins; an unresolvable declaring type or an
    exhausted chain gives UNKNOWN.
    """
    def resolver(frame: CallerFrame, message: str) -> str:
        declaring = frame.declaring_type
        if declaring is None:
            return UNKNOWN
        for scope in declaring.chain():
            name = kind(scope)
            if name:
                return name
        return UNKNOWN
    return resolver


_RESOLVERS: Dict[Placeholder, Callable[[CallerFrame, str], Any]] = {
    Placeholder.FILE_NAME: lambda frame, message: frame.file_name,
    Placeholder.LINE_NUMBER: lambda frame, message: frame.line_number,
    Placeholder.METHOD_NAME: lambda frame, message: frame.method_name,
    Placeholder.HASH_CODE: lambda frame, message: frame.hash_code,
    Placeholder.MESSAGE: lambda frame, message: message,
    Placeholder.CLASS_NAME: _scope_name(TypeDescriptor.class_name),
    Placeholder.CANONICAL_NAME: _scope_name(TypeDescriptor.canonical_name),
    Placeholder.SIMPLE_CLASS_NAME: _scope_name(TypeDescriptor.simple_name),
    Placeholder.PACKAGE: _scope_name(TypeDescriptor.package_name),
}


def resolve(token: Placeholder, frame: CallerFrame,
            message: Optional[str]) -> Any:
    """Resolve one placeholder against a frame and the text being rendered."""
    return _RESOLVERS[token](frame, message if message is not None else '')
