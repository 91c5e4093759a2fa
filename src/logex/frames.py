"""
Call-site frames and caller location.

A log call needs exactly one frame: the code that asked for the record.
Two stack sources exist:

    synthesized   capture_stack() walks the live interpreter frames at the
                  log call. The innermost entries are always logex's own
                  dispatch code and are skipped.
    explicit      stack_from_exception() reads a caller-supplied exception's
                  traceback, raise site first. Its first frame is taken as-is,
                  even when it belongs to logex, since the exception already
                  points where it was raised.

Scope names (class name, simple name, ...) come from a TypeDescriptor
graph built from the code object's qualified name, not from runtime
lookups. ``Outer.Inner.method`` declares in Inner, enclosed by Outer,
enclosed by the module; ``build.<locals>.helper`` declares in the
anonymous local scope of ``build``.
"""

import enum
import functools
import inspect
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence


_PACKAGE = __name__.rpartition('.')[0]

# Frames from these modules are the facility's own bookkeeping.
INTERNAL_MODULES = frozenset({
    f"{_PACKAGE}.manager",
    f"{_PACKAGE}.facade",
    __name__,
})


class ScopeKind(enum.Enum):
    MODULE = 'module'
    CLASS = 'class'
    LOCAL = 'local'    # the anonymous ``<locals>`` scope of a function


@dataclass(frozen=True)
class TypeDescriptor:
    """One node of the declaring-scope graph.

    Attributes:
        kind: MODULE, CLASS or LOCAL
        name: Last component ('Inner', 'build' for 'build.<locals>')
        module: Dotted module name the scope lives in
        qualname: Qualified name inside the module ('' for the module)
        enclosing: The scope this one is nested in (None for a module)
    """
    kind: ScopeKind
    name: str
    module: str
    qualname: str = ''
    enclosing: Optional["TypeDescriptor"] = None

    @property
    def in_local_scope(self) -> bool:
        """True when any enclosing scope is a function's local scope."""
        node = self.enclosing
        while node is not None:
            if node.kind is ScopeKind.LOCAL:
                return True
            node = node.enclosing
        return False

    def class_name(self) -> str:
        """Fully qualified name; never empty."""
        if self.kind is ScopeKind.MODULE:
            return self.module
        return f"{self.module}.{self.qualname}"

    def canonical_name(self) -> str:
        """Importable dotted name, or '' for scopes living inside a function."""
        if self.kind is ScopeKind.LOCAL or self.in_local_scope:
            return ''
        return self.class_name()

    def simple_name(self) -> str:
        """Bare name, or '' for anonymous local scopes."""
        if self.kind is ScopeKind.MODULE:
            return self.module.rpartition('.')[2]
        if self.kind is ScopeKind.LOCAL:
            return ''
        return self.name

    def package_name(self) -> str:
        """Package of a module scope; '' for everything else."""
        if self.kind is ScopeKind.MODULE:
            return self.module.rpartition('.')[0]
        return ''

    def chain(self) -> Iterable["TypeDescriptor"]:
        """Yield this scope, then each enclosing scope outward."""
        node = self
        while node is not None:
            yield node
            node = node.enclosing


@functools.lru_cache(maxsize=1024)
def describe_scope(module: str, qualname: str = '') -> TypeDescriptor:
    """Build (once) the descriptor chain for a scope inside ``module``.

    Args:
        module: Dotted module name
        qualname: Qualified scope name such as 'Outer.Inner' or
            'Outer.build.<locals>'; '' means the module itself

    Returns:
        The innermost TypeDescriptor, linked outward to the module
    """
    node = TypeDescriptor(ScopeKind.MODULE, module, module)
    if not qualname:
        return node

    parts = qualname.split('.')
    path: List[str] = []
    i = 0
    while i < len(parts):
        name = parts[i]
        if i + 1 < len(parts) and parts[i + 1] == '<locals>':
            path += [name, '<locals>']
            node = TypeDescriptor(ScopeKind.LOCAL, name, module,
                                  '.'.join(path), node)
            i += 2
        else:
            path.append(name)
            node = TypeDescriptor(ScopeKind.CLASS, name, module,
                                  '.'.join(path), node)
            i += 1
    return node


@dataclass(frozen=True)
class CallerFrame:
    """A single call-stack entry with its source location and scope."""
    file_name: str
    line_number: int
    method_name: str
    module: Optional[str] = None
    declaring_type: Optional[TypeDescriptor] = None
    file_path: str = ''

    @property
    def hash_code(self) -> int:
        return hash(self)

    @property
    def is_internal(self) -> bool:
        return self.module in INTERNAL_MODULES

    @classmethod
    def from_frame(cls, frame, line_number: Optional[int] = None) -> "CallerFrame":
        """Describe a live interpreter frame.

        A frame whose globals carry no module name (code run through a bare
        ``exec``) gets no declaring type; name placeholders then resolve to
        the unknown sentinel.
        """
        code = frame.f_code
        module = frame.f_globals.get('__name__')
        if not isinstance(module, str) or not module:
            module = None
        scope = code.co_qualname.rpartition('.')[0]
        declaring = describe_scope(module, scope) if module else None
        if line_number is None:
            line_number = frame.f_lineno or 0
        return cls(
            file_name=os.path.basename(code.co_filename),
            line_number=line_number,
            method_name=code.co_name,
            module=module,
            declaring_type=declaring,
            file_path=code.co_filename,
        )


def capture_stack() -> List[CallerFrame]:
    """Capture the current call stack, innermost first.

    The first entry is the function that called capture_stack().
    """
    frame = inspect.currentframe()
    stack = []
    try:
        current = frame.f_back if frame is not None else None
        while current is not None:
            stack.append(CallerFrame.from_frame(current))
            current = current.f_back
    finally:
        # Drop frame references to avoid reference cycles
        del frame
    return stack


def stack_from_exception(exc: BaseException) -> List[CallerFrame]:
    """Read an exception's traceback as frames, raise site first.

    An exception that was never raised has no traceback and yields [].
    """
    stack = []
    tb = exc.__traceback__
    while tb is not None:
        stack.append(CallerFrame.from_frame(tb.tb_frame, tb.tb_lineno))
        tb = tb.tb_next
    stack.reverse()
    return stack


def locate_caller(stack: Sequence[CallerFrame],
                  synthesized: bool) -> Optional[CallerFrame]:
    """Pick the frame a log record should describe.

    Args:
        stack: Frames, innermost first
        synthesized: True when the stack came from capture_stack() at the
            log call, False when it came from a caller-supplied exception

    Returns:
        The first non-internal frame for a synthesized stack, the first
        frame unconditionally otherwise; None when nothing qualifies.
    """
    if not synthesized:
        return stack[0] if stack else None
    for frame in stack:
        if not frame.is_internal:
            return frame
    return None
