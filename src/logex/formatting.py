"""
Template rendering.

Templates use printf-style positional conversions (``%s``, ``%d``, ...)
and are rendered with locale.format_string, so numeric conversions follow
the active LC_NUMERIC locale. Values beyond the template's conversion
slots are ignored; too few values fail the call with TemplateError.
"""

import locale
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from .errors import TemplateError
from .frames import CallerFrame
from .placeholders import Placeholder, TemplateArgument, as_argument


@dataclass(frozen=True)
class FormatTemplate:
    """A format string plus its ordered Literal/Symbol arguments."""
    template: str
    args: Tuple[TemplateArgument, ...] = ()

    @classmethod
    def of(cls, template: str, *args: Any) -> "FormatTemplate":
        """Build a template from raw arguments (Placeholders become Symbols).

        Raises:
            TypeError: if template is not a string
        """
        if not isinstance(template, str):
            raise TypeError(
                f"template must be a str, not {type(template).__name__}")
        return cls(template, tuple(as_argument(a) for a in args))

    def render(self, frame: CallerFrame, message: Optional[str]) -> str:
        return apply(self.template, self.args, frame, message)


def apply(template: str, args: Sequence[Any], frame: CallerFrame,
          message: Optional[str]) -> str:
    """Resolve ``args`` against the call site and substitute into ``template``.

    Args:
        template: printf-style format string
        args: Literal/Symbol arguments (raw Placeholders and plain values
            are accepted and wrapped)
        frame: The caller frame placeholders resolve against
        message: Text the MESSAGE placeholder resolves to

    Returns:
        The rendered string

    Raises:
        TemplateError: too few values for the template, or a value the
            conversion rejects
    """
    if message is None:
        message = ''
    values = tuple(as_argument(a).resolve(frame, message) for a in args)
    # Each slot is formatted as `conversion % value`; a bare tuple would be
    # unpacked there, so it goes in as a single item.
    slots = tuple((v,) if isinstance(v, tuple) else v for v in values)
    try:
        return locale.format_string(template, slots)
    except (IndexError, TypeError, ValueError) as e:
        reason = ("not enough values for the template"
                  if isinstance(e, IndexError) else str(e))
        raise TemplateError(template, values, reason) from e


DEFAULT_TAG_FORMAT = FormatTemplate.of("%s", Placeholder.SIMPLE_CLASS_NAME)
DEFAULT_MESSAGE_FORMAT = FormatTemplate.of(
    "%s(%s:%d) %s",
    Placeholder.METHOD_NAME,
    Placeholder.FILE_NAME,
    Placeholder.LINE_NUMBER,
    Placeholder.MESSAGE,
)
