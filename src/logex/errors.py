"""Exception types raised by logex."""


class LogexError(Exception):
    """Base class for all logex errors."""


class TemplateError(LogexError, ValueError):
    """A template could not be rendered with the values it was given.

    Raised from the log call itself: too few values for the template's
    conversion slots, or a value the conversion cannot take (``%d`` fed a
    string). Extra values are never an error.
    """

    def __init__(self, template: str, values: tuple, reason: str):
        self.template = template
        self.values = values
        self.reason = reason
        super().__init__(
            f"cannot render {template!r} with {len(values)} value(s): {reason}")


class ConfigError(LogexError, ValueError):
    """Configuration content is invalid (bad level, unknown placeholder, ...)."""
