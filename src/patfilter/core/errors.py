from __future__ import annotations


class PatternError(ValueError):
    """Base class for every error raised while compiling a template."""

    def __init__(self, message: str, fragment: str | None = None,
                 start: int | None = None, end: int | None = None):
        self.message = message
        self.fragment = fragment
        self.start = start
        self.end = end if end is not None else start
        if fragment is not None and start is not None:
            super().__init__(f"{message}  [at: {fragment} (position {start})]")
        elif fragment is not None:
            super().__init__(f"{message}  [at: {fragment}]")
        else:
            super().__init__(message)


class TemplateSyntaxError(PatternError):
    """Malformed template: unmatched braces, bad filter arguments, invalid numbers."""


class UnknownFilterError(PatternError):
    """The leading character of a filter is not a known filter symbol."""
