"""
Errors raised while computing a chart plan.

All of these are deterministic input or configuration errors. They are raised
synchronously from plan computation and never deferred to the animation phase.
"""


class ScatterplotError(Exception):
    """Base class for errors raised by the plan computation."""

    pass


class InvalidDomainError(ScatterplotError, ValueError):
    """A scale could not derive a domain, typically because there is no data."""

    pass


class InvalidMarginError(ScatterplotError, ValueError):
    """Margins leave a negative inner plotting area."""

    pass


class UnknownAxisTypeError(ScatterplotError, ValueError):
    """An axis type outside of linear, ordinal and time was requested."""

    pass


class DateParseError(ScatterplotError):
    """A value does not match the configured date pattern."""

    def __init__(self, value: object, pattern: str):
        self.value = value
        self.pattern = pattern
        super().__init__(f"Cannot parse {value!r} with date pattern {pattern!r}")
