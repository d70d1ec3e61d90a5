class CalspanError(ValueError):
    """Base class for all calspan errors.

    Also a ValueError, so callers that guard with ``except ValueError`` keep
    working.
    """


class UnboundedRepetitionError(CalspanError):
    """A finite quantity was requested from an infinitely repeated interval."""

    def __init__(self, what: str):
        super().__init__(
            f"Cannot compute {what}: the interval repeats infinitely (repetition=-1).\n"
            f"Hint: Use the repetition-insensitive accessors (start, end, duration)\n"
            f"      or pick a finite count: interval.with_repetition(3)"
        )
        self.what: str = what


class UnsupportedUnitError(CalspanError):
    """A temporal unit not carried by a Duration was queried."""

    def __init__(self, unit: object, supported: tuple[object, ...] = ()):
        msg = f"Unsupported unit: {unit!r}"
        if supported:
            names = ", ".join(getattr(u, "name", str(u)) for u in supported)
            msg += f"\nSupported units: {names}"
        super().__init__(msg)
        self.unit: object = unit


class InvalidReferenceError(CalspanError):
    """A calendar-relative computation needed an anchor that was not supplied."""


class InvalidStateError(CalspanError):
    """A value was constructed with fields that cannot describe an interval."""


class MalformedInputError(CalspanError):
    """Text could not be parsed as a duration, temporal or interval."""
