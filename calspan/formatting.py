"""Text rendering of intervals and ISO temporals.

The interval form is ``R<n>/<part>/<part>``: ``R/`` marks infinite
repetition, and the prefix is dropped for a repetition of exactly 1 when the
caller asks for it (the default). This mirrors ISO-8601 repeating intervals
but is not a conformant implementation: ISO's ``Rn`` counts occurrences,
here it counts additional repeats.
"""

from datetime import date, datetime, time

from dateutil.parser import isoparse, isoparser

from calspan.config import DEFAULTS
from calspan.duration import Duration, Temporal
from calspan.errors import MalformedInputError

_ISO_PARSER = isoparser()


def format_temporal(point: Temporal) -> str:
    """Render a datetime, date or time in ISO-8601 extended format."""
    if isinstance(point, (datetime, date, time)):
        return point.isoformat()
    raise TypeError(
        f"Expected a datetime, date or time.\n"
        f"Got {type(point).__name__!r}: {point!r}"
    )


def format_interval(
    repetition: int | None,
    *parts: Temporal | Duration,
    omit_unit_repetition: bool | None = None,
) -> str:
    """Render interval parts with an optional repetition prefix.

    Args:
        repetition: Repetition count, -1 for infinite, or None for shapes
            that never repeat (no prefix is written)
        *parts: Temporals and durations, joined with ``/`` in order
        omit_unit_repetition: Drop the prefix when repetition is 1.
            Defaults to ``DEFAULTS.omit_unit_repetition``.

    Examples:
        >>> format_interval(3, date(2025, 1, 1), Duration(days=1))
        'R3/2025-01-01/P1D'
        >>> format_interval(-1, Duration(months=1))
        'R/P1M'
        >>> format_interval(1, Duration(months=1))
        'P1M'
    """
    if omit_unit_repetition is None:
        omit_unit_repetition = DEFAULTS.omit_unit_repetition

    body = "/".join(
        str(part) if isinstance(part, Duration) else format_temporal(part)
        for part in parts
    )
    if repetition is None or (omit_unit_repetition and repetition == 1):
        return body
    count = "" if repetition == -1 else str(repetition)
    return f"R{count}/{body}"


def parse_temporal(text: str) -> Temporal:
    """Parse an ISO-8601 datetime, date or time of day.

    Text with a ``T`` separator is a datetime, text with a ``:`` is a time
    (offsets and ``Z`` allowed on both) and anything else is a calendar date.

    Raises:
        MalformedInputError: If the text is none of the three
    """
    text = text.strip()
    try:
        if "T" in text:
            return isoparse(text)
        if ":" in text:
            return _ISO_PARSER.parse_isotime(text)
        return _ISO_PARSER.parse_isodate(text)
    except ValueError as err:
        raise MalformedInputError(
            f"Invalid ISO-8601 temporal: {text!r}\n"
            f"Expected e.g. '2025-01-31', '09:30:00' or '2025-01-31T09:30:00+01:00'"
        ) from err
