"""Temporal units and size constants for calspan.

Exact unit constants are expressed in nanoseconds, the resolution of the
exact component of a Duration. Calendar units (months, years) have no
constant: their length depends on the anchor they are applied to.
"""

from enum import Enum

# Exact unit constants (all values in nanoseconds)
NANOSECOND = 1
MICROSECOND = 1_000
MILLISECOND = 1_000_000
SECOND = 1_000_000_000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY

MONTHS_PER_YEAR = 12
DAYS_PER_WEEK = 7


class TemporalUnit(Enum):
    """Units a Duration can be decomposed into or queried by.

    Mirrors the unit set of the usual calendar libraries. Not every member is
    supported by Duration.get(): see Duration.units for the supported subset.
    """

    NANOS = "nanos"
    MICROS = "micros"
    MILLIS = "millis"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    HALF_DAYS = "half_days"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"
    DECADES = "decades"
    CENTURIES = "centuries"
    MILLENNIA = "millennia"
    ERAS = "eras"
    FOREVER = "forever"

    @property
    def nanos(self) -> int | None:
        """Nominal length in nanoseconds (days of 24 hours).

        None for month-based units, which have no nominal length.
        """
        return _SIZES.get(self)


_SIZES: dict[TemporalUnit, int] = {
    TemporalUnit.NANOS: NANOSECOND,
    TemporalUnit.MICROS: MICROSECOND,
    TemporalUnit.MILLIS: MILLISECOND,
    TemporalUnit.SECONDS: SECOND,
    TemporalUnit.MINUTES: MINUTE,
    TemporalUnit.HOURS: HOUR,
    TemporalUnit.HALF_DAYS: 12 * HOUR,
    TemporalUnit.DAYS: DAY,
    TemporalUnit.WEEKS: WEEK,
}


def trunc_div(value: int, divisor: int) -> int:
    """Integer division rounding toward zero (not toward negative infinity)."""
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def trunc_mod(value: int, divisor: int) -> int:
    """Remainder matching trunc_div: carries the sign of value."""
    return value - trunc_div(value, divisor) * divisor
