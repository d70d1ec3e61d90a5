"""Calendar-aware duration value type.

A Duration carries two kinds of magnitude that are never mixed implicitly:

- calendar components (``months`` and ``days``) whose length depends on the
  point they are applied to, and
- an exact component (``nanos``) that is a fixed amount of elapsed time.

Calendar arithmetic is delegated to python-dateutil's relativedelta, which
clamps to the end of the month (January 31 + 1 month is February 28 or 29).
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, TypeAlias, TypeVar

from dateutil.relativedelta import relativedelta

from calspan.clock import Clock, now
from calspan.config import DEFAULTS
from calspan.errors import (
    InvalidReferenceError,
    InvalidStateError,
    MalformedInputError,
    UnsupportedUnitError,
)
from calspan.units import (
    DAY,
    DAYS_PER_WEEK,
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    MONTHS_PER_YEAR,
    SECOND,
    TemporalUnit,
    trunc_div,
    trunc_mod,
)

Temporal: TypeAlias = datetime | date | time
T = TypeVar("T", datetime, date, time)

# Arbitrary date used to do time-of-day arithmetic on datetime.time values
_TIME_BASE = date(2000, 1, 1)

_ISO_DURATION = re.compile(
    r"^(?P<sign>[-+])?P"
    r"(?:(?P<years>[-+]?\d+)Y)?"
    r"(?:(?P<months>[-+]?\d+)M)?"
    r"(?:(?P<weeks>[-+]?\d+)W)?"
    r"(?:(?P<days>[-+]?\d+)D)?"
    r"(?:(?P<time>T)"
    r"(?:(?P<hours>[-+]?\d+)H)?"
    r"(?:(?P<minutes>[-+]?\d+)M)?"
    r"(?:(?P<seconds>[-+]?\d*)(?:[.,](?P<fraction>\d{1,9}))?S)?"
    r")?$"
)


@dataclass(frozen=True, kw_only=True)
class Duration:
    """A span of time with calendar and exact components.

    Equality and hashing are structural over ``(months, days, nanos)``:
    ``Duration(days=1)`` and ``Duration(nanos=DAY)`` are different values
    even though they often cover the same elapsed time. Ordering resolves
    both operands to nanoseconds (see compare()).

    Attributes:
        months: Calendar months (years are stored as 12 months)
        days: Calendar days (weeks are stored as 7 days)
        nanos: Exact elapsed nanoseconds
    """

    months: int = 0
    days: int = 0
    nanos: int = 0

    def __post_init__(self) -> None:
        for name in ("months", "days", "nanos"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(
                    f"Duration {name} must be an int, got "
                    f"{type(value).__name__!r}: {value!r}\n"
                    f"Hint: Use Duration.of(...) to build a duration from mixed units"
                )

    # ------------------------------------------------------------------
    # Construction

    @classmethod
    def of(
        cls,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        millis: int = 0,
        micros: int = 0,
        nanos: int = 0,
    ) -> "Duration":
        """Build a duration from any mix of units.

        Years fold into months, weeks into days and every unit from hours
        down into the exact nanosecond component.
        """
        return cls(
            months=years * MONTHS_PER_YEAR + months,
            days=weeks * DAYS_PER_WEEK + days,
            nanos=(
                hours * HOUR
                + minutes * MINUTE
                + seconds * SECOND
                + millis * MILLISECOND
                + micros * MICROSECOND
                + nanos
            ),
        )

    @classmethod
    def between(cls, start: Temporal, end: Temporal) -> "Duration":
        """Return the calendar-correct span from ``start`` to ``end``.

        The span is decomposed largest unit first: whole months, then whole
        days, then the exact remainder. Whatever the operands, the result
        satisfies ``Duration.between(a, b).add_to(a) == b``.

        A ``date`` mixed with a ``datetime`` is taken at midnight. Two
        ``time`` values give an exact-only span (which may be negative).

        Raises:
            TypeError: If the operands cannot be compared (time with date,
                naive with aware)
        """
        start, end = _align(start, end)

        if isinstance(start, time):
            return cls(nanos=_time_of_day_nanos(end) - _time_of_day_nanos(start))

        local_end = end
        if isinstance(start, datetime) and start.tzinfo is not None:
            # Calendar steps happen on start's wall clock
            local_end = end.astimezone(start.tzinfo)  # type: ignore[union-attr]

        calendar = relativedelta(_wall(local_end), _wall(start))
        months = calendar.years * MONTHS_PER_YEAR + calendar.months
        days = calendar.days
        if not isinstance(start, datetime):
            return cls(months=months, days=days)

        middle = start + relativedelta(months=months, days=days)
        return cls(months=months, days=days, nanos=_elapsed_nanos(middle, end))

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "Duration":
        """Convert a timedelta; its days are exact 24-hour days."""
        return cls(
            nanos=(delta.days * 86400 + delta.seconds) * SECOND
            + delta.microseconds * MICROSECOND
        )

    @classmethod
    def from_relativedelta(cls, delta: relativedelta) -> "Duration":
        """Convert the relative fields of a relativedelta.

        Raises:
            InvalidStateError: If the relativedelta sets absolute fields
                (year=, month=, weekday=...), which a Duration cannot carry
        """
        absolute = [
            name
            for name in (
                "year",
                "month",
                "day",
                "weekday",
                "hour",
                "minute",
                "second",
                "microsecond",
            )
            if getattr(delta, name) is not None
        ]
        if absolute or delta.leapdays:
            raise InvalidStateError(
                f"Cannot convert a relativedelta with absolute fields to a Duration.\n"
                f"Got: {delta!r}\n"
                f"Hint: Only relative fields (years=, months=, days=, hours=...) "
                f"are supported"
            )
        return cls.of(
            years=delta.years,
            months=delta.months,
            days=delta.days,
            hours=delta.hours,
            minutes=delta.minutes,
            seconds=delta.seconds,
            micros=delta.microseconds,
        )

    @classmethod
    def since(cls, point: Temporal, clock: Clock | None = None) -> "Duration":
        """Span from ``point`` to now (read in ``point``'s zone)."""
        return cls.between(point, _now_like(point, clock))

    @classmethod
    def until(cls, point: Temporal, clock: Clock | None = None) -> "Duration":
        """Span from now (read in ``point``'s zone) to ``point``."""
        return cls.between(_now_like(point, clock), point)

    @classmethod
    def parse(cls, text: str) -> "Duration":
        """Parse an ISO-8601 duration such as ``P1Y2M3DT4H5M6.5S``.

        Accepts the week designator (``P2W3D``), a leading sign that applies
        to every component (``-P1D``), per-component signs (``P1M-2D``) and
        fractional seconds with up to nine digits. Blank text is the zero
        duration.

        Raises:
            MalformedInputError: If ``text`` is not a duration
        """
        text = text.strip()
        if not text:
            return ZERO

        match = _ISO_DURATION.match(text)
        if match is None or not _has_component(match):
            raise MalformedInputError(
                f"Invalid ISO-8601 duration: {text!r}\n"
                f"Expected e.g. 'P1Y2M', 'P3W', 'PT4H30M', 'P1DT0.5S' or 'PT0S'"
            )

        parts = match.groupdict()
        seconds_text = parts["seconds"] or ""
        fraction_text = parts["fraction"] or ""
        if parts["seconds"] is not None and seconds_text in ("", "-", "+"):
            if not fraction_text:
                raise MalformedInputError(
                    f"Invalid ISO-8601 duration: {text!r} (seconds without digits)"
                )
        seconds = int(seconds_text) if seconds_text.lstrip("+-") else 0
        fraction = int(fraction_text.ljust(9, "0")) if fraction_text else 0
        if seconds_text.startswith("-"):
            fraction = -fraction

        duration = cls.of(
            years=_int(parts["years"]),
            months=_int(parts["months"]),
            weeks=_int(parts["weeks"]),
            days=_int(parts["days"]),
            hours=_int(parts["hours"]),
            minutes=_int(parts["minutes"]),
            seconds=seconds,
            nanos=fraction,
        )
        return -duration if parts["sign"] == "-" else duration

    # ------------------------------------------------------------------
    # Inspection

    @property
    def is_zero(self) -> bool:
        return self.months == 0 and self.days == 0 and self.nanos == 0

    @property
    def is_exact(self) -> bool:
        """True if the duration has no calendar components."""
        return self.months == 0 and self.days == 0

    @property
    def is_negative(self) -> bool:
        """True if the duration is shorter than zero at the default reference."""
        return self.compare(ZERO) < 0

    @property
    def units(self) -> tuple[TemporalUnit, ...]:
        """Units accepted by get(), largest first."""
        return SUPPORTED_UNITS

    def get(self, unit: TemporalUnit | str) -> int:
        """Return the field value for ``unit``.

        Fields follow the usual accessor pattern: YEARS and MONTHS split the
        month count, DAYS is the calendar day count, HOURS is the whole hours
        of the exact component, MINUTES and SECONDS are the minute-of-hour and
        second-of-minute, and MILLIS, MICROS and NANOS the sub-second part.
        Signs are preserved.

        Raises:
            UnsupportedUnitError: If the unit is not one of ``units``
        """
        unit = _coerce_unit(unit, SUPPORTED_UNITS)
        sub_second = trunc_mod(self.nanos, SECOND)
        match unit:
            case TemporalUnit.YEARS:
                return trunc_div(self.months, MONTHS_PER_YEAR)
            case TemporalUnit.MONTHS:
                return trunc_mod(self.months, MONTHS_PER_YEAR)
            case TemporalUnit.DAYS:
                return self.days
            case TemporalUnit.HOURS:
                return trunc_div(self.nanos, HOUR)
            case TemporalUnit.MINUTES:
                return trunc_mod(trunc_div(self.nanos, MINUTE), 60)
            case TemporalUnit.SECONDS:
                return trunc_mod(trunc_div(self.nanos, SECOND), 60)
            case TemporalUnit.MILLIS:
                return trunc_div(sub_second, MILLISECOND)
            case TemporalUnit.MICROS:
                return trunc_div(sub_second, MICROSECOND)
            case TemporalUnit.NANOS:
                return sub_second
        raise UnsupportedUnitError(unit, SUPPORTED_UNITS)

    def truncated_to(self, unit: TemporalUnit | str) -> "Duration":
        """Drop every field smaller than ``unit``.

        YEARS keeps whole years of the month count, MONTHS keeps the months,
        DAYS keeps the calendar part and HOURS down to NANOS round the exact
        part toward zero.

        Raises:
            UnsupportedUnitError: If the unit is not one of ``units``
        """
        unit = _coerce_unit(unit, SUPPORTED_UNITS)
        match unit:
            case TemporalUnit.YEARS:
                years = trunc_div(self.months, MONTHS_PER_YEAR)
                return Duration(months=years * MONTHS_PER_YEAR)
            case TemporalUnit.MONTHS:
                return Duration(months=self.months)
            case TemporalUnit.DAYS:
                return Duration(months=self.months, days=self.days)
            case (
                TemporalUnit.HOURS
                | TemporalUnit.MINUTES
                | TemporalUnit.SECONDS
                | TemporalUnit.MILLIS
                | TemporalUnit.MICROS
                | TemporalUnit.NANOS
            ):
                nanos = self.nanos - trunc_mod(self.nanos, unit.nanos)
                return Duration(months=self.months, days=self.days, nanos=nanos)
        raise UnsupportedUnitError(unit, SUPPORTED_UNITS)

    # ------------------------------------------------------------------
    # Arithmetic

    def plus(self, other: "Duration") -> "Duration":
        return Duration(
            months=self.months + other.months,
            days=self.days + other.days,
            nanos=self.nanos + other.nanos,
        )

    def minus(self, other: "Duration") -> "Duration":
        return Duration(
            months=self.months - other.months,
            days=self.days - other.days,
            nanos=self.nanos - other.nanos,
        )

    def plus_unit(self, amount: int, unit: TemporalUnit | str) -> "Duration":
        """Add ``amount`` of a single unit (years fold into months, weeks into days)."""
        unit = _coerce_unit(unit, tuple(_OF_KEYWORDS))
        keyword = _OF_KEYWORDS.get(unit)
        if keyword is None:
            raise UnsupportedUnitError(unit, tuple(_OF_KEYWORDS))
        return self.plus(Duration.of(**{keyword: amount}))

    def minus_unit(self, amount: int, unit: TemporalUnit | str) -> "Duration":
        return self.plus_unit(-amount, unit)

    def negated(self) -> "Duration":
        return Duration(months=-self.months, days=-self.days, nanos=-self.nanos)

    def multiplied_by(self, scalar: int) -> "Duration":
        """Scale every component by ``scalar``.

        This is component scaling, not repeated application: 2 x "1 month"
        is "2 months", which from January 31 lands on March 31, whereas
        applying "1 month" twice lands on March 28 or 29.
        """
        if isinstance(scalar, bool) or not isinstance(scalar, int):
            raise TypeError(f"Scalar must be an int, got {type(scalar).__name__!r}")
        return Duration(
            months=self.months * scalar,
            days=self.days * scalar,
            nanos=self.nanos * scalar,
        )

    def __add__(self, other: Any) -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: Any) -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return self.minus(other)

    def __neg__(self) -> "Duration":
        return self.negated()

    def __pos__(self) -> "Duration":
        return self

    def __abs__(self) -> "Duration":
        """Negate the duration if it is shorter than zero (see is_negative)."""
        return self.negated() if self.is_negative else self

    def __mul__(self, scalar: Any) -> "Duration":
        if isinstance(scalar, bool) or not isinstance(scalar, int):
            return NotImplemented
        return self.multiplied_by(scalar)

    __rmul__ = __mul__

    # ------------------------------------------------------------------
    # Application to points in time

    def add_to(self, point: T) -> T:
        """Apply the duration forwards from ``point``.

        Calendar components go first (months, then days, on the wall clock),
        then the exact component as elapsed time. Sub-microsecond nanos are
        dropped (truncated toward zero) because datetime stops at
        microseconds. On a ``date`` only the calendar components apply; on a
        ``time`` only the exact component applies and wraps around midnight.

        Raises:
            TypeError: If ``point`` is not a datetime, date or time
        """
        if isinstance(point, datetime):
            result = _shift_calendar(point, self.months, self.days)
            return _shift_exact(result, self._micros)
        if isinstance(point, date):
            return _shift_calendar(point, self.months, self.days)
        if isinstance(point, time):
            return _shift_time(point, self._micros)
        raise _not_a_temporal(point)

    def subtract_from(self, point: T) -> T:
        """Apply the duration backwards from ``point``.

        The inverse order of add_to(): exact component first, then days, then
        months. ``d.subtract_from(d.add_to(p)) == p`` unless an end-of-month
        clamp happened on the way forward (January 31 + 1 month is February
        28; February 28 - 1 month is January 28).
        """
        if isinstance(point, datetime):
            result = _shift_exact(point, -self._micros)
            result = _shift_calendar(result, 0, -self.days)
            return _shift_calendar(result, -self.months, 0)
        if isinstance(point, date):
            result = _shift_calendar(point, 0, -self.days)
            return _shift_calendar(result, -self.months, 0)
        if isinstance(point, time):
            return _shift_time(point, -self._micros)
        raise _not_a_temporal(point)

    # ------------------------------------------------------------------
    # Conversion

    def to_nanos(self, reference: Temporal | None = None) -> int:
        """Total length in nanoseconds.

        Calendar components are resolved against ``reference`` (elapsed time
        from ``reference`` to ``reference`` shifted by them), then the exact
        component is added.

        Raises:
            InvalidReferenceError: If calendar components are non-zero and
                ``reference`` is missing or is a time of day
        """
        if self.is_exact:
            return self.nanos
        if reference is None or isinstance(reference, time):
            raise InvalidReferenceError(
                f"Duration {self} has calendar components; its length depends "
                f"on where it starts.\n"
                f"Hint: Pass a reference date or datetime:\n"
                f"  duration.to_millis(datetime(2025, 1, 31))"
            )
        calendar = _shift_calendar(reference, self.months, self.days)
        return _elapsed_nanos(reference, calendar) + self.nanos

    def total(self, unit: TemporalUnit | str, reference: Temporal | None = None) -> int:
        """Whole ``unit``s covered by the duration, truncated toward zero.

        Hours and smaller count elapsed time. Days and weeks count wall-clock
        days from ``reference``, so a calendar day across a DST change is
        still one day. Calendar components need a reference as in to_nanos().

        Raises:
            UnsupportedUnitError: For month-based units
            InvalidReferenceError: See to_nanos()
        """
        unit = _coerce_unit(unit, TOTAL_UNITS)
        size = unit.nanos
        if size is None:
            raise UnsupportedUnitError(unit, TOTAL_UNITS)
        nanos = self.to_nanos(reference)
        if size >= DAY and not self.is_exact:
            calendar = _shift_calendar(reference, self.months, self.days)
            nanos = _elapsed_nanos(_wall(reference), _wall(calendar)) + self.nanos
        return trunc_div(nanos, size)

    def to_days(self, reference: Temporal | None = None) -> int:
        return self.total(TemporalUnit.DAYS, reference)

    def to_hours(self, reference: Temporal | None = None) -> int:
        return self.total(TemporalUnit.HOURS, reference)

    def to_minutes(self, reference: Temporal | None = None) -> int:
        return self.total(TemporalUnit.MINUTES, reference)

    def to_seconds(self, reference: Temporal | None = None) -> int:
        return self.total(TemporalUnit.SECONDS, reference)

    def to_millis(self, reference: Temporal | None = None) -> int:
        return self.total(TemporalUnit.MILLIS, reference)

    def to_micros(self, reference: Temporal | None = None) -> int:
        return self.total(TemporalUnit.MICROS, reference)

    def to_timedelta(self) -> timedelta:
        """Exact component as a timedelta (microsecond resolution).

        Raises:
            InvalidReferenceError: If the duration has calendar components
        """
        if not self.is_exact:
            raise InvalidReferenceError(
                f"Duration {self} has calendar components and no fixed length.\n"
                f"Hint: Use to_relativedelta(), or to_nanos(reference)"
            )
        return timedelta(microseconds=self._micros)

    def to_relativedelta(self) -> relativedelta:
        """Calendar and exact components as a single relativedelta.

        relativedelta normalizes 24 hours into a day, which would turn elapsed
        time into a calendar day, so the exact part must stay under a day.

        Raises:
            InvalidStateError: If the exact component is a day or longer
        """
        if abs(self.nanos) >= DAY:
            raise InvalidStateError(
                f"Duration {self} has an exact part of a day or more, which "
                f"relativedelta would fold into calendar days.\n"
                f"Hint: Apply it with add_to(), or convert the exact part with "
                f"to_timedelta()"
            )
        return relativedelta(
            months=self.months, days=self.days, microseconds=self._micros
        )

    # ------------------------------------------------------------------
    # Ordering

    def compare(self, other: "Duration", reference: Temporal | None = None) -> int:
        """Return -1, 0 or 1 as this duration is shorter, equal or longer.

        Exact durations compare directly. If either side has calendar
        components both are resolved at ``reference`` (default
        ``DEFAULTS.reference``).
        """
        if self.is_exact and other.is_exact:
            left, right = self.nanos, other.nanos
        else:
            anchor = DEFAULTS.reference if reference is None else reference
            left, right = self.to_nanos(anchor), other.to_nanos(anchor)
        return (left > right) - (left < right)

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) >= 0

    # ------------------------------------------------------------------
    # Rendering

    def to_iso(self, weeks: bool | None = None) -> str:
        """Render as an ISO-8601 duration.

        Args:
            weeks: Group whole weeks of the day count as ``W`` (``P1W3D``).
                Defaults to ``DEFAULTS.group_weeks``.

        A duration whose components are all zero or negative renders with a
        single leading sign (``-P1DT2H``); mixed signs are written per
        component (``P1M-2D``).
        """
        if self.is_zero:
            return "PT0S"
        if weeks is None:
            weeks = DEFAULTS.group_weeks

        negative = self.months <= 0 and self.days <= 0 and self.nanos <= 0
        months, days, nanos = (
            (-self.months, -self.days, -self.nanos)
            if negative
            else (self.months, self.days, self.nanos)
        )

        out = ["-P" if negative else "P"]
        years = trunc_div(months, MONTHS_PER_YEAR)
        months = trunc_mod(months, MONTHS_PER_YEAR)
        if years:
            out.append(f"{years}Y")
        if months:
            out.append(f"{months}M")
        if weeks:
            whole_weeks = trunc_div(days, DAYS_PER_WEEK)
            days = trunc_mod(days, DAYS_PER_WEEK)
            if whole_weeks:
                out.append(f"{whole_weeks}W")
        if days:
            out.append(f"{days}D")
        if nanos:
            out.append("T")
            hours = trunc_div(nanos, HOUR)
            minutes = trunc_mod(trunc_div(nanos, MINUTE), 60)
            seconds = trunc_mod(nanos, MINUTE)
            if hours:
                out.append(f"{hours}H")
            if minutes:
                out.append(f"{minutes}M")
            if seconds:
                out.append(_format_seconds(seconds) + "S")
        return "".join(out)

    def __str__(self) -> str:
        return self.to_iso()

    @property
    def _micros(self) -> int:
        return trunc_div(self.nanos, MICROSECOND)


ZERO = Duration()

SUPPORTED_UNITS: tuple[TemporalUnit, ...] = (
    TemporalUnit.YEARS,
    TemporalUnit.MONTHS,
    TemporalUnit.DAYS,
    TemporalUnit.HOURS,
    TemporalUnit.MINUTES,
    TemporalUnit.SECONDS,
    TemporalUnit.MILLIS,
    TemporalUnit.MICROS,
    TemporalUnit.NANOS,
)

TOTAL_UNITS: tuple[TemporalUnit, ...] = (
    TemporalUnit.WEEKS,
    TemporalUnit.DAYS,
    TemporalUnit.HALF_DAYS,
    TemporalUnit.HOURS,
    TemporalUnit.MINUTES,
    TemporalUnit.SECONDS,
    TemporalUnit.MILLIS,
    TemporalUnit.MICROS,
    TemporalUnit.NANOS,
)

# Duration.of() keyword for each unit accepted by plus_unit()
_OF_KEYWORDS: dict[TemporalUnit, str] = {
    TemporalUnit.YEARS: "years",
    TemporalUnit.MONTHS: "months",
    TemporalUnit.WEEKS: "weeks",
    TemporalUnit.DAYS: "days",
    TemporalUnit.HOURS: "hours",
    TemporalUnit.MINUTES: "minutes",
    TemporalUnit.SECONDS: "seconds",
    TemporalUnit.MILLIS: "millis",
    TemporalUnit.MICROS: "micros",
    TemporalUnit.NANOS: "nanos",
}


def _coerce_unit(
    unit: TemporalUnit | str, supported: tuple[TemporalUnit, ...]
) -> TemporalUnit:
    if isinstance(unit, TemporalUnit):
        return unit
    try:
        return TemporalUnit(str(unit).lower())
    except ValueError:
        raise UnsupportedUnitError(unit, supported) from None


def _int(text: str | None) -> int:
    return int(text) if text else 0


def _has_component(match: re.Match[str]) -> bool:
    parts = match.groupdict()
    date_parts = any(parts[k] is not None for k in ("years", "months", "weeks", "days"))
    time_parts = any(parts[k] is not None for k in ("hours", "minutes", "seconds"))
    if parts["time"] and not time_parts:
        # "P1DT" has a dangling time designator
        return False
    return date_parts or time_parts


def _format_seconds(nanos: int) -> str:
    """Render nanoseconds within a minute as ``S[.fffffffff]`` without trailing zeros."""
    whole = trunc_div(nanos, SECOND)
    fraction = abs(trunc_mod(nanos, SECOND))
    text = "-0" if whole == 0 and nanos < 0 else str(whole)
    if fraction:
        text += "." + f"{fraction:09d}".rstrip("0")
    return text


def _not_a_temporal(point: object) -> TypeError:
    return TypeError(
        f"Expected a datetime, date or time.\n"
        f"Got {type(point).__name__!r}: {point!r}"
    )


def _align(start: Temporal, end: Temporal) -> tuple[Temporal, Temporal]:
    """Bring two points to a common type so they can be subtracted."""
    for point in (start, end):
        if not isinstance(point, (datetime, date, time)):
            raise _not_a_temporal(point)

    if isinstance(start, time) or isinstance(end, time):
        if not (isinstance(start, time) and isinstance(end, time)):
            raise TypeError(
                f"Cannot measure a span between a time of day and a date.\n"
                f"Got: {start!r} and {end!r}\n"
                f"Hint: Combine the time with a date first: datetime.combine(d, t)"
            )
        return start, end

    if isinstance(start, datetime) and not isinstance(end, datetime):
        end = datetime.combine(end, time.min, tzinfo=start.tzinfo)
    elif isinstance(end, datetime) and not isinstance(start, datetime):
        start = datetime.combine(start, time.min, tzinfo=end.tzinfo)

    if isinstance(start, datetime) and isinstance(end, datetime):
        if (start.tzinfo is None) != (end.tzinfo is None):
            raise TypeError(
                f"Cannot measure a span between naive and aware datetimes.\n"
                f"Got: {start!r} and {end!r}\n"
                f"Hint: Give both datetimes a timezone (or neither)"
            )
    return start, end


def _wall(point: date) -> date:
    """Wall-clock view of a point: aware datetimes lose their zone."""
    if isinstance(point, datetime) and point.tzinfo is not None:
        return point.replace(tzinfo=None)
    return point


def _elapsed_nanos(start: date, end: date) -> int:
    """Exact elapsed nanoseconds between two points of the same kind.

    Aware datetimes are compared in UTC so that DST transitions count as the
    real time that passed.
    """
    if isinstance(start, datetime) and start.tzinfo is not None:
        start = start.astimezone(timezone.utc)
        end = end.astimezone(timezone.utc)  # type: ignore[union-attr]
    delta = end - start
    return (delta.days * 86400 + delta.seconds) * SECOND + delta.microseconds * MICROSECOND


def _time_of_day_nanos(point: time) -> int:
    return (
        (point.hour * 60 + point.minute) * 60 + point.second
    ) * SECOND + point.microsecond * MICROSECOND


def _shift_calendar(point: Any, months: int, days: int) -> Any:
    if months == 0 and days == 0:
        return point
    return point + relativedelta(months=months, days=days)


def _shift_exact(point: datetime, micros: int) -> datetime:
    if micros == 0:
        return point
    step = timedelta(microseconds=micros)
    if point.tzinfo is None:
        return point + step
    return (point.astimezone(timezone.utc) + step).astimezone(point.tzinfo)


def _shift_time(point: time, micros: int) -> time:
    if micros == 0:
        return point
    shifted = datetime.combine(_TIME_BASE, point) + timedelta(microseconds=micros)
    return shifted.timetz()


def _now_like(point: Temporal, clock: Clock | None) -> Temporal:
    """Read the clock in the same flavour as ``point``."""
    if isinstance(point, datetime):
        current = now(point.tzinfo, clock)
        if point.tzinfo is None and current.tzinfo is not None:
            current = current.replace(tzinfo=None)
        return current
    if isinstance(point, date):
        return now(None, clock).date()
    if isinstance(point, time):
        return now(point.tzinfo, clock).timetz()
    raise _not_a_temporal(point)
