"""Repeatable temporal intervals in four interchangeable shapes.

Each shape stores only what it needs and derives the rest:

- StartDurationInterval: anchor + span (+ repetition), runs forward
- DurationInterval: span (+ repetition), not positioned in time
- DurationEndInterval: span + terminal point (+ repetition), runs backward
- StartEndInterval: anchor + terminal point, a single occurrence

Repetition counts *additional* occurrences: 0 is one occurrence, n > 0 is
n + 1 occurrences and -1 is unbounded. Occurrences are chained: each one
starts where the previous one ended, so "1 month" repeated from January 31
visits February 28 and then March 28, never March 31.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, replace
from datetime import date, datetime, time, tzinfo
from typing import TYPE_CHECKING, Any

from typing_extensions import override

from calspan.clock import Clock, now
from calspan.duration import Duration, Temporal
from calspan.errors import (
    InvalidReferenceError,
    InvalidStateError,
    UnboundedRepetitionError,
)
from calspan.formatting import format_interval
from calspan.units import TemporalUnit

if TYPE_CHECKING:
    from calspan.conversions import AnyInterval

logger = logging.getLogger(__name__)

INFINITE = -1


class BaseInterval(ABC):
    """Operations shared by every interval shape.

    Every shape exposes ``start``, ``start_with_repetition``, ``end``,
    ``end_with_repetition``, ``duration``, ``duration_with_repetition`` and
    ``repetition``. The plain accessors describe one occurrence next to the
    stored anchor; the ``*_with_repetition`` accessors cover every
    occurrence and raise UnboundedRepetitionError when repetition is -1.
    """

    repetition: int
    duration: Duration

    @property
    @abstractmethod
    def duration_with_repetition(self) -> Duration:
        pass

    @property
    def is_infinite(self) -> bool:
        return self.repetition == INFINITE

    @property
    def units(self) -> tuple[TemporalUnit, ...]:
        return self.duration.units

    def get(self, unit: TemporalUnit | str, consider_repetition: bool = True) -> int:
        """Field value of the (repeated) duration; see Duration.get()."""
        span = self.duration_with_repetition if consider_repetition else self.duration
        return span.get(unit)

    def add_to(self, point: Any, consider_repetition: bool = True) -> Any:
        """Apply the span forwards from ``point``, once per occurrence."""
        if not consider_repetition:
            return self.duration.add_to(point)
        self._require_finite("add_to with repetition")
        return _chain_forward(point, self.duration, self.repetition + 1)

    def subtract_from(self, point: Any, consider_repetition: bool = True) -> Any:
        """Apply the span backwards from ``point``, once per occurrence."""
        if not consider_repetition:
            return self.duration.subtract_from(point)
        self._require_finite("subtract_from with repetition")
        return _chain_backward(point, self.duration, self.repetition + 1)

    def contains(self, point: Any, consider_repetition: bool = True) -> bool:
        """True if ``point`` lies between start and end, both inclusive."""
        if consider_repetition:
            lo, hi = self.start_with_repetition, self.end_with_repetition  # type: ignore[attr-defined]
        else:
            lo, hi = self.start, self.end  # type: ignore[attr-defined]
        if hi < lo:
            lo, hi = hi, lo
        return lo <= point <= hi

    def __contains__(self, point: Any) -> bool:
        return self.contains(point)

    @abstractmethod
    def occurrences(self) -> Iterator["StartEndInterval"]:
        """Yield each occurrence as a StartEndInterval, earliest first."""

    @abstractmethod
    def with_start(self, start: Temporal) -> "AnyInterval":
        pass

    @abstractmethod
    def with_end(self, end: Temporal) -> "AnyInterval":
        pass

    @abstractmethod
    def with_duration(self, duration: Duration) -> "AnyInterval":
        pass

    @abstractmethod
    def with_repetition(self, repetition: int) -> "AnyInterval":
        pass

    def to_start_duration(self) -> "StartDurationInterval":
        from calspan.conversions import to_start_duration

        return to_start_duration(self)  # type: ignore[arg-type]

    def to_duration_only(self) -> "DurationInterval":
        from calspan.conversions import to_duration_only

        return to_duration_only(self)  # type: ignore[arg-type]

    def to_duration_end(self) -> "DurationEndInterval":
        from calspan.conversions import to_duration_end

        return to_duration_end(self)  # type: ignore[arg-type]

    def to_start_end(self) -> "StartEndInterval":
        from calspan.conversions import to_start_end

        return to_start_end(self)  # type: ignore[arg-type]

    @abstractmethod
    def to_string(self, omit_unit_repetition: bool | None = None) -> str:
        pass

    def __str__(self) -> str:
        return self.to_string()

    def _require_finite(self, what: str) -> None:
        if self.is_infinite:
            raise UnboundedRepetitionError(what)


@dataclass(frozen=True, kw_only=True)
class StartDurationInterval(BaseInterval):
    """An interval anchored at ``start`` that runs forward.

    ``end`` is the end of the first occurrence; ``end_with_repetition`` the
    end of the last one.
    """

    start: Temporal
    duration: Duration
    repetition: int = 0

    def __post_init__(self) -> None:
        _check_temporal(self.start, "start")
        _check_duration(self.duration)
        _check_repetition(self.repetition)

    @classmethod
    def starting_now(
        cls,
        duration: Duration,
        repetition: int = 0,
        zone: tzinfo | None = None,
        clock: Clock | None = None,
    ) -> "StartDurationInterval":
        return cls(start=now(zone, clock), duration=duration, repetition=repetition)

    @property
    def start_with_repetition(self) -> Temporal:
        return self.start

    @property
    def end(self) -> Temporal:
        return self.duration.add_to(self.start)

    @property
    def end_with_repetition(self) -> Temporal:
        self._require_finite("end_with_repetition")
        return _chain_forward(self.start, self.duration, self.repetition + 1)

    @property
    @override
    def duration_with_repetition(self) -> Duration:
        self._require_finite("duration_with_repetition")
        return Duration.between(self.start, self.end_with_repetition)

    @override
    def occurrences(self) -> Iterator["StartEndInterval"]:
        return _forward_occurrences(self.start, self.duration, self.repetition)

    @override
    def with_start(self, start: Temporal) -> "StartDurationInterval":
        """Move the start, keeping the end of the first occurrence fixed."""
        return replace(self, start=start, duration=Duration.between(start, self.end))

    @override
    def with_end(self, end: Temporal) -> "StartDurationInterval":
        """Move the end of the first occurrence, keeping the start fixed."""
        return replace(self, duration=Duration.between(self.start, end))

    @override
    def with_duration(self, duration: Duration) -> "StartDurationInterval":
        return replace(self, duration=duration)

    @override
    def with_repetition(self, repetition: int) -> "StartDurationInterval":
        return replace(self, repetition=repetition)

    @override
    def to_string(self, omit_unit_repetition: bool | None = None) -> str:
        return format_interval(
            self.repetition,
            self.start,
            self.duration,
            omit_unit_repetition=omit_unit_repetition,
        )


@dataclass(frozen=True, kw_only=True)
class DurationInterval(BaseInterval):
    """A repeated span that is not positioned in time.

    Anything that needs a point in time raises InvalidReferenceError; use
    with_start() or with_end() to anchor it.
    """

    duration: Duration
    repetition: int = 0

    def __post_init__(self) -> None:
        _check_duration(self.duration)
        _check_repetition(self.repetition)

    @property
    def start(self) -> Temporal:
        raise _unanchored("start")

    @property
    def start_with_repetition(self) -> Temporal:
        raise _unanchored("start_with_repetition")

    @property
    def end(self) -> Temporal:
        raise _unanchored("end")

    @property
    def end_with_repetition(self) -> Temporal:
        raise _unanchored("end_with_repetition")

    @property
    @override
    def duration_with_repetition(self) -> Duration:
        """Total span of every occurrence.

        Exact spans scale linearly. Calendar spans do not (months differ in
        length), so they need an anchor.
        """
        self._require_finite("duration_with_repetition")
        if not self.duration.is_exact:
            raise InvalidReferenceError(
                f"Cannot total the calendar span {self.duration} over "
                f"{self.repetition + 1} occurrences without an anchor.\n"
                f"Hint: Anchor the interval first:\n"
                f"  interval.with_start(datetime(2025, 1, 31)).duration_with_repetition"
            )
        return self.duration * (self.repetition + 1)

    @override
    def contains(self, point: Any, consider_repetition: bool = True) -> bool:
        raise _unanchored("contains")

    @override
    def occurrences(self) -> Iterator["StartEndInterval"]:
        raise _unanchored("occurrences")

    @override
    def with_start(self, start: Temporal) -> "StartDurationInterval":
        return StartDurationInterval(
            start=start, duration=self.duration, repetition=self.repetition
        )

    @override
    def with_end(self, end: Temporal) -> "DurationEndInterval":
        return DurationEndInterval(
            duration=self.duration, end=end, repetition=self.repetition
        )

    @override
    def with_duration(self, duration: Duration) -> "DurationInterval":
        return replace(self, duration=duration)

    @override
    def with_repetition(self, repetition: int) -> "DurationInterval":
        return replace(self, repetition=repetition)

    @override
    def to_string(self, omit_unit_repetition: bool | None = None) -> str:
        return format_interval(
            self.repetition, self.duration, omit_unit_repetition=omit_unit_repetition
        )


@dataclass(frozen=True, kw_only=True)
class DurationEndInterval(BaseInterval):
    """An interval that finishes at ``end`` and runs backward.

    ``start`` is the start of the last occurrence; ``start_with_repetition``
    the start of the first one.
    """

    duration: Duration
    end: Temporal
    repetition: int = 0

    def __post_init__(self) -> None:
        _check_duration(self.duration)
        _check_temporal(self.end, "end")
        _check_repetition(self.repetition)

    @classmethod
    def ending_now(
        cls,
        duration: Duration,
        repetition: int = 0,
        zone: tzinfo | None = None,
        clock: Clock | None = None,
    ) -> "DurationEndInterval":
        return cls(duration=duration, end=now(zone, clock), repetition=repetition)

    @property
    def start(self) -> Temporal:
        return self.duration.subtract_from(self.end)

    @property
    def start_with_repetition(self) -> Temporal:
        self._require_finite("start_with_repetition")
        return _chain_backward(self.end, self.duration, self.repetition + 1)

    @property
    def end_with_repetition(self) -> Temporal:
        self._require_finite("end_with_repetition")
        return self.end

    @property
    @override
    def duration_with_repetition(self) -> Duration:
        self._require_finite("duration_with_repetition")
        return Duration.between(self.start_with_repetition, self.end)

    @override
    def occurrences(self) -> Iterator["StartEndInterval"]:
        self._require_finite("occurrences")
        bounds = [self.end]
        for _ in range(self.repetition + 1):
            bounds.append(self.duration.subtract_from(bounds[-1]))
        bounds.reverse()
        return (
            StartEndInterval(start=lo, end=hi) for lo, hi in zip(bounds, bounds[1:])
        )

    @override
    def with_start(self, start: Temporal) -> "DurationEndInterval":
        """Move the start of the last occurrence, keeping the end fixed."""
        return replace(self, duration=Duration.between(start, self.end))

    @override
    def with_end(self, end: Temporal) -> "DurationEndInterval":
        """Move the end, keeping the start of the last occurrence fixed."""
        return replace(self, duration=Duration.between(self.start, end), end=end)

    @override
    def with_duration(self, duration: Duration) -> "DurationEndInterval":
        return replace(self, duration=duration)

    @override
    def with_repetition(self, repetition: int) -> "DurationEndInterval":
        return replace(self, repetition=repetition)

    @override
    def to_string(self, omit_unit_repetition: bool | None = None) -> str:
        return format_interval(
            self.repetition,
            self.duration,
            self.end,
            omit_unit_repetition=omit_unit_repetition,
        )


@dataclass(frozen=True, kw_only=True)
class StartEndInterval(BaseInterval):
    """A single occurrence between two points in time."""

    start: Temporal
    end: Temporal

    def __post_init__(self) -> None:
        _check_temporal(self.start, "start")
        _check_temporal(self.end, "end")

    @property
    def repetition(self) -> int:  # type: ignore[override]
        return 0

    @property
    def duration(self) -> Duration:  # type: ignore[override]
        return Duration.between(self.start, self.end)

    @property
    def start_with_repetition(self) -> Temporal:
        return self.start

    @property
    def end_with_repetition(self) -> Temporal:
        return self.end

    @property
    @override
    def duration_with_repetition(self) -> Duration:
        return self.duration

    @override
    def occurrences(self) -> Iterator["StartEndInterval"]:
        return iter((self,))

    @override
    def with_start(self, start: Temporal) -> "StartEndInterval":
        return replace(self, start=start)

    @override
    def with_end(self, end: Temporal) -> "StartEndInterval":
        return replace(self, end=end)

    @override
    def with_duration(self, duration: Duration) -> "StartEndInterval":
        """Keep the start and move the end to ``start + duration``."""
        return replace(self, end=duration.add_to(self.start))

    @override
    def with_repetition(self, repetition: int) -> "StartDurationInterval":
        """Repeat this span: the result is a start+duration interval."""
        return StartDurationInterval(
            start=self.start, duration=self.duration, repetition=repetition
        )

    @override
    def to_string(self, omit_unit_repetition: bool | None = None) -> str:
        return format_interval(None, self.start, self.end)


def interval_of(
    *,
    start: Temporal | None = None,
    end: Temporal | None = None,
    duration: Duration | None = None,
    repetition: int | None = None,
) -> "AnyInterval":
    """Build the interval shape that matches the fields given.

    Args:
        start: Anchor of the first occurrence
        end: Terminal point of the last occurrence
        duration: Span of one occurrence
        repetition: Additional occurrences (-1 for unbounded). Defaults to 0.

    Returns:
        StartDurationInterval, DurationEndInterval, DurationInterval or
        StartEndInterval

    Raises:
        InvalidStateError: If the fields over- or under-determine the shape

    Examples:
        >>> interval_of(start=date(2025, 1, 31), duration=Duration(months=1))
        >>> interval_of(duration=Duration(days=1), repetition=-1)
        >>> interval_of(start=date(2025, 1, 1), end=date(2025, 2, 1))
    """
    given = (start is not None, end is not None, duration is not None)
    count = 0 if repetition is None else repetition
    match given:
        case (True, False, True):
            return StartDurationInterval(start=start, duration=duration, repetition=count)  # type: ignore[arg-type]
        case (False, True, True):
            return DurationEndInterval(duration=duration, end=end, repetition=count)  # type: ignore[arg-type]
        case (False, False, True):
            return DurationInterval(duration=duration, repetition=count)  # type: ignore[arg-type]
        case (True, True, False) if count == 0:
            return StartEndInterval(start=start, end=end)  # type: ignore[arg-type]
        case (True, True, False):
            return StartDurationInterval(
                start=start,  # type: ignore[arg-type]
                duration=Duration.between(start, end),  # type: ignore[arg-type]
                repetition=count,
            )
    raise InvalidStateError(
        f"Cannot build an interval from "
        f"start={start!r}, end={end!r}, duration={duration!r}.\n"
        f"Give exactly two of start/end/duration, or a duration alone."
    )


def _check_repetition(repetition: Any) -> None:
    if isinstance(repetition, bool) or not isinstance(repetition, int):
        raise InvalidStateError(
            f"Repetition must be an int, got {type(repetition).__name__!r}: "
            f"{repetition!r}"
        )
    if repetition < INFINITE:
        raise InvalidStateError(
            f"Repetition must be >= -1, got {repetition}.\n"
            f"Use 0 for a single occurrence, n for n extra occurrences, "
            f"-1 for unbounded repetition"
        )


def _check_temporal(point: Any, name: str) -> None:
    if not isinstance(point, (datetime, date, time)):
        raise TypeError(
            f"Interval {name} must be a datetime, date or time.\n"
            f"Got {type(point).__name__!r}: {point!r}"
        )


def _check_duration(duration: Any) -> None:
    if not isinstance(duration, Duration):
        raise TypeError(
            f"Interval duration must be a Duration.\n"
            f"Got {type(duration).__name__!r}: {duration!r}\n"
            f"Hint: Duration.of(days=1), Duration.parse('P1D')"
        )


def _unanchored(what: str) -> InvalidReferenceError:
    return InvalidReferenceError(
        f"A duration-only interval has no position in time, so it has no {what}.\n"
        f"Hint: Anchor it with with_start(point) or with_end(point)"
    )


def _chain_forward(anchor: Any, duration: Duration, times: int) -> Any:
    """Apply ``duration`` ``times`` times, each step from the previous result."""
    logger.debug("Chaining %s forward %d times from %s", duration, times, anchor)
    point = anchor
    for _ in range(times):
        point = duration.add_to(point)
    return point


def _chain_backward(anchor: Any, duration: Duration, times: int) -> Any:
    logger.debug("Chaining %s backward %d times from %s", duration, times, anchor)
    point = anchor
    for _ in range(times):
        point = duration.subtract_from(point)
    return point


def _forward_occurrences(
    anchor: Temporal, duration: Duration, repetition: int
) -> Iterator[StartEndInterval]:
    remaining = repetition + 1
    current = anchor
    while repetition == INFINITE or remaining > 0:
        following = duration.add_to(current)
        yield StartEndInterval(start=current, end=following)
        current = following
        remaining -= 1
