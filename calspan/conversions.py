"""Conversions between the four interval shapes.

The set of shapes is closed, so each target has one function that matches on
the source shape. Converting a shape to itself returns the same object.

Conversions between the repeated shapes carry the repetition over, so the
terminal point (or anchor) of the whole run is needed and repetition -1 raises
UnboundedRepetitionError. A StartEndInterval has no repetition: converting to
it keeps one occurrence next to the stored anchor (``start``/``end``), and
converting out of it gives repetition 0. Conversions out of a DurationInterval
raise InvalidReferenceError: it has no position to carry over, use
with_start() or with_end() instead.

Round trips reproduce start, end and duration, and the repetition wherever the
path does not pass through a StartEndInterval, as long as the repetition is
finite and no end-of-month clamp happens on the way. A clamp loses
information: 2025-01-31 + 1 month is 2025-02-28, and 2025-02-28 - 1 month is
2025-01-28.
"""

from typing import TypeAlias

from calspan.errors import InvalidReferenceError
from calspan.interval import (
    DurationEndInterval,
    DurationInterval,
    StartDurationInterval,
    StartEndInterval,
)

AnyInterval: TypeAlias = (
    StartDurationInterval | DurationInterval | DurationEndInterval | StartEndInterval
)
RepeatedInterval: TypeAlias = (
    StartDurationInterval | DurationInterval | DurationEndInterval
)


def to_start_duration(interval: AnyInterval) -> StartDurationInterval:
    match interval:
        case StartDurationInterval():
            return interval
        case DurationEndInterval():
            return StartDurationInterval(
                start=interval.start_with_repetition,
                duration=interval.duration,
                repetition=interval.repetition,
            )
        case StartEndInterval():
            return StartDurationInterval(
                start=interval.start, duration=interval.duration, repetition=0
            )
        case DurationInterval():
            raise _needs_anchor("StartDurationInterval")
    raise _not_an_interval(interval)


def to_duration_only(interval: AnyInterval) -> DurationInterval:
    """Drop the position in time, keeping the span and the repetition."""
    match interval:
        case DurationInterval():
            return interval
        case StartDurationInterval() | DurationEndInterval():
            return DurationInterval(
                duration=interval.duration, repetition=interval.repetition
            )
        case StartEndInterval():
            return DurationInterval(duration=interval.duration, repetition=0)
    raise _not_an_interval(interval)


def to_duration_end(interval: AnyInterval) -> DurationEndInterval:
    match interval:
        case DurationEndInterval():
            return interval
        case StartDurationInterval():
            return DurationEndInterval(
                duration=interval.duration,
                end=interval.end_with_repetition,
                repetition=interval.repetition,
            )
        case StartEndInterval():
            return DurationEndInterval(
                duration=interval.duration, end=interval.end, repetition=0
            )
        case DurationInterval():
            raise _needs_anchor("DurationEndInterval")
    raise _not_an_interval(interval)


def to_start_end(interval: AnyInterval) -> StartEndInterval:
    """Keep the single occurrence next to the stored anchor.

    That is the first occurrence of a start+duration interval and the last one
    of a duration+end interval. The repetition is dropped; use
    occurrences() to get every span.
    """
    match interval:
        case StartEndInterval():
            return interval
        case StartDurationInterval() | DurationEndInterval():
            return StartEndInterval(start=interval.start, end=interval.end)
        case DurationInterval():
            raise _needs_anchor("StartEndInterval")
    raise _not_an_interval(interval)


def _needs_anchor(target: str) -> InvalidReferenceError:
    return InvalidReferenceError(
        f"Cannot convert a DurationInterval to {target}: it has no position in time.\n"
        f"Hint: Anchor it first: interval.with_start(point) or interval.with_end(point)"
    )


def _not_an_interval(value: object) -> TypeError:
    return TypeError(
        f"Expected one of StartDurationInterval, DurationInterval, "
        f"DurationEndInterval or StartEndInterval.\n"
        f"Got {type(value).__name__!r}: {value!r}"
    )
