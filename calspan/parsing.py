import logging

from calspan.conversions import AnyInterval
from calspan.duration import Duration
from calspan.errors import MalformedInputError
from calspan.formatting import parse_temporal
from calspan.interval import (
    INFINITE,
    DurationEndInterval,
    DurationInterval,
    StartDurationInterval,
    StartEndInterval,
)

logger = logging.getLogger(__name__)


def parse_interval(text: str) -> AnyInterval:
    """Parse any text produced by ``str(interval)``.

    The shape follows the parts:

    - ``P1D``: DurationInterval
    - ``2025-01-01/P1D``: StartDurationInterval
    - ``P1D/2025-01-01``: DurationEndInterval
    - ``2025-01-01/2025-02-01``: StartEndInterval

    An ``R<n>/`` prefix sets the repetition (``R/`` is unbounded). Without a
    prefix the repeated shapes get repetition 1, not 0: rendering omits
    ``R1/``, and reading it back as 1 keeps ``parse_interval(str(iv)) == iv``.
    Text from sources that mean a single occurrence when the prefix is
    missing needs an explicit ``R0/``. Two temporals with a prefix become a
    StartDurationInterval over the span between them.

    Raises:
        MalformedInputError: If the text is not an interval
    """
    parts = [part.strip() for part in text.strip().split("/")]

    repetition: int | None = None
    if parts and parts[0].startswith("R"):
        repetition = _parse_repetition(parts.pop(0), text)

    if not parts or len(parts) > 2 or any(not part for part in parts):
        raise _malformed(text, "expected one or two parts after the repetition")

    count = 1 if repetition is None else repetition

    if len(parts) == 1:
        if not _is_duration(parts[0]):
            raise _malformed(text, "a single part must be a duration")
        return DurationInterval(duration=Duration.parse(parts[0]), repetition=count)

    first, second = parts
    if _is_duration(first) and _is_duration(second):
        raise _malformed(text, "two durations do not position an interval")
    if _is_duration(first):
        return DurationEndInterval(
            duration=Duration.parse(first),
            end=parse_temporal(second),
            repetition=count,
        )
    if _is_duration(second):
        return StartDurationInterval(
            start=parse_temporal(first),
            duration=Duration.parse(second),
            repetition=count,
        )

    start, end = parse_temporal(first), parse_temporal(second)
    if repetition is None:
        return StartEndInterval(start=start, end=end)
    logger.debug("Repeated start/end text %r read as start+duration", text)
    return StartDurationInterval(
        start=start, duration=Duration.between(start, end), repetition=repetition
    )


def _parse_repetition(head: str, text: str) -> int:
    digits = head[1:]
    if not digits:
        return INFINITE
    if digits == "-1":
        return INFINITE
    if not (digits.isascii() and digits.isdigit()):
        raise _malformed(text, f"invalid repetition {head!r}")
    return int(digits)


def _is_duration(part: str) -> bool:
    return part.lstrip("+-").startswith("P")


def _malformed(text: str, reason: str) -> MalformedInputError:
    logger.debug("Rejected interval text %r: %s", text, reason)
    return MalformedInputError(
        f"Invalid interval: {text!r} ({reason})\n"
        f"Expected e.g. 'R3/2025-01-01/P1D', 'R/P1M', 'P1D/2025-01-31' "
        f"or '2025-01-01/2025-02-01'"
    )
