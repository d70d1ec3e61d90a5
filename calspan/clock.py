"""Current-time source for calspan.

The only side-effecting read in the package. Everything that needs "now"
goes through now() so tests can pass a fixed clock instead of patching.
"""

from collections.abc import Callable
from datetime import datetime, tzinfo

Clock = Callable[[], datetime]


def now(zone: tzinfo | None = None, clock: Clock | None = None) -> datetime:
    """Return the current datetime.

    Args:
        zone: Zone to express the result in. Without a zone and without a
            clock the result is a naive local datetime, as datetime.now().
        clock: Zero-argument callable returning a datetime, used instead of
            the system clock

    Returns:
        The clock reading, converted to ``zone`` when one is given

    Raises:
        TypeError: If the clock returns something other than a datetime, or a
            naive datetime that would need converting to ``zone``
    """
    if clock is None:
        return datetime.now(zone)

    reading = clock()
    if not isinstance(reading, datetime):
        raise TypeError(
            f"Clock must return a datetime.\n"
            f"Got {type(reading).__name__!r}: {reading!r}"
        )
    if zone is None:
        return reading
    if reading.tzinfo is None:
        raise TypeError(
            f"Cannot convert a naive clock reading to zone {zone!r}.\n"
            f"Got naive datetime: {reading!r}\n"
            f"Hint: Return an aware datetime from the clock:\n"
            f"  clock = lambda: datetime(..., tzinfo=timezone.utc)"
        )
    return reading.astimezone(zone)
