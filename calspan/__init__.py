from .clock import now
from .config import DEFAULTS, Defaults
from .conversions import (
    AnyInterval,
    RepeatedInterval,
    to_duration_end,
    to_duration_only,
    to_start_duration,
    to_start_end,
)
from .duration import ZERO, Duration
from .errors import (
    CalspanError,
    InvalidReferenceError,
    InvalidStateError,
    MalformedInputError,
    UnboundedRepetitionError,
    UnsupportedUnitError,
)
from .formatting import format_interval, format_temporal, parse_temporal
from .interval import (
    INFINITE,
    BaseInterval,
    DurationEndInterval,
    DurationInterval,
    StartDurationInterval,
    StartEndInterval,
    interval_of,
)
from .parsing import parse_interval
from .units import TemporalUnit

__all__ = [
    "Duration",
    "ZERO",
    "TemporalUnit",
    "BaseInterval",
    "StartDurationInterval",
    "DurationInterval",
    "DurationEndInterval",
    "StartEndInterval",
    "AnyInterval",
    "RepeatedInterval",
    "INFINITE",
    "interval_of",
    "to_start_duration",
    "to_duration_only",
    "to_duration_end",
    "to_start_end",
    "format_interval",
    "format_temporal",
    "parse_temporal",
    "parse_interval",
    "now",
    "Defaults",
    "DEFAULTS",
    "CalspanError",
    "UnboundedRepetitionError",
    "UnsupportedUnitError",
    "InvalidReferenceError",
    "InvalidStateError",
    "MalformedInputError",
]
