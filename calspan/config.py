from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, kw_only=True)
class Defaults:
    """Default values used when a caller does not pass one explicitly.

    Attributes:
        reference: Anchor used to order durations that carry calendar
            components when no reference instant is given
        omit_unit_repetition: Drop the ``R1/`` prefix when rendering intervals
        group_weeks: Render whole weeks of a duration with the ``W`` designator
    """

    reference: datetime = field(default_factory=lambda: datetime(1970, 1, 1))
    omit_unit_repetition: bool = True
    group_weeks: bool = True


DEFAULTS = Defaults()
