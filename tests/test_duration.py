"""Tests for the Duration value type."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from dateutil.relativedelta import relativedelta

from calspan import (
    ZERO,
    Duration,
    InvalidReferenceError,
    InvalidStateError,
    MalformedInputError,
    TemporalUnit,
    UnsupportedUnitError,
)
from calspan.units import DAY, HOUR, MILLISECOND, MINUTE, SECOND

ROME = ZoneInfo("Europe/Rome")


def test_of_folds_units():
    """Years fold into months, weeks into days, the rest into nanos."""
    d = Duration.of(
        years=1, months=2, weeks=1, days=3, hours=4, minutes=5, seconds=6, millis=7
    )

    assert d == Duration(
        months=14,
        days=10,
        nanos=4 * HOUR + 5 * MINUTE + 6 * SECOND + 7 * MILLISECOND,
    )


def test_components_must_be_ints():
    """Floats and bools are rejected at construction."""
    with pytest.raises(TypeError, match="must be an int"):
        Duration(days=1.5)  # type: ignore[arg-type]

    with pytest.raises(TypeError, match="must be an int"):
        Duration(months=True)


def test_equality_is_structural():
    """One calendar day and 24 exact hours are different values."""
    assert Duration(days=1) != Duration.of(hours=24)
    assert Duration(days=1).compare(Duration.of(hours=24)) == 0
    assert len({Duration(days=1), Duration.of(days=1)}) == 1


def test_arithmetic_is_component_wise():
    """Calendar parts never collapse into nanos when combining durations."""
    d1 = Duration.of(months=1, days=3, hours=2)
    d2 = Duration.of(years=1, minutes=-30)

    assert d1 + d2 == Duration(months=13, days=3, nanos=2 * HOUR - 30 * MINUTE)
    assert d1.plus(d2) == d1 + d2
    assert d1 - d2 == d1.minus(d2)
    assert (d1 + d2) - d2 == d1


def test_negation_and_scaling():
    """Unary minus, abs and integer scaling act on every component."""
    d = Duration(months=1, nanos=5)

    assert -d == Duration(months=-1, nanos=-5)
    assert +d is d
    assert abs(-d) == d
    assert Duration(months=1) * 2 == Duration(months=2)
    assert 3 * Duration(days=1) == Duration(days=3)

    with pytest.raises(TypeError):
        Duration(days=1) * 1.5  # type: ignore[operator]


def test_add_to_clamps_to_end_of_month():
    """January 31 + 1 month lands on the last day of February."""
    assert Duration(months=1).add_to(date(2025, 1, 31)) == date(2025, 2, 28)
    assert Duration(months=1).add_to(datetime(2024, 1, 31)) == datetime(2024, 2, 29)


def test_add_to_applies_calendar_before_exact():
    """The month step happens before the hour step."""
    d = Duration.of(months=1, hours=1)

    # Jan 30 23:30 -> Feb 28 23:30 -> Mar 1 00:30
    assert d.add_to(datetime(2025, 1, 30, 23, 30)) == datetime(2025, 3, 1, 0, 30)


def test_subtract_from_inverts_add_to():
    """Subtracting undoes adding when no month-end clamp happened."""
    d = Duration.of(months=2, days=3, hours=5)
    point = datetime(2025, 3, 15, 10)

    assert d.add_to(point) == datetime(2025, 5, 18, 15)
    assert d.subtract_from(d.add_to(point)) == point


def test_subtract_from_after_clamp_loses_days():
    """The end-of-month clamp is not reversible."""
    month = Duration(months=1)

    assert month.subtract_from(month.add_to(date(2025, 1, 31))) == date(2025, 1, 28)


def test_date_ignores_exact_component():
    """Only calendar components apply to a date."""
    assert Duration.of(days=1, hours=5).add_to(date(2025, 1, 1)) == date(2025, 1, 2)


def test_time_wraps_around_midnight():
    """Only the exact component applies to a time of day."""
    d = Duration.of(months=1, hours=2)

    assert d.add_to(time(23, 0)) == time(1, 0)
    assert d.subtract_from(time(1, 0)) == time(23, 0)


def test_sub_microsecond_nanos_are_truncated():
    """datetime stops at microseconds, so nanos below that are dropped."""
    point = datetime(2025, 1, 1)

    assert Duration.of(nanos=999).add_to(point) == point
    assert Duration.of(micros=1, nanos=999).add_to(point) == point + timedelta(
        microseconds=1
    )


def test_add_to_rejects_non_temporals():
    """Only datetime, date and time points are accepted."""
    with pytest.raises(TypeError, match="Expected a datetime, date or time"):
        Duration(days=1).add_to("2025-01-01")  # type: ignore[type-var]


def test_exact_component_counts_elapsed_time_across_dst():
    """Hours are elapsed time; days keep the wall clock."""
    # Rome switches from CET to CEST at 02:00 on 2025-03-30
    start = datetime(2025, 3, 30, 1, 0, tzinfo=ROME)

    assert Duration.of(hours=2).add_to(start) == datetime(2025, 3, 30, 4, 0, tzinfo=ROME)
    assert Duration(days=1).add_to(start) == datetime(2025, 3, 31, 1, 0, tzinfo=ROME)
    assert Duration(days=1).to_nanos(start) == 23 * HOUR


def test_between_is_largest_unit_first():
    """Months are taken before days, days before the exact remainder."""
    assert Duration.between(date(2025, 1, 31), date(2025, 3, 28)) == Duration(
        months=1, days=28
    )
    assert Duration.between(datetime(2025, 1, 1, 10), datetime(2025, 1, 2, 9)) == (
        Duration.of(hours=23)
    )


def test_between_round_trips_through_add_to():
    """between(a, b).add_to(a) == b for awkward pairs."""
    pairs = [
        (datetime(2025, 1, 31, 12), datetime(2025, 3, 1, 8)),
        (datetime(2025, 3, 1), datetime(2025, 1, 31)),
        (date(2024, 2, 29), date(2025, 2, 28)),
        (datetime(2025, 3, 29, 12, tzinfo=ROME), datetime(2025, 3, 30, 12, tzinfo=ROME)),
        (
            datetime(2025, 3, 29, 12, tzinfo=ROME),
            datetime(2025, 4, 2, 3, tzinfo=timezone.utc),
        ),
    ]

    for start, end in pairs:
        assert Duration.between(start, end).add_to(start) == end


def test_between_end_of_month_components():
    """A negative span is decomposed with negative components."""
    assert Duration.between(datetime(2025, 1, 31, 12), datetime(2025, 3, 1, 8)) == (
        Duration(months=1, nanos=20 * HOUR)
    )
    assert Duration.between(date(2025, 3, 1), date(2025, 1, 31)) == Duration(
        months=-1, days=-1
    )


def test_between_across_dst_is_one_calendar_day():
    """Noon to noon across the DST change is one day, not 23 hours."""
    start = datetime(2025, 3, 29, 12, tzinfo=ROME)
    end = datetime(2025, 3, 30, 12, tzinfo=ROME)

    assert Duration.between(start, end) == Duration(days=1)


def test_between_mixed_and_time_operands():
    """Dates meet datetimes at midnight; times give exact spans."""
    assert Duration.between(date(2025, 1, 1), datetime(2025, 1, 1, 6)) == (
        Duration.of(hours=6)
    )
    assert Duration.between(time(22), time(1)) == Duration.of(hours=-21)

    with pytest.raises(TypeError, match="naive and aware"):
        Duration.between(datetime(2025, 1, 1), datetime(2025, 1, 2, tzinfo=ROME))

    with pytest.raises(TypeError, match="time of day and a date"):
        Duration.between(time(1), date(2025, 1, 1))


def test_since_and_until_use_the_clock():
    """A fixed clock stands in for the system time."""
    clock = lambda: datetime(2025, 3, 1, 12)  # noqa: E731

    assert Duration.since(datetime(2025, 1, 31, 12), clock=clock) == Duration(
        months=1, days=1
    )
    assert Duration.until(datetime(2025, 3, 2, 12), clock=clock) == Duration(days=1)
    assert Duration.since(date(2025, 2, 19), clock=clock) == Duration(days=10)


def test_to_millis_exact():
    """Exact durations need no reference."""
    assert Duration.of(seconds=1, millis=500).to_millis() == 1500
    assert Duration.of(minutes=-1, seconds=-1).to_seconds() == -61


def test_to_millis_with_calendar_needs_reference():
    """Calendar components only have a length relative to a point."""
    with pytest.raises(InvalidReferenceError, match="Pass a reference"):
        Duration(months=1).to_millis()

    with pytest.raises(InvalidReferenceError):
        Duration(days=1).to_nanos(time(12))

    assert Duration(months=1).to_millis(datetime(2025, 2, 1)) == 28 * DAY // MILLISECOND
    assert Duration(months=1).to_millis(date(2024, 2, 1)) == 29 * DAY // MILLISECOND


def test_get_fields():
    """get() follows the field accessor pattern, largest unit first."""
    d = Duration.of(
        years=2,
        months=3,
        days=10,
        hours=26,
        minutes=7,
        seconds=8,
        millis=9,
        micros=10,
        nanos=11,
    )

    assert d.get(TemporalUnit.YEARS) == 2
    assert d.get(TemporalUnit.MONTHS) == 3
    assert d.get(TemporalUnit.DAYS) == 10
    assert d.get(TemporalUnit.HOURS) == 26
    assert d.get(TemporalUnit.MINUTES) == 7
    assert d.get(TemporalUnit.SECONDS) == 8
    assert d.get(TemporalUnit.MILLIS) == 9
    assert d.get(TemporalUnit.MICROS) == 9_010
    assert d.get(TemporalUnit.NANOS) == 9_010_011
    assert d.get("months") == 3


def test_get_preserves_sign():
    """Negative durations give negative fields."""
    d = Duration.of(hours=-1, minutes=-30)

    assert d.get(TemporalUnit.HOURS) == -1
    assert d.get(TemporalUnit.MINUTES) == -30


def test_get_unsupported_unit():
    """Units a Duration does not carry raise instead of returning zero."""
    with pytest.raises(UnsupportedUnitError, match="WEEKS"):
        Duration(days=14).get(TemporalUnit.WEEKS)

    with pytest.raises(UnsupportedUnitError, match="fortnights"):
        Duration(days=14).get("fortnights")

    with pytest.raises(ValueError):
        Duration().get(TemporalUnit.DECADES)


def test_units_are_ordered_largest_first():
    """units lists exactly what get() accepts."""
    units = Duration().units

    assert units[0] is TemporalUnit.YEARS
    assert units[-1] is TemporalUnit.NANOS
    assert TemporalUnit.WEEKS not in units
    for unit in units:
        Duration().get(unit)


def test_compare_exact_and_calendar():
    """Calendar durations are resolved at the default reference (1970-01-01)."""
    assert Duration.of(nanos=5) < Duration.of(nanos=6)
    assert Duration(days=1) > Duration.of(hours=23)
    # January 1970 has 31 days
    assert Duration(months=1) > Duration(days=30)
    # February 2025 has 28
    assert Duration(months=1).compare(Duration(days=30), datetime(2025, 2, 1)) == -1
    assert Duration(months=1) >= Duration(days=31)


def test_predicates():
    """is_zero, is_exact and is_negative."""
    assert ZERO.is_zero
    assert Duration.of(hours=1).is_exact
    assert not Duration(days=1).is_exact
    assert Duration(nanos=-1).is_negative
    assert Duration(months=1, days=-40).is_negative
    assert not Duration(months=1, days=-20).is_negative


def test_timedelta_and_relativedelta_bridges():
    """Conversions to and from the standard and dateutil delta types."""
    assert Duration.of(hours=1, micros=5).to_timedelta() == timedelta(
        hours=1, microseconds=5
    )
    assert Duration.from_timedelta(timedelta(days=1, seconds=3)) == Duration(
        nanos=DAY + 3 * SECOND
    )
    assert Duration.of(months=14, days=3).to_relativedelta() == relativedelta(
        years=1, months=2, days=3
    )
    assert Duration.from_relativedelta(
        relativedelta(years=1, weeks=1, hours=2)
    ) == Duration.of(years=1, days=7, hours=2)

    with pytest.raises(InvalidReferenceError):
        Duration(days=1).to_timedelta()

    with pytest.raises(InvalidStateError, match="absolute fields"):
        Duration.from_relativedelta(relativedelta(day=31))


def test_relativedelta_keeps_exact_part_under_a_day():
    """Elapsed hours never turn into calendar days on the way through relativedelta."""
    short = Duration.of(days=3, hours=23, micros=7)
    assert Duration.from_relativedelta(short.to_relativedelta()) == short

    with pytest.raises(InvalidStateError, match="a day or more"):
        Duration.of(hours=25).to_relativedelta()
    with pytest.raises(InvalidStateError):
        Duration(months=1, nanos=-DAY).to_relativedelta()


def test_totals_of_exact_durations():
    """Whole units are counted toward zero and need no reference."""
    d = Duration.of(hours=50, minutes=30)

    assert d.to_days() == 2
    assert d.to_hours() == 50
    assert d.to_minutes() == 3030
    assert d.to_micros() == 181_800_000_000
    assert d.total("half_days") == 4
    assert Duration.of(hours=-25).to_days() == -1


def test_totals_of_calendar_durations():
    """Calendar parts are measured from the reference."""
    assert Duration(months=1).to_days(date(2025, 2, 1)) == 28
    assert Duration(months=1).to_hours(datetime(2024, 2, 1)) == 29 * 24
    assert Duration.of(weeks=3, days=2).total(TemporalUnit.WEEKS, date(2025, 1, 1)) == 3

    # Spring forward: one calendar day of 23 hours
    night = datetime(2025, 3, 30, tzinfo=ROME)
    assert Duration(days=1).to_days(night) == 1
    assert Duration(days=1).to_hours(night) == 23

    with pytest.raises(InvalidReferenceError):
        Duration(days=1).to_days()
    with pytest.raises(UnsupportedUnitError, match="Supported units: WEEKS"):
        Duration.of(hours=1).total(TemporalUnit.MONTHS)


def test_truncated_to():
    """Fields smaller than the unit are dropped, signs are kept."""
    d = Duration.of(years=1, months=14, days=3, hours=4, minutes=5, seconds=6, millis=789)

    assert d.truncated_to(TemporalUnit.YEARS) == Duration(months=24)
    assert d.truncated_to(TemporalUnit.MONTHS) == Duration(months=26)
    assert d.truncated_to(TemporalUnit.DAYS) == Duration(months=26, days=3)
    assert d.truncated_to(TemporalUnit.HOURS) == Duration.of(months=26, days=3, hours=4)
    assert d.truncated_to(TemporalUnit.SECONDS) == Duration.of(
        months=26, days=3, hours=4, minutes=5, seconds=6
    )
    assert d.truncated_to("millis") == d

    assert Duration(months=-14).truncated_to(TemporalUnit.YEARS) == Duration(months=-12)
    assert Duration.of(hours=-1, minutes=-30).truncated_to(
        TemporalUnit.HOURS
    ) == Duration.of(hours=-1)

    with pytest.raises(UnsupportedUnitError):
        d.truncated_to(TemporalUnit.WEEKS)


def test_plus_and_minus_unit():
    """A single unit is added the way Duration.of() folds it."""
    assert ZERO.plus_unit(1, TemporalUnit.YEARS) == Duration(months=12)
    assert Duration(days=1).plus_unit(2, "weeks") == Duration(days=15)
    assert Duration.of(hours=1).minus_unit(90, TemporalUnit.MINUTES) == Duration.of(
        minutes=-30
    )

    with pytest.raises(UnsupportedUnitError, match="HALF_DAYS"):
        ZERO.plus_unit(1, TemporalUnit.HALF_DAYS)
    with pytest.raises(UnsupportedUnitError, match="fortnights"):
        ZERO.plus_unit(1, "fortnights")



def test_to_iso():
    """ISO-8601 rendering with week grouping and fractional seconds."""
    d = Duration.of(
        years=1, months=2, days=3, hours=4, minutes=5, seconds=6, millis=500
    )

    assert str(d) == "P1Y2M3DT4H5M6.5S"
    assert str(ZERO) == "PT0S"
    assert str(Duration(days=10)) == "P1W3D"
    assert Duration(days=10).to_iso(weeks=False) == "P10D"
    assert str(Duration.of(nanos=1)) == "PT0.000000001S"


def test_to_iso_signs():
    """Wholly negative durations get one leading sign; mixed ones per component."""
    assert str(-Duration.of(days=1, hours=2)) == "-P1DT2H"
    assert str(Duration.of(seconds=-1, millis=-500)) == "-PT1.5S"
    assert str(Duration(months=1, days=-2)) == "P1M-2D"
    assert str(Duration(months=1, nanos=-500_000_000)) == "P1MT-0.5S"


def test_parse():
    """The ISO forms above parse back, along with a few other spellings."""
    assert Duration.parse("P1Y2M3DT4H5M6.5S") == Duration.of(
        years=1, months=2, days=3, hours=4, minutes=5, seconds=6, millis=500
    )
    assert Duration.parse("P2W") == Duration(days=14)
    assert Duration.parse("-P1DT2H") == -Duration.of(days=1, hours=2)
    assert Duration.parse("P1M-2D") == Duration(months=1, days=-2)
    assert Duration.parse("PT-0.5S") == Duration(nanos=-500_000_000)
    assert Duration.parse("PT0,25S") == Duration.of(millis=250)
    assert Duration.parse("") == ZERO


def test_parse_inverts_str():
    """str() output parses back to an equal duration."""
    durations = [
        ZERO,
        Duration(days=10),
        Duration.of(years=3, hours=1, nanos=1),
        Duration(months=1, nanos=-500_000_000),
        -Duration.of(weeks=2, minutes=90),
    ]

    for d in durations:
        assert Duration.parse(str(d)) == d


@pytest.mark.parametrize("text", ["1D", "P", "PT", "P1DT", "PTS", "P1.5D", "garbage"])
def test_parse_malformed(text):
    """Anything that is not an ISO duration is rejected."""
    with pytest.raises(MalformedInputError, match="Invalid ISO-8601 duration"):
        Duration.parse(text)
