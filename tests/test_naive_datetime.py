import pickle
import re
from copy import copy, deepcopy

import pytest
from hypothesis import given
from hypothesis.strategies import integers, text

from tempo import (
    Date,
    DateTime,
    Duration,
    InvalidFormat,
    MissingField,
    NaiveDateTime,
    Offset,
    OutOfRange,
    Time,
    hours,
    minutes,
    seconds,
)

from .common import (
    AlwaysEqual,
    AlwaysLarger,
    AlwaysSmaller,
    NeverEqual,
    SummerTimeZone,
)


class TestInit:

    def test_all_args(self):
        d = NaiveDateTime(2020, 8, 15, 5, 12, 30, microsecond=450)
        assert d.year == 2020
        assert d.month == 8
        assert d.day == 15
        assert d.hour == 5
        assert d.minute == 12
        assert d.second == 30
        assert d.microsecond == 450
        assert d.precision == "micro"

    def test_defaults(self):
        d = NaiveDateTime(2020, 8, 15)
        assert d.time() == Time.MIDNIGHT

    def test_out_of_range(self):
        with pytest.raises(OutOfRange, match="day"):
            NaiveDateTime(2021, 2, 29)
        with pytest.raises(OutOfRange, match="hour"):
            NaiveDateTime(2021, 2, 28, 25)

    def test_special_times(self):
        assert NaiveDateTime(2016, 12, 31, 23, 59, 60).time().is_leap_second()
        assert NaiveDateTime(2016, 12, 31, 24).time().is_end_of_day()


def test_date_and_time():
    d = NaiveDateTime(2021, 1, 2, 3, 4, 5)
    assert d.date() == Date(2021, 1, 2)
    assert d.time() == Time(3, 4, 5)
    assert Date(2021, 1, 2).at(Time(3, 4, 5)) == d


class TestAdd:

    def test_crosses_midnight(self):
        d = NaiveDateTime(2024, 6, 13, 23, 50, 10)
        assert d.add(minutes=13) == NaiveDateTime(2024, 6, 14, 0, 3, 10)
        assert d + minutes(13) == NaiveDateTime(2024, 6, 14, 0, 3, 10)
        assert d.add(minutes(13)) == NaiveDateTime(2024, 6, 14, 0, 3, 10)

    def test_subtract_crosses_midnight(self):
        d = NaiveDateTime(2024, 6, 14, 0, 3, 10)
        assert d.subtract(minutes=13) == NaiveDateTime(2024, 6, 13, 23, 50, 10)
        assert d - minutes(13) == NaiveDateTime(2024, 6, 13, 23, 50, 10)
        assert d.subtract(minutes(13)) == NaiveDateTime(
            2024, 6, 13, 23, 50, 10
        )

    def test_negative_durations(self):
        d = NaiveDateTime(2024, 6, 13, 23, 50, 10)
        assert d.add(minutes(-13)) == d.subtract(minutes(13))
        assert d.subtract(hours(-1)) == NaiveDateTime(2024, 6, 14, 0, 50, 10)

    def test_calendar_units(self):
        d = NaiveDateTime(2024, 1, 31, 12)
        assert d.add(months=1) == NaiveDateTime(2024, 2, 29, 12)
        assert d.add(years=1, weeks=1) == NaiveDateTime(2025, 2, 7, 12)
        assert d.add(days=1, hours=-1) == NaiveDateTime(2024, 2, 1, 11)
        assert d.subtract(months=2) == NaiveDateTime(2023, 11, 30, 12)

    def test_many_days(self):
        d = NaiveDateTime(2024, 1, 1, 12)
        assert d + hours(24 * 366) == NaiveDateTime(2025, 1, 1, 12)
        assert d - hours(24 * 365 + 1) == NaiveDateTime(2023, 1, 1, 11)

    def test_leap_second(self):
        d = NaiveDateTime(2016, 12, 31, 23, 59, 60)
        assert d + seconds(1) == NaiveDateTime(2017, 1, 1)
        assert d - seconds(1) == NaiveDateTime(2016, 12, 31, 23, 59, 59)

    def test_end_of_day(self):
        d = NaiveDateTime(2024, 6, 13, 24)
        assert d + minutes(1) == NaiveDateTime(2024, 6, 14, 0, 1)
        assert d - minutes(1) == NaiveDateTime(2024, 6, 13, 23, 59)

    def test_delta_with_units(self):
        d = NaiveDateTime(2024, 6, 13)
        with pytest.raises(TypeError, match="combine"):
            d.add(hours(1), minutes=3)
        with pytest.raises(TypeError, match="combine"):
            d.subtract(hours(1), days=3)
        with pytest.raises(TypeError):
            d.add(3)  # type: ignore[arg-type]

    def test_out_of_range(self):
        with pytest.raises(OutOfRange):
            NaiveDateTime(9999, 12, 31, 23) + hours(1)
        with pytest.raises(OutOfRange):
            NaiveDateTime(1000, 1, 1).subtract(seconds=1)

    @given(
        integers(0, 86_400_000_000 * 365 * 50),
        integers(-(10**15), 10**15),
    )
    def test_symmetry(self, start, delta):
        d = NaiveDateTime(1990, 1, 1) + Duration(microseconds=start)
        step = Duration(microseconds=delta)
        assert d.add(step) == d.subtract(-step)
        assert d.add(step).subtract(step) == d


def test_difference():
    assert NaiveDateTime(2024, 6, 14, 1).difference(
        NaiveDateTime(2024, 6, 13, 23, 30)
    ) == hours(1.5)
    d = NaiveDateTime(2024, 6, 14, 0, 3, 10)
    assert d - NaiveDateTime(2024, 6, 13) == Duration(
        days=1, minutes=3, seconds=10
    )
    assert NaiveDateTime(2024, 6, 13) - d == -Duration(
        days=1, minutes=3, seconds=10
    )
    with pytest.raises(TypeError):
        d - Date(2024, 6, 13)  # type: ignore[operator]


class TestUnix:

    def test_microseconds(self):
        d = NaiveDateTime.from_unix_microseconds(1_500_000)
        assert d == NaiveDateTime(1970, 1, 1, 0, 0, 1, microsecond=500_000)
        assert str(d) == "1970-01-01T00:00:01.500"
        assert d.to_unix_microseconds() == 1_500_000
        assert NaiveDateTime.from_unix_microseconds(-1) == NaiveDateTime(
            1969, 12, 31, 23, 59, 59, microsecond=999_999
        )

    def test_seconds(self):
        d = NaiveDateTime(2024, 6, 10, 6, 13, 20)
        assert d.to_unix_seconds() == 1_718_000_000
        assert NaiveDateTime.from_unix_seconds(1_718_000_000) == d

    def test_leap_second_counts_as_preceding_second(self):
        leap = NaiveDateTime(2016, 12, 31, 23, 59, 60)
        assert (
            leap.to_unix_seconds()
            == NaiveDateTime(2016, 12, 31, 23, 59, 59).to_unix_seconds()
        )


def test_assume_offset():
    d = NaiveDateTime(2024, 6, 21, 14, 47)
    assert d.assume_offset(1).exact_eq(
        DateTime(2024, 6, 21, 14, 47, offset=1)
    )
    assert d.assume_offset(Offset(-5, -30)).offset == Offset(-5, -30)
    assert d.assume_offset(hours(2)).offset == Offset(2)
    assert d.assume_utc().offset == Offset.UTC
    with pytest.raises(ValueError):
        d.assume_offset(seconds(30))
    with pytest.raises(TypeError):
        d.assume_offset("+01:00")  # type: ignore[arg-type]


def test_assume_zone():
    zone = SummerTimeZone()
    summer = NaiveDateTime(2024, 6, 13, 12).assume_zone(zone)
    assert summer.offset == Offset(2)
    assert summer.zone == zone
    winter = NaiveDateTime(2024, 1, 13, 12).assume_zone(zone)
    assert winter.offset == Offset(1)


def test_replace():
    d = NaiveDateTime(2020, 8, 15, 23, 12)
    assert d.replace(year=2021, hour=2) == NaiveDateTime(2021, 8, 15, 2, 12)
    assert d.replace(microsecond=5).precision == "micro"
    assert d.replace_date(Date(2000, 1, 1)) == NaiveDateTime(
        2000, 1, 1, 23, 12
    )
    assert d.replace_time(Time(1)) == NaiveDateTime(2020, 8, 15, 1)
    assert d.start_of_day() == NaiveDateTime(2020, 8, 15)
    with pytest.raises(TypeError, match="offset"):
        d.replace(offset=1)  # type: ignore[call-arg]
    with pytest.raises(OutOfRange):
        d.replace(month=2, day=30)


class TestFormatCommonIso:

    def test_format(self):
        d = NaiveDateTime(2024, 6, 13, 12, microsecond=500)
        assert d.format_common_iso() == "2024-06-13T12:00:00.000500"
        assert str(d) == "2024-06-13T12:00:00.000500"
        assert repr(d) == "NaiveDateTime(2024-06-13T12:00:00.000500)"

    @pytest.mark.parametrize(
        "s, expected",
        [
            ("2024-06-13T12:00:00", NaiveDateTime(2024, 6, 13, 12)),
            ("2024-06-13 12:00:00", NaiveDateTime(2024, 6, 13, 12)),
            ("2024-06-13t12:00:00", NaiveDateTime(2024, 6, 13, 12)),
            (
                "2016-12-31T23:59:60.5",
                NaiveDateTime(2016, 12, 31, 23, 59, 60, microsecond=500_000),
            ),
            ("2024-06-13T24:00:00", NaiveDateTime(2024, 6, 13, 24)),
        ],
    )
    def test_parse_valid(self, s, expected):
        assert NaiveDateTime.parse_common_iso(s) == expected

    @pytest.mark.parametrize(
        "s",
        [
            "2024-06-13T12:00",
            "2024-06-13X12:00:00",
            "2024-06-13T12:00:00Z",
            "2024-06-13T12:00:00+01:00",
            "2024-06-13",
        ],
    )
    def test_parse_invalid(self, s):
        with pytest.raises(InvalidFormat, match=re.escape(repr(s))):
            NaiveDateTime.parse_common_iso(s)

    @given(text())
    def test_fuzzing(self, s: str):
        with pytest.raises(ValueError):
            NaiveDateTime.parse_common_iso(s)


def test_format():
    d = NaiveDateTime(2024, 6, 13, 9, 5)
    assert d.format("ddd D MMM, HH:mm") == "Thu 13 Jun, 09:05"
    assert d.format("YYYY-MM-DD[T]HH:mm:ss") == "2024-06-13T09:05:00"
    with pytest.raises(ValueError, match="offset"):
        d.format("HH:mm Z")


def test_parse():
    assert NaiveDateTime.parse(
        "2024-06-13 9:05 pm", "YYYY-MM-DD h:mm a"
    ) == NaiveDateTime(2024, 6, 13, 21, 5)
    assert NaiveDateTime.parse(
        "13 June 2024, 09:05:30.250", "D MMMM YYYY, HH:mm:ss.SSS"
    ) == NaiveDateTime(2024, 6, 13, 9, 5, 30, microsecond=250_000)
    with pytest.raises(MissingField, match="hour"):
        NaiveDateTime.parse("2024-06-13", "YYYY-MM-DD")


def test_equality():
    d = NaiveDateTime(2024, 6, 13, 12)
    same = NaiveDateTime(2024, 6, 13, 12, precision="milli")
    assert d == same
    assert hash(d) == hash(same)
    assert d != NaiveDateTime(2024, 6, 13, 13)
    assert d == AlwaysEqual()
    assert d != NeverEqual()
    assert d != DateTime(2024, 6, 13, 12, offset=0)  # type: ignore


def test_comparison():
    d = NaiveDateTime(2016, 12, 31, 23, 59, 59)
    leap = NaiveDateTime(2016, 12, 31, 23, 59, 60)
    eod = NaiveDateTime(2016, 12, 31, 24)
    next_day = NaiveDateTime(2017, 1, 1)
    assert d < leap < eod < next_day
    assert next_day > eod >= eod
    assert d <= d
    assert d < AlwaysLarger()
    assert d > AlwaysSmaller()


def test_copy_and_pickle():
    d = NaiveDateTime(
        2016, 12, 31, 23, 59, 60, microsecond=3, precision="nano"
    )
    assert copy(d) is d
    assert deepcopy(d) is d
    restored = pickle.loads(pickle.dumps(d))
    assert restored == d
    assert str(restored) == str(d)
