import pickle
import re
from copy import copy, deepcopy

import pytest
from hypothesis import given
from hypothesis.strategies import integers, text

from tempo import (
    Duration,
    InvalidFormat,
    days,
    hours,
    microseconds,
    milliseconds,
    minutes,
    seconds,
    weeks,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual


class TestInit:

    def test_components(self):
        d = Duration(
            weeks=1,
            days=1,
            hours=1,
            minutes=1,
            seconds=1,
            milliseconds=1,
            microseconds=1,
        )
        assert d.in_microseconds() == (
            8 * 86_400_000_000 + 3_600_000_000 + 60_000_000 + 1_001_001
        )

    def test_fractions(self):
        assert Duration(hours=1.5) == Duration(minutes=90)
        assert Duration(seconds=1.5) == Duration(milliseconds=1_500)

    def test_mixed_signs(self):
        assert Duration(hours=1, minutes=-30) == Duration(minutes=30)

    def test_zero(self):
        assert Duration() == Duration.ZERO
        assert not Duration.ZERO
        assert Duration(microseconds=1)


def test_factories():
    assert weeks(1) == Duration(weeks=1)
    assert days(1) == Duration(days=1)
    assert hours(1) == Duration(hours=1)
    assert minutes(1) == Duration(minutes=1)
    assert seconds(1) == Duration(seconds=1)
    assert milliseconds(1) == Duration(milliseconds=1)
    assert microseconds(1) == Duration(microseconds=1)


def test_in_units():
    d = Duration(hours=1, minutes=30)
    assert d.in_days() == 0.0625
    assert d.in_hours() == 1.5
    assert d.in_minutes() == 90.0
    assert d.in_seconds() == 5_400.0
    assert d.in_milliseconds() == 5_400_000.0
    assert d.in_microseconds() == 5_400_000_000


@pytest.mark.parametrize(
    "d, expected",
    [
        (Duration(), (0, 0, 0, 0, 0)),
        (
            Duration(days=1, hours=1, minutes=30, microseconds=5_000_090),
            (1, 1, 30, 5, 90),
        ),
        (
            -Duration(days=1, hours=1, minutes=30, microseconds=5_000_090),
            (-1, -1, -30, -5, -90),
        ),
        (Duration(hours=-25), (-1, -1, 0, 0, 0)),
    ],
)
def test_in_days_hrs_mins_secs_us(d, expected):
    assert d.in_days_hrs_mins_secs_us() == expected


class TestFormatCommonIso:

    @pytest.mark.parametrize(
        "d, expected",
        [
            (Duration(), "PT0S"),
            (Duration(hours=1, minutes=30), "PT1H30M"),
            (Duration(days=2, hours=3), "P2DT3H"),
            (Duration(days=-2, hours=-3), "-P2DT3H"),
            (Duration(days=2), "P2D"),
            (Duration(seconds=1, milliseconds=500), "PT1.5S"),
            (Duration(microseconds=1), "PT0.000001S"),
            (Duration(hours=1, seconds=1), "PT1H1S"),
        ],
    )
    def test_valid(self, d, expected):
        assert d.format_common_iso() == expected
        assert str(d) == expected

    def test_repr(self):
        assert repr(hours(1)) == "Duration(PT1H)"


class TestParseCommonIso:

    @pytest.mark.parametrize(
        "s, expected",
        [
            ("PT0S", Duration()),
            ("PT1H30M", Duration(hours=1, minutes=30)),
            ("P2DT3H", Duration(days=2, hours=3)),
            ("-P2DT3H", Duration(days=-2, hours=-3)),
            ("+PT1.5S", Duration(seconds=1.5)),
            ("PT0,000001S", Duration(microseconds=1)),
            ("P1D", Duration(days=1)),
            ("PT90M", Duration(minutes=90)),
        ],
    )
    def test_valid(self, s, expected):
        assert Duration.parse_common_iso(s) == expected

    @pytest.mark.parametrize(
        "s",
        ["P", "PT", "P1DT", "1H", "PT1H30", "P1Y", "PT1.0000001S", "pt1h", ""],
    )
    def test_invalid(self, s):
        with pytest.raises(InvalidFormat, match=re.escape(repr(s))):
            Duration.parse_common_iso(s)

    @given(text())
    def test_fuzzing(self, s: str):
        with pytest.raises(ValueError):
            Duration.parse_common_iso(s)

    @given(integers(-(10**15), 10**15))
    def test_roundtrip(self, us):
        d = microseconds(us)
        assert Duration.parse_common_iso(d.format_common_iso()) == d


class TestArithmetic:

    def test_add_subtract(self):
        d = Duration(hours=1, minutes=30)
        assert d + minutes(30) == hours(2)
        assert d - minutes(30) == hours(1)
        assert d - hours(2) == minutes(-30)

    def test_negation(self):
        d = Duration(hours=1, minutes=30)
        assert -d == Duration(hours=-1, minutes=-30)
        assert +d is d
        assert abs(-d) == d
        assert abs(d) == d

    def test_multiply(self):
        d = Duration(hours=1, minutes=30)
        assert d * 2 == hours(3)
        assert 2 * d == hours(3)
        assert d * -1 == -d
        with pytest.raises(TypeError):
            d * 1.5  # type: ignore[operator]

    def test_divide(self):
        d = Duration(hours=1, minutes=30)
        assert d / 2 == minutes(45)
        assert d / 2.5 == minutes(36)
        assert d / minutes(30) == 3.0
        with pytest.raises(ZeroDivisionError):
            d / 0

    def test_floordiv_and_mod(self):
        d = Duration(days=3, hours=2)
        assert d // days(1) == 3
        assert d // 2 == Duration(days=1, hours=13)
        assert d % days(1) == hours(2)
        assert -hours(1) // days(1) == -1

    def test_unsupported(self):
        d = hours(1)
        with pytest.raises(TypeError):
            d + 1  # type: ignore[operator]
        with pytest.raises(TypeError):
            d - 1  # type: ignore[operator]
        with pytest.raises(TypeError):
            d / "2"  # type: ignore[operator]
        with pytest.raises(TypeError):
            d // 1.5  # type: ignore[operator]


def test_equality():
    d = Duration(hours=1)
    same = Duration(minutes=60)
    assert d == same
    assert hash(d) == hash(same)
    assert d != minutes(61)
    assert d == AlwaysEqual()
    assert d != NeverEqual()


def test_comparison():
    d = hours(1)
    assert d < hours(2)
    assert d <= hours(1)
    assert d > -hours(2)
    assert d >= hours(1)
    assert d < AlwaysLarger()
    assert d > AlwaysSmaller()
    with pytest.raises(TypeError):
        d < 1  # type: ignore[operator]


def test_copy_and_pickle():
    d = Duration(hours=-1, microseconds=3)
    assert copy(d) is d
    assert deepcopy(d) is d
    assert pickle.loads(pickle.dumps(d)) == d
