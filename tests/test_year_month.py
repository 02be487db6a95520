import pickle
import re
from copy import copy, deepcopy

import pytest

from tempo import Date, InvalidFormat, OutOfRange, YearMonth

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual


class TestInit:

    def test_valid(self):
        ym = YearMonth(2021, 1)
        assert ym.year == 2021
        assert ym.month == 1

    @pytest.mark.parametrize(
        "year, month, field",
        [
            (999, 1, "year"),
            (10_000, 1, "year"),
            (2021, 0, "month"),
            (2021, 13, "month"),
        ],
    )
    def test_out_of_range(self, year, month, field):
        with pytest.raises(OutOfRange, match=field):
            YearMonth(year, month)


def test_min_max():
    assert YearMonth.MIN == YearMonth(1000, 1)
    assert YearMonth.MAX == YearMonth(9999, 12)


def test_days_in_month():
    assert YearMonth(2024, 2).days_in_month() == 29
    assert YearMonth(2023, 2).days_in_month() == 28
    assert YearMonth(2023, 11).days_in_month() == 30


def test_on_day():
    ym = YearMonth(2021, 2)
    assert ym.on_day(28) == Date(2021, 2, 28)
    with pytest.raises(OutOfRange, match="day"):
        ym.on_day(29)


def test_first_and_last_day():
    ym = YearMonth(2024, 2)
    assert ym.first_day() == Date(2024, 2, 1)
    assert ym.last_day() == Date(2024, 2, 29)


def test_format_common_iso():
    ym = YearMonth(2021, 1)
    assert ym.format_common_iso() == "2021-01"
    assert str(ym) == "2021-01"
    assert repr(ym) == "YearMonth(2021-01)"


class TestParseCommonIso:

    def test_valid(self):
        assert YearMonth.parse_common_iso("2021-01") == YearMonth(2021, 1)

    @pytest.mark.parametrize("s", ["2021-1", "202101", "2021-01-01", ""])
    def test_invalid(self, s):
        with pytest.raises(InvalidFormat):
            YearMonth.parse_common_iso(s)

    def test_out_of_range(self):
        with pytest.raises(OutOfRange, match="month"):
            YearMonth.parse_common_iso("2021-13")


def test_replace():
    ym = YearMonth(2021, 12)
    assert ym.replace(month=3) == YearMonth(2021, 3)
    assert ym.replace(year=2000) == YearMonth(2000, 12)
    with pytest.raises(TypeError, match="day"):
        ym.replace(day=1)  # type: ignore[call-arg]


def test_add():
    ym = YearMonth(2021, 11)
    assert ym.add(months=3) == YearMonth(2022, 2)
    assert ym.add(years=-1, months=-11) == YearMonth(2019, 12)
    assert ym.subtract(months=12) == YearMonth(2020, 11)
    with pytest.raises(OutOfRange):
        YearMonth.MAX.add(months=1)


def test_equality():
    ym = YearMonth(2021, 1)
    same = YearMonth(2021, 1)
    assert ym == same
    assert hash(ym) == hash(same)
    assert ym != YearMonth(2021, 2)
    assert ym == AlwaysEqual()
    assert ym != NeverEqual()
    assert ym != Date(2021, 1, 1)  # type: ignore[comparison-overlap]


def test_comparison():
    ym = YearMonth(2021, 12)
    bigger = YearMonth(2022, 1)
    assert ym < bigger
    assert ym <= bigger
    assert bigger > ym
    assert bigger >= ym
    assert ym < AlwaysLarger()
    assert ym > AlwaysSmaller()


def test_copy_and_pickle():
    ym = YearMonth(2021, 1)
    assert copy(ym) is ym
    assert deepcopy(ym) is ym
    assert pickle.loads(pickle.dumps(ym)) == ym


def test_invalid_error_message():
    with pytest.raises(InvalidFormat, match=re.escape("'2021-1'")):
        YearMonth.parse_common_iso("2021-1")
