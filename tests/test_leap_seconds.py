from tempo._leap_seconds import (
    INSERTIONS,
    LAST_KNOWN_YEAR,
    count_between,
    unknown_years,
)
from tempo._math import civil_to_day_count


def _day(y, m, d):
    return civil_to_day_count(y, m, d)


def test_table_is_sorted():
    assert list(INSERTIONS) == sorted(INSERTIONS)
    assert all(m in (6, 12) for _, m, _ in INSERTIONS)


def test_unknown_years():
    assert unknown_years(2000, 2020) == ()
    assert unknown_years(1000, 1973) == ()
    assert unknown_years(LAST_KNOWN_YEAR, LAST_KNOWN_YEAR + 2) == (
        LAST_KNOWN_YEAR + 1,
        LAST_KNOWN_YEAR + 2,
    )
    assert unknown_years(2030, 2031) == (2030, 2031)


def test_count_between():
    assert count_between(_day(1972, 1, 1), _day(2024, 1, 1)) == 27
    assert count_between(_day(2016, 12, 31), _day(2016, 12, 31)) == 1
    assert count_between(_day(2017, 1, 1), _day(2024, 12, 31)) == 0
    assert count_between(_day(2012, 1, 1), _day(2015, 6, 29)) == 1
    assert count_between(_day(2012, 1, 1), _day(2015, 6, 30)) == 2


def test_none_before_first_insertion():
    assert count_between(_day(1000, 1, 1), _day(1972, 6, 29)) == 0
    assert count_between(_day(1970, 1, 1), _day(1972, 6, 30)) == 1
