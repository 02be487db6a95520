"""Historical UTC leap seconds, as announced in IERS Bulletin C.

Each entry is the (year, month, day) whose last minute had 61 seconds.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right

from ._math import civil_to_day_count

INSERTIONS = (
    (1972, 6, 30),
    (1972, 12, 31),
    (1973, 12, 31),
    (1974, 12, 31),
    (1975, 12, 31),
    (1976, 12, 31),
    (1977, 12, 31),
    (1978, 12, 31),
    (1979, 12, 31),
    (1981, 6, 30),
    (1982, 6, 30),
    (1983, 6, 30),
    (1985, 6, 30),
    (1987, 12, 31),
    (1989, 12, 31),
    (1990, 12, 31),
    (1992, 6, 30),
    (1993, 6, 30),
    (1994, 6, 30),
    (1995, 12, 31),
    (1997, 6, 30),
    (1998, 12, 31),
    (2005, 12, 31),
    (2008, 12, 31),
    (2012, 6, 30),
    (2015, 6, 30),
    (2016, 12, 31),
)

# Bulletin C has ruled out an insertion up to and including the end
# of this year. Leap seconds were introduced in 1972, so earlier years
# are known to have none.
LAST_KNOWN_YEAR = 2025

_INSERTION_DAYS = tuple(civil_to_day_count(*d) for d in INSERTIONS)


def unknown_years(first_year: int, last_year: int) -> tuple[int, ...]:
    """The years in the given (inclusive) range the table doesn't cover"""
    return tuple(range(max(first_year, LAST_KNOWN_YEAR + 1), last_year + 1))


def count_between(start_day: int, end_day: int) -> int:
    """Number of leap seconds inserted on days in [start_day, end_day].

    Days are day counts since 1970-01-01. The caller is responsible for
    checking the range is covered by the table.
    """
    return bisect_right(_INSERTION_DAYS, end_day) - bisect_left(
        _INSERTION_DAYS, start_day
    )
