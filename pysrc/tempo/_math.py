"""Calendar and day-count arithmetic helpers."""

# Days between 0000-03-01 and 1970-01-01
_EPOCH_SHIFT = 719_468
_DAYS_PER_ERA = 146_097  # 400 years

MIN_YEAR = 1000
MAX_YEAR = 9999

# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
# days before the first of each month, in a non-leap year
_DAYS_BEFORE_MONTH = [0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334]


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def days_in_year(year: int) -> int:
    return 365 + is_leap(year)


def day_count_to_civil(n: int) -> tuple[int, int, int]:
    """Convert a day count (0 = 1970-01-01) into (year, month, day).

    Works on March-based years so that the leap day is the last day
    of the cycle. Floor division keeps negative day counts correct.
    """
    z = n + _EPOCH_SHIFT
    era = z // _DAYS_PER_ERA
    doe = z - era * _DAYS_PER_ERA  # [0, 146096]
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)  # [0, 365]
    mp = (5 * doy + 2) // 153  # March = 0 .. February = 11
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (month <= 2)
    return year, month, day


def civil_to_day_count(year: int, month: int, day: int) -> int:
    """Inverse of :func:`day_count_to_civil`. Inputs are not validated."""
    y = year - (month <= 2)
    era = y // 400
    yoe = y - era * 400  # [0, 399]
    mp = month - 3 if month > 2 else month + 9
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * _DAYS_PER_ERA + doe - _EPOCH_SHIFT


MIN_DAY_COUNT = civil_to_day_count(MIN_YEAR, 1, 1)
MAX_DAY_COUNT = civil_to_day_count(MAX_YEAR, 12, 31)


def day_of_week(n: int) -> int:
    """ISO weekday (Monday = 1, Sunday = 7) of a day count"""
    # 1970-01-01 was a Thursday
    return (n + 3) % 7 + 1


def day_of_year(year: int, month: int, day: int) -> int:
    return _DAYS_BEFORE_MONTH[month] + (month > 2 and is_leap(year)) + day


def add_months(
    year: int, month: int, day: int, months: int
) -> tuple[int, int, int]:
    year_delta, month0_new = divmod(month - 1 + months, 12)
    year_new = year + year_delta
    month_new = month0_new + 1
    # only clamps when we move to a month with fewer days
    return year_new, month_new, min(day, days_in_month(year_new, month_new))


# The functions below take (year, month, day, ...) tuples, with start <= end.
# Trailing items (e.g. a time of day) break ties within the same day.


def months_diff(start: tuple, end: tuple) -> int:
    """Whole months from ``start`` to ``end``.

    A month only counts once ``end`` has reached the same
    day-of-month as ``start``.
    """
    diff = (end[0] - start[0]) * 12 + (end[1] - start[1])
    if diff > 0 and end[2:] < start[2:]:
        diff -= 1
    return diff


def years_diff(start: tuple, end: tuple) -> int:
    """Whole years from ``start`` to ``end``."""
    diff = end[0] - start[0]
    if diff > 0 and end[1:] < start[1:]:
        diff -= 1
    return diff
