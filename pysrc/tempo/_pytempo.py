# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - Why are all value types in one file?
#   - It prevents circular imports since the classes 'know' about each other
#   - Calendar math, formatting and parsing live in small helper modules
#     which don't know about the classes at all
# - Every value stores plain integers: a day count for dates, microseconds
#   for times and durations, minutes for offsets. Fields like year and month
#   are derived on access.
from __future__ import annotations

__version__ = "0.1.0"

import enum
from struct import pack, unpack
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Iterator,
    Literal,
    NamedTuple,
    Union,
    no_type_check,
    overload,
)

from . import _leap_seconds
from ._clock import ClockProvider, get_clock
from ._common import (
    MAX_OFFSET_MINUTES,
    MIN_OFFSET_MINUTES,
    US_PER_DAY,
    US_PER_HOUR,
    US_PER_MINUTE,
    US_PER_SECOND,
    InvalidFormat,
    LeapSecondsUnknown,
    MissingField,
    MissingMeridiem,
    OutOfRange,
)
from ._format import format_offset, parse as _parse_fields, render as _render
from ._math import (
    MAX_DAY_COUNT,
    MAX_YEAR,
    MIN_DAY_COUNT,
    MIN_YEAR,
    add_months,
    civil_to_day_count,
    day_count_to_civil,
    day_of_week,
    day_of_year,
    days_in_month,
    is_leap,
    months_diff,
    years_diff,
)
from ._parse import (
    date_from_iso,
    datetime_from_iso,
    duration_from_iso,
    find_dates,
    find_offset,
    find_times,
    naive_from_iso,
    offset_from_iso,
    search_offset,
    time_from_iso,
)

if TYPE_CHECKING:
    from ._zone import TimezoneProvider

__all__ = [
    # Date and time
    "Date",
    "YearMonth",
    "Time",
    "NaiveDateTime",
    "DateTime",
    "Offset",
    "Period",
    "Instant",
    # Durations
    "Duration",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
    "microseconds",
    # Functions
    "sleep",
    "parse_any",
    "ParsedParts",
    # Exceptions
    "OutOfRange",
    "InvalidFormat",
    "MissingField",
    "MissingMeridiem",
    "LeapSecondsUnknown",
    # Constants
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    "Weekday",
]


class Weekday(enum.Enum):
    """The days of the week; ``.value`` corresponds with ISO numbering."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY
SUNDAY = Weekday.SUNDAY

Precision = Literal["second", "milli", "micro", "nano"]
# ordered from narrow to wide
_PRECISIONS: tuple[Precision, ...] = ("second", "milli", "micro", "nano")

# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__
_US_PER_WEEK = 7 * US_PER_DAY
# 23:59:59, which a leap second extends
_LEAP_BASE = US_PER_DAY - US_PER_SECOND


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


def _check_ymd(year: int, month: int, day: int) -> int:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise OutOfRange("year", year)
    if not 1 <= month <= 12:
        raise OutOfRange("month", month)
    if not 1 <= day <= days_in_month(year, month):
        raise OutOfRange("day", day)
    return civil_to_day_count(year, month, day)


@final
class Date(_ImmutableBase):
    """A date without a time component

    Example
    -------
    >>> d = Date(2021, 1, 2)
    Date(2021-01-02)
    """

    __slots__ = ("_days",)

    MIN: ClassVar[Date]
    """The minimum possible date"""
    MAX: ClassVar[Date]
    """The maximum possible date"""

    def __init__(self, year: int, month: int, day: int) -> None:
        self._days = _check_ymd(year, month, day)

    @classmethod
    def today(cls, *, clock: ClockProvider | None = None) -> Date:
        """The current date at the clock's local offset

        Example
        -------
        >>> Date.today()
        Date(2024-06-13)
        """
        return DateTime.now_local(clock=clock).date()

    @classmethod
    def today_utc(cls, *, clock: ClockProvider | None = None) -> Date:
        """The current date in UTC"""
        return DateTime.now_utc(clock=clock).date()

    @property
    def year(self) -> int:
        return day_count_to_civil(self._days)[0]

    @property
    def month(self) -> int:
        return day_count_to_civil(self._days)[1]

    @property
    def day(self) -> int:
        return day_count_to_civil(self._days)[2]

    def year_month(self) -> YearMonth:
        """The year and month (without a day component)

        Example
        -------
        >>> Date(2021, 1, 2).year_month()
        YearMonth(2021-01)
        """
        year, month, _ = day_count_to_civil(self._days)
        return YearMonth._new_unchecked(year, month)

    def day_of_week(self) -> Weekday:
        """The day of the week

        Example
        -------
        >>> Date(2021, 1, 2).day_of_week()
        Weekday.SATURDAY
        >>> Weekday.SATURDAY.value
        6  # the ISO value
        """
        return Weekday(day_of_week(self._days))

    def day_of_year(self) -> int:
        """The ordinal day within the year, starting at 1

        Example
        -------
        >>> Date(2024, 3, 1).day_of_year()
        61
        """
        return day_of_year(*day_count_to_civil(self._days))

    def is_weekend(self) -> bool:
        return day_of_week(self._days) >= 6

    def is_leap_year(self) -> bool:
        return is_leap(self.year)

    def next_weekday(self, weekday: Weekday, /) -> Date:
        """The first date after this one which falls on the given weekday

        Example
        -------
        >>> Date(2024, 6, 13).next_weekday(THURSDAY)
        Date(2024-06-20)
        """
        delta = (weekday.value - day_of_week(self._days)) % 7 or 7
        return self._add_days(delta)

    def previous_weekday(self, weekday: Weekday, /) -> Date:
        """The last date before this one which falls on the given weekday"""
        delta = (day_of_week(self._days) - weekday.value) % 7 or 7
        return self._add_days(-delta)

    def first_of_month(self) -> Date:
        return Date._from_days_unchecked(self._days - self.day + 1)

    def last_of_month(self) -> Date:
        year, month, day = day_count_to_civil(self._days)
        return Date._from_days_unchecked(
            self._days - day + days_in_month(year, month)
        )

    def at(self, t: Time, /) -> NaiveDateTime:
        """Combine a date with a time to create a datetime

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d.at(Time(12, 30))
        NaiveDateTime(2021-01-02T12:30:00)

        You can use methods like :meth:`~NaiveDateTime.assume_utc`
        or :meth:`~NaiveDateTime.assume_zone` to make the result aware.
        """
        return NaiveDateTime._new_unchecked(self, t)

    def to_unix_days(self) -> int:
        """The number of days since 1970-01-01

        Example
        -------
        >>> Date(1978, 6, 28).to_unix_days()
        3100
        """
        return self._days

    @classmethod
    def from_unix_days(cls, n: int, /) -> Date:
        """Inverse of :meth:`to_unix_days`"""
        return cls._from_days(n)

    def to_unix_seconds(self) -> int:
        """The UNIX timestamp of midnight (UTC) at the start of this date"""
        return self._days * 86_400

    @classmethod
    def from_unix_seconds(cls, s: int, /) -> Date:
        """The (UTC) date of the given UNIX timestamp"""
        return cls._from_days(s // 86_400)

    def format_common_iso(self) -> str:
        """Format as the common ISO 8601 date format.

        Inverse of :meth:`parse_common_iso`.

        Example
        -------
        >>> Date(2021, 1, 2).format_common_iso()
        '2021-01-02'
        """
        year, month, day = day_count_to_civil(self._days)
        return f"{year:04}-{month:02}-{day:02}"

    @classmethod
    def parse_common_iso(cls, s: str, /) -> Date:
        """Create from the common ISO 8601 date format ``YYYY-MM-DD``.
        Does not accept more "exotic" ISO 8601 formats.

        Inverse of :meth:`format_common_iso`

        Example
        -------
        >>> Date.parse_common_iso("2021-01-02")
        Date(2021-01-02)
        """
        return cls(*date_from_iso(s))

    def format(self, fmt: str, /) -> str:
        """Format according to a directive string

        Example
        -------
        >>> Date(2024, 6, 13).format("MMMM 'YY")
        "June '24"
        >>> Date(2024, 6, 13).format("dddd [the] D")
        'Thursday the 13'
        """
        return _render(fmt, date=self)

    @classmethod
    def parse(cls, s: str, fmt: str, /) -> Date:
        """Parse a string according to a directive string.
        Inverse of :meth:`format`.

        Example
        -------
        >>> Date.parse("13/06/2024", "DD/MM/YYYY")
        Date(2024-06-13)
        """
        return cls(*_parse_fields(s, fmt).date())

    def replace(self, **kwargs: Any) -> Date:
        """Create a new instance with the given fields replaced

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d.replace(day=4)
        Date(2021-01-04)
        """
        _check_invalid_replace_kwargs(kwargs, _DATE_FIELDS)
        year, month, day = day_count_to_civil(self._days)
        return Date(
            kwargs.get("year", year),
            kwargs.get("month", month),
            kwargs.get("day", day),
        )

    def add(
        self, *, years: int = 0, months: int = 0, weeks: int = 0, days: int = 0
    ) -> Date:
        """Add calendar units to a date.
        Years and months are added first. If the day doesn't exist in the
        resulting month, it's clamped to the last day of that month.

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d.add(years=1, months=2, days=3)
        Date(2022-03-05)
        >>> Date(2020, 2, 29).add(years=1)
        Date(2021-02-28)
        """
        base = self._days
        if years or months:
            year, month, day = add_months(
                *day_count_to_civil(base), 12 * years + months
            )
            if not MIN_YEAR <= year <= MAX_YEAR:
                raise OutOfRange("year", year)
            base = civil_to_day_count(year, month, day)
        return Date._from_days(base + 7 * weeks + days)

    def subtract(
        self, *, years: int = 0, months: int = 0, weeks: int = 0, days: int = 0
    ) -> Date:
        """Subtract calendar units from a date.

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d.subtract(years=1, months=2, days=3)
        Date(2019-10-30)
        """
        return self.add(years=-years, months=-months, weeks=-weeks, days=-days)

    def days_until(self, other: Date, /) -> int:
        """Calculate the number of days from this date to another date.
        If the other date is before this date, the result is negative.

        Example
        -------
        >>> Date(2021, 1, 2).days_until(Date(2021, 1, 5))
        3
        """
        return other._days - self._days

    def days_since(self, other: Date, /) -> int:
        """Calculate the number of days this day is after another date.
        If the other date is after this date, the result is negative.

        Example
        -------
        >>> Date(2021, 1, 5).days_since(Date(2021, 1, 2))
        3
        """
        return self._days - other._days

    def _add_days(self, n: int) -> Date:
        return Date._from_days(self._days + n) if n else self

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Date({self})"

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d == Date(2021, 1, 2)
        True
        >>> d == Date(2021, 1, 3)
        False
        """
        if not isinstance(other, Date):
            return NotImplemented
        return self._days == other._days

    def __hash__(self) -> int:
        return hash(self._days)

    def __lt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days < other._days

    def __le__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days <= other._days

    def __gt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days > other._days

    def __ge__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days >= other._days

    @classmethod
    def _from_days(cls, n: int, /) -> Date:
        if not MIN_DAY_COUNT <= n <= MAX_DAY_COUNT:
            raise OutOfRange("year", day_count_to_civil(n)[0])
        return cls._from_days_unchecked(n)

    @classmethod
    def _from_days_unchecked(cls, n: int, /) -> Date:
        self = _object_new(cls)
        self._days = n
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_date, (pack("<HBB", *day_count_to_civil(self._days)),)


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_date(data: bytes) -> Date:
    return Date(*unpack("<HBB", data))


Date.MIN = Date._from_days_unchecked(MIN_DAY_COUNT)
Date.MAX = Date._from_days_unchecked(MAX_DAY_COUNT)


@final
class YearMonth(_ImmutableBase):
    """A year and month without a day component

    Example
    -------
    >>> ym = YearMonth(2021, 1)
    YearMonth(2021-01)
    """

    __slots__ = ("_year", "_month")

    MIN: ClassVar[YearMonth]
    """The minimum possible year-month"""
    MAX: ClassVar[YearMonth]
    """The maximum possible year-month"""

    def __init__(self, year: int, month: int) -> None:
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise OutOfRange("year", year)
        if not 1 <= month <= 12:
            raise OutOfRange("month", month)
        self._year = year
        self._month = month

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    def days_in_month(self) -> int:
        return days_in_month(self._year, self._month)

    def format_common_iso(self) -> str:
        """Format as the common ISO 8601 year-month format.

        Inverse of :meth:`parse_common_iso`.

        Example
        -------
        >>> YearMonth(2021, 1).format_common_iso()
        '2021-01'
        """
        return f"{self._year:04}-{self._month:02}"

    @classmethod
    def parse_common_iso(cls, s: str, /) -> YearMonth:
        """Create from the common ISO 8601 format ``YYYY-MM``.

        Example
        -------
        >>> YearMonth.parse_common_iso("2021-01")
        YearMonth(2021-01)
        """
        try:
            year, month, _ = date_from_iso(s + "-01")
        except InvalidFormat:
            raise InvalidFormat(s) from None
        return cls(year, month)

    def replace(self, **kwargs: Any) -> YearMonth:
        """Create a new instance with the given fields replaced

        Example
        -------
        >>> d = YearMonth(2021, 12)
        >>> d.replace(month=3)
        YearMonth(2021-03)
        """
        _check_invalid_replace_kwargs(kwargs, ("year", "month"))
        return YearMonth(
            kwargs.get("year", self._year), kwargs.get("month", self._month)
        )

    def add(self, *, years: int = 0, months: int = 0) -> YearMonth:
        """Add years and months

        Example
        -------
        >>> YearMonth(2021, 11).add(months=3)
        YearMonth(2022-02)
        """
        year, month0 = divmod(
            self._year * 12 + self._month - 1 + years * 12 + months, 12
        )
        return YearMonth(year, month0 + 1)

    def subtract(self, *, years: int = 0, months: int = 0) -> YearMonth:
        return self.add(years=-years, months=-months)

    def on_day(self, day: int, /) -> Date:
        """Create a date from this year-month with a given day

        Example
        -------
        >>> YearMonth(2021, 1).on_day(2)
        Date(2021-01-02)
        """
        return Date(self._year, self._month, day)

    def first_day(self) -> Date:
        return Date._from_days_unchecked(
            civil_to_day_count(self._year, self._month, 1)
        )

    def last_day(self) -> Date:
        return Date._from_days_unchecked(
            civil_to_day_count(self._year, self._month, self.days_in_month())
        )

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"YearMonth({self})"

    def _index(self) -> int:
        return self._year * 12 + self._month - 1

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> ym = YearMonth(2021, 1)
        >>> ym == YearMonth(2021, 1)
        True
        >>> ym == YearMonth(2021, 2)
        False
        """
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._index() == other._index()

    def __lt__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._index() < other._index()

    def __le__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._index() <= other._index()

    def __gt__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._index() > other._index()

    def __ge__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._index() >= other._index()

    def __hash__(self) -> int:
        return hash(self._index())

    @classmethod
    def _new_unchecked(cls, year: int, month: int, /) -> YearMonth:
        self = _object_new(cls)
        self._year = year
        self._month = month
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_ym, (pack("<HB", self._year, self._month),)


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_ym(data: bytes) -> YearMonth:
    return YearMonth(*unpack("<HB", data))


YearMonth.MIN = YearMonth._new_unchecked(MIN_YEAR, 1)
YearMonth.MAX = YearMonth._new_unchecked(MAX_YEAR, 12)


class _Kind(enum.Enum):
    NORMAL = 0
    END_OF_DAY = 1
    LEAP_SECOND = 2


def _min_precision(us: int) -> Precision:
    us %= US_PER_SECOND
    if us == 0:
        return "second"
    elif us % 1_000 == 0:
        return "milli"
    return "micro"


def _widen(precision: Precision, us: int) -> Precision:
    return max(precision, _min_precision(us), key=_PRECISIONS.index)


def _check_precision(precision: str) -> None:
    if precision not in _PRECISIONS:
        raise ValueError(f"Invalid precision: {precision!r}")


@final
class Time(_ImmutableBase):
    """Time of day without a date component

    Besides the regular times of day, there are two special values:
    the end of the day (``24:00:00``) and the leap second
    (``23:59:60`` with an optional fraction).

    The precision determines how many decimals are shown when formatting.
    It doesn't affect comparison.

    Example
    -------
    >>> t = Time(12, 30, 0)
    Time(12:30:00)
    >>> Time(23, 59, 60) > Time(23, 59, 59, microsecond=999_999)
    True
    """

    __slots__ = ("_kind", "_us", "_precision")

    MIDNIGHT: ClassVar[Time]
    """The time at midnight"""
    NOON: ClassVar[Time]
    """The time at noon"""
    MAX: ClassVar[Time]
    """The maximum regular time, just before midnight"""
    END_OF_DAY: ClassVar[Time]
    """The end of the day, 24:00:00"""

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        microsecond: int = 0,
        precision: Precision | None = None,
    ) -> None:
        if not (
            0 <= hour <= 23
            or (hour == 24 and not (minute or second or microsecond))
        ):
            raise OutOfRange("hour", hour)
        if not 0 <= minute <= 59:
            raise OutOfRange("minute", minute)
        if not (
            0 <= second <= 59
            or (second == 60 and hour == 23 and minute == 59)
        ):
            raise OutOfRange("second", second)
        if not 0 <= microsecond <= 999_999:
            raise OutOfRange("microsecond", microsecond)
        if precision is None:
            precision = _min_precision(microsecond)
        else:
            _check_precision(precision)
        if hour == 24:
            self._kind = _Kind.END_OF_DAY
            self._us = 0
        elif second == 60:
            self._kind = _Kind.LEAP_SECOND
            self._us = _LEAP_BASE + microsecond
        else:
            self._kind = _Kind.NORMAL
            self._us = (
                hour * US_PER_HOUR
                + minute * US_PER_MINUTE
                + second * US_PER_SECOND
                + microsecond
            )
        self._precision = precision

    @classmethod
    def leap_second(
        cls, microsecond: int = 0, *, precision: Precision | None = None
    ) -> Time:
        """The leap second ``23:59:60``, with an optional fraction

        Example
        -------
        >>> Time.leap_second(500_000)
        Time(23:59:60.500)
        """
        return cls(23, 59, 60, microsecond=microsecond, precision=precision)

    @classmethod
    def from_microseconds(cls, us: int, /) -> Time:
        """Create from the microseconds since midnight.
        Values outside a single day wrap around.

        Example
        -------
        >>> Time.from_microseconds(3_600_000_000)
        Time(01:00:00)
        >>> Time.from_microseconds(-1_000_000)
        Time(23:59:59)
        """
        rest = us % US_PER_DAY
        return cls._new_unchecked(_Kind.NORMAL, rest, _min_precision(rest))

    @property
    def hour(self) -> int:
        if self._kind is _Kind.END_OF_DAY:
            return 24
        return self._us // US_PER_HOUR

    @property
    def minute(self) -> int:
        return self._us % US_PER_HOUR // US_PER_MINUTE

    @property
    def second(self) -> int:
        if self._kind is _Kind.NORMAL:
            return self._us % US_PER_MINUTE // US_PER_SECOND
        return 0 if self._kind is _Kind.END_OF_DAY else 60

    @property
    def microsecond(self) -> int:
        return self._us % US_PER_SECOND

    @property
    def precision(self) -> Precision:
        return self._precision

    def is_end_of_day(self) -> bool:
        return self._kind is _Kind.END_OF_DAY

    def is_leap_second(self) -> bool:
        return self._kind is _Kind.LEAP_SECOND

    def in_microseconds(self) -> int:
        """Microseconds since midnight.

        The end of the day counts as a full day. A leap second counts
        as the second it extends, usually 23:59:59.
        """
        if self._kind is _Kind.END_OF_DAY:
            return US_PER_DAY
        return self._us

    def left_in_day(self) -> Duration:
        """The time remaining until the end of the day

        Example
        -------
        >>> Time(23, 30).left_in_day()
        Duration(PT30M)
        >>> Time.leap_second(250_000).left_in_day()
        Duration(PT0.75S)
        """
        if self._kind is _Kind.END_OF_DAY:
            return Duration.ZERO
        return Duration._from_us_unchecked(US_PER_DAY - self._us)

    def with_precision(self, precision: Precision, /) -> Time:
        """Change how many decimals are shown when formatting

        Example
        -------
        >>> Time(12, 30).with_precision("milli")
        Time(12:30:00.000)
        """
        _check_precision(precision)
        return Time._new_unchecked(self._kind, self._us, precision)

    def on(self, d: Date, /) -> NaiveDateTime:
        """Combine a time with a date to create a datetime

        Example
        -------
        >>> t = Time(12, 30)
        >>> t.on(Date(2021, 1, 2))
        NaiveDateTime(2021-01-02T12:30:00)
        """
        return NaiveDateTime._new_unchecked(d, self)

    def replace(self, **kwargs: Any) -> Time:
        """Create a new instance with the given fields replaced

        Example
        -------
        >>> t = Time(12, 30, 0)
        >>> t.replace(minute=3, microsecond=4)
        Time(12:03:00.000004)
        """
        _check_invalid_replace_kwargs(kwargs, _TIME_FIELDS + ("precision",))
        microsecond = kwargs.get("microsecond", self.microsecond)
        precision = kwargs.get("precision")
        if precision is None:
            precision = _widen(self._precision, microsecond)
        return Time(
            kwargs.get("hour", self.hour),
            kwargs.get("minute", self.minute),
            kwargs.get("second", self.second),
            microsecond=microsecond,
            precision=precision,
        )

    def add(self, d: Duration, /) -> Time:
        """Add a duration, wrapping around midnight

        Example
        -------
        >>> Time(23, 30).add(hours(1))
        Time(00:30:00)
        >>> Time.leap_second().add(seconds(1))
        Time(00:00:00)
        """
        if d._us < 0:
            return self.subtract(-d)
        return self._add_within_day(d._us % US_PER_DAY)[1]

    def subtract(self, d: Duration, /) -> Time:
        """Subtract a duration, wrapping around midnight

        Example
        -------
        >>> Time(0, 30).subtract(hours(1))
        Time(23:30:00)
        """
        if d._us < 0:
            return self.add(-d)
        return self._subtract_within_day(d._us % US_PER_DAY)[1]

    def difference(self, other: Time, /) -> Duration:
        """The duration between two times (on the same day)

        Example
        -------
        >>> Time(12, 30).difference(Time(11))
        Duration(PT1H30M)
        """
        return Duration._from_us_unchecked(
            self.in_microseconds() - other.in_microseconds()
        )

    # Both helpers below take 0 <= us < one day and return the number of
    # days carried (or borrowed) along with the new time. The offset is
    # applied to the original value, so sentinels keep their meaning.
    def _add_within_day(self, us: int) -> tuple[int, Time]:
        if not us:
            return 0, self
        precision = _widen(self._precision, us)
        if self._kind is _Kind.LEAP_SECOND:
            if self._us % US_PER_SECOND + us < US_PER_SECOND:
                return 0, Time._new_unchecked(
                    _Kind.LEAP_SECOND, self._us + us, precision
                )
            flat = self._us + us
        elif self._kind is _Kind.END_OF_DAY:
            flat = US_PER_DAY + us
        else:
            flat = self._us + us
        carry, rest = divmod(flat, US_PER_DAY)
        return carry, Time._new_unchecked(_Kind.NORMAL, rest, precision)

    def _subtract_within_day(self, us: int) -> tuple[int, Time]:
        if not us:
            return 0, self
        precision = _widen(self._precision, us)
        if self._kind is _Kind.LEAP_SECOND:
            if self._us % US_PER_SECOND >= us:
                return 0, Time._new_unchecked(
                    _Kind.LEAP_SECOND, self._us - us, precision
                )
            flat = self._us + US_PER_SECOND - us
        elif self._kind is _Kind.END_OF_DAY:
            flat = US_PER_DAY - us
        else:
            flat = self._us - us
        borrow, rest = divmod(flat, US_PER_DAY)
        return -borrow, Time._new_unchecked(_Kind.NORMAL, rest, precision)

    @no_type_check
    def __add__(self, other: Duration) -> Time:
        """Add a duration. Behaves the same as :meth:`add`"""
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    @overload
    def __sub__(self, other: Duration) -> Time: ...

    @overload
    def __sub__(self, other: Time) -> Duration: ...

    def __sub__(self, other: Duration | Time) -> Time | Duration:
        """Subtract a duration, or calculate the difference between times"""
        if isinstance(other, Duration):
            return self.subtract(other)
        elif isinstance(other, Time):
            return self.difference(other)
        return NotImplemented

    def format_common_iso(self) -> str:
        """Format as the common ISO 8601 time format.
        The number of decimals depends on the precision.

        Inverse of :meth:`parse_common_iso`.

        Example
        -------
        >>> Time(12, 30, 0).format_common_iso()
        '12:30:00'
        >>> Time(12, 30, 0, microsecond=1_000).format_common_iso()
        '12:30:00.001'
        """
        base = f"{self.hour:02}:{self.minute:02}:{self.second:02}"
        us = self._us % US_PER_SECOND
        if self._precision == "second":
            return base
        elif self._precision == "milli":
            return f"{base}.{us // 1_000:03}"
        elif self._precision == "micro":
            return f"{base}.{us:06}"
        return f"{base}.{us:06}000"

    @classmethod
    def parse_common_iso(cls, s: str, /) -> Time:
        """Create from the common ISO 8601 time format ``HH:MM:SS``,
        with up to 9 decimals. Decimals beyond microseconds are truncated.

        Inverse of :meth:`format_common_iso`

        Example
        -------
        >>> Time.parse_common_iso("12:30:00")
        Time(12:30:00)
        >>> Time.parse_common_iso("23:59:60.5")
        Time(23:59:60.500)
        """
        hour, minute, second, us, precision = time_from_iso(s)
        return cls(hour, minute, second, microsecond=us, precision=precision)

    def format(self, fmt: str, /) -> str:
        """Format according to a directive string

        Example
        -------
        >>> Time(14, 5).format("h:mm A")
        '2:05 PM'
        """
        return _render(fmt, time=self)

    @classmethod
    def parse(cls, s: str, fmt: str, /) -> Time:
        """Parse a string according to a directive string.
        Inverse of :meth:`format`.

        Example
        -------
        >>> Time.parse("2:05 PM", "h:mm A")
        Time(14:05:00)
        """
        hour, minute, second, us, precision = _parse_fields(s, fmt).time()
        return cls(hour, minute, second, microsecond=us, precision=precision)

    @classmethod
    def _new_unchecked(
        cls, kind: _Kind, us: int, precision: Precision, /
    ) -> Time:
        self = _object_new(cls)
        self._kind = kind
        self._us = us
        self._precision = precision
        return self

    # Sorts a leap second after the last microsecond of the second
    # it extends, and before the next minute
    def _key(self) -> tuple[int, int]:
        if self._kind is _Kind.NORMAL:
            return (self._us, 0)
        elif self._kind is _Kind.END_OF_DAY:
            return (US_PER_DAY, 0)
        payload = self._us % US_PER_SECOND
        return (self._us - payload + US_PER_SECOND - 1, 1 + payload)

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Time({self})"

    def __eq__(self, other: object) -> bool:
        """Compare for equality. Precision is ignored.

        Example
        -------
        >>> t = Time(12, 30, 0)
        >>> t == Time(12, 30, 0)
        True
        >>> t == Time(12, 30, 0, precision="milli")
        True
        >>> t == Time(12, 30, 1)
        False
        """
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() >= other._key()

    @no_type_check
    def __reduce__(self):
        return (
            _unpkl_time,
            (
                pack(
                    "<BQB",
                    self._kind.value,
                    self._us,
                    _PRECISIONS.index(self._precision),
                ),
            ),
        )


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
def _unpkl_time(data: bytes) -> Time:
    kind, us, precision = unpack("<BQB", data)
    return Time._new_unchecked(_Kind(kind), us, _PRECISIONS[precision])


Time.MIDNIGHT = Time()
Time.NOON = Time(12)
Time.MAX = Time(23, 59, 59, microsecond=999_999)
Time.END_OF_DAY = Time(24)


@final
class Duration(_ImmutableBase):
    """An exact amount of elapsed time, with microsecond resolution.
    It may be negative, and may span many days.

    Examples
    --------
    >>> d = Duration(hours=1, minutes=30)
    Duration(PT1H30M)
    >>> d.in_minutes()
    90.0

    Note
    ----
    A shorter way to instantiate a duration is to use the helper functions
    :func:`~tempo.hours`, :func:`~tempo.minutes`, etc.
    """

    __slots__ = ("_us",)

    ZERO: ClassVar[Duration]
    """A duration of zero"""

    def __init__(
        self,
        *,
        weeks: float = 0,
        days: float = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: float = 0,
        microseconds: int = 0,
    ) -> None:
        # Cast individual components to int to avoid floating point errors
        self._us = (
            int(weeks * _US_PER_WEEK)
            + int(days * US_PER_DAY)
            + int(hours * US_PER_HOUR)
            + int(minutes * US_PER_MINUTE)
            + int(seconds * US_PER_SECOND)
            + int(milliseconds * 1_000)
            + int(microseconds)
        )

    def in_days(self) -> float:
        """The total size in days (of exactly 24 hours each)"""
        return self._us / US_PER_DAY

    def in_hours(self) -> float:
        """The total size in hours

        Example
        -------
        >>> d = Duration(hours=1, minutes=30)
        >>> d.in_hours()
        1.5
        """
        return self._us / US_PER_HOUR

    def in_minutes(self) -> float:
        return self._us / US_PER_MINUTE

    def in_seconds(self) -> float:
        """The total size in seconds

        Example
        -------
        >>> d = Duration(minutes=2, seconds=1, microseconds=500_000)
        >>> d.in_seconds()
        121.5
        """
        return self._us / US_PER_SECOND

    def in_milliseconds(self) -> float:
        return self._us / 1_000

    def in_microseconds(self) -> int:
        return self._us

    def in_days_hrs_mins_secs_us(self) -> tuple[int, int, int, int, int]:
        """Convert to a tuple of (days, hours, minutes, seconds, microseconds).
        All parts have the same sign.

        Example
        -------
        >>> d = Duration(days=1, hours=1, minutes=30, microseconds=5_000_090)
        >>> d.in_days_hrs_mins_secs_us()
        (1, 1, 30, 5, 90)
        """
        days, rem = divmod(abs(self._us), US_PER_DAY)
        hrs, rem = divmod(rem, US_PER_HOUR)
        mins, rem = divmod(rem, US_PER_MINUTE)
        secs, us = divmod(rem, US_PER_SECOND)
        return (
            (days, hrs, mins, secs, us)
            if self._us >= 0
            else (-days, -hrs, -mins, -secs, -us)
        )

    def format_common_iso(self) -> str:
        """Format as the *popular interpretation* of the ISO 8601 duration
        format, with days as the largest unit.

        Inverse of :meth:`parse_common_iso`.

        Example
        -------
        >>> Duration(hours=1, minutes=30).format_common_iso()
        'PT1H30M'
        >>> Duration(days=-2, hours=-3).format_common_iso()
        '-P2DT3H'
        """
        days, hrs, mins, secs, us = abs(self).in_days_hrs_mins_secs_us()
        seconds = f"{secs}.{us:06}".rstrip("0") if us else str(secs)
        time_part = (
            f"{hrs}H" * bool(hrs)
            + f"{mins}M" * bool(mins)
            + f"{seconds}S" * bool(secs or us)
        )
        body = f"{days}D" * bool(days) + f"T{time_part}" * bool(time_part)
        return f"{'-' * (self._us < 0)}P{body or 'T0S'}"

    @classmethod
    def parse_common_iso(cls, s: str, /) -> Duration:
        """Parse the *popular interpretation* of the ISO 8601 duration format.
        Units larger than days are not accepted.

        Inverse of :meth:`format_common_iso`

        Example
        -------
        >>> Duration.parse_common_iso("PT1H30M")
        Duration(PT1H30M)
        """
        return cls._from_us_unchecked(duration_from_iso(s))

    def __add__(self, other: Duration) -> Duration:
        """Add two durations together

        Example
        -------
        >>> d = Duration(hours=1, minutes=30)
        >>> d + Duration(minutes=30)
        Duration(PT2H)
        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_us_unchecked(self._us + other._us)

    def __sub__(self, other: Duration) -> Duration:
        """Subtract two durations

        Example
        -------
        >>> d = Duration(hours=1, minutes=30)
        >>> d - Duration(minutes=30)
        Duration(PT1H)
        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_us_unchecked(self._us - other._us)

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> d = Duration(hours=1, minutes=30)
        >>> d == Duration(minutes=90)
        True
        >>> d == Duration(hours=2)
        False
        """
        if not isinstance(other, Duration):
            return NotImplemented
        return self._us == other._us

    def __hash__(self) -> int:
        return hash(self._us)

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._us < other._us

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._us <= other._us

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._us > other._us

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._us >= other._us

    def __bool__(self) -> bool:
        """True if the value is non-zero

        Example
        -------
        >>> bool(Duration())
        False
        >>> bool(Duration(minutes=1))
        True
        """
        return bool(self._us)

    def __mul__(self, other: int) -> Duration:
        """Multiply by a whole number

        Example
        -------
        >>> Duration(hours=1, minutes=30) * 2
        Duration(PT3H)
        """
        if not isinstance(other, int):
            return NotImplemented
        return Duration._from_us_unchecked(self._us * other)

    def __rmul__(self, other: int) -> Duration:
        return self * other

    def __neg__(self) -> Duration:
        return Duration._from_us_unchecked(-self._us)

    def __pos__(self) -> Duration:
        return self

    def __abs__(self) -> Duration:
        """The absolute value

        Example
        -------
        >>> abs(Duration(hours=-1, minutes=-30))
        Duration(PT1H30M)
        """
        return Duration._from_us_unchecked(abs(self._us))

    @overload
    def __truediv__(self, other: float) -> Duration: ...

    @overload
    def __truediv__(self, other: Duration) -> float: ...

    def __truediv__(self, other: float | Duration) -> Duration | float:
        """Divide by a number or another duration

        Example
        -------
        >>> d = Duration(hours=1, minutes=30)
        >>> d / 2.5
        Duration(PT36M)
        >>> d / Duration(minutes=30)
        3.0
        """
        if isinstance(other, Duration):
            return self._us / other._us
        elif isinstance(other, (int, float)):
            return Duration._from_us_unchecked(int(self._us / other))
        return NotImplemented

    @overload
    def __floordiv__(self, other: int) -> Duration: ...

    @overload
    def __floordiv__(self, other: Duration) -> int: ...

    def __floordiv__(self, other: int | Duration) -> Duration | int:
        """Floor-divide by a whole number or another duration

        Example
        -------
        >>> Duration(days=3, hours=2) // Duration(days=1)
        3
        """
        if isinstance(other, Duration):
            return self._us // other._us
        elif isinstance(other, int):
            return Duration._from_us_unchecked(self._us // other)
        return NotImplemented

    def __mod__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_us_unchecked(self._us % other._us)

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Duration({self})"

    @no_type_check
    def __reduce__(self):
        return _unpkl_duration, (pack("<q", self._us),)

    @classmethod
    def _from_us_unchecked(cls, us: int) -> Duration:
        new = _object_new(cls)
        new._us = us
        return new


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_duration(data: bytes) -> Duration:
    return Duration._from_us_unchecked(*unpack("<q", data))


Duration.ZERO = Duration()


@final
class Offset(_ImmutableBase):
    """A fixed difference from UTC, in whole minutes.
    Ranges from -12:00 to +14:00.

    Example
    -------
    >>> Offset(5, 30)
    Offset(+05:30)
    >>> Offset(-3)
    Offset(-03:00)
    """

    __slots__ = ("_minutes",)

    UTC: ClassVar[Offset]
    """The offset of UTC itself"""

    def __init__(self, hours: int = 0, minutes: int = 0) -> None:
        total = hours * 60 + minutes
        if not MIN_OFFSET_MINUTES <= total <= MAX_OFFSET_MINUTES:
            raise OutOfRange("offset", format_offset(total))
        self._minutes = total

    @classmethod
    def from_minutes(cls, minutes: int, /) -> Offset:
        """Create from a (signed) number of minutes

        Example
        -------
        >>> Offset.from_minutes(-90)
        Offset(-01:30)
        """
        return cls(0, minutes)

    @classmethod
    def local(cls, *, clock: ClockProvider | None = None) -> Offset:
        """The current local offset of the clock"""
        return cls.from_minutes(get_clock(clock).local_offset())

    @property
    def total_minutes(self) -> int:
        return self._minutes

    def to_duration(self) -> Duration:
        """The offset as a (signed) duration

        Example
        -------
        >>> Offset(-1, -30).to_duration()
        Duration(-PT1H30M)
        """
        return Duration._from_us_unchecked(self._minutes * US_PER_MINUTE)

    def format_common_iso(self) -> str:
        """Format as ``±HH:MM``

        Example
        -------
        >>> Offset(5, 30).format_common_iso()
        '+05:30'
        """
        return format_offset(self._minutes)

    @classmethod
    def parse_common_iso(cls, s: str, /) -> Offset:
        """Parse ``Z``, ``±HH:MM``, ``±HHMM``, ``±HH`` or ``±H``

        Example
        -------
        >>> Offset.parse_common_iso("-0130")
        Offset(-01:30)
        """
        return cls.from_minutes(offset_from_iso(s))

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Offset({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Offset):
            return NotImplemented
        return self._minutes == other._minutes

    def __hash__(self) -> int:
        return hash(self._minutes)

    def __lt__(self, other: Offset) -> bool:
        if not isinstance(other, Offset):
            return NotImplemented
        return self._minutes < other._minutes

    def __le__(self, other: Offset) -> bool:
        if not isinstance(other, Offset):
            return NotImplemented
        return self._minutes <= other._minutes

    def __gt__(self, other: Offset) -> bool:
        if not isinstance(other, Offset):
            return NotImplemented
        return self._minutes > other._minutes

    def __ge__(self, other: Offset) -> bool:
        if not isinstance(other, Offset):
            return NotImplemented
        return self._minutes >= other._minutes

    @no_type_check
    def __reduce__(self):
        return _unpkl_offset, (pack("<h", self._minutes),)


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_offset(data: bytes) -> Offset:
    return Offset.from_minutes(*unpack("<h", data))


Offset.UTC = Offset()


@final
class NaiveDateTime(_ImmutableBase):
    """A date and time without an offset or timezone

    Example
    -------
    >>> NaiveDateTime(2024, 6, 13, 23, 50, 10)
    NaiveDateTime(2024-06-13T23:50:10)
    """

    __slots__ = ("_date", "_time")

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        microsecond: int = 0,
        precision: Precision | None = None,
    ) -> None:
        self._date = Date(year, month, day)
        self._time = Time(
            hour, minute, second, microsecond=microsecond, precision=precision
        )

    @property
    def year(self) -> int:
        return self._date.year

    @property
    def month(self) -> int:
        return self._date.month

    @property
    def day(self) -> int:
        return self._date.day

    @property
    def hour(self) -> int:
        return self._time.hour

    @property
    def minute(self) -> int:
        return self._time.minute

    @property
    def second(self) -> int:
        return self._time.second

    @property
    def microsecond(self) -> int:
        return self._time.microsecond

    @property
    def precision(self) -> Precision:
        return self._time.precision

    def date(self) -> Date:
        return self._date

    def time(self) -> Time:
        return self._time

    def start_of_day(self) -> NaiveDateTime:
        return NaiveDateTime._new_unchecked(self._date, Time.MIDNIGHT)

    def replace(self, **kwargs: Any) -> NaiveDateTime:
        """Create a new instance with the given fields replaced

        Example
        -------
        >>> d = NaiveDateTime(2020, 8, 15, 23, 12)
        >>> d.replace(year=2021, hour=2)
        NaiveDateTime(2021-08-15T02:12:00)
        """
        _check_invalid_replace_kwargs(
            kwargs, _DATE_FIELDS + _TIME_FIELDS + ("precision",)
        )
        date_kwargs = {k: kwargs.pop(k) for k in _DATE_FIELDS if k in kwargs}
        return NaiveDateTime._new_unchecked(
            self._date.replace(**date_kwargs) if date_kwargs else self._date,
            self._time.replace(**kwargs) if kwargs else self._time,
        )

    def replace_date(self, d: Date, /) -> NaiveDateTime:
        return NaiveDateTime._new_unchecked(d, self._time)

    def replace_time(self, t: Time, /) -> NaiveDateTime:
        return NaiveDateTime._new_unchecked(self._date, t)

    def assume_offset(self, offset: int | Offset | Duration, /) -> DateTime:
        """Attach an offset, without changing the date or time

        Example
        -------
        >>> NaiveDateTime(2024, 6, 21, 14, 47).assume_offset(1)
        DateTime(2024-06-21T14:47:00+01:00)
        """
        return DateTime._new_unchecked(self, _load_offset(offset), None)

    def assume_utc(self) -> DateTime:
        return DateTime._new_unchecked(self, Offset.UTC, None)

    def assume_zone(self, zone: TimezoneProvider | str, /) -> DateTime:
        """Attach a timezone, without changing the date or time.
        The offset is looked up from the timezone.
        """
        zone = _load_zone(zone)
        return DateTime._new_unchecked(
            self, _resolve_local_offset(self, zone), zone
        )

    def to_unix_microseconds(self) -> int:
        """Microseconds since 1970-01-01T00:00:00, treating this as UTC"""
        return self._date._days * US_PER_DAY + self._time.in_microseconds()

    def to_unix_seconds(self) -> int:
        """Seconds since 1970-01-01T00:00:00, treating this as UTC"""
        return self.to_unix_microseconds() // US_PER_SECOND

    @classmethod
    def from_unix_microseconds(cls, us: int, /) -> NaiveDateTime:
        """Inverse of :meth:`to_unix_microseconds`

        Example
        -------
        >>> NaiveDateTime.from_unix_microseconds(1_500_000)
        NaiveDateTime(1970-01-01T00:00:01.500)
        """
        days, rest = divmod(us, US_PER_DAY)
        return cls._new_unchecked(
            Date._from_days(days),
            Time._new_unchecked(_Kind.NORMAL, rest, _min_precision(rest)),
        )

    @classmethod
    def from_unix_seconds(cls, s: int, /) -> NaiveDateTime:
        return cls.from_unix_microseconds(s * US_PER_SECOND)

    def add(
        self,
        delta: Duration | None = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: float = 0,
        microseconds: int = 0,
    ) -> NaiveDateTime:
        """Add a duration, or calendar and time units.

        Calendar units (years, months, weeks, days) are added first,
        then the exact time units.

        Example
        -------
        >>> d = NaiveDateTime(2024, 6, 13, 23, 50, 10)
        >>> d.add(minutes=13)
        NaiveDateTime(2024-06-14T00:03:10)
        >>> d.add(hours(-1))
        NaiveDateTime(2024-06-13T22:50:10)
        """
        if delta is not None:
            _check_no_units_with_delta(
                years, months, weeks, days, hours, minutes, seconds,
                milliseconds, microseconds,
            )  # fmt: skip
            if not isinstance(delta, Duration):
                raise TypeError(f"Expected Duration, got {type(delta)!r}")
            return self._shift(delta._us)
        result = self
        if years or months or weeks or days:
            result = NaiveDateTime._new_unchecked(
                self._date.add(
                    years=years, months=months, weeks=weeks, days=days
                ),
                self._time,
            )
        return result._shift(
            Duration(
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                milliseconds=milliseconds,
                microseconds=microseconds,
            )._us
        )

    def subtract(
        self,
        delta: Duration | None = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: float = 0,
        microseconds: int = 0,
    ) -> NaiveDateTime:
        """Inverse of :meth:`add`

        Example
        -------
        >>> d = NaiveDateTime(2024, 6, 14, 0, 3, 10)
        >>> d.subtract(minutes=13)
        NaiveDateTime(2024-06-13T23:50:10)
        """
        if delta is not None:
            _check_no_units_with_delta(
                years, months, weeks, days, hours, minutes, seconds,
                milliseconds, microseconds,
            )  # fmt: skip
            if not isinstance(delta, Duration):
                raise TypeError(f"Expected Duration, got {type(delta)!r}")
            return self._unshift(delta._us)
        return self.add(
            years=-years,
            months=-months,
            weeks=-weeks,
            days=-days,
            hours=-hours,
            minutes=-minutes,
            seconds=-seconds,
            milliseconds=-milliseconds,
            microseconds=-microseconds,
        )

    # Whole days go to the date. The remainder goes to the time, which
    # reports whether it crossed midnight. Negative amounts are handled
    # by the inverse operation.
    def _shift(self, us: int) -> NaiveDateTime:
        if us < 0:
            return self._unshift(-us)
        days, rest = divmod(us, US_PER_DAY)
        carry, time = self._time._add_within_day(rest)
        return NaiveDateTime._new_unchecked(
            self._date._add_days(days + carry), time
        )

    def _unshift(self, us: int) -> NaiveDateTime:
        if us < 0:
            return self._shift(-us)
        days, rest = divmod(us, US_PER_DAY)
        borrow, time = self._time._subtract_within_day(rest)
        return NaiveDateTime._new_unchecked(
            self._date._add_days(-days - borrow), time
        )

    # Offsets are whole minutes, so a leap second stays a leap second:
    # 23:59:60 in UTC is 00:59:60 at +01:00
    def _offset_by(self, minutes: int) -> NaiveDateTime:
        t = self._time
        if t._kind is not _Kind.LEAP_SECOND:
            return self._shift(minutes * US_PER_MINUTE)
        days, us = divmod(t._us + minutes * US_PER_MINUTE, US_PER_DAY)
        return NaiveDateTime._new_unchecked(
            self._date._add_days(days),
            Time._new_unchecked(_Kind.LEAP_SECOND, us, t._precision),
        )

    def difference(self, other: NaiveDateTime, /) -> Duration:
        """The exact duration between two datetimes

        Example
        -------
        >>> NaiveDateTime(2024, 6, 14, 1).difference(
        ...     NaiveDateTime(2024, 6, 13, 23, 30)
        ... )
        Duration(PT1H30M)
        """
        return Duration._from_us_unchecked(
            self.to_unix_microseconds() - other.to_unix_microseconds()
        )

    def __add__(self, other: Duration) -> NaiveDateTime:
        """Add a duration. Behaves the same as :meth:`add`"""
        if not isinstance(other, Duration):
            return NotImplemented
        return self._shift(other._us)

    @overload
    def __sub__(self, other: Duration) -> NaiveDateTime: ...

    @overload
    def __sub__(self, other: NaiveDateTime) -> Duration: ...

    def __sub__(
        self, other: Duration | NaiveDateTime
    ) -> NaiveDateTime | Duration:
        """Subtract a duration, or calculate the difference between datetimes

        Example
        -------
        >>> d = NaiveDateTime(2024, 6, 14, 0, 3, 10)
        >>> d - minutes(13)
        NaiveDateTime(2024-06-13T23:50:10)
        >>> d - NaiveDateTime(2024, 6, 13)
        Duration(P1DT3M10S)
        """
        if isinstance(other, Duration):
            return self._unshift(other._us)
        elif isinstance(other, NaiveDateTime):
            return self.difference(other)
        return NotImplemented

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.fff]``

        Example
        -------
        >>> NaiveDateTime(2024, 6, 13, 12, microsecond=500).format_common_iso()
        '2024-06-13T12:00:00.000500'
        """
        return f"{self._date}T{self._time}"

    @classmethod
    def parse_common_iso(cls, s: str, /) -> NaiveDateTime:
        """Parse ``YYYY-MM-DDTHH:MM:SS[.fff]``. The separator may also be
        a space or a lowercase ``t``.

        Inverse of :meth:`format_common_iso`

        Example
        -------
        >>> NaiveDateTime.parse_common_iso("2024-06-13 12:00:00")
        NaiveDateTime(2024-06-13T12:00:00)
        """
        (year, month, day), (hour, minute, second, us, precision) = (
            naive_from_iso(s)
        )
        return cls(
            year,
            month,
            day,
            hour,
            minute,
            second,
            microsecond=us,
            precision=precision,
        )

    def format(self, fmt: str, /) -> str:
        """Format according to a directive string

        Example
        -------
        >>> NaiveDateTime(2024, 6, 13, 9, 5).format("ddd D MMM, HH:mm")
        'Thu 13 Jun, 09:05'
        """
        return _render(fmt, date=self._date, time=self._time)

    @classmethod
    def parse(cls, s: str, fmt: str, /) -> NaiveDateTime:
        """Parse a string according to a directive string.
        Inverse of :meth:`format`.
        """
        fields = _parse_fields(s, fmt)
        hour, minute, second, us, precision = fields.time()
        return cls(
            *fields.date(),
            hour,
            minute,
            second,
            microsecond=us,
            precision=precision,
        )

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"NaiveDateTime({self})"

    def _key(self) -> tuple[int, tuple[int, int]]:
        return (self._date._days, self._time._key())

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> d = NaiveDateTime(2024, 6, 13, 12)
        >>> d == NaiveDateTime(2024, 6, 13, 12)
        True
        >>> d == NaiveDateTime(2024, 6, 13, 13)
        False
        """
        if not isinstance(other, NaiveDateTime):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: NaiveDateTime) -> bool:
        if not isinstance(other, NaiveDateTime):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: NaiveDateTime) -> bool:
        if not isinstance(other, NaiveDateTime):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: NaiveDateTime) -> bool:
        if not isinstance(other, NaiveDateTime):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: NaiveDateTime) -> bool:
        if not isinstance(other, NaiveDateTime):
            return NotImplemented
        return self._key() >= other._key()

    @classmethod
    def _new_unchecked(cls, d: Date, t: Time, /) -> NaiveDateTime:
        self = _object_new(cls)
        self._date = d
        self._time = t
        return self

    # the end of one day is the start of the next
    def _normalized(self) -> NaiveDateTime:
        if self._time._kind is _Kind.END_OF_DAY:
            return NaiveDateTime._new_unchecked(
                self._date._add_days(1), Time.MIDNIGHT
            )
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_naive, (_pack_naive(self),)


def _pack_naive(d: NaiveDateTime) -> bytes:
    t = d._time
    return pack(
        "<HBBBQB",
        *day_count_to_civil(d._date._days),
        t._kind.value,
        t._us,
        _PRECISIONS.index(t._precision),
    )


def _unpack_naive(data: bytes) -> NaiveDateTime:
    year, month, day, kind, us, precision = unpack("<HBBBQB", data)
    return NaiveDateTime._new_unchecked(
        Date(year, month, day),
        Time._new_unchecked(_Kind(kind), us, _PRECISIONS[precision]),
    )


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_naive(data: bytes) -> NaiveDateTime:
    return _unpack_naive(data)


_HTTP_FORMAT = "ddd, DD MMM YYYY HH:mm:ss [GMT]"


@final
class DateTime(_ImmutableBase):
    """A date and time with an offset from UTC. It may also be linked
    to a timezone, in which case the offset follows the timezone's rules
    whenever the date or time changes.

    Example
    -------
    >>> DateTime(2024, 6, 21, 14, 47, offset=1)
    DateTime(2024-06-21T14:47:00+01:00)
    >>> DateTime(2024, 6, 21, 14, 47, zone="Europe/Amsterdam")
    DateTime(2024-06-21T14:47:00+02:00[Europe/Amsterdam])

    Two datetimes are equal if they represent the same moment:

    >>> DateTime(2024, 6, 21, 14, 47, offset=1) == DateTime(
    ...     2024, 6, 21, 12, 47, offset=-1
    ... )
    True

    Note
    ----
    ``offset`` may be an :class:`Offset`, a :class:`Duration` of whole
    minutes, or an integer number of hours.
    """

    __slots__ = ("_naive", "_offset", "_zone")

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        microsecond: int = 0,
        precision: Precision | None = None,
        offset: int | Offset | Duration | None = None,
        zone: TimezoneProvider | str | None = None,
    ) -> None:
        if zone is None:
            if offset is None:
                raise TypeError("Either offset or zone is required")
            self._offset = _load_offset(offset)
            naive = _naive_at_offset(
                year,
                month,
                day,
                hour,
                minute,
                second,
                microsecond,
                precision,
                self._offset,
            )
        elif offset is not None:
            raise TypeError("Cannot combine offset and zone")
        else:
            naive = NaiveDateTime(
                year,
                month,
                day,
                hour,
                minute,
                second,
                microsecond=microsecond,
                precision=precision,
            )
            zone = _load_zone(zone)
            self._offset = _resolve_local_offset(naive, zone)
        self._naive = naive
        self._zone = zone

    @classmethod
    def now(
        cls,
        offset: int | Offset | Duration | None = None,
        *,
        zone: TimezoneProvider | str | None = None,
        clock: ClockProvider | None = None,
    ) -> DateTime:
        """The current time, at the given offset or in the given timezone

        Example
        -------
        >>> DateTime.now(offset=2)
        DateTime(2024-06-13T14:02:11.021844+02:00)
        """
        utc = NaiveDateTime.from_unix_microseconds(get_clock(clock).now_wall())
        if zone is None:
            if offset is None:
                raise TypeError("Either offset or zone is required")
            return cls._from_utc(utc, _load_offset(offset), None)
        elif offset is not None:
            raise TypeError("Cannot combine offset and zone")
        return cls._from_utc(utc, None, _load_zone(zone))

    @classmethod
    def now_utc(cls, *, clock: ClockProvider | None = None) -> DateTime:
        """The current time in UTC"""
        return cls.now(Offset.UTC, clock=clock)

    @classmethod
    def now_local(cls, *, clock: ClockProvider | None = None) -> DateTime:
        """The current time at the clock's local offset"""
        clock = get_clock(clock)
        return cls.now(Offset.from_minutes(clock.local_offset()), clock=clock)

    @classmethod
    def from_unix_microseconds(
        cls,
        us: int,
        /,
        *,
        offset: int | Offset | Duration = 0,
        zone: TimezoneProvider | str | None = None,
    ) -> DateTime:
        """Create from a UNIX timestamp in microseconds.
        The result is in UTC unless an offset or zone is given.

        Example
        -------
        >>> DateTime.from_unix_microseconds(1_718_000_000_000_000)
        DateTime(2024-06-10T06:13:20Z)
        """
        utc = NaiveDateTime.from_unix_microseconds(us)
        if zone is None:
            return cls._from_utc(utc, _load_offset(offset), None)
        return cls._from_utc(utc, None, _load_zone(zone))

    @classmethod
    def from_unix_seconds(
        cls,
        s: int,
        /,
        *,
        offset: int | Offset | Duration = 0,
        zone: TimezoneProvider | str | None = None,
    ) -> DateTime:
        return cls.from_unix_microseconds(
            s * US_PER_SECOND, offset=offset, zone=zone
        )

    def to_unix_microseconds(self) -> int:
        return self._utc_naive().to_unix_microseconds()

    def to_unix_seconds(self) -> int:
        return self.to_unix_microseconds() // US_PER_SECOND

    @property
    def year(self) -> int:
        return self._naive.year

    @property
    def month(self) -> int:
        return self._naive.month

    @property
    def day(self) -> int:
        return self._naive.day

    @property
    def hour(self) -> int:
        return self._naive.hour

    @property
    def minute(self) -> int:
        return self._naive.minute

    @property
    def second(self) -> int:
        return self._naive.second

    @property
    def microsecond(self) -> int:
        return self._naive.microsecond

    @property
    def precision(self) -> Precision:
        return self._naive.precision

    @property
    def offset(self) -> Offset:
        return self._offset

    @property
    def zone(self) -> TimezoneProvider | None:
        return self._zone

    def is_zoned(self) -> bool:
        return self._zone is not None

    def naive(self) -> NaiveDateTime:
        """The date and time, without the offset"""
        return self._naive

    def date(self) -> Date:
        return self._naive._date

    def time(self) -> Time:
        return self._naive._time

    def to_utc(self) -> DateTime:
        """Convert to UTC. The timezone (if any) is dropped.

        Example
        -------
        >>> DateTime(2024, 6, 21, 14, 47, offset=1).to_utc()
        DateTime(2024-06-21T13:47:00Z)
        """
        return DateTime._from_utc(self._utc_naive(), Offset.UTC, None)

    def to_offset(self, offset: int | Offset | Duration, /) -> DateTime:
        """Convert to another offset. The timezone (if any) is dropped.

        Example
        -------
        >>> DateTime(2024, 6, 21, 14, 47, offset=1).to_offset(-1)
        DateTime(2024-06-21T12:47:00-01:00)
        """
        return DateTime._from_utc(
            self._utc_naive(), _load_offset(offset), None
        )

    def to_zone(self, zone: TimezoneProvider | str, /) -> DateTime:
        """Convert to the given timezone

        Example
        -------
        >>> DateTime(2024, 6, 21, 12, offset=0).to_zone("Asia/Tokyo")
        DateTime(2024-06-21T21:00:00+09:00[Asia/Tokyo])
        """
        return DateTime._from_utc(self._utc_naive(), None, _load_zone(zone))

    def to_local(self, *, clock: ClockProvider | None = None) -> DateTime:
        """Convert to the clock's current local offset"""
        return self.to_offset(Offset.local(clock=clock))

    def drop_zone(self) -> DateTime:
        """Keep the current offset, but unlink the timezone"""
        return DateTime._new_unchecked(self._naive, self._offset, None)

    def replace(self, **kwargs: Any) -> DateTime:
        """Create a new instance with the given fields replaced.
        In a timezone, the offset is looked up again.

        Example
        -------
        >>> d = DateTime(2020, 8, 15, 23, 12, offset=1)
        >>> d.replace(year=2021, offset=2)
        DateTime(2021-08-15T23:12:00+02:00)
        """
        offset = kwargs.pop("offset", None)
        naive = self._naive.replace(**kwargs) if kwargs else self._naive
        if self._zone is not None:
            if offset is not None:
                raise TypeError("Cannot replace the offset in a timezone")
            return DateTime._new_unchecked(
                naive, _resolve_local_offset(naive, self._zone), self._zone
            )
        return DateTime._new_unchecked(
            naive,
            self._offset if offset is None else _load_offset(offset),
            None,
        )

    def add(
        self,
        delta: Duration | None = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: float = 0,
        microseconds: int = 0,
    ) -> DateTime:
        """Add a duration, or calendar and time units.

        Calendar units are added to the local date first, after which
        a timezone (if any) decides the offset. Exact time units are
        then added to the moment in UTC.

        Example
        -------
        >>> d = DateTime(2024, 3, 30, 12, zone="Europe/Amsterdam")
        >>> d.add(days=1)
        DateTime(2024-03-31T12:00:00+02:00[Europe/Amsterdam])
        >>> d.add(hours=24)
        DateTime(2024-03-31T13:00:00+02:00[Europe/Amsterdam])
        """
        if delta is not None:
            _check_no_units_with_delta(
                years, months, weeks, days, hours, minutes, seconds,
                milliseconds, microseconds,
            )  # fmt: skip
            if not isinstance(delta, Duration):
                raise TypeError(f"Expected Duration, got {type(delta)!r}")
            return self._shift(delta._us)
        result = self
        if years or months or weeks or days:
            naive = self._naive.replace_date(
                self._naive._date.add(
                    years=years, months=months, weeks=weeks, days=days
                )
            )
            result = DateTime._new_unchecked(
                naive,
                (
                    self._offset
                    if self._zone is None
                    else _resolve_local_offset(naive, self._zone)
                ),
                self._zone,
            )
        return result._shift(
            Duration(
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                milliseconds=milliseconds,
                microseconds=microseconds,
            )._us
        )

    def subtract(
        self,
        delta: Duration | None = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: float = 0,
        microseconds: int = 0,
    ) -> DateTime:
        """Inverse of :meth:`add`"""
        if delta is not None:
            _check_no_units_with_delta(
                years, months, weeks, days, hours, minutes, seconds,
                milliseconds, microseconds,
            )  # fmt: skip
            if not isinstance(delta, Duration):
                raise TypeError(f"Expected Duration, got {type(delta)!r}")
            return self._shift(-delta._us)
        return self.add(
            years=-years,
            months=-months,
            weeks=-weeks,
            days=-days,
            hours=-hours,
            minutes=-minutes,
            seconds=-seconds,
            milliseconds=-milliseconds,
            microseconds=-microseconds,
        )

    def _shift(self, us: int) -> DateTime:
        if not us:
            return self
        elif self._zone is None:
            return DateTime._new_unchecked(
                self._naive._shift(us), self._offset, None
            )
        return DateTime._from_utc(
            self._utc_naive()._shift(us), None, self._zone
        )

    def difference(self, other: DateTime, /) -> Duration:
        """The exact duration between two moments

        Example
        -------
        >>> DateTime(2024, 6, 21, 14, offset=2).difference(
        ...     DateTime(2024, 6, 21, 10, offset=0)
        ... )
        Duration(PT2H)
        """
        return Duration._from_us_unchecked(
            self.to_unix_microseconds() - other.to_unix_microseconds()
        )

    def __add__(self, other: Duration) -> DateTime:
        """Add a duration. Behaves the same as :meth:`add`"""
        if not isinstance(other, Duration):
            return NotImplemented
        return self._shift(other._us)

    @overload
    def __sub__(self, other: Duration) -> DateTime: ...

    @overload
    def __sub__(self, other: DateTime) -> Duration: ...

    def __sub__(self, other: Duration | DateTime) -> DateTime | Duration:
        """Subtract a duration, or calculate the difference between moments"""
        if isinstance(other, Duration):
            return self._shift(-other._us)
        elif isinstance(other, DateTime):
            return self.difference(other)
        return NotImplemented

    def exact_eq(self, other: DateTime, /) -> bool:
        """Compare date, time, offset and timezone, instead of only the
        moment in time.

        Example
        -------
        >>> a = DateTime(2024, 6, 21, 14, 47, offset=1)
        >>> b = DateTime(2024, 6, 21, 12, 47, offset=-1)
        >>> a == b
        True
        >>> a.exact_eq(b)
        False
        """
        return (
            self._naive == other._naive
            and self._offset == other._offset
            and self._zone == other._zone
        )

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.fff]±HH:MM``, using ``Z`` for
        UTC. The timezone is not included.

        Inverse of :meth:`parse_common_iso`

        Example
        -------
        >>> DateTime(2024, 6, 21, 14, 47, offset=1).format_common_iso()
        '2024-06-21T14:47:00+01:00'
        """
        return f"{self._naive}{format_offset(self._offset._minutes, z=True)}"

    @classmethod
    def parse_common_iso(cls, s: str, /) -> DateTime:
        """Parse a date and time with an offset.

        The separator may be ``T``, ``t`` or a space. The offset may be
        ``Z``, ``±HH:MM``, ``±HHMM``, ``±HH`` or ``±H``.

        Example
        -------
        >>> DateTime.parse_common_iso("2024-06-21 14:47:00+0100")
        DateTime(2024-06-21T14:47:00+01:00)
        """
        (
            (year, month, day),
            (hour, minute, second, us, precision),
            offset,
        ) = datetime_from_iso(s)
        return cls(
            year,
            month,
            day,
            hour,
            minute,
            second,
            microsecond=us,
            precision=precision,
            offset=Offset.from_minutes(offset),
        )

    def format(self, fmt: str, /) -> str:
        """Format according to a directive string

        Example
        -------
        >>> DateTime(2024, 6, 21, 14, 47, offset=1).format("HH:mm Z")
        '14:47 +01:00'
        """
        return _render(
            fmt,
            date=self._naive._date,
            time=self._naive._time,
            offset=self._offset,
        )

    @classmethod
    def parse(cls, s: str, fmt: str, /) -> DateTime:
        """Parse a string according to a directive string.
        The format must contain an offset directive.

        Example
        -------
        >>> DateTime.parse("21/06/2024 14:47 +01:00", "DD/MM/YYYY HH:mm Z")
        DateTime(2024-06-21T14:47:00+01:00)
        """
        fields = _parse_fields(s, fmt)
        hour, minute, second, us, precision = fields.time()
        return cls(
            *fields.date(),
            hour,
            minute,
            second,
            microsecond=us,
            precision=precision,
            offset=Offset.from_minutes(fields.offset()),
        )

    def format_http(self) -> str:
        """Format as an HTTP date (RFC 9110), always in UTC

        Example
        -------
        >>> DateTime(2024, 6, 21, 14, 47, offset=1).format_http()
        'Fri, 21 Jun 2024 13:47:00 GMT'
        """
        utc = self._utc_naive()._normalized()
        return _render(
            _HTTP_FORMAT,
            date=utc._date,
            time=utc._time.with_precision("second"),
        )

    __str__ = format_common_iso

    def __repr__(self) -> str:
        zone = f"[{self._zone.name()}]" if self._zone is not None else ""
        return f"DateTime({self}{zone})"

    def _utc_naive(self) -> NaiveDateTime:
        return self._naive._offset_by(-self._offset._minutes)

    def _instant_key(self) -> tuple[int, tuple[int, int]]:
        return self._utc_naive()._normalized()._key()

    def __eq__(self, other: object) -> bool:
        """Compare the moment in time, regardless of offset or timezone.
        Use :meth:`exact_eq` to compare the exact values.
        """
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant_key() == other._instant_key()

    def __hash__(self) -> int:
        return hash(self._instant_key())

    def __lt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant_key() < other._instant_key()

    def __le__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant_key() <= other._instant_key()

    def __gt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant_key() > other._instant_key()

    def __ge__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant_key() >= other._instant_key()

    @classmethod
    def _new_unchecked(
        cls,
        naive: NaiveDateTime,
        offset: Offset,
        zone: TimezoneProvider | None,
        /,
    ) -> DateTime:
        self = _object_new(cls)
        self._naive = naive
        self._offset = offset
        self._zone = zone
        return self

    @classmethod
    def _from_utc(
        cls,
        utc: NaiveDateTime,
        offset: Offset | None,
        zone: TimezoneProvider | None,
        /,
    ) -> DateTime:
        if zone is not None:
            offset = zone.offset_for(utc)
        assert offset is not None
        return cls._new_unchecked(
            utc._offset_by(offset._minutes), offset, zone
        )

    @no_type_check
    def __reduce__(self):
        return _unpkl_datetime, (
            _pack_naive(self._naive),
            self._offset._minutes,
            self._zone,
        )


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_datetime(
    data: bytes, offset: int, zone: TimezoneProvider | None
) -> DateTime:
    return DateTime._new_unchecked(
        _unpack_naive(data), Offset.from_minutes(offset), zone
    )


# UTC leap seconds are inserted after 23:59:59. At other offsets they
# show up after a different minute, such as 00:59:59 at +01:00.
def _naive_at_offset(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    microsecond: int,
    precision: Precision | None,
    offset: Offset,
) -> NaiveDateTime:
    if second != 60 or (hour, minute) == (23, 59):
        return NaiveDateTime(
            year,
            month,
            day,
            hour,
            minute,
            second,
            microsecond=microsecond,
            precision=precision,
        )
    utc = NaiveDateTime(
        year, month, day, hour, minute, 59, microsecond=microsecond
    )._offset_by(-offset._minutes)
    if (utc._time.hour, utc._time.minute) != (23, 59):
        raise OutOfRange("second", second)
    leap = Time(23, 59, 60, microsecond=microsecond, precision=precision)
    return NaiveDateTime._new_unchecked(utc._date, leap)._offset_by(
        offset._minutes
    )


# A zoned datetime resolves its offset from the UTC moment. Guessing the
# UTC moment with the offset at the naive value, and then checking the
# offset at the guess, gives the offset for all but the shifted hours
# around a transition.
def _resolve_local_offset(
    naive: NaiveDateTime, zone: TimezoneProvider
) -> Offset:
    guess = zone.offset_for(naive)
    return zone.offset_for(naive._offset_by(-guess._minutes))


_Comparable = Union[Date, NaiveDateTime, DateTime]
_PERIOD_TYPES = (Date, NaiveDateTime, DateTime)


@final
class Period(_ImmutableBase):
    """An inclusive range between two dates or datetimes of the same type.
    If the end is before the start, they are swapped.

    Example
    -------
    >>> p = Period(Date(2024, 6, 23), Date(2024, 6, 12))
    Period(2024-06-12, 2024-06-23)
    >>> p.days_apart()
    11
    """

    __slots__ = ("_start", "_end")

    def __init__(self, start: _Comparable, end: _Comparable) -> None:
        if type(start) not in _PERIOD_TYPES:
            raise TypeError(
                "Expected Date, NaiveDateTime or DateTime, "
                f"got {type(start)!r}"
            )
        if type(end) is not type(start):
            raise TypeError(
                f"Start and end must have the same type, "
                f"got {type(start).__name__} and {type(end).__name__}"
            )
        if end < start:  # type: ignore[operator]
            start, end = end, start
        self._start = start
        self._end = end

    @classmethod
    def between(cls, a: _Comparable, b: _Comparable, /) -> Period:
        """Alias for the constructor"""
        return cls(a, b)

    @property
    def start(self) -> _Comparable:
        return self._start

    @property
    def end(self) -> _Comparable:
        return self._end

    def duration(self) -> Duration:
        """The exact time between start and end

        Example
        -------
        >>> Period(Date(2024, 6, 12), Date(2024, 6, 23)).duration()
        Duration(P11D)
        """
        if isinstance(self._start, Date):
            return Duration._from_us_unchecked(
                (self._end._days - self._start._days) * US_PER_DAY
            )
        return self._end.difference(self._start)  # type: ignore[arg-type]

    def days_apart(self) -> int:
        """The number of whole days between start and end

        Example
        -------
        >>> Period(Date(2023, 5, 22), Date(2024, 6, 23)).days_apart()
        398
        """
        return self.duration()._us // US_PER_DAY

    def full_months_apart(self) -> int:
        """The number of whole calendar months between start and end.
        A month only counts once the day of the month (and time of day)
        of the start has been reached.

        Example
        -------
        >>> Period(Date(2024, 1, 31), Date(2024, 2, 29)).full_months_apart()
        0
        >>> Period(Date(2024, 1, 15), Date(2024, 3, 15)).full_months_apart()
        2
        """
        return months_diff(*self._calendar_fields())

    def full_years_apart(self) -> int:
        """The number of whole calendar years between start and end

        Example
        -------
        >>> Period(Date(2020, 2, 29), Date(2024, 2, 28)).full_years_apart()
        3
        """
        return years_diff(*self._calendar_fields())

    # Comparable field tuples, with both ends at the same offset
    def _calendar_fields(self) -> tuple[tuple, tuple]:
        start, end = self._start, self._end
        if isinstance(start, Date):
            return (
                day_count_to_civil(start._days),
                day_count_to_civil(end._days),  # type: ignore[union-attr]
            )
        elif isinstance(start, DateTime):
            end = end.to_offset(start._offset)  # type: ignore[union-attr]
            start, end = start._naive, end._naive
        return (
            (*day_count_to_civil(start._date._days), start._time._key()),
            (*day_count_to_civil(end._date._days), end._time._key()),
        )

    def _dates(self) -> tuple[Date, Date]:
        start, end = self._start, self._end
        if isinstance(start, Date):
            return start, end  # type: ignore[return-value]
        return start.date(), end.date()  # type: ignore[union-attr]

    def comprising_dates(self) -> DateRange:
        """All dates in the period, including the first and last

        Example
        -------
        >>> p = Period(Date(2024, 6, 29), Date(2024, 7, 1))
        >>> list(p.comprising_dates())
        [Date(2024-06-29), Date(2024-06-30), Date(2024-07-01)]
        """
        return DateRange(*self._dates())

    def comprising_months(self) -> MonthRange:
        """All months the period touches, including the first and last

        Example
        -------
        >>> p = Period(Date(2024, 5, 31), Date(2024, 7, 1))
        >>> list(p.comprising_months())
        [YearMonth(2024-05), YearMonth(2024-06), YearMonth(2024-07)]
        """
        first, last = self._dates()
        return MonthRange(first.year_month(), last.year_month())

    def contains(self, value: _Comparable, /) -> bool:
        """Whether the value lies within the period (inclusive)"""
        if type(value) is not type(self._start):
            raise TypeError(
                f"Expected {type(self._start).__name__}, "
                f"got {type(value).__name__}"
            )
        return self._start <= value <= self._end  # type: ignore[operator]

    def __contains__(self, value: object) -> bool:
        return type(value) is type(self._start) and self.contains(
            value  # type: ignore[arg-type]
        )

    def total_leap_seconds(self) -> int:
        """The number of UTC leap seconds inserted within the period.

        Datetimes are compared in UTC. Naive datetimes are assumed to be
        in UTC already.

        Raises
        ------
        LeapSecondsUnknown
            If the period touches years for which the leap seconds are
            not (yet) known.

        Example
        -------
        >>> Period(Date(2016, 1, 1), Date(2016, 12, 31)).total_leap_seconds()
        1
        """
        start, end = self._start, self._end
        if isinstance(start, Date):
            first, last = start._days, end._days  # type: ignore[union-attr]
        else:
            if isinstance(start, DateTime):
                start = start._utc_naive()
                end = end._utc_naive()  # type: ignore[union-attr]
            first = start._date._days + start._time.is_end_of_day()
            last = end._date._days - (  # type: ignore[union-attr]
                end._time._key() < _LEAP_SECOND_KEY  # type: ignore[union-attr]
            )
        unknown = _leap_seconds.unknown_years(
            day_count_to_civil(first)[0], day_count_to_civil(last)[0]
        )
        if unknown:
            raise LeapSecondsUnknown(unknown)
        if last < first:
            return 0
        return _leap_seconds.count_between(first, last)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return (
            type(self._start) is type(other._start)
            and self._start == other._start
            and self._end == other._end
        )

    def __hash__(self) -> int:
        return hash((self._start, self._end))

    def __repr__(self) -> str:
        return f"Period({self._start}, {self._end})"

    @no_type_check
    def __reduce__(self):
        return Period, (self._start, self._end)


_LEAP_SECOND_KEY = Time.leap_second()._key()


class DateRange:
    """The dates from ``first`` up to and including ``last``.
    Iterating doesn't exhaust it.
    """

    __slots__ = ("_first", "_last")

    def __init__(self, first: Date, last: Date) -> None:
        self._first = first
        self._last = last

    def __iter__(self) -> Iterator[Date]:
        for n in range(self._first._days, self._last._days + 1):
            yield Date._from_days_unchecked(n)

    def __reversed__(self) -> Iterator[Date]:
        n = self._last._days
        while n >= self._first._days:
            yield Date._from_days_unchecked(n)
            n -= 1

    def __len__(self) -> int:
        return max(self._last._days - self._first._days + 1, 0)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, Date) and self._first <= value <= self._last

    def __repr__(self) -> str:
        return f"DateRange({self._first}, {self._last})"


class MonthRange:
    """The months from ``first`` up to and including ``last``.
    Iterating doesn't exhaust it.
    """

    __slots__ = ("_first", "_last")

    def __init__(self, first: YearMonth, last: YearMonth) -> None:
        self._first = first
        self._last = last

    def __iter__(self) -> Iterator[YearMonth]:
        for i in range(self._first._index(), self._last._index() + 1):
            yield YearMonth._new_unchecked(*_from_month_index(i))

    def __reversed__(self) -> Iterator[YearMonth]:
        i = self._last._index()
        while i >= self._first._index():
            yield YearMonth._new_unchecked(*_from_month_index(i))
            i -= 1

    def __len__(self) -> int:
        return max(self._last._index() - self._first._index() + 1, 0)

    def __contains__(self, value: object) -> bool:
        return (
            isinstance(value, YearMonth) and self._first <= value <= self._last
        )

    def __repr__(self) -> str:
        return f"MonthRange({self._first}, {self._last})"


def _from_month_index(i: int) -> tuple[int, int]:
    year, month0 = divmod(i, 12)
    return year, month0 + 1


@final
class Instant(_ImmutableBase):
    """A moment captured from a clock, for measuring elapsed time
    on this machine.

    Besides the wall time, it records a monotonic reading (which doesn't
    jump when the system time is adjusted) and a sequence number, which
    orders instants by when they were captured.

    Instances can't be pickled, since the monotonic reading has no
    meaning outside the current process.

    Example
    -------
    >>> start = Instant.now()
    >>> ...
    >>> start.elapsed()
    Duration(PT0.000131S)
    """

    __slots__ = ("_wall", "_offset", "_mono", "_seq", "_clock")

    def __init__(self) -> None:
        raise TypeError("Use Instant.now() to capture an instant")

    @classmethod
    def now(cls, *, clock: ClockProvider | None = None) -> Instant:
        clock = get_clock(clock)
        self = _object_new(cls)
        self._seq = clock.unique()
        self._wall = clock.now_wall()
        self._mono = clock.now_monotonic()
        self._offset = clock.local_offset()
        self._clock = clock
        return self

    def elapsed(self) -> Duration:
        """The time passed since this instant was captured,
        measured on the same clock
        """
        return Duration._from_us_unchecked(
            self._clock.now_monotonic() - self._mono
        )

    def difference(self, other: Instant, /) -> Duration:
        """The (monotonic) time between two instants

        Example
        -------
        >>> a = Instant.now()
        >>> b = Instant.now()
        >>> b - a
        Duration(PT0.000002S)
        """
        return Duration._from_us_unchecked(self._mono - other._mono)

    def __sub__(self, other: Instant) -> Duration:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.difference(other)

    def to_utc(self) -> DateTime:
        """The wall time of capture, in UTC"""
        return DateTime.from_unix_microseconds(self._wall)

    def to_local(self) -> DateTime:
        """The wall time of capture, at the local offset of that moment"""
        return DateTime.from_unix_microseconds(
            self._wall, offset=Offset.from_minutes(self._offset)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._seq == other._seq

    def __hash__(self) -> int:
        return hash(self._seq)

    def __lt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._seq < other._seq

    def __le__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._seq <= other._seq

    def __gt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._seq > other._seq

    def __ge__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._seq >= other._seq

    def __repr__(self) -> str:
        return f"Instant({self.to_local()}, seq={self._seq})"

    def __reduce__(self):
        raise TypeError("Instant values can't be pickled")


def sleep(
    duration: Duration, /, *, clock: ClockProvider | None = None
) -> None:
    """Wait for the given duration. With a :class:`~tempo.FakeClock`
    in sleep-warp mode, the clock is advanced instead.
    """
    get_clock(clock).sleep(duration._us)


class ParsedParts(NamedTuple):
    """The parts found by :func:`parse_any`. Parts not found are ``None``."""

    date: Date | None
    time: Time | None
    offset: Offset | None


def parse_any(text: str, /) -> ParsedParts:
    """Find a date, time and offset in free-form text.

    Recognizes ISO-like numeric dates (year first), dates with month
    names, 24-hour and AM/PM times, and offsets. An offset directly
    after the time is preferred. Otherwise, the first signed offset
    (such as ``+05:00`` or ``-0800``) anywhere in the text is taken.
    Never fails: parts which can't be found are ``None``.

    Example
    -------
    >>> parse_any("Meet me on June 13, 2024 at 2:30 pm UTC")
    ParsedParts(date=Date(2024-06-13), time=Time(14:30:00), offset=Offset(+00:00))
    >>> parse_any("2024-06-13")
    ParsedParts(date=Date(2024-06-13), time=None, offset=None)
    """
    date = None
    for year, month, day in find_dates(text):
        try:
            date = Date(year, month, day)
        except OutOfRange:
            continue
        break

    time = offset = None
    for (hour, minute, second, us, precision), end in find_times(text):
        try:
            time = Time(
                hour, minute, second, microsecond=us, precision=precision
            )
        except OutOfRange:
            continue
        minutes = find_offset(text, end)
        if minutes is not None:
            try:
                offset = Offset.from_minutes(minutes)
            except OutOfRange:
                pass
        break
    if offset is None and (minutes := search_offset(text)) is not None:
        try:
            offset = Offset.from_minutes(minutes)
        except OutOfRange:
            pass
    return ParsedParts(date, time, offset)


_DATE_FIELDS = ("year", "month", "day")
_TIME_FIELDS = ("hour", "minute", "second", "microsecond")


def _check_invalid_replace_kwargs(kwargs: Any, allowed: tuple) -> None:
    for k in kwargs:
        if k not in allowed:
            raise TypeError(
                f"replace() got an unexpected keyword argument {k!r}"
            )


def _check_no_units_with_delta(*units: float) -> None:
    if any(units):
        raise TypeError("Cannot combine a delta with keyword arguments")


def _load_offset(offset: int | Offset | Duration, /) -> Offset:
    if isinstance(offset, Offset):
        return offset
    elif isinstance(offset, int):
        return Offset(offset)
    elif isinstance(offset, Duration):
        if offset._us % US_PER_MINUTE:
            raise ValueError("Offset must be a whole number of minutes")
        return Offset.from_minutes(offset._us // US_PER_MINUTE)
    else:
        raise TypeError(
            "offset must be an int, Offset or Duration, e.g. `Offset(5, 30)`"
        )


def _load_zone(zone: TimezoneProvider | str, /) -> TimezoneProvider:
    if isinstance(zone, str):
        from ._zone import ZoneInfoProvider

        return ZoneInfoProvider(zone)
    return zone


def weeks(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of weeks.
    ``weeks(1) == Duration(weeks=1)``
    """
    return Duration(weeks=i)


def days(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of 24-hour days.
    ``days(1) == Duration(days=1)``
    """
    return Duration(days=i)


def hours(i: float, /) -> Duration:
    """Create a :class:`Duration` with the given number of hours.
    ``hours(1) == Duration(hours=1)``
    """
    return Duration(hours=i)


def minutes(i: float, /) -> Duration:
    """Create a :class:`Duration` with the given number of minutes.
    ``minutes(1) == Duration(minutes=1)``
    """
    return Duration(minutes=i)


def seconds(i: float, /) -> Duration:
    """Create a :class:`Duration` with the given number of seconds.
    ``seconds(1) == Duration(seconds=1)``
    """
    return Duration(seconds=i)


def milliseconds(i: float, /) -> Duration:
    """Create a :class:`Duration` with the given number of milliseconds.
    ``milliseconds(1) == Duration(milliseconds=1)``
    """
    return Duration(milliseconds=i)


def microseconds(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of microseconds.
    ``microseconds(1) == Duration(microseconds=1)``
    """
    return Duration(microseconds=i)


# We expose the public members in the root of the module.
# For clarity, we remove the "_pytempo" part from the names,
# since this is an implementation detail.
for name in __all__ + ["DateRange", "MonthRange"]:
    member = locals()[name]
    if getattr(member, "__module__", None) == __name__:  # pragma: no branch
        member.__module__ = "tempo"

# clear up loop variables so they don't leak into the namespace
del name
del member

for _unpkl in (
    _unpkl_date,
    _unpkl_ym,
    _unpkl_time,
    _unpkl_duration,
    _unpkl_offset,
    _unpkl_naive,
    _unpkl_datetime,
):
    _unpkl.__module__ = "tempo"


# disable further subclassing
final(_ImmutableBase)
