"""The directive engine behind ``format()`` and ``parse()``.

A format string is split into tokens once (and cached). The same tokens
drive both rendering and parsing, so that every rendered string parses
back into the same fields.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, NamedTuple, NoReturn, Protocol

from ._common import (
    MONTH_ABBRS,
    MONTH_NAMES,
    WEEKDAY_ABBRS,
    WEEKDAY_NAMES,
    WEEKDAY_SHORT,
    InvalidFormat,
    MissingField,
    MissingMeridiem,
    OutOfRange,
)

DIRECTIVES = (
    "YYYY",
    "YY",
    "MMMM",
    "MMM",
    "MM",
    "M",
    "DD",
    "D",
    "dddd",
    "ddd",
    "dd",
    "d",
    "HH",
    "H",
    "hh",
    "h",
    "A",
    "a",
    "mm",
    "m",
    "ss",
    "s",
    "SSSSS",
    "SSSS",
    "SSS",
    "ZZ",
    "Z",
    "z",
)

# Candidates per leading character, longest first (maximal munch)
_CANDIDATES: dict[str, tuple[str, ...]] = {}
for _d in sorted(DIRECTIVES, key=len, reverse=True):
    _CANDIDATES[_d[0]] = _CANDIDATES.get(_d[0], ()) + (_d,)
del _d


class Token(NamedTuple):
    directive: bool
    text: str


@lru_cache(maxsize=512)
def tokenize(fmt: str) -> tuple[Token, ...]:
    """Split a format string into directives and literal text.

    Text between square brackets is always literal.

    Example
    -------
    >>> tokenize("YYYY [at] H")
    (Token(True, 'YYYY'), Token(False, ' at '), Token(True, 'H'))
    """
    tokens: list[Token] = []
    literal: list[str] = []
    i = 0
    n = len(fmt)
    while i < n:
        c = fmt[i]
        if c == "[" and (close := fmt.find("]", i + 1)) != -1:
            literal.append(fmt[i + 1 : close])  # noqa[E203]
            i = close + 1
            continue
        for candidate in _CANDIDATES.get(c, ()):
            if fmt.startswith(candidate, i):
                if literal:
                    tokens.append(Token(False, "".join(literal)))
                    literal.clear()
                tokens.append(Token(True, candidate))
                i += len(candidate)
                break
        else:
            literal.append(c)
            i += 1
    if literal:
        tokens.append(Token(False, "".join(literal)))
    return tuple(tokens)


# The attributes the renderer needs. Date, Time, and Offset provide them.
class _DateLike(Protocol):
    year: int
    month: int
    day: int

    def day_of_week(self) -> Any: ...


class _TimeLike(Protocol):
    hour: int
    minute: int
    second: int
    microsecond: int


class _OffsetLike(Protocol):
    total_minutes: int


def render(
    fmt: str,
    date: _DateLike | None = None,
    time: _TimeLike | None = None,
    offset: _OffsetLike | None = None,
) -> str:
    """Render the given values according to the format string.

    Raises ``ValueError`` if a directive refers to a missing value,
    e.g. an hour directive when formatting a date.
    """
    return "".join(
        _render_directive(tok.text, date, time, offset)
        if tok.directive
        else tok.text
        for tok in tokenize(fmt)
    )


def _render_directive(
    d: str,
    date: _DateLike | None,
    time: _TimeLike | None,
    offset: _OffsetLike | None,
) -> str:
    c = d[0]
    if c in "YMDd":
        if date is None:
            raise ValueError(f"Format directive {d!r} requires a date")
        if d == "YYYY":
            return f"{date.year:04}"
        elif d == "YY":
            return f"{date.year % 100:02}"
        elif d == "MMMM":
            return MONTH_NAMES[date.month - 1]
        elif d == "MMM":
            return MONTH_ABBRS[date.month - 1]
        elif d == "MM":
            return f"{date.month:02}"
        elif d == "M":
            return str(date.month)
        elif d == "DD":
            return f"{date.day:02}"
        elif d == "D":
            return str(date.day)
        # Sunday = 0
        weekday = date.day_of_week().value % 7
        if d == "dddd":
            return WEEKDAY_NAMES[weekday]
        elif d == "ddd":
            return WEEKDAY_ABBRS[weekday]
        elif d == "dd":
            return WEEKDAY_SHORT[weekday]
        return str(weekday)
    elif c in "Zz":
        if offset is None:
            raise ValueError(f"Format directive {d!r} requires an offset")
        return format_offset(
            offset.total_minutes, colon=d != "ZZ", z=d == "z"
        )
    if time is None:
        raise ValueError(f"Format directive {d!r} requires a time")
    # 12 AM would parse back as midnight at the start of the day
    if time.hour == 24 and d in ("hh", "h", "A", "a"):
        raise ValueError("The end of day has no 12-hour form")
    if d == "HH":
        return f"{time.hour:02}"
    elif d == "H":
        return str(time.hour)
    elif d == "hh":
        return f"{time.hour % 12 or 12:02}"
    elif d == "h":
        return str(time.hour % 12 or 12)
    elif d == "A":
        return "AM" if time.hour < 12 else "PM"
    elif d == "a":
        return "am" if time.hour < 12 else "pm"
    elif d == "mm":
        return f"{time.minute:02}"
    elif d == "m":
        return str(time.minute)
    elif d == "ss":
        return f"{time.second:02}"
    elif d == "s":
        return str(time.second)
    elif d == "SSS":
        return f"{time.microsecond // 1_000:03}"
    elif d == "SSSS":
        return f"{time.microsecond:06}"
    assert d == "SSSSS"
    return f"{time.microsecond * 1_000:09}"


def format_offset(minutes: int, colon: bool = True, z: bool = False) -> str:
    if z and minutes == 0:
        return "Z"
    hrs, mins = divmod(abs(minutes), 60)
    return f"{'-' if minutes < 0 else '+'}{hrs:02}{':' * colon}{mins:02}"


def offset_minutes(s: str) -> int | None:
    """Parse ``Z``, ``±HH:MM``, ``±HHMM``, ``±HH``, or ``±H`` into minutes.
    Returns None if the string has a different shape.
    Bounds are not checked."""
    if s in ("Z", "z"):
        return 0
    if len(s) < 2 or s[0] not in "+-" or not s[1:].isascii():
        return None
    sign = -1 if s[0] == "-" else 1
    body = s[1:]
    if len(body) == 5 and body[2] == ":" and _isdigits(body[:2] + body[3:]):
        hrs, mins = int(body[:2]), int(body[3:])
    elif len(body) == 4 and body.isdigit():
        hrs, mins = int(body[:2]), int(body[2:])
    elif len(body) in (1, 2) and body.isdigit():
        hrs, mins = int(body), 0
    else:
        return None
    if mins > 59:
        return None
    return sign * (hrs * 60 + mins)


def _isdigits(s: str) -> bool:
    return s.isascii() and s.isdigit()


class Fields:
    """The fields collected while parsing, in order of appearance.

    Lookups return the *first* occurrence of a field.
    """

    __slots__ = ("string", "items")

    def __init__(self, string: str, items: list[tuple[str, Any]]) -> None:
        self.string = string
        self.items = items

    def __contains__(self, name: str) -> bool:
        return any(n == name for n, _ in self.items)

    def get(self, name: str, default: Any = None) -> Any:
        for n, value in self.items:
            if n == name:
                return value
        return default

    def require(self, name: str) -> Any:
        for n, value in self.items:
            if n == name:
                return value
        raise MissingField(self.string, name)

    def date(self) -> tuple[int, int, int]:
        return (
            self.require("year"),
            self.require("month"),
            self.require("day"),
        )

    def hour(self) -> int:
        if "hour" in self:
            return self.require("hour")
        elif "hour12" in self:
            hour12 = self.require("hour12")
            if "meridiem" not in self:
                raise MissingMeridiem(self.string)
            if not 1 <= hour12 <= 12:
                raise OutOfRange("hour", hour12)
            return hour12 % 12 + 12 * (self.require("meridiem") == "PM")
        raise MissingField(self.string, "hour")

    def time(self) -> tuple[int, int, int, int, str]:
        """Hour, minute, second, microsecond, and precision.
        Only the hour is required."""
        hour = self.hour()
        microsecond, precision = self.get("microsecond", (0, "second"))
        return (
            hour,
            self.get("minute", 0),
            self.get("second", 0),
            microsecond,
            precision,
        )

    def offset(self) -> int:
        return self.require("offset")


def parse(s: str, fmt: str) -> Fields:
    """Consume the string according to the format, collecting fields.

    Raises :class:`InvalidFormat` if the string doesn't have
    the shape of the format.
    """
    items: list[tuple[str, Any]] = []
    pos = 0
    for tok in tokenize(fmt):
        if tok.directive:
            pos = _parse_directive(tok.text, s, pos, items)
        elif s.startswith(tok.text, pos):
            items.append(("literal", tok.text))
            pos += len(tok.text)
        else:
            _mismatch(s, pos)
    if pos != len(s):
        _mismatch(s, pos)
    return Fields(s, items)


def _mismatch(s: str, pos: int) -> NoReturn:
    raise InvalidFormat(s, pos)


def _digits(s: str, pos: int, n: int) -> int | None:
    chunk = s[pos : pos + n]  # noqa[E203]
    if len(chunk) == n and _isdigits(chunk):
        return int(chunk)
    return None


def _fixed(s: str, pos: int, n: int) -> int:
    if (value := _digits(s, pos, n)) is None:
        _mismatch(s, pos)
    return value


# Single-character directives take two digits if available, else one
def _variable(s: str, pos: int) -> tuple[int, int]:
    if (value := _digits(s, pos, 2)) is not None:
        return value, 2
    return _fixed(s, pos, 1), 1


def _name(s: str, pos: int, names: tuple[str, ...]) -> tuple[int, int]:
    for i, name in enumerate(names):
        chunk = s[pos : pos + len(name)]  # noqa[E203]
        if chunk.lower() == name.lower():
            return i, len(name)
    _mismatch(s, pos)


_VARIABLE_WIDTH = {"M": "month", "D": "day", "H": "hour", "h": "hour12"}
_VARIABLE_WIDTH.update(m="minute", s="second")
_TWO_DIGITS = {
    "MM": "month",
    "DD": "day",
    "HH": "hour",
    "hh": "hour12",
    "mm": "minute",
    "ss": "second",
}
# (digits, precision, multiplier to reach microseconds)
_SUBSECOND = {
    "SSS": (3, "milli", 1_000),
    "SSSS": (6, "micro", 1),
    "SSSSS": (9, "nano", None),
}


def _parse_directive(
    d: str, s: str, pos: int, items: list[tuple[str, Any]]
) -> int:
    if d in _TWO_DIGITS:
        items.append((_TWO_DIGITS[d], _fixed(s, pos, 2)))
        return pos + 2
    elif d in _VARIABLE_WIDTH:
        value, width = _variable(s, pos)
        items.append((_VARIABLE_WIDTH[d], value))
        return pos + width
    elif d == "YYYY":
        items.append(("year", _fixed(s, pos, 4)))
        return pos + 4
    elif d == "YY":
        items.append(("year", 2000 + _fixed(s, pos, 2)))
        return pos + 2
    elif d == "MMMM":
        index, width = _name(s, pos, MONTH_NAMES)
        items.append(("month", index + 1))
        return pos + width
    elif d == "MMM":
        index, width = _name(s, pos, MONTH_ABBRS)
        items.append(("month", index + 1))
        return pos + width
    elif d in ("dddd", "ddd", "dd"):
        names = {
            "dddd": WEEKDAY_NAMES,
            "ddd": WEEKDAY_ABBRS,
            "dd": WEEKDAY_SHORT,
        }[d]
        index, width = _name(s, pos, names)
        items.append(("weekday", index))
        return pos + width
    elif d == "d":
        items.append(("weekday", _fixed(s, pos, 1)))
        return pos + 1
    elif d in ("A", "a"):
        meridiem = s[pos : pos + 2].upper()  # noqa[E203]
        if meridiem not in ("AM", "PM"):
            _mismatch(s, pos)
        items.append(("meridiem", meridiem))
        return pos + 2
    elif d in _SUBSECOND:
        n, precision, factor = _SUBSECOND[d]
        value = _fixed(s, pos, n)
        us = value // 1_000 if factor is None else value * factor
        items.append(("microsecond", (us, precision)))
        return pos + n
    assert d in ("Z", "ZZ", "z")
    # Longest first, since shorter shapes may match a prefix of a longer one
    for width in (6, 5, 3, 2, 1):
        chunk = s[pos : pos + width]  # noqa[E203]
        if len(chunk) == width and (
            (minutes := offset_minutes(chunk)) is not None
        ):
            items.append(("offset", minutes))
            return pos + width
    _mismatch(s, pos)
