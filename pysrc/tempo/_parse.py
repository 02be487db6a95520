"""Parsing of ISO 8601-like strings, and the free-text heuristics.

The functions here return plain tuples of fields. Validating them
(and constructing the value types) is up to the caller.
"""

from __future__ import annotations

import re
from typing import Iterator, NoReturn

from ._common import MONTH_ABBRS, InvalidFormat
from ._format import offset_minutes

# hour, minute, second, microsecond, precision
TimeFields = tuple[int, int, int, int, str]
DateFields = tuple[int, int, int]


def _parse_err(s: str) -> NoReturn:
    raise InvalidFormat(s) from None


def _split_nextchar(
    s: str, chars: str, start: int = 0
) -> tuple[str, str | None, str]:
    for c in chars:
        if (idx := s.find(c, start)) != -1:
            return (s[:idx], c, s[idx + 1 :])  # noqa[E203]
    return (s, None, "")


_is_sep = " Tt".__contains__

_match_date = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII).fullmatch
_match_time = re.compile(
    r"(\d{2}):(\d{2}):(\d{2})(?:[.,](\d{1,9}))?", re.ASCII
).fullmatch
_match_duration = re.compile(
    r"([-+]?)P(?:(\d{1,9})D)?"
    r"(?:T(?:(\d{1,12})H)?(?:(\d{1,14})M)?(?:(\d{1,16})(?:[.,](\d{1,6}))?S)?)?",
    re.ASCII,
).fullmatch


def fraction(digits: str) -> tuple[int, str]:
    """Microseconds and precision of a string of decimals.
    Decimals beyond microseconds are truncated."""
    if len(digits) <= 3:
        precision = "milli"
    elif len(digits) <= 6:
        precision = "micro"
    else:
        precision = "nano"
    return int(digits.ljust(9, "0")) // 1_000, precision


def date_from_iso(s: str) -> DateFields:
    if (match := _match_date(s)) is None:
        _parse_err(s)
    year, month, day = map(int, match.groups())
    return year, month, day


def time_from_iso(s: str) -> TimeFields:
    if (match := _match_time(s)) is None:
        _parse_err(s)
    hours, minutes, seconds, decimals = match.groups()
    us, precision = fraction(decimals) if decimals else (0, "second")
    return int(hours), int(minutes), int(seconds), us, precision


def offset_from_iso(s: str) -> int:
    if (minutes := offset_minutes(s)) is None:
        _parse_err(s)
    return minutes


def naive_from_iso(s: str) -> tuple[DateFields, TimeFields]:
    if len(s) < 19 or not _is_sep(s[10]):
        _parse_err(s)
    try:
        return date_from_iso(s[:10]), time_from_iso(s[11:])
    except InvalidFormat:
        _parse_err(s)


def datetime_from_iso(s: str) -> tuple[DateFields, TimeFields, int]:
    # The offset can only start after the seconds
    naive, sign, offset = _split_nextchar(s, "Zz+-", 19)
    if sign is None:
        _parse_err(s)
    try:
        date, time = naive_from_iso(naive)
        return date, time, offset_from_iso(sign + offset)
    except InvalidFormat:
        _parse_err(s)


def duration_from_iso(s: str) -> int:
    """Parse ``PnDTnHnMn.nS`` (any part optional) into microseconds"""
    if (match := _match_duration(s)) is None or s.endswith(("P", "T")):
        _parse_err(s)
    sign, days, hours, minutes, seconds, decimals = match.groups()
    us = (
        int(days or 0) * 86_400_000_000
        + int(hours or 0) * 3_600_000_000
        + int(minutes or 0) * 60_000_000
        + int(seconds or 0) * 1_000_000
        + (int(decimals.ljust(6, "0")) if decimals else 0)
    )
    return -us if sign == "-" else us


# Free-text heuristics
#
# Candidates are yielded in priority order. The caller picks the first
# one which forms a valid value.

_MONTH_NAME = (
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?"
    r"|dec(?:ember)?)\.?"
)
_ORDINAL = r"(?:st|nd|rd|th)?"

_DATE_PATTERNS = (
    # 2024-06-13, 2024/6/13, 2024.06.13
    (
        re.compile(r"(?<!\d)(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?!\d)"),
        (1, 2, 3),
    ),
    # 13 June 2024, 13th of Jun, 2024
    (
        re.compile(
            rf"(?<![\w])(\d{{1,2}}){_ORDINAL}\s+(?:of\s+)?{_MONTH_NAME}"
            r",?\s+(\d{4})(?!\d)",
            re.IGNORECASE,
        ),
        (3, 2, 1),
    ),
    # June 13, 2024
    (
        re.compile(
            rf"(?<![\w]){_MONTH_NAME}\s+(\d{{1,2}}){_ORDINAL},?\s+(\d{{4}})"
            r"(?!\d)",
            re.IGNORECASE,
        ),
        (3, 1, 2),
    ),
)

_TIME_PATTERNS = (
    # 14:47, 14:47:00, 14:47:00.123, 2:47 pm
    re.compile(
        r"(?<![\d:+-])(\d{1,2}):(\d{2})(?::(\d{2})(?:[.,](\d{1,9}))?)?"
        r"(?:\s*([ap])\.?m\.?(?![a-z]))?(?![\d:])",
        re.IGNORECASE,
    ),
    # 2pm, 11 a.m.
    re.compile(
        r"(?<![\d:+-])(\d{1,2})()()()\s*([ap])\.?m\.?(?![a-z])",
        re.IGNORECASE,
    ),
)

_OFFSET_AFTER_TIME = re.compile(
    r"\s*(?:([Zz])|(?:UTC|GMT)?([+-]\d{1,2}(?::?\d{2})?)|(UTC|GMT))(?!\w)"
)

# Without a time to anchor on, only signed four-digit offsets (or a Z
# right after a number) are taken, so that dates aren't mistaken for them
_OFFSET_ANYWHERE = re.compile(
    r"(?<![\w:+-])(?:UTC|GMT)?([+-]\d{2}:?\d{2})(?![\d:])"
    r"|(?<=\d)[Zz](?!\w)"
)


def _month_number(name: str) -> int:
    return MONTH_ABBRS.index(name[:3].title()) + 1


def find_dates(text: str) -> Iterator[DateFields]:
    for pattern, (y, m, d) in _DATE_PATTERNS:
        for match in pattern.finditer(text):
            month = match[m]
            yield (
                int(match[y]),
                int(month) if month.isdigit() else _month_number(month),
                int(match[d]),
            )


def find_times(text: str) -> Iterator[tuple[TimeFields, int]]:
    """Yield time candidates, with the position where each one ends"""
    for pattern in _TIME_PATTERNS:
        for match in pattern.finditer(text):
            hrs, mins, secs, decimals, meridiem = match.groups()
            hour = int(hrs)
            if meridiem:
                if not 1 <= hour <= 12:
                    continue
                hour = hour % 12 + 12 * (meridiem.lower() == "p")
            us, precision = fraction(decimals) if decimals else (0, "second")
            yield (
                (hour, int(mins or 0), int(secs or 0), us, precision),
                match.end(),
            )


def find_offset(text: str, pos: int) -> int | None:
    """The offset (in minutes) directly following the given position"""
    if (match := _OFFSET_AFTER_TIME.match(text, pos)) is None:
        return None
    _, numeric, _ = match.groups()
    if numeric:
        return offset_minutes(numeric)
    return 0


def search_offset(text: str) -> int | None:
    """The first offset (in minutes) found anywhere in the text"""
    if (match := _OFFSET_ANYWHERE.search(text)) is None:
        return None
    numeric = match[1]
    if numeric:
        return offset_minutes(numeric)
    return 0
