from __future__ import annotations

from typing import Any

US_PER_SECOND = 1_000_000
US_PER_MINUTE = 60 * US_PER_SECOND
US_PER_HOUR = 60 * US_PER_MINUTE
US_PER_DAY = 24 * US_PER_HOUR

MIN_OFFSET_MINUTES = -12 * 60
MAX_OFFSET_MINUTES = 14 * 60

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
MONTH_ABBRS = tuple(name[:3] for name in MONTH_NAMES)

# Sunday first, since the `d` directive counts from Sunday = 0
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
WEEKDAY_ABBRS = tuple(name[:3] for name in WEEKDAY_NAMES)
WEEKDAY_SHORT = tuple(name[:2] for name in WEEKDAY_NAMES)


class OutOfRange(ValueError):
    """A value is outside the valid range of the given field"""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"{field} out of range: {value!r}")
        self.field = field
        self.value = value


class InvalidFormat(ValueError):
    """A string doesn't match the expected format"""

    def __init__(self, s: str, position: int | None = None) -> None:
        msg = f"Invalid format: {s!r}"
        if position is not None:
            msg += f" at position {position}"
        super().__init__(msg)
        self.string = s
        self.position = position


class MissingField(InvalidFormat):
    """A required field was not found while parsing"""

    def __init__(self, s: str, field: str) -> None:
        ValueError.__init__(self, f"Missing {field} in {s!r}")
        self.string = s
        self.position = None
        self.field = field


class MissingMeridiem(MissingField):
    """A 12-hour clock value was parsed without an AM/PM marker"""

    def __init__(self, s: str) -> None:
        super().__init__(s, "meridiem")


class LeapSecondsUnknown(ValueError):
    """Leap seconds were requested for years outside the known table"""

    def __init__(self, years: tuple[int, ...]) -> None:
        super().__init__(
            "Leap seconds are unknown for year(s): "
            + ", ".join(map(str, years))
        )
        self.years = years
