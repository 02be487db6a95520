"""Timezone-rule providers.

``tempo`` doesn't ship timezone rules itself. Instead, zone-aware
datetimes call a provider to find the offset for a given UTC time.
"""

from __future__ import annotations

from datetime import (
    datetime as _datetime,
    timedelta as _timedelta,
    timezone as _timezone,
)
from typing import Protocol, runtime_checkable
from zoneinfo import ZoneInfo

from ._pytempo import NaiveDateTime, Offset

_UNIX_EPOCH = _datetime(1970, 1, 1, tzinfo=_timezone.utc)


@runtime_checkable
class TimezoneProvider(Protocol):
    """The interface of a timezone-rule provider.

    ``offset_for`` receives the UTC date and time (without offset),
    and returns the offset in effect at that moment.
    """

    def name(self) -> str: ...

    def offset_for(self, utc: NaiveDateTime, /) -> Offset: ...


class FixedOffsetZone:
    """A zone that always has the same offset

    Example
    -------
    >>> zone = FixedOffsetZone(Offset(5, 30), "IST")
    >>> DateTime(2024, 6, 13, 12, zone=zone)
    DateTime(2024-06-13T12:00:00+05:30[IST])
    """

    __slots__ = ("_offset", "_name")

    def __init__(self, offset: Offset, name: str | None = None) -> None:
        if not isinstance(offset, Offset):
            raise TypeError(f"Expected Offset, got {type(offset)!r}")
        self._offset = offset
        self._name = name

    def name(self) -> str:
        if self._name is None:
            return "UTC" + self._offset.format_common_iso()
        return self._name

    def offset_for(self, utc: NaiveDateTime, /) -> Offset:
        return self._offset

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedOffsetZone):
            return NotImplemented
        return (self._offset, self._name) == (other._offset, other._name)

    def __hash__(self) -> int:
        return hash((self._offset, self._name))

    def __repr__(self) -> str:
        return f"FixedOffsetZone({self.name()})"


class ZoneInfoProvider:
    """Adapter for the standard library's :class:`~zoneinfo.ZoneInfo`

    Raises
    ------
    ~zoneinfo.ZoneInfoNotFoundError
        If the timezone ID is not found in the IANA database.

    Note
    ----
    Offsets are truncated to whole minutes, which only matters for
    local mean time before the 20th century.
    """

    __slots__ = ("_zone",)

    def __init__(self, key: str) -> None:
        self._zone = ZoneInfo(key)

    def name(self) -> str:
        return self._zone.key

    def offset_for(self, utc: NaiveDateTime, /) -> Offset:
        py_dt = _UNIX_EPOCH + _timedelta(
            microseconds=utc.to_unix_microseconds()
        )
        # NOTE: mypy doesn't know utcoffset() is never None for ZoneInfo
        delta = py_dt.astimezone(self._zone).utcoffset()
        return Offset.from_minutes(
            int(delta.total_seconds()) // 60  # type: ignore[union-attr]
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZoneInfoProvider):
            return NotImplemented
        return self._zone.key == other._zone.key

    def __hash__(self) -> int:
        return hash(self._zone.key)

    def __repr__(self) -> str:
        return f"ZoneInfoProvider({self._zone.key!r})"

    def __reduce__(self):
        return ZoneInfoProvider, (self._zone.key,)
