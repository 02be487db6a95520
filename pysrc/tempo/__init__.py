from __future__ import annotations

from ._clock import (
    ClockProvider,
    FakeClock,
    SystemClock,
    get_clock,
    reset_clock,
    set_clock,
    use_clock,
)
from ._pytempo import *
from ._pytempo import (  # for the docs
    __all__ as _pytempo_all,
    __version__,
    _unpkl_date,
    _unpkl_datetime,
    _unpkl_duration,
    _unpkl_naive,
    _unpkl_offset,
    _unpkl_time,
    _unpkl_ym,
    DateRange,
    MonthRange,
)
from ._zone import FixedOffsetZone, TimezoneProvider, ZoneInfoProvider

__all__ = _pytempo_all + [
    "DateRange",
    "MonthRange",
    "ClockProvider",
    "SystemClock",
    "FakeClock",
    "get_clock",
    "set_clock",
    "reset_clock",
    "use_clock",
    "TimezoneProvider",
    "FixedOffsetZone",
    "ZoneInfoProvider",
]

for _name in (
    "ClockProvider",
    "SystemClock",
    "FakeClock",
    "get_clock",
    "set_clock",
    "reset_clock",
    "use_clock",
    "TimezoneProvider",
    "FixedOffsetZone",
    "ZoneInfoProvider",
):
    globals()[_name].__module__ = __name__

del _name
