"""Clock sources: the real system clock, and a programmable fake for tests.

All readings are integer microseconds. Offsets are in minutes.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from contextlib import contextmanager
from itertools import count
from typing import Iterator, Protocol, runtime_checkable

_log = logging.getLogger(__name__)


@runtime_checkable
class ClockProvider(Protocol):
    """The interface of a clock source.

    Implement this to control what ``now()`` means, for example in tests.
    """

    def now_wall(self) -> int:
        """Microseconds since the UNIX epoch"""
        ...

    def now_monotonic(self) -> int:
        """Microseconds on a monotonic counter with an arbitrary epoch"""
        ...

    def unique(self) -> int:
        """A number greater than any previously returned one"""
        ...

    def local_offset(self) -> int:
        """The current local UTC offset in minutes"""
        ...

    def sleep(self, us: int, /) -> None:
        """Wait for the given number of microseconds"""
        ...


# Shared between all clocks, so instants stay ordered even if
# the default clock is swapped in the meantime.
_sequence = count(1)
_sequence_lock = threading.Lock()


def _next_unique() -> int:
    with _sequence_lock:
        return next(_sequence)


class SystemClock:
    """The real clock of the host system"""

    __slots__ = ()

    def now_wall(self) -> int:
        return time.time_ns() // 1_000

    def now_monotonic(self) -> int:
        return time.monotonic_ns() // 1_000

    def unique(self) -> int:
        return _next_unique()

    def local_offset(self) -> int:
        return time.localtime().tm_gmtoff // 60

    def sleep(self, us: int, /) -> None:
        if us > 0:
            time.sleep(us / 1_000_000)

    def __repr__(self) -> str:
        return "SystemClock()"


class FakeClock:
    """A clock that can be frozen, shifted, sped up, and warped.

    At most one override is active: freezing replaces a reference time
    and vice versa. Warping is applied on top of either. The monotonic
    counter is never set: it stops while frozen, and runs at the
    speedup from its own reading while a reference time is set.

    Example
    -------
    >>> clock = FakeClock()
    >>> clock.freeze(1_718_000_000_000_000)
    >>> DateTime.now_utc(clock=clock)
    DateTime(2024-06-10T06:13:20Z)
    >>> clock.warp(60_000_000)
    >>> DateTime.now_utc(clock=clock)
    DateTime(2024-06-10T06:14:20Z)

    Note
    ----
    Sleep warping may be switched on for new instances with the
    ``TEMPO_SLEEP_WARP`` environment variable.
    """

    def __init__(
        self,
        *,
        local_offset: int = 0,
        sleep_warp: bool | None = None,
        source: ClockProvider | None = None,
    ) -> None:
        self._source = SystemClock() if source is None else source
        self._lock = threading.Lock()
        # (wall time, monotonic reading of the source)
        self._frozen: tuple[int, int] | None = None
        # (reference time, wall anchor, monotonic anchor, speedup)
        self._reference: tuple[int, int, int, float] | None = None
        self._warp = 0
        self._local_offset = local_offset
        self._sleep_warp = (
            bool(os.environ.get("TEMPO_SLEEP_WARP"))
            if sleep_warp is None
            else sleep_warp
        )

    def freeze(self, at: int, /) -> None:
        """Stop the clock at the given UNIX time in microseconds.
        The monotonic counter stops at its current reading."""
        mono = self._source.now_monotonic()
        with self._lock:
            self._frozen = (at, mono)
            self._reference = None
        _log.debug("clock frozen at %d", at)

    def unfreeze(self) -> None:
        with self._lock:
            self._frozen = None
        _log.debug("clock unfrozen")

    def set_reference(self, at: int, /, speedup: float = 1.0) -> None:
        """Let the clock run from the given UNIX time (in microseconds),
        optionally faster or slower than real time."""
        if speedup < 0:
            raise ValueError("speedup must not be negative")
        wall = self._source.now_wall()
        mono = self._source.now_monotonic()
        with self._lock:
            self._reference = (at, wall, mono, speedup)
            self._frozen = None
        _log.debug("clock reference set to %d (speedup %s)", at, speedup)

    def unset_reference(self) -> None:
        with self._lock:
            self._reference = None
        _log.debug("clock reference unset")

    def warp(self, us: int, /) -> None:
        """Shift the clock forward (or backward, if negative)"""
        with self._lock:
            self._warp += us

    def reset_warp(self) -> None:
        with self._lock:
            self._warp = 0

    @property
    def sleep_warp(self) -> bool:
        """Whether :meth:`sleep` warps the clock instead of blocking"""
        return self._sleep_warp

    def enable_sleep_warp(self) -> None:
        self._sleep_warp = True
        _log.debug("sleep warp enabled")

    def disable_sleep_warp(self) -> None:
        self._sleep_warp = False
        _log.debug("sleep warp disabled")

    def set_local_offset(self, minutes: int, /) -> None:
        self._local_offset = minutes

    def now_wall(self) -> int:
        with self._lock:
            frozen, reference, warp = self._frozen, self._reference, self._warp
        if frozen is not None:
            return frozen[0] + warp
        elif reference is not None:
            at, wall_anchor, _, speedup = reference
            elapsed = self._source.now_wall() - wall_anchor
            return at + int(elapsed * speedup) + warp
        return self._source.now_wall() + warp

    def now_monotonic(self) -> int:
        with self._lock:
            frozen, reference, warp = self._frozen, self._reference, self._warp
        if frozen is not None:
            return frozen[1] + warp
        elif reference is not None:
            _, _, mono_anchor, speedup = reference
            elapsed = self._source.now_monotonic() - mono_anchor
            return mono_anchor + int(elapsed * speedup) + warp
        return self._source.now_monotonic() + warp

    def unique(self) -> int:
        return _next_unique()

    def local_offset(self) -> int:
        return self._local_offset

    def sleep(self, us: int, /) -> None:
        if self._sleep_warp:
            self.warp(max(us, 0))
        else:
            self._source.sleep(us)

    def __repr__(self) -> str:
        if self._frozen is not None:
            mode = f"frozen={self._frozen[0]}"
        elif self._reference is not None:
            mode = f"reference={self._reference[0]}"
        else:
            mode = "real"
        return f"FakeClock({mode}, warp={self._warp})"


SYSTEM_CLOCK = SystemClock()
_default_clock: ClockProvider = SYSTEM_CLOCK


def get_clock(clock: ClockProvider | None = None, /) -> ClockProvider:
    """The given clock, or the default one if ``None``"""
    return _default_clock if clock is None else clock


def set_clock(clock: ClockProvider, /) -> None:
    """Set the default clock used by all ``now()`` functions"""
    global _default_clock
    if not isinstance(clock, ClockProvider):
        raise TypeError(f"Expected a clock provider, got {type(clock)!r}")
    _default_clock = clock
    _log.debug("default clock set to %r", clock)


def reset_clock() -> None:
    """Restore the system clock as the default clock"""
    set_clock(SYSTEM_CLOCK)


@contextmanager
def use_clock(clock: ClockProvider, /) -> Iterator[ClockProvider]:
    """Temporarily replace the default clock (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------
    This function is not thread-safe. Prefer passing ``clock=``
    explicitly where possible.

    Example
    -------
    >>> clock = FakeClock()
    >>> clock.freeze(0)
    >>> with use_clock(clock):
    ...     assert DateTime.now_utc() == DateTime(1970, 1, 1, offset=0)
    """
    previous = _default_clock
    set_clock(clock)
    try:
        yield clock
    finally:
        set_clock(previous)
