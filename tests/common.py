from tempo import FakeClock, NaiveDateTime, Offset

# 2024-06-10T06:13:20Z
SOME_UNIX_US = 1_718_000_000_000_000


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


def frozen_clock(at: int = SOME_UNIX_US, *, local_offset: int = 0) -> FakeClock:
    clock = FakeClock(local_offset=local_offset, sleep_warp=False)
    clock.freeze(at)
    return clock


class SummerTimeZone:
    """A simple zone with EU-style summer time, for predictable tests.

    Standard offset +01:00, and +02:00 from the last Sunday of March
    01:00 UTC until the last Sunday of October 01:00 UTC. Like Amsterdam,
    but without the need for a timezone database.
    """

    def name(self) -> str:
        return "Test/Summer"

    def offset_for(self, utc: NaiveDateTime, /) -> Offset:
        start = _last_sunday(utc.year, 3)
        end = _last_sunday(utc.year, 10)
        if start <= utc < end:
            return Offset(2)
        return Offset(1)

    def __eq__(self, other):
        return isinstance(other, SummerTimeZone)

    def __hash__(self):
        return 0


def _last_sunday(year: int, month: int) -> NaiveDateTime:
    last = NaiveDateTime(year, month, 31, 1)
    return last.subtract(days=last.date().day_of_week().value % 7)
