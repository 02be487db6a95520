import pickle
import re
from copy import copy, deepcopy

import pytest

from tempo import InvalidFormat, Offset, OutOfRange, hours, minutes

from .common import AlwaysEqual, NeverEqual, frozen_clock


class TestInit:

    def test_hours_and_minutes(self):
        assert Offset(5, 30).total_minutes == 330
        assert Offset(-3).total_minutes == -180
        assert Offset(-1, -30).total_minutes == -90
        assert Offset().total_minutes == 0

    def test_from_minutes(self):
        assert Offset.from_minutes(-90) == Offset(-1, -30)

    @pytest.mark.parametrize("h, m", [(-12, 0), (14, 0), (0, 0), (-11, -59)])
    def test_bounds(self, h, m):
        assert Offset(h, m).total_minutes == h * 60 + m

    @pytest.mark.parametrize("h, m", [(-12, -1), (14, 1), (15, 0), (-13, 0)])
    def test_out_of_range(self, h, m):
        with pytest.raises(OutOfRange, match="offset"):
            Offset(h, m)


def test_utc():
    assert Offset.UTC == Offset(0)


def test_local():
    assert Offset.local(clock=frozen_clock(local_offset=120)) == Offset(2)
    assert Offset.local(clock=frozen_clock(local_offset=-330)) == Offset(
        -5, -30
    )


def test_to_duration():
    assert Offset(-1, -30).to_duration() == -minutes(90)
    assert Offset(2).to_duration() == hours(2)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (Offset(5, 30), "+05:30"),
        (Offset(-3), "-03:00"),
        (Offset(0), "+00:00"),
        (Offset(-1, -30), "-01:30"),
    ],
)
def test_format_common_iso(offset, expected):
    assert offset.format_common_iso() == expected
    assert str(offset) == expected
    assert repr(offset) == f"Offset({expected})"


class TestParseCommonIso:

    @pytest.mark.parametrize(
        "s, expected",
        [
            ("Z", Offset(0)),
            ("z", Offset(0)),
            ("+05:30", Offset(5, 30)),
            ("-0130", Offset(-1, -30)),
            ("+05", Offset(5)),
            ("+5", Offset(5)),
            ("-00:00", Offset(0)),
        ],
    )
    def test_valid(self, s, expected):
        assert Offset.parse_common_iso(s) == expected

    @pytest.mark.parametrize(
        "s", ["05:30", "+05:3", "+05:60", "+053", "UTC", "+05:30:00", ""]
    )
    def test_invalid(self, s):
        with pytest.raises(InvalidFormat, match=re.escape(repr(s))):
            Offset.parse_common_iso(s)

    def test_out_of_range(self):
        with pytest.raises(OutOfRange):
            Offset.parse_common_iso("+15:00")


def test_equality_and_ordering():
    assert Offset(1) == Offset(0, 60)
    assert hash(Offset(1)) == hash(Offset(0, 60))
    assert Offset(1) != Offset(-1)
    assert Offset(-1) < Offset(1)
    assert Offset(1) <= Offset(1)
    assert Offset(2) > Offset(1)
    assert Offset(2) >= Offset(2)
    assert Offset(1) == AlwaysEqual()
    assert Offset(1) != NeverEqual()
    assert Offset(1) != hours(1)  # type: ignore[comparison-overlap]


def test_copy_and_pickle():
    o = Offset(-5, -30)
    assert copy(o) is o
    assert deepcopy(o) is o
    assert pickle.loads(pickle.dumps(o)) == o
