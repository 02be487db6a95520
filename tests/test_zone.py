import pickle
from zoneinfo import ZoneInfoNotFoundError

import pytest

from tempo import (
    DateTime,
    FixedOffsetZone,
    NaiveDateTime,
    Offset,
    TimezoneProvider,
    ZoneInfoProvider,
)

from .common import SummerTimeZone


class TestFixedOffsetZone:

    def test_name(self):
        assert FixedOffsetZone(Offset(5, 30), "IST").name() == "IST"
        assert FixedOffsetZone(Offset(-3)).name() == "UTC-03:00"

    def test_offset_for(self):
        zone = FixedOffsetZone(Offset(5, 30))
        assert zone.offset_for(NaiveDateTime(2024, 6, 13)) == Offset(5, 30)
        assert zone.offset_for(NaiveDateTime(1, 1, 1)) == Offset(5, 30)

    def test_invalid(self):
        with pytest.raises(TypeError):
            FixedOffsetZone(5)  # type: ignore[arg-type]

    def test_equality(self):
        zone = FixedOffsetZone(Offset(1), "CET")
        assert zone == FixedOffsetZone(Offset(1), "CET")
        assert hash(zone) == hash(FixedOffsetZone(Offset(1), "CET"))
        assert zone != FixedOffsetZone(Offset(1))
        assert zone != FixedOffsetZone(Offset(2), "CET")
        assert zone != ZoneInfoProvider("Europe/Paris")

    def test_repr(self):
        assert repr(FixedOffsetZone(Offset(1))) == "FixedOffsetZone(UTC+01:00)"

    def test_in_datetime(self):
        zone = FixedOffsetZone(Offset(5, 30), "IST")
        d = DateTime(2024, 6, 13, 12, zone=zone)
        assert repr(d) == "DateTime(2024-06-13T12:00:00+05:30[IST])"

    def test_pickle(self):
        zone = FixedOffsetZone(Offset(1), "CET")
        assert pickle.loads(pickle.dumps(zone)) == zone


class TestZoneInfoProvider:

    def test_name(self):
        assert ZoneInfoProvider("Asia/Tokyo").name() == "Asia/Tokyo"

    def test_not_found(self):
        with pytest.raises(ZoneInfoNotFoundError):
            ZoneInfoProvider("Nowhere/Special")

    @pytest.mark.parametrize(
        "utc, expect",
        [
            (NaiveDateTime(2024, 1, 15, 12), Offset(1)),
            (NaiveDateTime(2024, 7, 1, 12), Offset(2)),
            # transitions happen at 01:00 UTC
            (NaiveDateTime(2024, 3, 31, 0, 59, 59), Offset(1)),
            (NaiveDateTime(2024, 3, 31, 1), Offset(2)),
            (NaiveDateTime(2024, 10, 27, 0, 59, 59), Offset(2)),
            (NaiveDateTime(2024, 10, 27, 1), Offset(1)),
        ],
    )
    def test_offset_for(self, utc, expect):
        assert ZoneInfoProvider("Europe/Amsterdam").offset_for(utc) == expect

    def test_negative_offset(self):
        zone = ZoneInfoProvider("America/New_York")
        assert zone.offset_for(NaiveDateTime(2024, 1, 1)) == Offset(-5)

    def test_equality(self):
        zone = ZoneInfoProvider("Europe/Amsterdam")
        assert zone == ZoneInfoProvider("Europe/Amsterdam")
        assert hash(zone) == hash(ZoneInfoProvider("Europe/Amsterdam"))
        assert zone != ZoneInfoProvider("Europe/Paris")
        assert zone != FixedOffsetZone(Offset(1))

    def test_repr(self):
        assert (
            repr(ZoneInfoProvider("Europe/Paris"))
            == "ZoneInfoProvider('Europe/Paris')"
        )

    def test_pickle(self):
        zone = ZoneInfoProvider("Europe/Paris")
        assert pickle.loads(pickle.dumps(zone)) == zone


def test_provider_protocol():
    assert isinstance(FixedOffsetZone(Offset(0)), TimezoneProvider)
    assert isinstance(ZoneInfoProvider("UTC"), TimezoneProvider)
    assert isinstance(SummerTimeZone(), TimezoneProvider)
    assert not isinstance("Europe/Paris", TimezoneProvider)
