from datetime import datetime, timezone

import pytest
import pytz

from app.core.timeutils import as_utc, parse_iso_timestamp

UTC = pytz.utc
TOKYO = pytz.timezone("Asia/Tokyo")


@pytest.mark.parametrize(
    "value",
    [
        "2030-05-01T12:00:00Z",
        "2030-05-01T12:00:00z",
        "2030-05-01T12:00:00.000Z",
        "2030-05-01T12:00:00+00:00",
        "2030-05-01T15:00:00+03:00",
    ],
)
def test_parses_utc_designators_and_offsets(value):
    assert parse_iso_timestamp(value, TOKYO) == datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_naive_values_are_read_in_the_given_timezone():
    assert parse_iso_timestamp("2030-05-01T21:00:00", TOKYO) == datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, "", "   ", "Z", "tomorrow", "2030-13-01T00:00:00Z", 1700000000])
def test_invalid_values(value):
    assert parse_iso_timestamp(value, UTC) is None


def test_as_utc_treats_naive_values_as_utc():
    assert as_utc(datetime(2030, 5, 1, 12, 0)) == datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)
