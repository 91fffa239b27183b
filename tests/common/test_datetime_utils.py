from datetime import date, datetime, time, timedelta, timezone

import pytest

from roster_attendance.common.datetime_utils import (
    format_hhmm,
    minutes_between,
    parse_iso_date,
    parse_iso_datetime,
    parse_wall_time,
)
from roster_attendance.core.exceptions import MalformedScheduleError


@pytest.mark.parametrize(
    "value,expected",
    [
        (time(8, 30), time(8, 30)),
        (timedelta(hours=8, minutes=30), time(8, 30)),
        ("08:30", time(8, 30)),
        (" 08:30:15 ", time(8, 30, 15)),
    ],
)
def test_parse_wall_time_accepts_storage_shapes(value, expected):
    assert parse_wall_time(value) == expected


@pytest.mark.parametrize("value", ["8h30", "25:00", "", None, 830, timedelta(hours=25)])
def test_parse_wall_time_rejects_garbage(value):
    with pytest.raises(MalformedScheduleError):
        parse_wall_time(value)


def test_minutes_between_truncates():
    start = datetime(2025, 1, 6, 8, 0)
    assert minutes_between(start, datetime(2025, 1, 6, 8, 59, 59)) == 59
    assert minutes_between(start, start) == 0


def test_iso_parsing_drops_timezone():
    assert parse_iso_date("2025-01-06") == date(2025, 1, 6)
    parsed = parse_iso_datetime("2025-01-06T08:15:00+07:00")
    assert parsed == datetime(2025, 1, 6, 8, 15)
    assert parsed.tzinfo is None
    assert parse_iso_datetime(datetime(2025, 1, 6, 8, 15, tzinfo=timezone.utc).isoformat()).hour == 8


def test_format_hhmm():
    assert format_hhmm(None) == "-"
    assert format_hhmm(485) == "08:05"
    assert format_hhmm(-3) == "00:00"
