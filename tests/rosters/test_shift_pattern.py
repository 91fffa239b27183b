from datetime import date

import pytest

from roster_attendance.core.exceptions import MalformedScheduleError
from roster_attendance.rosters.shift_pattern import match_entry, parse_shift_pattern, weekday_index

SUNDAY = date(2025, 1, 5)
MONDAY = date(2025, 1, 6)


def test_weekday_index_counts_from_sunday():
    assert weekday_index(SUNDAY) == 0
    assert weekday_index(MONDAY) == 1
    assert weekday_index(date(2025, 1, 11)) == 6


def test_empty_pattern_values_parse_to_no_entries():
    assert parse_shift_pattern(None) == ()
    assert parse_shift_pattern("") == ()
    assert parse_shift_pattern("null") == ()
    assert parse_shift_pattern([]) == ()


def test_parses_json_text_with_off_day_and_time_slot():
    entries = parse_shift_pattern(
        '[{"day": 0, "shift": "off"}, {"date": "2025-01-06", "time_slot": {"start_time": "10:00", "end_time": "19:00"}}]'
    )

    assert entries[0].is_off
    assert entries[0].day == 0
    assert entries[1].date == MONDAY
    assert entries[1].time_slot.start_time == "10:00"


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"day": 1}',
        "[1, 2]",
        '[{"day": 7}]',
        '[{"day": true}]',
        '[{"date": "06/01/2025"}]',
        '[{"time_slot": "08:00-17:00"}]',
    ],
)
def test_malformed_patterns_raise(raw):
    with pytest.raises(MalformedScheduleError):
        parse_shift_pattern(raw)


def test_explicit_date_beats_weekday_entry():
    entries = parse_shift_pattern(
        [
            {"day": 1, "time_slot": {"start_time": "09:00", "end_time": "18:00"}},
            {"date": "2025-01-06", "time_slot": {"start_time": "11:00", "end_time": "20:00"}},
        ]
    )

    assert match_entry(entries, MONDAY).time_slot.start_time == "11:00"
    assert match_entry(entries, date(2025, 1, 13)).time_slot.start_time == "09:00"


def test_catch_all_entry_applies_when_nothing_more_specific_matches():
    entries = parse_shift_pattern(
        [{"day": 0, "shift": "off"}, {"time_slot": {"start_time": "08:30", "end_time": "17:00"}}]
    )

    assert match_entry(entries, SUNDAY).is_off
    assert match_entry(entries, MONDAY).time_slot.start_time == "08:30"


def test_no_match_returns_none():
    entries = parse_shift_pattern([{"day": 3, "shift": "off"}])
    assert match_entry(entries, MONDAY) is None
