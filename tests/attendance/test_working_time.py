from datetime import date

from fakes import at

from roster_attendance.attendance.model import AttendanceTimestamps
from roster_attendance.attendance.working_time import working_time
from roster_attendance.core.enums import EventType

DAY = date(2025, 1, 6)


def test_full_day_with_lunch_break():
    ts = AttendanceTimestamps(
        first_check_in=at(DAY, "08:00"),
        first_check_out=at(DAY, "12:00"),
        second_check_in=at(DAY, "13:00"),
        second_check_out=at(DAY, "17:00"),
    )

    result = working_time(ts, now=at(DAY, "23:00"))

    assert result.break_minutes == 60
    assert result.worked_minutes == 480
    assert result.worked_hours == 8


def test_open_session_runs_until_now():
    ts = AttendanceTimestamps(first_check_in=at(DAY, "08:00"))

    assert working_time(ts, now=at(DAY, "10:30")).worked_minutes == 150
    assert working_time(ts, now=at(DAY, "10:30")).break_minutes == 0


def test_no_events_means_no_time():
    result = working_time(AttendanceTimestamps(), now=at(DAY, "12:00"))
    assert (result.break_minutes, result.worked_minutes) == (0, 0)


def test_worked_minutes_never_decrease_as_events_arrive():
    ts = AttendanceTimestamps()
    previous = 0

    for event, hhmm in zip(EventType, ["08:00", "12:00", "13:00", "17:00"]):
        ts = ts.with_event(event, at(DAY, hhmm))
        worked = working_time(ts, now=at(DAY, hhmm)).worked_minutes
        assert worked >= previous
        previous = worked

    assert previous == 480


def test_open_session_of_a_past_day_stops_at_midnight():
    ts = AttendanceTimestamps(first_check_in=at(DAY, "08:00"))

    result = working_time(ts, now=at(date(2025, 1, 30), "08:00"), work_date=DAY)

    assert result.worked_minutes == 16 * 60


def test_open_session_of_today_still_runs_until_now():
    ts = AttendanceTimestamps(first_check_in=at(DAY, "08:00"))

    assert working_time(ts, now=at(DAY, "10:00"), work_date=DAY).worked_minutes == 120
