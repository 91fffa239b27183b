from datetime import date, datetime, time

import pytest

from fakes import make_roster

from roster_attendance.attendance.lateness import (
    early_departure_minutes,
    format_late_minutes,
    late_minutes,
    late_severity,
)
from roster_attendance.core.enums import LateSeverity
from roster_attendance.rosters.model import ResolvedRoster

DAY = date(2025, 1, 6)


def _resolved(start=time(8, 0), end=time(17, 0), grace=0, threshold=0, day_off=False) -> ResolvedRoster:
    return ResolvedRoster(
        roster=make_roster(),
        work_date=DAY,
        start_time=start,
        end_time=end,
        grace_period=grace,
        early_departure_threshold=threshold,
        is_day_off=day_off,
    )


def test_on_time_and_early_arrival_are_not_late():
    roster = _resolved()
    assert late_minutes(datetime(2025, 1, 6, 8, 0), roster) == 0
    assert late_minutes(datetime(2025, 1, 6, 7, 40), roster) == 0


def test_late_minutes_are_floored_whole_minutes():
    roster = _resolved()
    assert late_minutes(datetime(2025, 1, 6, 8, 5, 59), roster) == 5
    assert late_minutes(datetime(2025, 1, 6, 8, 0, 59), roster) == 0


def test_grace_period_is_subtracted():
    roster = _resolved(grace=15)
    assert late_minutes(datetime(2025, 1, 6, 8, 20), roster) == 5


@pytest.mark.parametrize("grace", [0, 5, 15])
def test_check_in_exactly_at_grace_boundary_is_on_time(grace):
    roster = _resolved(grace=grace)
    assert late_minutes(datetime(2025, 1, 6, 8, grace), roster) == 0
    assert late_minutes(datetime(2025, 1, 6, 8, grace + 7), roster) == 7


def test_no_roster_missing_start_or_day_off_means_zero():
    check_in = datetime(2025, 1, 6, 11, 0)
    assert late_minutes(check_in, None) == 0
    assert late_minutes(check_in, _resolved(start=None)) == 0
    assert late_minutes(check_in, _resolved(day_off=True)) == 0
    assert late_minutes(None, _resolved()) == 0


def test_start_is_placed_on_the_check_in_date():
    roster = _resolved()
    assert late_minutes(datetime(2025, 1, 7, 8, 30), roster) == 30


def test_early_departure_respects_threshold():
    assert early_departure_minutes(datetime(2025, 1, 6, 16, 30), _resolved()) == 30
    assert early_departure_minutes(datetime(2025, 1, 6, 16, 30), _resolved(threshold=10)) == 20
    assert early_departure_minutes(datetime(2025, 1, 6, 17, 45), _resolved()) == 0
    assert early_departure_minutes(datetime(2025, 1, 6, 16, 30), None) == 0


@pytest.mark.parametrize(
    "minutes,expected",
    [(0, LateSeverity.NONE), (10, LateSeverity.MINOR), (15, LateSeverity.MINOR), (25, LateSeverity.MAJOR), (90, LateSeverity.CRITICAL)],
)
def test_late_severity_bands(minutes, expected):
    assert late_severity(minutes) == expected


def test_format_late_minutes():
    assert format_late_minutes(0) == "-"
    assert format_late_minutes(None) == "-"
    assert format_late_minutes(45) == "45M"
    assert format_late_minutes(65) == "1H 05M"
