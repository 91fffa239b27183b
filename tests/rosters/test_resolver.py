from datetime import date, datetime, time

from fakes import InMemoryOverrides, InMemoryRosters, make_roster

from roster_attendance.core.enums import OverrideScope, RosterTieBreak, ScheduleSource
from roster_attendance.rosters.model import ScheduleOverride
from roster_attendance.rosters.resolver import RosterResolver

MONDAY = date(2025, 1, 6)
SUNDAY = date(2025, 1, 5)


def _override(override_id, scope, target_id, start, end=None, effective_from=date(2025, 1, 1), **kw):
    return ScheduleOverride(
        override_id=override_id,
        scope=scope,
        target_id=target_id,
        start_time=start,
        end_time=end,
        effective_from=effective_from,
        **kw,
    )


def test_resolves_roster_default_times():
    resolver = RosterResolver(InMemoryRosters(make_roster(grace_period=15)))

    resolved = resolver.resolve(1, MONDAY)

    assert resolved.start_time == time(8, 0)
    assert resolved.end_time == time(17, 0)
    assert resolved.grace_period == 15
    assert resolved.source == ScheduleSource.ROSTER
    assert resolved.expected_minutes == 8 * 60


def test_returns_none_when_no_active_roster_covers_date():
    rosters = InMemoryRosters(
        make_roster(roster_id=1, is_active=False),
        make_roster(roster_id=2, start_date=date(2026, 1, 1), end_date=date(2026, 12, 31)),
    )

    assert RosterResolver(rosters).resolve(1, MONDAY) is None


def test_window_bounds_are_inclusive():
    rosters = InMemoryRosters(make_roster(start_date=MONDAY, end_date=MONDAY))
    resolver = RosterResolver(rosters)

    assert resolver.resolve(1, MONDAY) is not None
    assert resolver.resolve(1, date(2025, 1, 7)) is None


def test_missing_grace_period_defaults_to_zero_or_configured_default():
    rosters = InMemoryRosters(make_roster(grace_period=None))

    assert RosterResolver(rosters).resolve(1, MONDAY).grace_period == 0
    assert RosterResolver(rosters, default_grace_minutes=5).resolve(1, MONDAY).grace_period == 5


def test_tie_break_latest_created_by_default():
    rosters = InMemoryRosters(
        make_roster(roster_id=1, start_time="08:00", created_at=datetime(2024, 1, 1)),
        make_roster(roster_id=2, start_time="09:00", created_at=datetime(2024, 6, 1)),
    )

    assert RosterResolver(rosters).resolve(1, MONDAY).roster_id == 2


def test_tie_break_is_configurable():
    rosters = InMemoryRosters(
        make_roster(roster_id=1, created_at=datetime(2024, 1, 1)),
        make_roster(roster_id=2, created_at=datetime(2024, 6, 1)),
    )

    earliest = RosterResolver(rosters, tie_break=RosterTieBreak.EARLIEST_CREATED)
    reject = RosterResolver(rosters, tie_break=RosterTieBreak.REJECT)

    assert earliest.resolve(1, MONDAY).roster_id == 1
    assert reject.resolve(1, MONDAY) is None


def test_shift_pattern_slot_supersedes_roster_times_without_mutating_roster():
    roster = make_roster(shift_pattern=[{"day": 1, "time_slot": {"start_time": "10:00", "end_time": "19:00"}}])
    rosters = InMemoryRosters(roster)

    resolved = RosterResolver(rosters).resolve(1, MONDAY)

    assert resolved.start_time == time(10, 0)
    assert resolved.end_time == time(19, 0)
    assert resolved.source == ScheduleSource.SHIFT_PATTERN
    assert rosters.get_roster_by_id(1).start_time == "08:00"


def test_off_day_in_shift_pattern_marks_day_off():
    rosters = InMemoryRosters(make_roster(shift_pattern='[{"day": 0, "shift": "off"}]'))
    resolver = RosterResolver(rosters)

    assert resolver.resolve(1, SUNDAY).is_day_off
    assert not resolver.resolve(1, MONDAY).is_day_off
    assert resolver.resolve(1, SUNDAY).expected_minutes == 0


def test_malformed_shift_pattern_degrades_to_unknown_times(caplog):
    rosters = InMemoryRosters(make_roster(shift_pattern="[{broken"))

    with caplog.at_level("WARNING"):
        resolved = RosterResolver(rosters).resolve(1, MONDAY)

    assert resolved is not None
    assert resolved.start_time is None
    assert resolved.end_time is None
    assert resolved.problems
    assert "Malformed schedule data" in caplog.text


def test_unparsable_start_time_is_reported_not_raised():
    rosters = InMemoryRosters(make_roster(start_time="8 o'clock"))

    resolved = RosterResolver(rosters).resolve(1, MONDAY)

    assert resolved.start_time is None
    assert resolved.end_time == time(17, 0)
    assert any("start_time" in p for p in resolved.problems)


def test_employee_override_beats_department_override_and_pattern():
    rosters = InMemoryRosters(
        make_roster(shift_pattern=[{"day": 1, "time_slot": {"start_time": "10:00", "end_time": "19:00"}}])
    )
    overrides = InMemoryOverrides(
        _override(1, OverrideScope.DEPARTMENT, 7, time(8, 30)),
        _override(2, OverrideScope.EMPLOYEE, 1, time(9, 15), time(18, 0)),
    )

    resolved = RosterResolver(rosters, overrides).resolve(1, MONDAY, department_id=7)

    assert resolved.start_time == time(9, 15)
    assert resolved.end_time == time(18, 0)
    assert resolved.source == ScheduleSource.EMPLOYEE_OVERRIDE


def test_department_override_keeps_underlying_end_time():
    rosters = InMemoryRosters(make_roster())
    overrides = InMemoryOverrides(_override(1, OverrideScope.DEPARTMENT, 7, time(8, 30)))

    resolved = RosterResolver(rosters, overrides).resolve(1, MONDAY, department_id=7)

    assert resolved.start_time == time(8, 30)
    assert resolved.end_time == time(17, 0)
    assert resolved.source == ScheduleSource.DEPARTMENT_OVERRIDE


def test_department_override_falls_back_to_roster_department():
    rosters = InMemoryRosters(make_roster(department_id=7))
    overrides = InMemoryOverrides(_override(1, OverrideScope.DEPARTMENT, 7, time(8, 30)))

    assert RosterResolver(rosters, overrides).resolve(1, MONDAY).start_time == time(8, 30)


def test_latest_effective_override_wins_and_expired_ones_are_ignored():
    rosters = InMemoryRosters(make_roster())
    overrides = InMemoryOverrides(
        _override(1, OverrideScope.EMPLOYEE, 1, time(8, 15), effective_from=date(2024, 1, 1)),
        _override(2, OverrideScope.EMPLOYEE, 1, time(8, 45), effective_from=date(2025, 1, 1)),
        _override(
            3, OverrideScope.EMPLOYEE, 1, time(7, 0), effective_from=date(2025, 1, 2), effective_until=date(2025, 1, 3)
        ),
    )

    assert RosterResolver(rosters, overrides).resolve(1, MONDAY).start_time == time(8, 45)


def test_override_never_turns_an_off_day_into_a_working_day():
    rosters = InMemoryRosters(make_roster(shift_pattern=[{"day": 0, "shift": "off"}]))
    overrides = InMemoryOverrides(_override(1, OverrideScope.EMPLOYEE, 1, time(8, 30)))

    resolved = RosterResolver(rosters, overrides).resolve(1, SUNDAY)

    assert resolved.is_day_off
    assert resolved.source == ScheduleSource.ROSTER


def test_resolve_by_id_uses_referenced_roster():
    rosters = InMemoryRosters(make_roster(roster_id=4, is_active=False, start_time="07:30"))
    resolver = RosterResolver(rosters)

    assert resolver.resolve_by_id(4, MONDAY).start_time == time(7, 30)
    assert resolver.resolve_by_id(99, MONDAY) is None
