from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_wall_time
from ..core.constants import DEFAULT_GRACE_MINUTES
from ..core.enums import OverrideScope, RosterTieBreak, ScheduleSource
from ..core.exceptions import MalformedScheduleError
from .model import ResolvedRoster, Roster, ScheduleOverride
from .repository import RosterRepository, ScheduleOverrideRepository
from .shift_pattern import match_entry, parse_shift_pattern

logger = logging.getLogger(__name__)


class RosterResolver:
    """Find the schedule that applies to an employee on a date.

    Returns None when no active roster covers the date (or the tie-break
    policy refuses to choose); callers treat that as zero lateness, never as
    an error.

    Precedence of start/end times for a working day, highest first:
    employee override, department override, shift-pattern slot, roster
    default. A shift-pattern "off" entry always wins.
    """

    def __init__(
        self,
        rosters: RosterRepository,
        overrides: Optional[ScheduleOverrideRepository] = None,
        *,
        tie_break: RosterTieBreak = RosterTieBreak.LATEST_CREATED,
        default_grace_minutes: int = DEFAULT_GRACE_MINUTES,
    ):
        self._rosters = rosters
        self._overrides = overrides
        self._tie_break = RosterTieBreak(tie_break)
        self._default_grace_minutes = int(default_grace_minutes)

    def resolve(
        self,
        employee_id: int,
        work_date: date,
        *,
        department_id: Optional[int] = None,
    ) -> Optional[ResolvedRoster]:
        candidates = [
            r for r in self._rosters.find_active_rosters(employee_id=employee_id, work_date=work_date) if r.covers(work_date)
        ]
        roster = self._pick(candidates, employee_id=employee_id, work_date=work_date)
        if roster is None:
            return None
        return self.resolve_roster(roster, work_date, department_id=department_id)

    def resolve_by_id(
        self,
        roster_id: int,
        work_date: date,
        *,
        department_id: Optional[int] = None,
    ) -> Optional[ResolvedRoster]:
        roster = self._rosters.get_roster_by_id(roster_id)
        if roster is None:
            logger.warning("Roster %s referenced by attendance no longer exists", roster_id)
            return None
        return self.resolve_roster(roster, work_date, department_id=department_id)

    def resolve_roster(
        self,
        roster: Roster,
        work_date: date,
        *,
        department_id: Optional[int] = None,
    ) -> ResolvedRoster:
        problems: list[str] = []
        start_raw: Any = roster.start_time
        end_raw: Any = roster.end_time
        source = ScheduleSource.ROSTER
        is_day_off = False
        pattern_ok = True

        try:
            entry = match_entry(parse_shift_pattern(roster.shift_pattern), work_date)
        except MalformedScheduleError as exc:
            entry = None
            pattern_ok = False
            problems.append(str(exc))

        if entry is not None:
            if entry.is_off:
                is_day_off = True
            elif entry.time_slot is not None:
                start_raw = entry.time_slot.start_time or start_raw
                end_raw = entry.time_slot.end_time or end_raw
                source = ScheduleSource.SHIFT_PATTERN

        if not is_day_off:
            override = self._override_for(roster, work_date, department_id=department_id)
            if override is not None:
                start_raw = override.start_time
                end_raw = override.end_time or end_raw
                source = (
                    ScheduleSource.EMPLOYEE_OVERRIDE
                    if override.scope == OverrideScope.EMPLOYEE
                    else ScheduleSource.DEPARTMENT_OVERRIDE
                )

        start_time = self._parse_time(start_raw, "start_time", problems) if pattern_ok else None
        end_time = self._parse_time(end_raw, "end_time", problems) if pattern_ok else None

        if problems:
            logger.warning(
                "Malformed schedule data on roster %s for %s: %s",
                roster.roster_id,
                work_date,
                "; ".join(problems),
            )

        grace = roster.grace_period if roster.grace_period is not None else self._default_grace_minutes
        return ResolvedRoster(
            roster=roster,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            grace_period=max(int(grace), 0),
            early_departure_threshold=max(int(roster.early_departure_threshold or 0), 0),
            break_duration=max(int(roster.break_duration or 0), 0),
            is_day_off=is_day_off,
            source=source,
            problems=tuple(problems),
        )

    def _pick(self, candidates: Sequence[Roster], *, employee_id: int, work_date: date) -> Optional[Roster]:
        if not candidates:
            logger.warning("No active roster found for employee %s on %s", employee_id, work_date)
            return None
        if len(candidates) == 1:
            return candidates[0]

        if self._tie_break == RosterTieBreak.REJECT:
            logger.warning(
                "%d active rosters overlap for employee %s on %s; refusing to choose",
                len(candidates),
                employee_id,
                work_date,
            )
            return None

        ordered = sorted(candidates, key=lambda r: (r.created_at or datetime.min, r.roster_id))
        chosen = ordered[-1] if self._tie_break == RosterTieBreak.LATEST_CREATED else ordered[0]
        logger.info(
            "%d active rosters overlap for employee %s on %s; using roster %s (%s)",
            len(candidates),
            employee_id,
            work_date,
            chosen.roster_id,
            self._tie_break.value,
        )
        return chosen

    def _override_for(
        self,
        roster: Roster,
        work_date: date,
        *,
        department_id: Optional[int],
    ) -> Optional[ScheduleOverride]:
        if self._overrides is None:
            return None

        department_id = department_id if department_id is not None else roster.department_id
        found = [
            o
            for o in self._overrides.list_active_for(
                employee_id=roster.employee_id, department_id=department_id, work_date=work_date
            )
            if o.covers(work_date)
        ]

        def _latest(scope: OverrideScope, target_id: Optional[int]) -> Optional[ScheduleOverride]:
            matching = [o for o in found if o.scope == scope and o.target_id == target_id]
            if not matching:
                return None
            return max(matching, key=lambda o: (o.effective_from, o.override_id))

        return _latest(OverrideScope.EMPLOYEE, roster.employee_id) or _latest(OverrideScope.DEPARTMENT, department_id)

    @staticmethod
    def _parse_time(value: Any, field_name: str, problems: list[str]):
        if value is None:
            problems.append(f"{field_name} is missing")
            return None
        try:
            return parse_wall_time(value)
        except MalformedScheduleError as exc:
            problems.append(f"{field_name}: {exc}")
            return None
