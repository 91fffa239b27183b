from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import Clock, now_local
from ..common.validators import (
    require_date_window,
    require_non_negative_minutes,
    require_positive_id,
    require_wall_time,
)
from ..core.enums import OverrideScope
from ..core.exceptions import MalformedScheduleError, ReferentialIntegrityError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Roster
from .repository import RosterRepository, ScheduleOverrideRepository
from .shift_pattern import parse_shift_pattern

logger = logging.getLogger(__name__)


class RosterService:
    """Use cases: maintain rosters and schedule overrides."""

    def __init__(
        self,
        rosters: RosterRepository,
        overrides: ScheduleOverrideRepository,
        employees: EmployeeRepository,
        *,
        clock: Clock = now_local,
    ):
        self._rosters = rosters
        self._overrides = overrides
        self._employees = employees
        self._clock = clock

    def create_roster(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        start_time: Any,
        end_time: Any,
        break_duration: int = 0,
        early_departure_threshold: int = 0,
        grace_period: Optional[int] = None,
        shift_pattern: Any = None,
        name: Optional[str] = None,
        supersede: bool = True,
        now: Optional[datetime] = None,
    ) -> int:
        """Create a roster; overlapping active rosters are deactivated unless supersede=False."""

        employee_id = require_positive_id(employee_id, "Employee")
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ReferentialIntegrityError(f"Employee {employee_id} does not exist")

        require_date_window(start_date, end_date)
        start = require_wall_time(start_time, "Start time")
        end = require_wall_time(end_time, "End time")
        break_duration = require_non_negative_minutes(break_duration, "Break duration")
        early_departure_threshold = require_non_negative_minutes(early_departure_threshold, "Early departure threshold")
        if grace_period is not None:
            grace_period = require_non_negative_minutes(grace_period, "Grace period")

        try:
            parse_shift_pattern(shift_pattern)
        except MalformedScheduleError as exc:
            raise ValidationError(f"Shift pattern is invalid: {exc}") from exc

        if supersede:
            replaced = self._rosters.deactivate_overlapping(
                employee_id=employee_id, start_date=start_date, end_date=end_date
            )
            if replaced:
                logger.info("Deactivated %d roster(s) superseded for employee %s", replaced, employee_id)

        return self._rosters.create(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            start_time=start,
            end_time=end,
            break_duration=break_duration,
            early_departure_threshold=early_departure_threshold,
            grace_period=grace_period,
            shift_pattern=shift_pattern,
            department_id=employee.department_id,
            name=name.strip() if name else None,
            created_at=now or self._clock(),
        )

    def list_rosters(self, *, employee_id: int) -> list[Roster]:
        employee_id = require_positive_id(employee_id, "Employee")
        if not self._employees.get_by_id(employee_id):
            raise ReferentialIntegrityError(f"Employee {employee_id} does not exist")
        return list(self._rosters.list_for_employee(employee_id))

    def update_hours(
        self,
        *,
        roster_id: int,
        start_time: Any,
        end_time: Any,
        break_duration: Optional[int] = None,
        early_departure_threshold: Optional[int] = None,
        grace_period: Optional[int] = None,
    ) -> None:
        start = require_wall_time(start_time, "Start time")
        end = require_wall_time(end_time, "End time")
        if break_duration is not None:
            break_duration = require_non_negative_minutes(break_duration, "Break duration")
        if early_departure_threshold is not None:
            early_departure_threshold = require_non_negative_minutes(
                early_departure_threshold, "Early departure threshold"
            )
        if grace_period is not None:
            grace_period = require_non_negative_minutes(grace_period, "Grace period")

        ok = self._rosters.update_hours(
            roster_id=require_positive_id(roster_id, "Roster"),
            start_time=start,
            end_time=end,
            break_duration=break_duration,
            early_departure_threshold=early_departure_threshold,
            grace_period=grace_period,
        )
        if not ok:
            raise ValidationError("Roster does not exist")

    def deactivate(self, *, roster_id: int) -> None:
        if not self._rosters.set_active(require_positive_id(roster_id, "Roster"), is_active=False):
            raise ValidationError("Roster does not exist")

    def add_override(
        self,
        *,
        scope: Any,
        target_id: int,
        start_time: Any,
        effective_from: date,
        end_time: Any = None,
        effective_until: Optional[date] = None,
        reason: Optional[str] = None,
    ) -> int:
        try:
            scope = OverrideScope(scope)
        except ValueError:
            raise ValidationError("Override scope must be 'employee' or 'department'") from None

        target_id = require_positive_id(target_id, "Override target")
        if scope == OverrideScope.EMPLOYEE and not self._employees.get_by_id(target_id):
            raise ReferentialIntegrityError(f"Employee {target_id} does not exist")

        require_date_window(effective_from, effective_until)
        return self._overrides.create(
            scope=scope,
            target_id=target_id,
            start_time=require_wall_time(start_time, "Start time"),
            end_time=require_wall_time(end_time, "End time") if end_time else None,
            effective_from=effective_from,
            effective_until=effective_until,
            reason=reason.strip() if reason else None,
        )

    def deactivate_override(self, *, override_id: int) -> None:
        if not self._overrides.set_active(require_positive_id(override_id, "Override"), is_active=False):
            raise ValidationError("Override does not exist")
