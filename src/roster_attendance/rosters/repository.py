from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import OverrideScope
from .model import Roster, ScheduleOverride


class RosterRepository(Protocol):
    def find_active_rosters(self, *, employee_id: int, work_date: date) -> Sequence[Roster]:
        """Active rosters of the employee whose window covers work_date."""

        raise NotImplementedError

    def get_roster_by_id(self, roster_id: int) -> Optional[Roster]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Roster]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
        break_duration: int = 0,
        early_departure_threshold: int = 0,
        grace_period: Optional[int] = None,
        shift_pattern: Any = None,
        department_id: Optional[int] = None,
        name: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Insert a roster. Returns roster_id."""

        raise NotImplementedError

    def update_hours(
        self,
        *,
        roster_id: int,
        start_time: time,
        end_time: time,
        break_duration: Optional[int] = None,
        early_departure_threshold: Optional[int] = None,
        grace_period: Optional[int] = None,
    ) -> bool:
        raise NotImplementedError

    def set_active(self, roster_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def deactivate_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> int:
        """Deactivate active rosters overlapping the window. Returns how many."""

        raise NotImplementedError


class ScheduleOverrideRepository(Protocol):
    def list_active_for(
        self,
        *,
        employee_id: int,
        department_id: Optional[int],
        work_date: date,
    ) -> Sequence[ScheduleOverride]:
        raise NotImplementedError

    def create(
        self,
        *,
        scope: OverrideScope,
        target_id: int,
        start_time: time,
        end_time: Optional[time],
        effective_from: date,
        effective_until: Optional[date] = None,
        reason: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def set_active(self, override_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
