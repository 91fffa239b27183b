from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, optional_int
from .model import Roster
from .repository import RosterRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    roster_id, employee_id, department_id, name, start_date, end_date,
    start_time, end_time, break_duration, early_departure_threshold,
    {grace_period}, is_active, shift_pattern, created_at
"""


def _to_roster(r: dict) -> Roster:
    return Roster(
        roster_id=int(r["roster_id"]),
        employee_id=int(r["employee_id"]),
        department_id=optional_int(r.get("department_id")),
        name=r.get("name"),
        start_date=r["start_date"],
        end_date=r["end_date"],
        start_time=r.get("start_time"),
        end_time=r.get("end_time"),
        break_duration=int(r.get("break_duration") or 0),
        early_departure_threshold=int(r.get("early_departure_threshold") or 0),
        grace_period=optional_int(r.get("grace_period")),
        is_active=bool(r.get("is_active")),
        shift_pattern=r.get("shift_pattern"),
        created_at=r.get("created_at"),
    )


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._has_grace_period: Optional[bool] = None

    def _grace_period_supported(self, cur) -> bool:
        # Older schemas have no grace_period column at all; checked once per repository.
        if self._has_grace_period is None:
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM information_schema.COLUMNS
                WHERE TABLE_SCHEMA=DATABASE() AND TABLE_NAME='rosters' AND COLUMN_NAME='grace_period'
                """
            )
            rows = fetchall(cur)
            self._has_grace_period = bool(rows and int(rows[0]["n"]))
            if not self._has_grace_period:
                logger.warning("rosters.grace_period column is missing; grace periods fall back to the default")
        return self._has_grace_period

    def _columns(self, cur) -> str:
        grace = "grace_period" if self._grace_period_supported(cur) else "NULL AS grace_period"
        return _COLUMNS.format(grace_period=grace)

    def find_active_rosters(self, *, employee_id: int, work_date: date) -> Sequence[Roster]:
        with db_cursor(self._conn_factory) as (_, cur):
            columns = self._columns(cur)
            cur.execute(
                f"""
                SELECT {columns}
                FROM rosters
                WHERE employee_id=%s AND is_active=1 AND start_date<=%s AND end_date>=%s
                ORDER BY created_at DESC, roster_id DESC
                """,
                (int(employee_id), work_date, work_date),
            )
            return [_to_roster(r) for r in fetchall(cur)]

    def get_roster_by_id(self, roster_id: int) -> Optional[Roster]:
        with db_cursor(self._conn_factory) as (_, cur):
            columns = self._columns(cur)
            cur.execute(f"SELECT {columns} FROM rosters WHERE roster_id=%s", (int(roster_id),))
            r = fetchone(cur)
            return _to_roster(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[Roster]:
        with db_cursor(self._conn_factory) as (_, cur):
            columns = self._columns(cur)
            cur.execute(
                f"SELECT {columns} FROM rosters WHERE employee_id=%s ORDER BY start_date DESC",
                (int(employee_id),),
            )
            return [_to_roster(r) for r in fetchall(cur)]

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
        values: dict[str, Any] = {
            "employee_id": int(employee_id),
            "department_id": department_id,
            "name": name,
            "start_date": start_date,
            "end_date": end_date,
            "start_time": start_time,
            "end_time": end_time,
            "break_duration": int(break_duration),
            "early_departure_threshold": int(early_departure_threshold),
            "grace_period": grace_period,
            "shift_pattern": dump_json(shift_pattern),
        }

        with db_cursor(self._conn_factory) as (_, cur):
            if not self._grace_period_supported(cur):
                values.pop("grace_period")
            cur.execute(
                f"""
                INSERT INTO rosters({", ".join(values)}, is_active, created_at)
                VALUES({", ".join(["%s"] * len(values))}, 1, COALESCE(%s, NOW()))
                """,
                tuple(values.values()) + (created_at,),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            grace_clause = ""
            params: tuple = (start_time, end_time, break_duration, early_departure_threshold)
            if self._grace_period_supported(cur):
                grace_clause = ",\n                    grace_period=COALESCE(%s, grace_period)"
                params += (grace_period,)
            cur.execute(
                f"""
                UPDATE rosters
                SET start_time=%s,
                    end_time=%s,
                    break_duration=COALESCE(%s, break_duration),
                    early_departure_threshold=COALESCE(%s, early_departure_threshold){grace_clause}
                WHERE roster_id=%s
                """,
                params + (int(roster_id),),
            )
            return cur.rowcount > 0

    def set_active(self, roster_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE rosters SET is_active=%s WHERE roster_id=%s", (int(is_active), int(roster_id)))
            return cur.rowcount > 0

    def deactivate_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE rosters
                SET is_active=0
                WHERE employee_id=%s AND is_active=1 AND start_date<=%s AND end_date>=%s
                """,
                (int(employee_id), end_date, start_date),
            )
            return int(cur.rowcount)
