from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..common.datetime_utils import parse_wall_time
from ..core.enums import OverrideScope
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ScheduleOverride
from .repository import ScheduleOverrideRepository


class MySQLScheduleOverrideRepository(ScheduleOverrideRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_for(
        self,
        *,
        employee_id: int,
        department_id: Optional[int],
        work_date: date,
    ) -> Sequence[ScheduleOverride]:
        clauses = ["(scope='employee' AND target_id=%s)"]
        params: list[object] = [int(employee_id)]
        if department_id is not None:
            clauses.append("(scope='department' AND target_id=%s)")
            params.append(int(department_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT override_id, scope, target_id, start_time, end_time,
                       effective_from, effective_until, is_active, reason
                FROM schedule_overrides
                WHERE is_active=1
                  AND ({" OR ".join(clauses)})
                  AND effective_from<=%s
                  AND (effective_until IS NULL OR effective_until>=%s)
                ORDER BY effective_from DESC, override_id DESC
                """,
                tuple(params + [work_date, work_date]),
            )
            return [
                ScheduleOverride(
                    override_id=int(r["override_id"]),
                    scope=OverrideScope(r["scope"]),
                    target_id=int(r["target_id"]),
                    start_time=parse_wall_time(r["start_time"]),
                    end_time=parse_wall_time(r["end_time"]) if r.get("end_time") is not None else None,
                    effective_from=r["effective_from"],
                    effective_until=r.get("effective_until"),
                    is_active=bool(r["is_active"]),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedule_overrides(
                    scope, target_id, start_time, end_time, effective_from, effective_until, reason, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (scope.value, int(target_id), start_time, end_time, effective_from, effective_until, reason),
            )
            return int(cur.lastrowid)

    def set_active(self, override_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE schedule_overrides SET is_active=%s WHERE override_id=%s",
                (int(is_active), int(override_id)),
            )
            return cur.rowcount > 0
